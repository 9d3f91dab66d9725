"""Signature value variants and content sniffing."""

from __future__ import annotations

from dataclasses import dataclass
import json
import re
from numbers import Real
from typing import Any, Iterable, Mapping, Union

from fieldpress.errors import MalformedSignatureError

_URL_PREFIXES = ("data:", "blob:", "http://", "https://", "/api/")
_BARE_BASE64_MIN_LENGTH = 100
_BASE64_RE = re.compile(r"[A-Za-z0-9+/]+={0,2}")


@dataclass(frozen=True, slots=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class StrokeBounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


@dataclass(frozen=True, slots=True)
class RasterSignature:
    url: str


@dataclass(frozen=True, slots=True)
class VectorSignature:
    groups: tuple[tuple[Point, ...], ...]

    @classmethod
    def from_points(cls, groups: Iterable[Iterable[Point]]) -> VectorSignature:
        return cls(groups=tuple(tuple(group) for group in groups))

    def bounds(self) -> StrokeBounds:
        points = [point for group in self.groups for point in group]
        if not self.groups or not points:
            raise MalformedSignatureError("Signature has no stroke points")

        bounds = StrokeBounds(
            min_x=min(point.x for point in points),
            min_y=min(point.y for point in points),
            max_x=max(point.x for point in points),
            max_y=max(point.y for point in points),
        )
        if bounds.width <= 0 or bounds.height <= 0:
            raise MalformedSignatureError(
                f"Degenerate signature bounds: {bounds.width:g}x{bounds.height:g}"
            )
        return bounds

    def to_json(self) -> str:
        return json.dumps(
            [[{"x": point.x, "y": point.y} for point in group] for group in self.groups],
            separators=(",", ":"),
        )


@dataclass(frozen=True, slots=True)
class TextSignature:
    text: str


SignatureValue = Union[RasterSignature, VectorSignature, TextSignature]


def _as_point(item: Any) -> Point | None:
    if not isinstance(item, Mapping):
        return None
    x, y = item.get("x"), item.get("y")
    if isinstance(x, bool) or isinstance(y, bool):
        return None
    if not isinstance(x, Real) or not isinstance(y, Real):
        return None
    return Point(float(x), float(y))


def _parse_point_groups(raw: str) -> VectorSignature | None:
    try:
        data = json.loads(raw)
    except ValueError:
        return None
    if not isinstance(data, list) or not data:
        return None

    groups: list[tuple[Point, ...]] = []
    for group in data:
        if not isinstance(group, list):
            return None
        points = [_as_point(item) for item in group]
        if any(point is None for point in points):
            return None
        groups.append(tuple(points))  # type: ignore[arg-type]
    return VectorSignature(groups=tuple(groups))


def parse_signature_value(raw: str) -> SignatureValue:
    value = raw.strip()
    if value.startswith(_URL_PREFIXES):
        return RasterSignature(url=value)

    vector = _parse_point_groups(value)
    if vector is not None:
        return vector

    if len(value) > _BARE_BASE64_MIN_LENGTH and _BASE64_RE.fullmatch(value):
        return RasterSignature(url=f"data:image/png;base64,{value}")

    return TextSignature(text=raw)
