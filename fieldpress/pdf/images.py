"""Image embedding: decode bitmap bytes and resolve image references."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from io import BytesIO
from typing import TYPE_CHECKING
from urllib.parse import unquote_to_bytes

from PIL import Image
from reportlab.lib.utils import ImageReader

from fieldpress.errors import EmbedFailure

if TYPE_CHECKING:
    from fieldpress.remote.client import ServiceClient

_DIRECT_MODES = {"RGB", "RGBA", "L"}


@dataclass(slots=True)
class EmbeddedImage:
    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def scale(self, factor: float) -> tuple[float, float]:
        return self.width * factor, self.height * factor

    def fit_within(self, width: float, height: float) -> tuple[float, float]:
        return self.scale(min(width / self.width, height / self.height))

    def reader(self) -> ImageReader:
        return ImageReader(self.image)


def embed_image(data: bytes) -> EmbeddedImage:
    try:
        image = Image.open(BytesIO(data))
        image.load()
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise EmbedFailure(f"Unreadable image data: {exc}") from exc

    if image.width <= 0 or image.height <= 0:
        raise EmbedFailure(f"Empty image: {image.width}x{image.height}")
    if image.mode not in _DIRECT_MODES:
        image = image.convert("RGBA")
    return EmbeddedImage(image=image)


def decode_data_url(url: str) -> bytes:
    header, sep, payload = url.partition(",")
    if not sep:
        raise EmbedFailure("Malformed data URL", source=url[:64])
    if header.endswith(";base64"):
        try:
            return base64.b64decode(payload)
        except binascii.Error as exc:
            raise EmbedFailure(f"Invalid base64 payload: {exc}", source=url[:64]) from exc
    return unquote_to_bytes(payload)


class ImageFetcher:
    """Resolves image references: inline data URLs locally, everything else via the service client."""

    def __init__(self, client: ServiceClient | None = None) -> None:
        self._client = client

    def fetch(self, source: str) -> bytes:
        if source.startswith("data:"):
            return decode_data_url(source)
        if source.startswith("blob:"):
            raise EmbedFailure("Blob URLs only resolve inside the capturing browser", source=source)
        if self._client is None:
            raise EmbedFailure("No service client configured for remote images", source=source)
        return self._client.fetch_image(source)
