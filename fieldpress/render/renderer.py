"""Field value rendering: turns a field and its value into a drawable sized to its box.

Every ``FieldType`` has exactly one handler in ``_HANDLERS``; the table is
checked for completeness at import time, so adding a field type without a
handler fails immediately. Consumers match on the drawable classes and use
``assert_never`` for the remaining case.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Callable, Mapping, Sequence, Union, assert_never
from urllib.parse import unquote

from fieldpress.model.field import FieldType, FormField
from fieldpress.model.signature import (
    RasterSignature,
    TextSignature,
    VectorSignature,
    parse_signature_value,
)

MAX_FONT_SIZE = 12.0
FONT_SIZE_RATIO = 0.6
BASELINE_RATIO = 0.3
CHECK_RATIO = 0.8
CHECKED_VALUE = "true"

_IMAGE_PREFIXES = ("http://", "https://", "blob:", "data:image/", "/api/")


@dataclass(frozen=True, slots=True)
class TextDrawable:
    text: str
    font_size: float
    baseline_offset: float
    target_width: float
    target_height: float
    columns: int = 1


@dataclass(frozen=True, slots=True)
class ImageDrawable:
    source: str
    target_width: float
    target_height: float
    label: str | None = None


@dataclass(frozen=True, slots=True)
class VectorDrawable:
    signature: VectorSignature
    target_width: float
    target_height: float
    metadata_lines: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class GlyphDrawable:
    size: float
    target_width: float
    target_height: float


Drawable = Union[TextDrawable, ImageDrawable, VectorDrawable, GlyphDrawable]


@dataclass(frozen=True, slots=True)
class RenderContext:
    target_width: float
    target_height: float
    metadata_lines: Sequence[str] = ()


Handler = Callable[[FormField, str, RenderContext], Union[Drawable, None]]


def text_drawable(text: str, context: RenderContext, columns: int = 1) -> TextDrawable:
    height = context.target_height
    return TextDrawable(
        text=text,
        font_size=min(height * FONT_SIZE_RATIO, MAX_FONT_SIZE),
        baseline_offset=height * BASELINE_RATIO,
        target_width=context.target_width,
        target_height=height,
        columns=columns,
    )


def _render_text(field: FormField, value: str, context: RenderContext) -> Drawable:
    return text_drawable(value, context)


def _render_checkbox(field: FormField, value: str, context: RenderContext) -> Drawable | None:
    if value != CHECKED_VALUE:
        return None
    return GlyphDrawable(
        size=min(context.target_width, context.target_height) * CHECK_RATIO,
        target_width=context.target_width,
        target_height=context.target_height,
    )


def _render_signature(field: FormField, value: str, context: RenderContext) -> Drawable:
    signature = parse_signature_value(value)
    match signature:
        case RasterSignature(url=url):
            return ImageDrawable(source=url, target_width=context.target_width, target_height=context.target_height)
        case VectorSignature():
            return VectorDrawable(
                signature=signature,
                target_width=context.target_width,
                target_height=context.target_height,
                metadata_lines=tuple(context.metadata_lines),
            )
        case TextSignature(text=text):
            return text_drawable(text, context)
        case _:
            assert_never(signature)


def _render_image(field: FormField, value: str, context: RenderContext) -> Drawable | None:
    if not value.startswith(_IMAGE_PREFIXES):
        return None
    return ImageDrawable(source=value, target_width=context.target_width, target_height=context.target_height)


def file_label(value: str) -> str:
    name = value.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
    return unquote(name) or "File"


def _render_file(field: FormField, value: str, context: RenderContext) -> Drawable:
    return ImageDrawable(
        source=value,
        target_width=context.target_width,
        target_height=context.target_height,
        label=file_label(value),
    )


def _render_choice(field: FormField, value: str, context: RenderContext) -> Drawable:
    return text_drawable(value, context)


def _render_multiple(field: FormField, value: str, context: RenderContext) -> Drawable:
    return text_drawable(join_choices(value), context)


def join_choices(value: str) -> str:
    try:
        choices = json.loads(value)
    except ValueError:
        return value
    if isinstance(choices, list):
        return ", ".join(str(choice) for choice in choices)
    return value


def _render_cells(field: FormField, value: str, context: RenderContext) -> Drawable:
    return text_drawable(value[: field.columns], context, columns=field.columns)


_HANDLERS: dict[FieldType, Handler] = {
    FieldType.TEXT: _render_text,
    FieldType.DATE: _render_text,
    FieldType.NUMBER: _render_text,
    FieldType.CHECKBOX: _render_checkbox,
    FieldType.RADIO: _render_choice,
    FieldType.SELECT: _render_choice,
    FieldType.MULTIPLE: _render_multiple,
    FieldType.SIGNATURE: _render_signature,
    FieldType.INITIALS: _render_signature,
    FieldType.IMAGE: _render_image,
    FieldType.FILE: _render_file,
    FieldType.CELLS: _render_cells,
}

_unhandled = set(FieldType) - set(_HANDLERS)
if _unhandled:
    raise RuntimeError(f"No renderer registered for field types: {sorted(t.value for t in _unhandled)}")


def render_field(
    field: FormField,
    value: str,
    target_width: float,
    target_height: float,
    *,
    metadata_lines: Sequence[str] = (),
) -> Drawable | None:
    if not value:
        return None
    context = RenderContext(
        target_width=target_width,
        target_height=target_height,
        metadata_lines=metadata_lines,
    )
    return _HANDLERS[field.field_type](field, value, context)


def _find_dependent(reference: str, fields: Sequence[FormField]) -> FormField | None:
    for candidate in fields:
        if candidate.name == reference:
            return candidate

    field_id = reference.removeprefix("field-")
    for candidate in fields:
        if candidate.id == reference or candidate.id == field_id:
            return candidate
    return None


def is_visible(field: FormField, fields: Sequence[FormField], values: Mapping[str, str]) -> bool:
    condition = field.condition
    if condition is None:
        return True

    dependent = _find_dependent(condition.dependent_field, fields)
    if dependent is None:
        return True
    return condition.holds(values.get(dependent.id, ""))
