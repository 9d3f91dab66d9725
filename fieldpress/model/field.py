"""Form field model definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from fieldpress.model.position import FieldPosition


class FieldType(str, Enum):
    TEXT = "text"
    DATE = "date"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    SELECT = "select"
    MULTIPLE = "multiple"
    SIGNATURE = "signature"
    INITIALS = "initials"
    IMAGE = "image"
    FILE = "file"
    CELLS = "cells"

    @classmethod
    def _missing_(cls, value: object) -> FieldType | None:
        if value == "grid-cells":
            return cls.CELLS
        return None

    @property
    def is_signature(self) -> bool:
        return self in (FieldType.SIGNATURE, FieldType.INITIALS)


class ConditionPredicate(str, Enum):
    EMPTY = "empty"
    NOT_EMPTY = "not_empty"

    @classmethod
    def _missing_(cls, value: object) -> ConditionPredicate | None:
        if value == "not-empty":
            return cls.NOT_EMPTY
        return None


@dataclass(frozen=True, slots=True)
class FieldCondition:
    dependent_field: str
    predicate: ConditionPredicate

    def holds(self, dependent_value: str | None) -> bool:
        is_empty = not dependent_value
        if self.predicate is ConditionPredicate.EMPTY:
            return is_empty
        return not is_empty


@dataclass(slots=True)
class FormField:
    id: str
    name: str
    field_type: FieldType
    position: FieldPosition
    required: bool = False
    options: dict[str, Any] = field(default_factory=dict)
    partner: str | None = None

    @property
    def condition(self) -> FieldCondition | None:
        raw = self.options.get("condition")
        if not isinstance(raw, Mapping):
            return None
        dependent = raw.get("dependentField")
        predicate = raw.get("condition")
        if not dependent or not predicate:
            return None
        try:
            return FieldCondition(dependent_field=str(dependent), predicate=ConditionPredicate(predicate))
        except ValueError:
            return None

    @property
    def columns(self) -> int:
        try:
            columns = int(self.options.get("columns") or 3)
        except (TypeError, ValueError):
            return 3
        return max(1, columns)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FormField:
        field_type = data.get("field_type", data.get("type"))
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            field_type=FieldType(field_type),
            position=FieldPosition.from_dict(data.get("position") or {}),
            required=bool(data.get("required", False)),
            options=dict(data.get("options") or {}),
            partner=data.get("partner"),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "field_type": self.field_type.value,
            "position": self.position.to_dict(),
            "required": self.required,
            "options": dict(self.options),
        }
        if self.partner is not None:
            payload["partner"] = self.partner
        return payload
