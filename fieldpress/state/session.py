"""In-memory state for one signing submission."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from fieldpress.model.field import FormField
from fieldpress.signature.metadata import SignerStamp


@dataclass(slots=True)
class SigningSession:
    fields: list[FormField] = field(default_factory=list)
    values: dict[str, str] = field(default_factory=dict)
    document_name: str = "document"
    submitter_id: int | None = None
    submitter_email: str | None = None
    reason: str | None = None
    status: str = "signed"
    completed_at: str | None = None

    def value_for(self, form_field: FormField) -> str:
        return self.values.get(form_field.id, "")

    def set_value(self, field_id: str, value: str) -> None:
        if not any(candidate.id == field_id for candidate in self.fields):
            raise KeyError(f"Unknown field: {field_id}")
        self.values[field_id] = value

    def fields_on_page(self, page: int) -> list[FormField]:
        return [candidate for candidate in self.fields if candidate.position.page == page]

    def missing_required(self) -> list[FormField]:
        return [candidate for candidate in self.fields if candidate.required and not self.value_for(candidate)]

    def stamp(self, signed_at: datetime | None = None) -> SignerStamp:
        return SignerStamp(
            submitter_id=self.submitter_id,
            submitter_email=self.submitter_email,
            reason=self.reason,
            signed_at=signed_at,
        )

    @classmethod
    def from_submission(cls, data: Mapping[str, Any]) -> SigningSession:
        submitter = data.get("submitter") or {}
        submitter_id = submitter.get("id")
        return cls(
            fields=[FormField.from_dict(raw) for raw in data.get("fields") or []],
            values={str(key): "" if value is None else str(value) for key, value in (data.get("values") or {}).items()},
            document_name=str(data.get("document_name") or "document"),
            submitter_id=int(submitter_id) if submitter_id is not None else None,
            submitter_email=submitter.get("email") or None,
            reason=data.get("reason") or None,
            status=str(data.get("status") or "signed"),
            completed_at=data.get("completed_at") or None,
        )
