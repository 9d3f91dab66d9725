"""Audit log entry model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class AuditLogEntry:
    timestamp: str
    action: str
    user: str
    details: str | None = None
    ip: str | None = None
    user_agent: str | None = None
    session_id: str | None = None
    timezone: str | None = None

    @property
    def is_complete(self) -> bool:
        return bool(self.timestamp and self.action and self.user)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AuditLogEntry:
        def text(key: str) -> str | None:
            value = data.get(key)
            return None if value is None else str(value)

        return cls(
            timestamp=text("timestamp") or "",
            action=text("action") or "",
            user=text("user") or "",
            details=text("details"),
            ip=text("ip"),
            user_agent=text("user_agent"),
            session_id=text("session_id"),
            timezone=text("timezone"),
        )
