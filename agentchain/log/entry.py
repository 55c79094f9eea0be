"""
Decision log entry types.

Entries are immutable snapshots; DecisionLog replaces an entry with an
updated copy on every mutation. Serialization uses camelCase keys for
console lines so stored logs stay readable by existing activity feeds.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class EntryType(str, Enum):
    """Visibility classification of the logged action."""

    PUBLIC = "PUBLIC"
    CONFIDENTIAL = "CONFIDENTIAL"


class EntryStatus(str, Enum):
    """
    Lifecycle status.

    Processing -> Success | Reverted. Terminal states never change.
    """

    PROCESSING = "Processing"
    SUCCESS = "Success"
    REVERTED = "Reverted"

    @property
    def is_terminal(self) -> bool:
        return self is not EntryStatus.PROCESSING


class PhaseStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"
    FAILED = "failed"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True, slots=True)
class Phase:
    """One step of a turn, timed relative to the entry's start."""

    title: str
    offset_ms: int = 0
    status: PhaseStatus = PhaseStatus.DONE
    detail: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "offsetMs": self.offset_ms,
            "status": self.status.value,
            "detail": self.detail,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Phase:
        return cls(
            title=str(data.get("title", "")),
            offset_ms=int(data.get("offsetMs", data.get("offset_ms", 0)) or 0),
            status=PhaseStatus(data.get("status", PhaseStatus.DONE.value)),
            detail=str(data.get("detail", "")),
        )


@dataclass(frozen=True, slots=True)
class DecisionLogEntry:
    """
    Record of one routing or execution attempt.

    id and status are assigned by DecisionLog.append when left unset.

    Attributes:
        agent: Originating agent or tool label
        action: Human action label ("THINKING", "SEND TRANSACTION")
        amount: Display amount ("N/A" when not applicable)
        type: PUBLIC or CONFIDENTIAL
        time: Wall clock at creation (ISO-8601, UTC)
    """

    agent: str = "System"
    action: str = ""
    amount: str = "N/A"
    type: EntryType = EntryType.PUBLIC
    status: EntryStatus | None = None
    id: int | None = None
    time: str = field(default_factory=_now_iso)
    console_logs: tuple[str, ...] = ()
    phases: tuple[Phase, ...] = ()

    @property
    def is_terminal(self) -> bool:
        return self.status is not None and self.status.is_terminal

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        data["status"] = self.status.value if self.status else None
        data["consoleLogs"] = list(data.pop("console_logs"))
        data["phases"] = [phase.to_dict() for phase in self.phases]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DecisionLogEntry:
        """
        Rebuild an entry from its stored form.

        Raises:
            ValueError, TypeError, KeyError: If the stored form is malformed
        """
        status = data.get("status")
        return cls(
            id=int(data["id"]),
            agent=str(data.get("agent", "System")),
            action=str(data.get("action", "")),
            amount=str(data.get("amount", "N/A")),
            type=EntryType(data.get("type", EntryType.PUBLIC.value)),
            status=EntryStatus(status) if status else EntryStatus.PROCESSING,
            time=str(data.get("time") or _now_iso()),
            console_logs=tuple(str(line) for line in data.get("consoleLogs", ())),
            phases=tuple(Phase.from_dict(phase) for phase in data.get("phases", ())),
        )


__all__ = [
    "DecisionLogEntry",
    "EntryStatus",
    "EntryType",
    "Phase",
    "PhaseStatus",
]
