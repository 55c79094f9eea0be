"""
AgentChain Decision Log.

Subscribable, persisted record of routing and execution attempts.
"""

from .decision_log import DecisionLog, Subscriber, Unsubscribe
from .entry import DecisionLogEntry, EntryStatus, EntryType, Phase, PhaseStatus
from .storage import DEFAULT_NAMESPACE, InMemoryLogStorage, JsonFileLogStorage, LogStorage

__all__ = [
    "DecisionLog",
    "DecisionLogEntry",
    "EntryStatus",
    "EntryType",
    "Phase",
    "PhaseStatus",
    "Subscriber",
    "Unsubscribe",
    # Storage
    "DEFAULT_NAMESPACE",
    "InMemoryLogStorage",
    "JsonFileLogStorage",
    "LogStorage",
]
