"""
Token event log

Append-only log of the events a token emits:
- Transfer (mint is a Transfer from the zero address)
- Approval
- OwnershipTransferred

Events belong to the call that emitted them: when a call rolls back, the
events it appended are discarded with `truncate`.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional
import json
import logging
import time

logger = logging.getLogger(__name__)

EVT_TRANSFER = "Transfer"
EVT_APPROVAL = "Approval"
EVT_OWNERSHIP_TRANSFERRED = "OwnershipTransferred"


@dataclass
class TokenEvent:
    seq: int
    ts: float
    name: str
    args: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenEvent":
        return cls(
            seq=int(data["seq"]),
            ts=float(data.get("ts", 0.0)),
            name=str(data["name"]),
            args=dict(data.get("args") or {}),
        )


class EventLog:
    def __init__(self, events: Optional[List[TokenEvent]] = None) -> None:
        self._events: List[TokenEvent] = list(events or [])

    def __len__(self) -> int:
        return len(self._events)

    def emit(self, name: str, **args: Any) -> TokenEvent:
        ev = TokenEvent(seq=len(self._events), ts=time.time(), name=name, args=args)
        self._events.append(ev)
        logger.debug("%s", json.dumps(ev.to_dict(), default=str))
        return ev

    def truncate(self, length: int) -> None:
        del self._events[length:]

    def all_events(self) -> List[TokenEvent]:
        return list(self._events)

    def since(self, start: int) -> List[TokenEvent]:
        return self._events[start:]

    def tail(self, limit: int) -> List[TokenEvent]:
        if limit <= 0:
            return []
        return self._events[-limit:]

    def by_name(self, name: str) -> List[TokenEvent]:
        return [ev for ev in self._events if ev.name == name]
