"""User-facing notifications (the storefront's toast messages)."""
from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Deque, Dict, List, Optional
import logging

logger = logging.getLogger(__name__)

LEVELS = ("info", "success", "warning", "error")


@dataclass
class Notification:
    level: str
    message: str
    created_at: str = field(default_factory=lambda: datetime.utcnow().isoformat(sep=" "))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class NotificationCenter:
    """
    Fire-and-forget sink. Every message is logged and kept in a bounded
    history the UI can poll; nothing here blocks the caller.
    """

    def __init__(self, history: int = 50):
        self._history: Deque[Notification] = deque(maxlen=max(1, int(history)))

    def notify(self, message: str, level: str = "info") -> Notification:
        if level not in LEVELS:
            level = "info"
        note = Notification(level=level, message=message)
        self._history.append(note)
        logger.info("[%s] %s", level, message)
        return note

    def recent(self, limit: Optional[int] = None) -> List[Notification]:
        items = list(self._history)
        if limit is not None:
            items = items[-limit:] if limit > 0 else []
        return items