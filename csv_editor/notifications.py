from __future__ import annotations

import logging
from collections import deque
from datetime import datetime, timezone
from typing import Deque, List

from .models import Notification

logger = logging.getLogger(__name__)

UPDATED = "Row updated successfully"
DELETED = "Row deleted successfully"
ADDED = "Row added successfully"
LOADED = "CSV loaded successfully"
EXPORTED = "CSV exported successfully"


class NotificationSink:
    """Keeps the most recent operation outcomes. Nothing reads it but clients."""

    def __init__(self, maxlen: int = 50):
        self._items: Deque[Notification] = deque(maxlen=maxlen)

    def _emit(self, action: str, ok: bool, message: str) -> Notification:
        note = Notification(
            action=action,
            ok=ok,
            message=message,
            at_utc=datetime.now(timezone.utc).isoformat(),
        )
        self._items.append(note)
        if ok:
            logger.info("%s: %s", action, message)
        else:
            logger.warning("%s failed: %s", action, message)
        return note

    def success(self, action: str, message: str) -> Notification:
        return self._emit(action, True, message)

    def failure(self, action: str, message: str) -> Notification:
        return self._emit(action, False, message)

    def recent(self) -> List[Notification]:
        return list(self._items)
