"""User-facing notifications (toasts) raised by admin sessions.

Sessions such as the delivery fee editor and the order board never let
remote errors escape: they log them and push a ``Notification`` here.  The
presentation layer drains the center and renders each entry.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Protocol

from django.db import models


class NotificationLevel(models.TextChoices):
    SUCCESS = "success", "Sucesso"
    INFO = "info", "Informação"
    ERROR = "error", "Erro"


@dataclass(frozen=True)
class Notification:
    level: str
    title: str
    description: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class INotifier(Protocol):
    """Anything able to show a toast."""

    def success(self, title: str, description: str = "") -> None: ...

    def info(self, title: str, description: str = "") -> None: ...

    def error(self, title: str, description: str = "") -> None: ...


class NotificationCenter:
    """Collects notifications in memory until the UI drains them."""

    def __init__(self) -> None:
        self._items: List[Notification] = []

    def _push(self, level: str, title: str, description: str) -> None:
        self._items.append(Notification(level=level, title=title, description=description))

    def success(self, title: str, description: str = "") -> None:
        self._push(NotificationLevel.SUCCESS, title, description)

    def info(self, title: str, description: str = "") -> None:
        self._push(NotificationLevel.INFO, title, description)

    def error(self, title: str, description: str = "") -> None:
        self._push(NotificationLevel.ERROR, title, description)

    @property
    def items(self) -> List[Notification]:
        return list(self._items)

    @property
    def last(self) -> Optional[Notification]:
        return self._items[-1] if self._items else None

    def drain(self) -> List[Notification]:
        """Return pending notifications and forget them."""
        items, self._items = self._items, []
        return items
