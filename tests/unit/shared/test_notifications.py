from __future__ import annotations

import pytest

from shared.infrastructure.notifications import NotificationCenter, NotificationLevel

pytestmark = pytest.mark.unit


class TestNotificationCenter:
    def test_collects_in_order(self):
        center = NotificationCenter()
        center.info("Nada para salvar")
        center.error("Erro ao salvar", "timeout")

        assert [n.level for n in center.items] == [
            NotificationLevel.INFO,
            NotificationLevel.ERROR,
        ]
        assert center.last.description == "timeout"

    def test_drain_empties(self):
        center = NotificationCenter()
        center.success("Salvo")

        drained = center.drain()

        assert len(drained) == 1
        assert center.items == []
        assert center.last is None
