from __future__ import annotations

from stepengine.api.timers import Timer, create_timer_registry
from stepengine.runtime.timers import RuntimeTimerRegistry


def test_timer_after_changes_period_but_not_due_time() -> None:
    timer = Timer(due_at=10.0, period=1.0, handler=lambda: None, recurring=True)
    timer.after(2.0)
    assert timer.period == 2.0
    assert timer.due_at == 10.0


def test_create_timer_registry_uses_given_id_factory() -> None:
    registry = create_timer_registry(id_factory=lambda: "fixed")
    assert isinstance(registry, RuntimeTimerRegistry)
    assert registry.insert(None, 1.0, 1.0, False, lambda: None) == "fixed"
