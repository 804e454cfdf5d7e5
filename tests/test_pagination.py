from __future__ import annotations

from incremental_list.pagination import SCROLL_THRESHOLD, ScrollTrigger, is_near_bottom


class FakeSurface:
    def __init__(self) -> None:
        self.listeners = []

    def add_scroll_listener(self, listener) -> None:
        self.listeners.append(listener)

    def remove_scroll_listener(self, listener) -> None:
        self.listeners.remove(listener)

    def scroll(self, top, height, viewport) -> None:
        for listener in list(self.listeners):
            listener(top, height, viewport)


def test_is_near_bottom_threshold():
    assert SCROLL_THRESHOLD == 5
    assert is_near_bottom(95, 200, 100) is True
    assert is_near_bottom(94, 200, 100) is False
    assert is_near_bottom(100, 200, 100) is True


def test_trigger_attaches_once_and_detaches():
    calls = []
    surface = FakeSurface()
    trigger = ScrollTrigger(lambda *args: calls.append(args))
    trigger.attach(surface)
    trigger.attach(surface)
    assert len(surface.listeners) == 1

    surface.scroll(1, 2, 3)
    assert calls == [(1, 2, 3)]

    trigger.detach()
    trigger.detach()
    assert surface.listeners == []
    assert trigger.attached is False


def test_trigger_skips_missing_surface():
    trigger = ScrollTrigger(lambda *args: None)
    trigger.attach(None)
    assert trigger.attached is False


def test_trigger_moves_to_new_surface():
    first, second = FakeSurface(), FakeSurface()
    trigger = ScrollTrigger(lambda *args: None)
    trigger.attach(first)
    trigger.attach(second)
    assert first.listeners == []
    assert len(second.listeners) == 1


def test_trigger_context_releases_on_error():
    surface = FakeSurface()
    try:
        with ScrollTrigger(lambda *args: None) as trigger:
            trigger.attach(surface)
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    assert surface.listeners == []
