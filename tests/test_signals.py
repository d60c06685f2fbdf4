"""Tests for wren.signals — reactive single values."""

from wren.signals import Signal, signal


class TestSignal:
    def test_initial_value(self) -> None:
        assert Signal(3).value == 3

    def test_watchers_called_on_change(self) -> None:
        s = signal(0)
        seen: list[int] = []
        s.watch(seen.append)
        s.value = 1
        s.value = 2
        assert seen == [1, 2]

    def test_same_object_does_not_notify(self) -> None:
        payload = {"a": 1}
        s = signal(payload)
        seen: list[object] = []
        s.watch(seen.append)
        s.value = payload
        assert seen == []

    def test_equal_but_new_object_notifies(self) -> None:
        s = signal({"a": 1})
        seen: list[object] = []
        s.watch(seen.append)
        s.value = {"a": 1}
        assert len(seen) == 1

    def test_unwatch(self) -> None:
        s = signal(0)
        seen: list[int] = []
        unwatch = s.watch(seen.append)
        unwatch()
        unwatch()
        s.value = 5
        assert seen == []

    def test_watchers_run_in_order(self) -> None:
        s = signal(0)
        order: list[str] = []
        s.watch(lambda _v: order.append("first"))
        s.watch(lambda _v: order.append("second"))
        s.value = 1
        assert order == ["first", "second"]

    def test_repr(self) -> None:
        assert repr(Signal("x")) == "Signal('x')"
