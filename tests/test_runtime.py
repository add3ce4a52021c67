from datetime import timedelta
from threading import Event

import pytest

from autotheme.runtime import ObservableCell, SchedulerClock, UIContext

from conftest import utc


def test_cell_versions_and_listeners():
  cell = ObservableCell("intensity", None)
  seen = []
  cell.add_listener(lambda new, old: seen.append((old.value, new.value, new.version)))

  assert cell.set(0.25) is True
  assert cell.set(0.25) is False
  assert cell.set(0.25, force_update=True) is False
  assert seen == [(None, 0.25, 1), (0.25, 0.25, 2)]
  assert cell.version == 2


def test_listener_errors_do_not_stop_notification():
  cell = ObservableCell("mode", "auto")
  seen = []

  def broken(new, old):
    raise RuntimeError("listener failed")

  cell.add_listener(broken)
  cell.add_listener(lambda new, old: seen.append(new.value))
  cell.set("dark")

  assert seen == ["dark"]
  assert cell.remove_listener(broken) is True
  assert cell.remove_listener(broken) is False


def test_paused_clock_only_moves_when_told():
  clock = SchedulerClock(start_time=utc(2025, 3, 1, 12), paused=True)
  assert clock.now() == utc(2025, 3, 1, 12)
  clock.advance(timedelta(hours=2))
  assert clock.now() == utc(2025, 3, 1, 14)
  assert clock.time_until(utc(2025, 3, 1, 13)) is None
  assert clock.time_until(utc(2025, 3, 1, 15)) == 3600


def test_wait_returns_false_when_cancelled():
  clock = SchedulerClock(start_time=utc(2025, 3, 1, 12), poll_interval=0.01)
  stop = Event()
  stop.set()
  assert clock.wait(timedelta(hours=1), stop) is False


def test_wait_until_past_target_returns_immediately():
  clock = SchedulerClock(start_time=utc(2025, 3, 1, 12))
  assert clock.wait_until(utc(2025, 3, 1, 11), Event()) is True


def test_fast_clock_wait():
  clock = SchedulerClock(start_time=utc(2025, 3, 1, 12), speed=36000.0, poll_interval=0.05)
  assert clock.wait(timedelta(seconds=360), Event()) is True
  assert clock.now() >= utc(2025, 3, 1, 12, 6)


def test_speed_must_be_positive():
  with pytest.raises(ValueError):
    SchedulerClock(speed=0)


def test_ui_context_runs_inline_until_started():
  ui = UIContext()
  assert ui.call(lambda: 42) == 42
  assert ui.in_context() and not ui.on_ui_thread()


def test_ui_context_runs_calls_on_its_thread():
  import threading

  ui = UIContext(name="ui-test")
  ui.start()
  try:
    assert ui.call(lambda: threading.current_thread().name, wait=True) == "ui-test"
    assert ui.call(ui.on_ui_thread, wait=True) is True
    assert not ui.on_ui_thread()
    with pytest.raises(ZeroDivisionError):
      ui.call(lambda: 1 / 0, wait=True)
    future = ui.call(lambda: "later")
    assert future.result(timeout=2) == "later"
  finally:
    ui.stop()
  assert not ui.is_running()
