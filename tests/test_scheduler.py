"""Tests for the virtual-clock and real-time schedulers."""
import pytest

from truco.scheduler import ManualScheduler, RealtimeScheduler


def test_tasks_run_in_due_order_then_fifo():
    sched = ManualScheduler()
    ran = []
    sched.call_later(1.0, lambda: ran.append("b"))
    sched.call_later(0.5, lambda: ran.append("a"))
    sched.call_later(1.0, lambda: ran.append("c"))
    assert sched.run_until_idle() == 3
    assert ran == ["a", "b", "c"]
    assert sched.now == 1.0


def test_advance_runs_only_due_tasks():
    sched = ManualScheduler()
    ran = []
    sched.call_later(0.8, lambda: ran.append(1))
    sched.call_later(2.0, lambda: ran.append(2))
    assert sched.advance(1.0) == 1
    assert ran == [1]
    assert sched.now == 1.0
    assert sched.pending() == 1
    sched.advance(1.0)
    assert ran == [1, 2]


def test_tasks_can_schedule_more_tasks():
    sched = ManualScheduler()
    ran = []

    def first():
        ran.append("first")
        sched.call_later(0.5, lambda: ran.append("second"))

    sched.call_later(0.5, first)
    sched.run_until_idle()
    assert ran == ["first", "second"]
    assert sched.now == 1.0


def test_cancel_all_and_cancel_one():
    sched = ManualScheduler()
    ran = []
    task = sched.call_later(0.1, lambda: ran.append("x"))
    sched.call_later(0.2, lambda: ran.append("y"))
    task.cancel()
    assert sched.pending() == 1
    sched.cancel_all()
    assert sched.pending() == 0
    assert not sched.run_next()
    assert ran == []


def test_negative_delay_rejected():
    with pytest.raises(ValueError):
        ManualScheduler().call_later(-1.0, lambda: None)


def test_run_until_idle_guards_against_endless_loops():
    sched = ManualScheduler()

    def again():
        sched.call_later(0.0, again)

    sched.call_later(0.0, again)
    with pytest.raises(RuntimeError):
        sched.run_until_idle(max_tasks=50)


def test_realtime_scheduler_sleeps_until_due():
    clock = {"t": 100.0}
    slept = []

    def fake_sleep(seconds):
        slept.append(seconds)
        clock["t"] += seconds

    sched = RealtimeScheduler(clock=lambda: clock["t"], sleep=fake_sleep)
    ran = []
    sched.call_later(0.6, lambda: ran.append("reply"))
    sched.call_later(0.0, lambda: ran.append("now"))
    sched.run_until_idle()
    assert ran == ["now", "reply"]
    assert slept == [pytest.approx(0.6)]
    assert clock["t"] == pytest.approx(100.6)
