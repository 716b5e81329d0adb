"""
Unit tests for PauseCorrection scheduling and cleanup.
"""

import pytest
from unittest.mock import MagicMock, call

from playback.pause_correction import PauseCorrection


@pytest.mark.unit
def test_start_pauses_and_schedules_resume(manual_clock):
    set_paused = MagicMock()
    correction = PauseCorrection(set_paused, clock=manual_clock.clock)

    correction.start(1.0)

    set_paused.assert_called_once_with(True)
    assert correction.active is True
    assert correction.wait_seconds == 1.0
    assert correction.started_at == manual_clock.now


@pytest.mark.unit
def test_resume_runs_when_window_elapses(manual_clock):
    set_paused = MagicMock()
    correction = PauseCorrection(set_paused, clock=manual_clock.clock)
    correction.start(1.0)

    manual_clock.advance(0.5)
    assert set_paused.call_args_list == [call(True)]

    manual_clock.advance(0.5)
    assert set_paused.call_args_list == [call(True), call(False)]
    assert correction.active is False
    assert correction.started_at is None


@pytest.mark.unit
def test_start_while_active_raises(manual_clock):
    correction = PauseCorrection(MagicMock(), clock=manual_clock.clock)
    correction.start(1.0)

    with pytest.raises(RuntimeError, match="already in flight"):
        correction.start(0.5)

    assert correction.active is True


@pytest.mark.unit
def test_can_start_again_after_completion(manual_clock):
    set_paused = MagicMock()
    correction = PauseCorrection(set_paused, clock=manual_clock.clock)
    correction.start(0.25)
    manual_clock.advance(0.25)

    correction.start(0.25)
    manual_clock.advance(0.25)

    assert set_paused.call_args_list == [call(True), call(False), call(True), call(False)]


@pytest.mark.unit
def test_cancel_resumes_by_default(manual_clock):
    set_paused = MagicMock()
    correction = PauseCorrection(set_paused, clock=manual_clock.clock)
    correction.start(2.0)

    assert correction.cancel() is True
    manual_clock.advance(3.0)

    assert set_paused.call_args_list == [call(True), call(False)]
    assert correction.active is False


@pytest.mark.unit
def test_cancel_without_resume_leaves_follower_paused(manual_clock):
    set_paused = MagicMock()
    correction = PauseCorrection(set_paused, clock=manual_clock.clock, resume_on_cancel=False)
    correction.start(2.0)

    correction.cancel()
    manual_clock.advance(3.0)

    assert set_paused.call_args_list == [call(True)]
    assert correction.active is False


@pytest.mark.unit
def test_cancel_when_idle_returns_false(manual_clock):
    set_paused = MagicMock()
    correction = PauseCorrection(set_paused, clock=manual_clock.clock)

    assert correction.cancel() is False
    set_paused.assert_not_called()


@pytest.mark.unit
def test_cancel_swallows_resume_failure(manual_clock):
    set_paused = MagicMock(side_effect=[None, RuntimeError("disposed")])
    correction = PauseCorrection(set_paused, clock=manual_clock.clock)
    correction.start(1.0)

    assert correction.cancel() is True
    assert correction.active is False


@pytest.mark.unit
def test_failing_pause_clears_flag_and_schedules_nothing(manual_clock):
    set_paused = MagicMock(side_effect=[RuntimeError("invalid state"), None])
    correction = PauseCorrection(set_paused, clock=manual_clock.clock)

    with pytest.raises(RuntimeError):
        correction.start(0.5)

    assert correction.active is False
    manual_clock.advance(1.0)
    assert set_paused.call_count == 1


@pytest.mark.unit
def test_uses_default_pyglet_clock():
    import pyglet

    correction = PauseCorrection(MagicMock())

    assert correction._clock is pyglet.clock.get_default()
