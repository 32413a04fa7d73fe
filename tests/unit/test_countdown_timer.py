"""
Unit tests for CountdownTimer.

Covered:
- initial state and negative durations
- start / pause / reset
- tick never goes below zero and stops the timer at zero
- set_initial_seconds always drops a running countdown
"""

import pytest

from app.services.countdown_timer import CountdownTimer, DEFAULT_REST_SECONDS

pytestmark = pytest.mark.unit


def test_new_timer_is_stopped_at_full_duration():
    timer = CountdownTimer(90)
    assert timer.initial_seconds == 90
    assert timer.remaining_seconds == 90
    assert timer.is_running is False
    assert timer.is_finished is False


def test_default_duration_is_sixty_seconds():
    assert CountdownTimer().initial_seconds == DEFAULT_REST_SECONDS == 60


def test_negative_duration_rejected():
    with pytest.raises(ValueError):
        CountdownTimer(-1)


def test_tick_does_nothing_while_stopped():
    timer = CountdownTimer(10)
    assert timer.tick() == 10


def test_start_and_tick_counts_down():
    timer = CountdownTimer(10)
    timer.start()
    assert timer.tick() == 9
    assert timer.tick(3) == 6
    assert timer.is_running is True


def test_pause_keeps_remaining_time():
    timer = CountdownTimer(10)
    timer.start()
    timer.tick(4)
    timer.pause()
    assert timer.tick(2) == 6
    assert timer.is_running is False


def test_countdown_stops_at_zero():
    timer = CountdownTimer(3)
    timer.start()
    assert timer.tick(10) == 0
    assert timer.is_running is False
    assert timer.is_finished is True


def test_start_at_zero_does_not_run():
    timer = CountdownTimer(0)
    timer.start()
    assert timer.is_running is False


def test_reset_restores_initial_and_stops():
    timer = CountdownTimer(30)
    timer.start()
    timer.tick(12)
    timer.reset()
    assert timer.remaining_seconds == 30
    assert timer.is_running is False


def test_set_initial_seconds_replaces_running_countdown():
    timer = CountdownTimer(30)
    timer.start()
    timer.tick(5)
    timer.set_initial_seconds(45)
    assert timer.initial_seconds == 45
    assert timer.remaining_seconds == 45
    assert timer.is_running is False


def test_set_initial_seconds_rejects_negative():
    timer = CountdownTimer(30)
    with pytest.raises(ValueError):
        timer.set_initial_seconds(-5)
    assert timer.initial_seconds == 30
