"""
Tests for the Pomodoro timer state machine.
"""

import pytest

from app.services.pomodoro import DEFAULT_DURATIONS, Phase, PomodoroTimer


def run_phase(timer: PomodoroTimer) -> Phase:
    """Start the timer and tick until the phase ends"""
    timer.start()
    for _ in range(timer.duration):
        transition = timer.tick()
        if transition is not None:
            return transition
    raise AssertionError("phase did not end")


class TestPomodoroTimer:
    """Focus, short break and long break transitions"""

    @pytest.mark.unit
    def test_initial_state(self):
        timer = PomodoroTimer()
        assert timer.snapshot() == {
            "phase": "focus",
            "remaining_seconds": 1500,
            "running": False,
            "session": 1,
            "completed_focus": 0,
            "progress": 0.0,
        }

    @pytest.mark.unit
    def test_focus_ends_after_1500_ticks(self):
        timer = PomodoroTimer()
        timer.start()

        for _ in range(1499):
            assert timer.tick() is None
        assert timer.remaining == 1
        assert timer.tick() is Phase.SHORT_BREAK

        assert timer.remaining == DEFAULT_DURATIONS[Phase.SHORT_BREAK]
        assert timer.running is False
        assert timer.completed_focus == 1

    @pytest.mark.unit
    def test_long_break_every_fourth_focus(self):
        timer = PomodoroTimer({Phase.FOCUS: 3, Phase.SHORT_BREAK: 2, Phase.LONG_BREAK: 4})

        phases = [run_phase(timer) for _ in range(8)]

        assert phases == [
            Phase.SHORT_BREAK, Phase.FOCUS,
            Phase.SHORT_BREAK, Phase.FOCUS,
            Phase.SHORT_BREAK, Phase.FOCUS,
            Phase.LONG_BREAK, Phase.FOCUS,
        ]
        assert timer.session == 5
        assert timer.completed_focus == 4

    @pytest.mark.unit
    def test_paused_tick_is_noop(self):
        timer = PomodoroTimer()
        assert timer.tick() is None
        assert timer.remaining == 1500

        timer.start()
        timer.tick()
        timer.pause()
        timer.tick()
        assert timer.remaining == 1499

    @pytest.mark.unit
    def test_reset_restores_phase_duration(self):
        timer = PomodoroTimer()
        timer.start()
        for _ in range(100):
            timer.tick()

        timer.reset()
        assert timer.remaining == 1500
        assert timer.running is False
        assert timer.phase is Phase.FOCUS

    @pytest.mark.unit
    def test_progress_fraction(self):
        timer = PomodoroTimer({Phase.FOCUS: 4})
        timer.start()
        timer.tick()
        assert timer.progress_fraction == 0.25

    @pytest.mark.unit
    def test_invalid_long_break_interval(self):
        with pytest.raises(ValueError):
            PomodoroTimer(long_break_every=0)
