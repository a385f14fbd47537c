"""
Pomodoro study timer as an explicit state machine.

    FOCUS --(reaches 0)--> SHORT_BREAK, or LONG_BREAK every Nth focus
    SHORT_BREAK / LONG_BREAK --(reaches 0)--> FOCUS, next session

The timer is driven from outside, one tick per second, and pauses itself
after every transition. Nothing is persisted; GET /api/study-sessions/timer
hands out the initial state sized from the caller's profile.
"""

from enum import Enum
from typing import Dict, Optional


class Phase(str, Enum):
    FOCUS = "focus"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"


DEFAULT_DURATIONS: Dict[Phase, int] = {
    Phase.FOCUS: 25 * 60,
    Phase.SHORT_BREAK: 5 * 60,
    Phase.LONG_BREAK: 15 * 60,
}
LONG_BREAK_EVERY = 4


class PomodoroTimer:
    def __init__(
        self,
        durations: Optional[Dict[Phase, int]] = None,
        long_break_every: int = LONG_BREAK_EVERY,
    ):
        self.durations = {**DEFAULT_DURATIONS, **(durations or {})}
        if long_break_every < 1:
            raise ValueError("long_break_every must be at least 1")
        self.long_break_every = long_break_every

        self.phase = Phase.FOCUS
        self.remaining = self.durations[Phase.FOCUS]
        self.running = False
        self.session = 1
        self.completed_focus = 0

    @property
    def duration(self) -> int:
        return self.durations[self.phase]

    @property
    def progress_fraction(self) -> float:
        """Elapsed share of the current phase, 0.0 to 1.0."""
        if self.duration <= 0:
            return 1.0
        return (self.duration - self.remaining) / self.duration

    def start(self) -> None:
        self.running = True

    def pause(self) -> None:
        self.running = False

    def reset(self) -> None:
        """Stop and restore the full duration of the current phase."""
        self.running = False
        self.remaining = self.duration

    def tick(self) -> Optional[Phase]:
        """
        Advance one second.

        Returns the new phase when this tick finished the current one, else
        None. Does nothing while paused.
        """
        if not self.running:
            return None

        self.remaining = max(self.remaining - 1, 0)
        if self.remaining > 0:
            return None
        return self._transition()

    def _next_phase(self) -> Phase:
        if self.phase is Phase.FOCUS:
            if self.completed_focus % self.long_break_every == 0:
                return Phase.LONG_BREAK
            return Phase.SHORT_BREAK
        return Phase.FOCUS

    def _transition(self) -> Phase:
        if self.phase is Phase.FOCUS:
            self.completed_focus += 1
        else:
            self.session += 1

        self.phase = self._next_phase()
        self.remaining = self.duration
        self.running = False
        return self.phase

    def snapshot(self) -> dict:
        return {
            "phase": self.phase.value,
            "remaining_seconds": self.remaining,
            "running": self.running,
            "session": self.session,
            "completed_focus": self.completed_focus,
            "progress": round(self.progress_fraction, 4),
        }
