"""
Periodic drivers for a game session
Fixed-period timers for the clock tick and the auto-assist step, written
against a tkinter-style scheduler: schedule(ms, callback) -> id, cancel(id)
"""

from typing import Any, Callable, Dict, Optional

from .session import GameSession, GameState


TICK_INTERVAL_MS = 250

# Auto-assist step period for each ai_speed setting
ASSIST_INTERVALS_MS: Dict[int, int] = {1: 600, 2: 300, 3: 150, 4: 75}

Schedule = Callable[[int, Callable[[], None]], Any]
Cancel = Callable[[Any], None]


class Ticker:
    """Calls callback every interval_ms until stopped; never overlaps itself"""

    def __init__(self, schedule: Schedule, cancel: Cancel, interval_ms: int,
                 callback: Callable[[], None]):
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._schedule = schedule
        self._cancel = cancel
        self.interval_ms = interval_ms
        self._callback = callback
        self._after_id: Optional[Any] = None
        self._active = False

    @property
    def running(self) -> bool:
        return self._active

    def start(self):
        if self._active:
            return
        self._active = True
        self._arm()

    def stop(self):
        self._active = False
        if self._after_id is not None:
            self._cancel(self._after_id)
            self._after_id = None

    def set_interval(self, interval_ms: int):
        """Change the period; a running ticker is re-armed with the new one"""
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        if interval_ms == self.interval_ms:
            return
        self.interval_ms = interval_ms
        if self._active:
            self.stop()
            self.start()

    def _arm(self):
        self._after_id = self._schedule(self.interval_ms, self._fire)

    def _fire(self):
        self._after_id = None
        if not self._active:
            return
        self._callback()
        # The callback may have stopped (or restarted) this ticker
        if self._active and self._after_id is None:
            self._arm()


class SessionDriver:
    """
    Drives a GameSession from a scheduler

    The clock ticker runs for as long as the driver is started. The assist
    ticker only runs while auto-assist is on and the game is neither paused
    nor finished, and follows the ai_speed preference.
    """

    def __init__(self, session: GameSession, schedule: Schedule, cancel: Cancel):
        self.session = session
        self.tick_ticker = Ticker(schedule, cancel, TICK_INTERVAL_MS, session.tick)
        self.assist_ticker = Ticker(schedule, cancel, self._assist_interval(session.state),
                                    session.assist_step)
        self._unsubscribe: Optional[Callable[[], None]] = None

    @staticmethod
    def _assist_interval(state: GameState) -> int:
        return ASSIST_INTERVALS_MS.get(state.preferences.ai_speed, ASSIST_INTERVALS_MS[1])

    def start(self):
        if self._unsubscribe is None:
            self._unsubscribe = self.session.subscribe(self._on_state_change)
        self.tick_ticker.start()
        self._sync_assist(self.session.state)

    def stop(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.tick_ticker.stop()
        self.assist_ticker.stop()

    def _on_state_change(self, previous: GameState, current: GameState):
        self._sync_assist(current)

    def _sync_assist(self, state: GameState):
        should_run = state.ai_mode and not state.paused and not state.status.is_terminal
        self.assist_ticker.set_interval(self._assist_interval(state))
        if should_run:
            self.assist_ticker.start()
        else:
            self.assist_ticker.stop()
