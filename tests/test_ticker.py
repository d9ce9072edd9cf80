"""
Unit tests for the periodic session drivers
Uses a manual scheduler in place of tkinter's after/after_cancel
"""

import pytest
from game.ticker import ASSIST_INTERVALS_MS, TICK_INTERVAL_MS, SessionDriver, Ticker


class FakeScheduler:
    """Collects scheduled callbacks; run_pending() fires them in order"""

    def __init__(self):
        self.pending = {}
        self.next_id = 0

    def schedule(self, ms, callback):
        self.next_id += 1
        self.pending[self.next_id] = (ms, callback)
        return self.next_id

    def cancel(self, after_id):
        self.pending.pop(after_id, None)

    def intervals(self):
        return sorted(ms for ms, _ in self.pending.values())

    def run_pending(self):
        due = list(self.pending.items())
        self.pending.clear()
        for _, (_, callback) in due:
            callback()


@pytest.fixture
def scheduler():
    return FakeScheduler()


class TestTicker:
    """Test cases for the fixed-period ticker"""

    def test_fires_and_rearms(self, scheduler):
        calls = []
        ticker = Ticker(scheduler.schedule, scheduler.cancel, 100, lambda: calls.append(1))

        ticker.start()
        scheduler.run_pending()
        scheduler.run_pending()

        assert len(calls) == 2
        assert scheduler.intervals() == [100]

    def test_start_twice_arms_once(self, scheduler):
        ticker = Ticker(scheduler.schedule, scheduler.cancel, 100, lambda: None)
        ticker.start()
        ticker.start()
        assert len(scheduler.pending) == 1

    def test_stop_cancels(self, scheduler):
        calls = []
        ticker = Ticker(scheduler.schedule, scheduler.cancel, 100, lambda: calls.append(1))

        ticker.start()
        ticker.stop()
        scheduler.run_pending()

        assert calls == []
        assert ticker.running is False

    def test_callback_can_stop_ticker(self, scheduler):
        ticker = None

        def once():
            ticker.stop()

        ticker = Ticker(scheduler.schedule, scheduler.cancel, 100, once)
        ticker.start()
        scheduler.run_pending()

        assert scheduler.pending == {}

    def test_set_interval_rearms(self, scheduler):
        ticker = Ticker(scheduler.schedule, scheduler.cancel, 100, lambda: None)
        ticker.start()

        ticker.set_interval(40)

        assert scheduler.intervals() == [40]

    def test_set_interval_while_stopped(self, scheduler):
        ticker = Ticker(scheduler.schedule, scheduler.cancel, 100, lambda: None)
        ticker.set_interval(40)
        assert ticker.interval_ms == 40
        assert scheduler.pending == {}

    @pytest.mark.parametrize("interval", [0, -5])
    def test_invalid_interval(self, scheduler, interval):
        with pytest.raises(ValueError):
            Ticker(scheduler.schedule, scheduler.cancel, interval, lambda: None)


class TestSessionDriver:
    """Test cases for driving a session from the scheduler"""

    def test_start_runs_clock_only(self, session, scheduler):
        driver = SessionDriver(session, scheduler.schedule, scheduler.cancel)

        driver.start()

        assert driver.tick_ticker.running is True
        assert driver.assist_ticker.running is False
        assert scheduler.intervals() == [TICK_INTERVAL_MS]

    def test_clock_ticks_session(self, session, scheduler, clock):
        driver = SessionDriver(session, scheduler.schedule, scheduler.cancel)
        driver.start()
        session.open(4, 4)

        clock.advance(2)
        scheduler.run_pending()

        assert session.state.timer_seconds == 2

    def test_assist_follows_ai_mode(self, session, scheduler):
        driver = SessionDriver(session, scheduler.schedule, scheduler.cancel)
        driver.start()

        session.toggle_auto_assist()
        assert driver.assist_ticker.running is True
        assert driver.assist_ticker.interval_ms == ASSIST_INTERVALS_MS[1]

        session.toggle_auto_assist()
        assert driver.assist_ticker.running is False

    def test_assist_follows_speed(self, session, scheduler):
        driver = SessionDriver(session, scheduler.schedule, scheduler.cancel)
        driver.start()
        session.toggle_auto_assist()

        session.set_ai_speed(4)

        assert scheduler.intervals() == sorted([TICK_INTERVAL_MS, ASSIST_INTERVALS_MS[4]])

    def test_assist_stops_while_paused(self, session, scheduler, start_game, make_board):
        start_game(session, make_board(["*..", "...", "..."]))
        driver = SessionDriver(session, scheduler.schedule, scheduler.cancel)
        driver.start()
        session.toggle_auto_assist()

        session.toggle_pause()
        assert driver.assist_ticker.running is False

        session.toggle_pause()
        assert driver.assist_ticker.running is True

    def test_assist_plays_until_won(self, session, scheduler, start_game, make_board):
        start_game(session, make_board(["*..", "...", "..."], opened=[(1, 1)], flagged=[(0, 0)]))
        driver = SessionDriver(session, scheduler.schedule, scheduler.cancel)
        driver.start()
        session.toggle_auto_assist()

        for _ in range(10):
            scheduler.run_pending()

        assert session.state.status.is_terminal
        assert driver.assist_ticker.running is False

    def test_stop_detaches(self, session, scheduler):
        driver = SessionDriver(session, scheduler.schedule, scheduler.cancel)
        driver.start()
        driver.stop()

        session.toggle_auto_assist()

        assert scheduler.pending == {}
        assert driver.assist_ticker.running is False
