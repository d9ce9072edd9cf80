"""
Tiger Sweeper - Game Session
Owns the authoritative game state and sequences player and assist actions
against the board and inference engines (lives, pause, undo, timer)
"""

import random
import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ai.inference import MoveKind, get_assist_move, get_probability_hints, get_uncertain_hint
from .board import Board, count_mines, create_empty_board
from .difficulties import DEFAULT_DIFFICULTY, DIFFICULTIES, get_difficulty_config
from .engine import (check_win, count_remaining_mines, open_cell, open_from_number,
                     place_mines_avoiding, reveal_all_mines, toggle_flag)


Coord = Tuple[int, int]

DEFAULT_LIVES = 3

THEMES = ('modern', 'windowsXP')
SOUND_PRESETS = ('soft', 'retro', 'arcade')
MIN_CELL_SIZE, MAX_CELL_SIZE = 18, 40
MIN_AI_SPEED, MAX_AI_SPEED = 1, 4


class GameStatus(Enum):
    """Enumeration for different game states"""
    IDLE = "idle"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.WON, GameStatus.LOST)


@dataclass(frozen=True)
class Preferences:
    """Cross-game settings that survive reset and difficulty changes"""
    theme: str = 'modern'
    ai_speed: int = 1
    show_probabilities: bool = False
    sound_enabled: bool = True
    sound_volume: float = 0.35
    sound_preset: str = 'soft'
    cell_size: int = 28


@dataclass(frozen=True)
class UndoSnapshot:
    """Per-game fields captured before a board-changing action"""
    board: Board
    status: GameStatus
    lives: int
    timer_seconds: int
    remaining_mines: int
    hint_cell: Optional[Coord]
    hint_confidence: Optional[int]
    hint_uncertain: bool
    exploded_cell: Optional[Coord]


@dataclass(frozen=True)
class GameState:
    """Single source of truth for one session; replaced, never mutated"""
    board: Board
    difficulty: str
    status: GameStatus = GameStatus.IDLE
    paused: bool = False
    paused_at: Optional[float] = None
    started_at: Optional[float] = None
    timer_seconds: int = 0
    lives: int = DEFAULT_LIVES
    remaining_mines: int = 0
    exploded_cell: Optional[Coord] = None
    hint_cell: Optional[Coord] = None
    hint_confidence: Optional[int] = None
    hint_uncertain: bool = False
    ai_mode: bool = False
    auto_solve_used: bool = False
    probability_assist_used: bool = False
    assist_count: int = 0
    preferences: Preferences = field(default_factory=Preferences)
    undo_stack: Tuple[UndoSnapshot, ...] = ()

    def snapshot(self) -> UndoSnapshot:
        return UndoSnapshot(
            board=self.board,
            status=self.status,
            lives=self.lives,
            timer_seconds=self.timer_seconds,
            remaining_mines=self.remaining_mines,
            hint_cell=self.hint_cell,
            hint_confidence=self.hint_confidence,
            hint_uncertain=self.hint_uncertain,
            exploded_cell=self.exploded_cell,
        )

    def restore(self, snapshot: UndoSnapshot, undo_stack: Tuple[UndoSnapshot, ...]) -> 'GameState':
        """
        Live state with the snapshot put back

        started_at is not part of the snapshot: the live value already has
        every pause shifted out of it, so only a return to idle clears it.
        """
        return replace(
            self,
            board=snapshot.board,
            status=snapshot.status,
            lives=snapshot.lives,
            timer_seconds=snapshot.timer_seconds,
            started_at=None if snapshot.status is GameStatus.IDLE else self.started_at,
            remaining_mines=snapshot.remaining_mines,
            hint_cell=snapshot.hint_cell,
            hint_confidence=snapshot.hint_confidence,
            hint_uncertain=snapshot.hint_uncertain,
            exploded_cell=snapshot.exploded_cell,
            undo_stack=undo_stack,
        )

    @property
    def can_undo(self) -> bool:
        return len(self.undo_stack) > 0


StateObserver = Callable[[GameState, GameState], None]


def _mark_exploded(board: Board, coords: List[Coord]) -> Board:
    next_board = board.clone()
    for x, y in coords:
        next_board.rows[y][x].is_exploded = True
    return next_board


class GameSession:
    """
    Controller for one player's sequence of games

    Every public action runs to completion before returning. Requests that
    make no sense in the current state (acting while paused, opening after
    the game ended, undoing with nothing to undo) are silently ignored.
    Observers registered with subscribe() are called as
    observer(previous_state, new_state) after each change.
    """

    def __init__(self, difficulty: str = DEFAULT_DIFFICULTY, lives: int = DEFAULT_LIVES,
                 clock: Callable[[], float] = time.time,
                 rng: Optional[random.Random] = None,
                 preferences: Optional[Preferences] = None):
        get_difficulty_config(difficulty)
        if lives < 1:
            raise ValueError("lives must be at least 1")

        self.initial_lives = lives
        self._clock = clock
        self._rng = rng
        self._observers: List[StateObserver] = []
        self.state = self._initial_state(difficulty, preferences or Preferences(), ai_mode=False)

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """Register an observer; returns a function that unregisters it"""
        self._observers.append(observer)

        def unsubscribe():
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _commit(self, new_state: GameState) -> GameState:
        previous = self.state
        if new_state is previous:
            return previous
        self.state = new_state
        for observer in list(self._observers):
            observer(previous, new_state)
        return new_state

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _initial_state(self, difficulty: str, preferences: Preferences, ai_mode: bool) -> GameState:
        config = get_difficulty_config(difficulty)
        return GameState(
            board=create_empty_board(config),
            difficulty=difficulty,
            lives=self.initial_lives,
            remaining_mines=config.mine_count,
            ai_mode=ai_mode,
            probability_assist_used=preferences.show_probabilities,
            preferences=preferences,
        )

    def _total_mines(self, state: GameState, board: Board, status: GameStatus) -> int:
        if status is GameStatus.IDLE:
            return DIFFICULTIES[state.difficulty].mine_count
        return count_mines(board)

    def _elapsed(self, started_at: Optional[float]) -> int:
        if started_at is None:
            return 0
        return max(0, int(self._clock() - started_at))

    def _accepts_moves(self, state: GameState) -> bool:
        return not state.paused and not state.status.is_terminal

    # ------------------------------------------------------------------
    # Board actions
    # ------------------------------------------------------------------

    def _apply_open(self, state: GameState, x: int, y: int) -> GameState:
        target = state.board.get_cell(x, y)
        if target is None or target.is_flagged or not self._accepts_moves(state):
            return state

        board = state.board
        status = state.status
        started_at = state.started_at

        if status is GameStatus.IDLE:
            config = DIFFICULTIES[state.difficulty]
            board = place_mines_avoiding(board, config.mine_count, x, y, self._rng)
            status = GameStatus.PLAYING
            started_at = self._clock()

        if target.is_open:
            next_board = open_from_number(board, x, y)
        else:
            next_board = open_cell(board, x, y)

        if next_board == state.board:
            return state

        exploded = [(cell.x, cell.y) for cell in next_board.cells()
                    if cell.is_open and cell.is_mine and not board.rows[cell.y][cell.x].is_open]

        lives = state.lives
        exploded_cell = state.exploded_cell
        if exploded:
            next_board = _mark_exploded(next_board, exploded)
            lives = max(0, lives - 1)
            exploded_cell = exploded[0]
            if lives == 0:
                next_board = reveal_all_mines(next_board)
                status = GameStatus.LOST

        if status is GameStatus.PLAYING and check_win(next_board):
            status = GameStatus.WON

        timer_seconds = state.timer_seconds
        if status.is_terminal:
            timer_seconds = self._elapsed(started_at)

        return replace(
            state,
            board=next_board,
            status=status,
            lives=lives,
            started_at=started_at,
            timer_seconds=timer_seconds,
            exploded_cell=exploded_cell,
            remaining_mines=count_remaining_mines(next_board, self._total_mines(state, next_board, status)),
            hint_cell=None,
            hint_confidence=None,
            hint_uncertain=False,
            undo_stack=state.undo_stack + (state.snapshot(),),
        )

    def _apply_toggle_flag(self, state: GameState, x: int, y: int) -> GameState:
        if not self._accepts_moves(state):
            return state

        next_board = toggle_flag(state.board, x, y)
        if next_board == state.board:
            return state

        status = state.status
        timer_seconds = state.timer_seconds
        if status is GameStatus.PLAYING and check_win(next_board):
            status = GameStatus.WON
            timer_seconds = self._elapsed(state.started_at)

        return replace(
            state,
            board=next_board,
            status=status,
            timer_seconds=timer_seconds,
            remaining_mines=count_remaining_mines(next_board, self._total_mines(state, next_board, status)),
            undo_stack=state.undo_stack + (state.snapshot(),),
        )

    def open(self, x: int, y: int) -> GameState:
        """Open a closed cell, or chord when the cell is already open"""
        return self._commit(self._apply_open(self.state, x, y))

    def toggle_flag(self, x: int, y: int) -> GameState:
        """Toggle flag on a closed cell"""
        return self._commit(self._apply_toggle_flag(self.state, x, y))

    def undo(self) -> GameState:
        """Restore the state captured before the last board-changing action"""
        state = self.state
        if state.paused or not state.undo_stack:
            return state
        restored = state.restore(state.undo_stack[-1], state.undo_stack[:-1])
        if restored.status is GameStatus.PLAYING:
            restored = replace(restored, timer_seconds=self._elapsed(restored.started_at))
        return self._commit(restored)

    def reset(self, difficulty: Optional[str] = None) -> GameState:
        """Start a fresh game, optionally switching difficulty; preferences are kept"""
        state = self.state
        if difficulty is not None and difficulty not in DIFFICULTIES:
            return state
        return self._commit(self._initial_state(difficulty or state.difficulty,
                                                state.preferences, state.ai_mode))

    def set_difficulty(self, difficulty: str) -> GameState:
        return self.reset(difficulty)

    # ------------------------------------------------------------------
    # Timer and pause
    # ------------------------------------------------------------------

    def tick(self) -> GameState:
        """Refresh the elapsed time while a game is running"""
        state = self.state
        if state.status is not GameStatus.PLAYING or state.paused or state.started_at is None:
            return state
        elapsed = self._elapsed(state.started_at)
        if elapsed == state.timer_seconds:
            return state
        return self._commit(replace(state, timer_seconds=elapsed))

    def toggle_pause(self) -> GameState:
        """
        Pause or resume the running game

        Resuming moves started_at forward by the time spent paused, so the
        elapsed time never includes pauses.
        """
        state = self.state
        if state.status is not GameStatus.PLAYING and not state.paused:
            return state

        now = self._clock()
        if not state.paused:
            return self._commit(replace(state, paused=True, paused_at=now,
                                        timer_seconds=self._elapsed(state.started_at)))

        started_at = state.started_at
        if started_at is not None and state.paused_at is not None:
            started_at += now - state.paused_at
        return self._commit(replace(state, paused=False, paused_at=None, started_at=started_at,
                                    timer_seconds=self._elapsed(started_at)))

    # ------------------------------------------------------------------
    # Assistance
    # ------------------------------------------------------------------

    def hint(self) -> GameState:
        """Point at the safest inferred cell without touching the board"""
        state = self.state
        if not self._accepts_moves(state):
            return state

        found = get_uncertain_hint(state)
        if found is None:
            if state.hint_cell is None:
                return state
            return self._commit(replace(state, hint_cell=None, hint_confidence=None,
                                        hint_uncertain=False))

        return self._commit(replace(
            state,
            hint_cell=(found.x, found.y),
            hint_confidence=100 - found.mine_probability,
            hint_uncertain=found.mine_probability > 0,
            assist_count=state.assist_count + 1,
            probability_assist_used=True,
        ))

    def toggle_auto_assist(self) -> GameState:
        return self._commit(replace(self.state, ai_mode=not self.state.ai_mode))

    def assist_step(self) -> GameState:
        """
        One auto-assist move, replayed through the same open/flag transitions
        a player would use, so it can cost lives and win the game like any
        other move
        """
        state = self.state
        if not self._accepts_moves(state):
            return state

        move = get_assist_move(state)
        if move is None:
            return state

        if move.kind is MoveKind.FLAG:
            next_state = self._apply_toggle_flag(state, move.x, move.y)
        else:
            next_state = self._apply_open(state, move.x, move.y)
        if next_state is state:
            return state

        return self._commit(replace(next_state, auto_solve_used=True,
                                    assist_count=next_state.assist_count + 1))

    def probability_hints(self) -> Dict[Coord, int]:
        """Overlay percentages, empty unless the overlay is switched on"""
        if not self.state.preferences.show_probabilities:
            return {}
        return get_probability_hints(self.state)

    # ------------------------------------------------------------------
    # Preferences
    # ------------------------------------------------------------------

    def _set_preferences(self, **changes) -> GameState:
        state = self.state
        preferences = replace(state.preferences, **changes)
        if preferences == state.preferences:
            return state
        return self._commit(replace(state, preferences=preferences))

    def set_show_probabilities(self, enabled: bool) -> GameState:
        """Switch the overlay; turning it on during a game marks the game as assisted"""
        state = self.state
        enabled = bool(enabled)
        preferences = replace(state.preferences, show_probabilities=enabled)
        assisted = state.probability_assist_used or (enabled and not state.status.is_terminal)
        if preferences == state.preferences and assisted == state.probability_assist_used:
            return state
        return self._commit(replace(state, preferences=preferences,
                                    probability_assist_used=assisted))

    def set_ai_speed(self, speed: int) -> GameState:
        return self._set_preferences(ai_speed=max(MIN_AI_SPEED, min(MAX_AI_SPEED, int(speed))))

    def set_theme(self, theme: str) -> GameState:
        if theme not in THEMES:
            return self.state
        return self._set_preferences(theme=theme)

    def set_cell_size(self, size: float) -> GameState:
        return self._set_preferences(cell_size=max(MIN_CELL_SIZE, min(MAX_CELL_SIZE, int(round(size)))))

    def set_sound_enabled(self, enabled: bool) -> GameState:
        return self._set_preferences(sound_enabled=bool(enabled))

    def set_sound_volume(self, volume: float) -> GameState:
        return self._set_preferences(sound_volume=max(0.0, min(1.0, float(volume))))

    def set_sound_preset(self, preset: str) -> GameState:
        if preset not in SOUND_PRESETS:
            return self.state
        return self._set_preferences(sound_preset=preset)
