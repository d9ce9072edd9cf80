"""
Tiger Sweeper Game API for automated agents
Provides a clean interface for scripts and agents to drive a game session
"""

import json
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from game.board import count_flags
from game.session import GameSession, GameStatus
from .inference import build_probability_map


# Visible cell encoding shared by get_game_state and get_board_array
HIDDEN = -3
FLAGGED = -2
OPEN_MINE = -1


class Action(Enum):
    """Available actions for the agent"""
    REVEAL = "reveal"
    FLAG = "flag"
    UNFLAG = "unflag"


class SessionAPI:
    """
    API for agents to interact with a GameSession
    Handles cell coordinates and provides board state snapshots
    """

    def __init__(self, session: Optional[GameSession] = None, **session_kwargs):
        """
        Args:
            session: Session to drive; a new one is created from
                session_kwargs when omitted
        """
        self.session = session or GameSession(**session_kwargs)
        self.action_history: List[Dict[str, Any]] = []

    @property
    def width(self) -> int:
        return self.session.state.board.width

    @property
    def height(self) -> int:
        return self.session.state.board.height

    def reset_game(self, difficulty: Optional[str] = None) -> Dict[str, Any]:
        """Start a new game and return its initial state"""
        self.session.reset(difficulty)
        self.action_history.clear()
        return self.get_game_state()

    def take_action(self, x: int, y: int, action: Action) -> Dict[str, Any]:
        """
        Take an action at the specified coordinates

        Returns:
            Dict with 'success' (whether the board changed), the action, the
            coordinates and the updated game state
        """
        before = self.session.state
        success = False

        cell = before.board.get_cell(x, y)
        if cell is not None:
            if action == Action.REVEAL and not cell.is_open and not cell.is_flagged:
                success = self.session.open(x, y).board != before.board
            elif action == Action.FLAG and not cell.is_open and not cell.is_flagged:
                success = self.session.toggle_flag(x, y).board != before.board
            elif action == Action.UNFLAG and cell.is_flagged:
                success = self.session.toggle_flag(x, y).board != before.board

        after = self.session.state
        self.action_history.append({
            'x': x,
            'y': y,
            'action': action.value,
            'success': success,
            'game_state_before': before.status.value,
            'game_state_after': after.status.value,
            'lives_after': after.lives,
        })

        return {
            'success': success,
            'action': action.value,
            'coordinates': (x, y),
            'state': self.get_game_state(),
        }

    def _visible_value(self, cell) -> int:
        if cell.is_open:
            return OPEN_MINE if cell.is_mine else cell.adjacent_mines
        if cell.is_flagged:
            return FLAGGED
        return HIDDEN

    def get_game_state(self) -> Dict[str, Any]:
        """Current game state as plain Python data (no mine positions for hidden cells)"""
        state = self.session.state
        visible_board = [[self._visible_value(cell) for cell in row] for row in state.board.rows]
        return {
            'board_size': (state.board.width, state.board.height),
            'difficulty': state.difficulty,
            'game_state': state.status.value,
            'paused': state.paused,
            'lives': state.lives,
            'remaining_mines': state.remaining_mines,
            'timer_seconds': state.timer_seconds,
            'visible_board': visible_board,  # -3=hidden, -2=flag, -1=open mine, 0-8=numbers
            'exploded_cell': state.exploded_cell,
            'cells_revealed': sum(1 for cell in state.board.cells() if cell.is_open),
            'flags_used': count_flags(state.board),
            'action_count': len(self.action_history),
            'is_game_over': state.status.is_terminal,
            'is_won': state.status is GameStatus.WON,
            'is_lost': state.status is GameStatus.LOST,
        }

    def get_board_array(self) -> np.ndarray:
        """
        Board as a float32 array of shape (height, width, 3)

        Channels:
            0: Visible value (-3=hidden, -2=flag, -1=open mine, 0-8=numbers)
            1: Is open (0 or 1)
            2: Is flagged (0 or 1)
        """
        board = self.session.state.board
        array = np.zeros((board.height, board.width, 3), dtype=np.float32)
        for cell in board.cells():
            array[cell.y, cell.x, 0] = self._visible_value(cell)
            array[cell.y, cell.x, 1] = 1.0 if cell.is_open else 0.0
            array[cell.y, cell.x, 2] = 1.0 if cell.is_flagged else 0.0
        return array

    def get_probability_array(self) -> np.ndarray:
        """Mine probability per cell as float32 (height, width); nan where nothing is inferred"""
        board = self.session.state.board
        array = np.full((board.height, board.width), np.nan, dtype=np.float32)
        for (x, y), p in build_probability_map(self.session.state).items():
            array[y, x] = p
        return array

    def get_valid_actions(self) -> List[Tuple[int, int, Action]]:
        """All (x, y, action) tuples that would change the board"""
        state = self.session.state
        if state.status.is_terminal or state.paused:
            return []

        valid_actions = []
        for cell in state.board.cells():
            if cell.is_flagged:
                valid_actions.append((cell.x, cell.y, Action.UNFLAG))
            elif not cell.is_open:
                valid_actions.append((cell.x, cell.y, Action.REVEAL))
                valid_actions.append((cell.x, cell.y, Action.FLAG))
        return valid_actions

    def export_game_state(self) -> str:
        """Current game state as a JSON string"""
        return json.dumps(self.get_game_state(), indent=2)

    def get_action_history(self) -> List[Dict[str, Any]]:
        return self.action_history.copy()
