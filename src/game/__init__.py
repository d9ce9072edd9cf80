"""
Game package initialization

The session module is imported as game.session; it depends on the ai
package, which in turn builds on game.board.
"""

from .board import Board, Cell, create_empty_board, get_neighbors, calculate_adjacent_counts
from .difficulties import DifficultyConfig, DIFFICULTIES, get_difficulty_config
from .engine import (place_mines_avoiding, open_cell, open_from_number, toggle_flag,
                     reveal_all_mines, check_win, count_remaining_mines)

__all__ = [
    'Board', 'Cell', 'create_empty_board', 'get_neighbors', 'calculate_adjacent_counts',
    'DifficultyConfig', 'DIFFICULTIES', 'get_difficulty_config',
    'place_mines_avoiding', 'open_cell', 'open_from_number', 'toggle_flag',
    'reveal_all_mines', 'check_win', 'count_remaining_mines',
]
