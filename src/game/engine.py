"""
Tiger Sweeper - Generation & Reveal Engine
Mine placement, flood-fill opening, chording, flagging and win detection.
Every function takes a board and returns a new one; the input is never mutated.
"""

import random
from collections import deque
from typing import Deque, List, Optional, Tuple

from .board import Board, Cell, calculate_adjacent_counts, get_neighbors


def place_mines_avoiding(board: Board, mine_count: int, safe_x: int, safe_y: int,
                         rng: Optional[random.Random] = None) -> Board:
    """
    Place mines randomly outside the 3x3 block around the first click

    Args:
        board: Mine-less board to populate
        mine_count: Requested number of mines
        safe_x: X of the first click
        safe_y: Y of the first click
        rng: Optional random source, defaults to the module-level generator

    Returns:
        New board with mines and adjacency counts. When fewer candidates than
        mine_count exist, every candidate becomes a mine.
    """
    rng = rng or random
    next_board = board.clone()

    valid_positions: List[Tuple[int, int]] = [
        (cell.x, cell.y) for cell in next_board.cells()
        if abs(cell.x - safe_x) > 1 or abs(cell.y - safe_y) > 1
    ]

    # Fisher-Yates shuffle, then take the first mines_to_place positions
    rng.shuffle(valid_positions)
    mines_to_place = min(max(mine_count, 0), len(valid_positions))
    for x, y in valid_positions[:mines_to_place]:
        next_board.rows[y][x].is_mine = True

    return calculate_adjacent_counts(next_board)


def _flood_open_from(board: Board, start: Cell) -> None:
    """Breadth-first reveal over the zero-adjacency region, in place on a cloned board"""
    queue: Deque[Cell] = deque([start])
    while queue:
        cell = queue.popleft()
        if cell.is_open or cell.is_flagged:
            continue
        cell.is_open = True

        if cell.is_mine or cell.adjacent_mines != 0:
            continue

        for neighbor in get_neighbors(board, cell.x, cell.y):
            if not neighbor.is_open and not neighbor.is_flagged and not neighbor.is_mine:
                queue.append(neighbor)


def open_cell(board: Board, x: int, y: int) -> Board:
    """Open a closed, unflagged cell and flood-fill from it when it touches no mines"""
    next_board = board.clone()
    start = next_board.get_cell(x, y)
    if start is None or start.is_open or start.is_flagged:
        return next_board
    _flood_open_from(next_board, start)
    return next_board


def _resolved_neighbors(neighbors: List[Cell]) -> int:
    """Neighbours already accounted for as mines: flagged, or opened mines"""
    return sum(1 for n in neighbors if n.is_flagged or (n.is_open and n.is_mine))


def open_from_number(board: Board, x: int, y: int) -> Board:
    """
    Chord on an open numbered cell

    Flags every unopened neighbour when they must all be mines, opens every
    unopened neighbour when the number is already satisfied, and otherwise
    leaves the board unchanged. Neighbours are opened one by one, without
    flood spread.
    """
    next_board = board.clone()
    center = next_board.get_cell(x, y)
    if center is None or not center.is_open or center.adjacent_mines <= 0:
        return next_board

    neighbors = get_neighbors(next_board, x, y)
    unopened = [n for n in neighbors if not n.is_open and not n.is_flagged]
    remaining = center.adjacent_mines - _resolved_neighbors(neighbors)
    if remaining < 0 or not unopened:
        return next_board

    if remaining == len(unopened):
        for neighbor in unopened:
            neighbor.is_flagged = True
    elif remaining == 0:
        for neighbor in unopened:
            neighbor.is_open = True

    return next_board


def toggle_flag(board: Board, x: int, y: int) -> Board:
    """Flip the flag on a closed cell; open cells are left alone"""
    next_board = board.clone()
    cell = next_board.get_cell(x, y)
    if cell is None or cell.is_open:
        return next_board
    cell.is_flagged = not cell.is_flagged
    return next_board


def reveal_all_mines(board: Board) -> Board:
    """Open every mine for the end-of-game display; flags are kept"""
    next_board = board.clone()
    for cell in next_board.cells():
        if cell.is_mine:
            cell.is_open = True
    return next_board


def check_win(board: Board) -> bool:
    """True when every non-mine cell is open"""
    return all(cell.is_open for cell in board.cells() if not cell.is_mine)


def count_remaining_mines(board: Board, total_mines: int) -> int:
    """Mines not yet accounted for by a flag or by having been opened"""
    resolved = sum(1 for cell in board.cells()
                   if cell.is_flagged or (cell.is_open and cell.is_mine))
    return total_mines - resolved
