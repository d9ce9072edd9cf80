"""
Tiger Sweeper - Inference Engine
Deterministic safe/mine deduction and a local frontier probability estimate

Two layers live here:

- get_certain_move / get_ai_move only ever return moves that follow from a
  single number's constraint.
- get_assist_move layers a heuristic on top of the probability map (and can
  guess). Its moves are NOT guaranteed correct at ambiguous positions.

The probability map is a per-constraint estimate, not a joint distribution:
overlapping constraints are merged with max(), so a cell one number marks as
risky stays risky even if another number is optimistic about it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Set, Tuple

from game.board import Board, Cell, get_neighbors


Coord = Tuple[int, int]


class MoveKind(Enum):
    """Kinds of move the assist can make"""
    OPEN = "open"
    FLAG = "flag"


@dataclass(frozen=True)
class AiMove:
    kind: MoveKind
    x: int
    y: int


class Hint(NamedTuple):
    x: int
    y: int
    mine_probability: int  # percent, 0-100


def _board_of(state) -> Board:
    """Accept either a Board or anything carrying one as .board"""
    return state if isinstance(state, Board) else state.board


def _constraint(board: Board, cell: Cell) -> Tuple[List[Cell], int]:
    """Unopened unflagged neighbours of a cell and how many mines they still hide"""
    neighbors = get_neighbors(board, cell.x, cell.y)
    unopened = [n for n in neighbors if not n.is_open and not n.is_flagged]
    resolved = sum(1 for n in neighbors if n.is_flagged or (n.is_open and n.is_mine))
    return unopened, cell.adjacent_mines - resolved


def _to_percent(probability: float) -> int:
    return max(0, min(100, int(round(probability * 100))))


def get_certain_move(board: Board) -> Optional[AiMove]:
    """
    First provably correct move in row-major order

    For each open numbered cell with unopened neighbours:
      - all of its mines are resolved -> open an unopened neighbour
      - its remaining mines equal its unopened neighbours -> flag one
    """
    for cell in board.cells():
        if not cell.is_numbered():
            continue

        unopened, remaining = _constraint(board, cell)
        if not unopened:
            continue

        target = unopened[0]
        if remaining == 0:
            return AiMove(MoveKind.OPEN, target.x, target.y)
        if remaining == len(unopened):
            return AiMove(MoveKind.FLAG, target.x, target.y)

    return None


def build_probability_map(state) -> Dict[Coord, float]:
    """
    Mine probability for every cell touched by at least one constraint

    Returns:
        Mapping (x, y) -> probability in [0, 1], in row-major order. Cells no
        open number touches are left out rather than given a flat prior.
    """
    board = _board_of(state)
    frontier: Dict[Coord, float] = {}
    certain_safe: Set[Coord] = set()
    certain_mine: Set[Coord] = set()

    for cell in board.cells():
        if not cell.is_open or cell.is_mine:
            continue

        unopened, remaining = _constraint(board, cell)
        if not unopened or remaining < 0:
            continue

        keys = [(n.x, n.y) for n in unopened]
        if remaining == 0:
            certain_safe.update(keys)
        elif remaining == len(unopened):
            certain_mine.update(keys)

        p = remaining / len(unopened)
        for key in keys:
            current = frontier.get(key)
            frontier[key] = p if current is None else max(current, p)

    probabilities: Dict[Coord, float] = {}
    for cell in board.cells():
        key = (cell.x, cell.y)
        if key not in frontier:
            continue
        if key in certain_safe:
            probabilities[key] = 0.0
        elif key in certain_mine:
            probabilities[key] = 1.0
        else:
            probabilities[key] = frontier[key]
    return probabilities


def get_probability_hints(state) -> Dict[Coord, int]:
    """Inferred cells mapped to their mine probability as an integer percentage"""
    return {key: _to_percent(p) for key, p in build_probability_map(state).items()}


def get_uncertain_hint(state) -> Optional[Hint]:
    """Safest inferred cell; ties go to the first cell in row-major order"""
    best_key = None
    best_p = None
    for key, p in build_probability_map(state).items():
        if best_p is None or p < best_p:
            best_key, best_p = key, p

    if best_key is None:
        return None
    return Hint(best_key[0], best_key[1], _to_percent(best_p))


def get_ai_move(state) -> Optional[AiMove]:
    """Deterministic certain move only"""
    return get_certain_move(_board_of(state))


def _guess(state, probabilities: Dict[Coord, float]) -> Optional[AiMove]:
    """Open the cell with the lowest estimated risk, using mine density off the frontier"""
    board = _board_of(state)
    unknown = [cell for cell in board.cells() if not cell.is_open and not cell.is_flagged]
    if not unknown:
        return None

    if not any(cell.is_open for cell in board.cells()):
        center = board.get_cell(board.width // 2, board.height // 2)
        if center is not None and not center.is_flagged:
            return AiMove(MoveKind.OPEN, center.x, center.y)

    remaining = getattr(state, 'remaining_mines', None)
    fallback = 1.0 if remaining is None else max(0.0, remaining / len(unknown))

    best = unknown[0]
    best_p = probabilities.get((best.x, best.y), fallback)
    for cell in unknown[1:]:
        p = probabilities.get((cell.x, cell.y), fallback)
        if p < best_p:
            best, best_p = cell, p
    return AiMove(MoveKind.OPEN, best.x, best.y)


def get_assist_move(state, allow_guess: bool = False) -> Optional[AiMove]:
    """
    Heuristic auto-assist step

    Tries the certain move first, then flags any cell the map puts at 100%
    or opens any cell at 0%. With allow_guess it falls back to opening the
    least risky cell. Only the first step is a proof; the rest is heuristic.
    """
    move = get_ai_move(state)
    if move is not None:
        return move

    hints = get_probability_hints(state)
    for (x, y), percent in hints.items():
        if percent == 100:
            return AiMove(MoveKind.FLAG, x, y)
    for (x, y), percent in hints.items():
        if percent == 0:
            return AiMove(MoveKind.OPEN, x, y)

    if allow_guess:
        return _guess(state, build_probability_map(state))
    return None
