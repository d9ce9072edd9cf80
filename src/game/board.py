"""
Tiger Sweeper - Board Model
Cells, boards and the pure helpers every other module builds on
"""

from typing import Iterator, List, Optional, Tuple

from .difficulties import DifficultyConfig


# Fixed scan order for the 8-neighbourhood
DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, -1), (0, -1), (1, -1),
    (-1, 0),           (1, 0),
    (-1, 1),  (0, 1),  (1, 1),
)

MINE_SENTINEL = -1


class Cell:
    """Represents a single cell on the minesweeper board"""

    __slots__ = ('x', 'y', 'is_mine', 'is_open', 'is_flagged', 'is_exploded', 'adjacent_mines')

    def __init__(self, x: int, y: int, is_mine: bool = False, is_open: bool = False,
                 is_flagged: bool = False, is_exploded: bool = False, adjacent_mines: int = 0):
        self.x = x
        self.y = y
        self.is_mine = is_mine
        self.is_open = is_open
        self.is_flagged = is_flagged
        self.is_exploded = is_exploded
        self.adjacent_mines = adjacent_mines

    def copy(self) -> 'Cell':
        """Return an independent copy of this cell"""
        return Cell(self.x, self.y, self.is_mine, self.is_open,
                    self.is_flagged, self.is_exploded, self.adjacent_mines)

    def is_numbered(self) -> bool:
        """Open, safe and touching at least one mine"""
        return self.is_open and not self.is_mine and self.adjacent_mines > 0

    def _key(self) -> tuple:
        return (self.x, self.y, self.is_mine, self.is_open,
                self.is_flagged, self.is_exploded, self.adjacent_mines)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Cell):
            return NotImplemented
        return self._key() == other._key()

    def __repr__(self) -> str:
        flags = ''.join(code for code, on in (
            ('M', self.is_mine), ('O', self.is_open),
            ('F', self.is_flagged), ('X', self.is_exploded)) if on)
        return f"Cell({self.x}, {self.y}, {flags or '-'}, {self.adjacent_mines})"


class Board:
    """
    Rectangular grid of cells indexed as rows[y][x]

    Boards are treated as values: engine operations clone before they
    mutate, so a board held in an undo snapshot is never changed later.
    """

    def __init__(self, rows: List[List[Cell]]):
        self.rows = rows
        self.height = len(rows)
        self.width = len(rows[0]) if rows else 0

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """Get cell at (x, y), or None when outside the board"""
        if self.in_bounds(x, y):
            return self.rows[y][x]
        return None

    def cells(self) -> Iterator[Cell]:
        """Iterate all cells in row-major order (top-to-bottom, left-to-right)"""
        for row in self.rows:
            yield from row

    def clone(self) -> 'Board':
        """Full structural copy; no cell object is shared with the original"""
        return Board([[cell.copy() for cell in row] for row in self.rows])

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.rows == other.rows

    def __repr__(self) -> str:
        return f"Board({self.width}x{self.height})"


def create_empty_board(config: DifficultyConfig) -> Board:
    """Board sized for the difficulty with no mines and every cell closed"""
    return Board([[Cell(x, y) for x in range(config.width)]
                  for y in range(config.height)])


def get_neighbors(board: Board, x: int, y: int) -> List[Cell]:
    """Return the up-to-8 adjacent cells, clipped to the board"""
    neighbors = []
    for dx, dy in DIRECTIONS:
        nx, ny = x + dx, y + dy
        if board.in_bounds(nx, ny):
            neighbors.append(board.rows[ny][nx])
    return neighbors


def calculate_adjacent_counts(board: Board) -> Board:
    """New board where mines carry the sentinel and every other cell its mine-neighbour count"""
    next_board = board.clone()
    for cell in next_board.cells():
        if cell.is_mine:
            cell.adjacent_mines = MINE_SENTINEL
            continue
        cell.adjacent_mines = sum(1 for n in get_neighbors(next_board, cell.x, cell.y) if n.is_mine)
    return next_board


def count_flags(board: Board) -> int:
    return sum(1 for cell in board.cells() if cell.is_flagged)


def count_mines(board: Board) -> int:
    return sum(1 for cell in board.cells() if cell.is_mine)
