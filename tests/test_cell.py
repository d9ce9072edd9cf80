"""
Unit tests for the Cell class
Tests individual cell state, copying and equality
"""

import pytest
from game.board import Cell


class TestCell:
    """Test cases for the Cell class"""

    def test_cell_initialization(self):
        """Test that cell initializes with correct default values"""
        cell = Cell(3, 5)

        assert cell.x == 3
        assert cell.y == 5
        assert cell.is_mine is False
        assert cell.is_open is False
        assert cell.is_flagged is False
        assert cell.is_exploded is False
        assert cell.adjacent_mines == 0

    def test_copy_is_independent(self):
        """Changing a copy never touches the original"""
        cell = Cell(1, 2, is_mine=True)
        clone = cell.copy()

        clone.is_open = True
        clone.is_exploded = True

        assert clone is not cell
        assert cell.is_open is False
        assert cell.is_exploded is False

    def test_equality_compares_all_fields(self):
        """Cells are equal only when every attribute matches"""
        assert Cell(0, 0) == Cell(0, 0)
        assert Cell(0, 0) != Cell(0, 1)
        assert Cell(0, 0) != Cell(0, 0, is_flagged=True)
        assert Cell(0, 0, adjacent_mines=2) != Cell(0, 0, adjacent_mines=3)

    @pytest.mark.parametrize("kwargs, expected", [
        (dict(is_open=True, adjacent_mines=2), True),
        (dict(is_open=True, adjacent_mines=0), False),
        (dict(is_open=False, adjacent_mines=2), False),
        (dict(is_open=True, is_mine=True, adjacent_mines=-1), False),
    ])
    def test_is_numbered(self, kwargs, expected):
        """Only open safe cells touching mines are numbered"""
        assert Cell(0, 0, **kwargs).is_numbered() is expected

    def test_repr_mentions_state(self):
        cell = Cell(2, 3, is_mine=True, is_open=True, is_exploded=True, adjacent_mines=-1)
        assert repr(cell) == "Cell(2, 3, MOX, -1)"
