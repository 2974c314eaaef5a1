"""Unit tests for /src/chess/square.py"""

from string import ascii_lowercase

import pytest

from src.chess.square import BOARD_DIMENSIONS, Square, is_algebraic


@pytest.mark.parametrize(
    "col, row, notation",
    [
        (col, row, f"{ascii_lowercase[col]}{8 - row}")
        for col in range(8)
        for row in range(8)
    ],
)
def test_creating_from_algebraic(col: int, row: int, notation: str) -> None:
    """'a8' is the top left corner of the grid (0, 0), 'h1' the bottom right (7, 7)"""
    square = Square.from_algebraic(notation)
    assert square.col == col
    assert square.row == row
    assert square.to_algebraic() == notation


def test_row_zero_is_eighth_rank() -> None:
    assert Square.from_algebraic("e8") == Square(4, 0)
    assert Square.from_algebraic("e1") == Square(4, 7)
    assert Square(4, 7).rank == 1


def test_square_within_bounds() -> None:
    """happy case: squares within the dimensions of the board"""
    for col in range(BOARD_DIMENSIONS[0]):
        for row in range(BOARD_DIMENSIONS[1]):
            assert Square(col, row).is_within_bounds()


@pytest.mark.parametrize("col, row", [(8, 0), (0, 8), (-1, 3), (3, -1)])
def test_square_out_of_bounds(col: int, row: int) -> None:
    assert not Square(col, row).is_within_bounds()


@pytest.mark.parametrize("value", ["a1", "h8", "e2", "d5"])
def test_valid_algebraic(value: str) -> None:
    assert is_algebraic(value)


@pytest.mark.parametrize("value", [None, "", "e", "e9", "i2", "E2", "e0", "e22", "2e", " e2"])
def test_invalid_algebraic(value: object) -> None:
    assert not is_algebraic(value)
