"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

import re
from dataclasses import dataclass

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)

ALGEBRAIC_PATTERN = re.compile(r"^[a-h][1-8]$")


def is_algebraic(sq: object) -> bool:
    """'a1' - 'h8' and nothing else (also rejects None, 'e10', 'E2', etc.)"""
    return isinstance(sq, str) and ALGEBRAIC_PATTERN.fullmatch(sq) is not None


@dataclass(frozen=True)
class Square:
    """
    Grid coordinates of a square.

    * col 0 - 7 maps to the a - h files
    * row 0 - 7 is the row index in the grid, where row 0 is the 8th rank (row = 8 - rank)
    """

    col: int
    row: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' gets converted to (0, 0), 'h1' to (7, 7)"""
        col = ord(sq[0]) - ord("a")
        row = BOARD_DIMENSIONS[1] - int(sq[1])
        return cls(col, row)

    def to_algebraic(self) -> str:
        return f"{chr(self.col + ord('a'))}{BOARD_DIMENSIONS[1] - self.row}"

    @property
    def rank(self) -> int:
        return BOARD_DIMENSIONS[1] - self.row

    def is_within_bounds(self) -> bool:
        return (0 <= self.col < BOARD_DIMENSIONS[0]) and (
            0 <= self.row < BOARD_DIMENSIONS[1]
        )

    def offset(self, d_col: int, d_row: int) -> Square:
        return Square(self.col + d_col, self.row + d_row)

    def __str__(self) -> str:
        return self.to_algebraic()
