"""The Game board: where the pieces are. No movement rules or turn logic live here."""

from copy import deepcopy
from dataclasses import dataclass
from typing import Iterator, Optional, Self

from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import InternalInvariantError
from src.core.shared_types import Color, PieceType

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

Grid = list[list[Optional[Piece]]]


def empty_grid() -> Grid:
    num_files, num_ranks = BOARD_DIMENSIONS
    return [[None] * num_files for _ in range(num_ranks)]


@dataclass
class Board:
    """8x8 grid, row-major. Row 0 is the 8th rank (black's back rank), row 7 the 1st rank."""

    grid: Grid

    @classmethod
    def empty(cls) -> Self:
        return cls(empty_grid())

    @classmethod
    def standard_setup(cls) -> Self:
        """The canonical opening position"""
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the first part of a FEN string (the piece placement).

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.

        NOTE: FEN lists the 8th rank first, which happens to be row 0 of the grid.
        """
        grid = empty_grid()
        for row, fen_one_rank in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_rank:
                if character.isalpha():
                    # simple case: a letter directly denotes the piece that should be created
                    grid[row][col] = Piece.from_fen(character)
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return cls(grid)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in self.grid)

    @staticmethod
    def _row_to_fen(row: list[Optional[Piece]]) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for piece in row:
            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def to_codes(self) -> list[list[Optional[str]]]:
        """The grid as two-character piece codes (what gets shown to the player)"""
        return [
            [piece.to_code() if piece is not None else None for piece in row]
            for row in self.grid
        ]

    # --- LOOKUP / PLACEMENT ---
    def piece_at(self, square: Square) -> Optional[Piece]:
        return self.grid[square.row][square.col]

    def place(self, square: Square, piece: Optional[Piece]) -> None:
        """Put a piece on the square (None clears it). Whatever stood there is overwritten."""
        self.grid[square.row][square.col] = piece

    def is_empty(self, square: Square) -> bool:
        return self.piece_at(square) is None

    def is_any_occupied(self, squares: list[Square]) -> bool:
        return any(not self.is_empty(square) for square in squares)

    def occupied_squares(self) -> Iterator[tuple[Square, Piece]]:
        for row, pieces in enumerate(self.grid):
            for col, piece in enumerate(pieces):
                if piece is not None:
                    yield Square(col, row), piece

    def locate_color(self, color: Color) -> list[Square]:
        return [square for square, piece in self.occupied_squares() if piece.color == color]

    def locate_pieces(self, piece: Piece) -> list[Square]:
        return [square for square, found in self.occupied_squares() if found == piece]

    def find_king(self, color: Color) -> Optional[Square]:
        kings = self.locate_pieces(Piece(color, PieceType.KING))
        return kings[0] if kings else None

    def locate_king(self, color: Color) -> Square:
        """Full board scan. A missing king can never happen with correct rules, so this is not a player error."""
        king_square = self.find_king(color)
        if king_square is None:
            raise InternalInvariantError(f"No {color} king on the board: {self.to_fen()}")
        return king_square

    # --- MUTATION ---
    def move_piece(self, from_square: Square, to_square: Square) -> Optional[Piece]:
        """Update the position on the board. Returns the piece that got captured (if any)."""
        piece_that_moved = self.piece_at(from_square)
        captured = self.piece_at(to_square)
        self.place(from_square, None)
        self.place(to_square, piece_that_moved)
        return captured

    def copy(self) -> Self:
        return deepcopy(self)
