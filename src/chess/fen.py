"""
FEN (Forsyth-Edwards Notation) parsing and writing.

<board position string> <active color> <castling rights> <en passant square> <half move clock> <full move number>

ex) The standard starting position has a FEN
rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
i.e. it is white to move, all castling options available, no en passant square, no half moves and we are in the first turn.
"""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.castling import (
    CASTLING_ORDER,
    CastlingRights,
    castling_from_fen,
    castling_to_fen,
)
from src.chess.pieces import FEN_TO_PIECE
from src.chess.square import BOARD_DIMENSIONS, Square, is_algebraic
from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# every subsequence of KQkq (in that order), or '-'
VALID_CASTLING_ENCODINGS: set[str] = {"-"} | {
    "".join(
        direction.value
        for bit, direction in enumerate(CASTLING_ORDER)
        if mask & (1 << bit)
    )
    for mask in range(1, 1 << len(CASTLING_ORDER))
}


def fen_error(fen: str) -> Optional[str]:
    """
    Check if given string follows proper FEN notation.

    Returns a description of the first problem found, or None when the string is valid.
    """
    parts = fen.split(" ")
    if len(parts) != 6:
        return "FEN string must contain 6 space-separated parts."

    position, color, castling, en_passant, half_move_clock, full_move_number = parts
    if not is_valid_position(position):
        return f"Invalid piece placement: {position!r}"

    if not is_valid_color_code(color):
        return f"Active color must be 'w' or 'b', got {color!r}"

    if not is_valid_castling_rights(castling):
        return f"Invalid castling availability: {castling!r}"

    if not is_valid_en_passant(en_passant):
        return f"Invalid en passant square: {en_passant!r}"

    if not (
        is_valid_move_counter(half_move_clock)
        and is_valid_move_counter(full_move_number)
    ):
        return "Move counters must be non-negative integers."

    if int(full_move_number) < 1:
        return "The full move number starts at 1."
    return None


def is_valid_fen(fen: str) -> bool:
    return fen_error(fen) is None


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            # make sure every character is valid
            if character.isdigit():
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                # immediately invalidate if the character is anything else
                return False

        # make sure you are creating a correctly sized board
        if file_count != num_files:
            return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """A valid castling encoding has either KQkq, KQk, etc. or a '-' if all rights have been revoked."""
    return castling in VALID_CASTLING_ENCODINGS


def is_valid_en_passant(en_passant: str) -> bool:
    """Either '-' or a square on the 3rd / 6th rank (the square a pawn just skipped over)"""
    if en_passant == "-":
        return True
    return is_algebraic(en_passant) and en_passant[1] in {"3", "6"}


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdigit()


@dataclass
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    * The string to describe the board position is described in the Board class
    * The active color is either "w" or "b"
    * Castling rights are denoted as "k" for king-side or "q" for queen-side. Capital letters for the white pieces, small letters for the black pieces.
    * The en passant square indicates the square a pawn skipped over. If not available a "-" is used.
    * The half move clock counts the number of moves made since the last pawn move or capture.
    * The number of turns starts at 1 and increments after every move black makes.
    """

    position: str
    color_to_move: Color
    castling_rights: CastlingRights
    en_passant_square: Optional[Square]
    half_move_clock: int
    num_turns: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the FEN into data"""
        fen = fen.strip()
        problem = fen_error(fen)
        if problem is not None:
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {problem}")

        (
            position,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            num_turns,
        ) = fen.split(" ")

        color_to_move = Color.WHITE if active_color == "w" else Color.BLACK
        en_passant_square = (
            Square.from_algebraic(en_passant_algebraic)
            if en_passant_algebraic != "-"
            else None
        )
        return cls(
            position,
            color_to_move,
            castling_from_fen(castling_str),
            en_passant_square,
            int(half_move_clock),
            int(num_turns),
        )

    def to_fen(self) -> str:
        """reverse operation: write a FEN from the given data"""
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        castling_str = castling_to_fen(self.castling_rights)
        en_passant_algebraic = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        return f"{self.position} {active_color} {castling_str} {en_passant_algebraic} {self.half_move_clock} {self.num_turns}"

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)
