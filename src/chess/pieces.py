"""Defines the chess pieces and their encodings (two-character codes like 'wk', and FEN letters)"""

from dataclasses import dataclass
from typing import Self

from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

CODE_TO_COLOR: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}
COLOR_TO_CODE: dict[Color, str] = {value: key for key, value in CODE_TO_COLOR.items()}


@dataclass(frozen=True)
class Piece:
    color: Color
    type: PieceType

    @classmethod
    def from_code(cls, code: str) -> Self:
        """Two characters: color letter + piece letter. ex) 'wk' is the white king, 'bp' a black pawn"""
        return cls(CODE_TO_COLOR[code[0]], FEN_TO_PIECE[code[1]])

    def to_code(self) -> str:
        return f"{COLOR_TO_CODE[self.color]}{PIECE_TO_FEN[self.type]}"

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(color, piece_type)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    def promoted_to(self, new_type: PieceType) -> Self:
        """Pieces are immutable, so promotion hands back a new piece of the same color."""
        return type(self)(self.color, new_type)

    def __str__(self) -> str:
        return f"{self.color} {self.type}"
