"""
Castling rules.

A castling attempt is a king move from its home square to one of the four fixed targets (g1, c1, g8, c8).
The rook relocation that goes with it is handed back, so the Game can move both pieces in one go.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Self

from src.chess.board import Board
from src.chess.check import attackers_on, is_any_under_attack
from src.chess.moves import Move
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import Color, PieceType


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK


CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)

CastlingRights = dict[CastlingDirection, bool]


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


class CastlingState(Protocol):
    """Just the parts of the game state castling needs"""

    board: Board
    active_color: Color
    castling_rights: CastlingRights


# --- CASTLING RIGHTS ---
def all_castling_rights() -> CastlingRights:
    return {direction: True for direction in CastlingDirection}


def castling_from_fen(castle_fen: str) -> CastlingRights:
    """parse the part of the FEN string that encodes castling rights"""
    return {
        direction: (direction.value in castle_fen) for direction in CastlingDirection
    }


def castling_to_fen(castling_rights: CastlingRights) -> str:
    """create the part of the FEN string that encodes castling rights"""
    castling_chars = "".join(
        [direction.value for direction in CASTLING_ORDER if castling_rights[direction]]
    )
    return castling_chars or "-"


def castling_options(color: Color) -> list[CastlingDirection]:
    return [direction for direction in CASTLING_ORDER if direction.color == color]


def rights_matching_board(rights: CastlingRights, board: Board) -> CastlingRights:
    """
    Drop every right whose king or rook is not on its home square.

    A FEN can claim rights the position cannot back up (ex. "K" with the rook on h5).
    """
    new_rights = dict(rights)
    for direction, squares in CASTLING_RULES.items():
        king_home = board.piece_at(squares.king_from) == Piece(direction.color, PieceType.KING)
        rook_home = board.piece_at(squares.rook_from) == Piece(direction.color, PieceType.ROOK)
        if not (king_home and rook_home):
            new_rights[direction] = False
    return new_rights


def updated_castling_rights(rights: CastlingRights, move: Move) -> CastlingRights:
    """
    Checks which rights should get revoked after the move
    ----

    1. If you are moving your king (castling included) --> revoke both of yours
    2. If you are moving a rook away from its starting corner --> revoke that direction
    3. If you are taking your opponent's rook on its starting corner --> revoke that direction for the opponent
    """
    new_rights = dict(rights)
    mover = move.piece.color

    if move.piece.type == PieceType.KING:
        for direction in castling_options(mover):
            new_rights[direction] = False

    for direction, squares in CASTLING_RULES.items():
        if direction.color == mover and move.piece.type == PieceType.ROOK:
            if move.from_square == squares.rook_from:
                new_rights[direction] = False

        if direction.color != mover and move.captured_piece == Piece(
            direction.color, PieceType.ROOK
        ):
            if move.to_square == squares.rook_from:
                new_rights[direction] = False

    return new_rights


# --- CASTLING MOVES ---
def squares_between_on_rank(from_square: Square, to_square: Square) -> list[Square]:
    """
    Find the squares strictly in between the two squares specified that are on the same rank

    Needed for checking if you can still castle (nothing may stand between king and rook)
    """
    if from_square.row != to_square.row:
        raise ValueError(
            f"squares_between_on_rank requires both squares to lie on the same rank. \n from: {from_square}\n to:{to_square}"
        )

    step = 1 if to_square.col > from_square.col else -1
    return [
        Square(col, from_square.row)
        for col in range(from_square.col + step, to_square.col, step)
    ]


def castling_path(direction: CastlingDirection) -> list[Square]:
    """Squares between king and rook. All must be empty."""
    rule = CASTLING_RULES[direction]
    return squares_between_on_rank(rule.king_from, rule.rook_from)


def king_transit(direction: CastlingDirection) -> list[Square]:
    """Squares the king crosses or lands on. None of them may be attacked."""
    rule = CASTLING_RULES[direction]
    return squares_between_on_rank(rule.king_from, rule.king_to) + [rule.king_to]


def castling_attempt(move: Move, active_color: Color) -> Optional[CastlingDirection]:
    """Is this king move one of the castling moves of the side to move?"""
    if move.piece != Piece(active_color, PieceType.KING):
        return None

    for direction in castling_options(active_color):
        rule = CASTLING_RULES[direction]
        if move.from_square == rule.king_from and move.to_square == rule.king_to:
            return direction
    return None


def castling_refusal(state: CastlingState, direction: CastlingDirection) -> Optional[str]:
    """
    Reason why castling in this direction is not allowed (None if it is)
    ---

    **you are allowed to castle if**

    * Neither the king nor this rook has moved (castling rights are not yet revoked).
    * King and rook are still on their starting squares.
    * There are no pieces in between the king and the rook.
    * You are not currently in check (you cannot castle out of check).
    * The king does not pass through or land on an attacked square.
    """
    color = direction.color
    rule = CASTLING_RULES[direction]

    if not state.castling_rights.get(direction, False):
        return "Castling rights revoked: the king or this rook has already moved."

    if state.board.piece_at(rule.king_from) != Piece(color, PieceType.KING):
        return f"No {color} king in starting position for castling."

    if state.board.piece_at(rule.rook_from) != Piece(color, PieceType.ROOK):
        return f"No {color} rook in starting position for castling."

    if state.board.is_any_occupied(castling_path(direction)):
        return "Pieces in the way for castling."

    if attackers_on(state.board, color):
        return "Cannot castle out of check."

    if is_any_under_attack(state.board, king_transit(direction), color):
        return "Cannot castle through or into an attacked square."

    return None


def try_castle(state: CastlingState, move: Move) -> Optional[CastlingSquares]:
    """Return the squares to move both pieces when this move is a legal castling move, otherwise None."""
    direction = castling_attempt(move, state.active_color)
    if direction is None:
        return None
    if castling_refusal(state, direction) is not None:
        return None
    return CASTLING_RULES[direction]
