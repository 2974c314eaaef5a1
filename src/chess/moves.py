"""
Geometry/Base movement and capturing rules

Key idea: Use strategy pattern to define the destinations each piece type can reach.
`is_legal()` only answers "does the piece move like that?". Whether the move leaves your own king attacked is checked later by Game.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Self

from src.chess.board import Board
from src.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.exceptions import InputError
from src.core.shared_types import Color, PieceType

Vector = tuple[int, int]

KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Move:
    """A move as it gets recorded in the history (immutable once made)."""

    from_square: Square
    to_square: Square
    piece: Piece
    promotion: Optional[PieceType] = None
    captured_piece: Optional[Piece] = None
    is_castle: bool = False
    timestamp: datetime = field(default_factory=utc_now, compare=False)

    def to_uci(self) -> str:
        """Universal Chess Interface notation: 'e2e4', or 'e7e8q' when promoting"""
        piece_char = PIECE_TO_FEN[self.promotion] if self.promotion else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"

    def to_record(self) -> dict[str, Any]:
        """JSON friendly version of the move"""
        return {
            "from": self.from_square.to_algebraic(),
            "to": self.to_square.to_algebraic(),
            "piece": self.piece.to_code(),
            "promotion": self.promotion.value if self.promotion else None,
            "captured": self.captured_piece.to_code() if self.captured_piece else None,
            "is_castle": self.is_castle,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Self:
        promotion = record.get("promotion")
        captured = record.get("captured")
        return cls(
            from_square=Square.from_algebraic(record["from"]),
            to_square=Square.from_algebraic(record["to"]),
            piece=Piece.from_code(record["piece"]),
            promotion=PieceType(promotion) if promotion else None,
            captured_piece=Piece.from_code(captured) if captured else None,
            is_castle=bool(record.get("is_castle", False)),
            timestamp=datetime.fromisoformat(record["timestamp"]),
        )


# --- MOVEMENT RULES ---
def is_available(target_square: Square, board: Board, player_color: Color) -> bool:
    """Empty, or holds an opponent's piece (self-capture is never allowed)"""
    piece = board.piece_at(target_square)
    return piece is None or piece.color != player_color


def raycasting_destinations(
    square: Square, board: Board, directions: list[Vector]
) -> list[Square]:
    """
    Raycasting algorithm
    -----

    We define move directions and move along them until we hit another piece or
    the edge of the board. Only squares strictly in between count as obstruction:
    the first occupied square is still a destination if the opponent stands there.
    """
    player_color = board.piece_at(square).color

    destinations: list[Square] = []
    for d_col, d_row in directions:
        target_square = square
        while True:
            target_square = target_square.offset(d_col, d_row)
            if not target_square.is_within_bounds():
                break

            piece_found = board.piece_at(target_square)
            if piece_found is not None:
                if piece_found.color != player_color:
                    destinations.append(target_square)
                break

            destinations.append(target_square)
    return destinations


def single_step_destinations(
    square: Square, board: Board, deltas: list[Vector]
) -> list[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a single step along a direction"""
    player_color = board.piece_at(square).color
    destinations: list[Square] = []
    for d_col, d_row in deltas:
        target_square = square.offset(d_col, d_row)
        if target_square.is_within_bounds() and is_available(
            target_square, board, player_color
        ):
            destinations.append(target_square)
    return destinations


def pawn_direction(color: Color) -> int:
    """Row 0 is the 8th rank: white moves UP the board (row decreases), black moves DOWN"""
    return -1 if color == Color.WHITE else 1


def pawn_starting_row(color: Color) -> int:
    return BOARD_DIMENSIONS[1] - 2 if color == Color.WHITE else 1


def promotion_row(color: Color) -> int:
    return 0 if color == Color.WHITE else BOARD_DIMENSIONS[1] - 1


def pawn_destinations(square: Square, board: Board) -> list[Square]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally (only when there is an opponent's piece to take)

    NOTE: no en passant.
    """
    player_color = board.piece_at(square).color
    direction = pawn_direction(player_color)
    destinations: list[Square] = []

    one_step = square.offset(0, direction)
    if one_step.is_within_bounds() and board.is_empty(one_step):
        destinations.append(one_step)

        two_steps = square.offset(0, 2 * direction)
        if square.row == pawn_starting_row(player_color) and board.is_empty(two_steps):
            destinations.append(two_steps)

    for d_col in (-1, 1):
        target_square = square.offset(d_col, direction)
        if not target_square.is_within_bounds():
            continue
        piece_found = board.piece_at(target_square)
        if piece_found is not None and piece_found.color != player_color:
            destinations.append(target_square)
    return destinations


def knight_destinations(square: Square, board: Board) -> list[Square]:
    """Knights jump such that (|d_col|, |d_row|) is (1, 2) or (2, 1)"""
    return single_step_destinations(square, board, KNIGHT_DELTAS)


def bishop_destinations(square: Square, board: Board) -> list[Square]:
    """Bishops move diagonally: |d_row| = |d_col|"""
    return raycasting_destinations(square, board, DIAGONALS)


def rook_destinations(square: Square, board: Board) -> list[Square]:
    """Rooks move either horizontally or vertically"""
    return raycasting_destinations(square, board, STRAIGHTS)


def queen_destinations(square: Square, board: Board) -> list[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return bishop_destinations(square, board) + rook_destinations(square, board)


def king_destinations(square: Square, board: Board) -> list[Square]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (see castling.py).
    """
    return single_step_destinations(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
DestinationsFn = Callable[[Square, Board], list[Square]]
MOVEMENT_RULES: dict[PieceType, DestinationsFn] = {
    PieceType.PAWN: pawn_destinations,
    PieceType.KNIGHT: knight_destinations,
    PieceType.BISHOP: bishop_destinations,
    PieceType.ROOK: rook_destinations,
    PieceType.QUEEN: queen_destinations,
    PieceType.KING: king_destinations,
}


def legal_destinations(square: Square, board: Board) -> list[Square]:
    """Where can the piece on this square go (movement rules only)?"""
    piece = board.piece_at(square)
    if piece is None:
        return []
    return MOVEMENT_RULES[piece.type](square, board)


def is_legal(board: Board, active_color: Color, move: Move) -> bool:
    """Pure check of the movement geometry + capture color. Does not touch the board."""
    piece = board.piece_at(move.from_square)
    if piece is None or piece.color != active_color:
        return False
    if not move.to_square.is_within_bounds():
        return False
    return move.to_square in legal_destinations(move.from_square, board)


# -- PAWN PROMOTION --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]
DEFAULT_PROMOTION = PieceType.QUEEN


def parse_promotion(value: Optional[str]) -> Optional[PieceType]:
    """Accept either the FEN letter ('q') or the full name ('queen'). Nothing supplied means no preference."""
    if value is None or value.strip() == "":
        return None

    normalized = value.strip().lower()
    if normalized in FEN_TO_PIECE:
        piece_type = FEN_TO_PIECE[normalized]
    elif normalized in {piece_type.value for piece_type in PieceType}:
        piece_type = PieceType(normalized)
    else:
        raise InputError(f"Unknown promotion piece: {value!r}")

    if piece_type not in PROMOTION_OPTIONS:
        raise InputError(
            f"Cannot promote to {piece_type}. Pick one from {', '.join(PROMOTION_OPTIONS)}"
        )
    return piece_type


def is_pawn_push_to_promotion_square(piece: Piece, to_square: Square) -> bool:
    """check if the move is a pawn move that reaches the final rank"""
    return piece.type == PieceType.PAWN and to_square.row == promotion_row(piece.color)
