"""
Attack detection: which enemy pieces have a given square (usually the king's) in their line of sight?

Instead of generating all the opponent's moves, we look outward FROM the square:
* knight offsets for knights
* diagonal rays for bishops / queens (and pawns / the king when one step away)
* orthogonal rays for rooks / queens (and the king when one step away)
"""

from dataclasses import dataclass
from typing import Optional

from src.chess.board import Board
from src.chess.moves import DIAGONALS, KNIGHT_DELTAS, STRAIGHTS, Vector, pawn_direction
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import Color, PieceType


@dataclass(frozen=True)
class Attacker:
    piece_type: PieceType
    square: Square

    def __str__(self) -> str:
        return f"{self.piece_type} on {self.square}"


def first_piece_along(
    board: Board, square: Square, direction: Vector
) -> Optional[tuple[Square, Piece, int]]:
    """Ray cast from the square until the edge of the board or the first occupied square (returned together with its distance)."""
    d_col, d_row = direction
    target_square = square
    distance = 0
    while True:
        target_square = target_square.offset(d_col, d_row)
        distance += 1
        if not target_square.is_within_bounds():
            return None
        piece_found = board.piece_at(target_square)
        if piece_found is not None:
            return target_square, piece_found, distance


def knight_attackers(board: Board, square: Square, by_color: Color) -> list[Attacker]:
    attackers: list[Attacker] = []
    enemy_knight = Piece(by_color, PieceType.KNIGHT)
    for d_col, d_row in KNIGHT_DELTAS:
        target_square = square.offset(d_col, d_row)
        if target_square.is_within_bounds() and board.piece_at(target_square) == enemy_knight:
            attackers.append(Attacker(PieceType.KNIGHT, target_square))
    return attackers


def diagonal_attackers(board: Board, square: Square, by_color: Color) -> list[Attacker]:
    """
    Bishops and queens attack along the whole diagonal.

    NOTE: Pawn attacks are not symmetric. A pawn one step away only attacks the square if it is standing on the side it comes from:
    a white pawn (moving UP the board) must stand one row BELOW the square.
    """
    attackers: list[Attacker] = []
    for d_col, d_row in DIAGONALS:
        found = first_piece_along(board, square, (d_col, d_row))
        if found is None:
            continue

        piece_square, piece, distance = found
        if piece.color != by_color:
            # friendly piece shields this diagonal
            continue

        if piece.type in (PieceType.BISHOP, PieceType.QUEEN):
            attackers.append(Attacker(piece.type, piece_square))
        elif piece.type == PieceType.PAWN and distance == 1:
            if d_row == -pawn_direction(by_color):
                attackers.append(Attacker(piece.type, piece_square))
        elif piece.type == PieceType.KING and distance == 1:
            attackers.append(Attacker(piece.type, piece_square))
    return attackers


def orthogonal_attackers(board: Board, square: Square, by_color: Color) -> list[Attacker]:
    """Rooks and queens along the ranks and files. File and rank are stepped independently per direction."""
    attackers: list[Attacker] = []
    for direction in STRAIGHTS:
        found = first_piece_along(board, square, direction)
        if found is None:
            continue

        piece_square, piece, distance = found
        if piece.color != by_color:
            continue

        if piece.type in (PieceType.ROOK, PieceType.QUEEN):
            attackers.append(Attacker(piece.type, piece_square))
        elif piece.type == PieceType.KING and distance == 1:
            attackers.append(Attacker(piece.type, piece_square))
    return attackers


def attackers_of_square(board: Board, square: Square, defender_color: Color) -> list[Attacker]:
    """All pieces of the defender's opponent attacking the square. Order: knights, diagonals, orthogonals."""
    by_color = defender_color.opponent
    return (
        knight_attackers(board, square, by_color)
        + diagonal_attackers(board, square, by_color)
        + orthogonal_attackers(board, square, by_color)
    )


def attackers_on(board: Board, king_color: Color) -> list[Attacker]:
    """Find every enemy piece currently attacking the king of the given color (more than one means double check)."""
    king_square = board.locate_king(king_color)
    return attackers_of_square(board, king_square, king_color)


def is_check(board: Board, color: Color) -> bool:
    return len(attackers_on(board, color)) > 0


def is_any_under_attack(board: Board, squares: list[Square], defender_color: Color) -> bool:
    return any(attackers_of_square(board, square, defender_color) for square in squares)
