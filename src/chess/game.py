"""
The Game will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn -->
validate the move, update the position, classify the new position (check / checkmate / stalemate) and hand the new GameState back.
"""

import logging
from copy import deepcopy
from dataclasses import dataclass
from typing import Iterator, Optional, Self

from src.chess.board import Board
from src.chess.castling import (
    CASTLING_RULES,
    CastlingRights,
    CastlingSquares,
    all_castling_rights,
    castling_attempt,
    castling_options,
    castling_refusal,
    rights_matching_board,
    try_castle,
    updated_castling_rights,
)
from src.chess.check import Attacker, attackers_on
from src.chess.fen import FENState
from src.chess.moves import (
    DEFAULT_PROMOTION,
    Move,
    is_legal,
    is_pawn_push_to_promotion_square,
    legal_destinations,
    parse_promotion,
    promotion_row,
)
from src.chess.pieces import Piece
from src.chess.square import Square, is_algebraic
from src.core.exceptions import (
    GameOverError,
    IllegalMoveError,
    InputError,
    InvalidFENError,
    RepositoryError,
    TurnViolationError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, PieceType, Status

logger = logging.getLogger(__name__)

SESSION_READY_MESSAGE = "Session ready. White to move."


@dataclass(frozen=True)
class CheckStatus:
    """Status of the side to move. `color` is the side in check / checkmated (None otherwise)."""

    status: Status = Status.NONE
    color: Optional[Color] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (Status.CHECKMATE, Status.STALEMATE)


@dataclass
class GameState:
    """Everything there is to know about one session's game."""

    board: Board
    active_color: Color
    move_history: list[Move]
    check_status: CheckStatus
    last_message: str
    castling_rights: CastlingRights
    half_move_clock: int = 0
    fullmove_number: int = 1

    @classmethod
    def new_game(cls) -> Self:
        """Standard starting position, white to move, nothing played yet."""
        return cls(
            board=Board.standard_setup(),
            active_color=Color.WHITE,
            move_history=[],
            check_status=CheckStatus(),
            last_message=SESSION_READY_MESSAGE,
            castling_rights=all_castling_rights(),
        )

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """
        Load a position from FEN.
        ---

        On top of the grammar, the position must be playable:
        * exactly one king per color
        * no pawns on the first / last rank
        * the side that just moved cannot still be in check

        Castling rights are kept only where king and rook still stand on their home squares.

        NOTE: The en passant square is validated, but not used (there is no en passant in this game).
        """
        fen_state = FENState.from_fen(fen)
        board = Board.from_fen(fen_state.position)

        for color in Color:
            kings = board.locate_pieces(Piece(color, PieceType.KING))
            if len(kings) != 1:
                raise InvalidFENError(
                    f"Position must contain exactly one {color} king, found {len(kings)}."
                )

        for square, piece in board.occupied_squares():
            if piece.type == PieceType.PAWN and square.row in (
                promotion_row(Color.WHITE),
                promotion_row(Color.BLACK),
            ):
                raise InvalidFENError(f"Pawn on {square} cannot stand on the first or last rank.")

        if attackers_on(board, fen_state.color_to_move.opponent):
            raise InvalidFENError(
                f"{fen_state.color_to_move.opponent} is in check, but it is {fen_state.color_to_move} to move."
            )

        state = cls(
            board=board,
            active_color=fen_state.color_to_move,
            move_history=[],
            check_status=CheckStatus(),
            last_message="Position loaded from FEN.",
            castling_rights=rights_matching_board(fen_state.castling_rights, board),
            half_move_clock=fen_state.half_move_clock,
            fullmove_number=fen_state.num_turns,
        )
        game = Game(state)
        game.update_status(success_message=state.last_message)
        return game.state

    def to_fen(self) -> str:
        return FENState(
            position=self.board.to_fen(),
            color_to_move=self.active_color,
            castling_rights=self.castling_rights,
            en_passant_square=None,
            half_move_clock=self.half_move_clock,
            num_turns=self.fullmove_number,
        ).to_fen()

    @property
    def is_over(self) -> bool:
        return self.check_status.is_terminal

    @property
    def king_in_check(self) -> Optional[Color]:
        if self.check_status.status in (Status.CHECK, Status.CHECKMATE):
            return self.check_status.color
        return None

    def captured(self, color: Color) -> list[Piece]:
        """Pieces of the given color that have been taken so far (in the order they were taken)"""
        return [
            move.captured_piece
            for move in self.move_history
            if move.captured_piece is not None and move.captured_piece.color == color
        ]

    # --- CONVERSION FROM / TO THE SERVICE LAYER MODEL ---
    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a GameState from the information the Service layer actually has"""
        try:
            fen_state = FENState.from_fen(model.current_fen)
            status = Status(model.status)
            check_color = Color(model.check_color) if model.check_color else None
            moves = [Move.from_record(record) for record in model.moves]
        except (InvalidFENError, ValueError, KeyError) as exc:
            raise RepositoryError(f"Stored game data is corrupt: {exc}") from exc

        return cls(
            board=Board.from_fen(fen_state.position),
            active_color=fen_state.color_to_move,
            move_history=moves,
            check_status=CheckStatus(status, check_color),
            last_message=model.last_message,
            castling_rights=fen_state.castling_rights,
            half_move_clock=fen_state.half_move_clock,
            fullmove_number=fen_state.num_turns,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            current_fen=self.to_fen(),
            moves=[move.to_record() for move in self.move_history],
            status=self.check_status.status.value,
            check_color=self.check_status.color.value if self.check_status.color else None,
            last_message=self.last_message,
        )


class Game:
    """
    Plays one move on its own copy of the GameState.

    The state handed in is never modified: if the move gets rejected, the caller still holds the untouched state.
    """

    def __init__(self, state: GameState) -> None:
        self.state = deepcopy(state)

    def submit_move(
        self,
        from_square: Optional[str],
        to_square: Optional[str],
        promotion: Optional[str] = None,
    ) -> GameState:
        """
        Attempt to make a move
        -----

        1. the game must still be going
        2. validate the coordinates and find the piece to move
        3. make sure it is your turn
        4. castling attempt? move king + rook when allowed
        5. otherwise check movement rules, and make sure your own king is not (left) attacked
        6. update the board, the move history, castling rights and the counters
        7. flip the color to move and classify the new position
        """
        if self.state.is_over:
            raise GameOverError(
                f"The game is over ({self.state.check_status.status}). Reset to start a new game."
            )

        start = self._parse_square(from_square, "from")
        target = self._parse_square(to_square, "to")
        piece = self.state.board.piece_at(start)
        if piece is None:
            raise InputError("No piece at 'from' coordinate")

        self._assert_your_turn(piece)
        promote_to = (
            parse_promotion(promotion)
            if is_pawn_push_to_promotion_square(piece, target)
            else None
        )
        candidate = Move(start, target, piece)

        # castling short-circuits the generic king rule
        castling_message: Optional[str] = None
        direction = castling_attempt(candidate, self.state.active_color)
        if direction is not None:
            castle = try_castle(self.state, candidate)
            if castle is not None:
                return self._apply(candidate, promote_to, castle)
            castling_message = castling_refusal(self.state, direction)

        if not is_legal(self.state.board, self.state.active_color, candidate):
            raise IllegalMoveError(
                castling_message
                or f"Illegal move: {piece} cannot move from {start} to {target}."
            )

        if self._is_putting_yourself_in_check(candidate):
            if self.state.check_status.status == Status.CHECK:
                raise IllegalMoveError("Illegal move: your king is still in check after this move.")
            raise IllegalMoveError("Illegal move: this would leave your king in check.")

        return self._apply(candidate, promote_to)

    def legal_moves(self, color: Optional[Color] = None) -> list[Move]:
        """All moves the given color (default: side to move) could make in the current position."""
        return list(self._iter_legal_moves(color or self.state.active_color))

    def update_status(self, success_message: str) -> None:
        """
        Classify the position for the side to move
        ---

        * attacked + at least one legal move --> check
        * attacked + no legal move --> checkmate
        * not attacked + no legal move --> stalemate
        """
        color = self.state.active_color
        attackers = attackers_on(self.state.board, color)
        has_legal_move = self._has_legal_move(color)

        if attackers and has_legal_move:
            self.state.check_status = CheckStatus(Status.CHECK, color)
            self.state.last_message = f"Check! The {color} king is attacked by {describe(attackers)}."
        elif attackers:
            self.state.check_status = CheckStatus(Status.CHECKMATE, color)
            self.state.last_message = f"Checkmate! {color.opponent} wins."
        elif not has_legal_move:
            self.state.check_status = CheckStatus(Status.STALEMATE)
            self.state.last_message = f"Stalemate! {color} has no legal move. The game is a draw."
        else:
            self.state.check_status = CheckStatus()
            self.state.last_message = success_message

        logger.debug(
            "position classified",
            extra={"status": self.state.check_status.status, "to_move": color},
        )

    # -- PRIVATE HELPERS ---
    @staticmethod
    def _parse_square(value: Optional[str], name: str) -> Square:
        if not value:
            raise InputError(f"Couldn't find a '{name}' coordinate")
        if not is_algebraic(value):
            raise InputError(f"Not a valid '{name}' option: {value!r}")
        return Square.from_algebraic(value)

    def _assert_your_turn(self, piece: Piece) -> None:
        if piece.color != self.state.active_color:
            raise TurnViolationError(f"It's not {piece.color}'s turn.")

    def _apply(
        self,
        candidate: Move,
        promote_to: Optional[PieceType],
        castle: Optional[CastlingSquares] = None,
    ) -> GameState:
        """Update the board, history, castling rights, counters, color to move and status."""
        board = self.state.board
        mover = self.state.active_color

        captured = board.move_piece(candidate.from_square, candidate.to_square)
        if castle is not None:
            board.move_piece(castle.rook_from, castle.rook_to)

        promotion: Optional[PieceType] = None
        if is_pawn_push_to_promotion_square(candidate.piece, candidate.to_square):
            promotion = promote_to or DEFAULT_PROMOTION
            board.place(candidate.to_square, candidate.piece.promoted_to(promotion))

        move = Move(
            from_square=candidate.from_square,
            to_square=candidate.to_square,
            piece=candidate.piece,
            promotion=promotion,
            captured_piece=captured,
            is_castle=castle is not None,
        )
        self.state.move_history.append(move)
        self.state.castling_rights = updated_castling_rights(self.state.castling_rights, move)

        # move counters
        if move.piece.type == PieceType.PAWN or captured is not None:
            self.state.half_move_clock = 0
        else:
            self.state.half_move_clock += 1
        if mover == Color.BLACK:
            self.state.fullmove_number += 1

        self.state.active_color = mover.opponent
        self.update_status(
            success_message="Castling move successfully made."
            if move.is_castle
            else "Move successfully made."
        )
        return self.state

    def _is_putting_yourself_in_check(self, move: Move) -> bool:
        """Return True if your own king is attacked on the board after the move.

        plan:
        1. Copy the board
        2. make the candidate move
        3. determine if king is in check on the new board
        """
        board = self.state.board.copy()
        board.move_piece(move.from_square, move.to_square)
        return len(attackers_on(board, move.piece.color)) > 0

    def _iter_legal_moves(self, color: Color) -> Iterator[Move]:
        """
        1. candidate moves using the basic movement rules for all pieces
        2. remove the ones that put (or leave) you in check
        3. castling moves that are allowed
        """
        board = self.state.board
        for square in board.locate_color(color):
            piece = board.piece_at(square)
            for target in legal_destinations(square, board):
                move = Move(square, target, piece)
                if not self._is_putting_yourself_in_check(move):
                    yield move

        for direction in castling_options(color):
            if castling_refusal(self.state, direction) is None:
                rule = CASTLING_RULES[direction]
                yield Move(
                    rule.king_from,
                    rule.king_to,
                    Piece(color, PieceType.KING),
                    is_castle=True,
                )

    def _has_legal_move(self, color: Color) -> bool:
        return next(self._iter_legal_moves(color), None) is not None


def describe(attackers: list[Attacker]) -> str:
    """ex) 'queen on h4 and knight on f3'"""
    return " and ".join(str(attacker) for attacker in attackers)


# --- DOMAIN LAYER API CALLED BY SERVICE ---
def submit_move(
    state: GameState,
    from_square: Optional[str],
    to_square: Optional[str],
    promotion: Optional[str] = None,
) -> GameState:
    """Play one move. Returns the new state, raises a GameError (and leaves `state` untouched) when rejected."""
    return Game(state).submit_move(from_square, to_square, promotion)


def reset() -> GameState:
    return GameState.new_game()


def load_fen(fen: str) -> GameState:
    return GameState.from_fen(fen)
