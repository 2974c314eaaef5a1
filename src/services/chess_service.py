"""Orchestration of communication from the outer layer to business logic and persistence layers (and the reverse direction)."""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Iterator

from src.api.models import (
    GameResponse,
    GameSnapshot,
    LoadFenRequest,
    MoveRecord,
    MoveRequest,
)
from src.chess.game import GameState, load_fen, reset, submit_move
from src.core.exceptions import GameError, InternalInvariantError
from src.core.shared_types import Color
from src.db.repository import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class _SessionLock:
    lock: threading.RLock = field(default_factory=threading.RLock)
    holders: int = 0


class SessionLocks:
    """
    One lock per session id: a session's read-modify-write cycle runs one request at a time.

    An entry is dropped as soon as no request holds or waits on it.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, _SessionLock] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, session_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(session_id, _SessionLock())
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[session_id]


# one registry per process: every ChessService serializes on the same session locks
SESSION_LOCKS = SessionLocks()


class ChessService:
    """Orchestration of layers for a session's chess game."""

    def __init__(self, store: SessionStore, locks: SessionLocks = SESSION_LOCKS) -> None:
        self.store = store
        self.locks = locks

    # -- Commands ---
    def get_session_state(self, session_id: str) -> GameResponse:
        """Current state. A session without a stored game gets a fresh one."""
        with self.locks.hold(session_id):
            state = self._fetch_or_create(session_id)
        return self._create_response(session_id, state, success=True)

    def submit_move(self, session_id: str, request: MoveRequest) -> GameResponse:
        """Make a move attempt. Only an applied move gets persisted."""
        with self.locks.hold(session_id):
            state = self._fetch_or_create(session_id)
            try:
                new_state = submit_move(
                    state, request.from_square, request.to_square, request.promotion
                )
            except GameError as exc:
                logger.info(
                    "move rejected",
                    extra={
                        "session_id": session_id,
                        "from_square": request.from_square,
                        "to_square": request.to_square,
                        "reason": str(exc),
                    },
                )
                return self._create_rejection(session_id, state, exc)
            except InternalInvariantError:
                logger.exception("corrupt game state", extra={"session_id": session_id})
                raise

            self.store.save(session_id, new_state.to_model())

        logger.info(
            "move applied",
            extra={
                "session_id": session_id,
                "move": new_state.move_history[-1].to_uci(),
                "status": new_state.check_status.status,
            },
        )
        return self._create_response(session_id, new_state, success=True)

    def reset(self, session_id: str) -> GameResponse:
        """Back to the standard starting position."""
        state = reset()
        with self.locks.hold(session_id):
            self.store.save(session_id, state.to_model())
        logger.info("session reset", extra={"session_id": session_id})
        return self._create_response(session_id, state, success=True, message="Session reset.")

    def load_fen(self, session_id: str, request: LoadFenRequest) -> GameResponse:
        """Replace the session's game by the position in the FEN string."""
        with self.locks.hold(session_id):
            try:
                new_state = load_fen(request.fen)
            except GameError as exc:
                state = self._fetch_or_create(session_id)
                logger.info(
                    "FEN rejected",
                    extra={"session_id": session_id, "fen": request.fen, "reason": str(exc)},
                )
                return self._create_rejection(session_id, state, exc)

            self.store.save(session_id, new_state.to_model())

        logger.info("position loaded", extra={"session_id": session_id, "fen": request.fen})
        return self._create_response(session_id, new_state, success=True)

    def clear_session(self, session_id: str) -> None:
        """Forget the session's game altogether (next access starts fresh)."""
        with self.locks.hold(session_id):
            self.store.clear(session_id)

    # -- Internal helpers --
    def _fetch_or_create(self, session_id: str) -> GameState:
        """Empty load means the session needs a fresh initial state (which gets stored right away)."""
        model = self.store.load(session_id)
        if model is None:
            state = GameState.new_game()
            self.store.save(session_id, state.to_model())
            return state
        return GameState.from_model(model)

    def _create_rejection(
        self, session_id: str, state: GameState, error: GameError
    ) -> GameResponse:
        """The unchanged state, with the reason shown as last message (not persisted)."""
        shown = replace(state, last_message=str(error))
        return self._create_response(session_id, shown, success=False)

    def _create_response(
        self,
        session_id: str,
        state: GameState,
        success: bool,
        message: str | None = None,
    ) -> GameResponse:
        """Convert a GameState to a GameResponse."""
        snapshot = GameSnapshot(
            board=state.board.to_codes(),
            move_history=[
                MoveRecord(
                    from_square=move.from_square.to_algebraic(),
                    to_square=move.to_square.to_algebraic(),
                    piece=move.piece.to_code(),
                    promotion=move.promotion,
                    captured=move.captured_piece.to_code() if move.captured_piece else None,
                    is_castle=move.is_castle,
                    timestamp=move.timestamp,
                )
                for move in state.move_history
            ],
            active_color=state.active_color,
            check_status=state.check_status.status,
            king_in_check=state.king_in_check,
            captured_white=[piece.to_code() for piece in state.captured(Color.WHITE)],
            captured_black=[piece.to_code() for piece in state.captured(Color.BLACK)],
            last_message=state.last_message,
            fen=state.to_fen(),
        )
        return GameResponse(
            session_id=session_id,
            success=success,
            message=message or state.last_message,
            state=snapshot,
        )
