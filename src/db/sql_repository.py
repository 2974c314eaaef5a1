"""Implementation of SessionStore using SQLAlchemy"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.db.schema import DBChessSession


class SQLSessionStore:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def load(self, session_id: str) -> GameModel | None:
        """Get the session's game, if a record exists."""
        record = self._fetch(session_id)
        if record:
            return self._to_model(record)
        return None

    def save(self, session_id: str, game: GameModel) -> None:
        """Insert a new record or overwrite the existing one."""
        record = self._fetch(session_id)
        if record is None:
            record = DBChessSession(session_id=session_id)
            self.db.add(record)

        record.current_fen = game.current_fen
        record.moves = list(game.moves)
        record.status = game.status
        record.check_color = game.check_color
        record.last_message = game.last_message
        self.db.commit()

    def clear(self, session_id: str) -> None:
        """Remove a session's record (no-op if there is none)."""
        record = self._fetch(session_id)
        if record is None:
            return
        self.db.delete(record)
        self.db.commit()

    def _fetch(self, session_id: str) -> DBChessSession | None:
        query = select(DBChessSession).where(DBChessSession.session_id == session_id)
        return self.db.scalar(query)

    def _to_model(self, record: DBChessSession) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            current_fen=record.current_fen,
            moves=list(record.moves),
            status=record.status,
            check_color=record.check_color,
            last_message=record.last_message,
        )
