"""Protocol session store (SQLAlchemy implementation in sql_repository.py, tests use a dictionary)"""

from typing import Protocol

from src.core.models import GameModel


class SessionStore(Protocol):
    """Persistence layer orchestration: one stored game per session id"""

    def load(self, session_id: str) -> GameModel | None:
        """Get the session's game, if a record exists."""
        ...

    def save(self, session_id: str, game: GameModel) -> None:
        """Store the whole game (creates the record if needed)."""
        ...

    def clear(self, session_id: str) -> None:
        """Forget the session's game."""
        ...
