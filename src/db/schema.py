"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBChessSession(Base):
    """One row per session: the whole game state is stored (and overwritten) at once."""

    __tablename__ = "chess_sessions"
    session_id: Mapped[str] = mapped_column(primary_key=True)
    current_fen: Mapped[str]
    moves: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    status: Mapped[str]
    check_color: Mapped[Optional[str]]
    last_message: Mapped[str] = mapped_column(default="")
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
