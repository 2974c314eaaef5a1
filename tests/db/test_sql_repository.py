"""Unit tests for src/db/sql_repository.py"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.db.schema import DBChessSession
from src.db.sql_repository import SQLSessionStore

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
AFTER_E4_FEN = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"

E2E4 = {
    "from": "e2",
    "to": "e4",
    "piece": "wp",
    "promotion": None,
    "captured": None,
    "is_castle": False,
    "timestamp": "2024-05-01T12:00:00+00:00",
}


def test_load_unknown_session(sql_store: SQLSessionStore) -> None:
    """Nothing stored yet: any session id gives None"""
    assert sql_store.load("nobody") is None


def test_save_then_load(sql_store: SQLSessionStore) -> None:
    model = GameModel(current_fen=STARTING_FEN, last_message="Session ready. White to move.")
    sql_store.save("session-1", model)

    found = sql_store.load("session-1")
    assert isinstance(found, GameModel)
    assert found == model


def test_save_overwrites(sql_store: SQLSessionStore, db_session: Session) -> None:
    """One row per session: saving again replaces the whole game"""
    sql_store.save("session-1", GameModel(current_fen=STARTING_FEN))
    updated = GameModel(
        current_fen=AFTER_E4_FEN,
        moves=[E2E4],
        status="check",
        check_color="black",
        last_message="Check!",
    )
    sql_store.save("session-1", updated)

    assert sql_store.load("session-1") == updated
    rows = db_session.scalars(select(DBChessSession)).all()
    assert len(rows) == 1


def test_sessions_are_independent(sql_store: SQLSessionStore) -> None:
    sql_store.save("a", GameModel(current_fen=STARTING_FEN))
    sql_store.save("b", GameModel(current_fen=AFTER_E4_FEN, moves=[E2E4]))

    assert sql_store.load("a") == GameModel(current_fen=STARTING_FEN)
    found = sql_store.load("b")
    assert found is not None
    assert found.moves == [E2E4]


def test_clear(sql_store: SQLSessionStore) -> None:
    sql_store.save("session-1", GameModel(current_fen=STARTING_FEN))
    sql_store.clear("session-1")
    assert sql_store.load("session-1") is None


def test_clear_unknown_session_is_a_no_op(sql_store: SQLSessionStore) -> None:
    sql_store.clear("never-stored")
    assert sql_store.load("never-stored") is None


def test_timestamps_are_set(sql_store: SQLSessionStore, db_session: Session) -> None:
    sql_store.save("session-1", GameModel(current_fen=STARTING_FEN))
    row = db_session.scalar(select(DBChessSession).where(DBChessSession.session_id == "session-1"))
    assert row is not None
    assert row.created_at is not None
    assert row.updated_at is not None
