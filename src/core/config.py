"""Settings read from the environment (defaults are fine for local play)."""

import os

DATABASE_URL: str = os.environ.get(
    "SOLO_CHESS_DATABASE_URL", "sqlite:///./solo_chess.db"
)
DB_ECHO: bool = os.environ.get("SOLO_CHESS_DB_ECHO", "0").lower() in {
    "1",
    "true",
    "yes",
}
