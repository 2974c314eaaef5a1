"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the domain layer (lower) and db layer will use the model defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer or the domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Any, Optional

# Type alias to make GameModel easier to read
MoveRecord = dict[str, Any]


@dataclass
class GameModel:
    """Transport-safe representation of a session's game used between Service, DB, and Game layers.

    NOTE: board, color to move, castling rights and move counters all live inside the FEN string.
    """

    current_fen: str
    moves: list[MoveRecord] = field(default_factory=list)
    status: str = "none"
    check_color: Optional[str] = None
    last_message: str = ""
