"""Requests and Response models"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType, Status

PieceCode = str


# --- REQUEST MODELS ---
class MoveRequest(BaseModel):
    """Coordinates stay loose strings here: a missing or malformed square is reported in the GameResponse as a rejected move."""

    model_config = ConfigDict(populate_by_name=True)

    from_square: Optional[str] = Field(default=None, alias="from")
    to_square: Optional[str] = Field(default=None, alias="to")
    promotion: Optional[str] = None

    @field_validator("from_square", "to_square", "promotion")
    @classmethod
    def strip_whitespace(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return value.strip()


class LoadFenRequest(BaseModel):
    fen: str

    @field_validator("fen")
    @classmethod
    def strip_fen(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise InvalidRequestError("No FEN string supplied.")
        return value


# --- RESPONSE MODELS ---
class MoveRecord(BaseModel):
    from_square: str
    to_square: str
    piece: PieceCode
    promotion: Optional[PieceType] = None
    captured: Optional[PieceCode] = None
    is_castle: bool = False
    timestamp: datetime


class GameSnapshot(BaseModel):
    board: list[list[Optional[PieceCode]]]
    move_history: list[MoveRecord]
    active_color: Color
    check_status: Status
    king_in_check: Optional[Color]
    captured_white: list[PieceCode]
    captured_black: list[PieceCode]
    last_message: str
    fen: str


class GameResponse(BaseModel):
    """`success` tells apart 'input rejected' (False) from 'command applied' (True)"""

    session_id: str
    success: bool
    message: str
    state: GameSnapshot
