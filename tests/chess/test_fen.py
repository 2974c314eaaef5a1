"""Unit tests for src/chess/fen.py"""

import pytest

from src.chess.castling import CastlingDirection
from src.chess.fen import (
    STARTING_FEN,
    VALID_CASTLING_ENCODINGS,
    FENState,
    fen_error,
    is_valid_castling_rights,
    is_valid_color_code,
    is_valid_en_passant,
    is_valid_fen,
    is_valid_position,
)
from src.chess.square import Square
from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color


@pytest.mark.parametrize(
    "position, expected",
    [
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR", True),
        ("8/8/8/8/8/8/8/8", True),
        ("4k3/8/8/8/8/8/8/4K3", True),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP", False),  # 7 ranks
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBN", False),  # 7 files on last rank
        ("rnbqkbnr/pppppppp/9/8/8/8/PPPPPPPP/RNBQKBNR", False),
        ("rnbqkbnr/ppppxppp/8/8/8/8/PPPPPPPP/RNBQKBNR", False),
    ],
)
def test_is_valid_position(position: str, expected: bool) -> None:
    assert is_valid_position(position) is expected


@pytest.mark.parametrize("color, expected", [("w", True), ("b", True), ("W", False), ("white", False)])
def test_is_valid_color_code(color: str, expected: bool) -> None:
    assert is_valid_color_code(color) is expected


def test_castling_encodings() -> None:
    """15 ordered subsequences of KQkq + '-'"""
    assert len(VALID_CASTLING_ENCODINGS) == 16
    assert is_valid_castling_rights("KQkq")
    assert is_valid_castling_rights("Kk")
    assert is_valid_castling_rights("-")
    assert not is_valid_castling_rights("QK")
    assert not is_valid_castling_rights("")
    assert not is_valid_castling_rights("KQkqK")


@pytest.mark.parametrize(
    "en_passant, expected",
    [("-", True), ("e3", True), ("d6", True), ("e4", False), ("i3", False), ("", False)],
)
def test_is_valid_en_passant(en_passant: str, expected: bool) -> None:
    assert is_valid_en_passant(en_passant) is expected


@pytest.mark.parametrize(
    "fen, expected",
    [
        (STARTING_FEN, True),
        ("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1", True),
        ("4k3/8/8/8/8/8/8/4K3 w - - 12 40", True),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0", False),  # 5 parts
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1", False),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - -1 1", False),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 0", False),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - zero 1", False),
    ],
)
def test_is_valid_fen(fen: str, expected: bool) -> None:
    assert is_valid_fen(fen) is expected


def test_fen_error_names_the_problem() -> None:
    assert fen_error(STARTING_FEN) is None
    problem = fen_error("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0")
    assert problem == "FEN string must contain 6 space-separated parts."
    problem = fen_error("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w QK - 0 1")
    assert problem is not None and "castling" in problem


def test_starting_position_state() -> None:
    state = FENState.starting_position()
    assert state.position == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
    assert state.color_to_move == Color.WHITE
    assert state.castling_rights == {direction: True for direction in CastlingDirection}
    assert state.en_passant_square is None
    assert state.half_move_clock == 0
    assert state.num_turns == 1


def test_parsing_all_fields() -> None:
    state = FENState.from_fen("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b Kq e3 3 7")
    assert state.color_to_move == Color.BLACK
    assert state.castling_rights[CastlingDirection.WHITE_KING_SIDE]
    assert not state.castling_rights[CastlingDirection.WHITE_QUEEN_SIDE]
    assert not state.castling_rights[CastlingDirection.BLACK_KING_SIDE]
    assert state.castling_rights[CastlingDirection.BLACK_QUEEN_SIDE]
    assert state.en_passant_square == Square.from_algebraic("e3")
    assert state.half_move_clock == 3
    assert state.num_turns == 7


@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
        "r3k2r/8/8/8/8/8/8/R3K2R w Qk - 5 20",
        "4k3/8/8/8/8/8/8/4K3 b - - 0 1",
    ],
)
def test_fen_state_roundtrip(fen: str) -> None:
    assert FENState.from_fen(fen).to_fen() == fen


def test_surrounding_whitespace_is_ignored() -> None:
    assert FENState.from_fen(f"  {STARTING_FEN}\n").to_fen() == STARTING_FEN


@pytest.mark.parametrize(
    "fen",
    [
        "",
        "not a fen at all",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 0",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e5 0 1",
    ],
)
def test_invalid_fen_raises(fen: str) -> None:
    with pytest.raises(InvalidFENError):
        FENState.from_fen(fen)
