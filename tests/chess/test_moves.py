"""Unit tests for /chesstutor/chess/moves.py"""

import pytest

from chesstutor.chess.moves import (
    Move,
    Moved,
    NoOp,
    Rejected,
    parse_move_list,
)
from chesstutor.chess.square import Square
from chesstutor.core.exceptions import InvalidSquareError
from chesstutor.core.shared_types import RejectReason


# -- MOVE CREATION, COORDINATE NOTATION ---
@pytest.mark.parametrize(
    "coordinates, from_alg, to_alg",
    [
        ("e2e4", "e2", "e4"),
        ("a1a8", "a1", "a8"),
        ("g8h7", "g8", "h7"),
        ("H2b7", "h2", "b7"),
    ],
)
def test_creating_move_from_coordinates(coordinates: str, from_alg: str, to_alg: str) -> None:
    move = Move.from_coordinates(coordinates)
    assert move.from_square == Square.from_algebraic(from_alg)
    assert move.to_square == Square.from_algebraic(to_alg)


def test_converting_into_coordinates() -> None:
    move = Move(Square.from_algebraic("g3"), Square.from_algebraic("a7"))
    assert move.to_coordinates() == "g3a7"


@pytest.mark.parametrize("coordinates", ["e2e", "e2e4x", "e7e8qq", "", "e2x4", "e9e4"])
def test_invalid_coordinates(coordinates: str) -> None:
    with pytest.raises(InvalidSquareError):
        Move.from_coordinates(coordinates)


def test_promotion_suffix_is_dropped() -> None:
    assert Move.from_coordinates("e7e8q") == Move.from_coordinates("e7e8")
    assert Move.from_coordinates("b2a1N") == Move.from_coordinates("b2a1")
    assert parse_move_list("d6d7 e8f7 d7d8q") == parse_move_list("d6d7 e8f7 d7d8")


def test_move_equality() -> None:
    assert Move.from_coordinates("e2e4") == Move(Square(6, 4), Square(4, 4))
    assert Move.from_coordinates("e2e4") != Move.from_coordinates("e4e2")


def test_parse_move_list() -> None:
    moves = parse_move_list("e2e4 e7e5 g1f3")
    assert [move.to_coordinates() for move in moves] == ["e2e4", "e7e5", "g1f3"]


def test_parse_move_list_ignores_extra_spaces() -> None:
    assert len(parse_move_list(" e2e4  e7e5 ")) == 2
    assert parse_move_list("") == []


# -- OUTCOMES ---
def test_moved_without_capture() -> None:
    outcome = Moved()
    assert not outcome.is_capture
    assert not outcome.king_taken


@pytest.mark.parametrize(
    "captured, king_taken",
    [(-1, False), (5, False), (-6, True), (6, True)],
)
def test_moved_from_captured(captured: int, king_taken: bool) -> None:
    outcome = Moved.from_captured(captured)
    assert outcome.is_capture
    assert outcome.king_taken is king_taken


def test_outcomes_are_values() -> None:
    assert NoOp() == NoOp()
    assert Rejected(RejectReason.ILLEGAL_MOVE) == Rejected(RejectReason.ILLEGAL_MOVE)
    assert Rejected(RejectReason.ILLEGAL_MOVE) != Rejected(RejectReason.FRIENDLY_FIRE)
