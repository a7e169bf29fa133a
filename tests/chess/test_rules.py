"""Unit tests for /chesstutor/chess/rules.py"""

from typing import Callable

import pytest

from chesstutor.chess.board import Board
from chesstutor.chess.rules import (
    LEGALITY_RULES,
    is_legal_bishop_move,
    is_legal_king_move,
    is_legal_knight_move,
    is_legal_move,
    is_legal_pawn_move,
    is_legal_queen_move,
    is_legal_rook_move,
    is_path_obstructed,
    squares_between,
)
from chesstutor.chess.square import Square, all_squares
from chesstutor.core.shared_types import PieceKind, Side

LegalityFn = Callable[[Square, Square, Board], bool]


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def board_with(pieces: dict[str, int]) -> Board:
    board = Board.empty()
    for name, code in pieces.items():
        square = sq(name)
        board.grid[square.row][square.col] = code
    return board


def rotate(square: Square) -> Square:
    """180 degree rotation of the board"""
    return Square(7 - square.row, 7 - square.col)


def legal_targets(rule: LegalityFn, origin: Square, board: Board) -> set[Square]:
    return {
        target
        for target in all_squares()
        if target != origin and rule(origin, target, board)
    }


# -- SLIDING PATHS --
def test_squares_between_diagonal() -> None:
    assert squares_between(sq("a1"), sq("d4")) == [sq("b2"), sq("c3")]


def test_squares_between_straight() -> None:
    assert squares_between(sq("h8"), sq("h5")) == [sq("h7"), sq("h6")]
    assert squares_between(sq("a1"), sq("b1")) == []


def test_squares_between_not_on_a_line() -> None:
    with pytest.raises(ValueError):
        squares_between(sq("a1"), sq("b3"))


PATHS = [
    (origin, target)
    for origin in all_squares()
    for target in all_squares()
    if origin != target
    and (
        origin.row == target.row
        or origin.col == target.col
        or abs(origin.row - target.row) == abs(origin.col - target.col)
    )
    and max(abs(origin.row - target.row), abs(origin.col - target.col)) >= 2
]


def test_any_blocker_obstructs_the_path() -> None:
    """Every straight or diagonal path of length 2..7, with a piece on any of the squares strictly in between"""
    for origin, target in PATHS:
        for blocker in squares_between(origin, target):
            board = Board.empty()
            board.grid[blocker.row][blocker.col] = -1
            assert is_path_obstructed(origin, target, board)


def test_empty_path_not_obstructed() -> None:
    board = Board.empty()
    for origin, target in PATHS:
        assert not is_path_obstructed(origin, target, board)


def test_endpoints_do_not_obstruct() -> None:
    board = board_with({"a1": 2, "a8": -2})
    assert not is_path_obstructed(sq("a1"), sq("a8"), board)


@pytest.mark.parametrize(
    "rule, code",
    [
        (is_legal_bishop_move, PieceKind.BISHOP),
        (is_legal_rook_move, PieceKind.ROOK),
        (is_legal_queen_move, PieceKind.QUEEN),
    ],
)
def test_sliding_pieces_blocked_on_every_path(rule: LegalityFn, code: int) -> None:
    """Whatever the geometry, a sliding move over a piece is never legal"""
    for origin, target in PATHS:
        for blocker in squares_between(origin, target):
            board = Board.empty()
            board.grid[origin.row][origin.col] = code
            board.grid[blocker.row][blocker.col] = -1
            assert not rule(origin, target, board)


# -- KING / KNIGHT --
def test_king_moves() -> None:
    board = board_with({"e4": 6})
    assert legal_targets(is_legal_king_move, sq("e4"), board) == {
        sq(name) for name in ["d3", "d4", "d5", "e3", "e5", "f3", "f4", "f5"]
    }


def test_king_in_corner() -> None:
    board = board_with({"a1": 6})
    assert legal_targets(is_legal_king_move, sq("a1"), board) == {sq("a2"), sq("b1"), sq("b2")}


def test_king_has_no_castling() -> None:
    board = board_with({"e1": 6, "h1": 2})
    assert not is_legal_king_move(sq("e1"), sq("g1"), board)


def test_knight_moves() -> None:
    board = board_with({"d4": 3})
    assert legal_targets(is_legal_knight_move, sq("d4"), board) == {
        sq(name) for name in ["b3", "b5", "c2", "c6", "e2", "e6", "f3", "f5"]
    }


def test_knight_jumps_over_pieces() -> None:
    board = Board.default()
    assert is_legal_knight_move(sq("g1"), sq("f3"), board)


@pytest.mark.parametrize("rule", [is_legal_king_move, is_legal_knight_move])
def test_king_and_knight_symmetric_under_rotation(rule: LegalityFn) -> None:
    """No side dependence: rotating the board by 180 degrees rotates the set of legal targets"""
    board = Board.empty()
    for origin in all_squares():
        targets = legal_targets(rule, origin, board)
        rotated = legal_targets(rule, rotate(origin), board)
        assert {rotate(target) for target in targets} == rotated


# -- BISHOP / ROOK / QUEEN --
def test_bishop_moves() -> None:
    board = board_with({"c1": 4, "e3": -1})
    assert is_legal_bishop_move(sq("c1"), sq("e3"), board)  # capture
    assert is_legal_bishop_move(sq("c1"), sq("a3"), board)
    assert not is_legal_bishop_move(sq("c1"), sq("f4"), board)  # behind the pawn
    assert not is_legal_bishop_move(sq("c1"), sq("c4"), board)
    assert not is_legal_bishop_move(sq("c1"), sq("d3"), board)


def test_rook_moves() -> None:
    board = board_with({"a1": 2, "a5": 1})
    assert is_legal_rook_move(sq("a1"), sq("h1"), board)
    assert is_legal_rook_move(sq("a1"), sq("a4"), board)
    assert not is_legal_rook_move(sq("a1"), sq("a8"), board)
    assert not is_legal_rook_move(sq("a1"), sq("b2"), board)


def test_queen_combines_rook_and_bishop() -> None:
    board = board_with({"d4": 5})
    origin = sq("d4")
    queen = legal_targets(is_legal_queen_move, origin, board)
    rook = legal_targets(is_legal_rook_move, origin, board)
    bishop = legal_targets(is_legal_bishop_move, origin, board)
    assert queen == rook | bishop
    assert len(queen) == 27
    assert not is_legal_queen_move(origin, sq("e6"), board)


# -- PAWNS --
@pytest.mark.parametrize(
    "origin, target, expected",
    [
        ("e2", "e3", True),
        ("e2", "e4", True),
        ("e2", "e5", False),
        ("e2", "d3", True),  # diagonal onto an empty square is allowed
        ("e2", "e1", False),  # backwards
        ("e2", "f1", False),
        ("e2", "f2", False),  # sideways
        ("e2", "g3", False),
    ],
)
def test_white_pawn_on_empty_board(origin: str, target: str, expected: bool) -> None:
    board = board_with({origin: 1})
    assert is_legal_pawn_move(sq(origin), sq(target), board) is expected


@pytest.mark.parametrize(
    "origin, target, expected",
    [
        ("d7", "d6", True),
        ("d7", "d5", True),
        ("d7", "d4", False),
        ("d7", "c6", True),
        ("d7", "d8", False),
        ("d6", "d4", False),  # double step only from the home row
    ],
)
def test_black_pawn_on_empty_board(origin: str, target: str, expected: bool) -> None:
    board = board_with({origin: -1})
    assert is_legal_pawn_move(sq(origin), sq(target), board) is expected


def test_pawn_double_step_blocked() -> None:
    board = board_with({"e2": 1, "e3": -3})
    assert not is_legal_pawn_move(sq("e2"), sq("e4"), board)


def test_pawn_double_step_only_from_home_row() -> None:
    board = board_with({"e3": 1})
    assert not is_legal_pawn_move(sq("e3"), sq("e5"), board)


def test_pawn_captures_diagonally() -> None:
    board = board_with({"e4": 1, "d5": -1, "f5": 1})
    assert is_legal_pawn_move(sq("e4"), sq("d5"), board)
    assert not is_legal_pawn_move(sq("e4"), sq("f5"), board)


def test_pawn_push_onto_enemy_piece_is_allowed() -> None:
    """Known gap: the forward step does not require an empty destination"""
    board = board_with({"e4": 1, "e5": -1})
    assert is_legal_pawn_move(sq("e4"), sq("e5"), board)


def test_pawn_direction_follows_sign() -> None:
    """Same geometry, opposite sides"""
    white = board_with({"c5": 1})
    black = board_with({"c5": -1})
    assert is_legal_pawn_move(sq("c5"), sq("c6"), white)
    assert not is_legal_pawn_move(sq("c5"), sq("c6"), black)
    assert is_legal_pawn_move(sq("c5"), sq("c4"), black)
    assert not is_legal_pawn_move(sq("c5"), sq("c4"), white)


# -- DISPATCH --
def test_every_piece_kind_has_a_rule() -> None:
    assert set(LEGALITY_RULES) == set(PieceKind)


def test_dispatch_on_origin_piece() -> None:
    board = Board.default()
    assert is_legal_move(sq("g1"), sq("f3"), board)
    assert is_legal_move(sq("e2"), sq("e4"), board)
    assert not is_legal_move(sq("f1"), sq("c4"), board)  # bishop blocked by own pawn
    assert not is_legal_move(sq("e4"), sq("e5"), board)  # nothing on e4


def test_dispatch_for_both_sides() -> None:
    board = Board.default()
    board.place(Side.BLACK, PieceKind.KNIGHT, sq("d4"))
    assert is_legal_move(sq("d4"), sq("e2"), board)
    assert not is_legal_move(sq("d4"), sq("d2"), board)
