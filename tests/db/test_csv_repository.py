"""Unit tests for chesstutor/db/csv_repository.py"""

import random
from pathlib import Path
from typing import Callable

import pytest

from chesstutor.core.models import AttemptModel
from chesstutor.db.csv_repository import (
    CSVPuzzleRepository,
    load_puzzle_csv,
    parse_puzzle_line,
)

HEADER = "PuzzleId,FEN,Moves,Rating,RatingDeviation,Popularity,NbPlays,Themes,GameUrl,OpeningTags"


@pytest.fixture
def csv_path(tmp_path: Path, puzzle_line: Callable[..., str]) -> Path:
    """Two playable puzzles among lines that have to be skipped"""
    lines = [
        HEADER,
        puzzle_line(puzzle_id="first"),
        puzzle_line(puzzle_id="castling", fen="r3k3/8/8/8/8/8/8/4K3 b q - 0 1"),
        "",
        puzzle_line(puzzle_id="passant", themes="enPassant crushing"),
        ",".join(puzzle_line(puzzle_id="short").split(",")[:8]),
        puzzle_line(puzzle_id="second", moves="a1a7 g8f8 a7a8 f8e7"),
    ]
    path = tmp_path / "puzzles.csv"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_parse_line(puzzle_line: Callable[..., str]) -> None:
    puzzle = parse_puzzle_line(puzzle_line())
    assert puzzle is not None
    assert puzzle.puzzle_id == "00sHx"
    assert puzzle.moves == "a1a8 g8h7"
    assert puzzle.rating == 1500


def test_parse_line_skips(puzzle_line: Callable[..., str], caplog: pytest.LogCaptureFixture) -> None:
    assert parse_puzzle_line(puzzle_line(themes="enPassant")) is None
    assert caplog.records == []

    # passes the filter, but the record cannot be read
    assert parse_puzzle_line(puzzle_line(moves="a1a9")) is None
    assert "Skipping puzzle line" in caplog.text

    # a ninth rank: the filter only looks at the castling field
    assert parse_puzzle_line(puzzle_line(fen="8/8/8/8/8/8/8/8/K7 w - - 0 1")) is None


def test_load_file(csv_path: Path) -> None:
    puzzles = load_puzzle_csv(csv_path)
    assert [puzzle.puzzle_id for puzzle in puzzles] == ["first", "second"]


def test_get_puzzle(csv_path: Path) -> None:
    repo = CSVPuzzleRepository(csv_path)
    puzzle = repo.get_puzzle("second")
    assert puzzle is not None
    assert puzzle.moves == "a1a7 g8f8 a7a8 f8e7"
    assert repo.get_puzzle("unknown") is None
    assert repo.get_puzzle("castling") is None


def test_random_puzzle(csv_path: Path) -> None:
    repo = CSVPuzzleRepository(csv_path, rng=random.Random(7))
    drawn = {repo.random_puzzle().puzzle_id for _ in range(50)}
    assert drawn == {"first", "second"}


def test_random_puzzle_gives_up(
    tmp_path: Path, puzzle_line: Callable[..., str], caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "unplayable.csv"
    path.write_text(puzzle_line(themes="enPassant") + "\n", encoding="utf-8")
    repo = CSVPuzzleRepository(path, max_draws=3)
    assert repo.random_puzzle() is None
    assert "after 3 draws" in caplog.text


def test_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text(HEADER + "\n", encoding="utf-8")
    assert CSVPuzzleRepository(path).random_puzzle() is None


def test_added_puzzles_stay_in_memory(csv_path: Path) -> None:
    repo = CSVPuzzleRepository(csv_path)
    extra = parse_puzzle_line(",".join(["third", "6k1/8/8/8/8/8/8/R5K1 w - - 0 1", "a1a8 g8h7", "900", "0", "0", "0", "mate", ""]))
    known = repo.get_puzzle("first")
    assert extra is not None and known is not None

    assert repo.add_puzzles([extra, known]) == 1
    assert repo.get_puzzle("third") == extra
    assert "third" not in csv_path.read_text(encoding="utf-8")


def test_rating_history(csv_path: Path) -> None:
    repo = CSVPuzzleRepository(csv_path)
    assert repo.latest_rating() is None
    repo.record_attempt(AttemptModel("first", hint_used=False, elo_change=16, rating_after=1216))
    assert repo.latest_rating() == 1216
