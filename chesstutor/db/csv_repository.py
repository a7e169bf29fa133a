"""
Implementation of (Puzzle)Repository reading a puzzle CSV file (the format of the lichess puzzle database).

The file is read-only: attempts are only kept in memory.
"""

import logging
import random
from pathlib import Path
from typing import Optional

from chesstutor.chess.puzzle import PuzzleRecord, is_valid_puzzle_line
from chesstutor.core.exceptions import MalformedPuzzleRecordError
from chesstutor.core.models import AttemptModel, PuzzleId, PuzzleModel

_LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_DRAWS = 500
HEADER_PREFIX = "PuzzleId,"


def read_lines(path: Path) -> list[str]:
    """All non-empty lines, without the header"""
    with path.open(encoding="utf-8") as csv_file:
        lines = [line.strip() for line in csv_file]
    return [line for line in lines if line and not line.startswith(HEADER_PREFIX)]


def parse_puzzle_line(line: str) -> Optional[PuzzleModel]:
    """A line must pass both the playability filter and the record parser. Otherwise it gets skipped (None)."""
    if not is_valid_puzzle_line(line):
        return None
    try:
        return PuzzleRecord.from_csv(line).to_model()
    except MalformedPuzzleRecordError as exc:
        _LOGGER.warning("Skipping puzzle line: %s", exc)
        return None


def load_puzzle_csv(path: Path) -> list[PuzzleModel]:
    """Every playable puzzle in the file."""
    puzzles = [parse_puzzle_line(line) for line in read_lines(path)]
    return [puzzle for puzzle in puzzles if puzzle is not None]


class CSVPuzzleRepository:
    def __init__(
        self,
        path: Path,
        rng: Optional[random.Random] = None,
        max_draws: int = DEFAULT_MAX_DRAWS,
    ) -> None:
        self.path = Path(path)
        self.rng = rng or random.Random()
        self.max_draws = max_draws
        self._added: list[PuzzleModel] = []
        self._attempts: list[AttemptModel] = []

    def _lines(self) -> list[str]:
        return read_lines(self.path) + [puzzle.to_csv() for puzzle in self._added]

    def get_puzzle(self, puzzle_id: PuzzleId) -> PuzzleModel | None:
        for line in self._lines():
            if line.split(",", 1)[0] == puzzle_id:
                return parse_puzzle_line(line)
        return None

    def add_puzzles(self, puzzles: list[PuzzleModel]) -> int:
        """Kept in memory only, the file is never written to."""
        known = {line.split(",", 1)[0] for line in self._lines()}
        new_puzzles = [puzzle for puzzle in puzzles if puzzle.puzzle_id not in known]
        self._added.extend(new_puzzles)
        return len(new_puzzles)

    def random_puzzle(self) -> PuzzleModel | None:
        """Draw random lines until one is playable, giving up after `max_draws` attempts."""
        lines = self._lines()
        if not lines:
            return None
        for _ in range(self.max_draws):
            puzzle = parse_puzzle_line(self.rng.choice(lines))
            if puzzle is not None:
                return puzzle
        _LOGGER.warning("No playable puzzle found in %s after %s draws", self.path, self.max_draws)
        return None

    def record_attempt(self, attempt: AttemptModel) -> None:
        self._attempts.append(attempt)

    def latest_rating(self) -> int | None:
        return self._attempts[-1].rating_after if self._attempts else None
