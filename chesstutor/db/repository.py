"""Protocol repository (implemented with SQL Alchemy and for a plain CSV file)"""

from typing import Protocol

from chesstutor.core.models import AttemptModel, PuzzleId, PuzzleModel


class PuzzleRepository(Protocol):
    """Persistence layer orchestration"""

    def get_puzzle(self, puzzle_id: PuzzleId) -> PuzzleModel | None:
        """Get puzzle by ID, if record exists."""
        ...

    def add_puzzles(self, puzzles: list[PuzzleModel]) -> int:
        """Store new puzzles, return how many were added."""
        ...

    def random_puzzle(self) -> PuzzleModel | None:
        """Any puzzle the engine is able to play. None if there is none."""
        ...

    def record_attempt(self, attempt: AttemptModel) -> None:
        """Keep track of a solved puzzle."""
        ...

    def latest_rating(self) -> int | None:
        """Player rating after the most recent attempt, if any."""
        ...
