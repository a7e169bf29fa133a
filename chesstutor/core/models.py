"""
Boundary layer data model(s).

These objects are used to communicate with the Service.
Both the persistence layer (lower) and the service/API layers (higher) send and receive these,
which decouples the DB schema and the request models from the domain objects.
"""

from dataclasses import dataclass, field

# Type aliases to make the models easier to read
PuzzleId = str


@dataclass
class PuzzleModel:
    """Transport-safe representation of a single puzzle record (one line of the puzzle CSV)."""

    puzzle_id: PuzzleId
    fen: str
    moves: str  # space separated coordinate moves, ex. "e2e4 e7e5"
    rating: int
    rating_deviation: int = 0
    popularity: int = 0
    play_count: int = 0
    themes: str = ""
    extra: list[str] = field(default_factory=list)  # game url, opening tags, ...

    def to_csv(self) -> str:
        """Reverse of parsing a CSV record: used when handing a stored puzzle to the domain layer."""
        fields = [
            self.puzzle_id,
            self.fen,
            self.moves,
            str(self.rating),
            str(self.rating_deviation),
            str(self.popularity),
            str(self.play_count),
            self.themes,
            *self.extra,
        ]
        # the record parser needs at least one field after the themes
        if not self.extra:
            fields.append("")
        return ",".join(fields)


@dataclass
class AttemptModel:
    """Outcome of one solved puzzle, as used for keeping track of the player's rating."""

    puzzle_id: PuzzleId
    hint_used: bool
    elo_change: int
    rating_after: int
