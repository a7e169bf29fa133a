"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Coordinates follow the layout of the rendered board: row 0 is the 8th rank (top), row 7 the 1st rank (bottom).
Column 0 is the a-file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from chesstutor.core.exceptions import InvalidSquareError, OutOfBoundsError

# Chess board is always 8x8.
BOARD_SIZE = 8
FILES = "abcdefgh"
RANKS = "12345678"


@dataclass(frozen=True)
class Square:
    row: int
    col: int

    def __post_init__(self) -> None:
        if not (0 <= self.row < BOARD_SIZE and 0 <= self.col < BOARD_SIZE):
            raise OutOfBoundsError(
                f"Square at row: {self.row}, col: {self.col} is not on the board."
            )

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a8' maps to (0, 0) and 'h1' to (7, 7). The file letter may be upper case."""
        if len(sq) != 2:
            raise InvalidSquareError(
                f"Square: {sq!r} needs to be a length of 2. (Ex: h2, H2)"
            )

        file_char = sq[0].lower()
        rank_char = sq[1]
        if file_char not in FILES:
            raise InvalidSquareError(
                f"Square: {sq!r} can only have a letter of a-h. (Ex: h2, H2)"
            )
        if rank_char not in RANKS:
            raise InvalidSquareError(
                f"Square: {sq!r} can only have a number of 1-8. (Ex: h2, H2)"
            )

        return cls(row=BOARD_SIZE - int(rank_char), col=FILES.index(file_char))

    def to_algebraic(self) -> str:
        return f"{FILES[self.col]}{BOARD_SIZE - self.row}"

    def offset(self, drow: int, dcol: int) -> Optional[Square]:
        """Shift the square. Returns None instead of raising when the result falls off the board."""
        row, col = self.row + drow, self.col + dcol
        if not (0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE):
            return None
        return Square(row, col)

    def __str__(self) -> str:
        return f"[{self.to_algebraic()}]({self.row},{self.col})"


def all_squares() -> list[Square]:
    """Every square on the board, row by row starting at the top left (a8)."""
    return [Square(row, col) for row in range(BOARD_SIZE) for col in range(BOARD_SIZE)]
