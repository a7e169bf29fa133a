"""The Board holds the `position` (in chess: the configuration of pieces on the board) as a grid of piece codes"""

from dataclasses import dataclass, field
from typing import Self

from chesstutor.chess.pieces import EMPTY, piece_code, piece_from_fen, piece_to_fen
from chesstutor.chess.square import BOARD_SIZE, Square
from chesstutor.core.shared_types import PieceKind, Side

Grid = list[list[int]]

BACK_RANK: tuple[PieceKind, ...] = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)


def _empty_grid() -> Grid:
    return [[EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]


@dataclass
class Board:
    grid: Grid = field(default_factory=_empty_grid)

    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def default(cls) -> Self:
        board = cls()
        board.load_default()
        return board

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0 of the grid), reading from the a-file to the h-file
        * a '/' moves on to the next row down
        * a number denotes the amount of empty squares after each other
        * capital letters are the white pieces
        """
        board = cls()
        row = 0
        col = 0
        for character in fen_str:
            if character == "/":
                row += 1
                col = 0
            elif character.isdigit():
                col += int(character)
            else:
                board.grid[row][col] = piece_from_fen(character)
                col += 1
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in self.grid)

    @staticmethod
    def _row_to_fen(row: list[int]) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for code in row:
            if code != EMPTY:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece_to_fen(code))
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- SETUP ---
    def clear(self) -> None:
        for row in self.grid:
            for col in range(BOARD_SIZE):
                row[col] = EMPTY

    def load_default(self) -> None:
        """Standard starting array: black on top (rows 0 and 1), white on the bottom (rows 6 and 7)."""
        self.clear()
        for col, kind in enumerate(BACK_RANK):
            self.grid[0][col] = piece_code(Side.BLACK, kind)
            self.grid[1][col] = piece_code(Side.BLACK, PieceKind.PAWN)
            self.grid[6][col] = piece_code(Side.WHITE, PieceKind.PAWN)
            self.grid[7][col] = piece_code(Side.WHITE, kind)

    def load_raw(self, matrix: Grid) -> None:
        """Bulk overwrite. The values are copied as they are, only the shape is checked."""
        if len(matrix) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in matrix):
            raise ValueError(f"Board must be {BOARD_SIZE}x{BOARD_SIZE}.")
        for row_idx, row in enumerate(matrix):
            self.grid[row_idx] = [int(code) for code in row]

    def place(self, side: Side, kind: PieceKind, square: Square) -> None:
        """Unconditional write, no rules are checked."""
        self.grid[square.row][square.col] = piece_code(side, kind)

    # --- ACCESS ---
    def get(self, square: Square) -> int:
        return self.grid[square.row][square.col]

    def is_empty(self, square: Square) -> bool:
        return self.get(square) == EMPTY

    def remove(self, square: Square) -> int:
        removed = self.get(square)
        self.grid[square.row][square.col] = EMPTY
        return removed

    def move(self, from_square: Square, to_square: Square) -> int:
        """Overwrite the destination with the moving piece and clear the origin. Returns what stood on the destination."""
        captured = self.get(to_square)
        self.grid[to_square.row][to_square.col] = self.get(from_square)
        self.grid[from_square.row][from_square.col] = EMPTY
        return captured

    def snapshot(self) -> Grid:
        """Independent copy for the outside world: mutating it does not affect this board."""
        return [list(row) for row in self.grid]

    def count_pieces(self) -> int:
        return sum(1 for row in self.grid for code in row if code != EMPTY)

    def render(self) -> str:
        """Text diagram of the board, used for debug logging."""
        lines = ["   " + "  ".join("abcdefgh"), "-" * 25]
        for row_idx, row in enumerate(self.grid):
            cells = "".join(f"{code:>3}" for code in row)
            lines.append(f"{BOARD_SIZE - row_idx}|{cells}")
        return "\n".join(lines)
