"""
Piece codes.

A piece is stored on the board as a signed integer: the magnitude is the PieceKind, the sign the Side.
0 denotes an empty square.
"""

from chesstutor.core.shared_types import PieceKind, Side

EMPTY = 0

# lower case: Black pieces, upper case: White pieces
FEN_TO_PIECE: dict[str, int] = {
    "p": -int(PieceKind.PAWN),
    "r": -int(PieceKind.ROOK),
    "n": -int(PieceKind.KNIGHT),
    "b": -int(PieceKind.BISHOP),
    "q": -int(PieceKind.QUEEN),
    "k": -int(PieceKind.KING),
    "P": int(PieceKind.PAWN),
    "R": int(PieceKind.ROOK),
    "N": int(PieceKind.KNIGHT),
    "B": int(PieceKind.BISHOP),
    "Q": int(PieceKind.QUEEN),
    "K": int(PieceKind.KING),
}

PIECE_TO_FEN: dict[int, str] = {value: key for key, value in FEN_TO_PIECE.items()}


def piece_code(side: Side, kind: PieceKind) -> int:
    return int(side) * int(kind)


def piece_from_fen(character: str) -> int:
    """Unknown characters map onto an empty square."""
    return FEN_TO_PIECE.get(character, EMPTY)


def piece_to_fen(code: int) -> str:
    return PIECE_TO_FEN[code]


def side_of(code: int) -> Side | None:
    if code == EMPTY:
        return None
    return Side.WHITE if code > 0 else Side.BLACK


def kind_of(code: int) -> PieceKind | None:
    if code == EMPTY:
        return None
    return PieceKind(abs(code))


def belongs_to(code: int, side: Side) -> bool:
    """Is the piece (if any) on this square one of `side`'s pieces?"""
    return code * side > 0


def is_valid_code(code: int) -> bool:
    return abs(code) <= PieceKind.KING
