"""Elo bookkeeping for solved puzzles. The puzzle's rating plays the part of the opponent's rating."""

from chesstutor.chess.puzzle import PuzzleSession

DEFAULT_K_FACTOR = 32


def expected_score(player_rating: int, opponent_rating: int) -> float:
    """Probability of winning according to the Elo model"""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - player_rating) / 400.0))


def elo_change(
    player_rating: int,
    opponent_rating: int,
    won: bool,
    k_factor: int = DEFAULT_K_FACTOR,
) -> int:
    score = 1.0 if won else 0.0
    return round(k_factor * (score - expected_score(player_rating, opponent_rating)))


def puzzle_elo_change(
    player_rating: int,
    puzzle: PuzzleSession,
    k_factor: int = DEFAULT_K_FACTOR,
) -> int:
    """
    Solving without help counts as a win against the puzzle.
    Once a hint was used the puzzle counts as lost, even though it got solved in the end.
    """
    if puzzle.rating is None:
        return 0
    return elo_change(player_rating, puzzle.rating, not puzzle.hint_used, k_factor)
