"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from chesstutor.chess.events import EventRecorder
from chesstutor.chess.scheduling import ManualScheduler
from chesstutor.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

# white rook delivers the first move, black king answers
ROOK_FEN = "6k1/8/8/8/8/8/8/R5K1 w - - 0 1"


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def puzzle_line() -> Callable[..., str]:
    """Call the inner function to build a CSV puzzle record. Defaults describe a short, playable puzzle."""

    def _create_line(
        puzzle_id: str = "00sHx",
        fen: str = ROOK_FEN,
        moves: str = "a1a8 g8h7",
        rating: str = "1500",
        themes: str = "endgame short",
        url: str = "https://lichess.org/abcdefgh#1",
    ) -> str:
        return ",".join([puzzle_id, fen, moves, rating, "75", "94", "1200", themes, url])

    return _create_line
