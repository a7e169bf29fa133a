"""Database tables / schema"""

from datetime import datetime, timezone

from sqlalchemy import JSON, ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBPuzzle(Base):
    __tablename__ = "puzzles"
    id: Mapped[str] = mapped_column(primary_key=True)
    fen: Mapped[str]
    moves: Mapped[str]
    rating: Mapped[int]
    rating_deviation: Mapped[int] = mapped_column(default=0)
    popularity: Mapped[int] = mapped_column(default=0)
    play_count: Mapped[int] = mapped_column(default=0)
    themes: Mapped[str] = mapped_column(default="")
    extra: Mapped[list[str]] = mapped_column(JSON)
    # the engine cannot play puzzles that need castling or en passant
    is_playable: Mapped[bool] = mapped_column(default=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)


class DBAttempt(Base):
    __tablename__ = "attempts"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    puzzle_id: Mapped[str] = mapped_column(ForeignKey("puzzles.id"))
    hint_used: Mapped[bool]
    elo_change: Mapped[int]
    rating_after: Mapped[int]
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
