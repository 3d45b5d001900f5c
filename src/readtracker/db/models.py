"""SQLAlchemy ORM models for local SQLite database.

Tables:
- books: Book catalog
- user_book_progress: Per-user, per-book reading progress
- reading_goals: Weekly pages goal, one per user
- book_reviews: User reviews, one per user and book
"""

import json
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Float
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .schemas import DEFAULT_PAGES_PER_WEEK, MINUTES_PER_PAGE, ReadingStatus


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Book(Base):
    """Book model - a catalog entry."""

    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    authors: Mapped[str] = mapped_column(Text, nullable=False)  # JSON array
    description: Mapped[str] = mapped_column(Text, default="")
    release_year: Mapped[Optional[int]] = mapped_column(Integer)
    slug: Mapped[str] = mapped_column(String(500), nullable=False, unique=True, index=True)
    page_count: Mapped[int] = mapped_column(Integer, default=0)
    rating: Mapped[float] = mapped_column(Float, default=0.0)
    ratings_count: Mapped[int] = mapped_column(Integer, default=0)
    genres: Mapped[Optional[str]] = mapped_column(Text)  # JSON array

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(26), default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(26), default=utc_now_iso, onupdate=utc_now_iso
    )

    # Relationships
    progress_records: Mapped[list["ProgressRecord"]] = relationship(
        "ProgressRecord", back_populates="book", cascade="all, delete-orphan"
    )
    reviews: Mapped[list["Review"]] = relationship(
        "Review", back_populates="book", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}')>"

    # Helper methods for JSON fields
    def get_authors(self) -> list[str]:
        """Get authors as list."""
        if self.authors:
            return json.loads(self.authors)
        return []

    def set_authors(self, authors: list[str]) -> None:
        """Set authors from list."""
        self.authors = json.dumps(authors)

    def get_genres(self) -> list[str]:
        """Get genres as list."""
        if self.genres:
            return json.loads(self.genres)
        return []

    def set_genres(self, genres: list[str]) -> None:
        """Set genres from list."""
        self.genres = json.dumps(genres) if genres else None


class ProgressRecord(Base):
    """Reading progress of one user on one book.

    Dates are naive local datetimes.
    """

    __tablename__ = "user_book_progress"
    __table_args__ = (UniqueConstraint("user_id", "book_id", name="uq_progress_user_book"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), default=ReadingStatus.WANT_TO_READ.value, nullable=False
    )
    pages_read: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    start_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    completion_date: Mapped[Optional[datetime]] = mapped_column(DateTime)
    last_read_date: Mapped[Optional[datetime]] = mapped_column(DateTime, index=True)
    notes: Mapped[str] = mapped_column(Text, default="")

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(26), default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(26), default=utc_now_iso, onupdate=utc_now_iso
    )

    book: Mapped["Book"] = relationship("Book", back_populates="progress_records")

    def __repr__(self) -> str:
        return (
            f"<ProgressRecord(user={self.user_id}, book={self.book_id}, "
            f"status={self.status}, pages={self.pages_read})>"
        )

    @property
    def reading_minutes(self) -> int:
        """Reading time derived from pages read."""
        return (self.pages_read or 0) * MINUTES_PER_PAGE


class WeeklyGoal(Base):
    """Weekly pages goal - at most one per user, edited in place."""

    __tablename__ = "reading_goals"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    pages_per_week: Mapped[int] = mapped_column(
        Integer, default=DEFAULT_PAGES_PER_WEEK, nullable=False
    )
    # Sunday 00:00 of the week the goal was last edited in
    week_start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    last_updated: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    # Timestamps
    created_at: Mapped[str] = mapped_column(String(26), default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(26), default=utc_now_iso, onupdate=utc_now_iso
    )

    def __repr__(self) -> str:
        return f"<WeeklyGoal(user={self.user_id}, pages_per_week={self.pages_per_week})>"


class Review(Base):
    """Book review - one per user and book."""

    __tablename__ = "book_reviews"
    __table_args__ = (UniqueConstraint("user_id", "book_id", name="uq_review_user_book"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(100))
    comment: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, index=True)

    book: Mapped["Book"] = relationship("Book", back_populates="reviews")

    def __repr__(self) -> str:
        return f"<Review(user={self.user_id}, book={self.book_id}, rating={self.rating})>"
