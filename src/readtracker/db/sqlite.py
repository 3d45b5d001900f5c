"""SQLite database operations.

Handles database connection, session management, and CRUD operations.
A ``Database`` is created once by the caller and passed to every service.
"""

import logging
import os
import re
from contextlib import contextmanager
from datetime import datetime, timedelta
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session, selectinload, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import DEFAULT_DB_PATH
from ..errors import NotFoundError, ValidationError
from .models import Base, Book, ProgressRecord, Review, WeeklyGoal
from .schemas import BookCreate, ReadingStatus, ReviewCreate

logger = logging.getLogger(__name__)

BOOK_OF_THE_WEEK_WINDOW_DAYS = 7


def slugify(text: str) -> str:
    """Make a URL slug from a title."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "book"


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     READTRACKER_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get(
                "READTRACKER_DB_PATH",
                str(DEFAULT_DB_PATH),
            )

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # In-memory databases share one connection so every session sees the same data
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables. Use with caution!"""
        Base.metadata.drop_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Book Operations
    # ========================================================================

    def create_book(self, book: BookCreate, session: Optional[Session] = None) -> Book:
        """Add a book to the catalog.

        Raises:
            ValidationError: If another book already uses the slug
        """

        def _create(s: Session) -> Book:
            slug = book.slug or slugify(book.title)
            existing = s.execute(select(Book).where(Book.slug == slug)).scalar_one_or_none()
            if existing:
                raise ValidationError(f"A book with slug '{slug}' already exists")

            db_book = Book(
                title=book.title,
                description=book.description,
                release_year=book.release_year,
                slug=slug,
                page_count=book.page_count,
            )
            db_book.set_authors(book.author)
            db_book.set_genres(book.genres)

            s.add(db_book)
            s.flush()
            logger.info("Added book %s (%s)", db_book.title, db_book.id)
            return db_book

        if session:
            return _create(session)
        else:
            with self.get_session() as s:
                created = _create(s)
                s.expunge(created)
                return created

    def get_book(self, book_id: str, session: Optional[Session] = None) -> Optional[Book]:
        """Get a book by ID."""

        def _get(s: Session) -> Optional[Book]:
            return s.get(Book, book_id)

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                book = _get(s)
                if book:
                    s.expunge(book)
                return book

    def get_book_by_slug(self, slug: str, session: Optional[Session] = None) -> Optional[Book]:
        """Get a book by its slug."""

        def _get(s: Session) -> Optional[Book]:
            return s.execute(select(Book).where(Book.slug == slug)).scalar_one_or_none()

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                book = _get(s)
                if book:
                    s.expunge(book)
                return book

    def get_all_books(self, session: Optional[Session] = None) -> list[Book]:
        """Get all books."""

        def _get(s: Session) -> list[Book]:
            stmt = select(Book).order_by(Book.title)
            return list(s.execute(stmt).scalars().all())

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                books = _get(s)
                for book in books:
                    s.expunge(book)
                return books

    # ========================================================================
    # Progress Operations
    # ========================================================================

    def get_progress(
        self, user_id: str, book_id: str, session: Optional[Session] = None
    ) -> Optional[ProgressRecord]:
        """Get the progress record for a user and book."""

        def _get(s: Session) -> Optional[ProgressRecord]:
            stmt = select(ProgressRecord).where(
                ProgressRecord.user_id == user_id,
                ProgressRecord.book_id == book_id,
            )
            return s.execute(stmt).scalar_one_or_none()

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                record = _get(s)
                if record:
                    s.expunge(record)
                return record

    def get_progress_for_user(
        self,
        user_id: str,
        status: Optional[ReadingStatus] = None,
        session: Optional[Session] = None,
    ) -> list[ProgressRecord]:
        """Get all progress records of a user, most recently read first.

        The related book is loaded with each record.
        """

        def _get(s: Session) -> list[ProgressRecord]:
            stmt = (
                select(ProgressRecord)
                .options(selectinload(ProgressRecord.book))
                .where(ProgressRecord.user_id == user_id)
            )
            if status is not None:
                stmt = stmt.where(ProgressRecord.status == ReadingStatus(status).value)
            stmt = stmt.order_by(
                ProgressRecord.last_read_date.desc(), ProgressRecord.created_at.desc()
            )
            return list(s.execute(stmt).scalars().all())

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                records = _get(s)
                for record in records:
                    s.expunge(record)
                return records

    def save_progress(
        self, record: ProgressRecord, session: Optional[Session] = None
    ) -> ProgressRecord:
        """Insert or update a progress record (last write wins)."""

        def _save(s: Session) -> ProgressRecord:
            saved = s.merge(record)
            s.flush()
            return saved

        if session:
            return _save(session)
        else:
            with self.get_session() as s:
                saved = _save(s)
                s.expunge(saved)
                return saved

    # ========================================================================
    # Goal Operations
    # ========================================================================

    def get_goal(self, user_id: str, session: Optional[Session] = None) -> Optional[WeeklyGoal]:
        """Get the weekly goal of a user."""

        def _get(s: Session) -> Optional[WeeklyGoal]:
            stmt = select(WeeklyGoal).where(WeeklyGoal.user_id == user_id)
            return s.execute(stmt).scalar_one_or_none()

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                goal = _get(s)
                if goal:
                    s.expunge(goal)
                return goal

    def save_goal(self, goal: WeeklyGoal, session: Optional[Session] = None) -> WeeklyGoal:
        """Insert or update a weekly goal."""

        def _save(s: Session) -> WeeklyGoal:
            saved = s.merge(goal)
            s.flush()
            return saved

        if session:
            return _save(session)
        else:
            with self.get_session() as s:
                saved = _save(s)
                s.expunge(saved)
                return saved

    # ========================================================================
    # Review Operations
    # ========================================================================

    def create_review(
        self,
        user_id: str,
        book_id: str,
        review: ReviewCreate,
        created_at: Optional[datetime] = None,
        session: Optional[Session] = None,
    ) -> Review:
        """Create a review and refresh the book's average rating.

        Raises:
            NotFoundError: If the book does not exist
            ValidationError: If the user already reviewed the book
        """

        def _create(s: Session) -> Review:
            book = s.get(Book, book_id)
            if not book:
                raise NotFoundError(f"Book not found: {book_id}")

            stmt = select(Review).where(Review.user_id == user_id, Review.book_id == book_id)
            if s.execute(stmt).scalar_one_or_none():
                raise ValidationError("You have already reviewed this book")

            db_review = Review(
                user_id=user_id,
                book_id=book_id,
                rating=review.rating,
                title=review.title,
                comment=review.comment,
                created_at=created_at or datetime.now(),
            )
            s.add(db_review)
            s.flush()

            # Recalculate average rating
            count, average = s.execute(
                select(func.count(Review.id), func.avg(Review.rating)).where(
                    Review.book_id == book_id
                )
            ).one()
            book.ratings_count = count
            book.rating = round(float(average or 0), 1)

            logger.info(
                "User %s reviewed %s (rating %d, book now %.1f over %d)",
                user_id, book.title, review.rating, book.rating, count,
            )
            return db_review

        if session:
            return _create(session)
        else:
            with self.get_session() as s:
                created = _create(s)
                s.expunge(created)
                return created

    def get_book_of_the_week(
        self,
        now: Optional[datetime] = None,
        window_days: int = BOOK_OF_THE_WEEK_WINDOW_DAYS,
        session: Optional[Session] = None,
    ) -> Optional[tuple[Book, int]]:
        """Get the most-reviewed book over a rolling window.

        Args:
            now: End of the window (default: now)
            window_days: Length of the window in days

        Returns:
            Tuple of (book, review count), or None if nothing was reviewed
        """
        if now is None:
            now = datetime.now()
        since = now - timedelta(days=window_days)

        def _get(s: Session) -> Optional[tuple[Book, int]]:
            review_count = func.count(Review.id).label("review_count")
            stmt = (
                select(Book, review_count)
                .join(Review, Review.book_id == Book.id)
                .where(Review.created_at >= since, Review.created_at <= now)
                .group_by(Book.id)
                .order_by(review_count.desc(), Book.title)
                .limit(1)
            )
            row = s.execute(stmt).first()
            if row is None:
                return None
            return row[0], row[1]

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                result = _get(s)
                if result:
                    s.expunge(result[0])
                return result
