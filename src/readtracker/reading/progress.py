"""Reading progress updates.

``update_progress`` applies a user's progress submission to a record without
touching storage; ``ProgressTracker`` wraps it with validation, lookups and
persistence.
"""

import logging
from datetime import datetime
from typing import Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..db.models import Book, ProgressRecord
from ..db.schemas import ProgressUpdate, ReadingStatus
from ..db.sqlite import Database
from ..errors import NotFoundError, ValidationError
from ..stats.goals import calculate_daily_target
from ..utils import round_half_up

logger = logging.getLogger(__name__)


def calculate_reading_progress(pages_read: int, total_pages: int) -> int:
    """Percentage of a book read, 0-100."""
    if total_pages <= 0:
        return 0
    return min(100, round_half_up(pages_read / total_pages * 100))


def calculate_pages_left(pages_read: int, total_pages: int) -> int:
    """Pages left to finish a book."""
    return max(0, total_pages - pages_read)


def update_progress(
    record: Optional[ProgressRecord],
    status: Union[ReadingStatus, str],
    pages_read: int,
    notes: str,
    book: Optional[Book],
    now: Optional[datetime] = None,
    user_id: Optional[str] = None,
) -> ProgressRecord:
    """Apply a progress submission to a record.

    Completing a book with a known page count sets pages read to the page
    count. ``start_date`` is only ever set once, on the first update with
    status READING. ``completion_date`` is refreshed on every COMPLETED
    update. The caller persists the result.

    Args:
        record: Existing record, or None to create one
        status: New reading status
        pages_read: Pages read as submitted
        notes: Free-text notes
        book: The book being read
        now: Time of the update (default: now)
        user_id: Owner, required when ``record`` is None

    Returns:
        The updated or newly created record

    Raises:
        NotFoundError: If the book does not exist
        ValidationError: If the status is unknown or no owner is given for a new record
    """
    if book is None:
        raise NotFoundError("Book not found")

    try:
        status = ReadingStatus(status)
    except ValueError as e:
        raise ValidationError(f"Invalid reading status: {status}") from e

    if now is None:
        now = datetime.now()

    if record is None:
        if user_id is None:
            raise ValidationError("user_id is required to create a progress record")
        record = ProgressRecord(user_id=user_id, book_id=book.id)

    if status == ReadingStatus.COMPLETED and book.page_count and book.page_count > 0:
        pages_read = book.page_count

    record.status = status.value
    record.pages_read = pages_read
    record.notes = notes or ""
    record.last_read_date = now

    if status == ReadingStatus.READING and record.start_date is None:
        record.start_date = now

    if status == ReadingStatus.COMPLETED:
        record.completion_date = now

    return record


class ProgressTracker:
    """Tracks and updates reading progress."""

    def __init__(self, db: Database):
        """Initialize progress tracker.

        Args:
            db: Database instance
        """
        self.db = db

    def update_progress(
        self,
        user_id: str,
        book_id: str,
        status: Union[ReadingStatus, str],
        pages_read: int = 0,
        notes: Optional[str] = "",
        now: Optional[datetime] = None,
    ) -> ProgressRecord:
        """Validate and save a progress update.

        Args:
            user_id: User submitting the update
            book_id: Book ID
            status: New status (WANT_TO_READ, READING, COMPLETED)
            pages_read: Pages read
            notes: Optional notes
            now: Time of the update (default: now)

        Returns:
            The saved record

        Raises:
            ValidationError: If the status or page count is invalid
            NotFoundError: If the book does not exist
        """
        try:
            update = ProgressUpdate(status=status, pages_read=pages_read, notes=notes)
        except PydanticValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ValidationError(f"Invalid progress update: {problems}") from e

        book = self.db.get_book(book_id)
        if not book:
            raise NotFoundError(f"Book not found: {book_id}")

        existing = self.db.get_progress(user_id, book_id)
        previous_status = existing.status if existing else None

        record = update_progress(
            existing,
            update.status,
            update.pages_read,
            update.notes,
            book,
            now=now,
            user_id=user_id,
        )
        saved = self.db.save_progress(record)

        logger.info(
            "Progress for %s on '%s': %s -> %s, %d pages",
            user_id, book.title, previous_status or "new", saved.status, saved.pages_read,
        )
        return saved

    def get_book_progress(self, user_id: str, book_id: str) -> dict:
        """Get progress info for a specific book.

        Args:
            user_id: User ID
            book_id: Book ID

        Returns:
            Dictionary with progress info:
            - record: The progress record
            - book_title: Title of the book
            - total_pages: Book's page count
            - progress_percent: Percentage complete
            - pages_left: Pages left to read

        Raises:
            NotFoundError: If the book or the progress record does not exist
        """
        book = self.db.get_book(book_id)
        if not book:
            raise NotFoundError(f"Book not found: {book_id}")

        record = self.db.get_progress(user_id, book_id)
        if not record:
            raise NotFoundError(f"No progress recorded for book: {book.title}")

        return {
            "record": record,
            "book_id": book.id,
            "book_title": book.title,
            "total_pages": book.page_count,
            "progress_percent": calculate_reading_progress(record.pages_read, book.page_count),
            "pages_left": calculate_pages_left(record.pages_read, book.page_count),
        }

    def get_bookmarked_books(
        self, user_id: str, status: Optional[Union[ReadingStatus, str]] = None
    ) -> list[ProgressRecord]:
        """Get the user's tracked books, optionally filtered by status.

        Raises:
            ValidationError: If the status filter is unknown
        """
        if status is not None:
            try:
                status = ReadingStatus(status)
            except ValueError as e:
                raise ValidationError(f"Invalid reading status: {status}") from e
        return self.db.get_progress_for_user(user_id, status=status)

