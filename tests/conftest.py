"""Pytest configuration and shared fixtures.

This module provides fixtures for testing readtracker, including an
in-memory database, sample books and fixed reference times.
"""

import os
from datetime import datetime
from types import SimpleNamespace
from typing import Generator, Optional

import pytest

from readtracker.config import reset_config
from readtracker.db.models import Book
from readtracker.db.schemas import BookCreate
from readtracker.db.sqlite import Database

USER_ID = "reader-1"

# 2025-01-15 is a Wednesday; its week runs Sunday 12th to Saturday 18th
WEDNESDAY_NOON = datetime(2025, 1, 15, 12, 0, 0)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def db() -> Generator[Database, None, None]:
    """Create an in-memory database instance."""
    reset_config()
    database = Database(":memory:")
    database.create_tables()
    yield database
    reset_config()


@pytest.fixture
def user_id() -> str:
    return USER_ID


@pytest.fixture
def now() -> datetime:
    """A fixed Wednesday noon."""
    return WEDNESDAY_NOON


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_book_data() -> BookCreate:
    """Create sample book data for testing."""
    return BookCreate(
        title="The Goldfinch",
        author=["Donna Tartt"],
        description="A boy, a painting, and a long road.",
        release_year=2013,
        page_count=320,
        genres=["Fiction"],
    )


@pytest.fixture
def created_book(db: Database, sample_book_data: BookCreate) -> Book:
    """Create and return a book in the database."""
    return db.create_book(sample_book_data)


@pytest.fixture
def multiple_books(db: Database) -> list[Book]:
    """Create multiple books in the database."""
    books_data = [
        BookCreate(title="Norwegian Wood", author=["Haruki Murakami"], page_count=296),
        BookCreate(title="Exhalation", author=["Ted Chiang"], page_count=352),
        BookCreate(title="Untitled Draft", author=["Anonymous"], page_count=0),
    ]
    return [db.create_book(data) for data in books_data]


def make_record(
    pages_read: int = 0,
    status: str = "READING",
    last_read_date: Optional[datetime] = None,
) -> SimpleNamespace:
    """Build a lightweight progress record for the pure stats functions."""
    return SimpleNamespace(
        pages_read=pages_read,
        status=status,
        last_read_date=last_read_date,
    )


@pytest.fixture
def record_factory():
    """Factory fixture for in-memory progress records."""
    return make_record


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_env(tmp_path) -> Generator[str, None, None]:
    """Point the CLI at a temporary database and user."""
    reset_config()
    db_path = tmp_path / "readtracker.db"
    os.environ["READTRACKER_DB_PATH"] = str(db_path)
    os.environ["READTRACKER_USER"] = USER_ID
    yield str(db_path)
    reset_config()
    for key in ("READTRACKER_DB_PATH", "READTRACKER_USER"):
        os.environ.pop(key, None)


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()


@pytest.fixture
def cli_app():
    """Get the CLI app for testing."""
    from readtracker.cli import app
    return app
