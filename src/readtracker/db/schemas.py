"""Pydantic schemas for data validation.

These schemas validate input before it reaches the ORM layer.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Fixed reading speed used to derive time-based stats from page counts.
MINUTES_PER_PAGE = 2

DEFAULT_PAGES_PER_WEEK = 60


class ReadingStatus(str, Enum):
    """Reading status of a book for one user."""

    WANT_TO_READ = "WANT_TO_READ"
    READING = "READING"
    COMPLETED = "COMPLETED"


def _normalize_status(v):
    """Accept 'reading', 'want-to-read' and similar spellings."""
    if isinstance(v, str):
        return v.strip().upper().replace("-", "_").replace(" ", "_")
    return v


# ============================================================================
# Book Schemas
# ============================================================================


class BookCreate(BaseModel):
    """Schema for adding a book to the catalog."""

    title: str = Field(..., min_length=1, description="Book title")
    author: list[str] = Field(..., min_length=1, description="Author names")
    description: str = ""
    release_year: Optional[int] = None
    slug: Optional[str] = Field(None, description="URL slug, derived from title if unset")
    page_count: int = Field(0, ge=0)
    genres: list[str] = Field(default_factory=list)

    @field_validator("author", mode="before")
    @classmethod
    def split_authors(cls, v):
        """Allow a single comma-separated author string."""
        if isinstance(v, str):
            return [a.strip() for a in v.split(",") if a.strip()]
        return v


# ============================================================================
# Progress Schemas
# ============================================================================


class ProgressUpdate(BaseModel):
    """Schema for a progress update submitted by a user."""

    status: ReadingStatus
    pages_read: int = Field(0, ge=0, description="Pages read so far")
    notes: str = ""

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return _normalize_status(v)

    @field_validator("notes", mode="before")
    @classmethod
    def none_notes(cls, v):
        return v or ""


# ============================================================================
# Goal Schemas
# ============================================================================


class WeeklyGoalUpdate(BaseModel):
    """Schema for editing the weekly pages goal."""

    pages_per_week: int = Field(..., ge=1, description="Pages per week, at least 1")


# ============================================================================
# Review Schemas
# ============================================================================


class ReviewCreate(BaseModel):
    """Schema for creating a review."""

    rating: int = Field(..., ge=1, le=5, description="Rating 1-5")
    title: Optional[str] = Field(None, max_length=100)
    comment: Optional[str] = Field(None, max_length=1000)
