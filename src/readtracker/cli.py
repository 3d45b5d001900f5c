"""Command-line interface for readtracker.

Built with Typer for commands and Rich for output.
"""

import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import get_config
from .db import BookCreate, Database, ReviewCreate
from .errors import ReadTrackerError
from .logging_utils import setup_logging

logger = logging.getLogger(__name__)

# Create the main app
app = typer.Typer(
    name="readtracker",
    help="Track your reading progress, streaks and weekly goals.",
    no_args_is_help=True,
)

# Sub-apps for command groups
book_app = typer.Typer(help="Manage the book catalog.")
app.add_typer(book_app, name="book")

progress_app = typer.Typer(help="Update and view reading progress.")
app.add_typer(progress_app, name="progress")

goal_app = typer.Typer(help="Manage the weekly reading goal.")
app.add_typer(goal_app, name="goal")

review_app = typer.Typer(help="Review books.")
app.add_typer(review_app, name="review")

# Rich console for pretty output
console = Console()


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def progress_bar(percent: int, width: int = 20) -> str:
    """Render a text progress bar."""
    filled = int((percent / 100) * width)
    return "█" * filled + "░" * (width - filled)


def validation_problems(error: PydanticValidationError) -> str:
    """Flatten pydantic errors to 'field: message' pairs."""
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in error.errors()
    )


def format_date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d") if value else "-"


def get_database(ctx: typer.Context) -> Database:
    return ctx.obj["db"]


def get_user(ctx: typer.Context) -> str:
    return ctx.obj["user_id"]


@app.callback()
def main_callback(
    ctx: typer.Context,
    db_path: Optional[Path] = typer.Option(None, "--db", help="Database file path"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="User to act as"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Track your reading progress, streaks and weekly goals."""
    config = get_config()

    setup_logging(logging.DEBUG if verbose else config.log_level_number)

    # Overrides apply to this invocation only
    if db_path is not None:
        config = replace(config, db_path=db_path)
    if user:
        config = replace(config, user_id=user)

    for problem in config.validate():
        logger.warning(problem)

    db = Database(str(config.db_path))
    db.create_tables()
    ctx.obj = {"db": db, "user_id": config.user_id}


# ============================================================================
# Book Commands
# ============================================================================


@book_app.command("add")
def book_add(
    ctx: typer.Context,
    title: str = typer.Option(..., "--title", "-t", help="Book title"),
    author: str = typer.Option(..., "--author", "-a", help="Author(s), comma separated"),
    pages: int = typer.Option(0, "--pages", "-p", help="Page count"),
    slug: Optional[str] = typer.Option(None, "--slug", help="URL slug"),
    year: Optional[int] = typer.Option(None, "--year", "-y", help="Release year"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
    genre: Optional[list[str]] = typer.Option(None, "--genre", "-g", help="Genre (repeatable)"),
) -> None:
    """Add a book to the catalog."""
    db = get_database(ctx)

    try:
        data = BookCreate(
            title=title,
            author=author,
            page_count=pages,
            slug=slug,
            release_year=year,
            description=description,
            genres=genre or [],
        )
        book = db.create_book(data)
    except PydanticValidationError as e:
        print_error(f"Invalid book: {validation_problems(e)}")
        raise typer.Exit(1)
    except ReadTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Added: {book.title} by {', '.join(book.get_authors())}")
    print_info(f"ID: {book.id}")


@book_app.command("list")
def book_list(ctx: typer.Context) -> None:
    """List all books in the catalog."""
    books = get_database(ctx).get_all_books()

    if not books:
        print_info("No books in catalog.")
        return

    table = Table(title="Books", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Pages", justify="right")
    table.add_column("Rating", justify="center")

    for book in books:
        rating = f"{book.rating:.1f} ({book.ratings_count})" if book.ratings_count else "-"
        table.add_row(
            book.id,
            book.title,
            ", ".join(book.get_authors()),
            str(book.page_count or "-"),
            rating,
        )

    console.print(table)


# ============================================================================
# Progress Commands
# ============================================================================


@progress_app.command("update")
def progress_update(
    ctx: typer.Context,
    book_id: str = typer.Argument(..., help="Book ID"),
    status: str = typer.Option(
        ..., "--status", "-s", help="want_to_read, reading or completed"
    ),
    pages: int = typer.Option(0, "--pages", "-p", help="Pages read so far"),
    notes: str = typer.Option("", "--notes", "-n", help="Notes"),
) -> None:
    """Update reading progress for a book."""
    from .reading import ProgressTracker

    tracker = ProgressTracker(get_database(ctx))

    try:
        record = tracker.update_progress(
            get_user(ctx), book_id, status, pages_read=pages, notes=notes
        )
    except ReadTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(
        f"Progress saved: {record.status}, {record.pages_read} pages "
        f"({record.reading_minutes} min)"
    )


@progress_app.command("show")
def progress_show(
    ctx: typer.Context,
    book_id: str = typer.Argument(..., help="Book ID"),
) -> None:
    """Show progress for a book."""
    from .reading import ProgressTracker

    tracker = ProgressTracker(get_database(ctx))

    try:
        info = tracker.get_book_progress(get_user(ctx), book_id)
    except ReadTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    record = info["record"]
    lines = [
        f"[bold]Status:[/bold] {record.status}",
        f"[bold]Pages:[/bold] {record.pages_read}/{info['total_pages'] or '?'}",
        f"[{progress_bar(info['progress_percent'])}] {info['progress_percent']}%",
        f"[bold]Pages left:[/bold] {info['pages_left']}",
        f"[bold]Reading time:[/bold] {record.reading_minutes} min",
        f"[bold]Started:[/bold] {format_date(record.start_date)}",
        f"[bold]Completed:[/bold] {format_date(record.completion_date)}",
        f"[bold]Last read:[/bold] {format_date(record.last_read_date)}",
    ]
    if record.notes:
        lines.append(f"\n{record.notes}")

    console.print(Panel("\n".join(lines), title=f"[cyan]{info['book_title']}[/cyan]"))


@progress_app.command("list")
def progress_list(
    ctx: typer.Context,
    status: Optional[str] = typer.Option(None, "--status", "-s", help="Filter by status"),
) -> None:
    """List tracked books."""
    from .db.schemas import ReadingStatus
    from .reading import ProgressTracker, calculate_reading_progress

    tracker = ProgressTracker(get_database(ctx))

    if status is not None:
        status = status.strip().upper().replace("-", "_")

    try:
        records = tracker.get_bookmarked_books(get_user(ctx), status=status)
    except ReadTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if not records:
        print_info("No tracked books yet.")
        return

    table = Table(title="Reading Progress", show_header=True, header_style="bold magenta")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Status", style="yellow")
    table.add_column("Progress", justify="center")
    table.add_column("Last read", justify="right")

    for record in records:
        book = record.book
        percent = calculate_reading_progress(record.pages_read, book.page_count or 0)
        if record.status == ReadingStatus.COMPLETED:
            progress = f"Completed {format_date(record.completion_date)}"
        else:
            progress = f"{record.pages_read}/{book.page_count or '?'} ({percent}%)"
        table.add_row(book.title, record.status, progress, format_date(record.last_read_date))

    console.print(table)


# ============================================================================
# Goal Commands
# ============================================================================


@goal_app.command("set")
def goal_set(
    ctx: typer.Context,
    pages: int = typer.Argument(..., help="Pages per week"),
) -> None:
    """Set the weekly pages goal."""
    from .stats import GoalTracker

    tracker = GoalTracker(get_database(ctx))

    try:
        goal = tracker.set_weekly_goal(get_user(ctx), pages)
    except ReadTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Weekly goal set: {goal.pages_per_week} pages per week")


@goal_app.command("show")
def goal_show(ctx: typer.Context) -> None:
    """Show progress toward the weekly goal."""
    from .stats import GoalTracker

    tracker = GoalTracker(get_database(ctx))
    user_id = get_user(ctx)

    status = tracker.get_status(user_id)
    if tracker.get_weekly_goal(user_id) is None:
        print_info(f"No goal set, using the default of {status.goal_pages_per_week} pages.")

    console.print(Panel(_goal_panel_text(status), title="[blue]Weekly Reading Goal[/blue]"))


def _goal_panel_text(status) -> str:
    lines = [
        f"[{progress_bar(status.progress_percentage)}] {status.progress_percentage}%",
        f"{status.pages_read_this_week} of {status.goal_pages_per_week} pages this week",
    ]
    if status.is_complete:
        lines.append("[bold green]Goal reached![/bold green]")
    else:
        lines.append(
            f"{status.pages_left} pages left, {status.days_left_in_week} days to go "
            f"({status.daily_pages_needed} pages/day)"
        )
    return "\n".join(lines)


# ============================================================================
# Statistics Commands
# ============================================================================


@app.command()
def stats(ctx: typer.Context) -> None:
    """Show reading statistics."""
    from .stats import ReadingStatsEngine

    engine = ReadingStatsEngine(get_database(ctx))
    summary = engine.get_summary(get_user(ctx))
    aggregate = summary.aggregate

    table = Table(title="Reading Stats", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row("Pages read", str(aggregate.total_pages_read))
    table.add_row("Reading time", f"{aggregate.total_reading_hours:.1f} h")
    table.add_row("Average speed", f"{aggregate.average_reading_speed} pages/h")
    table.add_row("Books completed", str(aggregate.books_completed_total))
    table.add_row("Currently reading", str(aggregate.books_reading_total))
    table.add_row("Want to read", str(aggregate.books_want_to_read_total))
    table.add_row("Current streak", f"{summary.current_streak} days")
    table.add_row("Longest streak", f"{summary.longest_streak} days")

    console.print(table)
    console.print(
        Panel(_goal_panel_text(summary.weekly_goal), title="[blue]Weekly Reading Goal[/blue]")
    )


# ============================================================================
# Review Commands
# ============================================================================


@review_app.command("add")
def review_add(
    ctx: typer.Context,
    book_id: str = typer.Argument(..., help="Book ID"),
    rating: int = typer.Option(..., "--rating", "-r", help="Rating 1-5"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Review title"),
    comment: Optional[str] = typer.Option(None, "--comment", "-c", help="Review text"),
) -> None:
    """Review a book."""

    try:
        data = ReviewCreate(rating=rating, title=title, comment=comment)
    except PydanticValidationError:
        print_error("Rating must be between 1 and 5")
        raise typer.Exit(1)

    try:
        get_database(ctx).create_review(get_user(ctx), book_id, data)
    except ReadTrackerError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_success(f"Review saved ({'★' * rating})")


@app.command("book-of-the-week")
def book_of_the_week(ctx: typer.Context) -> None:
    """Show the most reviewed book of the last 7 days."""
    result = get_database(ctx).get_book_of_the_week()

    if result is None:
        print_info("No reviews this week.")
        return

    book, count = result
    console.print(
        Panel(
            f"[bold]{book.title}[/bold]\n{', '.join(book.get_authors())}\n\n"
            f"{count} review{'s' if count != 1 else ''} this week",
            title="[magenta]Book of the Week[/magenta]",
        )
    )


# ============================================================================
# Version Command
# ============================================================================


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"readtracker version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
