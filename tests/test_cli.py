"""Tests for the CLI interface."""

import re

import pytest

from readtracker.config import get_config
from readtracker.db.sqlite import Database


def book_id_from(output: str) -> str:
    match = re.search(r"ID: ([0-9a-f-]{36})", output)
    assert match, output
    return match.group(1)


@pytest.fixture
def runner(cli_runner, cli_env):
    return cli_runner


@pytest.fixture
def book_id(runner, cli_app):
    result = runner.invoke(
        cli_app,
        ["book", "add", "--title", "Exhalation", "--author", "Ted Chiang", "--pages", "352"],
    )
    assert result.exit_code == 0, result.stdout
    return book_id_from(result.stdout)


class TestCLIBasics:
    """Tests for basic CLI functionality."""

    def test_help(self, runner, cli_app):
        result = runner.invoke(cli_app, ["--help"])

        assert result.exit_code == 0
        assert "Track your reading" in result.stdout

    def test_version(self, runner, cli_app):
        result = runner.invoke(cli_app, ["version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.stdout


class TestBookCommands:
    def test_add_book(self, runner, cli_app, cli_env):
        result = runner.invoke(
            cli_app, ["book", "add", "--title", "Dune", "--author", "Frank Herbert", "-p", "688"]
        )

        assert result.exit_code == 0
        assert "Added: Dune by Frank Herbert" in result.stdout
        assert Database(cli_env).get_book_by_slug("dune").page_count == 688

    def test_add_duplicate(self, runner, cli_app, book_id):
        result = runner.invoke(cli_app, ["book", "add", "--title", "Exhalation", "--author", "X"])

        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_add_negative_pages(self, runner, cli_app, cli_env):
        result = runner.invoke(
            cli_app, ["book", "add", "--title", "X", "--author", "Y", "--pages", "-5"]
        )

        assert result.exit_code == 1
        assert "Error: Invalid book" in result.stdout
        assert "page_count" in result.stdout
        assert Database(cli_env).get_all_books() == []

    @pytest.mark.parametrize(
        "args",
        [
            ["--title", "", "--author", "Y"],
            ["--title", "X", "--author", ","],
        ],
    )
    def test_add_invalid_fields(self, runner, cli_app, args):
        result = runner.invoke(cli_app, ["book", "add", *args])

        assert result.exit_code == 1
        assert "Error: Invalid book" in result.stdout

    def test_list_empty(self, runner, cli_app):
        result = runner.invoke(cli_app, ["book", "list"])

        assert result.exit_code == 0
        assert "No books" in result.stdout

    def test_list(self, runner, cli_app, book_id):
        result = runner.invoke(cli_app, ["book", "list"])

        assert result.exit_code == 0
        assert "Exhalation" in result.stdout


class TestProgressCommands:
    def test_update_and_show(self, runner, cli_app, book_id):
        result = runner.invoke(
            cli_app, ["progress", "update", book_id, "--status", "reading", "--pages", "88"]
        )
        assert result.exit_code == 0
        assert "READING, 88 pages (176 min)" in result.stdout

        result = runner.invoke(cli_app, ["progress", "show", book_id])
        assert result.exit_code == 0
        assert "88/352" in result.stdout
        assert "25%" in result.stdout

    def test_complete_sets_page_count(self, runner, cli_app, book_id):
        result = runner.invoke(
            cli_app, ["progress", "update", book_id, "--status", "completed", "--pages", "3"]
        )

        assert result.exit_code == 0
        assert "COMPLETED, 352 pages" in result.stdout

    def test_invalid_status(self, runner, cli_app, book_id):
        result = runner.invoke(cli_app, ["progress", "update", book_id, "--status", "skimmed"])

        assert result.exit_code == 1
        assert "Invalid progress update" in result.stdout

    def test_unknown_book(self, runner, cli_app):
        result = runner.invoke(cli_app, ["progress", "update", "missing", "--status", "reading"])

        assert result.exit_code == 1
        assert "Book not found" in result.stdout

    def test_show_without_progress(self, runner, cli_app, book_id):
        result = runner.invoke(cli_app, ["progress", "show", book_id])

        assert result.exit_code == 1

    def test_list(self, runner, cli_app, book_id):
        runner.invoke(cli_app, ["progress", "update", book_id, "--status", "reading", "-p", "10"])

        result = runner.invoke(cli_app, ["progress", "list", "--status", "reading"])
        assert result.exit_code == 0
        assert "Exhalation" in result.stdout

        result = runner.invoke(cli_app, ["progress", "list", "--status", "completed"])
        assert "No tracked books" in result.stdout

    def test_progress_per_user(self, runner, cli_app, book_id):
        runner.invoke(cli_app, ["progress", "update", book_id, "--status", "reading", "-p", "10"])

        result = runner.invoke(cli_app, ["--user", "someone-else", "progress", "list"])

        assert "No tracked books" in result.stdout

    def test_user_override_not_kept(self, runner, cli_app, book_id, user_id):
        """--user applies to one invocation; the next one acts as the configured user."""
        runner.invoke(cli_app, ["--user", "someone-else", "progress", "list"])
        runner.invoke(cli_app, ["progress", "update", book_id, "--status", "reading", "-p", "10"])

        assert get_config().user_id == user_id
        result = runner.invoke(cli_app, ["progress", "list"])
        assert "Exhalation" in result.stdout

        result = runner.invoke(cli_app, ["--user", "someone-else", "progress", "list"])
        assert "No tracked books" in result.stdout

    def test_db_override_not_kept(self, runner, cli_app, cli_env, tmp_path):
        other = tmp_path / "other.db"

        runner.invoke(cli_app, ["--db", str(other), "goal", "set", "90"])

        assert str(get_config().db_path) == cli_env
        result = runner.invoke(cli_app, ["goal", "show"])
        assert "of 60 pages" in result.stdout


class TestGoalCommands:
    def test_show_default(self, runner, cli_app):
        result = runner.invoke(cli_app, ["goal", "show"])

        assert result.exit_code == 0
        assert "of 60 pages" in result.stdout

    def test_set_and_show(self, runner, cli_app):
        result = runner.invoke(cli_app, ["goal", "set", "120"])
        assert result.exit_code == 0
        assert "120 pages per week" in result.stdout

        result = runner.invoke(cli_app, ["goal", "show"])
        assert "of 120 pages" in result.stdout

    def test_set_invalid(self, runner, cli_app):
        result = runner.invoke(cli_app, ["goal", "set", "0"])

        assert result.exit_code == 1
        assert "at least 1" in result.stdout


class TestStatsCommand:
    def test_stats(self, runner, cli_app, book_id):
        runner.invoke(cli_app, ["progress", "update", book_id, "--status", "reading", "-p", "60"])

        result = runner.invoke(cli_app, ["stats"])

        assert result.exit_code == 0
        assert "Pages read" in result.stdout
        assert "Current streak" in result.stdout
        assert "Goal reached" in result.stdout


class TestReviewCommands:
    def test_review_and_book_of_the_week(self, runner, cli_app, book_id):
        result = runner.invoke(cli_app, ["review", "add", book_id, "--rating", "5"])
        assert result.exit_code == 0

        result = runner.invoke(cli_app, ["book-of-the-week"])
        assert result.exit_code == 0
        assert "Exhalation" in result.stdout
        assert "1 review this week" in result.stdout

    def test_bad_rating(self, runner, cli_app, book_id):
        result = runner.invoke(cli_app, ["review", "add", book_id, "--rating", "9"])

        assert result.exit_code == 1

    def test_no_book_of_the_week(self, runner, cli_app):
        result = runner.invoke(cli_app, ["book-of-the-week"])

        assert result.exit_code == 0
        assert "No reviews" in result.stdout
