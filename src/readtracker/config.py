"""Runtime settings for readtracker.

Values come from ``READTRACKER_*`` environment variables, optionally set in
a ``.env`` file next to where the CLI is run.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_DB_PATH = Path.home() / ".readtracker" / "readtracker.db"
DEFAULT_USER = "local"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class Config:
    """Settings shared by the CLI and services."""

    # SQLite file, or ":memory:"
    db_path: Path

    # Whose progress the CLI reads and writes
    user_id: str

    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Build a Config from READTRACKER_* variables."""
        raw_path = os.environ.get("READTRACKER_DB_PATH", str(DEFAULT_DB_PATH))

        return cls(
            db_path=Path(raw_path).expanduser(),
            user_id=os.environ.get("READTRACKER_USER", DEFAULT_USER),
            log_level=os.environ.get("READTRACKER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )

    def validate(self) -> list[str]:
        """Check the settings and return a list of problems (empty when fine).

        Creates the database directory when it is missing.
        """
        problems = []

        if str(self.db_path) != ":memory:" and not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                problems.append(f"Database directory is not writable: {self.db_path.parent}")

        if self.log_level not in LOG_LEVELS:
            problems.append(f"Unknown log level: {self.log_level}")

        if not self.user_id:
            problems.append("READTRACKER_USER must not be empty")

        return problems

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)


_config: Optional[Config] = None


def get_config() -> Config:
    """Process-wide Config, loaded on first use."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Forget the loaded Config so the next get_config() rereads the environment."""
    global _config
    _config = None
