"""readtracker - personal reading tracker with progress stats and weekly goals."""

__version__ = "0.1.0"
