"""Main entry point for the readtracker package."""

from readtracker.cli import main

if __name__ == "__main__":
    main()
