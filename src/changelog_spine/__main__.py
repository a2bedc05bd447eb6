"""Allow ``python -m changelog_spine``."""

from changelog_spine.cli.app import app

if __name__ == "__main__":
    app()
