"""Main entry point for heroku-san."""

import sys

from .cli import cli


def main():
    """Main entry point."""
    try:
        cli(prog_name="heroku-san")
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)


if __name__ == "__main__":
    main()
