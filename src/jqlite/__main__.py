"""Allow running jqlite with `python -m jqlite`."""

from jqlite.cli import main


if __name__ == "__main__":
    main()
