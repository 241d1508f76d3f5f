"""Module entry point for running the CLI via ``python -m ledgerbook``.

``ledgerbook tui`` starts the curses session itself through
:func:`curses.wrapper`, so this module only forwards the exit status.
"""

from .cli import main


def entry_point() -> None:
    raise SystemExit(main())


if __name__ == "__main__":  # pragma: no cover - manual execution entry
    entry_point()
