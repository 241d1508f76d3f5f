"""Browse and edit ``date;amount`` ledger files from the terminal."""

__version__ = "0.1.0"
