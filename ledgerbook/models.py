"""Ledger entries and the errors raised while reading or changing them."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

DATE_FORMAT = "%Y-%m-%d"


class LedgerError(Exception):
    """Base class for every ledger failure reported to the user."""


class NotFound(LedgerError):
    """The ledger file does not exist."""


class MalformedEntry(LedgerError):
    """A stored row cannot be interpreted as an entry."""


class InvalidInput(LedgerError):
    """User supplied text that is not a date or an amount."""


class StorageFailure(LedgerError):
    """Writing the ledger file failed."""


class NoEntries(LedgerError):
    """A report was requested for a ledger (or filter) without entries."""


@dataclass
class Entry:
    """A single dated amount as stored in a ledger file."""

    date: str
    amount: Decimal

    def parsed_date(self) -> date:
        try:
            return parse_date(self.date)
        except InvalidInput as exc:
            raise MalformedEntry(f"Invalid date format: {self.date}") from exc

    def day_month(self) -> str:
        """Display form used inside a year, e.g. ``September 12``."""
        try:
            d = parse_date(self.date)
        except InvalidInput:
            return self.date
        return f"{d.strftime('%B')} {d.day}"


def parse_date(text: str) -> date:
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidInput(f"Invalid date: {text!r}") from exc


def parse_amount(text: str) -> Decimal:
    """Parse a plain decimal literal such as ``-999.99``."""
    try:
        value = Decimal(text.strip())
    except InvalidOperation as exc:
        raise InvalidInput(f"Invalid amount: {text!r}") from exc
    if not value.is_finite():
        raise InvalidInput(f"Invalid amount: {text!r}")
    return value


def amount_literal(amount: Decimal) -> str:
    # fixed-point, never scientific notation
    return format(amount, "f")
