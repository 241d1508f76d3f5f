import sys
from datetime import date
from pathlib import Path

# Ensure the project root is on the Python path
sys.path.append(str(Path(__file__).resolve().parents[1]))

from ledgerbook.app import App

EXPENSES = (
    "date;amount\n"
    "2024-01-15;-50.25\n"
    "2024-02-20;-100.00\n"
    "2024-03-10;-25.50\n"
    "2025-01-05;-75.75\n"
)
INCOME = (
    "date;amount\n"
    "2024-01-01;2000.00\n"
    "2024-02-01;2000.00\n"
    "2024-03-01;2000.00\n"
    "2025-01-01;2000.00\n"
)
SAVINGS = "date;amount\n2024-06-15;500.00\n2024-12-31;1000.00\n"

TODAY = date(2024, 12, 15)


def write_ledger(directory: Path, name: str, content: str) -> Path:
    path = Path(directory) / name
    path.write_text(content, encoding="utf-8")
    return path


def make_ledgers(directory: Path):
    """Three ledgers: expenses and income span 2024/2025, savings only 2024."""
    return [
        write_ledger(directory, "expenses.csv", EXPENSES),
        write_ledger(directory, "income.csv", INCOME),
        write_ledger(directory, "savings.csv", SAVINGS),
    ]


def make_app(directory: Path, ledgers=None) -> App:
    if ledgers is None:
        ledgers = make_ledgers(directory)
    return App(ledgers, today=lambda: TODAY)


def make_prompt(responses):
    iterator = iter(responses)

    def _prompt(*args, **kwargs):
        return next(iterator)

    return _prompt


def type_text(app: App, text: str) -> None:
    for ch in text:
        app.type_char(ch)
