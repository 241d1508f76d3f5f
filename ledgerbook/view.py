"""Renderer-independent description of the screen."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .app import App, Focus, PopupField, PopupMode

NAVIGATION_HINT = "↓(j)/↑(k): Navigate | Tab: Focus | n/e: New/Edit Entry | q: Quit"
POPUP_HINT = "Tab: Switch Field | Enter: Save | q: Cancel"

POPUP_TITLES = {
    PopupMode.ADDING: "Add New Entry",
    PopupMode.EDITING: "Edit Entry",
}


@dataclass
class Row:
    left: str
    right: str
    selected: bool = False


@dataclass
class Panel:
    title: str
    rows: List[Row] = field(default_factory=list)
    focused: bool = False

    @property
    def selected_index(self) -> Optional[int]:
        for idx, row in enumerate(self.rows):
            if row.selected:
                return idx
        return None


@dataclass
class Field:
    label: str
    value: str
    focused: bool = False


@dataclass
class Modal:
    title: str
    fields: List[Field]
    error: Optional[str] = None


@dataclass
class Screen:
    ledgers: Panel
    years: Panel
    entries: Panel
    footer: str
    modal: Optional[Modal] = None

    @property
    def panels(self) -> List[Panel]:
        return [self.ledgers, self.years, self.entries]


def project(app: App) -> Screen:
    """Describe what the screen should show for the current state of ``app``."""
    sel = app.selection
    popup_open = app.popup.active

    def has_focus(focus: Focus) -> bool:
        return app.focus is focus and not popup_open

    ledgers = Panel(
        "Files",
        [
            Row(
                path.name,
                app.report.total if i == sel.ledger else "",
                i == sel.ledger,
            )
            for i, path in enumerate(app.ledgers)
        ],
        has_focus(Focus.LEDGERS),
    )
    years = Panel(
        app.report.title,
        [
            Row(year.year, year.subtotal, i == sel.year)
            for i, year in enumerate(app.report.years)
        ],
        has_focus(Focus.YEARS),
    )
    current = app.current_year
    entries = Panel(
        current.year if current else "",
        [
            Row(day, amount, i == sel.entry)
            for i, (day, amount) in enumerate(current.rows if current else [])
        ],
        has_focus(Focus.ENTRIES),
    )

    modal = None
    if popup_open:
        popup = app.popup
        ledger = app.current_ledger
        modal = Modal(
            POPUP_TITLES[popup.mode],
            [
                Field("File", ledger.name if ledger else ""),
                Field("Date", popup.date_text, popup.field is PopupField.DATE),
                Field("Amount", popup.amount_text, popup.field is PopupField.AMOUNT),
            ],
            popup.error,
        )

    return Screen(
        ledgers=ledgers,
        years=years,
        entries=entries,
        footer=POPUP_HINT if popup_open else NAVIGATION_HINT,
        modal=modal,
    )
