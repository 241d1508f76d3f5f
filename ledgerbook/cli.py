"""Command-line interface and curses front end for ledgerbook."""
from __future__ import annotations

import argparse
import curses
import logging
import sys
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Callable, Iterator, List, Optional

import questionary

from . import __version__
from .app import App
from .config import load_for_directory
from .dispatch import Key, run_loop
from .formatting import FormatOptions
from .logging_setup import configure_logging, get_logger
from .models import Entry, LedgerError, NotFound, parse_amount, parse_date
from .report import generate_report
from .services import add_entry, sort_ledger
from .storage import list_ledgers
from .view import Modal, Panel, Screen, project

log = get_logger("ledgerbook.cli")

FOOTER_HEIGHT = 3
MIN_HEIGHT = FOOTER_HEIGHT + 3
MIN_WIDTH = 30
MODAL_HEIGHT = 8
MODAL_MIN_WIDTH = 40

FOCUSED_MARKER = "▌"
UNFOCUSED_MARKER = "▎"


# -- curses helpers ---------------------------------------------------------


def _center_box(stdscr, height: int, width: int) -> "curses.window":
    """Create a bordered window centered on ``stdscr``."""

    h, w = stdscr.getmaxyx()
    height = min(height, h)
    width = min(width, w)
    y = max(0, (h - height) // 2)
    x = max(0, (w - width) // 2)
    win = curses.newwin(height, width, y, x)
    win.box()
    return win


@contextmanager
def temp_cursor(state: int):
    """Temporarily set cursor visibility and restore on exit."""

    prev = None
    try:
        prev = curses.curs_set(state)
    except curses.error:  # pragma: no cover - some terminals
        prev = None
    try:
        yield
    finally:
        if prev is not None:
            try:
                curses.curs_set(prev)
            except curses.error:  # pragma: no cover - cleanup best effort
                pass


@contextmanager
def keypad_mode(win):
    """Enable keypad mode and ensure it is disabled afterwards."""

    try:
        win.keypad(True)
    except curses.error:  # pragma: no cover - fake windows
        pass
    try:
        yield
    finally:
        try:
            win.keypad(False)
        except curses.error:  # pragma: no cover - fake windows
            pass


def _addnstr(win, y: int, x: int, text: str, n: int, attr: int = curses.A_NORMAL) -> None:
    if n <= 0:
        return
    try:
        win.addnstr(y, x, text, n, attr)
    except curses.error:
        # writing the bottom-right cell raises after a successful write
        pass


def fit_line(marker: str, left: str, right: str, width: int) -> str:
    """``marker + left`` and ``right + " "`` pushed to the edges of ``width``."""
    right = right + " "
    spacer = max(0, width - len(marker) - len(left) - len(right))
    return f"{marker}{left}{' ' * spacer}{right}"[:width]


# -- drawing ----------------------------------------------------------------


def draw_panel(win, pnl: Panel) -> None:
    h, w = win.getmaxyx()
    border = curses.A_BOLD if pnl.focused else curses.A_NORMAL
    win.erase()
    win.attron(border)
    win.box()
    win.attroff(border)
    _addnstr(win, 0, 2, f" {pnl.title} ", w - 4, border)

    visible = max(0, h - 2)
    selected = pnl.selected_index or 0
    top = max(0, selected - visible + 1)
    for i, row in enumerate(pnl.rows[top : top + visible]):
        if row.selected:
            marker = FOCUSED_MARKER if pnl.focused else UNFOCUSED_MARKER
            attr = curses.A_REVERSE if pnl.focused else curses.A_BOLD
        else:
            marker, attr = " ", curses.A_NORMAL
        _addnstr(win, 1 + i, 1, fit_line(marker, row.left, row.right, w - 2), w - 2, attr)
    win.noutrefresh()


def draw_modal(stdscr, modal: Modal) -> None:
    _, w = stdscr.getmaxyx()
    width = max(MODAL_MIN_WIDTH, (w * 3) // 5)
    win = _center_box(stdscr, MODAL_HEIGHT, width)
    _, inner = win.getmaxyx()
    inner -= 2
    _addnstr(win, 0, 2, f" {modal.title} ", inner - 2, curses.A_BOLD)

    cursor = None
    rows = {"File": 1, "Date": 3, "Amount": 4}
    for fld in modal.fields:
        y = rows.get(fld.label, 1)
        marker = FOCUSED_MARKER if fld.focused else " "
        line = f"{marker}{fld.label:<6}  {fld.value}"
        attr = curses.A_REVERSE if fld.focused else curses.A_NORMAL
        _addnstr(win, y, 1, line.ljust(inner), inner, attr)
        if fld.focused:
            cursor = (y, 1 + min(len(line), inner - 1))
    if modal.error:
        _addnstr(win, 5, 2, f"Error: {modal.error}", inner - 1, curses.A_BOLD)

    if cursor is not None:
        try:
            win.move(*cursor)
        except curses.error:
            pass
    win.noutrefresh()


def draw_screen(stdscr, screen: Screen) -> None:
    h, w = stdscr.getmaxyx()
    stdscr.erase()
    if h < MIN_HEIGHT or w < MIN_WIDTH:
        _addnstr(stdscr, 0, 0, "Terminal too small. Resize bigger.", w - 1)
        stdscr.refresh()
        return
    stdscr.noutrefresh()

    main_h = h - FOOTER_HEIGHT
    col_w = w // 3
    for idx, pnl in enumerate(screen.panels):
        x = idx * col_w
        width = col_w if idx < 2 else w - x
        draw_panel(curses.newwin(main_h, width, 0, x), pnl)

    footer = curses.newwin(FOOTER_HEIGHT, w, main_h, 0)
    footer.box()
    _addnstr(footer, 1, 1, screen.footer, w - 2)
    footer.noutrefresh()

    try:
        curses.curs_set(1 if screen.modal else 0)
    except curses.error:  # pragma: no cover - some terminals
        pass
    if screen.modal is not None:
        draw_modal(stdscr, screen.modal)
    curses.doupdate()


def read_keys(stdscr) -> Iterator[Key]:
    """Whole characters as ``str``, function keys as ``int``."""
    while True:
        key = stdscr.get_wch()
        if key == curses.KEY_RESIZE:
            curses.update_lines_cols()
            curses.resize_term(0, 0)
            stdscr.clearok(True)
        yield key


def run_tui(
    stdscr,
    ledgers: List[Path],
    options: FormatOptions,
    today: Callable[[], date] = date.today,
) -> None:
    """Interactive browser; ``stdscr`` comes from :func:`curses.wrapper`."""
    app = App(ledgers, options, today=today)
    with temp_cursor(0), keypad_mode(stdscr):
        try:
            curses.use_default_colors()
        except curses.error:  # pragma: no cover - terminals without color
            pass
        run_loop(app, read_keys(stdscr), lambda a: draw_screen(stdscr, project(a)))


# -- batch commands ---------------------------------------------------------


def _options_for(path: Path) -> FormatOptions:
    return load_for_directory(Path(path).parent).format_options()


def cmd_new_entry(args) -> int:
    amount_text = args.amount
    if amount_text is None:
        amount_text = questionary.text("Amount:").ask()
        if amount_text is None:
            return 1
    amount = parse_amount(amount_text)
    when = parse_date(args.date) if args.date else date.today()

    info = add_entry(args.file, Entry(when.isoformat(), amount))
    print(info.render(_options_for(args.file)), end="")
    return 0


def cmd_report(args) -> int:
    report = generate_report(args.file, args.filter)
    print(report.render(_options_for(args.file)), end="")
    return 0


def cmd_sort(args) -> int:
    count = sort_ledger(args.file)
    log.info("sorted %d entries in %s", count, args.file)
    return 0


def resolve_ledgers(paths: List[Path]) -> tuple[List[Path], Path]:
    """Ledger files named by ``paths`` and the directory holding their config."""
    ledgers: List[Path] = []
    for p in paths:
        if p.is_dir():
            found = list_ledgers(p)
            if not found:
                raise NotFound(f"No ledger files in {p}")
            ledgers.extend(found)
        elif p.is_file():
            ledgers.append(p)
        else:
            raise NotFound(f"File '{p}' does not exist")
    first = paths[0]
    return ledgers, first if first.is_dir() else first.parent


def cmd_tui(args) -> int:
    ledgers, directory = resolve_ledgers(args.paths or [Path(".")])
    options = load_for_directory(directory).format_options()
    curses.wrapper(run_tui, ledgers, options)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ledgerbook",
        description="A simple financial tool for managing ledger files",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_new = sub.add_parser("new-entry", help="Add a new entry to a ledger file")
    p_new.add_argument("-a", "--amount", help="Amount to add (e.g. -999.99); asked if omitted")
    p_new.add_argument("-d", "--date", help="Date of the entry (YYYY-MM-DD, defaults to today)")
    p_new.add_argument("file", type=Path, help="Path to the ledger file")
    p_new.set_defaults(func=cmd_new_entry)

    p_report = sub.add_parser("report", help="Print a report, optionally filtered by date")
    p_report.add_argument(
        "-f", "--filter", help="Date prefix, e.g. 2024 or 2024-02"
    )
    p_report.add_argument("file", type=Path, help="Path to the ledger file")
    p_report.set_defaults(func=cmd_report)

    p_sort = sub.add_parser("sort", help="Sort the entries of a ledger file by date")
    p_sort.add_argument("file", type=Path, help="Path to the ledger file")
    p_sort.set_defaults(func=cmd_sort)

    p_tui = sub.add_parser("tui", help="Browse ledger files interactively")
    p_tui.add_argument(
        "paths", nargs="*", type=Path, help="A directory of .csv ledgers or ledger files"
    )
    p_tui.set_defaults(func=cmd_tui)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    # the curses screen must not be painted over by log records
    stream = None if args.cmd == "tui" else sys.stderr
    configure_logging(
        args.log_level, stream=stream, path=args.log_file, default=logging.WARNING
    )
    try:
        return args.func(args)
    except LedgerError as exc:
        log.debug("command %s failed", args.cmd, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
