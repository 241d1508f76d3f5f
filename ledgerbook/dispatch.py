"""Key handling and the main event loop."""
from __future__ import annotations

import curses
from typing import Callable, Iterable, Optional, Union

from .app import App, PopupMode

Key = Union[int, str]

TAB = 9
ESC = 27
ENTER_KEYS = (curses.KEY_ENTER, 10, 13)
BACKSPACE_KEYS = (curses.KEY_BACKSPACE, 127, 8)
NEXT_KEYS = (curses.KEY_DOWN, ord("j"))
PREVIOUS_KEYS = (curses.KEY_UP, ord("k"))


def _code(key: Key) -> int:
    if isinstance(key, str):
        return ord(key) if len(key) == 1 else -1
    return key


def _printable(code: int) -> Optional[str]:
    if code < 32 or code == 127 or code > 0x10FFFF:
        return None
    if curses.KEY_MIN <= code <= curses.KEY_MAX:
        return None
    ch = chr(code)
    return ch if ch.isprintable() else None


def handle_navigation_key(app: App, code: int) -> bool:
    if code == ord("q"):
        return False
    if code == ord("n"):
        app.open_add(app.today())
    elif code == ord("e"):
        app.open_edit()
    elif code in NEXT_KEYS:
        app.next()
    elif code in PREVIOUS_KEYS:
        app.previous()
    elif code == TAB:
        app.cycle_focus()
    return True


def handle_popup_key(app: App, code: int) -> bool:
    if code in (ord("q"), ESC):
        app.close_popup()
    elif code == TAB:
        app.cycle_field()
    elif code in ENTER_KEYS:
        app.save_popup()
    elif code in BACKSPACE_KEYS:
        app.backspace()
    else:
        ch = _printable(code)
        if ch is not None:
            app.type_char(ch)
    return True


def handle_key(app: App, key: Key) -> bool:
    """Apply one key press to ``app``. Returns False when the user quits."""
    code = _code(key)
    if app.popup.mode is PopupMode.INACTIVE:
        return handle_navigation_key(app, code)
    return handle_popup_key(app, code)


def run_loop(app: App, keys: Iterable[Key], draw: Callable[[App], None]) -> None:
    """Draw, then for every key: dispatch and redraw, until quit."""
    draw(app)
    for key in keys:
        if not handle_key(app, key):
            break
        draw(app)
