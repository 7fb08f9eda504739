"""Curses terminal backend and the drawing interface the dashboard renders into.

The graph renderer only needs ``write_text``; the dashboard loop also needs
the clear/flush/poll half. ``CursesTerminal`` provides both on top of the
standard curses module.
"""

from __future__ import annotations

import curses
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

KEY_ESC = 27

# Curses colour-pair IDs
C_TEXT = 1
C_BAR = 2

_COLOR_NAMES: dict[str, int] = {
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
}

# Brighter xterm-256 equivalents of the basic colours
_COLOR_256: dict[str, int] = {
    "black": 16,
    "red": 196,
    "green": 46,
    "yellow": 226,
    "blue": 33,
    "magenta": 201,
    "cyan": 51,
    "white": 255,
}


class TerminalError(Exception):
    """The terminal could not be initialised."""


class OutputMode(Enum):
    NORMAL = "normal"
    COLOR256 = "256"


class EventKind(Enum):
    KEY = "key"
    RESIZE = "resize"
    OTHER = "other"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    code: int = 0

    @property
    def is_escape(self) -> bool:
        return self.kind is EventKind.KEY and self.code == KEY_ESC


@dataclass(frozen=True)
class Style:
    color: int = C_TEXT
    bold: bool = False


TEXT = Style()
TITLE = Style(bold=True)
BAR = Style(color=C_BAR)


class Surface(Protocol):
    """Anything text can be placed on at cell coordinates."""

    def write_text(self, x: int, y: int, style: Style, text: str) -> None: ...


class Terminal(Surface, Protocol):
    def init(self) -> None: ...

    def shutdown(self) -> None: ...

    def select_rendering_mode(self, mode: OutputMode) -> None: ...

    def clear_buffer(self) -> None: ...

    def render(self) -> None: ...

    def poll_event(self, timeout_ms: int) -> Event | None: ...

    def drawable_height(self) -> int: ...


class CursesTerminal:
    """Full-screen curses backend.

    Writes that fall outside the window are dropped, so callers never
    need to clip.
    """

    def __init__(self, bar_color: str = "green", text_color: str = "white") -> None:
        self._stdscr: curses.window | None = None
        self._bar_color = bar_color
        self._text_color = text_color

    @property
    def screen(self) -> curses.window:
        if self._stdscr is None:
            raise TerminalError("terminal not initialized")
        return self._stdscr

    def init(self) -> None:
        try:
            stdscr = curses.initscr()
        except curses.error as e:
            raise TerminalError(str(e) or "curses.initscr failed") from e
        self._stdscr = stdscr
        try:
            curses.noecho()
            curses.cbreak()
            stdscr.keypad(True)
            curses.set_escdelay(25)
        except curses.error as e:
            self.shutdown()
            raise TerminalError(str(e)) from e
        try:
            curses.curs_set(0)
        except curses.error:
            pass  # cursor visibility is unsupported on some terminals

    def shutdown(self) -> None:
        if self._stdscr is None:
            return
        try:
            self._stdscr.keypad(False)
            curses.nocbreak()
            curses.echo()
        except curses.error:
            pass
        curses.endwin()
        self._stdscr = None

    def select_rendering_mode(self, mode: OutputMode) -> None:
        if not curses.has_colors():
            return
        curses.start_color()
        curses.use_default_colors()
        if mode is OutputMode.COLOR256 and curses.COLORS >= 256:
            palette = _COLOR_256
        else:
            palette = _COLOR_NAMES
        curses.init_pair(C_TEXT, palette.get(self._text_color, palette["white"]), -1)
        curses.init_pair(C_BAR, palette.get(self._bar_color, palette["green"]), -1)

    def clear_buffer(self) -> None:
        self.screen.erase()

    def render(self) -> None:
        self.screen.refresh()

    def poll_event(self, timeout_ms: int) -> Event | None:
        self.screen.timeout(max(0, timeout_ms))
        key = self.screen.getch()
        if key == -1:
            return None
        if key == curses.KEY_RESIZE:
            curses.update_lines_cols()
            return Event(EventKind.RESIZE)
        return Event(EventKind.KEY, key)

    def write_text(self, x: int, y: int, style: Style, text: str) -> None:
        max_y, max_x = self.screen.getmaxyx()
        if y < 0 or y >= max_y or x >= max_x:
            return
        if x < 0:
            text = text[-x:]
            x = 0
        text = text[: max_x - x]
        if not text:
            return
        attr = curses.color_pair(style.color)
        if style.bold:
            attr |= curses.A_BOLD
        try:
            self.screen.addstr(y, x, text, attr)
        except curses.error:
            # Writing the bottom-right cell moves the cursor off-screen.
            pass

    def drawable_height(self) -> int:
        return self.screen.getmaxyx()[0]
