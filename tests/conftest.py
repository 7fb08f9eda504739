"""Shared fixtures: a terminal double that records what would be drawn."""

from __future__ import annotations

import pytest

from loadgraph.terminal import Event, OutputMode, Style, TerminalError


class RecordingTerminal:
    """Stands in for CursesTerminal; keeps every call and write in memory.

    ``events`` is consumed one item per poll; ``None`` means the poll timed
    out. Once exhausted, polls keep timing out.
    """

    def __init__(
        self,
        events: list[Event | None] | None = None,
        height: int = 40,
        fail_init: bool = False,
    ) -> None:
        self.events = list(events or [])
        self.height = height
        self.fail_init = fail_init
        self.calls: list[str] = []
        self.timeouts: list[int] = []
        self.writes: list[tuple[int, int, Style, str]] = []
        self.mode: OutputMode | None = None

    def init(self) -> None:
        self.calls.append("init")
        if self.fail_init:
            raise TerminalError("no tty")

    def shutdown(self) -> None:
        self.calls.append("shutdown")

    def select_rendering_mode(self, mode: OutputMode) -> None:
        self.calls.append("select_rendering_mode")
        self.mode = mode

    def clear_buffer(self) -> None:
        self.calls.append("clear_buffer")
        self.writes.clear()

    def render(self) -> None:
        self.calls.append("render")

    def poll_event(self, timeout_ms: int) -> Event | None:
        self.calls.append("poll_event")
        self.timeouts.append(timeout_ms)
        if self.events:
            return self.events.pop(0)
        return None

    def write_text(self, x: int, y: int, style: Style, text: str) -> None:
        self.writes.append((x, y, style, text))

    def drawable_height(self) -> int:
        return self.height

    # ── inspection helpers ──

    def cells(self) -> dict[tuple[int, int], tuple[str, Style]]:
        """Final glyph and style per cell, later writes winning."""
        grid: dict[tuple[int, int], tuple[str, Style]] = {}
        for x, y, style, text in self.writes:
            for i, ch in enumerate(text):
                grid[(x + i, y)] = (ch, style)
        return grid

    def text_at(self, x: int, y: int) -> str | None:
        for wx, wy, _, text in self.writes:
            if (wx, wy) == (x, y):
                return text
        return None


@pytest.fixture
def terminal() -> RecordingTerminal:
    return RecordingTerminal()


@pytest.fixture
def make_terminal() -> type[RecordingTerminal]:
    return RecordingTerminal
