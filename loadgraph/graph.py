"""Bar-graph rendering of a metric history.

Layout for a graph whose top-left interior cell is ``(x, y)``, ``W`` columns
(one per history slot) by ``H`` rows::

         title                  row y - 2
        ┌────────────┐          row y - 1
    100%│            │          row y
        │    █   █   │
      0%│█ █ █ █ █ █ │          row y + H - 1
        └────────────┘          row y + H
"""

from __future__ import annotations

import math

from loadgraph.history import HistoryBuffer
from loadgraph.terminal import BAR, TEXT, TITLE, Surface

BAR_FILL = "█"
H_LINE = "─"
V_LINE = "│"
TOP_LEFT = "┌"
TOP_RIGHT = "┐"
BOTTOM_LEFT = "└"
BOTTOM_RIGHT = "┘"

LABEL_TOP = "100%"
LABEL_BOTTOM = "0%"
_LABEL_WIDTH = 4


def bar_height(value: float, height: int) -> int:
    """Number of filled cells for *value* percent in a graph *height* rows tall.

    100% maps to ``height - 1`` cells, so the top row is never filled.
    """
    cells = math.floor((value / 100.0) * (height - 1))
    return min(max(cells, 0), height - 1)


def _draw_border(surface: Surface, x: int, y: int, width: int, height: int) -> None:
    left, right = x - 1, x + width
    top, bottom = y - 1, y + height
    surface.write_text(left, top, TEXT, TOP_LEFT + H_LINE * width + TOP_RIGHT)
    surface.write_text(left, bottom, TEXT, BOTTOM_LEFT + H_LINE * width + BOTTOM_RIGHT)
    for row in range(y, y + height):
        surface.write_text(left, row, TEXT, V_LINE)
        surface.write_text(right, row, TEXT, V_LINE)


def draw_graph(
    surface: Surface,
    x: int,
    y: int,
    history: HistoryBuffer,
    title: str,
    height: int,
) -> None:
    """Render *history* as a bordered bar graph with its interior at ``(x, y)``.

    Columns run oldest (left) to newest (right); the graph is as wide as
    the history's capacity.
    """
    width = history.capacity

    surface.write_text(x, y - 2, TITLE, title)

    label_x = x - 1 - _LABEL_WIDTH
    surface.write_text(label_x, y, TEXT, f"{LABEL_TOP:>{_LABEL_WIDTH}}")
    surface.write_text(label_x, y + height - 1, TEXT, f"{LABEL_BOTTOM:>{_LABEL_WIDTH}}")

    _draw_border(surface, x, y, width, height)

    bottom = y + height - 1
    for col, value in enumerate(history.ordered_view()):
        for j in range(bar_height(value, height)):
            surface.write_text(x + col, bottom - j, BAR, BAR_FILL)
