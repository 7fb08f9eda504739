"""Live terminal dashboard of CPU and memory utilisation.

Samples both metrics every tick, keeps one graph-width of history per
metric and redraws two bordered bar graphs with curses. Press ESC to quit.

Usage:
    uv run loadgraph
    uv run loadgraph --config path/to/config.toml
"""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from loadgraph.config import dump_default_config, load_config, table
from loadgraph.graph import draw_graph
from loadgraph.history import HistoryBuffer
from loadgraph.sampler import Sampler
from loadgraph.terminal import (
    TEXT,
    TITLE,
    CursesTerminal,
    OutputMode,
    Terminal,
    TerminalError,
)

# ── Constants ──────────────────────────────────────────────────────────────

TICK_MS = 250
GRAPH_WIDTH = 50
GRAPH_HEIGHT = 10
GRAPH_LEFT = 10
HELP_TEXT = "Press ESC to exit"

# Rows taken by one metric block besides the graph interior:
# readout, title, top border, bottom border, spacer.
_BLOCK_EXTRA_ROWS = 5


class State(Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass
class Metric:
    """One tracked metric: how to sample it and where its history lives."""

    title: str
    label: str
    sample: Callable[[], float]
    history: HistoryBuffer


# ── Dashboard ──────────────────────────────────────────────────────────────


class Dashboard:
    """Owns the sampler and every history buffer for the session."""

    def __init__(
        self,
        sampler: Sampler | None = None,
        width: int = GRAPH_WIDTH,
        height: int = GRAPH_HEIGHT,
        left: int = GRAPH_LEFT,
        interval_ms: int = TICK_MS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.sampler = sampler or Sampler()
        self.height = height
        self.left = left
        self.interval_ms = interval_ms
        self._clock = clock
        self.state: State | None = None
        self.metrics = [
            Metric("CPU Usage", "Current CPU", self.sampler.sample_cpu, HistoryBuffer(width)),
            Metric("Memory Usage", "Memory", self.sampler.sample_memory, HistoryBuffer(width)),
        ]

    @classmethod
    def from_config(cls, config: dict[str, Any], sampler: Sampler | None = None) -> Dashboard:
        """Build a dashboard from a loaded config.

        Raises:
            ValueError: On a non-table ``graph`` or an ``interval_ms`` below 1.
        """
        graph = table(config, "graph")
        interval_ms = int(config.get("interval_ms", TICK_MS))
        if interval_ms < 1:
            raise ValueError(f"interval_ms must be at least 1, got {interval_ms}")
        return cls(
            sampler,
            width=int(graph.get("width", GRAPH_WIDTH)),
            height=int(graph.get("height", GRAPH_HEIGHT)),
            left=int(graph.get("left", GRAPH_LEFT)),
            interval_ms=interval_ms,
        )

    def block_top(self, index: int) -> int:
        """Screen row of the readout line for the *index*-th metric."""
        return 1 + index * (self.height + _BLOCK_EXTRA_ROWS)

    def wait(self, terminal: Terminal) -> bool:
        """Block until the tick period has elapsed. Returns True on ESC.

        Events other than ESC don't shorten the tick: polling resumes with
        whatever time is left. Input is polled at least once per tick, even
        when the deadline has already passed.
        """
        deadline = self._clock() + self.interval_ms / 1000.0
        remaining_ms = int((deadline - self._clock()) * 1000)
        while True:
            event = terminal.poll_event(max(remaining_ms, 0))
            if event is None:
                return False
            if event.is_escape:
                return True
            remaining_ms = int((deadline - self._clock()) * 1000)
            if remaining_ms <= 0:
                return False

    def tick(self, terminal: Terminal) -> None:
        """Sample, record and redraw everything once."""
        terminal.clear_buffer()

        values = [metric.sample() for metric in self.metrics]
        for metric, value in zip(self.metrics, values):
            metric.history.push(value)

        for i, (metric, value) in enumerate(zip(self.metrics, values)):
            top = self.block_top(i)
            terminal.write_text(self.left, top, TITLE, f"{metric.label}: {value:.1f}%")
            draw_graph(terminal, self.left, top + 3, metric.history, metric.title, self.height)

        terminal.write_text(self.left, terminal.drawable_height() - 2, TEXT, HELP_TEXT)
        terminal.render()

    def run(self, terminal: Terminal, mode: OutputMode = OutputMode.COLOR256) -> int:
        """Drive the dashboard until ESC or Ctrl-C. Returns the exit code."""
        try:
            terminal.init()
        except TerminalError as e:
            print(f"loadgraph: failed to initialize terminal: {e}", file=sys.stderr)
            return 1

        self.state = State.RUNNING
        try:
            terminal.select_rendering_mode(mode)
            while self.state is State.RUNNING:
                if self.wait(terminal):
                    self.state = State.TERMINATED
                    break
                self.tick(terminal)
        except KeyboardInterrupt:
            self.state = State.TERMINATED
        finally:
            terminal.shutdown()
        return 0


# ── CLI entry point ────────────────────────────────────────────────────────


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Live CPU and memory bar graphs in the terminal.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        metavar="PATH",
        help="Path to TOML config file",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Print the default configuration as TOML and exit",
    )
    args = parser.parse_args()

    if args.print_config:
        print(dump_default_config(), end="")
        return

    config = load_config(args.config)
    try:
        dashboard = Dashboard.from_config(config)
        mode = OutputMode(str(config.get("output_mode", "256")))
        colors = table(config, "colors")
    except ValueError as e:
        print(f"loadgraph: invalid configuration: {e}", file=sys.stderr)
        raise SystemExit(1) from e

    terminal = CursesTerminal(
        bar_color=colors.get("bar", "green"),
        text_color=colors.get("text", "white"),
    )
    sys.exit(dashboard.run(terminal, mode))


if __name__ == "__main__":
    main()
