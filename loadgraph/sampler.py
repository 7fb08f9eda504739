"""CPU and memory utilisation sampling.

CPU percentage is computed as a delta between two consecutive /proc/stat
readings, so a sampler must live for the whole dashboard session. The first
call has nothing to compare against and returns 0%.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

import psutil

_PROC_STAT = "/proc/stat"


@dataclass(frozen=True)
class CounterSnapshot:
    """Cumulative CPU time-in-state counters (jiffies) at one instant."""

    user: int
    nice: int
    system: int
    idle: int
    iowait: int
    irq: int
    softirq: int

    @classmethod
    def parse(cls, line: str) -> CounterSnapshot:
        """Build a snapshot from the aggregate ``cpu`` line of /proc/stat.

        Fields past softirq (steal, guest, ...) are ignored.

        Raises:
            ValueError: If the line is not a ``cpu`` line or has fewer than
                seven numeric fields.
        """
        parts = line.split()
        if not parts or parts[0] != "cpu":
            raise ValueError(f"not an aggregate cpu line: {line!r}")
        values = [int(x) for x in parts[1:8]]
        if len(values) < 7:
            raise ValueError(f"expected 7 counters, got {len(values)}")
        return cls(*values)

    @property
    def total(self) -> int:
        return (
            self.user + self.nice + self.system + self.idle
            + self.iowait + self.irq + self.softirq
        )

    @property
    def idle_total(self) -> int:
        return self.idle + self.iowait


def read_cpu_counters() -> CounterSnapshot:
    """Read aggregate CPU counters, from /proc/stat where the host has one."""
    try:
        with open(_PROC_STAT) as f:
            return CounterSnapshot.parse(f.readline())
    except FileNotFoundError:
        pass

    # No procfs (macOS, BSD): psutil reports seconds rather than jiffies,
    # which is fine since only ratios of deltas are used.
    t = psutil.cpu_times()
    return CounterSnapshot(
        *(
            int(getattr(t, name, 0.0) * 100)
            for name in ("user", "nice", "system", "idle", "iowait", "irq", "softirq")
        )
    )


def read_memory() -> tuple[int, int]:
    """Return ``(total, free)`` physical memory in bytes."""
    vm = psutil.virtual_memory()
    return vm.total, vm.free


class Sampler:
    """Turns cumulative OS counters into point-in-time percentages.

    Holds the previous CPU snapshot, so use exactly one instance per
    monitored CPU stream. Both readers can be swapped out for tests.
    Read failures degrade to 0.0 instead of raising.
    """

    def __init__(
        self,
        read_counters: Callable[[], CounterSnapshot] = read_cpu_counters,
        read_mem: Callable[[], tuple[int, int]] = read_memory,
    ) -> None:
        self._read_counters = read_counters
        self._read_mem = read_mem
        self._prev: CounterSnapshot | None = None

    @property
    def previous(self) -> CounterSnapshot | None:
        """Snapshot taken by the last successful CPU read."""
        return self._prev

    def sample_cpu(self) -> float:
        """Overall CPU utilisation since the previous call, in percent."""
        try:
            curr = self._read_counters()
        except (OSError, ValueError, IndexError, RuntimeError):
            return 0.0

        prev, self._prev = self._prev, curr
        if prev is None:
            return 0.0

        # Counter regression (wraparound) is not handled: diffs go negative.
        total_diff = curr.total - prev.total
        idle_diff = curr.idle_total - prev.idle_total
        if total_diff == 0:
            return 0.0
        return 100.0 * (1.0 - idle_diff / total_diff)

    def sample_memory(self) -> float:
        """Used physical memory as a percentage of total."""
        try:
            total, free = self._read_mem()
        except (OSError, RuntimeError):
            return 0.0
        if total <= 0:
            return 0.0
        return 100.0 * (total - free) / total
