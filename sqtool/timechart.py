"""Time series chart model: paths of timed values, axis intervals and labels."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# candidate grid steps in seconds, largest first
_TIME_DIVISORS = (
    3600 * 24,
    3600 * 12,
    3600 * 6,
    3600 * 3,
    3600,
    1800,  # 30 min
    900,   # 15 min
    600,   # 10 min
    300,   # 5 min
    150,   # 2.5 min
    60,    # 1 min
    30, 15, 10, 5, 2,
)


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def beautify_interval(interval: float) -> float:
    """Round a value-axis step to a power of ten, or its half or double."""
    power = _round_half_away(math.log10(interval))
    res = 10.0 ** power
    if res > interval:
        res /= 2
    elif res < interval / 2:
        res *= 2
    return res


def beautify_time_interval(interval: float) -> float:
    """Pick the largest convenient time step (in seconds) not exceeding ``interval``."""
    secs = _round_half_away(interval)
    for div in _TIME_DIVISORS:
        if _round_half_away(secs / div) >= 1:
            return div
    return 1


@dataclass
class ChartPath:
    """One line of a chart; cumulative paths plot differences of successive values."""

    color: str
    cumulative: bool = False
    prev_value: float = math.nan
    points: list[tuple[float, float]] = field(default_factory=list)


class TimeChart:
    """Collects timed values into paths and tracks the extent of the plotted data."""

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.x_source_field = ""
        self.start_moment: datetime | None = None
        self.max_value = 0.0
        self.scene_right = 0.0
        self._paths: dict[str, ChartPath] = {}
        self._pending: dict[str, list[tuple[float, float]]] = {}

    def create_path(self, name: str, color: str, cumulative: bool = False) -> ChartPath:
        """Add (or replace) the path called ``name``."""
        path = ChartPath(color, cumulative)
        self._paths[name] = path
        return path

    def path_exists(self, name: str) -> bool:
        return name in self._paths

    def path_names(self) -> list[str]:
        """Names of all paths in sorted order."""
        return sorted(self._paths)

    def path(self, name: str) -> ChartPath:
        return self._paths[name]

    def append_value(self, name: str, value: float, moment: datetime) -> None:
        """Queue a value of path ``name`` at ``moment``; unknown paths are ignored."""
        if name not in self._paths:
            return
        if self.start_moment is None:
            self.start_moment = moment
        msecs = (moment - self.start_moment) // timedelta(milliseconds=1)
        self._pending.setdefault(name, []).append((msecs / 1000.0, float(value)))

    def apply_new_values(self) -> bool:
        """Move queued values into their paths.

        Returns True when the maximum plotted value grew, i.e. the value axis
        has to be rescaled.
        """
        if not self._pending:
            return False
        max_x = 0.0
        grew = False
        for name in sorted(self._pending):
            parts = self._pending[name]
            path = self._paths[name]
            for x, original in parts:
                has_base = not path.cumulative or not math.isnan(path.prev_value)
                y = original
                if path.cumulative and not math.isnan(path.prev_value):
                    y -= path.prev_value
                if path.points or has_base:
                    path.points.append((x, y))
                if has_base and y > self.max_value:
                    self.max_value = y
                    grew = True
                path.prev_value = original
            max_x = max(max_x, parts[-1][0])
        self._pending.clear()
        self.scene_right = max_x
        return grew

    def x_label(self, x: float, interval: float) -> str:
        """Text of a time-axis label at ``x`` seconds, detailed according to ``interval``."""
        if self.start_moment is None:
            raise ValueError("chart has no values yet")
        ts = self.start_moment + timedelta(milliseconds=int(x * 1000))
        ms = ts.microsecond // 1000
        # fix rounding problems
        if ms > 990:
            ts += timedelta(milliseconds=1000 - ms)
        elif 0 < ms < 10:
            ts -= timedelta(milliseconds=ms)

        if interval > 3600 * 3:
            return f"{ts.day:02d} {_MONTHS[ts.month - 1]} {ts:%H:%M}"
        if interval > 180:
            return f"{ts:%H:%M}"
        if interval > 3:
            return f"{ts:%H:%M:%S}"
        tenths = int(math.floor(ts.microsecond // 1000 / 100.0 + 0.5))
        return f"{ts:%H:%M:%S}.{tenths}"