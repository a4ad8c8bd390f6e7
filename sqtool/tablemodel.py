"""Tabular resultset model: columns, rows and their display values."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Iterable, Sequence

TOTAL_ROWS_TOOLTIP = "total number of rows"
_WIDE_TEXT_LIMIT = 100
_WIDE_CELL_HINT = (500, -1)
_SHORT_TABLE_ROWS = 5


@dataclass
class Column:
    """Resultset column: its name, database type name and text alignment."""

    name: str
    type_name: str = ""
    alignment: str = "left"


def format_value(value: Any) -> Any:
    """Return the text shown for temporal values; other values pass through."""
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.strftime("%Y-%m-%d")
        return value.strftime("%Y-%m-%d %H:%M:%S.") + f"{value.microsecond // 1000:03d}"
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, time):
        return value.strftime("%H:%M:%S.") + f"{value.microsecond // 1000:03d}"
    return value


class TableModel:
    """Rows of a resultset that grow as data is fetched."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.columns: list[Column] = []
        self.rows: list[list[Any]] = []

    def row_count(self) -> int:
        return len(self.rows)

    def column_count(self) -> int:
        return len(self.columns)

    def take(self, columns: Sequence[Column], rows: Iterable[Sequence[Any]]) -> None:
        """Append ``rows``; a different column count resets the model first."""
        if len(columns) != self.column_count():
            self.clear()
            self.columns = [Column(c.name, c.type_name, c.alignment) for c in columns]
        new_rows = [list(row) for row in rows]
        if new_rows:
            with self._lock:
                self.rows.extend(new_rows)

    def clear(self) -> None:
        """Drop all columns and rows."""
        with self._lock:
            self.columns = []
            self.rows = []

    def _cell(self, row: int, column: int) -> Any:
        return self.rows[row][column]

    def display_value(self, row: int, column: int) -> Any:
        return format_value(self._cell(row, column))

    def size_hint(self, row: int, column: int) -> tuple[int, int] | None:
        """A wide cell hint for long text, otherwise None (default size)."""
        value = self._cell(row, column)
        if value is not None and len(str(value)) > _WIDE_TEXT_LIMIT:
            return _WIDE_CELL_HINT
        return None

    def is_null(self, row: int, column: int) -> bool:
        return self._cell(row, column) is None

    def text_alignment(self, column: int) -> str:
        return self.columns[column].alignment

    def horizontal_header(self, section: int) -> str | None:
        if section < 0:
            return None
        return self.columns[section].name

    def horizontal_tooltip(self, section: int) -> str | None:
        if section < 0:
            return None
        return self.columns[section].type_name or None

    def vertical_header(self, section: int) -> str | None:
        """Row number; the first row shows the total count of a longer table."""
        if section < 0:
            return None
        if section or self.row_count() < _SHORT_TABLE_ROWS:
            return str(section + 1)
        return "↓" + str(self.row_count())

    def vertical_tooltip(self, section: int) -> str | None:
        if section == 0:
            return TOTAL_ROWS_TOOLTIP
        return None