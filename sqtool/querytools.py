"""Helpers behind the query editor: identifier chains, completion tooltips and charts."""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from html import escape
from typing import Any, Iterable, Mapping, Optional, Sequence

from sqtool.timechart import TimeChart

_MAX_CHAIN = 3


def identifier_chain(line: str, pos: int) -> Optional[list[str]]:
    """Split the dotted identifier ending at ``pos`` of ``line`` into its parts.

    The last item is the word under the cursor and may be empty. Returns None
    when there is nothing to complete: the cursor is inside a quoted name, a
    word starts with a digit, or the chain has more than three parts.
    """
    pos = max(0, min(pos, len(line)))
    words: list[str] = []
    word = ""
    quoted = False

    def push_word() -> bool:
        nonlocal word
        if word:
            if not quoted and word[0].isdigit():
                return False
            words.insert(0, word)
            word = ""
        elif quoted:
            return False
        elif not words:
            # the current word is always the last item, even when empty
            words.insert(0, word)
        return True

    prev_char: Optional[str] = None
    while pos:
        pos -= 1
        c = line[pos]
        if c == '"':
            if not quoted and prev_char != ".":
                return None
            push_word()
            quoted = not quoted
        elif quoted or c.isalnum() or c == "_":
            word = c + word
            if not pos and (quoted or prev_char == '"' or not push_word()):
                return None
        else:
            if not push_word():
                return None
            if c != ".":
                break
        prev_char = c

    if not words or len(words) > _MAX_CHAIN:
        return None
    return words


def _html_escaped(text: str) -> str:
    return escape(text, quote=False).replace('"', "&quot;")


def _json_string(obj: Mapping[str, Any], key: str) -> str:
    value = obj.get(key)
    return value if isinstance(value, str) else ""


def completion_tooltip(data: Any) -> str:
    """Build the HTML tooltip of a completion item from its JSON description.

    ``data`` is a JSON object or an array of objects with optional ``n`` (name)
    and ``d`` (description) strings. Returns an empty string if there is
    nothing to show.
    """
    if not isinstance(data, str):
        data = "" if data is None else str(data)
    try:
        doc = json.loads(data)
    except ValueError:
        return ""
    if isinstance(doc, dict):
        items: list[Any] = [doc]
    elif isinstance(doc, list):
        items = doc
    else:
        return ""

    parts = []
    for item in items:
        if not isinstance(item, dict):
            continue
        name = _json_string(item, "n")
        info = _json_string(item, "d")
        if not name and not info:
            continue
        text = ""
        if name:
            text = "<b>" + _html_escaped(name).replace(" ", "&nbsp;") + "</b>"
        if info:
            text += ("<br/>" if name else "") + _html_escaped(info)
        parts.append(text)
    return "<br/><br/>".join(parts)


def build_charts(settings: Mapping[str, Any]) -> list[TimeChart]:
    """Create the charts described under ``charts`` of the query settings.

    Each entry holds ``name``, ``x`` (the column with timestamps; empty means
    the fetch time), ``agg_y`` (cumulative paths) and ``y`` (plain paths),
    the latter two mapping column names to colours.
    """
    entries = settings.get("charts")
    if not isinstance(entries, list):
        return []
    charts = []
    for entry in entries:
        if not isinstance(entry, dict):
            entry = {}
        chart = TimeChart(_json_string(entry, "name"))
        chart.x_source_field = _json_string(entry, "x")
        for key, cumulative in (("agg_y", True), ("y", False)):
            paths = entry.get(key)
            if not isinstance(paths, dict):
                continue
            for name in sorted(paths):
                colour = paths[name]
                chart.create_path(name, colour if isinstance(colour, str) else "", cumulative)
        charts.append(chart)
    return charts


def _column_name(column: Any) -> str:
    return column if isinstance(column, str) else str(getattr(column, "name", column))


def _to_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, (bool, int, float, Decimal)):
        return float(value)
    try:
        return float(str(value))
    except ValueError:
        return None


def _to_moment(value: Any) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if value is None:
        return None
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError:
        return None


def feed_charts(charts: Iterable[TimeChart], columns: Sequence[Any],
                rows: Iterable[Sequence[Any]]) -> int:
    """Append the numeric values of fetched rows to the matching chart paths.

    A path takes the column of the same name. Rows are timed by the chart's
    x-source column (ISO timestamps) or, without one, by the current time;
    a path is skipped if the x-source column is missing. Returns the number
    of values queued.
    """
    index = {}
    for ordinal, column in enumerate(columns):
        index.setdefault(_column_name(column), ordinal)
    rows = [list(row) for row in rows]

    queued = 0
    for chart in charts:
        x_field = chart.x_source_field
        for name in chart.path_names():
            value_index = index.get(name)
            if value_index is None:
                continue
            x_index = None
            if x_field:
                x_index = index.get(x_field)
                if x_index is None:
                    continue
            for row in rows:
                value = _to_float(row[value_index])
                if value is None:
                    continue
                if x_index is None:
                    chart.append_value(name, value, datetime.now())
                    queued += 1
                    continue
                moment = _to_moment(row[x_index])
                if moment is not None:
                    chart.append_value(name, value, moment)
                    queued += 1
        chart.apply_new_values()
    return queued