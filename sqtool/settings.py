"""Persistent application settings with a thread-safe in-memory cache."""

from __future__ import annotations

import base64
import json
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

DEFAULT_ENCODINGS = "UTF-8,UTF-16,ISO-8859-1"
DEFAULT_TAB_SIZE = 3

# (commands help, functions help) by whether the locale is Russian
HELP_URLS = {
    False: ("https://docs.example.com/en/sql-commands",
            "https://docs.example.com/en/functions"),
    True: ("https://docs.example.com/ru/sql-commands",
           "https://docs.example.com/ru/functions"),
}

_APP_BLOCK_RE = re.compile(r"QApplication\s*{([^}]+)")
_PROPERTY_RE = re.compile(r"([\w-]+)\s*:\s*([^;}]+)")
_FLOAT_PREFIX_RE = re.compile(r"\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_BYTES_KEY = "$bytes"


@dataclass(frozen=True)
class RecentFile:
    """A recently opened script and the encoding it was read with."""

    file_name: str
    encoding: str


@dataclass
class FontSpec:
    """Application font derived from the style sheet; None means system default."""

    family: str | None = None
    point_size: float | None = None
    pixel_size: int | None = None


def _num(value: float) -> str:
    return f"{value:g}"


def default_app_style(font_size: int) -> str:
    """Return the default style sheet for the given base font size."""
    return (
        f"QApplication {{ font-size: {_num(font_size)}pt; }} \n"
        f"QTableView, QHeaderView {{ font-size: {_num(font_size - 0.5)}pt; }}\n"
        "QTableView::item { padding: 0.2em; border: 0px; }\n"
        "QTabBar::tab { height: 2em; }\n"
        "QPlainTextEdit {\n"
        "   font-family: Consolas, Menlo, 'Liberation Mono', 'Lucida Console', "
        "'DejaVu Sans Mono', 'Courier New', monospace;\n"
        f"   font-size: {_num(font_size + 1)}pt;\n"
        "}"
    )


def _leading_float(text: str) -> float:
    match = _FLOAT_PREFIX_RE.match(text)
    return float(match.group(0)) if match else 0.0


def parse_app_font(app_style: str) -> FontSpec | None:
    """Extract the font from the style sheet's QApplication block, if there is one."""
    block = _APP_BLOCK_RE.search(app_style)
    if not block:
        return None
    font = FontSpec()
    for name, raw in _PROPERTY_RE.findall(block.group(1)):
        value = raw.strip()
        if name == "font-family":
            font.family = value
        elif name == "font-size":
            size = _leading_float(value)
            if size:
                if value.endswith("px"):
                    font.pixel_size, font.point_size = int(size), None
                else:
                    font.point_size, font.pixel_size = size, None
    return font


def _as_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value if isinstance(value, str) else str(value)


def _as_int(value: Any) -> int | None:
    if isinstance(value, (bool, int)):
        return int(value)
    if isinstance(value, float):
        return round(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _encode(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return {_BYTES_KEY: base64.b64encode(bytes(value)).decode("ascii")}
    raise TypeError(f"value of type {type(value).__name__} cannot be stored")


def _decode(obj: dict) -> Any:
    if set(obj) == {_BYTES_KEY}:
        return base64.b64decode(obj[_BYTES_KEY])
    return obj


class Settings:
    """Key/value settings stored as JSON at ``path`` and cached in memory."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._cache: dict[str, Any] = {}

    def _read_store(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        content = self.path.read_text(encoding="utf-8")
        if not content.strip():
            return {}
        data = json.loads(content, object_hook=_decode)
        return data if isinstance(data, dict) else {}

    def _write_store(self, store: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(store, default=_encode, indent=2, sort_keys=True),
                             encoding="utf-8")

    def load(self, dpi: float = 96.0, russian: bool = False) -> FontSpec | None:
        """Reload all settings, filling in defaults; return the application font."""
        with self._lock:
            store = self._read_store()
            self._cache = dict(store)
            changed = False

            def set_default(key: str, value: Any) -> None:
                nonlocal changed
                store[key] = value
                self._cache[key] = value
                changed = True

            app_style = _as_str(store.get("appStyle"))
            if not app_style:
                app_style = default_app_style(10 if dpi > 120 else 9)
                set_default("appStyle", app_style)
            if not _as_str(store.get("encodings")):
                set_default("encodings", DEFAULT_ENCODINGS)
            commands_url, functions_url = HELP_URLS[bool(russian)]
            if not _as_str(store.get("f1url")):
                set_default("f1url", commands_url)
            if not _as_str(store.get("shiftF1url")):
                set_default("shiftF1url", functions_url)
            tab_size = _as_int(store.get("tabSize", -1))
            if tab_size is None or tab_size <= 0:
                set_default("tabSize", DEFAULT_TAB_SIZE)

            if changed:
                self._write_store(store)
        return parse_app_font(app_style)

    def value(self, name: str, default: Any = None) -> Any:
        """Return the cached value of ``name`` or ``default``."""
        with self._lock:
            return self._cache.get(name, default)

    def set_value(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` both on disk and in the cache."""
        with self._lock:
            store = self._read_store()
            store[key] = value
            self._write_store(store)
            self._cache[key] = value