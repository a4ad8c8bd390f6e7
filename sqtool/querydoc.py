"""SQL script documents: loading, saving and resultset structure text."""

from __future__ import annotations

import codecs
import os
from typing import Callable, Optional, Sequence

from sqtool.tablemodel import Column

HIGHLIGHT_SIZE_LIMIT = 1024 * 1024 * 5
_DEFAULT_ENCODING = "utf-8"


def strip_trailing_spaces(line: str) -> str:
    """Remove trailing whitespace, but keep exactly three trailing spaces intact."""
    stripped = line.rstrip()
    trailing = line[len(stripped):]
    if trailing == "   ":
        return line
    return stripped


def resultset_structure(columns: Sequence[Column], escape: Callable[[str], str],
                        is_keyword: Optional[Callable[[str], bool]] = None) -> str:
    """Describe columns as ``(name type, ...)`` followed by a select list.

    Names that only needed quoting for form's sake stay unquoted; an empty
    string is returned when there are no columns.
    """
    if not columns:
        return ""
    names = []
    for column in columns:
        quoted = escape(column.name)
        if (len(column.name) == len(quoted) - 2
                and quoted == quoted.lower()
                and is_keyword is not None
                and not is_keyword(column.name)):
            quoted = column.name
        names.append(quoted)
    structure = ", ".join(f"{name} {column.type_name}" for name, column in zip(names, columns))
    return f"({structure})\nselect " + ", ".join(names)


class QueryDocument:
    """Text of a query editor together with its file name and encoding."""

    def __init__(self) -> None:
        self.file_name = ""
        self.encoding = ""
        self._text = ""
        self.modified = False
        self.highlighted = True

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        self._text = value
        self.modified = True

    def open_file(self, file_name: str, encoding: str) -> None:
        """Read ``file_name`` with ``encoding``; big files are left unhighlighted."""
        with open(file_name, "rb") as f:
            data = f.read()
        self.file_name = file_name
        self.encoding = encoding
        codec = codecs.lookup(encoding or _DEFAULT_ENCODING)
        self.highlighted = os.path.getsize(file_name) <= HIGHLIGHT_SIZE_LIMIT
        content = data.decode(codec.name, errors="replace")
        self._text = content.replace("\r\n", "\n").replace("\r", "\n")
        self.modified = False

    def save_file(self, file_name: str, encoding: Optional[str] = None) -> None:
        """Write the text to ``file_name``, dropping trailing spaces of each line."""
        if encoding:
            codec = codecs.lookup(encoding)
        else:
            codec = codecs.lookup(self.encoding or _DEFAULT_ENCODING)
        content = "\n".join(strip_trailing_spaces(line) for line in self._text.split("\n"))
        with open(file_name, "w", encoding=codec.name, newline="") as f:
            f.write(content)
        self.file_name = file_name
        if encoding:
            self.encoding = encoding