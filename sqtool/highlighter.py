"""Block-by-block SQL syntax highlighting driven by a JSON-like configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

_BASE_DELIMITERS = " \t\r\n``'\";:()[]<>{}/\\^&$|!?~,.-+*%="
_IDLE = 0xFF
_NEST_STEP = 0x10000
_ASCII_FLAG = 0x10000
_NON_ASCII_FLAG = 0x20000
_NULL = "\0"
_COLOR_RE = re.compile(r"#(?:[0-9a-fA-F]{3}){1,4}|[A-Za-z]+")

# format slots that precede the keyword partitions
LITERAL, IDENTIFIER, BRACKETED, BLOCK_COMMENT, LINE_COMMENT, NUMBER, VARIABLE, FUNCTION = range(8)


def is_dark_mode(text_lightness: float, window_lightness: float) -> bool:
    """Dark mode means the text is lighter than the window behind it."""
    return text_lightness > window_lightness


@dataclass(frozen=True)
class TextFormat:
    """Character format applied to a span of text."""

    foreground: str | None = None
    bold: bool = False
    italic: bool = False
    role: str = ""
    underline_color: str | None = None
    underline_style: str | None = None


@dataclass(frozen=True)
class Span:
    """A formatted range of a block; later spans override earlier ones."""

    start: int
    length: int
    format: TextFormat


class _LastWord(Enum):
    YES = "yes"
    NO = "no"
    MAYBE = "maybe"


@dataclass
class _WordInfo:
    format_index: int
    is_last: _LastWord
    next_words: dict[str, _WordInfo] = field(default_factory=dict)


def _make_format(node: Any, role: str, foreground: str, dark: bool,
                 bold: bool = False, italic: bool = False) -> TextFormat:
    if isinstance(node, dict):
        colour = node.get("foreground_dark" if dark else "foreground_light")
        if not isinstance(colour, str):
            colour = node.get("foreground")
        if isinstance(colour, str) and _COLOR_RE.fullmatch(colour):
            foreground = colour
        value = node.get("italic")
        if isinstance(value, bool):
            italic = value
        value = node.get("bold")
        if isinstance(value, bool):
            bold = value
    return TextFormat(foreground=foreground, bold=bold, italic=italic, role=role)


def _ascii_flag(c: str) -> int:
    if ("a" <= c <= "z") or ("A" <= c <= "Z"):
        return _ASCII_FLAG
    if ord(c) > 127:
        return _NON_ASCII_FLAG
    return 0


class SqlHighlighter:
    """Computes formatted spans for one line (block) of SQL at a time."""

    def __init__(self, settings: dict | None = None, dark_mode: bool = False) -> None:
        settings = settings or {}
        extra = settings.get("add_separators")
        self._delimiters = _BASE_DELIMITERS + (extra if isinstance(extra, str) else "")

        formats: list[TextFormat] = []
        formats.append(_make_format(settings.get("literal"), "envelope", "#ff0000", dark_mode))
        ident = _make_format(settings.get("identifier"), "envelope", "#000000", dark_mode)
        ident_node = settings.get("identifier")
        brackets = ident_node.get("brackets") if isinstance(ident_node, dict) else None
        self._tsql_brackets = brackets if isinstance(brackets, bool) else False
        formats += [ident, ident]
        comment = _make_format(settings.get("comment"), "envelope", "#008000", dark_mode,
                               italic=True)
        formats += [comment, comment]
        formats.append(_make_format(settings.get("number"), "code", "#800080", dark_mode,
                                    bold=True))
        formats.append(_make_format(settings.get("variable"), "code", "#4f2b2a", dark_mode))
        formats.append(_make_format(settings.get("function"), "code", "#000080", dark_mode,
                                    bold=True))

        self._functions: set[str] = set()
        fn_node = settings.get("function")
        fn_dict = fn_node.get("dict") if isinstance(fn_node, dict) else None
        for item in fn_dict if isinstance(fn_dict, list) else ():
            if isinstance(item, str) and item:
                self._functions.add(item)

        self._keywords: dict[str, _WordInfo] = {}
        partitions = settings.get("keyword")
        for part in partitions if isinstance(partitions, list) else ():
            kw_dict = part.get("dict") if isinstance(part, dict) else None
            index = len(formats)
            for item in kw_dict if isinstance(kw_dict, list) else ():
                if isinstance(item, str):
                    self._add_phrase(item, index)
            formats.append(_make_format(part, "code", "#000000", dark_mode))

        self._formats = formats

    def _add_phrase(self, phrase: str, index: int) -> None:
        words = [w for w in phrase.split(" ") if w]
        level = self._keywords
        last = len(words) - 1
        for i, word in enumerate(words):
            info = level.get(word)
            if info is not None:
                if i < last and info.is_last is _LastWord.YES:
                    info.is_last = _LastWord.MAYBE
                elif i == last and info.is_last is _LastWord.NO:
                    info.is_last = _LastWord.MAYBE
                if i == last:
                    info.format_index = index
            elif i < last:
                info = level[word] = _WordInfo(-1, _LastWord.NO)
            else:
                info = level[word] = _WordInfo(index, _LastWord.YES)
            level = info.next_words

    @property
    def formats(self) -> tuple[TextFormat, ...]:
        """All formats: the fixed slots followed by one per keyword partition."""
        return tuple(self._formats)

    def is_keyword(self, word: str) -> bool:
        """Tell whether ``word`` starts a configured keyword phrase."""
        return word.lower() in self._keywords

    def highlight_block(self, text: str, previous_state: int = -1) -> tuple[list[Span], int]:
        """Highlight one block given the state the previous block ended in.

        Returns the spans in the order they apply and the state to pass to the next block.
        """
        spans: list[Span] = []
        n = len(text)
        formats = self._formats
        delims = self._delimiters
        keywords = self._keywords

        def char(k: int) -> str:
            return text[k] if 0 <= k < n else _NULL

        def set_format(start: int, count: int, fmt: TextFormat) -> None:
            if start < 0 or start >= n:
                return
            count = min(count, n - start)
            if count > 0:
                spans.append(Span(start, count, fmt))

        mode = _IDLE if previous_state == -1 else previous_state
        first_word_start = -1
        last_word: _WordInfo | None = None
        prev = _NULL
        i, pos, length = 0, 1, 1
        word = ""

        def process_first_word(standalone: bool = False) -> None:
            nonlocal first_word_start, last_word
            info = keywords.get(word)
            if info is not None:
                if info.is_last is not _LastWord.NO:
                    set_format(pos - length, length - 1, formats[info.format_index])
                if not standalone and info.is_last is not _LastWord.YES:
                    first_word_start = pos - length
                    last_word = info
            elif (mode >> 16) == 3:
                # ascii and non-ascii characters mixed within a single word
                set_format(pos - length, length - 1,
                           TextFormat(underline_color="#ff0000", underline_style="dot"))

        while True:
            c = char(i)
            kind = mode & 0xFF
            if kind == _IDLE:
                length = 1
                if c == "'":
                    mode = 0
                elif c == '"':
                    mode = 1
                elif c == "[" and self._tsql_brackets:
                    mode = 2
                elif c == "*" and prev == "/":
                    mode = _NEST_STEP | 3  # high word holds the nesting level
                    length += 1
                elif c == "-" and prev == "-":
                    mode = 4
                    length += 1
                elif prev in delims or prev == _NULL:
                    if c.isdecimal():
                        mode = 5
                    elif c.isalpha() or c == "_" or (c in "@$#" and c not in delims):
                        mode = 9 | _ascii_flag(c)
            elif kind == 0:
                if c == "'":
                    set_format(pos - length, length, formats[LITERAL])
                    mode = _IDLE
            elif kind == 1:
                if c == '"':
                    info = keywords.get(text[pos - length:pos].lower())
                    if info is not None and info.format_index >= 0:
                        set_format(pos - length, length, formats[info.format_index])
                    else:
                        set_format(pos - length, length, formats[IDENTIFIER])
                    mode = _IDLE
            elif kind == 2:
                if c == "]":
                    set_format(pos - length, length, formats[BRACKETED])
                    mode = _IDLE
            elif kind == 3:
                # multiline comments may be nested
                if c == "*" and prev == "/":
                    mode += _NEST_STEP
                elif c == "/" and prev == "*":
                    mode -= _NEST_STEP
                if mode & 0xFFFFFF00 == 0:
                    set_format(pos - length, length, formats[BLOCK_COMMENT])
                    mode = _IDLE
            elif kind == 4:
                if c == "\n" or c == _NULL:
                    set_format(pos - length, length, formats[LINE_COMMENT])
                    mode = _IDLE
                    last_word = None
            elif kind == 5:
                if not c.isdecimal() and c != ".":
                    if c in delims or c == _NULL:
                        set_format(pos - length, length - 1, formats[NUMBER])
                        i -= 1
                        pos -= 1
                    mode = _IDLE
            elif kind == 9:
                delim_pos = delims.find(c) if c != _NULL else -1
                if delim_pos >= 0 or c == _NULL:
                    word = text[pos - length:pos - 1].lower()
                    delta = 0
                    # skip whitespace to detect a trailing '('
                    while 0 <= delim_pos < 4:
                        delta += 1
                        following = char(i + delta)
                        delim_pos = delims.find(following) if following != _NULL else -1
                    if char(i + delta) == "(" and word in self._functions:
                        set_format(pos - length, length - 1, formats[FUNCTION])
                    else:
                        if word[0] == "@" and length > 2 and word[1] != "@":
                            set_format(pos - length, length - 1, formats[VARIABLE])
                        if last_word is None:
                            process_first_word()
                        else:
                            info = last_word.next_words.get(word)
                            if info is not None:
                                if info.is_last is not _LastWord.NO:
                                    set_format(first_word_start, pos - first_word_start - 1,
                                               formats[info.format_index])
                                else:
                                    last_word = info
                                    process_first_word(True)
                            else:
                                # incomplete phrase: restart the search
                                last_word = None
                                process_first_word()
                    if delim_pos > 2:
                        last_word = None
                    i -= 1
                    pos -= 1
                    mode = _IDLE
                else:
                    mode |= _ascii_flag(c)
            else:
                set_format(pos - length, length - 1, formats[kind])

            prev = char(i)
            length += 1
            if i == n:
                length -= 1
                break
            i += 1
            pos += 1

        if mode != _IDLE:
            set_format(pos - length, length - 1, formats[mode & 0xFF])
            if (mode & 0xFF) > 3:
                mode = _IDLE
        return spans, mode