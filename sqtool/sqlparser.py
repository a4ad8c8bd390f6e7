"""Lightweight SQL scanning used to resolve table aliases for completion."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum


class AliasSearchStatus(Enum):
    """Outcome of an alias lookup."""

    NOT_FOUND = "not_found"    # aliased object not found
    NOT_PARSED = "not_parsed"  # parsing of the object is not supported
    NAME = "name"              # caller should acquire columns from the database
    FIELDS = "fields"          # words ready to use within the completer


_TERMINATORS = frozenset({
    "with", "copy", "alter", "create", "drop", "truncate", "disable", "enable",
    "declare", "begin", "commit", "do", "while", "loop", "exec", "execute", "show",
})

_DIVIDERS = frozenset({
    "select", "update", "delete", "insert", "from",
    "using", "where", "group", "order", "left", "join", "on",
    "and", "not", "or",
})

_EOLS = "\n\u2029\u2028"


class _Mode(IntEnum):
    LITERAL = 3
    BLOCK_COMMENT = 4
    LINE_COMMENT = 5
    WORD = 1
    QUOTED = 2
    IDLE = 0xFF


@dataclass
class _Entity:
    separator: str | None = None
    items: list[str] = field(default_factory=list)

    def clear(self) -> None:
        self.separator = None
        self.items = []

    def ieq(self, value: str) -> bool:
        return len(self.items) == 1 and self.items[-1].lower() == value

    def eq(self, value: str) -> bool:
        return len(self.items) == 1 and self.items[-1] == value


@dataclass
class _SearchResult:
    status: AliasSearchStatus = AliasSearchStatus.NOT_FOUND
    level: int = 0
    words: list[str] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.status is not AliasSearchStatus.NOT_FOUND


def _match_alias(alias: str, entities: list[_Entity], level: int) -> _SearchResult:
    count = len(entities)
    for i, entity in enumerate(entities):
        if entity.separator == "." and entity.items[0] == alias:
            continue
        if entity.items[-1] != alias:
            continue
        if len(entity.items) == 1 and i > 0:
            # standalone alias: the preceding entity is what it names
            return _SearchResult(AliasSearchStatus.NAME, level, list(entities[i - 1].items))
        if i < count - 1:
            following = entities[i + 1]
            if (following.ieq("as") and i < count - 2 and entities[i + 2].eq(alias)) \
                    or following.eq(alias):
                return _SearchResult(AliasSearchStatus.NAME, level, list(entity.items))
        else:
            return _SearchResult(AliasSearchStatus.NAME, level, list(entity.items))
    return _SearchResult()


class _Scanner:
    """Walks the text from a position in one direction collecting name entities."""

    def __init__(self, alias: str, text: str, pos: int, backward: bool) -> None:
        self.alias = alias
        self.text = text
        self.backward = backward
        self.delta = -1 if backward else 1
        self.pos = pos - 1 if backward else pos
        self.entities: list[_Entity] = []
        self.entity = _Entity()
        self.mode = _Mode.IDLE
        self.comment_nest = 0
        self.scope_level = 0
        self.result_level = 0
        self.prev_char: str | None = None
        self.word = ""

    def _in_range(self, pos: int) -> bool:
        return pos >= 0 if self.backward else pos < len(self.text)

    def _add_entity(self) -> bool:
        if not self.entity.items:
            return bool(self.entities)
        copy = _Entity(self.entity.separator, list(self.entity.items))
        if self.backward:
            self.entities.insert(0, copy)
        else:
            self.entities.append(copy)
        return True

    def _flush(self) -> _SearchResult | None:
        if self._add_entity():
            res = _match_alias(self.alias, self.entities, self.result_level)
            if res.found:
                return res
            self.entities.clear()
        self.entity.clear()
        return None

    def _split_on_separator(self) -> None:
        if self.entity.separator is not None and self.prev_char != self.entity.separator:
            self._add_entity()
            self.entity.clear()

    def _apply_word(self) -> _SearchResult | None:
        if not self.scope_level:
            if self.mode is _Mode.WORD and self.word.lower() in _DIVIDERS:
                res = self._flush()
                if res:
                    return res
            else:
                if self.entity.separator is None:
                    self._add_entity()
                    self.entity.clear()
                if self.backward:
                    self.entity.items.insert(0, self.word)
                else:
                    self.entity.items.append(self.word)
        self.word = ""
        return None

    def _idle(self, c: str, pos: int) -> tuple[_SearchResult | None, int]:
        self.word = ""
        if c.isalpha() or c == "_":
            self._split_on_separator()
            self.mode = _Mode.WORD
            self.word = c
        elif c == '"':
            self._split_on_separator()
            self.mode = _Mode.QUOTED
        elif c == "'":
            self._split_on_separator()
            self.mode = _Mode.LITERAL
        elif c == "*" and self.prev_char == "/":
            self.mode = _Mode.BLOCK_COMMENT
            self.comment_nest = 1
        elif c == "-" and self.prev_char == "-":
            self.mode = _Mode.LINE_COMMENT
        elif c in _EOLS:
            if self.backward:
                # jump to the first '--' within the previous line
                text = self.text
                i = pos
                comment_start = pos
                while i:
                    i -= 1
                    if text[i] == "-" and text[i + 1] == "-":
                        comment_start = i
                    elif text[i] in _EOLS:
                        break
                pos = comment_start
        elif not c.isspace():
            if c != ".":
                res = self._flush()
                if res:
                    return res, pos
                opening, closing = (")", "(") if self.backward else ("(", ")")
                if c == opening:
                    self.scope_level += 1
                elif c == closing:
                    self.scope_level -= 1
                    if self.scope_level < 0:
                        self.scope_level = 0
                        self.result_level -= 1
            else:
                self.entity.separator = c
        return None, pos

    def _finish_word(self) -> bool:
        """Handle a character ending a word; return False to stay in word mode."""
        if self.word:
            if self.backward:
                self.word = self.word[::-1]
            if self.mode is _Mode.WORD and self.word.lower() in _TERMINATORS:
                return False
        return True

    def run(self) -> _SearchResult:
        text = self.text
        pos = self.pos
        while self._in_range(pos):
            c = text[pos]
            mode = self.mode
            if mode in (_Mode.WORD, _Mode.QUOTED):
                if mode is _Mode.QUOTED and c != '"':
                    self.word += c
                elif c.isalnum() or c == "_":
                    self.word += c
                else:
                    go_idle = False
                    word_was_set = bool(self.word)
                    if self._finish_word():
                        if word_was_set:
                            res = self._apply_word()
                            if res:
                                return res
                        go_idle = True
                        if mode is _Mode.QUOTED:
                            # skip the closing quotation mark
                            self.prev_char = c
                            pos += self.delta
                            if not self._in_range(pos):
                                go_idle = False
                            else:
                                c = text[pos]
                    if go_idle:
                        self.mode = _Mode.IDLE
                        res, pos = self._idle(c, pos)
                        if res:
                            return res
            elif mode is _Mode.IDLE:
                res, pos = self._idle(c, pos)
                if res:
                    return res
            elif mode is _Mode.LITERAL:
                if c == "'":
                    self.mode = _Mode.IDLE
            elif mode is _Mode.BLOCK_COMMENT:
                # multiline comments may be nested
                if c == "*" and self.prev_char == "/":
                    self.comment_nest += 1
                elif c == "/" and self.prev_char == "*":
                    self.comment_nest -= 1
                if not self.comment_nest:
                    self.mode = _Mode.IDLE
            elif mode is _Mode.LINE_COMMENT:
                if c in _EOLS:
                    self.mode = _Mode.IDLE

            if c == ";":
                break
            if self.mode not in (_Mode.QUOTED, _Mode.LITERAL) \
                    and not c.isspace() and c not in _EOLS:
                self.prev_char = c
            pos += self.delta

        if self.mode is _Mode.WORD and self.word:
            if self.backward:
                self.word = self.word[::-1]
            res = self._apply_word()
            if res:
                return res

        if self._add_entity():
            return _match_alias(self.alias, self.entities, self.result_level)
        return _SearchResult()


def explain_alias(alias: str, text: str, pos: int) -> tuple[AliasSearchStatus, list[str]]:
    """Find what ``alias`` refers to in ``text`` around cursor position ``pos``.

    Returns the search status and the words naming the aliased object.
    """
    pos = max(0, min(pos, len(text)))
    # Both directions are scanned: matches on either side are weighed by scope depth.
    down = _Scanner(alias, text, pos, backward=False).run()
    up = _Scanner(alias, text, pos, backward=True).run()

    if not down.found:
        return up.status, up.words
    if not up.found:
        return down.status, down.words
    if down.level > up.level:
        return down.status, down.words
    return up.status, up.words