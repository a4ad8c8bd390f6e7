import pytest

from sqtool.highlighter import SqlHighlighter, is_dark_mode

SETTINGS = {
    "function": {"dict": ["count", "coalesce"]},
    "identifier": {"brackets": True},
    "keyword": [
        {"dict": ["select", "from", "double", "double precision"], "foreground": "#0000aa"},
        {"dict": ["int", "text"]},
    ],
}


@pytest.fixture
def hl():
    return SqlHighlighter(SETTINGS, False)


def ranges(spans):
    return [(s.start, s.length) for s in spans]


def test_keyword_and_literal(hl):
    spans, state = hl.highlight_block("select 'abc'", -1)
    assert ranges(spans) == [(0, 6), (7, 5)]
    assert spans[0].format == hl.formats[8]
    assert spans[1].format == hl.formats[0]
    assert state == 0xFF


def test_keyword_lookup_is_case_insensitive(hl):
    spans, _ = hl.highlight_block("SELECT 1", -1)
    assert spans[0].format == hl.formats[8]
    assert hl.is_keyword("SELECT")
    assert not hl.is_keyword("foo")


def test_unterminated_literal_carries_state(hl):
    spans, state = hl.highlight_block("'abc", -1)
    assert ranges(spans) == [(0, 4)]
    assert state == 0
    spans, state = hl.highlight_block("x'", state)
    assert ranges(spans) == [(0, 2)]
    assert spans[0].format == hl.formats[0]
    assert state == 0xFF


def test_nested_block_comment_spans_blocks(hl):
    spans, state = hl.highlight_block("/* /* */ x", -1)
    assert state & 0xFF == 3
    assert spans[-1].format == hl.formats[3]
    spans, state = hl.highlight_block("*/ select", state)
    assert ranges(spans)[0] == (0, 2)
    assert spans[0].format == hl.formats[3]
    assert spans[-1].format == hl.formats[8]
    assert state == 0xFF


def test_line_comment(hl):
    spans, state = hl.highlight_block("x -- hi", -1)
    assert ranges(spans) == [(2, 5)]
    assert spans[0].format == hl.formats[4]
    assert state == 0xFF


@pytest.mark.parametrize("text", ["count(x)", "count (x)"])
def test_function_before_parenthesis(hl, text):
    spans, _ = hl.highlight_block(text, -1)
    assert ranges(spans) == [(0, 5)]
    assert spans[0].format == hl.formats[7]


def test_function_name_without_parenthesis_is_plain(hl):
    spans, _ = hl.highlight_block("count x", -1)
    assert spans == []


def test_multi_word_keyword(hl):
    spans, _ = hl.highlight_block("double precision", -1)
    assert (0, 16) in ranges(spans)
    assert spans[-1].format == hl.formats[8]


def test_prefix_keyword_standalone(hl):
    spans, _ = hl.highlight_block("double x", -1)
    assert ranges(spans) == [(0, 6)]


def test_number(hl):
    spans, _ = hl.highlight_block("x = 42;", -1)
    assert ranges(spans) == [(4, 2)]
    assert spans[0].format == hl.formats[5]


def test_quoted_identifier(hl):
    spans, _ = hl.highlight_block('"abc"', -1)
    assert ranges(spans) == [(0, 5)]
    assert spans[0].format == hl.formats[1]


def test_brackets_only_when_enabled(hl):
    spans, _ = hl.highlight_block("[a b]", -1)
    assert ranges(spans) == [(0, 5)]
    assert spans[0].format == hl.formats[2]
    plain = SqlHighlighter({}, False)
    spans, _ = plain.highlight_block("[a b]", -1)
    assert all(s.format != plain.formats[2] for s in spans)


def test_variable(hl):
    spans, _ = hl.highlight_block("@var ", -1)
    assert ranges(spans) == [(0, 4)]
    assert spans[0].format == hl.formats[6]
    spans, _ = hl.highlight_block("@@rowcount ", -1)
    assert spans == []


def test_mixed_encodings_are_underlined(hl):
    spans, _ = hl.highlight_block("abcж ", -1)
    assert ranges(spans) == [(0, 4)]
    assert spans[0].format.underline_style == "dot"
    spans, _ = hl.highlight_block("жжж ", -1)
    assert spans == []


def test_color_settings_follow_mode():
    settings = {"literal": {"foreground_dark": "#eeeeee", "foreground_light": "#111111",
                            "bold": True}}
    assert SqlHighlighter(settings, True).formats[0].foreground == "#eeeeee"
    light = SqlHighlighter(settings, False).formats[0]
    assert light.foreground == "#111111"
    assert light.bold is True


def test_comment_italic_override():
    hl = SqlHighlighter({"comment": {"italic": False}}, False)
    assert hl.formats[3].italic is False
    assert hl.formats[3] == hl.formats[4]
    assert SqlHighlighter({}, False).formats[3].italic is True


def test_formats_count_follows_partitions(hl):
    assert len(hl.formats) == 8 + len(SETTINGS["keyword"])


def test_empty_block(hl):
    spans, state = hl.highlight_block("", -1)
    assert spans == []
    assert state == 0xFF


def test_is_dark_mode():
    assert is_dark_mode(200, 50)
    assert not is_dark_mode(50, 200)