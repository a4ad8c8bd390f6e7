from datetime import datetime

import pytest

from sqtool.querytools import (
    build_charts,
    completion_tooltip,
    feed_charts,
    identifier_chain,
)
from sqtool.tablemodel import Column


# identifier_chain

def test_single_word_at_end():
    line = "select abc"
    assert identifier_chain(line, len(line)) == ["abc"]


def test_empty_current_word():
    line = "select "
    assert identifier_chain(line, len(line)) == [""]


def test_two_parts():
    line = "select t.col"
    assert identifier_chain(line, len(line)) == ["t", "col"]


def test_trailing_dot_gives_empty_prefix():
    line = "select t."
    assert identifier_chain(line, len(line)) == ["t", ""]


def test_three_parts():
    line = "from s.t.c"
    assert identifier_chain(line, len(line)) == ["s", "t", "c"]


def test_four_parts_rejected():
    line = "a.b.c.d"
    assert identifier_chain(line, len(line)) is None


def test_word_starting_with_digit_rejected():
    line = "select 1abc"
    assert identifier_chain(line, len(line)) is None


def test_quoted_part():
    line = 'select "My Table".co'
    assert identifier_chain(line, len(line)) == ["My Table", "co"]


def test_quoted_at_line_start():
    line = '"abc".x'
    assert identifier_chain(line, len(line)) == ["abc", "x"]


def test_cursor_inside_quoted_name_rejected():
    line = 'select "abc'
    assert identifier_chain(line, len(line)) is None


def test_cursor_after_closing_quote_rejected():
    line = 'select "abc"'
    assert identifier_chain(line, len(line)) is None


def test_cursor_in_middle_of_line():
    line = "select abc from t"
    assert identifier_chain(line, 9) == ["ab"]


def test_whole_line_is_word():
    assert identifier_chain("abc", 3) == ["abc"]


def test_empty_line():
    assert identifier_chain("", 0) is None


# completion_tooltip

def test_tooltip_name_and_description():
    data = '{"n": "f(a int)", "d": "does x"}'
    assert completion_tooltip(data) == "<b>f(a&nbsp;int)</b><br/>does x"


def test_tooltip_description_only():
    assert completion_tooltip('{"d": "only"}') == "only"


def test_tooltip_array_joined():
    data = '[{"n": "a"}, {"n": "b", "d": "c"}]'
    assert completion_tooltip(data) == "<b>a</b><br/><br/><b>b</b><br/>c"


def test_tooltip_escapes_html():
    data = '{"d": "a < b & \\"c\\""}'
    assert completion_tooltip(data) == "a &lt; b &amp; &quot;c&quot;"


def test_tooltip_skips_empty_and_non_objects():
    data = '[1, {"x": 2}, {"n": "", "d": ""}, {"n": "k"}]'
    assert completion_tooltip(data) == "<b>k</b>"


@pytest.mark.parametrize("data", ["not json", "", None, "42", '"text"'])
def test_tooltip_invalid_is_empty(data):
    assert completion_tooltip(data) == ""


# build_charts

def test_build_charts_without_setting():
    assert build_charts({}) == []


def test_build_charts_paths():
    settings = {"charts": [{
        "name": "load",
        "x": "ts",
        "agg_y": {"calls": "#ff0000"},
        "y": {"active": "#00ff00"},
    }]}
    charts = build_charts(settings)
    assert len(charts) == 1
    chart = charts[0]
    assert chart.name == "load"
    assert chart.x_source_field == "ts"
    assert chart.path_names() == ["active", "calls"]
    assert chart.path("calls").cumulative is True
    assert chart.path("active").cumulative is False
    assert chart.path("calls").color == "#ff0000"


def test_build_charts_plain_overrides_cumulative():
    settings = {"charts": [{"agg_y": {"v": "red"}, "y": {"v": "blue"}}]}
    chart = build_charts(settings)[0]
    assert chart.path("v").cumulative is False
    assert chart.path("v").color == "blue"
    assert chart.x_source_field == ""


# feed_charts

def _chart(x="ts", cumulative=False):
    key = "agg_y" if cumulative else "y"
    return build_charts({"charts": [{"name": "c", "x": x, key: {"v": "red"}}]})[0]


def test_feed_with_timestamps():
    chart = _chart()
    rows = [
        ("2024-01-01T10:00:00.000", 5),
        ("2024-01-01T10:00:02.500", "7"),
    ]
    count = feed_charts([chart], ["ts", "v"], rows)
    assert count == 2
    assert chart.path("v").points == [(0.0, 5.0), (2.5, 7.0)]
    assert chart.start_moment == datetime(2024, 1, 1, 10, 0, 0)


def test_feed_accepts_column_objects():
    chart = _chart()
    rows = [("2024-01-01T10:00:00", 1)]
    assert feed_charts([chart], [Column("ts"), Column("v")], rows) == 1
    assert chart.path("v").points == [(0.0, 1.0)]


def test_feed_skips_non_numeric_and_bad_timestamps():
    chart = _chart()
    rows = [
        ("2024-01-01T10:00:00", None),
        ("2024-01-01T10:00:01", "abc"),
        ("garbage", 3),
        ("2024-01-01T10:00:02", 4),
    ]
    assert feed_charts([chart], ["ts", "v"], rows) == 1
    assert [y for _, y in chart.path("v").points] == [4.0]


def test_feed_missing_x_column_skips_path():
    chart = _chart(x="when")
    assert feed_charts([chart], ["ts", "v"], [("2024-01-01T10:00:00", 1)]) == 0
    assert chart.path("v").points == []


def test_feed_missing_value_column():
    chart = _chart()
    assert feed_charts([chart], ["ts", "other"], [("2024-01-01T10:00:00", 1)]) == 0


def test_feed_without_x_field_uses_current_time():
    chart = _chart(x="")
    assert feed_charts([chart], ["v"], [(1,), (2,)]) == 2
    assert [y for _, y in chart.path("v").points] == [1.0, 2.0]
    assert chart.start_moment is not None


def test_feed_cumulative_plots_differences():
    chart = _chart(cumulative=True)
    rows = [
        ("2024-01-01T10:00:00", 10),
        ("2024-01-01T10:00:01", 15),
        ("2024-01-01T10:00:02", 18),
    ]
    feed_charts([chart], ["ts", "v"], rows)
    assert [y for _, y in chart.path("v").points] == [5.0, 3.0]
    assert chart.max_value == 5.0


def test_feed_datetime_values():
    chart = _chart()
    start = datetime(2024, 5, 1, 12, 0, 0)
    rows = [(start, 1), (start.replace(second=4), 2)]
    feed_charts([chart], ["ts", "v"], rows)
    assert chart.path("v").points == [(0.0, 1.0), (4.0, 2.0)]