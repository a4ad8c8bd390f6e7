# sqtool

The engine behind a SQL query editor. It has no user interface. It is made up
of these modules:

- `sqtool.sqlparser`: `explain_alias(alias, text, pos)` finds the table that
  an alias stands for. It scans outward from the cursor position in both
  directions and skips comments, string literals and nested parentheses. It
  returns an `AliasSearchStatus` together with the words that name the object.
- `sqtool.highlighter`: `SqlHighlighter` highlights SQL one block (line) at a
  time. It is configured from a JSON-style settings dictionary with `literal`,
  `identifier`, `comment`, `number`, `variable`, `function` and `keyword`
  entries. Keywords can be multi-word phrases.
  - `highlight_block(text, previous_state)` returns a list of `Span` objects,
    each carrying a `TextFormat`. It also returns the state to pass to the next
    block, so that block comments can span several lines.
  - `is_keyword(word)` tells whether a word starts a configured keyword phrase.
  - `is_dark_mode(text_lightness, window_lightness)` decides between the
    light and dark foreground colours.
- `sqtool.settings`: `Settings` is a thread-safe key/value store, kept as a
  JSON file and cached in memory.
  - `load(dpi, russian)` fills in defaults for the application style,
    encodings, help URLs and tab size. It returns the application font as a
    `FontSpec`.
  - `default_app_style(font_size)` builds the default style sheet.
  - `parse_app_font(app_style)` reads the font from its `QApplication`
    block.
  - `RecentFile` records a file name together with its encoding.
- `sqtool.tablemodel`: `TableModel` holds the `Column`s and rows of a result
  set. `take` appends rows and resets the model when the column count changes.
  The model also provides:
  - display values, using `format_value` for dates and times;
  - wide-cell hints for long text;
  - horizontal headers (column names) and tooltips (type names);
  - vertical headers, where the first row shows the total row count once
    there are five rows or more.
- `sqtool.querydoc`: `QueryDocument` opens and saves query files in a chosen
  encoding. Saving strips trailing whitespace from each line with
  `strip_trailing_spaces`, except that exactly three trailing spaces are kept.
  Files larger than 5 MB are marked as not highlighted.
  `resultset_structure(columns, escape, is_keyword)` builds text of the form
  `(name type, ...)` followed by `select name, ...`.
- `sqtool.timechart`: `TimeChart` collects timed values into `ChartPath`s.
  - A cumulative path plots the difference between successive values.
  - `apply_new_values` reports whether the maximum value grew.
  - `x_label` formats time-axis labels, with more or less detail depending on
    the interval.
  - `beautify_interval` and `beautify_time_interval` round grid steps to
    readable values.
- `sqtool.querytools`: helpers for the editor.
  - `identifier_chain(line, pos)` splits the dotted identifier under the
    cursor into its parts.
  - `completion_tooltip(data)` turns a JSON item description (`n`/`d`) into
    an HTML tooltip.
  - `build_charts(settings)` creates charts from a `charts` setting.
  - `feed_charts(charts, columns, rows)` feeds fetched rows into those
    charts.
- `sqtool.pgtypes`: `PgType`, the OIDs of PostgreSQL built-in types.

## Example

```python
from sqtool.sqlparser import explain_alias, AliasSearchStatus

sql = "select t. from pg_type t"
status, words = explain_alias("t", sql, 9)
assert status is AliasSearchStatus.NAME and words == ["pg_type"]
```

## What it does not do

The package does not connect to any database, and it has no windows or
widgets. It also does not locate, load or run per-DBMS catalogue scripts.
Fetching result sets and drawing charts or highlighted text are left to the
application that uses these modules.

## Tests

```
pip install -e .[test]
pytest
```