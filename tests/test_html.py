"""HTML extraction tests: tables, CSS elements, text and attributes."""

import pytest

from conftest import SAMPLE_HTML, make_result
from tablefetch.extraction import (
    CssSelector,
    HtmlDocument,
    SelectorMatchError,
    attr_of,
    extract_elements,
    extract_table,
    extract_tables,
    parse,
    text_of,
)


def _doc(html: str = SAMPLE_HTML) -> HtmlDocument:
    return parse(make_result(html), "html")


# --- tables ---


def test_extract_tables_count_and_order():
    tables = extract_tables(_doc())
    assert len(tables) == 2
    assert tables[0].names == ["City", "Country", "Population"]
    assert tables[1].names == ["Year", "Rate"]


def test_extract_tables_keeps_text_until_types_inferred():
    cities = extract_tables(_doc())[0]
    assert cities.column("Population") == ["37,400,068", "28,514,000"]
    assert cities.infer_types().column("Population") == [37400068, 28514000]


def test_footnote_row_is_kept_until_caller_trims():
    rates = extract_tables(_doc())[1]
    assert rates.num_rows == 3
    assert rates.repeated_rows() == [0]
    # the footnote keeps both columns textual
    assert rates.infer_types().column("Year")[1:] == ["2019", "2020"]

    trimmed = rates.drop_rows(*rates.repeated_rows()).infer_types()
    assert trimmed.column("Year") == [2019, 2020]
    assert trimmed.column("Rate") == [1.5, 2.25]
    assert trimmed.repeated_rows() == []


def test_extract_tables_without_header():
    table = extract_tables(_doc(), header=False)[1]
    assert table.names == ["X1", "X2"]
    assert table.column("X1")[0] == "Year"


def test_colspan_and_rowspan_are_expanded():
    html = """<table>
      <tr><th>A</th><th>B</th><th>C</th></tr>
      <tr><td colspan="2">x</td><td rowspan="2">y</td></tr>
      <tr><td>1</td><td>2</td></tr>
    </table>"""
    table = extract_tables(_doc(html))[0]
    assert table.rows() == [("x", "x", "y"), ("1", "2", "y")]


def test_short_rows_are_padded():
    html = "<table><tr><th>a</th><th>b</th></tr><tr><td>1</td></tr></table>"
    table = extract_tables(_doc(html))[0]
    assert table.records() == [{"a": "1", "b": None}]


def test_blank_and_duplicate_headers_are_named():
    html = "<table><tr><th></th><th>v</th><th>v</th></tr><tr><td>1</td><td>2</td><td>3</td></tr></table>"
    assert extract_tables(_doc(html))[0].names == ["X1", "v", "v_2"]


def test_generated_header_suffix_skips_taken_names():
    html = "<table><tr><th>a</th><th>a_2</th><th>a</th></tr><tr><td>1</td><td>2</td><td>3</td></tr></table>"
    table = extract_tables(_doc(html))[0]
    assert table.names == ["a", "a_2", "a_3"]
    assert table.records() == [{"a": "1", "a_2": "2", "a_3": "3"}]


def test_nested_tables_are_separate():
    html = """<table id="outer">
      <tr><th>name</th><th>detail</th></tr>
      <tr><td>a</td><td><table id="inner"><tr><th>k</th></tr><tr><td>v</td></tr></table></td></tr>
    </table>"""
    outer, inner = extract_tables(_doc(html))
    assert outer.num_rows == 1
    assert outer.column("name") == ["a"]
    assert inner.records() == [{"k": "v"}]


def test_document_without_tables():
    assert extract_tables(_doc("<p>no tables</p>")) == []


def test_extract_table_by_index():
    assert extract_table(_doc(), -1).names == ["Year", "Rate"]


def test_extract_table_index_out_of_range():
    with pytest.raises(SelectorMatchError):
        extract_table(_doc(), 2)


# --- elements ---


def test_extract_elements_document_order():
    links = extract_elements(_doc(), "li a")
    assert [text_of(a) for a in links] == ["Tokyo", "Delhi"]


def test_extract_elements_accepts_selector_value():
    assert len(extract_elements(_doc(), CssSelector("table"))) == 2


def test_extract_elements_no_match_is_empty():
    assert extract_elements(_doc(), "table#missing") == []


def test_extract_elements_required_no_match_raises():
    with pytest.raises(SelectorMatchError):
        extract_elements(_doc(), "table#missing", required=True)


def test_extract_elements_invalid_selector_raises():
    with pytest.raises(SelectorMatchError):
        extract_elements(_doc(), "a[")


# --- text ---


def test_text_of_raw_vs_normalized():
    intro = extract_elements(_doc(), "#intro")[0]
    assert text_of(intro) == "Largest   cities\n  by population"
    assert text_of(intro, normalize=True) == "Largest cities by population"


def test_text_of_normalized_breaks_on_br_and_skips_script():
    node = extract_elements(_doc("<div>a<br>b<script>var x = 1;</script><!-- note --></div>"), "div")[0]
    assert text_of(node, normalize=True) == "a b"

    br_only = extract_elements(_doc("<span>a<br>b</span>"), "span")[0]
    assert text_of(br_only) == "ab"


# --- attributes ---


def test_attr_of_present():
    first = extract_elements(_doc(), "li a")[0]
    assert attr_of(first, "href") == "/tokyo"


def test_attr_of_absent_is_none():
    first = extract_elements(_doc(), "li a")[0]
    assert attr_of(first, "class") is None


def test_attr_of_multi_valued_class():
    h1 = extract_elements(_doc(), "h1")[0]
    assert attr_of(h1, "class") == "title main"
