import pytest

from minimaltests.core import MetricTree
from minimaltests.diff import DiffEntry, FileDiffResult, LineRange, aggregate_diffs
from minimaltests.report import output_filename, render_report, source_lines

SOURCE = "template <typename T>\nT max(T a, T b) {\n  return a < b ? b : a;\n}\n"


def test_output_filename_flattens_path_components() -> None:
    assert output_filename("/home/dev/src/lib.rs") == "home_dev_src_lib.rs.html"
    assert output_filename("./src/../lib.rs", "text") == "src_lib.rs.txt"
    assert output_filename("lib.rs") == "lib.rs.html"


def test_source_lines_slices_zero_based_exclusive_range() -> None:
    assert source_lines(SOURCE, LineRange(1, 3)) == "T max(T a, T b) {\n  return a < b ? b : a;"


def test_html_report_escapes_source_and_orders_regions() -> None:
    result = FileDiffResult(
        source_filename="src/max.hpp",
        global_diffs=[DiffEntry(".metrics.nom.functions", "1", "2")],
        region_diffs={
            LineRange(2, 3): [DiffEntry(".spaces[0].spaces[0].metrics.loc", "1", "2")],
            LineRange(1, 4): [DiffEntry(".spaces[0].metrics.cyclomatic", "2", "3")],
        },
    )

    report = render_report(result, SOURCE)

    assert report.startswith("<!DOCTYPE html>")
    assert "<title>src_max.hpp.html</title>" in report
    assert "<h1>Global Metrics</h1>" in report
    assert "a &lt; b ? b : a;" in report
    assert "template <typename T>" not in report
    assert report.index("lines (2, 4)") < report.index("lines (3, 3)")


def test_global_only_report_includes_whole_source() -> None:
    result = FileDiffResult(
        source_filename="src/max.hpp",
        global_diffs=[DiffEntry(".metrics.nom.functions", "1", "2")],
    )

    report = render_report(result, SOURCE)

    assert "<h2>Code</h2>" in report
    assert "template &lt;typename T&gt;" in report
    assert "Spaces Data" not in report


def test_text_report_keeps_source_verbatim() -> None:
    result = FileDiffResult(
        source_filename="src/max.hpp",
        region_diffs={LineRange(0, 1): [DiffEntry(".spaces[0].metrics.loc", "1", "2")]},
    )

    report = render_report(result, SOURCE, report_format="text")

    assert report.startswith("src_max.hpp.txt\n")
    assert "Minimal test - lines (1, 1)" in report
    assert "template <typename T>" in report
    assert "Global Metrics" not in report


def test_unknown_report_format_is_rejected() -> None:
    with pytest.raises(ValueError, match="report format"):
        render_report(FileDiffResult(source_filename="a.c"), "", report_format="pdf")  # type: ignore[arg-type]


def test_source_lines_only_breaks_on_newlines() -> None:
    text = "line1\n\x0c\nline3\nline4\n"

    assert source_lines(text, LineRange(2, 4)) == "line3\nline4"
    assert source_lines("a\r\nb\x0bc\r\nd\n", LineRange(1, 2)) == "b\x0bc"


def test_whole_file_region_lists_each_diff_once() -> None:
    tree = MetricTree.from_dict({"name": "src/max.hpp", "start_line": 1, "end_line": 4})
    result = aggregate_diffs(tree, [DiffEntry(".metrics.nom.functions", "1", "2")])

    report = render_report(result, SOURCE, report_format="text")

    assert report.count("path: .metrics.nom.functions") == 1
    assert "Global Metrics" not in report
