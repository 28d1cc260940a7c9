"""HTML and plain-text rendering of per-file diff reports."""

from __future__ import annotations

import html
from pathlib import PurePath
from typing import Literal

from minimaltests.diff.models import DiffEntry, FileDiffResult, LineRange

ReportFormat = Literal["html", "text"]

REPORT_FORMATS: tuple[ReportFormat, ...] = ("html", "text")
REPORT_EXTENSIONS: dict[str, str] = {"html": ".html", "text": ".txt"}

_SKIPPED_COMPONENTS = frozenset({".", "..", ":", "/", "\\"})


def output_filename(source_path: str | PurePath, report_format: ReportFormat = "html") -> str:
    """Flatten a source path into a single report file name.

    `/src/lib/a.c` becomes `src_lib_a.c.html`.
    """
    path = PurePath(source_path)
    parts = [
        part
        for part in path.parts
        if part and part != path.anchor and part not in _SKIPPED_COMPONENTS
    ]
    return "_".join(parts) + REPORT_EXTENSIONS[report_format]


def source_lines(source_text: str, line_range: LineRange) -> str:
    """Return the lines of a range. Only newline characters break lines."""
    lines = [line.removesuffix("\r") for line in source_text.split("\n")]
    return "\n".join(lines[line_range.start_line:line_range.end_line])


def render_report(
    result: FileDiffResult,
    source_text: str,
    *,
    report_format: ReportFormat = "html",
    title: str | None = None,
) -> str:
    if report_format not in REPORT_FORMATS:
        raise ValueError(f"Unsupported report format: {report_format!r}")
    title = title or output_filename(result.source_filename, report_format)
    if report_format == "html":
        return render_html(result, source_text, title=title)
    return render_text(result, source_text, title=title)


def render_html(result: FileDiffResult, source_text: str, *, title: str) -> str:
    lines: list[str] = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        f"    <title>{_escape(title)}</title>",
        "</head>",
        "<body>",
    ]

    if result.global_diffs:
        lines.append("<h1>Global Metrics</h1>")
        for entry in result.global_diffs:
            lines.append(_html_entry(entry))

    if result.global_diffs and not result.region_diffs:
        lines.append("<h2>Code</h2>")
        lines.append(f"<pre><i>{_escape(source_text)}</i></pre>\n")

    if result.region_diffs:
        lines.append("<h1>Spaces Data</h1>")
        for line_range, entries in result.sorted_regions():
            start, end = line_range.display()
            lines.append(f"<h2>Minimal test - lines ({start}, {end})</h2>")
            for entry in entries:
                lines.append(_html_entry(entry))
            lines.append("<h3>Code</h3>")
            lines.append(f"<pre><i>{_escape(source_lines(source_text, line_range))}</i></pre>\n")

    lines.append("</body>")
    lines.append("</html>")
    return "\n".join(lines) + "\n"


def render_text(result: FileDiffResult, source_text: str, *, title: str) -> str:
    lines: list[str] = [title, "=" * len(title), ""]

    if result.global_diffs:
        lines.append("Global Metrics")
        lines.append("--------------")
        for entry in result.global_diffs:
            lines.extend(_text_entry(entry))

    if result.global_diffs and not result.region_diffs:
        lines.append("Code:")
        lines.append(source_text.rstrip("\n"))
        lines.append("")

    if result.region_diffs:
        lines.append("Spaces Data")
        lines.append("-----------")
        for line_range, entries in result.sorted_regions():
            start, end = line_range.display()
            lines.append(f"Minimal test - lines ({start}, {end})")
            for entry in entries:
                lines.extend(_text_entry(entry))
            lines.append("Code:")
            lines.append(source_lines(source_text, line_range))
            lines.append("")

    return "\n".join(lines) + "\n"


def _escape(value: str) -> str:
    return html.escape(value, quote=False)


def _html_entry(entry: DiffEntry) -> str:
    return (
        f"<b>path:</b> {_escape(entry.field_path)}<br>\n"
        f"<b>old:</b> {_escape(entry.old_value)}<br>\n"
        f"<b>new:</b> {_escape(entry.new_value)}<br><br>"
    )


def _text_entry(entry: DiffEntry) -> list[str]:
    return [
        f"path: {entry.field_path}",
        f"old: {entry.old_value}",
        f"new: {entry.new_value}",
        "",
    ]
