"""Report rendering for per-file diff results."""

from minimaltests.report.render import (
    REPORT_EXTENSIONS,
    REPORT_FORMATS,
    ReportFormat,
    output_filename,
    render_html,
    render_report,
    render_text,
    source_lines,
)

__all__ = [
    "REPORT_EXTENSIONS",
    "REPORT_FORMATS",
    "ReportFormat",
    "output_filename",
    "render_html",
    "render_report",
    "render_text",
    "source_lines",
]
