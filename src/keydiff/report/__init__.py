from keydiff.report.renderers import (
    REPORT_FORMATS,
    render_json,
    render_markdown,
    render_report,
    render_text,
    write_report,
)

__all__ = ["REPORT_FORMATS", "render_json", "render_markdown", "render_report", "render_text", "write_report"]
