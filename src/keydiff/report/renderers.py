from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from keydiff.core.constants import REPORT_SCHEMA_VERSION
from keydiff.core.models import Difference

REPORT_FORMATS = ("text", "json", "markdown")


def _ordered(differences: Sequence[Difference]) -> list[Difference]:
    return sorted(differences, key=lambda item: (item.path, item.message))


def render_text(differences: Sequence[Difference]) -> str:
    if not differences:
        return "The objects are identical.\n"
    lines = ["Differences found:"]
    lines.extend(str(difference) for difference in _ordered(differences))
    return "\n".join(lines) + "\n"


def render_markdown(title: str, differences: Sequence[Difference]) -> str:
    lines: list[str] = []
    lines.append(f"## keydiff Report: {title}")
    lines.append("")
    status = "Differences found" if differences else "Identical"
    lines.append(f"- Status: **{status}**")
    lines.append(f"- Differences: **{len(differences)}**")
    lines.append("")
    lines.append("### Differences")
    lines.append("")
    if not differences:
        lines.append("No differences.")
    else:
        lines.append("| Path | Message |")
        lines.append("|---|---|")
        for difference in _ordered(differences):
            path = f"`{difference.path}`" if difference.path else "(root)"
            message = difference.message.replace("|", "\\|")
            lines.append(f"| {path} | {message} |")
    lines.append("")
    return "\n".join(lines)


def render_json(differences: Sequence[Difference]) -> str:
    payload = {
        "schema_version": REPORT_SCHEMA_VERSION,
        "difference_count": len(differences),
        "differences": [difference.to_dict() for difference in _ordered(differences)],
    }
    return json.dumps(payload, indent=2, sort_keys=True) + "\n"


def render_report(fmt: str, title: str, differences: Sequence[Difference]) -> str:
    if fmt == "text":
        return render_text(differences)
    if fmt == "json":
        return render_json(differences)
    if fmt == "markdown":
        return render_markdown(title, differences)
    raise ValueError(f"Unsupported report format '{fmt}'. Choose one of: {', '.join(REPORT_FORMATS)}")


def write_report(path: Path, fmt: str, title: str, differences: Sequence[Difference]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(fmt, title, differences), encoding="utf-8")


__all__ = [
    "REPORT_FORMATS",
    "render_json",
    "render_markdown",
    "render_report",
    "render_text",
    "write_report",
]
