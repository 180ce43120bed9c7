"""CSV Codec — parse uploaded CSV text into rows and render rows back to CSV.

Invariants:
    - Header names are normalized to snake_case attribute names (ISBN -> isbn, TotalCopies -> total_copies)
    - Blank cells become None; surrounding whitespace is stripped
    - render_csv writes exactly the requested columns, in order, with a header row
"""

import csv
import io
from typing import Any, Iterable


def header_to_attr(header: str) -> str:
    """'TotalCopies' / 'total copies' / 'totalCopies' -> 'total_copies'."""
    text = header.strip().replace("-", " ").replace(" ", "_")
    out: list[str] = []
    for i, ch in enumerate(text):
        prev = text[i - 1] if i else ""
        if ch.isupper() and prev and (prev.islower() or prev.isdigit()):
            out.append("_")
        out.append(ch.lower())
    return "".join(out).strip("_")


def parse_csv(content: str) -> list[dict[str, str | None]]:
    reader = csv.DictReader(io.StringIO(content.strip()))
    rows: list[dict[str, str | None]] = []
    for raw in reader:
        row: dict[str, str | None] = {}
        for key, value in raw.items():
            if key is None:
                continue
            cleaned = value.strip() if isinstance(value, str) else None
            row[header_to_attr(key)] = cleaned or None
        rows.append(row)
    return rows


def render_csv(rows: Iterable[dict[str, Any]], columns: list[str]) -> str:
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=columns, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow({c: _cell(row.get(c)) for c in columns})
    return output.getvalue()


def _cell(value: Any) -> Any:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return value
