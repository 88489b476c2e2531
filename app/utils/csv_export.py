"""
CSV export utilities
"""
import csv
import io
from typing import Any, Dict, Iterable, List

from fastapi.responses import StreamingResponse

from app.utils.json_serializer import to_json_safe


def _cell(value: Any) -> str:
    value = to_json_safe(value)
    return "" if value is None else str(value)


def stream_csv(headers: List[str], rows: Iterable[Dict], filename: str = "export.csv") -> StreamingResponse:
    """
    Stream rows as a CSV attachment, one chunk per row

    Missing keys become empty cells; dates and enums are written as their
    ISO form / value.
    """
    def generate():
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=headers, quoting=csv.QUOTE_MINIMAL)

        writer.writeheader()
        yield output.getvalue()
        output.seek(0)
        output.truncate(0)

        for row in rows:
            writer.writerow({header: _cell(row.get(header)) for header in headers})
            yield output.getvalue()
            output.seek(0)
            output.truncate(0)

    return StreamingResponse(
        generate(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
