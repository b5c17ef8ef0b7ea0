"""Export of the sample log as tab-delimited text or an XLSX workbook."""

import base64
import io
import re
from datetime import datetime
from typing import List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE

from .row import PLACEHOLDER, SampleRow

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_TITLE = "Amostras"

COLUMNS = (
    ("code", "Amostra"),
    ("delivery_date", "Data de entrega"),
    ("compartment", "Compartimento"),
    ("chassis", "Chassi"),
    ("client", "Cliente"),
    ("equipment_hours", "Horas do equipamento"),
    ("oil_type", "Tipo do óleo"),
    ("status", "Status"),
    ("collection_date", "Data de coleta"),
    ("technician", "Técnico"),
)

_BREAKS = re.compile(r"[\r\n\t]+")


class ExportFile:
    """An encoded workbook ready to hand to a share target."""

    def __init__(self, filename: str, mime_type: str, content_base64: str):
        self.filename = filename
        self.mime_type = mime_type
        self.content_base64 = content_base64

    @property
    def content(self) -> bytes:
        return base64.b64decode(self.content_base64)


def sanitize_cell(value: str) -> str:
    """Collapse tabs and line breaks to a single space, then trim."""
    return _BREAKS.sub(" ", value).strip()


def header_labels() -> List[str]:
    return [label for _, label in COLUMNS]


def row_cells(row: SampleRow) -> List[str]:
    return [getattr(row, field) for field, _ in COLUMNS]


def to_delimited_text(rows: Sequence[SampleRow]) -> str:
    """
    Render rows as tab-separated lines, header first.

    Every line, including the last, ends with CRLF.
    """
    lines = [header_labels()] + [row_cells(r) for r in rows]
    return "".join(
        "\t".join(sanitize_cell(cell) for cell in line) + "\r\n" for line in lines
    )


def workbook_cell(value: str) -> str:
    """Drop control characters that XLSX cells can't hold."""
    return ILLEGAL_CHARACTERS_RE.sub("", value).strip() or PLACEHOLDER


def append_text_row(ws, values: Sequence[str]) -> None:
    """Append values as literal text; a leading '=' stays text, not a formula."""
    ws.append([workbook_cell(v) for v in values])
    for cell in ws[ws.max_row]:
        cell.data_type = "s"


def to_workbook_bytes(rows: Sequence[SampleRow]) -> bytes:
    """Write header and rows to a single-sheet XLSX workbook."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    append_text_row(ws, header_labels())
    for row in rows:
        append_text_row(ws, row_cells(row))

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def to_workbook_base64(rows: Sequence[SampleRow]) -> str:
    return base64.b64encode(to_workbook_bytes(rows)).decode("ascii")


def export_filename(now: Optional[datetime] = None) -> str:
    """File name like amostras-20240305100000.xlsx."""
    stamp = (now or datetime.now()).strftime("%Y%m%d%H%M%S")
    return f"amostras-{stamp}.xlsx"


def build_workbook_export(
    rows: Sequence[SampleRow], now: Optional[datetime] = None
) -> ExportFile:
    return ExportFile(
        filename=export_filename(now),
        mime_type=XLSX_MIME_TYPE,
        content_base64=to_workbook_base64(rows),
    )
