"""
Normalization of upstream sample payloads into SampleRow objects.

The lookup service returns records whose shape varies between sources
and API revisions. Each canonical field is looked up through an ordered
list of candidate paths; the first one holding a usable value wins.
"""

import re
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from dateutil import parser as date_parser

from .paths import first_present, first_value
from .row import PLACEHOLDER, SampleRow, as_text

DATE_FORMAT = "%d-%m-%Y"

# Candidate paths per field, most specific first. Each list starts with
# the canonical key so an already-normalized record maps onto itself.
CANDIDATE_PATHS: Dict[str, Tuple[str, ...]] = {
    "code": ("code", "numeroAmostra", "amostra", "codigo", "id"),
    "delivery_date": (
        "deliveryDate",
        "dataEntrega",
        "dataPrevistaEntrega",
        "entrega",
        "entregaPrevista",
    ),
    "compartment": (
        "compartment",
        "compartimento.nome",
        "compartimento",
        "equipamento.compartimento",
        "coleta.dadosColetaEquipamento.compartimento.nome",
        "sistema",
    ),
    "chassis": (
        "chassis",
        "chassi",
        "numChassi",
        "equipamento.chassi",
        "coleta.dadosColetaEquipamento.equipamento.chassi",
    ),
    "client": (
        "client",
        "obra",
        "cliente.nome",
        "equipamento.cliente",
        "clienteNome",
        "cliente",
        "empresa.nome",
    ),
    "equipment_hours": (
        "equipmentHours",
        "horasEquipamento",
        "horimetro",
        "coleta.dadosColetaEquipamento.horimetro",
        "horas",
    ),
    "oil_type": (
        "oilType",
        "tipoOleo",
        "oleo.nome",
        "oleo",
        "fluido",
        "produto",
    ),
    "status": ("status", "situacao", "statusAmostra"),
    "collection_date": (
        "collectionDate",
        "dataColeta",
        "coleta.dataColeta",
        "coletaData",
        "coletadaEm",
    ),
    "technician": (
        "technician",
        "tecnico.nome",
        "tecnico",
        "coletor",
        "usuario.nome",
        "coleta.tecnico.nome",
    ),
}

_DAY_FIRST = re.compile(r"^(\d{1,2})[-/.](\d{1,2})[-/.](\d{4})$")
_ISO_FULL_DATE = re.compile(r"^\d{4}-?\d{2}-?\d{2}(?!\d)")
_FILL_DEFAULTS = (datetime(1901, 1, 1), datetime(1902, 2, 2))


def unwrap(payload: Any) -> Mapping[str, Any]:
    """Pick the record out of a payload: the first element of a list,
    optionally nested under 'data'."""
    record = payload
    if isinstance(record, Mapping) and isinstance(record.get("data"), (Mapping, list)):
        record = record["data"]
    if isinstance(record, list):
        record = record[0] if record else None
    return record if isinstance(record, Mapping) else {}


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a date-like value into a calendar date.

    Accepts ISO-8601 strings, day-first strings (05-03-2024, 05/03/2024)
    and epoch milliseconds. Returns None when the value can't be parsed.
    The calendar date is taken as written, without timezone conversion.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            return None

    text = as_text(value)
    if text is None or text == PLACEHOLDER:
        return None

    match = _DAY_FIRST.match(text)
    if match:
        day, month, year = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    # isoparse fills a missing month or day with 1, so partial dates skip it
    if _ISO_FULL_DATE.match(text):
        try:
            return date_parser.isoparse(text).date()
        except (ValueError, OverflowError):
            pass
    # Parts missing from the text are filled from the default, so a value
    # that comes out differently under two defaults is incomplete
    try:
        first, second = (
            date_parser.parse(text, dayfirst=True, default=default).date()
            for default in _FILL_DEFAULTS
        )
    except (ValueError, OverflowError):
        return None
    return first if first == second else None


def format_date(day: date) -> str:
    return day.strftime(DATE_FORMAT)


def normalize_date(value: Any) -> str:
    """Reformat a date-like value as DD-MM-YYYY, or the placeholder."""
    parsed = parse_date(value)
    return format_date(parsed) if parsed else PLACEHOLDER


def normalize_status(value: Any) -> str:
    """Capitalize the first letter only: 'COLETADA' -> 'Coletada'."""
    text = as_text(value)
    if text is None:
        return PLACEHOLDER
    return text[:1].upper() + text[1:].lower()


def normalize(payload: Any, queried_code: Any, today: Optional[date] = None) -> SampleRow:
    """
    Map a raw lookup payload onto a SampleRow.

    Never raises: whatever cannot be resolved becomes the placeholder.
    The code found inside the payload takes precedence over the code
    that was queried. A missing delivery date defaults to today.
    """
    record = unwrap(payload)

    def lookup(field: str) -> Optional[str]:
        return first_present(record, CANDIDATE_PATHS[field])

    code = lookup("code")
    if code is None or code == PLACEHOLDER:
        code = as_text(queried_code)

    delivery_raw = first_value(record, CANDIDATE_PATHS["delivery_date"])
    if delivery_raw is None:
        delivery_date = format_date(today or date.today())
    else:
        delivery_date = normalize_date(delivery_raw)

    return SampleRow(
        code=code,
        delivery_date=delivery_date,
        compartment=lookup("compartment"),
        chassis=lookup("chassis"),
        client=lookup("client"),
        equipment_hours=lookup("equipment_hours"),
        oil_type=lookup("oil_type"),
        status=normalize_status(lookup("status")),
        collection_date=normalize_date(
            first_value(record, CANDIDATE_PATHS["collection_date"])
        ),
        technician=lookup("technician"),
    )


def candidate_table() -> List[Tuple[str, str]]:
    """Rows of (field, candidate paths) for display."""
    return [(field, ", ".join(paths)) for field, paths in CANDIDATE_PATHS.items()]
