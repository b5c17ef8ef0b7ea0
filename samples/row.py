"""SampleRow class for normalized lubricant-sample records."""
from typing import Any, Dict, Mapping, Optional

PLACEHOLDER = "-"

# Python attribute -> persisted key, in canonical column order
FIELDS = (
    ("code", "code"),
    ("delivery_date", "deliveryDate"),
    ("compartment", "compartment"),
    ("chassis", "chassis"),
    ("client", "client"),
    ("equipment_hours", "equipmentHours"),
    ("oil_type", "oilType"),
    ("status", "status"),
    ("collection_date", "collectionDate"),
    ("technician", "technician"),
)


def as_text(value: Any) -> Optional[str]:
    """Coerce a scalar to a trimmed string; None if nothing usable remains."""
    if value is None or isinstance(value, (dict, list, tuple)):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip() or None


def clean(value: Any) -> str:
    """Coerce a value to a trimmed string, or the placeholder if empty."""
    return as_text(value) or PLACEHOLDER


class SampleRow:
    """One sample record as shown on screen and written to the log."""

    def __init__(
            self,
            code: Optional[str],
            delivery_date: Optional[str] = None,
            compartment: Optional[str] = None,
            chassis: Optional[str] = None,
            client: Optional[str] = None,
            equipment_hours: Optional[str] = None,
            oil_type: Optional[str] = None,
            status: Optional[str] = None,
            collection_date: Optional[str] = None,
            technician: Optional[str] = None,
    ):
        self.code = clean(code)
        self.delivery_date = clean(delivery_date)
        self.compartment = clean(compartment)
        self.chassis = clean(chassis)
        self.client = clean(client)
        self.equipment_hours = clean(equipment_hours)
        self.oil_type = clean(oil_type)
        self.status = clean(status)
        self.collection_date = clean(collection_date)
        self.technician = clean(technician)

    @property
    def is_valid(self) -> bool:
        """A row can be logged only when it carries a real code."""
        return self.code != PLACEHOLDER

    def to_dict(self) -> Dict[str, str]:
        return {key: getattr(self, attr) for attr, key in FIELDS}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SampleRow":
        """
        Rebuild a row from a persisted record.

        Unknown keys are ignored; missing or unusable fields
        become the placeholder.
        """
        if not isinstance(raw, Mapping):
            return cls(None)
        return cls(**{attr: raw.get(key) for attr, key in FIELDS})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SampleRow):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"SampleRow(code={self.code!r}, status={self.status!r})"
