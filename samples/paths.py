"""Lookup of loosely structured payload values by dotted property paths."""
from typing import Any, Iterable, Mapping, Optional, Sequence

from .row import as_text


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


def resolve_path(tree: Any, dotted: str) -> Any:
    """
    Follow a dotted chain of keys through nested mappings.

    Numeric segments index into sequences (e.g. 'amostras.0.codigo').
    Returns MISSING as soon as a step cannot be taken.
    """
    current = tree
    for part in dotted.split("."):
        if isinstance(current, Mapping):
            if part not in current:
                return MISSING
            current = current[part]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            if not part.isdigit() or int(part) >= len(current):
                return MISSING
            current = current[int(part)]
        else:
            return MISSING
    return current


def first_value(tree: Any, candidates: Iterable[str]) -> Any:
    """
    Return the raw value at the first candidate path that holds usable text.

    None, blank strings and nested containers fall through to the next
    candidate. Returns None when no candidate resolves.
    """
    for path in candidates:
        value = resolve_path(tree, path)
        if value is not MISSING and as_text(value) is not None:
            return value
    return None


def first_present(tree: Any, candidates: Iterable[str]) -> Optional[str]:
    """Like first_value, but coerced to a trimmed string."""
    return as_text(first_value(tree, candidates))
