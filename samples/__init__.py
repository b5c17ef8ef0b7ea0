"""
Lubricant sample lookup and logging.

This package provides the pieces of the sample log:
- SampleRow: Normalized ten-field sample record
- normalize: Raw lookup payload -> SampleRow
- HistoryStore: Deduplicated, bounded, persisted log of rows
- export: Tab-delimited text and XLSX workbook output
- S360Client / Session: Lookup service access
- KeyValueStore backends: MemoryStore, YamlFileStore
"""

from .row import PLACEHOLDER, FIELDS, SampleRow
from .paths import resolve_path, first_present, first_value
from .normalizer import CANDIDATE_PATHS, normalize, normalize_date, normalize_status
from .history import HISTORY_CAPACITY, HISTORY_KEY, HistoryStore, upsert_rows
from .storage import (
    KeyValueStore,
    MemoryStore,
    YamlFileStore,
    save_credentials,
    load_credentials,
    clear_credentials,
)
from .export import (
    COLUMNS,
    XLSX_MIME_TYPE,
    ExportFile,
    build_workbook_export,
    sanitize_cell,
    to_delimited_text,
    to_workbook_base64,
)
from .session import Session
from .client import ApiError, AuthenticationError, S360Client

__all__ = [
    "PLACEHOLDER",
    "FIELDS",
    "SampleRow",
    "resolve_path",
    "first_present",
    "first_value",
    "CANDIDATE_PATHS",
    "normalize",
    "normalize_date",
    "normalize_status",
    "HISTORY_CAPACITY",
    "HISTORY_KEY",
    "HistoryStore",
    "upsert_rows",
    "KeyValueStore",
    "MemoryStore",
    "YamlFileStore",
    "save_credentials",
    "load_credentials",
    "clear_credentials",
    "COLUMNS",
    "XLSX_MIME_TYPE",
    "ExportFile",
    "build_workbook_export",
    "sanitize_cell",
    "to_delimited_text",
    "to_workbook_base64",
    "Session",
    "ApiError",
    "AuthenticationError",
    "S360Client",
]
