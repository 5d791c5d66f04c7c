from __future__ import annotations

import logging
from datetime import datetime
from pathlib import PurePath
from typing import Any, BinaryIO, Iterator

import pandas as pd

from ..core.enums import AttendingStatus, Gender, PaidStatus, Section
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = {".xlsx", ".csv"}

# Spreadsheet header (lowercased, without spaces or underscores) -> payload key
# understood by parse_new_student(). Covers both first_name and firstName styles.
COLUMN_ALIASES = {
    "firstname": "first_name",
    "lastname": "last_name",
    "section": "section",
    "gender": "gender",
    "mobile": "mobile",
    "email": "email",
    "dob": "dob",
    "city": "city",
    "work": "work",
    "attendingstatus": "attending_status",
    "paidstatus": "paid_status",
}

ROW_DEFAULTS = {
    "section": Section.A.value,
    "gender": Gender.OTHER.value,
    "attending_status": AttendingStatus.NOT_CONFIRMED.value,
    "paid_status": PaidStatus.NOT_PAID.value,
}


def _normalize_header(header: Any) -> str:
    return str(header).strip().lower().replace(" ", "").replace("_", "")


def _clean_cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    if value is pd.NaT:
        return None
    # pd.Timestamp is a datetime subclass
    if isinstance(value, datetime):
        return value.date()
    # mobiles typed as numbers come back as 9876543210.0
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return value


def load_frame(stream: BinaryIO, filename: str) -> pd.DataFrame:
    """Read the first sheet (or the CSV body) of an uploaded file."""
    ext = PurePath(filename or "").suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValidationError("Only Excel (.xlsx) or CSV files are supported")

    try:
        if ext == ".csv":
            return pd.read_csv(stream, dtype=object)
        return pd.read_excel(stream, sheet_name=0, dtype=object)
    except (ValueError, OSError) as e:
        logger.warning("Could not read uploaded file %s: %s", filename, e)
        raise ValidationError("Could not read the uploaded file")


def read_student_rows(stream: BinaryIO, filename: str) -> Iterator[tuple[int, dict[str, Any]]]:
    """Yield (row_number, payload) for each non-empty data row.

    Row numbers are 1-based and count data rows only (the header is not row 1).
    Unknown columns are ignored; missing optional enums get their defaults.
    """
    df = load_frame(stream, filename)

    columns = {}
    for header in df.columns:
        key = COLUMN_ALIASES.get(_normalize_header(header))
        if key and key not in columns.values():
            columns[header] = key

    logger.debug("Import columns mapped: %s", columns)

    for position, record in enumerate(df.to_dict(orient="records"), start=1):
        payload = {key: _clean_cell(record.get(header)) for header, key in columns.items()}
        if all(v is None for v in payload.values()):
            continue
        for key, default in ROW_DEFAULTS.items():
            if payload.get(key) is None:
                payload[key] = default
        yield position, payload
