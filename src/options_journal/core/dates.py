"""Calendar-date parsing shared by import, filters and sorting."""

from __future__ import annotations

from datetime import date, datetime


def parse_date(value: str | date | datetime | None) -> date | None:
    """Parse ``YYYY-MM-DD`` or ``MM/DD/YYYY`` (two-digit years map to 20xx).

    Blank input returns None; anything else unparseable raises ValueError.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    if "/" in text:
        parts = text.split("/")
        if len(parts) != 3:
            raise ValueError(f"Unrecognised date: {value!r}")
        month, day, year = parts
    elif "-" in text:
        parts = text.split("T")[0].split("-")
        if len(parts) != 3:
            raise ValueError(f"Unrecognised date: {value!r}")
        year, month, day = parts
    else:
        raise ValueError(f"Unrecognised date: {value!r}")

    if len(year) == 2:
        year = f"20{year}"
    try:
        return date(int(year), int(month), int(day))
    except ValueError as e:
        raise ValueError(f"Unrecognised date: {value!r}") from e


def normalize_date(value: str | date | None) -> str:
    """Return the ISO ``YYYY-MM-DD`` form, or an empty string for blanks."""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else ""
