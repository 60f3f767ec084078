"""CSV bulk import and export of trade records.

Import is all-or-nothing: every row is validated first and the first
invalid row means nothing is returned for insertion. Export writes the
same columns back out, plus the derived fields, so an exported file can
be imported again.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import IO, Any, Iterable

import pandas as pd
from pydantic import ValidationError

from options_journal.core.dates import parse_date
from options_journal.core.errors import ImportValidationError, RowError
from options_journal.core.models import TradeRecord
from options_journal.ledger.calculator import derive_fields

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = (
    "ticker",
    "account",
    "trading_date",
    "option_type",
    "expiration_date",
    "status",
    "contracts",
    "cost",
    "strike_price",
    "price_at_purchase",
)
OPTIONAL_COLUMNS = ("realized_pl", "unrealized_pl", "audited", "exercised", "closed_date")
DERIVED_COLUMNS = ("pmcc_calc", "expected_return")
EXPORT_COLUMNS = REQUIRED_COLUMNS + OPTIONAL_COLUMNS + DERIVED_COLUMNS

# Values that must be non-blank in every row. Account and expiration are
# required headers whose cells may be empty.
_REQUIRED_VALUES = (
    "ticker",
    "trading_date",
    "option_type",
    "contracts",
    "cost",
    "strike_price",
    "price_at_purchase",
)
_DATE_COLUMNS = ("trading_date", "expiration_date", "closed_date")
_FLOAT_COLUMNS = ("cost", "strike_price", "price_at_purchase", "realized_pl", "unrealized_pl") + DERIVED_COLUMNS
_TRUE = ("true", "yes")
_FALSE = ("false", "no", "")


def _read_frame(source: str | Path | IO[str]) -> pd.DataFrame:
    if isinstance(source, str) and "\n" in source:
        source = io.StringIO(source)
    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False, skipinitialspace=True)
    except pd.errors.EmptyDataError as e:
        raise ImportValidationError([], "CSV file is empty or could not be read") from e
    df.columns = [str(c).strip().strip('"').lower() for c in df.columns]
    return df


def _parse_row(values: dict[str, str], row: int) -> tuple[dict[str, Any], RowError | None]:
    """Convert one row of strings to trade fields, collecting bad fields."""
    bad: list[str] = []
    messages: list[str] = []
    parsed: dict[str, Any] = {}

    def text(name: str) -> str:
        return str(values.get(name, "") or "").strip()

    for name in _REQUIRED_VALUES:
        if not text(name):
            bad.append(name)
    if bad:
        messages.append("missing value")

    parsed["ticker"] = text("ticker").upper()
    parsed["account"] = text("account")
    parsed["option_type"] = text("option_type")

    for name in _DATE_COLUMNS:
        try:
            parsed[name] = parse_date(text(name))
        except ValueError as e:
            bad.append(name)
            messages.append(str(e))

    status = text("status").lower() or "open"
    if status not in ("open", "closed"):
        bad.append("status")
        messages.append(f"status must be open or closed, got {status!r}")
    parsed["status"] = status

    contracts = text("contracts")
    if contracts:
        try:
            parsed["contracts"] = int(float(contracts))
            if parsed["contracts"] < 1:
                raise ValueError
        except ValueError:
            bad.append("contracts")
            messages.append("contracts must be a whole number of at least 1")

    for name in _FLOAT_COLUMNS:
        raw = text(name)
        if not raw:
            continue
        try:
            parsed[name] = float(raw)
        except ValueError:
            bad.append(name)
            messages.append(f"{name} is not a number: {raw!r}")

    for name in ("audited", "exercised"):
        raw = text(name).lower()
        if raw in _TRUE:
            parsed[name] = True
        elif raw in _FALSE:
            parsed[name] = False
        else:
            bad.append(name)
            messages.append(f"{name} must be true or false")

    if bad:
        fields = list(dict.fromkeys(bad))
        return parsed, RowError(row=row, fields=fields, message="; ".join(dict.fromkeys(messages)))
    return parsed, None


def read_trades_csv(source: str | Path | IO[str], owner_id: str) -> list[TradeRecord]:
    """Parse and validate a CSV of trades for ``owner_id``.

    ``source`` is a path, an open text file, or CSV text. Raises
    ImportValidationError naming every offending row. Derived columns
    keep their cell values and are computed where the cell is blank.
    """
    df = _read_frame(source)

    missing_headers = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing_headers:
        raise ImportValidationError(
            [RowError(row=1, fields=missing_headers, message="missing required headers")],
            f"Missing required headers: {', '.join(missing_headers)}. "
            f"Expected headers: {', '.join(REQUIRED_COLUMNS)}",
        )
    if df.empty:
        raise ImportValidationError([], "CSV file must have a header row and at least one data row")

    records: list[TradeRecord] = []
    errors: list[RowError] = []
    for index, values in enumerate(df.to_dict(orient="records")):
        row = index + 2  # header is row 1
        parsed, error = _parse_row(values, row)
        if error:
            errors.append(error)
            continue
        try:
            record = TradeRecord(owner_id=owner_id, **parsed)
        except ValidationError as e:
            fields = [".".join(str(p) for p in err["loc"]) or "record" for err in e.errors()]
            errors.append(
                RowError(
                    row=row,
                    fields=list(dict.fromkeys(fields)),
                    message="; ".join(err["msg"] for err in e.errors()),
                )
            )
            continue
        # Derived cells written by export are kept; blank ones are computed.
        missing = {k: v for k, v in derive_fields(record).items() if k not in parsed}
        records.append(record.model_copy(update=missing))

    if errors:
        logger.warning("Rejected import: %d invalid row(s)", len(errors))
        raise ImportValidationError(errors)

    logger.info("Parsed %d trade(s) from CSV", len(records))
    return records


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def trades_to_frame(trades: Iterable[TradeRecord]) -> pd.DataFrame:
    """Tabulate trades as strings in export column order."""
    rows = [{c: _cell(getattr(t, c)) for c in EXPORT_COLUMNS} for t in trades]
    return pd.DataFrame(rows, columns=list(EXPORT_COLUMNS))


def write_trades_csv(trades: Iterable[TradeRecord], dest: str | Path | IO[str] | None = None) -> str | None:
    """Write trades as CSV to ``dest``; returns the text when ``dest`` is None."""
    df = trades_to_frame(trades)
    if dest is None:
        return df.to_csv(index=False)
    df.to_csv(dest, index=False)
    logger.info("Exported %d trade(s)", len(df))
    return None
