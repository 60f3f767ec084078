"""Exception hierarchy for the options journal."""

from __future__ import annotations

from dataclasses import dataclass, field


class JournalError(Exception):
    """Base class for every error the journal raises on purpose."""


class TradeValidationError(JournalError, ValueError):
    """Input failed shape or range validation."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(message)
        self.fields = fields or []

    @classmethod
    def from_pydantic(cls, error, prefix: str = "Invalid trade") -> TradeValidationError:
        """Wrap a pydantic ValidationError, keeping the offending field names."""
        details = error.errors()
        fields = list(dict.fromkeys(".".join(str(p) for p in d["loc"]) or "record" for d in details))
        messages = "; ".join(d["msg"] for d in details)
        return cls(f"{prefix}: {messages}", fields)


@dataclass
class RowError:
    """One rejected row of a bulk import."""

    row: int
    fields: list[str] = field(default_factory=list)
    message: str = ""

    def __str__(self) -> str:
        detail = f"Row {self.row}: invalid fields [{', '.join(self.fields)}]"
        if self.message:
            detail += f" - {self.message}"
        return detail


class ImportValidationError(TradeValidationError):
    """A bulk import was rejected; nothing was written."""

    def __init__(self, rows: list[RowError], message: str | None = None):
        self.rows = rows
        if message is None:
            lines = [f"Validation failed for {len(rows)} row(s):"]
            lines.extend(str(r) for r in rows)
            message = "\n".join(lines)
        fields = sorted({f for r in rows for f in r.fields})
        super().__init__(message, fields)


class StoreError(JournalError):
    """The record store could not complete an operation."""


class TradeNotFoundError(StoreError, LookupError):
    """No trade with the given id exists for the given owner."""

    def __init__(self, owner_id: str, trade_id: str):
        super().__init__(f"Trade not found: {trade_id}")
        self.owner_id = owner_id
        self.trade_id = trade_id


class QuoteError(JournalError):
    """A price quote could not be fetched for a ticker."""
