"""Owner-scoped persistence for trade records."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from options_journal.core.errors import StoreError, TradeNotFoundError, TradeValidationError
from options_journal.core.models import TradeRecord

logger = logging.getLogger(__name__)

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS trades (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    ticker TEXT NOT NULL,
    account TEXT NOT NULL DEFAULT '',
    option_type TEXT NOT NULL,
    contracts INTEGER NOT NULL,
    cost REAL NOT NULL DEFAULT 0,
    strike_price REAL NOT NULL DEFAULT 0,
    price_at_purchase REAL NOT NULL DEFAULT 0,
    trading_date TEXT NOT NULL,
    expiration_date TEXT,
    closed_date TEXT,
    status TEXT NOT NULL DEFAULT 'open',
    realized_pl REAL,
    unrealized_pl REAL,
    pmcc_calc REAL,
    expected_return REAL,
    audited INTEGER NOT NULL DEFAULT 0,
    exercised INTEGER NOT NULL DEFAULT 0,
    created_at TEXT DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_trades_owner ON trades (owner_id);
"""

_COLUMNS = tuple(TradeRecord.model_fields)
_MUTABLE = frozenset(_COLUMNS) - {"id", "owner_id"}


class TradeStore(Protocol):
    """Interface every trade record store provides."""

    def list(self, owner_id: str) -> list[TradeRecord]: ...

    def get(self, owner_id: str, trade_id: str) -> TradeRecord: ...

    def insert(self, record: TradeRecord) -> str: ...

    def insert_many(self, records: list[TradeRecord]) -> list[str]: ...

    def update(self, owner_id: str, trade_id: str, fields: dict[str, Any]) -> TradeRecord: ...

    def delete(self, owner_id: str, trade_id: str) -> None: ...

    def delete_all(self, owner_id: str) -> int: ...


def _to_row(record: TradeRecord) -> tuple:
    data = record.model_dump(mode="json")
    data["audited"] = int(record.audited)
    data["exercised"] = int(record.exercised)
    return tuple(data[c] for c in _COLUMNS)


class SqliteTradeStore:
    """SQLite-backed trade store. Every query is scoped by ``owner_id``."""

    def __init__(self, db_path: Path | str) -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self.db_path))
        self._conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self) -> None:
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> SqliteTradeStore:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _write(self, sql: str, params: Any = (), many: bool = False) -> sqlite3.Cursor:
        try:
            cursor = self._conn.executemany(sql, params) if many else self._conn.execute(sql, params)
            self._conn.commit()
            return cursor
        except sqlite3.Error as e:
            self._conn.rollback()
            raise StoreError(f"Trade store write failed: {e}") from e

    @staticmethod
    def _record(row: sqlite3.Row) -> TradeRecord:
        data = {k: row[k] for k in _COLUMNS}
        return TradeRecord.model_validate(data)

    # ── Reads ────────────────────────────────────────────────────────────

    def list(self, owner_id: str) -> list[TradeRecord]:
        rows = self._conn.execute(
            "SELECT * FROM trades WHERE owner_id = ? ORDER BY created_at, rowid",
            (owner_id,),
        ).fetchall()
        records = []
        for row in rows:
            try:
                records.append(self._record(row))
            except ValidationError as e:
                logger.warning("Skipping unreadable trade %s: %s", row["id"], e)
        return records

    def get(self, owner_id: str, trade_id: str) -> TradeRecord:
        row = self._conn.execute(
            "SELECT * FROM trades WHERE owner_id = ? AND id = ?",
            (owner_id, trade_id),
        ).fetchone()
        if row is None:
            raise TradeNotFoundError(owner_id, trade_id)
        return self._record(row)

    # ── Writes ───────────────────────────────────────────────────────────

    def insert(self, record: TradeRecord) -> str:
        return self.insert_many([record])[0]

    def insert_many(self, records: list[TradeRecord]) -> list[str]:
        """Insert all records in one transaction; none are kept on failure."""
        placeholders = ", ".join("?" for _ in _COLUMNS)
        self._write(
            f"INSERT INTO trades ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
            [_to_row(r) for r in records],
            many=True,
        )
        logger.info("Inserted %d trade(s)", len(records))
        return [r.id for r in records]

    def update(self, owner_id: str, trade_id: str, fields: dict[str, Any]) -> TradeRecord:
        """Merge ``fields`` into a stored trade and return the validated result."""
        unknown = set(fields) - _MUTABLE
        if unknown:
            raise TradeValidationError(
                f"Cannot update field(s): {', '.join(sorted(unknown))}", sorted(unknown)
            )

        current = self.get(owner_id, trade_id)
        try:
            updated = TradeRecord.model_validate({**current.model_dump(), **fields})
        except ValidationError as e:
            raise TradeValidationError.from_pydantic(e) from e

        row = dict(zip(_COLUMNS, _to_row(updated)))
        assignments = ", ".join(f"{c} = ?" for c in fields)
        cursor = self._write(
            f"UPDATE trades SET {assignments} WHERE owner_id = ? AND id = ?",
            [row[c] for c in fields] + [owner_id, trade_id],
        )
        if cursor.rowcount == 0:
            raise TradeNotFoundError(owner_id, trade_id)
        logger.info("Updated trade %s: %s", trade_id, ", ".join(fields))
        return updated

    def delete(self, owner_id: str, trade_id: str) -> None:
        cursor = self._write(
            "DELETE FROM trades WHERE owner_id = ? AND id = ?", (owner_id, trade_id)
        )
        if cursor.rowcount == 0:
            raise TradeNotFoundError(owner_id, trade_id)
        logger.info("Deleted trade %s", trade_id)

    def delete_all(self, owner_id: str) -> int:
        cursor = self._write("DELETE FROM trades WHERE owner_id = ?", (owner_id,))
        logger.info("Deleted %d trade(s) for %s", cursor.rowcount, owner_id)
        return cursor.rowcount
