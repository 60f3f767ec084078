"""Small per-owner key-value store backed by JSON files.

Holds side data that is not part of the trade ledger: saved account names,
watchlist tickers and the shared-trade feed.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_KV_DIR = Path("data/kv")


class KeyValueStore:
    """JSON document per owner with get/set/delete by key."""

    def __init__(self, kv_dir: Path | str = DEFAULT_KV_DIR):
        self.kv_dir = Path(kv_dir)
        self.kv_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, owner_id: str) -> Path:
        digest = hashlib.sha256(owner_id.encode()).hexdigest()[:16]
        return self.kv_dir / f"{digest}.json"

    def _load(self, owner_id: str) -> dict[str, Any]:
        path = self._path(owner_id)
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt key-value file {path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, owner_id: str, data: dict[str, Any]) -> None:
        self._path(owner_id).write_text(json.dumps(data, indent=2, default=str))

    def get(self, owner_id: str, key: str, default: Any = None) -> Any:
        return self._load(owner_id).get(key, default)

    def set(self, owner_id: str, key: str, value: Any) -> None:
        data = self._load(owner_id)
        data[key] = value
        self._save(owner_id, data)
        logger.debug(f"Stored {key} for {owner_id}")

    def delete(self, owner_id: str, key: str) -> bool:
        data = self._load(owner_id)
        if key not in data:
            return False
        del data[key]
        self._save(owner_id, data)
        return True
