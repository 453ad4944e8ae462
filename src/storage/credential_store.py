# src/storage/credential_store.py

"""Keyed, timestamped persistence for the Amazon session cookie.

The store is the only component that touches the persisted form; the
fetcher receives the loaded string value (or ``None``) as a parameter.
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from src.config.settings import Settings

logger = logging.getLogger("link_card.storage")

_SECONDS_PER_DAY = 24 * 60 * 60


@dataclass
class StoredCredential:
    """Persisted cookie value with Unix-second timestamps."""

    value: str
    expires_at: float
    created_at: float


class CredentialStore:
    """JSON-file backed store for a single session cookie."""

    def __init__(
        self, path: Path | None = None, key: str | None = None
    ) -> None:
        self.path: Path = path or Settings.COOKIE_STORE_PATH
        self.key: str = key or Settings.COOKIE_STORAGE_KEY

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Unreadable credential store %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def save(
        self, value: str, expiry_days: int = Settings.COOKIE_EXPIRY_DAYS
    ) -> StoredCredential:
        """Persist *value*, expiring *expiry_days* from now."""
        now = time.time()
        record = StoredCredential(
            value=value,
            expires_at=now + expiry_days * _SECONDS_PER_DAY,
            created_at=now,
        )
        data = self._read_all()
        data[self.key] = asdict(record)
        self._write_all(data)
        logger.info(
            "Saved session cookie (expires in %d days) to %s",
            expiry_days,
            self.path,
        )
        return record

    def load(self) -> str | None:
        """Return the stored value, or ``None`` if missing or expired.

        Expired entries are removed from the underlying file.
        """
        raw = self._read_all().get(self.key)
        if raw is None:
            return None
        try:
            record = StoredCredential(**raw)
        except TypeError:
            logger.warning("Malformed credential entry under %s", self.key)
            return None

        if time.time() > record.expires_at:
            logger.info("Session cookie expired, deleting")
            self.delete()
            return None
        return record.value

    def delete(self) -> None:
        """Remove the stored value (no-op when absent)."""
        data = self._read_all()
        if data.pop(self.key, None) is not None:
            self._write_all(data)
            logger.info("Deleted session cookie from %s", self.path)
