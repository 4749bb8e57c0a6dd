# --- storefront/storage.py ---
"""Flat-file persistence for the shop's collections.

Each collection (products, categories, orders) is one JSON array in ``data_dir``.
There is no partial update: callers load the whole list, change it in memory and
save it back. Nothing serializes concurrent writers, so two requests mutating the
same collection at once can lose one of the updates (last save wins).
"""
import json
import logging
import os
import tempfile

from .errors import StorageCorruptError, StorageReadError, StorageWriteError

log = logging.getLogger(__name__)

PRODUCTS = "products"
CATEGORIES = "categories"
ORDERS = "orders"


class JsonStore:
    def __init__(self, data_dir):
        self.data_dir = str(data_dir)

    def path(self, name: str) -> str:
        return os.path.join(self.data_dir, f"{name}.json")

    def exists(self, name: str) -> bool:
        return os.path.isfile(self.path(name))

    def load(self, name: str, strict: bool = False) -> list:
        """Return the decoded collection.

        A missing or unreadable file yields ``[]`` unless ``strict`` is set, in which
        case it raises :class:`StorageReadError`. Undecodable content always raises
        :class:`StorageCorruptError`; callers that want to start over catch it.
        """
        path = self.path(name)
        try:
            with open(path, "r", encoding="utf-8") as fh:
                raw = fh.read()
        except OSError as e:
            if strict:
                raise StorageReadError(f"Failed to read {name}") from e
            log.debug("collection %s not readable (%s), using empty list", name, e)
            return []

        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageCorruptError(f"Failed to parse {name}") from e
        if not isinstance(data, list):
            raise StorageCorruptError(f"Failed to parse {name}")
        return data

    def save(self, name: str, records) -> None:
        path = self.path(name)
        tmp_path = None
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=f".{name}-", suffix=".tmp", dir=self.data_dir)
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(list(records), fh, indent=2, ensure_ascii=False)
            os.replace(tmp_path, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageWriteError(f"Failed to save {name}") from e
