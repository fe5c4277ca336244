# app/database.py
"""
File-backed storage primitives.

* Catalog tables (products, categories) are read once with pandas from JSON,
  CSV or Excel files. List-valued columns in CSV / Excel are JSON strings.
* The cart mirror is a single key-value slot. FileBackedKV keeps one file per
  key inside DATA_DIR and uses file locking so two processes never interleave
  writes; InMemoryKV is the drop-in used by tests.

Usage:
    from app.database import FileBackedKV, CartStorage, read_table
    rows = read_table(Path("app/data/products.json"))
    storage = CartStorage(FileBackedKV(Path("data")), "shopflow-cart")
    storage.save(cart)
"""

from pathlib import Path
from typing import Any, Dict, List, Optional
import json
import logging
import os
import re

import pandas as pd
from filelock import FileLock

from app.models.cart import Cart, MalformedCartData

logger = logging.getLogger(__name__)


def read_table(path: Path) -> List[Dict[str, Any]]:
    """
    Read a catalog table into a list of row dicts. Missing cells come back as
    NaN; model constructors treat those as absent.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".json":
        df = pd.read_json(path, orient="records", dtype=False, convert_dates=False)
    elif suffix == ".csv":
        df = pd.read_csv(path)
    elif suffix in (".xls", ".xlsx"):
        df = pd.read_excel(path)
    else:
        raise ValueError(f"Unsupported catalog format: {path.suffix}")
    if df.empty:
        return []
    return df.to_dict(orient="records")


class FileBackedKV:
    """
    Key-value slots stored as text files inside data_dir (one file per key).
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _file_path(self, key: str) -> Path:
        safe = re.sub(r"[^A-Za-z0-9_.-]", "_", key)
        return self.data_dir / f"{safe}.json"

    def _lock_for(self, path: Path) -> FileLock:
        return FileLock(str(path) + ".lock", timeout=5)

    def get(self, key: str) -> Optional[str]:
        path = self._file_path(key)
        if not path.exists():
            return None
        with self._lock_for(path):
            return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._file_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        with self._lock_for(path):
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, path)

    def delete(self, key: str) -> bool:
        path = self._file_path(key)
        if not path.parent.exists():
            return False
        with self._lock_for(path):
            if not path.exists():
                return False
            path.unlink()
            return True


class InMemoryKV:
    """Dict-backed stand-in for FileBackedKV."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> bool:
        return self.data.pop(key, None) is not None


class CartStorage:
    """
    Durable mirror of the cart: the whole line-item list serialized as JSON
    under one fixed key. There is no versioning; a stored value that does not
    parse is reported and treated as an empty cart.
    """

    def __init__(self, kv, key: str):
        self.kv = kv
        self.key = key

    def load(self) -> Cart:
        try:
            raw = self.kv.get(self.key)
        except OSError as e:
            logger.error("Could not read stored cart %r: %s", self.key, e)
            return Cart()
        if raw is None:
            return Cart()
        try:
            return Cart.from_list(json.loads(raw))
        except (ValueError, MalformedCartData) as e:
            logger.warning("Discarding corrupted cart data under %r: %s", self.key, e)
            return Cart()

    def save(self, cart: Cart) -> bool:
        try:
            self.kv.set(self.key, json.dumps(cart.to_list(), ensure_ascii=False))
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to persist cart under %r: %s", self.key, e)
            return False
        return True

    def reset(self) -> bool:
        return self.kv.delete(self.key)
