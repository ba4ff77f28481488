"""
Key-value storage and the typed binder on top of it.

Everything the app keeps between runs goes through a KeyValueStore: a
string-to-string map, the same shape as browser local storage. The
StorageBinder turns typed values into JSON text and back, handing out a
default whenever an entry is missing or unreadable.
"""

import copy
import json
import logging
import os
import tempfile
from decimal import InvalidOperation
from pathlib import Path
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

# Everything a decoder can raise on a malformed entry
DECODE_ERRORS = (ValueError, TypeError, KeyError, AttributeError, InvalidOperation, OverflowError)


class KeyValueStore:
    """Port: durable string storage keyed by string."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore(KeyValueStore):
    """
    File-backed store: one JSON object mapping keys to serialized strings.

    The file is re-read on every get so several stores (or processes) over
    the same path see each other's writes; last write wins. A missing or
    corrupt file reads as empty.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read store {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Store {self.path} does not hold a JSON object, ignoring it")
            return {}
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Wrote key {key!r} to {self.path}")


class StorageBinder:
    """Load/save typed values under string keys, with defaults on failure."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def load(self, key: str, default: Any, decode: Optional[Callable[[Any], Any]] = None) -> Any:
        """
        Return the value stored under `key`, or a copy of `default`.

        The default is handed back (and nothing written) when the key is
        absent or its content does not parse / decode.
        """
        raw = self.store.get(key)
        if raw is None:
            logger.debug(f"No stored value for {key!r}, using default")
            return copy.deepcopy(default)

        try:
            parsed = json.loads(raw)
            return decode(parsed) if decode is not None else parsed
        except DECODE_ERRORS as e:
            logger.warning(f"Stored value for {key!r} is unreadable ({e}), using default")
            return copy.deepcopy(default)

    def save(self, key: str, value: Any, encode: Optional[Callable[[Any], Any]] = None) -> bool:
        """Overwrite `key` with the serialized value. Returns False if the write failed."""
        try:
            text = json.dumps(encode(value) if encode is not None else value, ensure_ascii=False)
            self.store.set(key, text)
        except (TypeError, ValueError, ArithmeticError, OSError) as e:
            logger.warning(f"Could not save {key!r}: {e}")
            return False
        return True
