# kvcache/services/store.py

import logging
import threading
from collections import deque
from datetime import timedelta
from typing import Dict, List, Union

from .errors import InvalidTTL, KeyNotFound, NoItems
from .expiration import ExpirationScheduler
from .rwlock import ReadWriteLock
from .values import DictValue, ListValue, Scalar, Value, expect

logger = logging.getLogger(__name__)


class Store:
    """
    Thread-safe in-memory key-value store holding strings, lists and dicts.

    One reader/writer lock guards the whole map: reads (get, hget, keys) share it,
    mutations (set, remove, push, pop, hset) take it exclusively.
    Failures raise a CacheError subclass; nothing else is raised on well-typed input.
    """

    def __init__(self) -> None:
        self._data: Dict[str, Value] = {}
        self._lock = ReadWriteLock()
        self.expirations = ExpirationScheduler(self.remove)

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock.read():
            return key in self._data

    def remove(self, key: str) -> None:
        """Delete `key` if present. Removing a missing key is not an error."""
        with self._lock.write():
            existed = self._data.pop(key, None) is not None
        if existed:
            logger.debug("Removed key %r", key)

    def keys(self) -> List[str]:
        """Snapshot of all present keys, in no particular order."""
        with self._lock.read():
            return list(self._data)

    def set_ttl(self, key: str, ttl: Union[float, timedelta]) -> None:
        """
        Remove `key` once `ttl` (seconds or timedelta) has elapsed.
        ttl == 0 does nothing. Earlier TTLs on the same key are not replaced.
        TTLs beyond threading.TIMEOUT_MAX cannot be waited on and are rejected.
        """
        seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
        if not 0 <= seconds <= threading.TIMEOUT_MAX:
            raise InvalidTTL()
        if seconds == 0:
            return
        with self._lock.read():
            if key not in self._data:
                raise KeyNotFound()
        self.expirations.schedule(key, seconds)

    def set(self, key: str, value: str) -> None:
        """Store `value` as a string, replacing whatever `key` held."""
        with self._lock.write():
            self._data[key] = Scalar(value)
        logger.debug("Set key %r", key)

    def get(self, key: str) -> str:
        with self._lock.read():
            item = self._data.get(key)
            if item is None:
                raise KeyNotFound()
            return expect(item, Scalar).data

    def push(self, key: str, *values: str) -> None:
        """Append `values` in order to the list at `key`, creating it if absent."""
        with self._lock.write():
            item = self._data.get(key)
            if item is None:
                self._data[key] = ListValue(deque(values))
            else:
                expect(item, ListValue).items.extend(values)
        logger.debug("Pushed %d value(s) to key %r", len(values), key)

    def pop(self, key: str) -> str:
        """Remove and return the first element of the list at `key`."""
        with self._lock.write():
            item = self._data.get(key)
            if item is None:
                raise KeyNotFound()
            lst = expect(item, ListValue)
            if not lst.items:
                raise NoItems()
            value = lst.items.popleft()
        logger.debug("Popped from key %r", key)
        return value

    def hset(self, key: str, field: str, value: str) -> None:
        with self._lock.write():
            item = self._data.get(key)
            if item is None:
                self._data[key] = DictValue({field: value})
            else:
                expect(item, DictValue).fields[field] = value
        logger.debug("Set field %r on key %r", field, key)

    def hget(self, key: str, field: str) -> str:
        """
        Value of `field` in the dict at `key`.
        A missing field yields "" while a missing key raises KeyNotFound.
        """
        with self._lock.read():
            item = self._data.get(key)
            if item is None:
                raise KeyNotFound()
            return expect(item, DictValue).fields.get(field, "")

    def close(self) -> None:
        """Cancel pending expirations. The data itself stays readable."""
        self.expirations.shutdown()
