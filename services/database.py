"""
Resource accessor over MongoDB.

Records are addressed by slash-separated paths the way a hierarchical
document store addresses nodes. A path ``a/b/c/d`` maps onto collection
``a``, the document whose ``_id`` is ``"b"``, and the dotted field ``c.d``
inside that document. Values that are not objects but are stored as a whole
document are wrapped as ``{"_value": value}``.

Every method is a single pass-through to pymongo: no retries, no
transactions, no caching.
"""
import logging
import secrets
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from fastapi import Request
from pymongo.database import Database

from .config import (
    FORBIDDEN_KEY_CHARS,
    PUSH_CHARS,
    PUSH_RANDOM_CHARS,
    PUSH_TIME_CHARS,
    VALUE_FIELD,
)
from .errors import InvalidPath

log = logging.getLogger(__name__)

RESERVED_KEYS = {"_id", VALUE_FIELD}


class PushKeyGenerator:
    """
    Generates 20 character keys that sort in creation order.

    The first 8 characters encode the millisecond timestamp, the last 12 are
    random. Keys generated within the same millisecond reuse the previous
    random part incremented by one, so they still sort after each other.
    """

    def __init__(self, clock: Callable[[], float] = time.time, rng=None):
        self._clock = clock
        self._rng = rng or secrets.SystemRandom()
        self._last_ms = -1
        self._last_random: List[int] = []
        self._lock = threading.Lock()

    def generate(self) -> str:
        # Handlers run in a threadpool, so the last-key state is shared.
        with self._lock:
            return self._generate()

    def _generate(self) -> str:
        now = int(self._clock() * 1000)
        if now <= self._last_ms and self._last_random:
            # Same millisecond (or the clock stepped back): keep ordering.
            now = self._last_ms
            self._increment()
        else:
            self._last_random = [
                self._rng.randrange(len(PUSH_CHARS)) for _ in range(PUSH_RANDOM_CHARS)
            ]
        self._last_ms = now

        time_chars = []
        for _ in range(PUSH_TIME_CHARS):
            time_chars.append(PUSH_CHARS[now % 64])
            now //= 64
        random_chars = [PUSH_CHARS[i] for i in self._last_random]
        return "".join(reversed(time_chars)) + "".join(random_chars)

    def _increment(self):
        i = len(self._last_random) - 1
        while i >= 0 and self._last_random[i] == len(PUSH_CHARS) - 1:
            self._last_random[i] = 0
            i -= 1
        if i >= 0:
            self._last_random[i] += 1


def check_key(key) -> str:
    if not isinstance(key, str) or not key:
        raise InvalidPath(f"Invalid key: {key!r}")
    if FORBIDDEN_KEY_CHARS.intersection(key) or "/" in key or key in RESERVED_KEYS:
        raise InvalidPath(f"Invalid key: {key!r}")
    return key


def split_path(path) -> List[str]:
    """Split a collection path into validated segments."""
    if not isinstance(path, str):
        raise InvalidPath("Path must be a string")
    segments = path.strip("/").split("/")
    for segment in segments:
        try:
            check_key(segment)
        except InvalidPath:
            raise InvalidPath(f"Invalid path: {path!r}") from None
    return segments


def check_value(value):
    if isinstance(value, dict):
        for key, child in value.items():
            check_key(key)
            check_value(child)
    elif isinstance(value, list):
        for child in value:
            check_value(child)


def _wrap(value) -> dict:
    return dict(value) if isinstance(value, dict) else {VALUE_FIELD: value}


def _unwrap(doc: Optional[dict]):
    if doc is None:
        return None
    value = {k: v for k, v in doc.items() if k != "_id"}
    if set(value) == {VALUE_FIELD}:
        return value[VALUE_FIELD]
    return value or None


def _descend(value, keys: List[str]):
    for key in keys:
        if not isinstance(value, dict) or key not in value:
            return None
        value = value[key]
    return value


def _ordered(mapping: Dict[str, Any]) -> Dict[str, Any]:
    return {key: mapping[key] for key in sorted(mapping)}


class ResourceAccessor:
    """The six storage primitives every route handler is built from."""

    def __init__(self, database: Database, keys: Optional[PushKeyGenerator] = None):
        self.db = database
        self.keys = keys or PushKeyGenerator()

    def _locate(self, path) -> Tuple[str, Optional[str], List[str]]:
        segments = split_path(path)
        if len(segments) == 1:
            return segments[0], None, []
        return segments[0], segments[1], segments[2:]

    def read(self, path) -> Any:
        """Raw value stored at ``path``, or ``None`` when absent."""
        collection, doc_id, fields = self._locate(path)
        if doc_id is None:
            children = {str(doc["_id"]): _unwrap(doc) for doc in self.db[collection].find()}
            return _ordered(children) if children else None
        value = _unwrap(self.db[collection].find_one({"_id": doc_id}))
        return _descend(value, fields)

    def read_all(self, path) -> Dict[str, Any]:
        """Children of ``path`` keyed by id, in key order."""
        value = self.read(path)
        if not isinstance(value, dict):
            return {}
        return _ordered(value)

    def read_filtered(self, path, field: str, value) -> Dict[str, Any]:
        """Children of ``path`` whose ``field`` equals ``value``."""
        check_key(field)
        collection, doc_id, _ = self._locate(path)
        if doc_id is None:
            docs = self.db[collection].find({field: value})
            return _ordered({str(doc["_id"]): _unwrap(doc) for doc in docs})
        return {
            key: child for key, child in self.read_all(path).items()
            if isinstance(child, dict) and child.get(field) == value
        }

    def push(self, path, value) -> str:
        """Store ``value`` under a new generated key and return the key."""
        split_path(path)
        key = self.keys.generate()
        self.set_at(f"{path.strip('/')}/{key}", value)
        log.debug("Pushed %s/%s", path, key)
        return key

    def set_at(self, path, value):
        """Overwrite (or create) the value at ``path``; ``None`` deletes it."""
        if value is None:
            return self.delete_at(path)
        check_value(value)
        collection, doc_id, fields = self._locate(path)
        coll = self.db[collection]

        if doc_id is None:
            if not isinstance(value, dict):
                raise InvalidPath("A collection can only hold an object of children")
            coll.delete_many({})
            docs = [
                dict(_wrap(child), _id=key)
                for key, child in value.items() if child is not None
            ]
            if docs:
                coll.insert_many(docs)
        elif not fields:
            coll.replace_one({"_id": doc_id}, _wrap(value), upsert=True)
        else:
            coll.update_one(
                {"_id": doc_id}, {"$set": {".".join(fields): value}}, upsert=True
            )

    def update_at(self, path, partial: dict):
        """Merge ``partial`` into the value at ``path``.

        Fields absent from ``partial`` are left alone; fields set to ``None``
        are removed.
        """
        if not isinstance(partial, dict):
            raise InvalidPath("Update payload must be an object")
        check_value(partial)
        collection, doc_id, fields = self._locate(path)

        if doc_id is None:
            for key, value in partial.items():
                self.set_at(f"{collection}/{key}", value)
            return

        prefix = ".".join(fields)
        to_set, to_unset = {}, {}
        for key, value in partial.items():
            target = f"{prefix}.{key}" if prefix else key
            if value is None:
                to_unset[target] = ""
            else:
                to_set[target] = value

        update = {}
        if to_set:
            update["$set"] = to_set
        if to_unset:
            update["$unset"] = to_unset
        if update:
            self.db[collection].update_one({"_id": doc_id}, update, upsert=bool(to_set))

    def delete_at(self, path):
        """Remove the value at ``path``. Absent paths are not an error."""
        collection, doc_id, fields = self._locate(path)
        coll = self.db[collection]
        if doc_id is None:
            coll.delete_many({})
        elif not fields:
            coll.delete_one({"_id": doc_id})
        else:
            coll.update_one({"_id": doc_id}, {"$unset": {".".join(fields): ""}})


def get_store(request: Request) -> ResourceAccessor:
    return request.app.state.store
