"""Session and pending-authorization storage.

Both stores sit behind ``KeyValueStore`` so a persistent backend can replace
the in-memory default without touching the refresher or the callback handler.
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Callable, Dict, Generic, Iterator, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class Session:
    """Spotify tokens bound to one MCP session id."""

    access_token: str
    refresh_token: str
    expires_at: float  # POSIX timestamp

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at

    def renewed(self, token_info: dict, now: float) -> "Session":
        """Return a copy carrying a freshly refreshed access token."""
        return Session(
            access_token=token_info["access_token"],
            # Spotify may rotate the refresh token; keep the old one otherwise
            refresh_token=token_info.get("refresh_token") or self.refresh_token,
            expires_at=now + int(token_info.get("expires_in") or 3600),
        )

    @classmethod
    def from_token_info(cls, token_info: dict, now: float) -> "Session":
        return cls(
            access_token=token_info["access_token"],
            refresh_token=token_info.get("refresh_token") or "",
            expires_at=now + int(token_info.get("expires_in") or 3600),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        return cls(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_at=float(data["expires_at"]),
        )


@dataclass
class PendingAuthorization:
    """An issued OAuth state token waiting for its callback."""

    session_id: str
    created_at: float

    def is_stale(self, now: float, max_age: float) -> bool:
        return now - self.created_at > max_age


class KeyValueStore(ABC, Generic[V]):
    """Minimal associative store used for sessions and pending authorizations."""

    @abstractmethod
    def get(self, key: str) -> Optional[V]:
        ...

    @abstractmethod
    def set(self, key: str, value: V) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    @abstractmethod
    def items(self) -> Iterator[Tuple[str, V]]:
        """Iterate over a snapshot of the stored entries."""

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class MemoryStore(KeyValueStore[V]):
    """Process-local store; contents are lost on restart."""

    def __init__(self):
        self._data: Dict[str, V] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def items(self) -> Iterator[Tuple[str, V]]:
        with self._lock:
            snapshot = list(self._data.items())
        return iter(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class JsonFileStore(KeyValueStore[V]):
    """Write-through store persisted as a single JSON object on disk.

    Values are converted with ``encode``/``decode`` so the file only holds
    plain JSON data.
    """

    def __init__(
        self,
        path: str,
        decode: Callable[[dict], V],
        encode: Callable[[V], dict] = asdict,
    ):
        self.path = path
        self._decode = decode
        self._encode = encode
        self._lock = threading.Lock()
        self._data: Dict[str, V] = self._load()

    def _load(self) -> Dict[str, V]:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        logger.info("Loaded %d entries from %s", len(raw), self.path)
        return {key: self._decode(value) for key, value in raw.items()}

    def _flush(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        payload = {key: self._encode(value) for key, value in self._data.items()}
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Optional[V]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._data[key] = value
            self._flush()

    def delete(self, key: str) -> None:
        with self._lock:
            if self._data.pop(key, None) is not None:
                self._flush()

    def items(self) -> Iterator[Tuple[str, V]]:
        with self._lock:
            snapshot = list(self._data.items())
        return iter(snapshot)


def create_session_store(path: Optional[str] = None) -> KeyValueStore[Session]:
    """Build the session store: JSON-file backed when a path is given, memory otherwise."""
    if path:
        logger.info("Persisting Spotify sessions to %s", path)
        return JsonFileStore(path, decode=Session.from_dict)
    return MemoryStore()
