"""Translation cache: lower-cased repository name -> display string."""

import threading
from typing import Dict, Optional


class TranslationCache:
    """
    In-memory translation cache shared by the resolver and background jobs.

    Loaded once per build and persisted as a whole by FileStore; the lock only
    guards against the enrichment workers writing while the resolver reads.
    """

    def __init__(self, entries: Optional[Dict[str, str]] = None):
        self._entries: Dict[str, str] = {}
        self._lock = threading.Lock()
        for name, value in (entries or {}).items():
            self._entries[self.key(name)] = value

    @staticmethod
    def key(name: str) -> str:
        return name.lower()

    def get(self, name: str) -> Optional[str]:
        with self._lock:
            return self._entries.get(self.key(name))

    def set(self, name: str, value: str) -> None:
        with self._lock:
            self._entries[self.key(name)] = value

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return self.key(name) in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def snapshot(self) -> Dict[str, str]:
        """Copy of the current mapping, safe to serialize while workers run."""
        with self._lock:
            return dict(self._entries)
