from __future__ import annotations

import threading
from collections import defaultdict
from typing import Any, Dict


class InMemoryStore:
    """Process-local tables for the "memory" storage backend.

    Every memory repository shares one store so that multi-table writes
    (ledger row + student total) happen under the same lock.
    """

    def __init__(self) -> None:
        self.lock = threading.RLock()
        self._tables: Dict[str, Dict[int, Any]] = defaultdict(dict)
        self._sequences: Dict[str, int] = defaultdict(int)

    def table(self, name: str) -> Dict[int, Any]:
        return self._tables[name]

    def next_id(self, name: str) -> int:
        with self.lock:
            self._sequences[name] += 1
            return self._sequences[name]
