# process-wide cache for large tool results (retrieve payloads)
# the agent kernel stores full payloads here and only folds a preview into the conversation,
# the analyze tool resolves "retrieve_N" ids back to the full payload

import threading
from collections import OrderedDict
from typing import Any, Optional

from journal_brain.common.logging.logger import logger

RESULT_ID_PREFIX = "retrieve_"

class ResultCache():
    """
    Thread-safe id -> payload map.
    - Ids are "retrieve_N", N increases monotonically for the cache lifetime (clear_all doesn't reset it).
    - max_entries (optional) bounds the cache, evicting the oldest ids first. None keeps it unbounded.
    """

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be positive or None, got {max_entries}")
        self.max_entries = max_entries
        self._entries: OrderedDict[str, Any] = OrderedDict()
        self._counter = 0
        self._lock = threading.Lock()

    def store(self, payload: Any) -> str:
        with self._lock:
            self._counter += 1
            result_id = f"{RESULT_ID_PREFIX}{self._counter}"
            self._entries[result_id] = payload
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    evicted_id, _ = self._entries.popitem(last=False)
                    logger.debug(f"Result cache full, evicted '{evicted_id}'")
        return result_id

    def get(self, result_id: str) -> Optional[Any]:
        with self._lock:
            return self._entries.get(result_id)

    def clear(self, result_id: str) -> None:
        with self._lock:
            self._entries.pop(result_id, None)

    def clear_all(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, result_id: object) -> bool:
        with self._lock:
            return result_id in self._entries
