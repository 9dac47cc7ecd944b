import threading
import time

# Key families
TOTAL_COUNT_KEY = 'total-count'
NAME_INDEX_KEY = 'name-index'


def page_key(page: int, limit: int, search_term: str | None = None) -> str:
    key = f"page:{page}:{limit}"
    if search_term:
        key += f":{search_term}"
    return key


def detail_key(entity_id) -> str:
    return f"detail:{entity_id}"


def category_key(category: str) -> str:
    return f"category-name:{category}"


def profile_key(entity_id) -> str:
    return f"profile:{entity_id}"


class CacheStore:
    """In-process key/value store with an absolute expiry per key.

    A read at or after an entry's expiry is a miss and drops the entry.
    There is no size bound; every entry eventually expires.
    """

    def __init__(self, clock=time.time):
        self._clock = clock
        self._entries = {}  # key -> (expires_at, value)
        self._lock = threading.Lock()

    def get(self, key: str, default=None):
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return default
            return value

    def set(self, key: str, value, ttl: float) -> None:
        with self._lock:
            self._entries[key] = (self._clock() + ttl, value)

    def has(self, key: str) -> bool:
        missing = object()
        return self.get(key, missing) is not missing

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def purge_expired(self) -> int:
        """Drop every expired entry; return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (exp, _) in self._entries.items() if now >= exp]
            for k in expired:
                del self._entries[k]
        return len(expired)

    def __len__(self):
        with self._lock:
            return len(self._entries)
