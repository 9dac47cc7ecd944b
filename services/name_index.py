import threading

from .text_utils import normalize_search_term


def id_sort_key(entity_id: str):
    return (0, int(entity_id), '') if entity_id.isdigit() else (1, 0, entity_id)


class NameIndex:
    """Reverse index from normalized name to entity id.

    Localized names are the primary keys (and provide the display name for
    an id); romanized slugs are extra aliases so both spellings search the
    same way. Shared by the page aggregator (additive inserts) and the search
    index builder; overwrites are idempotent, last write wins.
    """

    def __init__(self):
        self._ids = {}      # normalized name or alias -> id
        self._display = {}  # id -> localized display name
        self._aliases = {}  # alias as given -> id
        self._lock = threading.Lock()
        self.ready = False

    def init(self, names: dict, aliases: dict | None = None, ready: bool = True) -> None:
        """Replace the contents with `names` (localized name -> id) and `aliases` (alias -> id)."""
        ids, display, alias_map = {}, {}, {}
        for alias, entity_id in (aliases or {}).items():
            if alias:
                ids[normalize_search_term(alias)] = str(entity_id)
                alias_map[alias] = str(entity_id)
        for name, entity_id in (names or {}).items():
            if name:
                ids[normalize_search_term(name)] = str(entity_id)
                display[str(entity_id)] = name
        with self._lock:
            self._ids = ids
            self._display = display
            self._aliases = alias_map
            self.ready = ready

    def insert(self, name: str, entity_id, aliases=()) -> None:
        entity_id = str(entity_id)
        with self._lock:
            for alias in aliases:
                if alias:
                    self._ids[normalize_search_term(alias)] = entity_id
                    self._aliases[alias] = entity_id
            if name:
                self._ids[normalize_search_term(name)] = entity_id
                self._display[entity_id] = name

    def lookup(self, name: str):
        with self._lock:
            return self._ids.get(normalize_search_term(name))

    def name_for(self, entity_id):
        with self._lock:
            return self._display.get(str(entity_id))

    def has_id(self, entity_id) -> bool:
        """True when any name or alias maps to `entity_id`."""
        entity_id = str(entity_id)
        with self._lock:
            return entity_id in self._display or entity_id in self._ids.values()

    def search(self, term: str) -> list:
        """Ids whose normalized name or alias contains the normalized term, sorted by id."""
        needle = normalize_search_term(term)
        if not needle:
            return []
        with self._lock:
            matched = {entity_id for key, entity_id in self._ids.items() if needle in key}
        return sorted(matched, key=id_sort_key)

    def to_dict(self) -> dict:
        """Serializable form, accepted back by `init(**data)`."""
        with self._lock:
            return {
                'names': {name: entity_id for entity_id, name in self._display.items()},
                'aliases': dict(self._aliases),
            }

    def clear(self) -> None:
        with self._lock:
            self._ids = {}
            self._display = {}
            self._aliases = {}
            self.ready = False

    def __len__(self):
        with self._lock:
            return len(self._display)

    def __contains__(self, entity_id):
        with self._lock:
            return str(entity_id) in self._display
