import json
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapshotEntry:
    id: str
    name_en: str
    name_ja: str
    number: str  # zero-padded, shared by alternate forms


class Snapshot:
    """Read-only view over the offline snapshot file (id -> names -> number)."""

    def __init__(self, entries=()):
        self.entries = list(entries)
        self._by_id = {e.id: e for e in self.entries}

    @classmethod
    def load(cls, path: str):
        """Load a snapshot; a missing or invalid file yields an empty snapshot."""
        if not path:
            return cls()
        try:
            with open(path, encoding='utf-8') as fh:
                raw = json.load(fh)
            entries = [
                SnapshotEntry(str(r['id']), r.get('name_en') or '', r.get('name_ja') or '', str(r['number']))
                for r in raw
            ]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning('Could not load snapshot %s: %s', path, e)
            return cls()
        logger.info('Loaded %d snapshot entries from %s', len(entries), path)
        return cls(entries)

    def __bool__(self):
        return bool(self.entries)

    def get(self, entity_id):
        return self._by_id.get(str(entity_id))

    def forms_of(self, entity_id) -> list:
        entry = self.get(entity_id)
        if entry is None:
            return []
        return [e for e in self.entries if e.number == entry.number]

    def localized_names(self) -> dict:
        """Localized name -> id for seeding the name index."""
        return {e.name_ja: e.id for e in self.entries if e.name_ja}

    def romanized_names(self) -> dict:
        return {e.name_en: e.id for e in self.entries if e.name_en}
