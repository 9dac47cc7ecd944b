import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from .cache import NAME_INDEX_KEY, TOTAL_COUNT_KEY
from .core import FALLBACK_LANG, INDEX_BATCH_SIZE, INDEX_TTL, TARGET_LANG, TOTAL_COUNT_TTL
from .errors import PokedexError
from .locale import pick_localized_name

logger = logging.getLogger(__name__)


class SearchIndexBuilder:
    """Background walk over the whole upstream listing that fills the NameIndex.

    Only one build runs at a time; a trigger while building is dropped.
    Per-entity failures are logged and skipped. A completed index is
    persisted to the cache so it can be restored without a rebuild.
    """

    def __init__(self, client, cache, name_index, batch_size: int = INDEX_BATCH_SIZE,
                 lang: str = TARGET_LANG, fallback_lang: str = FALLBACK_LANG, index_ttl: int = INDEX_TTL):
        self.client = client
        self.cache = cache
        self.name_index = name_index
        self.batch_size = batch_size
        self.lang = lang
        self.fallback_lang = fallback_lang
        self.index_ttl = index_ttl
        self._building = False
        self._flag_lock = threading.Lock()

    @property
    def building(self) -> bool:
        return self._building

    def _claim(self) -> bool:
        with self._flag_lock:
            if self._building:
                return False
            self._building = True
            return True

    def restore(self) -> bool:
        """Load a previously persisted index from the cache, if any."""
        data = self.cache.get(NAME_INDEX_KEY)
        if not data:
            return False
        self.name_index.init(data.get('names'), data.get('aliases'))
        logger.info('Restored name index with %d entries', len(self.name_index))
        return True

    def schedule(self, executor):
        """Submit a build to `executor` unless one is running or the index is ready."""
        if self.name_index.ready or not self._claim():
            return None
        return executor.submit(self._run)

    def build(self) -> bool:
        """Run a build in the calling thread. Returns True when the index completed."""
        if not self._claim():
            return False
        return self._run()

    def _run(self) -> bool:
        try:
            return self._build()
        except Exception:
            logger.exception('Name index build failed')
            return False
        finally:
            self._building = False

    def _build(self) -> bool:
        logger.info('Building name index (batch size %d)', self.batch_size)
        offset = 0
        total = None
        indexed = 0
        with ThreadPoolExecutor(max_workers=self.batch_size, thread_name_prefix='index') as pool:
            while total is None or offset < total:
                try:
                    total, items = self.client.list_entities(offset, self.batch_size)
                except PokedexError as e:
                    logger.warning('Name index build stopped at offset %d: %s', offset, e)
                    return False
                if not items:
                    break
                for item, (entity_id, name) in zip(items, pool.map(self._localized_name, items)):
                    if entity_id is None:
                        continue
                    self.name_index.insert(name, entity_id, aliases=(item.display_key,))
                    if name:
                        indexed += 1
                offset += len(items)

        self.name_index.ready = True
        self.cache.set(NAME_INDEX_KEY, self.name_index.to_dict(), self.index_ttl)
        self.cache.set(TOTAL_COUNT_KEY, total or 0, TOTAL_COUNT_TTL)
        logger.info('Name index built: %d of %d entities indexed', indexed, total or 0)
        return True

    def _localized_name(self, item):
        """(entity_id, localized name or None); entity_id is None when the item has no id."""
        try:
            entity_id = item.entity_id
        except ValueError:
            logger.warning('Skipping listing item without id: %r', item)
            return None, None
        try:
            species = self.client.get_species(entity_id)
            return entity_id, pick_localized_name(species.get('names'), self.lang, self.fallback_lang)
        except PokedexError as e:
            # alternate forms (ids 10001+) have no species record of their own
            logger.debug('No localized name for %s: %s', item.display_key, e)
            return entity_id, None
        except Exception:
            logger.exception('Unexpected error indexing %s', item.display_key)
            return entity_id, None
