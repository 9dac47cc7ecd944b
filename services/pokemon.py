"""Process-wide service objects shared by the HTTP routes.

Everything here lives for the lifetime of the process; nothing is persisted
across restarts (the name index is rebuilt in the background).
"""
import logging
from concurrent.futures import ThreadPoolExecutor

from .aggregator import PageAggregator
from .cache import CacheStore
from .core import BACKGROUND_WORKERS, MAX_CONCURRENCY, SNAPSHOT_PATH
from .limiter import ConcurrencyLimiter
from .name_index import NameIndex
from .profile import ProfileService
from .resolver import DetailResolver
from .search_index import SearchIndexBuilder
from .snapshot import Snapshot
from .upstream import UpstreamClient

logger = logging.getLogger(__name__)

CLIENT = UpstreamClient()
CACHE = CacheStore()
NAME_INDEX = NameIndex()
SNAPSHOT = Snapshot.load(SNAPSHOT_PATH)

# Detail fan-out is bounded separately from background work so a prefetch
# waiting on details can never starve the pool it is waiting on.
LIMITER = ConcurrencyLimiter(MAX_CONCURRENCY)
BACKGROUND = ThreadPoolExecutor(max_workers=BACKGROUND_WORKERS, thread_name_prefix='background')

RESOLVER = DetailResolver(CLIENT, CACHE, name_index=NAME_INDEX, snapshot=SNAPSHOT)
INDEX_BUILDER = SearchIndexBuilder(CLIENT, CACHE, NAME_INDEX)
AGGREGATOR = PageAggregator(CLIENT, CACHE, NAME_INDEX, RESOLVER, LIMITER, background=BACKGROUND)
PROFILES = ProfileService(CLIENT, CACHE, snapshot=SNAPSHOT)

# Warmup flags
WARMUP_SCHEDULED = False


def warm_up_index():
    """Seed the name index and start the background build (once per process)."""
    global WARMUP_SCHEDULED
    WARMUP_SCHEDULED = True
    if not NAME_INDEX.ready and INDEX_BUILDER.restore():
        return None
    if SNAPSHOT and len(NAME_INDEX) == 0:
        # searchable right away; the full build still refreshes it
        NAME_INDEX.init(SNAPSHOT.localized_names(), SNAPSHOT.romanized_names(), ready=False)
    future = INDEX_BUILDER.schedule(BACKGROUND)
    if future is not None:
        logger.info('Name index build scheduled')
    return future
