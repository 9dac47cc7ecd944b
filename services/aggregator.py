import logging

from .cache import TOTAL_COUNT_KEY, detail_key, page_key
from .core import MAX_ENTITY_COUNT, PAGE_TTL, PREFETCH_PAGES, TOTAL_COUNT_TTL
from .models import PageEnvelope, compute_total_pages
from .name_index import id_sort_key
from .text_utils import normalize_search_term

logger = logging.getLogger(__name__)


class PageAggregator:
    """Builds one page of merged entity details, with search and write-through caching.

    Only a failure of the candidate listing itself escapes `get_page`;
    individual entities that cannot be resolved are left out of `results`.
    """

    def __init__(self, client, cache, name_index, resolver, limiter, background=None,
                 page_ttl: int = PAGE_TTL, total_count_ttl: int = TOTAL_COUNT_TTL,
                 max_entity_count: int | None = MAX_ENTITY_COUNT, prefetch_pages: int = PREFETCH_PAGES):
        self.client = client
        self.cache = cache
        self.name_index = name_index
        self.resolver = resolver
        self.limiter = limiter
        self.background = background
        self.page_ttl = page_ttl
        self.total_count_ttl = total_count_ttl
        self.max_entity_count = max_entity_count
        self.prefetch_pages = prefetch_pages

    def get_page(self, page: int, limit: int, search_term: str | None = None, prefetch: bool = True) -> PageEnvelope:
        term = normalize_search_term(search_term) if search_term else ''
        key = page_key(page, limit, term or None)
        envelope = self.cache.get(key)
        if envelope is None:
            if term:
                envelope = self._search_page(page, limit, term)
            else:
                envelope = self._listing_page(page, limit)
            self.cache.set(key, envelope, self.page_ttl)
        if prefetch:
            self.schedule_prefetch(envelope.current_page, limit, term, envelope.total_pages)
        return envelope

    # --- candidate resolution ---

    def _clamp(self, count: int) -> int:
        if self.max_entity_count:
            return min(count, self.max_entity_count)
        return count

    def _listing_page(self, page: int, limit: int) -> PageEnvelope:
        offset = (page - 1) * limit
        upstream_count, items = self.client.list_entities(offset, limit)
        self.cache.set(TOTAL_COUNT_KEY, upstream_count, self.total_count_ttl)
        total_items = self._clamp(upstream_count)
        total_pages = compute_total_pages(total_items, limit)
        if total_items == 0 or page > total_pages:
            return PageEnvelope.empty(page, total_pages, total_items)
        window = items[:max(0, total_items - offset)]
        ids = []
        for item in window:
            try:
                ids.append(item.entity_id)
            except ValueError:
                logger.warning('Skipping listing item without id: %r', item)
        return PageEnvelope(self._expand(ids), page, total_pages, total_items)

    def _search_page(self, page: int, limit: int, term: str) -> PageEnvelope:
        ids = self.search_ids(term)
        total_items = len(ids)
        if total_items == 0:
            return PageEnvelope.empty(1, 0, 0)
        total_pages = compute_total_pages(total_items, limit)
        if page > total_pages:
            return PageEnvelope.empty(page, total_pages, total_items)
        offset = (page - 1) * limit
        return PageEnvelope(self._expand(ids[offset:offset + limit]), page, total_pages, total_items)

    def search_ids(self, term: str) -> list:
        """Full candidate id list for a normalized search term.
        The name index is consulted first; the upstream scan runs when it finds
        nothing, and is merged in while the index is still being built.
        A numeric term also matches that exact id, as the scan does.
        """
        ids = self.name_index.search(term)
        if self.name_index.ready:
            if term.isdigit() and term not in ids and self.name_index.has_id(term):
                ids = sorted(ids + [term], key=id_sort_key)
            if ids:
                return ids
        scanned = self._scan_upstream(term)
        if not ids:
            return scanned
        return sorted(set(ids) | set(scanned), key=id_sort_key)

    def _scan_upstream(self, term: str) -> list:
        total = self.total_count()
        _, items = self.client.list_entities(0, total)
        if self.max_entity_count:
            items = items[:self.max_entity_count]
        matched = []
        for item in items:
            try:
                entity_id = item.entity_id
            except ValueError:
                continue
            if entity_id == term or term in (item.display_key or '').lower():
                matched.append(entity_id)
        logger.debug('Upstream scan for %r matched %d entities', term, len(matched))
        return matched

    def total_count(self) -> int:
        count = self.cache.get(TOTAL_COUNT_KEY)
        if count is None:
            count = self.client.get_total_count()
            self.cache.set(TOTAL_COUNT_KEY, count, self.total_count_ttl)
        return count

    # --- detail expansion ---

    def _expand(self, ids: list) -> tuple:
        known = {entity_id: self.name_index.name_for(entity_id) for entity_id in ids}
        details = self.limiter.map_settled(lambda entity_id: self.resolver.resolve(entity_id, known.get(entity_id)), ids)
        results = tuple(d for d in details if d is not None)
        self._remember_names(results)
        return results

    def _remember_names(self, details) -> None:
        for d in details:
            # degraded records are not cached and may carry a romanized name
            if d.id not in self.name_index and self.cache.has(detail_key(d.id)):
                self.name_index.insert(d.localized_name, d.id)

    # --- prefetch ---

    def schedule_prefetch(self, page: int, limit: int, term: str, total_pages: int) -> list:
        """Warm the cache for the next pages in the background; never waited on."""
        if self.background is None or self.prefetch_pages <= 0:
            return []
        futures = []
        for nxt in range(page + 1, page + 1 + self.prefetch_pages):
            if nxt > total_pages:
                break
            if self.cache.has(page_key(nxt, limit, term or None)):
                continue
            futures.append(self.background.submit(self._prefetch, nxt, limit, term))
        return futures

    def _prefetch(self, page: int, limit: int, term: str) -> None:
        try:
            self.get_page(page, limit, term or None, prefetch=False)
            logger.debug('Prefetched page %d (limit %d, term %r)', page, limit, term)
        except Exception:
            logger.exception('Prefetch of page %d failed', page)
