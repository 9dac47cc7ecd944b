import logging

from .cache import CacheStore, category_key, detail_key
from .core import CATEGORY_TTL, DETAIL_TTL, FALLBACK_LANG, PLACEHOLDER_IMAGE, TARGET_LANG
from .errors import MalformedUpstreamPayload, PokedexError
from .locale import pick_localized_name, translate_type
from .media import pick_image
from .models import EntityDetail
from .text_utils import format_display_number

logger = logging.getLogger(__name__)


class DetailResolver:
    """Joins /pokemon, /pokemon-species and /type records into one EntityDetail.

    `resolve` never raises: upstream failures turn into a degraded record
    (known name, placeholder image) or None when nothing is known locally.
    Only fully joined records are written to the cache.
    """

    def __init__(self, client, cache: CacheStore, name_index=None, snapshot=None,
                 lang: str = TARGET_LANG, fallback_lang: str = FALLBACK_LANG,
                 detail_ttl: int = DETAIL_TTL, category_ttl: int = CATEGORY_TTL):
        self.client = client
        self.cache = cache
        self.name_index = name_index
        self.snapshot = snapshot
        self.lang = lang
        self.fallback_lang = fallback_lang
        self.detail_ttl = detail_ttl
        self.category_ttl = category_ttl

    def resolve(self, entity_id, localized_name: str | None = None):
        entity_id = str(entity_id)
        try:
            return self._resolve(entity_id, localized_name)
        except Exception:
            logger.exception('Unexpected failure resolving %s', entity_id)
            return self._degraded(entity_id, localized_name)

    def _resolve(self, entity_id: str, localized_name):
        cached = self.cache.get(detail_key(entity_id))
        if cached is not None:
            return cached

        try:
            base = self.client.get_pokemon(entity_id)
            resolved_id = str(base['id'])
            base_name = base.get('name') or entity_id
        except (PokedexError, KeyError, TypeError) as e:
            logger.warning('Base record for %s unavailable: %s', entity_id, e)
            return self._degraded(entity_id, localized_name)

        degraded = False
        name = localized_name
        if not name:
            try:
                name = self._species_name(base, resolved_id)
            except (PokedexError, KeyError, TypeError) as e:
                logger.warning('Species record for %s unavailable: %s', resolved_id, e)
                degraded = True
            if not name:
                name = self._known_name(resolved_id) or base_name

        types = sorted(base.get('types') or [], key=lambda t: t.get('slot', 99))
        categories = tuple(
            self.category_name(t['type']['name']) for t in types if (t.get('type') or {}).get('name')
        )

        detail = EntityDetail(
            id=resolved_id,
            localized_name=name,
            image_url=pick_image(base.get('sprites')),
            display_number=format_display_number(resolved_id),
            categories=categories,
        )
        if not degraded:
            self.cache.set(detail_key(resolved_id), detail, self.detail_ttl)
            if resolved_id != entity_id:
                self.cache.set(detail_key(entity_id), detail, self.detail_ttl)
        return detail

    def _species_name(self, base: dict, entity_id: str):
        species_ref = (base.get('species') or {}).get('url') or entity_id
        species = self.client.get_species(species_ref)
        if 'names' not in species:
            raise MalformedUpstreamPayload(f"Species record for {entity_id} has no names")
        return pick_localized_name(species['names'], self.lang, self.fallback_lang)

    def category_name(self, category: str) -> str:
        """Localized name for a type key, cached long-lived.
        A failed lookup falls back to the static table (or the raw key) uncached.
        """
        key = category_key(category)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        try:
            j = self.client.get_type(category)
        except PokedexError as e:
            logger.warning('Type record for %s unavailable: %s', category, e)
            return translate_type(category)
        name = pick_localized_name(j.get('names'), self.lang, self.fallback_lang, default=category)
        self.cache.set(key, name, self.category_ttl)
        return name

    def _known_name(self, entity_id: str):
        if self.name_index is not None:
            name = self.name_index.name_for(entity_id)
            if name:
                return name
        if self.snapshot:
            entry = self.snapshot.get(entity_id)
            if entry is not None and entry.name_ja:
                return entry.name_ja
        return None

    def _degraded(self, entity_id: str, localized_name=None):
        name = localized_name or self._known_name(entity_id)
        if not name:
            return None
        return EntityDetail(
            id=entity_id,
            localized_name=name,
            image_url=PLACEHOLDER_IMAGE,
            display_number=format_display_number(entity_id),
            categories=(),
        )
