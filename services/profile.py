import logging

from .cache import profile_key
from .core import DETAIL_TTL, DISPLAY_NUMBER_PREFIX, FALLBACK_LANG, TARGET_LANG
from .errors import MalformedUpstreamPayload, NotFound, UpstreamUnavailable
from .locale import (
    pick_localized_name,
    translate_ability,
    translate_color,
    translate_habitat,
    translate_shape,
    translate_stat,
    translate_type,
)
from .media import pick_image
from .text_utils import format_display_number

logger = logging.getLogger(__name__)


class ProfileService:
    """Full per-entity profile behind GET /api/pokemon/<id>."""

    def __init__(self, client, cache, snapshot=None, lang: str = TARGET_LANG,
                 fallback_lang: str = FALLBACK_LANG, ttl: int = DETAIL_TTL):
        self.client = client
        self.cache = cache
        self.snapshot = snapshot
        self.lang = lang
        self.fallback_lang = fallback_lang
        self.ttl = ttl

    def get_profile(self, entity_id) -> dict:
        entity_id = str(entity_id)
        cached = self.cache.get(profile_key(entity_id))
        if cached is not None:
            return cached

        entry = self.snapshot.get(entity_id) if self.snapshot else None
        if self.snapshot and entry is None:
            raise NotFound(f"Pokémon id not found: {entity_id}")

        try:
            data = self.client.get_pokemon(entity_id)
        except UpstreamUnavailable as e:
            if e.status_code == 404:
                raise NotFound(f"Pokémon id not found: {entity_id}") from e
            raise
        try:
            profile = self._build(data, entry)
        except (KeyError, TypeError) as e:
            raise MalformedUpstreamPayload(f"Unexpected record for {entity_id}: {e}") from e
        self.cache.set(profile_key(profile['id']), profile, self.ttl)
        if profile['id'] != entity_id:
            self.cache.set(profile_key(entity_id), profile, self.ttl)
        return profile

    def _build(self, data: dict, entry) -> dict:
        entity_id = str(data['id'])
        species = self.client.get_species(data['species']['url'])
        name = pick_localized_name(species.get('names'), self.lang, self.fallback_lang, default=data['name'])

        if entry is not None:
            number = f"{DISPLAY_NUMBER_PREFIX}{entry.number}"
        else:
            number = format_display_number(entity_id)

        types = sorted(data.get('types') or [], key=lambda t: t.get('slot', 99))
        profile = {
            'id': entity_id,
            'name': name,
            'number': number,
            'image': pick_image(data.get('sprites')),
            'height': data.get('height'),
            'weight': data.get('weight'),
            'types': [translate_type(t['type']['name']) for t in types],
            'abilities': [translate_ability(a['ability']['name']) for a in data.get('abilities') or []],
            'stats': [
                {'name': translate_stat(s['stat']['name']), 'value': s['base_stat']}
                for s in data.get('stats') or []
            ],
            'habitat': translate_habitat((species.get('habitat') or {}).get('name')),
            'color': translate_color((species.get('color') or {}).get('name')),
            'shape': translate_shape((species.get('shape') or {}).get('name')),
        }
        forms = self.snapshot.forms_of(entity_id) if self.snapshot else []
        if len(forms) > 1:
            profile['forms'] = [
                {'id': f.id, 'name': f.name_ja, 'number': f"{DISPLAY_NUMBER_PREFIX}{f.number}"}
                for f in forms
            ]
        return profile
