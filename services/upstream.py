import logging

import requests

from .core import POKEAPI_BASE, UPSTREAM_TIMEOUT
from .errors import MalformedUpstreamPayload, UpstreamUnavailable
from .models import EntityListItem

logger = logging.getLogger(__name__)


class UpstreamClient:
    """Thin, stateless wrapper over the PokeAPI REST endpoints.
    One HTTP GET per call; failures are raised, never retried.
    """

    def __init__(self, base_url: str = POKEAPI_BASE, timeout: float = UPSTREAM_TIMEOUT, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_json(self, url: str, params=None) -> dict:
        try:
            r = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamUnavailable(url, str(e)) from e
        if not 200 <= r.status_code < 300:
            raise UpstreamUnavailable(url, status_code=r.status_code)
        try:
            data = r.json()
        except ValueError as e:
            raise MalformedUpstreamPayload(f"Invalid JSON from {url}") from e
        if not isinstance(data, dict):
            raise MalformedUpstreamPayload(f"Expected a JSON object from {url}")
        return data

    def list_entities(self, offset: int = 0, limit: int = 20):
        """Return (upstream_count, [EntityListItem]) for one listing window."""
        j = self.fetch_json(f"{self.base_url}/pokemon", params={'offset': offset, 'limit': limit})
        try:
            count = int(j['count'])
            items = [EntityListItem(r['name'], r['url']) for r in j.get('results') or []]
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedUpstreamPayload(f"Unexpected listing payload: {e}") from e
        return count, items

    def get_total_count(self) -> int:
        count, _ = self.list_entities(0, 1)
        return count

    def get_pokemon(self, entity_id) -> dict:
        return self.fetch_json(f"{self.base_url}/pokemon/{entity_id}")

    def get_species(self, id_or_url) -> dict:
        url = str(id_or_url)
        if not url.startswith(('http://', 'https://')):
            url = f"{self.base_url}/pokemon-species/{url}"
        return self.fetch_json(url)

    def get_type(self, name: str) -> dict:
        return self.fetch_json(f"{self.base_url}/type/{name}")
