import threading
from urllib.parse import urlparse

import pytest

from services.aggregator import PageAggregator
from services.cache import CacheStore
from services.errors import UpstreamUnavailable
from services.limiter import ConcurrencyLimiter
from services.name_index import NameIndex
from services.resolver import DetailResolver
from services.upstream import UpstreamClient

BASE = 'https://pokeapi.test/api/v2'

KNOWN = {
    1: ('bulbasaur', 'フシギダネ', 'grass'),
    4: ('charmander', 'ヒトカゲ', 'fire'),
    7: ('squirtle', 'ゼニガメ', 'water'),
    25: ('pikachu', 'ピカチュウ', 'electric'),
    26: ('raichu', 'ライチュウ', 'electric'),
}

TYPE_NAMES = {
    'grass': ('ja', 'くさ'),
    'fire': ('ja', 'ほのお'),
    'water': ('ja', 'みず'),
    'electric': ('ja-Hrkt', 'でんき'),  # only the regional dialect code
}


def slug_for(i: int) -> str:
    if i in KNOWN:
        return KNOWN[i][0]
    # digit-free so numeric searches only match ids unless a test overrides it
    return 'mon' + ''.join(chr(ord('a') + int(d)) for d in str(i))


def ja_name_for(i: int) -> str:
    if i in KNOWN:
        return KNOWN[i][1]
    return 'ポケ' + ''.join('アイウエオカキクケコ'[int(d)] for d in str(i))


def type_for(i: int) -> str:
    if i in KNOWN:
        return KNOWN[i][2]
    return 'water' if i % 2 == 0 else 'fire'


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeUpstream(UpstreamClient):
    """In-memory PokeAPI with call recording and per-resource failure injection."""

    def __init__(self, size: int = 30, reported_count=None):
        super().__init__(base_url=BASE, session=object())
        self.size = size
        self.reported_count = reported_count
        self.fail_pokemon = set()
        self.fail_species = set()
        self.fail_types = set()
        self.fail_listing = False
        self.slugs = {}  # id -> slug override
        self.calls = []
        self._lock = threading.Lock()

    def _slug(self, i: int) -> str:
        return self.slugs.get(i) or slug_for(i)

    def count(self, kind: str) -> int:
        """Calls to one record endpoint, e.g. count('pokemon') for /pokemon/{id}."""
        return sum(1 for path, _ in self.calls if path.startswith(kind + '/'))

    def listing_calls(self) -> int:
        return sum(1 for path, _ in self.calls if path == 'pokemon')

    def fetch_json(self, url, params=None):
        path = urlparse(url).path
        rel = path[len(urlparse(BASE).path):].strip('/')
        with self._lock:
            self.calls.append((rel, dict(params or {})))
        parts = rel.split('/')
        if parts == ['pokemon']:
            return self._listing(url, params or {})
        kind, key = parts[0], parts[1]
        if kind == 'pokemon':
            return self._pokemon(url, key)
        if kind == 'pokemon-species':
            return self._species(url, key)
        if kind == 'type':
            return self._type(url, key)
        raise UpstreamUnavailable(url, status_code=404)

    def _listing(self, url, params):
        if self.fail_listing:
            raise UpstreamUnavailable(url, 'connection reset')
        offset = int(params.get('offset', 0))
        limit = int(params.get('limit', 20))
        ids = range(offset + 1, min(self.size, offset + limit) + 1)
        return {
            'count': self.reported_count if self.reported_count is not None else self.size,
            'next': None,
            'previous': None,
            'results': [{'name': self._slug(i), 'url': f"{BASE}/pokemon/{i}/"} for i in ids],
        }

    def _id(self, url, key) -> int:
        if not key.isdigit():
            # PokeAPI accepts the slug in place of the id
            key = next((str(i) for i in range(1, self.size + 1) if self._slug(i) == key), '0')
        if not 1 <= int(key) <= self.size:
            raise UpstreamUnavailable(url, status_code=404)
        return int(key)

    def _pokemon(self, url, key):
        i = self._id(url, key)
        if i in self.fail_pokemon:
            raise UpstreamUnavailable(url, status_code=503)
        return {
            'id': i,
            'name': self._slug(i),
            'height': 4,
            'weight': 60,
            'species': {'name': self._slug(i), 'url': f"{BASE}/pokemon-species/{i}/"},
            'sprites': {
                'front_default': f"https://img.test/{i}.png",
                'other': {'official-artwork': {'front_default': f"https://img.test/art/{i}.png"}},
            },
            'types': [{'slot': 1, 'type': {'name': type_for(i), 'url': f"{BASE}/type/{type_for(i)}/"}}],
            'abilities': [{'ability': {'name': 'static'}}, {'ability': {'name': 'mystery-ability'}}],
            'stats': [{'base_stat': 35, 'stat': {'name': 'hp'}}, {'base_stat': 90, 'stat': {'name': 'speed'}}],
        }

    def _species(self, url, key):
        i = self._id(url, key)
        if i in self.fail_species:
            raise UpstreamUnavailable(url, status_code=500)
        return {
            'id': i,
            'name': self._slug(i),
            'names': [
                {'language': {'name': 'en'}, 'name': self._slug(i).title()},
                {'language': {'name': 'ja'}, 'name': ja_name_for(i)},
            ],
            'habitat': {'name': 'forest'},
            'color': {'name': 'yellow'},
            'shape': {'name': 'not-a-shape'},
        }

    def _type(self, url, key):
        if key in self.fail_types or key not in TYPE_NAMES:
            raise UpstreamUnavailable(url, status_code=500)
        lang, name = TYPE_NAMES[key]
        return {'name': key, 'names': [{'language': {'name': 'en'}, 'name': key.title()},
                                       {'language': {'name': lang}, 'name': name}]}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return CacheStore(clock=clock)


@pytest.fixture
def upstream():
    return FakeUpstream(size=30)


@pytest.fixture
def name_index():
    return NameIndex()


@pytest.fixture
def limiter():
    limiter = ConcurrencyLimiter(5)
    yield limiter
    limiter.shutdown()


@pytest.fixture
def resolver(upstream, cache, name_index):
    return DetailResolver(upstream, cache, name_index=name_index)


@pytest.fixture
def aggregator(upstream, cache, name_index, resolver, limiter):
    return PageAggregator(upstream, cache, name_index, resolver, limiter,
                          background=None, max_entity_count=None, prefetch_pages=0)


@pytest.fixture
def make_upstream():
    return FakeUpstream
