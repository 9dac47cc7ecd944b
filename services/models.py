import math
from dataclasses import dataclass, field
from urllib.parse import urlparse


def parse_entity_id(url: str) -> str:
    """Return the last non-empty path segment of a PokeAPI resource URL.
    'https://pokeapi.co/api/v2/pokemon/25/' -> '25'
    """
    parts = [p for p in urlparse(url or '').path.split('/') if p]
    if not parts:
        raise ValueError(f"No id in resource url: {url!r}")
    return parts[-1]


def compute_total_pages(total_items: int, limit: int) -> int:
    if total_items <= 0:
        return 0
    return max(1, math.ceil(total_items / limit))


@dataclass(frozen=True)
class EntityListItem:
    display_key: str   # romanized slug, e.g. 'pikachu'
    source_url: str

    @property
    def entity_id(self) -> str:
        return parse_entity_id(self.source_url)


@dataclass(frozen=True)
class EntityDetail:
    id: str
    localized_name: str
    image_url: str
    display_number: str
    categories: tuple = ()

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.localized_name,
            'image': self.image_url,
            'number': self.display_number,
            'types': list(self.categories),
        }


@dataclass(frozen=True)
class PageEnvelope:
    results: tuple = field(default_factory=tuple)
    current_page: int = 1
    total_pages: int = 0
    total_items: int = 0

    @classmethod
    def empty(cls, page: int = 1, total_pages: int = 0, total_items: int = 0):
        return cls(results=(), current_page=page, total_pages=total_pages, total_items=total_items)

    def to_dict(self) -> dict:
        return {
            'results': [r.to_dict() for r in self.results],
            'currentPage': self.current_page,
            'totalPages': self.total_pages,
            'totalItems': self.total_items,
        }
