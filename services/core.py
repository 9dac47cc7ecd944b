import os

# Constants
POKEAPI_BASE = os.environ.get('POKEAPI_BASE', 'https://pokeapi.co/api/v2').rstrip('/')
TARGET_LANG = os.environ.get('TARGET_LANG', 'ja')
FALLBACK_LANG = os.environ.get('FALLBACK_LANG', 'ja-Hrkt')  # regional dialect code
DISPLAY_NUMBER_PREFIX = 'No.'
PLACEHOLDER_IMAGE = os.environ.get('PLACEHOLDER_IMAGE', '/images/no-image.png')
UNKNOWN_MARKER = '不明'

DEFAULT_LIMIT = int(os.environ.get('DEFAULT_LIMIT', 20))
UPSTREAM_TIMEOUT = float(os.environ.get('UPSTREAM_TIMEOUT', 20))

# Upstream /pokemon overcounts (alternate forms live at 10001+); clamp when set
MAX_ENTITY_COUNT = int(os.environ.get('MAX_ENTITY_COUNT') or 0) or None

# Fan-out (bounded to be polite to PokeAPI)
MAX_CONCURRENCY = int(os.environ.get('MAX_CONCURRENCY', 5))
INDEX_BATCH_SIZE = int(os.environ.get('INDEX_BATCH_SIZE', 20))
PREFETCH_PAGES = int(os.environ.get('PREFETCH_PAGES', 2))
BACKGROUND_WORKERS = int(os.environ.get('BACKGROUND_WORKERS', 2))

# Cache TTLs (seconds)
PAGE_TTL = int(os.environ.get('PAGE_TTL', 60 * 60))
DETAIL_TTL = int(os.environ.get('DETAIL_TTL', 24 * 60 * 60))
CATEGORY_TTL = int(os.environ.get('CATEGORY_TTL', 7 * 24 * 60 * 60))
TOTAL_COUNT_TTL = int(os.environ.get('TOTAL_COUNT_TTL', 24 * 60 * 60))
INDEX_TTL = int(os.environ.get('INDEX_TTL', 7 * 24 * 60 * 60))

# Optional offline snapshot (see scripts/update_snapshot.py)
SNAPSHOT_PATH = os.environ.get('SNAPSHOT_PATH', '')

# CORS: '*', 'reflect' (echo request Origin) or a fixed allow-listed origin
CORS_ALLOW_ORIGIN = os.environ.get('CORS_ALLOW_ORIGIN', '*')
CORS_ALLOW_METHODS = os.environ.get('CORS_ALLOW_METHODS', 'GET,OPTIONS')
CORS_ALLOW_HEADERS = os.environ.get('CORS_ALLOW_HEADERS', 'Content-Type, Authorization')
CORS_ALLOW_CREDENTIALS = os.environ.get('CORS_ALLOW_CREDENTIALS', 'false').lower() == 'true'

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
