import logging

from flask import Blueprint, jsonify, request

from services import pokemon as services
from services.core import DEFAULT_LIMIT
from services.errors import NotFound

logger = logging.getLogger(__name__)

bp = Blueprint('pokemon', __name__, url_prefix='/api/pokemon')


def _positive_int(value, default: int) -> int:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return default
    return n if n >= 1 else default


@bp.route('', methods=['GET', 'OPTIONS'])
def list_pokemon():
    if request.method == 'OPTIONS':
        return '', 200
    page = _positive_int(request.args.get('page'), 1)
    limit = _positive_int(request.args.get('limit'), DEFAULT_LIMIT)
    search_term = (request.args.get('searchTerm') or '').strip() or None
    try:
        envelope = services.AGGREGATOR.get_page(page, limit, search_term)
        return jsonify(envelope.to_dict())
    except Exception as e:
        logger.exception('Listing page %d (limit %d, term %r) failed', page, limit, search_term)
        return jsonify({"error": str(e)}), 500


@bp.route('/<entity_id>', methods=['GET', 'OPTIONS'])
def pokemon_detail(entity_id):
    if request.method == 'OPTIONS':
        return '', 200
    try:
        return jsonify(services.PROFILES.get_profile(entity_id))
    except NotFound as e:
        return jsonify({"error": str(e)}), 404
    except Exception as e:
        logger.exception('Profile for %s failed', entity_id)
        return jsonify({"error": str(e)}), 500
