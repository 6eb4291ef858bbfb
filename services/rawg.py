"""
RAWG proxy — video game search and details.
"""

import logging
from flask import Blueprint, current_app, request, jsonify

from services.actions import read_action, param, unknown_action
from services.cache import get_response_cache
from services.upstream import cached_fetch, UpstreamError
from services.validation import sanitize_string, validate_string, is_valid_id, clamp_int

logger = logging.getLogger(__name__)

rawg_bp = Blueprint('rawg', __name__)

RAWG_BASE = 'https://api.rawg.io/api'
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 40


def search_rawg(cache, query, page_size):
    params = {
        'key': current_app.config['RAWG_API_KEY'],
        'search': query,
        'page_size': page_size,
    }
    return cached_fetch(
        cache, f'rawg:search:{query}:{page_size}',
        f'{RAWG_BASE}/games', params=params,
        timeout=current_app.config['UPSTREAM_TIMEOUT'],
    )


def get_rawg_details(cache, game_id):
    return cached_fetch(
        cache, f'rawg:details:{game_id}',
        f'{RAWG_BASE}/games/{game_id}', params={'key': current_app.config['RAWG_API_KEY']},
        timeout=current_app.config['UPSTREAM_TIMEOUT'],
    )


def _search(raw_query, raw_page_size):
    query = sanitize_string(raw_query)
    if not query:
        return jsonify({'error': 'Query required'}), 400
    page_size = clamp_int(raw_page_size, DEFAULT_PAGE_SIZE, 1, MAX_PAGE_SIZE)
    try:
        return jsonify(search_rawg(get_response_cache(), query, page_size))
    except UpstreamError as e:
        logger.error(f'RAWG search failed: {e}')
        return jsonify({'error': 'Failed to fetch from RAWG'}), 500


def _details(game_id):
    game_id = validate_string(game_id, 100)
    if not is_valid_id(game_id):
        return jsonify({'error': 'Invalid ID'}), 400
    try:
        return jsonify(get_rawg_details(get_response_cache(), game_id))
    except UpstreamError as e:
        logger.error(f'RAWG details failed: {e}')
        return jsonify({'error': 'Failed to fetch details from RAWG'}), 500


@rawg_bp.route('/api/rawg/search')
def api_rawg_search():
    return _search(request.args.get('query'), request.args.get('page_size'))


@rawg_bp.route('/api/rawg/details/<game_id>')
def api_rawg_details(game_id):
    return _details(game_id)


@rawg_bp.route('/api/rawg', methods=['GET', 'POST'])
def api_rawg_action():
    action, payload = read_action()
    if action == 'rawg_search':
        return _search(param(payload, 'query'), param(payload, 'page_size'))
    if action == 'rawg_details':
        game_id = param(payload, 'id')
        return _details(str(game_id) if game_id is not None else None)
    return unknown_action()
