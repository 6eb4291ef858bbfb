"""
TMDB proxy — movie and TV search/details from The Movie Database.
"""

import logging
from flask import Blueprint, current_app, request, jsonify

from services.actions import read_action, param, unknown_action
from services.cache import get_response_cache
from services.upstream import cached_fetch, UpstreamError
from services.validation import sanitize_string, validate_string, is_numeric_id

logger = logging.getLogger(__name__)

tmdb_bp = Blueprint('tmdb', __name__)

TMDB_BASE = 'https://api.themoviedb.org/3'

# Media type -> TMDB endpoint family
MEDIA_ENDPOINTS = {
    'MOVIE': 'movie',
    'SERIES': 'tv',
    'ANIME': 'tv',
}


def search_tmdb(cache, media_type, query):
    endpoint = MEDIA_ENDPOINTS[media_type]
    params = {
        'api_key': current_app.config['TMDB_API_KEY'],
        'query': query,
        'language': current_app.config['TMDB_LANGUAGE'],
        'page': 1,
    }
    return cached_fetch(
        cache, f'tmdb:search:{media_type}:{query}',
        f'{TMDB_BASE}/search/{endpoint}', params=params,
        timeout=current_app.config['UPSTREAM_TIMEOUT'],
    )


def get_tmdb_details(cache, media_type, tmdb_id):
    endpoint = MEDIA_ENDPOINTS[media_type]
    params = {
        'api_key': current_app.config['TMDB_API_KEY'],
        'language': current_app.config['TMDB_LANGUAGE'],
    }
    return cached_fetch(
        cache, f'tmdb:details:{media_type}:{tmdb_id}',
        f'{TMDB_BASE}/{endpoint}/{tmdb_id}', params=params,
        timeout=current_app.config['UPSTREAM_TIMEOUT'],
    )


def _search(media_type, raw_query):
    if not isinstance(media_type, str) or media_type not in MEDIA_ENDPOINTS:
        return jsonify({'error': 'Invalid type'}), 400
    query = sanitize_string(raw_query)
    if not query:
        return jsonify({'error': 'Query required'}), 400
    try:
        return jsonify(search_tmdb(get_response_cache(), media_type, query))
    except UpstreamError as e:
        logger.error(f'TMDB search failed: {e}')
        return jsonify({'error': 'Failed to fetch from TMDB'}), 500


def _details(media_type, tmdb_id):
    if not isinstance(media_type, str) or media_type not in MEDIA_ENDPOINTS:
        return jsonify({'error': 'Invalid type'}), 400
    tmdb_id = validate_string(tmdb_id, 20)
    if not is_numeric_id(tmdb_id):
        return jsonify({'error': 'Invalid ID'}), 400
    try:
        return jsonify(get_tmdb_details(get_response_cache(), media_type, tmdb_id))
    except UpstreamError as e:
        logger.error(f'TMDB details failed: {e}')
        return jsonify({'error': 'Failed to fetch details from TMDB'}), 500


@tmdb_bp.route('/api/tmdb/search/<media_type>')
def api_tmdb_search(media_type):
    return _search(media_type, request.args.get('query'))


@tmdb_bp.route('/api/tmdb/details/<media_type>/<tmdb_id>')
def api_tmdb_details(media_type, tmdb_id):
    return _details(media_type, tmdb_id)


@tmdb_bp.route('/api/tmdb', methods=['GET', 'POST'])
def api_tmdb_action():
    action, payload = read_action()
    if action == 'tmdb_search':
        return _search(param(payload, 'type'), param(payload, 'query'))
    if action == 'tmdb_details':
        tmdb_id = param(payload, 'id')
        return _details(param(payload, 'type'), str(tmdb_id) if tmdb_id is not None else None)
    return unknown_action()
