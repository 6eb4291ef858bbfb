"""
OpenLibrary proxy — forwards arbitrary read-only catalog paths
(search.json, works/..., authors/...) to openlibrary.org.
"""

import logging
from urllib.parse import urlencode
from flask import Blueprint, current_app, request, jsonify

from services.actions import read_action, param, unknown_action
from services.cache import get_response_cache
from services.upstream import cached_fetch, UpstreamError
from services.validation import sanitize_string, validate_string, is_valid_path

logger = logging.getLogger(__name__)

openlibrary_bp = Blueprint('openlibrary', __name__)

OPENLIBRARY_BASE = 'https://openlibrary.org'
MAX_QUERY_LEN = 1000


def fetch_openlibrary(cache, ol_path, query_string=''):
    """Fetch ``/<ol_path>?<query_string>``; the query string is passed through as-is."""
    url = f'{OPENLIBRARY_BASE}/{ol_path}'
    if query_string:
        url = f'{url}?{query_string}'
    return cached_fetch(
        cache, f'ol:{ol_path}:{query_string}', url,
        timeout=current_app.config['UPSTREAM_TIMEOUT'],
    )


def _proxy(raw_path, query_string):
    ol_path = sanitize_string(raw_path)
    if not ol_path or not is_valid_path(ol_path):
        return jsonify({'error': 'Invalid path'}), 400
    try:
        return jsonify(fetch_openlibrary(get_response_cache(), ol_path, query_string))
    except UpstreamError as e:
        logger.error(f'OpenLibrary fetch failed for {ol_path}: {e}')
        return jsonify({'error': 'Failed to fetch from OpenLibrary'}), 500


@openlibrary_bp.route('/api/openlibrary/<path:ol_path>')
def api_openlibrary(ol_path):
    query_string = urlencode(list(request.args.items(multi=True)))
    return _proxy(ol_path, query_string)


@openlibrary_bp.route('/api/openlibrary', methods=['GET', 'POST'])
def api_openlibrary_action():
    action, payload = read_action()
    if action != 'openlibrary_proxy':
        return unknown_action()
    query_string = validate_string(param(payload, 'query'), MAX_QUERY_LEN) or ''
    return _proxy(param(payload, 'path'), query_string)
