"""
Gemini proxy — text generation, pt-BR translation and structured
entertainment lookups through the Gemini generateContent REST API.

Responses are not cached: prompts are free-form and generation is not
deterministic.
"""

import json
import logging
from flask import Blueprint, current_app, jsonify, request

from services.actions import read_action, unknown_action
from services.upstream import fetch_json, UpstreamError
from services.validation import validate_string, is_valid_path

logger = logging.getLogger(__name__)

gemini_bp = Blueprint('gemini', __name__)

GEMINI_BASE = 'https://generativelanguage.googleapis.com/v1beta'
DEFAULT_MODEL = 'gemini-3-flash-preview'
MAX_PROMPT_LEN = 5000

TRANSLATE_PROMPT = (
    'Translate the following text to Brazilian Portuguese (pt-BR). Maintain the original tone, '
    'line breaks, and formatting. If the text is already in Portuguese, return it exactly as is: '
    '\n\n{text}'
)

ENTERTAINMENT_PROMPT = (
    'Find detailed information about the {type} titled "{title}". \n'
    'Return a JSON object with the following fields:\n'
    '- title: The official title.\n'
    '- posterUrl: A valid public URL for the poster image if available.\n'
    '- releaseDate: Release date in YYYY-MM-DD format.\n'
    '- totalSeasons: Total number of seasons (for TV/Anime).\n'
    '- totalEpisodes: Total number of episodes (for TV/Anime).\n'
    '- author: The author name (for Books).\n'
)

ENTERTAINMENT_SCHEMA = {
    'type': 'OBJECT',
    'properties': {
        'title': {'type': 'STRING'},
        'posterUrl': {'type': 'STRING'},
        'releaseDate': {'type': 'STRING'},
        'totalSeasons': {'type': 'INTEGER'},
        'totalEpisodes': {'type': 'INTEGER'},
        'author': {'type': 'STRING'},
    },
}

# Upstream statuses passed back to the browser instead of a generic 500
PASSTHROUGH_ERRORS = {
    429: 'Rate limit exceeded, try again later',
    402: 'AI credits exhausted',
}


def generate_content(prompt, model=DEFAULT_MODEL, generation_config=None):
    """Run one prompt through Gemini and return the response text ('' if none)."""
    body = {'contents': [{'role': 'user', 'parts': [{'text': prompt}]}]}
    if generation_config:
        body['generationConfig'] = generation_config
    data = fetch_json(
        f'{GEMINI_BASE}/models/{model}:generateContent',
        method='POST',
        params={'key': current_app.config['GEMINI_API_KEY']},
        json=body,
        timeout=current_app.config['UPSTREAM_TIMEOUT'],
    )
    return _extract_text(data)


def _extract_text(data):
    try:
        parts = data['candidates'][0]['content']['parts']
    except (KeyError, IndexError, TypeError):
        return ''
    return ''.join(p.get('text', '') for p in parts if isinstance(p, dict))


def _strip_code_fences(text):
    return text.replace('```json', '').replace('```', '').strip()


def parse_entertainment_info(text):
    """Parse the model's JSON answer; anything unparseable becomes None."""
    try:
        return json.loads(_strip_code_fences(text or ''))
    except ValueError:
        return None


def _generate(payload):
    prompt = validate_string(payload.get('prompt'), MAX_PROMPT_LEN)
    if not prompt:
        return jsonify({'error': f'Invalid prompt (1-{MAX_PROMPT_LEN} chars)'}), 400
    model = validate_string(payload.get('model'), 100) or DEFAULT_MODEL
    if not is_valid_path(model):
        return jsonify({'error': 'Invalid model'}), 400
    try:
        text = generate_content(prompt, model=model)
    except UpstreamError as e:
        logger.error(f'Gemini generate failed: {e}')
        if e.status_code in PASSTHROUGH_ERRORS:
            return jsonify({'error': PASSTHROUGH_ERRORS[e.status_code]}), e.status_code
        return jsonify({'error': 'Failed to generate content'}), 500
    return jsonify({'text': text})


def _translate(payload):
    raw = payload.get('text')
    text = validate_string(raw, MAX_PROMPT_LEN)
    if not text:
        return jsonify({'text': raw if isinstance(raw, str) else ''})
    try:
        translated = generate_content(TRANSLATE_PROMPT.format(text=text))
    except UpstreamError as e:
        # Translation is best-effort; fall back to the original text.
        logger.warning(f'Gemini translate failed, returning original text: {e}')
        return jsonify({'text': raw})
    return jsonify({'text': translated or raw})


def _entertainment_info(payload):
    title = validate_string(payload.get('title'), 500)
    media_type = validate_string(payload.get('type'), 50)
    if not title or not media_type:
        return jsonify({'error': 'Missing or invalid title/type'}), 400
    try:
        text = generate_content(
            ENTERTAINMENT_PROMPT.format(type=media_type, title=title),
            generation_config={
                'responseMimeType': 'application/json',
                'responseSchema': ENTERTAINMENT_SCHEMA,
            },
        )
    except UpstreamError as e:
        logger.error(f'Gemini entertainment info failed: {e}')
        return jsonify({'error': 'Failed to fetch entertainment info'}), 500
    return jsonify(parse_entertainment_info(text))


ACTIONS = {
    'gemini_generate': _generate,
    'gemini_translate': _translate,
    'gemini_entertainment_info': _entertainment_info,
}


@gemini_bp.before_request
def require_api_key():
    if request.method == 'OPTIONS':
        return None
    if not current_app.config.get('GEMINI_API_KEY'):
        return jsonify({'error': 'Service unavailable'}), 503


def _json_body():
    _, payload = read_action()
    return payload


@gemini_bp.route('/api/gemini/generate', methods=['POST'])
def api_gemini_generate():
    return _generate(_json_body())


@gemini_bp.route('/api/gemini/translate', methods=['POST'])
def api_gemini_translate():
    return _translate(_json_body())


@gemini_bp.route('/api/gemini/entertainment-info', methods=['POST'])
def api_gemini_entertainment_info():
    return _entertainment_info(_json_body())


@gemini_bp.route('/api/gemini', methods=['POST'])
def api_gemini_action():
    action, payload = read_action()
    handler = ACTIONS.get(action) if isinstance(action, str) else None
    if handler is None:
        return unknown_action()
    return handler(payload)
