from flask import request, jsonify


def read_action():
    """Return ``(action, payload)`` for an action-dispatch request.

    The action may come from the query string or the JSON body; the query
    string wins. A body that is missing or not a JSON object counts as empty.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    action = request.args.get('action') or payload.get('action')
    return action, payload


def param(payload, name, default=None):
    """A request parameter from the query string, falling back to the body."""
    value = request.args.get(name)
    if value is None:
        value = payload.get(name, default)
    return value


def unknown_action():
    return jsonify({'error': 'Unknown action'}), 400
