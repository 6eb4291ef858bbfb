"""
Admin auth — a single shared admin password, hashed in the app_config table.

A deployment may be seeded with a default password; verifying with it
succeeds but reports ``resetRequired`` until the password is changed.
"""

import sqlite3
import logging
from flask import Blueprint, current_app, jsonify
from werkzeug.security import generate_password_hash, check_password_hash

from database import get_config_value, set_config_values
from services.actions import read_action, unknown_action

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)

PASSWORD_HASH_KEY = 'admin_password_hash'
DEFAULT_FLAG_KEY = 'is_default_password'
MIN_PASSWORD_LEN = 4


def seed_default_password(password, db_path=None):
    """Store ``password`` as the default admin password unless one is already set."""
    if get_config_value(PASSWORD_HASH_KEY, db_path) is not None:
        return False
    set_config_values({
        PASSWORD_HASH_KEY: generate_password_hash(password),
        DEFAULT_FLAG_KEY: 'true',
    }, db_path)
    logger.info('Seeded default admin password; a reset will be required on first login')
    return True


def verify_password(password, db_path=None):
    """Return ``(success, reset_required)``."""
    stored = get_config_value(PASSWORD_HASH_KEY, db_path)
    if stored is None or not check_password_hash(stored, password):
        return False, False
    return True, get_config_value(DEFAULT_FLAG_KEY, db_path) == 'true'


def change_password(new_password, current_password=None, db_path=None):
    """Replace the admin password. Returns False if ``current_password`` is wrong.

    The current password is only optional while no password is stored.
    """
    stored = get_config_value(PASSWORD_HASH_KEY, db_path)
    if stored is not None:
        if not current_password or not check_password_hash(stored, current_password):
            return False
    set_config_values({
        PASSWORD_HASH_KEY: generate_password_hash(new_password),
        DEFAULT_FLAG_KEY: 'false',
    }, db_path)
    logger.info('Admin password changed')
    return True


def _verify(payload):
    password = payload.get('password')
    if not password or not isinstance(password, str):
        return jsonify({'error': 'Password required'}), 400
    success, reset_required = verify_password(password, current_app.config['DATABASE_PATH'])
    if not success:
        logger.warning('Admin password verification failed')
    return jsonify({'success': success, 'resetRequired': reset_required})


def _change_password(payload):
    new_password = payload.get('newPassword')
    current_password = payload.get('currentPassword')
    if not isinstance(new_password, str) or len(new_password) < MIN_PASSWORD_LEN:
        return jsonify({'error': 'Invalid new password'}), 400
    if current_password is not None and not isinstance(current_password, str):
        current_password = None
    if not change_password(new_password, current_password, current_app.config['DATABASE_PATH']):
        return jsonify({'success': False, 'error': 'Current password incorrect'})
    return jsonify({'success': True})


def _handle(fn, payload):
    try:
        return fn(payload)
    except sqlite3.Error as e:
        logger.error(f'Auth store error: {e}')
        return jsonify({'error': 'Internal server error'}), 500


@auth_bp.route('/api/auth/verify', methods=['POST'])
def api_auth_verify():
    _, payload = read_action()
    return _handle(_verify, payload)


@auth_bp.route('/api/auth/change-password', methods=['POST'])
def api_auth_change_password():
    _, payload = read_action()
    return _handle(_change_password, payload)


@auth_bp.route('/api/auth', methods=['POST'])
def api_auth_action():
    action, payload = read_action()
    if action == 'auth_verify':
        return _handle(_verify, payload)
    if action == 'auth_change_password':
        return _handle(_change_password, payload)
    return unknown_action()
