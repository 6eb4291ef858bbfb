import sqlite3
import os

DB_PATH = os.path.join(os.path.dirname(__file__), 'mediaproxy.db')


def get_db(db_path=None):
    conn = sqlite3.connect(db_path or DB_PATH)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_db(db_path=None):
    conn = get_db(db_path)
    conn.executescript('''
        CREATE TABLE IF NOT EXISTS app_config (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT DEFAULT (datetime('now'))
        );
    ''')
    conn.close()


def get_config_value(key, db_path=None):
    conn = get_db(db_path)
    try:
        row = conn.execute('SELECT value FROM app_config WHERE key = ?', (key,)).fetchone()
    finally:
        conn.close()
    return row['value'] if row else None


def set_config_values(values, db_path=None):
    """Upsert several app_config keys in one transaction."""
    conn = get_db(db_path)
    try:
        with conn:
            conn.executemany('''
                INSERT INTO app_config (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = datetime('now')
            ''', list(values.items()))
    finally:
        conn.close()
