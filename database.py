"""
database.py — SQLite store for the tables of each browser session.

The cookie session only carries a random session id; table counters and
cell values are kept here, one row per session id. Rows are never read
without that id, so data lives exactly as long as the browser session.
Uses WAL mode for concurrent read performance.
"""

import sqlite3
import os
import json

from flask import current_app

DB_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data', 'quarter_tables.db')


def get_db_path():
    """Database path from the app config (DATABASE), or the default under data/."""
    return current_app.config.get('DATABASE') or DB_PATH


def get_db():
    """Get a database connection with WAL mode enabled."""
    path = get_db_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.row_factory = sqlite3.Row
    return conn


def init_db():
    """Create the session tables store if it doesn't exist."""
    conn = get_db()
    conn.execute("""
        CREATE TABLE IF NOT EXISTS table_sessions (
            session_id TEXT PRIMARY KEY,
            state TEXT NOT NULL,
            grid TEXT NOT NULL,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()
    conn.close()


def load_tables(session_id):
    """
    Read the stored state and grid of a session.

    Returns:
        (state dict, grid dict) or (None, None) when nothing is stored.
    """
    conn = get_db()
    row = conn.execute(
        "SELECT state, grid FROM table_sessions WHERE session_id = ?",
        (session_id,)
    ).fetchone()
    conn.close()
    if row is None:
        return None, None
    return json.loads(row['state']), json.loads(row['grid'])


def save_tables(session_id, state, grid):
    """Insert or replace the state and grid of a session."""
    conn = get_db()
    try:
        conn.execute(
            """INSERT INTO table_sessions (session_id, state, grid, updated_at)
               VALUES (?, ?, ?, CURRENT_TIMESTAMP)
               ON CONFLICT(session_id) DO UPDATE SET
                   state = excluded.state,
                   grid = excluded.grid,
                   updated_at = CURRENT_TIMESTAMP""",
            (session_id, json.dumps(state), json.dumps(grid, allow_nan=False))
        )
        conn.commit()
    finally:
        conn.close()


def delete_tables(session_id):
    """Remove a session's stored tables."""
    conn = get_db()
    try:
        conn.execute("DELETE FROM table_sessions WHERE session_id = ?", (session_id,))
        conn.commit()
    finally:
        conn.close()
