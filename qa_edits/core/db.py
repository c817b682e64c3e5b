"""
SQLite foundation for the project store - projects, their edit sessions and audit trails.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator
from .config import get_db_path, ensure_db_directory


@contextmanager
def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    ensure_db_directory()
    conn = sqlite3.connect(get_db_path())
    try:
        yield conn
    finally:
        conn.close()


def init_db():
    """Initialize the database with required tables."""
    with get_db() as conn:
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS projects (
                id TEXT PRIMARY KEY,
                file_name TEXT NOT NULL,
                file_size INTEGER DEFAULT 0,
                uploaded_by TEXT,
                status TEXT DEFAULT 'active',
                issue_count INTEGER DEFAULT 0,
                resolved_issue_count INTEGER DEFAULT 0,
                upload_date INTEGER NOT NULL,
                last_modified INTEGER NOT NULL
            )
        ''')

        # One serialized EditSession per project
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS edit_sessions (
                project_id TEXT PRIMARY KEY,
                payload TEXT NOT NULL,
                last_updated INTEGER NOT NULL
            )
        ''')

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS audit_log (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT NOT NULL,
                project_id TEXT NOT NULL,
                user_name TEXT,
                action TEXT NOT NULL,
                timestamp INTEGER NOT NULL,
                details TEXT      -- JSON object
            )
        ''')

        # Trail metadata survives clearing the entries
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS audit_trails (
                project_id TEXT PRIMARY KEY,
                last_updated INTEGER NOT NULL
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_audit_log_project ON audit_log(project_id, seq)')

        conn.commit()


def health_check():
    """Check database health."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            tables = cursor.fetchall()

            table_names = [table[0] for table in tables]
            required_tables = ['projects', 'edit_sessions', 'audit_log', 'audit_trails']

            return all(table in table_names for table in required_tables)
    except sqlite3.Error:
        return False
