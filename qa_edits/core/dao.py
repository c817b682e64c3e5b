"""
Project store - persists projects, their edit sessions and audit trails in SQLite.

This is the collaborator the edit session container hands sessions to. Storage
faults are logged and reported as False/None, never raised to the caller.
"""

import json
import random
import sqlite3
import string
from typing import Any, Dict, List, Optional, Tuple

from .config import get_max_projects
from .db import get_db, init_db
from .schema import AUDIT_ACTIONS, AuditLogEntry, EditSession, Project, now_ms
from ..util.logging import logger, sanitize_payload

_PROJECT_COLUMNS = ("id, file_name, file_size, uploaded_by, upload_date, last_modified, "
                    "status, issue_count, resolved_issue_count")

# Columns update_project may touch
_UPDATABLE_FIELDS = {"file_name", "file_size", "uploaded_by", "status", "issue_count", "resolved_issue_count"}


def generate_id() -> str:
    """Record id in the dashboard's format: <epoch-ms>-<9 base36 chars>."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{now_ms()}-{suffix}"


def _row_to_project(row) -> Project:
    return Project(*row)


# Projects

def save_project(file_name: str, file_size: int = 0, uploaded_by: str = "", status: str = "active",
                 issue_count: int = 0, resolved_issue_count: int = 0) -> str:
    """Create a project and return its id ("" when the input is invalid or storage fails)."""
    if not file_name or not file_name.strip():
        logger.error("Invalid project data: file name is required")
        return ""

    project_id = generate_id()
    now = now_ms()

    try:
        with get_db() as conn:
            cursor = conn.cursor()

            cursor.execute("SELECT COUNT(*) FROM projects")
            count = cursor.fetchone()[0]
            max_projects = get_max_projects()
            if count >= max_projects:
                # Evict least recently modified projects to make room
                cursor.execute(
                    "SELECT id FROM projects ORDER BY last_modified ASC LIMIT ?",
                    (count - max_projects + 1,)
                )
                for (old_id,) in cursor.fetchall():
                    _delete_project_rows(cursor, old_id)
                    logger.log_project_event("evicted", old_id, details={"max_projects": max_projects})

            cursor.execute(
                f"INSERT INTO projects ({_PROJECT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (project_id, file_name, file_size, uploaded_by, now, now, status, issue_count, resolved_issue_count)
            )
            conn.commit()
    except sqlite3.Error as e:
        logger.error(f"Failed to save project '{file_name}': {e}")
        return ""

    logger.log_project_event("created", project_id, details={"file_name": file_name})
    return project_id


def update_project(project_id: str, **fields: Any) -> bool:
    """Update project columns and bump last_modified."""
    unknown = set(fields) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update project fields: {sorted(unknown)}")

    assignments = [f"{name} = ?" for name in fields] + ["last_modified = ?"]
    params = list(fields.values()) + [now_ms(), project_id]

    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(f"UPDATE projects SET {', '.join(assignments)} WHERE id = ?", params)
            conn.commit()
            updated = cursor.rowcount > 0
    except sqlite3.Error as e:
        logger.error(f"Failed to update project '{project_id}': {e}")
        return False

    if not updated:
        logger.log_project_event("updated", project_id, status="not_found")
        return False

    logger.log_project_event("updated", project_id, details={"fields": sorted(fields)})
    return True


def load_project(project_id: str) -> Optional[Project]:
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_PROJECT_COLUMNS} FROM projects WHERE id = ?", (project_id,))
            row = cursor.fetchone()
    except sqlite3.Error as e:
        logger.error(f"Failed to load project '{project_id}': {e}")
        return None

    return _row_to_project(row) if row else None


def list_projects() -> List[Project]:
    """All projects, most recently modified first."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_PROJECT_COLUMNS} FROM projects ORDER BY last_modified DESC, rowid DESC")
            rows = cursor.fetchall()
    except sqlite3.Error as e:
        logger.error(f"Failed to list projects: {e}")
        return []

    return [_row_to_project(row) for row in rows]


def get_project_count() -> int:
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM projects")
            return cursor.fetchone()[0]
    except sqlite3.Error as e:
        logger.error(f"Failed to count projects: {e}")
        return 0


def delete_project(project_id: str) -> bool:
    """Delete a project together with its edit session and audit trail."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            deleted = _delete_project_rows(cursor, project_id)
            conn.commit()
    except sqlite3.Error as e:
        logger.error(f"Failed to delete project '{project_id}': {e}")
        return False

    logger.log_project_event("deleted", project_id, status="success" if deleted else "not_found")
    return deleted


def _delete_project_rows(cursor: sqlite3.Cursor, project_id: str) -> bool:
    cursor.execute("DELETE FROM edit_sessions WHERE project_id = ?", (project_id,))
    cursor.execute("DELETE FROM audit_log WHERE project_id = ?", (project_id,))
    cursor.execute("DELETE FROM audit_trails WHERE project_id = ?", (project_id,))
    cursor.execute("DELETE FROM projects WHERE id = ?", (project_id,))
    return cursor.rowcount > 0


# Edit sessions

def get_edit_session(project_id: str) -> Optional[EditSession]:
    """Stored session of a project, or None when the project has none yet."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT payload FROM edit_sessions WHERE project_id = ?", (project_id,))
            row = cursor.fetchone()
    except sqlite3.Error as e:
        logger.error(f"Failed to load edit session for project '{project_id}': {e}")
        return None

    if not row:
        return None

    try:
        return EditSession.from_dict(json.loads(row[0]))
    except (ValueError, KeyError, TypeError) as e:
        logger.error(f"Corrupt edit session payload for project '{project_id}': {e}")
        return None


def put_edit_session(project_id: str, session: EditSession,
                     audit_entries: Optional[List[Tuple[str, str, Dict[str, Any]]]] = None) -> bool:
    """
    Store a session, plus any (user_name, action, details) audit entries, in one transaction.

    Either the session and all of its audit rows are written, or nothing is.
    """
    audit_entries = audit_entries or []
    for _, action, _ in audit_entries:
        _check_audit_action(action)

    payload = json.dumps(session.to_dict())
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "INSERT OR REPLACE INTO edit_sessions (project_id, payload, last_updated) VALUES (?, ?, ?)",
                    (project_id, payload, session.last_updated)
                )
                cursor.execute("UPDATE projects SET last_modified = ? WHERE id = ?", (now_ms(), project_id))
                for user_name, action, details in audit_entries:
                    _insert_audit_row(cursor, project_id, user_name, action, details)
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise
    except sqlite3.Error as e:
        logger.error(f"Failed to save edit session for project '{project_id}': {e}")
        return False

    logger.log_project_event("edit_session_saved", project_id, details={
        "data_edits": len(session.data_edits),
        "indicator_edits": len(session.indicator_edits),
        "audit_entries": len(audit_entries)
    })
    for _, action, details in audit_entries:
        logger.log_project_event(f"audit.{action}", project_id, details=sanitize_payload(details))
    return True


def delete_edit_session(project_id: str) -> bool:
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM edit_sessions WHERE project_id = ?", (project_id,))
            conn.commit()
            return cursor.rowcount > 0
    except sqlite3.Error as e:
        logger.error(f"Failed to delete edit session for project '{project_id}': {e}")
        return False


# Audit trail

def _check_audit_action(action: str) -> None:
    if action not in AUDIT_ACTIONS:
        raise ValueError(f"Unknown audit action: {action}")


def _touch_audit_trail(cursor: sqlite3.Cursor, project_id: str, timestamp: int) -> None:
    cursor.execute(
        "INSERT OR REPLACE INTO audit_trails (project_id, last_updated) VALUES (?, ?)",
        (project_id, timestamp)
    )


def _insert_audit_row(cursor: sqlite3.Cursor, project_id: str, user_name: str, action: str,
                      details: Dict[str, Any]) -> AuditLogEntry:
    entry = AuditLogEntry(id=generate_id(), user_name=user_name, action=action,
                          timestamp=now_ms(), details=details)
    cursor.execute(
        "INSERT INTO audit_log (id, project_id, user_name, action, timestamp, details) VALUES (?, ?, ?, ?, ?, ?)",
        (entry.id, project_id, entry.user_name, entry.action, entry.timestamp, json.dumps(details))
    )
    _touch_audit_trail(cursor, project_id, entry.timestamp)
    return entry


def add_audit_log(project_id: str, user_name: str, action: str, details: Dict[str, Any]) -> Optional[AuditLogEntry]:
    """Append an entry to the project's audit trail."""
    _check_audit_action(action)

    try:
        with get_db() as conn:
            cursor = conn.cursor()
            entry = _insert_audit_row(cursor, project_id, user_name, action, details)
            conn.commit()
    except sqlite3.Error as e:
        logger.error(f"Failed to add audit log for project '{project_id}': {e}")
        return None

    logger.log_project_event(f"audit.{action}", project_id, details=sanitize_payload(details))
    return entry


def load_audit_trail(project_id: str) -> List[AuditLogEntry]:
    """Audit entries of a project in the order they were recorded."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, user_name, action, timestamp, details FROM audit_log WHERE project_id = ? ORDER BY seq",
                (project_id,)
            )
            rows = cursor.fetchall()
    except sqlite3.Error as e:
        logger.error(f"Failed to load audit trail for project '{project_id}': {e}")
        return []

    return [
        AuditLogEntry(id=row[0], user_name=row[1], action=row[2], timestamp=row[3],
                      details=json.loads(row[4]) if row[4] else {})
        for row in rows
    ]


def get_audit_trail_updated(project_id: str) -> int:
    """When the trail last changed (entry added or trail cleared), 0 if never."""
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT last_updated FROM audit_trails WHERE project_id = ?", (project_id,))
            row = cursor.fetchone()
    except sqlite3.Error as e:
        logger.error(f"Failed to read audit trail stamp for project '{project_id}': {e}")
        return 0

    return row[0] if row else 0


def clear_audit_trail(project_id: str) -> bool:
    try:
        with get_db() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM audit_log WHERE project_id = ?", (project_id,))
            _touch_audit_trail(cursor, project_id, now_ms())
            conn.commit()
    except sqlite3.Error as e:
        logger.error(f"Failed to clear audit trail for project '{project_id}': {e}")
        return False
    return True


__all__ = [
    "init_db",
    "generate_id",
    "save_project",
    "update_project",
    "load_project",
    "list_projects",
    "get_project_count",
    "delete_project",
    "get_edit_session",
    "put_edit_session",
    "delete_edit_session",
    "add_audit_log",
    "load_audit_trail",
    "get_audit_trail_updated",
    "clear_audit_trail",
]
