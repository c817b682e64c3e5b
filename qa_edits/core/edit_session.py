"""
Edit session container - the per-project aggregate of merged value edits and renames.

Sessions are plain values passed in and returned; nothing here keeps state
between calls or touches storage. Persisting a session is the project
store's job (see dao.py).
"""

from dataclasses import replace
from typing import Iterable, List, Optional

from .merge import merge_data_edits
from .schema import EditSession, IndicatorRenameEdit, ValueEdit, now_ms
from ..util.logging import logger


def empty_session(file_name: str = "") -> EditSession:
    """A session with empty containers and lastUpdated = 0."""
    return EditSession(file_name=file_name, data_edits=[], indicator_edits=[], last_updated=0)


def ensure_session(session: Optional[EditSession], file_name: str = "") -> EditSession:
    """Treat an absent session as the empty default."""
    if session is None:
        return empty_session(file_name)
    return session


def apply_edits(session: Optional[EditSession], incoming: Iterable[ValueEdit]) -> EditSession:
    """Merge `incoming` into the session's value edits and stamp lastUpdated."""
    session = ensure_session(session)
    updated = replace(
        session,
        data_edits=merge_data_edits(session.data_edits, incoming),
        indicator_edits=list(session.indicator_edits),
        last_updated=now_ms(),
    )
    logger.log_session_update("apply_edits", updated.file_name,
                              len(updated.data_edits), len(updated.indicator_edits))
    return updated


def apply_indicator_rename(session: Optional[EditSession], edit: IndicatorRenameEdit) -> EditSession:
    """Append a rename to the session. Renames are never deduplicated."""
    session = ensure_session(session)
    updated = replace(
        session,
        data_edits=list(session.data_edits),
        indicator_edits=list(session.indicator_edits) + [edit],
    )
    logger.log_session_update("apply_indicator_rename", updated.file_name,
                              len(updated.data_edits), len(updated.indicator_edits))
    return updated


def clear_edits(session: Optional[EditSession]) -> EditSession:
    """Drop every value edit and rename, keeping the file name."""
    session = ensure_session(session)
    cleared = EditSession(file_name=session.file_name, data_edits=[], indicator_edits=[],
                          last_updated=now_ms())
    logger.log_session_update("clear_edits", cleared.file_name, 0, 0)
    return cleared


def edits_for_indicator(session: Optional[EditSession], indicator_name: str) -> List[ValueEdit]:
    session = ensure_session(session)
    return [edit for edit in session.data_edits if edit.indicator_name == indicator_name]


def has_edits(session: Optional[EditSession], indicator_name: Optional[str] = None) -> bool:
    session = ensure_session(session)
    if indicator_name is None:
        return bool(session.data_edits)
    return any(edit.indicator_name == indicator_name for edit in session.data_edits)


# Lifecycle hooks offered to the project store. The store supplies and
# discards the actual payload, so these never touch storage.

def load_edit_session(project_id: Optional[str] = None) -> Optional[EditSession]:
    """Session payloads come from the owning project; nothing is loaded here."""
    return None


def clear_edit_session(project_id: Optional[str] = None) -> None:
    """Sessions are discarded together with their project; nothing to do here."""
    return None
