"""
Edit reconciliation core - pure record model, period identity, merge engine and session container.
"""

# Package initialization for the core module
from .schema import ValueEdit, IndicatorRenameEdit, EditSession, now_ms
from .period_key import period_token, period_key, edit_identity, identity_key
from .merge import merge_data_edits
from .edit_session import (
    empty_session,
    ensure_session,
    apply_edits,
    apply_indicator_rename,
    clear_edits,
    edits_for_indicator,
    has_edits,
    load_edit_session,
    clear_edit_session,
)

__all__ = [
    'ValueEdit',
    'IndicatorRenameEdit',
    'EditSession',
    'now_ms',
    'period_token',
    'period_key',
    'edit_identity',
    'identity_key',
    'merge_data_edits',
    'empty_session',
    'ensure_session',
    'apply_edits',
    'apply_indicator_rename',
    'clear_edits',
    'edits_for_indicator',
    'has_edits',
    'load_edit_session',
    'clear_edit_session',
]
