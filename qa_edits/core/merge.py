"""
Edit merge engine - reconciles an existing edit history with newly submitted edits.

Policy is last-write-wins per logical cell (indicator, filter, year, period):
- later entries of `existing` replace earlier ones with the same identity
- every incoming edit replaces whatever was there and gets a fresh timestamp
- identities only present in `existing` pass through with their original timestamp
"""

from dataclasses import replace
from typing import Dict, Iterable, List

from .period_key import EditIdentity, edit_identity
from .schema import ValueEdit, now_ms
from ..util.logging import logger


def merge_data_edits(existing: Iterable[ValueEdit], incoming: Iterable[ValueEdit]) -> List[ValueEdit]:
    """
    Merge `incoming` value edits into `existing` and return the deduplicated history.

    Neither input is mutated; the result holds copies. Output order is not
    meaningful. The timestamp carried by an incoming edit is ignored and
    replaced by the merge time.
    """
    existing = list(existing)
    incoming = list(incoming)
    edit_map: Dict[EditIdentity, ValueEdit] = {}

    for edit in existing:
        edit_map[edit_identity(edit)] = replace(edit)

    stamped_at = now_ms()
    for edit in incoming:
        edit_map[edit_identity(edit)] = replace(edit, timestamp=stamped_at)

    merged = list(edit_map.values())
    logger.log_edit_merge(len(existing), len(incoming), len(merged))
    return merged
