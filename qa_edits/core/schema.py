"""
Edit record model - value corrections, indicator renames and the per-project edit session.
Wire format keeps the dashboard's camelCase field names.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass
class ValueEdit:
    """A correction to one observed indicator value."""
    indicator_name: str
    filter_name: str
    year: int
    old_value: float
    new_value: float
    timestamp: int
    month: Optional[int] = None
    quarter: Optional[int] = None
    table_number: Optional[str] = None
    comment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire form, dropping unset optionals."""
        data = {
            "indicatorName": self.indicator_name,
            "filterName": self.filter_name,
            "year": self.year,
            "oldValue": self.old_value,
            "newValue": self.new_value,
            "timestamp": self.timestamp,
        }
        for key, value in (("month", self.month), ("quarter", self.quarter),
                           ("tableNumber", self.table_number), ("comment", self.comment)):
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ValueEdit':
        """Create from the camelCase wire form."""
        return cls(
            indicator_name=data["indicatorName"],
            filter_name=data["filterName"],
            year=int(data["year"]),
            old_value=float(data["oldValue"]),
            new_value=float(data["newValue"]),
            timestamp=int(data.get("timestamp", 0)),
            month=data.get("month"),
            quarter=data.get("quarter"),
            table_number=data.get("tableNumber"),
            comment=data.get("comment"),
        )


@dataclass
class IndicatorRenameEdit:
    """A correction to an indicator's display name."""
    old_name: str
    new_name: str
    timestamp: int

    def to_dict(self) -> Dict[str, Any]:
        return {"oldName": self.old_name, "newName": self.new_name, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'IndicatorRenameEdit':
        return cls(
            old_name=data["oldName"],
            new_name=data["newName"],
            timestamp=int(data.get("timestamp", 0)),
        )


@dataclass
class EditSession:
    """Edit history of one project: merged value edits plus the rename log."""
    file_name: str
    data_edits: List[ValueEdit] = field(default_factory=list)
    indicator_edits: List[IndicatorRenameEdit] = field(default_factory=list)
    last_updated: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fileName": self.file_name,
            "dataEdits": [edit.to_dict() for edit in self.data_edits],
            "indicatorEdits": [edit.to_dict() for edit in self.indicator_edits],
            "lastUpdated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EditSession':
        return cls(
            file_name=data.get("fileName", ""),
            data_edits=[ValueEdit.from_dict(e) for e in data.get("dataEdits", [])],
            indicator_edits=[IndicatorRenameEdit.from_dict(e) for e in data.get("indicatorEdits", [])],
            last_updated=int(data.get("lastUpdated", 0)),
        )


# Audit trail actions recorded by the project store
AUDIT_ACTIONS = ("data_edit", "indicator_rename", "value_add", "issue_resolved", "issue_dismissed")


@dataclass
class AuditLogEntry:
    id: str
    user_name: str
    action: str  # one of AUDIT_ACTIONS
    timestamp: int
    details: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userName": self.user_name,
            "action": self.action,
            "timestamp": self.timestamp,
            "details": self.details,
        }


@dataclass
class Project:
    id: str
    file_name: str
    file_size: int
    uploaded_by: str
    upload_date: int
    last_modified: int
    status: str = "active"
    issue_count: int = 0
    resolved_issue_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fileName": self.file_name,
            "fileSize": self.file_size,
            "uploadedBy": self.uploaded_by,
            "uploadDate": self.upload_date,
            "lastModified": self.last_modified,
            "status": self.status,
            "issueCount": self.issue_count,
            "resolvedIssueCount": self.resolved_issue_count,
        }
