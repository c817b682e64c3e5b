"""
Request/response models for the edit API. Field names travel in camelCase on the wire.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..core.schema import IndicatorRenameEdit, ValueEdit


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ValueEditModel(CamelModel):
    indicator_name: str
    filter_name: str
    year: int
    month: Optional[int] = Field(default=None, ge=1, le=12)
    quarter: Optional[int] = Field(default=None, ge=1, le=4)
    old_value: float
    new_value: float
    # Ignored on input: the merge stamps its own time
    timestamp: int = 0
    table_number: Optional[str] = None
    comment: Optional[str] = None

    @field_validator('indicator_name')
    @classmethod
    def indicator_name_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('indicatorName cannot be empty')
        return v

    def to_record(self) -> ValueEdit:
        return ValueEdit(
            indicator_name=self.indicator_name,
            filter_name=self.filter_name,
            year=self.year,
            old_value=self.old_value,
            new_value=self.new_value,
            timestamp=self.timestamp,
            month=self.month,
            quarter=self.quarter,
            table_number=self.table_number,
            comment=self.comment,
        )


class IndicatorEditModel(CamelModel):
    old_name: str
    new_name: str
    timestamp: int = 0


class ApplyEditsRequest(CamelModel):
    edits: List[ValueEditModel]
    user_name: Optional[str] = None


class IndicatorRenameRequest(CamelModel):
    old_name: str
    new_name: str
    user_name: Optional[str] = None

    @field_validator('old_name', 'new_name')
    @classmethod
    def name_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('indicator names cannot be empty')
        return v

    def to_record(self, timestamp: int) -> IndicatorRenameEdit:
        return IndicatorRenameEdit(old_name=self.old_name, new_name=self.new_name, timestamp=timestamp)


class EditSessionResponse(CamelModel):
    file_name: str
    data_edits: List[ValueEditModel]
    indicator_edits: List[IndicatorEditModel]
    last_updated: int


class ValueEditListResponse(CamelModel):
    indicator_name: str
    edits: List[ValueEditModel]


class ProjectCreateRequest(CamelModel):
    file_name: str
    file_size: int = Field(default=0, ge=0)
    uploaded_by: str = ""

    @field_validator('file_name')
    @classmethod
    def file_name_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('fileName cannot be empty')
        return v


class ProjectResponse(CamelModel):
    id: str
    file_name: str
    file_size: int
    uploaded_by: str
    upload_date: int
    last_modified: int
    status: str
    issue_count: int
    resolved_issue_count: int


class ProjectListResponse(CamelModel):
    projects: List[ProjectResponse]


class DeleteResponse(CamelModel):
    success: bool
    id: str


class AuditLogEntryModel(CamelModel):
    id: str
    user_name: str
    action: str
    timestamp: int
    details: Dict[str, Any]


class AuditTrailResponse(CamelModel):
    file_name: str
    logs: List[AuditLogEntryModel]
    last_updated: int


class HealthResponse(CamelModel):
    status: str
    version: str
    db_health: bool
    project_count: int


class PeriodIdentityResponse(CamelModel):
    period_token: str
    period_key: str
    display_key: str
    label: str
    full_label: str
