"""
Edit API - exposes projects, their edit sessions and audit trails over HTTP.
The session logic itself lives in core.edit_session; this layer only loads, applies and stores.
"""

import threading
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Tuple

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .schemas import (
    ApplyEditsRequest,
    AuditTrailResponse,
    DeleteResponse,
    EditSessionResponse,
    HealthResponse,
    IndicatorRenameRequest,
    PeriodIdentityResponse,
    ProjectCreateRequest,
    ProjectListResponse,
    ProjectResponse,
    ValueEditListResponse,
)
from ..core import dao
from ..core.config import CORS_ORIGINS, VERSION, debug_enabled, get_default_user_name, is_audit_trail_enabled
from ..core.db import health_check, init_db
from ..core.edit_session import apply_edits, apply_indicator_rename, clear_edits, edits_for_indicator, ensure_session
from ..core.formatting import create_period_key, format_period_full_label, format_period_label
from ..core.period_key import period_key, period_token
from ..core.schema import EditSession, Project, now_ms
from ..util.logging import log_schema_validation_error


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(
    title="Data Quality Edit API",
    version=VERSION,
    description="Edit reconciliation and audit trail for the data quality dashboard",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    log_schema_validation_error(f"{request.method} {request.url.path}", list(exc.errors()))
    return await request_validation_exception_handler(request, exc)


def _require_project(project_id: str) -> Project:
    project = dao.load_project(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


def _current_session(project: Project) -> EditSession:
    """Stored session of the project, or the empty default when none is stored."""
    return ensure_session(dao.get_edit_session(project.id), file_name=project.file_name)


# Read-merge-write of a session runs under its project's lock
_project_locks: Dict[str, threading.Lock] = {}
_project_locks_guard = threading.Lock()


def _project_lock(project_id: str) -> threading.Lock:
    with _project_locks_guard:
        return _project_locks.setdefault(project_id, threading.Lock())


def _store_session(project_id: str, session: EditSession,
                   audit_entries: Optional[List[Tuple[str, str, Dict[str, Any]]]] = None) -> None:
    """Persist the session together with its audit entries; 500 if nothing could be written."""
    if not dao.put_edit_session(project_id, session, audit_entries):
        raise HTTPException(status_code=500, detail="Failed to save edit session")


def _session_response(session: EditSession) -> EditSessionResponse:
    return EditSessionResponse.model_validate(session.to_dict())


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint():
    """Check system health."""
    db_health = health_check()

    return HealthResponse(
        status="healthy" if db_health else "unhealthy",
        version=VERSION,
        db_health=db_health,
        project_count=dao.get_project_count() if db_health else 0
    )


@app.post("/projects", response_model=ProjectResponse, status_code=201)
def create_project_endpoint(request: ProjectCreateRequest):
    project_id = dao.save_project(
        file_name=request.file_name,
        file_size=request.file_size,
        uploaded_by=request.uploaded_by,
    )
    if not project_id:
        raise HTTPException(status_code=500, detail="Failed to save project")

    return ProjectResponse.model_validate(_require_project(project_id).to_dict())


@app.get("/projects", response_model=ProjectListResponse)
def list_projects_endpoint():
    return ProjectListResponse(
        projects=[ProjectResponse.model_validate(p.to_dict()) for p in dao.list_projects()]
    )


@app.get("/projects/{project_id}", response_model=ProjectResponse)
def get_project_endpoint(project_id: str):
    return ProjectResponse.model_validate(_require_project(project_id).to_dict())


@app.delete("/projects/{project_id}", response_model=DeleteResponse)
def delete_project_endpoint(project_id: str):
    """Delete a project; its edit session and audit trail go with it."""
    _require_project(project_id)
    with _project_lock(project_id):
        deleted = dao.delete_project(project_id)
    with _project_locks_guard:
        _project_locks.pop(project_id, None)
    return DeleteResponse(success=deleted, id=project_id)


@app.get("/projects/{project_id}/edits", response_model=EditSessionResponse, response_model_exclude_none=True)
def get_edit_session_endpoint(project_id: str):
    project = _require_project(project_id)
    return _session_response(_current_session(project))


@app.post("/projects/{project_id}/edits", response_model=EditSessionResponse, response_model_exclude_none=True)
def apply_edits_endpoint(project_id: str, request: ApplyEditsRequest):
    """Merge a batch of value edits into the project's edit session."""
    project = _require_project(project_id)
    incoming = [edit.to_record() for edit in request.edits]

    audit_entries = []
    if is_audit_trail_enabled():
        user_name = request.user_name or get_default_user_name()
        for edit in incoming:
            details = edit.to_dict()
            details.pop("timestamp", None)
            audit_entries.append((user_name, "data_edit", details))

    with _project_lock(project_id):
        session = apply_edits(_current_session(project), incoming)
        _store_session(project_id, session, audit_entries)

    return _session_response(session)


@app.delete("/projects/{project_id}/edits", response_model=EditSessionResponse, response_model_exclude_none=True)
def clear_edits_endpoint(project_id: str):
    project = _require_project(project_id)
    with _project_lock(project_id):
        session = clear_edits(_current_session(project))
        _store_session(project_id, session)
    return _session_response(session)


@app.get("/projects/{project_id}/edits/{indicator_name}", response_model=ValueEditListResponse,
         response_model_exclude_none=True)
def indicator_edits_endpoint(project_id: str, indicator_name: str):
    project = _require_project(project_id)
    edits = edits_for_indicator(_current_session(project), indicator_name)
    return ValueEditListResponse.model_validate({
        "indicatorName": indicator_name,
        "edits": [edit.to_dict() for edit in edits],
    })


@app.post("/projects/{project_id}/indicator-renames", response_model=EditSessionResponse,
          response_model_exclude_none=True)
def rename_indicator_endpoint(project_id: str, request: IndicatorRenameRequest):
    project = _require_project(project_id)
    rename = request.to_record(timestamp=now_ms())

    audit_entries = []
    if is_audit_trail_enabled():
        audit_entries.append((request.user_name or get_default_user_name(), "indicator_rename", {
            "indicatorName": rename.old_name,
            "oldValue": rename.old_name,
            "newValue": rename.new_name,
        }))

    with _project_lock(project_id):
        session = apply_indicator_rename(_current_session(project), rename)
        _store_session(project_id, session, audit_entries)

    return _session_response(session)


@app.get("/projects/{project_id}/audit-trail", response_model=AuditTrailResponse)
def audit_trail_endpoint(project_id: str):
    project = _require_project(project_id)
    logs = dao.load_audit_trail(project_id)

    return AuditTrailResponse.model_validate({
        "fileName": project.file_name,
        "logs": [entry.to_dict() for entry in logs],
        "lastUpdated": dao.get_audit_trail_updated(project_id),
    })


@app.get("/debug/period-identity", response_model=PeriodIdentityResponse)
def period_identity_endpoint(year: int, month: Optional[int] = Query(default=None, ge=1, le=12),
                             quarter: Optional[int] = Query(default=None, ge=1, le=4)):
    """Show how a period is keyed for deduplication and for display."""
    if not debug_enabled():
        raise HTTPException(status_code=403, detail="Period identity endpoint requires debug mode")

    return PeriodIdentityResponse(
        period_token=period_token(month, quarter),
        period_key=period_key(year, month, quarter),
        display_key=create_period_key(year, month, quarter),
        label=format_period_label(year, month, quarter),
        full_label=format_period_full_label(year, month, quarter),
    )
