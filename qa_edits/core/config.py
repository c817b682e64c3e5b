"""
Runtime configuration - every setting comes from the environment with a local-first default.
"""

import os
from pathlib import Path

# Database path configuration (project store collaborator)
DB_PATH = os.getenv("DB_PATH", "./data/qa_edits.db")

DEBUG = os.getenv("DEBUG", "true").lower() == "true"

# Project store limits
MAX_PROJECTS = int(os.getenv("MAX_PROJECTS", "50"))

# Audit trail recording for accepted edits and renames
AUDIT_TRAIL_ENABLED = os.getenv("AUDIT_TRAIL_ENABLED", "true").lower() == "true"
DEFAULT_USER_NAME = os.getenv("DEFAULT_USER_NAME", "unknown user")

# Web UI origins allowed to call the API
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000"
    ).split(",")
    if origin.strip()
]

# Version string
VERSION = "1.0.0"


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "true").lower() == "true"


def get_db_path():
    """Get the SQLite path, read at call time so it can be redirected per process."""
    return os.getenv("DB_PATH", DB_PATH)


def ensure_db_directory():
    """Ensure the database directory exists."""
    Path(get_db_path()).parent.mkdir(parents=True, exist_ok=True)


def is_audit_trail_enabled():
    """Check if accepted edits are mirrored into the audit trail."""
    return os.getenv("AUDIT_TRAIL_ENABLED", "true" if AUDIT_TRAIL_ENABLED else "false").lower() == "true"


def get_max_projects():
    """Get the maximum number of projects kept by the store."""
    return int(os.getenv("MAX_PROJECTS", str(MAX_PROJECTS)))


def get_default_user_name():
    """Get the audit user name used when the caller supplies none."""
    return os.getenv("DEFAULT_USER_NAME", DEFAULT_USER_NAME)


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    try:
        if get_max_projects() < 1:
            issues.append("MAX_PROJECTS must be >= 1")
    except ValueError:
        issues.append(f"Invalid MAX_PROJECTS: {os.getenv('MAX_PROJECTS')}")

    if not get_db_path():
        issues.append("DB_PATH must not be empty")

    return issues
