"""
Structured logging for edit reconciliation, session bookkeeping and the project store.
Every line goes through log_operation so the audit output keeps one shape.
"""

import logging
from typing import Any, Dict, List

# Free-text fields that may carry reviewer notes or raw values
SENSITIVE_FIELDS = ['comment', 'value', 'oldValue', 'newValue', 'payload', 'token']


class StructuredLogger:
    """Structured logger for merge, session and project store operations."""

    def __init__(self, name: str = "qa_edits"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.info(message)

    def log_edit_merge(self, existing_count: int, incoming_count: int, result_count: int):
        """Log one run of the merge engine."""
        details = {
            "existing": existing_count,
            "incoming": incoming_count,
            "result": result_count,
            "replaced": existing_count + incoming_count - result_count
        }
        self.log_operation("edits.merge", "success", details)

    def log_session_update(self, action: str, file_name: str, edit_count: int, rename_count: int):
        """Log a change to an edit session."""
        details = {
            "file_name": file_name,
            "data_edits": edit_count,
            "indicator_edits": rename_count
        }
        self.log_operation(f"session.{action}", "success", details)

    def log_project_event(self, action: str, project_id: str, status: str = "success", details: Dict[str, Any] = None):
        """Log a project store operation."""
        log_details = {"project_id": project_id}
        if details:
            log_details.update(details)

        self.log_operation(f"project.{action}", status, log_details)

    def log_schema_validation_error(self, operation: str, errors: List[Any], source_record: Dict[str, Any] = None):
        """Log schema validation errors with sanitized details."""
        sanitized_errors = []
        for error in errors:
            if isinstance(error, dict):
                sanitized_error = error.copy()
                # Submitted values may be unpublished figures
                for field in ['input', 'value']:
                    if field in sanitized_error:
                        sanitized_error[field] = "[REDACTED]"
                sanitized_errors.append(sanitized_error)
            else:
                sanitized_errors.append(str(error)[:100])

        log_details = {
            "operation": operation,
            "errors": sanitized_errors,
            "error_count": len(sanitized_errors)
        }

        if source_record and "indicatorName" in source_record:
            log_details["target_identifier"] = source_record["indicatorName"]

        self.log_operation("schema_validation.error", "rejected", log_details)

    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()


def log_schema_validation_error(operation: str, errors: List[Any], source_record: Dict[str, Any] = None):
    """Log schema validation errors with sanitized details."""
    logger.log_schema_validation_error(operation, errors, source_record)


def sanitize_payload(payload: Any, reveal_sensitive: bool = False, sensitive_fields: List[str] = None) -> Any:
    """Sanitize payloads for audit logging."""
    if sensitive_fields is None:
        sensitive_fields = SENSITIVE_FIELDS

    if isinstance(payload, dict):
        sanitized = {}
        for k, v in payload.items():
            if reveal_sensitive or k not in sensitive_fields:
                sanitized[k] = sanitize_payload(v, reveal_sensitive, sensitive_fields)
            else:
                sanitized[k] = "[REDACTED]"
        return sanitized
    elif isinstance(payload, str):
        # Truncate long strings
        return payload[:100] + "..." if len(payload) > 100 else payload
    elif isinstance(payload, list):
        return [sanitize_payload(item, reveal_sensitive, sensitive_fields) for item in payload]
    else:
        return payload
