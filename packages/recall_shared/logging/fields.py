"""Canonical structured logging field names.

Keeping names centralized prevents drift between components and the tracing
and metrics attributes emitted for the same invocation.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"
EXCEPTION = "exception"

# Public API invocation fields.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
PUBLIC_API_INSTRUMENTATION_FAILURE_EVENT = "public_api_instrumentation_failure"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERROR_CODE = "error_code"
ERROR_CATEGORY = "error_category"
ERROR_MESSAGE = "error_message"
OUTCOME = "outcome"
STAGE = "stage"
CONCERN = "concern"

# Dependency failure fields.
OPERATION = "operation"
EXCEPTION_TYPE = "exception_type"

# Common process-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
