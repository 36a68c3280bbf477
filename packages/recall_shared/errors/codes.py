"""Shared error code constants.

These constants are domain-agnostic and intended for stable machine-readable
handling by callers such as an HTTP routing layer. Component-specific codes
should extend this set locally rather than modifying shared constants.
"""

# Validation
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_ARGUMENT = "INVALID_ARGUMENT"
DIMENSION_MISMATCH = "DIMENSION_MISMATCH"

# Not found
NOT_FOUND = "NOT_FOUND"
RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

# Dependency / external system
DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"
DEPENDENCY_TIMEOUT = "DEPENDENCY_TIMEOUT"
DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"
NOT_CONNECTED = "NOT_CONNECTED"
PROVIDER_FAILURE = "PROVIDER_FAILURE"

# Internal
INTERNAL_ERROR = "INTERNAL_ERROR"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"
