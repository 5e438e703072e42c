"""Canonical log record keys used by the faultline formatters."""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"

# Error payloads.
ERROR = "error"
ERROR_FIELDS = "error_fields"
EXCEPTION = "exception"

# Core keys are never overwritten by context or error fields; colliding
# user keys are emitted with this prefix instead.
CORE_KEYS = frozenset({TIMESTAMP, LEVEL, LOGGER, MESSAGE, ERROR, EXCEPTION})
SHADOWED_KEY_PREFIX = "field_"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
