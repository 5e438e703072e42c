"""HTTP status resolution for error chains."""

from __future__ import annotations

from typing import Final

from packages.faultline.errors.node import ErrorNode
from packages.faultline.errors.types import ErrorCategory, ErrorClass

HTTP_OK: Final[int] = 200
HTTP_INTERNAL_SERVER_ERROR: Final[int] = 500

CLASS_STATUS: Final[dict[ErrorClass, int]] = {
    ErrorClass.VALIDATION: 400,
    ErrorClass.NOT_FOUND: 404,
    ErrorClass.ALREADY_EXISTS: 409,
    ErrorClass.PERMISSION_DENIED: 403,
    ErrorClass.UNAUTHENTICATED: 401,
    ErrorClass.TIMEOUT: 504,
    ErrorClass.CONFLICT: 409,
    ErrorClass.RATE_LIMITED: 429,
    ErrorClass.TEMPORARY: 503,
    ErrorClass.UNAVAILABLE: 503,
    ErrorClass.INTERNAL: 500,
    ErrorClass.CANCELLED: 499,
    ErrorClass.NOT_IMPLEMENTED: 501,
    ErrorClass.SECURITY: 403,
    ErrorClass.CRITICAL: 500,
    ErrorClass.EXTERNAL: 502,
    ErrorClass.DATA_LOSS: 500,
    ErrorClass.RESOURCE_EXHAUSTED: 429,
}

CATEGORY_STATUS: Final[dict[ErrorCategory, int]] = {
    ErrorCategory.USER_INPUT: 400,
    ErrorCategory.AUTH: 401,
    ErrorCategory.NETWORK: 502,
    ErrorCategory.API: 502,
    ErrorCategory.EXTERNAL: 502,
    ErrorCategory.BUSINESS_LOGIC: 422,
    ErrorCategory.PROCESSING: 422,
    ErrorCategory.CACHE: 503,
    ErrorCategory.SECURITY: 403,
    ErrorCategory.PAYMENT: 402,
    ErrorCategory.STORAGE: 507,
}


def http_code(err: BaseException | None) -> int:
    """Return the HTTP status for ``err``.

    The resolved class decides first; an unspecified class falls back to the
    resolved category. ``None`` means success. Anything unmapped, including
    foreign exceptions, is a server error.
    """
    if err is None:
        return HTTP_OK
    if not isinstance(err, ErrorNode):
        return HTTP_INTERNAL_SERVER_ERROR
    error_class = err.error_class
    if error_class is not ErrorClass.UNSPECIFIED:
        return CLASS_STATUS.get(error_class, HTTP_INTERNAL_SERVER_ERROR)
    return CATEGORY_STATUS.get(err.category, HTTP_INTERNAL_SERVER_ERROR)
