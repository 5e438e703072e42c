"""Exception normalization into native error nodes."""

from __future__ import annotations

from packages.faultline.errors.light import wrap_light
from packages.faultline.errors.node import ErrorNode, wrap
from packages.faultline.errors.options import retryable
from packages.faultline.errors.types import ErrorClass


def from_exception(exc: BaseException, *, light: bool = False) -> ErrorNode:
    """Normalize a Python exception into an ``ErrorNode`` wrapping it.

    The mapping is conservative and generic. Callers can layer domain
    specific normalization before falling back to this function. The node's
    message is empty so ``str()`` renders the original exception text once.
    With ``light=True`` the node gets no id, timestamp or stack, which keeps
    repeated normalization of one exception deterministic.
    """
    if isinstance(exc, ErrorNode):
        return exc

    make = wrap_light if light else wrap

    exception_type = type(exc).__name__

    if isinstance(exc, FileExistsError):
        return make(exc, "", ErrorClass.ALREADY_EXISTS, "exception_type", exception_type)

    if isinstance(exc, PermissionError):
        return make(exc, "", ErrorClass.PERMISSION_DENIED, "exception_type", exception_type)

    if isinstance(exc, TimeoutError):
        return make(exc, "", ErrorClass.TIMEOUT, retryable(), "exception_type", exception_type)

    if isinstance(exc, ConnectionError):
        return make(
            exc, "", ErrorClass.UNAVAILABLE, retryable(), "exception_type", exception_type
        )

    if isinstance(exc, ValueError):
        return make(exc, "", ErrorClass.VALIDATION, "exception_type", exception_type)

    if isinstance(exc, LookupError):
        return make(exc, "", ErrorClass.NOT_FOUND, "exception_type", exception_type)

    if isinstance(exc, NotImplementedError):
        return make(exc, "", ErrorClass.NOT_IMPLEMENTED, "exception_type", exception_type)

    return make(exc, "", ErrorClass.INTERNAL, "exception_type", exception_type)
