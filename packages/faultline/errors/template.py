"""Reusable fixed-arity error factories.

A template binds a message pattern with positional ``{}`` replacement fields
to a set of construction options. The first ``arity`` arguments passed to
``new``/``wrap`` fill the pattern; remaining arguments are ordinary
construction arguments folded after the template's own options.
"""

from __future__ import annotations

import logging
import string
from dataclasses import dataclass
from typing import Any, Sequence

from packages.faultline.errors.node import ErrorNode, build
from packages.faultline.errors.options import Directives, parse_args, retryable
from packages.faultline.errors.types import ErrorCategory, ErrorClass, ErrorSeverity

logger = logging.getLogger(__name__)


def count_placeholders(pattern: str) -> int:
    """Return how many positional arguments ``pattern`` consumes."""
    auto = 0
    highest = -1
    try:
        parsed = list(string.Formatter().parse(pattern))
    except ValueError:
        return 0
    for _, field_name, _, _ in parsed:
        if field_name is None:
            continue
        if field_name == "":
            auto += 1
        elif field_name.isdigit():
            highest = max(highest, int(field_name))
    return max(auto, highest + 1)


@dataclass(frozen=True)
class ErrorTemplate:
    """Immutable ``(pattern, options)`` pair producing error nodes."""

    message_template: str
    options: tuple[Any, ...] = ()

    @property
    def arity(self) -> int:
        return count_placeholders(self.message_template)

    @property
    def error_class(self) -> ErrorClass:
        return self._directives().error_class

    @property
    def category(self) -> ErrorCategory:
        return self._directives().category

    @property
    def severity(self) -> ErrorSeverity:
        return self._directives().severity

    def new(self, *args: Any) -> ErrorNode:
        """Build a root node from the template."""
        return self._build(None, args)

    def wrap(self, cause: BaseException | None, *args: Any) -> ErrorNode:
        """Build a node from the template that wraps ``cause``."""
        return self._build(cause, args)

    def _directives(self) -> Directives:
        return parse_args(self.options)

    def _build(self, cause: BaseException | None, args: Sequence[Any]) -> ErrorNode:
        directives = self._directives()
        arity = self.arity
        if len(args) < arity:
            logger.warning(
                "error template received too few arguments",
                extra={"template": self.message_template, "expected": arity, "received": len(args)},
            )
            return build(ErrorNode, self.message_template, cause, args, directives=directives, template=self)
        message = self._render(args[:arity])
        return build(ErrorNode, message, cause, args[arity:], directives=directives, template=self)

    def _render(self, values: Sequence[Any]) -> str:
        try:
            return self.message_template.format(*values)
        except (IndexError, KeyError, ValueError, AttributeError) as exc:
            logger.warning(
                "error template could not be formatted",
                extra={"template": self.message_template, "reason": str(exc)},
            )
            return self.message_template


def new_template(message_template: str, *options: Any) -> ErrorTemplate:
    """Create a template from a pattern and construction options."""
    return ErrorTemplate(message_template=message_template, options=tuple(options))


VALIDATION_ERROR = new_template(
    "failed validation: {}", ErrorClass.VALIDATION, ErrorCategory.USER_INPUT, ErrorSeverity.LOW
)
NOT_FOUND_ERROR = new_template("{} not found", ErrorClass.NOT_FOUND, ErrorSeverity.MEDIUM)
ALREADY_EXISTS_ERROR = new_template(
    "already exists: {}", ErrorClass.ALREADY_EXISTS, ErrorSeverity.MEDIUM
)
PERMISSION_DENIED_ERROR = new_template(
    "permission denied: {}", ErrorClass.PERMISSION_DENIED, ErrorCategory.AUTH, ErrorSeverity.HIGH
)
UNAUTHENTICATED_ERROR = new_template(
    "authentication failed: {}",
    ErrorClass.UNAUTHENTICATED,
    ErrorCategory.AUTH,
    ErrorSeverity.MEDIUM,
)
TIMEOUT_ERROR = new_template(
    "operation timeout: {}", ErrorClass.TIMEOUT, ErrorSeverity.LOW, retryable()
)
CONFLICT_ERROR = new_template("conflict: {}", ErrorClass.CONFLICT, ErrorSeverity.MEDIUM)
RATE_LIMITED_ERROR = new_template(
    "rate limit exceeded: {}", ErrorClass.RATE_LIMITED, ErrorSeverity.LOW, retryable()
)
INTERNAL_ERROR = new_template("internal error: {}", ErrorClass.INTERNAL, ErrorSeverity.HIGH)
DATABASE_ERROR = new_template("database error: {}", ErrorCategory.DATABASE, ErrorSeverity.HIGH)
NETWORK_ERROR = new_template(
    "network error: {}", ErrorCategory.NETWORK, ErrorSeverity.MEDIUM, retryable()
)
EXTERNAL_ERROR = new_template(
    "external error: {}",
    ErrorClass.EXTERNAL,
    ErrorCategory.EXTERNAL,
    ErrorSeverity.MEDIUM,
    retryable(),
)
SECURITY_ERROR = new_template(
    "security violation: {}",
    ErrorClass.SECURITY,
    ErrorCategory.SECURITY,
    ErrorSeverity.CRITICAL,
)
UNAVAILABLE_ERROR = new_template(
    "service unavailable: {}", ErrorClass.UNAVAILABLE, ErrorSeverity.HIGH, retryable()
)
NOT_IMPLEMENTED_ERROR = new_template(
    "not implemented: {}", ErrorClass.NOT_IMPLEMENTED, ErrorSeverity.MEDIUM
)
