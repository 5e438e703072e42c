"""Low-overhead error nodes for hot paths.

Light nodes share the chain semantics of ``ErrorNode`` but never capture a
stack, never get a generated id and carry no timestamp. A ``stack_trace``
directive passed to them is accepted and ignored.
"""

from __future__ import annotations

from typing import Any, ClassVar

from packages.faultline.errors.node import ErrorNode, build


class LightError(ErrorNode):
    light: ClassVar[bool] = True


def new_light(message: Any = "", *args: Any) -> LightError:
    return build(LightError, message, None, args)  # type: ignore[return-value]


def wrap_light(cause: BaseException | None, message: Any = "", *args: Any) -> LightError:
    """Wrap ``cause`` with a light node; ``None`` yields a causeless node."""
    return build(LightError, message, cause, args)  # type: ignore[return-value]
