"""Push a settings snapshot into the process-wide defaults."""

from __future__ import annotations

import logging

from packages.faultline import defaults
from packages.faultline.collections.gatherer import get_gatherer
from packages.faultline.stack.config import preset

from .models import FaultlineSettings

logger = logging.getLogger(__name__)


def apply_settings(settings: FaultlineSettings) -> None:
    """Install stack defaults and gatherer state described by ``settings``.

    Logging handlers are left alone; applications configure them through
    ``packages.faultline.logging.configure_logging``.
    """
    stack_config = preset(settings.stack.preset)
    if settings.stack.max_frames is not None:
        stack_config = stack_config.with_max_frames(settings.stack.max_frames)
    stack_config = stack_config.with_sampling_rate(settings.stack.sampling_rate)
    defaults.set_default_stack_trace_config(stack_config)
    defaults.set_auto_capture(settings.stack.auto_capture)

    gatherer = get_gatherer()
    gatherer.set_key_getter(settings.gatherer.key)
    if settings.gatherer.enabled:
        gatherer.enable()
    else:
        gatherer.disable()
    logger.debug(
        "faultline settings applied",
        extra={
            "stack_preset": settings.stack.preset,
            "gatherer_enabled": settings.gatherer.enabled,
        },
    )
