"""
Configuration resolution for motor blind accessories.

Each device may override the DP identifiers and command literals in its
configuration block. Overrides that are missing or unusable fall back to
the defaults in motorblinds.protocol.constants:

    >>> config = resolve_datapoint_config({"name": "Kitchen", "dpCommand": "101"})
    >>> config.dp_command, config.dp_position_target
    (101, 2)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from motorblinds.exceptions import ConfigurationError
from motorblinds.models.records import DatapointConfig, DeviceContext
from motorblinds.protocol.constants import BlindsCommand, DefaultDatapoint

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_custom_dp(value: Any) -> int | None:
    """
    Parse a custom DP identifier from configuration.

    Args:
        value: Raw configuration value (int, float, numeric string, None).

    Returns:
        The leading integer of the value if it is greater than zero,
        otherwise None. Trailing text is ignored, so "1e3" gives 1.

    Example:
        >>> parse_custom_dp("7")
        7
        >>> parse_custom_dp(0) is None
        True
    """
    if value is None or isinstance(value, bool):
        return None

    match = _LEADING_INT.match(str(value))
    if match is None:
        return None

    dp = int(match.group(1))
    return dp if dp > 0 else None


def _resolve_command(value: Any, default: BlindsCommand) -> str:
    if not value:
        return default.value
    return str(value).strip()


def load_context(context: DeviceContext | Mapping[str, Any]) -> DeviceContext:
    """
    Validate a device configuration block.

    Args:
        context: A DeviceContext or a mapping using host configuration keys.

    Returns:
        The validated DeviceContext.

    Raises:
        ConfigurationError: If the block cannot be validated.
    """
    if isinstance(context, DeviceContext):
        return context

    try:
        return DeviceContext.model_validate(dict(context))
    except (TypeError, ValueError, ValidationError) as e:
        raise ConfigurationError(f"Invalid device configuration: {e}") from e


def resolve_datapoint_config(context: DeviceContext | Mapping[str, Any]) -> DatapointConfig:
    """
    Resolve DP identifiers and command literals for one device.

    DP overrides fall back to their default when absent or not a positive
    number. Command overrides fall back to their default when absent or
    empty; provided values are converted to str and stripped.

    Args:
        context: Device configuration block.

    Returns:
        Immutable DatapointConfig.

    Raises:
        ConfigurationError: If the block cannot be validated.
    """
    ctx = load_context(context)

    config = DatapointConfig(
        dp_command=parse_custom_dp(ctx.dp_command) or int(DefaultDatapoint.COMMAND),
        dp_position_target=(
            parse_custom_dp(ctx.dp_position_target) or int(DefaultDatapoint.POSITION_TARGET)
        ),
        dp_position_status=(
            parse_custom_dp(ctx.dp_position_status) or int(DefaultDatapoint.POSITION_STATUS)
        ),
        dp_state=parse_custom_dp(ctx.dp_state) or int(DefaultDatapoint.STATE),
        cmd_open=_resolve_command(ctx.cmd_open, BlindsCommand.OPEN),
        cmd_close=_resolve_command(ctx.cmd_close, BlindsCommand.CLOSE),
        cmd_stop=_resolve_command(ctx.cmd_stop, BlindsCommand.STOP),
    )
    logger.debug("Resolved datapoints for %s: %r", ctx.name, config)
    return config
