"""
Command dispatch from the control plane to the device.

A target position written by the control plane becomes one combined
device write: the command DP set to the open literal plus the position
target DP set to the device-space position. The device treats "open"
with a position as "go to this position", so the same literal is sent
whichever way the covering has to move.
"""

from __future__ import annotations

import logging
import numbers
from typing import TYPE_CHECKING, Any

from motorblinds.exceptions import InvalidArgumentError
from motorblinds.protocol.constants import PositionConstants
from motorblinds.protocol.position import convert_position

if TYPE_CHECKING:
    from motorblinds.engine import StateSyncEngine
    from motorblinds.models.records import DatapointConfig
    from motorblinds.transport.abc import AbstractDeviceTransport


def validate_target_position(value: Any) -> int:
    """
    Validate a control-plane target position.

    Args:
        value: Value written by the control plane.

    Returns:
        The value as an int.

    Raises:
        InvalidArgumentError: If the value is not an integer in 0-100.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidArgumentError("Expected target position to be a number", value=value)

    if isinstance(value, numbers.Integral):
        position = int(value)
    elif float(value).is_integer():
        position = int(value)
    else:
        raise InvalidArgumentError("Expected target position to be an integer", value=value)

    if not PositionConstants.MIN <= position <= PositionConstants.MAX:
        raise InvalidArgumentError(
            f"Target position must be {PositionConstants.MIN}-{PositionConstants.MAX}",
            value=value,
        )
    return position


class CommandDispatcher:
    """
    Turns target position writes into device commands.

    The local target is updated before the device is contacted and is not
    rolled back if the write fails. Failures from the transport propagate
    to the caller unchanged.
    """

    def __init__(
        self,
        engine: StateSyncEngine,
        transport: AbstractDeviceTransport,
        config: DatapointConfig,
        *,
        name: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self._engine = engine
        self._transport = transport
        self._config = config
        self._name = name
        self._logger = logger if logger is not None else logging.getLogger(__name__)

    def build_command(self, position: int) -> dict[str, Any]:
        """
        Build the device payload for a control-plane target position.

        Args:
            position: Validated target position in control-plane space.

        Returns:
            DP payload keyed by DP identifier string.
        """
        return {
            self._config.command_key: self._config.cmd_open,
            self._config.position_target_key: convert_position(position),
        }

    async def set_target_position(self, value: Any) -> int:
        """
        Move the covering to a control-plane target position.

        Args:
            value: Target position (0-100, 100 = fully open).

        Returns:
            The validated target position.

        Raises:
            InvalidArgumentError: If value is not an integer in 0-100.
            TransportError: If the device write fails.
        """
        position = validate_target_position(value)
        self._logger.info("MotorBlinds %s position target set to %d", self._name, position)

        self._engine.set_target_position(position)

        dps = self.build_command(position)
        self._logger.debug("MotorBlinds %s sending %r", self._name, dps)
        try:
            await self._transport.set_multi_state(dps)
        except Exception:
            self._logger.error("MotorBlinds %s failed to send %r", self._name, dps)
            raise
        return position
