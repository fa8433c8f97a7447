"""
Pydantic models for motor blind configuration and state.

This module defines the core data structures used throughout the library,
implemented as immutable Pydantic models with validation.

Design principles:
- All models are frozen (immutable)
- Positions are validated against the 0-100 range on every transition
- Host configuration keys (camelCase) are accepted as aliases
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from motorblinds.protocol.constants import BlindsCommand, DefaultDatapoint, PositionConstants
from motorblinds.protocol.position import convert_position


class PositionState(IntEnum):
    """Motion indicator exposed to the control plane (HomeKit values)."""

    DECREASING = 0
    """Covering is closing."""

    INCREASING = 1
    """Covering is opening."""

    STOPPED = 2
    """Covering is not moving."""


class Category(IntEnum):
    """Accessory categories understood by the control plane."""

    OTHER = 1
    WINDOW = 13
    WINDOW_COVERING = 14


class DeviceContext(BaseModel):
    """
    Per-device configuration block.

    Mirrors the device entry of the host configuration file. Only ``name``
    is required; every override falls back to a default when absent.

    Example:
        >>> ctx = DeviceContext.model_validate(
        ...     {"name": "Bedroom", "dpPositionStatus": 4, "cmdOpen": " up "}
        ... )
        >>> ctx.dp_position_status
        4
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    name: str = Field(min_length=1, description="Display name of the accessory")
    id: str | None = Field(default=None, description="Tuya device id")
    ip: str | None = Field(default=None, description="Device address on the LAN")
    key: str | None = Field(default=None, description="Tuya local key")
    version: float | None = Field(default=None, description="Tuya protocol version")

    dp_command: Any = Field(default=None, alias="dpCommand")
    dp_position_target: Any = Field(default=None, alias="dpPositionTarget")
    dp_position_status: Any = Field(default=None, alias="dpPositionStatus")
    dp_state: Any = Field(default=None, alias="dpState")

    cmd_open: Any = Field(default=None, alias="cmdOpen")
    cmd_close: Any = Field(default=None, alias="cmdClose")
    cmd_stop: Any = Field(default=None, alias="cmdStop")


class DatapointConfig(BaseModel):
    """
    Resolved DP identifiers and command literals for one device.

    Resolved once when the accessory is built and never changed afterwards.

    Example:
        >>> config = DatapointConfig()
        >>> config.dp_position_status, config.cmd_open
        (3, 'open')
    """

    model_config = ConfigDict(frozen=True)

    dp_command: int = Field(default=int(DefaultDatapoint.COMMAND), gt=0)
    dp_position_target: int = Field(default=int(DefaultDatapoint.POSITION_TARGET), gt=0)
    dp_position_status: int = Field(default=int(DefaultDatapoint.POSITION_STATUS), gt=0)
    dp_state: int = Field(default=int(DefaultDatapoint.STATE), gt=0)

    cmd_open: str = BlindsCommand.OPEN.value
    cmd_close: str = BlindsCommand.CLOSE.value
    cmd_stop: str = BlindsCommand.STOP.value

    @property
    def command_key(self) -> str:
        """Command DP as it appears in device payloads."""
        return str(self.dp_command)

    @property
    def position_target_key(self) -> str:
        """Position target DP as it appears in device payloads."""
        return str(self.dp_position_target)

    @property
    def position_status_key(self) -> str:
        """Position status DP as it appears in device payloads."""
        return str(self.dp_position_status)

    @property
    def state_key(self) -> str:
        """State DP as it appears in device payloads."""
        return str(self.dp_state)

    @classmethod
    def from_context(cls, context: DeviceContext | Mapping[str, Any]) -> DatapointConfig:
        """
        Resolve the configuration from a device context.

        See motorblinds.config.resolve_datapoint_config.
        """
        from motorblinds.config import resolve_datapoint_config

        return resolve_datapoint_config(context)


class WindowCoveringState(BaseModel):
    """
    Control-plane view of the covering.

    Positions are in control-plane space (100 = fully open, 0 = fully
    closed). Instances are immutable; use evolve() to derive the next state.

    Example:
        >>> state = WindowCoveringState.from_device_position(30)
        >>> state.current_position, state.target_position
        (70, 70)
    """

    model_config = ConfigDict(frozen=True)

    current_position: int = Field(ge=PositionConstants.MIN, le=PositionConstants.MAX)
    target_position: int = Field(ge=PositionConstants.MIN, le=PositionConstants.MAX)
    position_state: PositionState = PositionState.STOPPED

    def evolve(self, **changes: Any) -> WindowCoveringState:
        """
        Return a validated copy with the given fields replaced.

        Raises:
            pydantic.ValidationError: If a replaced position is out of range.
        """
        return type(self).model_validate({**self.model_dump(), **changes})

    @classmethod
    def from_device_position(cls, position: int) -> WindowCoveringState:
        """
        Build the initial state from a device-space position.

        Target and current position start out equal and the covering is
        assumed to be stopped.
        """
        converted = convert_position(position)
        return cls(
            current_position=converted,
            target_position=converted,
            position_state=PositionState.STOPPED,
        )

    def __str__(self) -> str:
        return (
            f"current={self.current_position} target={self.target_position} "
            f"state={self.position_state.name}"
        )
