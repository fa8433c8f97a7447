"""
Protocol layer for motor blind data points.

This module contains the device-facing conventions:
- Default data point identifiers and command literals
- Position constants for device and control-plane space
- Position conversion between the two spaces
- Tuya local protocol defaults
"""

from motorblinds.protocol.constants import (
    BlindsCommand,
    BlindsState,
    DefaultDatapoint,
    PositionConstants,
    TuyaConstants,
)
from motorblinds.protocol.position import coerce_position, convert_position

__all__ = [
    # Constants
    "DefaultDatapoint",
    "BlindsCommand",
    "BlindsState",
    "PositionConstants",
    "TuyaConstants",
    # Position conversion
    "convert_position",
    "coerce_position",
]
