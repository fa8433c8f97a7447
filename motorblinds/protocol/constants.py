"""
Data point identifiers, command literals and protocol constants.

Motor blinds built on the Tuya platform expose their state through a small
set of numbered data points (DPs). The identifiers and command literals
below are the values most devices use; any of them can be overridden per
device through its configuration context.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Final


class DefaultDatapoint(IntEnum):
    """
    Default DP identifiers for a motor blind.

    Values are reported by the device as string keys ("1", "2", ...) in
    status and change payloads.
    """

    COMMAND = 1
    """Changes to 'open', 'close' or 'stop' when a command is set."""

    POSITION_TARGET = 2
    """
    Changes to 0-100 when a position is set.

    When the blind is sent fully open or closed by command, this keeps the
    previously set target rather than jumping to 0 or 100.
    """

    POSITION_STATUS = 3
    """Changes to 0-100 when the position is reached."""

    STATE = 7
    """Changes to 'opening' or 'closing' while the blind moves."""


class BlindsCommand(str, Enum):
    """Default command literals carried by the command DP."""

    OPEN = "open"
    CLOSE = "close"
    STOP = "stop"


class BlindsState(str, Enum):
    """Motion literals carried by the state DP."""

    OPENING = "opening"
    CLOSING = "closing"


class PositionConstants:
    """
    Position conventions for both coordinate spaces.

    The device counts percent closed (0 = open, 100 = closed). The control
    plane counts percent open (100 = open, 0 = closed).
    """

    MIN: Final[int] = 0
    MAX: Final[int] = 100

    DEVICE_OPEN: Final[int] = 0
    DEVICE_CLOSED: Final[int] = 100

    CONTROL_OPEN: Final[int] = 100
    CONTROL_CLOSED: Final[int] = 0


class TuyaConstants:
    """
    Tuya local protocol defaults.

    Timing values are in seconds.
    """

    DEFAULT_VERSION: Final[float] = 3.3
    """Protocol version used by most current motor blind firmware."""

    DEFAULT_SOCKET_TIMEOUT: Final[float] = 5.0
    """Socket timeout for status and control calls."""

    HEARTBEAT_INTERVAL: Final[float] = 10.0
    """Idle time after which a heartbeat keeps the socket alive."""

    RECONNECT_DELAY: Final[float] = 5.0
    """Pause before polling again after a listener error."""
