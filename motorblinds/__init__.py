"""
motorblinds - Python library bridging Tuya motor blinds to window covering accessories.

The device reports numbered data points (DPs) in percent-closed space; the
control plane expects a window covering in percent-open space. This
library keeps the two in sync: device change events update the covering
state, and target position writes become device commands.

Example:
    >>> from motorblinds import MotorBlindsAccessory
    >>> from motorblinds.transport import TuyaLocalTransport
    >>>
    >>> async def main():
    ...     transport = TuyaLocalTransport(device_id, "192.168.1.40", local_key)
    ...     accessory = MotorBlindsAccessory(transport, {"name": "Bedroom", "dpState": 7})
    ...     accessory.register_platform_accessory()
    ...     async with accessory:
    ...         print(accessory.get_current_position())
    ...         await accessory.set_target_position(80)
"""

from motorblinds.accessory import MotorBlindsAccessory
from motorblinds.config import parse_custom_dp, resolve_datapoint_config
from motorblinds.dispatcher import CommandDispatcher
from motorblinds.engine import StateSyncEngine, apply_changes
from motorblinds.exceptions import (
    ConfigurationError,
    DeviceError,
    InvalidArgumentError,
    MissingServiceError,
    MotorBlindsError,
    NotRegisteredError,
    TransportError,
)
from motorblinds.models.records import (
    Category,
    DatapointConfig,
    DeviceContext,
    PositionState,
    WindowCoveringState,
)
from motorblinds.protocol.position import convert_position
from motorblinds.service import Characteristic, PlatformAccessory, WindowCoveringService
from motorblinds.transport import AbstractDeviceTransport, MockDeviceTransport, TuyaLocalTransport

__version__ = "0.1.0"
__all__ = [
    # Accessory
    "MotorBlindsAccessory",
    "StateSyncEngine",
    "CommandDispatcher",
    "apply_changes",
    # Configuration
    "resolve_datapoint_config",
    "parse_custom_dp",
    # Position
    "convert_position",
    # Models
    "DeviceContext",
    "DatapointConfig",
    "WindowCoveringState",
    "PositionState",
    "Category",
    # Host surface
    "Characteristic",
    "WindowCoveringService",
    "PlatformAccessory",
    # Exceptions
    "MotorBlindsError",
    "ConfigurationError",
    "InvalidArgumentError",
    "MissingServiceError",
    "NotRegisteredError",
    "TransportError",
    "DeviceError",
    # Transport
    "AbstractDeviceTransport",
    "MockDeviceTransport",
    "TuyaLocalTransport",
    # Version
    "__version__",
]
