"""
Transport layer for motor blind devices.

This package provides transport implementations for talking to devices
and exchanging data point (DP) payloads with them.

Available transports:
- TuyaLocalTransport: Tuya local protocol using tinytuya
- MockDeviceTransport: Mock transport for testing without hardware

Example:
    >>> from motorblinds.transport import TuyaLocalTransport
    >>> async with TuyaLocalTransport(device_id, "192.168.1.40", local_key) as transport:
    ...     await transport.set_multi_state({"1": "open", "2": 20})

Testing Example:
    >>> from motorblinds.transport import MockDeviceTransport
    >>> mock = MockDeviceTransport(state={"3": 30})
    >>> mock.emit_change({"3": 10})
"""

from motorblinds.transport.abc import AbstractDeviceTransport, ChangeHandler
from motorblinds.transport.mock import MockDeviceTransport
from motorblinds.transport.tuya_local import TuyaLocalTransport

__all__ = [
    "AbstractDeviceTransport",
    "ChangeHandler",
    "MockDeviceTransport",
    "TuyaLocalTransport",
]
