"""
Exception hierarchy for motorblinds.

All exceptions inherit from MotorBlindsError, so callers can catch every
library error with a single except clause. Roughly:

1. Setup errors (bad configuration, missing service) stop an accessory
   from starting
2. Input errors are raised to the caller before any device interaction
3. Transport errors are passed through from the device link unchanged
"""

from __future__ import annotations

from typing import Any, Final


class MotorBlindsError(Exception):
    """
    Base exception for all motorblinds errors.

    All library-specific exceptions inherit from this class, allowing
    callers to catch all motorblinds errors with a single except clause.
    """

    pass


class ConfigurationError(MotorBlindsError):
    """
    Invalid per-device configuration.

    Raised when a device context cannot be validated, such as a missing
    name or a value of the wrong type.
    """

    pass


class InvalidArgumentError(MotorBlindsError, ValueError):
    """
    Invalid argument passed by the control plane.

    Raised by set_target_position when the value is not an integer in the
    control-plane range. Nothing is mutated and nothing is sent to the
    device when this is raised.
    """

    def __init__(self, message: str, *, value: Any = None) -> None:
        super().__init__(message)
        self.value = value

    def __str__(self) -> str:
        base = super().__str__()
        if self.value is not None:
            return f"{base} (got {self.value!r})"
        return base


class MissingServiceError(MotorBlindsError):
    """
    Required service is not registered on the platform accessory.

    Raised while registering characteristics. The accessory cannot start
    without its window covering service.
    """

    def __init__(self, service_type: str, accessory_name: str | None = None) -> None:
        self.service_type = service_type
        self.accessory_name = accessory_name
        message = f"Missing service {service_type}"
        if accessory_name:
            message = f"{message} on accessory {accessory_name!r}"
        super().__init__(message)


class NotRegisteredError(MotorBlindsError):
    """
    Accessory used before its characteristics were registered.

    Raised by the read/write surface when called before start() or
    register_characteristics().
    """

    pass


class TransportError(MotorBlindsError):
    """
    Transport-level error.

    Raised for device link issues:
    - Socket or connection failures
    - Writes to a closed transport
    - Malformed responses from the device
    """

    pass


class DeviceError(TransportError):
    """
    Error payload reported by the device link.

    tinytuya reports failures as a payload carrying an "Err" code instead
    of raising. The error_code attribute keeps that code for debugging.
    """

    def __init__(self, error_code: int, message: str | None = None) -> None:
        self.error_code = error_code
        self.message = message or ERROR_MESSAGES.get(error_code, "Unknown error")
        super().__init__(f"Device error {error_code}: {self.message}")


# tinytuya error codes
ERROR_MESSAGES: Final[dict[int, str]] = {
    900: "Invalid JSON response from device",
    901: "Network error: unable to connect",
    902: "Timeout waiting for device",
    903: "Specified value out of range",
    904: "Unexpected payload from device",
    905: "Network error: device unreachable",
    906: "Device in unknown state",
    907: "Function not supported by device",
    908: "Device22 detected: retry command",
    909: "Missing cloud key and secret",
    910: "Invalid cloud response",
    911: "Unable to get cloud token",
    912: "Missing function parameters",
    913: "Error response from cloud",
    914: "Check device key or version",
}


def raise_for_payload(payload: Any) -> None:
    """
    Raise DeviceError if a tinytuya response payload reports an error.

    Args:
        payload: Value returned by a tinytuya call (dict, None, ...).

    Raises:
        DeviceError: If the payload is a dict carrying an "Err" or "Error" key.
    """
    if not isinstance(payload, dict) or ("Err" not in payload and "Error" not in payload):
        return

    try:
        code = int(payload.get("Err", 0))
    except (TypeError, ValueError):
        code = 0
    raise DeviceError(code, payload.get("Error"))
