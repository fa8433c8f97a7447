"""
Abstract transport interface for motor blind devices.

This module defines the abstract base class for all transport
implementations. Transports own the connection to one device and expose
its data points (DPs) as plain mappings.

The transport layer is responsible for:
- Opening/closing the device connection
- Reading the current DP snapshot
- Writing several DPs in one command
- Pushing DP change events to subscribers

Implementations:
- TuyaLocalTransport: Tuya local protocol via tinytuya
- MockDeviceTransport: For testing without hardware
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[dict[str, Any]], None]


class AbstractDeviceTransport(ABC):
    """
    Abstract base class for device transports.

    Transports provide async read/write operations on a device's DPs and a
    push subscription for DP changes. Subscribers are called synchronously,
    one event at a time, in registration order.

    Transports support async context manager protocol for safe resource
    management:

        async with TuyaLocalTransport(device_id, address, local_key) as transport:
            dps = await transport.get_state()
            await transport.set_multi_state({"1": "open", "2": 20})

    Attributes:
        is_open: Whether the transport connection is currently open.
        device_id: Identifier of the device.
        name: Human readable device name.
    """

    def __init__(self) -> None:
        self._handlers: list[ChangeHandler] = []

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """
        Check if the transport connection is currently open.

        Returns:
            True if connected and ready for I/O, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def device_id(self) -> str:
        """
        Get the device identifier.

        Returns:
            Identifier string (e.g., Tuya device id).
        """
        ...

    @property
    def name(self) -> str:
        """Get the device name (defaults to the device id)."""
        return self.device_id

    @abstractmethod
    async def open(self) -> None:
        """
        Open the transport connection.

        Raises:
            TransportError: If the connection cannot be established or is
                already open.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """
        Close the transport connection.

        Safe to call multiple times (idempotent). After closing, the
        transport can be reopened with open().
        """
        ...

    @abstractmethod
    async def get_state(self) -> dict[str, Any]:
        """
        Read the current DP snapshot.

        Returns:
            Mapping of DP identifier string to raw value.

        Raises:
            TransportError: If the transport is not open or the read fails.
        """
        ...

    @abstractmethod
    async def set_multi_state(self, dps: Mapping[str, Any]) -> None:
        """
        Write several DPs in a single device command.

        Args:
            dps: Mapping of DP identifier string to new raw value.

        Raises:
            TransportError: If the transport is not open or the write fails.
        """
        ...

    def subscribe(self, handler: ChangeHandler) -> Callable[[], None]:
        """
        Register a handler for DP change events.

        Args:
            handler: Called with the changed DPs of each event.

        Returns:
            Callable that removes the handler again.
        """
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def _emit_change(self, changes: Mapping[Any, Any]) -> None:
        """
        Deliver a change event to all subscribers.

        Keys are normalised to DP identifier strings. Empty events are
        dropped.
        """
        dps = {str(dp): value for dp, value in changes.items()}
        if not dps:
            return

        logger.debug("Device %s changed: %r", self.name, dps)
        for handler in list(self._handlers):
            handler(dps)

    async def __aenter__(self) -> AbstractDeviceTransport:
        """Async context manager entry - opens the transport."""
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit - closes the transport."""
        await self.close()
