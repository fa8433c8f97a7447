"""
Tuya local protocol transport using tinytuya.

This module provides the transport implementation for talking to Tuya
motor blinds on the local network.

tinytuya is a blocking library, so every device call runs in a worker
thread via asyncio.to_thread(). The device socket is kept open
(persistent mode) and is shared by the control calls and the background
listener, so all calls are serialised with an asyncio.Lock.

The listener polls receive() and forwards every "dps" payload to the
change subscribers. When nothing has been received for a while a
heartbeat keeps the device from dropping the connection.

Example:
    >>> transport = TuyaLocalTransport("bf0123456789abcdef", "192.168.1.40", "0123456789abcdef")
    >>> async with transport:
    ...     dps = await transport.get_state()
    ...     await transport.set_multi_state({"1": "open", "2": 20})
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import tinytuya

from motorblinds.config import load_context
from motorblinds.exceptions import ConfigurationError, TransportError, raise_for_payload
from motorblinds.models.records import DeviceContext
from motorblinds.protocol.constants import TuyaConstants
from motorblinds.transport.abc import AbstractDeviceTransport

logger = logging.getLogger(__name__)


class TuyaLocalTransport(AbstractDeviceTransport):
    """
    Async transport for a single Tuya device.

    Attributes:
        address: Device IP address.
        version: Tuya protocol version.
        is_listening: Whether the background listener is running.

    Example:
        >>> transport = TuyaLocalTransport(
        ...     "bf0123456789abcdef", "192.168.1.40", "0123456789abcdef", version=3.3
        ... )
        >>> unsubscribe = transport.subscribe(print)
        >>> await transport.open()
    """

    def __init__(
        self,
        device_id: str,
        address: str,
        local_key: str,
        version: float = TuyaConstants.DEFAULT_VERSION,
        *,
        name: str | None = None,
        timeout: float = TuyaConstants.DEFAULT_SOCKET_TIMEOUT,
        heartbeat_interval: float = TuyaConstants.HEARTBEAT_INTERVAL,
        reconnect_delay: float = TuyaConstants.RECONNECT_DELAY,
        listen: bool = True,
        device: Any = None,
    ) -> None:
        """
        Initialize the Tuya transport.

        Args:
            device_id: Tuya device id.
            address: Device IP address.
            local_key: Tuya local key.
            version: Protocol version (3.1, 3.3, 3.4, ...).
            name: Display name used in logs (defaults to device_id).
            timeout: Socket timeout in seconds.
            heartbeat_interval: Idle seconds before a heartbeat is sent.
            reconnect_delay: Pause in seconds after a listener error.
            listen: Start the background listener on open().
            device: Pre-built tinytuya device (created on open() if None).
        """
        super().__init__()
        self._device_id = device_id
        self._address = address
        self._local_key = local_key
        self._version = version
        self._name = name or device_id
        self._timeout = timeout
        self._heartbeat_interval = heartbeat_interval
        self._reconnect_delay = reconnect_delay
        self._listen = listen
        self._device = device
        self._is_open = False
        self._lock = asyncio.Lock()
        self._listener: asyncio.Task[None] | None = None
        self._last_traffic = 0.0

    @classmethod
    def from_context(
        cls, context: DeviceContext | Mapping[str, Any], **kwargs: Any
    ) -> TuyaLocalTransport:
        """
        Create a transport from a device configuration block.

        Args:
            context: DeviceContext or mapping with ``id``, ``ip``, ``key``
                and optionally ``version``.
            **kwargs: Extra keyword arguments for the constructor.

        Raises:
            ConfigurationError: If the block is invalid or lacks id, ip or key.

        Example:
            >>> transport = TuyaLocalTransport.from_context(
            ...     {"name": "Bedroom", "id": "bf01", "ip": "192.168.1.40", "key": "0123"}
            ... )
        """
        ctx = load_context(context)

        missing = [field for field in ("id", "ip", "key") if not getattr(ctx, field)]
        if missing:
            raise ConfigurationError(
                f"Device {ctx.name} is missing {', '.join(missing)} for the Tuya transport"
            )

        kwargs.setdefault("name", ctx.name)
        return cls(
            ctx.id,
            ctx.ip,
            ctx.key,
            ctx.version if ctx.version is not None else TuyaConstants.DEFAULT_VERSION,
            **kwargs,
        )

    @property
    def is_open(self) -> bool:
        """Check if the transport is open."""
        return self._is_open

    @property
    def device_id(self) -> str:
        """Get the Tuya device id."""
        return self._device_id

    @property
    def name(self) -> str:
        """Get the device name."""
        return self._name

    @property
    def address(self) -> str:
        """Get the device address."""
        return self._address

    @property
    def version(self) -> float:
        """Get the protocol version."""
        return self._version

    @property
    def is_listening(self) -> bool:
        """Check if the background listener is running."""
        return self._listener is not None and not self._listener.done()

    async def open(self) -> None:
        """
        Open the device connection and start the listener.

        Raises:
            TransportError: If already open.
        """
        if self._is_open:
            raise TransportError(f"Transport for {self._name} already open")

        if self._device is None:
            self._device = tinytuya.Device(
                dev_id=self._device_id,
                address=self._address,
                local_key=self._local_key,
                version=self._version,
            )
        self._device.set_socketPersistent(True)
        self._device.set_socketTimeout(self._timeout)

        self._is_open = True
        self._last_traffic = asyncio.get_running_loop().time()
        logger.info("Opened Tuya transport for %s at %s", self._name, self._address)

        if self._listen:
            self._listener = asyncio.create_task(
                self._listen_loop(), name=f"tuya-listener-{self._device_id}"
            )

    async def close(self) -> None:
        """Stop the listener and close the device socket."""
        if not self._is_open:
            return

        self._is_open = False
        try:
            if self._listener is not None:
                self._listener.cancel()
                try:
                    await self._listener
                except asyncio.CancelledError:
                    pass
                except Exception:
                    logger.exception("Listener for %s ended with an error", self._name)
        finally:
            self._listener = None
            if self._device is not None:
                async with self._lock:
                    await asyncio.to_thread(self._device.close)
        logger.info("Closed Tuya transport for %s", self._name)

    async def get_state(self) -> dict[str, Any]:
        """
        Read the current DP snapshot from the device.

        Raises:
            TransportError: If not open or the status request fails.
            DeviceError: If the device reports an error payload.
        """
        payload = await self._call(self._device_call("status"))
        raise_for_payload(payload)

        if not isinstance(payload, dict) or not isinstance(payload.get("dps"), dict):
            raise TransportError(f"Unexpected status payload from {self._name}: {payload!r}")

        return {str(dp): value for dp, value in payload["dps"].items()}

    async def set_multi_state(self, dps: Mapping[str, Any]) -> None:
        """
        Write several DPs in one command.

        Raises:
            TransportError: If not open or the write fails.
            DeviceError: If the device reports an error payload.
        """
        data = {str(dp): value for dp, value in dps.items()}
        logger.debug("Sending %r to %s", data, self._name)

        payload = await self._call(self._device_call("set_multiple_values"), data)
        raise_for_payload(payload)

        # Devices often answer a control command with the new DP values
        if isinstance(payload, dict) and isinstance(payload.get("dps"), dict):
            self._emit_change(payload["dps"])

    async def poll_once(self) -> dict[str, Any] | None:
        """
        Receive one pushed update from the device.

        Sends a heartbeat instead when the socket has been idle for longer
        than the heartbeat interval and nothing arrived.

        Returns:
            The changed DPs, or None if nothing usable was received.

        Raises:
            TransportError: If not open or the socket fails.
        """
        payload = await self._call(self._device_call("receive"))
        loop = asyncio.get_running_loop()

        if isinstance(payload, dict) and isinstance(payload.get("dps"), dict):
            self._last_traffic = loop.time()
            dps = {str(dp): value for dp, value in payload["dps"].items()}
            self._emit_change(dps)
            return dps

        if payload is not None:
            raise_for_payload(payload)
            return None

        if loop.time() - self._last_traffic >= self._heartbeat_interval:
            logger.debug("Sending heartbeat to %s", self._name)
            await self._call(self._device_call("heartbeat"), nowait=True)
            self._last_traffic = loop.time()
        return None

    async def _listen_loop(self) -> None:
        while self._is_open:
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except TransportError as e:
                logger.warning("Listener error for %s: %s", self._name, e)
                await asyncio.sleep(self._reconnect_delay)
            except Exception:
                logger.exception("Unexpected listener error for %s", self._name)
                await asyncio.sleep(self._reconnect_delay)

    def _device_call(self, method: str) -> Any:
        if not self._is_open or self._device is None:
            raise TransportError(f"Transport for {self._name} not open")
        return getattr(self._device, method)

    async def _call(self, func: Any, *args: Any, **kwargs: Any) -> Any:
        async with self._lock:
            try:
                return await asyncio.to_thread(func, *args, **kwargs)
            except OSError as e:
                raise TransportError(f"Socket error talking to {self._name}: {e}") from e

    def __repr__(self) -> str:
        return (
            f"TuyaLocalTransport(device_id={self._device_id!r}, address={self._address!r}, "
            f"open={self._is_open})"
        )
