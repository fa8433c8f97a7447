"""
Mock transport for testing.

This module provides a mock transport implementation that allows testing
motor blind accessories without a device. DP state can be pre-configured,
change events can be pushed on demand and every write is recorded.

Example:
    >>> from motorblinds.transport import MockDeviceTransport
    >>>
    >>> mock = MockDeviceTransport(state={"3": 30})
    >>> async with mock:
    ...     await mock.set_multi_state({"1": "open", "2": 20})
    ...     mock.emit_change({"3": 20})
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from motorblinds.exceptions import TransportError
from motorblinds.transport.abc import AbstractDeviceTransport


class MockDeviceTransport(AbstractDeviceTransport):
    """
    Mock transport for testing without hardware.

    Writes are merged into the in-memory DP state and recorded for
    verification in tests.

    Attributes:
        written_data: List of all DP payloads written to the transport.
        state: Current in-memory DP state.

    Example:
        >>> mock = MockDeviceTransport(state={"3": 0})
        >>> mock.set_response_callback(lambda dps: {"3": dps["2"]})
        >>>
        >>> async with mock:
        ...     await mock.set_multi_state({"1": "open", "2": 40})
        ...     assert mock.state["3"] == 40
    """

    def __init__(
        self,
        state: Mapping[Any, Any] | None = None,
        device_id: str = "mock-device",
        name: str | None = None,
    ) -> None:
        """
        Initialize the mock transport.

        Args:
            state: Initial DP state.
            device_id: Identifier for the mock device.
            name: Display name (defaults to device_id).
        """
        super().__init__()
        self._device_id = device_id
        self._name = name or device_id
        self._is_open = False
        self._state: dict[str, Any] = {str(dp): value for dp, value in (state or {}).items()}
        self._written_data: list[dict[str, Any]] = []
        self._write_error: BaseException | None = None
        self._response_callback: Callable[[dict[str, Any]], Mapping[Any, Any] | None] | None = None

    @property
    def is_open(self) -> bool:
        """Check if the mock transport is open."""
        return self._is_open

    @property
    def device_id(self) -> str:
        """Get the mock device id."""
        return self._device_id

    @property
    def name(self) -> str:
        """Get the mock device name."""
        return self._name

    @property
    def state(self) -> dict[str, Any]:
        """Get a copy of the current DP state."""
        return dict(self._state)

    @property
    def written_data(self) -> list[dict[str, Any]]:
        """Get all DP payloads written to the transport."""
        return [dict(dps) for dps in self._written_data]

    @property
    def last_written(self) -> dict[str, Any] | None:
        """Get the most recently written DP payload."""
        return dict(self._written_data[-1]) if self._written_data else None

    @property
    def subscriber_count(self) -> int:
        """Get the number of registered change handlers."""
        return len(self._handlers)

    def set_write_error(self, error: BaseException | None) -> None:
        """
        Make subsequent writes fail.

        Args:
            error: Exception raised by set_multi_state (None to clear).
        """
        self._write_error = error

    def set_response_callback(
        self,
        callback: Callable[[dict[str, Any]], Mapping[Any, Any] | None] | None,
    ) -> None:
        """
        Set a callback that turns writes into device change events.

        The callback receives each written payload and returns the DPs the
        device reports back (or None for no event).

        Args:
            callback: Function that takes written DPs and returns changes.
        """
        self._response_callback = callback

    def emit_change(self, changes: Mapping[Any, Any]) -> None:
        """
        Simulate a DP change reported by the device.

        Args:
            changes: Changed DPs mapped to their new raw values.
        """
        self._state.update({str(dp): value for dp, value in changes.items()})
        self._emit_change(changes)

    def clear(self) -> None:
        """Clear written data and any configured write error."""
        self._written_data.clear()
        self._write_error = None

    async def open(self) -> None:
        """Open the mock transport."""
        if self._is_open:
            raise TransportError("Mock transport already open")
        self._is_open = True

    async def close(self) -> None:
        """Close the mock transport."""
        self._is_open = False

    async def get_state(self) -> dict[str, Any]:
        """
        Read the in-memory DP state.

        Raises:
            TransportError: If transport is not open.
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")
        return dict(self._state)

    async def set_multi_state(self, dps: Mapping[str, Any]) -> None:
        """
        Record a DP write.

        Records the payload, merges it into the DP state and optionally
        triggers the response callback.

        Raises:
            TransportError: If transport is not open.
            BaseException: The error configured with set_write_error().
        """
        if not self._is_open:
            raise TransportError("Mock transport not open")

        payload = {str(dp): value for dp, value in dps.items()}
        self._written_data.append(payload)

        if self._write_error is not None:
            raise self._write_error

        self._state.update(payload)

        if self._response_callback:
            changes = self._response_callback(dict(payload))
            if changes:
                self.emit_change(changes)

    def assert_written(self, expected: Mapping[Any, Any], index: int = -1) -> None:
        """
        Assert that a specific DP payload was written.

        Args:
            expected: Expected DPs (keys compared as strings).
            index: Index in written_data list (-1 for last).

        Raises:
            AssertionError: If the payload doesn't match.
        """
        if not self._written_data:
            raise AssertionError("No data written to mock transport")

        actual = self._written_data[index]
        wanted = {str(dp): value for dp, value in expected.items()}
        if actual != wanted:
            raise AssertionError(f"Written data mismatch: expected {wanted!r}, got {actual!r}")

    def assert_write_count(self, expected: int) -> None:
        """
        Assert number of write operations.

        Raises:
            AssertionError: If count doesn't match.
        """
        actual = len(self._written_data)
        if actual != expected:
            raise AssertionError(f"Write count mismatch: expected {expected}, got {actual}")
