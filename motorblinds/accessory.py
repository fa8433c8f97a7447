"""
Motor blinds accessory.

This module ties a device transport to a window covering service:

    device  -> change event -> StateSyncEngine -> characteristics -> host
    host    -> TargetPosition write -> CommandDispatcher -> device

Lifecycle:
    register_platform_accessory()   adds the WindowCovering service
    start()                         opens the transport, reads the DP
                                    snapshot and registers characteristics
    stop()                          unsubscribes and closes the transport

Example:
    >>> from motorblinds import MotorBlindsAccessory
    >>> from motorblinds.transport import TuyaLocalTransport
    >>>
    >>> async def main():
    ...     transport = TuyaLocalTransport(device_id, "192.168.1.40", local_key)
    ...     accessory = MotorBlindsAccessory(transport, {"name": "Bedroom"})
    ...     accessory.register_platform_accessory()
    ...     async with accessory:
    ...         await accessory.set_target_position(80)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from motorblinds.config import load_context, resolve_datapoint_config
from motorblinds.dispatcher import CommandDispatcher
from motorblinds.engine import StateSyncEngine
from motorblinds.exceptions import MissingServiceError, NotRegisteredError
from motorblinds.models.records import Category, PositionState, WindowCoveringState
from motorblinds.service import PlatformAccessory, WindowCoveringService

if TYPE_CHECKING:
    from motorblinds.models.records import DatapointConfig, DeviceContext
    from motorblinds.transport.abc import AbstractDeviceTransport

# Module logger
logger = logging.getLogger(__name__)


class MotorBlindsAccessory:
    """
    Window covering accessory for a Tuya motor blind.

    The accessory exposes current position, target position and position
    state to the host. Reads answer from memory and never touch the device.

    Attributes:
        device: The device transport.
        context: Validated device configuration.
        config: Resolved DP identifiers and command literals.
        platform_accessory: Host-side accessory holding the service.
        state: Current WindowCoveringState (after registration).
    """

    def __init__(
        self,
        device: AbstractDeviceTransport,
        context: DeviceContext | Mapping[str, Any],
        platform_accessory: PlatformAccessory | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the accessory.

        Args:
            device: Transport for the physical device.
            context: Device configuration (name and optional overrides).
            platform_accessory: Host accessory to register the service on.
                A new one is created if omitted.
            logger: Logger to use instead of the module logger.

        Raises:
            ConfigurationError: If the context is invalid.
        """
        self._device = device
        self._context = load_context(context)
        self._config = resolve_datapoint_config(self._context)
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._platform_accessory = platform_accessory or PlatformAccessory(
            self._context.name, self.get_category()
        )
        self._engine: StateSyncEngine | None = None
        self._dispatcher: CommandDispatcher | None = None
        self._service: WindowCoveringService | None = None
        self._unsubscribers: list[Callable[[], None]] = []

    @staticmethod
    def get_category() -> Category:
        """Get the accessory category."""
        return Category.WINDOW_COVERING

    @property
    def name(self) -> str:
        """Get the accessory name."""
        return self._context.name

    @property
    def device(self) -> AbstractDeviceTransport:
        """Get the device transport."""
        return self._device

    @property
    def context(self) -> DeviceContext:
        """Get the device configuration."""
        return self._context

    @property
    def config(self) -> DatapointConfig:
        """Get the resolved DP configuration."""
        return self._config

    @property
    def platform_accessory(self) -> PlatformAccessory:
        """Get the host accessory."""
        return self._platform_accessory

    @property
    def is_registered(self) -> bool:
        """Check if characteristics have been registered."""
        return self._engine is not None

    @property
    def state(self) -> WindowCoveringState:
        """Get the current state."""
        return self._require_engine().state

    def register_platform_accessory(self) -> WindowCoveringService:
        """
        Add the window covering service to the host accessory.

        Returns:
            The registered service.
        """
        service = WindowCoveringService(self._context.name)
        self._platform_accessory.add_service(service)
        return service

    def register_characteristics(self, dps: Mapping[Any, Any]) -> None:
        """
        Wire the window covering service to the device.

        Args:
            dps: DP snapshot reported by the device on connect.

        Raises:
            MissingServiceError: If no window covering service is registered.
        """
        service = self._platform_accessory.get_service(WindowCoveringService.SERVICE_TYPE)
        if not isinstance(service, WindowCoveringService):
            raise MissingServiceError(WindowCoveringService.SERVICE_TYPE, self._context.name)

        self._check_service_name(service)
        self._unsubscribe_all()

        snapshot = {str(dp): value for dp, value in dps.items()}
        engine = StateSyncEngine(
            self._config,
            snapshot.get(self._config.position_status_key),
            name=self._context.name,
            logger=self._logger,
        )
        self._engine = engine
        self._service = service
        self._dispatcher = CommandDispatcher(
            engine,
            self._device,
            self._config,
            name=self._context.name,
            logger=self._logger,
        )

        state = engine.state
        service.current_position.update_value(state.current_position).on_get(
            self.get_current_position
        )
        service.target_position.update_value(state.target_position).on_get(
            self.get_target_position
        ).on_set(self.set_target_position)
        service.position_state.update_value(state.position_state).on_get(
            self.get_position_state
        )

        self._unsubscribers.append(engine.subscribe(self._push_state))
        self._unsubscribers.append(self._device.subscribe(engine.handle_changes))
        self._logger.info("MotorBlinds %s registered: %s", self._context.name, state)

    async def start(self) -> None:
        """
        Connect to the device and register characteristics.

        Opens the transport if needed and reads the DP snapshot used to
        initialise the state.

        Raises:
            MissingServiceError: If no window covering service is registered.
            TransportError: If the device cannot be reached.
        """
        if not self._device.is_open:
            self._logger.debug("Opening transport for %s", self._context.name)
            await self._device.open()

        dps = await self._device.get_state()
        self.register_characteristics(dps)

    async def stop(self) -> None:
        """Stop receiving device events and close the transport."""
        self._unsubscribe_all()
        if self._device.is_open:
            await self._device.close()
        self._logger.debug("MotorBlinds %s stopped", self._context.name)

    def get_current_position(self) -> int:
        """Get the current position (100 = fully open)."""
        return self._require_engine().state.current_position

    def get_target_position(self) -> int:
        """Get the target position (100 = fully open)."""
        return self._require_engine().state.target_position

    def get_position_state(self) -> PositionState:
        """Get the motion state."""
        return self._require_engine().state.position_state

    async def set_target_position(self, value: Any) -> int:
        """
        Move the covering to a target position.

        Args:
            value: Target position (0-100, 100 = fully open).

        Returns:
            The validated target position.

        Raises:
            InvalidArgumentError: If value is not an integer in 0-100.
            NotRegisteredError: If characteristics are not registered.
            TransportError: If the device write fails.
        """
        if self._dispatcher is None:
            raise NotRegisteredError(f"MotorBlinds {self._context.name} is not registered")
        return await self._dispatcher.set_target_position(value)

    def _push_state(self, previous: WindowCoveringState, current: WindowCoveringState) -> None:
        service = self._service
        if service is None:
            return

        if current.current_position != previous.current_position:
            service.current_position.update_value(current.current_position)
        if current.target_position != previous.target_position:
            service.target_position.update_value(current.target_position)
        if current.position_state != previous.position_state:
            service.position_state.update_value(current.position_state)

    def _check_service_name(self, service: WindowCoveringService) -> None:
        if service.name != self._context.name:
            self._logger.info(
                "Renaming service %r to %r", service.name, self._context.name
            )
            service.set_name(self._context.name)

    def _require_engine(self) -> StateSyncEngine:
        if self._engine is None:
            raise NotRegisteredError(f"MotorBlinds {self._context.name} is not registered")
        return self._engine

    def _unsubscribe_all(self) -> None:
        while self._unsubscribers:
            self._unsubscribers.pop()()

    async def __aenter__(self) -> MotorBlindsAccessory:
        """Async context manager entry - starts the accessory."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit - stops the accessory."""
        await self.stop()

    def __repr__(self) -> str:
        state = self._engine.state if self._engine is not None else "unregistered"
        return f"MotorBlindsAccessory(name={self._context.name!r}, {state})"
