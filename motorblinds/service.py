"""
Control-plane surface: characteristics, services and platform accessories.

The host talks to an accessory through characteristics. Reads and writes
go through handlers bound with on_get()/on_set(); values changed by the
device are pushed with update_value(), which notifies every listener
registered with subscribe().
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any, ClassVar

from motorblinds.models.records import Category, PositionState

logger = logging.getLogger(__name__)

GetHandler = Callable[[], Any]
SetHandler = Callable[[Any], Any]
ValueListener = Callable[[Any, Any], None]


class Characteristic:
    """
    A single readable and optionally writable value of a service.

    Example:
        >>> c = Characteristic("CurrentPosition", 0)
        >>> unsubscribe = c.subscribe(lambda ch, value: print(ch.name, value))
        >>> c.update_value(40)
        CurrentPosition 40
        Characteristic(name='CurrentPosition', value=40)
    """

    def __init__(self, name: str, value: Any = None) -> None:
        self._name = name
        self._value = value
        self._get_handler: GetHandler | None = None
        self._set_handler: SetHandler | None = None
        self._listeners: list[ValueListener] = []

    @property
    def name(self) -> str:
        """Get the characteristic name."""
        return self._name

    @property
    def value(self) -> Any:
        """Get the last known value."""
        return self._value

    @property
    def writable(self) -> bool:
        """Check if a set handler is bound."""
        return self._set_handler is not None

    def update_value(self, value: Any) -> Characteristic:
        """
        Store a new value and push it to all listeners.

        Returns:
            self, for chaining.
        """
        self._value = value
        for listener in list(self._listeners):
            listener(self, value)
        return self

    def on_get(self, handler: GetHandler) -> Characteristic:
        """Bind the handler answering host reads."""
        self._get_handler = handler
        return self

    def on_set(self, handler: SetHandler) -> Characteristic:
        """Bind the handler applying host writes."""
        self._set_handler = handler
        return self

    def subscribe(self, listener: ValueListener) -> Callable[[], None]:
        """
        Register a listener for pushed values.

        Returns:
            Callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def handle_get(self) -> Any:
        """Answer a host read."""
        if self._get_handler is not None:
            self._value = self._get_handler()
        return self._value

    async def handle_set(self, value: Any) -> None:
        """
        Apply a host write.

        The stored value only changes once the set handler has succeeded.
        A handler returning a value (such as the normalised position)
        stores that instead of the raw host value.

        Raises:
            PermissionError: If the characteristic is read-only.
        """
        if self._set_handler is None:
            raise PermissionError(f"Characteristic {self._name} is read-only")

        result = self._set_handler(value)
        if inspect.isawaitable(result):
            result = await result
        self._value = value if result is None else result

    def __repr__(self) -> str:
        return f"Characteristic(name={self._name!r}, value={self._value!r})"


class Service:
    """A named group of characteristics."""

    SERVICE_TYPE: ClassVar[str] = "Service"

    def __init__(self, name: str) -> None:
        self._characteristics: dict[str, Characteristic] = {}
        self.add_characteristic(Characteristic("Name", name))

    @property
    def service_type(self) -> str:
        """Get the service type identifier."""
        return self.SERVICE_TYPE

    @property
    def name(self) -> str:
        """Get the display name."""
        return self.get_characteristic("Name").value

    def set_name(self, name: str) -> None:
        """Change the display name."""
        self.get_characteristic("Name").update_value(name)

    @property
    def characteristics(self) -> list[Characteristic]:
        """Get all characteristics."""
        return list(self._characteristics.values())

    def add_characteristic(self, characteristic: Characteristic) -> Characteristic:
        """Add a characteristic, replacing one with the same name."""
        self._characteristics[characteristic.name] = characteristic
        return characteristic

    def get_characteristic(self, name: str) -> Characteristic:
        """
        Get a characteristic by name.

        Raises:
            KeyError: If the service has no such characteristic.
        """
        return self._characteristics[name]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class WindowCoveringService(Service):
    """
    Window covering service.

    Positions are percent open (100 = fully open, 0 = fully closed).
    """

    SERVICE_TYPE: ClassVar[str] = "WindowCovering"

    CURRENT_POSITION: ClassVar[str] = "CurrentPosition"
    TARGET_POSITION: ClassVar[str] = "TargetPosition"
    POSITION_STATE: ClassVar[str] = "PositionState"

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.add_characteristic(Characteristic(self.CURRENT_POSITION, 0))
        self.add_characteristic(Characteristic(self.TARGET_POSITION, 0))
        self.add_characteristic(Characteristic(self.POSITION_STATE, PositionState.STOPPED))

    @property
    def current_position(self) -> Characteristic:
        return self.get_characteristic(self.CURRENT_POSITION)

    @property
    def target_position(self) -> Characteristic:
        return self.get_characteristic(self.TARGET_POSITION)

    @property
    def position_state(self) -> Characteristic:
        return self.get_characteristic(self.POSITION_STATE)


class PlatformAccessory:
    """
    Host-side accessory holding the registered services.

    Example:
        >>> accessory = PlatformAccessory("Bedroom", Category.WINDOW_COVERING)
        >>> service = accessory.add_service(WindowCoveringService("Bedroom"))
        >>> accessory.get_service(WindowCoveringService.SERVICE_TYPE) is service
        True
    """

    def __init__(self, display_name: str, category: Category = Category.OTHER) -> None:
        self._display_name = display_name
        self._category = category
        self._services: list[Service] = []

    @property
    def display_name(self) -> str:
        """Get the accessory display name."""
        return self._display_name

    @property
    def category(self) -> Category:
        """Get the accessory category."""
        return self._category

    @property
    def services(self) -> list[Service]:
        """Get all registered services."""
        return list(self._services)

    def add_service(self, service: Service) -> Service:
        """Register a service."""
        self._services.append(service)
        logger.debug("Added %s service to %s", service.service_type, self._display_name)
        return service

    def get_service(self, service_type: str) -> Service | None:
        """
        Look up a registered service by type.

        Returns:
            The first service of that type, or None.
        """
        for service in self._services:
            if service.service_type == service_type:
                return service
        return None

    def __repr__(self) -> str:
        return (
            f"PlatformAccessory(name={self._display_name!r}, "
            f"category={self._category.name}, services={len(self._services)})"
        )
