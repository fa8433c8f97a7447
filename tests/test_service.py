"""Tests for the control-plane surface."""

import pytest

from motorblinds.models.records import Category, PositionState
from motorblinds.service import Characteristic, PlatformAccessory, Service, WindowCoveringService


class TestCharacteristic:
    """Tests for Characteristic class."""

    def test_update_value_notifies(self):
        """Test pushed values reach listeners."""
        characteristic = Characteristic("CurrentPosition", 0)
        seen = []
        characteristic.subscribe(lambda ch, value: seen.append(value))

        assert characteristic.update_value(40) is characteristic
        assert characteristic.value == 40
        assert seen == [40]

    @pytest.mark.asyncio
    async def test_handle_get_uses_handler(self):
        """Test reads go through the bound handler."""
        characteristic = Characteristic("TargetPosition", 0).on_get(lambda: 55)
        assert await characteristic.handle_get() == 55
        assert characteristic.value == 55

    @pytest.mark.asyncio
    async def test_handle_get_without_handler(self):
        """Test reads fall back to the stored value."""
        assert await Characteristic("Name", "Hall").handle_get() == "Hall"

    @pytest.mark.asyncio
    async def test_handle_set_sync_handler(self):
        """Test writes with a plain function handler."""
        received = []
        characteristic = Characteristic("TargetPosition", 0).on_set(received.append)

        await characteristic.handle_set(30)

        assert received == [30]
        assert characteristic.value == 30
        assert characteristic.writable

    @pytest.mark.asyncio
    async def test_handle_set_stores_handler_result(self):
        """Test a value returned by the set handler replaces the raw write."""

        async def normalise(value):
            return int(value)

        characteristic = Characteristic("TargetPosition", 0).on_set(normalise)

        await characteristic.handle_set(40.0)

        assert characteristic.value == 40
        assert type(characteristic.value) is int

    @pytest.mark.asyncio
    async def test_handle_set_failure_keeps_value(self):
        """Test a failing set handler leaves the value unchanged."""

        async def reject(value):
            raise ValueError("nope")

        characteristic = Characteristic("TargetPosition", 10).on_set(reject)
        with pytest.raises(ValueError):
            await characteristic.handle_set(30)
        assert characteristic.value == 10

    @pytest.mark.asyncio
    async def test_read_only(self):
        """Test writes without a handler are refused."""
        with pytest.raises(PermissionError):
            await Characteristic("CurrentPosition", 0).handle_set(1)


class TestServices:
    """Tests for services and platform accessories."""

    def test_window_covering_characteristics(self):
        """Test the window covering service defaults."""
        service = WindowCoveringService("Bedroom")

        assert service.name == "Bedroom"
        assert service.current_position.value == 0
        assert service.target_position.value == 0
        assert service.position_state.value == PositionState.STOPPED
        assert len(service.characteristics) == 4

    def test_set_name(self):
        """Test renaming a service."""
        service = WindowCoveringService("Bedroom")
        service.set_name("Office")
        assert service.name == "Office"

    def test_unknown_characteristic(self):
        """Test looking up a missing characteristic raises KeyError."""
        with pytest.raises(KeyError):
            WindowCoveringService("Bedroom").get_characteristic("Brightness")

    def test_service_lookup(self):
        """Test services are found by type."""
        accessory = PlatformAccessory("Bedroom", Category.WINDOW_COVERING)
        other = accessory.add_service(Service("Info"))
        covering = accessory.add_service(WindowCoveringService("Bedroom"))

        assert accessory.get_service("WindowCovering") is covering
        assert accessory.get_service("Service") is other
        assert accessory.get_service("Lightbulb") is None
        assert accessory.services == [other, covering]
