"""Tests for the command dispatcher."""

import pytest
import pytest_asyncio

from motorblinds.dispatcher import CommandDispatcher, validate_target_position
from motorblinds.engine import StateSyncEngine
from motorblinds.exceptions import InvalidArgumentError, TransportError
from motorblinds.models.records import DatapointConfig
from motorblinds.transport.mock import MockDeviceTransport


@pytest.fixture
def config():
    """Create the default DP configuration."""
    return DatapointConfig()


@pytest.fixture
def engine(config):
    """Create an engine for a device reporting position status 30."""
    return StateSyncEngine(config, 30, name="Bedroom")


@pytest_asyncio.fixture
async def transport():
    """Create an open MockDeviceTransport."""
    mock = MockDeviceTransport(state={"3": 30})
    await mock.open()
    yield mock
    await mock.close()


@pytest.fixture
def dispatcher(engine, transport, config):
    """Create a dispatcher wired to the engine and mock transport."""
    return CommandDispatcher(engine, transport, config, name="Bedroom")


class TestValidateTargetPosition:
    """Tests for target position validation."""

    @pytest.mark.parametrize("value,expected", [(0, 0), (100, 100), (80, 80), (40.0, 40)])
    def test_valid_values(self, value, expected):
        """Test integers in range are accepted."""
        assert validate_target_position(value) == expected

    @pytest.mark.parametrize("value", ["80", None, True, [80], 40.5])
    def test_non_integer_rejected(self, value):
        """Test non-numeric and fractional values are rejected."""
        with pytest.raises(InvalidArgumentError):
            validate_target_position(value)

    @pytest.mark.parametrize("value", [-1, 101])
    def test_out_of_range_rejected(self, value):
        """Test values outside 0-100 are rejected."""
        with pytest.raises(InvalidArgumentError):
            validate_target_position(value)

    def test_error_is_value_error(self):
        """Test the invalid argument error is also a ValueError."""
        with pytest.raises(ValueError) as exc_info:
            validate_target_position("up")
        assert exc_info.value.value == "up"
        assert "'up'" in str(exc_info.value)


class TestCommandDispatcher:
    """Tests for CommandDispatcher."""

    @pytest.mark.asyncio
    async def test_dispatch_shape(self, dispatcher, transport):
        """Test a target write sends the open command and converted position."""
        await dispatcher.set_target_position(80)

        transport.assert_write_count(1)
        transport.assert_written({"1": "open", "2": 20})

    @pytest.mark.asyncio
    async def test_optimistic_update(self, dispatcher, engine):
        """Test the target is updated before the device reports anything."""
        await dispatcher.set_target_position(80)

        assert engine.state.target_position == 80
        assert engine.state.current_position == 70

    @pytest.mark.asyncio
    async def test_returns_validated_position(self, dispatcher, engine):
        """Test an integral float is returned and stored as an int."""
        assert await dispatcher.set_target_position(55.0) == 55
        assert type(engine.state.target_position) is int

    @pytest.mark.asyncio
    async def test_close_uses_open_literal(self, dispatcher, transport):
        """Test moving toward closed still sends the open literal."""
        await dispatcher.set_target_position(0)
        transport.assert_written({"1": "open", "2": 100})

    @pytest.mark.asyncio
    async def test_custom_configuration(self, engine, transport):
        """Test the payload uses the configured DPs and open literal."""
        config = DatapointConfig(dp_command=101, dp_position_target=102, cmd_open="go")
        dispatcher = CommandDispatcher(engine, transport, config, name="Bedroom")

        await dispatcher.set_target_position(25)
        transport.assert_written({"101": "go", "102": 75})

    @pytest.mark.asyncio
    async def test_invalid_value_rejected(self, dispatcher, transport, engine):
        """Test invalid input mutates nothing and sends nothing."""
        with pytest.raises(InvalidArgumentError):
            await dispatcher.set_target_position("eighty")

        transport.assert_write_count(0)
        assert engine.state.target_position == 70

    @pytest.mark.asyncio
    async def test_transport_failure_propagates(self, dispatcher, transport, engine):
        """Test transport errors reach the caller and the update is kept."""
        error = TransportError("device offline")
        transport.set_write_error(error)

        with pytest.raises(TransportError) as exc_info:
            await dispatcher.set_target_position(80)

        assert exc_info.value is error
        assert engine.state.target_position == 80

    def test_build_command(self, engine, config):
        """Test payload construction."""
        dispatcher = CommandDispatcher(engine, MockDeviceTransport(), config, name="Bedroom")
        assert dispatcher.build_command(60) == {"1": "open", "2": 40}
