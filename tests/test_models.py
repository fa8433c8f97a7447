"""Tests for data models."""

import pytest
from pydantic import ValidationError

from motorblinds.models.records import (
    Category,
    DatapointConfig,
    DeviceContext,
    PositionState,
    WindowCoveringState,
)


class TestWindowCoveringState:
    """Tests for WindowCoveringState model."""

    def test_from_device_position(self):
        """Test initial state converts the device position."""
        state = WindowCoveringState.from_device_position(30)
        assert state.current_position == 70
        assert state.target_position == 70
        assert state.position_state == PositionState.STOPPED

    def test_evolve_returns_new_instance(self):
        """Test evolve leaves the original untouched."""
        state = WindowCoveringState(current_position=10, target_position=10)
        moved = state.evolve(target_position=60)

        assert moved.target_position == 60
        assert moved.current_position == 10
        assert state.target_position == 10

    def test_evolve_validates_range(self):
        """Test evolve rejects positions outside 0-100."""
        state = WindowCoveringState(current_position=10, target_position=10)
        with pytest.raises(ValidationError):
            state.evolve(target_position=101)

    def test_out_of_range_rejected(self):
        """Test construction rejects positions outside 0-100."""
        with pytest.raises(ValidationError):
            WindowCoveringState(current_position=-1, target_position=0)

    def test_frozen(self):
        """Test that the state is immutable."""
        state = WindowCoveringState(current_position=10, target_position=10)
        with pytest.raises(ValidationError):
            state.current_position = 20

    def test_equality(self):
        """Test value equality."""
        a = WindowCoveringState(current_position=10, target_position=20)
        b = WindowCoveringState(current_position=10, target_position=20)
        c = a.evolve(position_state=PositionState.INCREASING)
        assert a == b
        assert a != c

    def test_str(self):
        """Test string representation."""
        state = WindowCoveringState(current_position=10, target_position=20)
        assert str(state) == "current=10 target=20 state=STOPPED"


class TestDatapointConfig:
    """Tests for DatapointConfig model."""

    def test_payload_keys(self):
        """Test DP keys are the string form of the identifiers."""
        config = DatapointConfig(dp_command=101)
        assert config.command_key == "101"
        assert config.position_target_key == "2"
        assert config.position_status_key == "3"
        assert config.state_key == "7"

    def test_rejects_non_positive_dp(self):
        """Test DP identifiers must be positive."""
        with pytest.raises(ValidationError):
            DatapointConfig(dp_state=0)


class TestDeviceContext:
    """Tests for DeviceContext model."""

    def test_aliases(self):
        """Test camelCase host keys populate the fields."""
        ctx = DeviceContext.model_validate({"name": "Hall", "dpCommand": 4, "cmdClose": "down"})
        assert ctx.dp_command == 4
        assert ctx.cmd_close == "down"

    def test_empty_name_rejected(self):
        """Test that an empty name is rejected."""
        with pytest.raises(ValidationError):
            DeviceContext(name="")


class TestEnums:
    """Tests for enum values."""

    def test_position_state_values(self):
        """Test position state uses the HomeKit values."""
        assert PositionState.DECREASING.value == 0
        assert PositionState.INCREASING.value == 1
        assert PositionState.STOPPED.value == 2

    def test_window_covering_category(self):
        """Test window covering category value."""
        assert Category.WINDOW_COVERING.value == 14
