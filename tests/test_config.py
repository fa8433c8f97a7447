"""Tests for configuration resolution."""

import pytest

from motorblinds.config import load_context, parse_custom_dp, resolve_datapoint_config
from motorblinds.exceptions import ConfigurationError
from motorblinds.models.records import DatapointConfig, DeviceContext


class TestParseCustomDp:
    """Tests for parse_custom_dp."""

    @pytest.mark.parametrize("value,expected", [(5, 5), ("5", 5), (" 101 ", 101), (2.0, 2)])
    def test_positive_numbers(self, value, expected):
        """Test positive numbers and numeric strings are accepted."""
        assert parse_custom_dp(value) == expected

    @pytest.mark.parametrize("value", [None, 0, -3, "", "abc", "inf", True])
    def test_unusable_values(self, value):
        """Test unusable values return None."""
        assert parse_custom_dp(value) is None

    @pytest.mark.parametrize("value,expected", [("1e3", 1), ("12abc", 12), ("2.9", 2)])
    def test_leading_integer(self, value, expected):
        """Test only the leading integer of a string is used."""
        assert parse_custom_dp(value) == expected


class TestResolveDatapointConfig:
    """Tests for resolve_datapoint_config."""

    def test_defaults(self):
        """Test an unconfigured device uses the documented defaults."""
        config = resolve_datapoint_config({"name": "Bedroom"})

        assert config.dp_command == 1
        assert config.dp_position_target == 2
        assert config.dp_position_status == 3
        assert config.dp_state == 7
        assert config.cmd_open == "open"
        assert config.cmd_close == "close"
        assert config.cmd_stop == "stop"

    def test_dp_overrides(self):
        """Test DP overrides using host configuration keys."""
        config = resolve_datapoint_config(
            {
                "name": "Bedroom",
                "dpCommand": 101,
                "dpPositionTarget": "102",
                "dpPositionStatus": 103,
                "dpState": 104,
            }
        )

        assert config.dp_command == 101
        assert config.dp_position_target == 102
        assert config.dp_position_status == 103
        assert config.dp_state == 104

    def test_invalid_dp_overrides_fall_back(self):
        """Test zero, negative and non-numeric DP overrides use defaults."""
        config = resolve_datapoint_config(
            {"name": "Bedroom", "dpCommand": 0, "dpPositionTarget": -1, "dpState": "seven"}
        )

        assert config.dp_command == 1
        assert config.dp_position_target == 2
        assert config.dp_state == 7

    def test_command_overrides_are_trimmed(self):
        """Test command literals are converted to str and stripped."""
        config = resolve_datapoint_config(
            {"name": "Bedroom", "cmdOpen": "  up ", "cmdClose": "down\n", "cmdStop": 0}
        )

        assert config.cmd_open == "up"
        assert config.cmd_close == "down"
        assert config.cmd_stop == "stop"

    def test_numeric_command_override_becomes_string(self):
        """Test a numeric command literal is coerced to str."""
        config = resolve_datapoint_config({"name": "Bedroom", "cmdStop": 2})
        assert config.cmd_stop == "2"

    def test_snake_case_keys(self):
        """Test snake_case keys are accepted as well."""
        config = resolve_datapoint_config({"name": "Bedroom", "dp_state": 9, "cmd_open": "on"})
        assert config.dp_state == 9
        assert config.cmd_open == "on"

    def test_from_context(self):
        """Test DatapointConfig.from_context delegates to the resolver."""
        ctx = DeviceContext(name="Bedroom", dp_position_status=8)
        assert DatapointConfig.from_context(ctx).dp_position_status == 8

    def test_missing_name_raises(self):
        """Test that a context without name raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            resolve_datapoint_config({"dpCommand": 1})


class TestLoadContext:
    """Tests for load_context."""

    def test_context_passthrough(self):
        """Test an existing DeviceContext is returned as is."""
        ctx = DeviceContext(name="Office")
        assert load_context(ctx) is ctx

    def test_extra_keys_are_kept(self):
        """Test unknown keys from the host configuration are preserved."""
        ctx = load_context({"name": "Office", "type": "MotorBlinds"})
        assert ctx.model_extra == {"type": "MotorBlinds"}

    def test_tuya_fields(self):
        """Test transport settings are parsed."""
        ctx = load_context({"name": "Office", "id": "abc", "ip": "10.0.0.2", "version": "3.4"})
        assert ctx.id == "abc"
        assert ctx.ip == "10.0.0.2"
        assert ctx.version == 3.4
