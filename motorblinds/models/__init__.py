"""
Data models for motor blinds.

This module contains Pydantic models representing:

- Per-device configuration (DeviceContext, DatapointConfig)
- Control-plane state (WindowCoveringState, PositionState)
- Accessory classification (Category)
"""

from motorblinds.models.records import (
    Category,
    DatapointConfig,
    DeviceContext,
    PositionState,
    WindowCoveringState,
)

__all__ = [
    # Configuration
    "DeviceContext",
    "DatapointConfig",
    # State
    "WindowCoveringState",
    "PositionState",
    # Enums
    "Category",
]
