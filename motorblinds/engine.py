"""
State synchronisation between device telemetry and the window covering.

The engine owns the WindowCoveringState of one device. Each change event
from the device is folded into the state by apply_changes(), a pure
reducer. The first matching DP wins, checked in this order:

    state DP -> position target DP -> position status DP -> command DP

Only one DP is acted on per event, even if several changed at once.
Observers registered with subscribe() are called with the previous and
the new state after every transition that changes something.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from motorblinds.models.records import DatapointConfig, PositionState, WindowCoveringState
from motorblinds.protocol.constants import BlindsState, PositionConstants
from motorblinds.protocol.position import coerce_position, convert_position

# Module logger
logger = logging.getLogger(__name__)

StateObserver = Callable[[WindowCoveringState, WindowCoveringState], None]

# Both motion literals map to INCREASING; the device protocol has not been
# confirmed to distinguish them for this DP.
_MOTION_STATES: dict[str, PositionState] = {
    BlindsState.OPENING.value: PositionState.INCREASING,
    BlindsState.CLOSING.value: PositionState.INCREASING,
}


def normalize_changes(changes: Mapping[Any, Any]) -> dict[str, Any]:
    """
    Key a change payload by DP identifier string.

    Devices report DP keys as strings while configuration uses ints.
    """
    return {str(dp): value for dp, value in changes.items()}


def apply_changes(
    state: WindowCoveringState,
    changes: Mapping[Any, Any],
    config: DatapointConfig,
    *,
    log: logging.Logger | None = None,
) -> WindowCoveringState:
    """
    Fold one device change event into the covering state.

    Args:
        state: Current state.
        changes: Changed DPs mapped to their new raw values.
        config: DP identifiers and command literals of the device.
        log: Logger for routing messages (module logger if omitted).

    Returns:
        The next state. The same instance is returned when the event does
        not change anything.
    """
    log = log or logger
    dps = normalize_changes(changes)

    if config.state_key in dps:
        value = dps[config.state_key]
        log.debug("State changed to %s", value)
        motion = _MOTION_STATES.get(str(value))
        if motion is None:
            return state
        return state.evolve(position_state=motion)

    if config.position_target_key in dps:
        position = _read_position(dps[config.position_target_key], "position target", log)
        if position is None:
            return state
        log.debug("Position target changed to %d", position)
        return state.evolve(target_position=position)

    if config.position_status_key in dps:
        position = _read_position(dps[config.position_status_key], "position status", log)
        if position is None:
            return state
        log.debug("Position status changed to %d", position)
        # A reported status means the move has finished
        return state.evolve(
            current_position=position,
            target_position=position,
            position_state=PositionState.STOPPED,
        )

    if config.command_key in dps:
        command = dps[config.command_key]
        log.debug("Command changed to %s", command)
        if command == config.cmd_open:
            return state.evolve(target_position=PositionConstants.CONTROL_OPEN)
        if command == config.cmd_close:
            return state.evolve(target_position=PositionConstants.CONTROL_CLOSED)
        # cmd_stop and unknown commands leave the state alone
        return state

    return state


def _read_position(raw: Any, label: str, log: logging.Logger) -> int | None:
    """Convert a raw device-space DP value to control-plane space."""
    try:
        return convert_position(coerce_position(raw))
    except ValueError:
        log.warning("Ignoring unparseable %s value %r", label, raw)
        return None


class StateSyncEngine:
    """
    Event-driven owner of one device's WindowCoveringState.

    The engine is driven synchronously: handle_changes() runs to completion
    before returning, so observers always see a consistent state.

    Attributes:
        config: DP identifiers and command literals of the device.
        name: Device name used in log messages.
        state: Current WindowCoveringState.

    Example:
        >>> engine = StateSyncEngine(DatapointConfig(), 30, name="Office")
        >>> engine.state.current_position
        70
        >>> engine.handle_changes({"3": 10}).current_position
        90
    """

    def __init__(
        self,
        config: DatapointConfig,
        status: Any,
        *,
        name: str,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the engine from the device's reported position status.

        Args:
            config: DP identifiers and command literals of the device.
            status: Raw position-status value reported by the device. A
                missing or unparseable value is treated as fully closed.
            name: Device name used in log messages.
            logger: Logger to use instead of the module logger.
        """
        self._config = config
        self._name = name
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._observers: list[StateObserver] = []

        try:
            position = coerce_position(status)
        except ValueError:
            self._logger.warning(
                "MotorBlinds %s reported no usable position status (%r), assuming closed",
                name,
                status,
            )
            position = PositionConstants.DEVICE_CLOSED

        self._state = WindowCoveringState.from_device_position(position)
        self._logger.debug("MotorBlinds %s initialized: %s", name, self._state)

    @property
    def config(self) -> DatapointConfig:
        """Get the DP configuration."""
        return self._config

    @property
    def name(self) -> str:
        """Get the device name."""
        return self._name

    @property
    def state(self) -> WindowCoveringState:
        """Get the current state."""
        return self._state

    def subscribe(self, observer: StateObserver) -> Callable[[], None]:
        """
        Register an observer for state transitions.

        Args:
            observer: Called with (previous, current) after each change.

        Returns:
            Callable that removes the observer again.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def handle_changes(self, changes: Mapping[Any, Any]) -> WindowCoveringState:
        """
        Apply a device change event.

        Args:
            changes: Changed DPs mapped to their new raw values.

        Returns:
            The state after the event.
        """
        previous = self._state
        current = apply_changes(previous, changes, self._config, log=self._logger)
        self._transition(previous, current)
        return current

    def set_target_position(self, position: int) -> WindowCoveringState:
        """
        Set the target position (control-plane space) without device input.

        Used for the optimistic update when the control plane writes a new
        target. The current position is left alone.
        """
        previous = self._state
        current = previous.evolve(target_position=position)
        self._transition(previous, current)
        return current

    def _transition(self, previous: WindowCoveringState, current: WindowCoveringState) -> None:
        if current == previous:
            return

        self._state = current
        self._logger.info("MotorBlinds %s state: %s", self._name, current)
        for observer in list(self._observers):
            observer(previous, current)

    def __repr__(self) -> str:
        return f"StateSyncEngine(name={self._name!r}, {self._state})"
