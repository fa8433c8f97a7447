"""
Position conversion between device space and control-plane space.

The device reports percent closed and the control plane expects percent
open. The two spaces are exact complements, so the same transform maps
in both directions:

    >>> convert_position(30)
    70
    >>> convert_position(convert_position(30))
    30
"""

from __future__ import annotations

import logging
import math
from typing import Any

from motorblinds.protocol.constants import PositionConstants

logger = logging.getLogger(__name__)


def convert_position(position: int) -> int:
    """
    Convert a 0-100 position between device and control-plane space.

    Args:
        position: Position in either space (0-100).

    Returns:
        The complementary position (100 - position).
    """
    return PositionConstants.MAX - position


def coerce_position(raw: Any) -> int:
    """
    Convert a raw DP value to an integer position in [0, 100].

    Devices report positions as ints, floats or numeric strings depending
    on firmware. Values outside the valid range are clamped.

    Args:
        raw: Raw DP value.

    Returns:
        Integer position between 0 and 100.

    Raises:
        ValueError: If the value is not numeric.
    """
    if isinstance(raw, bool):
        raise ValueError(f"Position must be numeric, got {raw!r}")

    if isinstance(raw, str):
        raw = raw.strip()

    try:
        number = float(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Position must be numeric, got {raw!r}") from e

    if not math.isfinite(number):
        raise ValueError(f"Position must be finite, got {raw!r}")

    position = int(round(number))
    clamped = max(PositionConstants.MIN, min(PositionConstants.MAX, position))
    if clamped != position:
        logger.debug("Clamped position %r to %d", raw, clamped)
    return clamped
