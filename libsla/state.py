"""
Global configuration for libsla.

This module keeps the library's user-extensible tables:
- Leap seconds announced after the built-in table (used by dat())
- User-defined observatories (searched by obs() after the built-in table)

All state is stored in module-level globals behind get/set functions. This is
not thread-safe, matching the module-level design of the rest of the library.
Random number generators are deliberately not part of this state: they are
caller-owned objects (see libsla.rng).
"""

import logging
from typing import List, Tuple

from .constants import LEAP_SECONDS

logger = logging.getLogger(__name__)

# =============================================================================
# GLOBAL STATE VARIABLES
# =============================================================================

_LEAP_SECONDS: List[Tuple[float, float]] = []  # User steps [(mjd, TAI-UTC)]
_OBSERVATORIES: List[Tuple[str, str, float, float, float]] = []  # User sites


# =============================================================================
# LEAP SECONDS
# =============================================================================


def add_leap_second(mjd: float, delta_at: float) -> None:
    """
    Register a leap second announced after the built-in table.

    Args:
        mjd: UTC MJD from which the new value applies (start of day)
        delta_at: TAI-UTC in seconds from that date

    Raises:
        ValueError: If mjd is not later than the last built-in step and
            every previously registered step

    Example:
        >>> add_leap_second(61041.0, 38.0)  # doctest: +SKIP
    """
    last = _LEAP_SECONDS[-1][0] if _LEAP_SECONDS else LEAP_SECONDS[-1][0]
    if mjd <= last:
        raise ValueError(
            f"Leap second at MJD {mjd} must be later than MJD {last}"
        )
    _LEAP_SECONDS.append((float(mjd), float(delta_at)))
    logger.info("Registered leap second: TAI-UTC = %s s from MJD %s", delta_at, mjd)


def get_leap_seconds() -> List[Tuple[float, float]]:
    """
    Get the user-registered leap seconds.

    Returns:
        List[Tuple[float, float]]: Copy of [(mjd, TAI-UTC), ...], oldest first
    """
    return list(_LEAP_SECONDS)


def clear_leap_seconds() -> None:
    """Remove all user-registered leap seconds."""
    global _LEAP_SECONDS
    _LEAP_SECONDS = []


# =============================================================================
# OBSERVATORIES
# =============================================================================


def add_observatory(
    ident: str, name: str, longitude: float, latitude: float, height: float
) -> None:
    """
    Register a user-defined observatory.

    Args:
        ident: Short identifier used by obs() for prefix lookup
        name: Full name
        longitude: Longitude in radians, positive WEST
        latitude: Geodetic latitude in radians
        height: Height above sea level in metres

    Note:
        User sites are searched after the built-in table, so an identifier
        that shadows a built-in one is only reachable by index.
    """
    _OBSERVATORIES.append(
        (ident, name, float(longitude), float(latitude), float(height))
    )
    logger.info("Registered observatory %s (%s)", ident, name)


def get_observatories() -> List[Tuple[str, str, float, float, float]]:
    """
    Get the user-registered observatories.

    Returns:
        List: Copy of [(ident, name, longitude, latitude, height), ...]
    """
    return list(_OBSERVATORIES)


def clear_observatories() -> None:
    """Remove all user-registered observatories."""
    global _OBSERVATORIES
    _OBSERVATORIES = []


def reset() -> None:
    """
    Clear all user configuration.

    Restores the library to its built-in tables only.
    """
    clear_leap_seconds()
    clear_observatories()
