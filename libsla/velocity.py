"""
Radial velocity corrections for libsla.

Each function returns the component, in km/s, of an observer's or
reference frame's motion in the direction of a star, so that adding it to
an observed radial velocity refers the velocity to the new frame.

Functions:
- rverot: Earth rotation
- ecor: Earth orbital motion (heliocentric), plus light-time
- rvlsrk, rvlsrd: Sun relative to the kinematical/dynamical LSR
- rvgalc: Dynamical LSR relative to the galactic centre
- rvlg: Solar motion relative to the Local Group

All directions are J2000 (FK5) mean RA,Dec except where stated.
"""

import math
from typing import Tuple

from .constants import AU_KM, AU_LIGHT_SECONDS
from .ephemerides import earth
from .vectors import dcs2c, dvdv

# Equatorial rotation speed of the Earth (km/s)
_ROTATION_SPEED = 0.4655

# Frame velocities as J2000 Cartesian vectors (km/s)
_GALACTIC_CENTRE = (-108.70408, 97.86251, -164.33610)
_LOCAL_GROUP = (-148.23284, 133.44888, -224.09467)
_DYNAMICAL_LSR = (0.63823, 14.58542, -7.80116)
_KINEMATICAL_LSR = (-0.29000, 17.31726, -10.00141)


def rverot(phi: float, ra: float, da: float, st: float) -> float:
    """
    Velocity component in a given direction due to Earth rotation.

    Args:
        phi: Latitude of observing station (geodetic, radians)
        ra: Apparent right ascension (radians)
        da: Apparent declination (radians)
        st: Local apparent sidereal time (radians)

    Returns:
        float: Component of Earth rotation in direction (ra, da) (km/s),
        positive when the observer is receding from the object

    Note:
        The height of the observer is ignored; the result is accurate to
        about 0.0005 km/s.
    """
    return _ROTATION_SPEED * math.cos(phi) * math.sin(st - ra) * math.cos(da)


def rvgalc(r2000: float, d2000: float) -> float:
    """
    Velocity component due to the rotation of the Galaxy.

    Returns the component of the dynamical LSR's motion about the
    galactic centre (220 km/s towards l=90, b=0) in the direction
    (r2000, d2000), km/s.
    """
    return dvdv(_GALACTIC_CENTRE, dcs2c(r2000, d2000))


def rvlg(r2000: float, d2000: float) -> float:
    """
    Velocity component due to the rotation of the Galaxy and the motion
    of the Galaxy relative to the mean motion of the Local Group (km/s).
    """
    return dvdv(_LOCAL_GROUP, dcs2c(r2000, d2000))


def rvlsrd(r2000: float, d2000: float) -> float:
    """
    Velocity component due to the Sun's motion with respect to the
    dynamical Local Standard of Rest (km/s).

    The solar motion is 16.55294 km/s towards l=53 deg, b=25 deg.
    """
    return dvdv(_DYNAMICAL_LSR, dcs2c(r2000, d2000))


def rvlsrk(r2000: float, d2000: float) -> float:
    """
    Velocity component due to the Sun's motion with respect to the
    kinematical Local Standard of Rest (km/s).

    The solar motion is 20 km/s towards RA 18h, Dec +30 deg (1900).
    """
    return dvdv(_KINEMATICAL_LSR, dcs2c(r2000, d2000))


def ecor(rm: float, dm: float, iy: int, id: int, fd: float) -> Tuple[float, float]:
    """
    Component of the Earth's orbital velocity and heliocentric light time
    in a given direction.

    Args:
        rm: Mean right ascension of date (radians)
        dm: Mean declination of date (radians)
        iy: Year
        id: Day in year (1 = January 1st)
        fd: Fraction of day

    Returns:
        Tuple[float, float]: (rv, tl)
            - rv: Component of Earth orbital velocity (km/s), positive
              for recession
            - tl: Component of heliocentric light time (s), to be added
              to the observed time

    Note:
        Uses the low-precision earth() ephemeris, so rv is good to about
        0.01 km/s and tl to about 0.1 s.
    """
    pv = earth(iy, id, fd)
    v = dcs2c(rm, dm)
    rv = -AU_KM * dvdv(pv[3:6], v)
    tl = AU_LIGHT_SECONDS * dvdv(pv[0:3], v)
    return rv, tl
