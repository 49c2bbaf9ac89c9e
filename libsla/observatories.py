"""
Observatory parameters and terrestrial geometry for libsla.

Provides a table of ground-based observatories together with the routines
that turn a site's geodetic position into geocentric coordinates.

Functions:
- obs: look up an observatory by index or identifier
- geoc: geodetic to geocentric coordinates
- pvobs: observer position and velocity
- polmo: correct site coordinates for polar motion

Longitudes follow the classical convention: positive WEST.

Note:
    Additional sites can be registered at runtime with
    libsla.state.add_observatory(); they are searched after the built-in
    table.
"""

import math
from typing import List, NamedTuple, Tuple, Union

from .constants import AS2R
from . import state


class Observatory(NamedTuple):
    """
    Observatory parameters.

    Attributes:
        id: Short identifier, e.g. "AAT"
        name: Full name
        longitude: Longitude (radians, positive west)
        latitude: Geodetic latitude (radians)
        height: Height above sea level (metres)
    """

    id: str
    name: str
    longitude: float
    latitude: float
    height: float


def _west(degrees: int, arcmins: int, arcsecs: float) -> float:
    return AS2R * (60.0 * (60.0 * degrees + arcmins) + arcsecs)


_north = _west


def _east(degrees: int, arcmins: int, arcsecs: float) -> float:
    return -_west(degrees, arcmins, arcsecs)


_south = _east


# =============================================================================
# BUILT-IN SITES
# =============================================================================

_OBSERVATORIES: Tuple[Tuple[str, str, float, float, float], ...] = (
    ("AAT", "Anglo-Australian 3.9m Telescope", _east(149, 3, 57.91), _south(31, 16, 37.34), 1164.0),
    ("LPO4.2", "William Herschel 4.2m Telescope", _west(17, 52, 53.9), _north(28, 45, 38.1), 2332.0),
    ("LPO2.5", "Isaac Newton 2.5m Telescope", _west(17, 52, 39.5), _north(28, 45, 43.2), 2336.0),
    ("LPO1", "Jacobus Kapteyn 1m Telescope", _west(17, 52, 41.2), _north(28, 45, 39.9), 2364.0),
    ("LICK120", "Lick 120 inch", _west(121, 38, 13.689), _north(37, 20, 34.931), 1286.0),
    ("MMT", "MMT 6.5m, Mt Hopkins", _west(110, 53, 4.4), _north(31, 41, 19.6), 2608.0),
    ("DAO72", "DAO Victoria BC 1.85 metre", _west(123, 25, 1.18), _north(48, 31, 11.9), 238.0),
    ("DUPONT", "Du Pont 2.5m Telescope, Las Campanas", _west(70, 42, 9.0), _south(29, 0, 11.0), 2280.0),
    ("MTHOP1.5", "Mt Hopkins 1.5 metre", _west(110, 52, 39.0), _north(31, 40, 51.4), 2344.0),
    ("STROMLO74", "Mount Stromlo 74 inch", _east(149, 0, 27.59), _south(35, 19, 14.3), 767.0),
    ("ANU2.3", "Siding Spring 2.3 metre", _east(149, 3, 40.3), _south(31, 16, 24.1), 1149.0),
    ("GBVA140", "Greenbank 140 foot", _west(79, 50, 9.61), _north(38, 26, 15.4), 881.0),
    ("TOLOLO4M", "Cerro Tololo 4 metre", _west(70, 48, 53.6), _south(30, 9, 57.8), 2235.0),
    ("TOLOLO1.5M", "Cerro Tololo 1.5 metre", _west(70, 48, 54.5), _south(30, 9, 56.3), 2225.0),
    ("TIDBINBLA", "Tidbinbilla 64 metre", _east(148, 58, 48.2), _south(35, 24, 14.3), 670.0),
    ("BLOEMF", "Bloemfontein 1.52 metre", _east(26, 24, 18.0), _south(29, 2, 18.0), 1387.0),
    ("BOSQALEGRE", "Bosque Alegre 1.54 metre", _west(64, 32, 48.0), _south(31, 35, 53.0), 1250.0),
    ("FLAGSTF61", "USNO 61 inch astrograph, Flagstaff", _west(111, 44, 23.6), _north(35, 11, 2.5), 2316.0),
    ("LOWELL72", "Perkins 72 inch, Lowell", _west(111, 32, 9.3), _north(35, 5, 48.6), 2198.0),
    ("HARVARD", "Harvard College Observatory 1.55m", _west(71, 33, 29.32), _north(42, 30, 19.0), 185.0),
    ("OKAYAMA", "Okayama 1.88 metre", _east(133, 35, 47.29), _north(34, 34, 26.1), 372.0),
    ("KPNO158", "Kitt Peak 158 inch", _west(111, 35, 57.61), _north(31, 57, 50.3), 2120.0),
    ("KPNO90", "Kitt Peak 90 inch", _west(111, 35, 58.24), _north(31, 57, 46.9), 2071.0),
    ("KPNO84", "Kitt Peak 84 inch", _west(111, 35, 51.56), _north(31, 57, 29.2), 2096.0),
    ("KPNO36FT", "Kitt Peak 36 foot", _west(111, 36, 51.12), _north(31, 57, 12.1), 1939.0),
    ("KOTTAMIA", "Kottamia 74 inch", _east(31, 49, 30.0), _north(29, 55, 54.0), 476.0),
    ("ESO3.6", "ESO 3.6 metre", _west(70, 43, 36.0), _south(29, 15, 36.0), 2428.0),
    ("MAUNAK88", "Mauna Kea 88 inch", _west(155, 28, 9.96), _north(19, 49, 22.77), 4213.6),
    ("UKIRT", "UK Infra Red Telescope", _west(155, 28, 13.18), _north(19, 49, 20.75), 4198.5),
    ("QUEBEC1.6", "Quebec 1.6 metre", _west(71, 9, 9.7), _north(45, 27, 20.6), 1114.0),
    ("MTEKAR", "Mt Ekar 1.82 metre", _east(11, 34, 15.0), _north(45, 50, 48.0), 1365.0),
    ("MTLEMMON60", "Mt Lemmon 60 inch", _west(110, 42, 16.9), _north(32, 26, 33.9), 2790.0),
    ("MCDONLD2.7", "McDonald 2.7 metre", _west(104, 1, 17.60), _north(30, 40, 17.7), 2075.0),
    ("MCDONLD2.1", "McDonald 2.1 metre", _west(104, 1, 20.1), _north(30, 40, 17.7), 2075.0),
    ("PALOMAR200", "Palomar 200 inch", _west(116, 51, 50.0), _north(33, 21, 22.0), 1706.0),
    ("PALOMAR60", "Palomar 60 inch", _west(116, 51, 31.0), _north(33, 20, 56.0), 1706.0),
    ("DUNLAP74", "David Dunlap 74 inch", _west(79, 25, 20.0), _north(43, 51, 46.0), 244.0),
    ("HPROV1.93", "Haute Provence 1.93 metre", _east(5, 42, 46.75), _north(43, 55, 53.3), 665.0),
    ("HPROV1.52", "Haute Provence 1.52 metre", _east(5, 42, 43.82), _north(43, 56, 0.2), 667.0),
    ("SANPM83", "San Pedro Martir 83 inch", _west(115, 27, 47.0), _north(31, 2, 38.0), 2830.0),
    ("SAAO74", "Sutherland 74 inch", _east(20, 48, 44.3), _south(32, 22, 43.4), 1771.0),
    ("TAUTNBG", "Tautenburg 2 metre", _east(11, 42, 45.0), _north(50, 58, 51.0), 331.0),
    ("CATALINA61", "Catalina 61 inch", _west(110, 43, 55.1), _north(32, 25, 0.7), 2510.0),
    ("STEWARD90", "Steward 90 inch", _west(111, 35, 58.24), _north(31, 57, 46.9), 2071.0),
    ("USSR6", "USSR 6 metre", _east(41, 26, 30.0), _north(43, 39, 12.0), 2100.0),
    ("ARECIBO", "Arecibo 1000 foot", _west(66, 45, 11.1), _north(18, 20, 36.6), 496.0),
    ("CAMB5KM", "Cambridge 5km", _east(0, 2, 37.23), _north(52, 10, 12.2), 17.0),
    ("CAMB1MILE", "Cambridge 1 mile", _east(0, 2, 21.64), _north(52, 9, 47.3), 17.0),
    ("EFFELSBERG", "Effelsberg 100 metre", _east(6, 53, 1.5), _north(50, 31, 28.6), 366.0),
    ("GBVA300", "Greenbank 300 foot", _west(79, 50, 56.36), _north(38, 25, 46.3), 894.0),
    ("JODRELL1", "Jodrell Bank 250 foot", _west(2, 18, 25.0), _north(53, 14, 10.5), 78.0),
    ("PARKES", "Parkes 64 metre", _east(148, 15, 44.3591), _south(32, 59, 59.8657), 391.79),
    ("VLA", "Very Large Array", _west(107, 37, 3.82), _north(34, 4, 43.5), 2124.0),
    ("SUGARGROVE", "Sugar Grove 150 foot", _west(79, 16, 23.0), _north(38, 31, 14.0), 705.0),
    ("USSR600", "USSR 600 foot", _east(41, 35, 25.5), _north(43, 49, 32.0), 973.0),
    ("NOBEYAMA", "Nobeyama 45 metre", _east(138, 29, 12.0), _north(35, 56, 19.0), 1350.0),
    ("JCMT", "JCMT 15 metre", _west(155, 28, 37.3), _north(19, 49, 22.22), 4124.75),
    ("ESONTT", "ESO 3.5 metre NTT", _west(70, 43, 7.0), _south(29, 15, 30.0), 2377.0),
    ("ST.ANDREWS", "St Andrews", _west(2, 48, 52.5), _north(56, 20, 12.0), 30.0),
    ("APO3.5", "Apache Point 3.5m", _west(105, 49, 11.56), _north(32, 46, 48.96), 2809.0),
    ("KECK1", "Keck 10m Telescope #1", _west(155, 28, 28.99), _north(19, 49, 33.41), 4160.0),
    ("TAUTSCHM", "Tautenberg 1.34 metre Schmidt", _east(11, 42, 45.0), _north(50, 58, 51.0), 331.0),
    ("PALOMAR48", "Palomar 48-inch Schmidt", _west(116, 51, 32.0), _north(33, 21, 26.0), 1706.0),
    ("UKST", "UK 1.2 metre Schmidt, Siding Spring", _east(149, 4, 12.8), _south(31, 16, 27.8), 1145.0),
    ("KISO", "Kiso 1.05 metre Schmidt, Japan", _east(137, 37, 42.2), _north(35, 47, 38.7), 1130.0),
    ("ESOSCHM", "ESO 1 metre Schmidt, La Silla", _west(70, 43, 46.5), _south(29, 15, 25.8), 2347.0),
    ("ATCA", "Australia Telescope Compact Array", _east(149, 33, 0.5), _south(30, 18, 46.385), 236.9),
    ("MOPRA", "ATNF Mopra Observatory", _east(149, 5, 58.732), _south(31, 16, 4.451), 850.0),
    ("SUBARU", "Subaru 8m telescope", _west(155, 28, 33.67), _north(19, 49, 31.81), 4163.0),
    ("CFHT", "Canada-France-Hawaii 3.6m Telescope", _west(155, 28, 7.95), _north(19, 49, 30.91), 4204.1),
    ("KECK2", "Keck 10m Telescope #2", _west(155, 28, 27.24), _north(19, 49, 35.62), 4159.6),
    ("GEMININ", "Gemini North 8-m telescope", _west(155, 28, 8.57), _north(19, 49, 25.69), 4213.4),
    ("FCRAO", "Five College Radio Astronomy Obs", _west(72, 20, 42.0), _north(42, 23, 30.0), 314.0),
    ("IRTF", "NASA IR Telescope Facility, Mauna Kea", _west(155, 28, 19.2), _north(19, 49, 34.39), 4168.1),
    ("CSO", "Caltech Sub-mm Observatory, Mauna Kea", _west(155, 28, 31.79), _north(19, 49, 20.78), 4080.0),
    ("VLT1", "ESO VLT, Paranal, Chile: UT1", _west(70, 24, 11.642), _south(24, 37, 33.117), 2635.43),
    ("VLT2", "ESO VLT, Paranal, Chile: UT2", _west(70, 24, 10.855), _south(24, 37, 31.465), 2635.43),
    ("VLT3", "ESO VLT, Paranal, Chile: UT3", _west(70, 24, 9.896), _south(24, 37, 30.3), 2635.43),
    ("VLT4", "ESO VLT, Paranal, Chile: UT4", _west(70, 24, 8.000), _south(24, 37, 31.0), 2635.43),
    ("GEMINIS", "Gemini South 8-m telescope", _west(70, 44, 11.5), _south(30, 14, 26.7), 2738.0),
    ("KOSMA3M", "KOSMA 3m telescope, Gornergrat", _east(7, 47, 3.48), _north(45, 58, 59.772), 3141.0),
    ("MAGELLAN1", "Magellan 1, 6.5m, Las Campanas", _west(70, 41, 31.9), _south(29, 0, 51.7), 2408.0),
    ("MAGELLAN2", "Magellan 2, 6.5m, Las Campanas", _west(70, 41, 33.5), _south(29, 0, 50.3), 2408.0),
    ("APEX", "APEX 12m telescope, Llano de Chajnantor", _west(67, 45, 33.0), _south(23, 0, 20.8), 5105.0),
    ("NANTEN2", "NANTEN2 4m telescope, Pampa la Bola", _west(67, 42, 8.0), _south(22, 57, 47.0), 4865.0),
)

# Reference spheroid (IAU 1976)
_EARTH_RADIUS_M = 6378140.0
_FLATTENING = 1.0 / 298.257
_B = (1.0 - _FLATTENING) ** 2
_AU_M = 1.49597870e11

# Earth rotation rate in radians per UT1 second
_SIDEREAL_RATE = 7.292115855306589e-5


def _all_sites() -> List[Observatory]:
    return [Observatory(*row) for row in _OBSERVATORIES] + [
        Observatory(*row) for row in state.get_observatories()
    ]


def obs(key: Union[int, str]) -> Observatory:
    """
    Look up an observatory.

    Args:
        key: 0-based index into the table, or an identifier. An identifier
            may be abbreviated: the first site whose id starts with it is
            returned.

    Returns:
        Observatory: The site parameters

    Raises:
        ValueError: If the index is out of range or no identifier matches

    Examples:
        >>> obs("AAT").name
        'Anglo-Australian 3.9m Telescope'
        >>> obs(0).id
        'AAT'
    """
    sites = _all_sites()
    if isinstance(key, int):
        if 0 <= key < len(sites):
            return sites[key]
        raise ValueError(f"Unknown observatory index: {key}")

    for site in sites:
        if site.id.startswith(key):
            return site
    raise ValueError(f"Unknown observatory: {key}")


# =============================================================================
# GEOCENTRIC COORDINATES
# =============================================================================


def geoc(phi: float, h: float) -> Tuple[float, float]:
    """
    Convert geodetic position to geocentric.

    Args:
        phi: Geodetic latitude (radians)
        h: Height above reference spheroid (metres)

    Returns:
        Tuple[float, float]: (r, z) - distance from the Earth's axis and
        from the equatorial plane, both in AU
    """
    sp = math.sin(phi)
    cp = math.cos(phi)
    c = 1.0 / math.sqrt(cp * cp + _B * sp * sp)
    s = _B * c
    return (_EARTH_RADIUS_M * c + h) * cp / _AU_M, (_EARTH_RADIUS_M * s + h) * sp / _AU_M


def pvobs(phi: float, h: float, stl: float) -> List[float]:
    """
    Position and velocity of an observing station.

    Args:
        phi: Geodetic latitude (radians)
        h: Height above reference spheroid (metres)
        stl: Local apparent sidereal time (radians)

    Returns:
        List[float]: [x, y, z, xdot, ydot, zdot] in AU and AU/s, true
        equator and equinox of date
    """
    r, z = geoc(phi, h)
    s = math.sin(stl)
    c = math.cos(stl)
    v = _SIDEREAL_RATE * r
    return [r * c, r * s, z, -v * s, v * c, 0.0]


def polmo(elongm: float, phim: float, xp: float, yp: float) -> Tuple[float, float, float]:
    """
    Polar motion: correct site longitude and latitude for polar motion
    and calculate the azimuth difference between celestial and
    terrestrial poles.

    Args:
        elongm: Mean longitude of the observer (radians, east +ve)
        phim: Mean geodetic latitude of the observer (radians)
        xp: Polar motion x-coordinate (radians)
        yp: Polar motion y-coordinate (radians)

    Returns:
        Tuple[float, float, float]: (elong, phi, daz) - true longitude
        and latitude, and azimuth correction (terrestrial minus celestial)

    Note:
        Unlike obs(), longitudes here are EAST positive.
    """
    sel = math.sin(elongm)
    cel = math.cos(elongm)
    sph = math.sin(phim)
    cph = math.cos(phim)

    xm = cel * cph
    ym = sel * cph
    zm = sph

    sxp = math.sin(xp)
    cxp = math.cos(xp)
    syp = math.sin(yp)
    cyp = math.cos(yp)

    # Rotate the mean site vector into the true frame
    zw = -ym * syp + zm * cyp
    xt = xm * cxp - zw * sxp
    yt = ym * cyp + zm * syp
    zt = xm * sxp + zw * cxp

    # Celestial pole in the mean frame
    xnm = -sxp * cyp
    ynm = syp
    znm = cxp * cyp

    cph = math.sqrt(xt * xt + yt * yt)
    if cph == 0.0:
        xt = 1.0
    sel = yt / cph if cph != 0.0 else 0.0
    cel = xt / cph if cph != 0.0 else 1.0

    elong = math.atan2(yt, xt) if (xt != 0.0 or yt != 0.0) else 0.0
    phi = math.atan2(zt, cph)

    xnt = (xnm * cel + ynm * sel) * zt - znm * cph
    ynt = -xnm * sel + ynm * cel
    daz = math.atan2(-ynt, -xnt) if (xnt != 0.0 or ynt != 0.0) else 0.0

    return elong, phi, daz
