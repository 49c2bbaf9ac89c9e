"""
Earth ephemerides for libsla.

This module computes the position and velocity of the Earth:
- earth: Heliocentric Earth position/velocity, low precision
- evp: Barycentric and heliocentric Earth position/velocity
  (Stumpff's method)

Both are analytic series: they are fast, need no data files and are good
enough for aberration and radial-velocity corrections.

References:
- Stumpff, P., Astron. Astrophys. Suppl. Ser. 41, 1-8 (1980)
- Smith, C.A. et al., Astron. J. 97, 265 (1989)

FIXME: Precision - evp velocities are good to about 4e-8 AU/day (relative
1e-5) and positions to about 1e-5 AU for 1900-2100. earth is good to
about 20 arcsec in direction.
"""

import math
from typing import List, Tuple

from .constants import D2PI, S2R, B1950_JEPOCH
from .precession import prec
from .time_utils import epj
from .vectors import dmxv

# =============================================================================
# EARTH (LOW PRECISION)
# =============================================================================

# Mean orbital speed of the Earth (AU/s)
_ORBITAL_SPEED = 1.9913e-7

# Mean Earth:EMB distance (AU) and speed (AU/s)
_EMB_DISTANCE = 3.12e-5
_EMB_SPEED = 8.31e-11


def earth(iy: int, id: int, fd: float) -> List[float]:
    """
    Approximate heliocentric position and velocity of the Earth.

    Args:
        iy: Year
        id: Day in year (1 = January 1st)
        fd: Fraction of day

    Returns:
        List[float]: [x, y, z, xdot, ydot, zdot] in AU and AU/s, referred
        to the mean equator and equinox of date

    Note:
        The date is TDB (loosely ET), although UT is adequate for most
        purposes. The year must be in 1900-2100 for full accuracy.
    """
    # Whole years and fraction of year since 1900
    yi = float(iy - 1900)
    iy4 = iy % 4
    yf = (4 * (id - 1 // (iy4 + 1)) - iy4 - 2 + 4.0 * fd) / 1461.0
    t = yi + yf

    # Geometric mean longitude of Sun (degrees converted to radians)
    elm = math.fmod(4.881628 + D2PI * yf + 0.00013420 * t, D2PI)

    # Mean longitude of perihelion
    gamma = 4.908230 + 3.0005e-4 * t

    # Mean anomaly
    em = elm - gamma

    # Mean obliquity
    eps0 = 0.40931975 - 2.27e-6 * t

    # Eccentricity
    e = 0.016751 - 4.2e-7 * t
    esq = e * e

    # True anomaly
    v = em + 2.0 * e * math.sin(em) + 1.25 * esq * math.sin(2.0 * em)

    # True ecliptic longitude
    elt = v + gamma

    # True distance
    r = (1.0 - esq) / (1.0 + e * math.cos(v))

    # Moon's mean longitude
    elmm = math.fmod(4.72 + 83.9971 * t, D2PI)

    coselt = math.cos(elt)
    sineps = math.sin(eps0)
    coseps = math.cos(eps0)
    w1 = -r * math.sin(elt)
    w2 = -_ORBITAL_SPEED * (coselt + e * math.cos(gamma))
    selmm = math.sin(elmm)
    celmm = math.cos(elmm)

    return [
        -r * coselt - _EMB_DISTANCE * celmm,
        (w1 - _EMB_DISTANCE * selmm) * coseps,
        w1 * sineps,
        _ORBITAL_SPEED * (math.sin(elt) + e * math.sin(gamma)) + _EMB_SPEED * selmm,
        (w2 - _EMB_SPEED * celmm) * coseps,
        w2 * sineps,
    ]


# =============================================================================
# EVP (STUMPFF)
# =============================================================================

# Sidereal rate in longitude (radians per second)
_DCSLD = 1.990987e-07
_CCSGD = 1.990969e-07

# Lunar terms
_CCKM = 3.122140e-05
_CCMLD = 2.661699e-06
_CCFDI = 2.399485e-07

# Ratio of Earth and EMB masses to Sun
_DC1MME = 0.99999696

# Lunar orbit inclination
_CCIM = 8.978749e-2

# Mean longitudes of the EMB, perihelion and planets: constant, T, T**2
_DCFEL = (
    (1.7400353e+00, 6.2833195099091e+02, 5.2796e-06),
    (6.2565836e+00, 6.2830194572674e+02, -2.6180e-06),
    (4.7199666e+00, 8.3997091449254e+03, -1.9780e-05),
    (1.9636505e-01, 8.4334662911720e+03, -5.6044e-05),
    (4.1547339e+00, 5.2993466764997e+01, 5.8845e-06),
    (4.6524223e+00, 2.1354275911213e+01, 5.6797e-06),
    (4.2620486e+00, 7.5025342197656e+00, 5.5317e-06),
    (1.4740694e+00, 3.8377331909193e+00, 5.6093e-06),
)

# Mean obliquity: constant, T, T**2
_DCEPS = (4.093198e-01, -2.271110e-04, -2.860401e-08)

# Eccentricities, perihelia and inclinations of the planets
_CCSEL = (
    (1.675104e-02, -4.179579e-05, -1.260516e-07),
    (2.220221e-01, 2.809917e-02, 1.852532e-05),
    (1.589963e+00, 3.418075e-02, 1.430200e-05),
    (2.994089e+00, 2.590824e-02, 4.155840e-06),
    (8.155457e-01, 2.486352e-02, 6.836840e-06),
    (1.735614e+00, 1.763719e-02, 6.370440e-06),
    (1.968564e+00, 1.524020e-02, -2.517152e-06),
    (1.282417e+00, 8.703393e-03, 2.289292e-05),
    (2.280820e+00, 1.918010e-02, 4.484520e-06),
    (4.833473e-02, 1.641773e-04, -4.654200e-07),
    (5.589232e-02, -3.455092e-04, -7.388560e-07),
    (4.634443e-02, -2.658234e-05, 7.757000e-08),
    (8.997041e-03, 6.329728e-06, -1.939256e-09),
    (2.284178e-02, -9.941590e-05, 6.787400e-08),
    (4.350267e-02, -6.839749e-05, -2.714956e-07),
    (1.348204e-02, 1.091504e-05, 6.903760e-07),
    (3.106570e-02, -1.665665e-04, -1.590188e-07),
)

# Planetary perturbations of the EMB: arguments and amplitudes
_DCARGS = (
    (5.0974222e+00, -7.8604195454652e+02),
    (3.9584962e+00, -5.7533848094674e+02),
    (1.6338070e+00, -1.1506769618935e+03),
    (2.5487111e+00, -3.9302097727326e+02),
    (4.9255514e+00, -5.8849265665348e+02),
    (1.3363463e+00, -5.5076098609303e+02),
    (1.6072053e+00, -5.2237501616674e+02),
    (1.3629480e+00, -1.1790629318198e+03),
    (5.5657014e+00, -1.0977134971135e+03),
    (5.0708205e+00, -1.5774000881978e+02),
    (3.9318944e+00, 5.2963464780000e+01),
    (4.8989497e+00, 3.9809289073258e+01),
    (1.3097446e+00, 7.7540959633708e+01),
    (3.5147141e+00, 7.9618578146517e+01),
    (3.5413158e+00, -5.4868336758022e+02),
)

_CCAMPS = (
    (-2.279594e-5, 1.407414e-5, 8.273188e-6, 1.340565e-5, -2.490817e-7),
    (-3.494537e-5, 2.860401e-7, 1.289448e-7, 1.627237e-5, -1.823138e-7),
    (6.593466e-7, 1.322572e-5, 9.258695e-6, -4.674248e-7, -3.646275e-7),
    (1.140767e-5, -2.049792e-5, -4.747930e-6, -2.638763e-6, -1.245408e-7),
    (9.516893e-6, -2.748894e-6, -1.319381e-6, -4.549908e-6, -1.864821e-7),
    (7.310990e-6, -1.924710e-6, -8.772849e-7, -3.334143e-6, -1.745256e-7),
    (-2.603449e-6, 7.359472e-6, 3.168357e-6, 1.119056e-6, -1.655307e-7),
    (-3.228859e-6, 1.308997e-7, 1.013137e-7, 2.403899e-6, -3.736225e-7),
    (3.442177e-7, 2.671323e-6, 1.832858e-6, -2.394688e-7, -3.478444e-7),
    (8.702406e-6, -8.421214e-6, -1.372341e-6, -1.455234e-6, -4.998479e-8),
    (-1.488378e-6, -1.251789e-5, 5.226868e-7, -2.049301e-7, 0.0),
    (-8.043059e-6, -2.991300e-6, 1.473654e-7, -3.154542e-7, 0.0),
    (3.699128e-6, -3.316126e-6, 2.901257e-7, 3.407826e-7, 0.0),
    (2.550120e-6, -1.241123e-6, 9.901116e-8, 2.210482e-7, 0.0),
    (-6.351059e-7, 2.341650e-6, 1.061492e-6, 2.878231e-7, 0.0),
)

# Secular perturbations in longitude
_CCSEC3 = -7.757020e-08
_CCSEC = (
    (1.289600e-06, 5.550147e-01, 2.076942e+00),
    (3.102810e-05, 4.035027e+00, 3.525565e-01),
    (9.124190e-06, 9.990265e-01, 2.622706e+00),
    (9.793240e-07, 5.508259e+00, 1.559103e+01),
)

# Lunar perturbations
_DCARGM = (
    (5.1679830e+00, 8.3286911095275e+03),
    (5.4913150e+00, -7.2140632838100e+03),
    (5.9598530e+00, 1.5542754389685e+04),
)
_CCAMPM = (
    (1.097594e-01, 2.896773e-07, 5.450474e-02, 1.438491e-07),
    (-2.223581e-02, 5.083103e-08, 1.002548e-02, -2.291823e-08),
    (1.148966e-02, 5.658888e-08, 8.249439e-03, 4.063015e-08),
)

# Planetary masses (Venus, Jupiter, Saturn, Uranus) scaled for velocity and
# position of the Sun about the barycentre
_CCPAMV = (8.326827e-11, 1.843484e-11, 1.988712e-12, 1.881276e-12)
_CCPAM = (4.960906e-3, 2.727436e-3, 8.392311e-4, 1.556861e-3)


def evp(
    date: float, deqx: float
) -> Tuple[List[float], List[float], List[float], List[float]]:
    """
    Barycentric and heliocentric velocity and position of the Earth.

    Args:
        date: TDB as a Modified Julian Date (TT is adequate)
        deqx: Julian epoch of the mean equator and equinox of the results;
            zero or negative for the FK4-FK5 corrected mean equinox of date

    Returns:
        Tuple: (dvb, dpb, dvh, dph)
            - dvb: Barycentric velocity (AU/s)
            - dpb: Barycentric position (AU)
            - dvh: Heliocentric velocity (AU/s)
            - dph: Heliocentric position (AU)

    Algorithm:
        1. Evaluate the mean elements of the EMB and the planets
        2. Add the planetary and lunar perturbations to the EMB
        3. Form heliocentric velocity and position, then shift to the
           barycentre using the four major perturbing planets
        4. Rotate from the ecliptic to the equator and apply the
           FK4-FK5 equinox correction
        5. Optionally precess to epoch deqx
    """
    # Time arguments
    dt = (date - 15019.5) / 36525.0
    dtsq = dt * dt

    # Mean elements
    values = [
        math.fmod(c0 + dt * c1 + dtsq * c2, D2PI) for c0, c1, c2 in _DCFEL
    ]
    dml = values[0]
    forbel = values[1:]
    deps = math.fmod(_DCEPS[0] + dt * _DCEPS[1] + dtsq * _DCEPS[2], D2PI)
    sorbel = [math.fmod(c0 + dt * c1 + dtsq * c2, D2PI) for c0, c1, c2 in _CCSEL]
    e = sorbel[0]
    g = forbel[0]

    # Secular perturbations in longitude
    sn = [math.sin(math.fmod(c1 + dt * c2, D2PI)) for _, c1, c2 in _CCSEC]

    # Periodic perturbations of the EMB
    pertl = (
        _CCSEC[0][0] * sn[0]
        + _CCSEC[1][0] * sn[1]
        + (_CCSEC[2][0] + dt * _CCSEC3) * sn[2]
        + _CCSEC[3][0] * sn[3]
    )
    pertld = 0.0
    pertr = 0.0
    pertrd = 0.0
    for k, ((a0, a1), amps) in enumerate(zip(_DCARGS, _CCAMPS)):
        a = math.fmod(a0 + dt * a1, D2PI)
        cosa = math.cos(a)
        sina = math.sin(a)
        pertl += amps[0] * cosa + amps[1] * sina
        pertr += amps[2] * cosa + amps[3] * sina
        if k < 10:
            pertld += (amps[1] * cosa - amps[0] * sina) * amps[4]
            pertrd += (amps[3] * cosa - amps[2] * sina) * amps[4]

    # Elliptic part of the motion of the EMB
    esq = e * e
    param = 1.0 - esq
    twoe = e + e
    twog = g + g
    phi = twoe * (
        (1.0 - esq * 0.125) * math.sin(g)
        + e * 0.625 * math.sin(twog)
        + esq * 0.54166667 * math.sin(g + twog)
    )
    f = g + phi
    sinf = math.sin(f)
    cosf = math.cos(f)
    dpsi = param / (1.0 + e * cosf)
    phid = twoe * _CCSGD * ((1.0 + esq * 1.5) * cosf + e * (1.25 - sinf * sinf * 0.5))
    psid = _CCSGD * e * sinf / math.sqrt(param)

    # Perturbed heliocentric motion of the EMB
    d1pdro = 1.0 + pertr
    drd = d1pdro * (psid + dpsi * pertrd)
    drld = d1pdro * dpsi * (_DCSLD + phid + pertld)
    dtl = math.fmod(dml + phi + pertl, D2PI)
    dsinls = math.sin(dtl)
    dcosls = math.cos(dtl)
    dxhd = drd * dcosls - drld * dsinls
    dyhd = drd * dsinls + drld * dcosls

    # Influence of eccentricity, evection and variation on the geocentric
    # motion of the Moon
    pertl = 0.0
    pertld = 0.0
    pertp = 0.0
    pertpd = 0.0
    for (a0, a1), amps in zip(_DCARGM, _CCAMPM):
        a = math.fmod(a0 + dt * a1, D2PI)
        sina = math.sin(a)
        cosa = math.cos(a)
        pertl += amps[0] * sina
        pertld += amps[1] * cosa
        pertp += amps[2] * cosa
        pertpd -= amps[3] * sina

    # Heliocentric motion of the Earth
    tl = forbel[1] + pertl
    sinlm = math.sin(tl)
    coslm = math.cos(tl)
    sigma = _CCKM / (1.0 + pertp)
    a = sigma * (_CCMLD + pertld)
    b = sigma * pertpd
    dxhd = dxhd + a * sinlm + b * coslm
    dyhd = dyhd - a * coslm + b * sinlm
    dzhd = -sigma * _CCFDI * math.cos(forbel[2])

    # Barycentric motion of the Earth
    dxbd = dxhd * _DC1MME
    dybd = dyhd * _DC1MME
    dzbd = dzhd * _DC1MME
    sinlp = []
    coslp = []
    for k in range(4):
        plon = forbel[k + 3]
        pomg = sorbel[k + 1]
        pecc = sorbel[k + 9]
        tl = math.fmod(plon + 2.0 * pecc * math.sin(plon - pomg), D2PI)
        sinlp.append(math.sin(tl))
        coslp.append(math.cos(tl))
        dxbd += _CCPAMV[k] * (sinlp[k] + pecc * math.sin(pomg))
        dybd -= _CCPAMV[k] * (coslp[k] + pecc * math.cos(pomg))
        dzbd -= _CCPAMV[k] * sorbel[k + 13] * math.cos(plon - sorbel[k + 5])

    # Transition to mean equator of date
    dcosep = math.cos(deps)
    dsinep = math.sin(deps)
    dyahd = dcosep * dyhd - dsinep * dzhd
    dzahd = dsinep * dyhd + dcosep * dzhd
    dyabd = dcosep * dybd - dsinep * dzbd
    dzabd = dsinep * dybd + dcosep * dzbd

    # Heliocentric coordinates of the Earth
    dr = dpsi * d1pdro
    flatm = _CCIM * math.sin(forbel[2])
    a = sigma * math.cos(flatm)
    dxh = dr * dcosls - a * coslm
    dyh = dr * dsinls - a * sinlm
    dzh = -sigma * math.sin(flatm)

    # Barycentric coordinates of the Earth
    dxb = dxh * _DC1MME
    dyb = dyh * _DC1MME
    dzb = dzh * _DC1MME
    for k in range(4):
        flat = sorbel[k + 13] * math.sin(forbel[k + 3] - sorbel[k + 5])
        a = _CCPAM[k] * (1.0 - sorbel[k + 9] * math.cos(forbel[k + 3] - sorbel[k + 1]))
        b = a * math.cos(flat)
        dxb -= b * coslp[k]
        dyb -= b * sinlp[k]
        dzb -= a * math.sin(flat)

    # Transition to mean equator of date
    dyah = dcosep * dyh - dsinep * dzh
    dzah = dsinep * dyh + dcosep * dzh
    dyab = dcosep * dyb - dsinep * dzb
    dzab = dsinep * dyb + dcosep * dzb

    # Copy results, applying the FK4 to FK5 equinox correction
    depj = epj(date)
    deqcor = S2R * (0.035 + 0.00085 * (depj - B1950_JEPOCH))
    dvh = [dxhd - deqcor * dyahd, dyahd + deqcor * dxhd, dzahd]
    dvb = [dxbd - deqcor * dyabd, dyabd + deqcor * dxbd, dzabd]
    dph = [dxh - deqcor * dyah, dyah + deqcor * dxh, dzah]
    dpb = [dxb - deqcor * dyab, dyab + deqcor * dxb, dzab]

    # Was precession to another equinox requested?
    if deqx > 0.0:
        rmat = prec(depj, deqx)
        dvh = dmxv(rmat, dvh)
        dvb = dmxv(rmat, dvb)
        dph = dmxv(rmat, dph)
        dpb = dmxv(rmat, dpb)

    return dvb, dpb, dvh, dph
