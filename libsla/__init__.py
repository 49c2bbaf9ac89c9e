"""
libsla - positional astronomy routines.

A Python library of the classical SLALIB algorithms: spherical
trigonometry, coordinate transforms, calendars and time scales, precession
and nutation, low-precision ephemerides, atmospheric refraction and the
linear algebra (Gauss-Jordan, SVD, least squares) behind the plate-fitting
routines.

Angles are in radians and dates are Modified Julian Dates unless stated
otherwise. Functions that report a condition return a status code
alongside their result (see libsla.constants).
"""

from .constants import *

# Linear algebra
from .matrix import MatrixSolution, dmat, smat
from .decomposition import SvdResult, svd, svdsol, svdcov

# Refraction and air mass
from .refraction import refro, refco, refcoq, refz, refv, atmdsp, airmas

# Angles and vectors
from .utils import (
    Sexagesimal,
    drange,
    dranrm,
    dd2tf,
    dr2tf,
    dr2af,
    dtf2d,
    dtf2r,
    daf2r,
)
from .vectors import (
    dcs2c,
    dcc2s,
    ds2c6,
    dc62s,
    dvn,
    dvdv,
    dvxv,
    dmxv,
    dimxv,
    dmxm,
    dav2m,
    dm2av,
    deuler,
    dsep,
    dsepv,
    dbear,
    dpav,
)

# Calendars and time scales
from .time_utils import (
    cldj,
    caldj,
    clyd,
    calyd,
    djcl,
    djcal,
    epj,
    epj2d,
    epb,
    epb2d,
    epco,
    dat,
    dtt,
    dt,
    gmst,
    gmsta,
    eqeqx,
)

# Precession and nutation
from .precession import prec, precl, prebn, preces, nutc80, nut, prenut, ecmat

# Coordinate transforms
from .coordinates import (
    AltAz,
    HourAngles,
    de2h,
    dh2e,
    altaz,
    zd,
    pa,
    pda2h,
    pdq2h,
    eqecl,
    ecleq,
    eqgal,
    galeq,
    galsup,
    supgal,
    eg50,
    ge50,
    etrms,
    addet,
    subet,
    pm,
)
from .tangent_plane import ds2tp, dv2tp, dtp2s, dtp2v, dtps2c, dtpv2c

# Plate fitting
from .fitting import fitxy, pxy, invf, xy2xy, dcmpf, pcd, unpcd

# Observatories and ephemerides
from .observatories import Observatory, obs, geoc, pvobs, polmo
from .velocity import rverot, rvgalc, rvlg, rvlsrd, rvlsrk, ecor
from .ephemerides import earth, evp
from .lunar import dmoon, moon

# Random numbers and combinatorics
from .rng import UniformGenerator, GaussianGenerator, random, gresid
from .combinatorics import combn, permut

# Configuration
from .state import (
    add_leap_second,
    get_leap_seconds,
    clear_leap_seconds,
    add_observatory,
    get_observatories,
    clear_observatories,
    reset,
)

__version__ = "0.1.0"
__license__ = "GPL-3.0"

__all__ = [
    # Linear algebra
    "MatrixSolution",
    "dmat",
    "smat",
    "SvdResult",
    "svd",
    "svdsol",
    "svdcov",
    # Refraction
    "refro",
    "refco",
    "refcoq",
    "refz",
    "refv",
    "atmdsp",
    "airmas",
    # Angles and vectors
    "Sexagesimal",
    "drange",
    "dranrm",
    "dd2tf",
    "dr2tf",
    "dr2af",
    "dtf2d",
    "dtf2r",
    "daf2r",
    "dcs2c",
    "dcc2s",
    "ds2c6",
    "dc62s",
    "dvn",
    "dvdv",
    "dvxv",
    "dmxv",
    "dimxv",
    "dmxm",
    "dav2m",
    "dm2av",
    "deuler",
    "dsep",
    "dsepv",
    "dbear",
    "dpav",
    # Time
    "cldj",
    "caldj",
    "clyd",
    "calyd",
    "djcl",
    "djcal",
    "epj",
    "epj2d",
    "epb",
    "epb2d",
    "epco",
    "dat",
    "dtt",
    "dt",
    "gmst",
    "gmsta",
    "eqeqx",
    # Precession and nutation
    "prec",
    "precl",
    "prebn",
    "preces",
    "nutc80",
    "nut",
    "prenut",
    "ecmat",
    # Coordinates
    "AltAz",
    "HourAngles",
    "de2h",
    "dh2e",
    "altaz",
    "zd",
    "pa",
    "pda2h",
    "pdq2h",
    "eqecl",
    "ecleq",
    "eqgal",
    "galeq",
    "galsup",
    "supgal",
    "eg50",
    "ge50",
    "etrms",
    "addet",
    "subet",
    "pm",
    "ds2tp",
    "dv2tp",
    "dtp2s",
    "dtp2v",
    "dtps2c",
    "dtpv2c",
    # Fitting
    "fitxy",
    "pxy",
    "invf",
    "xy2xy",
    "dcmpf",
    "pcd",
    "unpcd",
    # Observatories, velocities, ephemerides
    "Observatory",
    "obs",
    "geoc",
    "pvobs",
    "polmo",
    "rverot",
    "rvgalc",
    "rvlg",
    "rvlsrd",
    "rvlsrk",
    "ecor",
    "earth",
    "evp",
    "dmoon",
    "moon",
    # Random numbers and combinatorics
    "UniformGenerator",
    "GaussianGenerator",
    "random",
    "gresid",
    "combn",
    "permut",
    # Configuration
    "add_leap_second",
    "get_leap_seconds",
    "clear_leap_seconds",
    "add_observatory",
    "get_observatories",
    "clear_observatories",
    "reset",
]
