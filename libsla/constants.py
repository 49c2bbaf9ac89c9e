"""
Constants and status codes for libsla.

Numerical constants follow the values used throughout SLALIB so that results
agree with the published Fortran test vectors to the last few bits.
"""

# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================

DPI = 3.141592653589793238462643  # pi
D2PI = 6.283185307179586476925287  # 2 pi
DPIBY2 = 1.570796326794896619231322  # pi / 2
D2R = 0.0174532925199432957692369  # degrees to radians
R2D = 57.29577951308232087679815  # radians to degrees
AS2R = 0.484813681109535994e-5  # arcseconds to radians
S2R = 7.272205216643039903848712e-5  # seconds of time to radians
T2AS = 1296000.0  # turns to arcseconds

# =============================================================================
# EPOCHS AND PHYSICAL CONSTANTS
# =============================================================================

MJD_J2000 = 51544.5  # MJD of J2000.0
MJD_B1900 = 15019.81352  # MJD of B1900.0
JULIAN_YEAR = 365.25  # days
TROPICAL_YEAR = 365.242198781  # days (B1900)
JULIAN_CENTURY = 36525.0  # days
B1950_JEPOCH = 1949.9997904423  # Julian epoch of B1950.0
TT_MINUS_TAI = 32.184  # seconds
AU_KM = 1.4959787066e8  # astronomical unit (km)
AU_LIGHT_SECONDS = 499.0047837  # light time for 1 AU (s)
EARTH_RADIUS_AU = 4.2635212653763e-5  # 6378.137 km / AU

# =============================================================================
# CATALOGUE SYSTEMS (preces)
# =============================================================================

FK4 = "FK4"
FK5 = "FK5"

# =============================================================================
# STATUS CODES
# =============================================================================

# Calendar to MJD conversions (cldj, caldj, clyd, calyd)
G2J_OK = 0
G2J_BAD_YEAR = 1
G2J_BAD_MONTH = 2
G2J_BAD_DAY = 3

# Sexagesimal to angle conversions (dtf2d, dtf2r, daf2r)
T2D_OK = 0
T2D_BAD_HOURS = 1
T2D_BAD_MINUTES = 2
T2D_BAD_SECONDS = 3

D2R_OK = 0
D2R_BAD_DEGREES = 1
D2R_BAD_ARCMINUTES = 2
D2R_BAD_ARCSECONDS = 3

# MJD to calendar conversions (djcl, djcal)
J2G_OK = 0
J2G_BAD_DATE = -1

# SVD status (svd)
SVD_OK = 0
SVD_BAD_SHAPE = -1

# Tangent-plane projections (ds2tp, dv2tp)
TPP_OK = 0
TPP_TOO_FAR = 1
TPP_ASTAR_ON_TP = 2
TPP_ASTAR_TOO_FAR = 3

# Linear model fitting (fitxy)
FIT_OK = 0
FIT_INSUFFICIENT = -1
FIT_NONE = -2

# Combinations and permutations (combn, permut)
CPS_OK = 0
CPS_NO_MORE = 1
CPS_INVALID_ARG = -1

# =============================================================================
# LIMITS
# =============================================================================

SVD_MAX_ITERATIONS = 30  # QR iterations per singular value
REFRACTION_MAX_STRIPS = 16384  # Simpson strip ceiling in refro()

# =============================================================================
# LEAP SECONDS
# =============================================================================

# Built-in (MJD of step, TAI-UTC from that date) pairs since 1972, oldest
# first. Later steps can be registered with libsla.state.add_leap_second().
LEAP_SECONDS = (
    (41317, 10),
    (41499, 11),
    (41683, 12),
    (42048, 13),
    (42413, 14),
    (42778, 15),
    (43144, 16),
    (43509, 17),
    (43874, 18),
    (44239, 19),
    (44786, 20),
    (45151, 21),
    (45516, 22),
    (46247, 23),
    (47161, 24),
    (47892, 25),
    (48257, 26),
    (48804, 27),
    (49169, 28),
    (49534, 29),
    (50083, 30),
    (50630, 31),
    (51179, 32),
    (53736, 33),
    (54832, 34),
    (56109, 35),
    (57204, 36),
    (57754, 37),
)
