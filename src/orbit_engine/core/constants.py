"""
===============================================================================
ORBIT ENGINE - Physical and Numerical Constants
===============================================================================
Central repository for the constants used by the orbit engine. SI units
throughout (meters, seconds, kilograms, radians); engine time inputs are
integer milliseconds and are converted with MS_PER_SECOND.

Gravitational parameters come from IAU 2012 / IERS standards where applicable.
===============================================================================
"""

import numpy as np


# =============================================================================
# MATHEMATICAL CONSTANTS
# =============================================================================
PI = np.pi
TWO_PI = 2.0 * np.pi
HALF_PI = 0.5 * np.pi

# =============================================================================
# FUNDAMENTAL PHYSICAL CONSTANTS
# =============================================================================
GRAVITATIONAL_CONSTANT = 6.67430e-11   # m^3 / (kg * s^2)
MS_PER_SECOND = 1000.0                 # engine time unit is the millisecond

# =============================================================================
# REFERENCE BODIES
# =============================================================================
EARTH_MU = 3.986004418e14              # Gravitational parameter (m^3/s^2)
EARTH_MASS = 5.97237e24                # kg
MOON_MU = 4.9048695e12                 # m^3/s^2
JUPITER_MU = 1.26686534e17             # m^3/s^2
SUN_MU = 1.32712440018e20              # m^3/s^2

# Lower-case body name -> mu, read by ReferenceBody.named
BODY_MU = {
    'earth': EARTH_MU,
    'moon': MOON_MU,
    'jupiter': JUPITER_MU,
    'sun': SUN_MU,
}

# =============================================================================
# NUMERICAL DEFAULTS
# =============================================================================
# Vectors built from orbit geometry accumulate floating-point error, so they
# are compared within EPSILON rather than bit-for-bit.
EPSILON = 1e-9

# Kepler solver: target |E - e*sin(E) - M| < 10^-precision, hard iteration cap
DEFAULT_KEPLER_PRECISION = 10
MAX_KEPLER_ITERATIONS = 30

# Smallest |1 - e*cos(E)| accepted as a Newton denominator
NEWTON_DENOMINATOR_TOLERANCE = 1e-12

# Derived eccentricities this close to 0 or 1 are snapped to circular / parabolic
ECCENTRICITY_TOLERANCE = 1e-10
