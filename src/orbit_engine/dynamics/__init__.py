"""
===============================================================================
ORBIT ENGINE - Dynamics Module
===============================================================================
Two-body orbit models.

Submodules:
    elements       -- OrbitalElements, OrbitType, ReferenceBody
    kepler         -- Newton-Raphson solver for Kepler's equation
    anomalies      -- true / eccentric / mean anomaly conversions
    geometry       -- radius, energy, velocity, period formulas
    state_vectors  -- (r, v) <-> orbital elements
    orbit          -- Orbit facade and RenderedState snapshots
===============================================================================
"""
