"""
===============================================================================
ORBIT ENGINE - Core Module
===============================================================================
Building blocks shared by the dynamics package.

Submodules:
    constants   -- SI physical constants and numerical defaults
    vector      -- immutable 3-vector with rotation and angle queries
    frames      -- perifocal <-> reference frame rotations
    exceptions  -- typed errors (invalid input vs numerical breakdown)
    config      -- EngineConfig, YAML loading, logging setup
===============================================================================
"""
