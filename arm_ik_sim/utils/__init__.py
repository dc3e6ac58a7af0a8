"""
Shared constants, transforms, and helper utilities.

Centralizes the UR10 joint table, solver and interaction defaults,
quaternion math, and small stateless helpers used across the package.
"""
