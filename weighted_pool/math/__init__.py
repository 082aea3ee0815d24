"""Mathematical utilities for the pool engine.

This package provides the fixed-point primitives used by pool pricing:
- SCALE: 6-decimal fixed-point unit (10^6 == 1.0)
- ln / exp / power: deterministic LogExpMath-style functions
"""

from weighted_pool.math.fixed_point import SCALE, exp, ln, mul_div, power

__all__ = ["SCALE", "exp", "ln", "mul_div", "power"]
