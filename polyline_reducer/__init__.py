"""
Polyline Reducer Package
Ramer-Douglas-Peucker curve simplification with fixed or chord-derived tolerance.
"""

from .core.ramer_douglas_peucker import (
    RamerDouglasPeucker,
    compute_local_tolerance,
    reduce,
    reduce_mask,
    reduce_non_parametric,
)
from .utils.geometry import Point

__version__ = "1.0.0"
__all__ = [
    "Point",
    "RamerDouglasPeucker",
    "compute_local_tolerance",
    "reduce",
    "reduce_mask",
    "reduce_non_parametric",
]
