"""
Utilities package for polyline reduction.

This package provides the point type and the conversion, validation,
logging and sample-data helpers shared by the reducers.
"""

from .geometry import (
    Point,
    GeometryUtils,
    PathUtils,
    DataValidator
)

__all__ = [
    'Point',
    'GeometryUtils',
    'PathUtils',
    'DataValidator'
]
