"""
Shared geometry primitives for polyline reduction.

This module provides the immutable point type used throughout the package
together with conversion and validation helpers for the point formats
callers tend to hand in (Point lists, coordinate pairs, numpy arrays).
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class Point:
    """Immutable 2D point compared by exact coordinate value."""
    x: float
    y: float

    def __post_init__(self):
        object.__setattr__(self, 'x', float(self.x))
        object.__setattr__(self, 'y', float(self.y))

    def __repr__(self):
        return f"Point({self.x:g}, {self.y:g})"

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y


class GeometryUtils:
    """Utility class for geometric calculations."""

    @staticmethod
    def squared_perpendicular_distance(point: Point, line_start: Point, line_end: Point) -> float:
        """
        Squared distance from a point to the infinite line through two points.

        Coincident line points fall back to the squared distance to
        ``line_start``.
        """
        dist_x = line_end.x - line_start.x
        dist_y = line_end.y - line_start.y
        denominator = dist_x * dist_x + dist_y * dist_y
        if denominator == 0.0:
            return (point.x - line_start.x) ** 2 + (point.y - line_start.y) ** 2

        numerator = dist_x * (point.y - line_start.y) - dist_y * (point.x - line_start.x)
        return (numerator / denominator) * numerator

    @staticmethod
    def max_deviation(points: Sequence[Point], start: int, end: int) -> Tuple[int, float]:
        """
        Brute-force search for the interior point furthest from a chord.

        Returns ``(index, squared_distance)`` of the first maximum over the
        points strictly between ``start`` and ``end``, or ``(start, 0.0)``
        when there are none.
        """
        best_index, best = start, 0.0
        for i in range(start + 1, end):
            d = GeometryUtils.squared_perpendicular_distance(points[i], points[start], points[end])
            if d > best:
                best_index, best = i, d
        return best_index, best


class PathUtils:
    """Utility class for converting between point formats."""

    @staticmethod
    def to_points(data: Iterable) -> List[Point]:
        """
        Convert coordinate data to a list of Point objects.

        Accepts Point instances (kept as the same objects), ``(x, y)``
        pairs, ``{'x': .., 'y': ..}`` dicts, or an ``(n, 2)`` numpy array.

        Raises:
            ValueError: If an item cannot be read as a 2D coordinate
        """
        if isinstance(data, np.ndarray):
            DataValidator.validate_array(data)
            return [Point(x, y) for x, y in data.tolist()]

        points = []
        for i, item in enumerate(data):
            if isinstance(item, Point):
                points.append(item)
            elif isinstance(item, dict):
                if 'x' not in item or 'y' not in item:
                    raise ValueError(f"Point {i} must contain 'x' and 'y'")
                points.append(Point(DataValidator.coordinate(item['x'], i),
                                    DataValidator.coordinate(item['y'], i)))
            else:
                try:
                    x, y = item
                except (TypeError, ValueError):
                    raise ValueError(f"Point {i} must be an (x, y) pair, got {item!r}") from None
                points.append(Point(DataValidator.coordinate(x, i), DataValidator.coordinate(y, i)))
        return points

    @staticmethod
    def to_array(points: Sequence[Point]) -> np.ndarray:
        """Copy points into a contiguous ``(n, 2)`` float64 buffer."""
        buffer = np.empty((len(points), 2), dtype=np.float64)
        for i, (x, y) in enumerate(points):
            buffer[i, 0] = x
            buffer[i, 1] = y
        return buffer


class DataValidator:
    """Utility class for validating coordinate data."""

    @staticmethod
    def coordinate(value, index: int) -> float:
        """Read one coordinate as a float, rejecting non-numeric values."""
        if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
            raise ValueError(f"Point {index} coordinates must be numeric, got {value!r}")
        return float(value)

    @staticmethod
    def validate_array(data: np.ndarray) -> None:
        """Validate that an array holds ``n`` rows of real 2D coordinates."""
        if data.ndim != 2 or data.shape[1] != 2:
            raise ValueError(f"Expected an (n, 2) array of coordinates, got shape {data.shape}")
        if not np.issubdtype(data.dtype, np.number) or np.iscomplexobj(data):
            raise ValueError(f"Coordinate array must be real-valued, got dtype {data.dtype}")

    @staticmethod
    def validate_buffer(buffer: np.ndarray) -> None:
        """Reject NaN or infinite coordinates."""
        if not np.isfinite(buffer).all():
            bad = int(np.flatnonzero(~np.isfinite(buffer).all(axis=1))[0])
            raise ValueError(f"Point {bad} has a non-finite coordinate")
