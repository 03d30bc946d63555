"""
Ramer-Douglas-Peucker polyline reduction.

Given a curve composed of line segments, find a similar curve with fewer
points. Dissimilarity is the maximum perpendicular distance between the
original points and the simplified chords (the Hausdorff distance between
the curves), and the simplified curve is always a subset of the original
points.

Two policies share one recursion:

* tolerance based: a caller supplied epsilon, squared once up front so the
  inner loop never takes a square root;
* non-parametric: a tolerance derived from each chord's own length and
  direction (Prasad, Leung, Quek and Cho), so no parameter is needed.

Points are copied once into an ``(n, 2)`` numpy buffer and the recursion
works on ``(first, last)`` index pairs into it.
"""

import logging
import math
import time
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from ..config.settings import SimplifierConfig
from ..utils.geometry import Point, GeometryUtils, PathUtils, DataValidator

logger = logging.getLogger(__name__)

# (dist_x, dist_y) of the current chord -> squared tolerance
TolerancePolicy = Callable[[float, float], float]


def compute_local_tolerance(dist_x: float, dist_y: float) -> float:
    """
    Squared tolerance for a chord, derived from its digitization error bound.

    Follows Prasad, Leung, Quek and Cho, "A novel framework for making
    dominant point detection methods non-parametric" (Image and Vision
    Computing, 2012): the maximum angular deviation a chord of length ``s``
    can suffer from pixel-level digitization, turned back into a distance.

    Args:
        dist_x: Horizontal extent of the chord (x2 - x1)
        dist_y: Vertical extent of the chord (y2 - y1)

    Returns:
        The squared local tolerance, comparable to squared distances
    """
    s = math.hypot(dist_x, dist_y)
    if s == 0.0:
        return 0.0

    if dist_x == 0.0:
        # Vertical chord: slope is infinite
        phi = math.copysign(math.pi / 2.0, dist_y)
    elif math.isinf(s):
        phi = math.atan2(dist_y, dist_x)
    else:
        phi = math.atan(dist_y / dist_x)
    cos_phi = math.cos(phi)
    sin_phi = math.sin(phi)
    weights = (abs(sin_phi + cos_phi), abs(sin_phi - cos_phi))

    if math.isinf(s):
        # Limit of s * atan(w / s) as s grows
        return max(weights) ** 2

    inv_s = 1.0 / s
    t_max = inv_s * (abs(cos_phi) + abs(sin_phi))
    # 1 - t + t^2, arranged so a huge t_max overflows to inf instead of NaN
    poly = t_max * (t_max - 1.0) + 1.0
    partial_phi = max(math.atan(inv_s * w * poly) if w else 0.0 for w in weights)

    tolerance = s * partial_phi
    return tolerance * tolerance


def _fixed_tolerance(squared_epsilon: float) -> TolerancePolicy:
    return lambda dist_x, dist_y: squared_epsilon


def _rescaled_distances(interior: np.ndarray, p1: np.ndarray, p2: np.ndarray) -> Tuple[np.ndarray, int]:
    """
    Squared distances measured relative to ``p1`` after scaling by a power of two.

    Used when the direct products over- or underflow. Returns the distances
    in scaled units and the exponent ``e``; true distances are ``d * 4**e``.
    """
    exponent = math.frexp(float(max(np.abs(p1).max(), np.abs(p2).max())))[1]
    origin = np.ldexp(p1, -exponent)
    chord = np.ldexp(p2, -exponent) - origin
    offsets = np.ldexp(interior, -exponent) - origin

    numerator = chord[0] * offsets[:, 1] - chord[1] * offsets[:, 0]
    distances = (numerator / (chord[0] * chord[0] + chord[1] * chord[1])) * numerator
    return distances, exponent


def _max_deviation(buffer: np.ndarray, first: int, last: int,
                   full_scan: bool) -> Optional[Tuple[int, float, float, float]]:
    """
    Find the interior point furthest from the chord ``buffer[first]``-``buffer[last]``.

    Returns ``(index, squared_distance, dist_x, dist_y)``, or None when the
    chord has zero length. Without ``full_scan`` the penultimate point is
    not inspected.

    Raises:
        ValueError: If the coordinates span a range too wide to measure
    """
    x1, y1 = buffer[first]
    x2, y2 = buffer[last]
    if x1 == x2 and y1 == y2:
        return None

    with np.errstate(over='ignore', under='ignore', divide='ignore', invalid='ignore'):
        dist_xy = x1 * y2 - x2 * y1
        dist_x = x2 - x1
        dist_y = y2 - y1
        denominator = dist_x * dist_x + dist_y * dist_y

        stop = last if full_scan else last - 1
        if stop <= first + 1:
            return first, 0.0, float(dist_x), float(dist_y)

        interior = buffer[first + 1:stop]
        numerator = dist_xy + dist_x * interior[:, 1] - dist_y * interior[:, 0]
        distances = (numerator / denominator) * numerator

        exponent = 0
        if not 0.0 < denominator < math.inf or not np.isfinite(distances).all():
            distances, exponent = _rescaled_distances(interior, buffer[first], buffer[last])
            if np.isnan(distances).any():
                raise ValueError(f"Cannot measure deviation from the chord between points "
                                 f"{first} and {last}: coordinate range too wide")

        # argmax returns the first maximum, same as a strict '>' scan
        offset = int(np.argmax(distances))
        dmax = float(np.ldexp(distances[offset], 2 * exponent))

    return first + 1 + offset, dmax, float(dist_x), float(dist_y)


def _reduce_recursive(buffer: np.ndarray, first: int, last: int,
                      tolerance: TolerancePolicy, full_scan: bool) -> List[int]:
    """Return the kept indices of ``buffer[first:last + 1]`` in order."""
    scan = _max_deviation(buffer, first, last, full_scan)
    if scan is None:
        logger.debug(f"Degenerate chord between indices {first} and {last}, collapsing to endpoints")
        return [first, last]

    index, dmax, dist_x, dist_y = scan
    if dmax > tolerance(dist_x, dist_y):
        left = _reduce_recursive(buffer, first, index, tolerance, full_scan)
        right = _reduce_recursive(buffer, index, last, tolerance, full_scan)

        # The split point closes the left half and opens the right one
        left.pop()
        left.extend(right)
        return left

    return [first, last]


def _reduce_iterative(buffer: np.ndarray, first: int, last: int,
                      tolerance: TolerancePolicy, full_scan: bool) -> List[int]:
    """Explicit work-stack version of :func:`_reduce_recursive`."""
    keep = np.zeros(len(buffer), dtype=bool)
    keep[first] = True
    keep[last] = True

    stack = [(first, last)]
    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue

        scan = _max_deviation(buffer, start, end, full_scan)
        if scan is None:
            logger.debug(f"Degenerate chord between indices {start} and {end}, collapsing to endpoints")
            continue

        index, dmax, dist_x, dist_y = scan
        if dmax > tolerance(dist_x, dist_y):
            keep[index] = True
            stack.append((start, index))
            stack.append((index, end))

    return np.flatnonzero(keep).tolist()


def _closed_loop_start(buffer: np.ndarray) -> int:
    """
    Count the leading points equal to the last point.

    A closed polyline has a zero-length outer chord; dropping its leading
    duplicates gives the recursion a real chord to start from.
    """
    last = len(buffer) - 1
    start = 0
    while start < last and np.array_equal(buffer[start], buffer[last]):
        start += 1
    return start


def _reduce_indices(buffer: np.ndarray, tolerance: TolerancePolicy,
                    full_scan: bool, iterative: Optional[bool]) -> List[int]:
    """Kept row indices for a buffer of at least three points."""
    DataValidator.validate_buffer(buffer)
    start = _closed_loop_start(buffer)
    last = len(buffer) - 1
    if last - start < 2:
        return list(range(len(buffer)))

    if iterative is None:
        iterative = last - start + 1 > SimplifierConfig.RECURSION_POINT_LIMIT

    reducer = _reduce_iterative if iterative else _reduce_recursive
    indices = reducer(buffer, start, last, tolerance, full_scan)
    return list(range(start)) + indices


def _squared_epsilon(epsilon: float) -> Optional[float]:
    """Square a tolerance, or None when it cannot drive a reduction."""
    epsilon = float(epsilon)
    if math.isinf(epsilon) or math.isnan(epsilon):
        return None
    squared = epsilon * epsilon
    if squared <= SimplifierConfig.MIN_SQUARED_EPSILON:
        return None
    return squared


def reduce(points: Optional[Sequence[Point]], epsilon: float,
           full_scan: bool = SimplifierConfig.FULL_SCAN,
           iterative: Optional[bool] = None) -> Optional[List[Point]]:
    """
    Reduce a polyline with the Ramer-Douglas-Peucker algorithm.

    Args:
        points: Ordered polyline as Points, ``(x, y)`` pairs, ``{'x', 'y'}``
            dicts or an ``(n, 2)`` array
        epsilon: Maximum perpendicular distance a dropped point may have
            from the simplified curve
        full_scan: Also inspect the penultimate point of every range
        iterative: Force (True) or forbid (False) the work-stack
            implementation; None picks by input size

    Returns:
        A new list of the kept points; Point inputs are returned as the
        same objects. ``None`` is returned as ``None``; inputs shorter
        than three points and NaN, infinite or zero tolerances return a
        copy of the input.

    Raises:
        ValueError: If an item is not a 2D coordinate or a coordinate is
            NaN or infinite

    Example:
        >>> pts = [Point(0, 0), Point(1, 0.001), Point(2, 0), Point(3, -0.001), Point(4, 0)]
        >>> reduce(pts, 0.1)
        [Point(0, 0), Point(4, 0)]
    """
    if points is None:
        return None
    if len(points) < 3:
        return list(points)

    squared = _squared_epsilon(epsilon)
    if squared is None:
        return list(points)

    points = PathUtils.to_points(points)
    buffer = PathUtils.to_array(points)
    indices = _reduce_indices(buffer, _fixed_tolerance(squared), full_scan, iterative)
    return [points[i] for i in indices]


def reduce_non_parametric(points: Optional[Sequence[Point]],
                          full_scan: bool = SimplifierConfig.FULL_SCAN,
                          iterative: Optional[bool] = None) -> Optional[List[Point]]:
    """
    Reduce a polyline using a tolerance derived from each chord.

    Same contract as :func:`reduce`, with :func:`compute_local_tolerance`
    in place of a fixed epsilon.
    """
    if points is None:
        return None
    if len(points) < 3:
        return list(points)

    points = PathUtils.to_points(points)
    buffer = PathUtils.to_array(points)
    indices = _reduce_indices(buffer, compute_local_tolerance, full_scan, iterative)
    return [points[i] for i in indices]


def reduce_mask(coordinates: np.ndarray, epsilon: Optional[float] = None,
                full_scan: bool = SimplifierConfig.FULL_SCAN,
                iterative: Optional[bool] = None) -> np.ndarray:
    """
    Boolean keep-mask over an ``(n, 2)`` coordinate array.

    Args:
        coordinates: Array of x, y rows
        epsilon: Tolerance; None selects the non-parametric reduction

    Returns:
        Boolean array of length n, True for rows that survive

    Raises:
        ValueError: If the array is not ``(n, 2)`` and numeric
    """
    coordinates = np.asarray(coordinates)
    DataValidator.validate_array(coordinates)

    n = coordinates.shape[0]
    mask = np.ones(n, dtype=bool)
    if n < 3:
        return mask

    if epsilon is None:
        tolerance = compute_local_tolerance
    else:
        squared = _squared_epsilon(epsilon)
        if squared is None:
            return mask
        tolerance = _fixed_tolerance(squared)

    buffer = np.array(coordinates, dtype=np.float64)
    mask[:] = False
    mask[_reduce_indices(buffer, tolerance, full_scan, iterative)] = True
    return mask


class RamerDouglasPeucker:
    """
    Configurable Ramer-Douglas-Peucker reducer.

    Holds the tolerance and scan options so the same settings can be applied
    to many polylines, and offers compression and timing statistics.
    """

    def __init__(self, epsilon: float = SimplifierConfig.DEFAULT_EPSILON,
                 full_scan: bool = SimplifierConfig.FULL_SCAN,
                 iterative: Optional[bool] = None):
        """
        Initialize the reducer.

        Args:
            epsilon: Maximum perpendicular distance for point elimination.
                    Higher values = more aggressive simplification.
            full_scan: Inspect every interior point, including the penultimate one
            iterative: Force or forbid the work-stack implementation
        """
        self.epsilon = epsilon
        self.full_scan = full_scan
        self.iterative = iterative

    def simplify(self, points: Sequence[Point]) -> List[Point]:
        """Reduce points with the configured tolerance."""
        return reduce(points, self.epsilon, self.full_scan, self.iterative)

    def simplify_non_parametric(self, points: Sequence[Point]) -> List[Point]:
        """Reduce points with the chord-derived tolerance."""
        return reduce_non_parametric(points, self.full_scan, self.iterative)

    def get_compression_ratio(self, original: Sequence[Point], simplified: Sequence[Point]) -> float:
        """Points in per point out; 1.0 when either polyline is empty."""
        if not original or not simplified:
            return 1.0
        return len(original) / len(simplified)

    def get_max_error(self, original: Sequence[Point], simplified: Sequence[Point]) -> float:
        """
        Largest distance from a dropped point to the chord that replaced it.

        ``simplified`` must be a reduction of ``original``, i.e. its points
        are items of ``original`` in the same order.

        Raises:
            ValueError: If a simplified point does not come from ``original``
        """
        kept = []
        position = 0
        for point in simplified:
            while position < len(original) and original[position] is not point:
                position += 1
            if position == len(original):
                raise ValueError(f"{point!r} is not a point of the original polyline, in order")
            kept.append(position)
            position += 1

        worst = 0.0
        for start, end in zip(kept, kept[1:]):
            worst = max(worst, GeometryUtils.max_deviation(original, start, end)[1])
        return math.sqrt(worst)

    def benchmark(self, points: Sequence[Point], iterations: int = SimplifierConfig.BENCHMARK_ITERATIONS,
                  non_parametric: bool = False) -> dict:
        """
        Benchmark the simplification performance.

        Args:
            points: Points to benchmark with
            iterations: Number of iterations to run
            non_parametric: Time the non-parametric reduction instead

        Returns:
            Dictionary with timing and compression statistics
        """
        if iterations < 1:
            raise ValueError(f"iterations must be positive, got {iterations}")
        points = PathUtils.to_points(points)
        if not points:
            raise ValueError("Cannot benchmark an empty point sequence")

        run = self.simplify_non_parametric if non_parametric else self.simplify
        times = []
        simplified = points

        for _ in range(iterations):
            start_time = time.perf_counter()
            simplified = run(points)
            end_time = time.perf_counter()

            times.append((end_time - start_time) * 1000)  # Convert to ms

        stats = {
            "original_points": len(points),
            "simplified_points": len(simplified),
            "avg_time_ms": sum(times) / len(times),
            "min_time_ms": min(times),
            "max_time_ms": max(times),
            "compression_ratio": self.get_compression_ratio(points, simplified),
            "max_error": self.get_max_error(points, simplified),
            "epsilon": None if non_parametric else self.epsilon
        }
        logger.debug(f"Benchmark: {stats}")
        return stats
