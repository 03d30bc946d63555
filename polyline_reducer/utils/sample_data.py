"""
Synthetic polylines for demos and benchmarks.

Every generator takes an explicit seed so runs are reproducible without
touching global random state.
"""

from typing import List, Optional

import numpy as np

from .geometry import Point


def random_walk(count: int, seed: Optional[int] = None, step: float = 1.0) -> List[Point]:
    """
    Generate a 2D random walk.

    Args:
        count: Number of points
        seed: Seed for numpy's default generator
        step: Standard deviation of each step along x and y

    Returns:
        List of Point objects
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    rng = np.random.default_rng(seed)
    steps = rng.normal(0.0, step, size=(count, 2))
    coords = np.cumsum(steps, axis=0)
    return [Point(x, y) for x, y in coords.tolist()]


def noisy_sine(count: int, seed: Optional[int] = None, noise: float = 0.01,
               periods: float = 2.0, amplitude: float = 1.0) -> List[Point]:
    """Sample a sine wave over ``[0, periods * 2pi]`` with Gaussian y-noise."""
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    rng = np.random.default_rng(seed)
    xs = np.linspace(0.0, periods * 2.0 * np.pi, count)
    ys = amplitude * np.sin(xs) + rng.normal(0.0, noise, size=count)
    return [Point(x, y) for x, y in zip(xs.tolist(), ys.tolist())]
