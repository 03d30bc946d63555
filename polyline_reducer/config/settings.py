"""
Configuration settings for polyline reduction.
"""

import math


class SimplifierConfig:
    """Configuration constants for Ramer-Douglas-Peucker reduction."""

    # Tolerance used when a caller asks for the default reducer
    DEFAULT_EPSILON = 0.5

    # Squared tolerances at or below this value are treated as zero
    MIN_SQUARED_EPSILON = math.ulp(0.0)

    # Interior scan stops before the penultimate point unless full scan is requested
    FULL_SCAN = False

    # Inputs longer than this use the explicit work stack instead of recursion
    RECURSION_POINT_LIMIT = 500

    # Harness defaults
    SAMPLE_POINTS = 100_000
    SAMPLE_SEED = 42
    BENCHMARK_ITERATIONS = 10


# Named tolerances, in coordinate units. The sample random walk takes
# unit-sigma steps, so 0.5 drops points within half a typical step of a chord.
SIMPLIFICATION_PRESETS = {
    "minimal": {"epsilon": 0.1, "description": "Drop only points within a tenth of a step of the chord"},
    "balanced": {"epsilon": 0.5, "description": "Drop points within half a step of the chord (default)"},
    "aggressive": {"epsilon": 2.0, "description": "Drop deviations up to two steps, keep only turns"},
    "extreme": {"epsilon": 5.0, "description": "Keep only the coarse outline of the walk"}
}


def get_preset_config(preset_name: str) -> dict:
    """
    Get configuration for a named preset.

    Args:
        preset_name: Name of the preset

    Returns:
        Dictionary with epsilon value and description
    """
    return SIMPLIFICATION_PRESETS.get(preset_name, SIMPLIFICATION_PRESETS["balanced"])
