"""
Logging utilities for reduction runs.
"""

import datetime
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ReductionLogger:
    """Prints reduction summaries and mirrors them to an optional debug file."""

    def __init__(self, debug_file: Optional[str] = None):
        self.debug_file = None
        if debug_file:
            try:
                self.debug_file = open(debug_file, 'w')
                self.debug_file.write(f"Debug logging started at {datetime.datetime.now()}\n")
                self.debug_file.flush()
            except OSError as e:
                logger.warning(f"Could not open debug file: {e}")

    def _timestamp(self) -> str:
        return datetime.datetime.now().strftime("%H:%M:%S.%f")[:-3]

    def _write_debug(self, message: str):
        if self.debug_file:
            self.debug_file.write(f"[{self._timestamp()}] {message}\n")
            self.debug_file.flush()

    def log_input(self, point_count: int, seed: Optional[int] = None):
        """Log the size of the polyline about to be reduced."""
        message = f"{point_count:,} points"
        if seed is not None:
            message += f" (seed {seed})"
        print(message)
        self._write_debug(message)

    def log_reduction(self, label: str, original_count: int, reduced_count: int, elapsed_ms: float):
        """Log the outcome of one reduction."""
        ratio = original_count / reduced_count if reduced_count else 1.0
        print(f"[{self._timestamp()}] {label}: to {reduced_count:,} points in {elapsed_ms:.0f}ms")
        print(f"   Compression ratio: {ratio:.1f}x")
        self._write_debug(f"{label}: {original_count} -> {reduced_count} in {elapsed_ms:.3f}ms")

    def log_benchmark(self, label: str, stats: Dict[str, Any]):
        """Log statistics returned by RamerDouglasPeucker.benchmark."""
        print(f"[{self._timestamp()}] {label} benchmark:")
        print(f"   Avg time: {stats['avg_time_ms']:.2f}ms "
              f"(min {stats['min_time_ms']:.2f}ms, max {stats['max_time_ms']:.2f}ms)")
        print(f"   Points: {stats['original_points']:,} -> {stats['simplified_points']:,}")
        print(f"   Max error: {stats['max_error']:.4g}")
        self._write_debug(f"{label} benchmark: {stats}")

    def close(self):
        """Close the debug file."""
        if self.debug_file:
            self.debug_file.close()
            self.debug_file = None
