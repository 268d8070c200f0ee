# polishing_simulator/core/time_grid.py
"""
Uniform sample times shared by every sweep.
"""

import math

import numpy as np

from .. import config
from ..exceptions import DomainError
from .numeric import as_index


def sample_count(duration: float, step: float) -> int:
    """Number of samples on the grid: floor(duration / step) + 1."""
    if not (math.isfinite(duration) and math.isfinite(step)):
        raise DomainError(f"duration and step must be finite (got {duration!r}, {step!r})")
    if step <= 0:
        raise DomainError(f"time step must be > 0, got {step!r}")
    if duration < step:
        raise DomainError(f"duration ({duration}) must be >= time step ({step})")
    return int(math.floor(duration / step + config.SIM_STEP_COUNT_EPSILON)) + 1


def build_time_samples(duration: float, step: float) -> np.ndarray:
    """
    Evenly spaced times from 0 to duration inclusive.

    The count is fixed first and the values come from start + i·(stop−start)/(count−1)
    (np.linspace), so the last sample is exactly `duration` even when it is not a
    multiple of `step` and long runs do not accumulate rounding drift.
    """
    return np.linspace(0.0, float(duration), sample_count(duration, step))


def index_at_time(t: float, step: float) -> int:
    """Index of the last sample not later than t on a grid of spacing step."""
    if t < 0:
        raise DomainError(f"time must be >= 0, got {t!r}")
    return int(math.floor(t / step + config.SIM_STEP_COUNT_EPSILON))


def chunk_size(time_chunk) -> int:
    """Validated number of time samples per sweep chunk (an integer >= 1)."""
    size = as_index(time_chunk, "time_chunk")
    if size < 1:
        raise DomainError(f"time_chunk must be >= 1, got {time_chunk!r}")
    return size
