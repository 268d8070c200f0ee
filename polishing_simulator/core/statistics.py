# polishing_simulator/core/statistics.py
"""
Summary statistics of the analysis results: speed ranges, crossing histograms,
distance maps and the usual U1..U4 uniformity percentages.
"""

import math

import numpy as np

from .coverage import CoverageResult
from .distance import DistanceGrid
from .frames import Frame
from .trajectory import VelocitySeries


def uniformity_stats(values: np.ndarray) -> dict:
    """
    Uniformity of a set of values (finite entries only), in percent:
    U1 = (max−min)/(max+min), U2 = (max−min)/mean, U3 = σ/mean, U4 = min/max.
    An entry is NaN when its denominator is zero; fewer than two values give {}.
    """
    stats = {}
    if values is None:
        return stats
    valid = np.asarray(values, dtype=float)
    valid = valid[np.isfinite(valid)]
    if valid.size < 2:
        return stats

    t_max = float(np.max(valid))
    t_min = float(np.min(valid))
    t_mean = float(np.mean(valid))
    t_std = float(np.std(valid))

    spread = t_max - t_min
    stats['U1'] = spread / (t_max + t_min) * 100.0 if (t_max + t_min) != 0 else math.nan
    stats['U2'] = spread / t_mean * 100.0 if t_mean != 0 else math.nan
    stats['U3'] = t_std / t_mean * 100.0 if t_mean != 0 else math.nan
    stats['U4'] = t_min / t_max * 100.0 if t_max != 0 else math.nan
    return stats


def velocity_summary(series: VelocitySeries) -> dict:
    """Mean, maximum and minimum speed of a series (empty dict if it is empty)."""
    if len(series) == 0:
        return {}
    return {
        "mean": float(np.mean(series.speed)),
        "max": float(np.max(series.speed)),
        "min": float(np.min(series.speed)),
    }


def crossing_summary(result: CoverageResult, frame) -> dict:
    """Total density, peak bin density and density-weighted mean position of one frame."""
    density = result.crossings[Frame.parse(frame)]
    total = float(np.sum(density))
    return {
        "total": total,
        "peak": float(np.max(density)) if density.size else 0.0,
        "mean_position": float(np.sum(result.bin_centers * density) / total) if total > 0 else 0.0,
    }


def distance_summary(grid: DistanceGrid) -> dict:
    """
    Min / mean / max cumulative distance over the nodes inside the wafer, their
    count, and the U1..U4 uniformity of those distances (see uniformity_stats).
    """
    values = grid.values()
    if values.size == 0:
        return {"min": 0.0, "mean": 0.0, "max": 0.0, "count": 0, "uniformity": {}}
    return {
        "min": float(np.min(values)),
        "mean": float(np.mean(values)),
        "max": float(np.max(values)),
        "count": int(values.size),
        "uniformity": uniformity_stats(values),
    }
