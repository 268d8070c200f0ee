"""Tests for the summary statistics."""

import math

import numpy as np
import pytest

from polishing_simulator.core.frames import Frame
from polishing_simulator.core.statistics import (crossing_summary, distance_summary,
                                                 uniformity_stats, velocity_summary)
from polishing_simulator.core.trajectory import TrackedPoint


def test_uniformity_stats():
    stats = uniformity_stats(np.array([1.0, 2.0, 3.0]))
    assert stats["U1"] == pytest.approx(50.0)
    assert stats["U2"] == pytest.approx(100.0)
    assert stats["U3"] == pytest.approx(np.std([1.0, 2.0, 3.0]) / 2.0 * 100.0)
    assert stats["U4"] == pytest.approx(100.0 / 3.0)


def test_uniformity_ignores_nan():
    stats = uniformity_stats(np.array([np.nan, 4.0, 4.0]))
    assert stats["U1"] == 0.0
    assert stats["U4"] == pytest.approx(100.0)


def test_uniformity_degenerate():
    assert uniformity_stats(None) == {}
    assert uniformity_stats(np.array([5.0])) == {}
    stats = uniformity_stats(np.zeros(3))
    assert all(math.isnan(v) for v in stats.values())


def test_velocity_summary(short_engine):
    vel = short_engine.velocity(short_engine.track_point(TrackedPoint(100.0)), Frame.UPPER)
    summary = velocity_summary(vel)
    assert summary["min"] <= summary["mean"] <= summary["max"]
    assert summary["max"] == pytest.approx(float(np.max(vel.speed)))


def test_crossing_summary(short_engine):
    result = short_engine.coverage_and_crossings(sample_count=10, seed=2)
    summary = crossing_summary(result, "lower")
    density = result.crossings[Frame.LOWER]
    assert summary["total"] == pytest.approx(float(np.sum(density)))
    assert summary["peak"] == pytest.approx(float(np.max(density)))
    if summary["total"] > 0:
        assert -987.5 <= summary["mean_position"] <= 987.5


def test_distance_summary(short_engine):
    grid = short_engine.cumulative_distance_map(Frame.BASIC, grid_size=5)
    summary = distance_summary(grid)
    assert summary["count"] == 13
    assert summary["min"] <= summary["mean"] <= summary["max"]
    assert summary["uniformity"] == uniformity_stats(grid.values())
    assert summary["uniformity"]["U4"] == pytest.approx(summary["min"] / summary["max"] * 100.0)


def test_distance_summary_zero_cutoff(short_engine):
    grid = short_engine.cumulative_distance_map(Frame.BASIC, grid_size=5, cutoff_time=0.0)
    summary = distance_summary(grid)
    assert (summary["min"], summary["mean"], summary["max"], summary["count"]) == (0.0, 0.0, 0.0, 13)
    assert all(math.isnan(v) for v in summary["uniformity"].values())
