# polishing_simulator/core/coverage.py
"""
Monte-Carlo coverage of the polishing plates.

Points sampled uniformly over the wafer disc are swept through every sample
time, carrier and wafer. For each reference frame the swept positions are kept
as a scatter cloud, and the x-coordinates falling inside the sun-to-ring band
are counted in fixed-width bins. Normalised by the number of swept samples the
counts give the crossing density used to judge radial polishing uniformity.

Sweeps run over chunks of sample times (vectorised across carriers, wafers and
disc samples); between chunks the optional cancel event is checked and the
optional progress callback is notified.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from .. import config
from ..exceptions import DomainError, SimulationCancelled
from .frames import ALL_FRAMES, FrameTransformer
from .kinematics import KinematicsModel
from .numeric import ensure_finite
from .time_grid import chunk_size

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class CoverageResult:
    """
    Attributes:
        scatter: Frame -> (x, y) arrays of every swept sample, in sweep order
            (time, carrier, wafer, disc sample).
        crossings: Frame -> crossing density per bin.
        bin_edges: Histogram edges; bin i is [bin_edges[i], bin_edges[i+1]).
        bin_centers: Midpoints of the bins.
        total_samples: |times| · carriers · wafers · disc samples.
        disc_points: (x, y) wafer-local offsets that were swept.
    """

    scatter: dict = field(repr=False)
    crossings: dict = field(repr=False)
    bin_edges: np.ndarray = field(repr=False)
    bin_centers: np.ndarray = field(repr=False)
    total_samples: int = 0
    disc_points: tuple = field(default=(), repr=False)


def sample_wafer_disc(radius: float, count: int, rng: np.random.Generator | None = None):
    """
    `count` points spread over a disc of `radius` with uniform area density.

    Angles are an evenly spaced fan 2π·i/count; radii are radius·√U with U drawn
    from `rng`. Pass a seeded generator for reproducible output; without one a
    fresh, unseeded generator is used on every call.
    """
    if radius <= 0:
        raise DomainError(f"disc radius must be > 0, got {radius!r}")
    if count < 1 or int(count) != count:
        raise DomainError(f"sample count must be an integer >= 1, got {count!r}")
    if rng is None:
        rng = np.random.default_rng()
    count = int(count)
    theta = 2 * np.pi * np.arange(count) / count
    r = radius * np.sqrt(rng.random(count))
    return r * np.cos(theta), r * np.sin(theta)


def crossing_bin_edges(ring_radius: float, bin_interval: float = config.SIM_BIN_INTERVAL) -> np.ndarray:
    """Edges −R, −R+w, ... up to the last edge not beyond R + w (at least one past R)."""
    if bin_interval <= 0:
        raise DomainError(f"bin interval must be > 0, got {bin_interval!r}")
    num_edges = int(math.floor((2 * ring_radius + bin_interval) / bin_interval
                               + config.SIM_STEP_COUNT_EPSILON)) + 1
    return -ring_radius + bin_interval * np.arange(num_edges)


def _bin_band_crossings(x: np.ndarray, edges: np.ndarray, r_sun: float, r_ring: float) -> np.ndarray:
    """Counts of |x| in [r_sun, r_ring] per half-open bin."""
    num_bins = len(edges) - 1
    abs_x = np.abs(x)
    in_band = x[(abs_x >= r_sun) & (abs_x <= r_ring)]
    idx = np.searchsorted(edges, in_band, side="right") - 1
    idx = idx[(idx >= 0) & (idx < num_bins)]
    return np.bincount(idx, minlength=num_bins)


def _basic_positions(model: KinematicsModel, t_chunk: np.ndarray, dx: np.ndarray, dy: np.ndarray):
    """Basic-frame positions of the disc samples, shape (times, carriers, wafers, samples)."""
    n_t = len(t_chunk)
    shape = (n_t, model.num_carriers, model.num_wafers_per_carrier, len(dx))
    bx = np.empty(shape); by = np.empty(shape)

    spin = model.rates.total_omega * t_chunk
    cos_s = np.cos(spin)[:, np.newaxis]; sin_s = np.sin(spin)[:, np.newaxis]
    # Wafer-local offsets turned by the point's own spin
    ox = dx[np.newaxis, :] * cos_s - dy[np.newaxis, :] * sin_s
    oy = dx[np.newaxis, :] * sin_s + dy[np.newaxis, :] * cos_s

    for c_idx in range(model.num_carriers):
        for w_idx in range(model.num_wafers_per_carrier):
            wx, wy = model.wafer_center_position(t_chunk, c_idx, w_idx)
            bx[:, c_idx, w_idx, :] = wx[:, np.newaxis] + ox
            by[:, c_idx, w_idx, :] = wy[:, np.newaxis] + oy
    return bx, by


def compute_coverage_and_crossings(model: KinematicsModel, transformer: FrameTransformer,
                                   times: np.ndarray, sample_count: int,
                                   rng: np.random.Generator | None = None,
                                   bin_interval: float = config.SIM_BIN_INTERVAL,
                                   cancel_event=None, progress=None,
                                   time_chunk: int = config.SIM_TIME_CHUNK) -> CoverageResult:
    """
    Sweeps `sample_count` disc points through all times, carriers and wafers.

    Args:
        cancel_event: Anything with is_set(); checked between time chunks.
        progress: Callable progress(done_times, total_times) called after each chunk.

    Raises:
        SimulationCancelled: If cancel_event was set during the sweep.
    """
    params = model.params
    time_chunk = chunk_size(time_chunk)
    r_sun = params.sun_gear_radius; r_ring = params.ring_gear_radius
    dx, dy = sample_wafer_disc(params.wafer_radius, sample_count, rng)

    edges = crossing_bin_edges(r_ring, bin_interval)
    centers = (edges[:-1] + edges[1:]) / 2.0
    counts = {frame: np.zeros(len(centers), dtype=np.int64) for frame in ALL_FRAMES}
    scatter_chunks = {frame: ([], []) for frame in ALL_FRAMES}

    n_times = len(times)
    total_samples = n_times * model.num_carriers * model.num_wafers_per_carrier * len(dx)
    logger.debug("Coverage sweep: %d times x %d carriers x %d wafers x %d samples",
                 n_times, model.num_carriers, model.num_wafers_per_carrier, len(dx))

    for start in range(0, n_times, time_chunk):
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Coverage sweep cancelled after %d of %d time samples", start, n_times)
            raise SimulationCancelled("coverage sweep cancelled")

        t_chunk = times[start:start + time_chunk]
        bx, by = _basic_positions(model, t_chunk, dx, dy)
        t_b = t_chunk[:, np.newaxis, np.newaxis, np.newaxis]
        for frame, (fx, fy) in transformer.transform_all(bx, by, t_b).items():
            fx = fx.ravel(); fy = fy.ravel()
            ensure_finite(f"{frame.value} coverage positions", fx, fy)
            counts[frame] += _bin_band_crossings(fx, edges, r_sun, r_ring)
            scatter_chunks[frame][0].append(fx)
            scatter_chunks[frame][1].append(fy)

        if progress is not None:
            progress(min(start + time_chunk, n_times), n_times)

    scatter = {frame: (np.concatenate(xs), np.concatenate(ys))
               for frame, (xs, ys) in scatter_chunks.items()}
    crossings = {frame: counts[frame] / total_samples for frame in ALL_FRAMES}
    return CoverageResult(scatter=scatter, crossings=crossings, bin_edges=edges,
                          bin_centers=centers, total_samples=total_samples,
                          disc_points=(dx, dy))
