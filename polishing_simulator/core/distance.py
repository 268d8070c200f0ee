# polishing_simulator/core/distance.py
"""
Cumulative sliding-distance map over the wafer surface.

A square grid of nodes is laid over [−R, R]² of the wafer; nodes inside the
disc are followed through the sample times in the requested frame and the
lengths of the consecutive steps are summed. The summed distance is a proxy
for the local relative sliding, i.e. for removal by Preston's law.

Nodes are independent of each other, so the sweep can be split across a
multiprocessing pool (`workers > 1`); the serial path is the reference.
"""

from __future__ import annotations

import logging
import math
import multiprocessing
import os
from dataclasses import dataclass, field

import numpy as np

from .. import config
from ..exceptions import DomainError, SimulationCancelled
from .frames import Frame, FrameTransformer
from .geometry import to_polar
from .kinematics import KinematicsModel
from .numeric import ensure_finite
from .parameters import SimulationParameters
from .time_grid import chunk_size

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DistanceCell:
    x: float
    y: float
    cumulative_distance: float
    radius: float
    angle: float


@dataclass(frozen=True, eq=False)
class DistanceGrid:
    """
    Node (i, j) sits at (x[i], y[j]). Arrays are grid_size x grid_size; nodes
    outside the wafer disc have inside == False and NaN distance.
    """

    frame: Frame
    x: np.ndarray = field(repr=False)
    y: np.ndarray = field(repr=False)
    distance: np.ndarray = field(repr=False)
    radius: np.ndarray = field(repr=False)
    angle: np.ndarray = field(repr=False)
    inside: np.ndarray = field(repr=False)
    cutoff_index: int = 0

    @property
    def grid_size(self) -> int:
        return len(self.x)

    def cell(self, i: int, j: int) -> DistanceCell | None:
        if not self.inside[i, j]:
            return None
        return DistanceCell(float(self.x[i]), float(self.y[j]), float(self.distance[i, j]),
                            float(self.radius[i, j]), float(self.angle[i, j]))

    def cells(self) -> list[list[DistanceCell | None]]:
        return [[self.cell(i, j) for j in range(self.grid_size)] for i in range(self.grid_size)]

    def values(self) -> np.ndarray:
        """Distances of the nodes inside the disc, row-major."""
        return self.distance[self.inside]


def _grid_nodes(wafer_radius: float, grid_size: int):
    if grid_size < 2 or int(grid_size) != grid_size:
        raise DomainError(f"grid_size must be an integer >= 2, got {grid_size!r}")
    coords = np.linspace(-wafer_radius, wafer_radius, int(grid_size))
    xx, yy = np.meshgrid(coords, coords, indexing="ij")
    radius, angle = to_polar(xx, yy)
    inside = radius <= wafer_radius * (1.0 + config.SIM_RADIUS_TOLERANCE)
    return coords, radius, angle, inside


def _accumulate_distances(model: KinematicsModel, transformer: FrameTransformer, frame: Frame,
                          times: np.ndarray, r: np.ndarray, theta: np.ndarray,
                          carrier_index: int, wafer_index: int,
                          cancel_event=None, progress=None,
                          time_chunk: int = config.SIM_TIME_CHUNK) -> np.ndarray:
    """Path length of every (r, theta) node over `times`, swept in time chunks."""
    total = np.zeros(len(r))
    prev_x = prev_y = None
    n_times = len(times)
    time_chunk = chunk_size(time_chunk)
    for start in range(0, n_times, time_chunk):
        if cancel_event is not None and cancel_event.is_set():
            logger.info("Distance sweep cancelled after %d of %d time samples", start, n_times)
            raise SimulationCancelled("distance sweep cancelled")

        t_col = times[start:start + time_chunk, np.newaxis]
        bx, by = model.point_position(t_col, r[np.newaxis, :], theta[np.newaxis, :],
                                      carrier_index, wafer_index)
        fx, fy = transformer.transform(bx, by, t_col, frame)
        ensure_finite(f"{frame.value} distance-map positions", fx, fy)
        if prev_x is not None:
            # Bridge to the last row of the previous chunk
            fx = np.vstack([prev_x, fx]); fy = np.vstack([prev_y, fy])
        total += np.sum(np.hypot(np.diff(fx, axis=0), np.diff(fy, axis=0)), axis=0)
        prev_x, prev_y = fx[-1:], fy[-1:]

        if progress is not None:
            progress(min(start + time_chunk, n_times), n_times)
    return total


def _distance_mp_worker(args_tuple):
    chunk_id, params, frame_value, times, r, theta, carrier_index, wafer_index = args_tuple
    model = KinematicsModel(params)
    transformer = FrameTransformer(model.rates)
    distances = _accumulate_distances(model, transformer, Frame(frame_value), times, r, theta,
                                      carrier_index, wafer_index)
    return chunk_id, distances


def _run_distance_multiprocessed(params: SimulationParameters, frame: Frame, times: np.ndarray,
                                 r: np.ndarray, theta: np.ndarray,
                                 carrier_index: int, wafer_index: int, workers: int,
                                 cancel_event=None, progress=None) -> np.ndarray:
    num_workers = max(1, min(workers, os.cpu_count() or 1, len(r)))
    node_chunks = np.array_split(np.arange(len(r)), num_workers * 4)
    node_chunks = [idx for idx in node_chunks if idx.size]
    logger.debug("Distance map: %d nodes, %d time samples, %d workers, %d chunks",
                 len(r), len(times), num_workers, len(node_chunks))

    tasks_args = [(i, params, frame.value, times, r[idx], theta[idx], carrier_index, wafer_index)
                  for i, idx in enumerate(node_chunks)]
    total = np.zeros(len(r))
    done_nodes = 0
    with multiprocessing.Pool(processes=num_workers) as pool:
        for chunk_id, distances in pool.imap_unordered(_distance_mp_worker, tasks_args):
            if cancel_event is not None and cancel_event.is_set():
                pool.terminate()
                logger.info("Distance sweep cancelled after %d of %d nodes", done_nodes, len(r))
                raise SimulationCancelled("distance sweep cancelled")
            total[node_chunks[chunk_id]] = distances
            done_nodes += len(distances)
            if progress is not None:
                progress(done_nodes, len(r))
    return total


def cumulative_distance_map(model: KinematicsModel, transformer: FrameTransformer,
                            times: np.ndarray, frame,
                            grid_size: int = config.SIM_DISTANCE_GRID_SIZE,
                            time_cutoff_index: int | None = None,
                            carrier_index: int = 0, wafer_index: int = 0,
                            cancel_event=None, progress=None, workers: int = 1) -> DistanceGrid:
    """
    Cumulative path length of every grid node inside the wafer.

    Args:
        time_cutoff_index: Last time sample (inclusive) to sweep; None sweeps the
            whole grid, larger values are clipped to it.
        workers: Processes to spread the nodes over; 1 runs in this process.
        cancel_event: Anything with is_set(), checked between chunks.
        progress: Callable progress(done, total), in time samples for the serial
            path and in nodes for the multiprocess path.
    """
    frame = Frame.parse(frame)
    carrier_index, wafer_index = model.check_indices(carrier_index, wafer_index)
    if time_cutoff_index is None:
        time_cutoff_index = len(times) - 1
    if time_cutoff_index < 0:
        raise DomainError(f"time_cutoff_index must be >= 0, got {time_cutoff_index}")
    time_cutoff_index = min(int(time_cutoff_index), len(times) - 1)
    swept_times = times[:time_cutoff_index + 1]

    wafer_radius = model.params.wafer_radius
    coords, radius, angle, inside = _grid_nodes(wafer_radius, grid_size)
    r_nodes = radius[inside]; theta_nodes = angle[inside]

    if workers > 1:
        node_distances = _run_distance_multiprocessed(
            model.params, frame, swept_times, r_nodes, theta_nodes,
            carrier_index, wafer_index, workers, cancel_event, progress)
    else:
        node_distances = _accumulate_distances(
            model, transformer, frame, swept_times, r_nodes, theta_nodes,
            carrier_index, wafer_index, cancel_event, progress)

    distance = np.full(radius.shape, np.nan)
    distance[inside] = node_distances
    return DistanceGrid(frame=frame, x=coords, y=coords.copy(), distance=distance,
                        radius=radius, angle=angle, inside=inside,
                        cutoff_index=time_cutoff_index)


def preston_removal_depth(grid: DistanceGrid, pressure_mpa: float, preston_coefficient: float) -> np.ndarray:
    """
    Removal estimate per node by Preston's law, depth = k · P · s, where s is the
    cumulative sliding distance. NaN outside the disc like the distance array.
    """
    if pressure_mpa < 0 or preston_coefficient < 0 or not math.isfinite(pressure_mpa * preston_coefficient):
        raise DomainError("pressure and Preston coefficient must be finite and >= 0")
    return preston_coefficient * pressure_mpa * grid.distance
