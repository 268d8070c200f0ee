# polishing_simulator/core/engine.py
"""
Stateless facade over the kinematics and analysis modules.

An `Engine` is built once per parameter set (`create_engine`) and only answers
queries: trajectories, velocities, coverage sweeps, distance maps and position
snapshots for animation. It has no setters; a parameter change means a new
engine.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from .. import config
from ..exceptions import DomainError
from .coverage import CoverageResult, compute_coverage_and_crossings
from .distance import DistanceGrid, cumulative_distance_map, preston_removal_depth
from .frames import ALL_FRAMES, Frame, FramePosition, FrameTransformer
from .kinematics import AngularRates, KinematicsModel
from .numeric import ensure_finite
from .parameters import SimulationParameters
from .time_grid import build_time_samples, index_at_time
from .trajectory import (LabelledTrajectory, TrackedPoint, Trajectory, VelocitySeries,
                         expand_tracked_points, track_point, velocity_of)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WaferPosition:
    x: float
    y: float
    index: int


@dataclass(frozen=True)
class CarrierPosition:
    x: float
    y: float
    index: int
    wafers: tuple = ()


@dataclass(frozen=True)
class PositionsSnapshot:
    """
    Everything needed to draw one animation frame.

    Attributes:
        time: Snapshot time (s).
        carriers: Carrier and wafer centres in the basic frame.
        per_frame: Frame -> carriers transformed into that frame.
        points: Tracked point name -> {Frame: FramePosition}.
    """

    time: float
    carriers: tuple
    per_frame: dict = field(default_factory=dict)
    points: dict = field(default_factory=dict)


def _as_point(point) -> TrackedPoint:
    if isinstance(point, TrackedPoint):
        return point
    if isinstance(point, dict):
        return TrackedPoint.from_dict(point)
    raise DomainError(f"Expected a TrackedPoint or dict, got {type(point).__name__}")


def _check_time(t: float) -> float:
    t = float(t)
    if not math.isfinite(t):
        raise DomainError(f"time must be finite, got {t!r}")
    return t


class Engine:
    """Pure query interface of one simulation parameter set."""

    __slots__ = ("_params", "_model", "_transformer", "_times")

    def __init__(self, params: SimulationParameters):
        self._params = params
        self._model = KinematicsModel(params)
        self._transformer = FrameTransformer(self._model.rates)
        self._times = build_time_samples(params.total_time, params.time_step)
        self._times.setflags(write=False)
        logger.debug("Engine ready: %d time samples, %d carrier(s) x %d wafer(s)",
                     len(self._times), self._model.num_carriers, self._model.num_wafers_per_carrier)

    @property
    def params(self) -> SimulationParameters:
        return self._params

    @property
    def rates(self) -> AngularRates:
        return self._model.rates

    @property
    def model(self) -> KinematicsModel:
        return self._model

    @property
    def transformer(self) -> FrameTransformer:
        return self._transformer

    @property
    def times(self) -> np.ndarray:
        return self._times

    # --- Trajectories ---

    def track_point(self, point) -> Trajectory:
        return track_point(self._model, self._transformer, self._times, _as_point(point))

    def track_points(self, points) -> list[LabelledTrajectory]:
        """Every tracked point on every carrier and wafer, named "<label> (C<c>W<w>)"."""
        points = [_as_point(p) for p in points]
        return [LabelledTrajectory(name, point, self.track_point(point))
                for name, point in expand_tracked_points(
                    points, self._model.num_carriers, self._model.num_wafers_per_carrier)]

    def velocity(self, trajectory: Trajectory, frame) -> VelocitySeries:
        return velocity_of(trajectory, frame)

    # --- Sweeps ---

    def coverage_and_crossings(self, sample_count: int | None = None,
                               rng: np.random.Generator | None = None, seed: int | None = None,
                               bin_interval: float = config.SIM_BIN_INTERVAL,
                               cancel_event=None, progress=None) -> CoverageResult:
        """
        Monte-Carlo coverage and x-crossing densities for all four frames.

        sample_count defaults to params.num_disc_samples. The disc radii are drawn
        from `rng`, or from default_rng(seed) when only a seed is given.
        """
        if sample_count is None:
            sample_count = int(self._params.num_disc_samples)
        if rng is None:
            rng = np.random.default_rng(seed)
        return compute_coverage_and_crossings(self._model, self._transformer, self._times,
                                              sample_count, rng, bin_interval,
                                              cancel_event, progress)

    def cutoff_index(self, cutoff_time: float | None) -> int | None:
        """Sample index reached at cutoff_time, floor(cutoff_time / step); None for no cutoff."""
        if cutoff_time is None:
            return None
        return index_at_time(_check_time(cutoff_time), self._params.time_step)

    def cumulative_distance_map(self, frame, grid_size: int = config.SIM_DISTANCE_GRID_SIZE,
                                cutoff_time: float | None = None,
                                carrier_index: int = 0, wafer_index: int = 0,
                                cancel_event=None, progress=None, workers: int = 1) -> DistanceGrid:
        """Cumulative sliding distance per wafer grid node, optionally only up to cutoff_time."""
        return cumulative_distance_map(self._model, self._transformer, self._times, frame,
                                       grid_size, self.cutoff_index(cutoff_time),
                                       carrier_index, wafer_index,
                                       cancel_event, progress, workers)

    def removal_depth_map(self, frame, grid_size: int = config.SIM_DISTANCE_GRID_SIZE,
                          cutoff_time: float | None = None, **kwargs):
        """Preston removal estimate k·P·s over the distance grid; returns (grid, depth)."""
        grid = self.cumulative_distance_map(frame, grid_size, cutoff_time, **kwargs)
        depth = preston_removal_depth(grid, self._params.pressure_mpa,
                                      self._params.preston_coefficient)
        return grid, depth

    # --- Snapshots ---

    def carrier_positions_at_time(self, t: float, frame=Frame.BASIC) -> tuple:
        """Carrier centres with their wafer centres at time t, seen from `frame`."""
        t = _check_time(t)
        frame = Frame.parse(frame)
        carriers = []
        for c_idx in range(self._model.num_carriers):
            cx, cy = self._transformer.transform(*self._model.carrier_position(t, c_idx), t, frame)
            wafers = []
            for w_idx in range(self._model.num_wafers_per_carrier):
                wx, wy = self._transformer.transform(
                    *self._model.wafer_center_position(t, c_idx, w_idx), t, frame)
                ensure_finite("wafer centre", wx, wy)
                wafers.append(WaferPosition(float(wx), float(wy), w_idx))
            ensure_finite("carrier centre", cx, cy)
            carriers.append(CarrierPosition(float(cx), float(cy), c_idx, tuple(wafers)))
        return tuple(carriers)

    def point_positions_at_time(self, t: float, point) -> dict:
        """Frame -> FramePosition of one tracked point at time t."""
        t = _check_time(t)
        point = _as_point(point)
        point.validate(self._model)
        bx, by = self._model.point_position(t, point.r, point.theta,
                                           point.carrier_index, point.wafer_index)
        positions = {}
        for frame, (x, y) in self._transformer.transform_all(bx, by, t).items():
            ensure_finite(f"{frame.value} position", x, y)
            positions[frame] = FramePosition(float(x), float(y), frame)
        return positions

    def positions_at_time(self, t: float, points=()) -> PositionsSnapshot:
        """
        Carriers, wafers and tracked points at time t in every frame.

        Points are keyed by label ("Point N" when unlabelled); a repeated name
        gets a " (2)", " (3)", ... suffix so every point keeps its own entry.
        """
        t = _check_time(t)
        per_frame = {frame: self.carrier_positions_at_time(t, frame) for frame in ALL_FRAMES}
        tracked = {}
        for idx, point in enumerate(points):
            point = _as_point(point)
            base = point.label or f"Point {idx + 1}"
            name = base
            copy_no = 2
            while name in tracked:
                name = f"{base} ({copy_no})"
                copy_no += 1
            tracked[name] = self.point_positions_at_time(t, point)
        return PositionsSnapshot(time=t, carriers=per_frame[Frame.BASIC],
                                 per_frame=per_frame, points=tracked)


def create_engine(params=None) -> Engine:
    """
    Builds an engine from SimulationParameters, a dict of overrides of
    config.DEFAULT_PROCESS_PARAMS, or None for the defaults.

    Raises:
        DomainError: If the parameters are degenerate.
    """
    if params is None:
        params = SimulationParameters()
    elif isinstance(params, dict):
        params = SimulationParameters.from_dict(params)
    elif not isinstance(params, SimulationParameters):
        raise DomainError(f"Expected SimulationParameters or dict, got {type(params).__name__}")
    return Engine(params)
