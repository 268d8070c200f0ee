# polishing_simulator/session.py
"""
Presentation state of an interactive dashboard, kept apart from the engine.

The session owns everything the user edits (parameters, tracked points,
active frame, playback time) and calls the stateless engine for results.
The engine is rebuilt only when a parameter changes; an invalid edit raises
DomainError and leaves the previous state untouched.
"""

from __future__ import annotations

import dataclasses
import logging

from . import config
from .core.engine import Engine, create_engine
from .core.frames import Frame
from .core.statistics import distance_summary, velocity_summary
from .core.trajectory import TrackedPoint, expand_tracked_points, trail_window
from .exceptions import DomainError

logger = logging.getLogger(__name__)


class SimulationSession:
    """Mutable dashboard state that delegates every computation to an Engine."""

    def __init__(self, params: dict | None = None, points=None):
        values = dict(config.DEFAULT_PROCESS_PARAMS)
        values.update(params or {})
        self._engine = create_engine(values)
        self._param_values = values
        if points is None:
            points = config.DEFAULT_TRACKED_POINTS
        self._points = []
        for point in points:
            self._points.append(self._checked_point(
                point if isinstance(point, TrackedPoint) else TrackedPoint.from_dict(point)))
        self.active_frame = Frame.parse(config.DEFAULT_ACTIVE_FRAME)
        self.current_time = 0.0
        self.animation_speed = config.DEFAULT_ANIMATION_SPEED
        self.trail_length = config.DEFAULT_TRAIL_LENGTH
        self.is_animating = False
        self._trajectory_cache = None

    # --- Parameters ---

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def params(self) -> dict:
        return dict(self._param_values)

    def set_param(self, key: str, value) -> None:
        self.update_params(**{key: value})

    def update_params(self, **changes) -> None:
        """Applies parameter edits; on DomainError nothing changes."""
        candidate = dict(self._param_values)
        candidate.update(changes)
        engine = create_engine(candidate)
        for point in self._points:
            point.validate(engine.model)
        self._param_values = candidate
        self._engine = engine
        self._trajectory_cache = None
        if self.current_time > engine.params.total_time:
            self.current_time = 0.0
        logger.debug("Parameters updated: %s", ", ".join(sorted(changes)))

    # --- Tracked points ---

    @property
    def points(self) -> tuple:
        return tuple(self._points)

    def _checked_point(self, point: TrackedPoint) -> TrackedPoint:
        point.validate(self._engine.model)
        return point

    def add_point(self, r: float = 50.0, theta: float = 0.0, carrier_index: int = 0,
                  wafer_index: int = 0, label: str | None = None) -> TrackedPoint:
        if label is None:
            label = f"Point {len(self._points) + 1}"
        point = self._checked_point(TrackedPoint(r, theta, carrier_index, wafer_index, label))
        self._points.append(point)
        return point

    def update_point(self, index: int, **changes) -> TrackedPoint:
        point = self._checked_point(dataclasses.replace(self._points[index], **changes))
        self._points[index] = point
        return point

    def remove_point(self, index: int) -> None:
        del self._points[index]

    def set_active_frame(self, frame) -> None:
        self.active_frame = Frame.parse(frame)

    # --- Playback ---

    def toggle_animation(self) -> bool:
        self.is_animating = not self.is_animating
        return self.is_animating

    def reset_animation(self) -> None:
        self.is_animating = False
        self.current_time = 0.0

    def advance(self) -> float:
        """One animation tick; playback stops and rewinds at the end of the run."""
        if not self.is_animating:
            return self.current_time
        new_time = self.current_time + config.PLAYBACK_FRAME_DT * self.animation_speed
        if new_time >= self._engine.params.total_time:
            self.is_animating = False
            new_time = 0.0
        self.current_time = new_time
        return new_time

    def seek(self, t: float) -> None:
        if not 0.0 <= t <= self._engine.params.total_time:
            raise DomainError(f"time {t} outside 0..{self._engine.params.total_time}")
        self.current_time = float(t)

    # --- Results ---

    def trajectories(self) -> list:
        """Expanded trajectories of the tracked points, cached per engine and point list."""
        key = (self._engine, tuple(self._points))
        if self._trajectory_cache is None or self._trajectory_cache[0] != key:
            self._trajectory_cache = (key, self._engine.track_points(self._points))
        return self._trajectory_cache[1]

    def velocities(self) -> dict:
        return {lt.name: self._engine.velocity(lt.trajectory, self.active_frame)
                for lt in self.trajectories()}

    def trails(self) -> dict:
        return {lt.name: trail_window(lt.trajectory, self.active_frame, self.current_time,
                                      self._engine.params.time_step, self.trail_length)
                for lt in self.trajectories()}

    def snapshot(self):
        expanded = expand_tracked_points(self._points, self._engine.model.num_carriers,
                                         self._engine.model.num_wafers_per_carrier)
        named = [dataclasses.replace(point, label=name) for name, point in expanded]
        return self._engine.positions_at_time(self.current_time, named)

    def coverage(self, seed: int | None = None, **kwargs):
        return self._engine.coverage_and_crossings(seed=seed, **kwargs)

    def distance_map(self, grid_size: int = config.SIM_DISTANCE_GRID_SIZE, **kwargs):
        return self._engine.cumulative_distance_map(self.active_frame, grid_size, **kwargs)

    def realtime_distance_map(self, grid_size: int = config.SIM_DISTANCE_GRID_SIZE, **kwargs):
        """Distance map accumulated only up to the current playback time."""
        return self._engine.cumulative_distance_map(self.active_frame, grid_size,
                                                    cutoff_time=self.current_time, **kwargs)

    def velocity_summaries(self) -> dict:
        """Mean / max / min speed of every tracked trajectory in the active frame."""
        return {name: velocity_summary(series) for name, series in self.velocities().items()}

    def distance_report(self, grid_size: int = config.SIM_DISTANCE_GRID_SIZE,
                        realtime: bool = False, **kwargs):
        """
        Distance map of the active frame with its summary, including the U1..U4
        uniformity of the node distances. Returns (grid, summary).
        """
        if realtime:
            grid = self.realtime_distance_map(grid_size, **kwargs)
        else:
            grid = self.distance_map(grid_size, **kwargs)
        return grid, distance_summary(grid)
