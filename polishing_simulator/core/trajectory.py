# polishing_simulator/core/trajectory.py
"""
Trajectories of tracked wafer points in every reference frame, and the
velocity profiles derived from them by backward differences.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from ..exceptions import DomainError
from .frames import ALL_FRAMES, Frame, FramePosition, FrameTransformer
from .kinematics import KinematicsModel
from .numeric import as_index, ensure_finite
from .time_grid import index_at_time


@dataclass(frozen=True)
class TrackedPoint:
    """A point at polar offset (r, theta) on one wafer of one carrier."""

    r: float
    theta: float = 0.0
    carrier_index: int = 0
    wafer_index: int = 0
    label: str = ""

    def __post_init__(self):
        # Integer-valued floats from text fields ("1" parsed as 1.0) become ints
        object.__setattr__(self, "carrier_index", as_index(self.carrier_index, "carrier index"))
        object.__setattr__(self, "wafer_index", as_index(self.wafer_index, "wafer index"))

    @classmethod
    def from_dict(cls, data: dict) -> "TrackedPoint":
        return cls(r=float(data["r"]), theta=float(data.get("theta", 0.0)),
                   carrier_index=data.get("carrier_index", 0),
                   wafer_index=data.get("wafer_index", 0),
                   label=str(data.get("label", "")))

    def validate(self, model: KinematicsModel) -> None:
        if not np.isfinite(self.r) or not np.isfinite(self.theta):
            raise DomainError(f"Tracked point {self.label!r} has non-finite coordinates")
        if self.r < 0 or self.r > model.params.wafer_radius:
            raise DomainError(
                f"Tracked point {self.label!r}: r={self.r} outside wafer radius "
                f"{model.params.wafer_radius}")
        model.check_indices(self.carrier_index, self.wafer_index)


@dataclass(frozen=True, eq=False)
class Trajectory:
    """Positions of one tracked point at every sample time, per frame."""

    point: TrackedPoint
    times: np.ndarray
    xy: dict = field(repr=False)   # Frame -> (x array, y array)

    def __len__(self) -> int:
        return len(self.times)

    def xs(self, frame) -> np.ndarray:
        return self.xy[Frame.parse(frame)][0]

    def ys(self, frame) -> np.ndarray:
        return self.xy[Frame.parse(frame)][1]

    def positions(self, frame) -> list[FramePosition]:
        frame = Frame.parse(frame)
        x, y = self.xy[frame]
        return [FramePosition(float(px), float(py), frame) for px, py in zip(x, y)]

    def samples(self, frame) -> list[tuple[float, FramePosition]]:
        return list(zip((float(t) for t in self.times), self.positions(frame)))


@dataclass(frozen=True)
class VelocitySample:
    t: float
    vx: float
    vy: float
    speed: float


@dataclass(frozen=True, eq=False)
class VelocitySeries:
    """Backward-difference velocity; one element shorter than its trajectory."""

    frame: Frame
    times: np.ndarray
    vx: np.ndarray
    vy: np.ndarray
    speed: np.ndarray

    def __len__(self) -> int:
        return len(self.times)

    def samples(self) -> list[VelocitySample]:
        return [VelocitySample(float(t), float(a), float(b), float(s))
                for t, a, b, s in zip(self.times, self.vx, self.vy, self.speed)]


@dataclass(frozen=True)
class LabelledTrajectory:
    """A trajectory expanded for one carrier/wafer pair, as listed on the dashboard."""

    name: str
    point: TrackedPoint
    trajectory: Trajectory


def track_point(model: KinematicsModel, transformer: FrameTransformer,
                times: np.ndarray, point: TrackedPoint) -> Trajectory:
    """Positions of `point` at every time in all four frames."""
    point.validate(model)
    bx, by = model.point_position(times, point.r, point.theta,
                                  point.carrier_index, point.wafer_index)
    frames = transformer.transform_all(bx, by, times)
    for frame in ALL_FRAMES:
        ensure_finite(f"{frame.value} trajectory of {point.label or 'point'}", *frames[frame])
    return Trajectory(point=point, times=times, xy=frames)


def velocity_of(trajectory: Trajectory, frame) -> VelocitySeries:
    """
    v_i = (p_i − p_{i−1}) / (t_i − t_{i−1}) for i >= 1, stamped with t_i.

    The spacing of consecutive samples is constant on the time grid, so this is
    the configured step whenever the duration is a multiple of it.
    """
    frame = Frame.parse(frame)
    x, y = trajectory.xy[frame]
    dt = np.diff(trajectory.times)
    if np.any(dt <= 0):
        raise DomainError("Trajectory times must be strictly increasing")
    vx = np.diff(x) / dt
    vy = np.diff(y) / dt
    speed = np.hypot(vx, vy)
    ensure_finite(f"{frame.value} velocity", vx, vy)
    return VelocitySeries(frame=frame, times=trajectory.times[1:], vx=vx, vy=vy, speed=speed)


def trail_window(trajectory: Trajectory, frame, current_time: float,
                 time_step: float, trail_length: int) -> list[FramePosition]:
    """
    The most recent positions up to current_time: samples
    max(0, idx − trail_length) .. idx inclusive, idx = floor(current_time / step).
    """
    if trail_length < 0:
        raise DomainError(f"trail_length must be >= 0, got {trail_length}")
    frame = Frame.parse(frame)
    idx = min(index_at_time(current_time, time_step), len(trajectory) - 1)
    start = max(0, idx - trail_length)
    x, y = trajectory.xy[frame]
    return [FramePosition(float(px), float(py), frame)
            for px, py in zip(x[start:idx + 1], y[start:idx + 1])]


def expand_tracked_points(points, num_carriers: int, num_wafers: int) -> list[tuple[str, TrackedPoint]]:
    """
    Repeats every tracked point on every carrier and wafer.

    The names follow the dashboard legend: "<label> (C<carrier>W<wafer>)".
    """
    expanded = []
    for c_idx in range(num_carriers):
        for w_idx in range(num_wafers):
            for p_idx, point in enumerate(points):
                label = point.label or f"Point {p_idx + 1}"
                copy = TrackedPoint(point.r, point.theta, c_idx, w_idx, label)
                expanded.append((f"{label} (C{c_idx}W{w_idx})", copy))
    return expanded
