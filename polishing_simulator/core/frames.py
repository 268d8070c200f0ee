# polishing_simulator/core/frames.py
"""
Reference frames of the polishing plates.

The basic frame is the machine frame. The upper and lower frames rotate every
basic position by the plate angle ω_plate·t; the combined frame is the midpoint
of the upper and lower positions. The transformer does not know whether it
rotates a wafer point, a wafer centre or a carrier centre.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np

from .. import config
from ..exceptions import DomainError
from .geometry import rotate_xy, rotation_matrix
from .kinematics import AngularRates


class Frame(str, enum.Enum):
    BASIC = config.FRAME_BASIC
    UPPER = config.FRAME_UPPER
    LOWER = config.FRAME_LOWER
    COMBINED = config.FRAME_COMBINED

    @classmethod
    def parse(cls, value) -> "Frame":
        """Accepts a Frame or its name ("basic", "upper", ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise DomainError(
                f"Unknown frame {value!r}; expected one of {', '.join(config.FRAME_NAMES)}") from None


ALL_FRAMES = tuple(Frame)


@dataclass(frozen=True)
class FramePosition:
    x: float
    y: float
    frame: Frame


class FrameTransformer:
    """Maps basic-frame coordinates into the plate frames at time t."""

    def __init__(self, rates: AngularRates):
        self._upper_omega = rates.upper_omega
        self._lower_omega = rates.lower_omega

    def plate_angle(self, t, frame: Frame):
        frame = Frame.parse(frame)
        if frame is Frame.UPPER:
            return self._upper_omega * t
        if frame is Frame.LOWER:
            return self._lower_omega * t
        if frame is Frame.BASIC:
            return 0.0 * t
        raise DomainError("The combined frame is not a single plate rotation")

    def transform(self, x, y, t, frame):
        """(x, y) at time t seen from `frame`. Scalars or broadcastable arrays."""
        frame = Frame.parse(frame)
        if frame is Frame.BASIC:
            return x, y
        if frame is Frame.COMBINED:
            ux, uy = self.transform(x, y, t, Frame.UPPER)
            lx, ly = self.transform(x, y, t, Frame.LOWER)
            return (ux + lx) / 2.0, (uy + ly) / 2.0
        return rotate_xy(x, y, self.plate_angle(t, frame))

    def transform_all(self, x, y, t) -> dict:
        """All four frames at once; combined reuses the upper/lower results."""
        ux, uy = self.transform(x, y, t, Frame.UPPER)
        lx, ly = self.transform(x, y, t, Frame.LOWER)
        return {
            Frame.BASIC: (x, y),
            Frame.UPPER: (ux, uy),
            Frame.LOWER: (lx, ly),
            Frame.COMBINED: ((ux + lx) / 2.0, (uy + ly) / 2.0),
        }

    def matrix(self, t: float, frame) -> np.ndarray:
        """2x2 linear map of `frame` at scalar time t."""
        frame = Frame.parse(frame)
        if frame is Frame.COMBINED:
            return (self.matrix(t, Frame.UPPER) + self.matrix(t, Frame.LOWER)) / 2.0
        return rotation_matrix(float(self.plate_angle(t, frame)))

    def inverse(self, x: float, y: float, t: float, frame):
        """
        Basic-frame coordinates of a point given in `frame` at scalar time t.

        Upper and lower undo their rotation with −ω·t. The combined map is a
        scaled rotation and is singular whenever the plates are half a turn
        apart, in which case DomainError is raised.
        """
        frame = Frame.parse(frame)
        if frame is Frame.BASIC:
            return x, y
        if frame is not Frame.COMBINED:
            return rotate_xy(x, y, -self.plate_angle(t, frame))
        m = self.matrix(t, frame)
        if abs(np.linalg.det(m)) < 1e-12:
            raise DomainError(f"Combined frame is not invertible at t={t}")
        bx, by = np.linalg.solve(m, np.array([x, y], dtype=float))
        return float(bx), float(by)
