# polishing_simulator/core/kinematics.py
"""
Planetary gear kinematics of the double-sided polishing machine.

The carrier is driven by the sun and ring gears. Its centre orbits the machine
axis (revolution) while the carrier spins about its own centre (rotation).
Wafers sit in the carrier at a fixed offset and a point on a wafer spins with
the sum of both angular rates. All positions are in the "basic" frame, i.e.
before the counter-rotation of the plates is applied (see frames.py).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .. import config
from ..exceptions import DomainError
from .geometry import polar_offset
from .numeric import as_index
from .parameters import SimulationParameters

logger = logging.getLogger(__name__)


def rpm_to_rad_s(rpm: float) -> float:
    return rpm * config.RPM_TO_RAD_S


@dataclass(frozen=True)
class AngularRates:
    """Angular speeds derived from one parameter set, in rev/min and rad/s."""

    carrier_revolution_rpm: float
    carrier_rotation_rpm: float
    wafer_rotation_rpm: float
    upper_rpm: float
    lower_rpm: float

    @property
    def carrier_revolution_omega(self) -> float:
        return rpm_to_rad_s(self.carrier_revolution_rpm)

    @property
    def carrier_rotation_omega(self) -> float:
        return rpm_to_rad_s(self.carrier_rotation_rpm)

    @property
    def wafer_rotation_omega(self) -> float:
        return rpm_to_rad_s(self.wafer_rotation_rpm)

    @property
    def upper_omega(self) -> float:
        return rpm_to_rad_s(self.upper_rpm)

    @property
    def lower_omega(self) -> float:
        return rpm_to_rad_s(self.lower_rpm)

    @property
    def total_omega(self) -> float:
        """Spin rate of a point fixed on the wafer surface."""
        return self.carrier_revolution_omega + self.carrier_rotation_omega


def carrier_revolution_speed(params: SimulationParameters) -> float:
    """(Z_sun·n_sun + Z_ring·n_ring) / (Z_sun + Z_ring), rev/min."""
    teeth_sum = params.sun_gear_teeth + params.ring_gear_teeth
    if teeth_sum == 0:
        raise DomainError("sun_gear_teeth + ring_gear_teeth must not be zero")
    return (params.sun_gear_teeth * params.sun_rpm
            + params.ring_gear_teeth * params.ring_rpm) / teeth_sum


def carrier_rotation_speed(params: SimulationParameters) -> float:
    """(R_ring·n_ring − R_sun·n_sun) / (2·R_carrier), rev/min."""
    if params.carrier_gear_radius == 0:
        raise DomainError("carrier_gear_radius must not be zero")
    return (params.ring_gear_radius * params.ring_rpm
            - params.sun_gear_radius * params.sun_rpm) / (2.0 * params.carrier_gear_radius)


def wafer_rotation_speed(params: SimulationParameters) -> float:
    """Net wafer rotation relative to the plates, rev/min."""
    return (params.upper_rpm + params.lower_rpm) - 2.0 * carrier_revolution_speed(params)


def derive_angular_rates(params: SimulationParameters) -> AngularRates:
    return AngularRates(
        carrier_revolution_rpm=carrier_revolution_speed(params),
        carrier_rotation_rpm=carrier_rotation_speed(params),
        wafer_rotation_rpm=wafer_rotation_speed(params),
        upper_rpm=params.upper_rpm,
        lower_rpm=params.lower_rpm,
    )


class KinematicsModel:
    """
    Closed-form positions of carriers, wafer centres and wafer points.

    Every position method accepts a scalar time or a NumPy array of times and
    returns (x, y) of the same shape. The model holds only values derived from
    its (immutable) parameters.
    """

    def __init__(self, params: SimulationParameters):
        self._params = params
        self._rates = derive_angular_rates(params)
        self._num_carriers = int(params.num_carriers)
        self._num_wafers = int(params.num_wafers_per_carrier)
        self._carrier_offsets = 2 * np.pi * np.arange(self._num_carriers) / self._num_carriers
        self._wafer_offsets = 2 * np.pi * np.arange(self._num_wafers) / self._num_wafers
        logger.debug("Angular rates: revolution %.4f rpm, rotation %.4f rpm, wafer %.4f rpm, "
                     "total omega %.5f rad/s", self._rates.carrier_revolution_rpm,
                     self._rates.carrier_rotation_rpm, self._rates.wafer_rotation_rpm,
                     self._rates.total_omega)

    @property
    def params(self) -> SimulationParameters:
        return self._params

    @property
    def rates(self) -> AngularRates:
        return self._rates

    @property
    def num_carriers(self) -> int:
        return self._num_carriers

    @property
    def num_wafers_per_carrier(self) -> int:
        return self._num_wafers

    def carrier_offset(self, carrier_index: int) -> float:
        carrier_index, _ = self.check_indices(carrier_index, 0)
        return float(self._carrier_offsets[carrier_index])

    def wafer_offset(self, wafer_index: int) -> float:
        _, wafer_index = self.check_indices(0, wafer_index)
        return float(self._wafer_offsets[wafer_index])

    def check_indices(self, carrier_index: int, wafer_index: int) -> tuple[int, int]:
        """Returns both indices as ints; DomainError if either is not a valid index."""
        carrier_index = as_index(carrier_index, "carrier index")
        wafer_index = as_index(wafer_index, "wafer index")
        if not 0 <= carrier_index < self._num_carriers:
            raise DomainError(
                f"carrier index {carrier_index} out of range (num_carriers={self._num_carriers})")
        if not 0 <= wafer_index < self._num_wafers:
            raise DomainError(
                f"wafer index {wafer_index} out of range (num_wafers_per_carrier={self._num_wafers})")
        return carrier_index, wafer_index

    def carrier_position(self, t, carrier_index: int = 0):
        """Carrier centre on its orbit around the machine axis."""
        angle = self._rates.carrier_revolution_omega * t + self.carrier_offset(carrier_index)
        return polar_offset(0.0, 0.0, self._params.center_to_carrier_distance, angle)

    def wafer_center_position(self, t, carrier_index: int = 0, wafer_index: int = 0):
        """Wafer centre: carrier centre plus the carrier-to-wafer arm."""
        cx, cy = self.carrier_position(t, carrier_index)
        angle = (self._rates.carrier_rotation_omega * t
                 + self.wafer_offset(wafer_index) + self.carrier_offset(carrier_index))
        return polar_offset(cx, cy, self._params.carrier_to_wafer_distance, angle)

    def point_position(self, t, r: float, theta: float, carrier_index: int = 0, wafer_index: int = 0):
        """A point at polar offset (r, theta) on the wafer, spinning with the total rate."""
        wx, wy = self.wafer_center_position(t, carrier_index, wafer_index)
        return polar_offset(wx, wy, r, self._rates.total_omega * t + theta)
