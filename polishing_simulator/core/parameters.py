# polishing_simulator/core/parameters.py
"""
Immutable process parameters for the planetary polishing simulation.

`SimulationParameters` is the single input of the engine. It is a frozen
dataclass validated on construction, so an engine built from it can never
observe a change or a degenerate value; editing a value means building a new
record (`replace`) and a new engine.
"""

from __future__ import annotations

import dataclasses
import math
import numbers
from dataclasses import dataclass

from .. import config
from ..exceptions import DomainError


_POSITIVE_FIELDS = (
    "sun_gear_teeth", "ring_gear_teeth",
    "sun_gear_radius", "ring_gear_radius", "carrier_gear_radius", "wafer_radius",
    "center_to_carrier_distance", "carrier_to_wafer_distance",
    "plate_inner_radius", "plate_outer_radius",
    "time_step", "total_time",
)
_COUNT_FIELDS = ("num_carriers", "num_wafers_per_carrier", "num_disc_samples")


@dataclass(frozen=True)
class SimulationParameters:
    """
    Gear geometry, drive speeds and sweep settings of one simulation.

    Attributes:
        sun_gear_teeth, ring_gear_teeth: Tooth counts of the sun and ring gears.
        sun_gear_radius, ring_gear_radius, carrier_gear_radius: Pitch radii (mm).
        wafer_radius: Wafer radius (mm).
        center_to_carrier_distance: Machine axis to carrier centre (mm).
        carrier_to_wafer_distance: Carrier centre to wafer centre (mm).
        sun_rpm, ring_rpm, upper_rpm, lower_rpm: Drive speeds (rev/min).
        num_carriers: Carriers spread evenly around the machine axis.
        num_wafers_per_carrier: Wafers spread evenly inside each carrier.
        num_disc_samples: Monte-Carlo points per wafer for coverage sweeps.
        total_time: Simulated duration (s).
        time_step: Sample spacing (s).
        plate_inner_radius, plate_outer_radius: Polishing annulus of the plates (mm).
        pressure_mpa: Down force pressure used by the Preston estimate.
        preston_coefficient: Preston constant used by the removal estimate.
    """

    sun_gear_teeth: float = config.DEFAULT_PROCESS_PARAMS["sun_gear_teeth"]
    ring_gear_teeth: float = config.DEFAULT_PROCESS_PARAMS["ring_gear_teeth"]
    sun_gear_radius: float = config.DEFAULT_PROCESS_PARAMS["sun_gear_radius"]
    ring_gear_radius: float = config.DEFAULT_PROCESS_PARAMS["ring_gear_radius"]
    carrier_gear_radius: float = config.DEFAULT_PROCESS_PARAMS["carrier_gear_radius"]
    wafer_radius: float = config.DEFAULT_PROCESS_PARAMS["wafer_radius"]
    center_to_carrier_distance: float = config.DEFAULT_PROCESS_PARAMS["center_to_carrier_distance"]
    carrier_to_wafer_distance: float = config.DEFAULT_PROCESS_PARAMS["carrier_to_wafer_distance"]
    sun_rpm: float = config.DEFAULT_PROCESS_PARAMS["sun_rpm"]
    ring_rpm: float = config.DEFAULT_PROCESS_PARAMS["ring_rpm"]
    upper_rpm: float = config.DEFAULT_PROCESS_PARAMS["upper_rpm"]
    lower_rpm: float = config.DEFAULT_PROCESS_PARAMS["lower_rpm"]
    num_carriers: int = config.DEFAULT_PROCESS_PARAMS["num_carriers"]
    num_wafers_per_carrier: int = config.DEFAULT_PROCESS_PARAMS["num_wafers_per_carrier"]
    num_disc_samples: int = config.DEFAULT_PROCESS_PARAMS["num_disc_samples"]
    total_time: float = config.DEFAULT_PROCESS_PARAMS["total_time"]
    time_step: float = config.DEFAULT_PROCESS_PARAMS["time_step"]
    plate_inner_radius: float = config.DEFAULT_PROCESS_PARAMS["plate_inner_radius"]
    plate_outer_radius: float = config.DEFAULT_PROCESS_PARAMS["plate_outer_radius"]
    pressure_mpa: float = config.DEFAULT_PROCESS_PARAMS["pressure_mpa"]
    preston_coefficient: float = config.DEFAULT_PROCESS_PARAMS["preston_coefficient"]

    @classmethod
    def from_dict(cls, params: dict) -> "SimulationParameters":
        """
        Builds validated parameters from a plain dict.

        Missing keys take their value from config.DEFAULT_PROCESS_PARAMS;
        unknown keys are rejected so typos do not silently fall back to defaults.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(params) - known)
        if unknown:
            raise DomainError(f"Unknown simulation parameter(s): {', '.join(unknown)}")
        merged = dict(config.DEFAULT_PROCESS_PARAMS)
        merged.update(params)
        return cls(**merged)

    def __post_init__(self):
        self.validate()

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    def replace(self, **changes) -> "SimulationParameters":
        """Returns a validated copy with the given fields changed."""
        return dataclasses.replace(self, **changes)

    def validate(self) -> None:
        """Raises DomainError if the parameters describe a degenerate machine."""
        for name, value in self.to_dict().items():
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise DomainError(f"{name} must be a real number, got {value!r}")
            if not math.isfinite(value):
                raise DomainError(f"{name} must be finite, got {value!r}")

        for name in _POSITIVE_FIELDS:
            if getattr(self, name) <= 0:
                raise DomainError(f"{name} must be > 0, got {getattr(self, name)!r}")

        for name in _COUNT_FIELDS:
            value = getattr(self, name)
            if value < 1 or int(value) != value:
                raise DomainError(f"{name} must be an integer >= 1, got {value!r}")

        if self.time_step > self.total_time:
            raise DomainError(
                f"time_step ({self.time_step}) must not exceed total_time ({self.total_time})")
        if self.sun_gear_radius >= self.ring_gear_radius:
            raise DomainError("sun_gear_radius must be smaller than ring_gear_radius")
        if self.plate_inner_radius >= self.plate_outer_radius:
            raise DomainError("plate_inner_radius must be smaller than plate_outer_radius")
        if 2.0 * self.wafer_radius > self.plate_outer_radius - self.plate_inner_radius:
            raise DomainError(
                f"wafer diameter ({2.0 * self.wafer_radius}) does not fit the plate annulus "
                f"({self.plate_inner_radius}..{self.plate_outer_radius})")
        if self.pressure_mpa < 0 or self.preston_coefficient < 0:
            raise DomainError("pressure_mpa and preston_coefficient must be >= 0")
