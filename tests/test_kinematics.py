"""Tests for the planetary gear kinematics."""

import math
from types import SimpleNamespace

import numpy as np
import pytest

from polishing_simulator.core.kinematics import (KinematicsModel, carrier_revolution_speed,
                                                 carrier_rotation_speed, derive_angular_rates,
                                                 rpm_to_rad_s)
from polishing_simulator.core.parameters import SimulationParameters
from polishing_simulator.exceptions import DomainError


REVOLUTION_RPM = (96 * 17.1 + 338 * (-3.9)) / (96 + 338)
ROTATION_RPM = (987.5 * (-3.9) - 267.0 * 17.1) / (2 * 372.0)


class TestAngularRates:

    def test_carrier_revolution_speed(self, default_params):
        assert carrier_revolution_speed(default_params) == pytest.approx(REVOLUTION_RPM)
        assert carrier_revolution_speed(default_params) == pytest.approx(0.745161, abs=1e-6)

    def test_carrier_rotation_speed(self, default_params):
        assert carrier_rotation_speed(default_params) == pytest.approx(ROTATION_RPM)

    def test_wafer_rotation_speed(self, default_params):
        rates = derive_angular_rates(default_params)
        assert rates.wafer_rotation_rpm == pytest.approx((-12.5 + 23.6) - 2 * REVOLUTION_RPM)

    def test_rad_per_second_conversion(self, default_params):
        rates = derive_angular_rates(default_params)
        assert rates.carrier_revolution_omega == pytest.approx(REVOLUTION_RPM * 2 * math.pi / 60)
        assert rates.upper_omega == pytest.approx(-12.5 * 2 * math.pi / 60)
        assert rates.lower_omega == pytest.approx(rpm_to_rad_s(23.6))
        assert rates.total_omega == pytest.approx(
            rates.carrier_revolution_omega + rates.carrier_rotation_omega)

    def test_zero_teeth_sum_is_guarded(self):
        fake = SimpleNamespace(sun_gear_teeth=0, ring_gear_teeth=0, sun_rpm=1.0, ring_rpm=1.0)
        with pytest.raises(DomainError):
            carrier_revolution_speed(fake)

    def test_zero_carrier_radius_is_guarded(self):
        fake = SimpleNamespace(carrier_gear_radius=0.0, ring_gear_radius=10.0, ring_rpm=1.0,
                               sun_gear_radius=5.0, sun_rpm=1.0)
        with pytest.raises(DomainError):
            carrier_rotation_speed(fake)

    def test_zero_teeth_rejected_at_construction(self):
        with pytest.raises(DomainError):
            KinematicsModel(SimulationParameters.from_dict({"sun_gear_teeth": 0, "ring_gear_teeth": 0}))


class TestPositions:

    def test_positions_at_time_zero(self, default_params):
        model = KinematicsModel(default_params)
        assert model.carrier_position(0.0) == pytest.approx((639.0, 0.0))
        assert model.wafer_center_position(0.0) == pytest.approx((639.0 + 198.0, 0.0))
        assert model.point_position(0.0, 100.0, math.pi / 2) == pytest.approx((837.0, 100.0))

    def test_carrier_phase_offsets(self):
        model = KinematicsModel(SimulationParameters(num_carriers=4))
        x, y = model.carrier_position(0.0, 1)
        assert x == pytest.approx(0.0, abs=1e-9)
        assert y == pytest.approx(639.0)
        x, y = model.carrier_position(0.0, 2)
        assert x == pytest.approx(-639.0)

    def test_wafer_phase_includes_carrier_offset(self):
        model = KinematicsModel(SimulationParameters(num_carriers=2, num_wafers_per_carrier=2,
                                                     carrier_to_wafer_distance=150.0))
        # carrier 1 sits at angle pi, its wafer 1 arm points at pi + pi
        cx, cy = model.carrier_position(0.0, 1)
        wx, wy = model.wafer_center_position(0.0, 1, 1)
        assert wx - cx == pytest.approx(150.0)
        assert wy - cy == pytest.approx(0.0, abs=1e-9)

    def test_carrier_orbit_radius_is_constant(self, default_params):
        model = KinematicsModel(default_params)
        t = np.linspace(0.0, 100.0, 101)
        x, y = model.carrier_position(t)
        np.testing.assert_allclose(np.hypot(x, y), 639.0)

    def test_wafer_centre_stays_on_carrier_arm(self, default_params):
        model = KinematicsModel(default_params)
        t = np.linspace(0.0, 100.0, 101)
        cx, cy = model.carrier_position(t)
        wx, wy = model.wafer_center_position(t)
        np.testing.assert_allclose(np.hypot(wx - cx, wy - cy), 198.0)

    def test_vectorised_matches_scalar(self, default_params):
        model = KinematicsModel(default_params)
        t = np.array([0.0, 1.3, 7.7, 250.0])
        xs, ys = model.point_position(t, 120.0, 0.4)
        for i, ti in enumerate(t):
            assert (xs[i], ys[i]) == pytest.approx(model.point_position(float(ti), 120.0, 0.4))

    def test_point_spins_with_total_omega(self, default_params):
        model = KinematicsModel(default_params)
        t = 3.0
        wx, wy = model.wafer_center_position(t)
        px, py = model.point_position(t, 50.0, 0.0)
        assert math.atan2(py - wy, px - wx) == pytest.approx(
            math.remainder(model.rates.total_omega * t, 2 * math.pi))

    @pytest.mark.parametrize("carrier_index, wafer_index", [(1, 0), (0, 1), (-1, 0)])
    def test_index_out_of_range(self, default_params, carrier_index, wafer_index):
        model = KinematicsModel(default_params)
        with pytest.raises(DomainError):
            model.wafer_center_position(0.0, carrier_index, wafer_index)


class TestIndexCoercion:

    def test_integer_valued_float_index(self):
        model = KinematicsModel(SimulationParameters(num_carriers=2))
        assert model.check_indices(1.0, 0.0) == (1, 0)
        assert model.carrier_position(0.0, 1.0) == pytest.approx(model.carrier_position(0.0, 1))
        assert model.wafer_center_position(2.0, np.int64(1)) == pytest.approx(
            model.wafer_center_position(2.0, 1))

    @pytest.mark.parametrize("index", [0.5, float("nan"), "0", True, None])
    def test_non_integer_index(self, default_params, index):
        model = KinematicsModel(default_params)
        with pytest.raises(DomainError):
            model.carrier_position(0.0, index)
        with pytest.raises(DomainError):
            model.check_indices(0, index)
