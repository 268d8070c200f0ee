"""Tests for the plate reference frames."""

import math

import numpy as np
import pytest

from polishing_simulator.core.frames import ALL_FRAMES, Frame, FrameTransformer
from polishing_simulator.core.kinematics import derive_angular_rates
from polishing_simulator.exceptions import DomainError


@pytest.fixture
def transformer(default_params):
    return FrameTransformer(derive_angular_rates(default_params))


def test_frame_parse():
    assert Frame.parse("upper") is Frame.UPPER
    assert Frame.parse("COMBINED") is Frame.COMBINED
    assert Frame.parse(Frame.LOWER) is Frame.LOWER
    with pytest.raises(DomainError):
        Frame.parse("sideways")


def test_all_frames_order():
    assert [f.value for f in ALL_FRAMES] == ["basic", "upper", "lower", "combined"]


def test_identity_at_time_zero(transformer):
    for frame in ALL_FRAMES:
        assert transformer.transform(837.0, 12.0, 0.0, frame) == pytest.approx((837.0, 12.0))


def test_basic_frame_is_untouched(transformer):
    x = np.array([1.0, 2.0]); y = np.array([3.0, 4.0])
    bx, by = transformer.transform(x, y, np.array([5.0, 6.0]), Frame.BASIC)
    np.testing.assert_array_equal(bx, x)
    np.testing.assert_array_equal(by, y)


@pytest.mark.parametrize("frame", [Frame.UPPER, Frame.LOWER])
def test_plate_rotation_preserves_norm(transformer, frame):
    t = np.linspace(0.0, 50.0, 11)
    x, y = transformer.transform(600.0, -250.0, t, frame)
    np.testing.assert_allclose(np.hypot(x, y), math.hypot(600.0, -250.0))


def test_upper_frame_angle(transformer, default_params):
    t = 2.0
    angle = -12.5 * 2 * math.pi / 60 * t
    x, y = transformer.transform(1.0, 0.0, t, Frame.UPPER)
    assert (x, y) == pytest.approx((math.cos(angle), math.sin(angle)))


def test_combined_is_midpoint(transformer):
    t = np.linspace(0.0, 10.0, 7)
    ux, uy = transformer.transform(400.0, 100.0, t, Frame.UPPER)
    lx, ly = transformer.transform(400.0, 100.0, t, Frame.LOWER)
    cx, cy = transformer.transform(400.0, 100.0, t, Frame.COMBINED)
    np.testing.assert_allclose(cx, (ux + lx) / 2)
    np.testing.assert_allclose(cy, (uy + ly) / 2)


def test_transform_all_matches_single_frames(transformer):
    results = transformer.transform_all(300.0, 50.0, 4.2)
    assert set(results) == set(ALL_FRAMES)
    for frame in ALL_FRAMES:
        assert results[frame] == pytest.approx(transformer.transform(300.0, 50.0, 4.2, frame))


@pytest.mark.parametrize("frame", list(ALL_FRAMES))
def test_inverse_round_trip(transformer, frame):
    t = 1.7
    fx, fy = transformer.transform(700.0, -80.0, t, frame)
    assert transformer.inverse(fx, fy, t, frame) == pytest.approx((700.0, -80.0))


def test_combined_inverse_singular_when_plates_half_turn_apart(default_params, transformer):
    rates = derive_angular_rates(default_params)
    t = math.pi / abs(rates.upper_omega - rates.lower_omega)
    with pytest.raises(DomainError):
        transformer.inverse(10.0, 10.0, t, Frame.COMBINED)


def test_matrix_matches_transform(transformer):
    m = transformer.matrix(3.0, Frame.LOWER)
    expected = transformer.transform(5.0, 7.0, 3.0, Frame.LOWER)
    assert tuple(m @ np.array([5.0, 7.0])) == pytest.approx(expected)
