"""Tests for the shared time grid."""

import numpy as np
import pytest

from polishing_simulator.core.time_grid import (build_time_samples, chunk_size, index_at_time,
                                                sample_count)
from polishing_simulator.exceptions import DomainError


def test_default_run_sample_count():
    assert sample_count(500.0, 0.1) == 5001


def test_endpoints_are_exact():
    times = build_time_samples(500.0, 0.1)
    assert times[0] == 0.0
    assert times[-1] == 500.0
    np.testing.assert_allclose(np.diff(times), 0.1)


def test_duration_not_a_multiple_of_step():
    times = build_time_samples(1.0, 0.3)
    assert len(times) == 4
    assert times[-1] == 1.0


def test_single_step_grid():
    np.testing.assert_array_equal(build_time_samples(0.5, 0.5), [0.0, 0.5])


@pytest.mark.parametrize("duration, step", [
    (1.0, 0.0),
    (1.0, -0.1),
    (0.05, 0.1),
    (float("inf"), 0.1),
    (1.0, float("nan")),
])
def test_invalid_grid(duration, step):
    with pytest.raises(DomainError):
        sample_count(duration, step)


def test_index_at_time():
    assert index_at_time(0.0, 0.1) == 0
    assert index_at_time(0.3, 0.1) == 3
    assert index_at_time(0.55, 0.1) == 5
    with pytest.raises(DomainError):
        index_at_time(-0.1, 0.1)


def test_chunk_size():
    assert chunk_size(256) == 256
    assert chunk_size(4.0) == 4
    for bad in (0, -3, 2.5):
        with pytest.raises(DomainError):
            chunk_size(bad)
