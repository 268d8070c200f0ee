"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from polishing_simulator.core.engine import create_engine
from polishing_simulator.core.parameters import SimulationParameters


@pytest.fixture
def default_params():
    """The dashboard's default process parameters."""
    return SimulationParameters()


@pytest.fixture
def short_params():
    """Default machine, but only 2 s at 0.1 s steps (21 samples)."""
    return SimulationParameters(total_time=2.0, time_step=0.1)


@pytest.fixture
def short_engine(short_params):
    return create_engine(short_params)


@pytest.fixture
def multi_engine():
    """Two carriers with two wafers each, 1 s at 0.1 s steps."""
    return create_engine({"num_carriers": 2, "num_wafers_per_carrier": 2,
                          "carrier_to_wafer_distance": 150.0,
                          "total_time": 1.0, "time_step": 0.1})


@pytest.fixture
def rng():
    return np.random.default_rng(12345)
