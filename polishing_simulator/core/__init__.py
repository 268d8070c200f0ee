# polishing_simulator/core/__init__.py
"""
Kinematics and motion analysis of the planetary polishing machine.
"""

# Main entry point, e.g. from polishing_simulator.core import create_engine
from .engine import Engine, PositionsSnapshot, create_engine
from .frames import Frame, FramePosition
from .parameters import SimulationParameters
from .trajectory import TrackedPoint

__all__ = ['Engine', 'PositionsSnapshot', 'create_engine', 'Frame', 'FramePosition',
           'SimulationParameters', 'TrackedPoint']
