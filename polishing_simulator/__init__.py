# polishing_simulator/__init__.py
"""
Motion simulator for wafers in a double-sided planetary polishing machine.
"""

from .core import (Engine, Frame, FramePosition, PositionsSnapshot, SimulationParameters,
                   TrackedPoint, create_engine)
from .exceptions import DomainError, NumericDegeneracyError, SimulationCancelled, SimulatorError
from .session import SimulationSession

__all__ = ['Engine', 'Frame', 'FramePosition', 'PositionsSnapshot', 'SimulationParameters',
           'TrackedPoint', 'create_engine', 'DomainError', 'NumericDegeneracyError',
           'SimulationCancelled', 'SimulatorError', 'SimulationSession']
