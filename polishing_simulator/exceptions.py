# polishing_simulator/exceptions.py
"""Exceptions raised by the polishing simulator."""


class SimulatorError(Exception):
    """Base exception for all simulator errors."""
    pass


class DomainError(SimulatorError, ValueError):
    """
    Raised when parameters or query arguments describe a degenerate setup.

    Covers non-positive radii or teeth counts, bad time steps, out-of-range
    carrier/wafer indices, tracked points outside the wafer and invalid grid
    or sample sizes.
    """
    pass


class NumericDegeneracyError(SimulatorError, ArithmeticError):
    """Raised when a computation produces NaN or infinite values."""
    pass


class SimulationCancelled(SimulatorError):
    """Raised when a long sweep observes that its cancel event has been set."""
    pass
