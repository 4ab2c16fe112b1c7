"""Exceptions raised while building or running circuits."""


class QRunnerError(Exception):
    """Base class for all errors raised by qrunner."""


class InvalidCircuit(QRunnerError, ValueError):
    """Non-positive register width or a gate targeting a qubit outside the register."""


class InvalidShots(QRunnerError, ValueError):
    """Shot count is not a positive integer."""
