"""
Exception hierarchy for the simulator.

Every failure is fatal for a run: nothing here is retried. The CLI is the only
layer that turns these into log messages and exit codes.
"""


class SimulatorError(Exception):
    """Base class for all simulator failures."""


class LoadError(SimulatorError, ValueError):
    """The workload file is missing or a line cannot be parsed."""


class SinkError(SimulatorError, OSError):
    """The event log or report destination cannot be written."""


class SchedulerError(SimulatorError, RuntimeError):
    """The scheduler was driven outside its state machine."""
