"""Error types raised by rocket_abm.

Policy output problems are recoverable (the controller deactivates the
offending rocket); population size problems are fatal and surface at the
generation boundary.
"""


class RocketABMError(Exception):
    """Base class for all rocket_abm errors."""


class ConfigError(RocketABMError, ValueError):
    """Configuration values that cannot describe a simulation."""


class MalformedOutputError(RocketABMError, ValueError):
    """A policy returned outputs of the wrong arity or with non-finite values."""

    def __init__(self, message, outputs=None):
        super().__init__(message)
        self.outputs = outputs


class PopulationSizeError(RocketABMError):
    """The evolver's population is empty or does not match its popsize."""

    def __init__(self, message, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
