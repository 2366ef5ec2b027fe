"""Exceptions raised by the scoring engine."""


class WeightConfigurationError(ValueError):
    """Raised when grade weights are malformed or do not sum to 1.0."""

    pass
