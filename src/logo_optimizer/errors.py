"""
Error Taxonomy

- ConfigurationError: invalid options, raised at construction, never recovered
- InvariantViolation: inconsistent node space, indicates a bug, fatal
- SurrogateUnavailable: surrogate cannot predict yet, recovered by the gate
- ObjectiveError: the objective returned a non-finite value
"""


class ConfigurationError(ValueError):
    """Invalid optimizer configuration."""


class InvariantViolation(RuntimeError):
    """The node space or a node is in a state the engine never produces."""


class SurrogateUnavailable(RuntimeError):
    """The surrogate model has too few samples to make a prediction."""


class ObjectiveError(ValueError):
    """The objective function returned a value that cannot be accepted."""
