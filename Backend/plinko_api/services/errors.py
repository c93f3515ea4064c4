class PlinkoError(Exception):
    """Base class for errors raised by the fairness engine."""


class ValidationError(PlinkoError, ValueError):
    """An input was rejected before any hashing or generator work.

    ``field`` names the offending input so callers can tell a bad range
    apart from a bad encoding.
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
