"""
Uncertain Errors

Invalid numeric parameters surface as pydantic.ValidationError from the
parameter models; empty categorical/empirical input yields None. The
classes here cover the remaining library-specific failures.
"""


class UncertainError(Exception):
    """Base class for errors raised by the uncertain library."""
    pass


class RejectionSamplingExhausted(UncertainError):
    """Raised when filter() exceeds its attempt budget without an accepted draw."""

    def __init__(self, attempts: int):
        super().__init__(f"No sample satisfied the predicate after {attempts} attempts")
        self.attempts = attempts
