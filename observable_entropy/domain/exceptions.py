"""Base exception classes for the Observable Entropy domain layer."""


class ObservableEntropyError(Exception):
    """Base exception for all domain errors.

    Expected failures (bad input, missing records, failed verification,
    storage rejections) travel as ``EntropyError`` values inside a
    ``Result``. Exceptions derived from this class are reserved for
    control signals that must unwind a computation, such as the
    cancellation of an iterated digest.
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
