"""Error classes and helpers"""

__all__ = ["DefinitionError", "InvalidArgument", "ParseError"]


class DefinitionError(Exception):
    """Shape or derived shape was declared incorrectly.

    Raised when the shape is built, never deferred until it is used.
    """


class InvalidArgument(ValueError):
    """Guard called with a missing instance."""


class ParseError(Exception):
    """Exception raised for shape declaration syntax errors.

    Args:
        message: (str) Error description
        position: (tuple[int, int] | None) Line and column of the error

    Attributes:
        message: (str) Error description
        position: (tuple[int, int] | None) Line and column of the error
    """

    def __init__(self, message, position=None):
        self.message = message
        self.position = position
        if position is not None:
            message = f"{message} (line {position[0]}, column {position[1]})"
        super().__init__(message)
