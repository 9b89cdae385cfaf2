"""Exception types that cross subsystem boundaries.

The evaluation engine raises exactly one kind of error:
RetentionValidationError, for malformed or ambiguous input. Dangling
references are NOT errors - they are diagnosed in the decision log.

DatasetFormatError belongs to the loading boundary (files, request
bodies) and is never raised by the engine itself.
"""

from retention.contracts.enums import ErrorCode


class RetentionError(Exception):
    """Base class for all release-retention errors."""


class RetentionValidationError(RetentionError):
    """Raised when evaluation input violates a structural invariant.

    Validation is fail-fast: the first violated rule raises and the
    evaluation is aborted with no partial result.

    Attributes:
        code: Stable machine-readable code for programmatic handling
        message: Human-readable description of the violation
    """

    def __init__(self, code: ErrorCode, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class DatasetFormatError(RetentionError):
    """Raised when a dataset document cannot be parsed into entities.

    Attributes:
        source: Where the document came from (file path or "<mapping>")
        message: Human-readable description of the problem
    """

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        self.message = message
        super().__init__(f"Invalid dataset {source}: {message}")
