"""Domain-specific exceptions — framework-independent."""


class ValidationError(Exception):
    """Raised when a submitted payload is malformed (e.g. missing item list)."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthError(Exception):
    """Raised when the admin secret for a destructive operation does not match."""

    def __init__(self, message: str = "Unauthorized operation"):
        self.message = message
        super().__init__(message)


class ConflictError(Exception):
    """Raised when a write violates a uniqueness constraint.

    For batch ingestion this means the whole batch was rejected.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class StoreError(Exception):
    """Raised when the record store cannot be reached or a query fails."""

    def __init__(self, message: str, operation: str = "query"):
        self.message = message
        self.operation = operation
        super().__init__(message)
