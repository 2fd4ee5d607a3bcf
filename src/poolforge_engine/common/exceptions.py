"""Poolforge-Engine exception hierarchy."""


class PoolforgeError(Exception):
    """Base exception for all Poolforge errors."""

    def __init__(self, message: str = "", code: str = "POOLFORGE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class BadRequestError(PoolforgeError):
    """Raised when a caller-supplied reference is structurally insufficient."""

    def __init__(self, message: str = "Bad request"):
        super().__init__(message, code="BAD_REQUEST")


class NotFoundError(PoolforgeError):
    """Raised when a well-formed reference does not resolve."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, code="NOT_FOUND")
