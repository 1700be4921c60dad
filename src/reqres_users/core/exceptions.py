"""
Custom exceptions for reqres-users.
"""


class ReqresError(Exception):
    """Base exception for all reqres-users errors."""

    def __init__(self, message: str, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class NetworkError(ReqresError):
    """Raised when a request to the Reqres API fails in transport."""

    def __init__(self, url: str, status_code: int | None = None, details: str | None = None):
        message = f"Network request failed: {url}"
        if status_code:
            message += f" (status {status_code})"
        super().__init__(message, details=details)
        self.url = url
        self.status_code = status_code


class MalformedBodyError(ReqresError):
    """Raised when the API response body is not valid JSON."""

    def __init__(self, details: str | None = None):
        super().__init__("Reqres API returned invalid JSON", details=details)


class UnexpectedShapeError(ReqresError):
    """Raised when the decoded body lacks the fields a user page needs."""

    def __init__(self, details: str | None = None):
        super().__init__("Reqres API returned an unexpected response structure", details=details)


class CacheError(ReqresError):
    """Raised when a cache or state store operation fails."""

    def __init__(self, operation: str, details: str | None = None):
        super().__init__(f"Cache error during {operation}", details=details)
        self.operation = operation


class ValidationError(ReqresError):
    """Raised when data validation fails."""

    def __init__(self, field: str, value: str, reason: str):
        super().__init__(
            f"Validation failed for {field}",
            details=f"Value '{value}' is invalid: {reason}",
        )
        self.field = field
        self.value = value
        self.reason = reason
