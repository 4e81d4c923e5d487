from typing import Optional


class MovieFinderError(Exception):
    """Base exception for movie lookup failures."""


class NetworkError(MovieFinderError):
    """Raised when the movie service cannot be reached or answers non-2xx."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ApiError(MovieFinderError):
    """Raised when the service answers but flags the request as failed."""


class ValidationError(MovieFinderError):
    """Raised for user input that never reaches the service."""
