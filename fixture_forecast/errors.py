from typing import Optional


class APIError(Exception):
    """Unified error class for data retrieval failures."""

    def __init__(self, source: str, code: str, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.source = source
        self.code = code
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "code": self.code,
            "message": self.message,
            **({"details": self.details} if self.details else {}),
        }


class RateLimitExceededError(APIError):
    """Raised when every configured API key has been rate limited."""

    def __init__(self, endpoint: str, attempts: int):
        super().__init__(
            "football-data",
            "rate_limited",
            f"Rate limit exceeded for {endpoint} after {attempts} retries.",
        )
        self.endpoint = endpoint
        self.attempts = attempts
