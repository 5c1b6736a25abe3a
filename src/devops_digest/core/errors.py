"""Domain errors."""

from typing import Optional


class DigestError(Exception):
    """Base class for all digest pipeline errors."""


class ConfigError(DigestError):
    """Source list or credentials are missing or malformed."""


class FetchError(DigestError):
    """Raised when a URL cannot be fetched after exhausting retries."""

    def __init__(self, url: str, attempts: int, cause: Optional[BaseException] = None) -> None:
        self.url = url
        self.attempts = attempts
        self.cause = cause
        message = f"Failed to fetch {url} after {attempts} attempt(s)"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class LLMError(DigestError):
    """Inference service call failed."""


class ResponseDecodeError(DigestError):
    """Model response could not be decoded into a JSON object."""


class DigestValidationError(DigestError):
    """Rendered digest failed validation."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("; ".join(problems) or "Digest validation failed")
