"""Errors raised while synthesizing speech.

Cache and filesystem problems surface as OSError/ValueError instead;
these types only describe the remote speech service.
"""


class TTSError(Exception):
    """Speech synthesis failed.

    Attributes:
        original_error: Exception raised by the client library, if any
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error


class TTSAuthError(TTSError):
    """OPENAI_API_KEY is missing, or the service rejected it."""


class TTSAPIError(TTSError):
    """The speech service returned an error or no audio.

    Attributes:
        status_code: HTTP status of the failed request, when known
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)
        self.status_code = status_code


class TTSRateLimitError(TTSAPIError):
    """Too many requests (HTTP 429); safe to try again later."""


class TTSQuotaError(TTSAPIError):
    """The account has run out of credit; retrying will not help."""


class TTSModelError(TTSAPIError):
    """The requested model is not available to this account."""
