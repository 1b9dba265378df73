"""
Global LingoStreet exception classes.

Every failure of an outbound Gemini call is raised as a subclass of
`LingoStreetError` carrying an `ErrorKind`, so callers branch on the kind
instead of on message text.
"""

from enum import Enum
from typing import Optional


class ImproperlyConfigured(Exception):
    """
    Raised when LingoStreet is not configured correctly.
    """

    def __init__(self, message: str) -> None:
        """
        Initialize with a configuration error message.

        Args:
            message: Description of the misconfiguration.
        """
        super().__init__(message)
        self.message = message


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"
    CONTENT_BLOCKED = "content_blocked"
    EMPTY_RESPONSE = "empty_response"
    AUDIO_UNAVAILABLE = "audio_unavailable"
    MALFORMED_RESPONSE = "malformed_response"
    FETCH_FAILED = "fetch_failed"


class LingoStreetError(Exception):
    """
    Base class for errors raised while talking to the generative services.
    """

    kind: ErrorKind = ErrorKind.FETCH_FAILED
    default_message: str = "The request to the coach failed."

    def __init__(self, message: Optional[str] = None) -> None:
        """
        Args:
            message: Human readable detail; falls back to `default_message`.
        """
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(LingoStreetError, ImproperlyConfigured):
    """
    Missing or rejected API credential.
    """

    kind = ErrorKind.CONFIGURATION
    default_message = (
        "Missing API Key. Ensure 'API_KEY' is set in your environment variables."
    )


class ContentBlocked(LingoStreetError):
    """
    The upstream safety filter refused the prompt or the generated content.
    """

    kind = ErrorKind.CONTENT_BLOCKED
    default_message = "The request was blocked by the content safety filter."

    def __init__(
        self,
        message: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        """
        Args:
            message: Human readable detail.
            reason: Block or finish reason reported by the service.
        """
        self.reason = reason
        if message is None and reason:
            message = f"{self.default_message} Reason: {reason}"
        super().__init__(message)


class EmptyResponse(LingoStreetError):
    kind = ErrorKind.EMPTY_RESPONSE
    default_message = "The coach received an empty response from the streets."


class AudioUnavailable(LingoStreetError):
    kind = ErrorKind.AUDIO_UNAVAILABLE
    default_message = "No audio data was returned for this term."


class MalformedResponse(LingoStreetError):
    """
    The reply was JSON but did not match the slang report contract.
    """

    kind = ErrorKind.MALFORMED_RESPONSE
    default_message = "The slang report did not match the expected shape."


class FetchFailed(LingoStreetError):
    """
    Generic transport or HTTP failure.
    """

    kind = ErrorKind.FETCH_FAILED

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message)



# Status used when an error of a given kind has to be reported over HTTP.
HTTP_STATUS_BY_KIND = {
    ErrorKind.CONFIGURATION: 503,
    ErrorKind.CONTENT_BLOCKED: 422,
    ErrorKind.EMPTY_RESPONSE: 502,
    ErrorKind.AUDIO_UNAVAILABLE: 502,
    ErrorKind.MALFORMED_RESPONSE: 502,
    ErrorKind.FETCH_FAILED: 502,
}
