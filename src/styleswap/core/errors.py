"""Exceptions and failure classification for StyleSwap.

Only ingestion and programmer errors are raised out of the core. Generation
failures are recorded on the workflow as a :class:`~styleswap.core.models.WorkflowError`
and classified here so the credential marker lives in exactly one place.
"""

from .models import ErrorKind

CREDENTIAL_MISSING_MARKER = "API Key configuration"


class StyleSwapError(Exception):
    """Base class for StyleSwap errors."""

    pass


class ImageReadError(StyleSwapError):
    """The uploaded image could not be read.

    Raised by the image codec. The caller (UI) is responsible for showing it;
    the workflow never sees a half-ingested image.
    """

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        super().__init__(message)


class GenerationServiceError(StyleSwapError):
    """The generation service failed.

    The message is shown to the user verbatim, so it should describe the
    failure in the service's own words.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class PreconditionViolation(StyleSwapError):
    """An operation was invoked in a state the UI should never allow."""

    pass


def classify_error(message: str, marker: str = CREDENTIAL_MISSING_MARKER) -> ErrorKind:
    """Classify a generation failure message.

    Args:
        message: Failure message reported by the generation service
        marker: Substring that marks a missing or unusable API key

    Returns:
        ErrorKind.CREDENTIAL_MISSING if the marker occurs in the message,
        ErrorKind.OTHER otherwise
    """
    if marker and marker in (message or ""):
        return ErrorKind.CREDENTIAL_MISSING
    return ErrorKind.OTHER
