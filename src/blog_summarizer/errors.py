"""Failure types raised by the blog pipeline.

Each error carries a ``kind`` used by the API and CLI to classify the failure
and a ``message`` that is safe to show to the person who submitted the URL.
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for failures that abort processing of a blog URL."""

    kind = "processing_error"
    default_message = "Failed to process blog"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class FetchError(PipelineError):
    """The page could not be downloaded."""

    kind = "fetch_error"
    default_message = "Unable to fetch the webpage"


class InvalidUrl(FetchError):
    kind = "invalid_url"
    default_message = "Please provide a valid HTTP or HTTPS URL"


class NetworkError(FetchError):
    kind = "network_error"
    default_message = "Unable to fetch the webpage"


class Timeout(FetchError):
    kind = "timeout"
    default_message = "The webpage took too long to load"


# Avoids shadowing the builtin TimeoutError at import sites.
FetchTimeout = Timeout


class HttpError(FetchError):
    kind = "http_error"

    def __init__(self, status: int, message: str | None = None) -> None:
        self.status = status
        super().__init__(message or f"Unable to fetch the webpage (HTTP {status})")


class InsufficientContent(PipelineError):
    kind = "insufficient_content"
    default_message = "Could not extract enough readable content from the webpage"


class PersistenceFailed(PipelineError):
    """The summary could not be written to the system of record."""

    kind = "persistence_failed"
    default_message = "Failed to process blog"
