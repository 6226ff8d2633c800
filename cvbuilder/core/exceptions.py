# cvbuilder/core/exceptions.py
from __future__ import annotations
from enum import Enum
from typing import Optional


class FailureReason(str, Enum):
    NETWORK = "network"          # transport error talking to the provider
    TIMEOUT = "timeout"
    HTTP_STATUS = "http_status"  # non-2xx from the provider
    PROVIDER = "provider"        # provider body carried an "error" object
    MALFORMED = "malformed"      # expected text path missing
    PARSE = "parse"              # generated text is not the JSON we asked for
    UNKNOWN = "unknown"          # anything the collaborators did not classify


class CVBuilderError(RuntimeError):
    """Base for every error that maps onto the JSON error envelope."""

    status_code: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, details: Optional[str] = None):
        super().__init__(message or self.public_message)
        self.details = details

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(CVBuilderError):
    """Raised when the service is missing something it needs to run (e.g. the provider key)."""

    status_code = 500
    public_message = "Server configuration error"


class RequestShapeError(CVBuilderError):
    """Raised for requests that cannot be processed at all: bad method, content type, no files."""

    status_code = 400
    public_message = "Invalid request"

    def __init__(self, message: Optional[str] = None, *, status_code: int = 400, details: Optional[str] = None):
        super().__init__(message, details=details)
        self.status_code = status_code


class NoUsableContentError(CVBuilderError):
    status_code = 422
    public_message = "No usable content could be extracted from the uploaded files"


class ProviderError(CVBuilderError):
    """Raised when the AI provider call fails; ``reason`` says how."""

    status_code = 502
    public_message = "AI provider request failed"

    def __init__(self, message: Optional[str] = None, *, reason: FailureReason, details: Optional[str] = None):
        super().__init__(message, details=details)
        self.reason = reason


class ExtractionError(ProviderError):
    """Text extraction for a single file failed. Never escalated on its own."""

    public_message = "Failed to extract text from document"


class GenerationError(ProviderError):
    """CV / cover letter synthesis failed. Fatal to the request."""

    status_code = 500
    public_message = "Failed to generate CV content with AI"
