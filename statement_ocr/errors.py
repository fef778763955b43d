"""Error taxonomy for the statement extraction pipeline."""

from typing import Any


class StatementOCRError(Exception):
    """Base class for all pipeline errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(StatementOCRError):
    """Raised when service credentials or settings are missing or invalid."""

    pass


class DocumentError(StatementOCRError):
    """Base class for failures that are fatal for a single document."""

    pass


class UnsupportedMediaError(DocumentError):
    """Raised when a document's media type cannot be rasterized."""

    def __init__(self, mime_type: str):
        self.mime_type = mime_type
        super().__init__(f"Unsupported file type: {mime_type}", {"mime_type": mime_type})


class DocumentDecodeError(DocumentError):
    """Raised when a supported document is empty, corrupt or has no pages."""

    def __init__(self, document: str, reason: str):
        self.document = document
        self.reason = reason
        super().__init__(f"Could not decode {document}: {reason}", {"document": document, "reason": reason})


class ServiceUnavailableError(StatementOCRError):
    """Raised on transport or provider failure at the extraction or summary service."""

    def __init__(self, service: str, reason: str):
        self.service = service
        self.reason = reason
        super().__init__(f"{service} service unavailable: {reason}", {"service": service, "reason": reason})


class MalformedResponseError(StatementOCRError):
    """Raised when the service replied but the content violates the transaction schema."""

    def __init__(self, reason: str, raw_text: str, errors: list[str] | None = None):
        self.reason = reason
        self.raw_text = raw_text
        self.errors = errors or []
        super().__init__(f"The model returned an invalid data format: {reason}", {"errors": self.errors})


class BatchExtractionError(StatementOCRError):
    """Consolidated batch failure naming the originating document and failure kind."""

    def __init__(self, document_name: str, document_index: int, cause: StatementOCRError):
        self.document_name = document_name
        self.document_index = document_index
        self.cause = cause
        self.kind = type(cause).__name__
        super().__init__(
            f"Failed to process {document_name} ({self.kind}): {cause.message}",
            {"document": document_name, "index": document_index, "kind": self.kind},
        )
