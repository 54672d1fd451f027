"""Custom exception hierarchy for cvmatch."""

from __future__ import annotations


class CVMatchError(Exception):
    """Base exception for all cvmatch errors."""


class CostLimitExceededError(CVMatchError):
    """Raised when estimated run cost exceeds the configured limit."""


class FatalAgentError(CVMatchError):
    """Raised when an agent encounters an unrecoverable error."""


class ScannedPDFError(CVMatchError):
    """Raised when a PDF has no text layer (scanned/image-only)."""


class EncryptedPDFError(CVMatchError):
    """Raised when a PDF is password-protected."""


class InvalidFileError(CVMatchError):
    """Raised when the input file is missing or of an unsupported type."""


class EmbeddingError(CVMatchError):
    """Raised when text embedding fails."""


class EmailDeliveryError(CVMatchError):
    """Raised when email sending fails."""


class ValidationFailedError(CVMatchError):
    """Raised when a workspace operation is missing required fields."""


class NotFoundError(CVMatchError):
    """Raised when a workspace entity does not exist."""


class DuplicateError(CVMatchError):
    """Raised when creating an entity that already exists."""


class InvitationExpiredError(CVMatchError):
    """Raised when accepting an invitation past its expiry date."""
