# providers/errors.py
from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base class for everything the BigBuy pipeline raises on purpose."""


class ConfigurationError(PipelineError):
    """Deployment is missing something (API key, base URL). Never retried."""


class ServiceUnavailable(ConfigurationError):
    """The upstream cannot be called at all because credentials are missing."""


class AuthorizationError(PipelineError):
    """Caller identity is missing or lacks the required role."""


class UpstreamError(PipelineError):
    """Non-2xx, timeout or unreadable body from the BigBuy API."""

    def __init__(self, message: str, *, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class ValidationError(PipelineError):
    """Malformed caller input, rejected before any I/O."""


class ProductNotFound(PipelineError):
    pass


class PersistenceError(PipelineError):
    pass


class DocumentNotFound(PersistenceError):
    pass


class BatchLimitExceeded(PersistenceError):
    pass
