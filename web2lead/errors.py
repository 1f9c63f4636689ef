"""Exceptions raised while building and posting leads."""
from typing import Any, Optional


class Web2LeadError(Exception):
    """Base class for web2lead errors."""


class ConfigurationError(Web2LeadError):
    """Handler is not configured to post (e.g. no endpoint URL)."""


class MappingError(Web2LeadError):
    """Custom data block or mapping table could not be parsed."""


class TransportError(Web2LeadError):
    """The POST failed at the network level or returned a non-2xx status."""

    def __init__(self, message: str, response: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.response = response
