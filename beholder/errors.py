"""
Beholder 공통 예외
"""


class DecodeError(Exception):
    """Raised when an inbound payload cannot be decoded into a typed event."""


class JobLookupError(LookupError):
    """Raised when a job record or a stored field is missing."""


class SinkError(Exception):
    """Raised when a notification cannot be delivered to an external collaborator."""


class ConfigMappingError(Exception):
    """Raised when no destination list is configured for a job status."""


class StoreUnavailableError(Exception):
    """Raised when the state store cannot be reached. Not handled by the router."""
