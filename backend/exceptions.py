"""
Custom exception classes for collaborator failures.

These are raised by services and never carry HTTP semantics; routes and the
mint pipeline translate them into domain errors.
"""


class MintBackendError(Exception):
    """Base class for all service-level failures."""
    pass


class ConfigurationError(MintBackendError):
    """Raised at startup when required configuration is missing."""

    def __init__(self, message: str, missing: list[str] | None = None):
        super().__init__(message)
        self.missing = missing or []


class UpstreamAuthError(MintBackendError):
    """Raised when the OAuth code exchange or profile fetch fails."""
    pass


class ImageError(MintBackendError):
    """Raised when a generated image cannot be read or written."""
    pass


class ImageLoadError(ImageError):
    """Raised when an avatar cannot be fetched or decoded."""
    pass


class UploadError(MintBackendError):
    """Raised when a content-addressed storage call fails."""
    pass


class ContractReadError(MintBackendError):
    """Raised when a read-only contract call (price, cutover) fails."""
    pass
