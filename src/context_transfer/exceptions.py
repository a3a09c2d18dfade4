"""Exceptions for context transfer"""  # noqa: D415


class ContextTransferError(Exception):
    """Base exception for context transfer errors"""  # noqa: D415


class FormatError(ContextTransferError):
    """Raised when input has a malformed or unsupported shape or format"""  # noqa: D415


class ValidationError(ContextTransferError):
    """Raised when conversation data fails basic shape checks"""  # noqa: D415


class AdapterLookupError(ContextTransferError, LookupError):
    """Raised when an adapter or capability record cannot be found.

    The core always recovers from this error with a documented fallback.
    """


class ConfigurationError(ContextTransferError):
    """Raised when configuration values are invalid"""  # noqa: D415
