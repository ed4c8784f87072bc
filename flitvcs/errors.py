"""Exceptions raised by the version control operations."""


class FlitError(Exception):
    """Base class for every error reported by the repository tools."""


class MalformedObjectError(FlitError):
    """Raised when stored object data cannot be decoded or parsed."""