"""gsr: find git repositories that need attention."""

__version__ = "0.3.0"


class GsrError(Exception):
    """Base class for errors raised by gsr."""
