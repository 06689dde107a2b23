"""Exceptions raised by the pattern file transformations."""

import logging

mylogger = logging.getLogger(__name__)


class PatternError(Exception):
    """Base exception with a message."""
    def __init__(self, message="A pattern file error occurred", log=False):
        self.message = message
        super().__init__(self.message)
        if log:
            mylogger.error(message)


class ParseError(PatternError):
    """Input text or graph JSON is malformed or has the wrong shape."""


class NotFoundError(PatternError):
    """A service key was requested that the descriptor does not hold."""
    def __init__(self, key: str, message: str | None = None, log=False):
        self.key = key
        super().__init__(message or f"Service not found: {key!r}", log=log)


class MalformedNodeError(PatternError):
    """A graph node does not carry the service metadata needed to rebuild it."""
    def __init__(self, node_id: str, message: str, log=False):
        self.node_id = node_id
        super().__init__(f"Node {node_id!r}: {message}", log=log)


class RandomnessError(PatternError):
    """The random source used for layout positions failed."""


__all__ = [
    "MalformedNodeError",
    "NotFoundError",
    "ParseError",
    "PatternError",
    "RandomnessError",
]
