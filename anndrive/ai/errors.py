"""
Network Errors
==============

Exceptions raised by the network core. All of them derive from
``NetworkError`` and from ``ValueError`` so callers can catch either.
"""


class NetworkError(Exception):
    """Base class for every error raised by the network core."""


class DimensionError(NetworkError, ValueError):
    """An input or target vector does not match the network topology."""

    def __init__(self, kind: str, expected: int, actual: int):
        self.kind = kind
        self.expected = expected
        self.actual = actual
        super().__init__(f"{kind} vector has length {actual}, expected {expected}")


class TopologyMismatch(NetworkError, ValueError):
    """A weight store does not fit the topology of the network it is restored into."""


class ParseError(NetworkError, ValueError):
    """Serialized text could not be decoded."""


class WeightFormatVersionError(ParseError):
    """Serialized weights were written by an unknown version of the codec."""

    def __init__(self, version: str):
        self.version = version
        super().__init__(f"Unsupported weight format version: {version!r}")


class EmptyDatasetError(NetworkError, ValueError):
    """No eligible training samples remain after filtering."""
