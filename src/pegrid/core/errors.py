"""Exception types raised by grid generation and grid queries."""

from __future__ import annotations


class PEGridError(ValueError):
    """Base class for PEGrid errors."""


class GeometryError(PEGridError):
    """Unit cell is degenerate (zero volume) or otherwise unusable."""


class FileFormatError(PEGridError):
    """Grid file is malformed or truncated."""


class DomainError(PEGridError):
    """Query coordinate lies outside the closed unit cube."""
