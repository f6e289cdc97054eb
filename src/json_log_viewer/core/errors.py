"""Error types raised by the rendering pipeline."""

from __future__ import annotations


class ViewerError(Exception):
    """Base class for errors that terminate a run."""


class LineParseError(ViewerError, ValueError):
    """A non-JSON input line under the ``fail`` policy."""


class TimezoneError(ViewerError, ValueError):
    """The requested display timezone could not be resolved."""
