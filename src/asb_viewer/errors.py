from __future__ import annotations


class ViewerError(Exception):
    """Base class for conditions reported to the caller instead of a crash."""


class ParseFailure(ViewerError, ValueError):
    """Source data is malformed or empty (no rows, no numeric columns)."""


class ConversionFailure(ViewerError, ValueError):
    """A single cell cannot be read as a number or a date."""


class IOFailure(ViewerError, OSError):
    """Acquisition of the source file failed after every retry."""
