"""Base exception for all bashlog domain errors.

Concrete errors live next to the code that raises them and also subclass the
closest builtin (``LookupError``, ``ValueError``, ``OSError``, ...), so callers
can catch either.  The CLI translates any ``BashlogError`` into a single
``Error: ...`` line and a non-zero exit status.
"""

from __future__ import annotations


class BashlogError(Exception):
    """Root of the bashlog exception hierarchy."""
