# pathviz/core/errors.py
#!/usr/bin/env python3
"""Exceptions raised by the search core.

A search that exhausts its frontier is not an error: ``run`` returns
:class:`pathviz.core.types.NotFound` for that.
"""


class PathSearchError(Exception):
    """Base class for search failures."""


class InvalidEndpoints(PathSearchError, ValueError):
    """Start or goal missing, equal, out of bounds or on a wall."""


class BrokenParentChain(PathSearchError, RuntimeError):
    """Parent walk from the goal did not end at the start."""

    def __init__(self, message: str, chain=None):
        super().__init__(message)
        self.chain = list(chain or [])
