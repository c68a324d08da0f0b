"""Generic utilities and helpers.

This is a collection of helpers that are used by
the other parts of the codebase and are not bound
to a specific component.
"""

from . import tabulate

__all__ = ("tabulate",)
