"""Helpers shared by the other packages.

Nothing in here knows about column types or problems,
:mod:`flatpyground.utils.tabulate` only formats Arrow data
for display and is used to print :class:`flatpyground.TypedTable`.
"""

from . import tabulate

__all__ = ("tabulate",)
