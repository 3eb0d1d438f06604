# File: utils/__init__.py
"""Pure Python utilities for recurrentry.

This module contains pure functions with ZERO package-level dependencies.
All functions here can be unit tested in isolation.

Submodules:
    - dt_utils: Calendar primitives (period arithmetic, weekday
      classification, ordinal resolution, date parsing)

Usage:
    from . import dt_utils
    from .dt_utils import resolve_ordinal
"""

from . import dt_utils

__all__ = ["dt_utils"]
