"""Pure Python utilities for habitcore.

This package contains pure Python helpers with ZERO engine imports.
All functions here can be unit tested without building habit records.

Submodules:
    - dt_utils: Local-calendar date parsing, keys and interval arithmetic

Usage:
    from . import dt_utils
    from .dt_utils import dt_to_local_date
"""

from . import dt_utils

__all__ = ["dt_utils"]
