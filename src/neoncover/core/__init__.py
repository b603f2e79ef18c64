from __future__ import annotations

"""
Small shared helpers: clock, hashing and ID generation.
"""

from neoncover.core import clock, hashing, ids

__all__ = [
    "clock",
    "hashing",
    "ids",
]
