from __future__ import annotations

"""
Callable entrypoint for scripted exports.
"""

from neoncover.api_stub import runner

__all__ = [
    "runner",
]
