from __future__ import annotations

"""
Session layer:
- own one EditorState and its resources
- run upload, export and teardown flows
"""

from neoncover.session import session_manager

__all__ = [
    "session_manager",
]
