from __future__ import annotations

from typing import List, Optional

from neoncover.llms.providers.gemini_client import GeminiTitleClient


def default_titles(topic: str) -> List[str]:
    """Five deterministic creative titles built around `topic`."""
    upper = topic.upper()
    return [
        f"EPIC {upper}",
        f"{topic} MASTERCLASS",
        f"ULTIMATE {upper} GUIDE",
        f"{topic} SECRETS REVEALED",
        f"THE {upper} CHRONICLES",
    ]


def suggest_titles(topic: str, client: Optional[GeminiTitleClient] = None) -> List[str]:
    """
    Title ideas for a new text layer.
    Without a client the deterministic defaults are returned; with one, the model answers.
    """
    topic = topic.strip()
    if client is None:
        return default_titles(topic)
    return client.generate_titles(topic, count=5)
