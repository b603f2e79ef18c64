# src/neoncover/llms/providers/gemini_client.py
from __future__ import annotations

import os
import re
from typing import Any, List, Optional

from google import genai
from google.genai import types

from neoncover.app.errors import ConfigError, TitleSuggestionError

# Leading list markers the model tends to add: "1.", "2)", "-", "*", "•"
_LIST_MARKER = re.compile(r"^\s*(?:\d+[.)]|[-*•])\s*")


def parse_title_lines(text: str, limit: int) -> List[str]:
    titles: List[str] = []
    for line in (text or "").splitlines():
        title = _LIST_MARKER.sub("", line).strip().strip('"').strip()
        if title:
            titles.append(title)
        if len(titles) >= limit:
            break
    return titles


class GeminiTitleClient:
    """
    Gemini text wrapper that proposes short cover titles for a topic.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[Any] = None,
    ):
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        self.default_model = model or os.getenv("GEMINI_TEXT_MODEL", "gemini-2.5-flash")

        if client is not None:
            self.client = client
        elif self.api_key:
            self.client = genai.Client(api_key=self.api_key)
        else:
            raise ConfigError("GEMINI_API_KEY must be set to use Gemini title suggestions")

    def generate_titles(self, topic: str, *, count: int = 5, model: Optional[str] = None) -> List[str]:
        """
        Ask the model for `count` titles, one per line. Returns at most `count` titles.
        """
        model = model or self.default_model
        prompt = (
            f"Suggest {count} short, punchy video thumbnail titles about: {topic}.\n"
            "Return one title per line, no numbering, no quotes, no extra text."
        )
        config = types.GenerateContentConfig(
            temperature=1.0,
            top_p=0.95,
            max_output_tokens=256,
        )

        try:
            resp = self.client.models.generate_content(
                model=model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            raise TitleSuggestionError(f"Gemini request failed: {e}") from e

        titles = parse_title_lines(getattr(resp, "text", None) or "", count)
        if not titles:
            raise TitleSuggestionError("Gemini response did not include any titles.")
        return titles
