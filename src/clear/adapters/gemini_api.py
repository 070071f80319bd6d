"""Gemini API adapter - HTTP client for text generation."""

import logging

import requests

logger = logging.getLogger(__name__)

API_BASE = "https://generativelanguage.googleapis.com/v1beta"


class GeminiService:
    """
    Gemini REST adapter.

    Implements LLMService protocol. No prompt logic - just I/O.
    """

    def __init__(self, api_key: str, model: str = "gemini-1.5-flash", timeout: int = 60):
        if not api_key:
            raise ValueError("GEMINI_API_KEY not configured. Add it to clear.conf")
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._session = requests.Session()

    def generate(self, prompt: str) -> str:
        """Generate text from a prompt. Returns complete response."""
        try:
            resp = self._session.post(
                f"{API_BASE}/models/{self.model}:generateContent",
                params={"key": self.api_key},
                json={"contents": [{"parts": [{"text": prompt}]}]},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Gemini request failed: {e}")
            raise RuntimeError(f"Gemini request failed: {e}") from e

        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError):
            raise RuntimeError(f"Unexpected Gemini response: {data}")
        return "".join(p.get("text", "") for p in parts)
