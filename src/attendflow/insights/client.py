from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from ..core.constants import DEFAULT_GEMINI_MODEL, DEFAULT_LLM_TIMEOUT
from ..core.exceptions import LLMNotConfiguredError

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


@dataclass
class LLMConfig:
    model: str = DEFAULT_GEMINI_MODEL
    api_key: str | None = None
    timeout: float = DEFAULT_LLM_TIMEOUT


class GeminiClient:
    """Minimal Gemini REST client returning plain text."""

    def __init__(self, cfg: LLMConfig, *, session: requests.Session | None = None):
        if not cfg.api_key:
            raise LLMNotConfiguredError("GEMINI_API_KEY missing")
        self.cfg = cfg
        self._session = session or requests.Session()

    def generate_text(self, prompt: str) -> Optional[str]:
        """Returns the first candidate's text, or None on any provider failure."""
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": 0.4},
        }
        try:
            response = self._session.post(
                GEMINI_URL.format(model=self.cfg.model),
                params={"key": self.cfg.api_key},
                json=payload,
                timeout=self.cfg.timeout,
            )
            response.raise_for_status()
            obj = response.json()
        except requests.HTTPError as e:
            logger.warning("Gemini HTTPError: %s", e.response.text if e.response is not None else e)
            return None
        except (requests.RequestException, ValueError) as e:
            logger.warning("Gemini request failed: %s", e)
            return None

        return _first_text(obj)


def _first_text(obj: Any) -> Optional[str]:
    # candidates -> content -> parts -> text
    if not isinstance(obj, dict):
        return None
    candidates = obj.get("candidates") or []
    if not candidates:
        return None
    parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
    texts = [p.get("text") for p in parts if isinstance(p, dict) and p.get("text")]
    return "".join(texts) or None
