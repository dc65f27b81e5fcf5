"""
Chat completion client (OpenAI-compatible ``/chat/completions``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from hookflow.config import Settings, get_settings
from hookflow.errors import ConfigurationError, ExternalServiceError
from .http import HttpClient


logger = logging.getLogger(__name__)


@dataclass
class ChatCompletion:
    """Text of the first choice plus the raw API response."""
    text: str
    raw: Dict[str, Any] = field(default_factory=dict)


class ChatClient(Protocol):
    def complete(self, prompt: str) -> ChatCompletion:
        ...


class OpenAIChatClient:
    """Single-turn chat completions with a fixed system message."""

    service = "openai"

    def __init__(
        self,
        http: HttpClient,
        settings: Optional[Settings] = None,
    ):
        self._http = http
        self._settings = settings or get_settings()

    def _api_key(self) -> str:
        key = self._settings.openai_api_key
        if key is None or not key.get_secret_value():
            raise ConfigurationError("openai_api_key", self.service)
        return key.get_secret_value()

    def complete(self, prompt: str) -> ChatCompletion:
        """
        Send ``prompt`` as the user message and return the reply text.

        Raises:
            ConfigurationError: if no API key is configured
            ExternalServiceError: on transport failure, error status or an
                unexpected response shape
        """
        settings = self._settings
        payload = {
            "model": settings.openai_model,
            "messages": [
                {"role": "system", "content": settings.openai_system_prompt},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": settings.openai_max_tokens,
        }
        response = self._http.post(
            f"{settings.openai_base_url.rstrip('/')}/chat/completions",
            body=payload,
            headers={"Authorization": f"Bearer {self._api_key()}"},
            service=self.service,
        ).raise_for_status()

        data = response.data
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            logger.warning("Unexpected chat completion response: %s", str(data)[:500])
            raise ExternalServiceError(self.service, "Unexpected response format") from e

        return ChatCompletion(text=content or "", raw=data)


__all__ = ["ChatClient", "ChatCompletion", "OpenAIChatClient"]
