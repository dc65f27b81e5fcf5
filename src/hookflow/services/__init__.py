"""
Collaborators used by node kinds: HTTP transport, uploads, chat completion,
transcription.

Services bundles them so the caller constructs them once per process and
passes them to the executor. Definition stores live in
``hookflow.services.store`` and are only used before and after a run.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from hookflow.config import Settings, get_settings
from .chat import ChatClient, ChatCompletion, OpenAIChatClient
from .http import HttpClient, HttpResponse
from .transcription import AssemblyAIClient
from .uploads import CloudinaryUploader, Uploader


@dataclass
class Services:
    """Collaborators injected into every node dispatch of a run."""
    http: HttpClient
    chat: ChatClient
    uploader: Uploader
    transcription: Optional[AssemblyAIClient] = None
    sleep: Callable[[float], None] = field(default=time.sleep)
    wait_default_s: float = 5

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "Services":
        """Build the production collaborators from settings."""
        settings = settings or get_settings()
        http = HttpClient(timeout=settings.http_timeout_s)
        return cls(
            http=http,
            chat=OpenAIChatClient(http, settings),
            uploader=CloudinaryUploader(http, settings),
            transcription=AssemblyAIClient(http, settings),
            wait_default_s=settings.wait_default_s,
        )


__all__ = [
    "Services",
    "HttpClient",
    "HttpResponse",
    "ChatClient",
    "ChatCompletion",
    "OpenAIChatClient",
    "Uploader",
    "CloudinaryUploader",
    "AssemblyAIClient",
]
