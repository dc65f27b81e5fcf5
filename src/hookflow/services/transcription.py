"""
Transcription client (AssemblyAI).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from hookflow.config import Settings, get_settings
from hookflow.errors import ConfigurationError
from .http import HttpClient


class AssemblyAIClient:
    service = "assemblyai"

    def __init__(self, http: HttpClient, settings: Optional[Settings] = None):
        self._http = http
        self._settings = settings or get_settings()

    def _headers(self) -> Dict[str, str]:
        key = self._settings.assemblyai_api_key
        if key is None or not key.get_secret_value():
            raise ConfigurationError("assemblyai_api_key", self.service)
        return {"Authorization": key.get_secret_value()}

    def _url(self, path: str) -> str:
        return f"{self._settings.assemblyai_base_url.rstrip('/')}/{path}"

    def create_transcript(self, audio_url: str) -> Dict[str, Any]:
        """Queue a transcription job for ``audio_url``; returns the job record."""
        return self._http.post(
            self._url("transcript"),
            body={"audio_url": audio_url},
            headers=self._headers(),
            service=self.service,
        ).raise_for_status().data

    def get_transcript(self, transcript_id: str) -> Dict[str, Any]:
        """Fetch a transcription job (status, text once completed)."""
        return self._http.get(
            self._url(f"transcript/{transcript_id}"),
            headers=self._headers(),
            service=self.service,
        ).raise_for_status().data


__all__ = ["AssemblyAIClient"]
