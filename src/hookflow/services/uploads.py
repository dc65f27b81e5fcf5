"""
Upload client - pushes base64 payloads to Cloudinary and returns the asset record.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from hookflow.config import Settings, get_settings
from hookflow.errors import ConfigurationError
from .http import HttpClient


logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "file.webm"


class Uploader(Protocol):
    def upload(self, base64_payload: str, filename: str = DEFAULT_FILENAME) -> Dict[str, Any]:
        ...


class CloudinaryUploader:
    """Unsigned upload through an upload preset."""

    service = "cloudinary"

    def __init__(self, http: HttpClient, settings: Optional[Settings] = None):
        self._http = http
        self._settings = settings or get_settings()

    def _check_configured(self) -> str:
        settings = self._settings
        for name in ("cloudinary_cloud_name", "cloudinary_api_key", "cloudinary_api_secret"):
            value = getattr(settings, name)
            if hasattr(value, "get_secret_value"):
                value = value.get_secret_value()
            if not value:
                raise ConfigurationError(name, self.service)
        return settings.cloudinary_cloud_name

    def upload(self, base64_payload: str, filename: str = DEFAULT_FILENAME) -> Dict[str, Any]:
        """
        Upload a base64 payload; returns Cloudinary's response (url, public_id, ...).

        Raises:
            ConfigurationError: if Cloudinary credentials are missing
            ExternalServiceError: if the upload fails
        """
        cloud_name = self._check_configured()
        url = f"{self._settings.cloudinary_base_url.rstrip('/')}/{cloud_name}/auto/upload"

        form = {
            "file": (None, f"data:application/octet-stream;base64,{base64_payload}"),
            "upload_preset": (None, self._settings.cloudinary_upload_preset),
            "filename_override": (None, filename),
        }
        logger.info("Uploading %s to Cloudinary", filename)
        response = self._http.request(
            "POST", url, files=form, service=self.service
        ).raise_for_status()
        data = response.data
        return data if isinstance(data, dict) else {"response": data}


__all__ = ["DEFAULT_FILENAME", "Uploader", "CloudinaryUploader"]
