"""
HTTP Client - Timeout-bounded HTTP requests for nodes and collaborators.

Every outbound call carries an explicit timeout. Transport failures,
timeouts and error statuses surface as ExternalServiceError.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from requests.exceptions import RequestException, Timeout

from hookflow.errors import ExternalServiceError


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


class HttpResponse:
    """
    Response with the decoded payload.

    ``data`` is the parsed JSON body, or the raw text when the body is not JSON.
    """

    def __init__(self, response: requests.Response, service: str = "http"):
        self._response = response
        self.service = service

    @property
    def status(self) -> int:
        return self._response.status_code

    @property
    def headers(self) -> Dict[str, str]:
        return dict(self._response.headers)

    @property
    def text(self) -> str:
        return self._response.text

    @property
    def data(self) -> Any:
        try:
            return self._response.json()
        except ValueError:
            return self._response.text

    @property
    def ok(self) -> bool:
        """True if status code is 2xx."""
        return 200 <= self.status < 300

    def raise_for_status(self) -> "HttpResponse":
        """Raise ExternalServiceError if the status is not 2xx."""
        if not self.ok:
            raise ExternalServiceError(
                self.service,
                f"HTTP {self.status}: {self._response.reason}",
                status_code=self.status,
                response_body=self.text[:1000] if self.text else None,
                url=str(self._response.url),
            )
        return self


class HttpClient:
    """
    HTTP transport shared by nodes and API clients.

    Usage:
        client = HttpClient(timeout=30)
        response = client.request("POST", url, body={"q": "hi"}).raise_for_status()
        data = response.data
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        default_headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.headers: Dict[str, str] = default_headers or {}
        self._session = session

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, Any]] = None,
        body: Any = None,
        timeout: Optional[float] = None,
        service: str = "http",
        **kwargs: Any,
    ) -> HttpResponse:
        """
        Make an HTTP request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE, etc.)
            url: Absolute URL
            headers: Extra headers (merged over defaults)
            body: dict/list sent as JSON, str/bytes sent as-is, None for no body
            timeout: Override default timeout (seconds)
            service: Name used in error messages
            **kwargs: Passed through to requests (files, params, ...)

        Raises:
            ExternalServiceError: on timeout or transport failure
        """
        request_headers = {**self.headers, **{k: str(v) for k, v in (headers or {}).items()}}
        request_timeout = timeout or self.timeout

        if isinstance(body, (dict, list)):
            kwargs["json"] = body
        elif isinstance(body, str):
            kwargs["data"] = body.encode("utf-8")
        elif body is not None:
            kwargs["data"] = body

        sender = self._session.request if self._session is not None else requests.request
        logger.debug("HTTP %s %s", method, url)
        try:
            response = sender(
                method=method.upper(),
                url=url,
                headers=request_headers,
                timeout=request_timeout,
                **kwargs,
            )
        except Timeout as e:
            raise ExternalServiceError(
                service, f"Request timed out after {request_timeout}s", url=url
            ) from e
        except RequestException as e:
            raise ExternalServiceError(service, f"Request failed: {e}", url=url) from e

        return HttpResponse(response, service=service)

    def get(self, url: str, **kwargs: Any) -> HttpResponse:
        """Make GET request."""
        return self.request("GET", url, **kwargs)

    def post(self, url: str, body: Any = None, **kwargs: Any) -> HttpResponse:
        """Make POST request."""
        return self.request("POST", url, body=body, **kwargs)


__all__ = ["DEFAULT_TIMEOUT", "HttpClient", "HttpResponse"]
