"""Pytest configuration and fixtures."""
import os
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

# Set test environment variables
os.environ["HOOKFLOW_ENV"] = "test"
os.environ["HOOKFLOW_REDIS_URL"] = "redis://localhost:6379/1"  # Test DB
os.environ["HOOKFLOW_LOG_FORMAT"] = "text"


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop the cached settings so env changes made by a test are picked up."""
    from hookflow.config import reset_settings

    reset_settings()
    yield
    reset_settings()


class RecordingSleep:
    """Sleeper that records requested durations instead of blocking."""

    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def http_response(data: Any) -> MagicMock:
    """HttpResponse double whose raise_for_status() returns itself."""
    response = MagicMock()
    response.data = data
    response.ok = True
    response.raise_for_status.return_value = response
    return response


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def services(sleeper):
    """Services with every collaborator mocked."""
    from hookflow.services import ChatCompletion, Services

    chat = MagicMock()
    chat.complete.return_value = ChatCompletion(text="hello")

    uploader = MagicMock()
    uploader.upload.return_value = {"url": "https://cdn.example.com/file.webm", "public_id": "abc"}

    http = MagicMock()
    http.request.return_value = http_response({"status": "ok"})

    return Services(http=http, chat=chat, uploader=uploader, sleep=sleeper, wait_default_s=5)


def make_node(name: str, type_: str, **parameters: Any) -> Dict[str, Any]:
    return {"name": name, "type": type_, "parameters": parameters}


def chain(*names: str) -> Dict[str, Any]:
    """Connections linking ``names`` one after another on slot 0."""
    return {
        source: {"main": [[{"node": target, "type": "main", "index": 0}]]}
        for source, target in zip(names, names[1:])
    }


def make_workflow(
    nodes: List[Dict[str, Any]],
    connections: Optional[Dict[str, Any]] = None,
    workflow_id: str = "wf-test",
) -> Dict[str, Any]:
    return {
        "id": workflow_id,
        "name": "Test Workflow",
        "nodes": nodes,
        "connections": connections or {},
    }
