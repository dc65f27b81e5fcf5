"""Workflow definition stores (Redis-backed and in-memory)."""
import json
from typing import Any, Dict, List, Optional, Protocol

import redis
from pydantic import ValidationError

from hookflow.config import get_settings
from hookflow.errors import InvalidWorkflowError
from hookflow.workflow.models import WorkflowDefinition


class DefinitionStore(Protocol):
    """Key-value access to workflow definitions, keyed by workflow id."""

    def get(self, workflow_id: str) -> Optional[WorkflowDefinition]:
        ...

    def put(self, workflow_id: str, workflow: WorkflowDefinition) -> bool:
        ...

    def list(self, prefix: str = "") -> List[str]:
        ...


def decode_workflow(raw: Any) -> WorkflowDefinition:
    """Decode a stored definition (JSON text or already-decoded dict)."""
    try:
        data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
        return WorkflowDefinition.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise InvalidWorkflowError(f"Stored workflow is not valid: {e}") from e


def encode_workflow(workflow: WorkflowDefinition) -> str:
    return workflow.model_dump_json(by_alias=True, exclude_none=True)


class RedisDefinitionStore:
    """Definitions stored as JSON strings under ``<prefix><workflow_id>``."""

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        key_prefix: str | None = None,
    ):
        """
        Initialize definition store.

        Args:
            redis_client: Optional Redis client (will create one if not provided)
            key_prefix: Key namespace (defaults to settings.workflow_key_prefix)
        """
        settings = get_settings()
        if redis_client is None:
            self.redis_client = redis.from_url(settings.redis_url, decode_responses=True)
        else:
            self.redis_client = redis_client
        self._prefix = key_prefix if key_prefix is not None else settings.workflow_key_prefix

    def _key(self, workflow_id: str) -> str:
        return f"{self._prefix}{workflow_id}"

    def get(self, workflow_id: str) -> Optional[WorkflowDefinition]:
        raw = self.redis_client.get(self._key(workflow_id))
        if raw is None:
            return None
        return decode_workflow(raw)

    def put(self, workflow_id: str, workflow: WorkflowDefinition) -> bool:
        return bool(self.redis_client.set(self._key(workflow_id), encode_workflow(workflow)))

    def delete(self, workflow_id: str) -> bool:
        return self.redis_client.delete(self._key(workflow_id)) > 0

    def list(self, prefix: str = "") -> List[str]:
        """Ids of stored workflows starting with ``prefix``, sorted."""
        ids = []
        for key in self.redis_client.scan_iter(match=f"{self._key(prefix)}*"):
            if isinstance(key, bytes):
                key = key.decode("utf-8")
            ids.append(key[len(self._prefix):])
        return sorted(ids)


class InMemoryDefinitionStore:
    """Process-local store for tests and the CLI."""

    def __init__(self, workflows: Dict[str, WorkflowDefinition] | None = None):
        self._data: Dict[str, str] = {}
        for workflow_id, workflow in (workflows or {}).items():
            self.put(workflow_id, workflow)

    def get(self, workflow_id: str) -> Optional[WorkflowDefinition]:
        raw = self._data.get(workflow_id)
        return decode_workflow(raw) if raw is not None else None

    def put(self, workflow_id: str, workflow: WorkflowDefinition) -> bool:
        self._data[workflow_id] = encode_workflow(workflow)
        return True

    def delete(self, workflow_id: str) -> bool:
        return self._data.pop(workflow_id, None) is not None

    def list(self, prefix: str = "") -> List[str]:
        return sorted(k for k in self._data if k.startswith(prefix))


__all__ = [
    "DefinitionStore",
    "RedisDefinitionStore",
    "InMemoryDefinitionStore",
    "decode_workflow",
    "encode_workflow",
]
