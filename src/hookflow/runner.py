"""
Workflow service - the boundary between callers and the executor.

Loads definitions from a store, finds the workflow owning a webhook path,
runs it and turns typed failures into a failure outcome with a status code.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from hookflow.errors import HookflowError, InvalidWorkflowError, WorkflowNotFound
from hookflow.observability import run_log_extra
from hookflow.services.store import DefinitionStore
from hookflow.workflow import (
    ExecutionResult,
    TriggerInput,
    WorkflowDefinition,
    WorkflowExecutor,
    owns_webhook,
    parse_workflow,
)

logger = logging.getLogger(__name__)


@dataclass
class RunOutcome:
    """What the caller sends back to whoever triggered the run."""
    ok: bool
    status_code: int
    payload: Any = None
    error: Optional[str] = None
    result: Optional[ExecutionResult] = None

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"ok": True, "payload": self.payload}
        return {"ok": False, "error": self.error}


class WorkflowService:
    """
    Save, list and run stored workflows.

    Usage:
        service = WorkflowService(RedisDefinitionStore(), WorkflowExecutor(services))
        outcome = service.handle_webhook("my-hook", body={"question": "hi"})
    """

    def __init__(self, store: DefinitionStore, executor: WorkflowExecutor):
        self.store = store
        self.executor = executor

    def save_workflow(self, body: Dict[str, Any]) -> str:
        """
        Store a definition and return its id.

        ``body`` is either the workflow itself or ``{"id": ..., "workflow": {...}}``.
        A fresh uuid is assigned when no id is given.
        """
        workflow_id = body.get("id") or str(uuid.uuid4())
        data = body.get("workflow") or body
        try:
            workflow = parse_workflow(data)
        except ValidationError as e:
            raise InvalidWorkflowError(f"Invalid workflow definition: {e}") from e
        if not workflow.id:
            workflow = workflow.model_copy(update={"id": workflow_id})

        self.store.put(workflow_id, workflow)
        logger.info("Saved workflow", extra=run_log_extra(workflow_id, node_count=len(workflow.nodes)))
        return workflow_id

    def list_workflows(self) -> List[WorkflowDefinition]:
        workflows = []
        for workflow_id in self.store.list():
            workflow = self.store.get(workflow_id)
            if workflow is not None:
                workflows.append(workflow)
        return workflows

    def load_workflow(self, workflow_id: str) -> WorkflowDefinition:
        workflow = self.store.get(workflow_id)
        if workflow is None:
            raise WorkflowNotFound(workflow_id)
        return workflow

    def find_by_webhook(self, hook_id: str) -> WorkflowDefinition:
        """First stored workflow (by id order) with a trigger listening on ``hook_id``."""
        for workflow_id in self.store.list():
            workflow = self.store.get(workflow_id)
            if workflow is not None and owns_webhook(workflow, hook_id):
                return workflow
        raise WorkflowNotFound(hook_id)

    def run(self, workflow_id: str, trigger_input: TriggerInput | Dict[str, Any] | None = None) -> RunOutcome:
        """Run a stored workflow by id."""
        try:
            workflow = self.load_workflow(workflow_id)
            return self._execute(workflow, trigger_input)
        except HookflowError as e:
            return self._failure(e, workflow_id)

    def handle_webhook(
        self,
        hook_id: str,
        body: Any = None,
        headers: Optional[Dict[str, Any]] = None,
        query: Optional[Dict[str, Any]] = None,
    ) -> RunOutcome:
        """Run the workflow listening on ``hook_id`` with the incoming request."""
        trigger_input = TriggerInput(body=body, headers=headers or {}, query=query or {})
        try:
            workflow = self.find_by_webhook(hook_id)
            return self._execute(workflow, trigger_input)
        except HookflowError as e:
            return self._failure(e, hook_id)

    def _execute(self, workflow: WorkflowDefinition, trigger_input: Any) -> RunOutcome:
        result = self.executor.execute(workflow, trigger_input)
        if result.response_found:
            payload = result.final_payload
        else:
            payload = {"ok": True, "context": result.context.to_dict()}
        return RunOutcome(ok=True, status_code=200, payload=payload, result=result)

    def _failure(self, error: HookflowError, workflow_id: Optional[str]) -> RunOutcome:
        logger.error(
            "Run failed: %s",
            error,
            extra=run_log_extra(workflow_id, error_type=type(error).__name__),
        )
        return RunOutcome(ok=False, status_code=error.status_code, error=str(error))


__all__ = ["RunOutcome", "WorkflowService"]
