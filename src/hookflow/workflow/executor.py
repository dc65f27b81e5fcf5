"""
Workflow Executor - Sync depth-first execution engine.

Walks a workflow from its start node along ``main`` connections, running
every reachable node exactly once and recording its output under its name.

SYNC-WORKER SAFE: All execution is synchronous.
"""

from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from pydantic import ValidationError

from hookflow.errors import InvalidWorkflowError
from hookflow.nodes import NodeDispatcher, NodeExecutionData, default_items
from hookflow.observability import run_log_extra
from hookflow.services import Services
from .graph import select_start_node
from .models import TriggerInput, WorkflowDefinition, parse_workflow
from .response import resolve_response

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    """Traversal state of a run."""
    PENDING = "pending"
    VISITING = "visiting"
    DONE = "done"


@dataclass
class ExecutionContext:
    """
    Per-run record: the trigger input and each node's output items.

    ``results`` keeps the order nodes were recorded in. While a node runs,
    ``state`` is VISITING and ``current_node`` names it.
    """
    input: TriggerInput
    results: Dict[str, List[NodeExecutionData]] = field(default_factory=dict)
    state: RunState = RunState.PENDING
    current_node: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"input": self.input.model_dump(), "results": self.results}


@dataclass
class ExecutionResult:
    """
    Result of workflow execution.
    """
    workflow_id: Optional[str]
    execution_id: str
    final_payload: Any
    response_found: bool
    context: ExecutionContext
    duration_ms: float = 0


class WorkflowExecutor:
    """
    Sync workflow executor.

    Executes a workflow graph depth-first, respecting:
    - Start node selection (first webhook trigger or node named 'input')
    - Output slots explored left to right, targets within a slot left to right
    - Single visit per node, so cycles and diamonds terminate

    Usage:
        executor = WorkflowExecutor(services=Services.from_settings())
        result = executor.execute(workflow_definition, {"body": {...}})
    """

    def __init__(
        self,
        services: Optional[Services] = None,
        dispatcher: Optional[NodeDispatcher] = None,
    ):
        """
        Initialize executor.

        Args:
            services: Collaborators handed to every node
            dispatcher: Node dispatcher; built from ``services`` when omitted
        """
        if dispatcher is None:
            dispatcher = NodeDispatcher(services or Services.from_settings())
        self._dispatcher = dispatcher

    def execute(
        self,
        workflow: WorkflowDefinition | Dict[str, Any],
        trigger_input: TriggerInput | Dict[str, Any] | None = None,
    ) -> ExecutionResult:
        """
        Execute a workflow.

        Args:
            workflow: Workflow definition or JSON dict
            trigger_input: The incoming event (body, headers, query)

        Returns:
            ExecutionResult with the resolved response and the full context

        Raises:
            InvalidWorkflowError: definition does not validate
            StartNodeNotFound: no node can start the run
            HookflowError: any node failure, unchanged
        """
        start_time = time.perf_counter()

        if isinstance(workflow, dict):
            try:
                workflow = parse_workflow(workflow)
            except ValidationError as e:
                raise InvalidWorkflowError(f"Invalid workflow definition: {e}") from e
        if not isinstance(trigger_input, TriggerInput):
            trigger_input = TriggerInput.model_validate(trigger_input or {})

        execution_id = str(uuid.uuid4())
        start_node = select_start_node(workflow)

        context = ExecutionContext(input=trigger_input)
        context.results[start_node.name] = [
            {"json": trigger_input.payload(), "headers": dict(trigger_input.headers)}
        ]

        logger.info(
            "Starting run at '%s'",
            start_node.name,
            extra=run_log_extra(workflow.id, execution_id, node_count=len(workflow.nodes)),
        )
        self._walk(workflow, start_node.name, context, execution_id)

        response = resolve_response(context.results)
        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "Run finished",
            extra=run_log_extra(
                workflow.id,
                execution_id,
                nodes_run=len(context.results),
                response_found=response.found,
                duration_ms=round(duration_ms, 2),
            ),
        )

        return ExecutionResult(
            workflow_id=workflow.id,
            execution_id=execution_id,
            final_payload=response.payload if response.found else context.to_dict(),
            response_found=response.found,
            context=context,
            duration_ms=duration_ms,
        )

    def _walk(
        self,
        workflow: WorkflowDefinition,
        start_name: str,
        context: ExecutionContext,
        execution_id: str,
    ) -> None:
        """
        Depth-first walk with an explicit stack of (node, predecessor).

        The start node is dispatched like any other node, so a non-trigger
        start node still issues its side effect. Its recorded output stays
        the seeded trigger payload.
        """
        visited: Set[str] = set()
        stack: List[Tuple[str, Optional[str]]] = [(start_name, None)]

        while stack:
            name, source = stack.pop()
            if name in visited:
                continue

            node = workflow.get_node(name)
            if node is None:
                logger.warning(
                    "Connection from '%s' targets unknown node '%s'",
                    source,
                    name,
                    extra=run_log_extra(workflow.id, execution_id, name),
                )
                continue

            context.state = RunState.VISITING
            context.current_node = name
            items = self._input_for(name, source, context)
            logger.debug(
                "Executing node: %s (%s)",
                name,
                node.type,
                extra=run_log_extra(workflow.id, execution_id, name),
            )
            output = self._dispatcher.dispatch(node, items, workflow.id, execution_id)
            context.results.setdefault(name, output or items)
            visited.add(name)

            # Reversed so the leftmost target is popped first
            targets = list(workflow.iter_targets(name))
            for target in reversed(targets):
                if target not in visited:
                    stack.append((target, name))

        context.state = RunState.DONE
        context.current_node = None

    def _input_for(
        self,
        name: str,
        source: Optional[str],
        context: ExecutionContext,
    ) -> List[NodeExecutionData]:
        if name in context.results:
            return context.results[name]
        if source is not None and context.results.get(source):
            return context.results[source]
        return default_items(context.input.payload())


__all__ = ["RunState", "ExecutionContext", "ExecutionResult", "WorkflowExecutor"]
