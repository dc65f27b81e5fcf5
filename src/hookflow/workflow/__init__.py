from .models import (
    MAIN,
    TriggerInput,
    WorkflowConnection,
    WorkflowDefinition,
    WorkflowNode,
    parse_workflow,
)
from .graph import find_start_node, listens_on, owns_webhook, select_start_node
from .response import ResolvedResponse, resolve_response
from .executor import ExecutionContext, ExecutionResult, RunState, WorkflowExecutor

__all__ = [
    "MAIN",
    "TriggerInput",
    "WorkflowConnection",
    "WorkflowDefinition",
    "WorkflowNode",
    "parse_workflow",
    "find_start_node",
    "select_start_node",
    "listens_on",
    "owns_webhook",
    "ResolvedResponse",
    "resolve_response",
    "ExecutionContext",
    "ExecutionResult",
    "RunState",
    "WorkflowExecutor",
]
