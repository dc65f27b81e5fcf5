"""
hookflow - run n8n-style workflow graphs from webhook triggers.

Usage:
    from hookflow import Services, WorkflowExecutor

    executor = WorkflowExecutor(Services.from_settings())
    result = executor.execute(workflow_json, {"body": {"question": "hi"}})
    print(result.final_payload)
"""

from hookflow.workflow import (
    ExecutionResult,
    TriggerInput,
    WorkflowDefinition,
    WorkflowExecutor,
    parse_workflow,
)
from hookflow.errors import (
    ConfigurationError,
    ExternalServiceError,
    HookflowError,
    InvalidWorkflowError,
    MissingInputError,
    StartNodeNotFound,
    WorkflowNotFound,
)
from hookflow.services import Services
from hookflow.runner import RunOutcome, WorkflowService

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ExecutionResult",
    "TriggerInput",
    "WorkflowDefinition",
    "WorkflowExecutor",
    "parse_workflow",
    "Services",
    "RunOutcome",
    "WorkflowService",
    "HookflowError",
    "InvalidWorkflowError",
    "WorkflowNotFound",
    "StartNodeNotFound",
    "MissingInputError",
    "ExternalServiceError",
    "ConfigurationError",
]
