"""
Errors raised while loading and executing workflows.

Every failure a run can end with is a subclass of HookflowError, so the
caller boundary can translate the whole family into a failure response.
"""

from __future__ import annotations

from typing import Optional


class HookflowError(Exception):
    """Base class for workflow errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidWorkflowError(HookflowError):
    """Workflow definition failed validation."""

    status_code = 400


class WorkflowNotFound(HookflowError):
    """No stored workflow matches the requested id or webhook path."""

    status_code = 404

    def __init__(self, workflow_id: str) -> None:
        self.workflow_id = workflow_id
        super().__init__(f"Workflow not found: {workflow_id}")


class StartNodeNotFound(HookflowError):
    """Workflow has no webhook trigger and no node named 'input'."""

    def __init__(self, workflow_id: Optional[str] = None) -> None:
        self.workflow_id = workflow_id
        super().__init__("No webhook/start node found in workflow")


class MissingInputError(HookflowError):
    """A node's required upstream field is absent."""

    def __init__(self, node_name: str, path: str) -> None:
        self.node_name = node_name
        self.path = path
        super().__init__(f"Node '{node_name}': no value found at '{path}'")


class ExternalServiceError(HookflowError):
    """A collaborator call failed (transport error, timeout or error status)."""

    status_code = 502

    def __init__(
        self,
        service: str,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        url: Optional[str] = None,
    ) -> None:
        self.service = service
        self.upstream_status = status_code
        self.response_body = response_body
        self.url = url
        super().__init__(f"{service}: {message}")


class ConfigurationError(HookflowError):
    """A credential or setting required by a collaborator is missing."""

    def __init__(self, setting: str, service: Optional[str] = None) -> None:
        self.setting = setting
        self.service = service
        label = f"{service} " if service else ""
        super().__init__(f"Missing {label}setting: {setting}")


__all__ = [
    "HookflowError",
    "InvalidWorkflowError",
    "WorkflowNotFound",
    "StartNodeNotFound",
    "MissingInputError",
    "ExternalServiceError",
    "ConfigurationError",
]
