"""
BaseNode - Abstract base class for node kind implementations.

A node instance is created per dispatch, given a NodeExecutionContext and
asked to execute(). It receives the upstream items and returns the items
recorded under its name.

All execution is synchronous: HTTP calls block with a timeout, the wait
node blocks on the injected sleeper.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional, TypedDict

from hookflow.expressions import resolve_value
from .kinds import NodeKind

if TYPE_CHECKING:
    from hookflow.services import Services
    from hookflow.workflow.models import WorkflowNode


class NodeExecutionData(TypedDict, total=False):
    """
    Single item flowing between nodes.

    Format: {"json": {...}, "headers": {...}}
    """
    json: Any
    headers: Dict[str, Any]


def default_items(payload: Any = None) -> List[NodeExecutionData]:
    """The single item used when a node has no upstream output."""
    return [{"json": payload if payload is not None else {}}]


class NodeExecutionContext:
    """
    Runtime context provided to a node during one dispatch.

    Provides access to:
    - Parameters (raw and template-resolved)
    - Input items
    - Collaborators
    """

    def __init__(
        self,
        node: "WorkflowNode",
        input_data: List[NodeExecutionData],
        services: "Services",
        workflow_id: Optional[str] = None,
        execution_id: Optional[str] = None,
    ) -> None:
        self.node = node
        self._input_data = input_data or default_items()
        self.services = services
        self.workflow_id = workflow_id
        self.execution_id = execution_id

    @property
    def node_name(self) -> str:
        return self.node.name

    def get_node_parameter(self, name: str, default: Any = None) -> Any:
        """Raw parameter value, unresolved."""
        value = self.node.parameters.get(name)
        return default if value is None else value

    def get_input_data(self) -> List[NodeExecutionData]:
        return self._input_data

    def first_json(self) -> Any:
        """Payload of the first input item; parameters resolve against it."""
        first = self._input_data[0] if self._input_data else {}
        return first.get("json", {})


class BaseNode(ABC):
    """
    Base class for node kind implementations.

    Subclasses set ``kind`` and implement execute(). ``description`` and
    ``properties`` document the parameters the node reads.
    """

    kind: NodeKind = NodeKind.UNKNOWN

    description: Dict[str, Any] = {
        "displayName": "Base Node",
        "name": "base",
        "description": "",
    }

    properties: Dict[str, Any] = {
        "parameters": [],
    }

    def __init__(self) -> None:
        self.logger = logging.getLogger(f"hookflow.node.{self.kind.value}")
        self._context: Optional[NodeExecutionContext] = None

    @abstractmethod
    def execute(self) -> List[NodeExecutionData]:
        """
        Run the node.

        Returns:
            Non-empty list of output items.

        Raises:
            MissingInputError, ExternalServiceError, ConfigurationError
        """
        raise NotImplementedError

    # ==== Context Management ====

    def set_context(self, context: NodeExecutionContext) -> None:
        self._context = context

    @property
    def context(self) -> NodeExecutionContext:
        if self._context is None:
            raise RuntimeError(f"{type(self).__name__} has no execution context")
        return self._context

    @property
    def services(self) -> "Services":
        return self.context.services

    @property
    def node_name(self) -> str:
        return self.context.node_name

    # ==== Helper methods for subclasses ====

    def get_node_parameter(self, name: str, default: Any = None) -> Any:
        return self.context.get_node_parameter(name, default)

    def get_resolved_parameter(self, name: str, default: Any = None) -> Any:
        """Parameter with templates resolved against the first input item."""
        return resolve_value(self.get_node_parameter(name, default), self.first_json())

    def get_input_data(self) -> List[NodeExecutionData]:
        return self.context.get_input_data()

    def first_json(self) -> Any:
        return self.context.first_json()


class PassThroughNode(BaseNode):
    """Returns its input items unchanged."""

    def execute(self) -> List[NodeExecutionData]:
        return self.get_input_data()


__all__ = [
    "BaseNode",
    "PassThroughNode",
    "NodeExecutionContext",
    "NodeExecutionData",
    "default_items",
]
