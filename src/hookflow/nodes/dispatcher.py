"""
Node dispatcher - classifies a node's type tag and runs the matching kind.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Mapping, Optional, Type

from .ai_agent import AIAgentNode
from .base import BaseNode, NodeExecutionContext, NodeExecutionData
from .convert_to_file import ConvertToFileNode
from .core import CodeNode, NoOpNode
from .http_request import HttpRequestNode
from .kinds import NodeKind, classify
from .wait import WaitNode
from .webhook import RespondToWebhookNode, WebhookNode

if TYPE_CHECKING:
    from hookflow.services import Services
    from hookflow.workflow.models import WorkflowNode

logger = logging.getLogger(__name__)


NODE_CLASSES: Dict[NodeKind, Type[BaseNode]] = {
    NodeKind.RESPONDER: RespondToWebhookNode,
    NodeKind.TRIGGER: WebhookNode,
    NodeKind.HTTP_REQUEST: HttpRequestNode,
    NodeKind.FILE_CONVERTER: ConvertToFileNode,
    NodeKind.WAITER: WaitNode,
    NodeKind.CODE: CodeNode,
    NodeKind.AI_AGENT: AIAgentNode,
    NodeKind.UNKNOWN: NoOpNode,
}


def check_node_classes(node_classes: Mapping[NodeKind, Type[BaseNode]]) -> None:
    """Raise if a kind has no implementation."""
    missing = [kind.name for kind in NodeKind if kind not in node_classes]
    if missing:
        raise RuntimeError(f"No node implementation for kinds: {', '.join(missing)}")


check_node_classes(NODE_CLASSES)


class NodeDispatcher:
    """
    Runs one node against its input items.

    Usage:
        dispatcher = NodeDispatcher(services)
        items = dispatcher.dispatch(node, input_items)
    """

    def __init__(
        self,
        services: "Services",
        node_classes: Optional[Mapping[NodeKind, Type[BaseNode]]] = None,
    ) -> None:
        if node_classes is not None:
            check_node_classes(node_classes)
        self.services = services
        self._node_classes = dict(node_classes or NODE_CLASSES)

    def node_class(self, node: "WorkflowNode") -> Type[BaseNode]:
        return self._node_classes[classify(node.type)]

    def dispatch(
        self,
        node: "WorkflowNode",
        input_data: List[NodeExecutionData],
        workflow_id: Optional[str] = None,
        execution_id: Optional[str] = None,
    ) -> List[NodeExecutionData]:
        """
        Execute a node and return its output items.

        Errors raised by the node propagate to the caller unchanged.
        """
        instance = self.node_class(node)()
        instance.set_context(
            NodeExecutionContext(
                node=node,
                input_data=input_data,
                services=self.services,
                workflow_id=workflow_id,
                execution_id=execution_id,
            )
        )
        logger.debug("Dispatching '%s' as %s", node.name, instance.kind.name)
        return instance.execute()


__all__ = ["NODE_CLASSES", "NodeDispatcher", "check_node_classes"]
