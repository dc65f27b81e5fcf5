"""
Graph helpers - entry point selection and webhook matching.
"""

from __future__ import annotations

from typing import Optional

from hookflow.errors import StartNodeNotFound
from .models import WorkflowDefinition, WorkflowNode

TRIGGER_MARKER = "webhook"
ENTRY_NODE_NAME = "input"


def is_entry_node(node: WorkflowNode) -> bool:
    """A node can start a run if it is a webhook trigger or named 'input'."""
    return TRIGGER_MARKER in (node.type or "") or node.name == ENTRY_NODE_NAME


def find_start_node(workflow: WorkflowDefinition) -> Optional[WorkflowNode]:
    """First entry node in declaration order, or None."""
    for node in workflow.nodes:
        if is_entry_node(node):
            return node
    return None


def select_start_node(workflow: WorkflowDefinition) -> WorkflowNode:
    """
    Get the node a run starts from.

    Raises:
        StartNodeNotFound: if no node qualifies
    """
    node = find_start_node(workflow)
    if node is None:
        raise StartNodeNotFound(workflow.id)
    return node


def listens_on(node: WorkflowNode, hook_id: str) -> bool:
    """
    True if ``node`` is a webhook entry registered under ``hook_id``.

    Matches either the node's ``path`` parameter or its ``webhookId``.
    """
    if not node.type:
        return False
    if TRIGGER_MARKER not in node.type and ENTRY_NODE_NAME not in node.name.lower():
        return False
    if node.parameters.get("path") == hook_id:
        return True
    return bool(node.webhook_id) and node.webhook_id == hook_id


def owns_webhook(workflow: WorkflowDefinition, hook_id: str) -> bool:
    """True if any node of the workflow listens on ``hook_id``."""
    return any(listens_on(node, hook_id) for node in workflow.nodes)


__all__ = [
    "TRIGGER_MARKER",
    "ENTRY_NODE_NAME",
    "is_entry_node",
    "find_start_node",
    "select_start_node",
    "listens_on",
    "owns_webhook",
]
