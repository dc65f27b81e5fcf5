"""
Node kinds - the closed set of behaviors a node type tag can select.
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple


class NodeKind(str, Enum):
    """Behaviors supported by the dispatcher."""
    RESPONDER = "respondToWebhook"
    TRIGGER = "webhook"
    HTTP_REQUEST = "httpRequest"
    FILE_CONVERTER = "convertToFile"
    WAITER = "wait"
    CODE = "code"
    AI_AGENT = "agent"
    UNKNOWN = "unknown"


# Checked in order; the first kind with a marker contained in the type tag wins.
KIND_MARKERS: Tuple[Tuple[NodeKind, Tuple[str, ...]], ...] = (
    (NodeKind.RESPONDER, ("respondToWebhook",)),
    (NodeKind.TRIGGER, ("webhook",)),
    (NodeKind.HTTP_REQUEST, ("httpRequest",)),
    (NodeKind.FILE_CONVERTER, ("convertToFile",)),
    (NodeKind.WAITER, ("wait",)),
    (NodeKind.CODE, ("code",)),
    (NodeKind.AI_AGENT, ("agent", "langchain")),
)


def classify(type_tag: str | None) -> NodeKind:
    """
    Map a node type tag to its kind.

    >>> classify("n8n-nodes-base.httpRequest")
    <NodeKind.HTTP_REQUEST: 'httpRequest'>
    >>> classify("n8n-nodes-base.stickyNote")
    <NodeKind.UNKNOWN: 'unknown'>
    """
    tag = type_tag or ""
    for kind, markers in KIND_MARKERS:
        if any(marker in tag for marker in markers):
            return kind
    return NodeKind.UNKNOWN


__all__ = ["NodeKind", "KIND_MARKERS", "classify"]
