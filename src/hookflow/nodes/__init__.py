from .base import BaseNode, NodeExecutionContext, NodeExecutionData, PassThroughNode, default_items
from .kinds import NodeKind, classify
from .webhook import WebhookNode, RespondToWebhookNode
from .http_request import HttpRequestNode
from .convert_to_file import ConvertToFileNode
from .wait import WaitNode
from .ai_agent import AIAgentNode
from .core import CodeNode, NoOpNode
from .dispatcher import NODE_CLASSES, NodeDispatcher

__all__ = [
    "BaseNode",
    "PassThroughNode",
    "NodeExecutionContext",
    "NodeExecutionData",
    "default_items",
    "NodeKind",
    "classify",
    "WebhookNode",
    "RespondToWebhookNode",
    "HttpRequestNode",
    "ConvertToFileNode",
    "WaitNode",
    "AIAgentNode",
    "CodeNode",
    "NoOpNode",
    "NODE_CLASSES",
    "NodeDispatcher",
]
