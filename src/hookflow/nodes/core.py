"""
Core Nodes - pass-through kinds with no side effects.
"""

from typing import List

from .base import NodeExecutionData, PassThroughNode
from .kinds import NodeKind


class CodeNode(PassThroughNode):
    """
    Code - user code is never executed; items pass through unchanged.
    """

    kind = NodeKind.CODE

    description = {
        "displayName": "Code",
        "name": "code",
        "group": ["transform"],
        "description": "Inline code (not executed)",
    }

    def execute(self) -> List[NodeExecutionData]:
        if self.get_node_parameter("jsCode") or self.get_node_parameter("pythonCode"):
            self.logger.debug("Node '%s': inline code is not executed", self.node_name)
        return super().execute()


class NoOpNode(PassThroughNode):
    """Fallback for type tags no kind recognizes."""

    kind = NodeKind.UNKNOWN

    description = {
        "displayName": "No Operation",
        "name": "noOp",
        "group": ["organization"],
        "description": "Passes items through",
    }

    def execute(self) -> List[NodeExecutionData]:
        self.logger.debug(
            "Node '%s': unrecognized type %r, passing items through",
            self.node_name,
            self.context.node.type,
        )
        return super().execute()
