"""
Workflow Models - JSON structures for workflow definitions and runs.

Definitions follow the n8n export format: nodes keyed by unique name,
connections keyed by source node name.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

MAIN = "main"


class WorkflowConnection(BaseModel):
    """
    Connection to a target node.

    Example: {"node": "HTTP Request", "type": "main", "index": 0}
    """
    model_config = ConfigDict(extra="allow")

    node: str = Field(..., description="Target node name")
    type: str = Field(MAIN, description="Connection type")
    index: int = Field(0, description="Target input index")


class WorkflowNode(BaseModel):
    """
    A node in a workflow.

    Matches the n8n workflow JSON node format. Unknown keys (position,
    typeVersion, credentials...) are kept but not interpreted.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., description="Node name (unique within workflow)")
    type: str = Field("", description="Type tag, e.g. 'n8n-nodes-base.webhook'")
    parameters: Dict[str, Any] = Field(default_factory=dict)
    id: Optional[str] = Field(None, description="Editor node id")
    webhook_id: Optional[str] = Field(None, alias="webhookId")


# {source_name: {connection_type: [[connection, ...], ...]}}
ConnectionMap = Dict[str, Dict[str, List[List[WorkflowConnection]]]]


class WorkflowDefinition(BaseModel):
    """
    Complete workflow definition.

    Nodes keep their declaration order; start-node selection depends on it.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: Optional[str] = Field(None, description="Workflow ID")
    name: str = Field("Unnamed Workflow", description="Workflow name")
    active: bool = Field(False, description="Is workflow active?")

    nodes: List[WorkflowNode] = Field(default_factory=list)
    connections: ConnectionMap = Field(
        default_factory=dict,
        description="Node connections: {source: {type: [[{node, type, index}]]}}",
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize_connections(cls, data: Any) -> Any:
        """Tolerate null slots and missing connection maps from editor exports."""
        if not isinstance(data, dict):
            return data
        connections = data.get("connections") or {}
        normalized: Dict[str, Any] = {}
        for source, outputs in connections.items():
            if not isinstance(outputs, dict):
                continue
            normalized[source] = {
                conn_type: [list(slot or []) for slot in (slots or [])]
                for conn_type, slots in outputs.items()
            }
        return {**data, "connections": normalized}

    @model_validator(mode="after")
    def _check_unique_names(self) -> "WorkflowDefinition":
        seen = set()
        for node in self.nodes:
            if node.name in seen:
                raise ValueError(f"Duplicate node name: {node.name}")
            seen.add(node.name)
        return self

    def get_node(self, name: str) -> Optional[WorkflowNode]:
        """Get node by name."""
        for node in self.nodes:
            if node.name == name:
                return node
        return None

    def iter_targets(self, node_name: str, conn_type: str = MAIN) -> Iterator[str]:
        """Target names of a node's outputs: slot by slot, left to right."""
        for slot in self.connections.get(node_name, {}).get(conn_type, []):
            for conn in slot:
                if conn.node:
                    yield conn.node

    def get_downstream_nodes(self, node_name: str) -> List[str]:
        """Get names of nodes connected to this node's main outputs."""
        return list(self.iter_targets(node_name))

    def get_upstream_nodes(self, node_name: str) -> List[str]:
        """Get names of nodes whose main outputs connect to this node."""
        return [
            source for source in self.connections
            if node_name in self.iter_targets(source)
        ]


class TriggerInput(BaseModel):
    """The incoming event that starts a run."""
    model_config = ConfigDict(extra="allow")

    body: Any = None
    headers: Dict[str, Any] = Field(default_factory=dict)
    query: Dict[str, Any] = Field(default_factory=dict)

    def payload(self) -> Any:
        """Trigger payload as the first item's json (empty dict when absent)."""
        return self.body if self.body is not None else {}


def parse_workflow(data: Dict[str, Any]) -> WorkflowDefinition:
    """Parse workflow JSON into WorkflowDefinition."""
    return WorkflowDefinition.model_validate(data)


__all__ = [
    "MAIN",
    "ConnectionMap",
    "WorkflowConnection",
    "WorkflowNode",
    "WorkflowDefinition",
    "TriggerInput",
    "parse_workflow",
]
