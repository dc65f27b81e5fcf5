import json
from typing import List

from hookflow.expressions import resolve_template, stringify
from .base import BaseNode, NodeExecutionData
from .kinds import NodeKind


class AIAgentNode(BaseNode):
    """
    AI Agent - sends a prompt to the chat-completion service.

    The prompt is the resolved ``text`` parameter; when that is empty the
    first input item's payload is sent as JSON. The reply text is output
    under ``output``.
    """

    kind = NodeKind.AI_AGENT

    description = {
        "displayName": "AI Agent",
        "name": "agent",
        "group": ["transform"],
        "description": "Generates a reply with a chat model",
    }

    properties = {
        "parameters": [
            {
                "name": "text",
                "type": "string",
                "displayName": "Prompt",
                "default": "",
                "description": "Prompt template, e.g. ={{ $json.question }}",
            },
        ]
    }

    def build_prompt(self) -> str:
        payload = self.first_json()
        text = self.get_node_parameter("text")
        if text:
            prompt = stringify(resolve_template(text, payload))
            if prompt:
                return prompt
        return json.dumps(payload, ensure_ascii=False)

    def execute(self) -> List[NodeExecutionData]:
        completion = self.services.chat.complete(self.build_prompt())
        return [{"json": {"output": completion.text}}]
