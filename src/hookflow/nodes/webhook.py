from typing import List

from hookflow.expressions import is_expression, resolve_template
from .base import NodeExecutionData, PassThroughNode
from .kinds import NodeKind


class WebhookNode(PassThroughNode):
    """
    Webhook trigger. The run seeds its output with the trigger payload;
    dispatching it passes that payload on unchanged.
    """

    kind = NodeKind.TRIGGER

    description = {
        "displayName": "Webhook",
        "name": "webhook",
        "group": ["trigger"],
        "description": "Starts the workflow when an HTTP request arrives",
    }

    properties = {
        "parameters": [
            {
                "name": "path",
                "type": "string",
                "displayName": "Path",
                "default": "",
                "description": "The webhook path this workflow listens on",
            },
            {
                "name": "httpMethod",
                "type": "options",
                "displayName": "HTTP Method",
                "options": [
                    {"name": "GET", "value": "GET"},
                    {"name": "POST", "value": "POST"},
                ],
                "default": "POST",
            },
        ]
    }


class RespondToWebhookNode(PassThroughNode):
    """
    Respond to Webhook - builds the body returned to the trigger caller.

    ``responseBody`` is resolved against the first input item and wrapped as
    ``{"body": value}``. Without a template the input passes through.
    """

    kind = NodeKind.RESPONDER

    description = {
        "displayName": "Respond to Webhook",
        "name": "respondToWebhook",
        "group": ["transform"],
        "description": "Returns data to the caller of the webhook",
    }

    properties = {
        "parameters": [
            {
                "name": "responseBody",
                "type": "string",
                "displayName": "Response Body",
                "default": "",
                "description": "Body template, e.g. ={{ $json.output }}",
            },
        ]
    }

    def execute(self) -> List[NodeExecutionData]:
        template = self.get_node_parameter("responseBody", "")
        if not is_expression(template):
            return super().execute()

        body = resolve_template(template, self.first_json())
        return [{"json": {"body": body}}]
