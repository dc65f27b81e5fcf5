import json
import logging
from typing import Any, Dict, List

from hookflow.expressions import render, resolve_value
from .base import BaseNode, NodeExecutionData
from .kinds import NodeKind

logger = logging.getLogger(__name__)


class HttpRequestNode(BaseNode):
    """HTTP Request Node for making API calls"""

    kind = NodeKind.HTTP_REQUEST

    description = {
        "displayName": "HTTP Request",
        "name": "httpRequest",
        "group": ["input"],
        "description": "Makes HTTP requests to fetch or send data",
    }

    properties = {
        "parameters": [
            {
                "name": "url",
                "type": "string",
                "required": True,
                "default": "",
                "displayName": "URL",
                "description": "The URL to make the request to",
            },
            {
                "name": "method",
                "type": "options",
                "default": "GET",
                "displayName": "Method",
                "options": [
                    {"name": "GET", "value": "GET"},
                    {"name": "POST", "value": "POST"},
                    {"name": "PUT", "value": "PUT"},
                    {"name": "DELETE", "value": "DELETE"},
                    {"name": "HEAD", "value": "HEAD"},
                    {"name": "PATCH", "value": "PATCH"},
                ],
            },
            {
                "name": "headerParameters",
                "type": "collection",
                "default": {"parameters": []},
                "displayName": "Headers",
                "description": "List of {name, value} pairs",
            },
            {
                "name": "specifyBody",
                "type": "options",
                "default": "",
                "displayName": "Specify Body",
                "options": [{"name": "Using JSON", "value": "json"}],
            },
            {
                "name": "jsonBody",
                "type": "json",
                "default": "",
                "displayName": "JSON",
                "description": "Body template; sent as JSON when it parses, as text otherwise",
            },
        ]
    }

    def _url(self) -> str:
        url = self.get_node_parameter("url")
        if not url:
            # Older exports nest the options one level down
            url = (self.get_node_parameter("parameters") or {}).get("url", "")
        return str(resolve_value(url, self.first_json()) or "")

    def _headers(self) -> Dict[str, Any]:
        header_params = self.get_node_parameter("headerParameters") or {}
        headers = {}
        for entry in header_params.get("parameters") or []:
            name = entry.get("name")
            if name:
                headers[name] = resolve_value(entry.get("value", ""), self.first_json())
        return headers

    def _body(self) -> Any:
        if self.get_node_parameter("specifyBody") != "json":
            return None
        template = self.get_node_parameter("jsonBody")
        if not template:
            return None
        if not isinstance(template, str):
            return resolve_value(template, self.first_json())

        text = render(template, self.first_json())
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            logger.debug("Node '%s': body is not JSON, sending as text", self.node_name)
            return text

    def execute(self) -> List[NodeExecutionData]:
        """Execute the request and return the response payload as one item."""
        url = self._url()
        method = str(self.get_node_parameter("method", "GET")).upper()

        response = self.services.http.request(
            method,
            url,
            headers=self._headers(),
            body=self._body(),
            service=f"httpRequest '{self.node_name}'",
        ).raise_for_status()

        return [{"json": response.data}]
