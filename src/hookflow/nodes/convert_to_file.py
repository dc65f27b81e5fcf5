from typing import List

from hookflow.errors import MissingInputError
from hookflow.expressions import lookup_path
from hookflow.services.uploads import DEFAULT_FILENAME
from .base import BaseNode, NodeExecutionData
from .kinds import NodeKind

DEFAULT_SOURCE_PROPERTY = "body.file.base64"
FALLBACK_SOURCE_PROPERTY = "file.base64"


class ConvertToFileNode(BaseNode):
    """
    Convert to File - uploads a base64 field of the first input item and
    outputs the upload service's record (url, public_id, ...).
    """

    kind = NodeKind.FILE_CONVERTER

    description = {
        "displayName": "Convert to File",
        "name": "convertToFile",
        "group": ["transform"],
        "description": "Turns a base64 field into an uploaded file",
    }

    properties = {
        "parameters": [
            {
                "name": "sourceProperty",
                "type": "string",
                "displayName": "Source Property",
                "default": DEFAULT_SOURCE_PROPERTY,
                "description": "Dotted path of the base64 field",
            },
            {
                "name": "options",
                "type": "collection",
                "displayName": "Options",
                "default": {},
                "options": [
                    {"name": "fileName", "type": "string", "default": DEFAULT_FILENAME},
                ],
            },
        ]
    }

    def execute(self) -> List[NodeExecutionData]:
        source = self.get_node_parameter("sourceProperty") or DEFAULT_SOURCE_PROPERTY
        payload = self.first_json()

        data = lookup_path(payload, source)
        if not data:
            data = lookup_path(payload, FALLBACK_SOURCE_PROPERTY)
        if not data:
            raise MissingInputError(self.node_name, source)

        options = self.get_node_parameter("options") or {}
        filename = options.get("fileName") or DEFAULT_FILENAME

        self.logger.info("Node '%s': uploading %s", self.node_name, filename)
        upload = self.services.uploader.upload(str(data), filename)
        return [{"json": upload}]
