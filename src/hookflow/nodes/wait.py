import logging
import math
from typing import List

from .base import BaseNode, NodeExecutionData
from .kinds import NodeKind

logger = logging.getLogger(__name__)

MIN_WAIT_SECONDS = 1.0


class WaitNode(BaseNode):
    """
    Wait Node that pauses the run for a number of seconds, then passes its
    input on unchanged.
    """

    kind = NodeKind.WAITER

    description = {
        "displayName": "Wait",
        "name": "wait",
        "group": ["organization"],
        "description": "Waits before continuing with the next node",
    }

    properties = {
        "parameters": [
            {
                "name": "amount",
                "type": "number",
                "displayName": "Amount",
                "description": "The amount of time to wait in second(s)",
                "default": 5,
                "min": 1,
            },
        ]
    }

    def seconds(self) -> float:
        """Configured duration; unset or zero means the default, never below one second."""
        default = self.services.wait_default_s
        amount = self.get_resolved_parameter("amount")
        if amount in (None, "", 0):
            return max(default, MIN_WAIT_SECONDS)
        try:
            seconds = float(amount)
            if not math.isfinite(seconds):
                raise ValueError(amount)
        except (TypeError, ValueError):
            logger.warning("Node '%s': invalid wait amount %r, using %ss", self.node_name, amount, default)
            seconds = default
        return max(seconds, MIN_WAIT_SECONDS)

    def execute(self) -> List[NodeExecutionData]:
        seconds = self.seconds()
        logger.debug("Node '%s': waiting %.1fs", self.node_name, seconds)
        self.services.sleep(seconds)
        return self.get_input_data()
