"""
Response resolver - turns the responder node's output into the value
returned to the trigger caller.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

RESPONDER_MARKER = "respond"


@dataclass
class ResolvedResponse:
    """Final payload of a run, if a responder produced one."""
    found: bool
    node_name: Optional[str] = None
    payload: Any = None


def find_responder(results: Mapping[str, List[Dict[str, Any]]]) -> Optional[str]:
    """First result key, in recording order, whose name contains 'respond'."""
    for name in results:
        if RESPONDER_MARKER in name.lower():
            return name
    return None


def decode_body(body: Any) -> Any:
    """Parse a string body as JSON, keeping it raw when it does not parse."""
    if not isinstance(body, str):
        return body
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        return body


def resolve_response(results: Mapping[str, List[Dict[str, Any]]]) -> ResolvedResponse:
    """
    Extract the final payload from a completed results map.

    The responder's first item payload is returned as-is unless it carries a
    ``body`` field, in which case the body is returned (parsed when it is a
    JSON string).
    """
    name = find_responder(results)
    if name is None:
        return ResolvedResponse(found=False)

    items = results[name] or [{}]
    payload = items[0].get("json")
    if isinstance(payload, dict) and "body" in payload:
        payload = decode_body(payload["body"])
    return ResolvedResponse(found=True, node_name=name, payload=payload)


__all__ = ["RESPONDER_MARKER", "ResolvedResponse", "find_responder", "decode_body", "resolve_response"]
