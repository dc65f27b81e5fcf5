"""
Template expressions - resolve ``{{ $json.path }}`` placeholders.

Two forms are recognized:

- whole-expression ``={{ $json.a.b }}``: the template is exactly one
  placeholder and resolves to the raw value found at the path
- embedded ``Hello {{ $json.name }}!``: every placeholder is substituted in
  place and the result is always a string

Templates are split into literal and path tokens by a small scanner rather
than a substitution regex, so literal braces (JSON bodies, ``{x}``) survive
untouched. A ``{{ ... }}`` whose content is not a path expression is kept as
literal text.

Path expressions are dot-separated field names rooted at the item payload
(``$json``). No arithmetic, conditionals or function calls.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple, Union

OPEN = "{{"
CLOSE = "}}"
EXPRESSION_PREFIX = "="
ROOT = "$json"

_SEGMENT_RE = re.compile(r"^[\w\-]+$")


class _Missing:
    """Sentinel for a path that resolves to nothing."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing()


@dataclass(frozen=True)
class LiteralToken:
    text: str


@dataclass(frozen=True)
class PathToken:
    segments: Tuple[str, ...]
    raw: str

    @property
    def path(self) -> str:
        return ".".join(self.segments)


Token = Union[LiteralToken, PathToken]


def parse_path(expression: str) -> Optional[Tuple[str, ...]]:
    """
    Parse a path expression into field segments.

    ``$json`` -> ``()``; ``$json.a.b`` -> ``("a", "b")``; a bare ``a.b`` is
    read with ``$json`` implied. Returns None when the text is not a path.
    """
    text = expression.strip()
    if text == ROOT:
        return ()
    if text.startswith(ROOT + "."):
        text = text[len(ROOT) + 1:]
    elif text.startswith("$"):
        return None

    segments = tuple(text.split("."))
    if not all(_SEGMENT_RE.match(segment) for segment in segments):
        return None
    return segments


def tokenize(template: str) -> List[Token]:
    """Split a template into literal and path tokens."""
    tokens: List[Token] = []
    literal: List[str] = []
    pos = 0

    while pos < len(template):
        start = template.find(OPEN, pos)
        if start == -1:
            literal.append(template[pos:])
            break

        end = template.find(CLOSE, start + len(OPEN))
        if end == -1:
            # Unbalanced opener: the rest is plain text
            literal.append(template[pos:])
            break

        # A stray opener before the real one stays literal
        start = template.rfind(OPEN, start, end)
        if start > pos:
            literal.append(template[pos:start])
        raw = template[start:end + len(CLOSE)]
        segments = parse_path(template[start + len(OPEN):end])
        if segments is None:
            literal.append(raw)
        else:
            text = "".join(literal)
            if text:
                tokens.append(LiteralToken(text))
            literal = []
            tokens.append(PathToken(segments, raw))
        pos = end + len(CLOSE)

    text = "".join(literal)
    if text:
        tokens.append(LiteralToken(text))
    return tokens


def lookup_path(data: Any, segments: Union[str, Sequence[str]]) -> Any:
    """
    Walk ``data`` field by field.

    Returns MISSING as soon as an intermediate field is absent. List
    elements are addressed by integer segments (``items.0.name``).
    """
    if isinstance(segments, str):
        segments = [s for s in segments.split(".") if s]

    current = data
    for segment in segments:
        if isinstance(current, dict):
            if segment not in current:
                return MISSING
            current = current[segment]
        elif isinstance(current, list) and segment.lstrip("-").isdigit():
            index = int(segment)
            if not -len(current) <= index < len(current):
                return MISSING
            current = current[index]
        else:
            return MISSING
    return current


def whole_expression(template: str) -> Optional[PathToken]:
    """Return the single path token if ``template`` is a ``={{ path }}`` form."""
    text = template.strip()
    if not text.startswith(EXPRESSION_PREFIX + OPEN):
        return None
    tokens = tokenize(text[len(EXPRESSION_PREFIX):])
    if len(tokens) == 1 and isinstance(tokens[0], PathToken):
        return tokens[0]
    return None


def is_expression(value: Any) -> bool:
    """True if ``value`` is a string holding at least one placeholder."""
    if not isinstance(value, str):
        return False
    return any(isinstance(token, PathToken) for token in tokenize(value))


def stringify(value: Any) -> str:
    """Text form of a resolved value when it is spliced into a string."""
    if value is MISSING:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def render(template: str, data: Any) -> str:
    """Substitute every placeholder in ``template``; always returns a string."""
    if template.startswith(EXPRESSION_PREFIX):
        template = template[len(EXPRESSION_PREFIX):]

    parts = []
    for token in tokenize(template):
        if isinstance(token, PathToken):
            parts.append(stringify(lookup_path(data, token.segments)))
        else:
            parts.append(token.text)
    return "".join(parts)


def resolve_template(template: Any, data: Any) -> Any:
    """
    Resolve a template against an item payload.

    Whole-expression templates yield the raw value (structured values are
    JSON-encoded, a missing path yields ``""``). Anything else is rendered
    as an embedded template. Non-string values are returned unchanged.
    """
    if not isinstance(template, str):
        return template

    token = whole_expression(template)
    if token is not None:
        value = lookup_path(data, token.segments)
        if value is MISSING:
            return ""
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False)
        return value

    return render(template, data)


def resolve_value(value: Any, data: Any) -> Any:
    """Resolve templates nested anywhere inside dicts and lists."""
    if isinstance(value, str):
        return resolve_template(value, data) if is_expression(value) else value
    if isinstance(value, dict):
        return {key: resolve_value(item, data) for key, item in value.items()}
    if isinstance(value, list):
        return [resolve_value(item, data) for item in value]
    return value


__all__ = [
    "MISSING",
    "LiteralToken",
    "PathToken",
    "Token",
    "parse_path",
    "tokenize",
    "lookup_path",
    "whole_expression",
    "is_expression",
    "stringify",
    "render",
    "resolve_template",
    "resolve_value",
]
