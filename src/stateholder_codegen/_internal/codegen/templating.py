"""Minimal text templates for generated Kotlin source.

Supported syntax:

- ``{{ name }}`` substitutes a context value,
- ``{% if name %}`` with optional ``{% else %}`` and a closing ``{% endif %}``,
- ``{% for item in items %}`` ... ``{% endfor %}`` over any iterable.

With ``trim_blocks`` the newline right after a block tag is dropped, and with
``lstrip_blocks`` indentation before a block tag that starts a line is removed,
so block tags can sit on their own lines without leaving blank lines behind.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_FOR_PATTERN = re.compile(
    r"^for\s+(?P<target>[A-Za-z_][A-Za-z0-9_]*)\s+in\s+(?P<iterable>[A-Za-z_][A-Za-z0-9_]*)$",
)


@dataclass(frozen=True, slots=True)
class _TextToken:
    value: str


@dataclass(frozen=True, slots=True)
class _VariableToken:
    expression: str


@dataclass(frozen=True, slots=True)
class _BlockToken:
    expression: str


_Token = _TextToken | _VariableToken | _BlockToken


@dataclass(frozen=True, slots=True)
class _TextNode:
    value: str


@dataclass(frozen=True, slots=True)
class _VariableNode:
    identifier: str


@dataclass(frozen=True, slots=True)
class _IfNode:
    condition: str
    truthy_nodes: tuple[_Node, ...]
    falsy_nodes: tuple[_Node, ...]


@dataclass(frozen=True, slots=True)
class _ForNode:
    target: str
    iterable: str
    body_nodes: tuple[_Node, ...]


_Node = _TextNode | _VariableNode | _IfNode | _ForNode


class Environment:
    """Compile template strings with shared whitespace options."""

    def __init__(self, *, trim_blocks: bool = True, lstrip_blocks: bool = True) -> None:
        self._trim_blocks = trim_blocks
        self._lstrip_blocks = lstrip_blocks

    def from_string(self, text: str) -> Template:
        """Compile a template string.

        Args:
            text: Template source text.

        """
        tokens = _tokenize(
            text,
            trim_blocks=self._trim_blocks,
            lstrip_blocks=self._lstrip_blocks,
        )
        return Template(nodes=_Parser(tokens=tokens).parse())


class Template:
    """Compiled template."""

    def __init__(self, *, nodes: tuple[_Node, ...]) -> None:
        self._nodes = nodes

    def render(self, **context: object) -> str:
        """Render the template with keyword-only context variables.

        Args:
            context: Values referenced by the template.

        """
        return _render_nodes(nodes=self._nodes, context=context)


class _Parser:
    def __init__(self, *, tokens: tuple[_Token, ...]) -> None:
        self._tokens = tokens
        self._position = 0

    def parse(self) -> tuple[_Node, ...]:
        nodes, stop_tag = self._parse_nodes(stop_tags=frozenset())
        if stop_tag is not None:
            msg = f"Unexpected block tag '{stop_tag}'."
            raise ValueError(msg)
        return tuple(nodes)

    def _parse_nodes(self, *, stop_tags: frozenset[str]) -> tuple[list[_Node], str | None]:
        nodes: list[_Node] = []

        while self._position < len(self._tokens):
            token = self._tokens[self._position]
            self._position += 1

            if isinstance(token, _TextToken):
                nodes.append(_TextNode(value=token.value))
                continue

            if isinstance(token, _VariableToken):
                nodes.append(_VariableNode(identifier=_parse_identifier(token.expression)))
                continue

            tag = token.expression
            if tag in stop_tags:
                return nodes, tag
            if tag in {"else", "endif", "endfor"}:
                msg = f"Unexpected block tag '{tag}'."
                raise ValueError(msg)
            if tag.startswith("if "):
                nodes.append(self._parse_if(condition=_parse_condition(tag[3:].strip())))
                continue
            if tag.startswith("for "):
                nodes.append(self._parse_for(tag=tag))
                continue

            msg = f"Unsupported template tag '{tag}'."
            raise ValueError(msg)

        return nodes, None

    def _parse_if(self, *, condition: str) -> _IfNode:
        truthy_nodes, stop_tag = self._parse_nodes(stop_tags=frozenset({"else", "endif"}))
        if stop_tag is None:
            msg = "Unclosed if block: missing endif."
            raise ValueError(msg)

        falsy_nodes: list[_Node] = []
        if stop_tag == "else":
            falsy_nodes, else_stop = self._parse_nodes(stop_tags=frozenset({"endif"}))
            if else_stop != "endif":
                msg = "Unclosed if block: missing endif."
                raise ValueError(msg)

        return _IfNode(
            condition=condition,
            truthy_nodes=tuple(truthy_nodes),
            falsy_nodes=tuple(falsy_nodes),
        )

    def _parse_for(self, *, tag: str) -> _ForNode:
        match = _FOR_PATTERN.fullmatch(tag)
        if match is None:
            msg = f"Unsupported for loop '{tag}'."
            raise ValueError(msg)

        body_nodes, stop_tag = self._parse_nodes(stop_tags=frozenset({"endfor"}))
        if stop_tag is None:
            msg = "Unclosed for block: missing endfor."
            raise ValueError(msg)

        return _ForNode(
            target=match.group("target"),
            iterable=match.group("iterable"),
            body_nodes=tuple(body_nodes),
        )


def _tokenize(text: str, *, trim_blocks: bool, lstrip_blocks: bool) -> tuple[_Token, ...]:
    tokens: list[_Token] = []
    cursor = 0

    while cursor < len(text):
        next_tag = _find_next_tag(text=text, cursor=cursor)
        if next_tag is None:
            tokens.append(_TextToken(value=text[cursor:]))
            break

        tag_start, tag_kind = next_tag
        text_end = tag_start
        if tag_kind == "block" and lstrip_blocks:
            line_start = text.rfind("\n", 0, tag_start) + 1
            if not text[line_start:tag_start].strip():
                text_end = max(cursor, line_start)
        if text_end > cursor:
            tokens.append(_TextToken(value=text[cursor:text_end]))

        closing = "}}" if tag_kind == "variable" else "%}"
        end = text.find(closing, tag_start + 2)
        if end == -1:
            msg = f"Unclosed {tag_kind} tag."
            raise ValueError(msg)
        expression = text[tag_start + 2 : end].strip()
        if not expression:
            msg = f"{tag_kind.capitalize()} tag cannot be empty."
            raise ValueError(msg)

        cursor = end + 2
        if tag_kind == "variable":
            tokens.append(_VariableToken(expression=expression))
            continue

        tokens.append(_BlockToken(expression=expression))
        if trim_blocks and text.startswith("\n", cursor):
            cursor += 1

    return tuple(tokens)


def _find_next_tag(*, text: str, cursor: int) -> tuple[int, str] | None:
    variable_start = text.find("{{", cursor)
    block_start = text.find("{%", cursor)

    if variable_start == -1 and block_start == -1:
        return None
    if variable_start == -1:
        return block_start, "block"
    if block_start == -1 or variable_start < block_start:
        return variable_start, "variable"
    return block_start, "block"


def _parse_identifier(expression: str) -> str:
    if _IDENTIFIER_PATTERN.fullmatch(expression):
        return expression
    msg = f"Unsupported variable expression '{expression}'."
    raise ValueError(msg)


def _parse_condition(expression: str) -> str:
    if _IDENTIFIER_PATTERN.fullmatch(expression):
        return expression
    msg = f"Unsupported if condition '{expression}'."
    raise ValueError(msg)


def _render_nodes(*, nodes: tuple[_Node, ...], context: dict[str, object]) -> str:
    rendered_parts: list[str] = []

    for node in nodes:
        if isinstance(node, _TextNode):
            rendered_parts.append(node.value)
        elif isinstance(node, _VariableNode):
            rendered_parts.append(str(_resolve_context_value(context=context, identifier=node.identifier)))
        elif isinstance(node, _IfNode):
            branch = node.truthy_nodes if _evaluate(node.condition, context) else node.falsy_nodes
            rendered_parts.append(_render_nodes(nodes=branch, context=context))
        else:
            items = _resolve_context_value(context=context, identifier=node.iterable)
            if not isinstance(items, Iterable) or isinstance(items, str):
                msg = f"Template variable '{node.iterable}' is not iterable."
                raise ValueError(msg)
            rendered_parts.extend(
                _render_nodes(nodes=node.body_nodes, context={**context, node.target: item})
                for item in items
            )

    return "".join(rendered_parts)


def _resolve_context_value(*, context: dict[str, object], identifier: str) -> object:
    if identifier not in context:
        msg = f"Missing template variable '{identifier}'."
        raise ValueError(msg)
    return context[identifier]


def _evaluate(condition: str, context: dict[str, object]) -> bool:
    return bool(_resolve_context_value(context=context, identifier=condition))
