"""Parser for constructor-parameter type signatures.

Supported grammar, in precedence order:

- function types: ``(A, B) -> R`` and ``suspend () -> R``; ``Unit`` returns map
  to :class:`UnitType`,
- parenthesised types: ``((String) -> Unit)?``,
- generic types: ``Map<String, List<Item>>`` with ``*`` wildcard arguments,
- nullable types: ``String?``,
- simple qualified names: ``kotlinx.coroutines.CoroutineScope``.

Parsing never raises. Malformed input yields a :class:`ParseFailure` so callers
can degrade to untyped resolution instead of aborting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from stateholder_codegen._internal.naming import is_qualified_name, simple_name

_SUSPEND_PREFIX = "suspend "
_ARROW = "->"
_WILDCARD = "*"
_UNIT_NAMES = frozenset({"Unit", "kotlin.Unit"})
_CLOSERS = {"(": ")", "<": ">"}


@dataclass(frozen=True, slots=True)
class SimpleType:
    """A plain, optionally package-qualified, type name."""

    qualified_name: str

    @property
    def simple_name(self) -> str:
        """Return the last segment of the qualified name."""
        return simple_name(self.qualified_name)

    def __str__(self) -> str:
        return self.qualified_name


@dataclass(frozen=True, slots=True)
class UnitType:
    """The unit return type of a function type."""

    def __str__(self) -> str:
        return "Unit"


@dataclass(frozen=True, slots=True)
class Wildcard:
    """A star projection used as a generic type argument."""

    def __str__(self) -> str:
        return _WILDCARD


@dataclass(frozen=True, slots=True)
class NullableType:
    """A type marked nullable with a trailing ``?``."""

    inner: TypeSignature

    def __str__(self) -> str:
        if isinstance(self.inner, FunctionType):
            return f"({self.inner})?"
        return f"{self.inner}?"


@dataclass(frozen=True, slots=True)
class GenericType:
    """A parameterized type such as ``List<Item>``."""

    base: str
    type_arguments: tuple[TypeSignature | Wildcard, ...]

    def __str__(self) -> str:
        arguments = ", ".join(str(argument) for argument in self.type_arguments)
        return f"{self.base}<{arguments}>"


@dataclass(frozen=True, slots=True)
class FunctionType:
    """A function (lambda) type such as ``suspend (String) -> Unit``."""

    parameter_types: tuple[TypeSignature, ...]
    return_type: TypeSignature
    is_suspending: bool = False

    def __str__(self) -> str:
        parameters = ", ".join(str(parameter) for parameter in self.parameter_types)
        prefix = _SUSPEND_PREFIX if self.is_suspending else ""
        return f"{prefix}({parameters}) -> {self.return_type}"


TypeSignature: TypeAlias = SimpleType | NullableType | GenericType | FunctionType | UnitType
"""Structured representation of a parsed type signature."""


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """Marker returned when a type signature does not match the grammar."""

    signature: str
    """The raw signature that was rejected."""
    reason: str
    """Human-readable description of the first grammar violation found."""


class _SignatureSyntaxError(ValueError):
    pass


def parse_type_signature(signature: str) -> TypeSignature | ParseFailure:
    """Parse a type signature string into a :data:`TypeSignature` tree.

    Args:
        signature: Raw type signature, e.g. ``Map<String, List<Item>>?``.

    Returns:
        The parsed tree, or a :class:`ParseFailure` when the input is malformed.

    """
    try:
        return _parse(signature)
    except _SignatureSyntaxError as error:
        return ParseFailure(signature=signature, reason=str(error))


def is_valid_type_signature(signature: str) -> bool:
    """Return true when the signature parses successfully."""
    return not isinstance(parse_type_signature(signature), ParseFailure)


def type_key(signature: str) -> str:
    """Return the canonical lookup key for a type signature.

    Parsed signatures use their canonical rendering, so ``Map<String,Int>`` and
    ``Map<String, Int>`` share a key. Unparseable input falls back to the
    stripped raw text.

    Args:
        signature: Raw type signature.

    """
    parsed = parse_type_signature(signature)
    if isinstance(parsed, ParseFailure):
        return signature.strip()
    return str(parsed)


def erased_simple_name(signature: str) -> str:
    """Strip generic arguments, a trailing ``?`` and the package prefix.

    ``com.example.Repository<Item>?`` becomes ``Repository``. This is a purely
    textual operation and works for unparseable input too.

    Args:
        signature: Raw type signature.

    """
    erased = signature.strip().split("<", 1)[0].strip()
    erased = erased.removesuffix("?")
    return simple_name(erased)


def _parse(text: str) -> TypeSignature:
    text = text.strip()
    if not text:
        msg = "type signature is empty"
        raise _SignatureSyntaxError(msg)

    if _ARROW in text:
        function_type = _parse_function(text)
        if function_type is not None:
            return function_type

    if text.startswith("("):
        return _parse_parenthesized(text)

    if "<" in text and ">" in text:
        return _parse_generic(text)

    if text.endswith("?"):
        return _nullable(_parse(text[:-1]), text)

    return _parse_simple(text)


def _parse_function(text: str) -> FunctionType | None:
    is_suspending = text.startswith(_SUSPEND_PREFIX)
    body = text[len(_SUSPEND_PREFIX) :].strip() if is_suspending else text

    arrow_index = _find_top_level_arrow(body)
    if arrow_index is None:
        if is_suspending:
            msg = f"'suspend' requires a function type, got '{text}'"
            raise _SignatureSyntaxError(msg)
        return None

    parameters_part = body[:arrow_index].strip()
    return_part = body[arrow_index + len(_ARROW) :].strip()

    last_index = len(parameters_part) - 1
    if not parameters_part.startswith("(") or _matching_close(parameters_part, 0) != last_index:
        msg = f"function parameters must be parenthesized, got '{parameters_part}'"
        raise _SignatureSyntaxError(msg)

    parameters_content = parameters_part[1:-1].strip()
    parameter_types: tuple[TypeSignature, ...] = ()
    if parameters_content:
        parameter_types = tuple(_parse(part) for part in _split_top_level(parameters_content))

    if not return_part:
        msg = f"function type '{text}' has no return type"
        raise _SignatureSyntaxError(msg)
    # `Unit?` stays a nullable simple type.
    return_type: TypeSignature = UnitType() if return_part in _UNIT_NAMES else _parse(return_part)

    return FunctionType(
        parameter_types=parameter_types,
        return_type=return_type,
        is_suspending=is_suspending,
    )


def _parse_parenthesized(text: str) -> TypeSignature:
    close_index = _matching_close(text, 0)
    remainder = text[close_index + 1 :].strip()
    inner = _parse(text[1:close_index])
    if not remainder:
        return inner
    if remainder == "?":
        return _nullable(inner, text)
    msg = f"unexpected text '{remainder}' after parenthesized type"
    raise _SignatureSyntaxError(msg)


def _parse_generic(text: str) -> TypeSignature:
    open_index = text.index("<")
    base = text[:open_index].strip()
    if not is_qualified_name(base):
        msg = f"invalid generic base type '{base}'"
        raise _SignatureSyntaxError(msg)

    close_index = _matching_close(text, open_index)
    suffix = text[close_index + 1 :].strip()
    if suffix not in {"", "?"}:
        msg = f"unexpected text '{suffix}' after type arguments"
        raise _SignatureSyntaxError(msg)

    arguments_content = text[open_index + 1 : close_index].strip()
    if not arguments_content:
        msg = f"generic type '{base}' has no type arguments"
        raise _SignatureSyntaxError(msg)

    type_arguments = tuple(
        Wildcard() if part == _WILDCARD else _parse(part)
        for part in _split_top_level(arguments_content)
    )
    generic = GenericType(base=base, type_arguments=type_arguments)
    if suffix == "?":
        return NullableType(inner=generic)
    return generic


def _parse_simple(text: str) -> SimpleType:
    if not is_qualified_name(text):
        msg = f"invalid type name '{text}'"
        raise _SignatureSyntaxError(msg)
    return SimpleType(qualified_name=text)


def _nullable(inner: TypeSignature, text: str) -> NullableType:
    if isinstance(inner, NullableType):
        msg = f"repeated nullable marker in '{text}'"
        raise _SignatureSyntaxError(msg)
    return NullableType(inner=inner)


def _find_top_level_arrow(text: str) -> int | None:
    depth = 0
    index = 0
    while index < len(text):
        if text.startswith(_ARROW, index):
            if depth == 0:
                return index
            index += len(_ARROW)
            continue
        character = text[index]
        if character in _CLOSERS:
            depth += 1
        elif character in _CLOSERS.values():
            depth -= 1
        index += 1
    return None


def _matching_close(text: str, open_index: int) -> int:
    stack: list[str] = []
    index = open_index
    while index < len(text):
        if text.startswith(_ARROW, index):
            index += len(_ARROW)
            continue
        character = text[index]
        if character in _CLOSERS:
            stack.append(_CLOSERS[character])
        elif character in _CLOSERS.values():
            if not stack or stack.pop() != character:
                msg = f"unbalanced '{character}' in '{text}'"
                raise _SignatureSyntaxError(msg)
            if not stack:
                return index
        index += 1
    msg = f"unclosed '{text[open_index]}' in '{text}'"
    raise _SignatureSyntaxError(msg)


def _split_top_level(text: str) -> list[str]:
    parts: list[str] = []
    stack: list[str] = []
    current: list[str] = []
    index = 0
    while index < len(text):
        if text.startswith(_ARROW, index):
            current.append(_ARROW)
            index += len(_ARROW)
            continue
        character = text[index]
        if character in _CLOSERS:
            stack.append(_CLOSERS[character])
        elif character in _CLOSERS.values():
            if not stack or stack.pop() != character:
                msg = f"unbalanced '{character}' in '{text}'"
                raise _SignatureSyntaxError(msg)
        elif character == "," and not stack:
            parts.append("".join(current).strip())
            current = []
            index += 1
            continue
        current.append(character)
        index += 1

    if stack:
        msg = f"unclosed brackets in '{text}'"
        raise _SignatureSyntaxError(msg)
    parts.append("".join(current).strip())
    return parts


__all__ = [
    "FunctionType",
    "GenericType",
    "NullableType",
    "ParseFailure",
    "SimpleType",
    "TypeSignature",
    "UnitType",
    "Wildcard",
    "erased_simple_name",
    "is_valid_type_signature",
    "parse_type_signature",
    "type_key",
]
