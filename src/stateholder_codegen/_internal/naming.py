from __future__ import annotations

import re

_NON_IDENTIFIER_CHARACTERS = re.compile(r"[^a-zA-Z0-9_]")
_LEADING_DIGIT = re.compile(r"^[0-9]")
_MODULE_NAME_SUFFIX = "Module"


def _is_letter_or_digit(character: str) -> bool:
    return character.isalpha() or character.isdecimal()


def is_identifier(text: str) -> bool:
    """Return true when text is a class-like identifier.

    The first character must be a letter or underscore; the rest letters,
    digits, underscores or ``$``.

    Args:
        text: Candidate identifier.

    """
    if not text:
        return False
    first = text[0]
    if not (first.isalpha() or first == "_"):
        return False
    return all(_is_letter_or_digit(character) or character in "_$" for character in text)


def is_qualified_name(text: str) -> bool:
    """Return true when every dot-separated segment of text is an identifier.

    Args:
        text: Candidate qualified name such as ``kotlinx.coroutines.CoroutineScope``.

    """
    return all(is_identifier(segment) for segment in text.split("."))


def is_package_name(text: str) -> bool:
    """Return true when text is a dot-separated package name.

    Package segments are stricter than type segments: they must start with a
    letter and may not contain ``$``.

    Args:
        text: Candidate package name.

    """
    if not text:
        return False
    for segment in text.split("."):
        if not segment or not segment[0].isalpha():
            return False
        if not all(_is_letter_or_digit(character) or character == "_" for character in segment):
            return False
    return True


def is_blank(text: str) -> bool:
    return not text.strip()


def simple_name(qualified_name: str) -> str:
    return qualified_name.rsplit(".", 1)[-1]


def qualify(package_name: str, class_name: str) -> str:
    if is_blank(package_name):
        return class_name
    return f"{package_name}.{class_name}"


def derive_module_name(class_name: str, conventional_suffix: str) -> str:
    """Build the registration module name for a state holder class.

    Only the final trailing occurrence of ``conventional_suffix`` is removed:
    ``FooStateHolderStateHolder`` becomes ``FooStateHolderModule``.

    Args:
        class_name: Unqualified class name.
        conventional_suffix: Suffix naming convention, e.g. ``StateHolder``.

    """
    if is_blank(class_name):
        return _MODULE_NAME_SUFFIX
    base_name = class_name
    if conventional_suffix and class_name.endswith(conventional_suffix):
        base_name = class_name[: -len(conventional_suffix)]
    return f"{base_name}{_MODULE_NAME_SUFFIX}"


def sanitize_identifier(text: str) -> str:
    """Turn free-form text (e.g. a project name) into a lower-case identifier fragment."""
    sanitized = _NON_IDENTIFIER_CHARACTERS.sub("_", text)
    sanitized = _LEADING_DIGIT.sub("_", sanitized)
    return sanitized.lower()
