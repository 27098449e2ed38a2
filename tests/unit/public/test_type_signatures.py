from __future__ import annotations

import pytest

from stateholder_codegen.type_signatures import (
    FunctionType,
    GenericType,
    NullableType,
    ParseFailure,
    SimpleType,
    UnitType,
    Wildcard,
    erased_simple_name,
    is_valid_type_signature,
    parse_type_signature,
    type_key,
)


def test_parse_simple_qualified_name() -> None:
    parsed = parse_type_signature("kotlinx.coroutines.CoroutineScope")

    assert parsed == SimpleType("kotlinx.coroutines.CoroutineScope")
    assert isinstance(parsed, SimpleType)
    assert parsed.simple_name == "CoroutineScope"


def test_parse_strips_surrounding_whitespace() -> None:
    assert parse_type_signature("  String  ") == SimpleType("String")


def test_parse_function_type_with_unit_return() -> None:
    parsed = parse_type_signature("(String) -> Unit")

    assert parsed == FunctionType(
        parameter_types=(SimpleType("String"),),
        return_type=UnitType(),
        is_suspending=False,
    )


def test_parse_suspending_function_without_parameters() -> None:
    parsed = parse_type_signature("suspend () -> kotlin.Unit")

    assert parsed == FunctionType(parameter_types=(), return_type=UnitType(), is_suspending=True)


def test_parse_function_type_with_generic_parameters() -> None:
    parsed = parse_type_signature("(Map<String, Int>, Item?) -> List<Item>")

    assert parsed == FunctionType(
        parameter_types=(
            GenericType(base="Map", type_arguments=(SimpleType("String"), SimpleType("Int"))),
            NullableType(SimpleType("Item")),
        ),
        return_type=GenericType(base="List", type_arguments=(SimpleType("Item"),)),
    )


def test_parse_nested_generic_keeps_argument_arity() -> None:
    parsed = parse_type_signature("Map<String, List<Pair<Int, String>>>")

    assert isinstance(parsed, GenericType)
    assert parsed.base == "Map"
    assert len(parsed.type_arguments) == 2
    inner_list = parsed.type_arguments[1]
    assert isinstance(inner_list, GenericType)
    assert len(inner_list.type_arguments) == 1
    pair = inner_list.type_arguments[0]
    assert pair == GenericType(base="Pair", type_arguments=(SimpleType("Int"), SimpleType("String")))


def test_parse_generic_with_lambda_argument() -> None:
    parsed = parse_type_signature("StateFlow<(Int) -> Unit>")

    assert parsed == GenericType(
        base="StateFlow",
        type_arguments=(FunctionType(parameter_types=(SimpleType("Int"),), return_type=UnitType()),),
    )


def test_parse_star_projection() -> None:
    parsed = parse_type_signature("List<*>")

    assert parsed == GenericType(base="List", type_arguments=(Wildcard(),))


@pytest.mark.parametrize(
    ("signature", "expected"),
    [
        ("String?", NullableType(SimpleType("String"))),
        ("List<Item>?", NullableType(GenericType(base="List", type_arguments=(SimpleType("Item"),)))),
        (
            "((String) -> Unit)?",
            NullableType(FunctionType(parameter_types=(SimpleType("String"),), return_type=UnitType())),
        ),
    ],
)
def test_parse_nullable_types(signature: str, expected: NullableType) -> None:
    assert parse_type_signature(signature) == expected


@pytest.mark.parametrize(
    "signature",
    [
        "",
        "   ",
        "1User",
        "com..example.User",
        "List<>",
        "List<String",
        "<String>",
        "List<String>Extra",
        "String -> Unit",
        "(String) ->",
        "suspend String",
        "(String",
        "Map<String,>",
        "String??",
        "(String?)?",
        "List<Item>??",
    ],
)
def test_parse_rejects_malformed_signatures(signature: str) -> None:
    parsed = parse_type_signature(signature)

    assert isinstance(parsed, ParseFailure)
    assert parsed.signature == signature
    assert parsed.reason
    assert not is_valid_type_signature(signature)


@pytest.mark.parametrize(
    ("signature", "expected"),
    [
        ("Map<String,Int>", "Map<String, Int>"),
        ("suspend (A,B)->R", "suspend (A, B) -> R"),
        ("((String) -> Unit)?", "((String) -> Unit)?"),
        ("List< * >", "List<*>"),
    ],
)
def test_type_key_uses_canonical_rendering(signature: str, expected: str) -> None:
    assert type_key(signature) == expected


def test_type_key_falls_back_to_stripped_text() -> None:
    assert type_key("  List<  ") == "List<"


@pytest.mark.parametrize(
    ("signature", "expected"),
    [
        ("com.example.Repository<Item>?", "Repository"),
        ("UserStateHolder", "UserStateHolder"),
        ("UserStateHolder?", "UserStateHolder"),
        ("kotlinx.coroutines.CoroutineScope", "CoroutineScope"),
    ],
)
def test_erased_simple_name(signature: str, expected: str) -> None:
    assert erased_simple_name(signature) == expected


def test_nullable_unit_return_stays_nullable() -> None:
    parsed = parse_type_signature("(String) -> Unit?")

    assert parsed == FunctionType(
        parameter_types=(SimpleType("String"),),
        return_type=NullableType(SimpleType("Unit")),
    )
    assert type_key("(String) -> Unit?") == "(String) -> Unit?"
