from __future__ import annotations

import pytest

from stateholder_codegen._internal.codegen.templating import Environment


def test_variable_interpolation_renders_context_value() -> None:
    template = Environment().from_string("factory<{{ name }}>")

    rendered = template.render(name="UserStateHolder")

    assert rendered == "factory<UserStateHolder>"


def test_if_condition_uses_truthy_branch() -> None:
    template = Environment().from_string("{% if typed %}: Module{% endif %}")

    rendered = template.render(typed=True)

    assert rendered == ": Module"


def test_if_condition_uses_falsy_branch() -> None:
    template = Environment().from_string("{% if typed %}yes{% else %}no{% endif %}")

    rendered = template.render(typed="")

    assert rendered == "no"


def test_for_loop_renders_body_per_item() -> None:
    template = Environment().from_string("{% for item in items %}[{{ item }}]{% endfor %}")

    rendered = template.render(items=("a", "b", "c"))

    assert rendered == "[a][b][c]"


def test_for_loop_over_empty_iterable_renders_nothing() -> None:
    template = Environment().from_string("x{% for item in items %}{{ item }}{% endfor %}y")

    rendered = template.render(items=[])

    assert rendered == "xy"


def test_for_loop_target_shadows_outer_context_only_inside_body() -> None:
    template = Environment().from_string(
        "{{ item }}{% for item in items %}{{ item }}{% endfor %}{{ item }}",
    )

    rendered = template.render(item="0", items=["1", "2"])

    assert rendered == "0120"


def test_block_tags_on_own_lines_leave_no_blank_lines() -> None:
    template = Environment().from_string(
        "module {\n    {% for line in lines %}\n{{ line }}\n    {% endfor %}\n}",
    )

    rendered = template.render(lines=["a", "b"])

    assert rendered == "module {\na\nb\n}"


def test_whitespace_is_kept_when_trimming_is_disabled() -> None:
    template = Environment(trim_blocks=False, lstrip_blocks=False).from_string(
        "a\n  {% if flag %}\nb\n  {% endif %}\nc",
    )

    rendered = template.render(flag=True)

    assert rendered == "a\n  \nb\n  \nc"


def test_braces_that_are_not_tags_are_kept_verbatim() -> None:
    template = Environment().from_string('throw X("in ${vm::class.simpleName}") { it }')

    rendered = template.render()

    assert rendered == 'throw X("in ${vm::class.simpleName}") { it }'


def test_parser_rejects_unknown_block_tag() -> None:
    with pytest.raises(ValueError, match="Unsupported template tag"):
        Environment().from_string("{% while x %}{% endwhile %}")


def test_parser_rejects_malformed_for_loop() -> None:
    with pytest.raises(ValueError, match="Unsupported for loop"):
        Environment().from_string("{% for item of items %}{% endfor %}")


def test_parser_rejects_unclosed_for_block() -> None:
    with pytest.raises(ValueError, match="missing endfor"):
        Environment().from_string("{% for item in items %}{{ item }}")


def test_parser_rejects_unclosed_if_block() -> None:
    with pytest.raises(ValueError, match="missing endif"):
        Environment().from_string("{% if condition %}x{% else %}y")


@pytest.mark.parametrize("tag", ["else", "endif", "endfor"])
def test_parser_rejects_unexpected_closing_tags(tag: str) -> None:
    with pytest.raises(ValueError, match=f"Unexpected block tag '{tag}'"):
        Environment().from_string(f"{{% {tag} %}}")


def test_parser_rejects_unsupported_variable_expression() -> None:
    with pytest.raises(ValueError, match="Unsupported variable expression"):
        Environment().from_string("{{ a.b }}")


def test_parser_rejects_empty_and_unclosed_tags() -> None:
    with pytest.raises(ValueError, match="Variable tag cannot be empty"):
        Environment().from_string("{{ }}")
    with pytest.raises(ValueError, match="Unclosed block tag"):
        Environment().from_string("{% if x")


def test_render_rejects_missing_variable() -> None:
    template = Environment().from_string("{{ name }}")

    with pytest.raises(ValueError, match="Missing template variable 'name'"):
        template.render()


def test_render_rejects_non_iterable_loop_source() -> None:
    template = Environment().from_string("{% for item in items %}{{ item }}{% endfor %}")

    with pytest.raises(ValueError, match="is not iterable"):
        template.render(items="abc")


@pytest.mark.parametrize("condition", ['mode == "scope"', "not typed", "a.b"])
def test_parser_rejects_conditions_other_than_a_bare_name(condition: str) -> None:
    with pytest.raises(ValueError, match="Unsupported if condition"):
        Environment().from_string(f"{{% if {condition} %}}x{{% endif %}}")
