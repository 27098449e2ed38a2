from textwrap import dedent

FILE_FRAGMENT = dedent(
    """
// @file:Suppress("UNUSED")
package {{ package_name }}

{% for import_name in imports %}
import {{ import_name }}
{% endfor %}

{{ module_block }}
""",
).strip()

MODULE_FRAGMENT = dedent(
    """
val {{ property_name }}{% if module_type %}: {{ module_type }}{% endif %} = module {
{% if factories_block %}
{{ factories_block }}
{% endif %}
}
""",
).strip()

FACTORY_FRAGMENT = dedent(
    """
factory<{{ qualified_name }}> { params ->
    val viewModel = params.get<{{ consumer_base_type }}>(0)
    val scope = params.get<{{ scope_type }}>(1)

{{ body_block }}
}
""",
).strip()

DISPATCH_FRAGMENT = dedent(
    """
when (viewModel) {
{% for branch_block in branch_blocks %}
{{ branch_block }}
{% endfor %}
    else -> throw IllegalArgumentException("No mapping for {{ class_name }} in ${viewModel::class.simpleName}")
}
""",
).strip()

BRANCH_FRAGMENT = "is {{ consumer_type }} -> {{ construction_block }}"

CONSTRUCTION_FRAGMENT = dedent(
    """
{% if arguments_block %}
{{ class_reference }}(
{{ arguments_block }}
)
{% else %}
{{ class_reference }}()
{% endif %}
""",
).strip()

ARGUMENT_FRAGMENT = "{{ name }} = {{ expression }}"
