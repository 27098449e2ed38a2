from __future__ import annotations

import logging
from textwrap import indent

from stateholder_codegen._internal.codegen.fragments import (
    ARGUMENT_FRAGMENT,
    BRANCH_FRAGMENT,
    CONSTRUCTION_FRAGMENT,
    DISPATCH_FRAGMENT,
    FACTORY_FRAGMENT,
    FILE_FRAGMENT,
    MODULE_FRAGMENT,
)
from stateholder_codegen._internal.codegen.planner import (
    ConstructionPlan,
    ConsumerBranchPlan,
    FactoryPlan,
    ModulePlan,
)
from stateholder_codegen._internal.codegen.templating import Environment, Template

_INDENT = " " * 4
_MODULE_TYPE = "Module"
_KOIN_IMPORTS = ("org.koin.core.module.Module", "org.koin.dsl.module")
logger = logging.getLogger(__name__)


class ModuleCodeRenderer:
    """Renders module plans into Kotlin source text."""

    def __init__(self) -> None:
        self._env = Environment(trim_blocks=True, lstrip_blocks=True)

    def render_module(self, plan: ModulePlan, *, typed: bool = False) -> str:
        """Render the module property with every planned factory.

        Args:
            plan: Module plan produced by the planner.
            typed: Whether to declare the property type explicitly.

        """
        factories_block = "\n\n".join(
            self._indent_block(self.render_factory(factory)) for factory in plan.factories
        )
        logger.info(
            "Rendered state holder module: property=%s factory_count=%d dispatch_count=%d skipped=%d",
            plan.property_name,
            plan.factory_count,
            plan.dispatch_count,
            plan.skipped_count,
        )
        return self._template(MODULE_FRAGMENT).render(
            property_name=plan.property_name,
            module_type=_MODULE_TYPE if typed else "",
            factories_block=factories_block,
        )

    def render_file(self, plan: ModulePlan, *, package_name: str) -> str:
        """Render a complete source file holding the module property.

        Args:
            plan: Module plan produced by the planner.
            package_name: Package clause of the generated file.

        """
        imports = self._unique_ordered(
            [
                *sorted(
                    type_name
                    for type_name in (plan.consumer_base_type, plan.scope_type)
                    if "." in type_name
                ),
                *_KOIN_IMPORTS,
            ],
        )
        rendered = self._template(FILE_FRAGMENT).render(
            package_name=package_name,
            imports=imports,
            module_block=self.render_module(plan, typed=True),
        )
        return f"{rendered}\n"

    def render_factory(self, plan: FactoryPlan) -> str:
        """Render one ``factory<...> { params -> ... }`` entry.

        Args:
            plan: Factory plan produced by the planner.

        """
        if plan.construction is not None:
            body_block = self._render_construction(plan.construction)
        else:
            body_block = self._render_dispatch(plan)

        return self._template(FACTORY_FRAGMENT).render(
            qualified_name=plan.qualified_name,
            consumer_base_type=plan.consumer_base_type,
            scope_type=plan.scope_type,
            body_block=self._indent_block(body_block),
        )

    def _render_dispatch(self, plan: FactoryPlan) -> str:
        branch_blocks = [self._indent_block(self._render_branch(branch)) for branch in plan.branches]
        return self._template(DISPATCH_FRAGMENT).render(
            branch_blocks=branch_blocks,
            class_name=plan.class_name,
        )

    def _render_branch(self, branch: ConsumerBranchPlan) -> str:
        return self._template(BRANCH_FRAGMENT).render(
            consumer_type=branch.consumer_type,
            construction_block=self._render_construction(branch.construction),
        )

    def _render_construction(self, plan: ConstructionPlan) -> str:
        argument_template = self._template(ARGUMENT_FRAGMENT)
        argument_lines = [
            argument_template.render(name=argument.name, expression=argument.expression)
            for argument in plan.arguments
        ]
        arguments_block = self._join_lines(
            self._indent_lines([f"{line}," for line in argument_lines[:-1]] + argument_lines[-1:], 1),
        )
        rendered = self._template(CONSTRUCTION_FRAGMENT).render(
            class_reference=plan.class_reference,
            arguments_block=arguments_block,
        )
        return rendered.rstrip("\n")

    def _template(self, text: str) -> Template:
        return self._env.from_string(text)

    def _indent_block(self, block: str) -> str:
        return indent(block, _INDENT)

    def _indent_lines(self, lines: list[str], depth: int) -> list[str]:
        prefix = _INDENT * depth
        return [f"{prefix}{line}" if line else "" for line in lines]

    def _join_lines(self, lines: list[str]) -> str:
        return "\n".join(lines)

    def _unique_ordered(self, values: list[str]) -> list[str]:
        seen: set[str] = set()
        unique_values: list[str] = []
        for value in values:
            if value in seen:
                continue
            seen.add(value)
            unique_values.append(value)
        return unique_values


__all__ = ["ModuleCodeRenderer"]
