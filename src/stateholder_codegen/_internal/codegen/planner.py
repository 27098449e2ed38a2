from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from stateholder_codegen._internal.naming import is_blank, simple_name
from stateholder_codegen.descriptors import (
    ConsumerMapping,
    ConsumerMappings,
    FactoryParameter,
    ParameterDescriptor,
    RegistrationAnalysis,
)
from stateholder_codegen.exceptions import InvalidGenerationInputError
from stateholder_codegen.mappings import SharedStateLookup
from stateholder_codegen.settings import GeneratorSettings
from stateholder_codegen.type_signatures import (
    NullableType,
    ParseFailure,
    SimpleType,
    parse_type_signature,
)

CONSUMER_VARIABLE = "viewModel"
SCOPE_VARIABLE = "scope"
logger = logging.getLogger(__name__)


class ResolutionMode(str, Enum):
    """How a generated constructor argument obtains its value."""

    SHARED_STATE = "shared_state"
    """Read from a shared-state field of the consumer object."""

    PASS_THROUGH = "pass_through"
    """Forward the scope passed to the factory."""

    CONTAINER = "container"
    """Resolve from the dependency container."""

    MISSING = "missing"
    """Injected value with no matching shared state; fails at runtime."""


def validate_generation_input(analyses: Iterable[RegistrationAnalysis]) -> None:
    """Reject analyses that cannot be turned into source code.

    Every analysis is checked, including those with ``should_generate`` unset.

    Args:
        analyses: Analyses of one generation request.

    Raises:
        InvalidGenerationInputError: A class name, parameter name or type
            signature is blank.

    """
    for analysis in analyses:
        if is_blank(analysis.class_name):
            msg = f"State holder class name cannot be blank (module '{analysis.module_name}')."
            raise InvalidGenerationInputError(msg)

        parameter_lists: tuple[tuple[str, Sequence[FactoryParameter | ParameterDescriptor]], ...] = (
            ("factory_params", analysis.factory_params),
            ("constructor_params", analysis.constructor_params),
        )
        for list_name, parameters in parameter_lists:
            for index, parameter in enumerate(parameters):
                location = f"{list_name}[{index}]"
                if is_blank(parameter.name):
                    msg = f"Parameter {location} of '{analysis.class_name}' has a blank name."
                    raise InvalidGenerationInputError(msg)
                if is_blank(parameter.type_signature):
                    msg = (
                        f"Parameter '{parameter.name}' ({location}) of '{analysis.class_name}' "
                        "has a blank type signature."
                    )
                    raise InvalidGenerationInputError(msg)


@dataclass(frozen=True, slots=True)
class ArgumentPlan:
    """One named constructor argument."""

    name: str
    mode: ResolutionMode
    expression: str


@dataclass(frozen=True, slots=True)
class ConstructionPlan:
    """Constructor call for a state holder."""

    class_reference: str
    arguments: tuple[ArgumentPlan, ...]


@dataclass(frozen=True, slots=True)
class ConsumerBranchPlan:
    """Constructor call used when the consumer object is of ``consumer_type``."""

    consumer_type: str
    construction: ConstructionPlan


@dataclass(frozen=True, slots=True)
class FactoryPlan:
    """Factory entry metadata used during module rendering.

    Exactly one of ``construction`` and ``branches`` is populated: a factory
    either builds the holder directly or dispatches on the consumer type.
    """

    qualified_name: str
    class_name: str
    consumer_base_type: str
    scope_type: str
    construction: ConstructionPlan | None = None
    branches: tuple[ConsumerBranchPlan, ...] = ()

    @property
    def uses_dispatch(self) -> bool:
        """Return true when the factory dispatches on the consumer type."""
        return bool(self.branches)


@dataclass(frozen=True, slots=True)
class ModulePlan:
    """Deterministic plan consumed by the renderer."""

    property_name: str
    consumer_base_type: str
    scope_type: str
    factories: tuple[FactoryPlan, ...]
    skipped_count: int = 0
    """Analyses left out because registration was disabled."""

    @property
    def factory_count(self) -> int:
        return len(self.factories)

    @property
    def dispatch_count(self) -> int:
        return sum(1 for factory in self.factories if factory.uses_dispatch)


class ModuleGenerationPlanner:
    """Builds deterministic metadata for module code generation."""

    def __init__(self, *, settings: GeneratorSettings) -> None:
        self._settings = settings

    def build(
        self,
        analyses: Iterable[RegistrationAnalysis],
        consumer_mappings: ConsumerMappings | None = None,
    ) -> ModulePlan:
        """Build the module plan for a batch of analyses.

        Args:
            analyses: Analyses in output order.
            consumer_mappings: Consumers of each holder, keyed by qualified name.

        """
        analyses = tuple(analyses)
        validate_generation_input(analyses)

        factories = tuple(
            self._build_factory_plan(analysis=analysis, consumer_mappings=consumer_mappings)
            for analysis in analyses
            if analysis.should_generate
        )
        return ModulePlan(
            property_name=self._settings.module_property_name,
            consumer_base_type=self._settings.consumer_base_type,
            scope_type=self._settings.scope_type,
            factories=factories,
            skipped_count=len(analyses) - len(factories),
        )

    def build_factory(
        self,
        analysis: RegistrationAnalysis,
        consumer_mappings: ConsumerMappings | None = None,
    ) -> FactoryPlan:
        """Build the plan for a single factory entry.

        Args:
            analysis: Analysis of the state holder.
            consumer_mappings: Consumers of each holder, keyed by qualified name.

        """
        validate_generation_input((analysis,))
        return self._build_factory_plan(analysis=analysis, consumer_mappings=consumer_mappings)

    def _build_factory_plan(
        self,
        *,
        analysis: RegistrationAnalysis,
        consumer_mappings: ConsumerMappings | None,
    ) -> FactoryPlan:
        qualified_name = analysis.qualified_name
        parameters = self._constructor_parameters(analysis)
        mappings: Sequence[ConsumerMapping] = ()
        if consumer_mappings is not None:
            mappings = consumer_mappings.get(qualified_name, ())

        has_injected = any(parameter.is_injected for parameter in parameters)
        if has_injected and mappings:
            branches = tuple(
                ConsumerBranchPlan(
                    consumer_type=mapping.consumer_type,
                    construction=self._build_construction(
                        class_reference=qualified_name,
                        parameters=parameters,
                        lookup=SharedStateLookup.from_mapping(mapping),
                    ),
                )
                for mapping in mappings
            )
            return FactoryPlan(
                qualified_name=qualified_name,
                class_name=analysis.class_name,
                consumer_base_type=self._settings.consumer_base_type,
                scope_type=self._settings.scope_type,
                branches=branches,
            )

        return FactoryPlan(
            qualified_name=qualified_name,
            class_name=analysis.class_name,
            consumer_base_type=self._settings.consumer_base_type,
            scope_type=self._settings.scope_type,
            construction=self._build_construction(
                class_reference=qualified_name,
                parameters=parameters,
                lookup=None,
            ),
        )

    def _constructor_parameters(self, analysis: RegistrationAnalysis) -> tuple[ParameterDescriptor, ...]:
        if analysis.constructor_params:
            return analysis.constructor_params
        return tuple(
            ParameterDescriptor(name=parameter.name, type_signature=parameter.type_signature)
            for parameter in analysis.factory_params
        )

    def _build_construction(
        self,
        *,
        class_reference: str,
        parameters: tuple[ParameterDescriptor, ...],
        lookup: SharedStateLookup | None,
    ) -> ConstructionPlan:
        arguments = tuple(
            self._build_argument(parameter=parameter, lookup=lookup) for parameter in parameters
        )
        return ConstructionPlan(class_reference=class_reference, arguments=arguments)

    def _build_argument(
        self,
        *,
        parameter: ParameterDescriptor,
        lookup: SharedStateLookup | None,
    ) -> ArgumentPlan:
        if parameter.is_injected:
            field_name = lookup.find_field(parameter.type_signature) if lookup is not None else None
            if field_name is None:
                logger.debug(
                    "No shared state for injected parameter '%s' (%s)",
                    parameter.name,
                    lookup.consumer_type if lookup is not None else "no consumers",
                )
                return ArgumentPlan(
                    name=parameter.name,
                    mode=ResolutionMode.MISSING,
                    expression=f'throw IllegalArgumentException("Missing parameter: {parameter.name}")',
                )
            return ArgumentPlan(
                name=parameter.name,
                mode=ResolutionMode.SHARED_STATE,
                expression=f"{CONSUMER_VARIABLE}.{field_name}",
            )

        if self._is_scope_type(parameter.type_signature):
            return ArgumentPlan(
                name=parameter.name,
                mode=ResolutionMode.PASS_THROUGH,
                expression=SCOPE_VARIABLE,
            )

        return ArgumentPlan(
            name=parameter.name,
            mode=ResolutionMode.CONTAINER,
            expression=self._container_expression(parameter),
        )

    def _is_scope_type(self, type_signature: str) -> bool:
        parsed = parse_type_signature(type_signature)
        if not isinstance(parsed, SimpleType):
            return False
        scope_type = self._settings.scope_type
        return parsed.qualified_name in {scope_type, simple_name(scope_type)}

    def _container_expression(self, parameter: ParameterDescriptor) -> str:
        parsed = parse_type_signature(parameter.type_signature)
        if isinstance(parsed, ParseFailure):
            logger.debug(
                "Falling back to untyped get() for parameter '%s': %s",
                parameter.name,
                parsed.reason,
            )
            return "get()"
        if isinstance(parsed, NullableType):
            return f"getOrNull<{parsed.inner}>()"
        return f"get<{parsed}>()"


__all__ = [
    "ArgumentPlan",
    "ConstructionPlan",
    "ConsumerBranchPlan",
    "FactoryPlan",
    "ModuleGenerationPlanner",
    "ModulePlan",
    "ResolutionMode",
    "validate_generation_input",
]
