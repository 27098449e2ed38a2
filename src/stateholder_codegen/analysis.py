from __future__ import annotations

from collections.abc import Iterable, Sequence

from stateholder_codegen._internal.naming import derive_module_name
from stateholder_codegen.descriptors import (
    ClassDescriptor,
    FactoryParameter,
    ParameterDescriptor,
    RegistrationAnalysis,
)
from stateholder_codegen.validation import DEFAULT_CONVENTIONAL_SUFFIX


class RegistrationAnalyzer:
    """Derives registration metadata from validated class descriptors.

    The analyzer does not re-validate: validation is a separate, earlier stage.
    Shared properties never influence the result.
    """

    def __init__(self, *, conventional_suffix: str = DEFAULT_CONVENTIONAL_SUFFIX) -> None:
        self._conventional_suffix = conventional_suffix

    def analyze(self, descriptor: ClassDescriptor) -> RegistrationAnalysis:
        """Build the registration analysis for a single class.

        Args:
            descriptor: Class descriptor to analyze.

        """
        return RegistrationAnalysis(
            module_name=derive_module_name(descriptor.class_name, self._conventional_suffix),
            class_name=descriptor.class_name,
            factory_params=self.extract_factory_parameters(descriptor.constructor_params),
            should_generate=descriptor.is_registration_enabled,
            package_name=descriptor.package_name,
            constructor_params=descriptor.constructor_params,
        )

    def analyze_all(self, descriptors: Iterable[ClassDescriptor]) -> tuple[RegistrationAnalysis, ...]:
        """Analyze descriptors, preserving input order."""
        return tuple(self.analyze(descriptor) for descriptor in descriptors)

    def extract_factory_parameters(
        self,
        params: Sequence[ParameterDescriptor],
    ) -> tuple[FactoryParameter, ...]:
        """Return non-injected parameters, numbered by their filtered position.

        Args:
            params: Constructor parameters in declaration order.

        """
        non_injected = [param for param in params if not param.is_injected]
        return tuple(
            FactoryParameter(name=param.name, type_signature=param.type_signature, position=index)
            for index, param in enumerate(non_injected)
        )

    def find_injected_parameters(
        self,
        params: Sequence[ParameterDescriptor],
    ) -> tuple[ParameterDescriptor, ...]:
        """Return injected parameters in declaration order."""
        return tuple(param for param in params if param.is_injected)


__all__ = ["RegistrationAnalyzer"]
