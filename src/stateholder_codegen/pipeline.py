from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from stateholder_codegen._internal.naming import is_blank
from stateholder_codegen.analysis import RegistrationAnalyzer
from stateholder_codegen.descriptors import (
    ClassDescriptor,
    ConsumerDescriptor,
    RegistrationAnalysis,
)
from stateholder_codegen.exceptions import DescriptorValidationError
from stateholder_codegen.generator import ModuleCodeGenerator
from stateholder_codegen.mappings import build_consumer_mappings
from stateholder_codegen.settings import GeneratorSettings
from stateholder_codegen.validation import MetadataValidator, ValidationResult

GENERATED_PACKAGE_SUFFIX = "generated"
logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GenerationResult:
    """Outcome of one compilation pass."""

    source: str | None
    """Generated file text, or ``None`` when no holder opted into registration."""
    analyses: tuple[RegistrationAnalysis, ...]
    """Analyses of every descriptor, in input order."""
    validation_results: tuple[ValidationResult, ...]
    """Validation results of every descriptor, in input order."""
    package_name: str | None = None
    """Package clause of the generated file."""


class CodegenPipeline:
    """Run validation, analysis and generation for one compilation pass.

    Descriptors are validated first. Validation warnings are logged; any error
    on a registration-enabled descriptor aborts the pass. Errors on disabled
    descriptors are only logged.
    """

    def __init__(self, settings: GeneratorSettings | None = None) -> None:
        self._settings = settings if settings is not None else GeneratorSettings()
        self._validator = MetadataValidator(
            conventional_suffix=self._settings.conventional_suffix,
            max_parameter_name_length=self._settings.max_parameter_name_length,
        )
        self._analyzer = RegistrationAnalyzer(
            conventional_suffix=self._settings.conventional_suffix,
        )
        self._generator = ModuleCodeGenerator(settings=self._settings)

    def run(
        self,
        descriptors: Iterable[ClassDescriptor],
        consumers: Iterable[ConsumerDescriptor] = (),
    ) -> GenerationResult:
        """Process the descriptors of one compilation pass.

        Args:
            descriptors: State holder descriptors from the host-symbol adapter.
            consumers: Consumer classes whose shared state feeds injected parameters.

        Raises:
            DescriptorValidationError: A registration-enabled descriptor is invalid.

        """
        descriptors = tuple(descriptors)
        validation_results = tuple(self._validate(descriptor) for descriptor in descriptors)
        analyses = self._analyzer.analyze_all(descriptors)

        enabled = tuple(descriptor for descriptor in descriptors if descriptor.is_registration_enabled)
        if not enabled:
            logger.info("No registration-enabled state holders found; skipping module generation")
            return GenerationResult(
                source=None,
                analyses=analyses,
                validation_results=validation_results,
            )

        package_name = self._output_package(enabled)
        consumer_mappings = build_consumer_mappings(enabled, consumers)
        logger.info(
            "Generating state holder module: package=%s holders=%d skipped=%d",
            package_name,
            len(enabled),
            len(descriptors) - len(enabled),
        )
        source = self._generator.generate_file(
            (analysis for analysis in analyses if analysis.should_generate),
            package_name,
            consumer_mappings=consumer_mappings,
        )
        return GenerationResult(
            source=source,
            analyses=analyses,
            validation_results=validation_results,
            package_name=package_name,
        )

    def _validate(self, descriptor: ClassDescriptor) -> ValidationResult:
        result = self._validator.validate(descriptor)
        for warning in result.warnings:
            logger.warning("%s: %s", descriptor.qualified_name, warning)

        if result.is_valid:
            return result
        if descriptor.is_registration_enabled:
            raise DescriptorValidationError(descriptor.class_name, result.errors)

        logger.info(
            "Ignoring %d validation error(s) of %s: registration is disabled",
            len(result.errors),
            descriptor.qualified_name,
        )
        return result

    def _output_package(self, enabled: tuple[ClassDescriptor, ...]) -> str:
        if not is_blank(self._settings.output_package):
            return self._settings.output_package
        return f"{enabled[0].package_name}.{GENERATED_PACKAGE_SUFFIX}"


__all__ = ["CodegenPipeline", "GenerationResult"]
