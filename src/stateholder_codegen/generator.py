from __future__ import annotations

from collections.abc import Iterable

from stateholder_codegen._internal.codegen.planner import ModuleGenerationPlanner
from stateholder_codegen._internal.codegen.renderer import ModuleCodeRenderer
from stateholder_codegen.descriptors import ConsumerMappings, RegistrationAnalysis
from stateholder_codegen.settings import GeneratorSettings


class ModuleCodeGenerator:
    """Generate dependency-injection module source for state holders.

    Every registration-enabled analysis becomes a ``factory<...>`` entry that
    builds the holder from three sources, in this order of precedence:

    - injected parameters are read from the consumer object's shared state,
      dispatching on the consumer type when ``consumer_mappings`` names it,
    - parameters of the configured scope type receive the factory's scope,
    - everything else is resolved from the container with ``get<T>()``.

    Generated factories read the consumer object and the scope from the first
    and second positional factory parameters.

    Examples:
        .. code-block:: python

            generator = ModuleCodeGenerator()
            source = generator.generate_module(
                [RegistrationAnalyzer().analyze(descriptor) for descriptor in descriptors],
            )

    """

    def __init__(self, settings: GeneratorSettings | None = None) -> None:
        self._settings = settings if settings is not None else GeneratorSettings()
        self._planner = ModuleGenerationPlanner(settings=self._settings)
        self._renderer = ModuleCodeRenderer()

    @property
    def settings(self) -> GeneratorSettings:
        return self._settings

    def generate_module(
        self,
        analyses: Iterable[RegistrationAnalysis],
        consumer_mappings: ConsumerMappings | None = None,
    ) -> str:
        """Generate the module property for a batch of analyses.

        Analyses with ``should_generate`` unset are skipped; the rest keep
        their input order. An empty batch produces an empty module.

        Args:
            analyses: Analyses produced by ``RegistrationAnalyzer``.
            consumer_mappings: Consumers of each holder, keyed by the holder's
                qualified name. Injected parameters without a mapping produce a
                runtime error expression.

        Raises:
            InvalidGenerationInputError: Any analysis in the batch carries a
                blank class name, parameter name or type signature.

        """
        plan = self._planner.build(analyses, consumer_mappings)
        return self._renderer.render_module(plan)

    def generate_factory(
        self,
        analysis: RegistrationAnalysis,
        consumer_mappings: ConsumerMappings | None = None,
    ) -> str:
        """Generate a single factory entry, regardless of ``should_generate``.

        Args:
            analysis: Analysis of the state holder.
            consumer_mappings: Consumers of each holder, keyed by qualified name.

        Raises:
            InvalidGenerationInputError: The analysis carries a blank class
                name, parameter name or type signature.

        """
        plan = self._planner.build_factory(analysis, consumer_mappings)
        return self._renderer.render_factory(plan)

    def generate_file(
        self,
        analyses: Iterable[RegistrationAnalysis],
        package_name: str,
        consumer_mappings: ConsumerMappings | None = None,
    ) -> str:
        """Generate a complete source file declaring the module property.

        Args:
            analyses: Analyses produced by ``RegistrationAnalyzer``.
            package_name: Package clause of the generated file.
            consumer_mappings: Consumers of each holder, keyed by qualified name.

        Raises:
            InvalidGenerationInputError: Any analysis in the batch carries a
                blank class name, parameter name or type signature.

        """
        plan = self._planner.build(analyses, consumer_mappings)
        return self._renderer.render_file(plan, package_name=package_name)


__all__ = ["ModuleCodeGenerator"]
