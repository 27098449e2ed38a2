from __future__ import annotations

from collections.abc import Mapping

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

from stateholder_codegen._internal.naming import is_blank, sanitize_identifier
from stateholder_codegen.validation import (
    DEFAULT_CONVENTIONAL_SUFFIX,
    DEFAULT_MAX_PARAMETER_NAME_LENGTH,
)

DEFAULT_MODULE_PROPERTY_NAME = "stateHolderModule"

_OPTION_FIELDS = {
    "stateholder.module.suffix": "module_suffix",
    "project.name": "project_name",
    "stateholder.output.package": "output_package",
}


class GeneratorSettings(BaseSettings):
    """Configure validation, analysis and code generation.

    Values can be passed directly, read from ``STATEHOLDER_*`` environment
    variables, or mapped from build-tool processor options with
    :meth:`from_options`.

    Examples:
        .. code-block:: python

            settings = GeneratorSettings(module_suffix="feature_user")
            assert settings.module_property_name == "stateHolderModule_feature_user"

    """

    model_config = SettingsConfigDict(env_prefix="STATEHOLDER_", frozen=True)

    module_suffix: str = ""
    """Substituted verbatim into the module property name to disambiguate passes."""

    project_name: str = ""
    """Fallback disambiguator, sanitized before use, when no suffix is given."""

    conventional_suffix: str = Field(default=DEFAULT_CONVENTIONAL_SUFFIX, min_length=1)
    """Class name suffix stripped when deriving module names."""

    max_parameter_name_length: int = Field(default=DEFAULT_MAX_PARAMETER_NAME_LENGTH, gt=0)
    """Parameter names longer than this produce a validation warning."""

    consumer_base_type: str = "androidx.lifecycle.ViewModel"
    """Type of the consumer object passed as the first factory parameter."""

    scope_type: str = "kotlinx.coroutines.CoroutineScope"
    """Concurrency-scope type passed through from the second factory parameter."""

    output_package: str = ""
    """Package of the generated file; derived from the first holder when blank."""

    @property
    def module_property_name(self) -> str:
        """Return the name of the generated module property."""
        if not is_blank(self.module_suffix):
            return f"{DEFAULT_MODULE_PROPERTY_NAME}_{self.module_suffix}"
        if not is_blank(self.project_name):
            return f"{DEFAULT_MODULE_PROPERTY_NAME}_{sanitize_identifier(self.project_name)}"
        return DEFAULT_MODULE_PROPERTY_NAME

    @classmethod
    def from_options(cls, options: Mapping[str, str]) -> Self:
        """Build settings from build-tool processor options.

        Recognized keys are ``stateholder.module.suffix``, ``project.name`` and
        ``stateholder.output.package``; other keys are ignored.

        Args:
            options: Processor options as supplied by the build tool.

        """
        values = {
            field_name: options[option_key]
            for option_key, field_name in _OPTION_FIELDS.items()
            if option_key in options
        }
        return cls(**values)


__all__ = ["DEFAULT_MODULE_PROPERTY_NAME", "GeneratorSettings"]
