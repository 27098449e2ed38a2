"""Shared pytest fixtures for stateholder-codegen tests."""

import pytest

from stateholder_codegen.analysis import RegistrationAnalyzer
from stateholder_codegen.descriptors import (
    ClassDescriptor,
    ConsumerDescriptor,
    ParameterDescriptor,
    SharedPropertyDescriptor,
)
from stateholder_codegen.generator import ModuleCodeGenerator
from stateholder_codegen.settings import GeneratorSettings
from stateholder_codegen.validation import MetadataValidator


@pytest.fixture(autouse=True)
def _clear_settings_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ambient STATEHOLDER_* variables from leaking into settings."""
    for name in (
        "STATEHOLDER_MODULE_SUFFIX",
        "STATEHOLDER_PROJECT_NAME",
        "STATEHOLDER_CONVENTIONAL_SUFFIX",
        "STATEHOLDER_MAX_PARAMETER_NAME_LENGTH",
        "STATEHOLDER_CONSUMER_BASE_TYPE",
        "STATEHOLDER_SCOPE_TYPE",
        "STATEHOLDER_OUTPUT_PACKAGE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def settings() -> GeneratorSettings:
    """Default generator settings."""
    return GeneratorSettings()


@pytest.fixture()
def validator() -> MetadataValidator:
    """Validator with the default naming conventions."""
    return MetadataValidator()


@pytest.fixture()
def analyzer() -> RegistrationAnalyzer:
    """Analyzer with the default conventional suffix."""
    return RegistrationAnalyzer()


@pytest.fixture()
def generator(settings: GeneratorSettings) -> ModuleCodeGenerator:
    """Generator with default settings."""
    return ModuleCodeGenerator(settings=settings)


@pytest.fixture()
def user_holder() -> ClassDescriptor:
    """State holder with an injected, a scope and a container-resolved parameter."""
    return ClassDescriptor(
        class_name="UserStateHolder",
        package_name="com.example.user",
        constructor_params=(
            ParameterDescriptor(
                name="userState",
                type_signature="com.example.user.UserSharedState",
                is_injected=True,
            ),
            ParameterDescriptor(name="repository", type_signature="com.example.user.UserRepository"),
            ParameterDescriptor(name="scope", type_signature="kotlinx.coroutines.CoroutineScope"),
        ),
    )


@pytest.fixture()
def user_view_model() -> ConsumerDescriptor:
    """Consumer exposing the shared state that ``user_holder`` injects."""
    return ConsumerDescriptor(
        class_name="UserViewModel",
        package_name="com.example.user",
        property_types=(
            "com.example.user.UserStateHolder",
            "com.example.user.UserSharedState",
        ),
        shared_properties=(
            SharedPropertyDescriptor(
                property_name="sharedUserState",
                type_signature="com.example.user.UserSharedState",
            ),
        ),
    )
