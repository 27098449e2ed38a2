from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TypeAlias

from stateholder_codegen._internal.naming import qualify


@dataclass(frozen=True, slots=True)
class ParameterDescriptor:
    """Describe one constructor parameter of a state holder class.

    Injected parameters are supplied from shared, consumer-owned state. When a
    parameter is injected without an explicit key, the key defaults to the
    parameter name.
    """

    name: str
    """Parameter name as declared in the constructor."""
    type_signature: str
    """Declared type, e.g. ``StateFlow<List<Item>>``."""
    is_injected: bool = False
    """Whether the value comes from a consumer's shared state."""
    injection_key: str | None = None
    """Key used to match the shared state; defaults to ``name`` for injected parameters."""

    def __post_init__(self) -> None:
        if self.is_injected and not self.injection_key:
            object.__setattr__(self, "injection_key", self.name)


@dataclass(frozen=True, slots=True)
class SharedPropertyDescriptor:
    """Describe a field flagged as externally shared state."""

    property_name: str
    type_signature: str
    is_mutable: bool = False


@dataclass(frozen=True, slots=True)
class ClassDescriptor:
    """Describe one annotated state holder class discovered in a compilation pass.

    Descriptors are produced by the host-symbol adapter and never mutated
    afterwards. Sequence fields are normalized to tuples.
    """

    class_name: str
    """Unqualified class name."""
    package_name: str
    """Dot-separated package of the class."""
    constructor_params: tuple[ParameterDescriptor, ...] = ()
    """Primary constructor parameters in declaration order."""
    shared_properties: tuple[SharedPropertyDescriptor, ...] = ()
    """Shared-state fields declared by the class."""
    is_registration_enabled: bool = True
    """Whether the class opts into container registration."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "constructor_params", tuple(self.constructor_params))
        object.__setattr__(self, "shared_properties", tuple(self.shared_properties))

    @property
    def qualified_name(self) -> str:
        """Return the fully qualified class name."""
        return qualify(self.package_name, self.class_name)


@dataclass(frozen=True, slots=True)
class FactoryParameter:
    """A constructor parameter the generated factory still needs from its caller."""

    name: str
    type_signature: str
    position: int
    """Zero-based index among factory parameters (not among constructor parameters)."""


@dataclass(frozen=True, slots=True)
class RegistrationAnalysis:
    """Analysis result consumed by the module code generator.

    ``package_name`` and ``constructor_params`` are optional. Without
    ``constructor_params`` the generator treats ``factory_params`` as the full
    constructor argument list.
    """

    module_name: str
    class_name: str
    factory_params: tuple[FactoryParameter, ...]
    should_generate: bool
    package_name: str = ""
    constructor_params: tuple[ParameterDescriptor, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "factory_params", tuple(self.factory_params))
        object.__setattr__(self, "constructor_params", tuple(self.constructor_params))

    @property
    def qualified_name(self) -> str:
        """Return the fully qualified class name used as the factory key."""
        return qualify(self.package_name, self.class_name)


@dataclass(frozen=True, slots=True)
class ConsumerMapping:
    """A consumer class referencing a state holder, with the shared fields it exposes."""

    consumer_type: str
    """Fully qualified consumer class name, used in the generated type dispatch."""
    shared_properties: tuple[SharedPropertyDescriptor, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "shared_properties", tuple(self.shared_properties))


@dataclass(frozen=True, slots=True)
class ConsumerDescriptor:
    """Describe a consumer class (e.g. a view model) that owns state holders."""

    class_name: str
    package_name: str
    property_types: tuple[str, ...] = ()
    """Type signatures of every property, used to detect which holders are used."""
    shared_properties: tuple[SharedPropertyDescriptor, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "property_types", tuple(self.property_types))
        object.__setattr__(self, "shared_properties", tuple(self.shared_properties))

    @property
    def qualified_name(self) -> str:
        """Return the fully qualified consumer class name."""
        return qualify(self.package_name, self.class_name)

    def to_mapping(self) -> ConsumerMapping:
        """Return the mapping entry used by factory generation."""
        return ConsumerMapping(
            consumer_type=self.qualified_name,
            shared_properties=self.shared_properties,
        )


ConsumerMappings: TypeAlias = Mapping[str, Sequence[ConsumerMapping]]
"""Consumer mappings keyed by the fully qualified state holder class name."""
