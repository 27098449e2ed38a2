from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from stateholder_codegen._internal.naming import (
    is_blank,
    is_identifier,
    is_package_name,
    simple_name,
)
from stateholder_codegen.descriptors import ClassDescriptor
from stateholder_codegen.type_signatures import (
    ParseFailure,
    erased_simple_name,
    parse_type_signature,
)

DEFAULT_CONVENTIONAL_SUFFIX = "StateHolder"
DEFAULT_MAX_PARAMETER_NAME_LENGTH = 40
logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Category of a descriptor validation error."""

    MISSING_REQUIRED_FIELD = "missing_required_field"
    """A required name is blank."""

    INVALID_TYPE_SIGNATURE = "invalid_type_signature"
    """A parameter or shared property type does not match the type grammar."""

    CIRCULAR_DEPENDENCY = "circular_dependency"
    """An injected parameter refers to the enclosing class itself."""

    INVALID_PACKAGE_NAME = "invalid_package_name"
    """The package is not a dot-separated list of identifiers."""

    INVALID_CLASS_NAME = "invalid_class_name"
    """The class name is not an identifier."""


@dataclass(frozen=True, slots=True)
class ValidationError:
    """A single blocking problem found in a class descriptor."""

    kind: ErrorKind
    message: str
    field: str | None = None
    """Name of the offending descriptor field, parameter or property."""


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating one class descriptor.

    Warnings never affect :attr:`is_valid`.
    """

    errors: tuple[ValidationError, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        """Return true when no errors were collected."""
        return not self.errors

    def errors_of_kind(self, kind: ErrorKind) -> tuple[ValidationError, ...]:
        """Return collected errors of a single category, in detection order."""
        return tuple(error for error in self.errors if error.kind is kind)


class MetadataValidator:
    """Validates class descriptors before registration code is generated.

    Every rule runs independently; errors accumulate and the validator never
    raises. Circular dependency detection only covers direct self-reference:
    an injected parameter whose erased type names the enclosing class. Indirect
    cycles (``A`` injects ``B``, ``B`` injects ``A``) are not detected.
    """

    def __init__(
        self,
        *,
        conventional_suffix: str = DEFAULT_CONVENTIONAL_SUFFIX,
        max_parameter_name_length: int = DEFAULT_MAX_PARAMETER_NAME_LENGTH,
    ) -> None:
        self._conventional_suffix = conventional_suffix
        self._max_parameter_name_length = max_parameter_name_length

    def validate(self, descriptor: ClassDescriptor) -> ValidationResult:
        """Validate a class descriptor.

        Args:
            descriptor: Descriptor produced by the host-symbol adapter.

        Returns:
            Result holding every error and warning found.

        """
        errors: list[ValidationError] = []
        errors.extend(self._validate_required_fields(descriptor))
        errors.extend(self._validate_class_name(descriptor))
        errors.extend(self._validate_package_name(descriptor))
        errors.extend(self._validate_parameters(descriptor))
        errors.extend(self._validate_shared_properties(descriptor))
        warnings = self._collect_warnings(descriptor)

        logger.debug(
            "Validated %s: errors=%d warnings=%d",
            descriptor.qualified_name,
            len(errors),
            len(warnings),
        )
        return ValidationResult(errors=tuple(errors), warnings=tuple(warnings))

    def _validate_required_fields(self, descriptor: ClassDescriptor) -> list[ValidationError]:
        errors: list[ValidationError] = []
        if is_blank(descriptor.class_name):
            errors.append(
                ValidationError(
                    kind=ErrorKind.MISSING_REQUIRED_FIELD,
                    message="class_name is required and cannot be blank",
                    field="class_name",
                ),
            )
        if is_blank(descriptor.package_name):
            errors.append(
                ValidationError(
                    kind=ErrorKind.MISSING_REQUIRED_FIELD,
                    message="package_name is required and cannot be blank",
                    field="package_name",
                ),
            )
        return errors

    def _validate_class_name(self, descriptor: ClassDescriptor) -> list[ValidationError]:
        class_name = descriptor.class_name
        if is_blank(class_name) or is_identifier(class_name):
            return []
        return [
            ValidationError(
                kind=ErrorKind.INVALID_CLASS_NAME,
                message=f"Invalid class name: {class_name}",
                field="class_name",
            ),
        ]

    def _validate_package_name(self, descriptor: ClassDescriptor) -> list[ValidationError]:
        package_name = descriptor.package_name
        if is_blank(package_name) or is_package_name(package_name):
            return []
        return [
            ValidationError(
                kind=ErrorKind.INVALID_PACKAGE_NAME,
                message=f"Invalid package name: {package_name}",
                field="package_name",
            ),
        ]

    def _validate_parameters(self, descriptor: ClassDescriptor) -> list[ValidationError]:
        errors: list[ValidationError] = []
        class_simple_name = simple_name(descriptor.class_name)

        for index, parameter in enumerate(descriptor.constructor_params):
            if is_blank(parameter.name):
                errors.append(
                    ValidationError(
                        kind=ErrorKind.MISSING_REQUIRED_FIELD,
                        message=f"Constructor parameter #{index} has a blank name",
                        field=f"constructor_params[{index}].name",
                    ),
                )

            parsed = parse_type_signature(parameter.type_signature)
            if isinstance(parsed, ParseFailure):
                errors.append(
                    ValidationError(
                        kind=ErrorKind.INVALID_TYPE_SIGNATURE,
                        message=(
                            f"Invalid type signature '{parameter.type_signature}' "
                            f"for parameter '{parameter.name}': {parsed.reason}"
                        ),
                        field=parameter.name,
                    ),
                )

            if (
                parameter.is_injected
                and class_simple_name
                and erased_simple_name(parameter.type_signature) == class_simple_name
            ):
                errors.append(
                    ValidationError(
                        kind=ErrorKind.CIRCULAR_DEPENDENCY,
                        message=(
                            f"Circular dependency detected: {descriptor.class_name} "
                            f"depends on {parameter.type_signature}"
                        ),
                        field=parameter.name,
                    ),
                )
        return errors

    def _validate_shared_properties(self, descriptor: ClassDescriptor) -> list[ValidationError]:
        errors: list[ValidationError] = []
        for shared_property in descriptor.shared_properties:
            parsed = parse_type_signature(shared_property.type_signature)
            if not isinstance(parsed, ParseFailure):
                continue
            errors.append(
                ValidationError(
                    kind=ErrorKind.INVALID_TYPE_SIGNATURE,
                    message=(
                        f"Invalid type signature '{shared_property.type_signature}' "
                        f"for shared property '{shared_property.property_name}': {parsed.reason}"
                    ),
                    field=shared_property.property_name,
                ),
            )
        return errors

    def _collect_warnings(self, descriptor: ClassDescriptor) -> list[str]:
        warnings: list[str] = []
        class_name = descriptor.class_name
        if not is_blank(class_name) and not class_name.endswith(self._conventional_suffix):
            warnings.append(
                f"Class name '{class_name}' does not follow the convention of ending with "
                f"'{self._conventional_suffix}'",
            )
        warnings.extend(
            f"Parameter name '{parameter.name}' is longer than recommended "
            f"({self._max_parameter_name_length} characters)"
            for parameter in descriptor.constructor_params
            if len(parameter.name) > self._max_parameter_name_length
        )
        return warnings


__all__ = [
    "ErrorKind",
    "MetadataValidator",
    "ValidationError",
    "ValidationResult",
]
