from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stateholder_codegen.validation import ValidationError


class StateHolderCodegenError(Exception):
    """Represent a base class for all stateholder-codegen failures.

    Catch this type when you want to handle any generation error path without
    matching each concrete exception class individually.
    """


class InvalidGenerationInputError(StateHolderCodegenError):
    """Signal a generation request that violates the generator input contract.

    Raised by ``ModuleCodeGenerator.generate_module``,
    ``ModuleCodeGenerator.generate_factory`` and
    ``ModuleCodeGenerator.generate_file`` when an analysis carries a blank
    class name, parameter name, or type signature. The whole batch is
    rejected; no partial output is produced.

    Typical fix is running ``MetadataValidator`` before generation and
    dropping descriptors the host-symbol adapter could not fully resolve.
    """


class DescriptorValidationError(StateHolderCodegenError):
    """Signal that a registration-enabled class descriptor failed validation.

    Raised by ``CodegenPipeline.run`` to abort the compilation pass. The
    offending class and every collected validation error are attached.
    """

    def __init__(self, class_name: str, errors: tuple[ValidationError, ...]) -> None:
        self.class_name = class_name
        self.errors = errors
        details = "; ".join(error.message for error in errors)
        super().__init__(f"Invalid state holder '{class_name}': {details}")
