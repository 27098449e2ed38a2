from stateholder_codegen.analysis import RegistrationAnalyzer
from stateholder_codegen.descriptors import (
    ClassDescriptor,
    ConsumerDescriptor,
    ConsumerMapping,
    ConsumerMappings,
    FactoryParameter,
    ParameterDescriptor,
    RegistrationAnalysis,
    SharedPropertyDescriptor,
)
from stateholder_codegen.exceptions import (
    DescriptorValidationError,
    InvalidGenerationInputError,
    StateHolderCodegenError,
)
from stateholder_codegen.generator import ModuleCodeGenerator
from stateholder_codegen.mappings import SharedStateLookup, build_consumer_mappings
from stateholder_codegen.pipeline import CodegenPipeline, GenerationResult
from stateholder_codegen.settings import GeneratorSettings
from stateholder_codegen.type_signatures import (
    FunctionType,
    GenericType,
    NullableType,
    ParseFailure,
    SimpleType,
    TypeSignature,
    UnitType,
    Wildcard,
    is_valid_type_signature,
    parse_type_signature,
)
from stateholder_codegen.validation import (
    ErrorKind,
    MetadataValidator,
    ValidationError,
    ValidationResult,
)

__all__ = [
    "ClassDescriptor",
    "CodegenPipeline",
    "ConsumerDescriptor",
    "ConsumerMapping",
    "ConsumerMappings",
    "DescriptorValidationError",
    "ErrorKind",
    "FactoryParameter",
    "FunctionType",
    "GenerationResult",
    "GeneratorSettings",
    "GenericType",
    "InvalidGenerationInputError",
    "MetadataValidator",
    "ModuleCodeGenerator",
    "NullableType",
    "ParameterDescriptor",
    "ParseFailure",
    "RegistrationAnalysis",
    "RegistrationAnalyzer",
    "SharedPropertyDescriptor",
    "SharedStateLookup",
    "SimpleType",
    "StateHolderCodegenError",
    "TypeSignature",
    "UnitType",
    "ValidationError",
    "ValidationResult",
    "Wildcard",
    "build_consumer_mappings",
    "is_valid_type_signature",
    "parse_type_signature",
]
