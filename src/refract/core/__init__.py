"""Core module containing universe models, configuration, serializer, and validator."""

from refract.core.errors import (
    AmbiguousMethodError,
    IllegalAccessError,
    InvalidArgumentError,
    InvocationError,
    NoSuchMethodError,
    RefractError,
    RegistryError,
    TypeExpressionError,
)
from refract.core.models import (
    AnnotationDef,
    MethodDef,
    TypeDef,
    TypeKind,
    Universe,
    Visibility,
)
from refract.core.serializer import (
    SerializationError,
    deserialize,
    deserialize_from_dict,
    load_universe,
    serialize,
    serialize_to_dict,
)
from refract.core.validator import (
    ValidationError,
    ValidationErrorType,
    ValidationResult,
    validate_universe,
)

__all__ = [
    "AmbiguousMethodError",
    "AnnotationDef",
    "IllegalAccessError",
    "InvalidArgumentError",
    "InvocationError",
    "MethodDef",
    "NoSuchMethodError",
    "RefractError",
    "RegistryError",
    "SerializationError",
    "TypeDef",
    "TypeExpressionError",
    "TypeKind",
    "Universe",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
    "Visibility",
    "deserialize",
    "deserialize_from_dict",
    "load_universe",
    "serialize",
    "serialize_to_dict",
    "validate_universe",
]
