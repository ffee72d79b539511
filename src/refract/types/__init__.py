"""Type descriptors, generic type shapes, compatibility rules and the type registry."""

from refract.types.compat import (
    all_interfaces,
    all_superclasses,
    all_superclasses_and_interfaces,
    hierarchy,
    is_assignable,
    is_assignable_all,
    primitive_to_wrapper,
    type_arguments,
    wrapper_to_primitive,
)
from refract.types.descriptors import (
    ClassDescriptor,
    MethodDescriptor,
    TypedArray,
    TypeDescriptor,
)
from refract.types.generics import (
    ClassRef,
    GenericArrayType,
    GenericType,
    ParameterizedType,
    TypeVariable,
    TypeVisitor,
    WildcardType,
    parse_type,
)
from refract.types.members import declared_method, public_method, public_methods

__all__ = [
    "ClassDescriptor",
    "ClassRef",
    "GenericArrayType",
    "GenericType",
    "MethodDescriptor",
    "ParameterizedType",
    "TypeDescriptor",
    "TypeVariable",
    "TypeVisitor",
    "TypedArray",
    "WildcardType",
    "all_interfaces",
    "all_superclasses",
    "all_superclasses_and_interfaces",
    "declared_method",
    "hierarchy",
    "is_assignable",
    "is_assignable_all",
    "parse_type",
    "primitive_to_wrapper",
    "public_method",
    "public_methods",
    "type_arguments",
    "wrapper_to_primitive",
]
