"""Declarative type models for refract.

A Universe describes a set of types and their methods the way a host's
reflective metadata would expose them. Type references are written as type
expressions (``java.lang.String``, ``T``, ``Box<? extends T>``, ``int[]``) and
resolved when a TypeRegistry is built from the universe.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TypeKind(str, Enum):
    """Kind of type definition."""

    CLASS = "CLASS"
    INTERFACE = "INTERFACE"
    PRIMITIVE = "PRIMITIVE"
    ARRAY = "ARRAY"


class Visibility(str, Enum):
    """Visibility/access modifier."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"
    PACKAGE = "package"  # Java default access


class AnnotationDef(BaseModel):
    """Annotation (marker) attached to a method."""

    name: str = Field(..., description="Qualified annotation type name")
    attributes: dict[str, Any] = Field(default_factory=dict, description="Annotation values")


class MethodDef(BaseModel):
    """Method declaration."""

    name: str = Field(..., description="Simple method name")
    parameters: list[str] = Field(
        default_factory=list, description="Parameter type expressions, in order"
    )
    varargs: bool = Field(False, description="Last parameter is variadic")
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False
    return_type: str | None = Field(None, description="Return type expression")
    annotations: list[AnnotationDef] = Field(default_factory=list)


class TypeDef(BaseModel):
    """Class or interface declaration."""

    qualified_name: str = Field(..., description="Fully qualified name")
    kind: TypeKind = TypeKind.CLASS
    visibility: Visibility = Visibility.PUBLIC
    type_parameters: list[str] = Field(
        default_factory=list, description="Declared type variable names"
    )
    superclass: str | None = Field(
        None, description="Superclass type expression (defaults to java.lang.Object)"
    )
    interfaces: list[str] = Field(
        default_factory=list, description="Implemented/extended interface type expressions"
    )
    methods: list[MethodDef] = Field(default_factory=list)

    @property
    def simple_name(self) -> str:
        return self.qualified_name.rsplit(".", 1)[-1]


class Universe(BaseModel):
    """Root structure: every user type known to a registry."""

    version: str = "1.0"
    types: dict[str, TypeDef] = Field(default_factory=dict)

    def add(self, type_def: TypeDef) -> Universe:
        """Register a type definition keyed by its qualified name."""
        self.types[type_def.qualified_name] = type_def
        return self
