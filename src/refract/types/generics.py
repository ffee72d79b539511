"""Generic type shapes and the operations needed to compare them.

Type expressions used in declarations are parsed into a closed set of
immutable shapes:

- ``ClassRef``: a concrete (possibly primitive) type, ``java.lang.String``
- ``TypeVariable``: a type parameter of a declaring type, ``T``
- ``ParameterizedType``: a generic type applied to arguments, ``Box<T>``
- ``WildcardType``: ``?``, ``? extends T``, ``? super T``
- ``GenericArrayType``: an array of any shape, ``T[]``

Every operation over shapes is a ``TypeVisitor``. Structural equality is plain
dataclass equality once variables have been substituted.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from refract.core.errors import TypeExpressionError

OBJECT_NAME = "java.lang.Object"

R = TypeVar("R")


@dataclass(frozen=True)
class ClassRef:
    """Concrete type reference."""

    name: str

    def accept(self, visitor: TypeVisitor[R]) -> R:
        return visitor.visit_class_ref(self)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class TypeVariable:
    """Type variable, identified by its name and the type that declares it."""

    name: str
    owner: str

    def accept(self, visitor: TypeVisitor[R]) -> R:
        return visitor.visit_variable(self)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ParameterizedType:
    """Generic type applied to type arguments."""

    raw: str
    arguments: tuple[GenericType, ...]

    def accept(self, visitor: TypeVisitor[R]) -> R:
        return visitor.visit_parameterized(self)

    def __str__(self) -> str:
        return f"{self.raw}<{', '.join(str(a) for a in self.arguments)}>"


@dataclass(frozen=True)
class WildcardType:
    """Wildcard type argument with its upper and lower bounds."""

    upper_bounds: tuple[GenericType, ...] = (ClassRef(OBJECT_NAME),)
    lower_bounds: tuple[GenericType, ...] = ()

    def accept(self, visitor: TypeVisitor[R]) -> R:
        return visitor.visit_wildcard(self)

    def __str__(self) -> str:
        if self.lower_bounds:
            return "? super " + " & ".join(str(b) for b in self.lower_bounds)
        if self.upper_bounds == (ClassRef(OBJECT_NAME),):
            return "?"
        return "? extends " + " & ".join(str(b) for b in self.upper_bounds)


@dataclass(frozen=True)
class GenericArrayType:
    """Array whose component may be any shape."""

    component: GenericType

    def accept(self, visitor: TypeVisitor[R]) -> R:
        return visitor.visit_array(self)

    def __str__(self) -> str:
        return f"{self.component}[]"


GenericType = Union[ClassRef, TypeVariable, ParameterizedType, WildcardType, GenericArrayType]


class TypeVisitor(Generic[R]):
    """Base visitor over generic type shapes."""

    def visit(self, shape: GenericType) -> R:
        return shape.accept(self)

    def visit_class_ref(self, shape: ClassRef) -> R:
        raise NotImplementedError

    def visit_variable(self, shape: TypeVariable) -> R:
        raise NotImplementedError

    def visit_parameterized(self, shape: ParameterizedType) -> R:
        raise NotImplementedError

    def visit_wildcard(self, shape: WildcardType) -> R:
        raise NotImplementedError

    def visit_array(self, shape: GenericArrayType) -> R:
        raise NotImplementedError


class Substitution(TypeVisitor[GenericType]):
    """Replace bound type variables, following chains of bindings.

    Variables without a binding are left in place.
    """

    def __init__(self, bindings: Mapping[TypeVariable, GenericType]) -> None:
        self._bindings = bindings
        self._active: set[TypeVariable] = set()

    def visit_class_ref(self, shape: ClassRef) -> GenericType:
        return shape

    def visit_variable(self, shape: TypeVariable) -> GenericType:
        bound = self._bindings.get(shape)
        if bound is None or bound == shape or shape in self._active:
            return shape
        self._active.add(shape)
        try:
            return self.visit(bound)
        finally:
            self._active.discard(shape)

    def visit_parameterized(self, shape: ParameterizedType) -> GenericType:
        return ParameterizedType(shape.raw, tuple(self.visit(a) for a in shape.arguments))

    def visit_wildcard(self, shape: WildcardType) -> GenericType:
        return WildcardType(
            tuple(self.visit(b) for b in shape.upper_bounds),
            tuple(self.visit(b) for b in shape.lower_bounds),
        )

    def visit_array(self, shape: GenericArrayType) -> GenericType:
        return GenericArrayType(self.visit(shape.component))


class Erasure(TypeVisitor[str]):
    """Compute the erased type name of a shape.

    A variable erases to the erasure of its first bound, or ``java.lang.Object``.
    """

    def __init__(self, bounds: Mapping[TypeVariable, tuple[GenericType, ...]] | None = None) -> None:
        self._bounds = bounds or {}
        self._active: set[TypeVariable] = set()

    def visit_class_ref(self, shape: ClassRef) -> str:
        return shape.name

    def visit_variable(self, shape: TypeVariable) -> str:
        bounds = self._bounds.get(shape, ())
        if not bounds or shape in self._active:
            return OBJECT_NAME
        self._active.add(shape)
        try:
            return self.visit(bounds[0])
        finally:
            self._active.discard(shape)

    def visit_parameterized(self, shape: ParameterizedType) -> str:
        return shape.raw

    def visit_wildcard(self, shape: WildcardType) -> str:
        return self.visit(shape.upper_bounds[0]) if shape.upper_bounds else OBJECT_NAME

    def visit_array(self, shape: GenericArrayType) -> str:
        return self.visit(shape.component) + "[]"


def substitute(shape: GenericType, bindings: Mapping[TypeVariable, GenericType]) -> GenericType:
    """Apply ``bindings`` to ``shape``."""
    return Substitution(bindings).visit(shape)


def erase(
    shape: GenericType, bounds: Mapping[TypeVariable, tuple[GenericType, ...]] | None = None
) -> str:
    """Return the erased type name of ``shape``."""
    return Erasure(bounds).visit(shape)


def type_equals(left: GenericType, right: GenericType) -> bool:
    """Structural equality of two shapes."""
    return left == right


def raw_name(shape: GenericType) -> str | None:
    """Raw class name of a class reference or parameterized type."""
    if isinstance(shape, ClassRef):
        return shape.name
    if isinstance(shape, ParameterizedType):
        return shape.raw
    return None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

_PUNCTUATION = "<>,[]?&"


class TypeExpressionParser:
    """Recursive-descent parser for type expressions.

    Grammar::

        type      := base ("[" "]")*
        base      := wildcard | name ("<" type ("," type)* ">")?
        wildcard  := "?" (("extends" | "super") type ("&" type)*)?
        name      := identifier ("." identifier)*

    Args:
        variables: Type variable names in scope, mapped to their owner.
        resolve: Optional callback that canonicalizes class names.
    """

    def __init__(
        self,
        variables: Mapping[str, str] | None = None,
        resolve: Callable[[str], str] | None = None,
    ) -> None:
        self._variables = dict(variables or {})
        self._resolve = resolve or (lambda name: name)
        self._tokens: list[tuple[str, int]] = []
        self._pos = 0
        self._text = ""

    def parse(self, text: str) -> GenericType:
        self._text = text
        self._tokens = self._tokenize(text)
        self._pos = 0
        if not self._tokens:
            raise TypeExpressionError(text, 0, "empty expression")
        shape = self._parse_type(allow_wildcard=False)
        if self._pos != len(self._tokens):
            token, offset = self._tokens[self._pos]
            raise TypeExpressionError(text, offset, f"unexpected {token!r}")
        return shape

    def parse_parameter(self, text: str) -> tuple[str, tuple[GenericType, ...]]:
        """Parse a type parameter declaration such as ``T extends Number & Comparable<T>``."""
        self._text = text
        self._tokens = self._tokenize(text)
        self._pos = 0
        name = self._expect_identifier()
        if "." in name:
            raise TypeExpressionError(text, 0, "type parameter names cannot be qualified")
        bounds: list[GenericType] = []
        if self._peek() == "extends":
            self._advance()
            bounds.append(self._parse_type(allow_wildcard=False))
            while self._peek() == "&":
                self._advance()
                bounds.append(self._parse_type(allow_wildcard=False))
        if self._pos != len(self._tokens):
            token, offset = self._tokens[self._pos]
            raise TypeExpressionError(text, offset, f"unexpected {token!r}")
        return name, tuple(bounds)

    def _tokenize(self, text: str) -> list[tuple[str, int]]:
        tokens: list[tuple[str, int]] = []
        i = 0
        while i < len(text):
            ch = text[i]
            if ch.isspace():
                i += 1
            elif ch in _PUNCTUATION:
                tokens.append((ch, i))
                i += 1
            elif ch.isalnum() or ch in "_$":
                start = i
                while i < len(text) and (text[i].isalnum() or text[i] in "_$."):
                    i += 1
                word = text[start:i]
                if word.endswith(".") or ".." in word or word[0].isdigit():
                    raise TypeExpressionError(text, start, f"malformed name {word!r}")
                tokens.append((word, start))
            else:
                raise TypeExpressionError(text, i, f"unexpected character {ch!r}")
        return tokens

    def _peek(self) -> str | None:
        return self._tokens[self._pos][0] if self._pos < len(self._tokens) else None

    def _offset(self) -> int:
        return self._tokens[self._pos][1] if self._pos < len(self._tokens) else len(self._text)

    def _advance(self) -> str:
        token = self._tokens[self._pos][0]
        self._pos += 1
        return token

    def _expect(self, token: str) -> None:
        if self._peek() != token:
            raise TypeExpressionError(self._text, self._offset(), f"expected {token!r}")
        self._advance()

    def _expect_identifier(self) -> str:
        token = self._peek()
        if token is None or token in _PUNCTUATION:
            raise TypeExpressionError(self._text, self._offset(), "expected a type name")
        return self._advance()

    def _parse_type(self, allow_wildcard: bool) -> GenericType:
        if self._peek() == "?":
            if not allow_wildcard:
                raise TypeExpressionError(
                    self._text, self._offset(), "wildcards are only allowed as type arguments"
                )
            shape: GenericType = self._parse_wildcard()
        else:
            shape = self._parse_named()
        while self._peek() == "[":
            self._advance()
            self._expect("]")
            shape = GenericArrayType(shape)
        return shape

    def _parse_wildcard(self) -> WildcardType:
        self._expect("?")
        keyword = self._peek()
        if keyword not in ("extends", "super"):
            return WildcardType()
        self._advance()
        bounds = [self._parse_type(allow_wildcard=False)]
        while self._peek() == "&":
            self._advance()
            bounds.append(self._parse_type(allow_wildcard=False))
        if keyword == "extends":
            return WildcardType(upper_bounds=tuple(bounds))
        return WildcardType(lower_bounds=tuple(bounds))

    def _parse_named(self) -> GenericType:
        offset = self._offset()
        name = self._expect_identifier()
        if self._peek() != "<":
            if name in self._variables:
                return TypeVariable(name, self._variables[name])
            return ClassRef(self._resolve(name))
        if name in self._variables:
            raise TypeExpressionError(self._text, offset, f"type variable {name} cannot take arguments")
        self._advance()
        arguments = [self._parse_type(allow_wildcard=True)]
        while self._peek() == ",":
            self._advance()
            arguments.append(self._parse_type(allow_wildcard=True))
        self._expect(">")
        return ParameterizedType(self._resolve(name), tuple(arguments))


def parse_type(
    text: str,
    variables: Mapping[str, str] | None = None,
    resolve: Callable[[str], str] | None = None,
) -> GenericType:
    """Parse a single type expression."""
    return TypeExpressionParser(variables, resolve).parse(text)
