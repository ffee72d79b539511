"""Universe validation module.

This module provides validation for Universe structures, ensuring every type
expression parses, every referenced type exists, and the inheritance graph is
well formed before a registry is built from it.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from refract.core.errors import TypeExpressionError
from refract.core.models import TypeDef, TypeKind, Universe
from refract.types.generics import (
    ClassRef,
    Erasure,
    GenericArrayType,
    GenericType,
    ParameterizedType,
    TypeExpressionParser,
    TypeVariable,
    TypeVisitor,
    WildcardType,
    raw_name,
)


class ValidationErrorType(str, Enum):
    """Types of validation errors."""

    DANGLING_TYPE_REF = "dangling_type_reference"
    INVALID_TYPE_EXPRESSION = "invalid_type_expression"
    INVALID_SUPERCLASS = "invalid_superclass"
    INVALID_INTERFACE = "invalid_interface"
    TYPE_ARGUMENT_MISMATCH = "type_argument_mismatch"
    INVALID_SELF_REF = "invalid_self_reference"
    INHERITANCE_CYCLE = "inheritance_cycle"
    HIERARCHY_TOO_DEEP = "hierarchy_too_deep"
    INVALID_VARARGS = "invalid_varargs"
    DUPLICATE_METHOD = "duplicate_method"


@dataclass(frozen=True)
class KnownType:
    """Kind and type-parameter count of a type defined outside the universe."""

    kind: TypeKind
    arity: int = 0


@dataclass
class ValidationError:
    """A single validation error."""

    error_type: ValidationErrorType
    entity_id: str
    field_name: str
    invalid_ref: str
    message: str


@dataclass
class ValidationResult:
    """Result of universe validation."""

    is_valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    def add_error(
        self,
        error_type: ValidationErrorType,
        entity_id: str,
        field_name: str,
        invalid_ref: str,
        message: str,
    ) -> None:
        """Add a validation error."""
        self.errors.append(
            ValidationError(
                error_type=error_type,
                entity_id=entity_id,
                field_name=field_name,
                invalid_ref=invalid_ref,
                message=message,
            )
        )
        self.is_valid = False


class _ReferenceChecker(TypeVisitor[list[tuple[ValidationErrorType, str, str]]]):
    """Report unknown type names and wrong type-argument counts in a shape."""

    def __init__(self, kinds: Mapping[str, KnownType]) -> None:
        self._kinds = kinds

    def visit_class_ref(self, shape: ClassRef) -> list[tuple[ValidationErrorType, str, str]]:
        if shape.name not in self._kinds:
            return [(ValidationErrorType.DANGLING_TYPE_REF, shape.name, f"unknown type '{shape.name}'")]
        return []

    def visit_variable(self, shape: TypeVariable) -> list[tuple[ValidationErrorType, str, str]]:
        return []

    def visit_parameterized(
        self, shape: ParameterizedType
    ) -> list[tuple[ValidationErrorType, str, str]]:
        problems: list[tuple[ValidationErrorType, str, str]] = []
        known = self._kinds.get(shape.raw)
        if known is None:
            problems.append(
                (ValidationErrorType.DANGLING_TYPE_REF, shape.raw, f"unknown type '{shape.raw}'")
            )
        elif known.arity != len(shape.arguments):
            problems.append(
                (
                    ValidationErrorType.TYPE_ARGUMENT_MISMATCH,
                    str(shape),
                    f"'{shape.raw}' takes {known.arity} type argument(s), got {len(shape.arguments)}",
                )
            )
        for argument in shape.arguments:
            known_argument = (
                self._kinds.get(argument.name) if isinstance(argument, ClassRef) else None
            )
            if known_argument is not None and known_argument.kind is TypeKind.PRIMITIVE:
                problems.append(
                    (
                        ValidationErrorType.TYPE_ARGUMENT_MISMATCH,
                        str(shape),
                        f"primitive '{argument.name}' cannot be a type argument",
                    )
                )
            problems.extend(self.visit(argument))
        return problems

    def visit_wildcard(self, shape: WildcardType) -> list[tuple[ValidationErrorType, str, str]]:
        problems: list[tuple[ValidationErrorType, str, str]] = []
        for bound in shape.upper_bounds + shape.lower_bounds:
            problems.extend(self.visit(bound))
        return problems

    def visit_array(self, shape: GenericArrayType) -> list[tuple[ValidationErrorType, str, str]]:
        return self.visit(shape.component)


def validate_universe(
    universe: Universe,
    known: Mapping[str, KnownType] | None = None,
    resolve: Callable[[str], str] | None = None,
    max_depth: int | None = None,
) -> ValidationResult:
    """Validate a Universe for reference integrity.

    Args:
        universe: The universe to validate.
        known: Types defined outside the universe (e.g. built-in types).
        resolve: Canonicalizes short type names (e.g. ``String``).
        max_depth: Maximum superclass chain length; defaults to the configured value.

    Returns:
        ValidationResult containing validation status and any errors found.
    """
    if max_depth is None:
        from refract.core.config import get_config

        max_depth = get_config().max_hierarchy_depth

    result = ValidationResult(is_valid=True)
    kinds: dict[str, KnownType] = dict(known or {})
    for name, type_def in universe.types.items():
        kinds[name] = KnownType(type_def.kind, len(type_def.type_parameters))
    checker = _ReferenceChecker(kinds)

    supertypes: dict[str, list[str]] = {}
    superclass_of: dict[str, str] = {}
    for type_id, type_def in universe.types.items():
        if type_def.kind in (TypeKind.PRIMITIVE, TypeKind.ARRAY):
            result.add_error(
                error_type=ValidationErrorType.INVALID_SUPERCLASS,
                entity_id=type_id,
                field_name="kind",
                invalid_ref=type_def.kind.value,
                message=f"Type '{type_id}' cannot be declared as {type_def.kind.value}",
            )
            continue
        parser, bounds = _type_parser(type_def, resolve, result)
        parents = _validate_supertypes(type_def, parser, checker, kinds, result, superclass_of)
        supertypes[type_id] = parents
        _validate_methods(type_def, parser, checker, bounds, result)

    _check_cycles(supertypes, result)
    if result.is_valid:
        _check_depth(superclass_of, max_depth, result)
    return result


def _record(
    result: ValidationResult,
    problems: list[tuple[ValidationErrorType, str, str]],
    type_id: str,
    field_name: str,
) -> None:
    for error_type, ref, detail in problems:
        result.add_error(
            error_type=error_type,
            entity_id=type_id,
            field_name=field_name,
            invalid_ref=ref,
            message=f"Type '{type_id}' {field_name}: {detail}",
        )


def _parse(
    parser: TypeExpressionParser,
    text: str,
    type_id: str,
    field_name: str,
    result: ValidationResult,
) -> GenericType | None:
    try:
        return parser.parse(text)
    except TypeExpressionError as e:
        result.add_error(
            error_type=ValidationErrorType.INVALID_TYPE_EXPRESSION,
            entity_id=type_id,
            field_name=field_name,
            invalid_ref=text,
            message=f"Type '{type_id}' {field_name}: {e}",
        )
        return None


def _type_parser(
    type_def: TypeDef,
    resolve: Callable[[str], str] | None,
    result: ValidationResult,
) -> tuple[TypeExpressionParser, dict[TypeVariable, tuple[GenericType, ...]]]:
    """Parse the type parameters of ``type_def`` and return a parser scoped to them."""
    type_id = type_def.qualified_name
    names: dict[str, str] = {}
    for declaration in type_def.type_parameters:
        name = declaration.split(" ", 1)[0].strip()
        names[name] = type_id
    parser = TypeExpressionParser(names, resolve)
    bounds: dict[TypeVariable, tuple[GenericType, ...]] = {}
    for declaration in type_def.type_parameters:
        try:
            name, declared = parser.parse_parameter(declaration)
        except TypeExpressionError as e:
            result.add_error(
                error_type=ValidationErrorType.INVALID_TYPE_EXPRESSION,
                entity_id=type_id,
                field_name="type_parameters",
                invalid_ref=declaration,
                message=f"Type '{type_id}' type_parameters: {e}",
            )
            continue
        bounds[TypeVariable(name, type_id)] = declared
    return parser, bounds


def _validate_supertypes(
    type_def: TypeDef,
    parser: TypeExpressionParser,
    checker: _ReferenceChecker,
    kinds: Mapping[str, KnownType],
    result: ValidationResult,
    superclass_of: dict[str, str],
) -> list[str]:
    type_id = type_def.qualified_name
    parents: list[str] = []

    if type_def.superclass is not None:
        if type_def.kind is TypeKind.INTERFACE:
            result.add_error(
                error_type=ValidationErrorType.INVALID_SUPERCLASS,
                entity_id=type_id,
                field_name="superclass",
                invalid_ref=type_def.superclass,
                message=f"Interface '{type_id}' cannot declare a superclass",
            )
        shape = _parse(parser, type_def.superclass, type_id, "superclass", result)
        if shape is not None:
            problems = checker.visit(shape)
            _record(result, problems, type_id, "superclass")
            parent = raw_name(shape)
            if parent is None:
                result.add_error(
                    error_type=ValidationErrorType.INVALID_SUPERCLASS,
                    entity_id=type_id,
                    field_name="superclass",
                    invalid_ref=type_def.superclass,
                    message=f"Type '{type_id}' cannot extend '{type_def.superclass}'",
                )
            elif parent == type_id:
                result.add_error(
                    error_type=ValidationErrorType.INVALID_SELF_REF,
                    entity_id=type_id,
                    field_name="superclass",
                    invalid_ref=parent,
                    message=f"Type '{type_id}' cannot extend itself",
                )
            elif not problems and kinds[parent].kind is not TypeKind.CLASS:
                result.add_error(
                    error_type=ValidationErrorType.INVALID_SUPERCLASS,
                    entity_id=type_id,
                    field_name="superclass",
                    invalid_ref=parent,
                    message=f"Type '{type_id}' cannot extend {kinds[parent].kind.value.lower()} '{parent}'",
                )
            else:
                parents.append(parent)
                superclass_of[type_id] = parent

    for expression in type_def.interfaces:
        shape = _parse(parser, expression, type_id, "interfaces", result)
        if shape is None:
            continue
        problems = checker.visit(shape)
        _record(result, problems, type_id, "interfaces")
        parent = raw_name(shape)
        if parent == type_id:
            result.add_error(
                error_type=ValidationErrorType.INVALID_SELF_REF,
                entity_id=type_id,
                field_name="interfaces",
                invalid_ref=parent,
                message=f"Type '{type_id}' cannot implement itself",
            )
        elif parent is None or (not problems and kinds[parent].kind is not TypeKind.INTERFACE):
            result.add_error(
                error_type=ValidationErrorType.INVALID_INTERFACE,
                entity_id=type_id,
                field_name="interfaces",
                invalid_ref=expression,
                message=f"Type '{type_id}' lists non-interface '{expression}' as an interface",
            )
        else:
            parents.append(parent)
    return parents


def _validate_methods(
    type_def: TypeDef,
    parser: TypeExpressionParser,
    checker: _ReferenceChecker,
    bounds: Mapping[TypeVariable, tuple[GenericType, ...]],
    result: ValidationResult,
) -> None:
    type_id = type_def.qualified_name
    erasure = Erasure(bounds)
    seen: set[tuple[str, tuple[str, ...]]] = set()

    for method in type_def.methods:
        field_name = f"methods.{method.name}"
        shapes: list[GenericType] = []
        for expression in method.parameters:
            shape = _parse(parser, expression, type_id, field_name, result)
            if shape is None:
                break
            _record(result, checker.visit(shape), type_id, field_name)
            shapes.append(shape)
        else:
            if method.varargs and (not shapes or not isinstance(shapes[-1], GenericArrayType)):
                result.add_error(
                    error_type=ValidationErrorType.INVALID_VARARGS,
                    entity_id=type_id,
                    field_name=field_name,
                    invalid_ref=",".join(method.parameters),
                    message=f"Type '{type_id}' varargs method '{method.name}' must end with an array parameter",
                )
            key = (method.name, tuple(erasure.visit(s) for s in shapes))
            if key in seen:
                result.add_error(
                    error_type=ValidationErrorType.DUPLICATE_METHOD,
                    entity_id=type_id,
                    field_name=field_name,
                    invalid_ref=f"{method.name}({','.join(key[1])})",
                    message=f"Type '{type_id}' declares '{method.name}({','.join(key[1])})' twice",
                )
            seen.add(key)


def _check_cycles(supertypes: Mapping[str, list[str]], result: ValidationResult) -> None:
    """Detect inheritance cycles among universe types."""
    visiting: set[str] = set()
    done: set[str] = set()
    reported: set[str] = set()

    def visit(type_id: str, path: list[str]) -> None:
        if type_id in done:
            return
        if type_id in visiting:
            cycle = path[path.index(type_id):] + [type_id]
            if type_id not in reported:
                reported.update(cycle)
                result.add_error(
                    error_type=ValidationErrorType.INHERITANCE_CYCLE,
                    entity_id=type_id,
                    field_name="superclass",
                    invalid_ref=" -> ".join(cycle),
                    message=f"Inheritance cycle: {' -> '.join(cycle)}",
                )
            return
        visiting.add(type_id)
        for parent in supertypes.get(type_id, []):
            visit(parent, path + [type_id])
        visiting.discard(type_id)
        done.add(type_id)

    for type_id in sorted(supertypes):
        visit(type_id, [])


def _check_depth(superclass_of: Mapping[str, str], max_depth: int, result: ValidationResult) -> None:
    for type_id in sorted(superclass_of):
        depth = 0
        current: str | None = type_id
        while current in superclass_of:
            current = superclass_of[current]
            depth += 1
            if depth > max_depth:
                result.add_error(
                    error_type=ValidationErrorType.HIERARCHY_TOO_DEEP,
                    entity_id=type_id,
                    field_name="superclass",
                    invalid_ref=str(depth),
                    message=f"Type '{type_id}' has more than {max_depth} superclasses",
                )
                break
