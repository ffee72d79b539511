"""Shared pytest fixtures for refract tests."""

from collections.abc import Callable

import pytest
from dotenv import load_dotenv
from hypothesis import settings

from refract.core.config import reload_config
from refract.core.models import AnnotationDef, MethodDef, TypeDef, TypeKind, Universe, Visibility
from refract.types.registry import TypeRegistry

# Load environment variables from .env file
load_dotenv()

# Configure hypothesis for property-based testing
settings.register_profile("ci", max_examples=100, deadline=None)
settings.register_profile("dev", max_examples=20, deadline=None)
settings.load_profile("dev")


def _m(name: str, *parameters: str, **kwargs) -> MethodDef:
    return MethodDef(name=name, parameters=list(parameters), **kwargs)


def _marker(name: str, **attributes) -> AnnotationDef:
    return AnnotationDef(name=name, attributes=attributes)


def build_sample_universe() -> Universe:
    """Universe exercising every resolution mode."""
    universe = Universe()
    # Overload sets
    universe.add(
        TypeDef(
            qualified_name="pkg.Sample",
            methods=[_m("f", "Object"), _m("f", "String")],
        )
    )
    universe.add(TypeDef(qualified_name="pkg.IntSample", methods=[_m("f", "int")]))

    # Accessibility
    universe.add(
        TypeDef(qualified_name="pkg.Api", kind=TypeKind.INTERFACE, methods=[_m("run", "String")])
    )
    universe.add(TypeDef(qualified_name="pkg.Base", methods=[_m("work"), _m("ping")]))
    universe.add(
        TypeDef(
            qualified_name="pkg.Hidden",
            visibility=Visibility.PACKAGE,
            superclass="pkg.Base",
            interfaces=["pkg.Api"],
            methods=[
                _m("run", "String"),
                _m("work"),
                _m("secret"),
                _m("helper", visibility=Visibility.PRIVATE),
            ],
        )
    )

    # Hierarchy search and ambiguity
    universe.add(TypeDef(qualified_name="pkg.Parent", methods=[_m("g", "Object")]))
    universe.add(
        TypeDef(
            qualified_name="pkg.Child",
            superclass="pkg.Parent",
            methods=[
                _m("g", "Object"),
                _m("h", "Object", "String"),
                _m("h", "String", "Object"),
                _m("k", "Number", visibility=Visibility.PRIVATE),
            ],
        )
    )

    # Varargs
    universe.add(
        TypeDef(
            qualified_name="pkg.Fmt",
            methods=[
                _m("join", "String", "Object[]", varargs=True, is_static=True),
                _m("sum", "int[]", varargs=True, is_static=True, return_type="int"),
            ],
        )
    )

    # Generic overrides
    universe.add(
        TypeDef(
            qualified_name="pkg.Source",
            kind=TypeKind.INTERFACE,
            type_parameters=["T"],
            methods=[_m("get", "T")],
        )
    )
    universe.add(
        TypeDef(
            qualified_name="pkg.Box",
            type_parameters=["T"],
            methods=[_m("get", "T"), _m("put", "T")],
        )
    )
    universe.add(
        TypeDef(
            qualified_name="pkg.StringBox",
            superclass="pkg.Box<String>",
            interfaces=["pkg.Source<String>"],
            methods=[_m("get", "String")],
        )
    )
    universe.add(
        TypeDef(
            qualified_name="pkg.IntBox",
            superclass="pkg.Box<Integer>",
            methods=[_m("get", "String")],
        )
    )

    # Annotations
    universe.add(
        TypeDef(
            qualified_name="pkg.Service",
            kind=TypeKind.INTERFACE,
            methods=[_m("handle", "String", annotations=[_marker("pkg.Endpoint", path="/a")])],
        )
    )
    universe.add(
        TypeDef(
            qualified_name="pkg.BaseService",
            interfaces=["pkg.Service"],
            methods=[
                _m("handle", "String"),
                _m("audit", annotations=[_marker("pkg.Audited")]),
                _m(
                    "internal",
                    visibility=Visibility.PRIVATE,
                    annotations=[_marker("pkg.Audited")],
                ),
            ],
        )
    )
    universe.add(
        TypeDef(
            qualified_name="pkg.UserService",
            superclass="pkg.BaseService",
            methods=[
                _m("handle", "String"),
                _m("stop", annotations=[_marker("pkg.Endpoint", path="/stop")]),
            ],
        )
    )
    return universe


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Isolate tests from REFRACT_* variables and the cached configuration."""
    import os

    for key in list(os.environ):
        if key.startswith("REFRACT_"):
            monkeypatch.delenv(key, raising=False)
    reload_config()
    yield
    reload_config()


@pytest.fixture
def registry() -> TypeRegistry:
    """Registry holding only the built-in types."""
    return TypeRegistry(builtins=True)


@pytest.fixture
def sample_universe() -> Universe:
    return build_sample_universe()


@pytest.fixture
def sample_registry(sample_universe: Universe) -> TypeRegistry:
    """Registry holding the built-in types and the sample universe."""
    return TypeRegistry.from_universe(sample_universe, builtins=True)


@pytest.fixture
def make_registry() -> Callable[..., TypeRegistry]:
    """Factory building a registry from type definitions."""

    def factory(*type_defs: TypeDef) -> TypeRegistry:
        universe = Universe()
        for type_def in type_defs:
            universe.add(type_def)
        return TypeRegistry.from_universe(universe, builtins=True)

    return factory
