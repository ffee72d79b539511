"""Property tests for the fit distance metric.

For any pair of built-in types, the per-position cost SHALL be 0 for identical
types, 1 for strict assignability and 2 when only boxing makes the types
compatible; incompatible pairs SHALL report -1.
"""

from __future__ import annotations

from hypothesis import given, strategies as st

from refract.reflect.matching import distance
from refract.types.compat import is_assignable
from refract.types.registry import TypeRegistry

REGISTRY = TypeRegistry(builtins=True)

TYPE_NAMES = [
    "boolean",
    "byte",
    "char",
    "short",
    "int",
    "long",
    "float",
    "double",
    "java.lang.Object",
    "java.lang.String",
    "java.lang.CharSequence",
    "java.lang.Number",
    "java.lang.Integer",
    "java.lang.Long",
    "java.lang.Double",
    "java.lang.Character",
    "java.io.Serializable",
    "java.lang.Object[]",
    "java.lang.String[]",
    "int[]",
]

type_names = st.sampled_from(TYPE_NAMES)
maybe_null = st.one_of(st.none(), type_names)


def _get(name: str | None):
    return None if name is None else REGISTRY.get(name)


@given(actual=maybe_null, formal=type_names)
def test_single_position_cost(actual: str | None, formal: str) -> None:
    """Each position costs 0, 1 or 2 according to how the types relate."""
    source, target = _get(actual), _get(formal)
    cost = distance([source], [target])

    if not is_assignable(source, target, autoboxing=True):
        assert cost == -1
    elif source is None or source is target:
        assert cost == 0
    elif is_assignable(source, target, autoboxing=False):
        assert cost == 1
    else:
        assert cost == 2


@given(actual=maybe_null, formal=type_names)
def test_strict_mode_never_needs_boxing(actual: str | None, formal: str) -> None:
    """Without autoboxing the cost is never 2."""
    cost = distance([_get(actual)], [_get(formal)], autoboxing=False)
    assert cost in (-1, 0, 1)


@given(pairs=st.lists(st.tuples(maybe_null, type_names), min_size=1, max_size=4))
def test_cost_is_additive(pairs: list[tuple[str | None, str]]) -> None:
    """A signature's cost is the sum of its positions when all are compatible."""
    actual = [_get(a) for a, _ in pairs]
    formal = [_get(f) for _, f in pairs]
    costs = [distance([a], [f]) for a, f in zip(actual, formal)]

    total = distance(actual, formal)
    if any(c < 0 for c in costs):
        assert total == -1
    else:
        assert total == sum(costs)
