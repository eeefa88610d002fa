from __future__ import annotations

import pytest

from monkey.runtime import MkArray, MkInteger, default_builtins
from tests.support.harness import run_program, run_runtime_case

ARRAY_SCENARIOS = [
    pytest.param("[1, 2 * 2, 3 + 3]", ("array", [1, 4, 6]), None, id="literal"),
    pytest.param("[]", ("array", []), None, id="empty"),
    pytest.param('[1, "two", true]', ("array", [1, "two", True]), None, id="mixed-kinds"),
    pytest.param("[[1, 2], [3]]", ("array", [[1, 2], [3]]), None, id="nested"),
    pytest.param("[1, 2, 3][0]", ("integer", 1), None, id="index-first"),
    pytest.param("[1, 2, 3][1]", ("integer", 2), None, id="index-middle"),
    pytest.param("[1, 2, 3][2]", ("integer", 3), None, id="index-last"),
    pytest.param("let i = 0; [1][i];", ("integer", 1), None, id="index-by-binding"),
    pytest.param("[1, 2, 3][1 + 1];", ("integer", 3), None, id="index-expression"),
    pytest.param("let myArray = [1, 2, 3]; myArray[2];", ("integer", 3), None, id="index-bound-array"),
    pytest.param(
        "let myArray = [1, 2, 3]; myArray[0] + myArray[1] + myArray[2];",
        ("integer", 6),
        None,
        id="index-sum",
    ),
    pytest.param(
        "let myArray = [1, 2, 3]; let i = myArray[0]; myArray[i]",
        ("integer", 2),
        None,
        id="index-from-element",
    ),
    pytest.param("[1, 2, 3][3]", ("null", None), None, id="index-past-end"),
    pytest.param("[1, 2, 3][-1]", ("null", None), None, id="index-negative"),
    pytest.param("[][0]", ("null", None), None, id="index-empty"),
    pytest.param("[[1, 2], [3]][0][1]", ("integer", 2), None, id="index-chained"),
    pytest.param("fn() { [7, 8] }()[1]", ("integer", 8), None, id="index-call-result"),
]

BUILTIN_SCENARIOS = [
    pytest.param('len("")', ("integer", 0), None, id="len-empty-string"),
    pytest.param('len("four")', ("integer", 4), None, id="len-string"),
    pytest.param('len("hello world")', ("integer", 11), None, id="len-string-space"),
    pytest.param("len([1, 2, 3])", ("integer", 3), None, id="len-array"),
    pytest.param("len([])", ("integer", 0), None, id="len-empty-array"),
    pytest.param("first([1, 2, 3])", ("integer", 1), None, id="first"),
    pytest.param("first([])", ("null", None), None, id="first-empty"),
    pytest.param("last([1, 2, 3])", ("integer", 3), None, id="last"),
    pytest.param("last([])", ("null", None), None, id="last-empty"),
    pytest.param("rest([1, 2, 3])", ("array", [2, 3]), None, id="rest"),
    pytest.param("let a = [1, 2, 3, 4]; rest(rest(a));", ("array", [3, 4]), None, id="rest-twice"),
    pytest.param("rest([4])", ("null", None), None, id="rest-single"),
    pytest.param("rest([])", ("null", None), None, id="rest-empty"),
    pytest.param("push([], 1)", ("array", [1]), None, id="push-empty"),
    pytest.param("push([1], [2])", ("array", [1, [2]]), None, id="push-array-element"),
    pytest.param("len(push([1, 2], 3))", ("integer", 3), None, id="push-then-len"),
    pytest.param("let a = [1]; let b = push(a, 2); a", ("array", [1]), None, id="push-leaves-input"),
    pytest.param("let a = [1]; let b = push(a, 2); b", ("array", [1, 2]), None, id="push-result"),
    pytest.param("let a = [1, 2]; rest(a); a", ("array", [1, 2]), None, id="rest-leaves-input"),
]


@pytest.mark.parametrize("source, expectation, expected_exc", ARRAY_SCENARIOS)
def test_arrays(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


@pytest.mark.parametrize("source, expectation, expected_exc", BUILTIN_SCENARIOS)
def test_builtins(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_array_repr() -> None:
    assert repr(run_program('[1, "a", true, [2]]')) == '[1, "a", true, [2]]'
    assert repr(run_program("[]")) == "[]"


def test_default_builtins_table() -> None:
    registry = default_builtins()

    assert sorted(registry) == ["first", "last", "len", "push", "rest"]
    assert len(registry) == 5
    assert "len" in registry
    assert registry.get("nope") is None
    assert registry.get("push").arity == 2
    assert default_builtins() is registry


def test_builtin_registry_is_read_only() -> None:
    registry = default_builtins()
    with pytest.raises(TypeError):
        registry.entries["len"] = registry.get("first")  # type: ignore[index]


def test_builtins_callable_directly() -> None:
    first = default_builtins().get("first")
    assert first is not None
    assert first.fn([MkArray([MkInteger(9)])]) == MkInteger(9)
