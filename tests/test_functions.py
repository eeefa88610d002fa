from __future__ import annotations

import sys
from textwrap import dedent

import pytest

from monkey.runtime import MkBuiltin, MkFn
from monkey.utils import RECURSION_LIMIT_ENV
from tests.support.harness import run_program, run_runtime_case

SCENARIOS = [
    pytest.param("fn(x) { x + 2; };", ("function", ["x"]), None, id="literal-value"),
    pytest.param("fn() { 1 }", ("function", []), None, id="literal-no-params"),
    pytest.param("let identity = fn(x) { x; }; identity(5);", ("integer", 5), None, id="identity"),
    pytest.param(
        "let identity = fn(x) { return x; }; identity(5);",
        ("integer", 5),
        None,
        id="identity-return",
    ),
    pytest.param("let double = fn(x) { x * 2; }; double(5);", ("integer", 10), None, id="double"),
    pytest.param("let add = fn(x, y) { x + y; }; add(5, 5);", ("integer", 10), None, id="add"),
    pytest.param(
        "let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));",
        ("integer", 20),
        None,
        id="nested-call-args",
    ),
    pytest.param("fn(x) { x; }(5)", ("integer", 5), None, id="immediate-call"),
    pytest.param("fn() { }()", ("null", None), None, id="empty-body-null"),
    pytest.param(
        "let newAdder = fn(x){ fn(y){ x + y } }; let addTwo = newAdder(2); addTwo(2);",
        ("integer", 4),
        None,
        id="closure-adder",
    ),
    pytest.param(
        dedent(
            """\
            let newAdder = fn(x) { fn(y) { x + y } };
            let addTwo = newAdder(2);
            let addThree = newAdder(3);
            addTwo(1) + addThree(1)
            """
        ),
        ("integer", 7),
        None,
        id="closures-independent",
    ),
    pytest.param(
        "let add = fn(a, b) { a + b }; let applyFunc = fn(a, b, func) { func(a, b) }; applyFunc(2, 2, add);",
        ("integer", 4),
        None,
        id="higher-order",
    ),
    pytest.param(
        dedent(
            """\
            let fib = fn(n) {
              if (n < 2) { n } else { fib(n - 1) + fib(n - 2) }
            };
            fib(15)
            """
        ),
        ("integer", 610),
        None,
        id="recursion-fib",
    ),
    pytest.param(
        dedent(
            """\
            let map = fn(arr, f) {
              let iter = fn(i, acc) {
                if (i == len(arr)) { acc } else { iter(i + 1, push(acc, f(arr[i]))) }
              };
              iter(0, []);
            };
            map([1, 2, 3, 4], fn(x) { x * 2 })
            """
        ),
        ("array", [2, 4, 6, 8]),
        None,
        id="map-with-builtins",
    ),
    pytest.param(
        dedent(
            """\
            let reduce = fn(arr, initial, f) {
              let iter = fn(arr, result) {
                if (len(arr) == 0) { result } else {
                  if (len(arr) == 1) { f(result, first(arr)) } else {
                    iter(rest(arr), f(result, first(arr)))
                  }
                }
              };
              iter(arr, initial);
            };
            reduce([1, 2, 3, 4, 5], 0, fn(acc, el) { acc + el })
            """
        ),
        ("integer", 15),
        None,
        id="reduce-with-rest",
    ),
    pytest.param("let f = fn(a, b) { b }; f(1)", ("null", None), None, id="missing-arg-null"),
    pytest.param("let f = fn(a) { a }; f(1, 2, 3)", ("integer", 1), None, id="extra-args-dropped"),
    pytest.param("len", ("builtin", "len"), None, id="builtin-value"),
    pytest.param("let l = len; l(\"abc\")", ("integer", 3), None, id="builtin-aliased"),
    pytest.param(
        "let twice = fn(f, x) { f(f(x)) }; twice(fn(n) { n * 3 }, 2)",
        ("integer", 18),
        None,
        id="function-argument",
    ),
    pytest.param(
        "let sum = fn(n) { if (n == 0) { 0 } else { n + sum(n - 1) } }; sum(500)",
        ("integer", 125250),
        None,
        id="recursive-sum-500",
    ),
    pytest.param(
        "let depth = fn(n) { if (n == 0) { 0 } else { 1 + depth(n - 1) } }; depth(600)",
        ("integer", 600),
        None,
        id="recursion-depth-600",
    ),
    pytest.param(
        "let countdown = fn(n) { if (n == 0) { return \"done\"; } countdown(n - 1) }; countdown(1000)",
        ("string", "done"),
        None,
        id="countdown-return-1000",
    ),
    pytest.param(
        dedent(
            """\
            let fib = fn(n) {
              if (n == 0) { return 0; }
              if (n == 1) { return 1; }
              fib(n - 1) + fib(n - 2)
            };
            [fib(0), fib(1), fib(2), fib(10), fib(20)]
            """
        ),
        ("array", [0, 1, 1, 55, 6765]),
        None,
        id="fib-early-returns",
    ),
]


@pytest.mark.parametrize("source, expectation, expected_exc", SCENARIOS)
def test_functions(source: str, expectation, expected_exc) -> None:
    run_runtime_case(source, expectation, expected_exc)


def test_function_repr_shows_rendered_body() -> None:
    fn = run_program("fn(x, y) { x + y; }")
    assert isinstance(fn, MkFn)
    assert repr(fn) == "fn(x, y) {\n(x + y)\n}"


def test_function_captures_defining_scope(env) -> None:
    run_program("let make = fn() { let hidden = 41; fn() { hidden + 1 } };", env)
    inner = run_program("make()", env)

    assert isinstance(inner, MkFn)
    assert inner.env.get("hidden") is not None
    assert env.get("hidden") is None
    assert repr(run_program("let g = make(); g()", env)) == "42"


def test_builtin_repr() -> None:
    value = run_program("first")
    assert isinstance(value, MkBuiltin)
    assert repr(value) == "builtin function"


def test_recursive_map_over_hundred_elements(env) -> None:
    run_program(
        dedent(
            """\
            let build = fn(i, acc) { if (i == 100) { acc } else { build(i + 1, push(acc, i)) } };
            let map = fn(arr, f) {
              let iter = fn(i, acc) {
                if (i == len(arr)) { acc } else { iter(i + 1, push(acc, f(arr[i]))) }
              };
              iter(0, []);
            };
            let doubled = map(build(0, []), fn(x) { x * 2 });
            """
        ),
        env,
    )

    assert repr(run_program("len(doubled)", env)) == "100"
    assert repr(run_program("first(doubled)", env)) == "0"
    assert repr(run_program("last(doubled)", env)) == "198"


def test_recursion_limit_is_restored_after_evaluation() -> None:
    before = sys.getrecursionlimit()
    run_program("let sum = fn(n) { if (n == 0) { 0 } else { n + sum(n - 1) } }; sum(500)")
    assert sys.getrecursionlimit() == before


def test_recursion_limit_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    # A configured limit below the current one leaves it in place
    monkeypatch.setenv(RECURSION_LIMIT_ENV, "1")
    with pytest.raises(RecursionError):
        run_program("let depth = fn(n) { if (n == 0) { 0 } else { 1 + depth(n - 1) } }; depth(500)")
