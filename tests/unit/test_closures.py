"""Tests for closure support — functions carrying their defining scope."""

from __future__ import annotations

from stepviz.instrument import instrument
from stepviz.runner import run


def _run_program(source: str) -> dict:
    """Run a program and return the scope of its last captured step."""
    trace = run(instrument(source))
    assert trace.error is None, trace.error
    return trace.steps[-1].scope


class TestSimpleClosure:
    def test_make_adder(self):
        source = """\
function makeAdder(x) {
  return (y) => x + y;
}
const add5 = makeAdder(5);
const result = add5(3);
"""
        assert _run_program(source)["result"] == 8

    def test_captured_var_not_in_caller_scope(self):
        source = """\
function makeAdder(x) {
  return function (y) {
    return x + y;
  };
}
const f = makeAdder(10);
const result = f(7);
"""
        scope = _run_program(source)
        assert scope["result"] == 17
        assert "x" not in scope

    def test_function_values_are_not_snapshotted(self):
        source = "const square = (n) => n * n;\nconst nine = square(3);\n"
        scope = _run_program(source)
        assert scope == {"nine": 9}


class TestClosureState:
    def test_counter_keeps_private_state(self):
        source = """\
function makeCounter() {
  let count = 0;
  return function () {
    count += 1;
    return count;
  };
}
const next = makeCounter();
next();
const third = next() + next();
"""
        assert _run_program(source)["third"] == 5

    def test_independent_counters(self):
        source = """\
function makeCounter() {
  let count = 0;
  return () => ++count;
}
const a = makeCounter();
const b = makeCounter();
a();
a();
const pair = [a(), b()];
"""
        assert _run_program(source)["pair"] == [3, 1]


class TestLoopClosures:
    def test_let_binding_is_fresh_per_iteration(self):
        source = """\
const fns = [];
for (let i = 0; i < 3; i++) {
  fns.push(() => i);
}
const seen = fns.map((f) => f());
"""
        assert _run_program(source)["seen"] == [0, 1, 2]

    def test_var_binding_is_shared(self):
        source = """\
const fns = [];
for (var i = 0; i < 3; i++) {
  fns.push(() => i);
}
const seen = fns.map((f) => f());
"""
        assert _run_program(source)["seen"] == [3, 3, 3]

    def test_named_function_expression_sees_itself(self):
        source = """\
const fact = function inner(n) {
  return n <= 1 ? 1 : n * inner(n - 1);
};
const value = fact(5);
"""
        assert _run_program(source)["value"] == 120
