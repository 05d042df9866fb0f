"""Tests for try/catch/finally and throw."""

from stepviz.instrument import instrument
from stepviz.runner import run


def _final(source: str, name: str):
    trace = run(instrument(source))
    assert trace.error is None, trace.error
    return trace.values_of(name)[-1]


class TestCatch:
    def test_runtime_error_is_catchable(self):
        source = """\
let log = [];
try {
  log.push("start");
  null.boom;
} catch (err) {
  log.push(err.name);
} finally {
  log.push("done");
}
"""
        assert _final(source, "log") == ["start", "TypeError", "done"]

    def test_thrown_object_reaches_handler(self):
        source = """\
let caught = 0;
try {
  throw { code: 7 };
} catch (e) {
  caught = e.code;
}
"""
        assert _final(source, "caught") == 7

    def test_error_constructor_message(self):
        source = """\
let message = "";
try {
  throw new Error("bad input");
} catch (e) {
  message = e.message;
}
"""
        assert _final(source, "message") == "bad input"

    def test_catch_without_binding(self):
        source = """\
let ok = false;
try {
  undefinedFunction();
} catch {
  ok = true;
}
"""
        assert _final(source, "ok") is True

    def test_error_thrown_from_called_function(self):
        source = """\
function check(n) {
  if (n < 0) {
    throw new RangeError("negative");
  }
  return n;
}
let kind = "";
try {
  check(-1);
} catch (e) {
  kind = e.name;
}
"""
        assert _final(source, "kind") == "RangeError"


class TestFinally:
    def test_finally_runs_after_return(self):
        source = """\
let trail = [];
function work() {
  try {
    return 1;
  } finally {
    trail.push("cleanup");
  }
}
const value = work();
"""
        trace = run(instrument(source))
        assert trace.error is None
        assert trace.values_of("value") == [1]
        assert trace.values_of("trail")[-1] == ["cleanup"]

    def test_uncaught_error_still_runs_finally_then_fails(self):
        source = """\
let trail = [];
try {
  throw new Error("boom");
} finally {
  trail.push("finally");
}
"""
        trace = run(instrument(source))
        assert trace.error == "Sim Error: Error: boom"
        assert trace.values_of("trail")[-1] == ["finally"]

    def test_finally_runs_on_break(self):
        source = """\
let count = 0;
while (true) {
  try {
    break;
  } finally {
    count++;
  }
}
"""
        assert _final(source, "count") == 1
