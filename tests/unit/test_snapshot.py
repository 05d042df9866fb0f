"""Tests for JSON-safe value snapshots and scope capture."""

import json

import pytest

from stepviz.host.environment import KIND_CONST, KIND_FUNCTION, Environment
from stepviz.host.values import UNDEFINED, BigInt, JSFunction, JSMap, JSSet, NativeFunction
from stepviz.snapshot import SnapshotCycleError, capture_scope, snapshot_value


def _function(name: str = "f") -> JSFunction:
    return JSFunction(name=name, params=None, body=None, closure=None)


class TestSnapshotPrimitives:
    def test_undefined_and_null_become_none(self):
        assert snapshot_value(UNDEFINED) is None
        assert snapshot_value(None) is None

    def test_non_finite_numbers_become_none(self):
        assert snapshot_value(float("nan")) is None
        assert snapshot_value(float("inf")) is None

    def test_safe_numbers_kept(self):
        assert snapshot_value(42) == 42
        assert snapshot_value(1.5) == 1.5
        assert snapshot_value(-(2**53 - 1)) == -(2**53 - 1)

    def test_unsafe_integers_become_strings(self):
        assert snapshot_value(2**60) == "1152921504606846976"

    def test_bigint_becomes_string(self):
        assert snapshot_value(BigInt(7)) == "7"

    def test_booleans_and_strings_kept(self):
        assert snapshot_value(True) is True
        assert snapshot_value("hi") == "hi"


class TestSnapshotContainers:
    def test_array_is_deep_copied(self):
        original = [1, [2, 3]]
        copy = snapshot_value(original)
        original[1].append(4)
        assert copy == [1, [2, 3]]

    def test_functions_dropped_from_objects(self):
        assert snapshot_value({"a": 1, "f": _function()}) == {"a": 1}

    def test_functions_become_null_in_arrays(self):
        native = NativeFunction(name="log", impl=lambda interp, this, args: UNDEFINED)
        assert snapshot_value([1, native]) == [1, None]

    def test_undefined_properties_omitted(self):
        assert snapshot_value({"a": UNDEFINED, "b": None}) == {"b": None}

    def test_map_becomes_object_of_entries(self):
        counts = JSMap()
        counts.set("a", 1)
        counts.set(2, [3])
        assert snapshot_value(counts) == {"a": 1, "2": [3]}

    def test_set_becomes_array(self):
        seen = JSSet()
        seen.add(3)
        seen.add(1)
        seen.add(3)
        assert snapshot_value(seen) == [3, 1]

    def test_shared_reference_is_not_a_cycle(self):
        shared = [1]
        assert snapshot_value([shared, shared]) == [[1], [1]]

    def test_cycle_raises(self):
        loop: list = []
        loop.append(loop)
        with pytest.raises(SnapshotCycleError):
            snapshot_value(loop)

    def test_result_is_json_serializable(self):
        value = {"grid": [[0, 0], [0, 1]], "big": BigInt(10**30), "gone": float("nan")}
        json.dumps(snapshot_value(value))


class TestCaptureScope:
    def test_visible_bindings_only(self):
        env = Environment()
        env.declare("x", 1)
        inner = env.child()
        inner.declare("y", [1, 2])
        assert capture_scope(inner, ("x", "y", "missing")) == {"x": 1, "y": [1, 2]}

    def test_function_bindings_omitted(self):
        env = Environment()
        env.declare("helper", _function("helper"), KIND_FUNCTION)
        env.declare("n", 3, KIND_CONST)
        assert capture_scope(env, ("helper", "n")) == {"n": 3}

    def test_cyclic_binding_omitted(self):
        env = Environment()
        node: dict = {}
        node["self"] = node
        env.declare("node", node)
        env.declare("ok", "yes")
        assert capture_scope(env, ("node", "ok")) == {"ok": "yes"}

    def test_inner_binding_shadows_outer(self):
        env = Environment()
        env.declare("x", 1)
        inner = env.child()
        inner.declare("x", 2)
        assert capture_scope(inner, ("x",)) == {"x": 2}
