"""HostLang operator semantics and value conversions."""

from __future__ import annotations

import math
import re
from typing import Any

from .. import constants
from .errors import HostRangeError, HostTypeError
from .values import UNDEFINED, BigInt, JSFunction, JSMap, JSSet, NativeFunction

NAN = float("nan")
INF = float("inf")


# ── classification ───────────────────────────────────────────────


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, (bool, BigInt))


def is_nullish(value: Any) -> bool:
    return value is None or value is UNDEFINED


def is_object(value: Any) -> bool:
    return isinstance(value, (list, dict, JSMap, JSSet, JSFunction, NativeFunction))


def typeof(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "object"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, BigInt):
        return "bigint"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (JSFunction, NativeFunction)):
        return "function"
    return "object"


def truthy(value: Any) -> bool:
    if value is UNDEFINED or value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return len(value) > 0
    return True


# ── conversions ──────────────────────────────────────────────────


def to_double(value: int) -> Any:
    """Round an exact integer the way a float64 would hold it."""
    if abs(value) <= constants.MAX_SAFE_INTEGER:
        return value
    try:
        return float(value)
    except OverflowError:
        return INF if value > 0 else -INF


def normalize_number(value: Any) -> Any:
    """Collapse integral floats to ``int`` so `4 / 2` reads as `2`, not `2.0`.

    Integers past the safe range become floats; ``BigInt`` is left alone.
    """
    if isinstance(value, int) and not isinstance(value, (bool, BigInt)):
        return to_double(value)
    if (
        isinstance(value, float)
        and math.isfinite(value)
        and value.is_integer()
        and abs(value) <= constants.MAX_SAFE_INTEGER
    ):
        return int(value)
    return value


_NUMERIC_STRING = re.compile(r"^[+-]?(?:\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)$")


def to_number(value: Any) -> Any:
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, BigInt):
        return int(value)
    if is_number(value):
        return value
    if value is None:
        return 0
    if value is UNDEFINED:
        return NAN
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        lowered = text.lower()
        if lowered.startswith(("0x", "0o", "0b")):
            try:
                return int(text, 0)
            except ValueError:
                return NAN
        if text in ("Infinity", "+Infinity"):
            return INF
        if text == "-Infinity":
            return -INF
        if _NUMERIC_STRING.match(text):
            return normalize_number(float(text))
        return NAN
    if isinstance(value, list):
        return to_number(to_display_string(value))
    return NAN


def to_int32(value: Any) -> int:
    number = to_number(value)
    if isinstance(number, float) and not math.isfinite(number):
        return 0
    n = int(number) & 0xFFFFFFFF
    return n - 0x100000000 if n >= 0x80000000 else n


def to_uint32(value: Any) -> int:
    return to_int32(value) & 0xFFFFFFFF


def number_to_string(value: Any) -> str:
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        text = repr(value)
        return re.sub(r"e([+-])0*(\d)", r"e\1\2", text)
    return str(int(value))


def to_display_string(value: Any) -> str:
    """HostLang ``String(value)``."""
    if isinstance(value, str):
        return value
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return number_to_string(value)
    if isinstance(value, list):
        return ",".join("" if is_nullish(v) else to_display_string(v) for v in value)
    if isinstance(value, JSFunction):
        return f"function {value.name}() {{ [code] }}"
    if isinstance(value, NativeFunction):
        return f"function {value.name}() {{ [native code] }}"
    if isinstance(value, JSMap):
        return "[object Map]"
    if isinstance(value, JSSet):
        return "[object Set]"
    return "[object Object]"


def to_primitive(value: Any) -> Any:
    if is_object(value):
        return to_display_string(value)
    return value


def to_property_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    return to_display_string(key)


def to_index(key: Any) -> int | None:
    """Array index for *key*, or ``None`` when it is not a canonical index."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 0 else None
    if isinstance(key, float):
        return int(key) if key.is_integer() and key >= 0 else None
    if isinstance(key, str) and key.isdigit() and (key == "0" or not key.startswith("0")):
        return int(key)
    return None


# ── equality ─────────────────────────────────────────────────────


def strict_equals(a: Any, b: Any) -> bool:
    if is_number(a) and is_number(b):
        return a == b
    if isinstance(a, BigInt) and isinstance(b, BigInt):
        return int(a) == int(b)
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    # Objects by identity; null and undefined are singletons.
    return a is b


def same_value_zero(a: Any, b: Any) -> bool:
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return strict_equals(a, b)


def loose_equals(a: Any, b: Any) -> bool:
    if is_nullish(a) and is_nullish(b):
        return True
    if is_nullish(a) or is_nullish(b):
        return False
    if typeof(a) == typeof(b) and not (is_object(a) ^ is_object(b)):
        return strict_equals(a, b)
    if isinstance(a, bool):
        return loose_equals(to_number(a), b)
    if isinstance(b, bool):
        return loose_equals(a, to_number(b))
    if is_object(a) and not is_object(b):
        return loose_equals(to_primitive(a), b)
    if is_object(b) and not is_object(a):
        return loose_equals(a, to_primitive(b))
    if isinstance(a, (int, float, str)) and isinstance(b, (int, float, str)):
        return to_number(a) == to_number(b)
    return False


# ── arithmetic ───────────────────────────────────────────────────


def _both_bigint(a: Any, b: Any) -> bool:
    if isinstance(a, BigInt) and isinstance(b, BigInt):
        return True
    if isinstance(a, BigInt) or isinstance(b, BigInt):
        raise HostTypeError("Cannot mix BigInt and other types, use explicit conversions")
    return False


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _add(a: Any, b: Any) -> Any:
    a, b = to_primitive(a), to_primitive(b)
    if isinstance(a, str) or isinstance(b, str):
        return to_display_string(a) + to_display_string(b)
    if _both_bigint(a, b):
        return BigInt(int(a) + int(b))
    return normalize_number(to_number(a) + to_number(b))


def _subtract(a: Any, b: Any) -> Any:
    if _both_bigint(a, b):
        return BigInt(int(a) - int(b))
    return normalize_number(to_number(a) - to_number(b))


def _multiply(a: Any, b: Any) -> Any:
    if _both_bigint(a, b):
        return BigInt(int(a) * int(b))
    x, y = to_number(a), to_number(b)
    try:
        return normalize_number(x * y)
    except OverflowError:
        return INF if (x > 0) == (y > 0) else -INF


def _divide(a: Any, b: Any) -> Any:
    if _both_bigint(a, b):
        if int(b) == 0:
            raise HostRangeError("Division by zero")
        return BigInt(_trunc_div(int(a), int(b)))
    x, y = to_number(a), to_number(b)
    if y == 0:
        if x == 0 or (isinstance(x, float) and math.isnan(x)):
            return NAN
        negative_zero = isinstance(y, float) and math.copysign(1.0, y) < 0
        return INF if (x > 0) != negative_zero else -INF
    try:
        return normalize_number(x / y)
    except OverflowError:
        return INF if (x > 0) == (y > 0) else -INF


def _remainder(a: Any, b: Any) -> Any:
    if _both_bigint(a, b):
        r = abs(int(a)) % abs(int(b))
        return BigInt(-r if int(a) < 0 else r)
    x, y = to_number(a), to_number(b)
    if y == 0 or (isinstance(x, float) and not math.isfinite(x)):
        return NAN
    if isinstance(y, float) and math.isinf(y):
        return x
    if isinstance(x, int) and isinstance(y, int):
        r = abs(x) % abs(y)
        return -r if x < 0 else r
    return normalize_number(math.fmod(x, y))


def _power(a: Any, b: Any) -> Any:
    if _both_bigint(a, b):
        return BigInt(int(a) ** int(b))
    x, y = to_number(a), to_number(b)
    if isinstance(x, int) and isinstance(y, int) and y > 64:
        # Exact powers this large would only be rounded afterwards.
        x = float(x)
    try:
        result = x**y
    except OverflowError:
        return INF
    except ZeroDivisionError:
        return INF
    if isinstance(result, complex):
        return NAN
    return normalize_number(result)


def _compare(a: Any, b: Any) -> tuple[Any, Any] | None:
    a, b = to_primitive(a), to_primitive(b)
    if isinstance(a, str) and isinstance(b, str):
        return a, b
    x, y = to_number(a), to_number(b)
    if (isinstance(x, float) and math.isnan(x)) or (isinstance(y, float) and math.isnan(y)):
        return None
    return x, y


def _less(a: Any, b: Any) -> bool:
    pair = _compare(a, b)
    return pair is not None and pair[0] < pair[1]


def _greater(a: Any, b: Any) -> bool:
    pair = _compare(a, b)
    return pair is not None and pair[0] > pair[1]


def _less_equal(a: Any, b: Any) -> bool:
    pair = _compare(a, b)
    return pair is not None and pair[0] <= pair[1]


def _greater_equal(a: Any, b: Any) -> bool:
    pair = _compare(a, b)
    return pair is not None and pair[0] >= pair[1]


def _has_property(key: Any, container: Any) -> bool:
    if isinstance(container, dict):
        return to_property_key(key) in container
    if isinstance(container, list):
        index = to_index(key)
        return (index is not None and index < len(container)) or key == "length"
    raise HostTypeError("Cannot use 'in' operator to search for a key in a primitive")


def _instance_of(value: Any, constructor: Any) -> bool:
    if not isinstance(constructor, (JSFunction, NativeFunction)):
        raise HostTypeError("Right-hand side of 'instanceof' is not callable")
    expected = {"Array": list, "Object": dict, "Map": JSMap, "Set": JSSet}
    python_type = expected.get(constructor.name)
    return python_type is not None and isinstance(value, python_type)


class Operators:
    """Binary and unary operator evaluation with HostLang coercions."""

    BINOP_TABLE: dict[str, Any] = {
        "+": _add,
        "-": _subtract,
        "*": _multiply,
        "/": _divide,
        "%": _remainder,
        "**": _power,
        "==": loose_equals,
        "!=": lambda a, b: not loose_equals(a, b),
        "===": strict_equals,
        "!==": lambda a, b: not strict_equals(a, b),
        "<": _less,
        ">": _greater,
        "<=": _less_equal,
        ">=": _greater_equal,
        "&": lambda a, b: to_int32(to_int32(a) & to_int32(b)),
        "|": lambda a, b: to_int32(to_int32(a) | to_int32(b)),
        "^": lambda a, b: to_int32(to_int32(a) ^ to_int32(b)),
        "<<": lambda a, b: to_int32(to_int32(a) << (to_uint32(b) & 31)),
        ">>": lambda a, b: to_int32(a) >> (to_uint32(b) & 31),
        ">>>": lambda a, b: to_uint32(a) >> (to_uint32(b) & 31),
        "in": _has_property,
        "instanceof": _instance_of,
    }

    @classmethod
    def eval_binop(cls, op: str, lhs: Any, rhs: Any) -> Any:
        fn = cls.BINOP_TABLE.get(op)
        if fn is None:
            raise HostTypeError(f"Unsupported operator {op}")
        return fn(lhs, rhs)

    @classmethod
    def eval_unop(cls, op: str, operand: Any) -> Any:
        if op == "!":
            return not truthy(operand)
        if op == "-":
            if isinstance(operand, BigInt):
                return BigInt(-int(operand))
            number = to_number(operand)
            return -number if number != 0 else (-0.0 if isinstance(number, float) else 0)
        if op == "+":
            return to_number(operand)
        if op == "~":
            return to_int32(~to_int32(operand))
        if op == "typeof":
            return typeof(operand)
        if op == "void":
            return UNDEFINED
        raise HostTypeError(f"Unsupported operator {op}")
