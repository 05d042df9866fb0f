"""Built-in globals and method tables for the HostLang evaluator."""

from __future__ import annotations

import json
import logging
import math
import random
import re
import sys
from typing import Any

from .. import constants
from .environment import KIND_CONST, KIND_VAR, Environment
from .errors import HostRangeError, HostSyntaxError, HostTypeError
from .operators import (
    INF,
    NAN,
    Operators,
    is_nullish,
    is_number,
    normalize_number,
    number_to_string,
    same_value_zero,
    strict_equals,
    to_display_string,
    to_index,
    to_int32,
    to_number,
    to_property_key,
    truthy,
    typeof,
)
from .values import UNDEFINED, JSFunction, JSMap, JSSet, NativeFunction

logger = logging.getLogger(__name__)


def _arg(args: list[Any], index: int) -> Any:
    return args[index] if index < len(args) else UNDEFINED


def _relative_index(value: Any, length: int, default: int) -> int:
    """Clamp a possibly negative HostLang index into ``[0, length]``."""
    if value is UNDEFINED:
        return default
    number = to_number(value)
    if isinstance(number, float):
        if math.isnan(number):
            return 0
        if math.isinf(number):
            return length if number > 0 else 0
        number = int(number)
    if number < 0:
        return max(length + number, 0)
    return min(number, length)


def _to_integer(value: Any) -> int:
    number = to_number(value)
    if isinstance(number, float):
        if math.isnan(number):
            return 0
        if math.isinf(number):
            return sys.maxsize if number > 0 else -sys.maxsize
    return int(number)


def _native(name: str, impl, is_generator: bool = False, constructor=None, **properties) -> NativeFunction:
    return NativeFunction(
        name=name,
        impl=impl,
        is_generator=is_generator,
        constructor=constructor,
        properties=dict(properties),
    )


def _callback(fn: Any, method: str) -> Any:
    if not isinstance(fn, (JSFunction, NativeFunction)):
        raise HostTypeError(f"{to_display_string(fn)} is not a function (in {method})")
    return fn


def iterate(value: Any) -> list[Any]:
    """Materialize the values produced by iterating *value* (for…of, spread)."""
    if isinstance(value, list):
        return list(value)
    if isinstance(value, str):
        return list(value)
    if isinstance(value, JSMap):
        return [[key, item] for key, item in value.items()]
    if isinstance(value, JSSet):
        return value.values()
    raise HostTypeError(f"{_describe(value)} is not iterable")


def enumerable_keys(value: Any) -> list[str]:
    """Keys visited by ``for…in`` and ``Object.keys``."""
    if isinstance(value, dict):
        return list(value.keys())
    if isinstance(value, (list, str)):
        return [str(i) for i in range(len(value))]
    return []


def _describe(value: Any) -> str:
    if isinstance(value, (list, dict)):
        return "object"
    return to_display_string(value) if not isinstance(value, str) else f'"{value}"'


# ── console ──────────────────────────────────────────────────────


def _format_console_arg(value: Any) -> str:
    if isinstance(value, (list, dict)):
        return _stringify(value, None)
    return to_display_string(value)


def _console_log(interp, this, args):
    logger.debug("program output: %s", " ".join(_format_console_arg(a) for a in args))
    return UNDEFINED


# ── Math ─────────────────────────────────────────────────────────


def _math_unary(fn):
    def impl(interp, this, args):
        x = to_number(_arg(args, 0))
        if isinstance(x, float) and math.isnan(x):
            return NAN
        try:
            return normalize_number(fn(x))
        except (ValueError, OverflowError):
            return NAN

    return impl


def _keep_non_finite(fn):
    def wrapped(x):
        if isinstance(x, float) and not math.isfinite(x):
            return x
        return fn(x)

    return wrapped


def _logarithm(fn):
    def wrapped(x):
        if x == 0:
            return -INF
        if x < 0:
            return NAN
        if isinstance(x, float) and math.isinf(x):
            return INF
        return fn(x)

    return wrapped


def _sign(x):
    if x > 0:
        return 1
    if x < 0:
        return -1
    return x


def _math_extreme(pick, empty):
    def impl(interp, this, args):
        numbers = [to_number(a) for a in args]
        if any(isinstance(n, float) and math.isnan(n) for n in numbers):
            return NAN
        return pick(numbers) if numbers else empty

    return impl


def _math_pow(interp, this, args):
    return Operators.eval_binop("**", _arg(args, 0), _arg(args, 1))


def _math_random(interp, this, args):
    return random.random()


def _math_hypot(interp, this, args):
    return normalize_number(math.hypot(*(to_number(a) for a in args)))


def _make_math() -> dict[str, Any]:
    return {
        "PI": math.pi,
        "E": math.e,
        "LN2": math.log(2),
        "LN10": math.log(10),
        "SQRT2": math.sqrt(2),
        "floor": _native("floor", _math_unary(_keep_non_finite(math.floor))),
        "ceil": _native("ceil", _math_unary(_keep_non_finite(math.ceil))),
        "round": _native("round", _math_unary(_keep_non_finite(lambda x: math.floor(x + 0.5)))),
        "trunc": _native("trunc", _math_unary(_keep_non_finite(math.trunc))),
        "abs": _native("abs", _math_unary(abs)),
        "sign": _native("sign", _math_unary(_sign)),
        "sqrt": _native("sqrt", _math_unary(_keep_non_finite(math.sqrt))),
        "cbrt": _native("cbrt", _math_unary(_keep_non_finite(lambda x: math.copysign(abs(x) ** (1 / 3), x)))),
        "exp": _native("exp", _math_unary(math.exp)),
        "log": _native("log", _math_unary(_logarithm(math.log))),
        "log2": _native("log2", _math_unary(_logarithm(math.log2))),
        "log10": _native("log10", _math_unary(_logarithm(math.log10))),
        "sin": _native("sin", _math_unary(math.sin)),
        "cos": _native("cos", _math_unary(math.cos)),
        "tan": _native("tan", _math_unary(math.tan)),
        "max": _native("max", _math_extreme(max, -INF)),
        "min": _native("min", _math_extreme(min, INF)),
        "pow": _native("pow", _math_pow),
        "hypot": _native("hypot", _math_hypot),
        "random": _native("random", _math_random),
    }


# ── JSON ─────────────────────────────────────────────────────────


def _stringify(value: Any, space: Any) -> Any:
    from ..snapshot import SnapshotCycleError, snapshot_value

    if value is UNDEFINED or isinstance(value, (JSFunction, NativeFunction)):
        return UNDEFINED
    try:
        data = snapshot_value(value)
    except SnapshotCycleError as exc:
        raise HostTypeError(str(exc)) from exc
    indent: Any = None
    if is_number(space) and space > 0:
        indent = min(int(space), 10)
    elif isinstance(space, str) and space:
        indent = space[:10]
    if indent is None:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    return json.dumps(data, indent=indent, ensure_ascii=False)


def _json_stringify(interp, this, args):
    return _stringify(_arg(args, 0), _arg(args, 2))


def _from_json(data: Any) -> Any:
    if isinstance(data, float):
        return normalize_number(data)
    if isinstance(data, list):
        return [_from_json(item) for item in data]
    if isinstance(data, dict):
        return {key: _from_json(item) for key, item in data.items()}
    return data


def _json_parse(interp, this, args):
    text = to_display_string(_arg(args, 0))
    try:
        return _from_json(json.loads(text))
    except json.JSONDecodeError as exc:
        raise HostSyntaxError(f"Unexpected token in JSON at position {exc.pos}") from exc


# ── global functions ─────────────────────────────────────────────

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_FLOAT_PREFIX = re.compile(r"^[+-]?(?:Infinity|\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?)")


def _parse_int(interp, this, args):
    text = to_display_string(_arg(args, 0)).strip()
    radix_arg = _arg(args, 1)
    radix = 0 if radix_arg is UNDEFINED else to_int32(radix_arg)
    sign = 1
    if text and text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if radix in (0, 16) and text.lower().startswith("0x"):
        radix = 16
        text = text[2:]
    if radix == 0:
        radix = 10
    if radix < 2 or radix > 36:
        return NAN
    digits = ""
    for ch in text.lower():
        position = _DIGITS.find(ch)
        if position < 0 or position >= radix:
            break
        digits += ch
    if not digits:
        return NAN
    return sign * int(digits, radix)


def _parse_float(interp, this, args):
    match = _FLOAT_PREFIX.match(to_display_string(_arg(args, 0)).strip())
    if match is None:
        return NAN
    text = match.group(0)
    if text.lstrip("+-") == "Infinity":
        return -INF if text.startswith("-") else INF
    return normalize_number(float(text))


def _is_nan(interp, this, args):
    number = to_number(_arg(args, 0))
    return isinstance(number, float) and math.isnan(number)


def _is_finite(interp, this, args):
    number = to_number(_arg(args, 0))
    return not (isinstance(number, float) and not math.isfinite(number))


def _number_is_integer(interp, this, args):
    value = _arg(args, 0)
    if not is_number(value):
        return False
    return isinstance(value, int) or (math.isfinite(value) and value.is_integer())


def _number_is_safe_integer(interp, this, args):
    value = _arg(args, 0)
    return _number_is_integer(interp, this, args) and abs(value) <= constants.MAX_SAFE_INTEGER


def _number_is_finite(interp, this, args):
    value = _arg(args, 0)
    return is_number(value) and _is_finite(interp, this, args)


def _number_is_nan(interp, this, args):
    value = _arg(args, 0)
    return isinstance(value, float) and math.isnan(value)


def _to_number_call(interp, this, args):
    return to_number(args[0]) if args else 0


def _to_string_call(interp, this, args):
    return to_display_string(args[0]) if args else ""


def _to_boolean_call(interp, this, args):
    return truthy(_arg(args, 0))


def _string_from_char_code(interp, this, args):
    return "".join(chr(to_int32(a) & 0xFFFF) for a in args)


def _make_error_constructor(name: str) -> NativeFunction:
    def construct(interp, args):
        message = _arg(args, 0)
        return {"name": name, "message": "" if message is UNDEFINED else to_display_string(message)}

    return _native(name, lambda interp, this, args: construct(interp, args), constructor=construct)


# ── Array ────────────────────────────────────────────────────────


def _array_construct(interp, args):
    if len(args) == 1 and is_number(args[0]):
        length = args[0]
        if length < 0 or (isinstance(length, float) and not length.is_integer()):
            raise HostRangeError("Invalid array length")
        return [UNDEFINED] * int(length)
    return list(args)


def _array_is_array(interp, this, args):
    return isinstance(_arg(args, 0), list)


def _array_of(interp, this, args):
    return list(args)


def _array_from(interp, this, args):
    source = _arg(args, 0)
    map_fn = _arg(args, 1)
    if isinstance(source, dict):
        length = to_number(source.get("length", 0))
        length = 0 if isinstance(length, float) and math.isnan(length) else int(length)
        items = [source.get(str(i), UNDEFINED) for i in range(length)]
    elif is_nullish(source):
        raise HostTypeError(f"{to_display_string(source)} is not iterable")
    else:
        items = iterate(source)
    if map_fn is UNDEFINED:
        return items
    fn = _callback(map_fn, "Array.from")
    result = []
    for i, item in enumerate(items):
        result.append((yield from interp.call_function(fn, UNDEFINED, [item, i])))
    return result


def _array_push(interp, this, args):
    this.extend(args)
    return len(this)


def _array_pop(interp, this, args):
    return this.pop() if this else UNDEFINED


def _array_shift(interp, this, args):
    return this.pop(0) if this else UNDEFINED


def _array_unshift(interp, this, args):
    this[0:0] = args
    return len(this)


def _array_slice(interp, this, args):
    start = _relative_index(_arg(args, 0), len(this), 0)
    end = _relative_index(_arg(args, 1), len(this), len(this))
    return this[start:end]


def _array_splice(interp, this, args):
    start = _relative_index(_arg(args, 0), len(this), 0)
    if len(args) < 2:
        count = len(this) - start
    else:
        count = max(0, min(_to_integer(args[1]), len(this) - start))
    removed = this[start : start + count]
    this[start : start + count] = args[2:]
    return removed


def _array_index_of(interp, this, args):
    target = _arg(args, 0)
    start = _relative_index(_arg(args, 1), len(this), 0)
    for i in range(start, len(this)):
        if strict_equals(this[i], target):
            return i
    return -1


def _array_last_index_of(interp, this, args):
    target = _arg(args, 0)
    for i in range(len(this) - 1, -1, -1):
        if strict_equals(this[i], target):
            return i
    return -1


def _array_includes(interp, this, args):
    target = _arg(args, 0)
    return any(same_value_zero(item, target) for item in this)


def _array_join(interp, this, args):
    separator = _arg(args, 0)
    sep = "," if separator is UNDEFINED else to_display_string(separator)
    return sep.join("" if is_nullish(item) else to_display_string(item) for item in this)


def _array_to_string(interp, this, args):
    return to_display_string(this)


def _array_reverse(interp, this, args):
    this.reverse()
    return this


def _array_concat(interp, this, args):
    result = list(this)
    for arg in args:
        if isinstance(arg, list):
            result.extend(arg)
        else:
            result.append(arg)
    return result


def _array_fill(interp, this, args):
    value = _arg(args, 0)
    start = _relative_index(_arg(args, 1), len(this), 0)
    end = _relative_index(_arg(args, 2), len(this), len(this))
    for i in range(start, end):
        this[i] = value
    return this


def _array_at(interp, this, args):
    index = _to_integer(_arg(args, 0))
    if index < 0:
        index += len(this)
    return this[index] if 0 <= index < len(this) else UNDEFINED


def _array_flat(interp, this, args):
    result = []
    for item in this:
        if isinstance(item, list):
            result.extend(item)
        else:
            result.append(item)
    return result


def _array_keys(interp, this, args):
    return list(range(len(this)))


def _array_for_each(interp, this, args):
    fn = _callback(_arg(args, 0), "forEach")
    for i in range(len(this)):
        if i >= len(this):
            break
        yield from interp.call_function(fn, _arg(args, 1), [this[i], i, this])
    return UNDEFINED


def _array_map(interp, this, args):
    fn = _callback(_arg(args, 0), "map")
    result = []
    for i in range(len(this)):
        if i >= len(this):
            break
        result.append((yield from interp.call_function(fn, _arg(args, 1), [this[i], i, this])))
    return result


def _array_filter(interp, this, args):
    fn = _callback(_arg(args, 0), "filter")
    result = []
    for i in range(len(this)):
        if i >= len(this):
            break
        item = this[i]
        if truthy((yield from interp.call_function(fn, _arg(args, 1), [item, i, this]))):
            result.append(item)
    return result


def _search(interp, this, args, method):
    fn = _callback(_arg(args, 0), method)
    for i in range(len(this)):
        if i >= len(this):
            break
        item = this[i]
        if truthy((yield from interp.call_function(fn, _arg(args, 1), [item, i, this]))):
            return i, item
    return -1, UNDEFINED


def _array_find(interp, this, args):
    _, item = yield from _search(interp, this, args, "find")
    return item


def _array_find_index(interp, this, args):
    index, _ = yield from _search(interp, this, args, "findIndex")
    return index


def _array_some(interp, this, args):
    index, _ = yield from _search(interp, this, args, "some")
    return index >= 0


def _array_every(interp, this, args):
    fn = _callback(_arg(args, 0), "every")
    for i in range(len(this)):
        if i >= len(this):
            break
        if not truthy((yield from interp.call_function(fn, _arg(args, 1), [this[i], i, this]))):
            return False
    return True


def _array_reduce(interp, this, args):
    fn = _callback(_arg(args, 0), "reduce")
    start = 0
    if len(args) >= 2:
        accumulator = args[1]
    elif this:
        accumulator = this[0]
        start = 1
    else:
        raise HostTypeError("Reduce of empty array with no initial value")
    for i in range(start, len(this)):
        if i >= len(this):
            break
        accumulator = yield from interp.call_function(fn, UNDEFINED, [accumulator, this[i], i, this])
    return accumulator


def _compare_items(interp, a, b, comparator):
    if a is UNDEFINED or b is UNDEFINED:
        return (a is UNDEFINED) - (b is UNDEFINED)
    if comparator is UNDEFINED:
        x, y = to_display_string(a), to_display_string(b)
        return (x > y) - (x < y)
    order = to_number((yield from interp.call_function(comparator, UNDEFINED, [a, b])))
    if isinstance(order, float) and math.isnan(order):
        return 0
    return order


def _merge_sort(interp, items, comparator):
    if len(items) <= 1:
        return items
    middle = len(items) // 2
    left = yield from _merge_sort(interp, items[:middle], comparator)
    right = yield from _merge_sort(interp, items[middle:], comparator)
    merged = []
    i = j = 0
    while i < len(left) and j < len(right):
        order = yield from _compare_items(interp, left[i], right[j], comparator)
        if order > 0:
            merged.append(right[j])
            j += 1
        else:
            merged.append(left[i])
            i += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged


def _array_sort(interp, this, args):
    comparator = _arg(args, 0)
    if comparator is not UNDEFINED:
        _callback(comparator, "sort")
    this[:] = yield from _merge_sort(interp, list(this), comparator)
    return this


# ── String ───────────────────────────────────────────────────────


def _string_char_at(interp, this, args):
    index = _to_integer(_arg(args, 0))
    return this[index] if 0 <= index < len(this) else ""


def _string_char_code_at(interp, this, args):
    index = _to_integer(_arg(args, 0))
    return ord(this[index]) if 0 <= index < len(this) else NAN


def _string_index_of(interp, this, args):
    start = _relative_index(_arg(args, 1), len(this), 0)
    return this.find(to_display_string(_arg(args, 0)), start)


def _string_last_index_of(interp, this, args):
    return this.rfind(to_display_string(_arg(args, 0)))


def _string_includes(interp, this, args):
    return to_display_string(_arg(args, 0)) in this


def _string_slice(interp, this, args):
    start = _relative_index(_arg(args, 0), len(this), 0)
    end = _relative_index(_arg(args, 1), len(this), len(this))
    return this[start:end]


def _string_substring(interp, this, args):
    def clamp(value, default):
        if value is UNDEFINED:
            return default
        number = to_number(value)
        if isinstance(number, float) and math.isnan(number):
            return 0
        return max(0, min(int(number) if math.isfinite(number) else (len(this) if number > 0 else 0), len(this)))

    start, end = clamp(_arg(args, 0), 0), clamp(_arg(args, 1), len(this))
    if start > end:
        start, end = end, start
    return this[start:end]


def _string_split(interp, this, args):
    separator = _arg(args, 0)
    limit = _arg(args, 1)
    if separator is UNDEFINED:
        parts = [this]
    elif to_display_string(separator) == "":
        parts = list(this)
    else:
        parts = this.split(to_display_string(separator))
    if limit is not UNDEFINED:
        parts = parts[: int(to_number(limit))]
    return parts


def _string_repeat(interp, this, args):
    count = to_number(_arg(args, 0))
    if isinstance(count, float) and math.isnan(count):
        count = 0
    if count < 0 or count == INF:
        raise HostRangeError(f"Invalid count value: {number_to_string(count)}")
    return this * int(count)


def _string_pad(at_start: bool):
    def impl(interp, this, args):
        width = _to_integer(_arg(args, 0))
        filler = _arg(args, 1)
        fill = " " if filler is UNDEFINED else to_display_string(filler)
        if width <= len(this) or not fill:
            return this
        padding = (fill * width)[: width - len(this)]
        return padding + this if at_start else this + padding

    return impl


def _string_replace(replace_all: bool):
    def impl(interp, this, args):
        pattern = to_display_string(_arg(args, 0))
        replacement = to_display_string(_arg(args, 1))
        return this.replace(pattern, replacement, -1 if replace_all else 1)

    return impl


def _string_concat(interp, this, args):
    return this + "".join(to_display_string(a) for a in args)


def _string_starts_with(interp, this, args):
    return this.startswith(to_display_string(_arg(args, 0)))


def _string_ends_with(interp, this, args):
    return this.endswith(to_display_string(_arg(args, 0)))


def _string_locale_compare(interp, this, args):
    other = to_display_string(_arg(args, 0))
    return (this > other) - (this < other)


def _string_at(interp, this, args):
    index = _to_integer(_arg(args, 0))
    if index < 0:
        index += len(this)
    return this[index] if 0 <= index < len(this) else UNDEFINED


# ── Number ───────────────────────────────────────────────────────


def _number_to_fixed(interp, this, args):
    digits = _arg(args, 0)
    places = 0 if digits is UNDEFINED else int(to_number(digits))
    if not 0 <= places <= 100:
        raise HostRangeError("toFixed() digits argument must be between 0 and 100")
    if isinstance(this, float) and not math.isfinite(this):
        return number_to_string(this)
    return f"{this:.{places}f}"


def _number_to_string(interp, this, args):
    radix_arg = _arg(args, 0)
    if radix_arg is UNDEFINED or to_number(radix_arg) == 10:
        return number_to_string(this)
    radix = int(to_number(radix_arg))
    if not 2 <= radix <= 36:
        raise HostRangeError("toString() radix must be between 2 and 36")
    if isinstance(this, float) and not this.is_integer():
        return number_to_string(this)
    n = int(this)
    if n == 0:
        return "0"
    digits = ""
    magnitude = abs(n)
    while magnitude:
        magnitude, remainder = divmod(magnitude, radix)
        digits = _DIGITS[remainder] + digits
    return "-" + digits if n < 0 else digits


# ── Map / Set ────────────────────────────────────────────────────


def _map_construct(interp, args):
    result = JSMap()
    source = _arg(args, 0)
    if not is_nullish(source):
        for entry in iterate(source):
            if not isinstance(entry, list):
                raise HostTypeError(f"Iterator value {to_display_string(entry)} is not an entry object")
            result.set(_arg(entry, 0), _arg(entry, 1))
    return result


def _set_construct(interp, args):
    result = JSSet()
    source = _arg(args, 0)
    if not is_nullish(source):
        for item in iterate(source):
            result.add(item)
    return result


def _requires_new(name: str):
    def impl(interp, this, args):
        raise HostTypeError(f"Constructor {name} requires 'new'")

    return impl


def _map_get(interp, this, args):
    return this.get(_arg(args, 0), UNDEFINED)


def _map_set(interp, this, args):
    this.set(_arg(args, 0), _arg(args, 1))
    return this


def _map_has(interp, this, args):
    return this.has(_arg(args, 0))


def _map_delete(interp, this, args):
    return this.delete(_arg(args, 0))


def _map_clear(interp, this, args):
    this.entries.clear()
    return UNDEFINED


def _map_keys(interp, this, args):
    return [key for key, _ in this.items()]


def _map_values(interp, this, args):
    return [item for _, item in this.items()]


def _map_entries(interp, this, args):
    return [[key, item] for key, item in this.items()]


def _map_for_each(interp, this, args):
    fn = _callback(_arg(args, 0), "forEach")
    for key, item in this.items():
        yield from interp.call_function(fn, UNDEFINED, [item, key, this])
    return UNDEFINED


def _set_add(interp, this, args):
    this.add(_arg(args, 0))
    return this


def _set_clear(interp, this, args):
    this.members.clear()
    return UNDEFINED


def _set_values(interp, this, args):
    return this.values()


def _set_for_each(interp, this, args):
    fn = _callback(_arg(args, 0), "forEach")
    for item in this.values():
        yield from interp.call_function(fn, UNDEFINED, [item, item, this])
    return UNDEFINED


# ── Object ───────────────────────────────────────────────────────


def _object_keys(interp, this, args):
    return enumerable_keys(_arg(args, 0))


def _object_values(interp, this, args):
    target = _arg(args, 0)
    return [get_property(target, key) for key in enumerable_keys(target)]


def _object_entries(interp, this, args):
    target = _arg(args, 0)
    return [[key, get_property(target, key)] for key in enumerable_keys(target)]


def _object_assign(interp, this, args):
    target = _arg(args, 0)
    if not isinstance(target, dict):
        raise HostTypeError("Object.assign target must be an object")
    for source in args[1:]:
        for key in enumerable_keys(source):
            target[key] = get_property(source, key)
    return target


def _object_identity(interp, this, args):
    return _arg(args, 0)


def _object_has_own_property(interp, this, args):
    return to_property_key(_arg(args, 0)) in this


class Builtins:
    """Method tables consulted by property access on runtime values."""

    ARRAY_METHODS: dict[str, NativeFunction] = {
        "push": _native("push", _array_push),
        "pop": _native("pop", _array_pop),
        "shift": _native("shift", _array_shift),
        "unshift": _native("unshift", _array_unshift),
        "slice": _native("slice", _array_slice),
        "splice": _native("splice", _array_splice),
        "indexOf": _native("indexOf", _array_index_of),
        "lastIndexOf": _native("lastIndexOf", _array_last_index_of),
        "includes": _native("includes", _array_includes),
        "join": _native("join", _array_join),
        "toString": _native("toString", _array_to_string),
        "reverse": _native("reverse", _array_reverse),
        "concat": _native("concat", _array_concat),
        "fill": _native("fill", _array_fill),
        "at": _native("at", _array_at),
        "flat": _native("flat", _array_flat),
        "keys": _native("keys", _array_keys),
        "forEach": _native("forEach", _array_for_each, is_generator=True),
        "map": _native("map", _array_map, is_generator=True),
        "filter": _native("filter", _array_filter, is_generator=True),
        "find": _native("find", _array_find, is_generator=True),
        "findIndex": _native("findIndex", _array_find_index, is_generator=True),
        "some": _native("some", _array_some, is_generator=True),
        "every": _native("every", _array_every, is_generator=True),
        "reduce": _native("reduce", _array_reduce, is_generator=True),
        "sort": _native("sort", _array_sort, is_generator=True),
    }

    STRING_METHODS: dict[str, NativeFunction] = {
        "charAt": _native("charAt", _string_char_at),
        "charCodeAt": _native("charCodeAt", _string_char_code_at),
        "indexOf": _native("indexOf", _string_index_of),
        "lastIndexOf": _native("lastIndexOf", _string_last_index_of),
        "includes": _native("includes", _string_includes),
        "slice": _native("slice", _string_slice),
        "substring": _native("substring", _string_substring),
        "toUpperCase": _native("toUpperCase", lambda interp, this, args: this.upper()),
        "toLowerCase": _native("toLowerCase", lambda interp, this, args: this.lower()),
        "trim": _native("trim", lambda interp, this, args: this.strip()),
        "trimStart": _native("trimStart", lambda interp, this, args: this.lstrip()),
        "trimEnd": _native("trimEnd", lambda interp, this, args: this.rstrip()),
        "split": _native("split", _string_split),
        "startsWith": _native("startsWith", _string_starts_with),
        "endsWith": _native("endsWith", _string_ends_with),
        "repeat": _native("repeat", _string_repeat),
        "padStart": _native("padStart", _string_pad(at_start=True)),
        "padEnd": _native("padEnd", _string_pad(at_start=False)),
        "replace": _native("replace", _string_replace(replace_all=False)),
        "replaceAll": _native("replaceAll", _string_replace(replace_all=True)),
        "concat": _native("concat", _string_concat),
        "localeCompare": _native("localeCompare", _string_locale_compare),
        "at": _native("at", _string_at),
        "toString": _native("toString", lambda interp, this, args: this),
    }

    NUMBER_METHODS: dict[str, NativeFunction] = {
        "toFixed": _native("toFixed", _number_to_fixed),
        "toString": _native("toString", _number_to_string),
    }

    MAP_METHODS: dict[str, NativeFunction] = {
        "get": _native("get", _map_get),
        "set": _native("set", _map_set),
        "has": _native("has", _map_has),
        "delete": _native("delete", _map_delete),
        "clear": _native("clear", _map_clear),
        "keys": _native("keys", _map_keys),
        "values": _native("values", _map_values),
        "entries": _native("entries", _map_entries),
        "forEach": _native("forEach", _map_for_each, is_generator=True),
    }

    SET_METHODS: dict[str, NativeFunction] = {
        "add": _native("add", _set_add),
        "has": _native("has", _map_has),
        "delete": _native("delete", _map_delete),
        "clear": _native("clear", _set_clear),
        "values": _native("values", _set_values),
        "keys": _native("keys", _set_values),
        "forEach": _native("forEach", _set_for_each, is_generator=True),
    }

    OBJECT_METHODS: dict[str, NativeFunction] = {
        "hasOwnProperty": _native("hasOwnProperty", _object_has_own_property),
    }


# ── property access ──────────────────────────────────────────────


def get_property(target: Any, key: Any) -> Any:
    """HostLang ``target[key]``."""
    if is_nullish(target):
        raise HostTypeError(
            f"Cannot read properties of {to_display_string(target)} "
            f"(reading '{to_property_key(key)}')"
        )
    if isinstance(target, list):
        index = to_index(key)
        if index is not None:
            return target[index] if index < len(target) else UNDEFINED
        name = to_property_key(key)
        if name == "length":
            return len(target)
        return Builtins.ARRAY_METHODS.get(name, UNDEFINED)
    if isinstance(target, str):
        index = to_index(key)
        if index is not None:
            return target[index] if index < len(target) else UNDEFINED
        name = to_property_key(key)
        if name == "length":
            return len(target)
        return Builtins.STRING_METHODS.get(name, UNDEFINED)
    if isinstance(target, dict):
        name = to_property_key(key)
        if name in target:
            return target[name]
        return Builtins.OBJECT_METHODS.get(name, UNDEFINED)
    if isinstance(target, JSMap):
        name = to_property_key(key)
        return len(target) if name == "size" else Builtins.MAP_METHODS.get(name, UNDEFINED)
    if isinstance(target, JSSet):
        name = to_property_key(key)
        return len(target) if name == "size" else Builtins.SET_METHODS.get(name, UNDEFINED)
    if isinstance(target, NativeFunction):
        name = to_property_key(key)
        if name == "name":
            return target.name
        return target.properties.get(name, UNDEFINED)
    if isinstance(target, JSFunction):
        return target.name if to_property_key(key) == "name" else UNDEFINED
    if is_number(target):
        return Builtins.NUMBER_METHODS.get(to_property_key(key), UNDEFINED)
    return UNDEFINED


def set_property(target: Any, key: Any, value: Any):
    """HostLang ``target[key] = value``."""
    if is_nullish(target):
        raise HostTypeError(
            f"Cannot set properties of {to_display_string(target)} "
            f"(setting '{to_property_key(key)}')"
        )
    if isinstance(target, list):
        index = to_index(key)
        if index is not None:
            if index >= len(target):
                target.extend([UNDEFINED] * (index + 1 - len(target)))
            target[index] = value
            return
        if to_property_key(key) == "length":
            length = to_number(value)
            if not is_number(length) or length < 0 or (isinstance(length, float) and not length.is_integer()):
                raise HostRangeError("Invalid array length")
            del target[int(length):]
            target.extend([UNDEFINED] * (int(length) - len(target)))
            return
        raise HostTypeError(f"Cannot set property '{to_property_key(key)}' on an array")
    if isinstance(target, dict):
        target[to_property_key(key)] = value
        return
    if isinstance(target, (str, bool)) or is_number(target):
        return
    raise HostTypeError(f"Cannot set property '{to_property_key(key)}' on {typeof(target)}")


def delete_property(target: Any, key: Any) -> bool:
    if isinstance(target, dict):
        target.pop(to_property_key(key), None)
    elif isinstance(target, list):
        index = to_index(key)
        if index is not None and index < len(target):
            target[index] = UNDEFINED
    return True


# ── globals ──────────────────────────────────────────────────────


def _make_globals() -> dict[str, Any]:
    console_log = _native("log", _console_log)
    return {
        "console": {
            "log": console_log,
            "info": console_log,
            "warn": console_log,
            "error": console_log,
            "debug": console_log,
        },
        "Math": _make_math(),
        "JSON": {
            "stringify": _native("stringify", _json_stringify),
            "parse": _native("parse", _json_parse),
        },
        "Array": _native(
            "Array",
            lambda interp, this, args: _array_construct(interp, args),
            constructor=_array_construct,
            isArray=_native("isArray", _array_is_array),
            of=_native("of", _array_of),
            **{"from": _native("from", _array_from, is_generator=True)},
        ),
        "Object": _native(
            "Object",
            lambda interp, this, args: {},
            constructor=lambda interp, args: {},
            keys=_native("keys", _object_keys),
            values=_native("values", _object_values),
            entries=_native("entries", _object_entries),
            assign=_native("assign", _object_assign),
            freeze=_native("freeze", _object_identity),
        ),
        "Map": _native("Map", _requires_new("Map"), constructor=_map_construct),
        "Set": _native("Set", _requires_new("Set"), constructor=_set_construct),
        "Number": _native(
            "Number",
            _to_number_call,
            MAX_SAFE_INTEGER=constants.MAX_SAFE_INTEGER,
            MIN_SAFE_INTEGER=-constants.MAX_SAFE_INTEGER,
            MAX_VALUE=sys.float_info.max,
            MIN_VALUE=5e-324,
            EPSILON=sys.float_info.epsilon,
            POSITIVE_INFINITY=INF,
            NEGATIVE_INFINITY=-INF,
            NaN=NAN,
            isInteger=_native("isInteger", _number_is_integer),
            isSafeInteger=_native("isSafeInteger", _number_is_safe_integer),
            isFinite=_native("isFinite", _number_is_finite),
            isNaN=_native("isNaN", _number_is_nan),
            parseInt=_native("parseInt", _parse_int),
            parseFloat=_native("parseFloat", _parse_float),
        ),
        "String": _native(
            "String",
            _to_string_call,
            fromCharCode=_native("fromCharCode", _string_from_char_code),
        ),
        "Boolean": _native("Boolean", _to_boolean_call),
        "Error": _make_error_constructor("Error"),
        "TypeError": _make_error_constructor("TypeError"),
        "RangeError": _make_error_constructor("RangeError"),
        "parseInt": _native("parseInt", _parse_int),
        "parseFloat": _native("parseFloat", _parse_float),
        "isNaN": _native("isNaN", _is_nan),
        "isFinite": _native("isFinite", _is_finite),
    }


def install_globals(env: Environment):
    """Declare a fresh set of runtime globals in *env*."""
    for name, value in _make_globals().items():
        env.declare(name, value, KIND_VAR)
    env.declare("undefined", UNDEFINED, KIND_CONST)
    env.declare("NaN", NAN, KIND_CONST)
    env.declare("Infinity", INF, KIND_CONST)
