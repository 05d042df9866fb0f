"""HostInterpreter — explicit-environment tree-walking evaluator for HostLang.

Evaluation is generator-based.  Statement handlers yield a ``TraceStep`` at
every capture point and expression evaluators are generators too, because a
call inside an expression may run a function body that captures steps.  The
caller pulls steps one at a time, so it alone decides how fast the program
advances.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from ..parser import first_error, parse_host
from ..snapshot import capture_scope
from ..trace_types import TraceStep
from .builtins import (
    delete_property,
    enumerable_keys,
    get_property,
    install_globals,
    iterate,
    set_property,
)
from .environment import (
    KIND_CONST,
    KIND_FUNCTION,
    KIND_LET,
    KIND_PARAM,
    KIND_VAR,
    Environment,
)
from .errors import (
    HostError,
    HostRangeError,
    HostSyntaxError,
    HostThrow,
    HostTypeError,
)
from .operators import (
    Operators,
    is_nullish,
    normalize_number,
    strict_equals,
    to_display_string,
    to_number,
    to_property_key,
    truthy,
)
from .values import UNDEFINED, BigInt, JSFunction, NativeFunction, is_callable

logger = logging.getLogger(__name__)


_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_ESCAPE_SEQUENCE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])"
)


def _unescape_match(match: re.Match) -> str:
    escape = match.group(1)
    if escape.startswith("u{"):
        return chr(int(escape[2:-1], 16))
    if escape[0] in "ux" and len(escape) > 1:
        return chr(int(escape[1:], 16))
    if escape in ("\n", "\r\n", "\r"):
        return ""
    return _ESCAPES.get(escape, escape)


def unescape(text: str) -> str:
    return _ESCAPE_SEQUENCE.sub(_unescape_match, text)


class _Signal(Exception):
    """Non-error control transfer out of a statement."""


class _BreakSignal(_Signal):
    def __init__(self, label: str | None = None):
        super().__init__(label)
        self.label = label

    def targets(self, label: str | None) -> bool:
        return self.label is None or self.label == label


class _ContinueSignal(_BreakSignal):
    pass


class _ReturnSignal(_Signal):
    def __init__(self, value: Any):
        super().__init__()
        self.value = value


@dataclass
class _Reference:
    """An assignable location: a binding, or a property of a value."""

    env: Environment | None = None
    name: str = ""
    target: Any = None
    key: Any = None

    def get(self) -> Any:
        if self.env is not None:
            return self.env.lookup(self.name)
        return get_property(self.target, self.key)

    def put(self, value: Any):
        if self.env is not None:
            self.env.assign(self.name, value)
        else:
            set_property(self.target, self.key, value)


class HostInterpreter:
    """Runs one instrumented HostLang program.

    ``steps()`` parses the program, installs fresh globals and yields a
    ``TraceStep`` after each simple statement that starts on a capture line.
    """

    COMMENT_TYPES: frozenset[str] = frozenset({"comment", "hash_bang_line", "html_comment"})

    CAPTURED_STATEMENT_TYPES: frozenset[str] = frozenset(
        {"expression_statement", "lexical_declaration", "variable_declaration"}
    )

    UNSUPPORTED_TYPES: dict[str, str] = {
        "class_declaration": "class declarations",
        "class": "class expressions",
        "import_statement": "import statements",
        "export_statement": "export statements",
        "generator_function_declaration": "generator functions",
        "generator_function": "generator functions",
        "yield_expression": "yield expressions",
        "regex": "regular expressions",
        "with_statement": "with statements",
    }

    def __init__(self, program):
        self._program = program
        self._source: bytes = program.source.encode("utf-8")
        self._capture_lines = frozenset(program.capture_lines)
        self._candidates = tuple(program.candidates)
        self._step_index = 0
        self._STMT_DISPATCH: dict[str, Callable] = {
            "expression_statement": self._exec_expression_statement,
            "lexical_declaration": self._exec_declaration,
            "variable_declaration": self._exec_declaration,
            "statement_block": self._exec_block,
            "if_statement": self._exec_if,
            "for_statement": self._exec_for,
            "for_in_statement": self._exec_for_in,
            "while_statement": self._exec_while,
            "do_statement": self._exec_do,
            "switch_statement": self._exec_switch,
            "try_statement": self._exec_try,
            "return_statement": self._exec_return,
            "break_statement": self._exec_break,
            "continue_statement": self._exec_continue,
            "throw_statement": self._exec_throw,
            "labeled_statement": self._exec_labeled,
            "function_declaration": self._exec_nothing,
            "empty_statement": self._exec_nothing,
            "debugger_statement": self._exec_nothing,
        }
        self._LOOP_DISPATCH: dict[str, Callable] = {
            "for_statement": self._exec_for,
            "for_in_statement": self._exec_for_in,
            "while_statement": self._exec_while,
            "do_statement": self._exec_do,
        }
        # Evaluators that never run user code return their value directly.
        self._LITERAL_DISPATCH: dict[str, Callable] = {
            "number": self._eval_number,
            "string": self._eval_string,
            "true": lambda node, env: True,
            "false": lambda node, env: False,
            "null": lambda node, env: None,
            "undefined": lambda node, env: UNDEFINED,
            "identifier": self._eval_identifier,
            "this": self._eval_this,
            "function_expression": self._eval_function,
            "function": self._eval_function,
            "arrow_function": self._eval_function,
        }
        self._EXPR_DISPATCH: dict[str, Callable] = {
            "parenthesized_expression": self._eval_parenthesized,
            "assignment_expression": self._eval_assignment,
            "augmented_assignment_expression": self._eval_augmented_assignment,
            "update_expression": self._eval_update,
            "binary_expression": self._eval_binary,
            "unary_expression": self._eval_unary,
            "ternary_expression": self._eval_ternary,
            "sequence_expression": self._eval_sequence,
            "call_expression": self._eval_call,
            "new_expression": self._eval_new,
            "member_expression": self._eval_member,
            "subscript_expression": self._eval_subscript,
            "array": self._eval_array,
            "object": self._eval_object,
            "template_string": self._eval_template,
            "await_expression": self._eval_await,
        }

    # ── helpers ──────────────────────────────────────────────────

    def _text(self, node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def _line(self, node) -> int:
        return node.start_point[0] + 1

    def _named(self, node) -> list:
        return [c for c in node.named_children if c.type not in self.COMMENT_TYPES]

    def _reject_unsupported(self, node):
        feature = self.UNSUPPORTED_TYPES.get(node.type)
        if feature is not None:
            raise HostSyntaxError(f"{feature} are not supported", self._line(node))

    def _capture(self, line: int, env: Environment) -> TraceStep:
        step = TraceStep(
            step_index=self._step_index,
            line_number=line,
            scope=capture_scope(env, self._candidates),
        )
        self._step_index += 1
        logger.debug("step %d at line %d: %s", step.step_index, line, sorted(step.scope))
        return step

    # ── entry point ──────────────────────────────────────────────

    def steps(self) -> Iterator[TraceStep]:
        """Run the program from scratch, yielding each captured step."""
        self._step_index = 0
        root = parse_host(self._program.source).root_node
        if root.has_error:
            bad = first_error(root)
            line = self._line(bad) if bad is not None else 1
            raise HostSyntaxError(f"Unexpected token at line {line}", line)
        global_env = Environment(function_scope=True)
        install_globals(global_env)
        try:
            yield from self._exec_statements(self._named(root), global_env)
        except _ReturnSignal:
            pass
        except _BreakSignal:
            raise HostSyntaxError("Illegal break or continue statement") from None

    # ── functions ────────────────────────────────────────────────

    def call_function(self, fn: Any, this: Any, args: list[Any]):
        """Invoke *fn*; a generator whose return value is the call result."""
        if isinstance(fn, NativeFunction):
            if fn.is_generator:
                return (yield from fn.impl(self, this, args))
            return fn.impl(self, this, args)
        if not isinstance(fn, JSFunction):
            raise HostTypeError(f"{to_display_string(fn)} is not a function")
        env = fn.closure.child(function_scope=True)
        if not fn.is_arrow:
            env.declare("this", this, KIND_CONST)
            env.declare("arguments", list(args), KIND_VAR)
        try:
            yield from self._bind_params(fn, env, args)
            if fn.body.type != "statement_block":
                return (yield from self._eval(fn.body, env))
            try:
                yield from self._exec_statements(self._named(fn.body), env)
            except _ReturnSignal as signal:
                return signal.value
            return UNDEFINED
        except RecursionError:
            raise HostRangeError("Maximum call stack size exceeded", fn.line) from None

    def _bind_params(self, fn: JSFunction, env: Environment, args: list[Any]):
        params = fn.params
        if params is None:
            return
        nodes = [params] if params.type == "identifier" else self._named(params)
        for index, param in enumerate(nodes):
            if param.type == "rest_pattern":
                yield from self._bind_pattern(self._named(param)[0], list(args[index:]), env, KIND_PARAM)
                return
            value = args[index] if index < len(args) else UNDEFINED
            yield from self._bind_pattern(param, value, env, KIND_PARAM)

    def _infer_function_name(self, value: Any, name: str):
        if isinstance(value, JSFunction) and not value.name:
            value.name = name

    # ── statements ───────────────────────────────────────────────

    def _exec(self, node, env: Environment):
        ntype = node.type
        if ntype in self.COMMENT_TYPES:
            return
        self._reject_unsupported(node)
        handler = self._STMT_DISPATCH.get(ntype)
        if handler is None:
            raise HostSyntaxError(f"Unsupported statement: {ntype}", self._line(node))
        try:
            result = handler(node, env)
            if result is not None:
                yield from result
        except HostError as error:
            if not error.line:
                error.line = self._line(node)
            raise
        if ntype in self.CAPTURED_STATEMENT_TYPES:
            line = self._line(node)
            if line in self._capture_lines:
                yield self._capture(line, env)

    def _exec_statements(self, statements: list, env: Environment):
        for stmt in statements:
            if stmt.type == "function_declaration":
                fn = self._eval_function(stmt, env)
                env.declare(fn.name, fn, KIND_FUNCTION)
        for stmt in statements:
            yield from self._exec(stmt, env)

    def _exec_nothing(self, node, env):
        return None

    def _exec_block(self, node, env):
        return self._exec_statements(self._named(node), env.child())

    def _exec_expression_statement(self, node, env):
        for child in self._named(node):
            yield from self._eval(child, env)

    def _declaration_kind(self, node) -> str:
        if node.type == "variable_declaration":
            return KIND_VAR
        keyword = node.child_by_field_name("kind")
        keyword_type = keyword.type if keyword is not None else node.children[0].type
        return KIND_CONST if keyword_type == "const" else KIND_LET

    def _exec_declaration(self, node, env):
        kind = self._declaration_kind(node)
        for declarator in node.named_children:
            if declarator.type != "variable_declarator":
                continue
            target = declarator.child_by_field_name("name")
            value_node = declarator.child_by_field_name("value")
            if value_node is None:
                if kind == KIND_CONST:
                    raise HostSyntaxError("Missing initializer in const declaration", self._line(node))
                value = UNDEFINED
            else:
                value = yield from self._eval(value_node, env)
                if target.type == "identifier":
                    self._infer_function_name(value, self._text(target))
            yield from self._bind_pattern(target, value, env, kind)

    def _exec_if(self, node, env):
        condition = yield from self._eval(node.child_by_field_name("condition"), env)
        if truthy(condition):
            yield from self._exec(node.child_by_field_name("consequence"), env)
            return
        alternative = node.child_by_field_name("alternative")
        if alternative is None:
            return
        branch = self._named(alternative)[0] if alternative.type == "else_clause" else alternative
        yield from self._exec(branch, env)

    def _loop_body(self, body, env, label: str | None):
        """Run one iteration; returns False when the loop should stop."""
        try:
            yield from self._exec(body, env)
        except _ContinueSignal as signal:
            if not signal.targets(label):
                raise
        except _BreakSignal as signal:
            if signal.targets(label):
                return False
            raise
        return True

    def _header_expression(self, node):
        if node is None or node.type in ("empty_statement", ";"):
            return None
        if node.type == "expression_statement":
            children = self._named(node)
            return children[0] if children else None
        return node

    def _exec_for(self, node, env, label: str | None = None):
        initializer = node.child_by_field_name("initializer")
        condition = self._header_expression(node.child_by_field_name("condition"))
        increment = node.child_by_field_name("increment")
        if increment is None:
            increment = node.child_by_field_name("update")
        body = node.child_by_field_name("body")

        loop_env = env.child()
        per_iteration = False
        if initializer is not None and initializer.type in ("lexical_declaration", "variable_declaration"):
            yield from self._exec_declaration(initializer, loop_env)
            per_iteration = initializer.type == "lexical_declaration"
        else:
            init_expr = self._header_expression(initializer)
            if init_expr is not None:
                yield from self._eval(init_expr, loop_env)

        while True:
            if condition is not None and not truthy((yield from self._eval(condition, loop_env))):
                break
            if not (yield from self._loop_body(body, loop_env, label)):
                break
            if per_iteration:
                # Closures from this iteration keep the old bindings.
                loop_env = loop_env.snapshot_let_bindings()
            if increment is not None:
                yield from self._eval(increment, loop_env)

    def _exec_for_in(self, node, env, label: str | None = None):
        left = node.child_by_field_name("left")
        body = node.child_by_field_name("body")
        operator = node.child_by_field_name("operator")
        if operator is not None:
            over_values = operator.type == "of"
        else:
            over_values = any(c.type == "of" for c in node.children)
        kind_node = node.child_by_field_name("kind")
        kind = None
        if kind_node is not None:
            kind = {"const": KIND_CONST, "var": KIND_VAR}.get(kind_node.type, KIND_LET)

        collection = yield from self._eval(node.child_by_field_name("right"), env)
        items = iterate(collection) if over_values else enumerable_keys(collection)
        for item in items:
            iteration_env = env.child()
            yield from self._bind_pattern(left, item, iteration_env, kind)
            if not (yield from self._loop_body(body, iteration_env, label)):
                break

    def _exec_while(self, node, env, label: str | None = None):
        condition = node.child_by_field_name("condition")
        body = node.child_by_field_name("body")
        while truthy((yield from self._eval(condition, env))):
            if not (yield from self._loop_body(body, env, label)):
                break

    def _exec_do(self, node, env, label: str | None = None):
        condition = node.child_by_field_name("condition")
        body = node.child_by_field_name("body")
        while True:
            if not (yield from self._loop_body(body, env, label)):
                break
            if not truthy((yield from self._eval(condition, env))):
                break

    def _clause_statements(self, clause) -> list:
        body = [c for c in clause.children_by_field_name("body") if c.type not in self.COMMENT_TYPES]
        if body:
            return body
        value = clause.child_by_field_name("value")
        return [
            c
            for c in self._named(clause)
            if value is None or c.start_byte != value.start_byte or c.type != value.type
        ]

    def _exec_switch(self, node, env):
        discriminant = yield from self._eval(node.child_by_field_name("value"), env)
        clauses = self._named(node.child_by_field_name("body"))
        start = None
        for index, clause in enumerate(clauses):
            if clause.type != "switch_case":
                continue
            candidate = yield from self._eval(clause.child_by_field_name("value"), env)
            if strict_equals(discriminant, candidate):
                start = index
                break
        if start is None:
            start = next((i for i, c in enumerate(clauses) if c.type == "switch_default"), None)
            if start is None:
                return
        statements = [s for clause in clauses[start:] for s in self._clause_statements(clause)]
        try:
            yield from self._exec_statements(statements, env.child())
        except _ContinueSignal:
            raise
        except _BreakSignal as signal:
            if signal.label is not None:
                raise

    def _error_value(self, error: HostError) -> Any:
        if isinstance(error, HostThrow):
            return error.value
        return {"name": error.name, "message": error.message}

    def _exec_try(self, node, env):
        handler = node.child_by_field_name("handler")
        finalizer = node.child_by_field_name("finalizer")
        pending: Exception | None = None
        try:
            try:
                yield from self._exec_block(node.child_by_field_name("body"), env)
            except HostError as error:
                if handler is None:
                    raise
                catch_env = env.child()
                parameter = handler.child_by_field_name("parameter")
                if parameter is not None:
                    yield from self._bind_pattern(parameter, self._error_value(error), catch_env, KIND_LET)
                yield from self._exec_block(handler.child_by_field_name("body"), catch_env)
        except (HostError, _Signal) as exc:
            if finalizer is None:
                raise
            pending = exc
        if finalizer is not None:
            yield from self._exec_block(finalizer.child_by_field_name("body"), env)
        if pending is not None:
            raise pending

    def _exec_return(self, node, env):
        children = self._named(node)
        value = UNDEFINED
        if children:
            value = yield from self._eval(children[0], env)
        raise _ReturnSignal(value)

    def _statement_label(self, node) -> str | None:
        label = node.child_by_field_name("label")
        return self._text(label) if label is not None else None

    def _exec_break(self, node, env):
        raise _BreakSignal(self._statement_label(node))

    def _exec_continue(self, node, env):
        raise _ContinueSignal(self._statement_label(node))

    def _exec_throw(self, node, env):
        value = yield from self._eval(self._named(node)[0], env)
        raise HostThrow(value, self._line(node))

    def _exec_labeled(self, node, env):
        label = self._text(node.child_by_field_name("label"))
        body = node.child_by_field_name("body")
        loop = self._LOOP_DISPATCH.get(body.type)
        try:
            if loop is not None:
                yield from loop(body, env, label)
            else:
                yield from self._exec(body, env)
        except _ContinueSignal:
            raise
        except _BreakSignal as signal:
            if signal.label != label:
                raise

    # ── patterns and references ──────────────────────────────────

    def _bind_pattern(self, target, value: Any, env: Environment, kind: str | None):
        """Bind *value* to a pattern; ``kind=None`` assigns instead of declaring."""
        ttype = target.type
        if ttype in ("identifier", "shorthand_property_identifier_pattern"):
            name = self._text(target)
            if kind is None:
                env.assign(name, value)
            else:
                env.declare(name, value, kind)
            return
        if ttype in ("assignment_pattern", "object_assignment_pattern"):
            if value is UNDEFINED:
                value = yield from self._eval(target.child_by_field_name("right"), env)
            yield from self._bind_pattern(target.child_by_field_name("left"), value, env, kind)
            return
        if ttype == "array_pattern":
            yield from self._bind_array_pattern(target, value, env, kind)
            return
        if ttype == "object_pattern":
            yield from self._bind_object_pattern(target, value, env, kind)
            return
        if kind is None:
            ref = yield from self._reference(target, env)
            ref.put(value)
            return
        raise HostSyntaxError(f"Invalid destructuring target: {self._text(target)}", self._line(target))

    def _bind_array_pattern(self, target, value, env, kind):
        items = iterate(value)
        index = 0
        for element in target.children:
            if element.type == ",":
                index += 1
                continue
            if not element.is_named or element.type in self.COMMENT_TYPES:
                continue
            if element.type == "rest_pattern":
                yield from self._bind_pattern(self._named(element)[0], items[index:], env, kind)
                return
            item = items[index] if index < len(items) else UNDEFINED
            yield from self._bind_pattern(element, item, env, kind)

    def _bind_object_pattern(self, target, value, env, kind):
        if is_nullish(value):
            raise HostTypeError(f"Cannot destructure '{to_display_string(value)}' as it is {to_display_string(value)}.")
        used: list[str] = []
        for prop in self._named(target):
            ptype = prop.type
            if ptype == "shorthand_property_identifier_pattern":
                key = self._text(prop)
                used.append(key)
                yield from self._bind_pattern(prop, get_property(value, key), env, kind)
            elif ptype == "object_assignment_pattern":
                key = self._text(prop.child_by_field_name("left"))
                used.append(key)
                yield from self._bind_pattern(prop, get_property(value, key), env, kind)
            elif ptype == "pair_pattern":
                key = yield from self._property_name(prop.child_by_field_name("key"), env)
                used.append(key)
                yield from self._bind_pattern(prop.child_by_field_name("value"), get_property(value, key), env, kind)
            elif ptype == "rest_pattern":
                rest = {k: get_property(value, k) for k in enumerable_keys(value) if k not in used}
                yield from self._bind_pattern(self._named(prop)[0], rest, env, kind)

    def _reference(self, node, env):
        ntype = node.type
        if ntype == "identifier":
            return _Reference(env=env, name=self._text(node))
        if ntype == "member_expression":
            target = yield from self._eval(node.child_by_field_name("object"), env)
            return _Reference(target=target, key=self._text(node.child_by_field_name("property")))
        if ntype == "subscript_expression":
            target = yield from self._eval(node.child_by_field_name("object"), env)
            key = yield from self._eval(node.child_by_field_name("index"), env)
            return _Reference(target=target, key=key)
        if ntype == "parenthesized_expression":
            return (yield from self._reference(self._named(node)[0], env))
        raise HostSyntaxError("Invalid left-hand side in assignment", self._line(node))

    def _property_name(self, node, env):
        ntype = node.type
        if ntype == "computed_property_name":
            value = yield from self._eval(self._named(node)[0], env)
            return to_property_key(value)
        if ntype == "string":
            return self._eval_string(node, env)
        if ntype == "number":
            return to_property_key(self._eval_number(node, env))
        return self._text(node)

    # ── expressions ──────────────────────────────────────────────

    def _eval(self, node, env: Environment):
        literal = self._LITERAL_DISPATCH.get(node.type)
        if literal is not None:
            return literal(node, env)
        handler = self._EXPR_DISPATCH.get(node.type)
        if handler is None:
            self._reject_unsupported(node)
            raise HostSyntaxError(f"Unsupported expression: {node.type}", self._line(node))
        return (yield from handler(node, env))

    def _eval_number(self, node, env):
        text = self._text(node).replace("_", "")
        if text.endswith("n"):
            return BigInt(int(text[:-1], 0))
        if text.lower().startswith(("0x", "0o", "0b")):
            return normalize_number(int(text, 0))
        return normalize_number(float(text))

    def _eval_string(self, node, env):
        return unescape(self._text(node)[1:-1])

    def _eval_identifier(self, node, env):
        return env.lookup(self._text(node))

    def _eval_this(self, node, env):
        return env.lookup("this") if env.has("this") else UNDEFINED

    def _eval_function(self, node, env):
        name_node = node.child_by_field_name("name")
        params = node.child_by_field_name("parameters")
        if params is None:
            params = node.child_by_field_name("parameter")
        name = self._text(name_node) if name_node is not None else ""
        closure = env
        if name and node.type != "function_declaration":
            closure = env.child()
        fn = JSFunction(
            name=name,
            params=params,
            body=node.child_by_field_name("body"),
            closure=closure,
            is_async=any(c.type == "async" for c in node.children),
            is_arrow=node.type == "arrow_function",
            line=self._line(node),
        )
        if closure is not env:
            closure.declare(name, fn, KIND_FUNCTION)
        return fn

    def _eval_parenthesized(self, node, env):
        return (yield from self._eval(self._named(node)[-1], env))

    def _eval_await(self, node, env):
        return (yield from self._eval(self._named(node)[0], env))

    def _eval_sequence(self, node, env):
        value = UNDEFINED
        for child in self._named(node):
            value = yield from self._eval(child, env)
        return value

    def _eval_ternary(self, node, env):
        condition = yield from self._eval(node.child_by_field_name("condition"), env)
        branch = "consequence" if truthy(condition) else "alternative"
        return (yield from self._eval(node.child_by_field_name(branch), env))

    def _eval_binary(self, node, env):
        op = self._text(node.child_by_field_name("operator"))
        right = node.child_by_field_name("right")
        lhs = yield from self._eval(node.child_by_field_name("left"), env)
        if op == "&&":
            return (yield from self._eval(right, env)) if truthy(lhs) else lhs
        if op == "||":
            return lhs if truthy(lhs) else (yield from self._eval(right, env))
        if op == "??":
            return (yield from self._eval(right, env)) if is_nullish(lhs) else lhs
        rhs = yield from self._eval(right, env)
        return Operators.eval_binop(op, lhs, rhs)

    def _eval_unary(self, node, env):
        op = self._text(node.child_by_field_name("operator"))
        argument = node.child_by_field_name("argument")
        if op == "typeof" and argument.type == "identifier" and not env.has(self._text(argument)):
            return "undefined"
        if op == "delete":
            if argument.type in ("member_expression", "subscript_expression"):
                ref = yield from self._reference(argument, env)
                return delete_property(ref.target, ref.key)
            return True
        operand = yield from self._eval(argument, env)
        return Operators.eval_unop(op, operand)

    def _eval_update(self, node, env):
        op = self._text(node.child_by_field_name("operator"))
        prefix = node.children[0].type in ("++", "--")
        ref = yield from self._reference(node.child_by_field_name("argument"), env)
        old = ref.get()
        if not isinstance(old, BigInt):
            old = to_number(old)
        new = Operators.eval_binop("+" if op == "++" else "-", old, BigInt(1) if isinstance(old, BigInt) else 1)
        ref.put(new)
        return new if prefix else old

    def _eval_assignment(self, node, env):
        left = node.child_by_field_name("left")
        right = node.child_by_field_name("right")
        if left.type in ("array_pattern", "object_pattern"):
            value = yield from self._eval(right, env)
            yield from self._bind_pattern(left, value, env, None)
            return value
        ref = yield from self._reference(left, env)
        value = yield from self._eval(right, env)
        if left.type == "identifier":
            self._infer_function_name(value, ref.name)
        ref.put(value)
        return value

    def _eval_augmented_assignment(self, node, env):
        op = self._text(node.child_by_field_name("operator"))[:-1]
        right = node.child_by_field_name("right")
        ref = yield from self._reference(node.child_by_field_name("left"), env)
        current = ref.get()
        if op in ("&&", "||", "??"):
            keep = {
                "&&": not truthy(current),
                "||": truthy(current),
                "??": not is_nullish(current),
            }[op]
            if keep:
                return current
            value = yield from self._eval(right, env)
        else:
            rhs = yield from self._eval(right, env)
            value = Operators.eval_binop(op, current, rhs)
        ref.put(value)
        return value

    def _eval_arguments(self, node, env):
        values: list[Any] = []
        for child in self._named(node):
            if child.type == "spread_element":
                spread = yield from self._eval(self._named(child)[0], env)
                values.extend(iterate(spread))
            else:
                values.append((yield from self._eval(child, env)))
        return values

    def _is_optional(self, node) -> bool:
        return any(c.type in ("optional_chain", "?.") for c in node.children)

    def _eval_call(self, node, env):
        callee = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        if arguments.type == "template_string":
            raise HostSyntaxError("tagged templates are not supported", self._line(node))
        if callee.type in ("member_expression", "subscript_expression"):
            ref = yield from self._reference(callee, env)
            if is_nullish(ref.target) and self._is_optional(callee):
                return UNDEFINED
            this, fn = ref.target, ref.get()
        else:
            this = UNDEFINED
            fn = yield from self._eval(callee, env)
        if is_nullish(fn) and self._is_optional(node):
            return UNDEFINED
        args = yield from self._eval_arguments(arguments, env)
        if not is_callable(fn):
            raise HostTypeError(f"{self._text(callee)} is not a function", self._line(node))
        return (yield from self.call_function(fn, this, args))

    def _eval_new(self, node, env):
        constructor_node = node.child_by_field_name("constructor")
        arguments = node.child_by_field_name("arguments")
        constructor = yield from self._eval(constructor_node, env)
        args = [] if arguments is None else (yield from self._eval_arguments(arguments, env))
        if isinstance(constructor, NativeFunction) and constructor.constructor is not None:
            return constructor.constructor(self, args)
        if isinstance(constructor, JSFunction) and not constructor.is_arrow:
            instance: dict[str, Any] = {}
            result = yield from self.call_function(constructor, instance, args)
            return result if isinstance(result, (dict, list)) else instance
        raise HostTypeError(f"{self._text(constructor_node)} is not a constructor", self._line(node))

    def _eval_member(self, node, env):
        target = yield from self._eval(node.child_by_field_name("object"), env)
        if is_nullish(target) and self._is_optional(node):
            return UNDEFINED
        return get_property(target, self._text(node.child_by_field_name("property")))

    def _eval_subscript(self, node, env):
        target = yield from self._eval(node.child_by_field_name("object"), env)
        if is_nullish(target) and self._is_optional(node):
            return UNDEFINED
        key = yield from self._eval(node.child_by_field_name("index"), env)
        return get_property(target, key)

    def _eval_array(self, node, env):
        values: list[Any] = []
        hole = True
        for child in node.children:
            if child.type in ("[", "]") or child.type in self.COMMENT_TYPES:
                continue
            if child.type == ",":
                if hole:
                    values.append(UNDEFINED)
                hole = True
                continue
            hole = False
            if child.type == "spread_element":
                spread = yield from self._eval(self._named(child)[0], env)
                values.extend(iterate(spread))
            else:
                values.append((yield from self._eval(child, env)))
        return values

    def _eval_object(self, node, env):
        result: dict[str, Any] = {}
        for prop in self._named(node):
            ptype = prop.type
            if ptype == "pair":
                key = yield from self._property_name(prop.child_by_field_name("key"), env)
                value = yield from self._eval(prop.child_by_field_name("value"), env)
                self._infer_function_name(value, key)
                result[key] = value
            elif ptype == "shorthand_property_identifier":
                name = self._text(prop)
                result[name] = env.lookup(name)
            elif ptype == "spread_element":
                source = yield from self._eval(self._named(prop)[0], env)
                for key in enumerable_keys(source):
                    result[key] = get_property(source, key)
            elif ptype == "method_definition":
                key = yield from self._property_name(prop.child_by_field_name("name"), env)
                result[key] = JSFunction(
                    name=key,
                    params=prop.child_by_field_name("parameters"),
                    body=prop.child_by_field_name("body"),
                    closure=env,
                    is_async=any(c.type == "async" for c in prop.children),
                    line=self._line(prop),
                )
            else:
                raise HostSyntaxError(f"Unsupported object member: {ptype}", self._line(prop))
        return result

    def _eval_template(self, node, env):
        parts: list[str] = []
        cursor = node.start_byte + 1
        for child in node.named_children:
            if child.type != "template_substitution":
                continue
            parts.append(unescape(self._source[cursor : child.start_byte].decode("utf-8")))
            value = yield from self._eval(self._named(child)[0], env)
            parts.append(to_display_string(value))
            cursor = child.end_byte
        parts.append(unescape(self._source[cursor : node.end_byte - 1].decode("utf-8")))
        return "".join(parts)
