"""Constrained evaluator for Janet package files.

pkgs.janet is a small program rather than pure data: the package table is
sometimes built with ``let`` bindings, ``merge`` or ``string`` concatenation.
This module evaluates exactly those constructs and nothing else, so a
downloaded file can never run arbitrary code.
"""

from __future__ import annotations

from collections.abc import Callable

from pkgdir.descriptor.reader import Compound, Keyword, Symbol, read_forms
from pkgdir.errors import EvaluationError


class Opaque:
    """Placeholder bound by ``defn``/``defmacro``; never callable."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<function {self.name}>"


class Environment:
    """Chained symbol table."""

    def __init__(self, parent: Environment | None = None) -> None:
        self._vars: dict[str, object] = {}
        self._parent = parent

    def define(self, name: str, value: object) -> None:
        self._vars[name] = value

    def lookup(self, name: str) -> object:
        env: Environment | None = self
        while env is not None:
            if name in env._vars:
                return env._vars[name]
            env = env._parent
        raise EvaluationError(f"unknown symbol: {name}")

    def child(self) -> Environment:
        return Environment(self)


def _store(result: dict, key: object, value: object, what: str) -> None:
    # Keyword, Symbol and str are all str subclasses and hash alike, so :a,
    # 'a and "a" would share a slot. Janet keeps them apart; refuse instead.
    try:
        if isinstance(key, str) and key in result:
            existing = next(k for k in result if k == key)
            if type(existing) is not type(key):
                raise EvaluationError(
                    f"{what} keys {existing!r} and {key!r} collide"
                )
        result[key] = value
    except TypeError:
        raise EvaluationError(f"{what} key is not hashable: {key!r}") from None


def _pairs(values: list, what: str) -> dict:
    if len(values) % 2:
        raise EvaluationError(f"{what} needs an even number of arguments")
    result: dict = {}
    for key, value in zip(values[::2], values[1::2]):
        _store(result, key, value, what)
    return result


def _stringify(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise EvaluationError(f"cannot convert {value!r} to a string")


def _merge(*values: object) -> dict:
    result: dict = {}
    for value in values:
        if not isinstance(value, dict):
            raise EvaluationError(f"merge expects tables or structs, got {value!r}")
        for key, item in value.items():
            _store(result, key, item, "merge")
    return result


BUILTINS: dict[str, Callable[..., object]] = {
    "struct": lambda *args: _pairs(list(args), "struct"),
    "table": lambda *args: _pairs(list(args), "table"),
    "merge": _merge,
    "string": lambda *args: "".join(_stringify(a) for a in args),
    "keyword": lambda *args: Keyword("".join(_stringify(a) for a in args)),
    "symbol": lambda *args: Symbol("".join(_stringify(a) for a in args)),
    "tuple": lambda *args: tuple(args),
    "array": lambda *args: list(args),
}

DEF_FORMS = ("def", "def-", "var", "var-")
FUNCTION_FORMS = ("defn", "defn-", "defmacro", "defmacro-")


class Evaluator:
    def __init__(self, env: Environment | None = None) -> None:
        self.env = env or Environment()

    def evaluate(self, form: object, env: Environment | None = None) -> object:
        env = env or self.env
        if isinstance(form, Keyword):
            return form
        if isinstance(form, Symbol):
            return env.lookup(form)
        if not isinstance(form, Compound):
            return form
        if form.kind == "[":
            values = [self.evaluate(item, env) for item in form.items]
            return values if form.mutable else tuple(values)
        if form.kind == "{":
            return _pairs([self.evaluate(item, env) for item in form.items], "struct")
        if form.mutable:
            return [self.evaluate(item, env) for item in form.items]
        return self._evaluate_call(form, env)

    def _evaluate_call(self, form: Compound, env: Environment) -> object:
        if not form.items:
            return ()
        head = form.head
        args = form.items[1:]
        if not isinstance(head, Symbol):
            raise EvaluationError(f"line {form.line}: cannot call {head!r}")

        if head == "quote":
            self._arity(form, 1)
            return args[0]
        if head in DEF_FORMS:
            return self._evaluate_def(form, env)
        if head in FUNCTION_FORMS:
            if not args or not isinstance(args[0], Symbol):
                raise EvaluationError(f"line {form.line}: {head} needs a name")
            marker = Opaque(args[0])
            env.define(args[0], marker)
            return marker
        if head == "let":
            return self._evaluate_let(form, env)
        if head == "do":
            result = None
            for item in args:
                result = self.evaluate(item, env)
            return result

        builtin = BUILTINS.get(head)
        if builtin is None:
            raise EvaluationError(f"line {form.line}: unsupported form ({head} ...)")
        return builtin(*(self.evaluate(arg, env) for arg in args))

    def _evaluate_def(self, form: Compound, env: Environment) -> object:
        args = form.items[1:]
        if len(args) < 2 or not isinstance(args[0], Symbol):
            raise EvaluationError(f"line {form.line}: malformed {form.head}")
        # Janet allows metadata (docstrings, :private) between name and value.
        value = self.evaluate(args[-1], env)
        env.define(args[0], value)
        return value

    def _evaluate_let(self, form: Compound, env: Environment) -> object:
        args = form.items[1:]
        if not args or not isinstance(args[0], Compound) or args[0].kind != "[":
            raise EvaluationError(f"line {form.line}: let needs a binding tuple")
        bindings = args[0].items
        if len(bindings) % 2:
            raise EvaluationError(f"line {form.line}: odd number of let bindings")
        scope = env.child()
        for name, expr in zip(bindings[::2], bindings[1::2]):
            if not isinstance(name, Symbol):
                raise EvaluationError(f"line {form.line}: let binds symbols only")
            scope.define(name, self.evaluate(expr, scope))
        result = None
        for item in args[1:]:
            result = self.evaluate(item, scope)
        return result

    @staticmethod
    def _arity(form: Compound, count: int) -> None:
        if len(form.items) - 1 != count:
            raise EvaluationError(
                f"line {form.line}: {form.head} takes {count} argument(s)"
            )


def load_module(text: str, limit: int | None = None) -> tuple[list, list]:
    """Read every top-level form of ``text`` and evaluate them in order.

    Only the first ``limit`` forms are evaluated when ``limit`` is given.
    Returns the raw forms and the values of the evaluated ones.
    """
    forms = read_forms(text)
    evaluator = Evaluator()
    values = [evaluator.evaluate(form) for form in forms[:limit]]
    return forms, values
