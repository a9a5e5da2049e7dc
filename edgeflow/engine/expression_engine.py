"""
Expression engine for node configuration.

Two small languages live here:

* Interpolation: ``${identifier}`` inside a string is replaced with the
  string form of ``data[identifier]``. Unknown identifiers stay verbatim.
* Expressions: TRANSFORM and FILTER nodes evaluate a restricted
  Python-flavoured grammar through simpleeval (no eval() or exec()).

Supported expression features:

* literals: numbers, strings, ``True/False/None`` and ``true/false/null``,
  lists, tuples, dicts (``{**data, "flag": true}`` spreads a mapping)
* arithmetic ``+ - * / // % **``, unary ``-`` and ``+``
* comparisons ``== != < <= > >= in``, ``not in``; JS-style ``===``,
  ``!==`` are accepted as aliases
* boolean ``and or not``; JS-style ``&& || !`` are accepted as aliases
* conditional ``a if cond else b``
* field access ``data.user.name`` and indexing ``data["user"]``, ``items[0]``
* whitelisted functions, see ``ExpressionEngine._setup_evaluator``

Names visible to an expression are ``data`` and ``item`` (both the current
context data) plus every top-level key of the context data.
"""

from __future__ import annotations

import ast
import json
import logging
import math
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from simpleeval import (
    DEFAULT_FUNCTIONS,
    DEFAULT_OPERATORS,
    AttributeDoesNotExist,
    EvalWithCompoundTypes,
)

from ..core.exceptions import ExpressionError

logger = logging.getLogger(__name__)

INTERPOLATION_PATTERN = re.compile(r"\$\{(\w+)\}")

_STRING_LITERAL = re.compile(r"""("(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*')""")

_JS_OPERATORS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"==="), "=="),
    (re.compile(r"!=="), "!="),
    (re.compile(r"&&"), " and "),
    (re.compile(r"\|\|"), " or "),
    (re.compile(r"!(?!=)"), " not "),
]

_LITERAL_NAMES: dict[str, Any] = {"true": True, "false": False, "null": None}


class ContextEvaluator(EvalWithCompoundTypes):
    """simpleeval evaluator tuned for JSON-shaped context data."""

    def _eval_attribute(self, node: ast.Attribute) -> Any:
        # Mapping keys win over dict methods, so ``data.items`` reads a key.
        value = self._eval(node.value)
        if isinstance(value, Mapping):
            if node.attr.startswith("_"):
                raise AttributeDoesNotExist(node.attr, self.expr)
            return value.get(node.attr)
        return super()._eval_attribute(node)

    def _eval_dict(self, node: ast.Dict) -> dict[Any, Any]:
        result: dict[Any, Any] = {}
        for key, value in zip(node.keys, node.values):
            if key is None:
                spread = self._eval(value)
                if not isinstance(spread, Mapping):
                    raise TypeError("Only mappings can be spread with **")
                result.update(spread)
            else:
                result[self._eval(key)] = self._eval(value)
        return result


class ExpressionEngine:
    """
    Safe expression evaluator and ``${}`` interpolator.

    Uses simpleeval with a whitelist of allowed functions.
    """

    def __init__(self) -> None:
        self._setup_evaluator()

    def _setup_evaluator(self) -> None:
        """Set up the safe evaluator with allowed functions."""
        self.evaluator = ContextEvaluator()
        self.evaluator.operators = DEFAULT_OPERATORS.copy()

        self.evaluator.functions = {
            **DEFAULT_FUNCTIONS,
            # Type conversion
            "str": str,
            "int": int,
            "float": float,
            "bool": bool,
            "list": list,
            "dict": dict,
            # String functions
            "lower": lambda s: str(s).lower(),
            "upper": lambda s: str(s).upper(),
            "trim": lambda s: str(s).strip(),
            "split": lambda s, sep=",": str(s).split(sep),
            "join": lambda arr, sep="": sep.join(str(x) for x in arr),
            "includes": lambda s, search: search in s,
            "replace": lambda s, old, new: str(s).replace(old, new),
            "startswith": lambda s, prefix: str(s).startswith(prefix),
            "endswith": lambda s, suffix: str(s).endswith(suffix),
            "length": len,
            "len": len,
            # Array functions
            "first": lambda arr: arr[0] if arr else None,
            "last": lambda arr: arr[-1] if arr else None,
            "sort": sorted,
            "unique": lambda arr: list(dict.fromkeys(arr)),
            "flatten": lambda arr: [item for sublist in arr for item in sublist],
            # Math functions
            "abs": abs,
            "min": min,
            "max": max,
            "sum": sum,
            "round": round,
            "floor": math.floor,
            "ceil": math.ceil,
            # Date functions
            "now": lambda: int(datetime.now(timezone.utc).timestamp() * 1000),
            "date_now": lambda: datetime.now(timezone.utc).isoformat(),
            # JSON functions
            "json_stringify": lambda v: json.dumps(v, ensure_ascii=False),
            "json_parse": lambda s: json.loads(s) if s else None,
            # Object functions
            "keys": lambda d: list(d.keys()) if isinstance(d, Mapping) else [],
            "values": lambda d: list(d.values()) if isinstance(d, Mapping) else [],
            "get": lambda d, key, default=None: d.get(key, default) if isinstance(d, Mapping) else default,
            "is_empty": lambda v: v is None or v == "" or (isinstance(v, (list, dict)) and len(v) == 0),
        }

    # --- Interpolation ---

    def interpolate(self, value: Any, data: Mapping[str, Any]) -> Any:
        """
        Replace ``${key}`` placeholders with values from ``data``.

        Handles strings, mappings and lists recursively; other values are
        returned untouched.
        """
        if isinstance(value, str):
            return self._interpolate_string(value, data)

        if isinstance(value, list):
            return [self.interpolate(item, data) for item in value]

        if isinstance(value, Mapping):
            return {key: self.interpolate(val, data) for key, val in value.items()}

        return value

    def _interpolate_string(self, template: str, data: Mapping[str, Any]) -> str:
        def replacer(match: re.Match[str]) -> str:
            key = match.group(1)
            if key not in data:
                return match.group(0)
            return stringify(data[key])

        return INTERPOLATION_PATTERN.sub(replacer, template)

    # --- Expressions ---

    def evaluate(self, expression: str, data: Mapping[str, Any]) -> Any:
        """
        Evaluate an expression against context data.

        Raises:
            ExpressionError: If the expression is malformed, uses a
                disallowed construct, or fails while evaluating.
        """
        if not isinstance(expression, str) or not expression.strip():
            raise ExpressionError("Expression is empty", expression=str(expression))

        transformed = self._transform_expression(expression.strip())
        self.evaluator.names = self._build_names(data)

        try:
            return self.evaluator.eval(transformed)
        except Exception as e:
            logger.debug("Expression evaluation failed: %s (expression: %s)", e, expression)
            raise ExpressionError(
                f"Expression evaluation failed: {e}", expression=expression
            ) from e

    def _transform_expression(self, expression: str) -> str:
        """Rewrite JS-style operators outside string literals."""
        parts = _STRING_LITERAL.split(expression)
        for index in range(0, len(parts), 2):
            segment = parts[index]
            for pattern, replacement in _JS_OPERATORS:
                segment = pattern.sub(replacement, segment)
            parts[index] = segment
        return "".join(parts).strip()

    def _build_names(self, data: Mapping[str, Any]) -> dict[str, Any]:
        snapshot = dict(data)
        names: dict[str, Any] = {
            key: value for key, value in snapshot.items() if isinstance(key, str)
        }
        names.update(_LITERAL_NAMES)
        names["data"] = snapshot
        names["item"] = snapshot
        return names


def stringify(value: Any) -> str:
    """Convert a context value to its interpolated string form."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Mapping):
        return json.dumps(dict(value), ensure_ascii=False, default=str)
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value), ensure_ascii=False, default=str)
    return str(value)


# Singleton instance
expression_engine = ExpressionEngine()
