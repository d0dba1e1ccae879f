"""Placeholder substitution against the report's data context.

Text, image paths and key/value entries may embed ``{{ ... }}`` placeholders
that reference dotted paths into the data document, optionally piped
through a small set of helpers:

    {{ .Customer.Name | upper }}
    {{ .Notes | default("n/a") }}   or  {{ .Notes | default "n/a" }}
    {{ add(.Subtotal, .Tax) }}      or  {{ add .Subtotal .Tax }}
    {{ .Subtotal | add(.Tax) }}

Each placeholder is evaluated on its own as a Jinja2 expression in a
sandboxed environment with strict undefined handling; the text around it
is never parsed. Leading-dot paths such as ``.Order.Total`` are stripped
and helper calls written with space-separated arguments are rewritten to
call form before compilation. Substitution fails open: a fragment with a
placeholder that cannot be evaluated is returned exactly as written.
"""

import json
import logging
import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from jinja2 import StrictUndefined, Undefined
from jinja2.environment import TemplateExpression
from jinja2.exceptions import TemplateError
from jinja2.sandbox import SandboxedEnvironment

from reportml.exceptions import SubstitutionError

logger = logging.getLogger(__name__)

PLACEHOLDER_OPEN = "{{"
PLACEHOLDER_CLOSE = "}}"

_EXPRESSION = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
# Quoted strings are matched first so dots inside literals are kept.
_LEADING_DOT = re.compile(r"(\"[^\"]*\"|'[^']*')|(?<![\w\])'\"])\.(?=[A-Za-z_])")
_TOKEN = re.compile(r"\"[^\"]*\"|'[^']*'|\S+")

ARITHMETIC_HELPERS = ("add", "sub", "mul", "div")
TEXT_HELPERS = ("upper", "lower", "title", "trim")
_SPACE_CALL_HELPERS = frozenset(ARITHMETIC_HELPERS + TEXT_HELPERS + ("default",))


def _split_pipeline(body: str) -> list[str]:
    """Split an expression on ``|`` outside quotes and brackets."""
    stages: list[str] = []
    current: list[str] = []
    quote = ""
    depth = 0
    for char in body:
        if quote:
            if char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char in "([{":
            depth += 1
        elif char in ")]}":
            depth -= 1
        elif char == "|" and depth == 0:
            stages.append("".join(current))
            current = []
            continue
        current.append(char)
    stages.append("".join(current))
    return stages


def _call_form(stage: str) -> str:
    """Rewrite ``add A B`` as ``add(A, B)`` and ``default "x"`` as ``default("x")``."""
    tokens = _TOKEN.findall(stage)
    if len(tokens) < 2 or tokens[0] not in _SPACE_CALL_HELPERS or tokens[1].startswith("("):
        return stage
    leading = stage[: len(stage) - len(stage.lstrip())]
    trailing = stage[len(stage.rstrip()):]
    return f"{leading}{tokens[0]}({', '.join(tokens[1:])}){trailing}"


def normalize_expression(body: str) -> str:
    """Rewrite one placeholder body into the expression syntax Jinja expects."""
    body = _LEADING_DOT.sub(lambda m: m.group(1) or "", body)
    return "|".join(_call_form(stage) for stage in _split_pipeline(body))


def normalize_placeholders(fragment: str) -> str:
    """Rewrite every placeholder in ``fragment``, e.g. ``{{ .A.B }}`` to ``{{ A.B }}``."""
    return _EXPRESSION.sub(
        lambda m: PLACEHOLDER_OPEN + normalize_expression(m.group(1)) + PLACEHOLDER_CLOSE,
        fragment,
    )


def _operand(value: Any) -> int | float | Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise SubstitutionError(
            f"Arithmetic helpers need numeric operands, got {type(value).__name__}",
            context={"value": repr(value)},
        )
    return value


def add(a: Any, b: Any) -> int | float | Decimal:
    return _operand(a) + _operand(b)


def sub(a: Any, b: Any) -> int | float | Decimal:
    return _operand(a) - _operand(b)


def mul(a: Any, b: Any) -> int | float | Decimal:
    return _operand(a) * _operand(b)


def div(a: Any, b: Any) -> int | float | Decimal:
    """Divide ``a`` by ``b``; division by zero yields 0."""
    numerator, denominator = _operand(a), _operand(b)
    if denominator == 0:
        return 0
    return numerator / denominator


def default(value: Any, fallback: Any = "") -> Any:
    """Return ``fallback`` when ``value`` is missing, None or an empty string."""
    if isinstance(value, Undefined) or value is None or value == "":
        return fallback
    return value


def _to_text(value: Any) -> str:
    """Render an evaluated placeholder the way the JSON data spells it."""
    if isinstance(value, Undefined):
        # StrictUndefined raises here.
        return str(value)
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, default=str, ensure_ascii=False)
    return str(value)


class _BindingEnvironment(SandboxedEnvironment):
    """Sandboxed environment where ``a.b`` on a mapping means the key ``b``.

    Plain Jinja tries attributes first, so ``.Order.items`` would return the
    dict method instead of the data field.
    """

    def getattr(self, obj: Any, attribute: str) -> Any:
        if isinstance(obj, Mapping):
            try:
                return obj[attribute]
            except KeyError:
                return self.undefined(obj=obj, name=attribute)
        return super().getattr(obj, attribute)


def create_environment() -> SandboxedEnvironment:
    """Create the Jinja2 environment used for placeholder evaluation."""
    env = _BindingEnvironment(undefined=StrictUndefined, autoescape=False)
    helpers = {"add": add, "sub": sub, "mul": mul, "div": div}
    env.filters.update(helpers)
    env.filters["default"] = default
    env.filters["d"] = default
    env.globals.update(helpers)
    env.globals["default"] = default
    env.globals.update({name: env.filters[name] for name in TEXT_HELPERS})
    return env


class DataBinder:
    """Resolves placeholders against a data context.

    Attributes:
        context: The data document placeholders are evaluated against
    """

    def __init__(self, context: Mapping[str, Any] | None = None) -> None:
        self.context: dict[str, Any] = dict(context or {})
        self._env = create_environment()
        self._cache: dict[str, TemplateExpression] = {}

    def set_context(self, context: Mapping[str, Any]) -> None:
        """Replace the data context."""
        self.context = dict(context)

    def merge(self, data: Mapping[str, Any]) -> None:
        """Merge top-level keys into the context; later values win."""
        self.context.update(data)

    def clear(self) -> None:
        self.context = {}
        self._cache.clear()

    def resolve(self, fragment: str) -> str:
        """Substitute every placeholder in ``fragment``.

        Args:
            fragment: Text that may contain ``{{ ... }}`` placeholders

        Returns:
            The rendered text, or ``fragment`` itself when it holds no
            placeholder or when any placeholder fails to evaluate
        """
        if PLACEHOLDER_OPEN not in fragment:
            return fragment

        try:
            return _EXPRESSION.sub(self._evaluate, fragment)
        except (
            TemplateError,
            SubstitutionError,
            TypeError,
            ValueError,
            AttributeError,
            LookupError,
            ArithmeticError,
        ) as e:
            logger.debug(f"Leaving placeholder unresolved in {fragment!r}: {e}")
            return fragment

    def _evaluate(self, match: re.Match) -> str:
        source = match.group(1)
        expression = self._cache.get(source)
        if expression is None:
            expression = self._env.compile_expression(
                normalize_expression(source),
                undefined_to_none=False,
            )
            self._cache[source] = expression
        return _to_text(expression(self.context))

    def lookup(self, key: str) -> Any:
        """Return the raw value at a dotted path in the context.

        Args:
            key: Path such as "Order.Items"; placeholder delimiters and a
                leading dot are accepted and stripped

        Returns:
            The value, or None if any path segment is missing
        """
        path = self.extract_data_key(key)
        if not path:
            return None
        value: Any = self.context
        for part in path.split("."):
            if not isinstance(value, Mapping) or part not in value:
                return None
            value = value[part]
        return value

    @staticmethod
    def extract_data_key(fragment: str) -> str:
        """Turn a data-source reference into a lookup key.

        Example:
            ```python
            DataBinder.extract_data_key("{{ .Items }}")  # "Items"
            DataBinder.extract_data_key("Items")         # "Items"
            ```
        """
        key = fragment.strip()
        if key.startswith(PLACEHOLDER_OPEN):
            key = key[len(PLACEHOLDER_OPEN):]
        if key.endswith(PLACEHOLDER_CLOSE):
            key = key[: -len(PLACEHOLDER_CLOSE)]
        key = key.strip()
        if key.startswith("."):
            key = key[1:]
        return key
