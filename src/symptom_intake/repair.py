"""Response repair parser — bounded recovery of truncated JSON.

The gateway can cut output mid-structure under token pressure.  Parsing is a
three-step pipeline with exactly one retry::

    try_parse(raw)                  # direct parse
      .or_else(repair_and_parse)    # close unmatched brackets, parse again
      .unwrap()                     # value, or MalformedResponseError

The repair pass only runs when the text shows structural fragments (an
opening bracket or a ``"field":`` pair).  It appends the missing closing
tokens in nesting order and does nothing else; it is not a general
error-correcting parser.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from symptom_intake.errors import MalformedResponseError

logger = logging.getLogger(__name__)

T = TypeVar("T")

_FIELD_NAME = re.compile(r'"[A-Za-z_][A-Za-z0-9_]*"\s*:')
_CLOSERS = {"{": "}", "[": "]"}


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Outcome of one parse attempt: either ``value`` or ``error`` is set."""

    value: T | None = None
    error: str | None = None
    repaired: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    def or_else(self, fallback: Callable[[], "ParseResult[T]"]) -> "ParseResult[T]":
        """Return self on success, otherwise the result of ``fallback()``."""
        return self if self.ok else fallback()

    def unwrap(self, raw: str | None = None) -> T:
        if not self.ok:
            raise MalformedResponseError(self.error or "unparseable response", raw=raw)
        return self.value  # type: ignore[return-value]


def try_parse(raw: str) -> ParseResult[Any]:
    """Direct JSON parse, no repair."""
    if raw is None or not raw.strip():
        return ParseResult(error="empty response")
    try:
        return ParseResult(value=json.loads(raw))
    except json.JSONDecodeError as exc:
        return ParseResult(error=f"invalid JSON: {exc}")


def has_structural_fragments(raw: str) -> bool:
    """True if ``raw`` looks like (part of) a JSON object or array."""
    return "{" in raw or "[" in raw or bool(_FIELD_NAME.search(raw))


def missing_closers(text: str) -> str | None:
    """Closing tokens needed to balance ``text``, innermost first.

    Brackets inside string literals are ignored.  Returns ``None`` when the
    text cannot be balanced by appending (a stray closer, or truncation
    inside a string literal).
    """
    stack: list[str] = []
    in_string = False
    escaped = False
    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in ("}", "]"):
            if not stack or stack.pop() != ch:
                return None
    if in_string:
        return None
    return "".join(reversed(stack))


def repair_truncated(raw: str) -> str | None:
    """Append the missing closing tokens to ``raw``; ``None`` if not repairable."""
    text = raw.strip()
    # A cut right after a separator leaves a dangling comma
    if text.endswith(","):
        text = text[:-1].rstrip()
    closers = missing_closers(text)
    if closers is None:
        return None
    return text + closers


def repair_and_parse(raw: str) -> ParseResult[Any]:
    """The single repair attempt."""
    if raw is None or not has_structural_fragments(raw):
        return ParseResult(error="no structural fragments to repair")
    fixed = repair_truncated(raw)
    if fixed is None:
        return ParseResult(error="unbalanced structure could not be repaired")
    result = try_parse(fixed)
    if not result.ok:
        return ParseResult(error=f"repair failed: {result.error}")
    logger.info("Recovered truncated gateway output (repaired tail: %r)", fixed[-8:])
    return ParseResult(value=result.value, repaired=True)


def parse_structured(raw: str, schema: Any = None) -> Any:
    """Parse ``raw`` into a Python value, or into ``schema`` when given.

    Args:
        raw: gateway output, possibly truncated.
        schema: optional type (pydantic model, ``list[Model]``, ...) the
            parsed value is validated against.

    Raises:
        MalformedResponseError: the direct parse and the repair pass both
            failed, or the parsed value does not fit ``schema``.
    """
    result = try_parse(raw).or_else(lambda: repair_and_parse(raw))
    if not result.ok:
        logger.warning("Unparseable gateway output: %s", result.error)
        logger.debug("Raw gateway output: %r", raw)
    value = result.unwrap(raw)
    if schema is None:
        return value
    try:
        return TypeAdapter(schema).validate_python(value)
    except ValidationError as exc:
        raise MalformedResponseError(
            f"gateway output does not match {getattr(schema, '__name__', schema)}: {exc}",
            raw=raw,
        ) from exc
