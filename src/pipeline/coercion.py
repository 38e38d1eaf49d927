"""Structured response coercion for chat-model replies.

Chat models wrap JSON in prose and code fences and sometimes leave trailing
commas. `coerce()` pulls out the outermost array or object and decodes it;
`decode()` validates the result against a pydantic type.
"""

import json
import re
from enum import Enum
from typing import Any, Literal, Type, TypeVar

from pydantic import TypeAdapter, ValidationError

from src.utils.logger import logger


T = TypeVar("T")

Shape = Literal["array", "object"]

_BRACKETS = {"array": ("[", "]", list), "object": ("{", "}", dict)}


class CoercionErrorKind(str, Enum):
    NO_BRACKET_FOUND = "no_bracket_found"
    DECODE_FAILED = "decode_failed"


class CoercionError(Exception):
    """No JSON value of the requested shape could be read from the text."""

    def __init__(self, kind: CoercionErrorKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind


class SchemaError(Exception):
    """Decoded JSON does not match the expected type."""


def _fix_trailing_commas(text: str) -> str:
    """Remove trailing commas before a closing bracket (common LLM error)."""
    text = re.sub(r",\s*}", "}", text)
    text = re.sub(r",\s*]", "]", text)
    return text


def coerce(raw_text: str, shape: Shape) -> Any:
    """Extract and decode the outermost JSON array or object from free text.

    The candidate runs from the first opening bracket of the requested kind to
    the last closing bracket of the same kind. A failed decode is retried once
    with trailing commas removed.

    Args:
        raw_text: Model reply, possibly with prose or code fences around the JSON.
        shape: "array" or "object".

    Returns:
        Decoded list (shape="array") or dict (shape="object").

    Raises:
        CoercionError: NO_BRACKET_FOUND or DECODE_FAILED.
    """
    opening, closing, expected_type = _BRACKETS[shape]
    raw_text = raw_text or ""

    start = raw_text.find(opening)
    end = raw_text.rfind(closing)
    if start == -1 or end == -1 or end < start:
        raise CoercionError(CoercionErrorKind.NO_BRACKET_FOUND, f"No JSON {shape} found in reply")

    candidate = raw_text[start : end + 1]
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError as first_error:
        try:
            value = json.loads(_fix_trailing_commas(candidate))
        except json.JSONDecodeError:
            raise CoercionError(
                CoercionErrorKind.DECODE_FAILED, f"Invalid JSON {shape}: {first_error}"
            ) from first_error
        logger.debug(f"Decoded JSON {shape} after removing trailing commas", extra={"stage": "coercion"})

    if not isinstance(value, expected_type):
        raise CoercionError(
            CoercionErrorKind.DECODE_FAILED, f"Expected JSON {shape}, got {type(value).__name__}"
        )
    return value


def decode(value: Any, target: Type[T]) -> T:
    """Validate a decoded JSON value against a pydantic model or type.

    Raises:
        SchemaError: If validation fails.
    """
    try:
        return TypeAdapter(target).validate_python(value)
    except ValidationError as e:
        raise SchemaError(f"{getattr(target, '__name__', target)}: {e.error_count()} validation error(s)") from e


def decode_items(values: list, target: Type[T]) -> list[T]:
    """Decode each element independently, dropping the ones that fail."""
    decoded = []
    for index, value in enumerate(values):
        try:
            decoded.append(decode(value, target))
        except SchemaError as e:
            logger.debug(f"Dropping item {index}: {e}", extra={"stage": "coercion"})
    return decoded
