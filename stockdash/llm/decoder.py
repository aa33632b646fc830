"""Decoder for JSON values embedded in free-form model output.

Pipeline: strip a surrounding code fence, strip control characters, parse,
then validate against a declared shape. The result is tagged: callers
match on ``Decoded`` / ``DecodeFailure`` instead of probing for error keys.
"""

import json
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

T = TypeVar("T")

_FENCE_RE = re.compile(r"^```[\w-]*[ \t]*\n?(.*?)\n?\s*```$", re.DOTALL)
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


@dataclass(frozen=True)
class Decoded(Generic[T]):
    value: T


@dataclass(frozen=True)
class DecodeFailure:
    reason: str
    raw: str
    processed: str


DecodeResult = Decoded[T] | DecodeFailure


def strip_code_fence(text: str) -> str:
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def strip_control_chars(text: str) -> str:
    return _CONTROL_CHARS_RE.sub("", text)


def normalize(text: str) -> str:
    return strip_control_chars(strip_code_fence(text))


@lru_cache(maxsize=64)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def decode(text: str | None, shape: type[T] | Any) -> DecodeResult[T]:
    """Parse `text` as JSON and validate it strictly against `shape`."""
    raw = text or ""
    processed = normalize(raw)
    if not processed:
        return DecodeFailure(reason="empty response", raw=raw, processed=processed)

    try:
        json.loads(processed)
    except json.JSONDecodeError as exc:
        return DecodeFailure(reason=f"invalid JSON: {exc}", raw=raw, processed=processed)

    # JSON-mode strict validation: objects map onto models, primitives are never coerced
    try:
        value = _adapter(shape).validate_json(processed, strict=True)
    except PydanticValidationError as exc:
        return DecodeFailure(
            reason=f"shape mismatch: {exc.error_count()} error(s): {exc.errors()[0]['msg']}",
            raw=raw,
            processed=processed,
        )
    return Decoded(value)
