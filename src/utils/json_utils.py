from __future__ import annotations

import json
import math
import re
from typing import Any

# Lone UTF-16 surrogates survive `\uXXXX` escapes but cannot be encoded as UTF-8
_SURROGATE_RE = re.compile("[\ud800-\udfff]")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _parse_finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"JSON number out of range: {text}")
    return value


def _reject_lone_surrogates(value: Any) -> None:
    if isinstance(value, str):
        if _SURROGATE_RE.search(value):
            raise ValueError("JSON string contains an unpaired surrogate escape")
    elif isinstance(value, dict):
        for key, item in value.items():
            _reject_lone_surrogates(key)
            _reject_lone_surrogates(item)
    elif isinstance(value, list):
        for item in value:
            _reject_lone_surrogates(item)


def dumps_compact(value: Any, sort_keys: bool = False) -> str:
    """Serialize a JSON value without insignificant whitespace.

    Non-ASCII characters are written as-is so the UTF-8 encoding of the
    result is stable across producers.
    """
    return json.dumps(
        value,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        sort_keys=sort_keys,
    )


def loads_strict(data: bytes | str) -> Any:
    """Parse a JSON document that can be re-encoded as standard UTF-8 JSON.

    Rejects NaN/Infinity literals, numbers that overflow to infinity,
    unpaired surrogate escapes and non-UTF-8 input.

    Raises:
        ValueError: If the data is not valid UTF-8 JSON.
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueError("JSON document is not valid UTF-8") from e
    value = json.loads(data, parse_constant=_reject_constant, parse_float=_parse_finite_float)
    _reject_lone_surrogates(value)
    return value


__all__ = ["dumps_compact", "loads_strict"]
