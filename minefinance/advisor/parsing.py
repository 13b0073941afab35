# minefinance/advisor/parsing.py
"""
Pull a JSON array out of generated text. Services wrap JSON in code fences or
prose often enough that the raw text is never trusted as-is.
"""
from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, List

_FENCE_OPEN = re.compile(r"^```json\s*")
_FENCE_OPEN_BARE = re.compile(r"^```\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


class ParseError(ValueError):
    """Generated text did not contain the expected JSON."""


def extract_json_array(text: str) -> List[Any]:
    clean = (text or "").strip()

    first = clean.find("[")
    last = clean.rfind("]")
    if first != -1 and last != -1:
        clean = clean[first:last + 1]

    clean = _FENCE_CLOSE.sub("", _FENCE_OPEN_BARE.sub("", _FENCE_OPEN.sub("", clean)))

    try:
        parsed = json.loads(clean)
    except json.JSONDecodeError as e:
        raise ParseError(f"could not parse JSON array: {e}") from e
    if not isinstance(parsed, list):
        raise ParseError(f"expected a JSON array, got {type(parsed).__name__}")
    return parsed


def _num(row: Dict[str, Any], key: str, i: int) -> float:
    v = row.get(key)
    if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
        raise ParseError(f"row {i}: '{key}' must be a finite number, got {v!r}")
    return float(v)


def profile_rows(rows: List[Any]) -> List[Dict[str, float]]:
    """Check rows of {rate, npvA, npvB} as produced for the comparison chart."""
    out: List[Dict[str, float]] = []
    for i, row in enumerate(rows):
        if not isinstance(row, dict):
            raise ParseError(f"row {i}: expected an object, got {type(row).__name__}")
        out.append({k: _num(row, k, i) for k in ("rate", "npvA", "npvB")})
    return out


def parse_profile_rows(text: str) -> List[Dict[str, float]]:
    return profile_rows(extract_json_array(text))
