"""Recover a JSON object from model output that may not be pure JSON.

Models are told to answer with JSON only, but replies still arrive wrapped
in prose or code fences. Three attempts are made, each only when the
previous one failed:

1. ``direct``: the whole reply is parsed as JSON.
2. ``greedy_span``: the text from the first ``{`` to the last ``}`` is
   parsed. This fails when the reply holds several objects, or braces
   inside the surrounding prose.
3. ``balanced_scan``: only top-level ``{`` positions are tried with
   ``json.JSONDecoder.raw_decode``. A brace that opens inside an earlier,
   still unclosed ``{`` is never a candidate, so a reply cut off mid-object
   fails instead of yielding one of its nested bullets. The decoded object
   must also carry at least one of ``summary``, ``bullets`` or ``rating``.

Only a JSON object counts as success. The outcome is returned as a value;
callers branch on ``ParseOutcome.ok`` instead of catching.
"""
import json
from dataclasses import dataclass
from typing import Any, Optional

_decoder = json.JSONDecoder()
RESULT_KEYS = frozenset(('summary', 'bullets', 'rating'))


@dataclass(frozen=True)
class ParseOutcome:
    ok: bool
    value: Optional[dict] = None
    strategy: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: dict, strategy: str) -> 'ParseOutcome':
        return cls(ok=True, value=value, strategy=strategy)

    @classmethod
    def failure(cls, error: str) -> 'ParseOutcome':
        return cls(ok=False, error=error)


def _loads_object(s: str) -> Optional[dict]:
    try:
        value: Any = json.loads(s)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None

def parse_direct(raw: str) -> Optional[dict]:
    return _loads_object(raw)

def greedy_span(raw: str) -> Optional[str]:
    start = raw.find('{')
    end = raw.rfind('}')
    if start == -1 or end <= start:
        return None
    return raw[start:end + 1]

def parse_greedy_span(raw: str) -> Optional[dict]:
    span = greedy_span(raw)
    return _loads_object(span) if span is not None else None

def _skip_unclosed(raw: str, pos: int) -> int:
    """Return the index just past the brace that closes the one at `pos`, or len(raw)."""
    depth, in_string, escaped = 0, False, False
    for i in range(pos, len(raw)):
        ch = raw[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == '\\':
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return i + 1
    return len(raw)

def parse_balanced_scan(raw: str) -> Optional[dict]:
    pos = raw.find('{')
    while pos != -1:
        try:
            value, end = _decoder.raw_decode(raw, pos)
        except ValueError:
            value, end = None, _skip_unclosed(raw, pos)
        if isinstance(value, dict) and RESULT_KEYS.intersection(value):
            return value
        pos = raw.find('{', max(end, pos + 1))
    return None

STRATEGIES = (
    ('direct', parse_direct),
    ('greedy_span', parse_greedy_span),
    ('balanced_scan', parse_balanced_scan),
)

def parse_completion(raw: Optional[str]) -> ParseOutcome:
    if not raw or not raw.strip():
        return ParseOutcome.failure('empty completion text')
    for name, strategy in STRATEGIES:
        value = strategy(raw)
        if value is not None:
            return ParseOutcome.success(value, name)
    if '{' not in raw:
        return ParseOutcome.failure('no JSON object delimiters in completion text')
    return ParseOutcome.failure('no decodable JSON object in completion text')
