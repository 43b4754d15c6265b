import json, re
from dataclasses import dataclass
from typing import Literal
from termscan.errors import MissingOrInvalidField, TooShort, TooLong

MIN_TEXT_CHARS = 50
MAX_TEXT_CHARS = 20000

Language = Literal['en', 'es']

_ESCAPES = str.maketrans({
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#x27;',
    '/': '&#x2F;',
    '\\': '&#x5C;',
    '`': '&#96;',
})
_WS = re.compile(r'\s+')
_PARTIAL_ENTITY = re.compile(r'&[#\w]*$')


@dataclass(frozen=True)
class SanitizedInput:
    text: str
    language: Language


def coerce_language(value) -> Language:
    return 'es' if value == 'es' else 'en'

def escape_html(s: str) -> str:
    return s.translate(_ESCAPES)

def truncate(s: str, limit: int = MAX_TEXT_CHARS) -> str:
    if len(s) <= limit:
        return s
    cut = s[:limit]
    # an entity split by the cut would leave a bare '&' behind
    return _PARTIAL_ENTITY.sub('', cut)

def sanitize_text(text: str) -> str:
    s = escape_html(text.strip())
    s = _WS.sub(' ', s)
    return truncate(s)

def decode_body(raw: bytes) -> dict:
    try:
        body = json.loads(raw or b'{}')
    except (ValueError, UnicodeDecodeError) as e:
        raise MissingOrInvalidField(f'malformed json: {e}')
    if not isinstance(body, dict):
        raise MissingOrInvalidField(f'body is {type(body).__name__}, expected object')
    return body

def validate(body: dict) -> SanitizedInput:
    text = body.get('text')
    if not text or not isinstance(text, str):
        raise MissingOrInvalidField(f'text is {type(text).__name__}')
    trimmed_len = len(text.strip())
    if trimmed_len < MIN_TEXT_CHARS:
        raise TooShort(f'{trimmed_len} chars')
    if len(text) > MAX_TEXT_CHARS:
        raise TooLong(f'{len(text)} chars')
    return SanitizedInput(text=sanitize_text(text), language=coerce_language(body.get('language')))
