from typing import Any, Mapping, Optional
from termscan.schemas import Bullet, SummarizeResponse

DEFAULT_RATING = 'Risky'
RATINGS = {'secure': 'Secure', 'risky': 'Risky', 'not secure': 'Not secure'}
BULLET_TYPES = ('pro', 'warning')


def normalize_summary(value: Any) -> str:
    return value if isinstance(value, str) else ''

def normalize_rating(value: Any) -> str:
    # unknown is treated as risky, never as secure
    if not value or not isinstance(value, str):
        return DEFAULT_RATING
    return RATINGS.get(value.strip().lower(), DEFAULT_RATING)

def normalize_bullet(item: Any) -> Bullet:
    if not isinstance(item, Mapping):
        return Bullet(type='con', text='')
    raw_type = item.get('type')
    t = str(raw_type).lower() if raw_type else 'con'
    raw_text = item.get('text')
    return Bullet(type=t if t in BULLET_TYPES else 'con', text=str(raw_text) if raw_text else '')

def normalize_bullets(value: Any) -> list[Bullet]:
    if not isinstance(value, (list, tuple)):
        return []
    return [normalize_bullet(b) for b in value]

def normalize(parsed: Optional[Mapping]) -> SummarizeResponse:
    """Coerce an untrusted parsed object into the response shape. Never raises."""
    parsed = parsed if isinstance(parsed, Mapping) else {}
    return SummarizeResponse(
        summary=normalize_summary(parsed.get('summary')),
        bullets=normalize_bullets(parsed.get('bullets')),
        rating=normalize_rating(parsed.get('rating')),
    )
