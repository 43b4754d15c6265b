import math, time
from dataclasses import dataclass, field
from typing import AsyncIterable, Callable, Optional
from termscan.errors import PayloadTooLarge, RateLimited, CorsRejected

MAX_PAYLOAD_BYTES = 250 * 1024
RATE_WINDOW_S = 60.0
RATE_MAX_HITS = 30


@dataclass
class _Window:
    reset_at: float
    hits: int = 0


@dataclass
class RateDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_in_s: int

    def headers(self) -> dict:
        h = {
            'X-RateLimit-Limit': str(self.limit),
            'X-RateLimit-Remaining': str(self.remaining),
            'X-RateLimit-Reset': str(self.reset_in_s),
        }
        if not self.allowed:
            h['Retry-After'] = str(self.reset_in_s)
        return h


class RateLimiter:
    """Per-client hit counter over a fixed window that opens on the client's first hit.

    Runs on the event loop only; `hit` never awaits, so no lock is needed.
    """

    def __init__(self, max_hits: int = RATE_MAX_HITS, window_s: float = RATE_WINDOW_S,
                 clock: Callable[[], float] = time.monotonic):
        self.max_hits = max_hits
        self.window_s = window_s
        self.clock = clock
        self._windows: dict[str, _Window] = {}
        self._next_prune = 0.0

    def hit(self, client: str) -> RateDecision:
        now = self.clock()
        self._prune(now)
        w = self._windows.get(client)
        if w is None or now >= w.reset_at:
            w = _Window(reset_at=now + self.window_s)
            self._windows[client] = w
        w.hits += 1
        reset_in = max(0, math.ceil(w.reset_at - now))
        return RateDecision(
            allowed=w.hits <= self.max_hits,
            limit=self.max_hits,
            remaining=max(0, self.max_hits - w.hits),
            reset_in_s=reset_in,
        )

    def _prune(self, now: float) -> None:
        if now < self._next_prune:
            return
        for key in [k for k, w in self._windows.items() if now >= w.reset_at]:
            del self._windows[key]
        self._next_prune = now + self.window_s

    def __len__(self):
        return len(self._windows)


@dataclass
class AdmissionState:
    allowlist: tuple[str, ...] = ()
    limiter: RateLimiter = field(default_factory=RateLimiter)
    max_payload_bytes: int = MAX_PAYLOAD_BYTES

    @property
    def permissive_cors(self) -> bool:
        return not self.allowlist


def check_payload_size(size: Optional[int], limit: int = MAX_PAYLOAD_BYTES) -> None:
    if size is not None and size > limit:
        raise PayloadTooLarge(f'{size} bytes exceeds {limit}')

async def read_capped(chunks: AsyncIterable[bytes], limit: int = MAX_PAYLOAD_BYTES) -> bytes:
    """Collect a request body, failing as soon as the running size crosses `limit`."""
    body = bytearray()
    async for chunk in chunks:
        body += chunk
        check_payload_size(len(body), limit)
    return bytes(body)

def parse_content_length(raw: Optional[str]) -> Optional[int]:
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        return None

def check_rate(state: AdmissionState, client: str) -> RateDecision:
    decision = state.limiter.hit(client)
    if not decision.allowed:
        raise RateLimited(f'client {client} over {decision.limit} hits', decision=decision)
    return decision

def check_origin(state: AdmissionState, origin: Optional[str], decision: Optional[RateDecision] = None) -> None:
    # non-browser clients send no Origin and are always let through
    if not origin or state.permissive_cors:
        return
    if origin not in state.allowlist:
        raise CorsRejected(f'origin {origin} not in allow-list', decision=decision)

def admit(state: AdmissionState, client: str, origin: Optional[str], content_length: Optional[str]) -> RateDecision:
    """Run every admission check in order: size, rate, origin.

    The rate counter is bumped before the origin check, so rejected
    origins still spend their client's budget.
    """
    check_payload_size(parse_content_length(content_length), state.max_payload_bytes)
    decision = check_rate(state, client)
    check_origin(state, origin, decision)
    return decision
