import asyncio, time
from dataclasses import dataclass
from typing import Any, Optional
import openai
from openai import AsyncOpenAI
from termscan.errors import UpstreamError, UpstreamTimeout

MODEL_NAME = 'gpt-4o-mini'
TEMPERATURE = 0.2
MAX_TOKENS = 500
TIMEOUT_S = 120.0


@dataclass
class Completion:
    text: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: int = 0


def _usage(resp) -> tuple[int, int]:
    usage = getattr(resp, 'usage', None)
    if usage is None:
        return 0, 0
    return int(getattr(usage, 'prompt_tokens', 0) or 0), int(getattr(usage, 'completion_tokens', 0) or 0)

def extract_text(resp) -> str:
    choices = getattr(resp, 'choices', None) or []
    if not choices:
        raise UpstreamError('no choices in completion response')
    message = getattr(choices[0], 'message', None)
    content = getattr(message, 'content', None)
    if not content:
        raise UpstreamError('empty content in completion response')
    return content


class CompletionClient:
    """Single-shot chat completion call with a hard wait ceiling and no retries."""

    def __init__(self, api_key: str = '', client: Optional[Any] = None, model: str = MODEL_NAME,
                 temperature: float = TEMPERATURE, timeout_s: float = TIMEOUT_S):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.timeout_s = timeout_s
        self._client = client

    def _resolve_client(self):
        if self._client is not None:
            return self._client
        if not self.api_key:
            raise UpstreamError('OPENAI_API_KEY is not configured')
        self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout_s, max_retries=0)
        return self._client

    async def complete(self, messages: list[dict], max_tokens: int = MAX_TOKENS) -> Completion:
        client = self._resolve_client()
        t0 = time.time()
        try:
            resp = await asyncio.wait_for(
                client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    max_tokens=max_tokens,
                    temperature=self.temperature,
                ),
                timeout=self.timeout_s,
            )
        except (asyncio.TimeoutError, openai.APITimeoutError) as e:
            raise UpstreamTimeout(f'no completion within {self.timeout_s:g}s') from e
        except openai.OpenAIError as e:
            raise UpstreamError(f'{type(e).__name__}: {e}') from e
        text = extract_text(resp)
        pt, ct = _usage(resp)
        return Completion(text=text, prompt_tokens=pt, completion_tokens=ct,
                          latency_ms=int((time.time() - t0) * 1000))
