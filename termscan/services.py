from termscan.errors import UnparseableResponse
from termscan.llm import CompletionClient, MAX_TOKENS
from termscan.normalize import normalize
from termscan.obs import log
from termscan.parsing import parse_completion
from termscan.prompts import build_messages
from termscan.sanitize import SanitizedInput, validate
from termscan.schemas import SummarizeResponse
from termscan.metrics import observe_ms


async def summarize_terms(body: dict, client: CompletionClient, request_id: str = '') -> SummarizeResponse:
    """validate -> prompt -> complete -> parse -> normalize, single pass, no retries."""
    clean: SanitizedInput = validate(body)
    messages = build_messages(clean.text, clean.language)

    completion = await client.complete(messages.as_list(), max_tokens=MAX_TOKENS)
    observe_ms('upstream_latency_ms', completion.latency_ms)

    outcome = parse_completion(completion.text)
    if not outcome.ok:
        raise UnparseableResponse(f'{outcome.error}; preview={completion.text[:120]!r}')

    result = normalize(outcome.value)
    log.info(
        'summarize_ok',
        rid=request_id,
        length=len(clean.text),
        lang=clean.language,
        strategy=outcome.strategy,
        bullets=len(result.bullets),
        rating=result.rating,
        upstream_ms=completion.latency_ms,
        in_tokens=completion.prompt_tokens,
        out_tokens=completion.completion_tokens,
    )
    return result
