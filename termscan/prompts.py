from dataclasses import dataclass

LANGUAGE_NAMES = {'en': 'English', 'es': 'Spanish'}
SUMMARY_LANGUAGE_HINT = {'en': 'in English', 'es': 'en Español'}

SYSTEM_PROMPT = (
    'You are a helpful assistant that analyzes Terms & Conditions and returns '
    'a concise structured JSON result. Respond with JSON only.'
)

USER_TEMPLATE = '''Language: {language_name}.

Task: Read the provided text (Terms & Conditions / Privacy Policy) and return JSON with this exact structure:

{{
  "summary": "<one paragraph summary, {summary_hint}>",
  "bullets": [
    {{"type":"pro","text":"..."}},
    {{"type":"con","text":"..."}},
    {{"type":"warning","text":"..."}}
  ],
  "rating":"Secure | Risky | Not secure"
}}

Rules:
- Return valid JSON ONLY (no extra commentary).
- Provide a short paragraph in 'summary'.
- Provide a few bullets (no fixed count) with type = 'pro' | 'con' | 'warning'.
- rating must be exactly one of: "Secure", "Risky", or "Not secure".
- Use {language_name} for all outputs.

Text:
'''


@dataclass(frozen=True)
class ChatMessage:
    role: str
    content: str


@dataclass(frozen=True)
class PromptMessages:
    system: ChatMessage
    user: ChatMessage

    def as_list(self) -> list[dict]:
        return [{'role': m.role, 'content': m.content} for m in (self.system, self.user)]


def render_instructions(language: str) -> str:
    lang = language if language in LANGUAGE_NAMES else 'en'
    return USER_TEMPLATE.format(language_name=LANGUAGE_NAMES[lang], summary_hint=SUMMARY_LANGUAGE_HINT[lang])

def build_messages(sanitized_text: str, language: str) -> PromptMessages:
    # user text is appended after the formatted instructions, never passed through format()
    return PromptMessages(
        system=ChatMessage('system', SYSTEM_PROMPT),
        user=ChatMessage('user', render_instructions(language) + sanitized_text),
    )
