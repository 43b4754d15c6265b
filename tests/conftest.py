import json, os, pytest
from fastapi.testclient import TestClient

os.environ.setdefault('OPENAI_API_KEY', 'testkey')

from termscan.admission import RateLimiter
from termscan.config import Settings
from termscan.llm import Completion
from termscan.main import create_app

TOS_TEXT = (
    'By using this service you agree that we may collect your email address, '
    'device identifiers and usage data, and share them with advertising partners.'
)

GOOD_REPLY = json.dumps({
    'summary': 'The service collects personal data and shares it with advertisers.',
    'bullets': [
        {'type': 'pro', 'text': 'Clear description of collected data.'},
        {'type': 'con', 'text': 'Data shared with advertising partners.'},
        {'type': 'warning', 'text': 'No opt-out mechanism is described.'},
    ],
    'rating': 'Not secure',
})


class FakeCompletionClient:
    def __init__(self, reply=GOOD_REPLY, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, messages, max_tokens=500):
        self.calls.append({'messages': messages, 'max_tokens': max_tokens})
        if self.error is not None:
            raise self.error
        return Completion(text=self.reply, prompt_tokens=120, completion_tokens=80, latency_ms=5)


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def fake_llm():
    return FakeCompletionClient()

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def make_client(fake_llm, clock):
    def _make(allowed_origins='', llm=None, raise_server_exceptions=True):
        settings = Settings(OPENAI_API_KEY='testkey', ALLOWED_ORIGINS=allowed_origins)
        app = create_app(settings, completion_client=llm or fake_llm, limiter=RateLimiter(clock=clock))
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)
    return _make

@pytest.fixture
def client(make_client):
    return make_client()
