import json, pytest
from tests.conftest import TOS_TEXT, FakeCompletionClient

MESSY_REPLIES = [
    '{}',
    '{"summary": null, "bullets": null, "rating": null}',
    '{"summary": "s", "bullets": "not a list", "rating": "Excellent"}',
    '{"summary": "s", "bullets": [{"type": "Praise", "text": null}, 3, [1, 2]], "rating": "SECURE"}',
    'Here it is ```{"bullets": [{"type": "WARNING", "text": "w"}]}``` hope it helps',
    json.dumps({'summary': 's', 'bullets': [{'type': t, 'text': t} for t in ('pro', 'con', 'warning', 'other')]}),
]

@pytest.mark.parametrize('reply', MESSY_REPLIES)
def test_output_shape_always_closed(make_client, reply):
    r = make_client(llm=FakeCompletionClient(reply=reply)).post('/summarize', json={'text': TOS_TEXT})
    assert r.status_code == 200
    body = r.json()
    assert set(body) == {'summary', 'bullets', 'rating'}
    assert isinstance(body['summary'], str)
    assert body['rating'] in ('Secure', 'Risky', 'Not secure')
    for b in body['bullets']:
        assert b['type'] in ('pro', 'con', 'warning')
        assert isinstance(b['text'], str)

def test_idempotent_same_input(client):
    payload = {'text': TOS_TEXT, 'language': 'en'}
    r1 = client.post('/summarize', json=payload).json()
    r2 = client.post('/summarize', json=payload).json()
    assert r1 == r2

def test_prompt_receives_sanitized_text(client, fake_llm):
    text = '<b>Terms</b>   of\n\nservice: we  keep your data forever & share it with partners.'
    client.post('/summarize', json={'text': text})
    user = fake_llm.calls[0]['messages'][1]['content']
    tail = user.rsplit('Text:\n', 1)[1]
    assert tail.startswith('&lt;b&gt;Terms&lt;&#x2F;b&gt; of service:')
    assert '&amp; share' in tail
    assert '\n' not in tail
