import json

import httpx
import pytest
import respx

from hungr.extraction import (
    RecipeExtractor, ExtractionError, ExtractionNotConfigured, FetchError,
    MAX_INPUT_CHARS, html_to_text
)

CHAT_URL = 'https://llm.example.com/v1/chat/completions'
PAGE_URL = 'https://recipes.example.com/bread'

PAGE = '''<html>
<head><title>Bread</title><style>body { color: red; }</style></head>
<body>
  <header>Site menu</header>
  <nav>Home | Recipes</nav>
  <h1>Simple bread</h1>
  <script>trackVisitor();</script>
  <ul><li>500 g flour</li><li>10 g salt</li></ul>
  <p>Bake at 230°C for 35 minutes.</p>
  <footer>Copyright</footer>
</body>
</html>'''

ANSWER = {
    'steps': [
        {'instruction': '', 'ingredients': ['500 g flour', '10 g salt']},
        {'instruction': 'Bake at 230°C for 35 minutes.', 'ingredients': []}
    ],
    'tags': ['bread']
}

def completion(content: str) -> dict:
    return {'choices': [{'message': {'content': content}}]}

def mock_chat(payload: dict | None = None, router=respx) -> respx.Route:
    return router.post(CHAT_URL).mock(
        return_value=httpx.Response(200, json=payload if payload is not None else completion(json.dumps(ANSWER)))
    )

def sent_body(route: respx.Route) -> dict:
    return json.loads(route.calls.last.request.content)

def new_extractor(api_key: str | None = 'test-key') -> RecipeExtractor:
    return RecipeExtractor(api_key, 'test-model', 'https://llm.example.com/v1/', httpx.Client())

def test_chat_url_strips_trailing_slash():
    assert new_extractor().chat_url == CHAT_URL

def test_html_to_text_drops_noise():
    text = html_to_text(PAGE)

    assert 'Simple bread' in text
    assert '500 g flour' in text
    assert 'trackVisitor' not in text
    assert 'Site menu' not in text
    assert 'Home | Recipes' not in text
    assert 'Copyright' not in text
    assert 'color: red' not in text

@respx.mock
def test_from_url():
    page = respx.get(PAGE_URL).mock(return_value=httpx.Response(200, text=PAGE))
    chat = mock_chat()

    result = new_extractor().from_url(PAGE_URL)

    assert result.model_dump() == ANSWER
    assert page.called
    assert chat.calls.last.request.headers['Authorization'] == 'Bearer test-key'

    body = sent_body(chat)
    assert body['model'] == 'test-model'
    assert body['response_format']['type'] == 'json_schema'
    assert body['response_format']['json_schema']['strict'] is True
    assert '500 g flour' in body['messages'][1]['content']
    assert 'trackVisitor' not in body['messages'][1]['content']

@respx.mock
def test_from_url_truncates_page():
    respx.get(PAGE_URL).mock(return_value=httpx.Response(200, text='<p>' + 'z' * (MAX_INPUT_CHARS * 2) + '</p>'))
    chat = mock_chat()

    new_extractor().from_url(PAGE_URL)

    assert sent_body(chat)['messages'][1]['content'].count('z') == MAX_INPUT_CHARS

@pytest.mark.respx(assert_all_called=False)
def test_from_url_page_error(respx_mock):
    respx_mock.get(PAGE_URL).mock(return_value=httpx.Response(404))
    chat = mock_chat(router=respx_mock)

    with pytest.raises(FetchError, match='HTTP 404'):
        new_extractor().from_url(PAGE_URL)

    assert not chat.called

@respx.mock
def test_from_url_unreachable_page():
    respx.get(PAGE_URL).mock(side_effect=httpx.ConnectError)

    with pytest.raises(FetchError):
        new_extractor().from_url(PAGE_URL)

@respx.mock
def test_from_text_truncates_input():
    chat = mock_chat()

    new_extractor().from_text('y' * (MAX_INPUT_CHARS + 100))

    assert sent_body(chat)['messages'][1]['content'].count('y') == MAX_INPUT_CHARS

@respx.mock
def test_from_images_sends_data_urls():
    chat = mock_chat()

    new_extractor().from_images([('image/png', b'\x89PNG'), ('image/jpeg', b'\xff\xd8')])

    parts = sent_body(chat)['messages'][1]['content']
    assert parts[0]['text'].startswith('Extract the recipe from these images')
    assert parts[1]['image_url']['url'] == 'data:image/png;base64,iVBORw=='
    assert parts[2]['image_url']['url'] == 'data:image/jpeg;base64,/9g='

@pytest.mark.respx(assert_all_called=False)
def test_not_configured(respx_mock):
    chat = mock_chat(router=respx_mock)

    with pytest.raises(ExtractionNotConfigured, match='recipe extraction not configured'):
        new_extractor(api_key=None).from_text('anything')

    assert not chat.called

@respx.mock
def test_service_error_message():
    mock_chat({'error': {'message': 'model overloaded'}})

    with pytest.raises(ExtractionError, match='model overloaded'):
        new_extractor().from_text('anything')

@respx.mock
def test_no_choices():
    mock_chat({'choices': []})

    with pytest.raises(ExtractionError, match='no response from service'):
        new_extractor().from_text('anything')

@respx.mock
def test_unparseable_recipe():
    mock_chat(completion('this is not json'))

    with pytest.raises(ExtractionError, match='failed to parse recipe JSON'):
        new_extractor().from_text('anything')
