import io
import pytest

import PIL.Image
from falcon.testing import TestClient

from hungr.app import create_app
from hungr.config import Config
from hungr.database.database import new_engine, init_db
from hungr.extraction import ExtractionError
from hungr.validation import ExtractedRecipe, RecipeStepData

BOUNDARY = 'hungr-test-boundary'

class FakeExtractor:
    """Stands in for the AI service. Set `error` to make every call fail."""

    def __init__(self):
        self.calls = []
        self.error: ExtractionError | None = None
        self.result = ExtractedRecipe(
            steps=[
                RecipeStepData(instruction='', ingredients=['2 cups flour', '1 tsp salt']),
                RecipeStepData(instruction='Mix everything', ingredients=[])
            ],
            tags=['bread']
        )

    def record(self, kind, payload) -> ExtractedRecipe:
        self.calls.append((kind, payload))
        if self.error is not None:
            raise self.error
        return self.result

    def from_url(self, url):
        return self.record('url', url)

    def from_text(self, text):
        return self.record('text', text)

    def from_images(self, images):
        return self.record('images', images)

@pytest.fixture
def db_url(tmp_path) -> str:
    url = f'sqlite:///{tmp_path / "test.db"}'
    init_db(new_engine(url))
    return url

@pytest.fixture
def extractor() -> FakeExtractor:
    return FakeExtractor()

@pytest.fixture
def app(db_url, extractor):
    return create_app(db_url, Config(), extractor)

@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)

@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    PIL.Image.new('RGB', (4, 4), 'red').save(buffer, 'PNG')
    return buffer.getvalue()

@pytest.fixture
def multipart():
    """Builds a `multipart/form-data` body from `(field, filename, content_type, data)` parts."""

    def build(parts) -> dict:
        body = b''
        for field, filename, content_type, data in parts:
            body += (
                f'--{BOUNDARY}\r\n'
                f'Content-Disposition: form-data; name="{field}"; filename="{filename}"\r\n'
                f'Content-Type: {content_type}\r\n\r\n'
            ).encode() + data + b'\r\n'
        body += f'--{BOUNDARY}--\r\n'.encode()

        return {
            'body': body,
            'content_type': f'multipart/form-data; boundary={BOUNDARY}'
        }

    return build

@pytest.fixture
def login(client):
    def do_login(email: str) -> dict:
        resp = client.simulate_post('/api/auth/login', json={'email': email})
        assert resp.status_code == 200
        return resp.json['user']

    return do_login

@pytest.fixture
def create_recipe(client):
    def do_create(email: str, name: str = 'Pancakes', tag_string: str = '', **kwargs) -> dict:
        resp = client.simulate_post(
            '/api/recipes',
            params={'email': email, 'name': name, 'tagString': tag_string},
            **kwargs
        )
        assert resp.status_code == 201, resp.text
        return resp.json

    return do_create
