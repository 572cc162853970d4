import httpx

from pydantic import BaseModel, ValidationError

from typing import TypeVar, Literal
import logging
import os

from .branded import as_email, as_uuid
from .browse import normalize_steps
from .errors import ApiError, ApiUnreachableError, ResponseShapeError
from .guards import (
    RecipesResponse, UploadResponse, FileUploadResponse, RecipeStepsResponse,
    RecipeStep, ExtractedRecipe, PublicRecipeResponse, TagsResponse, Tag,
    UserResponse, User, ConnectionsResponse, get_error_message
)
from .session import Session

DEFAULT_API_BASE = 'http://localhost:8080'
EXTRACTION_TIMEOUT = 120.0

logger = logging.getLogger(__name__)

G = TypeVar('G', bound=BaseModel)

# (filename, data, content type)
Upload = tuple[str, bytes, str]

def api_base() -> str:
    return os.environ.get('HUNGR_API_BASE', DEFAULT_API_BASE)

class HungrClient:
    """Data access layer of the Hungr frontend.

    Every call maps to one HTTP request. Responses are checked against the
    strict models of `guards` before anything is returned."""

    def __init__(self, base_url: str | None = None, transport: httpx.BaseTransport | None = None, timeout: float = 30.0):
        self.base_url = (base_url or api_base()).rstrip('/')
        self.http = httpx.Client(base_url=self.base_url, transport=transport, timeout=timeout)

    def close(self):
        self.http.close()

    def __enter__(self) -> 'HungrClient':
        return self

    def __exit__(self, *exc_info):
        self.close()

    def file_url(self, path: str) -> str:
        return f'{self.base_url}{path}'

    # Plumbing

    def send(self, action: str, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            resp = self.http.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.warning('request failed method=%s path=%s error=%s', method, path, e)
            raise ApiUnreachableError() from e

        if resp.is_success:
            return resp

        try:
            message = get_error_message(resp.json())
        except ValueError:
            message = None

        raise ApiError(message or f'Failed to {action}: {resp.status_code}', resp.status_code)

    def call(self, action: str, guard: type[G], method: str, path: str, **kwargs) -> G:
        resp = self.send(action, method, path, **kwargs)

        try:
            payload = resp.json()
        except ValueError as e:
            raise ResponseShapeError(f'Failed to {action}: response is not JSON') from e

        try:
            return guard.model_validate(payload)
        except ValidationError as e:
            raise ResponseShapeError(f'Failed to {action}: unexpected response shape') from e

    # Auth

    def login(self, email: str) -> Session:
        normalized = as_email(email)
        self.call('login', UserResponse, 'POST', '/api/auth/login', json={'email': normalized})
        return Session(normalized)

    # Recipes

    def get_recipes(self, email: str) -> RecipesResponse:
        return self.call('fetch recipes', RecipesResponse, 'GET', '/api/recipes',
                         params={'email': as_email(email)})

    def create_recipe(self, email: str, name: str, tag_string: str, files: list[Upload], source: str | None = None) -> UploadResponse:
        params = {'email': as_email(email), 'name': name, 'tagString': tag_string}
        if source:
            params['source'] = source

        return self.call('create recipe', UploadResponse, 'POST', '/api/recipes',
                         params=params, files=[('file', f) for f in files] or None)

    def add_recipe_files(self, recipe_uuid: str, files: list[Upload]) -> FileUploadResponse:
        return self.call('add recipe files', FileUploadResponse, 'POST', f'/api/recipes/{as_uuid(recipe_uuid)}/files',
                         files=[('file', f) for f in files])

    def delete_recipe(self, recipe_uuid: str):
        self.send('delete recipe', 'DELETE', '/api/recipes', params={'uuid': as_uuid(recipe_uuid)})

    def patch_recipe(self, recipe_uuid: str, tag_string: str, source: str | None = None, is_public: bool | None = None):
        body = {'tagString': tag_string}
        if source is not None:
            body['source'] = source
        if is_public is not None:
            body['isPublic'] = is_public

        self.send('update recipe', 'PATCH', f'/api/recipes/{as_uuid(recipe_uuid)}', json=body)

    def get_public_recipe(self, recipe_uuid: str) -> PublicRecipeResponse:
        return self.call('fetch recipe', PublicRecipeResponse, 'GET', f'/api/recipes/{as_uuid(recipe_uuid)}')

    # Steps

    def get_recipe_steps(self, recipe_uuid: str) -> RecipeStepsResponse:
        return self.call('fetch recipe steps', RecipeStepsResponse, 'GET', f'/api/recipes/{as_uuid(recipe_uuid)}/steps')

    def update_recipe_steps(self, recipe_uuid: str, steps: list[RecipeStep]):
        self.send('update recipe steps', 'PUT', f'/api/recipes/{as_uuid(recipe_uuid)}/steps',
                  json={'steps': [step.model_dump() for step in steps]})

    # Extraction

    def extract_recipe_from_url(self, url: str) -> ExtractedRecipe:
        result = self.call('extract recipe', ExtractedRecipe, 'POST', '/api/extract-recipe',
                           json={'url': url}, timeout=EXTRACTION_TIMEOUT)
        return self.normalized(result)

    def extract_recipe_from_images(self, files: list[Upload]) -> ExtractedRecipe:
        result = self.call('extract recipe from image', ExtractedRecipe, 'POST', '/api/extract-recipe-image',
                           files=[('images', f) for f in files], timeout=EXTRACTION_TIMEOUT)
        return self.normalized(result)

    def extract_recipe_from_text(self, text: str) -> ExtractedRecipe:
        result = self.call('extract recipe from text', ExtractedRecipe, 'POST', '/api/extract-recipe-text',
                           json={'text': text}, timeout=EXTRACTION_TIMEOUT)
        return self.normalized(result)

    @staticmethod
    def normalized(result: ExtractedRecipe) -> ExtractedRecipe:
        return ExtractedRecipe(steps=normalize_steps(result.steps), tags=result.tags)

    # Tags

    def get_tags(self) -> list[Tag]:
        return self.call('fetch tags', TagsResponse, 'GET', '/api/tags').tags

    # Users and connections

    def get_user_by_email(self, email: str) -> User:
        return self.call('fetch user', UserResponse, 'GET', '/api/users', params={'email': as_email(email)}).user

    def get_connections(self, user_uuid: str, direction: Literal['outgoing', 'incoming'] = 'outgoing') -> list[User]:
        return self.call('fetch connections', ConnectionsResponse, 'GET', '/api/connections',
                         params={'user_uuid': as_uuid(user_uuid), 'direction': direction}).connections

    def create_connection(self, email: str, target_user_uuid: str):
        self.send('create connection', 'POST', '/api/connections',
                  params={'email': as_email(email)}, json={'target_user_uuid': as_uuid(target_user_uuid)})

    def delete_connection(self, email: str, target_user_uuid: str, bidirectional: bool = False):
        self.send('delete connection', 'DELETE', '/api/connections', params={
            'email': as_email(email),
            'target_user_uuid': as_uuid(target_user_uuid),
            'bidirectional': 'true' if bidirectional else 'false'
        })
