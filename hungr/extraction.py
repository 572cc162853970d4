import httpx
from bs4 import BeautifulSoup

from pydantic import ValidationError

import base64
import json

from .validation import ExtractedRecipe
from .log import logging

MAX_INPUT_CHARS = 15000

URL_TIMEOUT = 60.0
TEXT_TIMEOUT = 60.0
IMAGE_TIMEOUT = 90.0

FETCH_TIMEOUT = 20.0

# Elements that never carry recipe content
NOISE_TAGS = ('script', 'style', 'noscript', 'iframe', 'svg', 'nav', 'footer', 'header')

EXTRACTION_RULES = '''Rules:
1. ALWAYS start with a step that has an empty instruction "" containing ALL ingredients from the recipe. This must be the first element in the steps array.
2. Then add additional steps for the actual cooking instructions. These steps should have empty ingredients arrays since all ingredients are in the first step.
3. Format ingredients as "quantity unit ingredient" (e.g. "2 cups flour", "1 tsp salt", "3 eggs").
4. Use standard cooking units: tsp, tbsp, cup, oz, lb, g, kg, ml, l.
5. For countable items without units, just use the number and name (e.g. "2 eggs", "1 onion").
6. Do NOT include temperatures in the ingredients list. Temperatures belong in the instruction steps only.
7. Preserve ALL numbers in instructions, including oven temperatures, cooking times and quantities. Never omit or round these values.
8. Watch for mixed fractions: "3 1/2 cups" means 3.5 cups, NOT "3" followed by "1/2 cup". Convert mixed fractions to decimals.
9. Suggest a few short lowercase tags describing the dish (e.g. "dinner", "vegetarian", "quick").'''

URL_SYSTEM_PROMPT = ('You are a recipe extraction assistant. Given the text content of a recipe webpage, '
                     'extract the recipe steps and ingredients into a structured JSON format.\n' + EXTRACTION_RULES)

TEXT_SYSTEM_PROMPT = ('You are a recipe extraction assistant. Given raw text that has been copied and pasted from a '
                      'recipe website (which may be poorly formatted, contain ads, navigation text, or other noise), '
                      'extract the recipe steps and ingredients into a structured JSON format.\n' + EXTRACTION_RULES +
                      '\n10. Ignore any non-recipe content like ads, navigation, comments, ratings, or author bios.'
                      '\n11. If the text contains multiple recipes, extract only the main/first recipe.')

IMAGE_SYSTEM_PROMPT = ('You are a recipe extraction assistant. Given an image of a recipe (such as a photo from a '
                       'cookbook, a handwritten recipe card, or a screenshot), extract the recipe steps and '
                       'ingredients into a structured JSON format.\n' + EXTRACTION_RULES +
                       '\n10. If the image is unclear or partially visible, extract what you can see.')

RECIPE_SCHEMA = {
    'type': 'object',
    'properties': {
        'steps': {
            'type': 'array',
            'items': {
                'type': 'object',
                'properties': {
                    'instruction': {
                        'type': 'string',
                        'description': 'The step instruction. Empty string if this is just an ingredients list.'
                    },
                    'ingredients': {
                        'type': 'array',
                        'items': {
                            'type': 'string',
                            'description': "Ingredient in format 'quantity unit name' (e.g. '2 cups flour')"
                        },
                        'description': 'Ingredients used in this step'
                    }
                },
                'required': ['instruction', 'ingredients'],
                'additionalProperties': False
            }
        },
        'tags': {
            'type': 'array',
            'items': {'type': 'string'}
        }
    },
    'required': ['steps', 'tags'],
    'additionalProperties': False
}

class ExtractionError(Exception):
    """The AI service failed or answered with something unusable."""

class ExtractionNotConfigured(ExtractionError):
    pass

class FetchError(ExtractionError):
    """The page to extract from could not be downloaded."""

def truncate(text: str) -> str:
    return text[:MAX_INPUT_CHARS]

def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, 'html.parser')

    for element in soup(NOISE_TAGS):
        element.decompose()

    lines = (line.strip() for line in soup.get_text('\n').splitlines())
    return '\n'.join(line for line in lines if line)

class RecipeExtractor:
    """Client for an OpenAI compatible chat completions service that turns
    recipe pages, pasted text and photos into steps and tags."""

    def __init__(self, api_key: str | None, model: str, base_url: str, http_client: httpx.Client | None = None):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip('/')
        self.http = http_client or httpx.Client(follow_redirects=True)

    @property
    def chat_url(self) -> str:
        return f'{self.base_url}/chat/completions'

    def from_url(self, url: str) -> ExtractedRecipe:
        self.ensure_configured()

        logging.info('fetching page url=%s', url)
        content = truncate(self.fetch_text(url))
        logging.info('fetched page length=%d', len(content))

        return self.complete([
            {'role': 'system', 'content': URL_SYSTEM_PROMPT},
            {'role': 'user', 'content': f'Extract the recipe from this webpage content:\n\n{content}'}
        ], URL_TIMEOUT)

    def from_text(self, text: str) -> ExtractedRecipe:
        self.ensure_configured()

        return self.complete([
            {'role': 'system', 'content': TEXT_SYSTEM_PROMPT},
            {'role': 'user', 'content': f'Extract the recipe from this text:\n\n{truncate(text)}'}
        ], TEXT_TIMEOUT)

    def from_images(self, images: list[tuple[str, bytes]]) -> ExtractedRecipe:
        """`images` holds `(content_type, data)` pairs."""

        self.ensure_configured()

        if len(images) == 1:
            prompt = 'Extract the recipe from this image. Include all ingredients and cooking steps you can see.'
        else:
            prompt = 'Extract the recipe from these images. Include all ingredients and cooking steps you can see.'

        content = [{'type': 'text', 'text': prompt}]
        for content_type, data in images:
            encoded = base64.b64encode(data).decode('ascii')
            content.append({'type': 'image_url', 'image_url': {'url': f'data:{content_type};base64,{encoded}'}})

        return self.complete([
            {'role': 'system', 'content': IMAGE_SYSTEM_PROMPT},
            {'role': 'user', 'content': content}
        ], IMAGE_TIMEOUT)

    def ensure_configured(self):
        if not self.api_key:
            raise ExtractionNotConfigured('recipe extraction not configured')

    def fetch_text(self, url: str) -> str:
        try:
            resp = self.http.get(url, timeout=FETCH_TIMEOUT)
        except httpx.HTTPError as e:
            raise FetchError(str(e)) from e

        if resp.status_code != 200:
            raise FetchError(f'HTTP {resp.status_code}: {resp.reason_phrase}')

        return html_to_text(resp.text)

    def complete(self, messages: list[dict], timeout: float) -> ExtractedRecipe:
        body = {
            'model': self.model,
            'messages': messages,
            'response_format': {
                'type': 'json_schema',
                'json_schema': {
                    'name': 'recipe_steps',
                    'strict': True,
                    'schema': RECIPE_SCHEMA
                }
            }
        }

        logging.info('calling extraction service model=%s', self.model)
        try:
            resp = self.http.post(
                self.chat_url,
                json=body,
                headers={'Authorization': f'Bearer {self.api_key}'},
                timeout=timeout
            )
        except httpx.HTTPError as e:
            raise ExtractionError(str(e)) from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise ExtractionError(f'failed to parse service response: {e}') from e

        if not isinstance(payload, dict):
            raise ExtractionError('failed to parse service response')

        if payload.get('error'):
            error = payload['error']
            message = error.get('message') if isinstance(error, dict) else str(error)
            raise ExtractionError(f'service error: {message}')

        if resp.status_code != 200:
            raise ExtractionError(f'service responded with HTTP {resp.status_code}')

        choices = payload.get('choices') or []
        if not choices:
            raise ExtractionError('no response from service')

        try:
            content = choices[0]['message']['content']
            result = ExtractedRecipe.model_validate(json.loads(content))
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise ExtractionError(f'failed to parse recipe JSON: {e}') from e

        logging.info('extraction complete steps=%d', len(result.steps))
        return result
