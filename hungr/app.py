import falcon

from sqlalchemy.exc import SQLAlchemyError

from .resources.auth import AuthResource
from .resources.user import UserResource
from .resources.recipe import RecipeResource
from .resources.step import StepResource
from .resources.file import FileResource
from .resources.tag import TagResource
from .resources.connection import ConnectionResource
from .resources.extract import ExtractResource
from .resources.health import HealthResource

from .database.database import new_engine, new_sessionmaker

from .config import Config
from .extraction import RecipeExtractor
from .util import (
    RequestError, RequestLogger, handle_request_error, handle_malformed_media, handle_storage_error,
    handle_unexpected_error
)
from .spec import api

from .log import logging

def create_app(db_url: str, config: Config | None = None, extractor: RecipeExtractor | None = None) -> falcon.App:
    config = config or Config()

    # Database initialization
    engine = new_engine(db_url)
    db_session = new_sessionmaker(engine)

    if extractor is None:
        extractor = RecipeExtractor(config.openai_api_key, config.openai_model, config.openai_base_url)
    if not config.openai_api_key:
        logging.warning('OPENAI_API_KEY is not set, recipe extraction is disabled')

    # Rest API Resources

    auth_resource = AuthResource(db_session)
    user_resource = UserResource(db_session)
    recipe_resource = RecipeResource(db_session)
    step_resource = StepResource(db_session)
    file_resource = FileResource(db_session)
    tag_resource = TagResource(db_session)
    connection_resource = ConnectionResource(db_session)
    extract_resource = ExtractResource(extractor)

    # Create Falcon application

    app = falcon.App(cors_enable=True, middleware=[RequestLogger()])

    multipart = app.req_options.media_handlers[falcon.MEDIA_MULTIPART]
    multipart.parse_options.max_body_part_buffer_size = config.max_upload_bytes

    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(SQLAlchemyError, handle_storage_error)
    app.add_error_handler(RequestError, handle_request_error)
    app.add_error_handler(falcon.MediaMalformedError, handle_malformed_media)

    app.add_route('/health', HealthResource()) # GET

    app.add_route('/api/auth/login', auth_resource, suffix='login') # POST

    app.add_route('/api/users', user_resource) # GET, POST, PUT, DELETE

    app.add_route('/api/recipes', recipe_resource) # GET, POST, DELETE
    app.add_route('/api/recipes/{recipe_uuid}', recipe_resource, suffix='by_id') # GET[public], PATCH
    app.add_route('/api/recipes/{recipe_uuid}/steps', step_resource) # GET, PUT
    app.add_route('/api/recipes/{recipe_uuid}/files', file_resource) # POST

    app.add_route('/api/files/{file_uuid}', file_resource, suffix='data') # GET

    app.add_route('/api/tags', tag_resource) # GET

    app.add_route('/api/connections', connection_resource) # GET, POST, DELETE

    app.add_route('/api/extract-recipe', extract_resource, suffix='url') # POST
    app.add_route('/api/extract-recipe-image', extract_resource, suffix='image') # POST
    app.add_route('/api/extract-recipe-text', extract_resource, suffix='text') # POST

    api.register(app)

    return app
