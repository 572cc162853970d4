import falcon
from falcon import Request, Response

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker, Session

from ..database.models import Recipe, File
from ..database.queries import (
    user_by_email, visible_recipes, recipe_files, purge_recipe, owner_email,
    split_tag_string, join_tag_names, link_tags, recipe_tag_names, load_steps
)
from ..spec import api
from ..util import NotFound, BadRequest, parse_uuid, read_uploads, is_image
from ..validation import (
    RecipeCreate, FileCreate, RecipesResponse, UploadResponse, ErrorResponse,
    SuccessResponse, PublicRecipeResponse, RecipeListParams, RecipeCreateParams,
    RecipeDeleteParams, PatchRecipeRequest, normalize_email
)
from ..log import logging

from spectree import Response as SpecResponse

def parse_email(value: str) -> str:
    try:
        return normalize_email(value)
    except ValueError:
        raise BadRequest('invalid email')

class RecipeResource:

    db_session: sessionmaker[Session]

    def __init__(self, db_sessionmaker: sessionmaker[Session]):
        self.db_session = db_sessionmaker

    @api.validate(
        resp=SpecResponse(HTTP_200=RecipesResponse, HTTP_400=ErrorResponse),
        query=RecipeListParams
    )
    def on_get(self, req: Request, resp: Response):
        email = parse_email(req.context.query.email)

        with self.db_session() as db:
            viewer = user_by_email(db, email)
            if viewer is None:
                resp.media = {'recipeData': [], 'fileData': []}
                resp.status = falcon.HTTP_200
                return

            recipes = visible_recipes(db, viewer)
            files = recipe_files(db, [recipe.uuid for recipe, _ in recipes])

            resp.media = {
                'recipeData': [recipe.serialize(owner) for recipe, owner in recipes],
                'fileData': [f.serialize() for f in files]
            }
            resp.status = falcon.HTTP_200

    @api.validate(
        resp=SpecResponse(HTTP_201=UploadResponse, HTTP_400=ErrorResponse, HTTP_404=ErrorResponse),
        query=RecipeCreateParams
    )
    def on_post(self, req: Request, resp: Response):
        query: RecipeCreateParams = req.context.query
        email = parse_email(query.email)
        name = query.name.strip()
        if not name:
            raise BadRequest('name is required')

        tag_names = split_tag_string(query.tagString)
        uploads = read_uploads(req, 'file')

        with self.db_session.begin() as db:
            owner = user_by_email(db, email)
            if owner is None:
                raise NotFound('user not found')

            recipe = Recipe(RecipeCreate(
                name=name,
                user_uuid=owner.uuid,
                tag_string=join_tag_names(tag_names),
                source=query.source or None
            ))
            db.add(recipe)
            db.flush()

            for page_number, upload in enumerate(uploads):
                db.add(File(FileCreate(
                    recipe_uuid=recipe.uuid,
                    page_number=page_number,
                    content_type=upload.content_type,
                    image=is_image(upload.data),
                    data=upload.data
                )))

            tags = link_tags(db, recipe.uuid, tag_names)

            logging.info('recipe created uuid=%s files=%d tags=%d', recipe.uuid, len(uploads), len(tags))

            resp.media = {
                'success': True,
                'recipe': recipe.serialize(owner.email),
                'tags': [tag.serialize() for tag in tags]
            }
            resp.status = falcon.HTTP_201

    @api.validate(
        resp=SpecResponse(HTTP_200=SuccessResponse, HTTP_400=ErrorResponse),
        query=RecipeDeleteParams
    )
    def on_delete(self, req: Request, resp: Response):
        recipe_uuid = req.context.query.uuid

        with self.db_session.begin() as db:
            purge_recipe(db, recipe_uuid)

        logging.info('recipe deleted uuid=%s', recipe_uuid)

        resp.media = {'success': True}
        resp.status = falcon.HTTP_200

    @api.validate(
        resp=SpecResponse(HTTP_200=PublicRecipeResponse, HTTP_400=ErrorResponse, HTTP_404=ErrorResponse),
        path_parameter_descriptions={
            'recipe_uuid': 'A UUID that corresponds to a public recipe.'
        }
    )
    def on_get_by_id(self, req: Request, resp: Response, recipe_uuid: str):
        recipe_id = parse_uuid(recipe_uuid, 'recipe uuid')

        with self.db_session() as db:
            recipe = db.scalar(select(Recipe).where(Recipe.uuid == recipe_id))
            if recipe is None or not recipe.is_public:
                raise NotFound('recipe not found')

            resp.media = {
                'recipe': recipe.serialize(owner_email(db, recipe)),
                'files': [f.serialize() for f in recipe_files(db, [recipe.uuid])],
                'steps': [step.model_dump() for step in load_steps(db, recipe.uuid)],
                'tags': recipe_tag_names(db, recipe.uuid)
            }
            resp.status = falcon.HTTP_200

    @api.validate(
        resp=SpecResponse(HTTP_200=SuccessResponse, HTTP_400=ErrorResponse, HTTP_404=ErrorResponse),
        json=PatchRecipeRequest
    )
    def on_patch_by_id(self, req: Request, resp: Response, recipe_uuid: str):
        recipe_id = parse_uuid(recipe_uuid, 'recipe uuid')
        body: PatchRecipeRequest = req.context.json
        supplied = body.model_fields_set

        with self.db_session.begin() as db:
            recipe = db.scalar(select(Recipe).where(Recipe.uuid == recipe_id))
            if recipe is None:
                raise NotFound('recipe not found')

            if 'tagString' in supplied:
                tag_names = split_tag_string(body.tagString or '')
                recipe.tag_string = join_tag_names(tag_names)
                link_tags(db, recipe.uuid, tag_names)

            if 'source' in supplied:
                recipe.source = body.source or None

            if 'isPublic' in supplied:
                if body.isPublic is None:
                    raise BadRequest('isPublic must be a boolean')
                recipe.is_public = body.isPublic

        logging.info('recipe updated uuid=%s fields=%s', recipe_id, ','.join(sorted(supplied)))

        resp.media = {'success': True}
        resp.status = falcon.HTTP_200
