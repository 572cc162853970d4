import falcon
from falcon import Request, Response

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker, Session

from ..database.models import Recipe
from ..database.queries import load_steps, replace_steps
from ..spec import api
from ..util import BadRequest, NotFound, parse_uuid
from ..validation import (
    RecipeStepData, RecipeStepsRequest, RecipeStepsResponse, SuccessResponse, ErrorResponse
)
from ..log import logging

from spectree import Response as SpecResponse

def clean_steps(steps: list[RecipeStepData]) -> list[RecipeStepData]:
    """Trims the submitted steps and enforces that only the first step may go
    without an instruction, and only when it lists ingredients."""

    cleaned = []
    for index, step in enumerate(steps):
        instruction = step.instruction.strip()
        ingredients = [text.strip() for text in step.ingredients if text.strip()]

        if not instruction:
            if index != 0:
                raise BadRequest(f'step {index + 1}: instruction is required')
            if not ingredients:
                raise BadRequest('step 1: instruction or ingredients are required')

        cleaned.append(RecipeStepData(instruction=instruction, ingredients=ingredients))

    return cleaned

class StepResource:

    db_session: sessionmaker[Session]

    def __init__(self, db_sessionmaker: sessionmaker[Session]):
        self.db_session = db_sessionmaker

    @api.validate(
        resp=SpecResponse(HTTP_200=RecipeStepsResponse, HTTP_400=ErrorResponse, HTTP_404=ErrorResponse)
    )
    def on_get(self, req: Request, resp: Response, recipe_uuid: str):
        recipe_id = parse_uuid(recipe_uuid, 'recipe uuid')

        with self.db_session() as db:
            if db.scalar(select(Recipe.uuid).where(Recipe.uuid == recipe_id)) is None:
                raise NotFound('recipe not found')

            resp.media = {
                'steps': [step.model_dump() for step in load_steps(db, recipe_id)]
            }
            resp.status = falcon.HTTP_200

    @api.validate(
        resp=SpecResponse(HTTP_200=SuccessResponse, HTTP_400=ErrorResponse, HTTP_404=ErrorResponse),
        json=RecipeStepsRequest
    )
    def on_put(self, req: Request, resp: Response, recipe_uuid: str):
        recipe_id = parse_uuid(recipe_uuid, 'recipe uuid')
        steps = clean_steps(req.context.json.steps)

        with self.db_session.begin() as db:
            if db.scalar(select(Recipe.uuid).where(Recipe.uuid == recipe_id)) is None:
                raise NotFound('recipe not found')

            replace_steps(db, recipe_id, steps)

        logging.info('recipe steps replaced uuid=%s steps=%d', recipe_id, len(steps))

        resp.media = {'success': True}
        resp.status = falcon.HTTP_200
