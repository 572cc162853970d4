import falcon
from falcon import Request, Response

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker, Session

from ..database.models import User
from ..database.queries import user_by_email, purge_user
from ..spec import api
from ..util import BadRequest, NotFound, Conflict
from ..validation import (
    UserCreate, UserResponse, ErrorResponse, SuccessResponse, UserLookupParams,
    UserIdParams, UserCreateRequest, UserUpdateRequest, normalize_email
)
from ..log import logging

from spectree import Response as SpecResponse

class UserResource:

    db_session: sessionmaker[Session]

    def __init__(self, db_sessionmaker: sessionmaker[Session]):
        self.db_session = db_sessionmaker

    @api.validate(
        resp=SpecResponse(HTTP_200=UserResponse, HTTP_400=ErrorResponse, HTTP_404=ErrorResponse),
        query=UserLookupParams
    )
    def on_get(self, req: Request, resp: Response):
        query: UserLookupParams = req.context.query

        with self.db_session() as db:
            if query.uuid is not None:
                user = db.scalar(select(User).where(User.uuid == query.uuid))
            elif query.email:
                try:
                    email = normalize_email(query.email)
                except ValueError:
                    raise BadRequest('invalid email')
                user = user_by_email(db, email)
            else:
                raise BadRequest('uuid or email is required')

            if user is None:
                raise NotFound('user not found')

            resp.media = {
                'success': True,
                'user': user.serialize()
            }
            resp.status = falcon.HTTP_200

    @api.validate(
        resp=SpecResponse(HTTP_201=UserResponse, HTTP_400=ErrorResponse, HTTP_409=ErrorResponse),
        json=UserCreateRequest
    )
    def on_post(self, req: Request, resp: Response):
        body: UserCreateRequest = req.context.json

        with self.db_session.begin() as db:
            if user_by_email(db, body.email) is not None:
                raise Conflict('user already exists')

            user = User(UserCreate(email=body.email, name=body.name))
            db.add(user)
            db.flush()

            logging.info('user created email=%s', user.email)

            resp.media = {
                'success': True,
                'user': user.serialize()
            }
            resp.status = falcon.HTTP_201

    @api.validate(
        resp=SpecResponse(HTTP_200=UserResponse, HTTP_400=ErrorResponse, HTTP_404=ErrorResponse),
        query=UserIdParams,
        json=UserUpdateRequest
    )
    def on_put(self, req: Request, resp: Response):
        user_uuid = req.context.query.uuid

        with self.db_session.begin() as db:
            user = db.scalar(select(User).where(User.uuid == user_uuid))
            if user is None:
                raise NotFound('user not found')

            user.name = req.context.json.name
            db.flush()

            resp.media = {
                'success': True,
                'user': user.serialize()
            }
            resp.status = falcon.HTTP_200

    @api.validate(
        resp=SpecResponse(HTTP_200=SuccessResponse, HTTP_400=ErrorResponse, HTTP_404=ErrorResponse),
        query=UserIdParams
    )
    def on_delete(self, req: Request, resp: Response):
        user_uuid = req.context.query.uuid

        with self.db_session.begin() as db:
            user = db.scalar(select(User).where(User.uuid == user_uuid))
            if user is None:
                raise NotFound('user not found')

            purge_user(db, user)
            logging.info('user deleted uuid=%s', user_uuid)

        resp.media = {'success': True}
        resp.status = falcon.HTTP_200
