import falcon
from falcon import Request, Response

from sqlalchemy.orm import sessionmaker, Session

from ..database.models import User, utcnow
from ..database.queries import user_by_email
from ..spec import api
from ..validation import UserCreate, LoginRequest, UserResponse, ErrorResponse
from ..log import logging

from spectree import Response as SpecResponse

class AuthResource:

    db_session: sessionmaker[Session]

    def __init__(self, db_sessionmaker: sessionmaker[Session]):
        self.db_session = db_sessionmaker

    @api.validate(
        resp=SpecResponse(
            HTTP_200=(UserResponse, 'user logged in, created on first login'),
            HTTP_400=ErrorResponse,
            HTTP_500=ErrorResponse
        ),
        json=LoginRequest
    )
    def on_post_login(self, req: Request, resp: Response):
        email: str = req.context.json.email

        with self.db_session.begin() as db:
            user = user_by_email(db, email)
            if user is None:
                user = User(UserCreate(email=email, name=email))
                db.add(user)
                logging.info('user created on login email=%s', email)

            user.last_seen = utcnow()
            db.flush()

            resp.media = {
                'success': True,
                'user': user.serialize()
            }
            resp.status = falcon.HTTP_200
