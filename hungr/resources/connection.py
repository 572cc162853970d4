import falcon
from falcon import Request, Response

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker, Session

from ..database.models import User, Connection
from ..database.queries import user_by_email, connection, connected_users
from ..spec import api
from ..util import BadRequest, Unauthorized, NotFound
from ..validation import (
    ConnectionCreate, ConnectionListParams, ConnectionAuthParams, ConnectionDeleteParams,
    CreateConnectionRequest, ConnectionsResponse, SuccessResponse, ErrorResponse, normalize_email
)
from ..log import logging

from spectree import Response as SpecResponse

def authenticate(db: Session, email: str) -> User:
    """Resolves the caller named by the `email` query parameter."""

    try:
        user = user_by_email(db, normalize_email(email))
    except ValueError:
        user = None

    if user is None:
        raise Unauthorized('unknown user')
    return user

class ConnectionResource:

    db_session: sessionmaker[Session]

    def __init__(self, db_sessionmaker: sessionmaker[Session]):
        self.db_session = db_sessionmaker

    @api.validate(
        resp=SpecResponse(HTTP_200=ConnectionsResponse, HTTP_400=ErrorResponse),
        query=ConnectionListParams
    )
    def on_get(self, req: Request, resp: Response):
        query: ConnectionListParams = req.context.query

        with self.db_session() as db:
            users = connected_users(db, query.user_uuid, incoming=query.direction == 'incoming')

            resp.media = {
                'success': True,
                'connections': [user.serialize() for user in users]
            }
            resp.status = falcon.HTTP_200

    @api.validate(
        resp=SpecResponse(
            HTTP_200=(SuccessResponse, 'connection exists, created if missing'),
            HTTP_400=ErrorResponse,
            HTTP_401=ErrorResponse,
            HTTP_404=ErrorResponse
        ),
        query=ConnectionAuthParams,
        json=CreateConnectionRequest
    )
    def on_post(self, req: Request, resp: Response):
        target_uuid = req.context.json.target_user_uuid

        with self.db_session.begin() as db:
            source = authenticate(db, req.context.query.email)

            if source.uuid == target_uuid:
                raise BadRequest('cannot connect to yourself')

            if db.scalar(select(User.uuid).where(User.uuid == target_uuid)) is None:
                raise NotFound('target user not found')

            if connection(db, source.uuid, target_uuid) is None:
                db.add(Connection(ConnectionCreate(
                    source_user_uuid=source.uuid,
                    target_user_uuid=target_uuid
                )))
                logging.info('connection created source=%s target=%s', source.uuid, target_uuid)

        resp.media = {'success': True}
        resp.status = falcon.HTTP_200

    @api.validate(
        resp=SpecResponse(HTTP_200=SuccessResponse, HTTP_400=ErrorResponse, HTTP_401=ErrorResponse),
        query=ConnectionDeleteParams
    )
    def on_delete(self, req: Request, resp: Response):
        query: ConnectionDeleteParams = req.context.query

        with self.db_session.begin() as db:
            source = authenticate(db, query.email)

            edges = [connection(db, source.uuid, query.target_user_uuid)]
            if query.bidirectional:
                edges.append(connection(db, query.target_user_uuid, source.uuid))

            for edge in edges:
                if edge is not None:
                    db.delete(edge)

        logging.info('connection deleted source=%s target=%s bidirectional=%s',
                     source.uuid, query.target_user_uuid, query.bidirectional)

        resp.media = {'success': True}
        resp.status = falcon.HTTP_200
