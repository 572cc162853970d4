import falcon
from falcon import Request, Response

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker, Session

from ..database.models import Tag
from ..spec import api
from ..validation import TagsResponse

from spectree import Response as SpecResponse

class TagResource:

    db_session: sessionmaker[Session]

    def __init__(self, db_sessionmaker: sessionmaker[Session]):
        self.db_session = db_sessionmaker

    @api.validate(resp=SpecResponse(HTTP_200=TagsResponse))
    def on_get(self, req: Request, resp: Response):
        with self.db_session() as db:
            tags = db.scalars(select(Tag).order_by(Tag.name)).all()

            resp.media = {'tags': [tag.serialize() for tag in tags]}
            resp.status = falcon.HTTP_200
