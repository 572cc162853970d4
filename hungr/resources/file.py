import falcon
from falcon import Request, Response

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker, Session, undefer

from ..database.models import Recipe, File
from ..database.queries import next_page_number
from ..spec import api
from ..util import BadRequest, NotFound, parse_uuid, read_uploads, is_image
from ..validation import FileCreate, FileUploadResponse, ErrorResponse
from ..log import logging

from spectree import Response as SpecResponse

CACHE_CONTROL = 'public, max-age=31536000'

class FileResource:

    db_session: sessionmaker[Session]

    def __init__(self, db_sessionmaker: sessionmaker[Session]):
        self.db_session = db_sessionmaker

    @api.validate(
        resp=SpecResponse(HTTP_201=FileUploadResponse, HTTP_400=ErrorResponse, HTTP_404=ErrorResponse)
    )
    def on_post(self, req: Request, resp: Response, recipe_uuid: str):
        recipe_id = parse_uuid(recipe_uuid, 'recipe uuid')

        uploads = read_uploads(req, 'file')
        if not uploads:
            raise BadRequest('at least one file is required')

        with self.db_session.begin() as db:
            if db.scalar(select(Recipe.uuid).where(Recipe.uuid == recipe_id)) is None:
                raise NotFound('recipe not found')

            first_page = next_page_number(db, recipe_id)

            files = []
            for offset, upload in enumerate(uploads):
                f = File(FileCreate(
                    recipe_uuid=recipe_id,
                    page_number=first_page + offset,
                    content_type=upload.content_type,
                    image=is_image(upload.data),
                    data=upload.data
                ))
                db.add(f)
                files.append(f)

            db.flush()

            logging.info('recipe files added uuid=%s files=%d first_page=%d', recipe_id, len(files), first_page)

            resp.media = {
                'success': True,
                'files': [f.serialize() for f in files]
            }
            resp.status = falcon.HTTP_201

    def on_get_data(self, req: Request, resp: Response, file_uuid: str):
        file_id = parse_uuid(file_uuid, 'file uuid')

        with self.db_session() as db:
            f = db.scalar(select(File).options(undefer(File.data)).where(File.uuid == file_id))
            if f is None:
                raise NotFound('file not found')

            resp.data = f.data
            resp.content_type = f.content_type
            resp.cache_control = [CACHE_CONTROL]
            resp.status = falcon.HTTP_200
