import falcon
from falcon import Request, Response

from sqlalchemy.exc import SQLAlchemyError

from typing import NamedTuple
from uuid import UUID, uuid4

import time
import io

import PIL.Image

from .log import logging, request_id

# Errors raised by the resources. All of them are rendered as `{"error": reason}`.

class RequestError(falcon.HTTPError):
    http_status: str = falcon.HTTP_400
    reason: str

    def __init__(self, reason: str):
        super().__init__(self.http_status)
        self.reason = reason

class BadRequest(RequestError):
    http_status = falcon.HTTP_400

class Unauthorized(RequestError):
    http_status = falcon.HTTP_401

class NotFound(RequestError):
    http_status = falcon.HTTP_404

class Conflict(RequestError):
    http_status = falcon.HTTP_409

class ServiceError(RequestError):
    http_status = falcon.HTTP_500

def handle_request_error(req: Request, resp: Response, ex: RequestError, params):
    resp.status = ex.http_status
    resp.media = {'error': ex.reason}

def handle_malformed_media(req: Request, resp: Response, ex: falcon.MediaMalformedError, params):
    resp.status = ex.status
    resp.media = {'error': ex.description or ex.title}

def handle_storage_error(req: Request, resp: Response, ex: SQLAlchemyError, params):
    logging.exception(ex)
    resp.status = falcon.HTTP_500
    resp.media = {'error': 'storage failure: ' + str(getattr(ex, 'orig', None) or ex)}

def handle_unexpected_error(req: Request, resp: Response, ex: Exception, params):
    logging.exception(ex)
    resp.status = falcon.HTTP_500
    resp.media = {'error': 'internal server error'}

def handle_validation_error(req: Request, resp: Response, req_validation_error, instance, *args):
    """`spectree` hook (newer releases also pass the model adapter). Rewrites
    request validation failures into the `{"error": ...}` shape used by every
    other failure of the API."""

    if req_validation_error is None:
        return

    problems = []
    for err in req_validation_error.errors():
        location = '.'.join(str(part) for part in err.get('loc', ()))
        problems.append(f'{location}: {err["msg"]}' if location else err['msg'])

    resp.status = falcon.HTTP_400
    resp.media = {'error': 'invalid request: ' + '; '.join(problems)}

def parse_uuid(value: str, what: str) -> UUID:
    try:
        return UUID(value)
    except (TypeError, ValueError):
        raise BadRequest(f'invalid {what}')

# Multipart uploads

class Upload(NamedTuple):
    filename: str | None
    content_type: str
    data: bytes

def read_uploads(req: Request, field: str) -> list[Upload]:
    """Collects every multipart part named `field`. Requests without a
    multipart body carry no uploads."""

    content_type = req.content_type or ''
    if not content_type.startswith(falcon.MEDIA_MULTIPART):
        return []

    uploads = []
    try:
        for part in req.get_media():
            if part.name != field:
                continue
            uploads.append(Upload(
                filename=part.filename,
                content_type=part.content_type or 'image/jpeg',
                data=part.get_data()
            ))
    except falcon.MediaMalformedError:
        raise BadRequest('failed to parse upload')

    return uploads

# Middleware

class RequestLogger:
    """Assigns a short id to every request and logs its outcome."""

    def process_request(self, req: Request, resp: Response):
        req.context.request_id = uuid4().hex[:8]
        req.context.request_id_token = request_id.set(req.context.request_id)
        req.context.started = time.perf_counter()
        resp.set_header('X-Request-ID', req.context.request_id)

    def process_response(self, req: Request, resp: Response, resource, req_succeeded: bool):
        started = getattr(req.context, 'started', None)
        duration_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0

        logging.info('request method=%s path=%s status=%s duration_ms=%.1f',
                     req.method, req.path, resp.status, duration_ms)

        token = getattr(req.context, 'request_id_token', None)
        if token is not None:
            request_id.reset(token)

def is_image(data: bytes) -> bool:
    try:
        with PIL.Image.open(io.BytesIO(data)) as image:
            image.verify()
        return True
    except (PIL.UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return False
