import falcon
from falcon import Request, Response

from ..extraction import RecipeExtractor, ExtractionError, ExtractionNotConfigured, FetchError
from ..spec import api
from ..util import BadRequest, ServiceError, read_uploads
from ..validation import ExtractURLRequest, ExtractTextRequest, ExtractedRecipe, ErrorResponse
from ..log import logging

from spectree import Response as SpecResponse

class ExtractResource:

    extractor: RecipeExtractor

    def __init__(self, extractor: RecipeExtractor):
        self.extractor = extractor

    def run(self, resp: Response, extract, *args):
        try:
            result: ExtractedRecipe = extract(*args)
        except ExtractionNotConfigured:
            logging.error('extraction requested but no API key is configured')
            raise ServiceError('recipe extraction not configured')
        except FetchError as e:
            logging.warning('failed to fetch page: %s', e)
            raise BadRequest(f'failed to fetch URL: {e}')
        except ExtractionError as e:
            logging.exception(e)
            raise ServiceError(f'failed to extract recipe: {e}')

        resp.media = result.model_dump()
        resp.status = falcon.HTTP_200

    @api.validate(
        resp=SpecResponse(HTTP_200=ExtractedRecipe, HTTP_400=ErrorResponse, HTTP_500=ErrorResponse),
        json=ExtractURLRequest
    )
    def on_post_url(self, req: Request, resp: Response):
        self.run(resp, self.extractor.from_url, req.context.json.url.strip())

    @api.validate(
        resp=SpecResponse(HTTP_200=ExtractedRecipe, HTTP_400=ErrorResponse, HTTP_500=ErrorResponse),
        json=ExtractTextRequest
    )
    def on_post_text(self, req: Request, resp: Response):
        self.run(resp, self.extractor.from_text, req.context.json.text)

    @api.validate(
        resp=SpecResponse(HTTP_200=ExtractedRecipe, HTTP_400=ErrorResponse, HTTP_500=ErrorResponse)
    )
    def on_post_image(self, req: Request, resp: Response):
        uploads = read_uploads(req, 'images')
        if not uploads:
            raise BadRequest('at least one image file is required')

        for upload in uploads:
            if not upload.content_type.startswith('image/'):
                raise BadRequest(f'file {upload.filename or "upload"} must be an image')

        logging.info('extracting recipe from images count=%d', len(uploads))
        self.run(resp, self.extractor.from_images, [(u.content_type, u.data) for u in uploads])
