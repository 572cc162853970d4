import falcon
from falcon import Request, Response

class HealthResource:

    def on_get(self, req: Request, resp: Response):
        resp.content_type = falcon.MEDIA_TEXT
        resp.text = 'OK'
        resp.status = falcon.HTTP_200
