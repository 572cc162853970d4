from spectree import SpecTree

from .util import handle_validation_error

api = SpecTree(
    'falcon',
    title='Hungr API',
    version='0.1.0',
    openapi_version='3.0.3',
    description='Store recipe photos and steps, tag them, and share them with connected friends.',
    before=handle_validation_error
)
