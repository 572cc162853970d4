import logging
from contextvars import ContextVar

from .config import Config

request_id: ContextVar[str] = ContextVar('request_id', default='-')

LOG_FORMAT = '%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s'

class RequestIdFilter(logging.Filter):
    """Stamps every record with the id of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id.get()
        return True

def setup_logging(level: str | int = 'INFO'):
    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logging.basicConfig(level=level, handlers=[handler], force=True)

setup_logging(Config().log_level)
