FETCH_FAILURE_MESSAGE = 'Unable to reach the API. Check that the backend is running and HUNGR_API_BASE is correct.'

class ApiError(Exception):
    """The API answered with a non-2xx status."""

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.message = message
        self.status = status

class ApiUnreachableError(Exception):
    """No response at all: the backend is down or the base URL is wrong."""

    def __init__(self, message: str = FETCH_FAILURE_MESSAGE):
        super().__init__(message)
        self.message = message

class ResponseShapeError(Exception):
    """A 2xx response whose body does not have the expected shape."""

class InvalidEmailError(ValueError):
    pass

class InvalidUUIDError(ValueError):
    pass

def get_friendly_error_message(err: object, fallback: str) -> str:
    if isinstance(err, ApiUnreachableError):
        return FETCH_FAILURE_MESSAGE
    if not isinstance(err, Exception):
        return fallback

    message = str(err)
    return FETCH_FAILURE_MESSAGE if message == 'Failed to fetch' else message
