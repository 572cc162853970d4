from dataclasses import dataclass
from http.cookies import SimpleCookie, CookieError
from urllib.parse import quote, unquote

from .branded import Email, as_email
from .errors import InvalidEmailError

COOKIE_NAME = 'hungr_email'
COOKIE_MAX_AGE = 60 * 60 * 24 * 365

@dataclass(frozen=True)
class Session:
    """The logged in user. The cookie is only its serialized form."""

    email: Email

    def to_cookie(self) -> str:
        return f'{COOKIE_NAME}={quote(self.email, safe="")}; Path=/; Max-Age={COOKIE_MAX_AGE}; SameSite=Lax'

    @classmethod
    def from_cookie(cls, header: str | None) -> 'Session | None':
        """Reads the session from a `Cookie` header. Absent or invalid
        cookies yield no session."""

        if not header:
            return None

        cookie = SimpleCookie()
        try:
            cookie.load(header)
        except CookieError:
            return None

        morsel = cookie.get(COOKIE_NAME)
        if morsel is None or not morsel.value:
            return None

        try:
            return cls(as_email(unquote(morsel.value)))
        except InvalidEmailError:
            return None

    @staticmethod
    def clear_cookie() -> str:
        return f'{COOKIE_NAME}=; Path=/; Max-Age=0'
