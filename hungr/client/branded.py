from typing import NewType

import re

from .errors import InvalidEmailError, InvalidUUIDError

Email = NewType('Email', str)
UUID = NewType('UUID', str)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
UUID_PATTERN = re.compile(r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$', re.IGNORECASE)

def is_email(value: str) -> bool:
    return EMAIL_PATTERN.match(value) is not None

def is_uuid(value: str) -> bool:
    return UUID_PATTERN.match(value) is not None

def as_email(value: str) -> Email:
    email = value.strip().lower()
    if not is_email(email):
        raise InvalidEmailError(f'Invalid email: {value}')
    return Email(email)

def as_uuid(value: str) -> UUID:
    if not is_uuid(value):
        raise InvalidUUIDError(f'Invalid UUID: {value}')
    return UUID(value.lower())
