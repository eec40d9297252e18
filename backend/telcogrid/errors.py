"""Error taxonomy shared by the storage and route layers."""

from __future__ import annotations

from typing import Optional

import pydantic


class TelcoGridError(Exception):
    """Base error carrying the HTTP status it maps to."""

    status_code = 500
    default_message = 'Internal Server Error'

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {'message': self.message}


class ValidationError(TelcoGridError):
    """Raised when input fields are missing, malformed or violate a unique constraint."""

    status_code = 400
    default_message = 'Invalid input'


class Unauthorized(TelcoGridError):
    status_code = 401
    default_message = 'Unauthorized'


class NotFound(TelcoGridError):
    status_code = 404
    default_message = 'Not found'


class InternalError(TelcoGridError):
    status_code = 500
    default_message = 'Internal Server Error'


def first_error_message(exc: pydantic.ValidationError) -> str:
    """Render the first pydantic error as ``field: message``."""
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    field = '.'.join(str(part) for part in first.get('loc', ()) if part != '__root__')
    message = first.get('msg', ValidationError.default_message)
    if message.startswith('Value error, '):
        message = message[len('Value error, '):]
    return f'{field}: {message}' if field else message
