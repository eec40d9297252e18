"""Request authorization: operator sessions and API-key access."""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import current_app, g, request
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import InvalidTokenError

from telcogrid.errors import TelcoGridError, Unauthorized
from telcogrid.models import ApiKey, Operator


def get_storage():
    """Storage handle injected by the application factory."""
    return current_app.extensions['storage']


def _identity_to_id(identity) -> Optional[int]:
    if identity in (None, ''):
        return None
    try:
        return int(identity)
    except (TypeError, ValueError):
        return None


def current_operator() -> Optional[Operator]:
    """Operator behind the session token (header or cookie), if any."""
    operator = None
    try:
        verify_jwt_in_request(optional=True)
    except (JWTExtendedException, InvalidTokenError) as exc:
        current_app.logger.debug("Rejected session token: %s", exc)
    else:
        operator_id = _identity_to_id(get_jwt_identity())
        if operator_id is not None:
            operator = get_storage().get_operator(operator_id)
            if operator is not None and not operator.is_active:
                operator = None
    return operator


def _api_key_allowed(api_key: ApiKey) -> bool:
    if not api_key.is_usable():
        return False
    if current_app.config.get('API_KEY_ENFORCE_USAGE_LIMIT'):
        return api_key.usage_count < api_key.usage_limit
    return True


def authorize_api_key() -> Optional[ApiKey]:
    """Validate the API key header and meter one use of it.

    The increment happens before the request is served. A failed increment
    is logged and does not fail the request.
    """
    header = current_app.config.get('API_KEY_HEADER', 'x-api-key')
    token = (request.headers.get(header) or '').strip()
    if not token:
        return None

    storage = get_storage()
    api_key = storage.get_api_key_by_token(token)
    if api_key is None or not _api_key_allowed(api_key):
        current_app.logger.warning(
            "Rejected API key from %s (%s)",
            request.remote_addr,
            'unknown' if api_key is None else api_key.status,
        )
        return None

    try:
        storage.increment_usage(api_key.id)
    except TelcoGridError:
        current_app.logger.error("Could not record usage for API key %s", api_key.id)
    return api_key


def session_required():
    """Authenticated operator session or 401."""
    def wrapper(fn):
        @wraps(fn)
        def decorator(*args, **kwargs):
            if current_operator() is None:
                raise Unauthorized()
            return fn(*args, **kwargs)

        return decorator

    return wrapper


def session_or_api_key_required():
    """Operator session, or an active API key whose use is metered."""
    def wrapper(fn):
        @wraps(fn)
        def decorator(*args, **kwargs):
            g.api_key = None
            if current_operator() is None:
                api_key = authorize_api_key()
                if api_key is None:
                    raise Unauthorized('Unauthorized: Login or Valid API Key required')
                g.api_key = api_key
            return fn(*args, **kwargs)

        return decorator

    return wrapper
