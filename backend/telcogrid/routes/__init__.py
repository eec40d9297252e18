"""HTTP blueprints for the TelcoGrid API."""
import pydantic
from flask import request

from telcogrid.errors import ValidationError, first_error_message


def validated_body(schema):
    """Parse the JSON body with ``schema`` or raise a 400."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    try:
        return schema.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ValidationError(first_error_message(exc)) from exc
