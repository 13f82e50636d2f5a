"""
Helpers shared by the API blueprints: storage access, request parsing, pagination.
"""
import math

from flask import current_app, request
from pydantic import ValidationError

from leadwell.errors import RequestValidationError
from leadwell.schemas import PageParams, field_errors
from leadwell.storage.base import Storage


def get_storage() -> Storage:
    return current_app.extensions['storage']


def parse(schema_cls, data, message):
    """Validate data against schema_cls or raise a 400 with per-field errors."""
    try:
        return schema_cls.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(message, field_errors(e)) from e


def json_body(message):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise RequestValidationError(message, [{'field': 'body', 'message': 'Request body must be a JSON object'}])
    return data


def page_params():
    return parse(PageParams, request.args.to_dict(), 'Invalid pagination parameters')


def pagination(params, total):
    return {
        'page': params.page,
        'limit': params.limit,
        'total': total,
        'totalPages': math.ceil(total / params.limit),
    }
