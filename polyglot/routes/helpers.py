"""Request parsing helpers shared by the translation routes."""

from flask import request

TRUE_VALUES = ('true', '1', 'yes', 'on')
FALSE_VALUES = ('false', '0', 'no', 'off', '')


class BadRequest(ValueError):
    """Invalid client input; the message is returned with a 400."""


def parse_bool(value, default=False):
    """Parse booleans from query strings or JSON bodies."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return default


def parse_content_id(value, required=False):
    """Content ids are optional non-negative integers ('' counts as absent)."""
    if value is None or value == '':
        if required:
            raise BadRequest('content_id is required')
        return None
    if isinstance(value, bool):
        raise BadRequest('content_id must be an integer')
    try:
        content_id = int(value)
    except (TypeError, ValueError):
        raise BadRequest('content_id must be an integer')
    if content_id < 0:
        raise BadRequest('content_id must be non-negative')
    return content_id


def parse_limit(value, default):
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest('limit must be an integer')


def get_json_body():
    """Return the JSON object body or raise BadRequest."""
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        raise BadRequest('Invalid JSON data')
    return data


def require_fields(data, fields):
    for field in fields:
        if data.get(field) is None:
            raise BadRequest(f'Missing required field: {field}')
