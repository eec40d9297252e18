"""Query-string pagination shared by the listing endpoints."""

import math

from flask import current_app, request

from telcogrid.storage import MAX_ID


def parse_int(value) -> int | None:
    try:
        return int(str(value))
    except (TypeError, ValueError):
        return None


def _positive_or(value, default: int) -> int:
    parsed = parse_int(value)
    if parsed is None or parsed < 1:
        return default
    return parsed


def page_args(default_limit: int) -> tuple[int, int, int]:
    """Return (page, limit, offset) from ?page=&limit=.

    ``page`` is clamped so the offset never exceeds what the database accepts;
    a page past the end simply comes back empty.
    """
    page = _positive_or(request.args.get('page'), 1)
    limit = _positive_or(request.args.get('limit'), default_limit)
    limit = min(limit, int(current_app.config.get('MAX_PAGE_SIZE', 100)))
    page = min(page, MAX_ID // limit + 1)
    return page, limit, (page - 1) * limit


def page_payload(result, page: int, limit: int) -> dict:
    return {
        'items': [item.to_dict() for item in result.items],
        'total': result.total,
        'page': page,
        'limit': limit,
        'totalPages': math.ceil(result.total / limit) if limit else 0,
    }
