import math

DEFAULT_LIMIT = 50
MAX_LIMIT = 200

def normalize_page(page_raw, limit_raw):
    """Return (page, limit, offset) for page-numbered listings.

    page is 1-based; limit is clamped to [1, MAX_LIMIT].
    """
    try:
        page = int(page_raw) if page_raw is not None else 1
        limit = int(limit_raw) if limit_raw is not None else DEFAULT_LIMIT
    except (TypeError, ValueError):
        raise ValueError('page/limit must be int')
    if page < 1:
        raise ValueError('page must be >= 1')
    limit = max(1, min(limit, MAX_LIMIT))
    return page, limit, (page - 1) * limit

def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
