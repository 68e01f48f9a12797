from authors_api.core.config import get_settings


def clamp_pagination(limit: int, offset: int, max_limit: int | None = None):
    if max_limit is None:
        max_limit = get_settings().MAX_PAGE_SIZE
    limit = max(1, min(limit, max_limit))
    offset = max(0, offset)
    return limit, offset
