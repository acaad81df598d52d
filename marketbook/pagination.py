from rest_framework.exceptions import ValidationError

import math

MAX_PAGE_SIZE = 100


def parse_page_params(query_params, default_limit=10):
    '''
    Reads `page` and `limit` from the query string.
    Returns a (page, limit) tuple of positive integers.
    '''
    try:
        page = int(query_params.get('page', 1))
        limit = int(query_params.get('limit', default_limit))
    except (TypeError, ValueError):
        raise ValidationError('page and limit must be integers')

    if page < 1:
        raise ValidationError('invalid page number')

    if limit < 1:
        raise ValidationError('limit must be a positive number')

    return page, min(limit, MAX_PAGE_SIZE)


def paginate(queryset, page, limit):
    '''
    Slices a queryset (or list) into one page.
    Returns (page_results, total, total_pages).
    '''
    total = len(queryset) if isinstance(queryset, list) else queryset.count()
    total_pages = math.ceil(total / limit)

    offset = (page - 1) * limit
    page_results = queryset[offset:offset + limit]
    return page_results, total, total_pages
