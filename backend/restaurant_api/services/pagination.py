import math

def paginate(query, page=1, limit=10, serialize=None):
    """Run ``query`` for one page and wrap the rows in the listing envelope."""
    serialize = serialize or (lambda row: row.to_dict())
    total = query.count()
    rows = query.offset((page - 1) * limit).limit(limit).all()

    return {
        'data': [serialize(row) for row in rows],
        'pagination': {
            'page': page,
            'limit': limit,
            'total': total,
            'totalPages': math.ceil(total / limit) if limit else 0
        }
    }
