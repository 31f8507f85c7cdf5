from sqlalchemy import func
from sqlmodel import select


def paginate(
    *,
    session,
    query,
    page: int = 1,
    limit: int = 10,
):
    """Run ``query`` for one page; keys follow the storefront's paginator shape."""
    if page < 1:
        page = 1

    if limit < 1:
        limit = 10

    offset = (page - 1) * limit

    total = session.exec(
        select(func.count()).select_from(query.subquery())
    ).one()

    results = session.exec(
        query.offset(offset).limit(limit)
    ).all()

    return {
        "total": total,
        "last_page": max((total + limit - 1) // limit, 1),
        "current_page": page,
        "per_page": limit,
        "data": results,
    }
