from __future__ import annotations

from typing import Any, List, Mapping, Tuple

from marshmallow import ValidationError
from sqlalchemy import func, or_

from models import storage
from models.base_model import coerce_id
from models.schemas.user import UserQuerySchema
from models.user import User
from storefront.errors import InvalidInput, NotFound, join_messages
from utils.decorators import service_errors

query_schema = UserQuerySchema()

SORT_COLUMNS = {
    "createdAt": User.created_at,
    "fullname": User.fullname,
    "email": User.email,
    "role": User.role,
}


def _contains(column, value: str):
    return func.lower(column).contains(value.lower(), autoescape=True)


@service_errors
def get_all_users(args: Mapping[str, Any]) -> Tuple[dict, List[User]]:
    """Filtered, sorted, paginated listing. Returns (meta, rows)."""
    try:
        opts = query_schema.load(dict(args))
    except ValidationError as err:
        raise InvalidInput(join_messages(err)) from err

    session = storage.get_session()
    query = session.query(User)

    term = opts.get("searchTerm")
    if term:
        query = query.filter(or_(_contains(User.fullname, term), _contains(User.email, term)))
    if opts.get("fullname"):
        query = query.filter(_contains(User.fullname, opts["fullname"]))
    for key in ("email", "phone", "role"):
        if opts.get(key) is not None:
            query = query.filter(getattr(User, key) == opts[key])

    total = query.count()

    column = SORT_COLUMNS[opts["sortBy"]]
    order = column.desc() if opts["sortOrder"] == "desc" else column.asc()
    page, limit = opts["page"], opts["limit"]
    rows = query.order_by(order, User.id.asc()).offset((page - 1) * limit).limit(limit).all()

    return {"page": page, "limit": limit, "total": total}, rows


@service_errors
def get_user(user_id: str) -> User:
    user = storage.get(User, coerce_id(user_id))
    if user is None:
        raise NotFound("User does not exist")
    return user
