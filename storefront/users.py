from __future__ import annotations

from flask import Blueprint, request

from models.schemas.user import UserOutSchema
from models.user import Role
from storefront.responses import api_response
from storefront.services import users as user_service
from utils.decorators import auth_required

bp = Blueprint("users", __name__, url_prefix="/user")

user_out_schema = UserOutSchema()
user_list_out_schema = UserOutSchema(many=True)


@bp.get("/all")
@auth_required(Role.SELLER, Role.USER)
def get_all_users():
    """
    List users (filters, pagination, sorting) - seller, user
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - { in: query, name: searchTerm, type: string, description: "fullname or email contains" }
      - { in: query, name: fullname, type: string }
      - { in: query, name: email, type: string }
      - { in: query, name: phone, type: string }
      - { in: query, name: role, type: string, enum: [ADMIN, SELLER, USER] }
      - { in: query, name: page, type: integer, default: 1 }
      - { in: query, name: limit, type: integer, default: 10 }
      - { in: query, name: sortBy, type: string, enum: [createdAt, fullname, email, role] }
      - { in: query, name: sortOrder, type: string, enum: [asc, desc] }
    responses:
      200: { description: OK }
      400: { description: Invalid filter }
      401: { description: Unauthorized }
    """
    meta, rows = user_service.get_all_users(request.args.to_dict())
    return api_response(200, "Users retrieved successfully!", data=user_list_out_schema.dump(rows), meta=meta)


@bp.get("/<user_id>")
def get_one_user(user_id: str):
    """
    Get a user by id
    ---
    tags:
      - Users
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: OK }
      400: { description: Malformed id }
      404: { description: User does not exist }
    """
    user = user_service.get_user(user_id)
    return api_response(200, "User retrieved successfully!", data=user_out_schema.dump(user))
