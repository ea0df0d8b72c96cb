"""
Authentication blueprint:
- POST /auth/signup
- POST /auth/login
- POST /auth/logout

Views only adapt HTTP to AuthService: read the body, set or clear the
accessToken cookie, and wrap results in the success envelope. Failures are
rendered by the global error handler.
"""
from __future__ import annotations

from flask import Blueprint, current_app, request

from models.schemas.user import LoginSchema, SignupSchema, UserOutSchema
from storefront.responses import api_response
from utils.decorators import ACCESS_COOKIE, extract_token, validate_request

REFRESH_COOKIE = "refreshToken"

bp = Blueprint("auth", __name__, url_prefix="/auth")

signup_schema = SignupSchema()
login_schema = LoginSchema()
user_out_schema = UserOutSchema()


def _services():
    return current_app.extensions["storefront"]


def _cookie_options() -> dict:
    return {"httponly": True, "secure": _services().settings.is_production}


@bp.post("/signup")
@validate_request(signup_schema)
def signup():
    """
    Register a new user.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [email, fullname, password]
          properties:
            email: { type: string }
            fullname: { type: string }
            password: { type: string, minLength: 8 }
            phone: { type: string }
            address: { type: string }
    responses:
      201:
        description: Created
      400:
        description: Validation error
      409:
        description: User already exists
    """
    user = _services().auth.signup(request.get_json(silent=True))
    return api_response(201, "User created successfully!", data=user_out_schema.dump(user))


@bp.post("/login")
@validate_request(login_schema)
def login():
    """
    Login: returns the user and an access token, also set as the accessToken cookie
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           required: [email, password]
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns user and accessToken)
      401:
        description: Password is incorrect
      404:
        description: User does not exist
    """
    result = _services().auth.login(request.get_json(silent=True))
    response, status = api_response(
        200,
        "User logged in successfully!",
        data={"user": user_out_schema.dump(result.user), "accessToken": result.access_token},
    )
    response.set_cookie(ACCESS_COOKIE, result.access_token, **_cookie_options())
    return response, status


@bp.post("/logout")
def logout():
    """
    Logout: clears auth cookies and revokes the presented access token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    responses:
      200:
        description: Logged out
    """
    _services().auth.logout(extract_token())
    response, status = api_response(200, "User logged out successfully!")
    options = _cookie_options()
    response.delete_cookie(ACCESS_COOKIE, **options)
    response.delete_cookie(REFRESH_COOKIE, **options)
    return response, status
