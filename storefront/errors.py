"""
Domain errors and the single place that turns any failure into the uniform
error envelope:

    {"success": false, "message": str, "errorMessages": [{"path", "message"}], "stack": str}

`stack` is only present outside production.
"""
from __future__ import annotations

import logging
import traceback
from typing import Iterator, Tuple

from flask import current_app, jsonify, request
from marshmallow import ValidationError
from sqlalchemy.exc import DataError, IntegrityError
from werkzeug.exceptions import HTTPException, NotFound as RouteNotFound

from models.base_model import CastError, ModelValidationError

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Something went wrong!"
UNEXPECTED_MESSAGE = "An unexpected error occurred"


class ApiError(Exception):
    """An error with an explicit HTTP status; rendered as-is."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidInput(ApiError):
    status_code = 400


class Unauthorized(ApiError):
    status_code = 401


class NotFound(ApiError):
    status_code = 404


class Conflict(ApiError):
    status_code = 409


class Internal(ApiError):
    status_code = 500


def flatten_messages(messages, prefix: str = "") -> Iterator[Tuple[str, str]]:
    """Yield (path, message) pairs from marshmallow's nested messages."""
    if isinstance(messages, dict):
        for key, value in messages.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            yield from flatten_messages(value, path)
    elif isinstance(messages, (list, tuple)):
        if all(isinstance(m, str) for m in messages):
            yield prefix or "_schema", " ".join(messages)
        else:
            for m in messages:
                yield from flatten_messages(m, prefix)
    else:
        yield prefix or "_schema", str(messages)


def join_messages(err: ValidationError) -> str:
    return ", ".join(f"{path}: {message}" for path, message in flatten_messages(err.messages))


def error_message(path: str, message: str) -> dict:
    return {"path": path, "message": message}


def _simplify(error: BaseException, path: str) -> Tuple[int, str, list]:
    if isinstance(error, ValidationError):
        return 400, "Validation Error", [error_message(p, m) for p, m in flatten_messages(error.messages)]
    if isinstance(error, CastError):
        return 400, "Cast Error", [error_message(error.path, "Invalid ID")]
    if isinstance(error, DataError):
        return 400, "Cast Error", [error_message(path, "Invalid ID")]
    if isinstance(error, ModelValidationError):
        return 400, "Validation Error", [error_message(f, m) for f, m in error.errors.items()]
    if isinstance(error, ApiError):
        messages = [error_message(path, error.message)] if error.message else []
        return error.status_code, error.message, messages
    if isinstance(error, RouteNotFound):
        return 404, "Not Found", [error_message(path, "API Not Found")]
    if isinstance(error, HTTPException):
        return error.code or 500, error.name, [error_message(path, error.description or error.name)]
    if isinstance(error, IntegrityError):
        return 409, "Duplicate entry", [error_message(path, "A record with the same unique value already exists")]
    return 500, GENERIC_MESSAGE, [error_message(path, UNEXPECTED_MESSAGE)]


def normalize_error(error: BaseException, path: str, expose_stack: bool = False) -> Tuple[dict, int]:
    """Map any failure to (body, status). First matching kind wins."""
    status, message, messages = _simplify(error, path)
    body = {"success": False, "message": message, "errorMessages": messages}
    if expose_stack:
        body["stack"] = "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return body, status


def register_error_handlers(app):
    @app.errorhandler(Exception)
    def handle_error(err: Exception):
        settings = current_app.extensions["storefront"].settings
        body, status = normalize_error(err, request.path, expose_stack=not settings.is_production)
        if status >= 500:
            logger.error("Unhandled error on %s %s", request.method, request.path, exc_info=err)
        else:
            logger.info("%s %s -> %s %s", request.method, request.path, status, body["message"])
        return jsonify(body), status
