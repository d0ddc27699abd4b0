"""Domain errors and their translation to JSON responses.

Every error raised from the workflow and data access code is a subclass of
``LostFoundError`` carrying the HTTP status it maps to. The handlers below are
the only place where errors become responses.
"""
from __future__ import annotations

from flask import Flask, current_app, jsonify
from marshmallow import ValidationError as SchemaValidationError
from werkzeug.exceptions import HTTPException

from .extensions import db


class LostFoundError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(LostFoundError):
    status_code = 400
    message = "Invalid input"

    def __init__(self, errors: list[str] | str, message: str | None = None):
        if isinstance(errors, str):
            errors = [errors]
        super().__init__(message)
        self.errors = list(errors)

    @classmethod
    def from_schema(cls, exc: SchemaValidationError) -> "ValidationError":
        return cls(flatten_messages(exc.messages))

    def to_dict(self) -> dict:
        return {"error": self.message, "errors": self.errors}


class AuthenticationError(LostFoundError):
    status_code = 401
    message = "Authentication required"


class AuthorizationError(LostFoundError):
    status_code = 403
    message = "Forbidden"


class NotFoundError(LostFoundError):
    status_code = 404
    message = "Not found"

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")


class ConflictError(LostFoundError):
    status_code = 409
    message = "Conflict"


def flatten_messages(messages, prefix: str = "") -> list[str]:
    """Turn marshmallow's nested ``{field: [msg, ...]}`` into ``["field: msg"]``."""
    out: list[str] = []
    if isinstance(messages, dict):
        for key, value in messages.items():
            name = f"{prefix}.{key}" if prefix else str(key)
            if key == "_schema":
                name = prefix
            out.extend(flatten_messages(value, name))
    elif isinstance(messages, (list, tuple)):
        for value in messages:
            out.extend(flatten_messages(value, prefix))
    else:
        out.append(f"{prefix}: {messages}" if prefix else str(messages))
    return out


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(LostFoundError)
    def _domain_error(exc: LostFoundError):
        if exc.status_code >= 500:
            current_app.logger.error("Domain error: %s", exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(SchemaValidationError)
    def _schema_error(exc: SchemaValidationError):
        err = ValidationError.from_schema(exc)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return jsonify({"error": exc.description or exc.name}), exc.code or 500

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        current_app.logger.exception("Unhandled error: %s", exc)
        db.session.rollback()
        return jsonify({"error": "Internal server error"}), 500
