from flask import current_app, jsonify
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from models import db


class ApiError(Exception):
    status_code = 500
    message = "Something broke on our end"

    def __init__(self, message=None, status_code=None, payload=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if status_code:
            self.status_code = status_code
        self.payload = payload or {}

    def to_dict(self):
        return {"message": self.message, **self.payload}


class ValidationFailed(ApiError):
    status_code = 400
    message = "Invalid data"

    def __init__(self, message=None, errors=None):
        super().__init__(message, payload={"errors": errors or []})


class NotFound(ApiError):
    status_code = 404
    message = "Not found"


class Unauthorized(ApiError):
    status_code = 401
    message = "Unauthorized"


class Conflict(ApiError):
    status_code = 409
    message = "Conflict"


def field_errors(exc):
    """Flatten a pydantic ValidationError into [{field, message}, ...]."""
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "__root__"
        errors.append({"field": field, "message": err.get("msg", "Invalid value")})
    return errors


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def api_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(ValidationError)
    def validation_error(e):
        return jsonify({"message": "Invalid data", "errors": field_errors(e)}), 400

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({"message": e.description or e.name}), e.code

    @app.errorhandler(SQLAlchemyError)
    def database_error(e):
        db.session.rollback()
        current_app.logger.exception("Database error: %s", type(e).__name__)
        return jsonify({"message": "Something broke on our end"}), 500

    @app.errorhandler(Exception)
    def server_error(e):
        current_app.logger.exception("Unhandled error")
        return jsonify({"message": "Something broke on our end"}), 500
