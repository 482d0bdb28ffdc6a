"""Application factory."""

import os
import uuid

from flasgger import Swagger
from flask import Flask, g, jsonify, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException, NotFound

from config import Config
from models import db
from routes.comments import comments_bp
from routes.posts import posts_bp
from routes.roles import roles_bp
from routes.users import users_bp
from security.passwords import PasswordHasher, PasswordSettings
from utils.api_docs import SWAGGER_CONFIG, SWAGGER_TEMPLATE, is_docs_path

migrate = Migrate()
jwt = JWTManager()

SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self'; frame-ancestors 'self'; object-src 'none'",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}

DOCS_CSP = (
    "default-src 'self'; script-src 'self' 'unsafe-inline'; "
    "style-src 'self' 'unsafe-inline'; img-src 'self' data:; frame-ancestors 'self'"
)


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Password hashing; a bad configuration stops startup here
    settings = PasswordSettings.from_mapping(app.config)
    app.extensions["password_hasher"] = PasswordHasher(settings)

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Rate limiting
    storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    headers_enabled = app.config.get("RATELIMIT_HEADERS_ENABLED", True)
    key_prefix = app.config.get("RATELIMIT_KEY_PREFIX") or str(uuid.uuid4())

    # One bucket per client shared by every rate-limited route
    limiter = Limiter(
        key_func=get_remote_address,
        application_limits=[lambda: app.config.get("RATE_LIMIT", "150 per hour")],
        storage_uri=storage_uri,
        headers_enabled=headers_enabled,
        key_prefix=key_prefix,
    )
    limiter.init_app(app)
    app.config["RATELIMIT_KEY_PREFIX"] = key_prefix

    # Blueprints
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(posts_bp, url_prefix="/api/posts")
    app.register_blueprint(comments_bp, url_prefix="/api/comments")
    app.register_blueprint(roles_bp, url_prefix="/api/roles")

    @app.route("/", methods=["GET"])
    @limiter.exempt
    def index():
        return jsonify({"status": "success", "message": "Welcome to the Blog API"})

    @app.route("/health", methods=["GET"])
    @limiter.exempt
    def health_check():
        return jsonify({"status": "ok"})

    # API docs
    Swagger(app, config=SWAGGER_CONFIG, template=SWAGGER_TEMPLATE)
    limiter.exempt(app.blueprints["flasgger"])

    _register_security_headers(app)
    _register_error_handlers(app)

    return app


def _register_security_headers(app: Flask) -> None:
    """Add hardening headers to every response."""

    @app.after_request
    def _add_security_headers(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        if is_docs_path(request.path):
            # swagger-ui boots from inline scripts and styles
            response.headers["Content-Security-Policy"] = DOCS_CSP
        response.headers.pop("X-Powered-By", None)
        return response


def error_response(status_code: int, message: str):
    """Build the JSON error envelope shared by every error handler."""

    request_id = g.get("request_id") or str(uuid.uuid4())
    response = jsonify(
        {
            "status": "fail" if status_code < 500 else "error",
            "message": message,
            "request_id": request_id,
        }
    )
    response.status_code = status_code
    response.headers.setdefault("X-Request-ID", request_id)
    return response


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        message = error.description
        if isinstance(error, NotFound) and request.url_rule is None:
            message = "undefined route"
        response = error_response(error.code or 500, message)
        for header, value in error.get_headers():
            if header.lower() != "content-type":
                response.headers.setdefault(header, value)
        return response

    @app.errorhandler(IntegrityError)
    def _handle_integrity_error(error: IntegrityError):
        db.session.rollback()
        app.logger.warning("Integrity error: %s", error.orig)
        return error_response(409, "The request conflicts with existing data.")

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):
        app.logger.exception("Unhandled application error", exc_info=error)
        return error_response(500, "An unexpected error occurred.")


@jwt.unauthorized_loader
def _missing_token(reason: str):
    return error_response(401, reason)


@jwt.invalid_token_loader
def _invalid_token(reason: str):
    return error_response(401, reason)


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return error_response(401, "Token has expired.")


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 4000)))
