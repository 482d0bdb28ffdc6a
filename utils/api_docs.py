"""OpenAPI (Swagger 2.0) settings for the flasgger docs served at /api-docs/."""

DOCS_ROUTE = "/api-docs/"
DOCS_STATIC_PATH = "/flasgger_static"

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec",
            "route": "/api-docs/apispec.json",
            "rule_filter": lambda rule: rule.rule.startswith("/api/"),
            "model_filter": lambda tag: True,
        }
    ],
    "static_url_path": DOCS_STATIC_PATH,
    "swagger_ui": True,
    "specs_route": DOCS_ROUTE,
}

SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Blog API",
        "description": "Users, posts, comments and roles.",
        "version": "0.1.0",
    },
    "basePath": "/",
    "consumes": ["application/json"],
    "produces": ["application/json"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "JWT from /api/users/login, sent as 'Bearer <token>'.",
        }
    },
}


def is_docs_path(path: str) -> bool:
    return path.startswith(DOCS_ROUTE.rstrip("/")) or path.startswith(DOCS_STATIC_PATH)
