"""Flask app serving the landing-page checkout endpoints."""
from __future__ import annotations

from http import HTTPStatus
from typing import Any, List

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException, MethodNotAllowed

from api.checkout import checkout_api
from api.contracts import contracts_api
from api.kyc import kyc_api
from api.leads import leads_api
from api.webhook import webhook_api
from core import config
from core.cors import cors_headers
from core.errors import ApiError
from core.log import get_logger, setup_logging

setup_logging(config.LOG_LEVEL)
logger = get_logger(__name__)

METHOD_ORDER = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")

app = Flask(__name__)
for blueprint in (checkout_api, webhook_api, leads_api, kyc_api, contracts_api):
    app.register_blueprint(blueprint)


@app.get("/health")
def health() -> str:
    return "alive"


def _route_methods() -> List[str]:
    """Methods the requested path answers to, for the CORS preflight."""
    methods = app.url_map.bind_to_environ(request.environ).allowed_methods()
    return [m for m in METHOD_ORDER if m in methods] or ["POST", "OPTIONS"]


@app.after_request
def add_cors_headers(response):
    if request.path.startswith("/api/"):
        response.headers.update(cors_headers(request.headers.get("Origin"), _route_methods()))
    return response


@app.errorhandler(ApiError)
def handle_api_error(exc: ApiError) -> Any:
    return jsonify(exc.payload), exc.status


@app.errorhandler(MethodNotAllowed)
def handle_method_not_allowed(exc: MethodNotAllowed) -> Any:
    response = jsonify({"error": "Method not allowed"})
    response.status_code = HTTPStatus.METHOD_NOT_ALLOWED
    valid = exc.valid_methods or []
    response.headers["Allow"] = ", ".join(m for m in METHOD_ORDER if m in valid)
    return response


@app.errorhandler(HTTPException)
def handle_http_error(exc: HTTPException) -> Any:
    return jsonify({"error": exc.description}), exc.code


@app.errorhandler(Exception)
def handle_unexpected(exc: Exception) -> Any:
    logger.exception("[api] unhandled error on %s", request.path)
    return jsonify({"error": str(exc) or "Internal server error"}), HTTPStatus.INTERNAL_SERVER_ERROR


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=8080)
