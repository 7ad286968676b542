from functools import lru_cache
from typing import Any

from flask import Flask, Response, jsonify, request
from flask.json.provider import DefaultJSONProvider
from werkzeug.exceptions import HTTPException

from src.core.crypto import CryptoFactory
from src.core.services import (
    InvalidPayloadError,
    PayloadEncryptionService,
    PayloadSigningService,
)
from src.utils.json_utils import dumps_compact, loads_strict
from src.utils.logging_config import get_logger

logger = get_logger(__name__)


class StrictJSONProvider(DefaultJSONProvider):
    """JSON provider that keeps client key order and only speaks standard JSON.

    Requests with NaN/Infinity, overflowing numbers or unpaired surrogates
    are rejected while parsing, and responses never emit NaN/Infinity.
    """

    sort_keys = False

    def dumps(self, obj: Any, **kwargs: Any) -> str:
        kwargs.setdefault("allow_nan", False)
        return super().dumps(obj, **kwargs)

    def loads(self, s: str | bytes, **kwargs: Any) -> Any:
        return loads_strict(s)


@lru_cache(maxsize=1)
def get_encryption_service() -> PayloadEncryptionService:
    return PayloadEncryptionService(CryptoFactory.create_encryptor())


@lru_cache(maxsize=1)
def get_signing_service() -> PayloadSigningService:
    return PayloadSigningService(CryptoFactory.create_signer())


def create_app() -> Flask:
    """Build the Flask application with all routes registered."""
    flask_app = Flask(__name__)
    flask_app.json = StrictJSONProvider(flask_app)

    @flask_app.post("/encrypt")
    def encrypt() -> Response:
        payload = request.get_json()
        return jsonify(get_encryption_service().encrypt(payload))

    @flask_app.post("/decrypt")
    def decrypt() -> Response:
        payload = request.get_json()
        return jsonify(get_encryption_service().decrypt(payload))

    @flask_app.post("/sign")
    def sign() -> Response:
        payload = request.get_json()
        try:
            signature = get_signing_service().sign(payload)
        except InvalidPayloadError as e:
            return jsonify({"error": str(e)})
        return jsonify({"signature": signature})

    @flask_app.post("/verify")
    def verify() -> tuple[str, int]:
        payload = request.get_json()
        if get_signing_service().verify(payload):
            return "", 204
        return "", 400

    @flask_app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException) -> Response:
        response = e.get_response()
        response.data = dumps_compact({"error": e.description})
        response.content_type = "application/json"
        return response

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(e: Exception) -> tuple[Response, int]:
        logger.exception(f"Unhandled error on {request.method} {request.path}: {e}")
        return jsonify({"error": "internal server error"}), 500

    return flask_app


app = create_app()
