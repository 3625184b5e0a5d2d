from __future__ import annotations

import logging

from flask import Flask, jsonify

from ..core.exceptions import (
    CannotCreateFieldError,
    DomainError,
    MonthIncompleteError,
    NotFoundError,
    NotReadyError,
    PartialFailure,
    ProcessingInProgressError,
    StoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (MonthIncompleteError, 409),
    (ProcessingInProgressError, 409),
    (PartialFailure, 207),
    (NotReadyError, 503),
    (CannotCreateFieldError, 403),
    (StoreError, 502),
)


def status_for(error: DomainError) -> int:
    for cls, status in STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def error_payload(error: DomainError) -> dict:
    payload = {"error": error.kind, "message": error.user_message, "detail": str(error)}
    if isinstance(error, PartialFailure):
        payload["failed_ids"] = error.failed_ids
        payload["succeeded_ids"] = error.succeeded_ids
    if isinstance(error, MonthIncompleteError):
        payload["missing_dates"] = [d.isoformat() for d in error.missing_dates]
    return payload


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        return jsonify(error_payload(error)), status_for(error)

    @app.errorhandler(Exception)
    def handle_unexpected(error: Exception):
        # HTTP errors (404 on unknown routes, 405, ...) keep their own response.
        code = getattr(error, "code", None)
        if isinstance(code, int):
            return jsonify({"error": "http_error", "message": str(error)}), code
        logger.exception("unhandled error")
        return jsonify({"error": "server_error", "message": "Unexpected server error. Please retry."}), 500
