"""
Flask API Routes.

Defines all HTTP endpoints for the landing site backend.
"""

import hmac
from typing import Any, Dict, Tuple

from flask import Blueprint, request
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException

from icia_landing import __version__
from icia_landing.api.rate_limiting import rate_limit
from icia_landing.api.validation import ContactRequest, is_honeypot_filled
from icia_landing.core.exceptions import (
    ConfigurationError,
    ExternalServiceError,
    RateLimitExceededError,
    UnauthorizedError,
)
from icia_landing.infrastructure.logging import get_logger
from icia_landing.services.container import get_services


logger = get_logger(__name__)


api_bp = Blueprint("api", __name__)


NO_STORE = {"Cache-Control": "no-store"}

CONTACT_BAD_REQUEST = "Некорректные данные"
CONTACT_SEND_FAILED = "Ошибка отправки. Попробуйте позже."
RATE_LIMITED = "Слишком много запросов. Попробуйте позже."


def _error_response(message: str, status_code: int) -> Tuple[Dict[str, Any], int]:
    """Create standardized error response."""
    return {"error": message}, status_code


def _require_bearer_token(expected: str) -> None:
    """
    Check the Authorization header against a configured token.

    Raises:
        UnauthorizedError: If no token is configured, the header is
            missing, or it does not match.
    """
    header = request.headers.get("Authorization", "").encode()
    if not expected or not hmac.compare_digest(header, f"Bearer {expected}".encode()):
        raise UnauthorizedError()


# ============================================================================
# Health Check
# ============================================================================

@api_bp.route("/health", methods=["GET"])
def health_check() -> Tuple[Dict[str, Any], int]:
    """
    Health check endpoint for the hosting platform probes.

    Returns:
        Health status response.
    """
    return {
        "status": "healthy",
        "service": "icia-landing",
        "version": __version__,
    }, 200


@api_bp.route("/", methods=["GET"])
def root() -> Tuple[Dict[str, Any], int]:
    """Root endpoint, same as health."""
    return health_check()


# ============================================================================
# Contact Form
# ============================================================================

@api_bp.route("/api/contact", methods=["POST"])
@rate_limit
def submit_contact() -> Tuple[Dict[str, Any], int]:
    """
    Relay a contact form inquiry by email.

    Request Body:
        name (str): Submitter name.
        email (str): Submitter email, used as Reply-To.
        role (str, optional): contractor, specialist or operator.
        message (str): Inquiry text.
        company (str, optional): Hidden honeypot field.

    Returns:
        ``{"ok": true}`` or ``{"error": ...}``.
    """
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        return _error_response(CONTACT_BAD_REQUEST, 400)

    if is_honeypot_filled(data):
        logger.info("Honeypot field filled, discarding submission")
        return {"ok": True}, 200

    services = get_services()

    try:
        validated = ContactRequest.model_validate(
            data,
            context={"max_message_length": services.settings.contact.max_message_length},
        )
    except PydanticValidationError as e:
        return _error_response(str(e.errors()[0]["msg"]), 400)

    try:
        services.contact.submit(validated.to_inquiry())
    except ConfigurationError as e:
        logger.error(
            f"Contact form misconfigured: {e}",
            extra={"extra_fields": {"config_name": e.config_name}}
        )
        return _error_response(CONTACT_SEND_FAILED, 500)
    except ExternalServiceError as e:
        logger.error(
            f"Contact email dispatch failed: {e}",
            extra={"extra_fields": {
                "error_type": type(e).__name__,
                "status_code": e.status_code,
            }}
        )
        return _error_response(CONTACT_SEND_FAILED, 500)

    return {"ok": True}, 200


# ============================================================================
# Geography Endpoints
# ============================================================================

@api_bp.route("/api/geography/markers", methods=["GET"])
def geography_markers() -> Tuple[Dict[str, Any], int, Dict[str, str]]:
    """
    Region statistics for the landing page map.

    Always 200: failing sources fall through to a static default.

    Returns:
        ``{"regions": [...], "source": "upstream"|"mongo"|"fallback"}``.
    """
    result = get_services().regions.resolve()
    return result.to_dict(), 200, NO_STORE


@api_bp.route("/api/public/geography/regions", methods=["GET"])
def public_geography_regions() -> Tuple[Dict[str, Any], int, Dict[str, str]]:
    """
    Raw per-region user counts from the database.

    Requires ``Authorization: Bearer <token>``.

    Returns:
        ``{"regions": [{"regionCode", "count"}]}``.
    """
    services = get_services()
    _require_bearer_token(services.settings.public_api.token)

    try:
        rows = services.regions.count_rows()
    except (ConfigurationError, ExternalServiceError) as e:
        logger.error(
            f"Public regions query failed: {e}",
            extra={"extra_fields": {"error_type": type(e).__name__}}
        )
        return _error_response("Internal Server Error", 500)

    return {"regions": rows}, 200, NO_STORE


# ============================================================================
# Error Handlers
# ============================================================================

@api_bp.errorhandler(RateLimitExceededError)
def handle_rate_limit(error: RateLimitExceededError):
    """Handle rate limit rejections (429)."""
    logger.warning(
        "Rate limit exceeded",
        extra={"extra_fields": {
            "client_id": error.client_id,
            "retry_after": error.retry_after,
        }}
    )
    body, status = _error_response(RATE_LIMITED, 429)
    return body, status, {"Retry-After": str(error.retry_after)}


@api_bp.errorhandler(UnauthorizedError)
def handle_unauthorized(error: UnauthorizedError) -> Tuple[Dict[str, Any], int]:
    """Handle missing or wrong bearer tokens (401)."""
    logger.warning(
        "Unauthorized request",
        extra={"extra_fields": {"path": request.path}}
    )
    return _error_response(error.message, 401)


@api_bp.errorhandler(Exception)
def handle_unexpected_error(error: Exception):
    """Handle unexpected errors (500)."""
    if isinstance(error, HTTPException):
        return error
    logger.exception(
        f"Unexpected error: {error}",
        extra={"extra_fields": {"error_type": type(error).__name__}}
    )
    return _error_response("Internal Server Error", 500)
