"""API Gateway (REST proxy) request parsing and response shaping.

Handlers stay thin: they pick the service call, and ``handle_request`` does
identity resolution, error translation and JSON encoding.
"""

import asyncio
import base64
import binascii
import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from core.auth.interface import bearer_token, get_auth_provider, resolve_requester
from core.errors import ErrorCode, PlanItError, ValidationError
from core.models.identity import RequestContext

logger = logging.getLogger(__name__)

Operation = Callable[[RequestContext], tuple[int, dict[str, Any]]]


def _headers(event: dict[str, Any]) -> dict[str, str]:
    return {k.lower(): v for k, v in (event.get("headers") or {}).items()}


def resolve_context(event: dict[str, Any]) -> RequestContext:
    headers = _headers(event)
    identity = (event.get("requestContext") or {}).get("identity") or {}
    token = bearer_token(headers.get("authorization"))
    # AuthProvider is async; Lambda handlers are sync, so bridge with asyncio.run().
    requester = asyncio.run(resolve_requester(token, get_auth_provider))
    return RequestContext(
        requester=requester,
        source_ip=identity.get("sourceIp"),
        source_agent=headers.get("user-agent") or identity.get("userAgent"),
    )


def query_params(event: dict[str, Any]) -> dict[str, str]:
    return dict(event.get("queryStringParameters") or {})


def path_param(event: dict[str, Any], name: str) -> str | None:
    return (event.get("pathParameters") or {}).get(name)


def json_body(event: dict[str, Any]) -> dict[str, Any]:
    raw = event.get("body")
    if not raw:
        return {}
    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw, validate=True).decode("utf-8")
        body = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError(f"Request body is not valid JSON: {e}", code=ErrorCode.INVALID_REQUEST) from e
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object", code=ErrorCode.INVALID_REQUEST)
    return body


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def json_response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body, default=str),
    }


def success_response(status_code: int, payload: dict[str, Any]) -> dict[str, Any]:
    return json_response(status_code, {"success": True, **payload, "timestamp": _now()})


def error_response(error: PlanItError) -> dict[str, Any]:
    body: dict[str, Any] = {
        "success": False,
        "error": error.code.value,
        "message": error.user_message,
    }
    # Internal detail is only shown for client errors.
    if error.status_code < 500:
        body["details"] = error.message
    body["timestamp"] = _now()
    return json_response(error.status_code, body)


def handle_request(event: dict[str, Any], operation: Operation, name: str) -> dict[str, Any]:
    try:
        context = resolve_context(event)
        status_code, payload = operation(context)
        return success_response(status_code, payload)
    except PlanItError as e:
        if e.status_code >= 500:
            logger.error("%s failed [%s]: %s", name, e.code.value, e.message)
        else:
            logger.warning("%s rejected [%s]: %s", name, e.code.value, e.message)
        return error_response(e)
    except Exception:
        logger.exception("Unhandled error in %s", name)
        return error_response(PlanItError(f"Unhandled error in {name}"))
