"""Credential-hiding proxy in front of the model messages API."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Dict

import httpx
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import Response
from starlette.responses import JSONResponse

from .config import Settings, get_settings
from .telemetry import emit_event

router = APIRouter(prefix="/api", tags=["proxy"])
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,OPTIONS,PATCH,DELETE,POST,PUT",
    "Access-Control-Allow-Headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, Content-MD5, "
        "Content-Type, Date, X-Api-Version"
    ),
}

MISSING_KEY_MESSAGE = (
    "API key required. Either set ANTHROPIC_API_KEY environment variable or provide apiKey in request."
)


async def get_upstream_client(settings: Settings = Depends(get_settings)) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=settings.request_timeout_seconds) as client:
        yield client


def _error(status_code: int, error_type: str, message: str) -> JSONResponse:
    return JSONResponse(
        {"error": {"type": error_type, "message": message}},
        status_code=status_code,
        headers=CORS_HEADERS,
    )


async def _read_payload(request: Request) -> Dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


@router.options("/claude")
def preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


@router.api_route("/claude", methods=["GET", "PUT", "PATCH", "DELETE"])
def method_not_allowed() -> JSONResponse:
    return JSONResponse(
        {"error": "Method not allowed"},
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        headers=CORS_HEADERS,
    )


@router.post("/claude")
async def proxy_messages(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_upstream_client),
) -> JSONResponse:
    payload = await _read_payload(request)

    api_key = settings.anthropic_api_key or payload.get("apiKey")
    if not api_key:
        logger.error("No API key provided")
        return _error(status.HTTP_400_BAD_REQUEST, "authentication_error", MISSING_KEY_MESSAGE)

    messages = payload.get("messages")
    if not isinstance(messages, list) or not messages:
        return _error(status.HTTP_400_BAD_REQUEST, "invalid_request", "Messages array is required")

    upstream_body = {
        "model": payload.get("model") or settings.default_model,
        "max_tokens": payload.get("max_tokens") or settings.default_max_tokens,
        "messages": messages,
    }
    headers = {
        "content-type": "application/json",
        "x-api-key": str(api_key),
        "anthropic-version": settings.anthropic_version,
    }

    try:
        response = await client.post(settings.upstream_url, json=upstream_body, headers=headers)
    except httpx.HTTPError as exc:
        logger.warning("Proxy error contacting upstream: %s", exc)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "server_error", str(exc) or "Internal server error")

    try:
        data = response.json()
    except ValueError:
        logger.warning("Upstream returned a non-JSON body (status %s)", response.status_code)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "server_error",
            "Upstream returned a non-JSON response",
        )

    if response.is_error:
        logger.warning("Upstream API error %s: %s", response.status_code, data)
    emit_event(
        "proxy_request",
        status=response.status_code,
        model=upstream_body["model"],
        credential_source="environment" if settings.anthropic_api_key else "request",
    )
    return JSONResponse(data, status_code=response.status_code, headers=CORS_HEADERS)


__all__ = ["router", "get_upstream_client"]
