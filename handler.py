import logging
from typing import Any

from fastapi.responses import JSONResponse

from github_client import TokenExchanger
from models import ErrorResponse, ExchangeRequest, FailureKind, TokenFailure, TokenResult

logger = logging.getLogger(__name__)

MISSING_CODE = ErrorResponse(error="Missing code parameter")

def _error_response(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))

def parse_exchange_request(body: Any):
    """Build an ExchangeRequest from a decoded JSON body, or None if code is missing"""
    if not isinstance(body, dict):
        return None
    code = body.get("code")
    if not isinstance(code, str) or not code:
        return None
    redirect_uri = body.get("redirect_uri")
    if not isinstance(redirect_uri, str):
        redirect_uri = None
    return ExchangeRequest(code=code, redirect_uri=redirect_uri)

def result_to_response(result: TokenResult) -> JSONResponse:
    """Map an exchange result onto the response returned to the browser client"""
    if not isinstance(result, TokenFailure):
        logger.info("Token exchange completed successfully")
        return JSONResponse(status_code=200, content=result.payload)

    if result.kind is FailureKind.PAYLOAD_ERROR:
        return JSONResponse(status_code=400, content=result.payload)

    if result.kind is FailureKind.STATUS_ERROR:
        return _error_response(
            result.status,
            ErrorResponse(error="GitHub API error", status=result.status, details=result.detail),
        )

    if result.kind is FailureKind.TRANSPORT_ERROR:
        return _error_response(
            500,
            ErrorResponse(error="Failed to exchange code for token", details=result.detail),
        )

    raise ValueError(f"Unhandled token exchange failure: {result.kind}")

class TokenExchangeHandler:
    """Relays an authorization code to GitHub and maps the outcome to a response"""

    def __init__(self, exchanger: TokenExchanger):
        self.exchanger = exchanger

    async def handle(self, body: Any) -> JSONResponse:
        exchange_request = parse_exchange_request(body)
        if exchange_request is None:
            return _error_response(400, MISSING_CODE)

        logger.info(f"Processing OAuth token exchange for code: {exchange_request.code_prefix}")
        logger.info(f"Redirect URI: {exchange_request.redirect_uri}")

        result = await self.exchanger.exchange(exchange_request.code, exchange_request.redirect_uri)
        return result_to_response(result)
