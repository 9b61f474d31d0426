import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx

from models import Credentials, FailureKind, TokenFailure, TokenResult, TokenSuccess

logger = logging.getLogger(__name__)

class TokenExchanger(ABC):
    """Exchanges an authorization code for an access token with the identity provider"""

    @abstractmethod
    async def exchange(self, code: str, redirect_uri: Optional[str] = None) -> TokenResult:
        raise NotImplementedError

    async def close(self):
        """Release any resources held by the exchanger"""

class GitHubTokenExchanger(TokenExchanger):
    """
    Token exchange against GitHub's OAuth endpoint.

    Exactly one request is made per exchange. Transport failures, non-2xx
    responses and error payloads are returned as ``TokenFailure`` values
    instead of being raised.
    """

    def __init__(
        self,
        credentials: Credentials,
        token_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.credentials = credentials
        self.token_url = token_url
        self.client = httpx.AsyncClient(
            headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": "GitHub-OAuth-Relay/1.0.0"
            },
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    async def close(self):
        """Close the HTTP client"""
        await self.client.aclose()

    def _build_payload(self, code: str, redirect_uri: Optional[str]) -> Dict[str, Any]:
        payload = self.credentials.as_form()
        payload["code"] = code
        if redirect_uri is not None:
            payload["redirect_uri"] = redirect_uri
        return payload

    async def exchange(self, code: str, redirect_uri: Optional[str] = None) -> TokenResult:
        try:
            response = await self.client.post(self.token_url, json=self._build_payload(code, redirect_uri))
        except httpx.HTTPError as e:
            detail = str(e) or e.__class__.__name__
            logger.error(f"OAuth error: {detail}")
            return TokenFailure(kind=FailureKind.TRANSPORT_ERROR, detail=detail)

        if not response.is_success:
            logger.error(f"GitHub API error: {response.status_code} {response.text}")
            return TokenFailure(
                kind=FailureKind.STATUS_ERROR,
                status=response.status_code,
                detail=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"OAuth error: unreadable token response: {e}")
            return TokenFailure(kind=FailureKind.TRANSPORT_ERROR, detail=str(e))

        if isinstance(data, dict) and data.get("error"):
            logger.error(f"GitHub API returned error: {data['error']}")
            return TokenFailure(kind=FailureKind.PAYLOAD_ERROR, detail=str(data["error"]), payload=data)

        return TokenSuccess(payload=data)
