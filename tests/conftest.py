"""Shared fixtures for the relay test suite.

The app is driven in-process through httpx.ASGITransport. Upstream GitHub is
either replaced by a FakeExchanger or served by httpx.MockTransport behind the
real GitHubTokenExchanger.
"""

import asyncio
from typing import Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config import Config
from github_client import TokenExchanger
from main import create_app
from models import TokenResult, TokenSuccess

ALLOWED_ORIGIN = "https://app.example.com"
OTHER_ALLOWED_ORIGIN = "https://admin.example.com"
BLOCKED_ORIGIN = "https://evil.example.net"

class FakeExchanger(TokenExchanger):
    """Records calls and returns canned results keyed by code"""

    def __init__(self, results: Optional[Dict[str, TokenResult]] = None):
        self.results = results or {}
        self.calls: List[Tuple[str, Optional[str]]] = []
        self.closed = False

    async def exchange(self, code: str, redirect_uri: Optional[str] = None) -> TokenResult:
        self.calls.append((code, redirect_uri))
        await asyncio.sleep(0)
        if code in self.results:
            return self.results[code]
        return TokenSuccess(payload={"access_token": f"token-for-{code}", "token_type": "bearer"})

    async def close(self):
        self.closed = True

@pytest.fixture(autouse=True)
def relay_env(monkeypatch):
    """Minimal valid environment, isolated from any local .env file"""
    monkeypatch.setattr("config.load_dotenv", lambda *args, **kwargs: False)
    monkeypatch.setattr("dev.load_dotenv", lambda *args, **kwargs: False)
    for var in ("HOST", "PORT", "ENVIRONMENT", "GITHUB_TOKEN_URL", "OAUTH_TIMEOUT", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("OAUTH_CLIENT_ID", "test-client-id")
    monkeypatch.setenv("OAUTH_CLIENT_SECRET", "test-client-secret")
    monkeypatch.setenv("ALLOWED_ORIGINS", f"{ALLOWED_ORIGIN},{OTHER_ALLOWED_ORIGIN}")

@pytest.fixture
def config() -> Config:
    return Config()

@pytest.fixture
def exchanger() -> FakeExchanger:
    return FakeExchanger()

@pytest_asyncio.fixture
async def client(config, exchanger):
    """Async HTTP client wired to an app using the fake exchanger"""
    app = create_app(config, exchanger=exchanger)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
