#!/usr/bin/env python3

import logging
import sys
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from config import Config
from github_client import GitHubTokenExchanger, TokenExchanger
from handler import TokenExchangeHandler
from models import HealthResponse
from origin import OriginGuardMiddleware, OriginPolicy

logger = logging.getLogger(__name__)

TOKEN_PATH = "/oauth/github/token"

def configure_logging(config: Config):
    logging.basicConfig(level=config.log_level.upper(), format=config.log_format)

def create_app(config: Config, exchanger: Optional[TokenExchanger] = None) -> FastAPI:
    """
    Build the relay application.

    ``exchanger`` defaults to the real GitHub client; tests pass a double
    so no network access is needed.
    """
    if exchanger is None:
        exchanger = GitHubTokenExchanger(config.credentials, config.token_url, timeout=config.timeout)
    token_handler = TokenExchangeHandler(exchanger)

    app = FastAPI(
        title="GitHub OAuth Relay",
        description="Exchanges GitHub OAuth authorization codes for access tokens on behalf of browser clients",
        version="1.0.0",
        docs_url="/docs" if config.is_development else None,
        redoc_url="/redoc" if config.is_development else None
    )

    # CORS headers for allowed browser origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins(),
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept"]
    )

    # Added after CORS so disallowed origins are rejected before preflight handling
    app.add_middleware(OriginGuardMiddleware, policy=OriginPolicy(config.allowed_origins))

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if config.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response

    @app.post(TOKEN_PATH)
    async def github_token(request: Request):
        """Exchange a GitHub authorization code for an access token"""
        try:
            body = await request.json()
        except ValueError:
            body = {}
        return await token_handler.handle(body)

    @app.options(TOKEN_PATH)
    async def github_token_options():
        return Response(status_code=204, headers={"Allow": "POST, OPTIONS"})

    @app.get("/health")
    async def health_check():
        """Liveness probe"""
        return HealthResponse().model_dump()

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"OAuth relay server running on port {config.port}")
        logger.info(f"Environment: {config.environment}")
        logger.info(f"Allowed origins: {', '.join(sorted(config.allowed_origins))}")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down OAuth relay server")
        await exchanger.close()

    return app

def build_app() -> FastAPI:
    """Application factory for ``uvicorn --factory``"""
    config = Config()
    configure_logging(config)
    return create_app(config)

def main():
    try:
        config = Config()
    except ValueError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    configure_logging(config)

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True
    )

if __name__ == "__main__":
    main()
