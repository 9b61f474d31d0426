import os
from typing import FrozenSet, List

from dotenv import load_dotenv

from models import Credentials

DEFAULT_TOKEN_URL = "https://github.com/login/oauth/access_token"
WILDCARD_ORIGIN = "*"

class Config:
    """Configuration for the OAuth token relay, read once from the environment"""

    def __init__(self):
        # Values already in the environment take precedence over .env
        load_dotenv()

        # Server configuration
        self.host = os.getenv("HOST", "0.0.0.0")
        self.port = self._parse_int("PORT", 3000)
        self.environment = os.getenv("ENVIRONMENT", "production")

        # OAuth client configuration
        self.credentials = self._load_credentials()
        self.token_url = os.getenv("GITHUB_TOKEN_URL", DEFAULT_TOKEN_URL)
        self.timeout = self._parse_float("OAUTH_TIMEOUT", 10.0)

        # Security configuration
        self.allowed_origins = self._parse_allowed_origins()

        # Logging configuration
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.log_format = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        self._validate_config()
        self._frozen = True

    def __setattr__(self, name, value):
        if getattr(self, "_frozen", False):
            raise AttributeError(f"Config is read-only, cannot set '{name}'")
        super().__setattr__(name, value)

    def _load_credentials(self) -> Credentials:
        """Load the OAuth client id and secret, both are required"""
        client_id = os.getenv("OAUTH_CLIENT_ID")
        client_secret = os.getenv("OAUTH_CLIENT_SECRET")
        if not client_id or not client_secret:
            raise ValueError(
                "Missing required environment variables: OAUTH_CLIENT_ID and OAUTH_CLIENT_SECRET must be set"
            )
        return Credentials(client_id=client_id, client_secret=client_secret)

    def _parse_int(self, name: str, default: int) -> int:
        raw = os.getenv(name)
        if not raw:
            return default
        try:
            return int(raw)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got '{raw}'")

    def _parse_float(self, name: str, default: float) -> float:
        raw = os.getenv(name)
        if not raw:
            return default
        try:
            return float(raw)
        except ValueError:
            raise ValueError(f"{name} must be a number, got '{raw}'")

    def _parse_allowed_origins(self) -> FrozenSet[str]:
        """Parse allowed origins from environment variable"""
        origins_str = os.getenv("ALLOWED_ORIGINS", "")
        return frozenset(origin.strip() for origin in origins_str.split(",") if origin.strip())

    def _validate_config(self):
        """Validate configuration values"""
        if not self.allowed_origins:
            raise ValueError("ALLOWED_ORIGINS must be set to a comma-separated list of origins")

        if self.timeout <= 0:
            raise ValueError("OAUTH_TIMEOUT must be greater than 0 seconds")

        if not (0 < self.port < 65536):
            raise ValueError("PORT must be between 1 and 65535")

    @property
    def is_development(self) -> bool:
        """Check if running in development mode"""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode"""
        return self.environment == "production"

    @property
    def allows_any_origin(self) -> bool:
        return WILDCARD_ORIGIN in self.allowed_origins

    def cors_origins(self) -> List[str]:
        """Allow-list in the shape CORSMiddleware expects"""
        if self.allows_any_origin:
            return [WILDCARD_ORIGIN]
        return sorted(self.allowed_origins)
