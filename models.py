from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr

# OAuth Models
class ExchangeRequest(BaseModel):
    """Authorization code exchange request sent by a browser client"""
    model_config = ConfigDict(frozen=True)

    code: str = Field(..., min_length=1, description="Authorization code issued by GitHub")
    redirect_uri: Optional[str] = Field(None, description="Redirect URI used during authorization")

    @property
    def code_prefix(self) -> str:
        """Truncated code, safe to write to logs"""
        return f"{self.code[:4]}..."

class Credentials(BaseModel):
    """OAuth client credentials held server-side on behalf of the browser client"""
    model_config = ConfigDict(frozen=True)

    client_id: str = Field(..., min_length=1)
    client_secret: SecretStr

    def as_form(self) -> Dict[str, str]:
        return {
            "client_id": self.client_id,
            "client_secret": self.client_secret.get_secret_value(),
        }

# Token exchange results
class FailureKind(str, Enum):
    TRANSPORT_ERROR = "transport_error"
    STATUS_ERROR = "status_error"
    PAYLOAD_ERROR = "payload_error"

class TokenSuccess(BaseModel):
    """Token payload returned by GitHub, relayed unmodified"""
    model_config = ConfigDict(frozen=True)

    payload: Any

class TokenFailure(BaseModel):
    """
    Failed exchange. ``status`` is set for upstream status errors,
    ``payload`` for error objects GitHub returned with a success status.
    """
    model_config = ConfigDict(frozen=True)

    kind: FailureKind
    detail: str
    status: Optional[int] = None
    payload: Optional[Dict[str, Any]] = None

TokenResult = Union[TokenSuccess, TokenFailure]

# Response Models
class ErrorResponse(BaseModel):
    """Structured error body returned to callers"""
    error: str
    status: Optional[int] = None
    details: Optional[str] = None

class HealthResponse(BaseModel):
    status: str = "healthy"
