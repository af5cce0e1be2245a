"""Data contracts for OpenTok REST API tokens."""
from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# The REST API rejects tokens whose expiry is more than five minutes after issue.
MAX_TOKEN_TTL_SECONDS = 300


class IssueType(str, enum.Enum):
    # Most REST API calls use project tokens.
    PROJECT = "project"
    # Account Management methods use account tokens.
    ACCOUNT = "account"


class Claims(BaseModel):
    """Claims carried in the JWT payload, keyed by their wire names."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    issuer: str = Field(..., alias="iss", description="API key of the project or account")
    issued_at: int = Field(..., alias="iat", description="Unix seconds, UTC")
    expires_at: int = Field(..., alias="exp", description="Unix seconds, UTC")
    token_id: str = Field(..., alias="jti", min_length=1, description="Random unique token id")
    issue_type: IssueType = Field(..., alias="ist")

    @model_validator(mode="after")
    def _check_window(self) -> "Claims":
        window = self.expires_at - self.issued_at
        if window <= 0 or window > MAX_TOKEN_TTL_SECONDS:
            raise ValueError(
                f"Token lifetime must be between 1 and {MAX_TOKEN_TTL_SECONDS} seconds, got {window}"
            )
        return self

    @property
    def ttl(self) -> int:
        return self.expires_at - self.issued_at

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON payload with wire field names."""

        return self.model_dump(by_alias=True, mode="json")
