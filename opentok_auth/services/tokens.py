"""JWT issuance for the OpenTok REST API.

Every REST call carries a short-lived HS256 token signed with the project (or
account) secret. Tokens are cheap to mint, so callers create a fresh one per
request instead of caching them.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable
from uuid import uuid4

import jwt

from ..core.errors import SigningError
from ..schemas.tokens import MAX_TOKEN_TTL_SECONDS, Claims, IssueType

logger = logging.getLogger(__name__)

SIGNING_ALGORITHM = "HS256"
TOKEN_TTL_SECONDS = MAX_TOKEN_TTL_SECONDS

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _random_token_id() -> str:
    return str(uuid4())


class TokenIssuer:
    """Sign OpenTok claims with the shared API secret."""

    __slots__ = ("_api_key", "_api_secret", "_clock", "_id_factory")

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        *,
        clock: Clock | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        self._api_key = api_key
        self._api_secret = api_secret
        self._clock = clock or _utc_now
        self._id_factory = id_factory or _random_token_id

    def __repr__(self) -> str:
        return f"TokenIssuer(api_key={self._api_key!r})"

    @property
    def api_key(self) -> str:
        return self._api_key

    def build_claims(self, issue_type: IssueType | str) -> Claims:
        """Assemble the claim set for a token issued now."""

        issued_at = int(self._clock().timestamp())
        return Claims(
            issuer=self._api_key,
            issued_at=issued_at,
            expires_at=issued_at + TOKEN_TTL_SECONDS,
            token_id=self._id_factory(),
            issue_type=IssueType(issue_type),
        )

    def issue_token(self, issue_type: IssueType | str) -> str:
        """Return a compact signed JWT for ``issue_type``.

        Raises:
            SigningError: PyJWT could not sign with the configured secret.
        """

        claims = self.build_claims(issue_type)
        try:
            token = jwt.encode(claims.to_payload(), self._api_secret, algorithm=SIGNING_ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError) as exc:
            logger.exception("Signing %s token for issuer %s failed", claims.issue_type.value, claims.issuer)
            raise SigningError(f"Unable to sign {claims.issue_type.value} token: {exc}") from exc

        logger.debug(
            "Issued %s token jti=%s iss=%s exp=%s",
            claims.issue_type.value,
            claims.token_id,
            claims.issuer,
            claims.expires_at,
        )
        return token


def decode_token(token: str, api_secret: str, *, verify_exp: bool = True) -> Claims:
    """Verify ``token`` against ``api_secret`` and return its claims.

    PyJWT exceptions (``InvalidSignatureError``, ``ExpiredSignatureError``,
    ``DecodeError``) propagate unchanged.
    """

    options: dict[str, Any] = {"require": ["iss", "iat", "exp", "jti"], "verify_exp": verify_exp}
    payload = jwt.decode(token, api_secret, algorithms=[SIGNING_ALGORITHM], options=options)
    return Claims.model_validate(payload)
