"""Bearer token validation and scope checks for API routes."""

import logging
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Sequence

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, Field

from graph_calendar.config import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


class InvalidTokenError(Exception):
    """The bearer token could not be validated."""


class AuthenticatedUser(BaseModel):
    """Caller identity taken from a validated access token."""
    id: str
    name: Optional[str] = None
    scopes: List[str] = Field(default_factory=list)
    token: str

    @classmethod
    def from_claims(cls, claims: Dict[str, Any], token: str) -> "AuthenticatedUser":
        return cls(
            id=claims.get("oid") or claims.get("sub", ""),
            name=claims.get("name") or claims.get("preferred_username"),
            scopes=claims.get("scp", "").split(),
            token=token,
        )


class TokenValidator:
    """Validates Azure AD access tokens issued for this API."""

    def __init__(self, tenant_id: str, client_id: str, authority_host: str, jwks_client: Optional[Any] = None):
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.authority_host = authority_host.rstrip("/")
        self.audiences = [client_id, f"api://{client_id}"]
        self.issuers = [
            f"{self.authority_host}/{tenant_id}/v2.0",
            f"https://sts.windows.net/{tenant_id}/",
        ]
        self._jwks_client = jwks_client

    @property
    def jwks_client(self):
        if self._jwks_client is None:
            self._jwks_client = jwt.PyJWKClient(
                f"{self.authority_host}/{self.tenant_id}/discovery/v2.0/keys"
            )
        return self._jwks_client

    def validate(self, token: str) -> Dict[str, Any]:
        """
        Decode and verify an access token.

        Args:
            token: Raw JWT from the Authorization header

        Returns:
            Token claims

        Raises:
            InvalidTokenError: signature, expiry, audience or issuer check failed
        """
        try:
            signing_key = self.jwks_client.get_signing_key_from_jwt(token)
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.audiences,
                options={"require": ["exp", "aud", "iss"]},
            )
        except jwt.PyJWTError as e:
            raise InvalidTokenError(str(e)) from e

        if claims.get("iss") not in self.issuers:
            raise InvalidTokenError(f"Invalid issuer: {claims.get('iss')}")

        return claims


@lru_cache(maxsize=1)
def get_token_validator() -> TokenValidator:
    return TokenValidator(
        tenant_id=settings.AZURE_TENANT_ID,
        client_id=settings.AZURE_CLIENT_ID,
        authority_host=settings.AUTHORITY_HOST,
    )


async def get_current_user(
    request: Request,
    validator: TokenValidator = Depends(get_token_validator),
) -> AuthenticatedUser:
    """Authenticate the request from its bearer token - use as dependency"""
    credentials: Optional[HTTPAuthorizationCredentials] = await bearer_scheme(request)
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        # JWKS key lookup fetches over blocking HTTP on a cache miss
        claims = await run_in_threadpool(validator.validate, credentials.credentials)
    except InvalidTokenError as e:
        logger.warning("Rejected bearer token: %s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthenticatedUser.from_claims(claims, credentials.credentials)


def require_scopes(accepted_scopes: Sequence[str]) -> Callable:
    """
    Dependency factory that requires any one of the accepted scopes.

    Usage:
        @router.get("")
        async def get_calendar(
            user: AuthenticatedUser = Depends(require_scopes(["access_as_user"])),
        ):
    """
    accepted = list(accepted_scopes)

    async def check_scopes(
        user: AuthenticatedUser = Depends(get_current_user),
    ) -> AuthenticatedUser:
        if not any(scope in user.scopes for scope in accepted):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=(
                    f"The 'scope' or 'scp' claim does not contain scopes "
                    f"'{','.join(accepted)}' or was not found"
                ),
            )
        return user

    return check_scopes
