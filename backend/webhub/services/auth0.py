# Client for the Auth0 OpenID Connect endpoints
from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx
import jwt

from ..config import Auth0Settings, get_auth0_settings

logger = logging.getLogger(__name__)

ID_TOKEN_ALGORITHMS = ["RS256"]
DEFAULT_SCOPES = ("openid", "profile")


class AuthenticationError(Exception):
    """Raised when the identity provider round trip fails."""


class TokenExchangeError(AuthenticationError):
    pass


class IdTokenError(AuthenticationError):
    pass


class Authenticator:
    def __init__(self, settings: Auth0Settings, *, timeout: float = 15) -> None:
        self.settings = settings
        self.timeout = timeout
        self.base_url = f"https://{settings.domain}"
        self.issuer = f"{self.base_url}/"
        self._jwks_client = jwt.PyJWKClient(f"{self.base_url}/.well-known/jwks.json")

    def authorize_url(self, state: str) -> str:
        params = {
            "response_type": "code",
            "client_id": self.settings.client_id,
            "redirect_uri": self.settings.callback_url,
            "scope": " ".join(DEFAULT_SCOPES),
            "state": state,
        }
        return f"{self.base_url}/authorize?{urlencode(params)}"

    def logout_url(self, return_to: str) -> str:
        params = {"returnTo": return_to, "client_id": self.settings.client_id}
        return f"{self.base_url}/v2/logout?{urlencode(params)}"

    async def exchange(self, code: str) -> dict[str, Any]:
        """Trade an authorization code for the token response."""
        data = {
            "grant_type": "authorization_code",
            "client_id": self.settings.client_id,
            "client_secret": self.settings.client_secret,
            "code": code,
            "redirect_uri": self.settings.callback_url,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                res = await client.post(f"{self.base_url}/oauth/token", data=data)
                res.raise_for_status()
                token = res.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Authorization code exchange failed: %s", exc)
            raise TokenExchangeError("authorization code exchange failed") from exc

        if not isinstance(token, dict) or not token.get("id_token"):
            raise TokenExchangeError("token response has no id_token")
        return token

    def verify_id_token(self, id_token: str) -> dict[str, Any]:
        """Verify signature, audience and issuer; return the claims."""
        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(id_token)
            return jwt.decode(
                id_token,
                signing_key.key,
                algorithms=ID_TOKEN_ALGORITHMS,
                audience=self.settings.client_id,
                issuer=self.issuer,
            )
        except jwt.PyJWTError as exc:
            logger.warning("ID token verification failed: %s", exc)
            raise IdTokenError("invalid id token") from exc


_authenticator: Authenticator | None = None


def get_authenticator() -> Authenticator:
    """FastAPI dependency returning the process-wide authenticator."""
    global _authenticator
    if _authenticator is None:
        _authenticator = Authenticator(get_auth0_settings())
    return _authenticator
