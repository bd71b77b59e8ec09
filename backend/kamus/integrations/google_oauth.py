from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

import httpx

from ..config import settings

AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
SCOPES = "openid email profile"
HTTP_TIMEOUT = 10.0


class OAuthError(Exception):
    pass


class GoogleOAuth:
    """Authorization-code flow against Google, reduced to what login needs: the email."""

    name = "google"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.client_id = client_id or settings.google_client_id
        self.client_secret = client_secret or settings.google_client_secret
        self.redirect_base_url = redirect_base_url or settings.oauth_redirect_base_url
        self._transport = transport

    @property
    def callback_url(self) -> str:
        return f"{self.redirect_base_url.rstrip('/')}/auth/{self.name}/callback"

    def authorization_url(self, state: str) -> str:
        if not self.client_id:
            raise OAuthError("GOOGLE_CLIENT_ID not set in .env")
        query = urlencode(
            {
                "client_id": self.client_id,
                "redirect_uri": self.callback_url,
                "response_type": "code",
                "scope": SCOPES,
                "state": state,
            }
        )
        return f"{AUTHORIZE_URL}?{query}"

    async def fetch_email(self, code: str) -> str:
        """Exchange an authorization code and return the account's verified email."""
        async with httpx.AsyncClient(transport=self._transport, timeout=HTTP_TIMEOUT) as client:
            try:
                token_resp = await client.post(
                    TOKEN_URL,
                    data={
                        "code": code,
                        "client_id": self.client_id,
                        "client_secret": self.client_secret,
                        "redirect_uri": self.callback_url,
                        "grant_type": "authorization_code",
                    },
                )
                token_resp.raise_for_status()
                access_token = token_resp.json().get("access_token")
                if not access_token:
                    raise OAuthError("token response without access_token")

                info_resp = await client.get(
                    USERINFO_URL,
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                info_resp.raise_for_status()
                info = info_resp.json()
            except (httpx.HTTPError, ValueError) as exc:
                raise OAuthError(f"{type(exc).__name__}: {exc}") from exc

        email = info.get("email")
        if not email or info.get("email_verified") is False:
            raise OAuthError("provider did not return a verified email")
        return email


PROVIDERS = {GoogleOAuth.name: GoogleOAuth}


def get_provider(provider: str) -> Optional[GoogleOAuth]:
    factory = PROVIDERS.get(provider)
    return factory() if factory else None
