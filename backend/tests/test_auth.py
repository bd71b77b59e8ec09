import asyncio
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from kamus.api.routes_auth import STATE_COOKIE, provider_factory
from kamus.config import settings
from kamus.integrations.google_oauth import GoogleOAuth, OAuthError
from kamus.main import app
from kamus.models import RoleName, User


class FakeProvider:
    name = "google"

    def __init__(self, email="new@example.com", fail=False):
        self.email = email
        self.fail = fail
        self.codes = []

    def authorization_url(self, state):
        return f"https://accounts.example/auth?state={state}"

    async def fetch_email(self, code):
        self.codes.append(code)
        if self.fail:
            raise OAuthError("denied")
        return self.email


@pytest.fixture
def provider(client):
    fake = FakeProvider()
    app.dependency_overrides[provider_factory] = lambda: (
        lambda name: fake if name == fake.name else None
    )
    return fake


def _start_login(client):
    resp = client.post("/auth/google", follow_redirects=False)
    assert resp.status_code == 302
    state = parse_qs(urlparse(resp.headers["location"]).query)["state"][0]
    assert client.cookies.get(STATE_COOKIE) == state
    return state


def test_login_creates_member_and_sets_session(client, db, provider):
    state = _start_login(client)

    resp = client.get(
        "/auth/google/callback",
        params={"code": "abc", "state": state},
        follow_redirects=False,
    )

    assert resp.status_code == 302
    assert resp.headers["location"] == "/"
    assert client.cookies.get(settings.session_cookie_name)
    assert provider.codes == ["abc"]

    profile = client.get("/profile").json()
    assert profile["email"] == "new@example.com"
    assert profile["role"] == RoleName.MEMBER.value

    user = db.query(User).filter(User.email == "new@example.com").one()
    assert profile["username"] == user.username


def test_second_login_reuses_the_account(client, db, provider):
    for _ in range(2):
        state = _start_login(client)
        client.get("/auth/google/callback", params={"code": "abc", "state": state})

    assert db.query(User).filter(User.email == "new@example.com").count() == 1


def test_state_mismatch_is_rejected(client, provider):
    _start_login(client)

    resp = client.get(
        "/auth/google/callback",
        params={"code": "abc", "state": "forged"},
        follow_redirects=False,
    )

    assert resp.status_code == 302
    assert client.cookies.get(settings.session_cookie_name) is None
    assert provider.codes == []


def test_provider_failure_redirects_home(client, provider):
    provider.fail = True
    state = _start_login(client)

    resp = client.get(
        "/auth/google/callback",
        params={"code": "abc", "state": state},
        follow_redirects=False,
    )

    assert resp.status_code == 302
    assert client.cookies.get(settings.session_cookie_name) is None


def test_unknown_provider(client, provider):
    assert client.post("/auth/github", follow_redirects=False).status_code == 404


def test_logout_clears_session(client, make_user, login_as):
    login_as(make_user("u1"))

    resp = client.post("/logout", follow_redirects=False)

    assert resp.status_code == 302
    cookie = resp.headers["set-cookie"]
    assert cookie.startswith(f"{settings.session_cookie_name}=")
    assert "Max-Age=0" in cookie


def test_google_fetch_email():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        if request.url.host == "oauth2.googleapis.com":
            assert b"code=the-code" in request.content
            return httpx.Response(200, json={"access_token": "tok"})
        assert request.headers["Authorization"] == "Bearer tok"
        return httpx.Response(200, json={"email": "a@example.com", "email_verified": True})

    oauth = GoogleOAuth(
        client_id="id",
        client_secret="secret",
        redirect_base_url="http://localhost:8000/",
        transport=httpx.MockTransport(handler),
    )

    assert asyncio.run(oauth.fetch_email("the-code")) == "a@example.com"
    assert seen == ["/token", "/v1/userinfo"]
    assert oauth.callback_url == "http://localhost:8000/auth/google/callback"


def test_google_fetch_email_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": "invalid_grant"})

    oauth = GoogleOAuth(client_id="id", client_secret="secret", transport=httpx.MockTransport(handler))

    with pytest.raises(OAuthError):
        asyncio.run(oauth.fetch_email("bad"))


def test_authorization_url_requires_client_id(monkeypatch):
    monkeypatch.setattr(settings, "google_client_id", None)
    with pytest.raises(OAuthError):
        GoogleOAuth().authorization_url("state")

    url = GoogleOAuth(client_id="cid").authorization_url("xyz")
    query = parse_qs(urlparse(url).query)
    assert query["client_id"] == ["cid"]
    assert query["state"] == ["xyz"]
    assert query["response_type"] == ["code"]
