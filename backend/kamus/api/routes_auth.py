import logging
import secrets
from typing import Callable, Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ..config import settings
from ..core.database import get_db
from ..core.errors import NotFound, PersistenceError
from ..core.identity import issue_session_token, upsert_user_by_email
from ..integrations.google_oauth import GoogleOAuth, OAuthError, get_provider

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

STATE_COOKIE = "oauth_state"
STATE_MAX_AGE = 10 * 60


def provider_factory() -> Callable[[str], Optional[GoogleOAuth]]:
    return get_provider


def _home() -> RedirectResponse:
    return RedirectResponse("/", status_code=status.HTTP_302_FOUND)


def _provider(name: str, factory) -> GoogleOAuth:
    provider = factory(name)
    if provider is None:
        raise NotFound(f"Unknown provider {name}")
    return provider


def set_session_cookie(response: RedirectResponse, user_id: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        issue_session_token(user_id),
        max_age=settings.session_max_age_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
        path="/",
    )


@router.get("/auth/{provider}")
def auth_start_get(provider: str):
    return _home()


@router.post("/auth/{provider}")
def auth_start(provider: str, factory=Depends(provider_factory)):
    oauth = _provider(provider, factory)
    state = secrets.token_urlsafe(24)
    try:
        url = oauth.authorization_url(state)
    except OAuthError as exc:
        logger.error("Cannot start %s login: %s", provider, exc)
        return _home()

    response = RedirectResponse(url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        STATE_COOKIE, state, max_age=STATE_MAX_AGE, httponly=True, samesite="lax"
    )
    return response


@router.get("/auth/{provider}/callback")
async def auth_callback(
    provider: str,
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    factory=Depends(provider_factory),
    db: Session = Depends(get_db),
):
    oauth = _provider(provider, factory)

    expected_state = request.cookies.get(STATE_COOKIE)
    if not code or not state or state != expected_state:
        logger.warning("Rejected %s callback with missing code or mismatched state", provider)
        return _home()

    try:
        email = await oauth.fetch_email(code)
        user = await run_in_threadpool(upsert_user_by_email, db, email)
    except OAuthError as exc:
        logger.warning("Login with %s failed: %s", provider, exc)
        return _home()
    except PersistenceError:
        return _home()

    response = _home()
    set_session_cookie(response, user.id)
    response.delete_cookie(STATE_COOKIE)
    return response


@router.post("/logout")
def logout():
    response = _home()
    response.delete_cookie(settings.session_cookie_name, path="/")
    return response
