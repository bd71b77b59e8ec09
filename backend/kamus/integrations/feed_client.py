"""
HTTP client for the Kamus API.

Keeps the definitions it has loaded as "cards" and refreshes a single card
when something publishes its id on the client's InvalidationChannel, e.g.
after a reaction toggle.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Optional

import httpx

from ..config import settings

Card = Dict[str, Any]
InvalidationHandler = Callable[[str], None]


class FeedClientError(Exception):
    pass


class LoginRequired(FeedClientError):
    pass


class InvalidationChannel:
    """Observers notified with the id of a definition whose data went stale."""

    def __init__(self) -> None:
        self._handlers: List[InvalidationHandler] = []

    def subscribe(self, handler: InvalidationHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def publish(self, definition_id: str) -> None:
        for handler in list(self._handlers):
            handler(definition_id)


class FeedClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session_token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        # A caller-supplied client stays open after close(); only our own is released.
        self._owns_client = client is None
        self._client = client or httpx.Client(base_url=base_url or settings.api_base_url)
        if session_token:
            self._client.cookies.set(settings.session_cookie_name, session_token)

        self.cards: Dict[str, Card] = {}
        self.invalidations = InvalidationChannel()
        self.invalidations.subscribe(self.refresh)

    # ---------- Transport ----------

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        resp = self._client.request(method, path, follow_redirects=False, **kwargs)
        if resp.is_redirect:
            raise LoginRequired(f"{method} {path} requires a logged-in session")
        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = {"message": resp.text}
            raise FeedClientError(f"{method} {path} failed ({resp.status_code}): {body}")
        return resp

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    # ---------- Reads ----------

    def fetch_page(self, path: str = "/", cursor: Optional[str] = None) -> Dict[str, Any]:
        params = {"cursor": cursor} if cursor else None
        page = self._send("GET", path, params=params).json()
        for card in page["data"]:
            self.cards[card["id"]] = card
        return page

    def iter_definitions(self, path: str = "/") -> Iterator[Card]:
        """Walk every page of a list endpoint ("/", "/my-definitions", ...)."""
        cursor: Optional[str] = None
        while True:
            page = self.fetch_page(path, cursor)
            yield from page["data"]

            cursor = page.get("endCursor")
            if not page.get("hasNextPage") or not cursor:
                return

    def refresh(self, definition_id: str) -> Card:
        card = self._send("GET", f"/definitions/{definition_id}").json()
        self.cards[definition_id] = card
        return card

    # ---------- Writes ----------

    def toggle_reaction(self, definition_id: str, reaction_type: str) -> str:
        """
        Like/dislike button semantics: pressing the type the user already
        chose retracts it, anything else sets it.
        """
        card = self.cards.get(definition_id) or self.refresh(definition_id)
        own = card.get("currentUserReaction")
        subaction = "delete" if own and own.get("type") == reaction_type else "upsert"

        resp = self._send(
            "POST",
            "/reactions",
            json={"id": definition_id, "type": reaction_type, "subaction": subaction},
        )
        self.invalidations.publish(definition_id)
        return resp.json()["message"]

    def submit_definition(self, word: str, definition: str, example: str) -> Dict[str, Any]:
        return self._send(
            "POST",
            "/create",
            json={"word": word, "definition": definition, "example": example},
        ).json()
