"""
Scryfall fuzzy card lookup.

Resolves a possibly misspelled card name to a single card via
/cards/named?fuzzy=. Not-found, transport errors and malformed payloads
all surface as LookupFailedError so callers handle one failure type.

API: https://scryfall.com/docs/api/cards/named
"""

import logging
from types import TracebackType

import httpx

from manamarket.config import settings
from manamarket.models.failure import FailureKind, KnownError
from manamarket.parsers.scryfall import CardMetadata, MalformedCardError, parse_card_metadata

logger = logging.getLogger(__name__)


class LookupFailedError(KnownError):
    """
    Exception raised when a card name can't be resolved.

    Recovered per row during catalog assembly; never fatal to a sync.
    """

    def __init__(self, card_name: str, reason: str):
        self.card_name = card_name
        self.reason = reason
        super().__init__(
            kind=FailureKind.LOOKUP_FAILED,
            message=f"Could not find card data for '{card_name}'.",
            detail=reason,
            suggestion="Check the card name spelling in the inventory file.",
            status_code=502,
        )


class ScryfallClient:
    """
    Async client for Scryfall's named-card endpoint.

    Usage:
        async with ScryfallClient() as scryfall:
            card = await scryfall.lookup("lightnig bolt")
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = (base_url or settings.scryfall_api_url).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={
                "User-Agent": settings.user_agent,
                "Accept": "application/json",
            },
            timeout=timeout if timeout is not None else settings.lookup_timeout_seconds,
            follow_redirects=True,
        )

    async def __aenter__(self) -> "ScryfallClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def lookup(self, card_name: str) -> CardMetadata:
        """
        Fetch the best fuzzy match for a card name.

        Args:
            card_name: Name as written in the inventory (case and minor typos tolerated)

        Returns:
            CardMetadata for the matched printing

        Raises:
            LookupFailedError: If the card isn't found or the request fails
        """
        url = f"{self.base_url}/cards/named"

        try:
            response = await self._client.get(url, params={"fuzzy": card_name})
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            reason = "not found" if status_code == 404 else f"HTTP {status_code}"
            raise LookupFailedError(card_name, reason) from e
        except httpx.RequestError as e:
            raise LookupFailedError(card_name, f"request failed: {e}") from e
        except ValueError as e:
            raise LookupFailedError(card_name, "response is not JSON") from e

        try:
            return parse_card_metadata(payload)
        except MalformedCardError as e:
            raise LookupFailedError(card_name, str(e)) from e
