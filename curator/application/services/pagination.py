"""Paginated collection fetching.

Walks offset-paginated remote collections page by page. Pages are pulled lazily,
so memory stays bounded by the page size unless the caller chooses to buffer.
"""

from collections.abc import AsyncIterator
from typing import Any

from attrs import define, field, validators

from curator.application.services.transport import PlaylistTransport
from curator.config import get_logger, settings
from curator.domain.errors import RemoteCallFailure

logger = get_logger(__name__)


@define(frozen=True, slots=True)
class PageQuery:
    """Base query for a paginated collection: endpoint plus fixed parameters."""

    endpoint: str
    params: dict[str, Any] = field(factory=dict)

    @classmethod
    def playlist_tracks(cls, playlist_id: str) -> "PageQuery":
        return cls(f"playlists/{playlist_id}/tracks")

    @classmethod
    def user_playlists(cls) -> "PageQuery":
        return cls("me/playlists")

    @classmethod
    def saved_tracks(cls) -> "PageQuery":
        return cls("me/tracks")

    @classmethod
    def top_tracks(cls, time_range: str) -> "PageQuery":
        return cls("me/top/tracks", {"time_range": time_range})


@define(slots=True)
class PagedCollection:
    """Restartable lazy sequence over every item of a paginated collection.

    Each ``async for`` starts again from offset zero.
    """

    fetcher: "PaginatedCollectionFetcher"
    credentials: str = field(repr=False)
    query: PageQuery
    max_items: int | None = None

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iterate_items()

    async def _iterate_items(self) -> AsyncIterator[dict[str, Any]]:
        async for page in self.pages():
            for item in page:
                yield item

    def pages(self) -> AsyncIterator[list[dict[str, Any]]]:
        return self.fetcher.iter_pages(
            self.credentials, self.query, max_items=self.max_items
        )


@define(slots=True)
class PaginatedCollectionFetcher:
    """Fetches complete, ordered collections from offset-paginated endpoints.

    A failed page fails the whole pagination: the error propagates to the caller
    and nothing is retried here. Pages are requested strictly one after another.
    """

    transport: PlaylistTransport
    page_size: int = field(
        factory=lambda: settings.api.spotify_page_size,
        validator=validators.gt(0),
    )

    async def iter_pages(
        self,
        credentials: str,
        query: PageQuery,
        *,
        max_items: int | None = None,
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """Yield each page's items until the remote signals there is no next page.

        Args:
            credentials: Bearer credential for the remote service
            query: Endpoint and fixed parameters
            max_items: Optional cap on total items requested

        Raises:
            RemoteCallFailure: On the first failed page request
        """
        if max_items is not None and max_items <= 0:
            return

        offset = 0
        fetched = 0
        page_number = 0

        while True:
            limit = self.page_size
            if max_items is not None:
                limit = min(limit, max_items - fetched)

            try:
                page = await self.transport.get_page(
                    credentials,
                    query.endpoint,
                    limit=limit,
                    offset=offset,
                    params=query.params,
                )
            except RemoteCallFailure as e:
                logger.error(
                    f"Pagination of {query.endpoint} aborted at page {page_number}",
                    offset=offset,
                    error=str(e),
                )
                raise

            items = page.get("items") or []
            page_number += 1
            fetched += len(items)
            logger.debug(
                f"Fetched page {page_number} of {query.endpoint}",
                offset=offset,
                items=len(items),
            )
            yield items

            if page.get("next") is None:
                break
            if max_items is not None and fetched >= max_items:
                break
            offset += limit

    def collection(
        self,
        credentials: str,
        query: PageQuery,
        *,
        max_items: int | None = None,
    ) -> PagedCollection:
        """Lazy, restartable view over every item of the collection."""
        return PagedCollection(
            fetcher=self,
            credentials=credentials,
            query=query,
            max_items=max_items,
        )

    async def fetch_all(
        self,
        credentials: str,
        query: PageQuery,
        *,
        max_items: int | None = None,
    ) -> list[dict[str, Any]]:
        """Buffer the whole collection into a list."""
        items: list[dict[str, Any]] = []
        async for page in self.iter_pages(credentials, query, max_items=max_items):
            items.extend(page)
        logger.debug(f"Fetched {len(items)} items from {query.endpoint}")
        return items
