"""
Cursor-following async sequences over paginated hub endpoints.

Two cursor policies exist on the hub and are kept separate:

* :class:`TokenPaginator` follows an opaque ``nextPageToken``. An empty
  token means there are no further pages.
* :class:`EventIdPaginator` follows the numeric ``nextPageEventId`` of the
  events endpoint and stops when a fetched page has no events.

Both are restartable: every ``async for`` over the same paginator starts a
new walk from the first page. A page is fetched and parsed in full before
any of its items is yielded, and the next page is only requested once the
caller asks for an item past the end of the current one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, AsyncIterable, AsyncIterator, Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")

NO_MORE_PAGES = ""


@dataclass(frozen=True)
class PaginationOptions:
    """Options forwarded verbatim to every page request."""

    page_size: int | None = None
    reverse: bool | None = None

    def to_params(self) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if self.page_size is not None:
            params["pageSize"] = self.page_size
        if self.reverse is not None:
            params["reverse"] = "true" if self.reverse else "false"
        return params


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a token-paginated listing."""

    items: list[T] = field(default_factory=list)
    next_page_token: str = NO_MORE_PAGES


@dataclass(frozen=True)
class EventPage(Generic[T]):
    """One page of the hub events listing."""

    items: list[T] = field(default_factory=list)
    next_page_event_id: int | None = None


TokenPageFetcher = Callable[[str | None], Awaitable[Page[T]]]
EventPageFetcher = Callable[[int | None], Awaitable[EventPage[T]]]


class _TokenCursor(AsyncIterator[T]):
    def __init__(self, fetch_page: TokenPageFetcher[T]) -> None:
        self._fetch_page = fetch_page
        self._buffer: list[T] = []
        self._index = 0
        self._page_token: str | None = None
        self._done = False

    def __aiter__(self) -> _TokenCursor[T]:
        return self

    async def __anext__(self) -> T:
        while self._index >= len(self._buffer):
            if self._done:
                raise StopAsyncIteration
            page = await self._fetch_page(self._page_token)
            self._buffer = list(page.items)
            self._index = 0
            if page.next_page_token == NO_MORE_PAGES:
                self._done = True
            else:
                self._page_token = page.next_page_token

        item = self._buffer[self._index]
        self._index += 1
        return item


class _EventIdCursor(AsyncIterator[T]):
    def __init__(self, fetch_page: EventPageFetcher[T], from_event_id: int | None) -> None:
        self._fetch_page = fetch_page
        self._buffer: list[T] = []
        self._index = 0
        self._from_event_id = from_event_id
        self._done = False

    def __aiter__(self) -> _EventIdCursor[T]:
        return self

    async def __anext__(self) -> T:
        while self._index >= len(self._buffer):
            if self._done:
                raise StopAsyncIteration
            page = await self._fetch_page(self._from_event_id)
            if not page.items:
                self._done = True
                raise StopAsyncIteration
            self._buffer = list(page.items)
            self._index = 0
            self._from_event_id = page.next_page_event_id

        item = self._buffer[self._index]
        self._index += 1
        return item


class TokenPaginator(AsyncIterable[T]):
    """Lazy sequence over a ``nextPageToken`` paginated endpoint.

    Args:
        fetch_page: Called with ``None`` for the first page and with the
            previous page's token afterwards. Must return a :class:`Page`.
    """

    def __init__(self, fetch_page: TokenPageFetcher[T]) -> None:
        self._fetch_page = fetch_page

    def __aiter__(self) -> AsyncIterator[T]:
        return _TokenCursor(self._fetch_page)


class EventIdPaginator(AsyncIterable[T]):
    """Lazy sequence over the hub events endpoint.

    Args:
        fetch_page: Called with the event id to start from (``None`` lets
            the hub choose) and returns an :class:`EventPage`.
        from_event_id: Where every walk starts.
    """

    def __init__(self, fetch_page: EventPageFetcher[T], from_event_id: int | None = None) -> None:
        self._fetch_page = fetch_page
        self._from_event_id = from_event_id

    def __aiter__(self) -> AsyncIterator[T]:
        return _EventIdCursor(self._fetch_page, self._from_event_id)


async def collect(items: AsyncIterable[T], limit: int | None = None) -> list[T]:
    """Drain ``items`` into a list, stopping early after ``limit`` items."""
    result: list[T] = []
    if limit is not None and limit <= 0:
        return result
    async for item in items:
        result.append(item)
        if limit is not None and len(result) >= limit:
            break
    return result
