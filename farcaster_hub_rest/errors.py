"""
Error taxonomy for the Farcaster hub REST client.

HTTP failures stay ``httpx`` exceptions so callers can catch them the
way they catch any other ``httpx`` failure. A failure whose response
body carries a machine-readable ``errCode`` is raised as
:class:`HubApiError`, a subclass of :class:`httpx.HTTPStatusError`.
Everything that goes wrong before a request is sent (bad hex input,
message construction, chain lookups) derives from :class:`HubError`.
"""

from __future__ import annotations

import json
from typing import Any, Awaitable, TypeGuard, TypeVar

import httpx
from pydantic import BaseModel, Field, ValidationError

T = TypeVar("T")

NOT_FOUND = "not_found"


class ErrorResponse(BaseModel):
    """JSON body of a hub error response."""

    err_code: str = Field(alias="errCode")
    presentable: bool = False
    name: str | None = None
    code: int | None = None
    details: str | None = None
    metadata: dict[str, Any] | None = None

    model_config = {"populate_by_name": True}


class HubError(Exception):
    """Base class for errors raised by this library outside of HTTP."""


class HexDecodeError(HubError, ValueError):
    """A hash or address argument is not valid hex."""


class MessageBuildError(HubError, ValueError):
    """A protocol message could not be constructed or signed."""


class BlockSourceError(HubError):
    """The chain-data source did not return a usable block hash."""


class HubApiError(httpx.HTTPStatusError):
    """A hub error response carrying an ``errCode``."""

    def __init__(
        self,
        message: str,
        *,
        request: httpx.Request,
        response: httpx.Response,
        error: ErrorResponse,
    ) -> None:
        super().__init__(message, request=request, response=response)
        self.error = error

    @property
    def err_code(self) -> str:
        return self.error.err_code

    @property
    def is_not_found(self) -> bool:
        return self.error.err_code == NOT_FOUND


def api_error_from_response(response: httpx.Response) -> ErrorResponse | None:
    """Parse a structured error body, or return ``None`` if there isn't one."""
    try:
        if not response.content:
            return None
        data = response.json()
    except (httpx.ResponseNotRead, json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(data, dict) or "errCode" not in data:
        return None
    try:
        return ErrorResponse(**data)
    except ValidationError:
        return None


def raise_for_hub_status(response: httpx.Response) -> None:
    """Raise the matching error for a failed hub response.

    Responses below 400 pass through. A body with ``errCode`` becomes a
    :class:`HubApiError`; anything else becomes a plain
    :class:`httpx.HTTPStatusError`. The exception message only includes the
    error code, never the raw body.
    """
    if response.status_code < 400:
        return

    error = api_error_from_response(response)
    if error is not None:
        raise HubApiError(
            f"Hub request failed ({response.status_code}): {error.err_code}",
            request=response.request,
            response=response,
            error=error,
        )
    raise httpx.HTTPStatusError(
        f"Hub request failed ({response.status_code})",
        request=response.request,
        response=response,
    )


def is_api_error_response(error: BaseException) -> TypeGuard[httpx.HTTPStatusError]:
    """Return True if ``error`` is a failed request whose body has an ``errCode``.

    The body is inspected, so an :class:`httpx.HTTPStatusError` raised by
    the caller's own ``httpx`` code counts as long as the hub answered it.
    Transport failures and status errors without a parseable ``errCode``
    body return False. Use :func:`api_error_code` to read the code.
    """
    return isinstance(error, httpx.HTTPStatusError) and api_error_from_response(error.response) is not None


def api_error_code(error: httpx.HTTPStatusError) -> str | None:
    """The ``errCode`` of a failed hub request, or ``None`` if it has none."""
    if isinstance(error, HubApiError):
        return error.err_code
    parsed = api_error_from_response(error.response)
    return parsed.err_code if parsed is not None else None


async def not_found_as_none(call: Awaitable[T]) -> T | None:
    """Await ``call``, mapping a structured ``not_found`` error to ``None``.

    Any other failure, structured or not, propagates unchanged.
    """
    try:
        return await call
    except httpx.HTTPStatusError as e:
        if is_api_error_response(e) and api_error_code(e) == NOT_FOUND:
            return None
        raise
