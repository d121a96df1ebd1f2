"""
Farcaster hub REST client.

Async client for a Farcaster hub's HTTP API, using ``httpx``. Reads come
back as pydantic models; list endpoints come back as lazy async iterables
that follow the hub's page cursors; writes are built, signed and encoded
locally and submitted as protobuf bytes.

Usage::

    from farcaster_hub_rest import HubRestClient

    async with HubRestClient() as client:
        async for cast in client.casts.list_casts_by_fid(2, page_size=100):
            print(cast.data.cast_add_body.text)

        await client.casts.submit_cast("gm", fid=1234, signer="0x...")
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Literal, TypeVar, overload

import httpx

from farcaster_hub_rest.builders import (
    VERIFICATION_TYPE_CONTRACT,
    VERIFICATION_TYPE_EOA,
    MessageDataOptions,
    cast_add_body,
    cast_remove_body,
    link_body,
    make_cast_add,
    make_cast_remove,
    make_link_add,
    make_link_remove,
    make_reaction_add,
    make_reaction_remove,
    make_verification_add_eth_address,
    make_verification_remove,
    reaction_body,
    to_reaction_type,
    verification_add_body,
    verification_remove_body,
)
from farcaster_hub_rest.chain import BlockSource, EthereumRpcBlockSource
from farcaster_hub_rest.errors import api_error_from_response, not_found_as_none, raise_for_hub_status
from farcaster_hub_rest.pagination import (
    EventIdPaginator,
    EventPage,
    Page,
    PaginationOptions,
    TokenPaginator,
)
from farcaster_hub_rest.protocol import (
    CastType,
    FarcasterNetwork,
    Protocol,
    ReactionType,
    UserDataType,
    encode_message,
    hex_string_to_bytes,
)
from farcaster_hub_rest.signers import (
    SignerLike,
    eip712_signer_from_mnemonic_or_private_key,
    make_verification_address_claim,
    resolve_signer,
)
from farcaster_hub_rest.types import (
    DEFAULT_HUB_URL,
    CastAdd,
    CastId,
    CastRemove,
    Embed,
    HubEvent,
    HubInfo,
    HubInfoWithDbStats,
    HubRestClientConfig,
    LinkAdd,
    LinkRemove,
    OnChainEventIdRegister,
    OnChainEventSigner,
    OnChainEventSignerMigrated,
    OnChainEventStorageRent,
    OnChainEventType,
    Reaction,
    ReactionRemove,
    StorageLimit,
    UserDataAdd,
    UserNameProof,
    ValidateMessageResponse,
    Verification,
    VerificationRemove,
    on_chain_event_model,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

FOLLOW = "follow"


class _HttpClient:
    """Thin wrapper around httpx for hub requests.

    Installs a response hook on the underlying ``httpx.AsyncClient`` that
    logs the body of every structured hub error at WARNING. The hook only
    logs; the error is raised by :meth:`request` as usual. A transport shared
    by several clients carries one hook, and closing the client that
    installed it takes it off again.
    """

    def __init__(
        self,
        hub_url: str,
        http_client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = hub_url.rstrip("/")
        self._logger = logger or logging.getLogger("farcaster_hub_rest")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

        self._hook_installed = False
        self._install_hook()

    def _install_hook(self) -> None:
        hooks = self._client.event_hooks
        response_hooks = hooks.get("response", [])
        if any(getattr(h, "__func__", None) is _HttpClient._log_api_errors for h in response_hooks):
            return
        hooks["response"] = [*response_hooks, self._log_api_errors]
        self._client.event_hooks = hooks
        self._hook_installed = True

    def _remove_hook(self) -> None:
        hooks = self._client.event_hooks
        hooks["response"] = [h for h in hooks.get("response", []) if h != self._log_api_errors]
        self._client.event_hooks = hooks
        self._hook_installed = False

    async def _log_api_errors(self, response: httpx.Response) -> None:
        if response.status_code < 400:
            return
        await response.aread()
        if api_error_from_response(response) is not None:
            self._logger.warning("API errors: %s", response.text)

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        content: bytes | None = None,
    ) -> Any:
        """Make a request to the hub and return the decoded JSON body.

        Raises:
            HubApiError: The hub answered with an ``errCode`` body.
            httpx.HTTPStatusError: Any other error status.
            httpx.TransportError: Connection-level failures.
        """
        # another client on this transport may have closed and taken the hook with it
        self._install_hook()
        headers = {"Content-Type": "application/octet-stream"} if content is not None else None
        response = await self._client.request(
            method,
            f"{self.base_url}{path}",
            params={k: v for k, v in (params or {}).items() if v is not None},
            content=content,
            headers=headers,
        )
        raise_for_hub_status(response)
        return response.json()

    def paginate(
        self,
        path: str,
        params: dict[str, Any],
        parse: Callable[[Any], T],
        options: PaginationOptions,
        key: str = "messages",
    ) -> TokenPaginator[T]:
        """Lazy sequence over a ``nextPageToken`` listing."""

        async def fetch_page(page_token: str | None) -> Page[T]:
            data = await self.request(
                "GET",
                path,
                params={**params, **options.to_params(), "pageToken": page_token},
            )
            return Page(
                items=[parse(item) for item in data.get(key, [])],
                next_page_token=data.get("nextPageToken") or "",
            )

        return TokenPaginator(fetch_page)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
        elif self._hook_installed:
            self._remove_hook()


def _options(page_size: int | None, reverse: bool | None) -> PaginationOptions:
    return PaginationOptions(page_size=page_size, reverse=reverse)


# ============================================================
#  Sub-managers
# ============================================================


class _InfoManager:
    """Hub status."""

    def __init__(self, http: _HttpClient) -> None:
        self._http = http

    @overload
    async def get_hub_info(self, include_db_stats: Literal[True]) -> HubInfoWithDbStats: ...

    @overload
    async def get_hub_info(self, include_db_stats: Literal[False] = ...) -> HubInfo: ...

    async def get_hub_info(self, include_db_stats: bool = False) -> HubInfo:
        """Get the hub's version, sync state and, optionally, database stats."""
        data = await self._http.request(
            "GET", "/v1/info", params={"dbstats": "true" if include_db_stats else "false"}
        )
        if include_db_stats:
            return HubInfoWithDbStats(**data)
        return HubInfo(**data)


class _MessageManager:
    """Submission and validation of signed protocol messages."""

    def __init__(self, http: _HttpClient, network: FarcasterNetwork) -> None:
        self._http = http
        self.network = network

    def data_options(self, fid: int) -> MessageDataOptions:
        return MessageDataOptions(fid=fid, network=self.network)

    async def submit_message(self, message: Any) -> dict[str, Any]:
        """Encode a signed ``Message`` and submit it.

        Returns:
            The hub's JSON rendering of the accepted message.
        """
        return await self.submit_message_bytes(encode_message(message))

    async def submit_message_bytes(self, message_bytes: bytes) -> dict[str, Any]:
        return await self._http.request("POST", "/v1/submitMessage", content=message_bytes)

    async def validate_message(self, encoded_message: str | bytes) -> ValidateMessageResponse:
        """Ask the hub whether a signed, encoded message is valid.

        Useful for messages that cannot be submitted (e.g. frame actions).

        Args:
            encoded_message: Raw bytes or a hex string (``0x`` optional).
        """
        if isinstance(encoded_message, str):
            encoded_message = hex_string_to_bytes(encoded_message)
        data = await self._http.request("POST", "/v1/validateMessage", content=encoded_message)
        return ValidateMessageResponse(**data)


class _CastManager:
    """Read, publish and delete casts."""

    def __init__(self, http: _HttpClient, messages: _MessageManager) -> None:
        self._http = http
        self._messages = messages

    async def get_cast_by_id(self, cast_id: CastId) -> CastAdd | None:
        """Get a cast by author FID and hash, or ``None`` if it doesn't exist."""
        data = await not_found_as_none(
            self._http.request("GET", "/v1/castById", params={"fid": cast_id.fid, "hash": cast_id.hash})
        )
        return CastAdd(**data) if data is not None else None

    def list_casts_by_fid(
        self, fid: int, page_size: int | None = None, reverse: bool | None = None
    ) -> TokenPaginator[CastAdd]:
        """All casts authored by ``fid``."""
        return self._http.paginate(
            "/v1/castsByFid", {"fid": fid}, lambda m: CastAdd(**m), _options(page_size, reverse)
        )

    def list_casts_by_mention(
        self, fid: int, page_size: int | None = None, reverse: bool | None = None
    ) -> TokenPaginator[CastAdd]:
        """All casts that mention ``fid``."""
        return self._http.paginate(
            "/v1/castsByMention", {"fid": fid}, lambda m: CastAdd(**m), _options(page_size, reverse)
        )

    def list_casts_by_parent(
        self, parent: CastId | str, page_size: int | None = None, reverse: bool | None = None
    ) -> TokenPaginator[CastAdd]:
        """All replies to a parent cast id, or all casts under a parent URL."""
        if isinstance(parent, str):
            params: dict[str, Any] = {"url": parent}
        else:
            params = {"fid": parent.fid, "hash": parent.hash}
        return self._http.paginate(
            "/v1/castsByParent", params, lambda m: CastAdd(**m), _options(page_size, reverse)
        )

    async def submit_cast(
        self,
        text: str,
        fid: int,
        signer: SignerLike,
        *,
        embeds: list[Embed | str] | None = None,
        embeds_deprecated: list[str] | None = None,
        mentions: list[int] | None = None,
        mentions_positions: list[int] | None = None,
        parent_cast_id: CastId | None = None,
        parent_url: str | None = None,
        cast_type: CastType | None = None,
    ) -> CastAdd:
        """Publish a cast.

        Args:
            text: Cast text.
            fid: FID of the author.
            signer: The author's signer, or its hex Ed25519 private key.
            embeds: URLs or embedded casts.
            mentions: FIDs mentioned; ``mentions_positions`` gives their byte
                offsets in ``text``.
            parent_cast_id: Cast this replies to.
            parent_url: Channel or URL this cast is posted under.
        """
        resolved = resolve_signer(signer)
        body = cast_add_body(
            text,
            embeds=embeds or [],
            embeds_deprecated=embeds_deprecated or [],
            mentions=mentions or [],
            mentions_positions=mentions_positions or [],
            parent_cast_id=parent_cast_id,
            parent_url=parent_url,
            cast_type=cast_type,
        )
        message = make_cast_add(body, self._messages.data_options(fid), resolved)
        data = await self._messages.submit_message(message)
        return CastAdd(**data)

    async def remove_cast(self, cast_hash: str, fid: int, signer: SignerLike) -> CastRemove:
        """Delete one of ``fid``'s casts by hash."""
        resolved = resolve_signer(signer)
        message = make_cast_remove(cast_remove_body(cast_hash), self._messages.data_options(fid), resolved)
        data = await self._messages.submit_message(message)
        return CastRemove(**data)


class _ReactionManager:
    """Likes and recasts."""

    def __init__(self, http: _HttpClient, messages: _MessageManager) -> None:
        self._http = http
        self._messages = messages

    async def get_reaction_by_id(
        self, fid: int, reaction_type: ReactionType | str, target: CastId
    ) -> Reaction | None:
        """Get ``fid``'s reaction of one type to a cast, or ``None``."""
        params = {
            "fid": fid,
            "reaction_type": int(to_reaction_type(reaction_type)),
            "target_fid": target.fid,
            "target_hash": target.hash,
        }
        data = await not_found_as_none(self._http.request("GET", "/v1/reactionById", params=params))
        return Reaction(**data) if data is not None else None

    def list_reactions_by_fid(
        self,
        fid: int,
        reaction_type: ReactionType | str,
        page_size: int | None = None,
        reverse: bool | None = None,
    ) -> TokenPaginator[Reaction]:
        """All reactions of one type made by ``fid``."""
        params = {"fid": fid, "reaction_type": int(to_reaction_type(reaction_type))}
        return self._http.paginate(
            "/v1/reactionsByFid", params, lambda m: Reaction(**m), _options(page_size, reverse)
        )

    def list_reactions_by_cast(
        self,
        target: CastId,
        reaction_type: ReactionType | str,
        page_size: int | None = None,
        reverse: bool | None = None,
    ) -> TokenPaginator[Reaction]:
        """All reactions of one type to a cast."""
        params = {
            "target_fid": target.fid,
            "target_hash": target.hash,
            "reaction_type": int(to_reaction_type(reaction_type)),
        }
        return self._http.paginate(
            "/v1/reactionsByCast", params, lambda m: Reaction(**m), _options(page_size, reverse)
        )

    def list_reactions_by_target(
        self,
        url: str,
        reaction_type: ReactionType | str,
        page_size: int | None = None,
        reverse: bool | None = None,
    ) -> TokenPaginator[Reaction]:
        """All reactions of one type to a URL target."""
        params = {"url": url, "reaction_type": int(to_reaction_type(reaction_type))}
        return self._http.paginate(
            "/v1/reactionsByTarget", params, lambda m: Reaction(**m), _options(page_size, reverse)
        )

    async def submit_reaction(
        self,
        reaction_type: ReactionType | str,
        target: CastId | str,
        fid: int,
        signer: SignerLike,
    ) -> Reaction:
        """Like or recast a cast (``CastId``) or a URL (``str``)."""
        resolved = resolve_signer(signer)
        message = make_reaction_add(
            reaction_body(reaction_type, target), self._messages.data_options(fid), resolved
        )
        data = await self._messages.submit_message(message)
        return Reaction(**data)

    async def remove_reaction(
        self,
        reaction_type: ReactionType | str,
        target: CastId | str,
        fid: int,
        signer: SignerLike,
    ) -> ReactionRemove:
        """Undo a like or recast."""
        resolved = resolve_signer(signer)
        message = make_reaction_remove(
            reaction_body(reaction_type, target), self._messages.data_options(fid), resolved
        )
        data = await self._messages.submit_message(message)
        return ReactionRemove(**data)


class _LinkManager:
    """Follows and other FID-to-FID links."""

    def __init__(self, http: _HttpClient, messages: _MessageManager) -> None:
        self._http = http
        self._messages = messages

    async def get_link_by_id(self, fid: int, target_fid: int, link_type: str = FOLLOW) -> LinkAdd | None:
        """Get the link from ``fid`` to ``target_fid``, or ``None``."""
        params = {"fid": fid, "target_fid": target_fid, "link_type": link_type}
        data = await not_found_as_none(self._http.request("GET", "/v1/linkById", params=params))
        return LinkAdd(**data) if data is not None else None

    def list_links_by_fid(
        self,
        fid: int,
        link_type: str = FOLLOW,
        page_size: int | None = None,
        reverse: bool | None = None,
    ) -> TokenPaginator[LinkAdd]:
        """All links created by ``fid`` (who ``fid`` follows)."""
        return self._http.paginate(
            "/v1/linksByFid",
            {"fid": fid, "link_type": link_type},
            lambda m: LinkAdd(**m),
            _options(page_size, reverse),
        )

    def list_links_by_target_fid(
        self,
        target_fid: int,
        link_type: str = FOLLOW,
        page_size: int | None = None,
        reverse: bool | None = None,
    ) -> TokenPaginator[LinkAdd]:
        """All links pointing at ``target_fid`` (its followers)."""
        return self._http.paginate(
            "/v1/linksByTargetFid",
            {"target_fid": target_fid, "link_type": link_type},
            lambda m: LinkAdd(**m),
            _options(page_size, reverse),
        )

    async def submit_link(
        self,
        link_type: str,
        target_fid: int,
        fid: int,
        signer: SignerLike,
        display_timestamp: int | None = None,
    ) -> LinkAdd:
        resolved = resolve_signer(signer)
        message = make_link_add(
            link_body(link_type, target_fid, display_timestamp), self._messages.data_options(fid), resolved
        )
        data = await self._messages.submit_message(message)
        return LinkAdd(**data)

    async def remove_link(
        self,
        link_type: str,
        target_fid: int,
        fid: int,
        signer: SignerLike,
        display_timestamp: int | None = None,
    ) -> LinkRemove:
        resolved = resolve_signer(signer)
        message = make_link_remove(
            link_body(link_type, target_fid, display_timestamp), self._messages.data_options(fid), resolved
        )
        data = await self._messages.submit_message(message)
        return LinkRemove(**data)

    async def follow_user(self, target_fid: int, fid: int, signer: SignerLike) -> LinkAdd:
        return await self.submit_link(FOLLOW, target_fid, fid, signer)

    async def unfollow_user(self, target_fid: int, fid: int, signer: SignerLike) -> LinkRemove:
        return await self.remove_link(FOLLOW, target_fid, fid, signer)


class _UserDataManager:
    """Profile data (display name, bio, pfp, ...)."""

    def __init__(self, http: _HttpClient) -> None:
        self._http = http

    async def get_specific_user_data_by_fid(
        self, fid: int, user_data_type: UserDataType
    ) -> UserDataAdd | None:
        params = {"fid": fid, "user_data_type": int(user_data_type)}
        data = await not_found_as_none(self._http.request("GET", "/v1/userDataByFid", params=params))
        return UserDataAdd(**data) if data is not None else None

    def list_all_user_data_by_fid(
        self, fid: int, page_size: int | None = None, reverse: bool | None = None
    ) -> TokenPaginator[UserDataAdd]:
        """Every user data entry for ``fid``; empty if it has none or doesn't exist."""
        return self._http.paginate(
            "/v1/userDataByFid", {"fid": fid}, lambda m: UserDataAdd(**m), _options(page_size, reverse)
        )


class _FidManager:
    def __init__(self, http: _HttpClient) -> None:
        self._http = http

    def list_fids(self, page_size: int | None = None, reverse: bool | None = None) -> TokenPaginator[int]:
        """Every registered FID."""
        return self._http.paginate("/v1/fids", {}, int, _options(page_size, reverse), key="fids")


class _StorageManager:
    def __init__(self, http: _HttpClient) -> None:
        self._http = http

    async def get_storage_limits_by_fid(self, fid: int) -> list[StorageLimit]:
        data = await self._http.request("GET", "/v1/storageLimitsByFid", params={"fid": fid})
        return [StorageLimit(**limit) for limit in data.get("limits", [])]


class _UsernameManager:
    """fname and ENS username proofs."""

    def __init__(self, http: _HttpClient) -> None:
        self._http = http

    async def get_username_proof(self, username: str) -> UserNameProof | None:
        data = await not_found_as_none(
            self._http.request("GET", "/v1/userNameProofByName", params={"name": username})
        )
        return UserNameProof(**data) if data is not None else None

    async def list_username_proofs_for_fid(self, fid: int) -> list[UserNameProof]:
        data = await self._http.request("GET", "/v1/userNameProofsByFid", params={"fid": fid})
        return [UserNameProof(**proof) for proof in data.get("proofs", [])]


class _VerificationManager:
    """Ethereum address verifications."""

    def __init__(self, http: _HttpClient, messages: _MessageManager, block_source: BlockSource) -> None:
        self._http = http
        self._messages = messages
        self._block_source = block_source

    def list_verifications_by_fid(
        self,
        fid: int,
        address: str | None = None,
        page_size: int | None = None,
        reverse: bool | None = None,
    ) -> TokenPaginator[Verification]:
        """All verified addresses of ``fid``, optionally filtered to one address."""
        return self._http.paginate(
            "/v1/verificationsByFid",
            {"fid": fid, "address": address},
            lambda m: Verification(**m),
            _options(page_size, reverse),
        )

    async def submit_verification(
        self,
        verified_address_mnemonic_or_private_key: str,
        fid: int,
        signer: SignerLike,
        verification_type: Literal["EOA", "contract"] = "EOA",
        network: FarcasterNetwork | None = None,
        chain_id: int = 0,
    ) -> Verification:
        """Verify an Ethereum address for ``fid``.

        The address owner signs an EIP-712 claim over the FID, the address
        and the latest block hash; the claim signature then goes into a
        message signed by ``signer``. Nothing is submitted if any step
        before that fails.

        Args:
            verified_address_mnemonic_or_private_key: Secret of the address
                being verified.
            fid: FID the address is verified for.
            signer: The FID's message signer, or its hex private key.
            verification_type: ``"EOA"`` or ``"contract"``.
            network: Network in the claim; defaults to the client's network.
            chain_id: Chain of a contract verification; 0 for EOAs.
        """
        resolved = resolve_signer(signer)
        claim_network = network if network is not None else self._messages.network

        address_signer = eip712_signer_from_mnemonic_or_private_key(verified_address_mnemonic_or_private_key)
        address = address_signer.get_signer_key()
        block_hash = hex_string_to_bytes(await self._block_source.get_latest_block_hash())
        claim = make_verification_address_claim(fid, address, claim_network, block_hash, Protocol.ETHEREUM)
        claim_signature = address_signer.sign_verification_claim(claim, chain_id=chain_id)

        body = verification_add_body(
            address=address,
            claim_signature=claim_signature,
            block_hash=block_hash,
            verification_type=VERIFICATION_TYPE_EOA if verification_type == "EOA" else VERIFICATION_TYPE_CONTRACT,
            chain_id=chain_id,
            protocol=Protocol.ETHEREUM,
        )
        message = make_verification_add_eth_address(body, self._messages.data_options(fid), resolved)
        data = await self._messages.submit_message(message)
        return Verification(**data)

    async def remove_verification(self, address: str, fid: int, signer: SignerLike) -> VerificationRemove:
        resolved = resolve_signer(signer)
        message = make_verification_remove(
            verification_remove_body(address, Protocol.ETHEREUM), self._messages.data_options(fid), resolved
        )
        data = await self._messages.submit_message(message)
        return VerificationRemove(**data)


class _OnChainEventManager:
    """Registrations, signers and storage rent mirrored from the chain."""

    def __init__(self, http: _HttpClient) -> None:
        self._http = http

    @overload
    async def list_on_chain_events_by_fid(
        self, fid: int, event_type: Literal[OnChainEventType.SIGNER]
    ) -> list[OnChainEventSigner]: ...

    @overload
    async def list_on_chain_events_by_fid(
        self, fid: int, event_type: Literal[OnChainEventType.SIGNER_MIGRATED]
    ) -> list[OnChainEventSignerMigrated]: ...

    @overload
    async def list_on_chain_events_by_fid(
        self, fid: int, event_type: Literal[OnChainEventType.ID_REGISTER]
    ) -> list[OnChainEventIdRegister]: ...

    @overload
    async def list_on_chain_events_by_fid(
        self, fid: int, event_type: Literal[OnChainEventType.STORAGE_RENT]
    ) -> list[OnChainEventStorageRent]: ...

    async def list_on_chain_events_by_fid(self, fid: int, event_type: OnChainEventType) -> list[Any]:
        """On-chain events of one category for ``fid``.

        Every event is parsed with the model for ``event_type``, so an event
        of another category fails validation instead of being returned.
        """
        event_type = OnChainEventType(event_type)
        model = on_chain_event_model(event_type)
        data = await self._http.request(
            "GET", "/v1/onChainEventsByFid", params={"fid": fid, "event_type": event_type.value}
        )
        return [model(**event) for event in data.get("events", [])]

    async def get_on_chain_signer_event_by_signer(self, fid: int, signer: str) -> OnChainEventSigner | None:
        """The add/remove event of one signer key of ``fid``, or ``None``."""
        data = await not_found_as_none(
            self._http.request("GET", "/v1/onChainSignersByFid", params={"fid": fid, "signer": signer})
        )
        return OnChainEventSigner(**data) if data is not None else None

    async def get_on_chain_id_registry_event_by_address(self, address: str) -> OnChainEventIdRegister | None:
        """The FID registration event of a custody address, or ``None``."""
        data = await not_found_as_none(
            self._http.request("GET", "/v1/onChainIdRegistryEventByAddress", params={"address": address})
        )
        return OnChainEventIdRegister(**data) if data is not None else None


class _HubEventManager:
    """The hub's ordered event log."""

    def __init__(self, http: _HttpClient) -> None:
        self._http = http

    async def get_hub_event_by_id(self, event_id: int) -> HubEvent | None:
        data = await not_found_as_none(
            self._http.request("GET", "/v1/eventById", params={"event_id": event_id})
        )
        return HubEvent(**data) if data is not None else None

    def list_hub_events(self, from_event_id: int | None = None) -> EventIdPaginator[HubEvent]:
        """Hub events from ``from_event_id`` on, until the hub returns an empty page."""

        async def fetch_page(event_id: int | None) -> EventPage[HubEvent]:
            data = await self._http.request("GET", "/v1/events", params={"from_event_id": event_id})
            return EventPage(
                items=[HubEvent(**e) for e in data.get("events", [])],
                next_page_event_id=data.get("nextPageEventId"),
            )

        return EventIdPaginator(fetch_page, from_event_id)


# ============================================================
#  Main client
# ============================================================


class HubRestClient:
    """
    Client for a Farcaster hub's REST API.

    Resource areas are exposed as attributes: ``info``, ``casts``,
    ``reactions``, ``links``, ``user_data``, ``fids``, ``storage``,
    ``usernames``, ``verifications``, ``on_chain_events``, ``hub_events``
    and ``messages``. The only state held is the configuration; every call
    builds its own cursors and messages, so one client can be shared by
    concurrent tasks.
    """

    def __init__(
        self,
        hub_url: str = DEFAULT_HUB_URL,
        *,
        http_client: httpx.AsyncClient | None = None,
        logger: logging.Logger | None = None,
        timeout: float = 30.0,
        network: FarcasterNetwork = FarcasterNetwork.MAINNET,
        block_source: BlockSource | None = None,
    ) -> None:
        self._http = _HttpClient(hub_url, http_client=http_client, logger=logger, timeout=timeout)
        self._block_source = block_source or EthereumRpcBlockSource()

        self.info = _InfoManager(self._http)
        self.messages = _MessageManager(self._http, network)
        self.casts = _CastManager(self._http, self.messages)
        self.reactions = _ReactionManager(self._http, self.messages)
        self.links = _LinkManager(self._http, self.messages)
        self.user_data = _UserDataManager(self._http)
        self.fids = _FidManager(self._http)
        self.storage = _StorageManager(self._http)
        self.usernames = _UsernameManager(self._http)
        self.verifications = _VerificationManager(self._http, self.messages, self._block_source)
        self.on_chain_events = _OnChainEventManager(self._http)
        self.hub_events = _HubEventManager(self._http)

    @classmethod
    def from_config(cls, config: HubRestClientConfig) -> HubRestClient:
        return cls(
            config.hub_url,
            http_client=config.http_client,
            logger=config.logger,
            timeout=config.timeout,
            network=config.network,
            block_source=config.block_source,
        )

    @property
    def hub_url(self) -> str:
        return self._http.base_url

    @property
    def network(self) -> FarcasterNetwork:
        return self.messages.network

    async def close(self) -> None:
        """Close the HTTP client if this client created it."""
        await self._http.close()
        logger.debug("Closed hub client for %s", self._http.base_url)

    async def __aenter__(self) -> HubRestClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
