"""
Farcaster hub REST client for Python.

Async client for a Farcaster hub's HTTP API: typed reads, lazily paginated
listings, and locally signed writes.

Example::

    from farcaster_hub_rest import HubRestClient, collect

    async with HubRestClient("https://hub.example.com:2281") as client:
        info = await client.info.get_hub_info(include_db_stats=True)
        print(f"{info.nickname}: {info.db_stats.num_messages} messages")

        # Lazily walk every page
        casts = await collect(client.casts.list_casts_by_fid(2, page_size=50), limit=200)

        # Publish with a hex Ed25519 signer key
        cast = await client.casts.submit_cast("gm", fid=1234, signer="0x...")
        print(cast.hash)
"""

from farcaster_hub_rest.client import HubRestClient
from farcaster_hub_rest.chain import DEFAULT_ETH_RPC_URL, BlockSource, EthereumRpcBlockSource
from farcaster_hub_rest.errors import (
    NOT_FOUND,
    BlockSourceError,
    ErrorResponse,
    HexDecodeError,
    HubApiError,
    HubError,
    MessageBuildError,
    api_error_code,
    is_api_error_response,
    not_found_as_none,
)
from farcaster_hub_rest.pagination import (
    EventIdPaginator,
    PaginationOptions,
    TokenPaginator,
    collect,
)
from farcaster_hub_rest.protocol import (
    CastType,
    FarcasterNetwork,
    MessageType,
    Protocol,
    ReactionType,
    UserDataType,
    hex_string_to_bytes,
)
from farcaster_hub_rest.signers import (
    Ed25519Signer,
    Eip712Signer,
    Signer,
    eip712_signer_from_mnemonic_or_private_key,
    signer_from_hex,
)
from farcaster_hub_rest.types import (
    DEFAULT_HUB_URL,
    HubRestClientConfig,
    CastId,
    Embed,
    Message,
    CastAdd,
    CastRemove,
    Reaction,
    ReactionRemove,
    LinkAdd,
    LinkRemove,
    Verification,
    VerificationRemove,
    UserDataAdd,
    ValidateMessageResponse,
    DbStats,
    HubInfo,
    HubInfoWithDbStats,
    StorageLimit,
    UserNameProof,
    OnChainEventType,
    OnChainEvent,
    OnChainEventSigner,
    OnChainEventSignerMigrated,
    OnChainEventIdRegister,
    OnChainEventStorageRent,
    HubEvent,
)

__all__ = [
    "HubRestClient",
    "HubRestClientConfig",
    "DEFAULT_HUB_URL",
    "DEFAULT_ETH_RPC_URL",
    "BlockSource",
    "EthereumRpcBlockSource",
    "NOT_FOUND",
    "HubError",
    "HubApiError",
    "HexDecodeError",
    "MessageBuildError",
    "BlockSourceError",
    "ErrorResponse",
    "api_error_code",
    "is_api_error_response",
    "not_found_as_none",
    "PaginationOptions",
    "TokenPaginator",
    "EventIdPaginator",
    "collect",
    "CastType",
    "FarcasterNetwork",
    "MessageType",
    "Protocol",
    "ReactionType",
    "UserDataType",
    "hex_string_to_bytes",
    "Signer",
    "Ed25519Signer",
    "Eip712Signer",
    "signer_from_hex",
    "eip712_signer_from_mnemonic_or_private_key",
    "CastId",
    "Embed",
    "Message",
    "CastAdd",
    "CastRemove",
    "Reaction",
    "ReactionRemove",
    "LinkAdd",
    "LinkRemove",
    "Verification",
    "VerificationRemove",
    "UserDataAdd",
    "ValidateMessageResponse",
    "DbStats",
    "HubInfo",
    "HubInfoWithDbStats",
    "StorageLimit",
    "UserNameProof",
    "OnChainEventType",
    "OnChainEvent",
    "OnChainEventSigner",
    "OnChainEventSignerMigrated",
    "OnChainEventIdRegister",
    "OnChainEventStorageRent",
    "HubEvent",
]

__version__ = "0.1.0"
