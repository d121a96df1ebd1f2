"""
Pydantic models for the Farcaster hub REST API.

Mirrors the hub's JSON shapes with Pythonic naming conventions
(snake_case, camelCase aliases). Enum-valued fields are kept as the
strings the hub sends (``"MESSAGE_TYPE_CAST_ADD"``), hashes and addresses
as ``0x`` hex strings.
"""

from __future__ import annotations

import enum
import logging
from typing import Annotated, Any, Literal, Union

import httpx
from pydantic import AliasChoices, BaseModel, Field, TypeAdapter

from farcaster_hub_rest.chain import BlockSource
from farcaster_hub_rest.protocol import FarcasterNetwork

DEFAULT_HUB_URL = "https://nemes.farcaster.xyz:2281"


# ============================================================
#  Shared
# ============================================================


class CastId(BaseModel):
    """Identifies a cast by its author and hash."""

    fid: int
    hash: str

    model_config = {"populate_by_name": True}


class Embed(BaseModel):
    """A URL or a cast embedded in a cast."""

    url: str | None = None
    cast_id: CastId | None = Field(None, alias="castId")

    model_config = {"populate_by_name": True}


# ============================================================
#  Message bodies
# ============================================================


class CastAddBody(BaseModel):
    text: str = ""
    embeds: list[Embed] = []
    embeds_deprecated: list[str] = Field(default_factory=list, alias="embedsDeprecated")
    mentions: list[int] = []
    mentions_positions: list[int] = Field(default_factory=list, alias="mentionsPositions")
    parent_cast_id: CastId | None = Field(None, alias="parentCastId")
    parent_url: str | None = Field(None, alias="parentUrl")
    type: str | None = None

    model_config = {"populate_by_name": True}


class CastRemoveBody(BaseModel):
    target_hash: str = Field(alias="targetHash")

    model_config = {"populate_by_name": True}


class ReactionBody(BaseModel):
    type: str
    target_cast_id: CastId | None = Field(None, alias="targetCastId")
    target_url: str | None = Field(None, alias="targetUrl")

    model_config = {"populate_by_name": True}


class LinkBody(BaseModel):
    type: str
    display_timestamp: int | None = Field(None, alias="displayTimestamp")
    target_fid: int | None = Field(None, alias="targetFid")

    model_config = {"populate_by_name": True}


class VerificationAddAddressBody(BaseModel):
    address: str
    claim_signature: str | None = Field(
        None, validation_alias=AliasChoices("claimSignature", "ethSignature", "claim_signature")
    )
    block_hash: str = Field(alias="blockHash")
    verification_type: int = Field(0, alias="verificationType")
    chain_id: int = Field(0, alias="chainId")
    protocol: str | None = None

    model_config = {"populate_by_name": True}


class VerificationRemoveBody(BaseModel):
    address: str
    protocol: str | None = None


class UserDataBody(BaseModel):
    type: str
    value: str


# ============================================================
#  Messages
# ============================================================


class MessageData(BaseModel):
    """Envelope fields common to every message."""

    type: str
    fid: int
    timestamp: int
    network: str

    model_config = {"populate_by_name": True, "extra": "allow"}


class CastAddData(MessageData):
    cast_add_body: CastAddBody = Field(alias="castAddBody")


class CastRemoveData(MessageData):
    cast_remove_body: CastRemoveBody = Field(alias="castRemoveBody")


class ReactionData(MessageData):
    reaction_body: ReactionBody = Field(alias="reactionBody")


class LinkData(MessageData):
    link_body: LinkBody = Field(alias="linkBody")


class VerificationData(MessageData):
    verification_add_address_body: VerificationAddAddressBody = Field(
        validation_alias=AliasChoices(
            "verificationAddAddressBody",
            "verificationAddEthAddressBody",
            "verification_add_address_body",
        )
    )


class VerificationRemoveData(MessageData):
    verification_remove_body: VerificationRemoveBody = Field(alias="verificationRemoveBody")


class UserDataData(MessageData):
    user_data_body: UserDataBody = Field(alias="userDataBody")


class Message(BaseModel):
    """A signed message as returned by the hub."""

    data: MessageData
    hash: str
    hash_scheme: str | None = Field(None, alias="hashScheme")
    signature: str
    signature_scheme: str | None = Field(None, alias="signatureScheme")
    signer: str

    model_config = {"populate_by_name": True}


class CastAdd(Message):
    data: CastAddData


class CastRemove(Message):
    data: CastRemoveData


class Reaction(Message):
    data: ReactionData


class ReactionRemove(Message):
    data: ReactionData


class LinkAdd(Message):
    data: LinkData


class LinkRemove(Message):
    data: LinkData


class Verification(Message):
    data: VerificationData


class VerificationRemove(Message):
    data: VerificationRemoveData


class UserDataAdd(Message):
    data: UserDataData


class ValidateMessageResponse(BaseModel):
    """Result of asking the hub to validate a message."""

    valid: bool
    message: Message | None = None


# ============================================================
#  Hub info
# ============================================================


class DbStats(BaseModel):
    num_messages: int = Field(0, alias="numMessages")
    num_fid_events: int = Field(0, alias="numFidEvents")
    num_fname_events: int = Field(0, alias="numFnameEvents")

    model_config = {"populate_by_name": True}


class HubInfo(BaseModel):
    """Hub version and sync status."""

    version: str
    is_syncing: bool = Field(False, alias="isSyncing")
    nickname: str = ""
    root_hash: str = Field("", alias="rootHash")
    db_stats: DbStats | None = Field(None, alias="dbStats")
    peer_id: str | None = Field(None, alias="peerId")
    hub_operator_fid: int | None = Field(None, alias="hubOperatorFid")

    model_config = {"populate_by_name": True}


class HubInfoWithDbStats(HubInfo):
    """Hub info requested with database statistics."""

    db_stats: DbStats = Field(alias="dbStats")


# ============================================================
#  Storage and usernames
# ============================================================


class StorageLimit(BaseModel):
    store_type: str = Field(alias="storeType")
    limit: int

    model_config = {"populate_by_name": True, "extra": "allow"}


class UserNameProof(BaseModel):
    timestamp: int
    name: str
    owner: str
    signature: str
    fid: int
    type: str

    model_config = {"populate_by_name": True}


# ============================================================
#  On-chain events
# ============================================================


class OnChainEventType(str, enum.Enum):
    """Category selector for on-chain event queries."""

    SIGNER = "EVENT_TYPE_SIGNER"
    SIGNER_MIGRATED = "EVENT_TYPE_SIGNER_MIGRATED"
    ID_REGISTER = "EVENT_TYPE_ID_REGISTER"
    STORAGE_RENT = "EVENT_TYPE_STORAGE_RENT"


class SignerEventBody(BaseModel):
    key: str
    key_type: int = Field(alias="keyType")
    event_type: str = Field(alias="eventType")
    metadata: str = ""
    metadata_type: int = Field(0, alias="metadataType")

    model_config = {"populate_by_name": True}


class SignerMigratedEventBody(BaseModel):
    migrated_at: int = Field(alias="migratedAt")

    model_config = {"populate_by_name": True}


class IdRegisterEventBody(BaseModel):
    to: str
    event_type: str = Field(alias="eventType")
    from_address: str = Field("", alias="from")
    recovery_address: str = Field("", alias="recoveryAddress")

    model_config = {"populate_by_name": True}


class StorageRentEventBody(BaseModel):
    payer: str
    units: int
    expiry: int

    model_config = {"populate_by_name": True}


class OnChainEventBase(BaseModel):
    """Fields shared by every on-chain event."""

    chain_id: int = Field(alias="chainId")
    block_number: int = Field(alias="blockNumber")
    block_hash: str = Field(alias="blockHash")
    block_timestamp: int = Field(alias="blockTimestamp")
    transaction_hash: str = Field(alias="transactionHash")
    log_index: int = Field(alias="logIndex")
    tx_index: int = Field(0, alias="txIndex")
    fid: int

    model_config = {"populate_by_name": True}


class OnChainEventSigner(OnChainEventBase):
    type: Literal["EVENT_TYPE_SIGNER"]
    signer_event_body: SignerEventBody = Field(alias="signerEventBody")


class OnChainEventSignerMigrated(OnChainEventBase):
    type: Literal["EVENT_TYPE_SIGNER_MIGRATED"]
    signer_migrated_event_body: SignerMigratedEventBody = Field(alias="signerMigratedEventBody")


class OnChainEventIdRegister(OnChainEventBase):
    type: Literal["EVENT_TYPE_ID_REGISTER"]
    id_register_event_body: IdRegisterEventBody = Field(alias="idRegisterEventBody")


class OnChainEventStorageRent(OnChainEventBase):
    type: Literal["EVENT_TYPE_STORAGE_RENT"]
    storage_rent_event_body: StorageRentEventBody = Field(alias="storageRentEventBody")


OnChainEvent = Annotated[
    Union[
        OnChainEventSigner,
        OnChainEventSignerMigrated,
        OnChainEventIdRegister,
        OnChainEventStorageRent,
    ],
    Field(discriminator="type"),
]

ON_CHAIN_EVENT_MODELS: dict[OnChainEventType, type[OnChainEventBase]] = {
    OnChainEventType.SIGNER: OnChainEventSigner,
    OnChainEventType.SIGNER_MIGRATED: OnChainEventSignerMigrated,
    OnChainEventType.ID_REGISTER: OnChainEventIdRegister,
    OnChainEventType.STORAGE_RENT: OnChainEventStorageRent,
}

_on_chain_event_adapter: TypeAdapter[Any] = TypeAdapter(OnChainEvent)


def on_chain_event_model(event_type: OnChainEventType | str) -> type[OnChainEventBase]:
    """The payload model for one on-chain event category."""
    return ON_CHAIN_EVENT_MODELS[OnChainEventType(event_type)]


def parse_on_chain_event(data: dict[str, Any]) -> OnChainEventBase:
    """Parse an event of any category using its ``type`` tag."""
    return _on_chain_event_adapter.validate_python(data)


# ============================================================
#  Hub events
# ============================================================


class HubEvent(BaseModel):
    """An entry in the hub's event stream."""

    type: str
    id: int
    merge_message_body: dict[str, Any] | None = Field(None, alias="mergeMessageBody")
    prune_message_body: dict[str, Any] | None = Field(None, alias="pruneMessageBody")
    revoke_message_body: dict[str, Any] | None = Field(None, alias="revokeMessageBody")
    merge_username_proof_body: dict[str, Any] | None = Field(None, alias="mergeUsernameProofBody")
    merge_on_chain_event_body: dict[str, Any] | None = Field(None, alias="mergeOnChainEventBody")

    model_config = {"populate_by_name": True, "extra": "allow"}


# ============================================================
#  Configuration
# ============================================================


class HubRestClientConfig(BaseModel):
    """Configuration for :class:`~farcaster_hub_rest.client.HubRestClient`."""

    hub_url: str = DEFAULT_HUB_URL
    http_client: httpx.AsyncClient | None = None
    logger: logging.Logger | None = None
    timeout: float = 30.0
    network: FarcasterNetwork = FarcasterNetwork.MAINNET
    block_source: BlockSource | None = None

    model_config = {"arbitrary_types_allowed": True}
