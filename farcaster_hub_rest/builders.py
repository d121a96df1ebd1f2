"""
Construction and signing of Farcaster protocol messages.

Each ``make_*`` function validates an action-specific body, wraps it in a
``MessageData`` envelope, hashes the encoded data with BLAKE3 (truncated to
20 bytes), signs the hash and returns the assembled ``Message``. Any
rejection is raised as :class:`MessageBuildError` before the message can
reach the network.

The ``*_body`` helpers turn user-facing arguments (hex hashes and
addresses, :class:`~farcaster_hub_rest.types.CastId` models, URLs) into
protobuf bodies. Malformed hex raises
:class:`~farcaster_hub_rest.errors.HexDecodeError` immediately.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Iterable

import blake3

from farcaster_hub_rest.errors import MessageBuildError
from farcaster_hub_rest.protocol import (
    FARCASTER_EPOCH,
    HASH_LENGTH,
    CastAddBody,
    CastId as CastIdProto,
    CastRemoveBody,
    CastType,
    Embed as EmbedProto,
    FarcasterNetwork,
    HashScheme,
    LinkBody,
    Message,
    MessageData,
    MessageType,
    Protocol,
    ReactionBody,
    ReactionType,
    SignatureScheme,
    VerificationAddAddressBody,
    VerificationRemoveBody,
    hex_string_to_bytes,
)
from farcaster_hub_rest.signers import Signer
from farcaster_hub_rest.types import CastId, Embed

logger = logging.getLogger(__name__)

MAX_CAST_TEXT_BYTES = 1024
MAX_SHORT_CAST_TEXT_BYTES = 320
MAX_MENTIONS = 10
MAX_EMBEDS = 4
MAX_URL_BYTES = 256
MAX_LINK_TYPE_BYTES = 8
ED25519_PUBLIC_KEY_LENGTH = 32
ED25519_SIGNATURE_LENGTH = 64
ETH_ADDRESS_LENGTH = 20
BLOCK_HASH_LENGTH = 32

VERIFICATION_TYPE_EOA = 0
VERIFICATION_TYPE_CONTRACT = 1


@dataclass(frozen=True)
class MessageDataOptions:
    """Envelope fields shared by every message."""

    fid: int
    network: FarcasterNetwork = FarcasterNetwork.MAINNET
    timestamp: int | None = None


def to_farcaster_time(unix_seconds: float | None = None) -> int:
    """Seconds since the Farcaster epoch (2021-01-01T00:00:00Z)."""
    if unix_seconds is None:
        unix_seconds = time.time()
    farcaster_time = round(unix_seconds) - FARCASTER_EPOCH
    if farcaster_time < 0:
        raise MessageBuildError("Timestamp predates the Farcaster epoch")
    return farcaster_time


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise MessageBuildError(message)


def _utf8_len(value: str) -> int:
    return len(value.encode("utf-8"))


# ============================================================
#  Body assembly from user-facing arguments
# ============================================================


def cast_id_proto(cast_id: CastId) -> Any:
    """Protobuf ``CastId`` from a model with a hex ``hash``."""
    return CastIdProto(fid=cast_id.fid, hash=hex_string_to_bytes(cast_id.hash))


def _embed_proto(embed: Embed | str) -> Any:
    if isinstance(embed, str):
        return EmbedProto(url=embed)
    if embed.cast_id is not None and embed.url is not None:
        raise MessageBuildError("An embed has either a url or a cast id, not both")
    if embed.cast_id is not None:
        return EmbedProto(cast_id=cast_id_proto(embed.cast_id))
    if embed.url is not None:
        return EmbedProto(url=embed.url)
    raise MessageBuildError("An embed needs a url or a cast id")


def cast_add_body(
    text: str,
    *,
    embeds: Iterable[Embed | str] = (),
    embeds_deprecated: Iterable[str] = (),
    mentions: Iterable[int] = (),
    mentions_positions: Iterable[int] = (),
    parent_cast_id: CastId | None = None,
    parent_url: str | None = None,
    cast_type: CastType | None = None,
) -> Any:
    """Assemble a ``CastAddBody``.

    Casts longer than 320 bytes are marked ``LONG_CAST`` unless
    ``cast_type`` says otherwise.
    """
    if parent_cast_id is not None and parent_url is not None:
        raise MessageBuildError("A cast has either a parent cast id or a parent url, not both")
    if cast_type is None:
        cast_type = CastType.LONG_CAST if _utf8_len(text) > MAX_SHORT_CAST_TEXT_BYTES else CastType.CAST

    body = CastAddBody(
        text=text,
        embeds=[_embed_proto(e) for e in embeds],
        embeds_deprecated=list(embeds_deprecated),
        mentions=list(mentions),
        mentions_positions=list(mentions_positions),
        type=int(cast_type),
    )
    if parent_cast_id is not None:
        body.parent_cast_id.CopyFrom(cast_id_proto(parent_cast_id))
    elif parent_url is not None:
        body.parent_url = parent_url
    return body


def cast_remove_body(cast_hash: str) -> Any:
    return CastRemoveBody(target_hash=hex_string_to_bytes(cast_hash))


def link_body(link_type: str, target_fid: int, display_timestamp: int | None = None) -> Any:
    body = LinkBody(type=link_type, target_fid=target_fid)
    if display_timestamp is not None:
        body.displayTimestamp = display_timestamp
    return body


def to_reaction_type(reaction_type: ReactionType | str) -> ReactionType:
    """Accept a :class:`ReactionType` or its name (``"like"``, ``"recast"``)."""
    if isinstance(reaction_type, str):
        try:
            return ReactionType[reaction_type.upper()]
        except KeyError:
            raise MessageBuildError(f"Unknown reaction type: {reaction_type!r}") from None
    return ReactionType(reaction_type)


def reaction_body(reaction_type: ReactionType | str, target: CastId | str) -> Any:
    """Assemble a ``ReactionBody``.

    ``target`` is a cast id or a URL.
    """
    body = ReactionBody(type=int(to_reaction_type(reaction_type)))
    if isinstance(target, str):
        body.target_url = target
    else:
        body.target_cast_id.CopyFrom(cast_id_proto(target))
    return body


def verification_remove_body(address: str, protocol: Protocol = Protocol.ETHEREUM) -> Any:
    return VerificationRemoveBody(address=hex_string_to_bytes(address), protocol=int(protocol))


# ============================================================
#  Validation
# ============================================================


def _validate_fid(fid: int, what: str = "fid") -> None:
    _require(isinstance(fid, int) and fid > 0, f"{what} must be a positive integer")


def _validate_cast_id(cast_id: Any) -> None:
    _validate_fid(cast_id.fid, "cast id fid")
    _require(len(cast_id.hash) == HASH_LENGTH, f"cast hash must be {HASH_LENGTH} bytes, got {len(cast_id.hash)}")


def _validate_url(url: str) -> None:
    _require(bool(url), "url must not be empty")
    _require(_utf8_len(url) <= MAX_URL_BYTES, f"url must be at most {MAX_URL_BYTES} bytes")


def validate_cast_add_body(body: Any) -> None:
    text_len = _utf8_len(body.text)
    _require(text_len <= MAX_CAST_TEXT_BYTES, f"text must be at most {MAX_CAST_TEXT_BYTES} bytes, got {text_len}")
    if body.type == CastType.CAST:
        _require(
            text_len <= MAX_SHORT_CAST_TEXT_BYTES,
            f"text over {MAX_SHORT_CAST_TEXT_BYTES} bytes requires a long cast",
        )
    _require(len(body.mentions) <= MAX_MENTIONS, f"at most {MAX_MENTIONS} mentions allowed")
    _require(
        len(body.mentions) == len(body.mentions_positions),
        "mentions and mentions_positions must have the same length",
    )
    previous = 0
    for position in body.mentions_positions:
        _require(position <= text_len, "mention position is past the end of the text")
        _require(position >= previous, "mention positions must be in ascending order")
        previous = position
    for fid in body.mentions:
        _validate_fid(fid, "mentioned fid")

    _require(len(body.embeds) + len(body.embeds_deprecated) <= MAX_EMBEDS, f"at most {MAX_EMBEDS} embeds allowed")
    for embed in body.embeds:
        if embed.HasField("cast_id"):
            _validate_cast_id(embed.cast_id)
        else:
            _validate_url(embed.url)

    parent = body.WhichOneof("parent")
    if parent == "parent_cast_id":
        _validate_cast_id(body.parent_cast_id)
    elif parent == "parent_url":
        _validate_url(body.parent_url)


def validate_cast_remove_body(body: Any) -> None:
    _require(
        len(body.target_hash) == HASH_LENGTH,
        f"target hash must be {HASH_LENGTH} bytes, got {len(body.target_hash)}",
    )


def validate_link_body(body: Any) -> None:
    _require(0 < _utf8_len(body.type) <= MAX_LINK_TYPE_BYTES, f"link type must be 1-{MAX_LINK_TYPE_BYTES} bytes")
    _require(body.WhichOneof("target") == "target_fid", "link target fid is required")
    _validate_fid(body.target_fid, "target fid")


def validate_reaction_body(body: Any) -> None:
    _require(
        body.type in (ReactionType.LIKE, ReactionType.RECAST),
        f"unsupported reaction type: {body.type}",
    )
    target = body.WhichOneof("target")
    _require(target is not None, "reaction needs a target cast id or url")
    if target == "target_cast_id":
        _validate_cast_id(body.target_cast_id)
    else:
        _validate_url(body.target_url)


def validate_verification_add_body(body: Any) -> None:
    _require(body.protocol == Protocol.ETHEREUM, "only Ethereum verifications are supported")
    _require(len(body.address) == ETH_ADDRESS_LENGTH, f"address must be {ETH_ADDRESS_LENGTH} bytes")
    _require(len(body.block_hash) == BLOCK_HASH_LENGTH, f"block hash must be {BLOCK_HASH_LENGTH} bytes")
    _require(len(body.claim_signature) > 0, "claim signature is required")
    _require(
        body.verification_type in (VERIFICATION_TYPE_EOA, VERIFICATION_TYPE_CONTRACT),
        f"unknown verification type: {body.verification_type}",
    )
    if body.verification_type == VERIFICATION_TYPE_CONTRACT:
        _require(body.chain_id > 0, "contract verifications need a chain id")
    else:
        _require(body.chain_id == 0, "EOA verifications must not set a chain id")


def validate_verification_remove_body(body: Any) -> None:
    _require(body.protocol == Protocol.ETHEREUM, "only Ethereum verifications are supported")
    _require(len(body.address) == ETH_ADDRESS_LENGTH, f"address must be {ETH_ADDRESS_LENGTH} bytes")


# ============================================================
#  Message assembly
# ============================================================


def make_message(
    message_type: MessageType,
    body_field: str,
    body: Any,
    options: MessageDataOptions,
    signer: Signer,
) -> Any:
    """Wrap ``body`` in an envelope, hash it, sign it.

    ``body_field`` names the ``MessageData`` oneof member ``body`` goes into.
    The encoded data is kept in ``data_bytes`` so the hub hashes exactly the
    bytes that were signed.
    """
    _validate_fid(options.fid)
    timestamp = options.timestamp if options.timestamp is not None else to_farcaster_time()

    data = MessageData(
        type=int(message_type),
        fid=options.fid,
        timestamp=timestamp,
        network=int(options.network),
    )
    getattr(data, body_field).CopyFrom(body)
    data_bytes = data.SerializeToString(deterministic=True)
    message_hash = blake3.blake3(data_bytes).digest()[:HASH_LENGTH]

    signer_key = signer.get_signer_key()
    _require(
        len(signer_key) == ED25519_PUBLIC_KEY_LENGTH,
        f"signer key must be {ED25519_PUBLIC_KEY_LENGTH} bytes, got {len(signer_key)}",
    )
    signature = signer.sign_message_hash(message_hash)
    _require(
        len(signature) == ED25519_SIGNATURE_LENGTH,
        f"signature must be {ED25519_SIGNATURE_LENGTH} bytes, got {len(signature)}",
    )

    logger.debug("Built %s message for fid %d: 0x%s", message_type.name, options.fid, message_hash.hex())
    return Message(
        data=data,
        hash=message_hash,
        hash_scheme=int(HashScheme.BLAKE3),
        signature=signature,
        signature_scheme=int(SignatureScheme.ED25519),
        signer=signer_key,
        data_bytes=data_bytes,
    )


def make_cast_add(body: Any, options: MessageDataOptions, signer: Signer) -> Any:
    validate_cast_add_body(body)
    return make_message(MessageType.CAST_ADD, "cast_add_body", body, options, signer)


def make_cast_remove(body: Any, options: MessageDataOptions, signer: Signer) -> Any:
    validate_cast_remove_body(body)
    return make_message(MessageType.CAST_REMOVE, "cast_remove_body", body, options, signer)


def make_link_add(body: Any, options: MessageDataOptions, signer: Signer) -> Any:
    validate_link_body(body)
    return make_message(MessageType.LINK_ADD, "link_body", body, options, signer)


def make_link_remove(body: Any, options: MessageDataOptions, signer: Signer) -> Any:
    validate_link_body(body)
    return make_message(MessageType.LINK_REMOVE, "link_body", body, options, signer)


def make_reaction_add(body: Any, options: MessageDataOptions, signer: Signer) -> Any:
    validate_reaction_body(body)
    return make_message(MessageType.REACTION_ADD, "reaction_body", body, options, signer)


def make_reaction_remove(body: Any, options: MessageDataOptions, signer: Signer) -> Any:
    validate_reaction_body(body)
    return make_message(MessageType.REACTION_REMOVE, "reaction_body", body, options, signer)


def make_verification_add_eth_address(body: Any, options: MessageDataOptions, signer: Signer) -> Any:
    validate_verification_add_body(body)
    return make_message(
        MessageType.VERIFICATION_ADD_ETH_ADDRESS,
        "verification_add_address_body",
        body,
        options,
        signer,
    )


def make_verification_remove(body: Any, options: MessageDataOptions, signer: Signer) -> Any:
    validate_verification_remove_body(body)
    return make_message(MessageType.VERIFICATION_REMOVE, "verification_remove_body", body, options, signer)


def verification_add_body(
    *,
    address: bytes,
    claim_signature: bytes,
    block_hash: bytes,
    verification_type: int = VERIFICATION_TYPE_EOA,
    chain_id: int = 0,
    protocol: Protocol = Protocol.ETHEREUM,
) -> Any:
    return VerificationAddAddressBody(
        address=address,
        claim_signature=claim_signature,
        block_hash=block_hash,
        verification_type=verification_type,
        chain_id=chain_id,
        protocol=int(protocol),
    )


__all__ = [
    "MessageDataOptions",
    "to_farcaster_time",
    "to_reaction_type",
    "cast_id_proto",
    "cast_add_body",
    "cast_remove_body",
    "link_body",
    "reaction_body",
    "verification_add_body",
    "verification_remove_body",
    "make_message",
    "make_cast_add",
    "make_cast_remove",
    "make_link_add",
    "make_link_remove",
    "make_reaction_add",
    "make_reaction_remove",
    "make_verification_add_eth_address",
    "make_verification_remove",
]
