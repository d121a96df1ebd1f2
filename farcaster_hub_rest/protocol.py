"""
Farcaster protocol message schema.

The hub accepts messages as protobuf-encoded ``Message`` envelopes. The
schema below mirrors the subset of ``message.proto`` this client writes and
is registered with the ``protobuf`` runtime at import time, so encoding and
decoding are done by ``protobuf`` itself.

The ``IntEnum`` classes are the single source of enum values: they are
turned into the protobuf enum descriptors, and JSON enum names follow the
hub's ``<PREFIX>_<NAME>`` convention.
"""

from __future__ import annotations

import enum
import re
from typing import Any

from google.protobuf import descriptor_pb2, descriptor_pool, json_format, message_factory
from google.protobuf.message import DecodeError, Message as ProtoMessage

from farcaster_hub_rest.errors import HexDecodeError

PACKAGE = "farcaster"

FARCASTER_EPOCH = 1609459200  # 2021-01-01T00:00:00Z, in seconds

HASH_LENGTH = 20

_HEX_RE = re.compile(r"[0-9a-fA-F]*")


class MessageType(enum.IntEnum):
    NONE = 0
    CAST_ADD = 1
    CAST_REMOVE = 2
    REACTION_ADD = 3
    REACTION_REMOVE = 4
    LINK_ADD = 5
    LINK_REMOVE = 6
    VERIFICATION_ADD_ETH_ADDRESS = 7
    VERIFICATION_REMOVE = 8
    USER_DATA_ADD = 11
    USERNAME_PROOF = 12
    FRAME_ACTION = 13
    LINK_COMPACT_STATE = 14


class FarcasterNetwork(enum.IntEnum):
    NONE = 0
    MAINNET = 1
    TESTNET = 2
    DEVNET = 3


class HashScheme(enum.IntEnum):
    NONE = 0
    BLAKE3 = 1


class SignatureScheme(enum.IntEnum):
    NONE = 0
    ED25519 = 1
    EIP712 = 2


class ReactionType(enum.IntEnum):
    NONE = 0
    LIKE = 1
    RECAST = 2


class CastType(enum.IntEnum):
    CAST = 0
    LONG_CAST = 1
    TEN_K_CAST = 2


class Protocol(enum.IntEnum):
    ETHEREUM = 0
    SOLANA = 1


class UserDataType(enum.IntEnum):
    NONE = 0
    PFP = 1
    DISPLAY = 2
    BIO = 3
    URL = 5
    USERNAME = 6
    LOCATION = 7
    TWITTER = 8
    GITHUB = 9
    BANNER = 10


# (enum class, protobuf name, value name prefix)
_ENUMS: list[tuple[type[enum.IntEnum], str, str]] = [
    (MessageType, "MessageType", "MESSAGE_TYPE_"),
    (FarcasterNetwork, "FarcasterNetwork", "FARCASTER_NETWORK_"),
    (HashScheme, "HashScheme", "HASH_SCHEME_"),
    (SignatureScheme, "SignatureScheme", "SIGNATURE_SCHEME_"),
    (ReactionType, "ReactionType", "REACTION_TYPE_"),
    (CastType, "CastType", ""),
    (Protocol, "Protocol", "PROTOCOL_"),
    (UserDataType, "UserDataType", "USER_DATA_TYPE_"),
]

_F = descriptor_pb2.FieldDescriptorProto

_SCALARS = {
    "uint64": _F.TYPE_UINT64,
    "uint32": _F.TYPE_UINT32,
    "string": _F.TYPE_STRING,
    "bytes": _F.TYPE_BYTES,
}

# message name -> [(field name, number, type, repeated, oneof name)]
# ``type`` is a scalar name from _SCALARS or the name of a message/enum.
_MESSAGES: dict[str, list[tuple[str, int, str, bool, str | None]]] = {
    "CastId": [
        ("fid", 1, "uint64", False, None),
        ("hash", 2, "bytes", False, None),
    ],
    "Embed": [
        ("url", 1, "string", False, "embed"),
        ("cast_id", 2, "CastId", False, "embed"),
    ],
    "CastAddBody": [
        ("embeds_deprecated", 1, "string", True, None),
        ("mentions", 2, "uint64", True, None),
        ("parent_cast_id", 3, "CastId", False, "parent"),
        ("text", 4, "string", False, None),
        ("mentions_positions", 5, "uint32", True, None),
        ("embeds", 6, "Embed", True, None),
        ("parent_url", 7, "string", False, "parent"),
        ("type", 8, "CastType", False, None),
    ],
    "CastRemoveBody": [
        ("target_hash", 1, "bytes", False, None),
    ],
    "ReactionBody": [
        ("type", 1, "ReactionType", False, None),
        ("target_cast_id", 2, "CastId", False, "target"),
        ("target_url", 3, "string", False, "target"),
    ],
    "VerificationAddAddressBody": [
        ("address", 1, "bytes", False, None),
        ("claim_signature", 2, "bytes", False, None),
        ("block_hash", 3, "bytes", False, None),
        ("verification_type", 4, "uint32", False, None),
        ("chain_id", 5, "uint32", False, None),
        ("protocol", 7, "Protocol", False, None),
    ],
    "VerificationRemoveBody": [
        ("address", 1, "bytes", False, None),
        ("protocol", 2, "Protocol", False, None),
    ],
    "UserDataBody": [
        ("type", 1, "UserDataType", False, None),
        ("value", 2, "string", False, None),
    ],
    "LinkBody": [
        ("type", 1, "string", False, None),
        ("displayTimestamp", 2, "uint32", False, None),
        ("target_fid", 3, "uint64", False, "target"),
    ],
    "MessageData": [
        ("type", 1, "MessageType", False, None),
        ("fid", 2, "uint64", False, None),
        ("timestamp", 3, "uint32", False, None),
        ("network", 4, "FarcasterNetwork", False, None),
        ("cast_add_body", 5, "CastAddBody", False, "body"),
        ("cast_remove_body", 6, "CastRemoveBody", False, "body"),
        ("reaction_body", 7, "ReactionBody", False, "body"),
        ("verification_add_address_body", 9, "VerificationAddAddressBody", False, "body"),
        ("verification_remove_body", 10, "VerificationRemoveBody", False, "body"),
        ("user_data_body", 12, "UserDataBody", False, "body"),
        ("link_body", 14, "LinkBody", False, "body"),
    ],
    "Message": [
        ("data", 1, "MessageData", False, None),
        ("hash", 2, "bytes", False, None),
        ("hash_scheme", 3, "HashScheme", False, None),
        ("signature", 4, "bytes", False, None),
        ("signature_scheme", 5, "SignatureScheme", False, None),
        ("signer", 6, "bytes", False, None),
        ("data_bytes", 7, "bytes", False, None),
    ],
}


def _json_name(name: str) -> str:
    return re.sub(r"_([a-z0-9])", lambda m: m.group(1).upper(), name)


def _enum_proto(cls: type[enum.IntEnum], name: str, prefix: str) -> descriptor_pb2.EnumDescriptorProto:
    proto = descriptor_pb2.EnumDescriptorProto(name=name)
    for member in cls:
        proto.value.add(name=f"{prefix}{member.name}", number=int(member))
    return proto


def _message_proto(name: str, fields: list[tuple[str, int, str, bool, str | None]]) -> descriptor_pb2.DescriptorProto:
    enum_names = {proto_name for _, proto_name, _ in _ENUMS}
    proto = descriptor_pb2.DescriptorProto(name=name)
    oneofs: list[str] = []
    for field_name, number, type_name, repeated, oneof in fields:
        f = proto.field.add(
            name=field_name,
            number=number,
            json_name=_json_name(field_name),
            label=_F.LABEL_REPEATED if repeated else _F.LABEL_OPTIONAL,
        )
        if type_name in _SCALARS:
            f.type = _SCALARS[type_name]
        elif type_name in enum_names:
            f.type = _F.TYPE_ENUM
            f.type_name = f".{PACKAGE}.{type_name}"
        else:
            f.type = _F.TYPE_MESSAGE
            f.type_name = f".{PACKAGE}.{type_name}"
        if oneof is not None:
            if oneof not in oneofs:
                oneofs.append(oneof)
                proto.oneof_decl.add(name=oneof)
            f.oneof_index = oneofs.index(oneof)
    return proto


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto(
        name="farcaster/message.proto",
        package=PACKAGE,
        syntax="proto3",
    )
    for cls, name, prefix in _ENUMS:
        file_proto.enum_type.append(_enum_proto(cls, name, prefix))
    for name, fields in _MESSAGES.items():
        file_proto.message_type.append(_message_proto(name, fields))
    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_build_file().SerializeToString())


def _message_class(name: str) -> type[ProtoMessage]:
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.{name}"))


CastId = _message_class("CastId")
Embed = _message_class("Embed")
CastAddBody = _message_class("CastAddBody")
CastRemoveBody = _message_class("CastRemoveBody")
ReactionBody = _message_class("ReactionBody")
VerificationAddAddressBody = _message_class("VerificationAddAddressBody")
VerificationRemoveBody = _message_class("VerificationRemoveBody")
UserDataBody = _message_class("UserDataBody")
LinkBody = _message_class("LinkBody")
MessageData = _message_class("MessageData")
Message = _message_class("Message")


def hex_string_to_bytes(value: str) -> bytes:
    """Decode a hex string, with or without a ``0x`` prefix.

    Raises:
        HexDecodeError: On odd length or non-hex characters.
    """
    digits = value[2:] if value[:2] in ("0x", "0X") else value
    if len(digits) % 2 or not _HEX_RE.fullmatch(digits):
        raise HexDecodeError(f"Invalid hex string: {value!r}")
    return bytes.fromhex(digits)


def bytes_to_hex_string(value: bytes) -> str:
    return "0x" + value.hex()


def encode_message(message: ProtoMessage) -> bytes:
    """Serialize a message to its binary wire form."""
    return message.SerializeToString(deterministic=True)


def decode_message(data: bytes) -> ProtoMessage:
    """Parse a binary ``Message`` envelope.

    Raises:
        google.protobuf.message.DecodeError: If ``data`` is not a valid
            encoding.
    """
    message = Message()
    message.ParseFromString(data)
    return message


def message_to_dict(message: ProtoMessage) -> dict[str, Any]:
    """Render a message the way the hub's JSON API does.

    Keys are camelCase and enums are rendered by name. Bytes fields become
    ``0x`` hex strings, except the envelope's ``signature`` which the hub
    leaves as base64.
    """
    rendered = json_format.MessageToDict(message)
    _hex_bytes_fields(message, rendered)
    return rendered


def _hex_bytes_fields(message: ProtoMessage, rendered: dict[str, Any]) -> None:
    for field, value in message.ListFields():
        key = field.json_name
        if key not in rendered:
            continue
        if field.type == field.TYPE_BYTES:
            if message.DESCRIPTOR.name == "Message" and field.name == "signature":
                continue
            if isinstance(rendered[key], list):
                rendered[key] = [bytes_to_hex_string(v) for v in value]
            else:
                rendered[key] = bytes_to_hex_string(value)
        elif field.type == field.TYPE_MESSAGE:
            if isinstance(rendered[key], list):
                for item, item_rendered in zip(value, rendered[key]):
                    _hex_bytes_fields(item, item_rendered)
            else:
                _hex_bytes_fields(value, rendered[key])


__all__ = [
    "FARCASTER_EPOCH",
    "HASH_LENGTH",
    "MessageType",
    "FarcasterNetwork",
    "HashScheme",
    "SignatureScheme",
    "ReactionType",
    "CastType",
    "Protocol",
    "UserDataType",
    "CastId",
    "Embed",
    "CastAddBody",
    "CastRemoveBody",
    "ReactionBody",
    "VerificationAddAddressBody",
    "VerificationRemoveBody",
    "UserDataBody",
    "LinkBody",
    "MessageData",
    "Message",
    "DecodeError",
    "encode_message",
    "decode_message",
    "message_to_dict",
    "hex_string_to_bytes",
    "bytes_to_hex_string",
]
