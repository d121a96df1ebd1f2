"""
Signers for Farcaster messages and address verification claims.

Messages are signed with an Ed25519 key registered on-chain for the FID
(:class:`Ed25519Signer`, backed by PyNaCl). Address verifications also
need an EIP-712 signature from the address being verified
(:class:`Eip712Signer`, backed by ``eth-account``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol as TypingProtocol, Union, runtime_checkable

import nacl.exceptions
import nacl.signing
from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address

from farcaster_hub_rest.errors import MessageBuildError
from farcaster_hub_rest.protocol import FarcasterNetwork, Protocol, hex_string_to_bytes

EIP_712_FARCASTER_DOMAIN: dict[str, Any] = {
    "name": "Farcaster Verify Ethereum Address",
    "version": "2.0.0",
    # fixed salt defined by the Farcaster protocol
    "salt": bytes.fromhex("f2d857f4a3edcb9b78b4d503bfe733db1e3f6cdc2b7971ee739626c97e86a558"),
}

EIP_712_FARCASTER_VERIFICATION_CLAIM = [
    {"name": "fid", "type": "uint256"},
    {"name": "address", "type": "address"},
    {"name": "blockHash", "type": "bytes32"},
    {"name": "network", "type": "uint8"},
]


@runtime_checkable
class Signer(TypingProtocol):
    """Anything that can sign a Farcaster message hash."""

    def get_signer_key(self) -> bytes:
        """Public key bytes placed in ``Message.signer``."""
        ...

    def sign_message_hash(self, message_hash: bytes) -> bytes:
        """Signature over the 20-byte message hash."""
        ...


SignerLike = Union[str, Signer]


class Ed25519Signer:
    """Ed25519 signer from a 32-byte private key seed."""

    def __init__(self, private_key: bytes) -> None:
        try:
            self._key = nacl.signing.SigningKey(private_key)
        except (nacl.exceptions.ValueError, nacl.exceptions.TypeError) as e:
            raise MessageBuildError(f"Invalid Ed25519 private key: {e}") from e

    def __repr__(self) -> str:
        return f"Ed25519Signer(public_key=0x{self.get_signer_key().hex()})"

    def get_signer_key(self) -> bytes:
        return bytes(self._key.verify_key)

    def sign_message_hash(self, message_hash: bytes) -> bytes:
        return self._key.sign(message_hash).signature


def signer_from_hex(private_key: str) -> Ed25519Signer:
    """Build an :class:`Ed25519Signer` from a hex private key (``0x`` optional).

    Raises:
        HexDecodeError: If ``private_key`` is not valid hex.
    """
    return Ed25519Signer(hex_string_to_bytes(private_key))


def resolve_signer(signer: SignerLike) -> Signer:
    """Normalize a hex private key or a :class:`Signer` into a :class:`Signer`."""
    if isinstance(signer, str):
        return signer_from_hex(signer)
    if not isinstance(signer, Signer):
        raise TypeError(f"Expected a hex private key or Signer, got {type(signer).__name__}")
    return signer


# ============================================================
#  Verification claims
# ============================================================


@dataclass(frozen=True)
class VerificationAddressClaim:
    """The data an address owner signs to prove control of the address."""

    fid: int
    address: str
    network: FarcasterNetwork
    block_hash: bytes
    protocol: Protocol = Protocol.ETHEREUM

    def to_typed_data(self) -> dict[str, Any]:
        return {
            "fid": self.fid,
            "address": self.address,
            "blockHash": self.block_hash,
            "network": int(self.network),
        }


class Eip712Signer:
    """Signs verification claims with an Ethereum account."""

    def __init__(self, account: LocalAccount) -> None:
        self._account = account

    def __repr__(self) -> str:
        return f"Eip712Signer(address={self._account.address})"

    @property
    def address(self) -> str:
        return self._account.address

    def get_signer_key(self) -> bytes:
        """The 20-byte Ethereum address."""
        return bytes.fromhex(self._account.address[2:])

    def sign_verification_claim(self, claim: VerificationAddressClaim, chain_id: int = 0) -> bytes:
        """EIP-712 signature over ``claim``.

        Contract verifications (``chain_id != 0``) bind the chain id into
        the signing domain.
        """
        domain = dict(EIP_712_FARCASTER_DOMAIN)
        if chain_id:
            domain["chainId"] = chain_id
        try:
            signable = encode_typed_data(
                domain_data=domain,
                message_types={"VerificationClaim": EIP_712_FARCASTER_VERIFICATION_CLAIM},
                message_data=claim.to_typed_data(),
            )
            signed = self._account.sign_message(signable)
        except (ValueError, TypeError) as e:
            raise MessageBuildError(f"Failed to sign verification claim: {e}") from e
        return bytes(signed.signature)


def eip712_signer_from_mnemonic_or_private_key(value: str) -> Eip712Signer:
    """Build an :class:`Eip712Signer` from a BIP-39 mnemonic or hex private key.

    Inputs containing whitespace are treated as mnemonics and derived on the
    default Ethereum path.
    """
    value = value.strip()
    try:
        if len(value.split()) > 1:
            Account.enable_unaudited_hdwallet_features()
            account = Account.from_mnemonic(value)
        else:
            account = Account.from_key(value)
    except Exception as e:
        # eth-keys raises its own ValidationError for bad key lengths
        raise MessageBuildError("Invalid verification mnemonic or private key") from e
    return Eip712Signer(account)


def make_verification_address_claim(
    fid: int,
    address: bytes,
    network: FarcasterNetwork,
    block_hash: bytes,
    protocol: Protocol = Protocol.ETHEREUM,
) -> VerificationAddressClaim:
    """Assemble a verification claim, validating its fields.

    Raises:
        MessageBuildError: On an unsupported protocol or malformed field.
    """
    if protocol != Protocol.ETHEREUM:
        raise MessageBuildError(f"Unsupported verification protocol: {protocol.name}")
    if fid <= 0:
        raise MessageBuildError("fid must be positive")
    if len(address) != 20:
        raise MessageBuildError(f"Ethereum address must be 20 bytes, got {len(address)}")
    if len(block_hash) != 32:
        raise MessageBuildError(f"Block hash must be 32 bytes, got {len(block_hash)}")
    return VerificationAddressClaim(
        fid=fid,
        address=to_checksum_address("0x" + address.hex()),
        network=network,
        block_hash=block_hash,
        protocol=protocol,
    )
