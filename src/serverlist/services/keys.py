# src/serverlist/services/keys.py
from __future__ import annotations
from dataclasses import dataclass, field
import base64, hashlib, struct

from cryptography.hazmat.primitives.asymmetric import ed25519
from cryptography.hazmat.primitives import serialization

# 16-byte algorithm specifier used by the Sia binary encoding
_ED25519_SPECIFIER = b"ed25519".ljust(16, b"\x00")
_SKYLINK_V2_BITFIELD = 1


def _hash(*parts: bytes) -> bytes:
    return hashlib.blake2b(b"".join(parts), digest_size=32).digest()


def _sia_bytes(data: bytes) -> bytes:
    """Length-prefixed byte slice, as the Sia encoder writes it."""
    return struct.pack("<Q", len(data)) + data


def _sia_u64(n: int) -> bytes:
    return struct.pack("<Q", n)


@dataclass(frozen=True)
class StoreKeys:
    """Keypair and tweak that address the shared record."""

    private_key: ed25519.Ed25519PrivateKey = field(repr=False)
    public_key: bytes
    tweak: bytes

    @classmethod
    def from_entropy(cls, entropy: bytes, tweak: bytes) -> "StoreKeys":
        """Deterministic keypair: the 32-byte entropy is the ed25519 seed."""
        if len(entropy) != 32 or len(tweak) != 32:
            raise ValueError("entropy and tweak must be 32 bytes each")
        priv = ed25519.Ed25519PrivateKey.from_private_bytes(entropy)
        pub = priv.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        return cls(private_key=priv, public_key=pub, tweak=tweak)

    def public_key_string(self) -> str:
        return f"ed25519:{self.public_key.hex()}"

    def entry_id(self) -> bytes:
        return _hash(_ED25519_SPECIFIER, _sia_bytes(self.public_key), self.tweak)

    def locator(self) -> str:
        """Skynet v2 skylink pointing at the record."""
        raw = struct.pack("<H", _SKYLINK_V2_BITFIELD) + self.entry_id()
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    def entry_hash(self, data: bytes, revision: int) -> bytes:
        return _hash(self.tweak, _sia_bytes(data), _sia_u64(revision))

    def sign_entry(self, data: bytes, revision: int) -> bytes:
        return self.private_key.sign(self.entry_hash(data, revision))
