"""Key generation and agreement for wallet sessions."""

from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey, X25519PublicKey
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)
from nacl.bindings import crypto_box_beforenm
from nacl.exceptions import CryptoError

from .models import KeyPair
from .types import InvalidKeyError, PUBLIC_KEY_SIZE, SECRET_KEY_SIZE


def generate_keypair() -> KeyPair:
    """
    Generate a random X25519 key pair for a new session.

    Returns:
        KeyPair with raw 32-byte public and secret keys
    """
    private_key = X25519PrivateKey.generate()
    return KeyPair(
        public_key=public_key_to_bytes(private_key.public_key()),
        secret_key=private_key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption()),
    )


def derive_shared_secret(own_secret_key: bytes, peer_public_key: bytes) -> bytes:
    """
    Derive the NaCl box shared key between our secret key and a peer public key.

    This is X25519 followed by HSalsa20, so both sides arrive at the same
    32-byte key from their own secret key and the other's public key.

    Args:
        own_secret_key: Our 32-byte X25519 secret key
        peer_public_key: The peer's 32-byte X25519 public key

    Returns:
        32-byte shared secret

    Raises:
        InvalidKeyError: If either key is malformed
    """
    validate_public_key(peer_public_key)
    if len(own_secret_key) != SECRET_KEY_SIZE:
        raise InvalidKeyError(
            f"Secret key must be {SECRET_KEY_SIZE} bytes, got {len(own_secret_key)}"
        )

    try:
        return crypto_box_beforenm(bytes(peer_public_key), bytes(own_secret_key))
    except CryptoError as e:
        raise InvalidKeyError("Unable to derive shared secret") from e


def validate_public_key(data: bytes) -> None:
    """Check that data is a raw X25519 public key."""
    if len(data) != PUBLIC_KEY_SIZE:
        raise InvalidKeyError(f"Public key must be {PUBLIC_KEY_SIZE} bytes, got {len(data)}")
    public_key_from_bytes(data)


def public_key_to_bytes(public_key: X25519PublicKey) -> bytes:
    """Convert X25519 public key to raw bytes."""
    return public_key.public_bytes(Encoding.Raw, PublicFormat.Raw)


def public_key_from_bytes(data: bytes) -> X25519PublicKey:
    """Create X25519 public key from raw bytes."""
    try:
        return X25519PublicKey.from_public_bytes(bytes(data))
    except ValueError as e:
        raise InvalidKeyError(str(e)) from e
