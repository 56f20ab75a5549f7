"""Encryption and decryption of wallet payloads."""

from nacl.exceptions import CryptoError
from nacl.secret import SecretBox
from nacl.utils import random

from .models import EncryptedEnvelope
from .types import DecryptionFailedError, InvalidKeyError, NONCE_SIZE, SHARED_SECRET_SIZE


def _box(shared_secret: bytes) -> SecretBox:
    if len(shared_secret) != SHARED_SECRET_SIZE:
        raise InvalidKeyError(
            f"Shared secret must be {SHARED_SECRET_SIZE} bytes, got {len(shared_secret)}"
        )
    return SecretBox(bytes(shared_secret))


def encrypt(plaintext: bytes, shared_secret: bytes) -> EncryptedEnvelope:
    """
    Encrypt a payload under a session's shared secret.

    A fresh random nonce is drawn for every call. Sealing with the precomputed
    box key is XSalsa20-Poly1305, the same construction as NaCl ``box.after``.

    Args:
        plaintext: Bytes to encrypt
        shared_secret: 32-byte key from derive_shared_secret

    Returns:
        EncryptedEnvelope with the nonce and ciphertext
    """
    nonce = random(NONCE_SIZE)
    sealed = _box(shared_secret).encrypt(bytes(plaintext), nonce)
    return EncryptedEnvelope(nonce=sealed.nonce, ciphertext=sealed.ciphertext)


def decrypt(ciphertext: bytes, nonce: bytes, shared_secret: bytes) -> bytes:
    """
    Authenticate and decrypt a payload.

    Args:
        ciphertext: Sealed bytes (payload + 16-byte tag)
        nonce: The 24-byte nonce the payload was sealed with
        shared_secret: 32-byte key from derive_shared_secret

    Returns:
        The plaintext

    Raises:
        DecryptionFailedError: If the ciphertext, nonce or key do not match
    """
    box = _box(shared_secret)

    if len(nonce) != NONCE_SIZE:
        raise DecryptionFailedError(f"Nonce must be {NONCE_SIZE} bytes, got {len(nonce)}")

    try:
        return box.decrypt(bytes(ciphertext), bytes(nonce))
    except CryptoError as e:
        raise DecryptionFailedError("Unable to decrypt data") from e


def open_envelope(envelope: EncryptedEnvelope, shared_secret: bytes) -> bytes:
    """Decrypt an EncryptedEnvelope."""
    return decrypt(envelope.ciphertext, envelope.nonce, shared_secret)
