"""Tests for payload encryption and decryption."""

import os

import pytest
from nacl.public import Box, PrivateKey, PublicKey

from phantomlink.crypto import decrypt, encrypt, open_envelope
from phantomlink.keys import derive_shared_secret, generate_keypair
from phantomlink.types import DecryptionFailedError, InvalidKeyError, NONCE_SIZE, TAG_SIZE
from .test_vectors import TEST_MESSAGES


@pytest.fixture
def shared_secret():
    """A secret agreed between two fresh key pairs."""
    alice = generate_keypair()
    bob = generate_keypair()
    return derive_shared_secret(alice.secret_key, bob.public_key)


class TestEncryption:
    """Test payload encryption."""

    def test_envelope_shape(self, shared_secret) -> None:
        envelope = encrypt(b"hello", shared_secret)

        assert len(envelope.nonce) == NONCE_SIZE
        assert len(envelope.ciphertext) == len(b"hello") + TAG_SIZE
        assert envelope.sender_public_key is None

    def test_nonce_freshness(self, shared_secret) -> None:
        """Successive calls with the same secret never share a nonce."""
        nonces = {encrypt(b"same plaintext", shared_secret).nonce for _ in range(50)}

        assert len(nonces) == 50

    def test_same_plaintext_different_ciphertext(self, shared_secret) -> None:
        first = encrypt(b"same plaintext", shared_secret)
        second = encrypt(b"same plaintext", shared_secret)

        assert first.ciphertext != second.ciphertext

    def test_invalid_secret_length(self) -> None:
        with pytest.raises(InvalidKeyError, match="32 bytes"):
            encrypt(b"hello", b"short")


class TestDecryption:
    """Test payload decryption."""

    @pytest.mark.parametrize("message_key,message", TEST_MESSAGES.items())
    def test_round_trip(self, shared_secret, message_key, message) -> None:
        envelope = encrypt(message, shared_secret)

        assert decrypt(envelope.ciphertext, envelope.nonce, shared_secret) == message

    def test_open_envelope(self, shared_secret) -> None:
        envelope = encrypt(b"payload", shared_secret)

        assert open_envelope(envelope, shared_secret) == b"payload"

    def test_interoperates_with_nacl_box(self) -> None:
        """A payload sealed by a NaCl box on the other side decrypts here."""
        dapp = generate_keypair()
        wallet = PrivateKey.generate()
        box = Box(wallet, PublicKey(dapp.public_key))
        nonce = os.urandom(NONCE_SIZE)

        sealed = box.encrypt(b'{"session":"abc"}', nonce)
        secret = derive_shared_secret(dapp.secret_key, bytes(wallet.public_key))

        assert decrypt(sealed.ciphertext, nonce, secret) == b'{"session":"abc"}'

        envelope = encrypt(b"reply", secret)
        assert box.decrypt(envelope.ciphertext, envelope.nonce) == b"reply"

    def test_wrong_key_fails(self, shared_secret) -> None:
        envelope = encrypt(b"secret", shared_secret)
        other = derive_shared_secret(generate_keypair().secret_key, generate_keypair().public_key)

        with pytest.raises(DecryptionFailedError):
            decrypt(envelope.ciphertext, envelope.nonce, other)

    def test_tampered_ciphertext_fails(self, shared_secret) -> None:
        """Flipping any bit of the ciphertext is detected."""
        envelope = encrypt(b"transfer 1 SOL", shared_secret)

        for index in range(len(envelope.ciphertext)):
            for bit in (0x01, 0x80):
                tampered = bytearray(envelope.ciphertext)
                tampered[index] ^= bit
                with pytest.raises(DecryptionFailedError):
                    decrypt(bytes(tampered), envelope.nonce, shared_secret)

    def test_tampered_nonce_fails(self, shared_secret) -> None:
        """Flipping any bit of the nonce is detected."""
        envelope = encrypt(b"transfer 1 SOL", shared_secret)

        for index in range(NONCE_SIZE):
            tampered = bytearray(envelope.nonce)
            tampered[index] ^= 0x01
            with pytest.raises(DecryptionFailedError):
                decrypt(envelope.ciphertext, bytes(tampered), shared_secret)

    def test_truncated_ciphertext_fails(self, shared_secret) -> None:
        envelope = encrypt(b"hello", shared_secret)

        with pytest.raises(DecryptionFailedError):
            decrypt(envelope.ciphertext[:TAG_SIZE - 1], envelope.nonce, shared_secret)

    def test_wrong_nonce_length_fails(self, shared_secret) -> None:
        envelope = encrypt(b"hello", shared_secret)

        with pytest.raises(DecryptionFailedError, match="24 bytes"):
            decrypt(envelope.ciphertext, envelope.nonce[:12], shared_secret)
