"""Tests for key generation and agreement."""

import pytest
from nacl.public import Box, PrivateKey, PublicKey

from phantomlink.keys import derive_shared_secret, generate_keypair
from phantomlink.types import InvalidKeyError


class TestKeyGeneration:
    """Test X25519 key pair generation."""

    def test_key_sizes(self) -> None:
        """Keys are raw 32-byte values."""
        key_pair = generate_keypair()

        assert len(key_pair.public_key) == 32
        assert len(key_pair.secret_key) == 32

    def test_fresh_per_call(self) -> None:
        """Every call yields a new key pair."""
        first = generate_keypair()
        second = generate_keypair()

        assert first.public_key != second.public_key
        assert first.secret_key != second.secret_key

    def test_public_key_matches_secret(self) -> None:
        """The public key is the one NaCl derives from the secret key."""
        key_pair = generate_keypair()

        assert bytes(PrivateKey(key_pair.secret_key).public_key) == key_pair.public_key

    def test_secret_key_not_in_repr(self) -> None:
        key_pair = generate_keypair()

        assert key_pair.secret_key.hex() not in repr(key_pair)


class TestSharedSecret:
    """Test shared-secret derivation."""

    def test_both_sides_agree(self) -> None:
        """Each side derives the same secret from its own secret key."""
        alice = generate_keypair()
        bob = generate_keypair()

        assert derive_shared_secret(alice.secret_key, bob.public_key) == derive_shared_secret(
            bob.secret_key, alice.public_key
        )

    def test_matches_nacl_box(self) -> None:
        """The secret equals NaCl's box.before value."""
        dapp = generate_keypair()
        wallet = PrivateKey.generate()

        expected = Box(wallet, PublicKey(dapp.public_key)).shared_key()

        assert derive_shared_secret(dapp.secret_key, bytes(wallet.public_key)) == expected

    def test_deterministic(self) -> None:
        alice = generate_keypair()
        bob = generate_keypair()

        first = derive_shared_secret(alice.secret_key, bob.public_key)
        second = derive_shared_secret(alice.secret_key, bob.public_key)

        assert first == second
        assert len(first) == 32

    def test_different_peers_differ(self) -> None:
        alice = generate_keypair()

        assert derive_shared_secret(alice.secret_key, generate_keypair().public_key) != (
            derive_shared_secret(alice.secret_key, generate_keypair().public_key)
        )

    def test_invalid_public_key_length(self) -> None:
        """Reject peer keys that are not 32 bytes."""
        alice = generate_keypair()

        with pytest.raises(InvalidKeyError, match="32 bytes"):
            derive_shared_secret(alice.secret_key, b"too short")

        with pytest.raises(InvalidKeyError, match="32 bytes"):
            derive_shared_secret(alice.secret_key, b"x" * 33)

    def test_invalid_secret_key_length(self) -> None:
        """Reject secret keys that are not 32 bytes."""
        bob = generate_keypair()

        with pytest.raises(InvalidKeyError, match="32 bytes"):
            derive_shared_secret(b"x" * 64, bob.public_key)
