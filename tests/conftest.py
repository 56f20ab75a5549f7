"""Shared fixtures for phantomlink tests."""

import pytest

from phantomlink import InMemoryLinking, PhantomClient, WalletConfig

from .fake_wallet import FakeWallet
from .test_vectors import APP_URL, IDENTITY_KEY_HEX, SCHEME, SESSION_ID, SIGNATURE_HEX


@pytest.fixture
def config():
    """Devnet configuration for a test dapp."""
    return WalletConfig.devnet(APP_URL, SCHEME)


@pytest.fixture
def wallet():
    """A wallet that answers every request."""
    return FakeWallet(
        session_id=SESSION_ID,
        identity_key=bytes.fromhex(IDENTITY_KEY_HEX),
        signature=bytes.fromhex(SIGNATURE_HEX),
    )


@pytest.fixture
def linking(wallet):
    """Transport wired so the wallet answers each opened URL immediately."""
    transport = InMemoryLinking()
    transport.responder = lambda url: transport.deliver(wallet.handle(url))
    return transport


@pytest.fixture
def client(linking, config):
    """A disconnected client."""
    return PhantomClient(linking, config)
