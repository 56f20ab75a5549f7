"""
phantomlink - Encrypted deep-link sessions with Phantom-style wallets

Python implementation of the wallet deep-link protocol using X25519 key
agreement + XSalsa20-Poly1305.
"""

from .keys import generate_keypair, derive_shared_secret
from .crypto import encrypt, decrypt, open_envelope
from .codec import (
    Callback,
    encode_binary,
    decode_binary,
    encode_payload,
    decode_payload,
    build_url,
    parse_callback,
)
from .types import (
    NONCE_SIZE,
    PUBLIC_KEY_SIZE,
    ON_CONNECT,
    ON_SIGN_TRANSACTION,
    ON_SIGN_MESSAGE,
    PhantomError,
    InvalidKeyError,
    DecryptionFailedError,
    MalformedEncodingError,
    MalformedPayloadError,
    NotConnectedError,
    RemoteError,
)
from .models import (
    SessionState,
    KeyPair,
    EncryptedEnvelope,
    Session,
    EstablishPayload,
    SignTransactionPayload,
    SignMessagePayload,
    SignTransactionRequest,
    SignMessageRequest,
)
from .config import Cluster, WalletConfig
from .linking import Linking, Subscription, InMemoryLinking
from .waiter import PendingRequest, ResponseWaiter, new_route_id
from .client import PhantomClient

__version__ = "0.1.0"

__all__ = [
    # Keys
    "generate_keypair",
    "derive_shared_secret",
    # Crypto
    "encrypt",
    "decrypt",
    "open_envelope",
    # Codec
    "Callback",
    "encode_binary",
    "decode_binary",
    "encode_payload",
    "decode_payload",
    "build_url",
    "parse_callback",
    # Constants
    "NONCE_SIZE",
    "PUBLIC_KEY_SIZE",
    "ON_CONNECT",
    "ON_SIGN_TRANSACTION",
    "ON_SIGN_MESSAGE",
    # Errors
    "PhantomError",
    "InvalidKeyError",
    "DecryptionFailedError",
    "MalformedEncodingError",
    "MalformedPayloadError",
    "NotConnectedError",
    "RemoteError",
    # Models
    "SessionState",
    "KeyPair",
    "EncryptedEnvelope",
    "Session",
    "EstablishPayload",
    "SignTransactionPayload",
    "SignMessagePayload",
    "SignTransactionRequest",
    "SignMessageRequest",
    # Config
    "Cluster",
    "WalletConfig",
    # Linking
    "Linking",
    "Subscription",
    "InMemoryLinking",
    # Waiter
    "PendingRequest",
    "ResponseWaiter",
    "new_route_id",
    # Client
    "PhantomClient",
]
