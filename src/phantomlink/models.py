"""Models for wallet sessions and the payloads exchanged with the wallet."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .codec import encode_binary
from .types import MalformedPayloadError


class SessionState(Enum):
    """Connection state of a client."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


@dataclass(frozen=True)
class KeyPair:
    """An X25519 key pair in raw form."""
    public_key: bytes  # 32 bytes
    secret_key: bytes = field(repr=False)  # 32 bytes


@dataclass(frozen=True)
class EncryptedEnvelope:
    """
    An encrypted payload as it travels in a URL.

    Attributes:
        nonce: 24 random bytes, unique per envelope.
        ciphertext: Sealed payload (plaintext + 16-byte tag).
        sender_public_key: Wallet encryption key, only set on connect responses.
    """
    nonce: bytes
    ciphertext: bytes
    sender_public_key: Optional[bytes] = None


@dataclass(frozen=True)
class Session:
    """
    An established wallet session.

    A session is immutable and is only ever installed or dropped as a whole.

    Attributes:
        id: Opaque session token issued by the wallet.
        key_pair: The dapp key pair generated for this session.
        shared_secret: Symmetric key agreed with the wallet.
        public_key: The wallet's identity key (32 bytes).
    """
    id: str
    key_pair: KeyPair
    shared_secret: bytes = field(repr=False)
    public_key: bytes

    @property
    def address(self) -> str:
        """The wallet identity key in base-58 form."""
        return encode_binary(self.public_key)


def _require_str(data: dict[str, Any], name: str, kind: str) -> str:
    value = data.get(name)
    if not isinstance(value, str) or not value:
        raise MalformedPayloadError(f"{kind} payload is missing string field '{name}'")
    return value


@dataclass(frozen=True)
class EstablishPayload:
    """Decrypted body of a connect response."""
    session: str
    public_key: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EstablishPayload":
        return cls(
            session=_require_str(data, "session", "connect"),
            public_key=_require_str(data, "public_key", "connect"),
        )


@dataclass(frozen=True)
class SignTransactionPayload:
    """Decrypted body of a signTransaction response."""
    transaction: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SignTransactionPayload":
        return cls(transaction=_require_str(data, "transaction", "signTransaction"))


@dataclass(frozen=True)
class SignMessagePayload:
    """Decrypted body of a signMessage response."""
    signature: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SignMessagePayload":
        return cls(signature=_require_str(data, "signature", "signMessage"))


@dataclass(frozen=True)
class SignTransactionRequest:
    """Body of a signTransaction request."""
    session: str
    transaction: str

    def to_dict(self) -> dict[str, Any]:
        return {"session": self.session, "transaction": self.transaction}


@dataclass(frozen=True)
class SignMessageRequest:
    """Body of a signMessage request."""
    session: str
    message: str
    display: str = "utf8"

    def to_dict(self) -> dict[str, Any]:
        return {"session": self.session, "message": self.message, "display": self.display}
