"""Type definitions for phantomlink."""

from typing import Optional


# Protocol constants
PUBLIC_KEY_SIZE = 32
SECRET_KEY_SIZE = 32
SHARED_SECRET_SIZE = 32
NONCE_SIZE = 24
TAG_SIZE = 16

# Request paths, relative to the wallet's universal link prefix
CONNECT_PATH = "connect"
SIGN_TRANSACTION_PATH = "signTransaction"
SIGN_MESSAGE_PATH = "signMessage"

# Redirect routes the wallet calls back on
ON_CONNECT = "onConnect"
ON_SIGN_TRANSACTION = "onSignTransaction"
ON_SIGN_MESSAGE = "onSignMessage"

# Query parameters
PARAM_DAPP_PUBLIC_KEY = "dapp_encryption_public_key"
PARAM_CLUSTER = "cluster"
PARAM_APP_URL = "app_url"
PARAM_REDIRECT_LINK = "redirect_link"
PARAM_NONCE = "nonce"
PARAM_PAYLOAD = "payload"
PARAM_DATA = "data"
PARAM_WALLET_PUBLIC_KEY = "phantom_encryption_public_key"
PARAM_ERROR_CODE = "errorCode"
PARAM_ERROR_MESSAGE = "errorMessage"


# Exception types
class PhantomError(Exception):
    """Base exception for phantomlink errors."""
    pass


class InvalidKeyError(PhantomError):
    """Key material has the wrong length or format."""
    pass


class DecryptionFailedError(PhantomError):
    """Ciphertext failed authentication."""
    pass


class MalformedEncodingError(PhantomError):
    """Text is not valid base-58, or a required parameter is missing."""
    pass


class MalformedPayloadError(PhantomError):
    """Decrypted bytes do not parse as the expected payload."""
    pass


class NotConnectedError(PhantomError):
    """Operation attempted without an established session."""

    def __init__(self) -> None:
        super().__init__("Wallet is not connected")


class RemoteError(PhantomError):
    """The wallet answered with an error code."""

    def __init__(self, code: str, message: Optional[str] = None) -> None:
        self.code = code
        self.message = message
        detail = f": {message}" if message else ""
        super().__init__(f"Wallet returned error {code}{detail}")
