"""
Phantom deep-link client.

The PhantomClient establishes an encrypted session with a wallet reachable
only through deep links, then asks it to sign transactions and messages.
"""

import logging
from typing import Optional

from .codec import (
    Callback,
    build_url,
    decode_binary,
    decode_payload,
    encode_binary,
    encode_payload,
)
from .config import WalletConfig
from .crypto import decrypt, encrypt
from .keys import derive_shared_secret, generate_keypair
from .linking import Linking
from .models import (
    EstablishPayload,
    Session,
    SessionState,
    SignMessagePayload,
    SignMessageRequest,
    SignTransactionPayload,
    SignTransactionRequest,
)
from .types import (
    CONNECT_PATH,
    InvalidKeyError,
    NotConnectedError,
    ON_CONNECT,
    ON_SIGN_MESSAGE,
    ON_SIGN_TRANSACTION,
    PARAM_APP_URL,
    PARAM_CLUSTER,
    PARAM_DAPP_PUBLIC_KEY,
    PARAM_DATA,
    PARAM_NONCE,
    PARAM_PAYLOAD,
    PARAM_REDIRECT_LINK,
    PARAM_WALLET_PUBLIC_KEY,
    PUBLIC_KEY_SIZE,
    SIGN_MESSAGE_PATH,
    SIGN_TRANSACTION_PATH,
)
from .waiter import PendingRequest, ResponseHandler, ResponseWaiter, T, new_route_id

logger = logging.getLogger(__name__)

MESSAGE_DISPLAY_FORMATS = ("utf8", "hex")


class PhantomClient:
    """
    Session client for a deep-link wallet.

    Example usage:
        ```python
        client = PhantomClient(
            linking=my_linking,
            config=WalletConfig.devnet("https://myapp.example", "myapp://"),
        )

        session = await client.establish()
        signed = await client.sign_transaction(serialized_tx)
        signature = await client.sign_message(b"hello")
        client.disconnect()
        ```

    Several requests may be in flight at once; each waits on its own
    callback route. Redirect links carry a per-request suffix
    (``myapp://onConnect/<id>``), so the transport must deliver the
    wallet's callback on exactly the redirect link it was given; a callback
    on a bare ``onConnect`` path is not matched.

    Only the most recent ``establish`` may change the session. An older
    attempt that finishes later, whether it succeeds or fails, leaves the
    current state alone.
    """

    def __init__(self, linking: Linking, config: WalletConfig) -> None:
        """
        Initialize the client.

        Args:
            linking: Transport used to open requests and receive callbacks.
            config: Wallet and application configuration.
        """
        self.linking = linking
        self.config = config
        self._waiter = ResponseWaiter(linking, config)
        self._session: Optional[Session] = None
        self._attempt: Optional[str] = None
        self._state = SessionState.DISCONNECTED

    @property
    def state(self) -> SessionState:
        """Current connection state."""
        return self._state

    @property
    def session(self) -> Optional[Session]:
        """The established session, or None."""
        return self._session

    @property
    def connected(self) -> bool:
        return self._state == SessionState.CONNECTED

    @property
    def connecting(self) -> bool:
        return self._state == SessionState.CONNECTING

    @property
    def public_key(self) -> Optional[bytes]:
        """The wallet's identity key (32 bytes), or None when disconnected."""
        return self._session.public_key if self._session else None

    # MARK: - Session

    async def establish(self) -> Session:
        """
        Connect to the wallet and install a new session.

        Returns:
            The established Session.

        Raises:
            RemoteError: If the wallet rejects the connection.
            DecryptionFailedError: If the response does not authenticate.
            MalformedPayloadError: If the response body is not a connect payload.
            MalformedEncodingError: If a response parameter is missing or not base-58.
            InvalidKeyError: If the wallet's encryption key is malformed.
        """
        key_pair = generate_keypair()
        route_id = new_route_id(ON_CONNECT)

        self._attempt = route_id
        self._session = None
        self._state = SessionState.CONNECTING

        def on_response(callback: Callback) -> Session:
            wallet_key = callback.require_binary(PARAM_WALLET_PUBLIC_KEY)
            shared_secret = derive_shared_secret(key_pair.secret_key, wallet_key)

            payload = EstablishPayload.from_dict(
                self._open(callback, shared_secret)
            )
            identity_key = decode_binary(payload.public_key)
            if len(identity_key) != PUBLIC_KEY_SIZE:
                raise InvalidKeyError(
                    f"Wallet public key must be {PUBLIC_KEY_SIZE} bytes, got {len(identity_key)}"
                )

            return Session(
                id=payload.session,
                key_pair=key_pair,
                shared_secret=shared_secret,
                public_key=identity_key,
            )

        params = {
            PARAM_DAPP_PUBLIC_KEY: encode_binary(key_pair.public_key),
            PARAM_CLUSTER: self.config.cluster.value,
            PARAM_APP_URL: self.config.app_url,
            PARAM_REDIRECT_LINK: self.config.redirect_link(route_id),
        }

        try:
            pending = self._waiter.wait_for(route_id, on_response)
            session = await self._dispatch(CONNECT_PATH, params, pending)
        except BaseException:
            if self._attempt == route_id:
                self._attempt = None
                self._session = None
                self._state = SessionState.DISCONNECTED
            raise

        if self._attempt != route_id:
            logger.info("Discarding session from superseded connect attempt")
            return session

        self._attempt = None
        self._session = session
        self._state = SessionState.CONNECTED
        logger.info("Wallet session established")
        return session

    def disconnect(self) -> None:
        """Drop the session. Local only; the wallet is not notified."""
        if self._session is not None:
            logger.info("Wallet session cleared")
        self._attempt = None
        self._session = None
        self._state = SessionState.DISCONNECTED

    # MARK: - Signing

    async def sign_transaction(self, transaction: bytes) -> bytes:
        """
        Ask the wallet to sign a serialized transaction.

        Args:
            transaction: The serialized, unsigned transaction.

        Returns:
            The serialized transaction as returned by the wallet.

        Raises:
            NotConnectedError: If there is no session; nothing is dispatched.
        """
        session = self._require_session()
        request = SignTransactionRequest(
            session=session.id,
            transaction=encode_binary(transaction),
        )

        def on_response(callback: Callback) -> bytes:
            payload = SignTransactionPayload.from_dict(
                self._open(callback, session.shared_secret)
            )
            return decode_binary(payload.transaction)

        return await self._signed_request(
            session, SIGN_TRANSACTION_PATH, ON_SIGN_TRANSACTION, request.to_dict(), on_response
        )

    async def sign_message(self, message: bytes, display: str = "utf8") -> bytes:
        """
        Ask the wallet to sign an arbitrary message.

        Args:
            message: The message bytes.
            display: How the wallet shows the message, "utf8" or "hex".

        Returns:
            The raw signature bytes.

        Raises:
            NotConnectedError: If there is no session; nothing is dispatched.
        """
        session = self._require_session()
        if display not in MESSAGE_DISPLAY_FORMATS:
            raise ValueError(f"Unsupported display format: {display}")

        request = SignMessageRequest(
            session=session.id,
            message=encode_binary(message),
            display=display,
        )

        def on_response(callback: Callback) -> bytes:
            payload = SignMessagePayload.from_dict(
                self._open(callback, session.shared_secret)
            )
            return decode_binary(payload.signature)

        return await self._signed_request(
            session, SIGN_MESSAGE_PATH, ON_SIGN_MESSAGE, request.to_dict(), on_response
        )

    # MARK: - Private Helpers

    def _require_session(self) -> Session:
        session = self._session
        if session is None:
            raise NotConnectedError()
        return session

    async def _signed_request(
        self,
        session: Session,
        path: str,
        route: str,
        body: dict,
        handler: ResponseHandler[T],
    ) -> T:
        """Encrypt body under the session and send it to the wallet."""
        route_id = new_route_id(route)
        envelope = encrypt(encode_payload(body), session.shared_secret)

        params = {
            PARAM_DAPP_PUBLIC_KEY: encode_binary(session.key_pair.public_key),
            PARAM_NONCE: encode_binary(envelope.nonce),
            PARAM_REDIRECT_LINK: self.config.redirect_link(route_id),
            PARAM_PAYLOAD: encode_binary(envelope.ciphertext),
        }

        pending = self._waiter.wait_for(route_id, handler)
        return await self._dispatch(path, params, pending)

    async def _dispatch(self, path: str, params: dict, pending: PendingRequest[T]) -> T:
        """Open the request URL, then wait for its callback."""
        url = build_url(self.config.base_url, path, params)
        try:
            await self.linking.open_url(url)
        except BaseException:
            pending.cancel()
            raise

        logger.debug("Dispatched %s, waiting on %s", path, pending.route_id)
        return await pending

    @staticmethod
    def _open(callback: Callback, shared_secret: bytes) -> dict:
        """Decrypt and parse the data/nonce pair of a callback."""
        plaintext = decrypt(
            callback.require_binary(PARAM_DATA),
            callback.require_binary(PARAM_NONCE),
            shared_secret,
        )
        return decode_payload(plaintext)
