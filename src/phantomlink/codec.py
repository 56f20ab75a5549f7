"""
Wire encoding for wallet requests and callbacks.

Binary values travel as base-58 text in URL query parameters. Payloads are
UTF-8 JSON before encryption.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import parse_qs, urlencode, urlsplit

import base58

from .types import MalformedEncodingError, MalformedPayloadError

BASE58_ALPHABET = frozenset(base58.BITCOIN_ALPHABET.decode("ascii"))


@dataclass(frozen=True)
class Callback:
    """An inbound callback URL split into its route and query parameters."""
    route: str
    params: dict[str, str] = field(default_factory=dict)

    def matches(self, route_id: str) -> bool:
        """Whether this callback was sent to the given route id."""
        return self.route == route_id or self.route.endswith("/" + route_id)

    def require(self, name: str) -> str:
        """Return a query parameter, failing if it is absent or empty."""
        value = self.params.get(name)
        if not value:
            raise MalformedEncodingError(f"Callback for {self.route} is missing '{name}'")
        return value

    def require_binary(self, name: str) -> bytes:
        """Return a base-58 query parameter as bytes."""
        return decode_binary(self.require(name))


def encode_binary(data: bytes) -> str:
    """Encode bytes as base-58 text."""
    return base58.b58encode(bytes(data)).decode("ascii")


def decode_binary(text: str) -> bytes:
    """
    Decode base-58 text into bytes.

    Raises:
        MalformedEncodingError: If text contains characters outside the alphabet
    """
    if not isinstance(text, str):
        raise MalformedEncodingError(f"Expected base-58 text, got {type(text).__name__}")

    invalid = set(text) - BASE58_ALPHABET
    if invalid:
        raise MalformedEncodingError(f"Invalid base-58 characters: {sorted(invalid)!r}")

    try:
        return base58.b58decode(text)
    except ValueError as e:
        raise MalformedEncodingError(f"Invalid base-58 text: {e}") from e


def encode_payload(payload: Mapping[str, Any]) -> bytes:
    """Serialize a payload to canonical UTF-8 JSON."""
    return json.dumps(dict(payload), sort_keys=True, separators=(",", ":")).encode("utf-8")


def decode_payload(data: bytes) -> dict[str, Any]:
    """
    Parse decrypted bytes as a JSON object.

    Raises:
        MalformedPayloadError: If data is not a UTF-8 JSON object
    """
    try:
        payload = json.loads(bytes(data).decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedPayloadError(f"Payload is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedPayloadError(f"Payload must be a JSON object, got {type(payload).__name__}")

    return payload


def build_url(base_url: str, path: str, params: Mapping[str, str]) -> str:
    """
    Build a wallet request URL.

    Format: {base_url}ul/v1/{path}?{query}
    """
    if not base_url.endswith("/"):
        base_url += "/"
    return f"{base_url}ul/v1/{path}?{urlencode(dict(params))}"


def parse_callback(url: str, scheme: str, app_url: str) -> Callback:
    """
    Parse an inbound callback URL.

    A custom-scheme URL such as ``myapp://onConnect/ab12?data=...`` is first
    rewritten onto ``app_url`` so it parses like any https URL.

    Args:
        url: The URL delivered by the transport
        scheme: The custom redirect prefix, e.g. ``myapp://``
        app_url: The application's https URL

    Returns:
        Callback with the route (path without surrounding slashes) and the
        first value of each query parameter
    """
    if scheme and url.startswith(scheme):
        url = app_url.rstrip("/") + "/" + url[len(scheme):]

    try:
        parsed = urlsplit(url)
    except ValueError as e:
        raise MalformedEncodingError(f"Unparseable callback URL: {e}") from e

    query = parse_qs(parsed.query, keep_blank_values=True)
    params = {name: values[0] for name, values in query.items()}
    return Callback(route=parsed.path.strip("/"), params=params)
