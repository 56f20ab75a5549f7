"""Configuration for wallet connections."""

from dataclasses import dataclass, replace
from enum import Enum


PHANTOM_BASE_URL = "https://phantom.app/"


class Cluster(Enum):
    """Network the wallet should sign for."""
    MAINNET = "mainnet-beta"
    TESTNET = "testnet"
    DEVNET = "devnet"


@dataclass(frozen=True)
class WalletConfig:
    """Configuration for talking to a deep-link wallet."""

    app_url: str
    """The application's https URL, shown by the wallet and used to parse callbacks."""

    scheme: str
    """Custom redirect prefix the wallet calls back on, e.g. ``myapp://``."""

    cluster: Cluster = Cluster.MAINNET
    """Network identifier sent with the connect request."""

    base_url: str = PHANTOM_BASE_URL
    """Wallet universal link prefix."""

    @classmethod
    def mainnet(cls, app_url: str, scheme: str) -> "WalletConfig":
        """Creates configuration for mainnet-beta."""
        return cls(app_url=app_url, scheme=scheme, cluster=Cluster.MAINNET)

    @classmethod
    def devnet(cls, app_url: str, scheme: str) -> "WalletConfig":
        """Creates configuration for devnet."""
        return cls(app_url=app_url, scheme=scheme, cluster=Cluster.DEVNET)

    def with_base_url(self, base_url: str) -> "WalletConfig":
        """Points requests at a different wallet."""
        return replace(self, base_url=base_url)

    def redirect_link(self, route_id: str) -> str:
        """The redirect link the wallet should answer a request on."""
        return f"{self.scheme}{route_id}"
