import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

CONTRACT_NAME = "AnkrAvalancheNFT"

DEPLOY_CONFIRMATIONS = 1
MINT_CONFIRMATIONS = 5

DEFAULT_TOKEN_URI = (
    "https://ipfs.io/ipfs/"
    "bafybeib3skazl2dhjctsmiroc6ug5zketfooovt53ast5pxytcan2n3zba/avaxankr.json"
)


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    network_id: str
    url: str
    chain_id: int
    gas_limit: Optional[int] = None
    explorer: Optional[str] = None


NETWORKS = {
    "avalanche": NetworkConfig(
        name="avalanche",
        network_id="avax-main",
        url="https://rpc.ankr.com/avalanche",
        chain_id=43114,
        explorer="https://api.snowtrace.io/api",
    ),
    "fuji": NetworkConfig(
        name="fuji",
        network_id="avax-test",
        url="https://rpc.ankr.com/avalanche_fuji",
        chain_id=43113,
        explorer="https://api-testnet.snowtrace.io/api",
    ),
    "development": NetworkConfig(
        name="development",
        network_id="development",
        url="http://127.0.0.1:8545",
        chain_id=1337,
    ),
}


@dataclass(frozen=True)
class Config:
    network: NetworkConfig
    private_key: Optional[str] = None
    recipient: Optional[str] = None
    contract_address: Optional[str] = None
    explorer_api_key: Optional[str] = None
    token_uri: str = DEFAULT_TOKEN_URI
    contract_name: str = CONTRACT_NAME


def get_network(name: str) -> NetworkConfig:
    """Looks up a network preset either by its short name or its brownie id."""
    for network in NETWORKS.values():
        if name in (network.name, network.network_id):
            return network
    raise ConfigurationError(f"network {name} not yet supported")


def _normalize_key(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    value = value.strip()
    return value if value.startswith("0x") else f"0x{value}"


def _parse_gas_limit(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"invalid GAS_LIMIT {value!r}") from None


def load_config(network_name: str, environ: Mapping[str, str] = os.environ) -> Config:
    """Builds the configuration for one invocation from the environment.

    Nothing is checked for presence here: a missing credential or address
    is left as ``None`` and fails at the point where it is first used.
    """
    network = get_network(network_name)
    overrides = {}
    if environ.get("RPC_URL"):
        overrides["url"] = environ["RPC_URL"]
    gas_limit = _parse_gas_limit(environ.get("GAS_LIMIT"))
    if gas_limit is not None:
        overrides["gas_limit"] = gas_limit
    if overrides:
        network = replace(network, **overrides)

    return Config(
        network=network,
        private_key=_normalize_key(environ.get("PRIVATE_KEY")),
        recipient=environ.get("PUBLIC_KEY") or None,
        contract_address=environ.get("CONTRACT_ADDRESS") or None,
        explorer_api_key=environ.get("SNOWTRACE_API_KEY") or None,
        token_uri=environ.get("TOKEN_URI") or DEFAULT_TOKEN_URI,
    )
