import sys
from functools import wraps
from typing import Optional, cast

from brownie import Contract, accounts, network, project
from brownie.network.account import LocalAccount

from scripts.artifacts import load_artifact
from scripts.config import Config, ConfigurationError

DEV_CHAIN_IDS = {1337}


def is_live():
    return network.chain.id not in DEV_CHAIN_IDS


def active_endpoint() -> Optional[str]:
    return getattr(network.web3.provider, "endpoint_uri", None)


def connect(config: Config):
    """Connects to the configured network and points web3 at its endpoint.

    Development chains keep the host brownie launched them on.
    """
    if not network.is_connected():
        network.connect(config.network.network_id)
    if is_live() and active_endpoint() != config.network.url:
        network.web3.connect(config.network.url)
    chain_id = network.chain.id
    if chain_id != config.network.chain_id:
        raise ConfigurationError(
            f"connected to chain id {chain_id}, "
            f"expected {config.network.chain_id} ({config.network.name})"
        )


def dev_miner():
    # ganache only mines when a transaction arrives
    if is_live():
        return None
    return network.chain.mine


def get_signer(config: Config):
    if not is_live():
        return accounts[0]
    if not config.private_key:
        raise ConfigurationError("PRIVATE_KEY is not set")
    return cast(LocalAccount, accounts.add(config.private_key))


def get_contract_factory(name: str):
    loaded = project.get_loaded_projects()
    if not loaded:
        raise ConfigurationError("no brownie project loaded")
    factory = getattr(loaded[0], name, None)
    if factory is None:
        raise ConfigurationError(
            f"contract {name} not found in project {loaded[0]._name}"
        )
    return factory


def latest_deployment(name: str) -> Optional[str]:
    try:
        factory = get_contract_factory(name)
    except ConfigurationError:
        return None
    if len(factory) == 0:
        return None
    return factory[-1].address


def abort(reason, code=1):
    print(f"error: {reason}", file=sys.stderr)
    sys.exit(code)


def with_deployed(name: str):
    """Calls the wrapped function with the deployed ``name`` contract first.

    The address comes from ``CONTRACT_ADDRESS`` and falls back to the last
    deployment brownie recorded for the active network. The contract is
    bound to the ABI of its compiled artifact.
    """

    def wrapped(f):
        @wraps(f)
        def wrapper(config: Config, *args, **kwargs):
            address = config.contract_address or latest_deployment(name)
            if address is None:
                abort(f"{name} not deployed, set CONTRACT_ADDRESS")

            artifact = load_artifact(name)
            contract = Contract.from_abi(name, address, artifact.abi)
            return f(contract, config, *args, **kwargs)

        return wrapper

    return wrapped
