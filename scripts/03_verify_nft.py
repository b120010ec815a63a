from brownie import network

from scripts.config import CONTRACT_NAME, load_config
from scripts.nft import verify
from scripts.utils import abort, connect, get_contract_factory, is_live, with_deployed


@with_deployed(CONTRACT_NAME)
def publish(nft, config):
    if not is_live():
        abort("source verification needs a live network")
    factory = get_contract_factory(config.contract_name)
    if not verify(config, factory, nft):
        abort(f"could not verify {nft.address} on {config.network.explorer}")

    print(f"Contract {nft.address} verified")


def main():
    try:
        config = load_config(network.show_active())
        connect(config)
        publish(config)
    except Exception as exc:
        abort(exc)
