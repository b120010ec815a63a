from brownie import network

from scripts.config import DEPLOY_CONFIRMATIONS, load_config
from scripts.nft import deploy, progress
from scripts.utils import abort, connect, dev_miner, get_contract_factory, get_signer


def main():
    try:
        config = load_config(network.show_active())
        connect(config)
        factory = get_contract_factory(config.contract_name)
        signer = get_signer(config)
    except Exception as exc:
        abort(exc)

    listener = progress(DEPLOY_CONFIRMATIONS)
    outcome = deploy(config, factory, signer, listener, dev_miner())
    if not outcome.ok:
        abort(outcome.error)

    print("Contract deployed to:", outcome.receipt.contract_address)
