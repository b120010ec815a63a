from brownie import network

from scripts.config import CONTRACT_NAME, MINT_CONFIRMATIONS, load_config
from scripts.nft import MintRequest, mint, progress
from scripts.utils import abort, connect, dev_miner, get_signer, with_deployed


@with_deployed(CONTRACT_NAME)
def mint_token(nft, config):
    signer = get_signer(config)
    request = MintRequest(config.recipient, config.token_uri)
    listener = progress(MINT_CONFIRMATIONS)
    outcome = mint(config, nft, signer, request, listener, dev_miner())
    if not outcome.ok:
        abort(f"something went wrong: {outcome.error}")

    print(f"Your transaction is confirmed, its receipt is: {outcome.receipt.txid}")


def main():
    print(f"Waiting {MINT_CONFIRMATIONS} blocks for confirmation...")
    try:
        config = load_config(network.show_active())
        connect(config)
        mint_token(config)
    except Exception as exc:
        abort(f"something went wrong: {exc}")
