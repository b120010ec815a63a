import os
from dataclasses import dataclass

from brownie.utils import color

from scripts.config import (
    DEFAULT_TOKEN_URI,
    DEPLOY_CONFIRMATIONS,
    MINT_CONFIRMATIONS,
    Config,
    ConfigurationError,
)
from scripts.workflow import Listener, Outcome, Stage, TransactionFlow


@dataclass(frozen=True)
class MintRequest:
    recipient: str
    token_uri: str = DEFAULT_TOKEN_URI


def tx_params(config: Config, signer) -> dict:
    # required_confs=0 returns as soon as the transaction is broadcast
    params = {"from": signer, "required_confs": 0}
    if config.network.gas_limit is not None:
        params["gas_limit"] = config.network.gas_limit
    return params


def progress(required_confs: int) -> Listener:
    def listener(stage: Stage, confirmations: int):
        if stage == Stage.Submitted:
            print(
                f"Transaction submitted, waiting for {required_confs} confirmation(s)"
            )
        elif stage == Stage.Pending:
            count = min(confirmations, required_confs)
            blue = color("bright blue")
            print(f"  {blue}{count}/{required_confs}{color} confirmations")

    return listener


def deployment_receipt(result):
    # brownie hands back the contract rather than the receipt when the
    # deployment is already mined by the time it returns
    return getattr(result, "tx", result)


def deploy(config: Config, factory, signer, listener=None, mine=None) -> Outcome:
    flow = TransactionFlow(DEPLOY_CONFIRMATIONS, listener, mine)
    return flow.run(
        lambda: deployment_receipt(factory.deploy(tx_params(config, signer)))
    )


def mint(
    config: Config, contract, signer, request: MintRequest, listener=None, mine=None
) -> Outcome:
    flow = TransactionFlow(MINT_CONFIRMATIONS, listener, mine)
    return flow.run(
        lambda: contract.mint(
            request.recipient, request.token_uri, tx_params(config, signer)
        )
    )


def verify(config: Config, factory, contract) -> bool:
    if not config.explorer_api_key:
        raise ConfigurationError("SNOWTRACE_API_KEY is not set")
    # brownie reads explorer tokens from <EXPLORER>_TOKEN
    os.environ.setdefault("SNOWTRACE_TOKEN", config.explorer_api_key)
    return bool(factory.publish_source(contract))
