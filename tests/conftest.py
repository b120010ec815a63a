import importlib
import json
from itertools import count
from types import SimpleNamespace
from typing import Optional

import pytest

from scripts.config import CONTRACT_NAME, NETWORKS, Config

PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
RECIPIENT = "0x" + "ab" * 20

ENV_VARS = [
    "PRIVATE_KEY",
    "PUBLIC_KEY",
    "CONTRACT_ADDRESS",
    "SNOWTRACE_API_KEY",
    "SNOWTRACE_TOKEN",
    "TOKEN_URI",
    "RPC_URL",
    "GAS_LIMIT",
]

_ids = count(1)


def next_address():
    return "0x" + f"{next(_ids):040x}"


def next_txid():
    return "0x" + f"{next(_ids):064x}"


class FakeChain:
    def __init__(self, height=100):
        self.height = height

    def mine(self, blocks=1):
        self.height += blocks


class FakeReceipt:
    """Mimics brownie's TransactionReceipt, mining blocks while it waits."""

    def __init__(
        self,
        chain: FakeChain,
        status: int = 1,
        contract_address: Optional[str] = None,
        revert_msg: Optional[str] = None,
        error: Optional[Exception] = None,
        automine: bool = True,
    ):
        self.chain = chain
        self.automine = automine
        self.txid = next_txid()
        self.contract_address = contract_address
        self.revert_msg = revert_msg
        self.block_number = None
        self.waits = []
        self._status = status
        self._error = error

    @property
    def status(self):
        return -1 if self.block_number is None else self._status

    @property
    def confirmations(self):
        if self.block_number is None:
            return 0
        return self.chain.height - self.block_number + 1

    def wait(self, required_confs):
        self.waits.append(required_confs)
        if self._error is not None:
            raise self._error
        if self.block_number is None:
            self.chain.mine()
            self.block_number = self.chain.height
        if self.confirmations < required_confs and not self.automine:
            # a dev chain produces no blocks on its own
            raise TimeoutError(f"stuck at {self.confirmations} confirmations")
        while self.confirmations < required_confs:
            self.chain.mine()


class FakeFactory:
    def __init__(
        self, chain: FakeChain, error: Optional[Exception] = None, published=True
    ):
        self.chain = chain
        self.error = error
        self.published = published
        self.deployments = []
        self.calls = []

    def deploy(self, params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        receipt = FakeReceipt(self.chain, contract_address=next_address())
        self.deployments.append(receipt)
        return receipt

    def publish_source(self, contract):
        self.calls.append(("publish_source", contract))
        return self.published

    def __len__(self):
        return len(self.deployments)

    def __getitem__(self, i):
        return SimpleNamespace(address=self.deployments[i].contract_address)


class FakeNft:
    def __init__(
        self, chain: FakeChain, address=None, status=1, error=None, automine=True
    ):
        self.chain = chain
        self.automine = automine
        self.address = address or next_address()
        self.status = status
        self.error = error
        self.minted = []

    def mint(self, recipient, token_uri, params):
        if self.error is not None:
            raise self.error
        self.minted.append((recipient, token_uri, params))
        return FakeReceipt(
            self.chain,
            status=self.status,
            revert_msg="mint reverted",
            automine=self.automine,
        )


class FakeAccounts:
    def __init__(self):
        self.added = []

    def __getitem__(self, i):
        return SimpleNamespace(address="0x" + "00" * 19 + "01")

    def add(self, private_key):
        body = private_key[2:] if private_key.startswith("0x") else private_key
        if len(body) != 64:
            raise ValueError("The private key must be exactly 32 bytes long")
        int(body, 16)
        account = SimpleNamespace(address=next_address(), private_key=private_key)
        self.added.append(account)
        return account


class FakeWeb3:
    def __init__(self, endpoint_uri):
        self.provider = SimpleNamespace(endpoint_uri=endpoint_uri)
        self.connected_to = []

    def connect(self, uri):
        self.connected_to.append(uri)
        self.provider = SimpleNamespace(endpoint_uri=uri)


def load_script(name):
    return importlib.import_module(f"scripts.{name}")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        # setenv first so teardown restores whatever was there before
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def chain():
    return FakeChain()


@pytest.fixture
def fuji_config():
    return Config(
        network=NETWORKS["fuji"], private_key=PRIVATE_KEY, recipient=RECIPIENT
    )


@pytest.fixture
def fake_accounts():
    return FakeAccounts()


@pytest.fixture
def live_network(monkeypatch, fake_accounts):
    """Pretends brownie is connected to Fuji."""
    import scripts.utils

    fake_network = SimpleNamespace(
        chain=SimpleNamespace(id=NETWORKS["fuji"].chain_id),
        web3=FakeWeb3(NETWORKS["fuji"].url),
        is_connected=lambda: True,
        show_active=lambda: NETWORKS["fuji"].network_id,
    )
    monkeypatch.setattr(scripts.utils, "network", fake_network)
    monkeypatch.setattr(scripts.utils, "accounts", fake_accounts)
    return fake_network


@pytest.fixture
def dev_network(monkeypatch, fake_accounts, chain):
    """Pretends brownie launched a local chain that mines only on demand."""
    import scripts.utils

    dev = NETWORKS["development"]
    fake_network = SimpleNamespace(
        chain=SimpleNamespace(id=dev.chain_id, mine=chain.mine),
        web3=FakeWeb3("http://127.0.0.1:8545"),
        is_connected=lambda: True,
        show_active=lambda: dev.network_id,
    )
    monkeypatch.setattr(scripts.utils, "network", fake_network)
    monkeypatch.setattr(scripts.utils, "accounts", fake_accounts)
    return fake_network


@pytest.fixture
def artifact_dir(tmp_path, monkeypatch):
    build = tmp_path / "build" / "contracts"
    build.mkdir(parents=True)
    artifact = {
        "contractName": CONTRACT_NAME,
        "abi": [
            {
                "name": "mint",
                "type": "function",
                "inputs": [
                    {"name": "recipient", "type": "address"},
                    {"name": "tokenURI", "type": "string"},
                ],
                "outputs": [{"name": "", "type": "uint256"}],
                "stateMutability": "nonpayable",
            }
        ],
        "bytecode": "0x6080604052",
    }
    (build / f"{CONTRACT_NAME}.json").write_text(json.dumps(artifact))
    monkeypatch.chdir(tmp_path)
    return build
