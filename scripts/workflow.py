"""Linear submit -> confirm workflow shared by every on-chain action.

A transaction moves through ``Idle -> Submitted -> Pending(n) -> Confirmed``
or ends in ``Failed`` from any stage. Failures are never retried: the error
raised by the client is kept on the returned ``Outcome`` as is.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional


class Stage(Enum):
    Idle = "idle"
    Submitted = "submitted"
    Pending = "pending"
    Confirmed = "confirmed"
    Failed = "failed"


class TransactionFailed(Exception):
    def __init__(self, receipt, message: Optional[str] = None):
        self.receipt = receipt
        if message is None:
            revert_msg = getattr(receipt, "revert_msg", None)
            message = f"transaction {receipt.txid} reverted"
            if revert_msg:
                message += f": {revert_msg}"
        super().__init__(message)


@dataclass(frozen=True)
class Outcome:
    stage: Stage
    receipt: Any = None
    error: Optional[BaseException] = None
    confirmations: int = 0

    @property
    def ok(self) -> bool:
        return self.stage == Stage.Confirmed


Listener = Callable[[Stage, int], None]
Miner = Callable[[int], Any]


class TransactionFlow:
    def __init__(
        self,
        required_confs: int,
        listener: Optional[Listener] = None,
        mine: Optional[Miner] = None,
    ):
        self.required_confs = max(required_confs, 1)
        self.stage = Stage.Idle
        self.confirmations = 0
        self.receipt = None
        self._listener = listener
        # set on chains that only produce a block when a transaction arrives
        self._mine = mine

    def run(self, submit: Callable[[], Any]) -> Outcome:
        """Broadcasts through ``submit`` and blocks until enough confirmations.

        ``submit`` must send the transaction without waiting for it to be
        mined and return its receipt.
        """
        if self.stage != Stage.Idle:
            raise RuntimeError(f"transaction flow already {self.stage.value}")
        try:
            self.receipt = submit()
            self._transition(Stage.Submitted)
            self._await_confirmations(self.receipt)
        except Exception as exc:
            self._transition(Stage.Failed, self.confirmations)
            return Outcome(Stage.Failed, self.receipt, exc, self.confirmations)

        self._transition(Stage.Confirmed, self.confirmations)
        return Outcome(Stage.Confirmed, self.receipt, None, self.confirmations)

    def _await_confirmations(self, receipt):
        receipt.wait(1)
        if receipt.status != 1:
            raise TransactionFailed(receipt)
        self._transition(Stage.Pending, max(receipt.confirmations, 1))
        while self.confirmations < self.required_confs:
            target = self.confirmations + 1
            if self._mine is not None and receipt.confirmations < target:
                self._mine(target - receipt.confirmations)
            receipt.wait(target)
            self._transition(Stage.Pending, max(receipt.confirmations, target))

    def _transition(self, stage: Stage, confirmations: int = 0):
        self.stage = stage
        self.confirmations = confirmations
        if self._listener is not None:
            self._listener(stage, confirmations)
