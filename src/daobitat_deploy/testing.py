"""In-memory ChainClient for exercising the workflow without a node."""

from typing import Dict, List, Optional, Sequence, Tuple

from .chain import wait_for_finality
from .constants import EXECUTION_SUCCEEDED, FINALITY_ACCEPTED_ON_L2
from .types import (
    CompiledArtifact,
    DeclareResult,
    DeployResult,
    TransactionHandle,
    TransactionKind,
    TransactionStatus,
)

ACCEPTED = TransactionStatus(
    finality_status=FINALITY_ACCEPTED_ON_L2, execution_status=EXECUTION_SUCCEEDED
)


class StubChainClient:
    """
    Scripted ChainClient test double.

    Submissions return fixed hashes unless an error is configured for them.
    Finality is driven through the real polling loop over a scripted status
    sequence per transaction kind, on a simulated clock, so timeouts resolve
    instantly. The last scripted status repeats once the sequence runs out.

    Every call is appended to `calls` as (method_name, args).
    """

    def __init__(
        self,
        class_hash: str = "0x1c1a55",
        contract_address: str = "0xc0ffee",
        declare_transaction_hash: str = "0xdec1",
        deploy_transaction_hash: str = "0xdep1",
        declare_error: Optional[Exception] = None,
        deploy_error: Optional[Exception] = None,
        statuses: Optional[Dict[TransactionKind, Sequence[Optional[TransactionStatus]]]] = None,
        poll_error: Optional[Exception] = None,
        timeout: float = 10.0,
        poll_interval: float = 1.0,
    ):
        self.class_hash = class_hash
        self.contract_address = contract_address
        self.declare_transaction_hash = declare_transaction_hash
        self.deploy_transaction_hash = deploy_transaction_hash
        self.declare_error = declare_error
        self.deploy_error = deploy_error
        self.statuses = statuses or {}
        self.poll_error = poll_error
        self.timeout = timeout
        self.poll_interval = poll_interval

        self.calls: List[Tuple[str, tuple]] = []
        self.polls: Dict[str, int] = {}
        self._now = 0.0

    def method_calls(self) -> List[str]:
        return [name for name, _ in self.calls]

    def declare(self, artifact: CompiledArtifact) -> DeclareResult:
        self.calls.append(("declare", (artifact,)))
        if self.declare_error is not None:
            raise self.declare_error
        return DeclareResult(
            handle=TransactionHandle(self.declare_transaction_hash, TransactionKind.DECLARE),
            class_hash=self.class_hash,
        )

    def deploy(self, class_hash: str, constructor_args: List[str]) -> DeployResult:
        self.calls.append(("deploy", (class_hash, list(constructor_args))))
        if self.deploy_error is not None:
            raise self.deploy_error
        return DeployResult(
            handle=TransactionHandle(self.deploy_transaction_hash, TransactionKind.DEPLOY),
            contract_address=self.contract_address,
        )

    def await_finality(self, handle: TransactionHandle) -> TransactionStatus:
        self.calls.append(("await_finality", (handle,)))
        script = list(self.statuses.get(handle.kind, [ACCEPTED]))

        def fetch(transaction_hash: str) -> Optional[TransactionStatus]:
            if self.poll_error is not None:
                raise self.poll_error
            count = self.polls.get(transaction_hash, 0)
            self.polls[transaction_hash] = count + 1
            if not script:
                return None
            return script[min(count, len(script) - 1)]

        return wait_for_finality(
            fetch,
            handle,
            timeout=self.timeout,
            poll_interval=self.poll_interval,
            sleep=self._sleep,
            clock=self._clock,
        )

    def _sleep(self, seconds: float) -> None:
        self._now += seconds

    def _clock(self) -> float:
        return self._now
