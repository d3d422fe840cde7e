"""Data types and dataclasses for daobitat-deploy."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import (
    EXECUTION_REVERTED,
    FINALITY_ACCEPTED_ON_L1,
    FINALITY_ACCEPTED_ON_L2,
    FINALITY_REJECTED,
)


@dataclass(frozen=True)
class Credentials:
    """Canonical signing credentials for one deployment run."""

    signing_key: str = field(repr=False)  # Hex digits, no 0x marker
    account_address: str  # Always 0x-prefixed


@dataclass(frozen=True)
class CompiledArtifact:
    """A compiled Sierra contract class loaded from disk."""

    class_definition: Dict[str, Any]
    path: Path
    class_hash: Optional[str] = None  # Hash embedded by the build, if any
    casm_definition: Optional[Dict[str, Any]] = None


class TransactionKind(Enum):
    """Kinds of transaction submitted by the workflow."""

    DECLARE = "declare"
    DEPLOY = "deploy"


@dataclass(frozen=True)
class TransactionHandle:
    """A submitted transaction awaiting finality."""

    transaction_hash: str
    kind: TransactionKind


@dataclass(frozen=True)
class TransactionStatus:
    """Status reported by starknet_getTransactionStatus."""

    finality_status: str
    execution_status: Optional[str] = None
    failure_reason: Optional[str] = None

    @property
    def is_rejected(self) -> bool:
        return (
            self.finality_status == FINALITY_REJECTED
            or self.execution_status == EXECUTION_REVERTED
        )

    @property
    def is_accepted(self) -> bool:
        return (
            self.finality_status in (FINALITY_ACCEPTED_ON_L2, FINALITY_ACCEPTED_ON_L1)
            and not self.is_rejected
        )

    @property
    def is_terminal(self) -> bool:
        return self.is_accepted or self.is_rejected


@dataclass(frozen=True)
class DeclareResult:
    handle: TransactionHandle
    class_hash: str  # Network-assigned


@dataclass(frozen=True)
class DeployResult:
    handle: TransactionHandle
    contract_address: str


@dataclass(frozen=True)
class DeploymentRecord:
    """Outcome of a fully confirmed deployment."""

    contract_address: str
    class_hash: str
    transaction_hash: str  # Deploy transaction
    network: str
    timestamp: str  # ISO 8601, UTC

    def to_dict(self) -> Dict[str, str]:
        """Serialize using the key names of deployment-info.json."""
        return {
            "contractAddress": self.contract_address,
            "classHash": self.class_hash,
            "transactionHash": self.transaction_hash,
            "network": self.network,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeploymentRecord":
        return cls(
            contract_address=data["contractAddress"],
            class_hash=data["classHash"],
            transaction_hash=data["transactionHash"],
            network=data["network"],
            timestamp=data["timestamp"],
        )


class DeploymentState(Enum):
    """
    Workflow states, in order.

    Any state may move to FAILED; RECORD_PERSISTED and FAILED are terminal.
    """

    START = "start"
    CREDENTIALS_RESOLVED = "credentials_resolved"
    ARTIFACT_LOADED = "artifact_loaded"
    DECLARED = "declared"
    DECLARE_CONFIRMED = "declare_confirmed"
    DEPLOYED = "deployed"
    DEPLOY_CONFIRMED = "deploy_confirmed"
    RECORD_PERSISTED = "record_persisted"
    FAILED = "failed"


@dataclass
class DeploymentOutcome:
    """Accumulated results of one workflow run."""

    state: DeploymentState = DeploymentState.START
    last_completed_state: DeploymentState = DeploymentState.START
    error: Optional[Exception] = None

    class_hash: Optional[str] = None
    declare_transaction_hash: Optional[str] = None
    contract_address: Optional[str] = None
    transaction_hash: Optional[str] = None
    record: Optional[DeploymentRecord] = None

    @property
    def succeeded(self) -> bool:
        return self.state is DeploymentState.RECORD_PERSISTED

    @property
    def failure_kind(self) -> Optional[str]:
        """Name of the error class that ended the run, if it failed."""
        if self.error is None:
            return None
        return type(self.error).__name__

    @property
    def is_deployed(self) -> bool:
        """True once the deploy transaction is confirmed on-chain."""
        return self.last_completed_state in (
            DeploymentState.DEPLOY_CONFIRMED,
            DeploymentState.RECORD_PERSISTED,
        )
