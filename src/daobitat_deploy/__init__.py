"""
daobitat-deploy: declare and deploy the Daobitat RentalContract to Starknet
"""

from importlib.metadata import PackageNotFoundError, version

from .artifacts import load_artifact
from .chain import ChainClient, StarknetChainClient
from .config import DeployConfig
from .credentials import resolve_credentials
from .deployments import DeploymentOrchestrator, deploy
from .exceptions import (
    ArtifactNotFoundError,
    ArtifactParseError,
    ClassHashMismatchError,
    ConfigurationError,
    DeploymentError,
    FinalityTimeoutError,
    MissingCredentialError,
    NetworkError,
    PersistenceError,
    RejectedTransactionError,
)
from .records import load_deployment_record, write_deployment_record
from .types import (
    CompiledArtifact,
    Credentials,
    DeploymentOutcome,
    DeploymentRecord,
    DeploymentState,
    TransactionHandle,
    TransactionKind,
    TransactionStatus,
)

try:
    __version__ = version("daobitat-deploy")
except PackageNotFoundError:
    __version__ = None

__all__ = [
    "DeploymentOrchestrator",
    "deploy",
    "DeployConfig",
    "ChainClient",
    "StarknetChainClient",
    "resolve_credentials",
    "load_artifact",
    "write_deployment_record",
    "load_deployment_record",
    "Credentials",
    "CompiledArtifact",
    "TransactionKind",
    "TransactionHandle",
    "TransactionStatus",
    "DeploymentRecord",
    "DeploymentState",
    "DeploymentOutcome",
    "DeploymentError",
    "ConfigurationError",
    "MissingCredentialError",
    "ArtifactNotFoundError",
    "ArtifactParseError",
    "ClassHashMismatchError",
    "NetworkError",
    "FinalityTimeoutError",
    "RejectedTransactionError",
    "PersistenceError",
]
