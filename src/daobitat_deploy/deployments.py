"""Main API for daobitat-deploy: the declare -> deploy workflow."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from .artifacts import load_artifact
from .chain import ChainClient, StarknetChainClient
from .config import DeployConfig
from .credentials import resolve_credentials
from .exceptions import ClassHashMismatchError, DeploymentError
from .records import write_deployment_record
from .types import (
    CompiledArtifact,
    Credentials,
    DeploymentOutcome,
    DeploymentRecord,
    DeploymentState,
)

ChainClientFactory = Callable[[DeployConfig, Credentials], ChainClient]
RecordWriter = Callable[[DeploymentRecord, Path], Path]


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with milliseconds, e.g. 2024-05-01T12:00:00.000Z."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _same_hash(left: str, right: str) -> bool:
    try:
        return int(left, 16) == int(right, 16)
    except ValueError:
        return left.lower() == right.lower()


class DeploymentOrchestrator:
    """Runs one declare -> deploy -> record workflow."""

    def __init__(
        self,
        config: DeployConfig,
        chain_client_factory: Optional[ChainClientFactory] = None,
        record_writer: Optional[RecordWriter] = None,
        clock: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Deployment settings
            chain_client_factory: Builds the ChainClient once credentials are
                                  resolved (defaults to StarknetChainClient.from_config)
            record_writer: Persists the record (defaults to write_deployment_record)
            clock: Returns the record timestamp (defaults to utc_timestamp)
        """
        self.config = config
        self._chain_client_factory = chain_client_factory or StarknetChainClient.from_config
        self._record_writer = record_writer or write_deployment_record
        self._clock = clock or utc_timestamp

    def run(self) -> DeploymentOutcome:
        """
        Execute the workflow.

        Stops at the first failing step. Deployment errors are captured on the
        returned outcome (state FAILED); submitted transactions are never
        retried or rolled back.

        Returns:
            DeploymentOutcome describing how far the workflow got
        """
        outcome = DeploymentOutcome()
        try:
            self._execute(outcome)
        except DeploymentError as e:
            outcome.error = e
            outcome.state = DeploymentState.FAILED
            self._report_failure(outcome)
        return outcome

    def _advance(self, outcome: DeploymentOutcome, state: DeploymentState) -> None:
        outcome.state = state
        outcome.last_completed_state = state

    def _execute(self, outcome: DeploymentOutcome) -> None:
        config = self.config

        credentials = resolve_credentials(config.private_key, config.account_address)
        logger.info("Account address: {}", credentials.account_address)
        self._advance(outcome, DeploymentState.CREDENTIALS_RESOLVED)

        logger.info("Looking for contract at: {}", config.artifact_path)
        artifact = load_artifact(config.artifact_path, config.casm_path)
        self._advance(outcome, DeploymentState.ARTIFACT_LOADED)

        chain = self._chain_client_factory(config, credentials)

        logger.info("Declaring contract on {}...", config.network)
        declared = chain.declare(artifact)
        outcome.class_hash = declared.class_hash
        outcome.declare_transaction_hash = declared.handle.transaction_hash
        self._advance(outcome, DeploymentState.DECLARED)

        logger.info("Waiting for declaration transaction {}...", declared.handle.transaction_hash)
        chain.await_finality(declared.handle)
        self._advance(outcome, DeploymentState.DECLARE_CONFIRMED)
        logger.info("Contract declared with class hash: {}", declared.class_hash)

        self._check_class_hash(artifact, declared.class_hash)

        # Positional: admin address, platform fee in basis points
        constructor_args = [credentials.account_address, config.fee_basis_points]

        logger.info("Deploying contract...")
        deployed = chain.deploy(declared.class_hash, constructor_args)
        outcome.contract_address = deployed.contract_address
        outcome.transaction_hash = deployed.handle.transaction_hash
        self._advance(outcome, DeploymentState.DEPLOYED)

        logger.info("Waiting for deployment transaction {}...", deployed.handle.transaction_hash)
        chain.await_finality(deployed.handle)
        self._advance(outcome, DeploymentState.DEPLOY_CONFIRMED)
        logger.success("Contract deployed successfully!")
        logger.success("Contract address: {}", deployed.contract_address)

        outcome.record = DeploymentRecord(
            contract_address=deployed.contract_address,
            class_hash=declared.class_hash,
            transaction_hash=deployed.handle.transaction_hash,
            network=config.network,
            timestamp=self._clock(),
        )
        path = self._record_writer(outcome.record, config.record_path)
        self._advance(outcome, DeploymentState.RECORD_PERSISTED)
        logger.info("Deployment info saved to {}", path)

    def _check_class_hash(self, artifact: CompiledArtifact, declared_hash: str) -> None:
        if artifact.class_hash is None or _same_hash(artifact.class_hash, declared_hash):
            return

        message = (
            f"Class hash in {artifact.path.name} ({artifact.class_hash}) differs from "
            f"the declared class hash ({declared_hash})"
        )
        if self.config.verify_class_hash:
            raise ClassHashMismatchError(message)
        logger.warning("{}; using the declared class hash", message)

    def _report_failure(self, outcome: DeploymentOutcome) -> None:
        if outcome.is_deployed:
            logger.error(
                "Contract IS deployed at {} (transaction {}), "
                "but the deployment record could not be saved: {}",
                outcome.contract_address,
                outcome.transaction_hash,
                outcome.error,
            )
            return

        logger.error(
            "Deployment failed after {}: {}: {}",
            outcome.last_completed_state.value,
            outcome.failure_kind,
            outcome.error,
        )
        if outcome.last_completed_state in (
            DeploymentState.DECLARED,
            DeploymentState.DEPLOYED,
        ):
            logger.warning(
                "Submitted transactions are not retracted; a re-run may be rejected "
                "as a duplicate (declare tx {}, deploy tx {})",
                outcome.declare_transaction_hash,
                outcome.transaction_hash,
            )


def deploy(
    config: Optional[DeployConfig] = None,
    chain_client_factory: Optional[ChainClientFactory] = None,
    record_writer: Optional[RecordWriter] = None,
) -> DeploymentOutcome:
    """
    Run a deployment with the given (or environment-derived) configuration.

    Args:
        config: Deployment settings (defaults to DeployConfig.from_env())
        chain_client_factory: Optional ChainClient factory override
        record_writer: Optional record writer override

    Returns:
        DeploymentOutcome of the run

    Raises:
        ConfigurationError: If config is None and the environment is invalid
    """
    if config is None:
        config = DeployConfig.from_env()
    return DeploymentOrchestrator(
        config,
        chain_client_factory=chain_client_factory,
        record_writer=record_writer,
    ).run()
