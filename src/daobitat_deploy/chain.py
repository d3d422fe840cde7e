"""Starknet network access for daobitat-deploy."""

import asyncio
import json
import time
from typing import Any, Callable, Coroutine, List, Optional, Protocol, Union

import aiohttp
import requests
from loguru import logger
from starknet_py.common import create_casm_class
from starknet_py.hash.casm_class_hash import compute_casm_class_hash
from starknet_py.net.account.account import Account
from starknet_py.net.client_errors import ClientError
from starknet_py.net.full_node_client import FullNodeClient
from starknet_py.net.models import StarknetChainId
from starknet_py.net.signer.stark_curve_signer import KeyPair
from starknet_py.net.udc_deployer.deployer import Deployer

from .config import DeployConfig
from .constants import HEX_PREFIX, TXN_HASH_NOT_FOUND
from .exceptions import (
    ArtifactNotFoundError,
    ArtifactParseError,
    ConfigurationError,
    FinalityTimeoutError,
    NetworkError,
    RejectedTransactionError,
)
from .types import (
    CompiledArtifact,
    Credentials,
    DeclareResult,
    DeployResult,
    TransactionHandle,
    TransactionKind,
    TransactionStatus,
)

CHAIN_IDS = {
    "SN_MAIN": StarknetChainId.MAINNET,
    "SN_SEPOLIA": StarknetChainId.SEPOLIA,
}

ChainId = Union[StarknetChainId, int, str]
StatusFetcher = Callable[[str], Optional[TransactionStatus]]


def resolve_chain_id(value: str) -> ChainId:
    """
    Map a configured chain id to what the signing account expects.

    Known names map to StarknetChainId; other hex values become integers and
    anything else (e.g. "KATANA") is passed through as a short string.
    """
    if value in CHAIN_IDS:
        return CHAIN_IDS[value]
    if value.lower().startswith(HEX_PREFIX):
        try:
            return int(value, 16)
        except ValueError as e:
            raise ConfigurationError(f"Invalid hexadecimal chain id '{value}'") from e
    return value


class ChainClient(Protocol):
    """Network capability consumed by the deployment workflow."""

    def declare(self, artifact: CompiledArtifact) -> DeclareResult:
        ...

    def deploy(self, class_hash: str, constructor_args: List[str]) -> DeployResult:
        ...

    def await_finality(self, handle: TransactionHandle) -> TransactionStatus:
        ...


def fetch_transaction_status(
    rpc_url: str, transaction_hash: str, timeout: float = 30
) -> Optional[TransactionStatus]:
    """
    Query a transaction's status over JSON-RPC.

    Args:
        rpc_url: RPC endpoint URL
        transaction_hash: 0x-prefixed transaction hash
        timeout: HTTP request timeout in seconds

    Returns:
        TransactionStatus, or None if the node does not know the hash yet

    Raises:
        NetworkError: If the request fails or the node returns an error
    """
    try:
        response = requests.post(
            rpc_url,
            json={
                "jsonrpc": "2.0",
                "method": "starknet_getTransactionStatus",
                "params": {"transaction_hash": transaction_hash},
                "id": 1,
            },
            timeout=timeout,
        )
    except requests.RequestException as e:
        raise NetworkError(f"Network error during RPC call: {e}") from e

    if response.status_code != 200:
        raise NetworkError(f"RPC request failed with status {response.status_code}")

    try:
        result = response.json()
    except ValueError as e:
        raise NetworkError(f"RPC returned a non-JSON body: {e}") from e

    if not isinstance(result, dict):
        raise NetworkError(f"Malformed RPC reply: {result!r}")

    if "error" in result:
        error = result["error"]
        # Freshly submitted transactions may not have propagated yet
        if isinstance(error, dict) and error.get("code") == TXN_HASH_NOT_FOUND:
            return None
        raise NetworkError(f"RPC error: {error}")

    try:
        status = result["result"]
        return TransactionStatus(
            finality_status=status["finality_status"],
            execution_status=status.get("execution_status"),
            failure_reason=status.get("failure_reason"),
        )
    except (KeyError, TypeError, AttributeError) as e:
        raise NetworkError(f"Malformed RPC reply for {transaction_hash}: {result!r}") from e


def wait_for_finality(
    fetch_status: StatusFetcher,
    handle: TransactionHandle,
    timeout: float,
    poll_interval: float,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> TransactionStatus:
    """
    Poll a transaction until it is accepted, rejected, or the deadline passes.

    Args:
        fetch_status: Returns the current status for a hash (None if unknown)
        handle: Transaction to wait for
        timeout: Seconds before giving up
        poll_interval: Seconds between polls
        sleep: Sleep function (injectable for tests)
        clock: Monotonic clock (injectable for tests)

    Returns:
        The accepted TransactionStatus

    Raises:
        RejectedTransactionError: If the transaction is rejected or reverted
        FinalityTimeoutError: If no terminal status is seen before the deadline
        NetworkError: If polling itself fails
    """
    deadline = clock() + timeout
    kind = handle.kind.value

    while True:
        status = fetch_status(handle.transaction_hash)
        if status is not None:
            logger.debug(
                "{} {}: {} / {}",
                kind,
                handle.transaction_hash,
                status.finality_status,
                status.execution_status,
            )
            if status.is_rejected:
                reason = status.failure_reason or status.finality_status
                raise RejectedTransactionError(
                    f"{kind.capitalize()} transaction {handle.transaction_hash} "
                    f"was rejected: {reason}",
                    reason=reason,
                )
            if status.is_accepted:
                return status

        remaining = deadline - clock()
        if remaining <= 0:
            last = status.finality_status if status is not None else "NOT_FOUND"
            raise FinalityTimeoutError(
                f"{kind.capitalize()} transaction {handle.transaction_hash} not final "
                f"after {timeout:g}s (last status: {last})"
            )
        sleep(min(poll_interval, remaining))


def _to_hex(value: Union[int, str]) -> str:
    if isinstance(value, int):
        return hex(value)
    return value


def _to_felt(value: Union[int, str]) -> int:
    if isinstance(value, int):
        return value
    if value.startswith(HEX_PREFIX):
        return int(value, 16)
    return int(value)


class StarknetChainClient:
    """ChainClient backed by a Starknet JSON-RPC node."""

    def __init__(
        self,
        rpc_url: str,
        credentials: Credentials,
        chain_id: ChainId,
        poll_interval: float,
        timeout: float,
    ):
        """
        Initialize the client and signing account.

        Args:
            rpc_url: RPC endpoint URL
            credentials: Canonical signing credentials
            chain_id: Chain the account signs for
            poll_interval: Seconds between status polls
            timeout: Seconds to wait for finality

        Raises:
            ConfigurationError: If the signing key or account address is not
                                hexadecimal
        """
        self.rpc_url = rpc_url
        self.poll_interval = poll_interval
        self.timeout = timeout

        try:
            key_pair = KeyPair.from_private_key(int(credentials.signing_key, 16))
        except ValueError as e:
            raise ConfigurationError("PRIVATE_KEY is not a hexadecimal string") from e

        try:
            address = int(credentials.account_address, 16)
        except ValueError as e:
            raise ConfigurationError("ACCOUNT_ADDRESS is not a hexadecimal address") from e

        self._client = FullNodeClient(node_url=rpc_url)
        self._account = Account(
            client=self._client,
            address=address,
            key_pair=key_pair,
            chain=chain_id,
        )

    @classmethod
    def from_config(
        cls, config: DeployConfig, credentials: Credentials
    ) -> "StarknetChainClient":
        """Build a client for the network named in the configuration."""
        return cls(
            rpc_url=config.rpc_url,
            credentials=credentials,
            chain_id=resolve_chain_id(config.chain_id),
            poll_interval=config.poll_interval,
            timeout=config.finality_timeout,
        )

    def _submit(self, coro: Coroutine[Any, Any, Any], action: str) -> Any:
        try:
            return asyncio.run(coro)
        except ClientError as e:
            raise RejectedTransactionError(
                f"{action} rejected by node: {e.message}", reason=e.message
            ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise NetworkError(f"{action} failed, could not reach {self.rpc_url}: {e}") from e

    def declare(self, artifact: CompiledArtifact) -> DeclareResult:
        """Sign and submit a v3 declare transaction for a Sierra class."""
        if artifact.casm_definition is None:
            raise ArtifactNotFoundError(
                f"No CASM file next to {artifact.path}; a Sierra declare needs the "
                "compiled class hash. Set casm = true in Scarb.toml and run 'scarb build'."
            )

        try:
            compiled_class_hash = compute_casm_class_hash(
                create_casm_class(json.dumps(artifact.casm_definition))
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ArtifactParseError(f"Invalid CASM for {artifact.path}: {e}") from e
        sierra = {k: v for k, v in artifact.class_definition.items() if k != "class_hash"}

        async def submit():
            declare_tx = await self._account.sign_declare_v3(
                compiled_contract=json.dumps(sierra),
                compiled_class_hash=compiled_class_hash,
                auto_estimate=True,
            )
            return await self._client.declare(transaction=declare_tx)

        response = self._submit(submit(), "Declare")
        return DeclareResult(
            handle=TransactionHandle(
                transaction_hash=_to_hex(response.transaction_hash),
                kind=TransactionKind.DECLARE,
            ),
            class_hash=_to_hex(response.class_hash),
        )

    def deploy(self, class_hash: str, constructor_args: List[str]) -> DeployResult:
        """Deploy an instance of a declared class through the Universal Deployer."""
        deployer = Deployer()
        deployment = deployer.create_contract_deployment(
            class_hash=_to_felt(class_hash),
            calldata=[_to_felt(arg) for arg in constructor_args],
            cairo_version=1,
        )
        deploy_call, address = deployment[:2]

        response = self._submit(
            self._account.execute_v3(calls=deploy_call, auto_estimate=True), "Deploy"
        )
        return DeployResult(
            handle=TransactionHandle(
                transaction_hash=_to_hex(response.transaction_hash),
                kind=TransactionKind.DEPLOY,
            ),
            contract_address=_to_hex(address),
        )

    def await_finality(self, handle: TransactionHandle) -> TransactionStatus:
        return wait_for_finality(
            lambda tx_hash: fetch_transaction_status(self.rpc_url, tx_hash),
            handle,
            timeout=self.timeout,
            poll_interval=self.poll_interval,
        )
