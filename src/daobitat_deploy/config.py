"""Deployment configuration for daobitat-deploy."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

from dotenv import dotenv_values

from .constants import (
    DEFAULT_FEE_BASIS_POINTS,
    DEFAULT_FINALITY_TIMEOUT,
    DEFAULT_NETWORK,
    DEFAULT_POLL_INTERVAL,
    NETWORK_CONFIG,
)
from .exceptions import ConfigurationError
from .paths import get_artifact_paths, get_default_project_root, get_record_path


@dataclass(frozen=True)
class DeployConfig:
    """Settings for one deployment run."""

    rpc_url: str
    network: str
    chain_id: str  # e.g. "SN_SEPOLIA"
    artifact_path: Path
    record_path: Path
    casm_path: Optional[Path] = None  # None: use the artifact's sibling if present

    # Raw credential strings, normalized by the credential resolver
    private_key: Optional[str] = field(default=None, repr=False)
    account_address: Optional[str] = None

    poll_interval: float = DEFAULT_POLL_INTERVAL
    finality_timeout: float = DEFAULT_FINALITY_TIMEOUT
    fee_basis_points: str = DEFAULT_FEE_BASIS_POINTS
    verify_class_hash: bool = False

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[Union[Path, str]] = None,
        project_root: Optional[Union[Path, str]] = None,
    ) -> "DeployConfig":
        """
        Build configuration from environment variables and a .env file.

        Values in `env` take precedence over the .env file. Neither
        os.environ nor any other global state is modified.

        Args:
            env: Environment mapping (defaults to os.environ)
            dotenv_path: Path to a .env file (defaults to <project_root>/.env)
            project_root: Directory holding Scarb.toml (defaults to cwd)

        Returns:
            DeployConfig object

        Raises:
            ConfigurationError: If the network is unknown and no RPC URL or chain
                                id is given, or a numeric setting is invalid
        """
        if project_root is None:
            project_root = get_default_project_root()
        project_root = Path(project_root).absolute()

        if dotenv_path is None:
            dotenv_path = project_root / ".env"

        values = {}
        if Path(dotenv_path).exists():
            values.update(
                {k: v for k, v in dotenv_values(dotenv_path).items() if v is not None}
            )
        values.update(os.environ if env is None else env)

        network = values.get("STARKNET_NETWORK") or DEFAULT_NETWORK
        network_config = NETWORK_CONFIG.get(network, {})

        rpc_url = values.get("STARKNET_RPC_URL") or network_config.get("default_rpc_url")
        if not rpc_url:
            raise ConfigurationError(
                f"Unknown network '{network}': set STARKNET_RPC_URL to its RPC endpoint"
            )

        chain_id = values.get("STARKNET_CHAIN_ID") or network_config.get("chain_id")
        if not chain_id:
            raise ConfigurationError(
                f"Unknown network '{network}': set STARKNET_CHAIN_ID"
            )

        artifact_path, _ = get_artifact_paths(project_root)

        return cls(
            rpc_url=rpc_url,
            network=network,
            chain_id=chain_id,
            artifact_path=artifact_path,
            record_path=get_record_path(project_root),
            private_key=values.get("PRIVATE_KEY"),
            account_address=values.get("ACCOUNT_ADDRESS"),
            poll_interval=_parse_seconds(values, "DEPLOY_POLL_INTERVAL", DEFAULT_POLL_INTERVAL),
            finality_timeout=_parse_seconds(values, "DEPLOY_TIMEOUT", DEFAULT_FINALITY_TIMEOUT),
        )


def _parse_seconds(values: Mapping[str, str], name: str, default: float) -> float:
    raw = values.get(name)
    if raw is None or raw == "":
        return default

    try:
        seconds = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number of seconds, got '{raw}'") from e

    if not seconds > 0:
        raise ConfigurationError(f"{name} must be positive, got '{raw}'")
    return seconds
