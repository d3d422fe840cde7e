"""Shared pytest fixtures for daobitat-deploy tests."""

import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest
from loguru import logger

from daobitat_deploy.config import DeployConfig

SIERRA_DOCUMENT: Dict[str, Any] = {
    "sierra_program": ["0x1", "0x2", "0x3"],
    "contract_class_version": "0.1.0",
    "entry_points_by_type": {"EXTERNAL": [], "L1_HANDLER": [], "CONSTRUCTOR": []},
    "abi": [],
}

CASM_DOCUMENT: Dict[str, Any] = {
    "prime": "0x800000000000011000000000000000000000000000000000000000000000001",
    "compiler_version": "2.6.0",
    "bytecode": [],
    "hints": [],
    "entry_points_by_type": {"EXTERNAL": [], "L1_HANDLER": [], "CONSTRUCTOR": []},
}


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """Return the scarb output directory inside a temporary project."""
    target = tmp_path / "target" / "dev"
    target.mkdir(parents=True)
    return target


@pytest.fixture
def sierra_path(build_dir: Path) -> Path:
    """Write a minimal Sierra contract class without an embedded class hash."""
    path = build_dir / "daobitat_RentalContract.contract_class.json"
    path.write_text(json.dumps(SIERRA_DOCUMENT))
    return path


@pytest.fixture
def casm_path(build_dir: Path) -> Path:
    """Write a minimal CASM sibling for the Sierra class."""
    path = build_dir / "daobitat_RentalContract.compiled_contract_class.json"
    path.write_text(json.dumps(CASM_DOCUMENT))
    return path


@pytest.fixture
def make_config(tmp_path: Path, sierra_path: Path) -> Callable[..., DeployConfig]:
    """Return a factory for DeployConfig objects rooted in tmp_path."""

    def factory(**overrides: Any) -> DeployConfig:
        settings: Dict[str, Any] = {
            "rpc_url": "http://test-rpc.example.com",
            "network": "testnet",
            "chain_id": "SN_SEPOLIA",
            "artifact_path": sierra_path,
            "record_path": tmp_path / "deployment-info.json",
            "private_key": "0xabc123",
            "account_address": "def456",
            "poll_interval": 0.0,
            "finality_timeout": 1.0,
        }
        settings.update(overrides)
        return DeployConfig(**settings)

    return factory


@pytest.fixture
def log_messages() -> List[str]:
    """Capture formatted loguru messages emitted during a test."""
    messages: List[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
