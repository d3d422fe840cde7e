"""Command-line entry point for daobitat-deploy."""

import argparse
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from loguru import logger

from .config import DeployConfig
from .deployments import DeploymentOrchestrator
from .exceptions import ConfigurationError

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_RECORD_NOT_SAVED = 2  # Contract is deployed, record write failed

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="daobitat-deploy",
        description="Declare and deploy the RentalContract to Starknet",
    )
    parser.add_argument("--env-file", help="Path to .env file (default: <project-root>/.env)")
    parser.add_argument("--project-root", help="Directory holding Scarb.toml (default: cwd)")
    parser.add_argument("--artifact", help="Sierra contract class JSON")
    parser.add_argument("--casm", help="Compiled (CASM) contract class JSON")
    parser.add_argument("--output", help="Deployment record path")
    parser.add_argument("--network", help="Network label, e.g. testnet or mainnet")
    parser.add_argument("--rpc-url", help="Starknet RPC endpoint")
    parser.add_argument("--poll-interval", type=float, help="Seconds between status polls")
    parser.add_argument("--timeout", type=float, help="Seconds to wait for each transaction")
    parser.add_argument(
        "--verify-class-hash",
        action="store_true",
        help="Fail if the declared class hash differs from the artifact's class_hash",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level",
    )
    return parser


def _load_config(args: argparse.Namespace) -> DeployConfig:
    env = dict(os.environ)
    if args.network:
        env["STARKNET_NETWORK"] = args.network
    if args.rpc_url:
        env["STARKNET_RPC_URL"] = args.rpc_url
    if args.poll_interval is not None:
        env["DEPLOY_POLL_INTERVAL"] = str(args.poll_interval)
    if args.timeout is not None:
        env["DEPLOY_TIMEOUT"] = str(args.timeout)

    config = DeployConfig.from_env(
        env=env, dotenv_path=args.env_file, project_root=args.project_root
    )

    overrides = {}
    if args.artifact:
        overrides["artifact_path"] = Path(args.artifact).absolute()
    if args.casm:
        overrides["casm_path"] = Path(args.casm).absolute()
    if args.output:
        overrides["record_path"] = Path(args.output).absolute()
    if args.verify_class_hash:
        overrides["verify_class_hash"] = True

    return replace(config, **overrides) if overrides else config


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run one deployment.

    Returns:
        0 on success, 1 on failure, 2 if deployed but the record was not saved
    """
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level, format=LOG_FORMAT)

    try:
        config = _load_config(args)
    except ConfigurationError as e:
        logger.error("Invalid configuration: {}", e)
        return EXIT_FAILED

    outcome = DeploymentOrchestrator(config).run()

    if outcome.succeeded:
        return EXIT_OK
    if outcome.is_deployed:
        return EXIT_RECORD_NOT_SAVED
    return EXIT_FAILED
