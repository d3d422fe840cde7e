"""Deployment record persistence for daobitat-deploy."""

import json
from pathlib import Path
from typing import Union

from .exceptions import PersistenceError
from .types import DeploymentRecord


def write_deployment_record(record: DeploymentRecord, path: Union[Path, str]) -> Path:
    """
    Save a deployment record to disk, replacing any previous record.

    Args:
        record: Fully populated deployment record
        path: Output JSON file

    Returns:
        Path the record was written to

    Raises:
        PersistenceError: If the file cannot be written

    Creates parent directories if they don't exist.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(record.to_dict(), f, indent=2)
    except OSError as e:
        raise PersistenceError(f"Could not save deployment record to {path}: {e}") from e

    return path


def load_deployment_record(path: Union[Path, str]) -> DeploymentRecord:
    """Read back a record written by write_deployment_record."""
    with open(path) as f:
        return DeploymentRecord.from_dict(json.load(f))
