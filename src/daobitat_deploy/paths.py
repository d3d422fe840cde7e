"""Path management utilities for daobitat-deploy."""

from pathlib import Path
from typing import Optional, Union

from .constants import CASM_SUFFIX, CONTRACT_NAME, DEPLOYMENT_RECORD_FILENAME, SIERRA_SUFFIX


def get_default_project_root() -> Path:
    """
    Get default project root (current working directory).

    Returns:
        Absolute path of the directory holding Scarb.toml
    """
    return Path.cwd()


def _resolve_root(project_root: Optional[Union[Path, str]]) -> Path:
    if project_root is None:
        return get_default_project_root()
    return Path(project_root).absolute()


def get_artifact_paths(project_root: Optional[Union[Path, str]] = None) -> tuple[Path, Path]:
    """
    Get compiled contract paths produced by `scarb build`.

    Args:
        project_root: Custom project directory (defaults to cwd)

    Returns:
        Tuple of (sierra_path, casm_path)
    """
    build_dir = _resolve_root(project_root) / "target" / "dev"

    sierra_path = build_dir / f"{CONTRACT_NAME}{SIERRA_SUFFIX}"
    casm_path = build_dir / f"{CONTRACT_NAME}{CASM_SUFFIX}"

    return (sierra_path, casm_path)


def get_casm_path_for(sierra_path: Union[Path, str]) -> Path:
    """
    Get the CASM sibling of a Sierra artifact.

    Args:
        sierra_path: Path to a *.contract_class.json file

    Returns:
        Path to the matching *.compiled_contract_class.json file
    """
    sierra_path = Path(sierra_path)
    name = sierra_path.name
    if name.endswith(SIERRA_SUFFIX):
        stem = name[: -len(SIERRA_SUFFIX)]
    else:
        stem = sierra_path.stem
    return sierra_path.with_name(f"{stem}{CASM_SUFFIX}")


def get_record_path(project_root: Optional[Union[Path, str]] = None) -> Path:
    """
    Get deployment record path.

    Args:
        project_root: Custom project directory (defaults to cwd)

    Returns:
        Path to deployment-info.json
    """
    return _resolve_root(project_root) / DEPLOYMENT_RECORD_FILENAME
