"""Compiled contract artifact loading for daobitat-deploy."""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .exceptions import ArtifactNotFoundError, ArtifactParseError
from .paths import get_casm_path_for
from .types import CompiledArtifact


def _read_json_document(file_path: Path) -> Dict[str, Any]:
    try:
        with open(file_path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ArtifactParseError(f"Malformed JSON in {file_path}: {e}") from e
    except (UnicodeDecodeError, OSError) as e:
        raise ArtifactParseError(f"Unreadable artifact {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise ArtifactParseError(
            f"Expected a JSON object in {file_path}, got {type(data).__name__}"
        )
    return data


def load_artifact(
    path: Union[Path, str], casm_path: Optional[Union[Path, str]] = None
) -> CompiledArtifact:
    """
    Load a compiled Sierra contract class.

    The class definition is not validated beyond parsing; structural problems
    surface when the class is declared.

    Args:
        path: Path to the *.contract_class.json file
        casm_path: Path to the CASM file (defaults to the sibling of `path`,
                   loaded only if it exists)

    Returns:
        CompiledArtifact object

    Raises:
        ArtifactNotFoundError: If the Sierra file (or an explicit casm_path) is missing
        ArtifactParseError: If a file is not a JSON object, or class_hash is empty
    """
    path = Path(path)
    if not path.is_file():
        raise ArtifactNotFoundError(
            f"Contract file not found at {path}. Did you run 'scarb build'?"
        )

    class_definition = _read_json_document(path)

    # An embedded class hash is optional, but must not be blank
    class_hash = None
    if "class_hash" in class_definition:
        class_hash = class_definition["class_hash"]
        if not isinstance(class_hash, str) or not class_hash.strip():
            raise ArtifactParseError(f"Empty class_hash in {path}")

    if casm_path is not None:
        casm_path = Path(casm_path)
        if not casm_path.is_file():
            raise ArtifactNotFoundError(
                f"CASM file not found at {casm_path}. "
                "Set casm = true under [[target.starknet-contract]] and run 'scarb build'."
            )
    else:
        casm_path = get_casm_path_for(path)

    casm_definition = None
    if casm_path.is_file():
        casm_definition = _read_json_document(casm_path)

    return CompiledArtifact(
        class_definition=class_definition,
        path=path,
        class_hash=class_hash,
        casm_definition=casm_definition,
    )
