"""Signing credential normalization for daobitat-deploy."""

from typing import Optional

from .constants import HEX_PREFIX
from .exceptions import MissingCredentialError
from .types import Credentials


def _strip_prefix(value: str) -> str:
    while value.startswith(HEX_PREFIX):
        value = value[len(HEX_PREFIX):]
    return value


def normalize_signing_key(raw: str) -> str:
    """
    Remove the 0x marker from a signing key.

    Args:
        raw: Signing key, with or without 0x

    Returns:
        Key hex digits with no leading marker
    """
    return _strip_prefix(raw.strip())


def normalize_account_address(raw: str) -> str:
    """
    Ensure an account address carries exactly one 0x marker.

    Args:
        raw: Account address, with or without 0x

    Returns:
        0x-prefixed address
    """
    return HEX_PREFIX + _strip_prefix(raw.strip())


def resolve_credentials(
    raw_signing_key: Optional[str], raw_account_address: Optional[str]
) -> Credentials:
    """
    Build canonical credentials from raw configuration strings.

    Args:
        raw_signing_key: PRIVATE_KEY value
        raw_account_address: ACCOUNT_ADDRESS value

    Returns:
        Credentials object

    Raises:
        MissingCredentialError: If either value is absent or empty
    """
    signing_key = normalize_signing_key(raw_signing_key or "")
    if not signing_key:
        raise MissingCredentialError("Missing private key: set PRIVATE_KEY")

    account_address = normalize_account_address(raw_account_address or "")
    if account_address == HEX_PREFIX:
        raise MissingCredentialError("Missing account address: set ACCOUNT_ADDRESS")

    return Credentials(signing_key=signing_key, account_address=account_address)
