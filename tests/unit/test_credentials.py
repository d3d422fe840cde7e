"""Unit tests for credential normalization."""

import pytest

from daobitat_deploy.credentials import (
    normalize_account_address,
    normalize_signing_key,
    resolve_credentials,
)
from daobitat_deploy.exceptions import MissingCredentialError


class TestNormalizeSigningKey:
    """Test the normalize_signing_key function."""

    @pytest.mark.parametrize("raw", ["abc123", "0xabc123", "0x0xabc123", " 0xabc123\n"])
    def test_marker_never_leads(self, raw: str):
        """Test that the result never starts with 0x, whatever the input."""
        assert normalize_signing_key(raw) == "abc123"

    def test_idempotent(self):
        """Test that normalizing twice equals normalizing once."""
        once = normalize_signing_key("0xabc123")
        assert normalize_signing_key(once) == once


class TestNormalizeAccountAddress:
    """Test the normalize_account_address function."""

    @pytest.mark.parametrize("raw", ["def456", "0xdef456", "0x0xdef456"])
    def test_exactly_one_marker(self, raw: str):
        """Test that the result carries exactly one leading 0x."""
        result = normalize_account_address(raw)

        assert result == "0xdef456"
        assert result.count("0x") == 1

    def test_idempotent(self):
        """Test that normalizing twice equals normalizing once."""
        once = normalize_account_address("def456")
        assert normalize_account_address(once) == once


class TestResolveCredentials:
    """Test the resolve_credentials function."""

    def test_resolves_mixed_inputs(self):
        """Test the canonical forms for a prefixed key and a bare address."""
        credentials = resolve_credentials("0xabc123", "def456")

        assert credentials.signing_key == "abc123"
        assert credentials.account_address == "0xdef456"

    @pytest.mark.parametrize("raw_key", [None, "", "   ", "0x"])
    def test_missing_signing_key(self, raw_key):
        """Test that an absent or empty key is a MissingCredentialError."""
        with pytest.raises(MissingCredentialError) as exc_info:
            resolve_credentials(raw_key, "def456")

        assert "PRIVATE_KEY" in str(exc_info.value)

    @pytest.mark.parametrize("raw_address", [None, "", "0x"])
    def test_missing_account_address(self, raw_address):
        """Test that an absent or empty address is a MissingCredentialError."""
        with pytest.raises(MissingCredentialError) as exc_info:
            resolve_credentials("abc123", raw_address)

        assert "ACCOUNT_ADDRESS" in str(exc_info.value)

    def test_signing_key_hidden_from_repr(self):
        """Test that the signing key does not leak through repr()."""
        credentials = resolve_credentials("0xabc123", "def456")

        assert "abc123" not in repr(credentials)
        assert "0xdef456" in repr(credentials)
