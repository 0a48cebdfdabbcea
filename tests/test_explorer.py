"""Tests for explorer links and chain tables."""

import pytest

from core.errors import UnknownChainError
from explorer import (
    cctp_domain_for_chain,
    explorer_tx_url,
    iris_message_url,
    layerzero_scan_url,
    short_hash,
)


class TestExplorerUrl:
    """Tests for explorer_tx_url()."""

    def test_known_chain(self):
        assert explorer_tx_url("0xabc", 421614) == "https://sepolia.arbiscan.io/tx/0xabc"

    def test_unknown_chain_falls_back(self):
        assert explorer_tx_url("0xabc", 999) == "https://etherscan.io/tx/0xabc"

    def test_missing_chain_falls_back(self):
        assert explorer_tx_url("0xabc", None) == "https://etherscan.io/tx/0xabc"

    def test_no_hash(self):
        assert explorer_tx_url(None, 1) is None
        assert explorer_tx_url("", 1) is None


class TestShortHash:
    """Tests for short_hash()."""

    def test_shortens(self):
        assert short_hash("0x1234567890abcdef1234") == "0x123456...1234"

    def test_custom_length(self):
        assert short_hash("0x1234567890abcdef", chars=2) == "0x12...cdef"

    def test_empty(self):
        assert short_hash(None) == ""


class TestDomains:
    """Tests for CCTP domain lookup and service links."""

    @pytest.mark.parametrize("chain_id, domain", [
        (1, 0), (10, 2), (42161, 3), (8453, 6), (421614, 3), (11155420, 2),
    ])
    def test_known_domains(self, chain_id, domain):
        assert cctp_domain_for_chain(chain_id) == domain

    def test_unknown_domain(self):
        with pytest.raises(UnknownChainError):
            cctp_domain_for_chain(137)

    def test_links(self):
        assert layerzero_scan_url("0x1") == "https://layerzeroscan.com/tx/0x1"
        assert iris_message_url(3, "0x1") == (
            "https://iris-api.circle.com/v2/messages/3?transactionHash=0x1"
        )
