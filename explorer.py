"""Block explorer links and chain lookup tables."""

from typing import Optional

from core.errors import UnknownChainError

LAYERZERO_SCAN_URL = "https://layerzeroscan.com/tx"
IRIS_MESSAGES_URL = "https://iris-api.circle.com/v2/messages"

DEFAULT_EXPLORER = "https://etherscan.io/tx"

EXPLORERS = {
    1: "https://etherscan.io/tx",
    10: "https://optimistic.etherscan.io/tx",
    42161: "https://arbiscan.io/tx",
    8453: "https://basescan.org/tx",
    11155111: "https://sepolia.etherscan.io/tx",
    11155420: "https://sepolia-optimism.etherscan.io/tx",
    421614: "https://sepolia.arbiscan.io/tx",
    84532: "https://sepolia.basescan.org/tx",
}

# CCTP domains are shared between a mainnet and its testnet
CCTP_DOMAINS = {
    1: 0,
    11155111: 0,
    10: 2,
    11155420: 2,
    42161: 3,
    421614: 3,
    8453: 6,
    84532: 6,
}


def explorer_tx_url(tx_hash: Optional[str], chain_id: Optional[int]) -> Optional[str]:
    """Build a block explorer URL for a transaction.

    Args:
        tx_hash: Transaction hash
        chain_id: EVM chain id; unknown or missing ids use Etherscan

    Returns:
        Explorer URL, or None when there is no hash
    """
    if not tx_hash:
        return None
    base = EXPLORERS.get(chain_id, DEFAULT_EXPLORER)
    return f"{base}/{tx_hash}"


def short_hash(tx_hash: Optional[str], chars: int = 6) -> str:
    """Shorten a hash for display: 0xabcdef...1234."""
    if not tx_hash:
        return ""
    return f"{tx_hash[:chars + 2]}...{tx_hash[-4:]}"


def cctp_domain_for_chain(chain_id: int) -> int:
    """Look up the CCTP domain of a chain.

    Raises:
        UnknownChainError: If the chain has no CCTP domain
    """
    try:
        return CCTP_DOMAINS[chain_id]
    except KeyError:
        raise UnknownChainError(f"No CCTP domain known for chain {chain_id}")


def layerzero_scan_url(tx_hash: str) -> str:
    return f"{LAYERZERO_SCAN_URL}/{tx_hash}"


def iris_message_url(source_domain: int, tx_hash: str) -> str:
    return f"{IRIS_MESSAGES_URL}/{source_domain}?transactionHash={tx_hash}"
