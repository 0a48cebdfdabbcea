"""LayerZero message delivery tracking."""

from layerzero.scan import LayerZeroScanClient, parse_message_response
from layerzero.message_tracker import MessageTracker

__all__ = [
    "LayerZeroScanClient",
    "parse_message_response",
    "MessageTracker",
]
