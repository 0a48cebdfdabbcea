"""Circle CCTP attestation tracking."""

from cctp.iris import IrisClient, parse_transfer_response
from cctp.transfer_tracker import TransferTracker, attestation_from_record, decode_hex

__all__ = [
    "IrisClient",
    "parse_transfer_response",
    "TransferTracker",
    "attestation_from_record",
    "decode_hex",
]
