"""Tests for scan and Iris response parsing."""

import pytest

from cctp.iris import IrisClient, parse_transfer_response
from core.errors import AttestationQueryError, RelayQueryError
from layerzero.scan import LayerZeroScanClient, parse_message_response


class TestParseMessageResponse:
    """Tests for parse_message_response()."""

    def test_flat_record(self):
        record = parse_message_response({
            "data": [{"status": "delivered", "srcTxHash": "0x1", "dstTxHash": "0x2"}],
        })

        assert record.status == "DELIVERED"
        assert record.src_tx_hash == "0x1"
        assert record.dst_tx_hash == "0x2"

    def test_nested_record(self):
        record = parse_message_response({
            "messages": [{
                "status": {"name": "INFLIGHT"},
                "source": {"tx": {"txHash": "0x1"}},
                "destination": None,
            }],
        })

        assert record.status == "INFLIGHT"
        assert record.src_tx_hash == "0x1"
        assert record.dst_tx_hash is None

    def test_not_indexed(self):
        assert parse_message_response({"data": []}) is None
        assert parse_message_response({}) is None

    @pytest.mark.parametrize("data", [[], "oops", {"data": {"status": "x"}}, {"data": ["x"]}])
    def test_malformed(self, data):
        with pytest.raises(RelayQueryError):
            parse_message_response(data)

    @pytest.mark.asyncio
    async def test_query_before_start(self):
        with pytest.raises(RelayQueryError):
            await LayerZeroScanClient("https://scan.example").get_message("0x1")


class TestParseTransferResponse:
    """Tests for parse_transfer_response()."""

    def test_complete_record(self):
        record = parse_transfer_response({
            "messages": [{
                "status": "complete",
                "message": "0x01",
                "attestation": "0x02",
                "decodedMessage": {
                    "decodedMessageBody": {"mintRecipient": "0xabc", "amount": "1000000"},
                },
            }],
        })

        assert record.status == "complete"
        assert record.message == "0x01"
        assert record.attestation == "0x02"
        assert record.mint_recipient == "0xabc"
        assert record.amount == "1000000"

    def test_slow_path_record(self):
        record = parse_transfer_response({
            "messages": [{"status": "pending_confirmations", "delayReason": "insufficient_fee"}],
        })

        assert record.delay_reason == "insufficient_fee"
        assert record.mint_recipient is None

    def test_not_indexed(self):
        assert parse_transfer_response({"messages": []}) is None

    @pytest.mark.parametrize("data", [None, {"messages": "x"}, {"messages": [1]}])
    def test_malformed(self, data):
        with pytest.raises(AttestationQueryError):
            parse_transfer_response(data)

    @pytest.mark.asyncio
    async def test_query_before_start(self):
        with pytest.raises(AttestationQueryError):
            await IrisClient("https://iris.example").get_transfer("0x1", 3)
