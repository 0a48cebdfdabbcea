"""LayerZero scan API client for message delivery status."""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from core.errors import RelayQueryError
from core.types import MessageRecord
from explorer import short_hash

logger = logging.getLogger(__name__)


class LayerZeroScanClient:
    """Queries the LayerZero scan index for messages sent by a transaction.

    The index lags the source chain by a few seconds, so a missing record is a
    normal answer rather than an error.
    """

    def __init__(self, api_url: str, request_timeout: float = 30.0):
        """Create a new scan client.

        Args:
            api_url: Base URL of the messages-by-tx endpoint
            request_timeout: Total timeout per request in seconds
        """
        self.api_url = api_url.rstrip("/")
        self.request_timeout = request_timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def start(self) -> None:
        """Open the HTTP session."""
        if self._session:
            return
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)
        self._session = aiohttp.ClientSession(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        logger.info(f"LayerZero scan client ready at {self.api_url}")

    async def stop(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
            logger.info("LayerZero scan client closed")

    async def get_message(self, tx_hash: str) -> Optional[MessageRecord]:
        """Get the first message emitted by a source transaction.

        Args:
            tx_hash: Source chain transaction hash

        Returns:
            MessageRecord, or None if the index has not seen the message yet

        Raises:
            RelayQueryError: On network errors, unexpected HTTP status or a
                malformed response
        """
        if not self._session:
            raise RelayQueryError("Session not initialized - call start() first")

        url = f"{self.api_url}/{tx_hash}"
        try:
            async with self._session.get(url) as response:
                if response.status == 404:
                    return None
                if response.status != 200:
                    raise RelayQueryError(
                        f"Unexpected HTTP status {response.status}",
                        details=short_hash(tx_hash),
                    )
                data = await response.json(content_type=None)
        except RelayQueryError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise RelayQueryError("Failed to query scan API", details=str(e))

        return parse_message_response(data)

    async def __aenter__(self) -> "LayerZeroScanClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()


def parse_message_response(data: Any) -> Optional[MessageRecord]:
    """Extract the first message record from a scan API response.

    The API has returned both {"data": [...]} and {"messages": [...]}; the
    status is either a plain string or an object with a "name".

    Raises:
        RelayQueryError: If the response is not shaped like a message list
    """
    if not isinstance(data, dict):
        raise RelayQueryError("Malformed response", details=type(data).__name__)

    messages = data.get("data") or data.get("messages") or []
    if not isinstance(messages, list):
        raise RelayQueryError("Malformed message list")
    if not messages:
        return None

    first = messages[0]
    if not isinstance(first, dict):
        raise RelayQueryError("Malformed message record")

    status = first.get("status") or ""
    if isinstance(status, dict):
        status = status.get("name") or ""

    return MessageRecord(
        status=str(status).upper(),
        src_tx_hash=first.get("srcTxHash") or _nested_tx_hash(first, "source"),
        dst_tx_hash=first.get("dstTxHash") or _nested_tx_hash(first, "destination"),
        failure_reason=first.get("failureReason"),
    )


def _nested_tx_hash(record: dict, side: str) -> Optional[str]:
    # v1 responses nest hashes as {"source": {"tx": {"txHash": ...}}}
    section = record.get(side)
    if not isinstance(section, dict):
        return None
    tx = section.get("tx")
    if not isinstance(tx, dict):
        return None
    return tx.get("txHash")
