"""Circle Iris API client for CCTP attestations."""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from core.errors import AttestationQueryError
from core.types import TransferRecord
from explorer import short_hash

logger = logging.getLogger(__name__)


class IrisClient:
    """Queries Circle's attestation service for a burn.

    Circle partitions messages by the CCTP domain of the chain the burn
    happened on, so every lookup needs the domain as well as the tx hash.
    """

    def __init__(self, api_url: str, request_timeout: float = 30.0):
        """Create a new Iris client.

        Args:
            api_url: Base URL of the v2 messages endpoint
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
        logger.info(f"Circle Iris client ready at {self.api_url}")

    async def stop(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None
            logger.info("Circle Iris client closed")

    async def get_transfer(self, tx_hash: str, source_domain: int) -> Optional[TransferRecord]:
        """Get the attestation status of a burn.

        Args:
            tx_hash: Transaction hash that burned the tokens
            source_domain: CCTP domain of the burn chain

        Returns:
            TransferRecord, or None if Circle has not indexed the burn yet

        Raises:
            AttestationQueryError: On network errors, unexpected HTTP status or
                a malformed response
        """
        if not self._session:
            raise AttestationQueryError("Session not initialized - call start() first")

        url = f"{self.api_url}/{source_domain}"
        try:
            async with self._session.get(url, params={"transactionHash": tx_hash}) as response:
                if response.status == 404:
                    return None
                if response.status != 200:
                    raise AttestationQueryError(
                        f"Unexpected HTTP status {response.status}",
                        details=short_hash(tx_hash),
                    )
                data = await response.json(content_type=None)
        except AttestationQueryError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise AttestationQueryError("Failed to query Iris API", details=str(e))

        return parse_transfer_response(data)

    async def __aenter__(self) -> "IrisClient":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()


def parse_transfer_response(data: Any) -> Optional[TransferRecord]:
    """Extract the first message record from an Iris response.

    Raises:
        AttestationQueryError: If the response is not shaped like a message list
    """
    if not isinstance(data, dict):
        raise AttestationQueryError("Malformed response", details=type(data).__name__)

    messages = data.get("messages") or []
    if not isinstance(messages, list):
        raise AttestationQueryError("Malformed message list")
    if not messages:
        return None

    first = messages[0]
    if not isinstance(first, dict):
        raise AttestationQueryError("Malformed message record")

    decoded = first.get("decodedMessage")
    if not isinstance(decoded, dict):
        decoded = {}
    body = decoded.get("decodedMessageBody")
    if not isinstance(body, dict):
        body = {}

    return TransferRecord(
        status=str(first.get("status") or ""),
        delay_reason=first.get("delayReason"),
        message=first.get("message"),
        attestation=first.get("attestation"),
        mint_recipient=body.get("mintRecipient") or decoded.get("mintRecipient"),
        amount=body.get("amount") or decoded.get("amount"),
    )
