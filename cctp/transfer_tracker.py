"""Track the attestation of one CCTP burn-and-mint transfer."""

import asyncio
import logging
from typing import Callable, Optional

from core.types import Attestation, Status, StepId, StepUpdate, TransferRecord
from explorer import iris_message_url, short_hash
from cctp.iris import IrisClient
from tracking import PollPolicy, Tracking

logger = logging.getLogger(__name__)

COMPLETE = "complete"
FAILED = "failed"
PENDING = "pending_confirmations"
SLOW_PATH = "slow"
INSUFFICIENT_FEE = "insufficient_fee"

DEFAULT_POLICY = PollPolicy(poll_interval=8.0, max_attempts=60, startup_delay=5.0)


def decode_hex(value: Optional[str]) -> bytes:
    """Decode a 0x-prefixed hex string.

    Raises:
        ValueError: If the value is missing or not hex
    """
    if not value or not isinstance(value, str):
        raise ValueError("missing hex payload")
    if value.startswith(("0x", "0X")):
        value = value[2:]
    return bytes.fromhex(value)


def attestation_from_record(record: TransferRecord) -> Attestation:
    """Decode the proof payload of a completed transfer.

    Raises:
        ValueError: If either payload is missing or not hex
    """
    return Attestation(
        message=decode_hex(record.message),
        attestation=decode_hex(record.attestation),
    )


class TransferTracker:
    """Polls Circle's attestation service until a burn is attested.

    Display updates go to on_update. The attestation itself goes to
    on_attested, exactly once, because receiving it is what triggers the mint
    on the destination chain.
    """

    def __init__(self, client: IrisClient, policy: Optional[PollPolicy] = None):
        """Initialize transfer tracker.

        Args:
            client: Iris client used for each poll
            policy: Poll cadence and attempt budget
        """
        self.client = client
        self.policy = policy or DEFAULT_POLICY

    def track(
        self,
        source_tx_hash: str,
        source_domain: int,
        on_update: Callable[[StepUpdate], None],
        on_attested: Optional[Callable[[Attestation], None]] = None,
    ) -> Tracking:
        """Start tracking a burn.

        Must be called from a running event loop.

        Args:
            source_tx_hash: Transaction hash that burned the tokens
            source_domain: CCTP domain of the burn chain
            on_update: Called with every StepUpdate (sync or async)
            on_attested: Called once with the Attestation when complete

        Returns:
            Tracking handle; call cancel() to stop
        """
        tracking = Tracking(f"transfer {short_hash(source_tx_hash)}")
        logger.info(
            f"Tracking CCTP transfer {short_hash(source_tx_hash)} on domain {source_domain}"
        )
        return tracking.attach(
            self._run(tracking, source_tx_hash, source_domain, on_update, on_attested)
        )

    async def _run(
        self,
        tracking: Tracking,
        source_tx_hash: str,
        source_domain: int,
        on_update,
        on_attested,
    ) -> None:
        link = iris_message_url(source_domain, source_tx_hash)

        def update(status: Status, message: str, **extra) -> StepUpdate:
            return StepUpdate(
                step=StepId.ATTESTATION_PENDING,
                status=status,
                message=message,
                source_tx_hash=source_tx_hash,
                external_link=link,
                **extra,
            )

        await tracking.emit(on_update, update(
            Status.ACTIVE,
            "Waiting for Circle attestation of the USDC transfer...",
        ))
        await asyncio.sleep(self.policy.startup_delay)

        attempts = 0
        last_classification: Optional[str] = None

        while not tracking.stopped:
            if attempts >= self.policy.max_attempts:
                logger.warning(
                    f"CCTP attestation for {short_hash(source_tx_hash)} "
                    f"not ready after {attempts} checks"
                )
                await tracking.emit(on_update, update(
                    Status.WARNING,
                    f"Circle attestation not ready after {self.policy.deadline_minutes} min. "
                    f"Transfer may use the slow path (~15-20 min). Check the Circle API.",
                    classification=last_classification,
                ))
                return

            record = await self._poll(source_tx_hash, source_domain)
            if tracking.stopped:
                return

            if record is None:
                attempts += 1
                await asyncio.sleep(self.policy.poll_interval)
                continue

            status = record.status or PENDING

            if status == COMPLETE:
                try:
                    attestation = attestation_from_record(record)
                except ValueError as e:
                    # Circle can report complete before the payload is published
                    logger.debug(
                        f"Attestation for {short_hash(source_tx_hash)} not decodable yet: {e}"
                    )
                    attempts += 1
                    await asyncio.sleep(self.policy.poll_interval)
                    continue

                logger.info(f"CCTP attestation complete for {short_hash(source_tx_hash)}")
                delivered = await tracking.emit(on_update, update(
                    Status.SUCCESS,
                    "Circle attestation complete, USDC ready to mint on the destination chain",
                    classification=status,
                ))
                if delivered:
                    await tracking.emit(on_attested, attestation)
                return

            if status == FAILED:
                logger.error(f"CCTP transfer {short_hash(source_tx_hash)} reported failed")
                await tracking.emit(on_update, update(
                    Status.FAILED,
                    "Circle reported the transfer as failed. Check the Circle API for details.",
                    classification=status,
                ))
                return

            attempts += 1
            slow = record.delay_reason == INSUFFICIENT_FEE
            classification = SLOW_PATH if slow else status

            if classification != last_classification:
                last_classification = classification
                if slow:
                    message = (
                        "Circle using slow transfer path (insufficient fee). "
                        "Estimated ~15-20 min. Still monitoring..."
                    )
                else:
                    message = f"Circle attestation: {status} ({attempts} checks)..."
                await tracking.emit(on_update, update(
                    Status.ACTIVE,
                    message,
                    classification=classification,
                    delay_reason=record.delay_reason,
                ))

            await asyncio.sleep(self.policy.poll_interval)

    async def _poll(self, source_tx_hash: str, source_domain: int) -> Optional[TransferRecord]:
        # Query failures look the same as "not indexed yet"
        try:
            return await self.client.get_transfer(source_tx_hash, source_domain)
        except Exception as e:
            logger.debug(f"Iris query for {short_hash(source_tx_hash)} failed: {e}")
            return None
