"""Main entry point for the cross-chain tracker."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from config import TrackerConfig
from core.errors import TrackerError
from core.types import Attestation, Status
from explorer import cctp_domain_for_chain, short_hash
from pipeline import TrackedOperation
from service import TrackerService


def setup_logging(level: str = "INFO") -> None:
    """Setup logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler("crosschain-tracker.log"),
        ],
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track cross-chain marketplace operations")
    parser.add_argument("--config", type=Path, help="TOML configuration file")
    commands = parser.add_subparsers(dest="command", required=True)

    track = commands.add_parser("track", help="Follow one source transaction")
    track.add_argument("tx_hash", help="Source chain transaction hash")
    track.add_argument("--transfer", action="store_true", help="Also follow the CCTP transfer")
    track.add_argument("--domain", type=int, help="CCTP domain of the burn chain")
    track.add_argument("--source-chain-id", type=int)
    track.add_argument("--message-chain-id", type=int, default=42161,
                       help="Chain the LayerZero message is delivered to")
    track.add_argument("--dest-chain-id", type=int, help="Chain the USDC is minted on")

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def load_config(config_path: Optional[Path]) -> TrackerConfig:
    env_path = Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    if config_path is not None:
        config = TrackerConfig.from_file(config_path)
    else:
        config = TrackerConfig.from_env()
    config.validate()
    return config


def print_operation(operation: TrackedOperation) -> None:
    """Print the current steps of an operation."""
    print(f"\n[{operation.status.value}] {short_hash(operation.source_tx_hash)}")
    for step in operation.steps():
        line = f"  {step.status.value:<8} {step.label}"
        if step.message:
            line += f" - {step.message}"
        print(line)


async def track_command(config: TrackerConfig, args: argparse.Namespace) -> int:
    """Follow one operation until every stage stops.

    Returns:
        Exit code
    """
    logger = logging.getLogger(__name__)

    domain = args.domain
    if args.transfer and domain is None:
        domain = cctp_domain_for_chain(args.message_chain_id)

    def on_attested(attestation: Attestation) -> None:
        hex_payload = attestation.to_hex()
        print(f"\nAttestation ready:\n  message: {hex_payload['message']}\n"
              f"  attestation: {hex_payload['attestation']}")

    async with TrackerService(config) as service:
        operation = TrackedOperation(
            operation_id="cli",
            source_tx_hash=args.tx_hash,
            message_tracker=service.message_tracker,
            transfer_tracker=service.transfer_tracker if args.transfer else None,
            source_domain=domain,
            source_chain_id=args.source_chain_id,
            message_destination_chain_id=args.message_chain_id,
            destination_chain_id=args.dest_chain_id,
            on_change=print_operation,
            on_attested=on_attested,
        )
        operation.start()
        try:
            await operation.wait()
        finally:
            operation.cancel()

    logger.info(f"Tracking finished with status {operation.status.value}")
    return 1 if operation.status == Status.FAILED else 0


def serve_command(config: TrackerConfig, args: argparse.Namespace) -> int:
    import uvicorn

    from api.main import create_app

    uvicorn.run(
        create_app(service=TrackerService(config)),
        host=args.host,
        port=args.port,
        log_level="info",
    )
    return 0


async def async_main(config: TrackerConfig, args: argparse.Namespace) -> int:
    """Async main function.

    Returns:
        Exit code
    """
    logger = logging.getLogger(__name__)

    try:
        return await track_command(config, args)
    except TrackerError as e:
        logger.error(f"Tracking error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    log_level = os.getenv("LOG_LEVEL", "INFO")
    setup_logging(log_level)

    logger = logging.getLogger(__name__)
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except TrackerError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    if args.command == "serve":
        sys.exit(serve_command(config, args))

    logger.info("Starting cross-chain tracker...")
    try:
        exit_code = asyncio.run(async_main(config, args))
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
