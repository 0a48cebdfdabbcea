"""Configuration management for the cross-chain tracker."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import toml

from core.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class TrackerConfig:
    """Main tracker configuration.

    Poll intervals and attempt counts are tuned to observed relay and
    attestation latencies; they are policy, not protocol constants.
    """

    # External services
    layerzero_scan_api: str = "https://scan.layerzero-api.com/v1/messages/tx"
    iris_api: str = "https://iris-api.circle.com/v2/messages"

    # LayerZero message polling (seconds)
    message_poll_interval: float = 6.0
    message_max_attempts: int = 60
    message_startup_delay: float = 3.0

    # CCTP attestation polling (seconds)
    transfer_poll_interval: float = 8.0
    transfer_max_attempts: int = 60
    transfer_startup_delay: float = 5.0

    # HTTP settings
    request_timeout: float = 30.0

    # How long an idle operation stays in the session registry
    operation_ttl: float = 3600.0

    @classmethod
    def from_env(cls) -> "TrackerConfig":
        """Load configuration from environment variables.

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed
        """
        try:
            return cls(
                layerzero_scan_api=os.getenv(
                    "LAYERZERO_SCAN_API", "https://scan.layerzero-api.com/v1/messages/tx"
                ),
                iris_api=os.getenv("CIRCLE_IRIS_API", "https://iris-api.circle.com/v2/messages"),
                message_poll_interval=float(os.getenv("MESSAGE_POLL_INTERVAL", "6")),
                message_max_attempts=int(os.getenv("MESSAGE_MAX_ATTEMPTS", "60")),
                message_startup_delay=float(os.getenv("MESSAGE_STARTUP_DELAY", "3")),
                transfer_poll_interval=float(os.getenv("TRANSFER_POLL_INTERVAL", "8")),
                transfer_max_attempts=int(os.getenv("TRANSFER_MAX_ATTEMPTS", "60")),
                transfer_startup_delay=float(os.getenv("TRANSFER_STARTUP_DELAY", "5")),
                request_timeout=float(os.getenv("REQUEST_TIMEOUT", "30")),
                operation_ttl=float(os.getenv("OPERATION_TTL", "3600")),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment configuration: {e}")

    @classmethod
    def from_file(cls, config_path: Path) -> "TrackerConfig":
        """Load configuration from TOML file.

        Args:
            config_path: Path to configuration file

        Returns:
            TrackerConfig instance

        Raises:
            ConfigurationError: If config is invalid
        """
        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        logger.info(f"Loading configuration from {config_path}")

        try:
            with open(config_path, "r") as f:
                config_data = toml.load(f)
        except Exception as e:
            raise ConfigurationError(f"Failed to parse configuration file: {e}")

        defaults = cls()
        message = config_data.get("message", {})
        transfer = config_data.get("transfer", {})

        try:
            return cls(
                layerzero_scan_api=config_data.get("layerzero_scan_api", defaults.layerzero_scan_api),
                iris_api=config_data.get("iris_api", defaults.iris_api),
                message_poll_interval=float(
                    message.get("poll_interval", defaults.message_poll_interval)
                ),
                message_max_attempts=int(
                    message.get("max_attempts", defaults.message_max_attempts)
                ),
                message_startup_delay=float(
                    message.get("startup_delay", defaults.message_startup_delay)
                ),
                transfer_poll_interval=float(
                    transfer.get("poll_interval", defaults.transfer_poll_interval)
                ),
                transfer_max_attempts=int(
                    transfer.get("max_attempts", defaults.transfer_max_attempts)
                ),
                transfer_startup_delay=float(
                    transfer.get("startup_delay", defaults.transfer_startup_delay)
                ),
                request_timeout=float(config_data.get("request_timeout", defaults.request_timeout)),
                operation_ttl=float(config_data.get("operation_ttl", defaults.operation_ttl)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    def validate(self) -> None:
        """Validate configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if not self.layerzero_scan_api:
            raise ConfigurationError("layerzero_scan_api is required")
        if not self.iris_api:
            raise ConfigurationError("iris_api is required")

        if self.message_poll_interval <= 0 or self.transfer_poll_interval <= 0:
            raise ConfigurationError("poll intervals must be positive")
        if self.message_max_attempts < 1 or self.transfer_max_attempts < 1:
            raise ConfigurationError("max_attempts must be at least 1")
        if self.message_startup_delay < 0 or self.transfer_startup_delay < 0:
            raise ConfigurationError("startup delays cannot be negative")
        if self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")
        if self.operation_ttl <= 0:
            raise ConfigurationError("operation_ttl must be positive")

        # A tracker can stay silent for its whole budget, so an operation must
        # outlive it
        longest_stage = max(
            self.message_max_attempts * self.message_poll_interval + self.message_startup_delay,
            self.transfer_max_attempts * self.transfer_poll_interval + self.transfer_startup_delay,
        )
        if self.operation_ttl < longest_stage:
            raise ConfigurationError(
                f"operation_ttl ({self.operation_ttl}s) is shorter than the longest "
                f"tracking budget ({longest_stage}s)"
            )

        logger.info("Configuration validated successfully")
