"""
Telegram Alerts
===============

Telegram notification system for the altFINS monitors.

Messages are sent as plain text to a single configured chat. Delivery
failures are logged and reported as False; they are never retried and never
raised to the calling monitor.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol, runtime_checkable
from zoneinfo import ZoneInfo

import requests

from .. import settings

# Timezone for service status timestamps
EASTERN_TZ = ZoneInfo("America/New_York")

TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"

logger = logging.getLogger(__name__)


@runtime_checkable
class Notifier(Protocol):
    """Interface for alert delivery."""

    def send(self, destination: str, text: str) -> bool:
        """Deliver one message. Returns True on success."""
        ...


@dataclass
class AlertConfig:
    """Configuration for alert sending."""
    bot_token: str
    chat_id: str
    dry_run: bool = False
    max_message_length: int = settings.MAX_MESSAGE_LENGTH
    timeout: float = 10


class TelegramNotifier:
    """
    Telegram alert sender.

    Implements the Notifier interface over the Bot API sendMessage call.
    The configured chat_id is the default destination.
    """

    def __init__(self, config: AlertConfig, session: requests.Session = None):
        """
        Initialize Telegram alerts.

        Args:
            config: AlertConfig with bot token, chat ID, and settings
            session: Optional requests session (for connection reuse)
        """
        self.config = config
        self._validate()
        self._session = session or requests.Session()

    @classmethod
    def from_env(cls, dry_run: bool = False) -> Optional["TelegramNotifier"]:
        """
        Create TelegramNotifier from environment variables.

        Returns:
            TelegramNotifier instance if configured, None otherwise
        """
        bot_token = os.environ.get("TELEGRAM_BOT_TOKEN", settings.TELEGRAM_BOT_TOKEN)
        chat_id = os.environ.get("TELEGRAM_CHAT_ID", settings.TELEGRAM_CHAT_ID)

        if not dry_run and (not bot_token or not chat_id):
            logger.warning(
                "Telegram not configured (set TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID)"
            )
            return None

        return cls(AlertConfig(bot_token=bot_token, chat_id=chat_id, dry_run=dry_run))

    @property
    def chat_id(self) -> str:
        return self.config.chat_id

    def _validate(self):
        """Validate configuration."""
        if not self.config.dry_run:
            if not self.config.bot_token:
                raise ValueError("TELEGRAM_BOT_TOKEN is required (or use --dry-run)")
            if not self.config.chat_id:
                raise ValueError("TELEGRAM_CHAT_ID is required (or use --dry-run)")

    def _truncate_message(self, text: str) -> str:
        """Truncate message to Telegram's character limit."""
        if len(text) > self.config.max_message_length:
            return text[:self.config.max_message_length - 20] + "\n... (truncated)"
        return text

    def send(self, destination: str, text: str) -> bool:
        """
        Send a message via Telegram Bot API.

        Args:
            destination: Chat ID to send to
            text: Plain text message

        Returns:
            True if Telegram accepted the message, False otherwise
        """
        text = self._truncate_message(text)

        if self.config.dry_run:
            logger.info(f"[DRY RUN] Would send Telegram message to {destination}:\n{text}")
            print(f"\n{'='*60}")
            print("[DRY RUN] Telegram Alert:")
            print("=" * 60)
            print(text)
            print("=" * 60 + "\n")
            return True

        url = TELEGRAM_API_URL.format(token=self.config.bot_token)
        payload = {
            "chat_id": destination,
            "text": text,
        }

        try:
            response = self._session.post(url, json=payload, timeout=self.config.timeout)
            response.raise_for_status()

            result = response.json()
            if not result.get("ok", False):
                logger.error(f"Telegram rejected message: {result.get('description', 'unknown error')}")
                return False

            message_id = result.get("result", {}).get("message_id")
            logger.info(f"Telegram alert sent successfully (message_id: {message_id})")
            return True

        except requests.exceptions.Timeout:
            logger.error("Telegram request timed out")
            return False
        except requests.exceptions.HTTPError as e:
            # Log status code without exposing token in URL
            status_code = e.response.status_code if e.response is not None else "unknown"
            logger.error(f"Telegram HTTP error: {status_code}")
            return False
        except requests.exceptions.ConnectionError:
            logger.error("Telegram connection error - network issue")
            return False
        except requests.exceptions.RequestException:
            # Generic request error - don't log exception details which may contain URL/token
            logger.error("Telegram request failed")
            return False
        except ValueError:
            logger.error("Telegram returned an invalid response body")
            return False
        except Exception:
            # Catch-all - don't log exception details to avoid token exposure
            logger.error("Unexpected error sending Telegram message")
            return False

    def send_service_status(
        self,
        status: str,
        details: str = "",
        timestamp: datetime = None
    ) -> bool:
        """
        Send service status notification.

        Args:
            status: Status type ("started", "stopped", "error")
            details: Additional details
            timestamp: Timestamp (default: now)

        Returns:
            True if sent successfully
        """
        if timestamp is None:
            timestamp = datetime.now(timezone.utc)

        # Convert to Eastern Time
        timestamp_et = timestamp.astimezone(EASTERN_TZ)

        status_text = {
            "started": "Monitor started",
            "stopped": "Monitor stopped",
            "error": "Monitor error",
        }.get(status, f"Status: {status}")

        time_str = timestamp_et.strftime('%H:%M:%S %Z')
        lines = [f"{status_text} at {time_str}"]

        if details:
            lines.append("")
            lines.append(details)

        return self.send(self.chat_id, "\n".join(lines))


def send_test_alert(
    bot_token: str = None,
    chat_id: str = None,
    dry_run: bool = False
) -> bool:
    """
    Send a test alert to verify Telegram configuration.

    Args:
        bot_token: Telegram bot token (default: from env)
        chat_id: Telegram chat ID (default: from env)
        dry_run: If True, print message instead of sending

    Returns:
        True if successful
    """
    if bot_token is None:
        bot_token = os.environ.get("TELEGRAM_BOT_TOKEN", settings.TELEGRAM_BOT_TOKEN)
    if chat_id is None:
        chat_id = os.environ.get("TELEGRAM_CHAT_ID", settings.TELEGRAM_CHAT_ID)

    notifier = TelegramNotifier(AlertConfig(
        bot_token=bot_token,
        chat_id=chat_id,
        dry_run=dry_run
    ))
    return notifier.send_service_status(
        "started",
        "Test alert - altFINS monitor configuration verified."
    )
