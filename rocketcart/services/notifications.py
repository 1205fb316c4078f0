"""
Notification Sinks

Fire-and-forget channels for the user-facing cart messages. A sink
may fail; the caller logs it and moves on.
"""

import asyncio
import os
from typing import Protocol

import httpx

from rocketcart.logging import get_logger

logger = get_logger(__name__)

TELEGRAM_TOKEN = os.environ.get("TELEGRAM_TOKEN", "")
TELEGRAM_CHAT_ID = os.environ.get("TELEGRAM_CHAT_ID", "")

NO_RESPONSE_BODY = "No response body"
PERMANENT_ERROR_CODES = {400, 403, 404}
MAX_MESSAGE_LENGTH = 4096


class NotificationSink(Protocol):
    async def send(self, text: str) -> None: ...


class LogNotificationSink:
    """Writes notifications to the log (headless sessions, local runs)."""

    def __init__(self, name: str = "rocketcart.notifications.user"):
        self._logger = get_logger(name)

    async def send(self, text: str) -> None:
        self._logger.warning(text)


def _is_permanent_error(status_code: int) -> bool:
    """Check if error is permanent (no retry needed)."""
    return status_code in PERMANENT_ERROR_CODES


def _calculate_backoff_delay(attempt: int) -> float:
    """Calculate exponential backoff delay."""
    return float(0.5 * (2 ** attempt))


def _truncate_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """Truncate message to Telegram's limit."""
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


class TelegramNotificationSink:
    """
    Sends notifications to a Telegram chat through the Bot API.

    Retries timeouts, connection errors and non-permanent HTTP errors
    with exponential backoff. Never raises.
    """

    def __init__(
        self,
        chat_id: int | str = TELEGRAM_CHAT_ID,
        bot_token: str = TELEGRAM_TOKEN,
        retries: int = 2,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.chat_id = chat_id
        self.bot_token = bot_token
        self.retries = retries
        self.timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"https://api.telegram.org/bot{self.bot_token}/sendMessage"

    async def send(self, text: str) -> None:
        await self.send_message(text)

    async def send_message(self, text: str) -> bool:
        """
        Send a message with retry logic.

        Returns:
            True if sent successfully, False otherwise
        """
        if not self.bot_token or not self.chat_id:
            logger.warning("Telegram sink not configured, dropping notification")
            return False

        payload = {"chat_id": self.chat_id, "text": _truncate_message(text)}
        last_error = None

        for attempt in range(self.retries + 1):
            try:
                async with httpx.AsyncClient(transport=self._transport) as client:
                    response = await client.post(self.url, json=payload, timeout=self.timeout)

                if response.status_code == 200:
                    logger.debug(f"Notification sent to {self.chat_id}")
                    return True

                error_text = response.text[:200] if response.text else NO_RESPONSE_BODY
                logger.warning(f"Telegram API error: status={response.status_code}, response={error_text}")

                if _is_permanent_error(response.status_code):
                    return False

                last_error = f"HTTP {response.status_code}"

            except httpx.TimeoutException:
                last_error = "Timeout"
                logger.warning(f"Timeout sending notification (attempt {attempt + 1}/{self.retries + 1})")
            except httpx.HTTPError as e:
                last_error = f"Connection error: {e}"
                logger.warning(f"Connection error sending notification: {e}")

            if attempt < self.retries:
                await asyncio.sleep(_calculate_backoff_delay(attempt))

        logger.error(f"Failed to send notification after {self.retries + 1} attempts: {last_error}")
        return False


def telegram_configured() -> bool:
    return bool(TELEGRAM_TOKEN and TELEGRAM_CHAT_ID)
