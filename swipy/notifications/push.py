from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

import httpx

from .config import DEFAULT_PUSH_CONFIG, PushConfig

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"^(ExponentPushToken|ExpoPushToken)\[.+\]$")
_UUID_RE = re.compile(r"^[a-z\d]{8}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{4}-[a-z\d]{12}$", re.IGNORECASE)


def is_expo_push_token(token: Any) -> bool:
    """Accept ``ExponentPushToken[...]``, ``ExpoPushToken[...]`` or a bare UUID."""
    return isinstance(token, str) and bool(_TOKEN_RE.match(token) or _UUID_RE.match(token))


@dataclass
class PushTicket:
    """Delivery result for one push message."""

    status: str
    id: str | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def chunk_messages(messages: list[dict[str, Any]], size: int) -> list[list[dict[str, Any]]]:
    return [messages[i:i + size] for i in range(0, len(messages), size)]


class ExpoPushClient:
    """Sends batched push messages to the Expo push service."""

    def __init__(self, config: PushConfig = DEFAULT_PUSH_CONFIG, http_client: httpx.Client | None = None) -> None:
        self.config = config
        self._http = http_client if http_client is not None else httpx.Client(timeout=config.timeout)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.config.access_token:
            headers["Authorization"] = f"Bearer {self.config.access_token}"
        return headers

    def _send_chunk(self, chunk: list[dict[str, Any]]) -> list[PushTicket]:
        try:
            response = self._http.post(self.config.url, json=chunk, headers=self._headers())
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Expo push request failed for %d messages", len(chunk), exc_info=True)
            return [PushTicket(status="error", message=str(exc)) for _ in chunk]

        data = body.get("data", []) if isinstance(body, dict) else []
        tickets = [
            PushTicket(
                status=item.get("status", "error"),
                id=item.get("id"),
                message=item.get("message"),
                details=item.get("details") or {},
            )
            for item in data
        ]
        # Expo answers one ticket per message; pad if the response was short.
        while len(tickets) < len(chunk):
            tickets.append(PushTicket(status="error", message="No ticket returned"))
        return tickets

    def send(self, messages: list[dict[str, Any]]) -> list[PushTicket]:
        """
        Send messages in chunks of at most ``config.chunk_size``.

        Returns one ticket per message. Transport failures become error
        tickets instead of exceptions. A disabled client returns no tickets.
        """
        if not self.config.enabled or not messages:
            return []

        tickets: list[PushTicket] = []
        for chunk in chunk_messages(messages, self.config.chunk_size):
            tickets.extend(self._send_chunk(chunk))

        for ticket in tickets:
            if not ticket.ok:
                logger.warning("Push message rejected: %s %s", ticket.message, ticket.details)
        return tickets

    def close(self) -> None:
        self._http.close()
