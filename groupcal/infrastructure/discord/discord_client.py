from __future__ import annotations

import logging
from typing import Any

import httpx

from groupcal.application.exceptions import TransportFailure

EPHEMERAL_FLAG = 1 << 6


class DiscordClient:
    """Thin wrapper over the Discord REST API. Every failure surfaces as TransportFailure."""

    def __init__(
        self,
        bot_token: str,
        api_base: str = "https://discord.com/api/v10",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._api_base = api_base.rstrip("/")
        self._client = httpx.Client(
            timeout=10.0,
            headers={"Authorization": f"Bot {bot_token}", "User-Agent": "DiscordBot (groupcal, 0.1.0)"},
            transport=transport,
        )
        self._logger = logging.getLogger(__name__)

    def get_channel(self, channel_id: str) -> dict[str, Any]:
        return self._request("GET", f"/channels/{channel_id}")

    def list_messages(self, channel_id: str, limit: int = 100, before: str | None = None) -> list[dict[str, Any]]:
        """One page of channel history, newest first."""
        params: dict[str, Any] = {"limit": limit}
        if before:
            params["before"] = before
        return self._request("GET", f"/channels/{channel_id}/messages", params=params)

    def create_message(self, channel_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", f"/channels/{channel_id}/messages", json=payload)

    def edit_message(self, channel_id: str, message_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("PATCH", f"/channels/{channel_id}/messages/{message_id}", json=payload)

    def send_followup(self, application_id: str, interaction_token: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Follow-up on an interaction, visible only to the user who triggered it."""
        body = {**payload, "flags": EPHEMERAL_FLAG}
        return self._request("POST", f"/webhooks/{application_id}/{interaction_token}", json=body)

    def send_direct_message(self, user_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        channel = self._request("POST", "/users/@me/channels", json={"recipient_id": user_id})
        return self.create_message(channel["id"], payload)

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = self._client.request(method, f"{self._api_base}{path}", **kwargs)
        except httpx.HTTPError as e:
            self._logger.error("Discord request failed", extra={"path": path, "reason": str(e)})
            raise TransportFailure(f"{method} {path}: {e}") from e

        if resp.status_code >= 400:
            try:
                error_json = resp.json()
                error_code = error_json.get("code")
                error_message = error_json.get("message")
            except ValueError:
                error_code = None
                error_message = resp.text

            self._logger.error(
                "Discord request rejected",
                extra={
                    "path": path,
                    "status": resp.status_code,
                    "error_code": error_code,
                    "error_message": error_message,
                },
            )
            raise TransportFailure(f"{method} {path}: HTTP {resp.status_code} {error_message}")

        if resp.status_code == 204:
            return {}
        return resp.json()
