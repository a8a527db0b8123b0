"""Join (joaoapps) push adapter.

Implements both the delivery port and the target directory port on top of
the Join HTTP API using httpx.

Endpoints:
- registration/v1/listDevices: device names and ids for the API key
- messaging/v1/sendPush: push a note to one or more devices, or group.all

Developer Golden Rules:
1. FIRE-AND-FORGET - a failed push is logged, never retried or raised
2. Device listing failures are fatal at startup (TargetDirectoryError)
3. The API key never appears in logs
"""

from __future__ import annotations

from typing import Any

import httpx

from pushwatch.domain.errors.configuration import TargetDirectoryError
from pushwatch.domain.models.entity import EntityRef
from pushwatch.infrastructure.observability.logging import get_logger_for_service

JOIN_API_BASE_URL = "https://joinjoaomgcd.appspot.com/_ah/api"

# Join device id that addresses every device of the account
JOIN_ALL_DEVICES_ID = "group.all"

# Avatar thumbnail of a tracked entity, keyed by its id
DEFAULT_ICON_URL_TEMPLATE = "http://img.mfcimg.com/photos2/{prefix}/{entity_id}/avatar.90x90.jpg"

DEFAULT_TIMEOUT_SECONDS = 10.0


class JoinClient:
    """Join API client used as NotificationDelivery and TargetDirectory.

    Usage:
        async with httpx.AsyncClient() as http:
            join = JoinClient(api_key, http_client=http)
            devices = await join.list_targets()
            await join.deliver(["abc123"], "PM: someone", "[12:00:00] Is now on.")
    """

    def __init__(
        self,
        api_key: str,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = JOIN_API_BASE_URL,
        icon_url_template: str | None = DEFAULT_ICON_URL_TEMPLATE,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: Join API key.
            http_client: Shared httpx client; one is created per call if None.
            base_url: Join API base URL.
            icon_url_template: Icon URL format (prefix, entity_id), or None
                to send notifications without an icon.
            timeout_seconds: HTTP timeout per request.
        """
        if not api_key:
            raise ValueError("Join API key is required")
        self._api_key = api_key
        self._http_client = http_client
        self._base_url = base_url.rstrip("/")
        self._icon_url_template = icon_url_template
        self._timeout_seconds = timeout_seconds
        self._log = get_logger_for_service("JoinClient", component="delivery")

    async def list_targets(self) -> dict[str, str]:
        """List the account's devices.

        Returns:
            Mapping of device name to device id.

        Raises:
            TargetDirectoryError: The request failed or the response was not
                a non-empty device list.
        """
        url = f"{self._base_url}/registration/v1/listDevices"
        try:
            response = await self._get(url, {"apikey": self._api_key})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise TargetDirectoryError(f"Join device listing failed: {e}") from e

        records = payload.get("records") if isinstance(payload, dict) else None
        if not isinstance(records, list) or not records:
            raise TargetDirectoryError(
                f"Join sent the device list in an unexpected format: {payload!r}"
            )

        devices: dict[str, str] = {}
        for record in records:
            if isinstance(record, dict) and "deviceName" in record and "deviceId" in record:
                devices[str(record["deviceName"])] = str(record["deviceId"])

        self._log.info("join_devices_listed", devices=sorted(devices))
        return devices

    async def deliver(
        self,
        targets: list[str] | None,
        title: str,
        body: str,
        entity: EntityRef | None = None,
    ) -> None:
        """Push one note through Join.

        Args:
            targets: Device ids, or None for every device.
            title: Note title.
            body: Note text.
            entity: Entity the note is about, used for the icon.
        """
        params: dict[str, Any] = {
            "apikey": self._api_key,
            "deviceId": JOIN_ALL_DEVICES_ID if targets is None else ",".join(targets),
            "title": title,
            "text": body,
        }
        icon = self.icon_url(entity)
        if icon is not None:
            params["icon"] = icon

        url = f"{self._base_url}/messaging/v1/sendPush"
        try:
            response = await self._get(url, params)
        except httpx.HTTPError as e:
            self._log.warning("join_push_error", targets=targets, error=str(e))
            return

        if response.status_code >= 300:
            self._log.warning(
                "join_push_failed", targets=targets, status_code=response.status_code
            )
            return
        self._log.info("join_push_sent", targets=targets, status_code=response.status_code)

    def icon_url(self, entity: EntityRef | None) -> str | None:
        """Icon URL for an entity, or None when icons are disabled."""
        if entity is None or self._icon_url_template is None:
            return None
        entity_id = str(entity.entity_id)
        return self._icon_url_template.format(prefix=entity_id[:3], entity_id=entity_id)

    async def _get(self, url: str, params: dict[str, Any]) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.get(url, params=params, timeout=self._timeout_seconds)
        async with httpx.AsyncClient() as client:
            return await client.get(url, params=params, timeout=self._timeout_seconds)
