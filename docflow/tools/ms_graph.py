"""Microsoft Graph REST client: OneDrive, Outlook mail, To Do and calendar.

Every call takes the bearer token as an argument; tokens come from the
``CredentialBroker`` and are never stored here. Failures surface as
``httpx`` exceptions and are wrapped by the native skill that made the call.
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"


def drive_item_path(path: str) -> str:
    """``/me/drive/root:/<path>:`` address for a OneDrive path."""
    if not path.startswith("/"):
        path = "/" + path
    return f"/me/drive/root:{quote(path)}:"


def graph_datetime(value: datetime) -> dict[str, str]:
    """Graph ``dateTimeTimeZone`` payload, normalized to UTC."""
    if value.tzinfo is None:
        raise ValueError("Graph timestamps must be timezone-aware")
    return {
        "dateTime": value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S"),
        "timeZone": "UTC",
    }


class GraphClient:
    """Thin async wrapper over the Graph REST API."""

    def __init__(
        self,
        base_url: str = GRAPH_BASE_URL,
        timeout_seconds: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
            transport=transport,
        )

    async def __aenter__(self) -> GraphClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        token: str,
        op: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        started = time.perf_counter()
        try:
            response = await self._client.request(
                method,
                path,
                json=json,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            status = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
            logger.error(
                "Graph %s failed after %.0f ms (status=%s): %s",
                op,
                (time.perf_counter() - started) * 1000,
                status,
                e,
            )
            raise
        logger.debug("Graph %s ok in %.0f ms", op, (time.perf_counter() - started) * 1000)
        return response


class OneDriveConnector:
    def __init__(self, client: GraphClient):
        self._client = client

    async def get_file_content(self, path: str, *, token: str) -> str:
        response = await self._client.request(
            "GET", f"{drive_item_path(path)}/content", token=token, op="drive.content"
        )
        return response.text

    async def create_share_link(
        self, path: str, *, token: str, link_type: str = "view", scope: str = "anonymous"
    ) -> str:
        response = await self._client.request(
            "POST",
            f"{drive_item_path(path)}/createLink",
            token=token,
            op="drive.create_link",
            json={"type": link_type, "scope": scope},
        )
        return response.json()["link"]["webUrl"]


class OutlookMailConnector:
    def __init__(self, client: GraphClient):
        self._client = client

    async def get_my_email_address(self, *, token: str) -> str:
        response = await self._client.request("GET", "/me", token=token, op="me.get")
        data = response.json()
        return data.get("mail") or data["userPrincipalName"]

    async def send_email(
        self, recipients: list[str], subject: str, body: str, *, token: str
    ) -> None:
        message = {
            "subject": subject,
            "body": {"contentType": "Text", "content": body},
            "toRecipients": [{"emailAddress": {"address": r}} for r in recipients],
        }
        await self._client.request(
            "POST",
            "/me/sendMail",
            token=token,
            op="mail.send",
            json={"message": message, "saveToSentItems": True},
        )


class TodoConnector:
    """Microsoft To Do; tasks go to the user's default list."""

    def __init__(self, client: GraphClient):
        self._client = client
        self._default_list_id: str | None = None

    async def _default_list(self, token: str) -> str:
        if self._default_list_id is None:
            response = await self._client.request(
                "GET", "/me/todo/lists", token=token, op="todo.lists"
            )
            lists = response.json().get("value", [])
            default = next(
                (item for item in lists if item.get("wellknownListName") == "defaultList"),
                lists[0] if lists else None,
            )
            if default is None:
                raise LookupError("No Microsoft To Do task list found")
            self._default_list_id = default["id"]
        return self._default_list_id

    async def add_task(
        self, title: str, reminder: datetime | None = None, *, token: str
    ) -> str:
        payload: dict[str, Any] = {"title": title}
        if reminder is not None:
            payload["isReminderOn"] = True
            payload["reminderDateTime"] = graph_datetime(reminder)
        list_id = await self._default_list(token)
        response = await self._client.request(
            "POST", f"/me/todo/lists/{list_id}/tasks", token=token, op="todo.add_task", json=payload
        )
        return response.json()["id"]


class OutlookCalendarConnector:
    def __init__(self, client: GraphClient):
        self._client = client

    async def add_event(
        self, subject: str, start: datetime, end: datetime, *, token: str
    ) -> str:
        if end <= start:
            raise ValueError("Event end must be after its start")
        response = await self._client.request(
            "POST",
            "/me/events",
            token=token,
            op="calendar.add_event",
            json={"subject": subject, "start": graph_datetime(start), "end": graph_datetime(end)},
        )
        return response.json()["id"]
