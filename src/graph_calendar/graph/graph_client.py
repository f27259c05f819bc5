"""
Microsoft Graph Calendar Client
"""

import logging
from datetime import datetime
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
from fastapi import Depends

from graph_calendar.auth.scopes import AuthenticatedUser, get_current_user
from graph_calendar.auth.token_acquisition import GraphTokenProvider, get_token_provider
from graph_calendar.config import settings
from graph_calendar.constants import CALENDAR_SETTINGS
from graph_calendar.errors import GraphServiceError
from graph_calendar.graph.dto import CalendarEvent, GraphEvent, MailboxSettings
from graph_calendar.graph.utils.timezone_utils import to_graph_datetime

# Set up logging
logger = logging.getLogger(__name__)


class GraphClient:
    """
    Calls Microsoft Graph on behalf of the signed-in user.

    The Graph token is acquired on the first request, so a consent failure
    surfaces from whichever call is made first.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token_provider: GraphTokenProvider,
        user_assertion: str,
    ):
        self.http_client = http_client
        self.token_provider = token_provider
        self.user_assertion = user_assertion
        self._access_token: Optional[str] = None

    async def _get_headers(self) -> Dict[str, str]:
        if self._access_token is None:
            self._access_token = await self.token_provider.acquire_token(self.user_assertion)
        return {"Authorization": f"Bearer {self._access_token}"}

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        request_headers = await self._get_headers()
        if headers:
            request_headers.update(headers)

        response = await self.http_client.request(
            method, path, params=params, json=json, headers=request_headers
        )

        if response.is_error:
            raise self._to_service_error(response)

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    @staticmethod
    def _to_service_error(response: httpx.Response) -> GraphServiceError:
        try:
            payload = response.json()
        except ValueError:
            payload = {}

        error = payload.get("error") if isinstance(payload, dict) else None
        if not isinstance(error, dict):
            error = {}

        return GraphServiceError(
            status_code=response.status_code,
            code=error.get("code", "generalException"),
            message=error.get("message") or response.text or response.reason_phrase,
        )

    async def get_mailbox_settings(self) -> MailboxSettings:
        """
        Get the signed-in user's mailbox settings.

        Returns:
            MailboxSettings with the user's preferred time zone
        """
        data = await self._request("GET", "/me", params={"$select": "mailboxSettings"})
        return MailboxSettings.model_validate(data.get("mailboxSettings") or {})

    async def get_calendar_view(
        self,
        start: datetime,
        end: datetime,
        time_zone: str,
    ) -> List[CalendarEvent]:
        """
        Get the first page of the user's calendar view between two instants.

        Args:
            start: Window start (UTC)
            end: Window end (UTC)
            time_zone: Time zone the returned start/end values are expressed in

        Returns:
            Up to one page of CalendarEvent objects ordered by start time
        """
        params = {
            "startDateTime": to_graph_datetime(start),
            "endDateTime": to_graph_datetime(end),
            "$top": CALENDAR_SETTINGS.PAGE_SIZE,
            "$select": ",".join(CALENDAR_SETTINGS.SELECT_FIELDS),
            "$orderby": CALENDAR_SETTINGS.ORDER_BY,
        }
        # Dates in the response come back in the user's preferred time zone
        headers = {"Prefer": f'outlook.timezone="{time_zone}"'}

        data = await self._request("GET", "/me/calendarView", params=params, headers=headers)
        return [CalendarEvent.model_validate(item) for item in data.get("value", [])]

    async def create_event(self, event: GraphEvent) -> Dict[str, Any]:
        """
        Create an event in the user's default calendar.

        Args:
            event: Event record to submit

        Returns:
            The created event as returned by Graph
        """
        payload = event.model_dump(by_alias=True, exclude_none=True)
        return await self._request("POST", "/me/events", json=payload)


async def get_graph_client(
    user: AuthenticatedUser = Depends(get_current_user),
    token_provider: GraphTokenProvider = Depends(get_token_provider),
) -> AsyncIterator[GraphClient]:
    """Per-request Graph client - use as dependency"""
    async with httpx.AsyncClient(
        base_url=settings.GRAPH_BASE_URL,
        timeout=settings.GRAPH_TIMEOUT_SECONDS,
    ) as http_client:
        yield GraphClient(http_client, token_provider, user.token)
