"""Unit tests for the Microsoft Graph calendar client."""

import json
from datetime import datetime

import httpx
import pytest
import pytz

from graph_calendar.errors import ConsentRequiredError, GraphServiceError
from graph_calendar.graph.dto import DateTimeTimeZone, GraphEvent
from graph_calendar.graph.graph_client import GraphClient

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"


class _FakeTokenProvider:
    def __init__(self, error=None):
        self.error = error
        self.assertions = []

    async def acquire_token(self, user_assertion):
        self.assertions.append(user_assertion)
        if self.error is not None:
            raise self.error
        return "graph-access-token"


def _make_client(handler, token_provider=None):
    http_client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url=GRAPH_BASE_URL,
    )
    return GraphClient(http_client, token_provider or _FakeTokenProvider(), "incoming-user-token")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_mailbox_settings_selects_mailbox_settings():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"mailboxSettings": {"timeZone": "Pacific Standard Time"}})

    graph_client = _make_client(handler)
    settings = await graph_client.get_mailbox_settings()
    await graph_client.http_client.aclose()

    assert settings.time_zone == "Pacific Standard Time"
    assert requests[0].url.path == "/v1.0/me"
    assert requests[0].url.params["$select"] == "mailboxSettings"
    assert requests[0].headers["Authorization"] == "Bearer graph-access-token"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_calendar_view_sends_window_and_query_options():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={
            "value": [
                {
                    "subject": "Standup",
                    "organizer": {"emailAddress": {"name": "Megan Bowen", "address": "meganb@contoso.com"}},
                    "start": {"dateTime": "2026-10-12T09:00:00.0000000", "timeZone": "Pacific Standard Time"},
                    "end": {"dateTime": "2026-10-12T09:15:00.0000000", "timeZone": "Pacific Standard Time"},
                    "location": {"displayName": ""},
                }
            ],
            "@odata.nextLink": f"{GRAPH_BASE_URL}/me/calendarView?$skip=50",
        })

    graph_client = _make_client(handler)
    events = await graph_client.get_calendar_view(
        datetime(2026, 10, 11, 7, 0, tzinfo=pytz.UTC),
        datetime(2026, 10, 18, 7, 0, tzinfo=pytz.UTC),
        "Pacific Standard Time",
    )
    await graph_client.http_client.aclose()

    request = requests[0]
    assert request.method == "GET"
    assert request.url.path == "/v1.0/me/calendarView"
    assert request.url.params["startDateTime"] == "2026-10-11T07:00:00Z"
    assert request.url.params["endDateTime"] == "2026-10-18T07:00:00Z"
    assert request.url.params["$top"] == "50"
    assert request.url.params["$select"] == "subject,organizer,start,end,location"
    assert request.url.params["$orderby"] == "start/dateTime"
    assert request.headers["Prefer"] == 'outlook.timezone="Pacific Standard Time"'

    # Only the first page is returned
    assert len(requests) == 1
    assert len(events) == 1
    assert events[0].subject == "Standup"
    assert events[0].organizer.email_address.address == "meganb@contoso.com"
    assert events[0].start.time_zone == "Pacific Standard Time"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_event_posts_payload_without_unset_fields():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(201, json={"id": "AAMkAGI2"})

    event = GraphEvent(
        subject="Planning",
        start=DateTimeTimeZone(date_time="2026-10-14T09:00:00", time_zone="Pacific Standard Time"),
        end=DateTimeTimeZone(date_time="2026-10-14T10:00:00", time_zone="Pacific Standard Time"),
    )

    graph_client = _make_client(handler)
    created = await graph_client.create_event(event)
    await graph_client.http_client.aclose()

    assert created == {"id": "AAMkAGI2"}
    assert requests[0].method == "POST"
    assert requests[0].url.path == "/v1.0/me/events"
    assert json.loads(requests[0].content) == {
        "subject": "Planning",
        "start": {"dateTime": "2026-10-14T09:00:00", "timeZone": "Pacific Standard Time"},
        "end": {"dateTime": "2026-10-14T10:00:00", "timeZone": "Pacific Standard Time"},
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_error_response_raises_graph_service_error():
    def handler(request):
        return httpx.Response(429, json={
            "error": {"code": "TooManyRequests", "message": "Application is over its MailboxConcurrency limit."}
        })

    graph_client = _make_client(handler)
    with pytest.raises(GraphServiceError) as exc_info:
        await graph_client.get_mailbox_settings()
    await graph_client.http_client.aclose()

    assert exc_info.value.status_code == 429
    assert exc_info.value.code == "TooManyRequests"
    assert str(exc_info.value) == "Code: TooManyRequests\nMessage: Application is over its MailboxConcurrency limit."


@pytest.mark.unit
@pytest.mark.asyncio
async def test_non_json_error_response_falls_back_to_body_text():
    def handler(request):
        return httpx.Response(503, text="Service Unavailable")

    graph_client = _make_client(handler)
    with pytest.raises(GraphServiceError) as exc_info:
        await graph_client.get_mailbox_settings()
    await graph_client.http_client.aclose()

    assert exc_info.value.status_code == 503
    assert exc_info.value.code == "generalException"
    assert exc_info.value.message == "Service Unavailable"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_token_is_acquired_once_per_client():
    def handler(request):
        return httpx.Response(200, json={"mailboxSettings": {"timeZone": "UTC"}, "value": []})

    token_provider = _FakeTokenProvider()
    graph_client = _make_client(handler, token_provider)
    await graph_client.get_mailbox_settings()
    await graph_client.get_calendar_view(
        datetime(2026, 10, 11, tzinfo=pytz.UTC),
        datetime(2026, 10, 18, tzinfo=pytz.UTC),
        "UTC",
    )
    await graph_client.http_client.aclose()

    assert token_provider.assertions == ["incoming-user-token"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_consent_failure_stops_before_any_graph_request():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={})

    graph_client = _make_client(handler, _FakeTokenProvider(error=ConsentRequiredError("invalid_grant")))
    with pytest.raises(ConsentRequiredError):
        await graph_client.get_mailbox_settings()
    await graph_client.http_client.aclose()

    assert requests == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_content_type_is_only_sent_with_a_body():
    requests = []

    def handler(request):
        requests.append(request)
        if request.method == "POST":
            return httpx.Response(201, json={"id": "AAMkAGI2"})
        return httpx.Response(200, json={"mailboxSettings": {"timeZone": "UTC"}})

    event = GraphEvent(
        subject="Planning",
        start=DateTimeTimeZone(date_time="2026-10-14T09:00:00", time_zone="UTC"),
        end=DateTimeTimeZone(date_time="2026-10-14T10:00:00", time_zone="UTC"),
    )

    graph_client = _make_client(handler)
    await graph_client.get_mailbox_settings()
    await graph_client.create_event(event)
    await graph_client.http_client.aclose()

    get_request, post_request = requests
    assert "Content-Type" not in get_request.headers
    assert post_request.headers["Content-Type"] == "application/json"
