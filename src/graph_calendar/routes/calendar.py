from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from typing import List
import logging

from graph_calendar.auth.scopes import AuthenticatedUser, require_scopes
from graph_calendar.config import settings
from graph_calendar.constants import RESPONSE_MARKERS
from graph_calendar.errors import handle_graph_exception
from graph_calendar.graph.dto import CalendarEvent
from graph_calendar.graph.events import build_graph_event
from graph_calendar.graph.graph_client import GraphClient, get_graph_client
from graph_calendar.graph.utils.timezone_utils import get_week_window
from graph_calendar.routes.dto import NewEventRequest

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter()

verify_api_scope = require_scopes(settings.API_SCOPES)


@router.get("", response_model=List[CalendarEvent])
async def get_calendar(
    user: AuthenticatedUser = Depends(verify_api_scope),
    graph_client: GraphClient = Depends(get_graph_client),
):
    """
    Get the signed-in user's events for the current week.

    Flow:
    1. Read the user's time zone from their mailbox settings
    2. Compute Sunday-to-Sunday in that time zone, as UTC
    3. Return the first page of the calendar view, ordered by start time
    """
    logger.info("Authenticated user: %s", user.name)

    try:
        mailbox_settings = await graph_client.get_mailbox_settings()
        time_zone = mailbox_settings.time_zone

        start_of_week, end_of_week = get_week_window(time_zone)

        return await graph_client.get_calendar_view(start_of_week, end_of_week, time_zone)

    except Exception as e:
        return handle_graph_exception(e)


@router.post("", response_class=PlainTextResponse)
async def create_event(
    new_event: NewEventRequest,
    user: AuthenticatedUser = Depends(verify_api_scope),
    graph_client: GraphClient = Depends(get_graph_client),
):
    """
    Create an event in the signed-in user's calendar.

    Start and end are taken as local times in the user's mailbox time zone.
    """
    try:
        mailbox_settings = await graph_client.get_mailbox_settings()

        graph_event = build_graph_event(new_event, mailbox_settings.time_zone)
        await graph_client.create_event(graph_event)

        logger.info("Created event for user %s", user.id)
        return PlainTextResponse(RESPONSE_MARKERS.SUCCESS)

    except Exception as e:
        return handle_graph_exception(e)
