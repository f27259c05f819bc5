"""
Microsoft Graph Calendar Data Models

Only the fields this API reads or writes are modelled. Field names are
snake_case in Python and camelCase on the wire.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class GraphModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmailAddress(GraphModel):
    name: Optional[str] = None
    address: Optional[str] = None


class Recipient(GraphModel):
    email_address: Optional[EmailAddress] = None


class DateTimeTimeZone(GraphModel):
    date_time: str
    time_zone: Optional[str] = None


class Location(GraphModel):
    display_name: Optional[str] = None


class CalendarEvent(GraphModel):
    """Calendar view entry, projected to the fields the tab displays."""
    subject: Optional[str] = None
    organizer: Optional[Recipient] = None
    start: Optional[DateTimeTimeZone] = None
    end: Optional[DateTimeTimeZone] = None
    location: Optional[Location] = None


class MailboxSettings(GraphModel):
    time_zone: Optional[str] = None


class Attendee(GraphModel):
    type: str = "required"
    email_address: EmailAddress


class ItemBody(GraphModel):
    content_type: str = "text"
    content: str


class GraphEvent(GraphModel):
    """Event record submitted to /me/events."""
    subject: Optional[str] = None
    start: DateTimeTimeZone
    end: DateTimeTimeZone
    attendees: Optional[List[Attendee]] = None
    body: Optional[ItemBody] = None
