from graph_calendar.graph.dto import (
    Attendee,
    DateTimeTimeZone,
    EmailAddress,
    GraphEvent,
    ItemBody,
)
from graph_calendar.routes.dto import NewEventRequest


def build_graph_event(new_event: NewEventRequest, time_zone: str) -> GraphEvent:
    """
    Build the Graph event record for a new event request.

    Start and end are interpreted in the user's mailbox time zone. Attendees
    are split on ';' and added as required attendees; addresses are passed
    through unvalidated.
    """
    graph_event = GraphEvent(
        subject=new_event.subject,
        start=DateTimeTimeZone(date_time=new_event.start, time_zone=time_zone),
        end=DateTimeTimeZone(date_time=new_event.end, time_zone=time_zone),
    )

    if new_event.attendees:
        graph_event.attendees = [
            Attendee(email_address=EmailAddress(address=email))
            for email in new_event.attendees.split(";")
        ]

    if new_event.body:
        graph_event.body = ItemBody(content=new_event.body)

    return graph_event
