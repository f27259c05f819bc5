"""
Application and Calendar Constants
"""


class APP_SETTINGS:
    """Application metadata"""
    APP_NAME = "Graph Calendar API"
    VERSION = "1.0.0"
    DESCRIPTION = "Calendar tab backend: weekly calendar view and event creation through Microsoft Graph"


class CALENDAR_SETTINGS:
    """Calendar view and event settings"""
    PAGE_SIZE = 50
    SELECT_FIELDS = ["subject", "organizer", "start", "end", "location"]
    ORDER_BY = "start/dateTime"
    WEEK_LENGTH_DAYS = 7


class RESPONSE_MARKERS:
    """Literal plain-text bodies the tab client looks for"""
    CONSENT_REQUIRED = "consent_required"
    SUCCESS = "success"
