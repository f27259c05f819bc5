"""
Routes Data Transfer Objects (DTOs)

This module contains the Pydantic models used by API routes:
- Request model for the create event endpoint
- Health check response models
"""

from pydantic import BaseModel
from typing import Optional, Dict


class NewEventRequest(BaseModel):
    """Request model for creating a calendar event."""
    subject: Optional[str] = None
    start: str
    end: str
    attendees: Optional[str] = None
    body: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    service: Optional[str] = None
    components: Optional[Dict[str, str]] = None
