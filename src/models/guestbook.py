"""
Guestbook Pydantic models
"""

from typing import Optional
from pydantic import BaseModel

NAME_MAX_LENGTH = 100
MESSAGE_MAX_LENGTH = 1000
LIST_LIMIT = 50

class GuestbookEntryCreate(BaseModel):
    """Request body; both fields are optional here and presence is checked by the service"""
    name: Optional[str] = None
    message: Optional[str] = None

class GuestbookEntryResponse(BaseModel):
    id: int
    name: str
    message: str
    created_at: str

class DeleteEntryResponse(BaseModel):
    message: str

class HealthResponse(BaseModel):
    status: str
    service: str

class ErrorResponse(BaseModel):
    error: str
