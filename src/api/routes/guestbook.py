"""
Guestbook API routes
All database access goes through the guestbook service.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Depends

from models.guestbook import (
    GuestbookEntryCreate,
    GuestbookEntryResponse,
    DeleteEntryResponse,
    ErrorResponse,
)
from services.guestbook_service import GuestbookService, get_guestbook_service
from utils.error_handling import set_endpoint_context

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get(
    "",
    response_model=List[GuestbookEntryResponse],
    responses={500: {"model": ErrorResponse}}
)
async def list_entries(
    service: GuestbookService = Depends(get_guestbook_service)
):
    """Get the 50 most recent guestbook entries"""
    set_endpoint_context("list_entries")

    result = await service.list_entries()
    if not result.success:
        logger.error(f"Error fetching entries: {result.error}")
        raise HTTPException(status_code=500, detail="Failed to fetch entries")

    return result.data

@router.post(
    "",
    response_model=GuestbookEntryResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}
)
async def create_entry(
    request: Optional[GuestbookEntryCreate] = None,
    service: GuestbookService = Depends(get_guestbook_service)
):
    """Add a new guestbook entry"""
    set_endpoint_context("create_entry")
    request = request or GuestbookEntryCreate()

    result = await service.create_entry(name=request.name, message=request.message)
    if not result.success:
        if result.error_type == "INVALID_INPUT":
            raise HTTPException(status_code=400, detail=result.error)
        logger.error(f"Error adding entry: {result.error}")
        raise HTTPException(status_code=500, detail="Failed to add entry")

    return result.data[0]

@router.delete(
    "/{entry_id}",
    response_model=DeleteEntryResponse,
    responses={500: {"model": ErrorResponse}}
)
async def delete_entry(
    entry_id: str,
    service: GuestbookService = Depends(get_guestbook_service)
):
    """Delete a guestbook entry - succeeds whether or not the entry exists"""
    set_endpoint_context("delete_entry")

    result = await service.delete_entry(entry_id)
    if not result.success:
        logger.error(f"Error deleting entry: {result.error}")
        raise HTTPException(status_code=500, detail="Failed to delete entry")

    return DeleteEntryResponse(message="Entry deleted")
