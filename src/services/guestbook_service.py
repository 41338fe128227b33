"""
Guestbook service - validation and storage of guestbook entries
"""

import logging
import re
from typing import Optional

import asyncpg
from fastapi import Depends

from database.connection import get_db_pool
from models.guestbook import NAME_MAX_LENGTH, MESSAGE_MAX_LENGTH, LIST_LIMIT
from services.base_service import BaseService, ServiceResult
from utils.helpers import format_timestamp, utc_now

logger = logging.getLogger(__name__)

# Range of the SERIAL primary key
_MIN_ENTRY_ID = -2**31
_MAX_ENTRY_ID = 2**31 - 1

_ENTRY_ID_PATTERN = re.compile(r"-?[0-9]+")

STORAGE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def validate_entry(name: Optional[str], message: Optional[str]) -> Optional[str]:
    """
    Check a new entry's fields in order, returning the first error message

    Returns:
        None when the entry is valid
    """
    if not name or not message:
        return "Name and message are required"
    if len(name) > NAME_MAX_LENGTH:
        return f"Name must be under {NAME_MAX_LENGTH} characters"
    if len(message) > MESSAGE_MAX_LENGTH:
        return f"Message must be under {MESSAGE_MAX_LENGTH} characters"
    return None


def parse_entry_id(raw_id: str) -> Optional[int]:
    """Parse a path id; None means it cannot match any stored entry"""
    if not isinstance(raw_id, str) or not _ENTRY_ID_PATTERN.fullmatch(raw_id):
        return None
    entry_id = int(raw_id)
    if not _MIN_ENTRY_ID <= entry_id <= _MAX_ENTRY_ID:
        return None
    return entry_id


class GuestbookService(BaseService):
    """Service for guestbook entry operations"""

    def __init__(self, db_pool):
        super().__init__(db_pool, "guestbook")

    async def list_entries(self, limit: int = LIST_LIMIT) -> ServiceResult:
        """Most recent entries first, capped at limit"""
        query = (
            "SELECT id, name, message, created_at FROM guestbook "
            "ORDER BY created_at DESC, id DESC LIMIT $1"
        )
        try:
            rows = await self._fetch(query, limit)
        except STORAGE_ERRORS as e:
            return self._database_error("List", e)

        return ServiceResult(success=True, data=rows, count=len(rows))

    async def create_entry(self, name: Optional[str], message: Optional[str]) -> ServiceResult:
        """
        Validate and insert a new entry

        Args:
            name: Author name, 1-100 characters
            message: Entry text, 1-1000 characters

        Returns:
            ServiceResult with the created entry. Its created_at is the time of
            this call, not the value stored by the database.
        """
        validation_error = validate_entry(name, message)
        if validation_error:
            return ServiceResult(
                success=False,
                error=validation_error,
                error_type="INVALID_INPUT"
            )

        try:
            row = await self._fetchrow(
                "INSERT INTO guestbook (name, message) VALUES ($1, $2) RETURNING id",
                name,
                message
            )
        except STORAGE_ERRORS as e:
            return self._database_error("Create", e)

        if not row:
            return ServiceResult(
                success=False,
                error="Insert operation failed - no data returned",
                error_type="DATABASE_ERROR"
            )

        entry = {
            "id": row["id"],
            "name": name,
            "message": message,
            "created_at": format_timestamp(utc_now())
        }
        logger.info(f"Created guestbook entry {entry['id']}")
        return ServiceResult(success=True, data=[entry], count=1)

    async def delete_entry(self, raw_id: str) -> ServiceResult:
        """Delete an entry by id; unknown ids succeed with a count of zero"""
        entry_id = parse_entry_id(raw_id)
        if entry_id is None:
            logger.info(f"Ignoring delete for unmatched id {raw_id!r}")
            return ServiceResult(success=True, count=0)

        try:
            deleted = await self._execute("DELETE FROM guestbook WHERE id = $1", entry_id)
        except STORAGE_ERRORS as e:
            return self._database_error("Delete", e)

        logger.info(f"Deleted {deleted} guestbook entry for id {entry_id}")
        return ServiceResult(success=True, count=deleted)


def get_guestbook_service(db_pool=Depends(get_db_pool)) -> GuestbookService:
    """FastAPI dependency building a service bound to the shared pool"""
    return GuestbookService(db_pool)
