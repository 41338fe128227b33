"""
Base service layer for pooled database access
"""

import logging
from typing import Dict, Any, List, Optional
from dataclasses import dataclass

from utils.helpers import format_timestamp

logger = logging.getLogger(__name__)

@dataclass
class ServiceResult:
    """Result from service operation"""
    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    count: int = 0
    error: Optional[str] = None
    error_type: Optional[str] = None

class BaseService:
    """Base service holding a connection pool and running single statements against it"""

    def __init__(self, db_pool, table_name: str):
        self.db_pool = db_pool
        self.table_name = table_name

    @staticmethod
    def _serialize_row(row) -> Dict[str, Any]:
        """Convert a record to a dict with datetime values as ISO strings"""
        data = dict(row)
        for key, value in data.items():
            if hasattr(value, 'isoformat'):
                data[key] = format_timestamp(value)
        return data

    async def _fetch(self, query: str, *params) -> List[Dict[str, Any]]:
        """Execute a query returning rows"""
        logger.debug(f"Executing READ query: {query}")
        logger.debug(f"Parameters: {list(params)}")

        async with self.db_pool.acquire() as conn:
            rows = await conn.fetch(query, *params)
        return [self._serialize_row(row) for row in rows]

    async def _fetchrow(self, query: str, *params) -> Optional[Dict[str, Any]]:
        """Execute a query returning at most one row"""
        logger.debug(f"Executing query: {query}")
        logger.debug(f"Parameters: {list(params)}")

        async with self.db_pool.acquire() as conn:
            row = await conn.fetchrow(query, *params)
        return self._serialize_row(row) if row else None

    async def _execute(self, query: str, *params) -> int:
        """Execute a statement and return the number of affected rows"""
        logger.debug(f"Executing statement: {query}")
        logger.debug(f"Parameters: {list(params)}")

        async with self.db_pool.acquire() as conn:
            result = await conn.execute(query, *params)

        # asyncpg returns a status string such as "DELETE 3"
        try:
            return int(result.split()[-1]) if result else 0
        except ValueError:
            return 0

    def _database_error(self, operation: str, error: Exception) -> ServiceResult:
        logger.error(f"{operation} operation failed for {self.table_name}: {error}", exc_info=True)
        return ServiceResult(
            success=False,
            error=f"Database operation failed: {error}",
            error_type="DATABASE_ERROR"
        )
