"""
Configuration settings for the Guestbook API
"""

import os
import logging

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

# Database configuration
DB_HOST = os.getenv("DB_HOST", "postgres-service")
DB_PORT = int(os.getenv("DB_PORT", 5432))
DB_USER = os.getenv("DB_USER", "guestbook_user")
DB_PASSWORD = os.getenv("DB_PASSWORD", "")
DB_NAME = os.getenv("DB_NAME", "guestbook")

# Pool sizing - the pool is fixed at 10 connections and acquisitions beyond it wait without a timeout
DB_POOL_MIN_SIZE = int(os.getenv("DB_POOL_MIN_SIZE", 1))
DB_POOL_MAX_SIZE = 10

# Startup retry policy
DB_CONNECT_ATTEMPTS = int(os.getenv("DB_CONNECT_ATTEMPTS", 10))
DB_CONNECT_RETRY_DELAY = float(os.getenv("DB_CONNECT_RETRY_DELAY", 5))

# HTTP server
PORT = int(os.getenv("PORT", 3000))
SERVICE_NAME = "guestbook-api"

# CORS settings
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
    if origin.strip()
]

if DB_POOL_MIN_SIZE > DB_POOL_MAX_SIZE:
    raise ValueError("DB_POOL_MIN_SIZE must not exceed DB_POOL_MAX_SIZE")
if DB_CONNECT_ATTEMPTS < 1:
    raise ValueError("DB_CONNECT_ATTEMPTS must be at least 1")

logger.info(f"Database target: {DB_USER}@{DB_HOST}:{DB_PORT}/{DB_NAME}")
