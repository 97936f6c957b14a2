# middleware/error_handling.py

"""
Error handling utilities for consistent plain-text error responses and logging.
"""

import time
import random
import logging
from quart import Response

from logic.errors import UserStoreError

# Configure logging
logger = logging.getLogger(__name__)

async def generate_error_id():
    """
    Generate a unique error ID for tracking errors.

    Returns:
        str: A unique error ID in format 'err_timestamp_random'
    """
    timestamp = int(time.time())
    random_suffix = random.randint(1000, 9999)
    return f"err_{timestamp}_{random_suffix}"

def text_response(message, status_code=200, headers=None):
    """Plain-text response with the given status."""
    return Response(message, status=status_code, mimetype="text/plain", headers=headers)

async def create_error_response(error, message=None, status_code=500):
    """
    Create a standardized plain-text error response for a server-side failure.

    Args:
        error: The error object or message (logged, never returned)
        message: Optional user-facing message (defaults to a generic message)
        status_code: HTTP status code (defaults to 500)

    Returns:
        Response: text/plain response carrying an X-Error-ID header
    """
    error_id = await generate_error_id()
    user_message = message or "An error occurred. Please try again later."
    detail = getattr(error, "detail", None) or str(error)
    cause = getattr(error, "__cause__", None)
    if cause is not None:
        detail = f"{detail} (caused by {type(cause).__name__}: {cause})"

    # Log the error with error_id for tracking
    logger.error(f"Error ID {error_id}: {user_message}: {detail}")

    return text_response(user_message, status_code, headers={"X-Error-ID": error_id})

async def handle_user_store_error(error: UserStoreError):
    """
    Map a UserStoreError onto its HTTP status.

    4xx outcomes are expected results of a request and only logged at INFO;
    5xx outcomes go through create_error_response so the detail is logged and
    hidden from the caller.
    """
    if error.status_code >= 500:
        return await create_error_response(error, error.message, error.status_code)

    logger.info(f"{error.status_code} {error.message}")
    return text_response(error.message, error.status_code)

def register_error_handlers(target):
    """Attach the handlers to a Quart app or blueprint."""
    target.register_error_handler(UserStoreError, handle_user_store_error)
