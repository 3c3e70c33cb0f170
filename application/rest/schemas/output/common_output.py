"""Common output schemas for API responses.

This module contains the Pydantic models shared by the tagging routers:
error bodies, the unused tag purge summary and the health status.
"""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Schema for error responses across all endpoints.

    Attributes:
        detail (str): Error message, the tagging error text for 500 and 503.

    Example:
        >>> ErrorResponse(detail="Tag 'work' not found")
    """
    detail: str


class PurgeResponse(BaseModel):
    """Schema for the outcome of an unused tag purge.

    Attributes:
        message (str): Informational message.
        deleted (int): Number of catalog tags deleted.

    Example:
        >>> PurgeResponse(message="Unused tags deleted", deleted=2)
    """
    message: str
    deleted: int


class HealthResponse(BaseModel):
    status: str
    service: str
    database: str
