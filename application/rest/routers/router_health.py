import logging

from application.rest.schemas.output.common_output import ErrorResponse, HealthResponse
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from utils.dependencies import get_db

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    path="/health",
    description="Health check endpoint verifying the tag store is reachable.",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": HealthResponse,
            "description": "Service and tag store are operational.",
        },
        status.HTTP_503_SERVICE_UNAVAILABLE: {
            "model": ErrorResponse,
            "description": "Tag store unreachable.",
            "content": {
                "application/json": {"example": {"detail": "Tag store unavailable"}}
            },
        },
    },
)
async def health_check(db: Session = Depends(get_db)) -> HealthResponse:
    """Health check endpoint for service monitoring.

    Returns:
        HealthResponse: Service status information containing status and service name.

    Raises:
        HTTPException: 503 if the database does not answer.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Tag store unavailable",
        ) from e
    return HealthResponse(status="healthy", service="tagging-service", database="reachable")
