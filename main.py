"""FastAPI entry point of the Tagging Service.

Run with:
    uvicorn main:app --port 8003
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from application.rest.routers import router_health, router_subjects, router_tags
from infrastructure.models.base import Base
from infrastructure.models import tag_orm, tagged_orm  # noqa: F401  (register tables)
from utils.dependencies import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tagging tables if they do not exist yet
    Base.metadata.create_all(bind=engine)
    logger.info("Tagging tables ready")
    yield


app = FastAPI(
    title="Tagging Service",
    description="Tag arbitrary subjects, count tag usage and filter subjects by tags",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(router_health.router, tags=["health"])
app.include_router(router_tags.router, tags=["tags"])
app.include_router(router_subjects.router, tags=["subjects"])
