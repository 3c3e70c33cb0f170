from typing import List

from application.converters.tag_converter import TagConverter
from application.rest.schemas.input.tag_input import SuggestInput
from application.rest.schemas.output.common_output import ErrorResponse, PurgeResponse
from application.rest.schemas.output.tag_output import TagResponse
from domain.exceptions import TagNotFoundError, TaggingStoreError
from domain.services.tag_service import TagCatalogService
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from utils.dependencies import get_db, get_tag_catalog_service

router = APIRouter()


@router.get(
    path="/tags",
    description="Retrieve the tags in use by subjects of a type.",
    response_model=List[TagResponse],
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_200_OK: {
            "model": List[TagResponse],
            "description": "Tags ordered by slug with their usage counts.",
        },
        status.HTTP_503_SERVICE_UNAVAILABLE: {
            "model": ErrorResponse,
            "description": "Tag store unavailable.",
            "content": {
                "application/json": {"example": {"detail": "Failed to retrieve tags"}}
            },
        },
    },
)
async def get_existing_tags(
    subject_type: str = Query(..., min_length=1, description="Subject type"),
    db: Session = Depends(get_db),
    catalog_service: TagCatalogService = Depends(get_tag_catalog_service),
) -> List[TagResponse]:
    """Get the existing tags of a subject type.

    Args:
        subject_type (str): Subject type discriminator.
        db (Session): Fresh database session for this request.
        catalog_service (TagCatalogService): Domain service with injected repository.

    Returns:
        List[TagResponse]: Tags ordered by slug.

    Example:
        >>> tags = await get_existing_tags("article", db, catalog_service)
        >>> print([tag.slug for tag in tags])
        ['news', 'sports']
    """
    try:
        tag_entities = await catalog_service.get_existing_tags(db, subject_type)
        return TagConverter.entities_to_responses(tag_entities)
    except TaggingStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to retrieve tags",
        ) from e


@router.get(
    path="/tags/suggested",
    description="Retrieve the tags flagged as suggestions.",
    response_model=List[TagResponse],
    status_code=status.HTTP_200_OK,
)
async def get_suggested_tags(
    db: Session = Depends(get_db),
    catalog_service: TagCatalogService = Depends(get_tag_catalog_service),
) -> List[TagResponse]:
    """Get the suggested tags ordered by slug."""
    try:
        tag_entities = await catalog_service.get_suggested_tags(db)
        return TagConverter.entities_to_responses(tag_entities)
    except TaggingStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to retrieve suggested tags",
        ) from e


@router.delete(
    path="/tags/unused",
    description="Delete every tag no subject carries anymore.",
    response_model=PurgeResponse,
    status_code=status.HTTP_200_OK,
)
async def delete_unused_tags(
    db: Session = Depends(get_db),
    catalog_service: TagCatalogService = Depends(get_tag_catalog_service),
) -> PurgeResponse:
    """Purge unused tags.

    Returns:
        PurgeResponse: Message with the number of deleted tags.
    """
    try:
        deleted = await catalog_service.delete_unused_tags(db)
        return PurgeResponse(message="Unused tags deleted", deleted=deleted)
    except TaggingStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to delete unused tags",
        ) from e


@router.get(
    path="/tags/{slug}",
    description="Retrieve a catalog tag by its slug.",
    response_model=TagResponse,
    status_code=status.HTTP_200_OK,
    responses={
        status.HTTP_404_NOT_FOUND: {
            "model": ErrorResponse,
            "description": "Tag not found.",
            "content": {
                "application/json": {"example": {"detail": "Tag 'work' not found"}}
            },
        },
    },
)
async def get_tag(
    slug: str,
    db: Session = Depends(get_db),
    catalog_service: TagCatalogService = Depends(get_tag_catalog_service),
) -> TagResponse:
    """Get a catalog tag by its slug.

    Raises:
        HTTPException: 404 if the tag is not in the catalog.
        HTTPException: 503 if the tag store fails.
    """
    try:
        tag_entity = await catalog_service.get_tag(db, slug)
        return TagConverter.entity_to_response(tag_entity)
    except TagNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except TaggingStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to retrieve tag",
        ) from e


@router.put(
    path="/tags/{slug}/suggest",
    description="Flag or unflag a tag as a suggestion.",
    response_model=TagResponse,
    status_code=status.HTTP_200_OK,
)
async def set_tag_suggestion(
    slug: str,
    suggest_input: SuggestInput,
    db: Session = Depends(get_db),
    catalog_service: TagCatalogService = Depends(get_tag_catalog_service),
) -> TagResponse:
    """Set the suggestion flag of a tag.

    Raises:
        HTTPException: 404 if the tag is not in the catalog.
        HTTPException: 503 if the tag store fails.
    """
    try:
        tag_entity = await catalog_service.set_suggested(db, slug, suggest_input.suggest)
        return TagConverter.entity_to_response(tag_entity)
    except TagNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except TaggingStoreError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Failed to update tag",
        ) from e
