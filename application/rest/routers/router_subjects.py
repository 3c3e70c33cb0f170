import logging
from typing import Optional

from application.converters.tag_converter import TagConverter
from application.rest.schemas.input.tag_input import TagNamesInput
from application.rest.schemas.output.common_output import ErrorResponse
from application.rest.schemas.output.tag_output import (
    SubjectFilterResponse,
    SubjectTagsResponse,
    TagChangesResponse,
)
from domain.entities.tag import SubjectRef
from domain.exceptions import TaggingConfigurationError, TaggingStoreError
from domain.services.tag_query_service import TagQueryService
from domain.services.tagging_service import TaggingService
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from utils.dependencies import get_db, get_tag_query_service, get_tagging_service

logger = logging.getLogger(__name__)

router = APIRouter()

TAGGING_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {
        "model": ErrorResponse,
        "description": "Invalid subject reference.",
        "content": {
            "application/json": {"example": {"detail": "Subject id cannot be empty"}}
        },
    },
    status.HTTP_500_INTERNAL_SERVER_ERROR: {
        "model": ErrorResponse,
        "description": "Tag normalizer or displayer misconfigured.",
        "content": {
            "application/json": {
                "example": {"detail": "Tagging configuration error: Tag normalizer failed on 'x'"}
            }
        },
    },
    status.HTTP_503_SERVICE_UNAVAILABLE: {
        "model": ErrorResponse,
        "description": "Tag store unavailable; completed tag steps stay applied.",
        "content": {
            "application/json": {"example": {"detail": "Failed to tag article:1 with 'news'"}}
        },
    },
}


def _subject_ref(subject_type: str, subject_id: str) -> SubjectRef:
    try:
        return SubjectRef(subject_type=subject_type, subject_id=subject_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


def _tagging_http_error(error: Exception) -> HTTPException:
    """Map a tagging domain error to the HTTP error returned to the caller."""
    if isinstance(error, TaggingConfigurationError):
        logger.error(f"Tagging configuration error: {error}")
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Tagging configuration error: {error}",
        )
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(error)
    )


@router.get(
    path="/subjects/{subject_type}/{subject_id}/tags",
    description="Retrieve the tags carried by a subject.",
    response_model=SubjectTagsResponse,
    status_code=status.HTTP_200_OK,
    responses=TAGGING_ERROR_RESPONSES,
)
async def get_subject_tags(
    subject_type: str,
    subject_id: str,
    db: Session = Depends(get_db),
    tagging_service: TaggingService = Depends(get_tagging_service),
) -> SubjectTagsResponse:
    """Get the tags of a subject in the order they were applied.

    Example:
        >>> response = await get_subject_tags("article", "42", db, tagging_service)
        >>> print(response.tag_names)
        ['News', 'Sports']
    """
    subject = _subject_ref(subject_type, subject_id)
    try:
        links = await tagging_service.links(db, subject)
        return TagConverter.links_to_subject_response(subject, links)
    except TaggingStoreError as e:
        raise _tagging_http_error(e) from e


@router.post(
    path="/subjects/{subject_type}/{subject_id}/tags",
    description="Add tags to a subject. Tags it already carries are skipped.",
    response_model=TagChangesResponse,
    status_code=status.HTTP_200_OK,
    responses=TAGGING_ERROR_RESPONSES,
)
async def attach_tags(
    subject_type: str,
    subject_id: str,
    tag_input: TagNamesInput,
    db: Session = Depends(get_db),
    tagging_service: TaggingService = Depends(get_tagging_service),
) -> TagChangesResponse:
    """Attach tags to a subject.

    Args:
        subject_type (str): Subject type discriminator.
        subject_id (str): Subject identifier.
        tag_input (TagNamesInput): Tag names to add.
        db (Session): Fresh database session for this request.
        tagging_service (TaggingService): Domain service with injected repositories.

    Returns:
        TagChangesResponse: Slugs of the links created.

    Raises:
        HTTPException: 400 if the subject reference is invalid.
        HTTPException: 500 if the normalizer or displayer fails.
        HTTPException: 503 if the tag store fails.
    """
    subject = _subject_ref(subject_type, subject_id)
    try:
        changes = await tagging_service.attach(db, subject, tag_input.tags)
        return TagConverter.changes_to_response(subject, changes)
    except (TaggingConfigurationError, TaggingStoreError) as e:
        raise _tagging_http_error(e) from e


@router.put(
    path="/subjects/{subject_type}/{subject_id}/tags",
    description="Replace the tags of a subject, applying only the difference.",
    response_model=TagChangesResponse,
    status_code=status.HTTP_200_OK,
    responses=TAGGING_ERROR_RESPONSES,
)
async def replace_tags(
    subject_type: str,
    subject_id: str,
    tag_input: TagNamesInput,
    db: Session = Depends(get_db),
    tagging_service: TaggingService = Depends(get_tagging_service),
) -> TagChangesResponse:
    """Replace the tags of a subject.

    Returns:
        TagChangesResponse: Slugs added and removed.
    """
    subject = _subject_ref(subject_type, subject_id)
    try:
        changes = await tagging_service.replace(db, subject, tag_input.tags)
        return TagConverter.changes_to_response(subject, changes)
    except (TaggingConfigurationError, TaggingStoreError) as e:
        raise _tagging_http_error(e) from e


@router.delete(
    path="/subjects/{subject_type}/{subject_id}/tags",
    description="Remove tags from a subject, or every tag when none are given.",
    response_model=TagChangesResponse,
    status_code=status.HTTP_200_OK,
    responses=TAGGING_ERROR_RESPONSES,
)
async def detach_tags(
    subject_type: str,
    subject_id: str,
    tags: Optional[str] = None,  # Delimited tag names, all tags when omitted
    db: Session = Depends(get_db),
    tagging_service: TaggingService = Depends(get_tagging_service),
) -> TagChangesResponse:
    """Detach tags from a subject.

    Returns:
        TagChangesResponse: Slugs of the links removed.
    """
    subject = _subject_ref(subject_type, subject_id)
    try:
        changes = await tagging_service.detach(db, subject, tags)
        return TagConverter.changes_to_response(subject, changes)
    except (TaggingConfigurationError, TaggingStoreError) as e:
        raise _tagging_http_error(e) from e


@router.delete(
    path="/subjects/{subject_type}/{subject_id}",
    description="Notify the service that a subject was deleted.",
    response_model=TagChangesResponse,
    status_code=status.HTTP_200_OK,
    responses=TAGGING_ERROR_RESPONSES,
)
async def subject_deleted(
    subject_type: str,
    subject_id: str,
    db: Session = Depends(get_db),
    tagging_service: TaggingService = Depends(get_tagging_service),
) -> TagChangesResponse:
    """Drop every link of a deleted subject.

    Counts are decremented only when untag-on-delete is enabled.
    """
    subject = _subject_ref(subject_type, subject_id)
    try:
        changes = await tagging_service.on_subject_deleted(db, subject)
        return TagConverter.changes_to_response(subject, changes)
    except (TaggingConfigurationError, TaggingStoreError) as e:
        raise _tagging_http_error(e) from e


@router.get(
    path="/subjects/{subject_type}",
    description="Find subjects of a type by tag membership.",
    response_model=SubjectFilterResponse,
    status_code=status.HTTP_200_OK,
    responses=TAGGING_ERROR_RESPONSES,
)
async def filter_subjects(
    subject_type: str,
    all_tags: Optional[str] = None,  # Delimited tag names, every one required
    any_tags: Optional[str] = None,  # Delimited tag names, at least one required
    db: Session = Depends(get_db),
    query_service: TagQueryService = Depends(get_tag_query_service),
) -> SubjectFilterResponse:
    """Filter subjects of a type by their tags.

    Without any tag names the filter is unfiltered (every subject matches).
    With empty ``any_tags`` no subject matches.

    Raises:
        HTTPException: 400 if both ``all_tags`` and ``any_tags`` are given.
    """
    if all_tags is not None and any_tags is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Use either all_tags or any_tags, not both",
        )

    try:
        if any_tags is not None:
            subject_filter = await query_service.with_any_tag(db, subject_type, any_tags)
        else:
            subject_filter = await query_service.with_all_tags(db, subject_type, all_tags)
        return TagConverter.filter_to_response(subject_filter)
    except (TaggingConfigurationError, TaggingStoreError) as e:
        raise _tagging_http_error(e) from e
