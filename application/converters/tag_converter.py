"""Tag converters for transforming domain objects into Pydantic schemas.

This module contains converter functions for transforming tagging objects
from the domain layer (entities, filters, changes) to the API layer.
"""

from typing import List

from domain.entities.tag import SubjectRef, TagChanges, TagEntity, TaggedEntity
from domain.entities.tag_filter import SubjectFilter

from application.rest.schemas.output.tag_output import (
    SubjectFilterResponse,
    SubjectTagsResponse,
    TagChangesResponse,
    TagResponse,
)


class TagConverter:
    """Converter class for tagging transformations between layers.

    Example:
        >>> tag_response = TagConverter.entity_to_response(tag_entity)
        >>> changes_response = TagConverter.changes_to_response(subject, changes)
    """

    @staticmethod
    def entity_to_response(tag_entity: TagEntity) -> TagResponse:
        """Convert TagEntity domain object to TagResponse Pydantic schema.

        Args:
            tag_entity (TagEntity): Domain entity representing a catalog tag.

        Returns:
            TagResponse: Pydantic schema for API response.

        Example:
            >>> tag_entity = TagEntity(slug="work", name="Work", count=2)
            >>> TagConverter.entity_to_response(tag_entity).count
            2
        """
        return TagResponse(
            slug=tag_entity.slug,
            name=tag_entity.name,
            count=tag_entity.count,
            suggest=tag_entity.suggest,
        )

    @staticmethod
    def entities_to_responses(tag_entities: List[TagEntity]) -> List[TagResponse]:
        """Convert list of TagEntity domain objects to list of TagResponse schemas."""
        return [TagConverter.entity_to_response(entity) for entity in tag_entities]

    @staticmethod
    def links_to_subject_response(
        subject: SubjectRef, links: List[TaggedEntity]
    ) -> SubjectTagsResponse:
        """Convert the links of a subject to SubjectTagsResponse."""
        return SubjectTagsResponse(
            subject_type=subject.subject_type,
            subject_id=subject.subject_id,
            tag_names=[link.tag_name for link in links],
            tag_slugs=[link.tag_slug for link in links],
        )

    @staticmethod
    def changes_to_response(
        subject: SubjectRef, changes: TagChanges
    ) -> TagChangesResponse:
        """Convert TagChanges of a subject to TagChangesResponse."""
        return TagChangesResponse(
            subject_type=subject.subject_type,
            subject_id=subject.subject_id,
            added=list(changes.added),
            removed=list(changes.removed),
        )

    @staticmethod
    def filter_to_response(subject_filter: SubjectFilter) -> SubjectFilterResponse:
        """Convert SubjectFilter to SubjectFilterResponse with sorted ids."""
        return SubjectFilterResponse(
            subject_type=subject_filter.subject_type,
            mode=subject_filter.mode.value,
            unfiltered=subject_filter.is_unfiltered,
            subject_ids=subject_filter.sorted_ids(),
        )
