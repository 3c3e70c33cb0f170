"""Tag output schemas for API responses.

This module contains Pydantic models for tag-related API responses.
"""

from typing import List

from pydantic import BaseModel


class TagResponse(BaseModel):
    """Schema for catalog tag data in API responses.

    Attributes:
        slug (str): Normalized tag key.
        name (str): Display name of the tag.
        count (int): Number of subjects carrying the tag.
        suggest (bool): Whether the tag is offered as a suggestion.

    Example:
        >>> tag_response = TagResponse(slug="work", name="Work", count=3, suggest=False)
    """

    slug: str
    name: str
    count: int
    suggest: bool = False


class SubjectTagsResponse(BaseModel):
    """Schema for the tags carried by one subject.

    Attributes:
        subject_type (str): Subject type discriminator.
        subject_id (str): Subject identifier.
        tag_names (List[str]): Display names stored on the links.
        tag_slugs (List[str]): Slugs of the links.
    """

    subject_type: str
    subject_id: str
    tag_names: List[str]
    tag_slugs: List[str]


class TagChangesResponse(BaseModel):
    """Schema for the outcome of a tagging operation.

    Attributes:
        subject_type (str): Subject type discriminator.
        subject_id (str): Subject identifier.
        added (List[str]): Slugs of links created by the operation.
        removed (List[str]): Slugs of links removed by the operation.
    """

    subject_type: str
    subject_id: str
    added: List[str] = []
    removed: List[str] = []


class SubjectFilterResponse(BaseModel):
    """Schema for the subjects matching a tag filter.

    Attributes:
        subject_type (str): Subject type discriminator.
        mode (str): "all" or "any".
        unfiltered (bool): True when every subject of the type matches.
        subject_ids (List[str]): Matching identifiers, empty when unfiltered.
    """

    subject_type: str
    mode: str
    unfiltered: bool
    subject_ids: List[str]
