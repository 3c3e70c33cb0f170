"""Tag input schemas for API requests.

This module contains Pydantic models for tagging requests: the tag names
applied to a subject and the suggestion flag of a catalog tag.
"""

from typing import List, Union

from pydantic import BaseModel, Field, field_validator


class TagNamesInput(BaseModel):
    """Schema for tag names sent to attach or replace operations.

    Attributes:
        tags (Union[str, List[str]]): Delimited string or list of tag names.

    Example:
        >>> TagNamesInput(tags="news, sports").tags
        'news, sports'
        >>> TagNamesInput(tags=["news", "sports"]).tags
        ['news', 'sports']
    """

    tags: Union[str, List[str]] = Field(
        ..., description="Delimited string or list of tag names"
    )

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v):
        """Strip surrounding whitespace of each name."""
        if isinstance(v, str):
            return v.strip()
        return [name.strip() for name in v]


class SuggestInput(BaseModel):
    """Schema for flagging a tag as a suggestion.

    Attributes:
        suggest (bool): Whether the tag is offered as a suggestion.
    """

    suggest: bool = Field(default=True, description="Offer the tag as a suggestion")
