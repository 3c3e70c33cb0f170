"""Tagging behavior options.

TaggingOptions carries every configurable strategy and policy of the
tagging core. It is built once (see utils.dependencies.get_tagging_options)
and passed to the services at construction time.
"""

from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from domain.services.tag_formatting import DEFAULT_DELIMITER, slugify, titleize


@dataclass(frozen=True)
class TaggingOptions:
    """Strategies and policies of the tagging core.

    Attributes:
        normalizer (Callable[[str], str]): Maps a raw tag string to its slug.
        displayer (Callable[[str], str]): Maps a raw tag string to its display name.
        untag_on_delete (bool): Decrement tag counts when a subject is deleted.
        delete_unused_tags (bool): Purge tags whose count drops to zero after a detach.
        auto_tag_property (Optional[str]): Record property holding tags to apply on save.
        delimiter (str): Separator used to split a single tag string.
        untag_on_delete_by_type (Mapping[str, bool]): Per subject type
            override of ``untag_on_delete``.
        auto_tag_property_by_type (Mapping[str, Optional[str]]): Per subject
            type override of ``auto_tag_property``; None disables auto-tagging
            for that type.

    Example:
        >>> options = TaggingOptions(delete_unused_tags=True)
        >>> options.normalizer("Foo Bar")
        'foo-bar'
        >>> options = TaggingOptions(untag_on_delete_by_type={"photo": False})
        >>> options.untag_on_delete_for("photo"), options.untag_on_delete_for("article")
        (False, True)
    """

    normalizer: Callable[[str], str] = slugify
    displayer: Callable[[str], str] = titleize
    untag_on_delete: bool = True
    delete_unused_tags: bool = False
    auto_tag_property: Optional[str] = None
    delimiter: str = DEFAULT_DELIMITER
    untag_on_delete_by_type: Mapping[str, bool] = field(default_factory=dict)
    auto_tag_property_by_type: Mapping[str, Optional[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not callable(self.normalizer):
            raise ValueError("Tag normalizer must be callable")
        if not callable(self.displayer):
            raise ValueError("Tag displayer must be callable")
        if not self.delimiter:
            raise ValueError("Tag delimiter cannot be empty")

    def untag_on_delete_for(self, subject_type: Optional[str]) -> bool:
        """Untag-on-delete policy of a subject type."""
        return self.untag_on_delete_by_type.get(subject_type, self.untag_on_delete)

    def auto_tag_property_for(self, subject_type: Optional[str]) -> Optional[str]:
        """Auto-tag property of a subject type, None when disabled."""
        if subject_type in self.auto_tag_property_by_type:
            return self.auto_tag_property_by_type[subject_type] or None
        return self.auto_tag_property
