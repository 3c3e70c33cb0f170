"""
Unit tests for the tagging domain entities and options.
"""
import pytest

from domain.entities.options import TaggingOptions
from domain.entities.tag import SubjectRef, TagChanges, TagEntity, as_subject_ref


class TestTagEntity:
    """Tests for the catalog tag entity."""

    def test_rejects_empty_slug(self):
        with pytest.raises(ValueError):
            TagEntity(slug="  ", name="Blank")

    @pytest.mark.parametrize("count, unused", [(2, False), (1, False), (0, True), (-1, True)])
    def test_is_unused(self, count, unused):
        assert TagEntity(slug="news", name="News", count=count).is_unused() is unused


class TestSubjectRef:
    """Tests for subject references."""

    def test_identifier_is_stored_as_string(self):
        subject = SubjectRef("article", 42)

        assert subject.subject_id == "42"
        assert subject == SubjectRef("article", "42")
        assert str(subject) == "article:42"

    @pytest.mark.parametrize("subject_type, subject_id", [("", "1"), ("article", ""), ("article", None)])
    def test_rejects_empty_parts(self, subject_type, subject_id):
        with pytest.raises(ValueError):
            SubjectRef(subject_type, subject_id)

    def test_as_subject_ref_rejects_other_objects(self):
        with pytest.raises(TypeError):
            as_subject_ref("article:1")


def test_tag_changes_is_empty():
    assert TagChanges().is_empty()
    assert not TagChanges(removed=("news",)).is_empty()


class TestPerTypeOptions:
    """Tests for subject type overrides of the tagging policies."""

    def test_untag_on_delete_override(self):
        options = TaggingOptions(untag_on_delete_by_type={"photo": False})

        assert options.untag_on_delete_for("photo") is False
        assert options.untag_on_delete_for("article") is True
        assert options.untag_on_delete_for(None) is True

    def test_override_can_enable_untag_on_delete(self):
        options = TaggingOptions(untag_on_delete=False, untag_on_delete_by_type={"article": True})

        assert options.untag_on_delete_for("article") is True
        assert options.untag_on_delete_for("photo") is False

    def test_auto_tag_property_override(self):
        options = TaggingOptions(
            auto_tag_property="tags",
            auto_tag_property_by_type={"article": "tag_list", "photo": None},
        )

        assert options.auto_tag_property_for("article") == "tag_list"
        assert options.auto_tag_property_for("photo") is None
        assert options.auto_tag_property_for("video") == "tags"
