"""
Tests for configuration resolution in utils.dependencies.
"""
import pytest

from domain.exceptions import TaggingConfigurationError
from domain.services.tag_formatting import slugify, titleize
from infrastructure.events.redis_publisher import RedisTagEventPublisher
from utils.dependencies import (
    build_event_dispatcher,
    build_tagging_options,
    resolve_callable,
)


def test_resolve_callable_with_colon():
    assert resolve_callable("domain.services.tag_formatting:slugify") is slugify


def test_resolve_callable_with_dots():
    assert resolve_callable("domain.services.tag_formatting.titleize") is titleize


@pytest.mark.parametrize("path", [
    "slugify",
    "missing.module:func",
    "domain.services.tag_formatting:missing",
    "domain.services.tag_formatting:DEFAULT_DELIMITER",
])
def test_resolve_callable_invalid(path):
    with pytest.raises(TaggingConfigurationError):
        resolve_callable(path)


def test_build_tagging_options_defaults():
    options = build_tagging_options()

    assert options.normalizer is slugify
    assert options.displayer is titleize
    assert options.untag_on_delete is True
    assert options.delete_unused_tags is False
    assert options.auto_tag_property is None
    assert options.delimiter == ","


def test_build_tagging_options_custom():
    options = build_tagging_options(
        normalizer="builtins:ascii",
        displayer="domain.services.tag_formatting:slugify",
        untag_on_delete=False,
        delete_unused_tags=True,
        auto_tag_property="tag_list",
        delimiter=";",
    )

    assert options.normalizer is ascii
    assert options.displayer is slugify
    assert options.untag_on_delete is False
    assert options.delete_unused_tags is True
    assert options.auto_tag_property == "tag_list"
    assert options.delimiter == ";"


def test_build_tagging_options_subject_type_overrides():
    options = build_tagging_options(
        auto_tag_property="tags",
        untag_on_delete_by_type={"photo": False},
        auto_tag_property_by_type={"article": "tag_list", "photo": ""},
    )

    assert options.untag_on_delete_by_type == {"photo": False}
    assert options.auto_tag_property_by_type == {"article": "tag_list", "photo": None}
    assert options.untag_on_delete_for("photo") is False
    assert options.auto_tag_property_for("photo") is None
    assert options.auto_tag_property_for("video") == "tags"


def test_build_event_dispatcher_without_redis():
    assert build_event_dispatcher(None).listener_count == 0


def test_build_event_dispatcher_with_redis(monkeypatch):
    monkeypatch.setattr(
        "infrastructure.events.redis_publisher.redis.from_url",
        lambda url, **kwargs: object(),
    )

    dispatcher = build_event_dispatcher("redis://localhost:6379/0", "tags")

    assert dispatcher.listener_count == 1
    publisher = dispatcher._listeners[0][1]
    assert isinstance(publisher, RedisTagEventPublisher)
    assert publisher.channel == "tags"
