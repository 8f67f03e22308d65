"""Tests for preview path placeholder expansion."""

import pytest

from search_preview.exceptions import BuildError, UnresolvedPlaceholderError
from search_preview.services.path_resolver import (
    PreviewPath,
    prepare_preview_path,
    replace_placeholders,
    resolve,
)


class TestResolve:

    def test_field_placeholder(self):
        path = resolve("/articles/{slug}", {"slug": "hello-world", "_index": "x", "_id": "1"})
        assert path.path == "/articles/hello-world"

    def test_leading_slashes_collapse(self):
        path = resolve("//{_index}/{_id}", {"_index": "content-preview-abc", "_id": "42"})
        assert path.path == "/content-preview-abc/42"

    def test_missing_leading_slash_added(self):
        assert resolve("articles/{slug}", {"slug": "a"}).path == "/articles/a"

    def test_inner_slashes_untouched(self):
        assert resolve("/a//{slug}", {"slug": "b"}).path == "/a//b"

    def test_paths_are_never_cached(self):
        assert resolve("/a", {}).max_age == 0


class TestPreparePreviewPath:

    def test_source_fields_and_metadata(self):
        document = {
            "_index": "content-preview-1",
            "_id": "-1",
            "_source": {"langcode": "en", "bundle": "article"},
        }
        path = prepare_preview_path("/{langcode}/{bundle}/{_id}?index={_index}", document)
        assert path == "/en/article/-1?index=content-preview-1"

    def test_metadata_overrides_source_fields(self):
        document = {"_index": "real", "_id": "1", "_source": {"_index": "fake"}}
        assert prepare_preview_path("/{_index}", document) == "/real"


class TestReplacePlaceholders:

    def test_hyphen_and_digits_in_names(self):
        assert replace_placeholders("/{field-2_x}", {"field-2_x": "v"}) == "/v"

    def test_numbers_are_converted(self):
        assert replace_placeholders("/{id}/{score}", {"id": 7, "score": 1.5}) == "/7/1.5"

    def test_text_without_placeholders_unchanged(self):
        assert replace_placeholders("/static/page", {}) == "/static/page"

    def test_missing_key_raises(self):
        with pytest.raises(UnresolvedPlaceholderError) as exc_info:
            replace_placeholders("/articles/{slug}", {"title": "t"})
        assert exc_info.value.placeholder == "slug"
        assert exc_info.value.details["template"] == "/articles/{slug}"

    def test_unresolved_placeholder_is_a_build_error(self):
        with pytest.raises(BuildError):
            replace_placeholders("/{slug}", {})

    @pytest.mark.parametrize("value", [None, {"nested": 1}, ["a"], True])
    def test_non_scalar_values_raise(self, value):
        with pytest.raises(UnresolvedPlaceholderError):
            replace_placeholders("/{slug}", {"slug": value})


class TestPreviewPath:

    def test_to_url(self):
        assert PreviewPath("/a/b").to_url("https://front.example.com/") == "https://front.example.com/a/b"

    def test_to_url_without_base(self):
        assert PreviewPath("/a/b").to_url("") == "/a/b"
