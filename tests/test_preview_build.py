"""Tests for PreviewService.build: preview index creation end to end.

Runs against FakeSearchClient, so every remote call is recorded and can be
made to fail.
"""

import re

import pytest
from opensearchpy.exceptions import ConnectionError as SearchConnectionError

from search_preview.exceptions import BuildError, RemoteError, UnresolvedPlaceholderError
from search_preview.indices import IndexRegistry
from search_preview.services.path_resolver import PreviewPath
from search_preview.services.preview_service import PREVIEW_ENTITY_ID, PreviewService
from tests.conftest import ArticleIndex, make_entity

_INDEX_NAME = re.compile(r"^content-preview-[0-9a-f\-]{36,}$")


@pytest.fixture()
def service(registry, search_client, test_settings) -> PreviewService:
    return PreviewService(registry, search_client, test_settings)


def _definition(service, context="default"):
    return service.select_candidates(make_entity(), context)["article"]


class TestIndexNames:

    def test_name_format(self, service):
        assert _INDEX_NAME.match(service.get_preview_index_name(service.generate_preview_hash()))

    def test_names_are_unique(self, service):
        names = {service.get_preview_index_name(service.generate_preview_hash()) for _ in range(10_000)}
        assert len(names) == 10_000

    def test_prefix_comes_from_settings(self, registry, search_client, test_settings):
        custom = test_settings.model_copy(update={"preview_index_prefix": "staging-preview"})
        service = PreviewService(registry, search_client, custom)
        assert service.get_preview_index_name("abc") == "staging-preview-abc"


class TestPluginInstance:

    def test_bound_to_preview_index(self, service):
        plugin = service.get_preview_plugin_instance("article", "content-preview-xyz")
        assert plugin.index_names() == ["content-preview-xyz"]

    def test_multilingual_forced_off(self, search_client, test_settings):
        reg = IndexRegistry()
        reg.register(
            "article", index_name="articles", entity_type="node",
            multilingual=True, languages=("en", "de"),
            preview={"default": {"path": "/{slug}"}},
        )(ArticleIndex)
        service = PreviewService(reg, search_client, test_settings)

        plugin = service.get_preview_plugin_instance("article", "content-preview-xyz")

        assert plugin.definition.multilingual is False
        assert plugin.get_index_name(make_entity(langcode="de")) == "content-preview-xyz"
        # The registered definition is left alone.
        assert reg.get_definition("article").multilingual is True


class TestBuild:

    def test_returns_record(self, service, search_client):
        record = service.build(make_entity(), _definition(service))

        assert record.path == PreviewPath("/articles/hello-world")
        assert _INDEX_NAME.match(record.index_name)
        assert record.document_id == "-1"
        assert record.entity.uuid == "5f0c3c1e-2b1f-4f57-9a4e-6f2f8f1a9b10"
        assert search_client.documents[record.index_name]["-1"]["slug"] == "hello-world"

    def test_remote_call_sequence(self, service, search_client):
        record = service.build(make_entity(), _definition(service))
        assert [op for op, _ in search_client.calls] == [
            "indices.exists", "indices.create", "index", "get",
        ]
        assert {name for _, name in search_client.calls} == {record.index_name}

    def test_new_entity_gets_placeholder_id(self, service, search_client):
        entity = make_entity()
        record = service.build(entity, _definition(service))

        assert search_client.index_params[0]["id"] == str(PREVIEW_ENTITY_ID)
        assert search_client.index_params[0]["body"]["id"] == PREVIEW_ENTITY_ID
        assert record.entity.id == PREVIEW_ENTITY_ID
        # The caller's entity is not modified.
        assert entity.id is None
        assert not hasattr(entity, "in_preview")

    def test_saved_entity_keeps_its_id(self, service, search_client):
        record = service.build(make_entity(id=42), _definition(service))
        assert record.document_id == "42"
        assert record.entity.id == 42

    def test_preview_write_waits_for_refresh(self, service, search_client):
        service.build(make_entity(), _definition(service))
        assert search_client.index_params[0]["refresh"] == "wait_for"

    def test_each_build_gets_its_own_index(self, service, search_client):
        definition = _definition(service)
        first = service.build(make_entity(), definition)
        second = service.build(make_entity(), definition)
        assert first.index_name != second.index_name

    def test_context_selects_template(self, service):
        record = service.build(make_entity(id=7), _definition(service, "landing-page"), "landing-page")
        assert record.path.path == f"/{record.index_name}/7"

    def test_undeclared_context_fails(self, service, search_client):
        with pytest.raises(BuildError):
            service.build(make_entity(), _definition(service), "teaser")
        assert search_client.calls == []

    def test_missing_document_fails(self, service, search_client):
        search_client.drop_documents = True
        with pytest.raises(BuildError, match="Entity could not be serialized") as exc_info:
            service.build(make_entity(), _definition(service))
        assert exc_info.value.details["plugin_id"] == "article"
        assert _INDEX_NAME.match(exc_info.value.details["index_name"])

    def test_unresolved_placeholder_fails(self, service):
        entity = make_entity(fields={"body": "no slug"})
        with pytest.raises(UnresolvedPlaceholderError) as exc_info:
            service.build(entity, _definition(service))
        assert exc_info.value.placeholder == "slug"
        assert exc_info.value.details["plugin_id"] == "article"

    @pytest.mark.parametrize("operation", ["indices.create", "index", "get"])
    def test_remote_failure_is_fatal(self, service, search_client, operation):
        search_client.fail_on = operation
        with pytest.raises(RemoteError) as exc_info:
            service.build(make_entity(), _definition(service))
        assert exc_info.value.details["operation"] == operation
        assert exc_info.value.details["plugin_id"] == "article"

    def test_failed_index_is_left_for_garbage_collection(self, service, search_client):
        search_client.fail_on = "index"
        search_client.error = SearchConnectionError("N/A", "connection refused", None)
        with pytest.raises(RemoteError):
            service.build(make_entity(), _definition(service))

        assert len(search_client.documents) == 1
        assert not any(op == "indices.delete" for op, _ in search_client.calls)
