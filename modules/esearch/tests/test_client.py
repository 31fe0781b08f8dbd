#!/usr/bin/env python3
"""Tests for the Elasticsearch-backed index client."""

import pytest
from elasticsearch.exceptions import NotFoundError, TransportError

from esearch import client as client_module
from esearch.client import ElasticsearchIndexClient
from esearch.config import ESearchConfig
from esearch.errors import IndexClientError


class _DummyIndices:
    def __init__(self, es):
        self._es = es

    def exists(self, index):
        self._es.calls.append(("indices.exists", {"index": index}))
        self._es._maybe_fail("indices.exists")
        return index in self._es.existing

    def create(self, index, body):
        self._es.calls.append(("indices.create", {"index": index, "body": body}))
        self._es._maybe_fail("indices.create")

    def delete(self, index):
        self._es.calls.append(("indices.delete", {"index": index}))
        self._es._maybe_fail("indices.delete")


class _DummyES:
    def __init__(self, existing=(), failures=None, hits=None):
        self.existing = set(existing)
        self.failures = failures or {}
        self.hits = hits or []
        self.calls = []
        self.indices = _DummyIndices(self)
        self.closed = False

    def _maybe_fail(self, op):
        if op in self.failures:
            raise self.failures[op]

    def index(self, **kwargs):
        self.calls.append(("index", kwargs))
        self._maybe_fail("index")
        return {"_id": kwargs["id"], "result": "created"}

    def delete(self, **kwargs):
        self.calls.append(("delete", kwargs))
        self._maybe_fail("delete")
        return {"result": "deleted"}

    def search(self, **kwargs):
        self.calls.append(("search", kwargs))
        self._maybe_fail("search")
        return {"hits": {"total": {"value": len(self.hits)}, "hits": self.hits}}

    def close(self):
        self.closed = True


def _boom():
    return TransportError(500, "boom", {})


class TestIndexAdmin:
    """Tests for index create / delete / exists."""

    def test_create_wraps_schema_in_mappings(self):
        es = _DummyES()
        schema = {"article": {"properties": {"views": {"type": "long"}}}}
        ElasticsearchIndexClient(es).create_index("blog", schema)
        assert es.calls == [("indices.create", {"index": "blog", "body": {"mappings": schema}})]

    def test_exists(self):
        client = ElasticsearchIndexClient(_DummyES(existing=["blog"]))
        assert client.index_exists("blog") is True
        assert client.index_exists("other") is False

    def test_delete_index(self):
        es = _DummyES(existing=["blog"])
        ElasticsearchIndexClient(es).delete_index("blog")
        assert es.calls == [("indices.delete", {"index": "blog"})]

    @pytest.mark.parametrize("op, call", [
        ("indices.create", lambda c: c.create_index("blog", {})),
        ("indices.delete", lambda c: c.delete_index("blog")),
        ("indices.exists", lambda c: c.index_exists("blog")),
    ])
    def test_engine_errors_are_translated(self, op, call):
        client = ElasticsearchIndexClient(_DummyES(failures={op: _boom()}))
        with pytest.raises(IndexClientError) as excinfo:
            call(client)
        assert isinstance(excinfo.value.__cause__, TransportError)


class TestDocuments:
    """Tests for upsert / delete / search."""

    def test_upsert_uses_type_and_id(self):
        es = _DummyES()
        ElasticsearchIndexClient(es).upsert("blog", "article", "1", {"title": "Hi"})
        assert es.calls == [("index", {"index": "blog", "doc_type": "article", "id": "1", "body": {"title": "Hi"}})]

    def test_refresh_policy_is_passed_on_writes(self):
        es = _DummyES()
        client = ElasticsearchIndexClient(es, refresh="wait_for")
        client.upsert("blog", "article", "1", {"title": "Hi"})
        client.delete("blog", "article", "1")
        assert es.calls[0][1]["refresh"] == "wait_for"
        assert es.calls[1][1]["refresh"] == "wait_for"

    def test_upsert_failure(self):
        client = ElasticsearchIndexClient(_DummyES(failures={"index": _boom()}))
        with pytest.raises(IndexClientError):
            client.upsert("blog", "article", "1", {"title": "Hi"})

    def test_delete(self):
        es = _DummyES()
        ElasticsearchIndexClient(es).delete("blog", "article", "1")
        assert es.calls == [("delete", {"index": "blog", "doc_type": "article", "id": "1"})]

    def test_delete_missing_document_is_not_an_error(self):
        es = _DummyES(failures={"delete": NotFoundError(404, "not_found", {})})
        ElasticsearchIndexClient(es).delete("blog", "article", "1")

    def test_delete_failure(self):
        client = ElasticsearchIndexClient(_DummyES(failures={"delete": _boom()}))
        with pytest.raises(IndexClientError):
            client.delete("blog", "article", "1")

    def test_search_returns_hits_object(self):
        """Hits come back with the engine's total, not just the hit list."""
        hits = [{"_id": "1", "_score": 2.0, "_source": {"title": "Hi"}}]
        es = _DummyES(hits=hits)
        query = {"query": {"match": {"title": "hi"}}}
        result = ElasticsearchIndexClient(es).search("blog", "article", query, size=5)
        assert result == {"total": {"value": 1}, "hits": hits}
        assert es.calls == [("search", {"index": "blog", "doc_type": "article", "body": query, "size": 5})]

    def test_search_without_size(self):
        es = _DummyES()
        ElasticsearchIndexClient(es).search("blog", "article", {})
        assert "size" not in es.calls[0][1]

    def test_search_failure(self):
        client = ElasticsearchIndexClient(_DummyES(failures={"search": _boom()}))
        with pytest.raises(IndexClientError):
            client.search("blog", "article", {})

    def test_close(self):
        es = _DummyES()
        ElasticsearchIndexClient(es).close()
        assert es.closed


class TestFromConfig:
    """Tests for building the client from configuration."""

    def test_builds_elasticsearch_from_config(self, monkeypatch):
        monkeypatch.setenv("ELASTICSEARCH_HOST", "http://es.internal:9200")
        monkeypatch.setenv("ELASTICSEARCH_USERNAME", "elastic")
        monkeypatch.setenv("ELASTICSEARCH_PASSWORD", "secret")
        monkeypatch.setenv("ESEARCH_REFRESH", "true")
        created = {}

        def fake_elasticsearch(**kwargs):
            created.update(kwargs)
            return _DummyES()

        monkeypatch.setattr(client_module, "Elasticsearch", fake_elasticsearch)
        client = ElasticsearchIndexClient.from_config(ESearchConfig())
        assert created["hosts"] == ["http://es.internal:9200"]
        assert created["http_auth"] == ("elastic", "secret")
        assert client.refresh == "true"
