#!/usr/bin/env python3
"""Tests for environment-driven configuration."""

from esearch.config import ESearchConfig


class TestESearchConfig:
    """Tests for ESearchConfig."""

    def test_defaults(self, monkeypatch):
        for name in ("APPLICATION_NAME", "ESEARCH_INDEX", "ELASTICSEARCH_HOST", "ELASTICSEARCH_USERNAME",
                     "ELASTICSEARCH_PASSWORD", "ESEARCH_REQUEST_TIMEOUT", "ESEARCH_REFRESH", "ESEARCH_DEFAULT_SIZE"):
            monkeypatch.delenv(name, raising=False)
        cfg = ESearchConfig()
        assert cfg.index_name == "application"
        assert cfg.es_host == "http://localhost:9200"
        assert cfg.refresh is None
        assert cfg.default_size == 20
        assert cfg.get_elasticsearch_config() == {"hosts": ["http://localhost:9200"], "timeout": 30}

    def test_index_named_after_application(self, monkeypatch):
        monkeypatch.delenv("ESEARCH_INDEX", raising=False)
        monkeypatch.setenv("APPLICATION_NAME", "My Blog")
        assert ESearchConfig().index_name == "my-blog"

    def test_index_override(self, monkeypatch):
        monkeypatch.setenv("APPLICATION_NAME", "My Blog")
        monkeypatch.setenv("ESEARCH_INDEX", "blog-v2")
        assert ESearchConfig().index_name == "blog-v2"

    def test_auth_needs_both_parts(self, monkeypatch):
        monkeypatch.setenv("ELASTICSEARCH_USERNAME", "elastic")
        monkeypatch.delenv("ELASTICSEARCH_PASSWORD", raising=False)
        assert "http_auth" not in ESearchConfig().get_elasticsearch_config()

    def test_item_access(self, monkeypatch):
        monkeypatch.setenv("ESEARCH_DEFAULT_SIZE", "50")
        cfg = ESearchConfig()
        assert cfg["default_size"] == 50
        assert cfg.get("missing", "x") == "x"
