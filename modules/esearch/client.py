"""
Index client - the narrow surface the adapter needs from the search engine.

All calls are synchronous. Implementations raise IndexClientError on failure.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from elasticsearch import Elasticsearch
from elasticsearch.exceptions import ElasticsearchException, NotFoundError

from .config import ESearchConfig, config as default_config
from .errors import IndexClientError

logger = logging.getLogger(__name__)


class IndexClient(ABC):
    """Search engine operations used by the adapter."""

    @abstractmethod
    def create_index(self, name: str, schema: Dict[str, Any]) -> None:
        """Create an index with one mapping per type name."""
        pass

    @abstractmethod
    def delete_index(self, name: str) -> None:
        pass

    @abstractmethod
    def index_exists(self, name: str) -> bool:
        pass

    @abstractmethod
    def upsert(self, index_name: str, type_name: str, doc_id: str, document: Dict[str, Any]) -> None:
        """Index a document under an id, replacing any document already there."""
        pass

    @abstractmethod
    def delete(self, index_name: str, type_name: str, doc_id: str) -> None:
        pass

    @abstractmethod
    def search(
        self,
        index_name: str,
        type_name: str,
        query: Dict[str, Any],
        size: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Run a query and return the engine's hits object:
        {"total": ..., "hits": [{"_id", "_score", "_source"}, ...]}.
        """
        pass

    def close(self) -> None:
        pass


class ElasticsearchIndexClient(IndexClient):
    """
    IndexClient on the official Elasticsearch client.

    Uses the 7.x client, which still speaks mapping types (doc_type).

    The schema keeps the legacy string / multi_field / not_analyzed
    vocabulary with one mapping per model type. Only servers that accept
    that vocabulary and several types per index (before 5.x) take it;
    a 7.x cluster rejects index creation and start() fails with StartupError.
    """

    def __init__(self, es: Elasticsearch, refresh: Optional[str] = None):
        self.es = es
        self.refresh = refresh

    @classmethod
    def from_config(cls, cfg: Optional[ESearchConfig] = None) -> "ElasticsearchIndexClient":
        cfg = cfg or default_config
        logger.info(f"Starting ESearch client for {cfg.es_host}")
        return cls(Elasticsearch(**cfg.get_elasticsearch_config()), refresh=cfg.refresh)

    def _write_params(self) -> Dict[str, Any]:
        return {"refresh": self.refresh} if self.refresh else {}

    def create_index(self, name: str, schema: Dict[str, Any]) -> None:
        try:
            self.es.indices.create(index=name, body={"mappings": schema})
        except ElasticsearchException as e:
            raise IndexClientError(f"create index {name}: {e}") from e

    def delete_index(self, name: str) -> None:
        try:
            self.es.indices.delete(index=name)
        except ElasticsearchException as e:
            raise IndexClientError(f"delete index {name}: {e}") from e

    def index_exists(self, name: str) -> bool:
        try:
            return bool(self.es.indices.exists(index=name))
        except ElasticsearchException as e:
            raise IndexClientError(f"check index {name}: {e}") from e

    def upsert(self, index_name: str, type_name: str, doc_id: str, document: Dict[str, Any]) -> None:
        try:
            self.es.index(
                index=index_name,
                doc_type=type_name,
                id=doc_id,
                body=document,
                **self._write_params()
            )
        except ElasticsearchException as e:
            raise IndexClientError(f"index {type_name}/{doc_id}: {e}") from e

    def delete(self, index_name: str, type_name: str, doc_id: str) -> None:
        try:
            self.es.delete(
                index=index_name,
                doc_type=type_name,
                id=doc_id,
                **self._write_params()
            )
        except NotFoundError:
            # Nothing indexed under this id, the end state is what was asked for
            logger.info(f"No document {type_name}/{doc_id} to delete")
        except ElasticsearchException as e:
            raise IndexClientError(f"delete {type_name}/{doc_id}: {e}") from e

    def search(
        self,
        index_name: str,
        type_name: str,
        query: Dict[str, Any],
        size: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = {"size": size} if size is not None else {}
        try:
            response = self.es.search(index=index_name, doc_type=type_name, body=query, **params)
        except ElasticsearchException as e:
            raise IndexClientError(f"search {type_name}: {e}") from e
        return response["hits"]

    def close(self) -> None:
        self.es.close()
