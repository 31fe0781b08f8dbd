"""
ESearch - keeps an Elasticsearch index in step with the object store.

Lifecycle:
    es = ESearch.from_config()
    es.start()                      # destructive index recreation, fatal on failure
    store.subscribe(es.on_event)    # persisted / updated / deleted
    es.search(Article, {"query": {"match": {"title": "hi"}}})
    es.stop()
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from .client import ElasticsearchIndexClient, IndexClient
from .config import ESearchConfig, config as default_config
from .errors import AdapterNotReadyError, MetadataError
from .introspection import is_participating, searchable_types, type_name
from .mapping import build_schema, recreate_index
from .results import SearchResult
from .router import ChangeRouter, EventKind

logger = logging.getLogger(__name__)


class ESearch:
    """
    Search adapter owning one index client.

    The adapter only accepts traffic once start() has recreated the index.
    """

    def __init__(
        self,
        client: IndexClient,
        index_name: str,
        models: Optional[Iterable[type]] = None,
        default_size: int = 20,
    ):
        self.client = client
        self.index_name = index_name
        self.models = list(models) if models is not None else None
        self.default_size = default_size
        self.router = ChangeRouter(client, index_name)
        self.ready = False

    @classmethod
    def from_config(cls, cfg: Optional[ESearchConfig] = None, models: Optional[Iterable[type]] = None) -> "ESearch":
        cfg = cfg or default_config
        return cls(
            ElasticsearchIndexClient.from_config(cfg),
            cfg.index_name,
            models=models,
            default_size=cfg.default_size,
        )

    def searchable_types(self) -> List[type]:
        """Participating types among the configured (or all known) models."""
        return searchable_types(self.models)

    def schema(self) -> Dict[str, Any]:
        return build_schema(self.searchable_types())

    def start(self) -> None:
        """Recreate the index from the current models. Raises StartupError on failure."""
        logger.info(f"Starting ESearch on index {self.index_name}")
        self.ready = False
        recreate_index(self.client, self.index_name, self.schema())
        self.ready = True

    def stop(self) -> None:
        self.ready = False
        self.client.close()

    def _require_ready(self) -> None:
        if not self.ready:
            raise AdapterNotReadyError(f"ESearch on {self.index_name} has not been started")

    def on_event(self, kind: Any, instance: Any) -> None:
        """
        Object store lifecycle callback.

        Events the adapter does not handle (unknown kinds, types that are not
        searchable) are dropped before the ready check, so they pass through
        even while the adapter is stopped.
        """
        if not isinstance(kind, EventKind) or not is_participating(type(instance)):
            logger.debug(f"Ignoring {kind!r} event for {type(instance).__name__}")
            return
        self._require_ready()
        self.router.on_event(kind, instance)

    def search(self, model_type: type, query: Dict[str, Any], size: Optional[int] = None) -> SearchResult:
        """
        Run a query against one model type's documents.

        The query body goes to the engine untouched. Any client failure
        propagates, and so does MaterializationError.
        """
        self._require_ready()
        if not is_participating(model_type):
            raise MetadataError(f"{model_type.__name__} is not searchable")
        envelope = self.client.search(
            self.index_name,
            type_name(model_type),
            query,
            size=size if size is not None else self.default_size,
        )
        return SearchResult.from_envelope(envelope, model_type)
