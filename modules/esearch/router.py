"""
Change router - object store lifecycle events to index traffic.

    persisted / updated -> upsert   (failures logged, event dropped, no retry)
    deleted             -> delete   (failures raise UnindexError)

Events for non-searchable types never reach the index client. Dispatch is
synchronous on the caller's thread; no locking, no batching.
"""

import logging
from enum import Enum
from typing import Any

from .errors import IndexClientError, SerializationError, UnindexError
from .introspection import is_participating, type_name
from .serializer import document_id, model_label, serialize

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Lifecycle notifications from the object store."""
    PERSISTED = "persisted"
    UPDATED = "updated"
    DELETED = "deleted"


class ChangeRouter:
    """Routes lifecycle events for one index."""

    def __init__(self, client, index_name: str):
        self.client = client
        self.index_name = index_name

    def on_event(self, kind: Any, instance: Any) -> None:
        if kind is EventKind.PERSISTED or kind is EventKind.UPDATED:
            self.index(instance)
        elif kind is EventKind.DELETED:
            self.unindex(instance)
        else:
            logger.info(f"Ignoring unrecognized event {kind!r}")

    __call__ = on_event

    def index(self, instance) -> bool:
        """Upsert the instance's document. Returns False when nothing was written."""
        model_type = type(instance)
        if not is_participating(model_type):
            return False

        logger.info(f"Going to index a model {model_label(instance)}")
        document = serialize(instance)
        if document is None:
            return False

        try:
            doc_id = document_id(instance)
        except SerializationError as e:
            logger.warning(f"Skipping model {model_label(instance)}: {e}")
            return False

        try:
            self.client.upsert(self.index_name, type_name(model_type), doc_id, document)
        except IndexClientError as e:
            logger.error(f"Failed to index a model {model_label(instance)}: {e}")
            return False
        return True

    def unindex(self, instance) -> bool:
        """Delete the instance's document. Raises UnindexError on failure."""
        model_type = type(instance)
        if not is_participating(model_type):
            return False

        name = type_name(model_type)
        logger.info(f"Going to unindex a model {model_label(instance)}")
        try:
            doc_id = document_id(instance)
        except SerializationError as e:
            raise UnindexError(name, "", str(e)) from e

        try:
            self.client.delete(self.index_name, name, doc_id)
        except IndexClientError as e:
            logger.error(f"Failed to unindex a model {model_label(instance)}: {e}")
            raise UnindexError(name, doc_id) from e
        return True
