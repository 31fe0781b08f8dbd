"""
ESEARCH - Search index synchronization for model objects

Keeps an Elasticsearch index consistent with model mutations and turns
search hits back into typed model instances.

Components:
- models.py: Model base class, Long, declarative field options
- introspection.py: @searchable marker, field descriptors
- mapping.py: Index schema from descriptors, index recreation
- serializer.py: Instance -> document
- router.py: Lifecycle events -> upsert / delete
- results.py: Raw hits -> model instances
- client.py: Index client interface and Elasticsearch implementation
- plugin.py: Adapter lifecycle (start / stop / search)
"""

from .errors import (
    ESearchError,
    MetadataError,
    IndexClientError,
    StartupError,
    SerializationError,
    UnindexError,
    MaterializationError,
    AdapterNotReadyError,
)

from .models import (
    Model,
    Long,
    IndexHint,
    SubField,
    FieldOptions,
    search_field,
    known_models,
)

from .introspection import (
    DeclaredType,
    FieldDescriptor,
    ModelTypeDescriptor,
    searchable,
    is_participating,
    searchable_types,
    fields_of,
    describe,
    type_name,
)

from .mapping import build_schema, recreate_index
from .serializer import serialize, document_id
from .router import EventKind, ChangeRouter
from .results import materialize, SearchResult
from .client import IndexClient, ElasticsearchIndexClient
from .plugin import ESearch

__all__ = [
    # Errors
    "ESearchError",
    "MetadataError",
    "IndexClientError",
    "StartupError",
    "SerializationError",
    "UnindexError",
    "MaterializationError",
    "AdapterNotReadyError",
    # Models
    "Model",
    "Long",
    "IndexHint",
    "SubField",
    "FieldOptions",
    "search_field",
    "known_models",
    # Introspection
    "DeclaredType",
    "FieldDescriptor",
    "ModelTypeDescriptor",
    "searchable",
    "is_participating",
    "searchable_types",
    "fields_of",
    "describe",
    "type_name",
    # Mapping / serialization / routing / results
    "build_schema",
    "recreate_index",
    "serialize",
    "document_id",
    "EventKind",
    "ChangeRouter",
    "materialize",
    "SearchResult",
    # Client / adapter
    "IndexClient",
    "ElasticsearchIndexClient",
    "ESearch",
]
