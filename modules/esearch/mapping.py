"""
Mapping builder - index schema from model metadata.

Field type precedence (first match wins):
  1. multi-field                 -> "multi_field"
  2. non-relation 32-bit integer -> "integer"
  3. non-relation 64-bit integer -> "long"
  4. anything else               -> "string"

Everything unrecognized (dates, booleans, floats, relations) maps to
"string". Existing indices depend on this, keep it.
"""

import logging
from typing import Any, Dict, Iterable, Optional

from .errors import IndexClientError, MetadataError, StartupError
from .introspection import DeclaredType, FieldDescriptor, describe
from .models import IndexHint

logger = logging.getLogger(__name__)

MULTI_FIELD = "multi_field"
INTEGER = "integer"
LONG = "long"
STRING = "string"


def field_index_type(descriptor: FieldDescriptor) -> str:
    """Index-native type of one field."""
    if descriptor.is_multi_field:
        return MULTI_FIELD
    if not descriptor.is_relation:
        if descriptor.declared_type is DeclaredType.INTEGER:
            return INTEGER
        if descriptor.declared_type is DeclaredType.LONG:
            return LONG
    return STRING


def index_hint(value: Any) -> Optional[IndexHint]:
    """Normalize an explicit index hint. Unknown values give None."""
    if isinstance(value, IndexHint):
        return value
    try:
        return IndexHint(value)
    except ValueError:
        return None


def field_mapping(descriptor: FieldDescriptor) -> Dict[str, str]:
    """{type, index?} options of one field."""
    mapping = {"type": field_index_type(descriptor)}
    # Only not_analyzed changes anything; other hints are accepted and ignored
    if index_hint(descriptor.index_hint) is IndexHint.NOT_ANALYZED:
        mapping["index"] = "not_analyzed"
    return mapping


def type_mapping(model_type: type) -> Dict[str, Any]:
    """Mapping of one model type: {"properties": {field: {...}}}."""
    return {
        "properties": {
            f.name: field_mapping(f)
            for f in describe(model_type).fields
        }
    }


def build_schema(model_types: Iterable[type]) -> Dict[str, Dict[str, Any]]:
    """
    Index schema for the given participating types, keyed by type name.

    Raises MetadataError when two types slugify to the same type name.
    """
    schema: Dict[str, Dict[str, Any]] = {}
    owners: Dict[str, type] = {}
    for model_type in model_types:
        descriptor = describe(model_type)
        name = descriptor.type_name
        if name in owners:
            raise MetadataError(
                f"Type name '{name}' is used by both {owners[name].__qualname__} and {model_type.__qualname__}"
            )
        owners[name] = model_type
        schema[name] = type_mapping(model_type)
    return schema


def recreate_index(client, index_name: str, schema: Dict[str, Any]) -> None:
    """
    Destructively recreate the index: delete it if it exists, then create it with the schema.

    Not safe against concurrent writers. Any client failure raises StartupError.
    """
    try:
        if client.index_exists(index_name):
            logger.info(f"The index {index_name} exists already, deleting ...")
            client.delete_index(index_name)

        logger.info(f"Creating index {index_name} with types: {', '.join(schema) or '(none)'}")
        client.create_index(index_name, schema)
    except IndexClientError as e:
        logger.error(f"Failed to recreate index {index_name}: {e}")
        raise StartupError(f"Could not recreate index '{index_name}'") from e
