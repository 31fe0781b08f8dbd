"""
Document serializer - model instance to index document.

Null values are left out of the document entirely. Values are written as
they are, except relations, which degrade to the text form of the
referenced key.
"""

import logging
from typing import Any, Dict, Optional

from .errors import SerializationError
from .introspection import fields_of
from .models import Model

logger = logging.getLogger(__name__)


def model_label(instance) -> str:
    """Short log label for an instance: type name and primary key."""
    key = getattr(instance, getattr(type(instance), "__pk__", "id"), None)
    return f"{type(instance).__name__}({key})"


def relation_value(value: Any) -> Optional[str]:
    """Text form of a relation: the referenced key."""
    if isinstance(value, Model):
        value = value._key()
    if value is None:
        return None
    return str(value)


def to_source(instance) -> Dict[str, Any]:
    """Document for an instance. Raises SerializationError on an unreadable field."""
    document: Dict[str, Any] = {}
    for descriptor in fields_of(type(instance)):
        value = descriptor.read(instance)
        if descriptor.is_relation:
            value = relation_value(value)
        if value is not None:
            document[descriptor.name] = value
    return document


def serialize(instance) -> Optional[Dict[str, Any]]:
    """
    Document for an instance, or None when it cannot be serialized.

    A bad object is logged and skipped so one failure does not stop a
    stream of change events.
    """
    try:
        return to_source(instance)
    except SerializationError as e:
        logger.warning(f"Skipping model {model_label(instance)}: {e}")
        return None


def document_id(instance) -> str:
    """Index id of an instance: its primary key as a string."""
    key = instance._key()
    if key is None:
        raise SerializationError(f"Model {model_label(instance)} has no primary key")
    return str(key)
