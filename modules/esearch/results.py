"""
Result materializer - raw search hits back into model instances.

Per field, in order:
  - value already of the declared type          -> assigned
  - 64-bit field fed a plain (narrower) integer -> widened to Long
  - anything else                               -> skipped, field keeps its default

A hit whose instance cannot be built fails the whole result set.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence

from .errors import MaterializationError
from .introspection import DeclaredType, FieldDescriptor, describe
from .models import INTEGER_MAX, INTEGER_MIN, LONG_MAX, LONG_MIN, Long

logger = logging.getLogger(__name__)

SKIP = object()


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def matches_declared_type(descriptor: FieldDescriptor, value: Any) -> bool:
    """True when the raw value can be assigned without conversion."""
    python_type = descriptor.python_type
    if python_type is object:
        return True
    if python_type is Long:
        return isinstance(value, Long)
    if python_type is int:
        return _is_integer(value) and INTEGER_MIN <= value <= INTEGER_MAX
    return isinstance(value, python_type)


def coerce(descriptor: FieldDescriptor, value: Any) -> Any:
    """Value to assign for a raw value, or SKIP."""
    if matches_declared_type(descriptor, value):
        return value
    if descriptor.declared_type is DeclaredType.LONG and _is_integer(value) and LONG_MIN <= value <= LONG_MAX:
        return Long(value)
    return SKIP


def key_value(pk_type: Optional[type], raw_id: Any) -> Any:
    """
    Primary key to restore from a hit id, or SKIP.

    Ids are strings on the wire, so integer keys are parsed back;
    anything that does not parse is skipped like any other mismatch.
    """
    if pk_type is None or raw_id is None:
        return SKIP
    if pk_type is object or (isinstance(raw_id, pk_type) and not isinstance(raw_id, bool)):
        return raw_id
    if pk_type in (int, Long) and isinstance(raw_id, str):
        try:
            value = int(raw_id)
        except ValueError:
            return SKIP
        if not LONG_MIN <= value <= LONG_MAX:
            return SKIP
        return Long(value) if pk_type is Long else value
    return SKIP


def total_of(total: Any) -> Optional[int]:
    """Hit count as reported by the engine: a plain int or a {"value": N} object."""
    if isinstance(total, dict):
        total = total.get("value")
    return total if _is_integer(total) else None


def source_of(hit: Dict[str, Any]) -> Dict[str, Any]:
    """Document of a raw hit. Bare documents are accepted as well."""
    return hit["_source"] if "_source" in hit else hit


def materialize(raw_hits: Sequence[Dict[str, Any]], model_type: type) -> List[Any]:
    """Fresh model_type instance per hit, in hit order. Raises MaterializationError."""
    type_descriptor = describe(model_type)
    descriptors = type_descriptor.fields
    models = []
    for position, hit in enumerate(raw_hits):
        try:
            model = model_type()
            values = source_of(hit)
            key = key_value(type_descriptor.pk_type, hit.get("_id"))
            if key is not SKIP:
                setattr(model, type_descriptor.pk_name, key)
            for descriptor in descriptors:
                value = values.get(descriptor.name)
                if value is None:
                    continue
                value = coerce(descriptor, value)
                if value is SKIP:
                    logger.debug(f"Dropping {model_type.__name__}.{descriptor.name}={values[descriptor.name]!r}")
                    continue
                descriptor.write(model, value)
        except Exception as e:
            raise MaterializationError(
                f"Cannot materialize hit {position} as {model_type.__name__}: {e}"
            ) from e
        models.append(model)
    return models


class SearchResult:
    """Materialized hits of one search, the ids they were stored under and the reported total."""

    def __init__(self, raw_hits: Sequence[Dict[str, Any]], model_type: type, total: Any = None):
        self.model_type = model_type
        self.hits = materialize(raw_hits, model_type)
        # Every hit is a mapping once materialize() has passed
        self.ids = [hit.get("_id") for hit in raw_hits]
        self.total = total_of(total)
        if self.total is None:
            self.total = len(self.hits)

    @classmethod
    def from_envelope(cls, envelope: Dict[str, Any], model_type: type) -> "SearchResult":
        """Build from the engine's {"total": ..., "hits": [...]} object."""
        return cls(envelope.get("hits", []), model_type, total=envelope.get("total"))

    def __len__(self) -> int:
        return len(self.hits)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.hits)

    def __getitem__(self, index):
        return self.hits[index]

    def __repr__(self) -> str:
        return f"SearchResult({self.model_type.__name__}, {len(self.hits)} hits)"
