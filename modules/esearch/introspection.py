"""
Schema introspection - which model types and fields take part in search.

is_participating() is the only notion of "searchable" in the package; the
index-creation path and the change-routing path both go through it.
"""

import dataclasses
import logging
import operator
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Iterable, List, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from .errors import MetadataError, SerializationError
from .models import Long, Model, known_models, options_for
from .text import slugify

logger = logging.getLogger(__name__)

# Class attribute set by @searchable on exactly one class
SEARCHABLE_MARKER = "__esearch_searchable__"


class DeclaredType(Enum):
    """Semantic type tag of a field."""
    INTEGER = "integer"
    LONG = "long"
    TEXT = "text"
    MULTI_FIELD_TEXT = "multi_field_text"
    OTHER = "other"


@dataclass(frozen=True)
class FieldDescriptor:
    """One searchable field of a model type, with its accessor pair."""
    name: str
    declared_type: DeclaredType
    python_type: type
    is_relation: bool = False
    index_hint: Any = None
    is_multi_field: bool = False
    getter: Optional[Callable[[Any], Any]] = field(default=None, repr=False, compare=False)
    setter: Optional[Callable[[Any, Any], None]] = field(default=None, repr=False, compare=False)

    def read(self, instance) -> Any:
        try:
            return self.getter(instance)
        except Exception as e:
            raise SerializationError(f"Cannot read field '{self.name}' of {type(instance).__name__}: {e}") from e

    def write(self, instance, value: Any) -> None:
        self.setter(instance, value)


@dataclass(frozen=True)
class ModelTypeDescriptor:
    """Static search metadata of one model type."""
    model_type: type
    type_name: str
    pk_name: str
    fields: Tuple[FieldDescriptor, ...]
    # Runtime class of the primary key field, None when the model declares no such field
    pk_type: Optional[type] = None

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]


def type_name(model_type: type) -> str:
    """Index type name of a model type: the slugified simple class name."""
    return slugify(model_type.__name__)


def is_participating(model_type: Any) -> bool:
    """True iff the type itself (not a base class) carries the @searchable marker."""
    return isinstance(model_type, type) and bool(model_type.__dict__.get(SEARCHABLE_MARKER, False))


def searchable(cls):
    """
    Class decorator opting a Model dataclass into search indexing.

    Apply above @dataclass. The type's descriptor is built immediately so
    metadata problems fail at import time rather than at first index call.
    """
    if not dataclasses.is_dataclass(cls):
        raise MetadataError(f"@searchable needs a dataclass, got {cls!r} (apply it above @dataclass)")
    if not issubclass(cls, Model):
        raise MetadataError(f"@searchable type {cls.__name__} must derive from Model")
    if not describe(cls).fields:
        raise MetadataError(f"Searchable type {cls.__name__} has no searchable fields")
    setattr(cls, SEARCHABLE_MARKER, True)
    return cls


def searchable_types(universe: Optional[Iterable[type]] = None) -> List[type]:
    """Participating types among the universe (all known models by default)."""
    if universe is None:
        universe = known_models()
    return [t for t in universe if is_participating(t)]


def fields_of(model_type: type) -> Tuple[FieldDescriptor, ...]:
    """Ordered field descriptors of a model type. Stable across calls."""
    return describe(model_type).fields


@lru_cache(maxsize=None)
def describe(model_type: type) -> ModelTypeDescriptor:
    """Build (once per type) the descriptor of a model type."""
    if not dataclasses.is_dataclass(model_type):
        raise MetadataError(f"{model_type!r} is not a dataclass model")

    try:
        hints = get_type_hints(model_type)
    except NameError as e:
        raise MetadataError(f"Cannot resolve annotations of {model_type.__name__}: {e}") from e

    pk_name = getattr(model_type, "__pk__", "id")
    pk_type = None
    descriptors = []
    for dc_field in dataclasses.fields(model_type):
        options = options_for(dc_field)
        if dc_field.name == pk_name:
            pk_type = _python_type(hints.get(pk_name, Any))
            continue
        if not options.searchable:
            continue
        descriptors.append(_field_descriptor(dc_field.name, hints.get(dc_field.name, Any), options))

    if is_participating(model_type) and not descriptors:
        raise MetadataError(f"Searchable type {model_type.__name__} has no searchable fields")

    logger.debug(f"Described {model_type.__name__}: {[d.name for d in descriptors]}")
    return ModelTypeDescriptor(
        model_type=model_type,
        type_name=type_name(model_type),
        pk_name=pk_name,
        fields=tuple(descriptors),
        pk_type=pk_type,
    )


def _field_descriptor(name: str, annotation: Any, options) -> FieldDescriptor:
    python_type = _python_type(annotation)
    is_relation = options.relation or (isinstance(python_type, type) and issubclass(python_type, Model))
    return FieldDescriptor(
        name=name,
        declared_type=_declared_type(python_type, options.is_multi_field),
        python_type=python_type,
        is_relation=is_relation,
        index_hint=options.index,
        is_multi_field=options.is_multi_field,
        getter=operator.attrgetter(name),
        setter=_setter(name),
    )


def _setter(name: str) -> Callable[[Any, Any], None]:
    def set_value(instance, value):
        setattr(instance, name, value)
    return set_value


def _python_type(annotation: Any) -> type:
    """Runtime class of an annotation, with Optional[X] unwrapped to X."""
    if get_origin(annotation) is Union:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            annotation = args[0]
    if annotation is Any:
        return object
    if isinstance(annotation, type):
        return annotation
    origin = get_origin(annotation)
    return origin if isinstance(origin, type) else object


def _declared_type(python_type: type, multi_field: bool) -> DeclaredType:
    if python_type is Long:
        return DeclaredType.LONG
    if python_type is int:
        return DeclaredType.INTEGER
    if python_type is str:
        return DeclaredType.MULTI_FIELD_TEXT if multi_field else DeclaredType.TEXT
    return DeclaredType.OTHER
