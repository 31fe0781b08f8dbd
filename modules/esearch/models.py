"""
Model base class and declarative search options.

Models are dataclasses deriving from Model. Per-field search options are
attached through dataclass field metadata with search_field():

    @searchable
    @dataclass
    class Article(Model):
        id: Optional[int] = None
        title: Optional[str] = search_field(default=None, fields=(SubField(), SubField(index=IndexHint.NOT_ANALYZED)))
        views: Optional[Long] = None
        author_id: Optional[int] = search_field(default=None, relation=True)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, List, Optional, Tuple

# Key under which FieldOptions live in dataclass field metadata
OPTIONS_KEY = "esearch"

LONG_MIN = -(2 ** 63)
LONG_MAX = 2 ** 63 - 1
INTEGER_MIN = -(2 ** 31)
INTEGER_MAX = 2 ** 31 - 1


class Long(int):
    """Marker type for 64-bit integer fields. Plain int fields are 32-bit."""

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Long({int(self)})"


class IndexHint(Enum):
    """Explicit index behaviour for a field."""
    ANALYZED = "analyzed"          # Tokenized for full-text search (engine default)
    NOT_ANALYZED = "not_analyzed"  # Stored verbatim for exact match / sorting
    NO = "no"                      # Not searchable


@dataclass(frozen=True)
class SubField:
    """One encoding of a multi-field."""
    name: Optional[str] = None
    index: Any = None


@dataclass(frozen=True)
class FieldOptions:
    """Static search configuration for one model field."""
    searchable: bool = True
    index: Any = None
    fields: Tuple[SubField, ...] = ()
    relation: bool = False

    @property
    def is_multi_field(self) -> bool:
        return len(self.fields) > 1


DEFAULT_OPTIONS = FieldOptions()


def search_field(
    *,
    index: Any = None,
    fields: Tuple[SubField, ...] = (),
    relation: bool = False,
    searchable: bool = True,
    **kwargs,
):
    """dataclasses.field() carrying search options. Remaining kwargs go to field()."""
    options = FieldOptions(
        searchable=searchable,
        index=index,
        fields=tuple(fields),
        relation=relation,
    )
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[OPTIONS_KEY] = options
    return field(metadata=metadata, **kwargs)


def options_for(dc_field) -> FieldOptions:
    """FieldOptions of a dataclasses.Field, defaults when none were declared."""
    return dc_field.metadata.get(OPTIONS_KEY, DEFAULT_OPTIONS)


_MODEL_REGISTRY: List[type] = []


class Model:
    """
    Base class for persistent model types.

    Every subclass is recorded in the model registry on definition, which is
    the universe of known model types searched for participating ones.
    """

    # Name of the primary key field
    __pk__: ClassVar[str] = "id"

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        _MODEL_REGISTRY.append(cls)

    def _key(self) -> Any:
        """Primary key of this instance."""
        return getattr(self, type(self).__pk__)


def known_models() -> List[type]:
    """All Model subclasses defined so far, in definition order."""
    return list(_MODEL_REGISTRY)
