"""
HAL Embedded Builder

Groups heterogeneous embedded values into buckets keyed by relation name.

A value without an explicit relation is filed under the singular relation
its type maps to. When a second value of the same type arrives, the bucket is
promoted: both values move to the type's collection relation and every further
value of that type is appended there. Values carrying an explicit relation
(RelatedItem) bypass promotion and always render as a list.
"""

import logging
import types
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Union, Mapping

from ..config.hal_configuration import DEFAULT_EMBEDDED_RELATION
from ..curie.curie_provider import CurieProvider, NoCurieProvider
from ..model.link_model import EntityModel
from ..model.relation_model import HalLinkRelation
from ..relation.relation_provider import LinkRelationProvider
from ..utils.hal_errors import EmbeddedStateError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlainItem:
    """An embedded value whose relation is derived from its type."""
    value: Any


@dataclass(frozen=True)
class RelatedItem:
    """An embedded value carrying a pre-assigned relation."""
    value: Any
    relation: str


EmbeddedItem = Union[PlainItem, RelatedItem]


@dataclass
class RelationBucket:
    """Ordered values filed under one relation."""
    relation: str
    items: List[Any] = field(default_factory=list)
    forced_collection: bool = False
    explicit: bool = False

    @property
    def is_collection(self) -> bool:
        return self.forced_collection or len(self.items) >= 2


def _is_collection_value(value: Any) -> bool:
    return isinstance(value, (list, tuple, types.GeneratorType, Iterator)) \
        and not isinstance(value, (str, bytes, dict))


class HalEmbeddedBuilder:
    """Builder collecting the values rendered into an ``_embedded`` block."""

    def __init__(self, provider: LinkRelationProvider,
                 curie_provider: Optional[CurieProvider] = None,
                 prefer_collection_rels: bool = False,
                 default_relation: str = DEFAULT_EMBEDDED_RELATION):
        """
        Initialize the builder.

        Args:
            provider: Relation provider deriving relations from value types
            curie_provider: Curie provider applied to derived relations
            prefer_collection_rels: File single values under collection relations
            default_relation: Relation used when the provider returns None

        Raises:
            ValueError: If no relation provider is given
        """
        if provider is None:
            raise ValueError("LinkRelationProvider must not be None!")

        self.provider = provider
        self.curie_provider = curie_provider
        self.prefer_collection_rels = prefer_collection_rels
        self.default_relation = default_relation
        self._buckets: Dict[str, RelationBucket] = {}

    def add(self, value: Any, relation: Optional[str] = None) -> None:
        """
        Add a value to the embeddeds.

        None values and wrappers without content are skipped.

        Args:
            value: Plain value, EntityModel, PlainItem/RelatedItem or a collection of values
            relation: Explicit relation bypassing relation derivation and promotion

        Raises:
            EmbeddedStateError: If a wrapper carries invalid state
        """
        if isinstance(value, RelatedItem):
            if not value.relation or not str(value.relation).strip():
                raise EmbeddedStateError(f"Embedded item {value!r} carries a blank relation!")
            relation = relation or value.relation
            value = value.value
        elif isinstance(value, PlainItem):
            value = value.value

        if value is None:
            return

        if isinstance(value, (set, frozenset)):
            raise EmbeddedStateError(f"Cannot embed an unordered {type(value).__name__}, pass a list or tuple instead!")

        if relation is not None:
            self._add_related(value, relation)
            return

        if _is_collection_value(value):
            self._add_collection(list(value))
            return

        target_type = self._target_type(value)
        if target_type is None:
            return

        if self.prefer_collection_rels:
            self._add_collection([value])
            return

        singular = self._relation_for(target_type, collection=False)
        collection = self._relation_for(target_type, collection=True)

        if collection in self._buckets:
            self._buckets[collection].items.append(value)
            return

        if singular not in self._buckets:
            self._buckets[singular] = RelationBucket(singular, [value])
            return

        if self._buckets[singular].explicit:
            self._buckets[singular].items.append(value)
            return

        self._promote(singular, collection, [value])

    def add_empty_collection(self, element_type: type) -> None:
        """Add an empty collection rendered under the collection relation of the given type."""
        if element_type is None:
            raise ValueError("Element type must not be None!")

        collection = self._relation_for(element_type, collection=True)
        if collection not in self._buckets:
            self._buckets[collection] = RelationBucket(collection, forced_collection=True)

    def as_map(self) -> Mapping[str, List[Any]]:
        """Return a read-only view of the embeddeds keyed by relation, in insertion order."""
        return types.MappingProxyType({rel: list(bucket.items) for rel, bucket in self._buckets.items()})

    def buckets(self) -> List[RelationBucket]:
        return list(self._buckets.values())

    def has_curied_relation(self) -> bool:
        """Whether any relation uses a curie the curie provider declares."""
        if self.curie_provider is None:
            return False

        for rel in self._buckets:
            relation = HalLinkRelation.of(rel)
            if relation.is_curied and self.curie_provider.has_curie(relation.curie):
                return True

        return False

    def _add_related(self, value: Any, relation: str) -> None:
        if not str(relation).strip():
            raise EmbeddedStateError(f"Explicit relation for {type(value).__name__} must not be blank!")

        bucket = self._buckets.get(relation)
        if bucket is None:
            bucket = self._buckets[relation] = RelationBucket(relation, forced_collection=True, explicit=True)

        if _is_collection_value(value):
            bucket.items.extend(item for item in value if item is not None)
        else:
            bucket.items.append(value)

    def _add_collection(self, values: List[Any]) -> None:
        values = [value.value if isinstance(value, PlainItem) else value for value in values]
        values = [value for value in values if value is not None]

        if not values:
            raise EmbeddedStateError("Cannot embed an empty collection without an explicit relation!")

        target_type = None
        for value in values:
            target_type = self._target_type(value)
            if target_type is not None:
                break

        if target_type is None:
            return

        singular = self._relation_for(target_type, collection=False)
        collection = self._relation_for(target_type, collection=True)

        if collection in self._buckets:
            bucket = self._buckets[collection]
            bucket.items.extend(values)
            bucket.forced_collection = True
            return

        if singular in self._buckets and singular != collection and not self._buckets[singular].explicit:
            self._promote(singular, collection, values)
            return

        self._buckets[collection] = RelationBucket(collection, values, forced_collection=True)

    def _promote(self, singular: str, collection: str, values: List[Any]) -> None:
        bucket = self._buckets.pop(singular)
        bucket.items.extend(values)
        bucket.relation = collection
        bucket.forced_collection = True
        self._buckets[collection] = bucket

        logger.debug(f"Promoted embedded relation '{singular}' to '{collection}' with {len(bucket.items)} items")

    def _target_type(self, value: Any) -> Optional[type]:
        if isinstance(value, EntityModel):
            content = value.content
            if isinstance(content, (EntityModel, PlainItem, RelatedItem)):
                raise EmbeddedStateError(
                    f"EntityModel must not wrap another embedded wrapper ({type(content).__name__})!"
                )
            return type(content) if content is not None else None

        if isinstance(value, RelatedItem):
            raise EmbeddedStateError("RelatedItem values must be added directly, not inside a collection!")

        return type(value)

    def _relation_for(self, target_type: type, collection: bool) -> str:
        if collection:
            rel = self.provider.collection_relation_for(target_type)
        else:
            rel = self.provider.singular_relation_for(target_type)

        rel = rel or self.default_relation

        if self.curie_provider is not None and not isinstance(self.curie_provider, NoCurieProvider):
            rel = self.curie_provider.namespace(rel)

        return rel
