"""
Link Relation Providers

Providers map the runtime type of a value to the relation names used when the
value is embedded into a HAL document: a singular (item) relation and a
collection relation. Providers compose through DelegatingLinkRelationProvider
rather than inheritance.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple, Iterable

import inflection

logger = logging.getLogger(__name__)

# Attribute set on classes decorated with @relation
RELATION_ATTRIBUTE = "__hal_relation__"


def uncapitalize(text: str) -> str:
    """Lower-case the first character of the given text."""
    return text[:1].lower() + text[1:] if text else text


class LinkRelationProvider(ABC):
    """Interface for components deriving relation names from value types."""

    @abstractmethod
    def singular_relation_for(self, type_: type) -> Optional[str]:
        """Return the relation for a single value of the given type."""
        pass

    @abstractmethod
    def collection_relation_for(self, type_: type) -> Optional[str]:
        """Return the relation for a collection of values of the given type."""
        pass

    def supports(self, type_: type, collection: Optional[bool] = None) -> bool:
        """
        Check whether this provider derives relations for the given type.

        Args:
            type_: Value type
            collection: True for the collection relation, False for the singular one, None for either
        """
        return True


class DefaultLinkRelationProvider(LinkRelationProvider):
    """Uses the uncapitalized class name and appends ``List`` for collections."""

    def singular_relation_for(self, type_: type) -> Optional[str]:
        return uncapitalize(type_.__name__)

    def collection_relation_for(self, type_: type) -> Optional[str]:
        return f"{self.singular_relation_for(type_)}List"


class InflectorLinkRelationProvider(DefaultLinkRelationProvider):
    """Pluralizes the singular relation for collections (``order`` becomes ``orders``)."""

    def collection_relation_for(self, type_: type) -> Optional[str]:
        return inflection.pluralize(self.singular_relation_for(type_))


class FixedLinkRelationProvider(LinkRelationProvider):
    """
    Returns literal relation names.

    Without explicit types the names apply to every type; otherwise only the
    given types are supported. A name left as None is not supported, so a
    delegating chain falls through to the next provider for that lookup.
    """

    def __init__(self, singular_relation: Optional[str], collection_relation: Optional[str],
                 types: Optional[Iterable[type]] = None):
        self.singular_relation = singular_relation
        self.collection_relation = collection_relation
        self.types = tuple(types) if types is not None else None

    def singular_relation_for(self, type_: type) -> Optional[str]:
        return self.singular_relation

    def collection_relation_for(self, type_: type) -> Optional[str]:
        return self.collection_relation

    def supports(self, type_: type, collection: Optional[bool] = None) -> bool:
        if self.types is not None and type_ not in self.types:
            return False
        if collection is None:
            return True
        return (self.collection_relation if collection else self.singular_relation) is not None


def relation(value: Optional[str] = None, collection_relation: Optional[str] = None):
    """
    Class decorator declaring the relations used to embed instances of the class.

    Args:
        value: Relation for a single instance
        collection_relation: Relation for a collection of instances

    Returns:
        The class decorator
    """

    def decorate(cls):
        setattr(cls, RELATION_ATTRIBUTE, (value, collection_relation))
        return cls

    return decorate


class AnnotationLinkRelationProvider(LinkRelationProvider):
    """
    Reads relations declared with the @relation decorator.

    Lookups are memoized per type. The cache is shared by concurrent
    serializations and guarded by a lock.
    """

    def __init__(self):
        self._cache: Dict[type, Optional[Tuple[Optional[str], Optional[str]]]] = {}
        self._lock = threading.Lock()

    def _lookup(self, type_: type) -> Optional[Tuple[Optional[str], Optional[str]]]:
        with self._lock:
            if type_ not in self._cache:
                self._cache[type_] = getattr(type_, RELATION_ATTRIBUTE, None)
            return self._cache[type_]

    def singular_relation_for(self, type_: type) -> Optional[str]:
        declared = self._lookup(type_)
        return declared[0] if declared else None

    def collection_relation_for(self, type_: type) -> Optional[str]:
        declared = self._lookup(type_)
        return declared[1] if declared else None

    def supports(self, type_: type, collection: Optional[bool] = None) -> bool:
        declared = self._lookup(type_)
        if declared is None:
            return False
        if collection is None:
            return bool(declared[0] or declared[1])
        return bool(declared[1] if collection else declared[0])


class DelegatingLinkRelationProvider(LinkRelationProvider):
    """
    Delegates to the first provider supporting a type.

    Providers are consulted in the given order; the fallback answers for
    types no provider supports.
    """

    def __init__(self, providers: List[LinkRelationProvider],
                 fallback: Optional[LinkRelationProvider] = None):
        self.providers = list(providers)
        self.fallback = fallback or DefaultLinkRelationProvider()

    def _provider_for(self, type_: type, collection: bool) -> LinkRelationProvider:
        for provider in self.providers:
            if provider.supports(type_, collection):
                return provider

        logger.debug(f"No relation provider supports {type_.__name__}, using {type(self.fallback).__name__}")
        return self.fallback

    def singular_relation_for(self, type_: type) -> Optional[str]:
        return self._provider_for(type_, False).singular_relation_for(type_)

    def collection_relation_for(self, type_: type) -> Optional[str]:
        return self._provider_for(type_, True).collection_relation_for(type_)

    def supports(self, type_: type, collection: Optional[bool] = None) -> bool:
        return any(provider.supports(type_, collection) for provider in self.providers) \
            or self.fallback.supports(type_, collection)


def create_default_relation_provider(use_inflector: bool = True) -> DelegatingLinkRelationProvider:
    """
    Create the standard provider chain: @relation declarations first, then class names.

    Args:
        use_inflector: Pluralize collection relations instead of appending ``List``

    Returns:
        Delegating relation provider
    """
    fallback = InflectorLinkRelationProvider() if use_inflector else DefaultLinkRelationProvider()
    return DelegatingLinkRelationProvider([AnnotationLinkRelationProvider()], fallback)
