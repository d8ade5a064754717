"""Link Relation Model Classes

Value objects for HAL link relations, including curie-qualified relations and
the IANA registered relations that are never namespaced.
"""

from dataclasses import dataclass
from typing import Optional, List, Callable, FrozenSet


RELATION_MESSAGE_TEMPLATE = "_links.{}.title"


class IanaLinkRelations:
    """Registered link relations from the IANA link relation registry."""

    SELF = "self"
    FIRST = "first"
    PREV = "prev"
    PREVIOUS = "previous"
    NEXT = "next"
    LAST = "last"
    ITEM = "item"
    COLLECTION = "collection"
    PROFILE = "profile"
    SEARCH = "search"

    RELATIONS: FrozenSet[str] = frozenset([
        "about", "alternate", "appendix", "archives", "author", "blocked-by", "bookmark",
        "canonical", "chapter", "cite-as", "collection", "contents", "copyright",
        "create-form", "current", "describedby", "describes", "disclosure", "dns-prefetch",
        "duplicate", "edit", "edit-form", "edit-media", "enclosure", "first", "glossary",
        "help", "hosts", "hub", "icon", "index", "item", "last", "latest-version",
        "license", "lrdd", "memento", "monitor", "monitor-group", "next", "next-archive",
        "nofollow", "noreferrer", "original", "payment", "pingback", "preconnect",
        "predecessor-version", "prefetch", "preload", "prerender", "prev", "preview",
        "previous", "prev-archive", "privacy-policy", "profile", "related", "restconf",
        "replies", "search", "section", "self", "service", "start", "stylesheet",
        "subsection", "successor-version", "tag", "terms-of-service", "timegate",
        "timemap", "type", "up", "version-history", "via", "webmention", "working-copy",
        "working-copy-of",
    ])

    @classmethod
    def is_iana_rel(cls, relation: Optional[str]) -> bool:
        """Check whether the given relation is an IANA registered relation (case-insensitive)."""
        if not relation:
            return False
        return relation.lower() in cls.RELATIONS


@dataclass(frozen=True)
class HalLinkRelation:
    """
    A link relation split into an optional curie and its local part.

    ``HalLinkRelation.of("acme:book")`` has curie ``acme`` and local part
    ``book``; ``HalLinkRelation.of("self")`` is uncuried.
    """
    curie: Optional[str]
    local_part: str

    @classmethod
    def of(cls, relation) -> "HalLinkRelation":
        """
        Create a HalLinkRelation from a relation string or return the given instance.

        Args:
            relation: Relation string or HalLinkRelation

        Returns:
            HalLinkRelation for the relation

        Raises:
            ValueError: If the relation is None
        """
        if relation is None:
            raise ValueError("Link relation must not be None!")

        if isinstance(relation, HalLinkRelation):
            return relation

        curie, separator, local_part = str(relation).partition(":")

        if not separator:
            return cls(None, curie)

        return cls(curie, local_part)

    @classmethod
    def curied(cls, curie: str, relation: str) -> "HalLinkRelation":
        """Create a curied relation; the curie must not be empty."""
        if not curie:
            raise ValueError("Curie must not be None or empty!")
        return cls(curie, relation)

    @classmethod
    def uncuried(cls, relation: str) -> "HalLinkRelation":
        """Create an uncuried relation."""
        return cls(None, relation)

    @classmethod
    def curie_builder(cls, curie: str) -> Callable[[str], "HalLinkRelation"]:
        """Return a function creating relations curied with the given curie."""
        if not curie:
            raise ValueError("Curie must not be None or empty!")
        return lambda relation: cls(curie, relation)

    @property
    def is_curied(self) -> bool:
        return self.curie is not None

    @property
    def value(self) -> str:
        return f"{self.curie}:{self.local_part}" if self.is_curied else self.local_part

    def with_curie(self, curie: str) -> "HalLinkRelation":
        """Return this relation curied with the given curie, replacing any existing one."""
        return HalLinkRelation.curied(curie, self.local_part)

    def curie_if_uncuried(self, curie: str) -> "HalLinkRelation":
        """
        Curie the relation unless it is already curied or an IANA relation.

        Args:
            curie: Curie name to apply

        Returns:
            The curied relation, or this relation unchanged
        """
        if not curie:
            raise ValueError("Curie must not be None or empty!")

        if self.is_curied or IanaLinkRelations.is_iana_rel(self.local_part):
            return self

        return self.with_curie(curie)

    def map(self, mapper: Callable[[str], str]) -> "HalLinkRelation":
        """Return a relation with the local part transformed by the given function."""
        mapped = mapper(self.local_part)
        return self if mapped == self.local_part else HalLinkRelation(self.curie, mapped)

    def codes(self) -> List[str]:
        """Message codes used to look up a human readable title for this relation."""
        codes = [RELATION_MESSAGE_TEMPLATE.format(self.value)]
        # URI relations such as http://... have no local part to fall back to
        if self.is_curied and not self.local_part.startswith("//"):
            codes.append(RELATION_MESSAGE_TEMPLATE.format(self.local_part))
        return codes

    def __str__(self) -> str:
        return self.value


CURIES = HalLinkRelation.uncuried("curies")
