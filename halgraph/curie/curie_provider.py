"""
Curie Providers

Registries of curie namespaces. A curie provider decides whether and how a
link relation is namespaced and supplies the entries of the ``curies`` block
rendered alongside namespaced links.

Two advertising variants are available:
- DefaultCurieProvider advertises every registered namespace
- ReferencedCurieProvider advertises only namespaces referenced by the links
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Iterable, Union

from ..model.curie_model import Curie, CurieView
from ..model.link_model import Link
from ..model.relation_model import HalLinkRelation
from ..utils.hal_errors import CurieConfigurationError

logger = logging.getLogger(__name__)


class CurieProvider(ABC):
    """Interface for components namespacing link relations."""

    @abstractmethod
    def namespaced_relation_for(self, relation: Union[str, HalLinkRelation]) -> HalLinkRelation:
        """Return the (possibly) curied relation for the given relation."""
        pass

    @abstractmethod
    def curie_entries(self, links: Iterable[Link], referenced_relations: Iterable[str] = ()) -> List[CurieView]:
        """
        Return the curie entries to render for the given links.

        Args:
            links: Links actually rendered
            referenced_relations: Further rendered relations, e.g. embedded relation names
        """
        pass

    def namespace(self, relation: str) -> str:
        """
        Namespace a relation string.

        IANA relations and relations already containing a curie separator are
        returned unchanged.

        Args:
            relation: Relation to namespace

        Returns:
            The effective relation
        """
        return self.namespaced_relation_for(relation).value

    def namespaced_relation_from(self, link: Link) -> HalLinkRelation:
        return self.namespaced_relation_for(link.rel)

    def has_curie(self, name: Optional[str]) -> bool:
        """Check whether a curie with the given name is registered."""
        return False


class NoCurieProvider(CurieProvider):
    """Curie provider that never namespaces relations and renders no curies."""

    def namespaced_relation_for(self, relation: Union[str, HalLinkRelation]) -> HalLinkRelation:
        return HalLinkRelation.of(relation)

    def curie_entries(self, links: Iterable[Link], referenced_relations: Iterable[str] = ()) -> List[CurieView]:
        return []


NONE = NoCurieProvider()


class DefaultCurieProvider(CurieProvider):
    """
    Curie provider backed by a fixed set of namespaces.

    Unprefixed, non-IANA relations are curied with the default curie. With a
    single namespace registered it becomes the default; with several, the
    default has to be named explicitly or relations are left untouched.
    All registered namespaces are advertised whenever curies are rendered.
    """

    def __init__(self, curies: Union[Dict[str, str], Iterable[Curie]],
                 default_curie: Optional[str] = None,
                 base_uri: Optional[str] = None):
        """
        Initialize the curie provider.

        Args:
            curies: Mapping of curie name to URI template, or Curie instances
            default_curie: Name of the curie used for unprefixed relations
            base_uri: Application URI prepended to non-absolute templates

        Raises:
            CurieConfigurationError: If a curie is invalid or the default curie is unknown
        """
        if curies is None:
            raise CurieConfigurationError("Curies must not be None!")

        if isinstance(curies, dict):
            curies = [Curie(name, template) for name, template in curies.items()]

        self._curies: Dict[str, Curie] = {}
        for curie in curies:
            if curie.name in self._curies:
                raise CurieConfigurationError(f"Duplicate curie name '{curie.name}'!")
            self._curies[curie.name] = curie

        if default_curie:
            if default_curie not in self._curies:
                raise CurieConfigurationError(f"Default curie '{default_curie}' is not registered!")
            self.default_curie = default_curie
        elif len(self._curies) == 1:
            self.default_curie = next(iter(self._curies))
        else:
            self.default_curie = None

        self.base_uri = base_uri

        logger.debug(f"Registered curies {list(self._curies)} with default curie {self.default_curie}")

    @classmethod
    def single(cls, name: str, uri_template: str, base_uri: Optional[str] = None) -> "DefaultCurieProvider":
        """Create a provider for a single curie that also acts as the default."""
        return cls({name: uri_template}, base_uri=base_uri)

    @property
    def curies(self) -> List[Curie]:
        return list(self._curies.values())

    def has_curie(self, name: Optional[str]) -> bool:
        return name in self._curies

    def namespaced_relation_for(self, relation: Union[str, HalLinkRelation]) -> HalLinkRelation:
        result = HalLinkRelation.of(relation)
        return result if self.default_curie is None else result.curie_if_uncuried(self.default_curie)

    def curie_entries(self, links: Iterable[Link], referenced_relations: Iterable[str] = ()) -> List[CurieView]:
        return [self._to_view(curie) for curie in self._curies.values()]

    def get_curie_href(self, curie: Curie) -> str:
        """
        Return the href rendered for a curie.

        Templates that are not absolute are resolved against the configured
        base URI.
        """
        template = curie.uri_template

        if template.startswith("http") or not self.base_uri:
            return template

        return self.base_uri.rstrip("/") + "/" + template.lstrip("/")

    def _to_view(self, curie: Curie) -> CurieView:
        return CurieView(name=curie.name, href=self.get_curie_href(curie), templated=True)


class ReferencedCurieProvider(DefaultCurieProvider):
    """Curie provider advertising only the namespaces the rendered links refer to."""

    def curie_entries(self, links: Iterable[Link], referenced_relations: Iterable[str] = ()) -> List[CurieView]:
        relations = [self.namespaced_relation_from(link) for link in links]
        relations.extend(HalLinkRelation.of(relation) for relation in referenced_relations)

        referenced = []
        for relation in relations:
            if relation.is_curied and relation.curie in self._curies and relation.curie not in referenced:
                referenced.append(relation.curie)

        logger.debug(f"Curies referenced by links: {referenced}")

        # Registration order, not encounter order
        return [self._to_view(curie) for name, curie in self._curies.items() if name in referenced]
