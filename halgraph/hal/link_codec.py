"""
HAL Link Codec

Renders an ordered list of links into the relation-keyed ``_links`` object of
a HAL document and parses such an object back into a flat list of links.

Rendering rules:
- links are grouped by their effective (possibly curied) relation, keeping
  encounter order within a relation
- a relation renders as an array when it carries more than one link, when the
  configuration selects array rendering for it, or when one of its links
  prefers arrays; otherwise as a single object
- a ``curies`` array is appended to root documents once a curied relation is
  rendered or the curie sentinel link is present
"""

import logging
from typing import Dict, List, Any, Optional, Iterable, Union

from pydantic import ValidationError

from ..config.hal_configuration import HalConfiguration, RenderSingleLinks
from ..curie.curie_provider import CurieProvider, NoCurieProvider, NONE
from ..model.curie_model import CurieView
from ..model.link_model import Link, HAL_LINK_ATTRIBUTES
from ..model.relation_model import HalLinkRelation, CURIES
from ..utils.hal_errors import HalParseError
from .message_resolver import RelationTitleResolver, MessageResolver

logger = logging.getLogger(__name__)


# Marker link forcing the curies block, e.g. when only embedded relations are curied
CURIES_REQUIRED_DUE_TO_EMBEDS = Link(rel="__rel__", href="¯\\_(ツ)_/¯")


def is_curies_sentinel(link: Link) -> bool:
    return link.rel == CURIES_REQUIRED_DUE_TO_EMBEDS.rel and link.href == CURIES_REQUIRED_DUE_TO_EMBEDS.href


class HalLinkCodec:
    """Serializer and parser for the ``_links`` block of HAL documents."""

    def __init__(self, curie_provider: Optional[CurieProvider] = None,
                 configuration: Optional[HalConfiguration] = None,
                 message_resolver: Union[MessageResolver, RelationTitleResolver, None] = None):
        """
        Initialize the codec.

        Args:
            curie_provider: Curie provider namespacing relations, defaults to none
            configuration: HAL rendering configuration, defaults to single object rendering
            message_resolver: Source for link titles
        """
        self.curie_provider = curie_provider or NONE
        self.configuration = configuration or HalConfiguration()

        if isinstance(message_resolver, RelationTitleResolver):
            self.title_resolver = message_resolver
        else:
            self.title_resolver = RelationTitleResolver(message_resolver)

    @property
    def prefixing_required(self) -> bool:
        return not isinstance(self.curie_provider, NoCurieProvider)

    def serialize(self, links: Optional[Iterable[Link]], root: bool = True,
                  referenced_relations: Iterable[str] = ()) -> Dict[str, Any]:
        """
        Render links into a HAL ``_links`` object.

        Args:
            links: Ordered links, may contain the curie sentinel link
            root: Whether the links belong to the root document; curies are only rendered there
            referenced_relations: Other curied relations rendered with the document (embedded keys)

        Returns:
            Ordered dictionary of relation to link object or array of link objects;
            empty when there is nothing to render
        """
        grouped: Dict[str, List[Link]] = {}
        emitted: List[Link] = []
        curies_needed = False

        for link in links or []:
            if is_curies_sentinel(link):
                curies_needed = True
                continue

            relation = self._effective_relation(link)

            if relation.value != link.rel or self._is_declared_curie(relation):
                curies_needed = True

            grouped.setdefault(relation.value, []).append(link)
            emitted.append(link)

        result: Dict[str, Any] = {}

        for relation, bucket in grouped.items():
            views = [self._to_hal_link(link, relation) for link in bucket]

            if len(views) == 1 and not self._render_as_array(relation, bucket):
                result[relation] = views[0]
            else:
                result[relation] = views

        if root and curies_needed:
            curies = self.curie_entries_if_needed(emitted, force=True, referenced_relations=referenced_relations)
            if curies:
                result[CURIES.value] = [curie.to_dict() for curie in curies]

        return result

    def curie_entries_if_needed(self, links: Iterable[Link], force: bool = False,
                                referenced_relations: Iterable[str] = ()) -> Optional[List[CurieView]]:
        """
        Return the curie entries to render for the given links.

        Args:
            links: Ordered links
            force: Render curies even when no link relation is curied
            referenced_relations: Other curied relations rendered with the document

        Returns:
            Curie entries, or None when no curies are needed or available
        """
        if not self.prefixing_required:
            return None

        links = [link for link in links if not is_curies_sentinel(link)]
        needed = force or any(self._is_declared_curie(self._effective_relation(link)) for link in links)

        if not needed:
            return None

        curies = self.curie_provider.curie_entries(links, referenced_relations)

        if not curies:
            return None

        logger.debug(f"Rendering curies {[curie.name for curie in curies]}")
        return list(curies)

    def parse(self, links_object: Any) -> List[Link]:
        """
        Parse a HAL ``_links`` object into a flat list of links.

        Fields are read in document order. Arrays expand to one link per
        element, objects to a single link. Links without their own relation
        take the field name.

        Args:
            links_object: Decoded ``_links`` object

        Returns:
            Ordered list of links

        Raises:
            HalParseError: If the object or one of its values is malformed
        """
        if links_object is None:
            return []

        if not isinstance(links_object, dict):
            raise HalParseError(f"Expected an object for _links but got {type(links_object).__name__}")

        result: List[Link] = []

        for relation, value in links_object.items():
            if isinstance(value, list):
                for element in value:
                    result.append(self._parse_link(relation, element))
            elif isinstance(value, dict):
                result.append(self._parse_link(relation, value))
            else:
                raise HalParseError(
                    f"Expected an object or array for relation '{relation}' but got {type(value).__name__}"
                )

        return result

    def _parse_link(self, relation: str, element: Any) -> Link:
        if not isinstance(element, dict):
            raise HalParseError(f"Expected a link object for relation '{relation}' but got {type(element).__name__}")

        href = element.get("href")
        if not isinstance(href, str):
            raise HalParseError(f"Link for relation '{relation}' has no href")

        own_relation = element.get("rel")
        attributes = {attribute: element.get(attribute) for attribute in HAL_LINK_ATTRIBUTES}

        try:
            return Link(
                rel=own_relation if isinstance(own_relation, str) and own_relation.strip() else relation,
                href=href,
                **{key: value for key, value in attributes.items() if value is not None},
            )
        except ValidationError as e:
            raise HalParseError(f"Invalid link for relation '{relation}': {e}") from e

    def _effective_relation(self, link: Link) -> HalLinkRelation:
        if self.prefixing_required:
            return self.curie_provider.namespaced_relation_from(link)
        return HalLinkRelation.of(link.rel)

    def _is_declared_curie(self, relation: HalLinkRelation) -> bool:
        return relation.is_curied and self.curie_provider.has_curie(relation.curie)

    def _render_as_array(self, relation: str, bucket: List[Link]) -> bool:
        if any(link.prefer_array for link in bucket):
            return True

        mode = self.configuration.override_for(relation)
        if mode is None:
            mode = self.configuration.override_for(bucket[0].rel)
        if mode is None:
            mode = self.configuration.default_mode()

        return mode == RenderSingleLinks.AS_ARRAY

    def _to_hal_link(self, link: Link, relation: str) -> Dict[str, Any]:
        attributes = link.hal_attributes()
        title = self.title_resolver.resolve(relation)

        if title:
            attributes["title"] = title

        return attributes
