"""
HAL Document Assembler

Combines document content, the relation-keyed ``_links`` block and the
relation-keyed ``_embedded`` block into a HAL document, and parses HAL
documents back into content, a flat list of links and a flat list of
embedded items.

The content of plain values is encoded by a pluggable content mapper; the
assembler only supplies the relation-keyed envelope around it.
"""

import dataclasses
import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional, Iterable, Callable, Union

from pydantic import BaseModel

from ..config.hal_configuration import HalConfiguration
from ..curie.curie_provider import CurieProvider, NONE
from ..model.link_model import Link, EntityModel
from ..relation.relation_provider import LinkRelationProvider, create_default_relation_provider
from ..utils.hal_errors import HalParseError
from .embedded_builder import HalEmbeddedBuilder, RelatedItem
from .link_codec import HalLinkCodec, CURIES_REQUIRED_DUE_TO_EMBEDS
from .message_resolver import MessageResolver

logger = logging.getLogger(__name__)


LINKS = "_links"
EMBEDDED = "_embedded"

ContentMapper = Callable[[Any], Any]
ContentReader = Callable[[str, Any], Any]


def default_content_mapper(value: Any) -> Any:
    """
    Encode a plain value into JSON-compatible data.

    Pydantic models are dumped by alias without None fields, dataclasses are
    converted to dictionaries, everything else is returned unchanged.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True, mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, dict):
        return dict(value)
    return value


@dataclass
class ParsedHalDocument:
    """A HAL document split into content, links and embedded items."""
    content: Dict[str, Any] = field(default_factory=dict)
    links: List[Link] = field(default_factory=list)
    embedded: List[RelatedItem] = field(default_factory=list)

    def get_link(self, rel: str) -> Optional[Link]:
        """Return the first link with the given relation, if any."""
        return next((link for link in self.links if link.rel == rel), None)

    def get_links(self, rel: str) -> List[Link]:
        return [link for link in self.links if link.rel == rel]

    def get_embedded(self, relation: str) -> List[Any]:
        """Return the embedded values parsed from the given relation, in document order."""
        return [item.value for item in self.embedded if item.relation == relation]


class HalDocumentAssembler:
    """Renders and parses complete HAL documents."""

    def __init__(self, relation_provider: Optional[LinkRelationProvider] = None,
                 curie_provider: Optional[CurieProvider] = None,
                 configuration: Optional[HalConfiguration] = None,
                 message_resolver: Optional[MessageResolver] = None,
                 content_mapper: Optional[ContentMapper] = None,
                 content_reader: Optional[ContentReader] = None,
                 prefer_collection_rels: bool = False):
        """
        Initialize the assembler.

        Args:
            relation_provider: Relation provider for embedded values
            curie_provider: Curie provider for link and embedded relations
            configuration: HAL rendering configuration
            message_resolver: Source for link titles
            content_mapper: Encoder for plain content values
            content_reader: Decoder for parsed embedded values, called with relation and raw value
            prefer_collection_rels: Embed single values under collection relations
        """
        self.relation_provider = relation_provider or create_default_relation_provider()
        self.curie_provider = curie_provider or NONE
        self.configuration = configuration or HalConfiguration()
        self.content_mapper = content_mapper or default_content_mapper
        self.content_reader = content_reader
        self.prefer_collection_rels = prefer_collection_rels
        self.link_codec = HalLinkCodec(self.curie_provider, self.configuration, message_resolver)

    def embedded_builder(self) -> HalEmbeddedBuilder:
        """Create a new embedded builder using this assembler's providers."""
        return HalEmbeddedBuilder(
            self.relation_provider,
            curie_provider=self.curie_provider,
            prefer_collection_rels=self.prefer_collection_rels,
            default_relation=self.configuration.default_relation,
        )

    def to_document(self, content: Any = None, links: Optional[Iterable[Link]] = None,
                    embedded: Union[HalEmbeddedBuilder, Iterable[Any], None] = None,
                    root: bool = True) -> Dict[str, Any]:
        """
        Assemble a HAL document.

        Args:
            content: Document content, mapped to a JSON object by the content mapper
            links: Ordered links of the document
            embedded: Embedded builder or iterable of embedded values / EmbeddedItems
            root: Whether this is the root document (curies are only declared there)

        Returns:
            HAL document with content fields followed by ``_links`` and ``_embedded``;
            empty sections are omitted

        Raises:
            ValueError: If the content does not map to a JSON object
        """
        document: Dict[str, Any] = {}

        if isinstance(content, EntityModel):
            links = list(content.links) + list(links or [])
            content = content.content

        if content is not None:
            mapped = self.content_mapper(content)
            if not isinstance(mapped, dict):
                raise ValueError(f"Document content must map to a JSON object, got {type(mapped).__name__}")
            document.update(mapped)

        builder = self._to_builder(embedded)
        link_list = list(links or [])
        embedded_relations: List[str] = []

        if builder is not None and builder.has_curied_relation():
            link_list.append(CURIES_REQUIRED_DUE_TO_EMBEDS)
            embedded_relations = [bucket.relation for bucket in builder.buckets()]
            logger.debug(f"Curied embedded relations {embedded_relations} require curies")

        rendered_links = self.link_codec.serialize(link_list, root=root, referenced_relations=embedded_relations)
        if rendered_links:
            document[LINKS] = rendered_links

        if builder is not None:
            rendered_embedded = self.serialize_embedded(builder)
            if rendered_embedded:
                document[EMBEDDED] = rendered_embedded

        return document

    def serialize_links(self, links: Optional[Iterable[Link]], root: bool = True) -> Dict[str, Any]:
        return self.link_codec.serialize(links, root=root)

    def serialize_embedded(self, builder: HalEmbeddedBuilder) -> Dict[str, Any]:
        """
        Render the buckets of an embedded builder.

        Collection buckets render as arrays, single-item buckets as the item
        itself unless embedded collections are enforced.
        """
        result: Dict[str, Any] = {}

        for bucket in builder.buckets():
            values = [self._render_embedded_value(value) for value in bucket.items]

            if bucket.is_collection or self.configuration.enforce_embedded_collections:
                result[bucket.relation] = values
            else:
                result[bucket.relation] = values[0]

        return result

    def from_document(self, document: Any) -> ParsedHalDocument:
        """
        Parse a HAL document.

        Args:
            document: Decoded HAL document

        Returns:
            ParsedHalDocument with content fields, links and embedded items

        Raises:
            HalParseError: If the document or one of its sections is malformed
        """
        if not isinstance(document, dict):
            raise HalParseError(f"Expected a JSON object for a HAL document but got {type(document).__name__}")

        content = {key: value for key, value in document.items() if key not in (LINKS, EMBEDDED)}

        return ParsedHalDocument(
            content=content,
            links=self.parse_links(document.get(LINKS)),
            embedded=self.parse_embedded(document.get(EMBEDDED)),
        )

    def parse_links(self, links_object: Any) -> List[Link]:
        return self.link_codec.parse(links_object)

    def parse_embedded(self, embedded_object: Any) -> List[RelatedItem]:
        """
        Flatten an ``_embedded`` object into relation-tagged items.

        Arrays expand to one item per element, any other value to a single
        item. Nested HAL documents are parsed recursively.

        Args:
            embedded_object: Decoded ``_embedded`` object

        Returns:
            Ordered list of RelatedItems

        Raises:
            HalParseError: If the object is not a JSON object
        """
        if embedded_object is None:
            return []

        if not isinstance(embedded_object, dict):
            raise HalParseError(f"Expected an object for _embedded but got {type(embedded_object).__name__}")

        result: List[RelatedItem] = []

        for relation, value in embedded_object.items():
            elements = value if isinstance(value, list) else [value]
            for element in elements:
                result.append(RelatedItem(self._read_embedded_value(relation, element), relation))

        return result

    def to_json(self, content: Any = None, links: Optional[Iterable[Link]] = None,
                embedded: Union[HalEmbeddedBuilder, Iterable[Any], None] = None,
                indent: Optional[int] = None) -> str:
        """Assemble a HAL document and encode it as JSON text."""
        return json.dumps(self.to_document(content, links, embedded), indent=indent, ensure_ascii=False)

    def from_json(self, text: Union[str, bytes]) -> ParsedHalDocument:
        """
        Decode JSON text and parse it as a HAL document.

        Raises:
            HalParseError: If the text is not valid JSON or not a HAL document
        """
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            raise HalParseError(f"Invalid JSON: {e}") from e

        return self.from_document(document)

    def _to_builder(self, embedded: Union[HalEmbeddedBuilder, Iterable[Any], None]) -> Optional[HalEmbeddedBuilder]:
        if embedded is None:
            return None

        if isinstance(embedded, HalEmbeddedBuilder):
            return embedded

        builder = self.embedded_builder()
        for value in embedded:
            builder.add(value)
        return builder

    def _render_embedded_value(self, value: Any) -> Any:
        if isinstance(value, EntityModel):
            return self.to_document(value.content, value.links, root=False)
        return self.content_mapper(value)

    def _read_embedded_value(self, relation: str, value: Any) -> Any:
        if isinstance(value, dict) and (LINKS in value or EMBEDDED in value):
            return self.from_document(value)

        if self.content_reader is not None:
            return self.content_reader(relation, value)

        return value
