"""Link Model Classes

Pydantic models for hypermedia links and the content wrapper that carries
links alongside an entity.
"""

from typing import Dict, List, Any, Optional
from pydantic import BaseModel, Field

from .relation_model import IanaLinkRelations
from ..utils.template_utils import is_templated, template_variables, expand_template


# Attributes rendered for a HAL link besides href and templated
HAL_LINK_ATTRIBUTES = ("hreflang", "title", "type", "deprecation", "profile", "name")


class Link(BaseModel):
    """
    Immutable hypermedia link.

    ``templated`` is derived from the href. Builder methods return a new
    Link, the original is left untouched.
    """
    rel: str = Field(IanaLinkRelations.SELF, description="Link relation")
    href: str = Field(..., description="Link target, a URI or URI template")
    hreflang: Optional[str] = Field(None, description="Language of the target resource")
    media: Optional[str] = Field(None, description="Media the target resource is intended for")
    title: Optional[str] = Field(None, description="Human readable link title")
    type: Optional[str] = Field(None, description="Media type of the target resource")
    deprecation: Optional[str] = Field(None, description="URL describing the deprecation of the link")
    profile: Optional[str] = Field(None, description="Profile of the target resource")
    name: Optional[str] = Field(None, description="Secondary key for links sharing a relation")
    prefer_array: bool = Field(False, exclude=True, description="Render this link's relation as an array")

    class Config:
        frozen = True

    @classmethod
    def of(cls, href: str, rel: str = IanaLinkRelations.SELF) -> "Link":
        """Create a link for the given href and relation."""
        return cls(href=href, rel=rel)

    @property
    def templated(self) -> bool:
        return is_templated(self.href)

    @property
    def variable_names(self) -> List[str]:
        return template_variables(self.href)

    def expand(self, **values: Any) -> "Link":
        """Return a link with the href template expanded using the given values."""
        return self.model_copy(update={"href": expand_template(self.href, values)})

    def has_rel(self, rel: str) -> bool:
        return self.rel == rel

    def with_rel(self, rel: str) -> "Link":
        return self.model_copy(update={"rel": rel})

    def with_self_rel(self) -> "Link":
        return self.with_rel(IanaLinkRelations.SELF)

    def with_title(self, title: Optional[str]) -> "Link":
        return self.model_copy(update={"title": title})

    def with_type(self, type: Optional[str]) -> "Link":
        return self.model_copy(update={"type": type})

    def with_hreflang(self, hreflang: Optional[str]) -> "Link":
        return self.model_copy(update={"hreflang": hreflang})

    def with_media(self, media: Optional[str]) -> "Link":
        return self.model_copy(update={"media": media})

    def with_deprecation(self, deprecation: Optional[str]) -> "Link":
        return self.model_copy(update={"deprecation": deprecation})

    def with_profile(self, profile: Optional[str]) -> "Link":
        return self.model_copy(update={"profile": profile})

    def with_name(self, name: Optional[str]) -> "Link":
        return self.model_copy(update={"name": name})

    def with_prefer_array(self, prefer_array: bool = True) -> "Link":
        return self.model_copy(update={"prefer_array": prefer_array})

    def hal_attributes(self) -> Dict[str, Any]:
        """
        Render the link attributes supported by HAL.

        ``rel`` is carried by the enclosing key and ``media`` has no HAL
        counterpart, both are dropped. ``templated`` is only written when true.

        Returns:
            Ordered dictionary of HAL link attributes
        """
        attributes: Dict[str, Any] = {"href": self.href}

        if self.templated:
            attributes["templated"] = True

        for attribute in HAL_LINK_ATTRIBUTES:
            value = getattr(self, attribute)
            if value is not None:
                attributes[attribute] = value

        return attributes


class EntityModel(BaseModel):
    """Content wrapper pairing an entity with its links."""
    content: Any = Field(None, description="Wrapped entity, may be None")
    links: List[Link] = Field(default_factory=list, description="Links of the wrapped entity")

    class Config:
        arbitrary_types_allowed = True

    def add(self, *links: Link) -> "EntityModel":
        """Add links to the wrapper and return it."""
        self.links.extend(links)
        return self

    def get_link(self, rel: str) -> Optional[Link]:
        """Return the first link with the given relation, if any."""
        return next((link for link in self.links if link.rel == rel), None)
