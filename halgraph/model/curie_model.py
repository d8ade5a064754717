"""Curie Model Classes

Curie namespace declarations and their rendered form in a HAL ``curies`` block.
"""

from dataclasses import dataclass
from typing import Dict, Any

from pydantic import BaseModel, Field

from ..utils.hal_errors import CurieConfigurationError
from ..utils.template_utils import template_variables


@dataclass(frozen=True)
class Curie:
    """
    A curie namespace bound to a URI template.

    The template must contain exactly one variable, which receives the local
    part of a curied relation (``http://host/rels/{rel}``).
    """
    name: str
    uri_template: str

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise CurieConfigurationError("Curie name must not be None or empty!")

        if self.uri_template is None:
            raise CurieConfigurationError(f"UriTemplate for curie '{self.name}' must not be None!")

        variables = template_variables(self.uri_template)
        if len(variables) != 1:
            raise CurieConfigurationError(
                f"Expected a single template variable in the UriTemplate {self.uri_template}, found {len(variables)}!"
            )

    @property
    def variable_name(self) -> str:
        return template_variables(self.uri_template)[0]


class CurieView(BaseModel):
    """Rendered curie entry of a HAL ``curies`` block."""
    name: str = Field(..., description="Curie name used as relation prefix")
    href: str = Field(..., description="URI template documenting the namespaced relations")
    templated: bool = Field(True, description="Whether the href is a URI template")

    class Config:
        frozen = True

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "href": self.href, "templated": self.templated}
