"""
HAL Configuration

Immutable rendering configuration for HAL documents: how a relation with a
single link is rendered (object or one-element array), per-relation pattern
overrides, and embedded rendering options. Every ``with_*`` method returns a
new configuration and leaves the receiver untouched.
"""

import logging
from enum import Enum
from typing import Dict, Optional

from ..utils.pattern_utils import matches_relation_pattern

logger = logging.getLogger(__name__)


DEFAULT_EMBEDDED_RELATION = "content"


class RenderSingleLinks(str, Enum):
    """How to render a relation that carries exactly one link."""
    AS_SINGLE = "single"
    AS_ARRAY = "array"


class HalConfiguration:
    """
    HAL rendering configuration.

    Render mode resolution for a relation:
    1. an override registered for exactly that relation
    2. the first registered pattern override matching the relation
    3. the default render mode
    """

    def __init__(self, render_single_links: RenderSingleLinks = RenderSingleLinks.AS_SINGLE,
                 single_links_per_pattern: Optional[Dict[str, RenderSingleLinks]] = None,
                 enforce_embedded_collections: bool = False,
                 default_relation: str = DEFAULT_EMBEDDED_RELATION):
        self._render_single_links = RenderSingleLinks(render_single_links)
        self._single_links_per_pattern: Dict[str, RenderSingleLinks] = dict(single_links_per_pattern or {})
        self._enforce_embedded_collections = enforce_embedded_collections
        self._default_relation = default_relation

    @property
    def render_single_links(self) -> RenderSingleLinks:
        return self._render_single_links

    @property
    def single_links_per_pattern(self) -> Dict[str, RenderSingleLinks]:
        return dict(self._single_links_per_pattern)

    @property
    def enforce_embedded_collections(self) -> bool:
        return self._enforce_embedded_collections

    @property
    def default_relation(self) -> str:
        return self._default_relation

    def default_mode(self) -> RenderSingleLinks:
        return self._render_single_links

    def override_for(self, relation: str) -> Optional[RenderSingleLinks]:
        """
        Return the render mode registered for a relation, if any.

        Args:
            relation: Relation value

        Returns:
            The overriding render mode, or None when no override applies
        """
        if relation is None:
            return None

        if relation in self._single_links_per_pattern:
            return self._single_links_per_pattern[relation]

        for pattern, mode in self._single_links_per_pattern.items():
            if matches_relation_pattern(pattern, relation):
                return mode

        return None

    def mode_for(self, relation: str) -> RenderSingleLinks:
        """Return the render mode for a single link of the given relation."""
        override = self.override_for(relation)
        return override if override is not None else self._render_single_links

    def with_render_single_links(self, render_single_links: RenderSingleLinks) -> "HalConfiguration":
        """Return a configuration using the given default render mode."""
        render_single_links = RenderSingleLinks(render_single_links)

        if render_single_links == self._render_single_links:
            return self

        return self._copy(render_single_links=render_single_links)

    def with_render_single_links_for(self, pattern: str, render_single_links: RenderSingleLinks) -> "HalConfiguration":
        """
        Return a configuration rendering single links of matching relations in the given mode.

        The pattern is either a fixed relation (``search``), a wildcard pattern
        (``acme:*``) or a URI pattern (``https://api.acme.com/rels/**``).

        Args:
            pattern: Relation or relation pattern
            render_single_links: Render mode for matching relations

        Returns:
            New configuration
        """
        if not pattern:
            raise ValueError("Relation pattern must not be None or empty!")

        patterns = dict(self._single_links_per_pattern)
        patterns[pattern] = RenderSingleLinks(render_single_links)

        logger.debug(f"Render single links for '{pattern}' as {patterns[pattern].value}")

        return self._copy(single_links_per_pattern=patterns)

    def with_enforce_embedded_collections(self, enforce_embedded_collections: bool) -> "HalConfiguration":
        if enforce_embedded_collections == self._enforce_embedded_collections:
            return self
        return self._copy(enforce_embedded_collections=enforce_embedded_collections)

    def with_default_relation(self, default_relation: str) -> "HalConfiguration":
        if not default_relation:
            raise ValueError("Default relation must not be None or empty!")
        return self._copy(default_relation=default_relation)

    def _copy(self, **changes) -> "HalConfiguration":
        values = {
            "render_single_links": self._render_single_links,
            "single_links_per_pattern": self._single_links_per_pattern,
            "enforce_embedded_collections": self._enforce_embedded_collections,
            "default_relation": self._default_relation,
        }
        values.update(changes)
        return HalConfiguration(**values)

    def __repr__(self) -> str:
        return (f"HalConfiguration(render_single_links={self._render_single_links.value}, "
                f"patterns={ {k: v.value for k, v in self._single_links_per_pattern.items()} }, "
                f"enforce_embedded_collections={self._enforce_embedded_collections})")
