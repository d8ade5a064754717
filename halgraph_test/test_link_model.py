#!/usr/bin/env python3
"""
Test suite for Link and EntityModel, message resolution and URI templates.
"""

import pytest
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

# Add the parent directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from halgraph.hal.message_resolver import (
    RelationTitleResolver,
    DictMessageResolver,
    NoOpMessageResolver,
)
from halgraph.model.link_model import Link, EntityModel
from halgraph.utils.template_utils import template_variables, expand_template

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


class TestLink:
    """Tests for the Link model."""

    def test_defaults(self):
        link = Link.of("/orders")

        assert link.rel == "self"
        assert not link.templated
        assert not link.prefer_array

    def test_link_is_immutable(self):
        link = Link.of("/orders")

        with pytest.raises(ValidationError):
            link.href = "/other"

    def test_builders_return_new_links(self):
        link = Link.of("/orders")

        titled = link.with_title("Orders").with_rel("orders").with_type("application/hal+json")

        assert link.title is None and link.rel == "self"
        assert (titled.rel, titled.title, titled.type) == ("orders", "Orders", "application/hal+json")
        assert titled.with_self_rel().rel == "self"

    def test_prefer_array_is_not_serialized(self):
        link = Link.of("/orders").with_prefer_array()

        assert link.prefer_array
        assert "prefer_array" not in link.model_dump()

    def test_templated_link(self):
        link = Link.of("/orders{?page,size}", "orders")

        assert link.templated
        assert link.variable_names == ["page", "size"]
        assert link.expand(page=2).href == "/orders?page=2"

    def test_hal_attributes(self):
        """Test that only HAL attributes are rendered and templated only when true."""
        link = Link(href="/orders/{id}", rel="order", media="print", deprecation="/deprecated")

        assert link.hal_attributes() == {"href": "/orders/{id}", "templated": True, "deprecation": "/deprecated"}
        assert Link.of("/orders").hal_attributes() == {"href": "/orders"}


class TestEntityModel:

    def test_add_and_get_link(self):
        entity = EntityModel(content={"id": 1}).add(Link.of("/orders/1"), Link.of("/customers/1", "customer"))

        assert entity.get_link("customer").href == "/customers/1"
        assert entity.get_link("missing") is None


class TestTemplates:
    """Tests for URI template helpers."""

    def test_template_variables(self):
        assert template_variables("http://localhost/rels/{rel}") == ["rel"]
        assert template_variables("/search{?q,page}{&size}") == ["q", "page", "size"]
        assert template_variables("/plain") == []

    def test_expand_simple(self):
        assert expand_template("/orders/{id}", {"id": 5}) == "/orders/5"
        assert expand_template("/orders/{id}", {"id": "a b"}) == "/orders/a%20b"

    def test_expand_drops_missing_values(self):
        assert expand_template("/orders{?page,size}", {"size": 10}) == "/orders?size=10"
        assert expand_template("/orders{?page}", {}) == "/orders"

    def test_expand_reserved(self):
        assert expand_template("{+base}/orders", {"base": "http://localhost/api"}) == "http://localhost/api/orders"


class TestRelationTitleResolver:
    """Tests for title lookups."""

    def test_full_relation_first(self):
        resolver = RelationTitleResolver(DictMessageResolver({
            "_links.acme:book.title": "Acme book",
            "_links.book.title": "Book",
        }))

        assert resolver.resolve("acme:book") == "Acme book"

    def test_local_part_fallback(self):
        resolver = RelationTitleResolver(DictMessageResolver({"_links.book.title": "Book"}))

        assert resolver.resolve("acme:book") == "Book"
        assert resolver.resolve("other") is None

    def test_empty_message_is_unresolved(self):
        resolver = RelationTitleResolver(DictMessageResolver({"_links.book.title": ""}))

        assert resolver.resolve("book") is None

    def test_no_op_resolver(self):
        assert RelationTitleResolver(NoOpMessageResolver()).resolve("book") is None
        assert RelationTitleResolver().resolve("book") is None

    def test_callable_resolver(self):
        resolver = RelationTitleResolver(lambda codes: "Found" if codes == ["_links.book.title"] else None)

        assert resolver.resolve("acme:book") == "Found"
