#!/usr/bin/env python3
"""
Test suite for HalEmbeddedBuilder.

This test suite validates:
- Promotion of singular relations to collection relations
- Explicit relations bypassing promotion
- Collection values, empty collections and prefer-collection-rels
- Wrapper handling and error conditions
"""

import pytest
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

# Add the parent directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from halgraph.hal.embedded_builder import HalEmbeddedBuilder, PlainItem, RelatedItem
from halgraph.curie.curie_provider import DefaultCurieProvider
from halgraph.model.link_model import EntityModel, Link
from halgraph.relation.relation_provider import (
    FixedLinkRelationProvider,
    DelegatingLinkRelationProvider,
    create_default_relation_provider,
    relation,
)
from halgraph.utils.hal_errors import EmbeddedStateError

# Configure logging
logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger(__name__)


@dataclass
class Order:
    id: int


@dataclass
class Customer:
    name: str


@relation("order")
@dataclass
class Purchase:
    id: int


@relation(collection_relation="entries")
@dataclass
class Entry:
    id: int


def create_string_provider() -> DelegatingLinkRelationProvider:
    """Create a provider that embeds strings as 'string' / 'strings'."""
    return DelegatingLinkRelationProvider(
        [FixedLinkRelationProvider("string", "strings", types=[str])],
        create_default_relation_provider()
    )


@pytest.fixture
def builder():
    """Create an embedded builder using the default provider chain."""
    return HalEmbeddedBuilder(create_default_relation_provider())


class TestPromotion:
    """Tests for singular to collection promotion."""

    def test_single_value_uses_singular_relation(self, builder):
        """Test that one value is filed under its singular relation."""
        order = Order(1)
        builder.add(order)

        assert dict(builder.as_map()) == {"order": [order]}
        assert not builder.buckets()[0].is_collection

    def test_second_value_promotes_to_collection(self, builder):
        """Test that a second value of the same type moves both values to the collection relation."""
        first, second = Order(1), Order(2)
        builder.add(first)
        builder.add(second)

        assert dict(builder.as_map()) == {"orders": [first, second]}
        assert builder.buckets()[0].is_collection

    def test_third_value_appends_without_renaming(self, builder):
        """Test that further values append to the collection bucket."""
        orders = [Order(1), Order(2), Order(3)]
        for order in orders:
            builder.add(order)

        assert list(builder.as_map()) == ["orders"]
        assert builder.as_map()["orders"] == orders

    def test_strings_promote(self):
        """Test adding 'foo' then 'bar' moves the bucket from 'string' to 'strings'."""
        builder = HalEmbeddedBuilder(create_string_provider())

        builder.add("foo")
        assert dict(builder.as_map()) == {"string": ["foo"]}

        builder.add("bar")
        assert dict(builder.as_map()) == {"strings": ["foo", "bar"]}

    def test_promoted_bucket_takes_position_of_final_key(self, builder):
        """Test that a promoted relation is re-inserted after existing relations."""
        builder.add(Order(1))
        builder.add(Customer("Dave"))
        builder.add(Order(2))

        assert list(builder.as_map()) == ["customer", "orders"]

    def test_heterogeneous_values_keep_separate_buckets(self, builder):
        """Test that values of different types do not interfere."""
        order, customer = Order(1), Customer("Dave")
        builder.add(order)
        builder.add(customer)

        assert dict(builder.as_map()) == {"order": [order], "customer": [customer]}


class TestExplicitRelations:
    """Tests for values carrying an explicit relation."""

    def test_related_items_are_never_promoted(self, builder):
        """Test that two values sharing an explicit relation stay under that relation."""
        first, second = Order(1), Order(2)
        builder.add(RelatedItem(first, "order"))
        builder.add(RelatedItem(second, "order"))

        assert dict(builder.as_map()) == {"order": [first, second]}

    def test_explicit_relation_renders_as_collection(self, builder):
        """Test that a single explicitly related value is a collection bucket."""
        builder.add(Order(1), relation="latest")

        assert builder.buckets()[0].is_collection

    def test_plain_value_joins_explicit_bucket_without_promotion(self, builder):
        """Test that a derived relation matching an explicit bucket appends to it."""
        first, second = Order(1), Order(2)
        builder.add(first, relation="order")
        builder.add(second)

        assert dict(builder.as_map()) == {"order": [first, second]}

    def test_blank_relation_raises(self, builder):
        """Test that a RelatedItem with a blank relation is rejected."""
        with pytest.raises(EmbeddedStateError):
            builder.add(RelatedItem(Order(1), "  "))

    def test_plain_item_is_unwrapped(self, builder):
        """Test that PlainItem values are treated like raw values."""
        order = Order(1)
        builder.add(PlainItem(order))

        assert dict(builder.as_map()) == {"order": [order]}


class TestCollectionValues:
    """Tests for collection values and collection options."""

    def test_list_value_uses_collection_relation(self, builder):
        """Test that a list is filed under the collection relation of its elements."""
        orders = [Order(1), Order(2)]
        builder.add(orders)

        assert dict(builder.as_map()) == {"orders": orders}

    def test_single_element_list_is_collection(self, builder):
        """Test that a one-element list still renders as a collection."""
        builder.add([Order(1)])

        assert list(builder.as_map()) == ["orders"]
        assert builder.buckets()[0].is_collection

    def test_list_promotes_existing_singular(self, builder):
        """Test that a list merges with a previously added single value."""
        orders = [Order(1), Order(2), Order(3)]
        builder.add(orders[0])
        builder.add(orders[1:])

        assert dict(builder.as_map()) == {"orders": orders}

    def test_empty_collection_without_relation_raises(self, builder):
        """Test that an empty collection cannot derive a relation."""
        with pytest.raises(EmbeddedStateError):
            builder.add([])

    def test_add_empty_collection(self, builder):
        """Test that an empty collection can be embedded for an element type."""
        builder.add_empty_collection(Order)

        assert dict(builder.as_map()) == {"orders": []}
        assert builder.buckets()[0].is_collection

    def test_prefer_collection_rels(self):
        """Test that single values use collection relations when preferred."""
        builder = HalEmbeddedBuilder(create_default_relation_provider(), prefer_collection_rels=True)
        order = Order(1)
        builder.add(order)

        assert dict(builder.as_map()) == {"orders": [order]}
        assert builder.buckets()[0].is_collection

    def test_sets_are_rejected(self, builder):
        """Test that unordered collections cannot be embedded."""
        with pytest.raises(EmbeddedStateError):
            builder.add({"a", "b"})

        with pytest.raises(EmbeddedStateError):
            builder.add(frozenset(["a", "b"]), relation="letters")

        assert dict(builder.as_map()) == {}

    def test_tuple_keeps_order(self, builder):
        orders = (Order(3), Order(1), Order(2))
        builder.add(orders)

        assert dict(builder.as_map()) == {"orders": list(orders)}


class TestPartialDeclarations:
    """Tests for types declaring only one of their relations."""

    def test_declared_singular_promotes_to_derived_collection(self, builder):
        purchases = [Purchase(1), Purchase(2)]
        builder.add(purchases[0])

        assert list(builder.as_map()) == ["order"]

        builder.add(purchases[1])

        assert dict(builder.as_map()) == {"purchases": purchases}

    def test_declared_collection_keeps_derived_singular(self, builder):
        entry = Entry(1)
        builder.add(entry)

        assert dict(builder.as_map()) == {"entry": [entry]}

        builder.add(Entry(2))

        assert list(builder.as_map()) == ["entries"]


class TestWrappersAndDefaults:
    """Tests for wrapper unwrapping, None handling and default relations."""

    def test_none_is_skipped(self, builder):
        """Test that None values are dropped silently."""
        builder.add(None)
        builder.add(EntityModel(content=None))

        assert dict(builder.as_map()) == {}

    def test_entity_model_relation_uses_content_type(self, builder):
        """Test that wrapped content determines the relation."""
        wrapped = EntityModel(content=Order(1), links=[Link.of("/orders/1")])
        builder.add(wrapped)

        assert dict(builder.as_map()) == {"order": [wrapped]}

    def test_nested_wrapper_raises(self, builder):
        """Test that a wrapper wrapping another wrapper is rejected."""
        with pytest.raises(EmbeddedStateError):
            builder.add(EntityModel(content=EntityModel(content=Order(1))))

    def test_provider_without_relation_uses_default(self):
        """Test that values fall back to the default relation."""
        builder = HalEmbeddedBuilder(FixedLinkRelationProvider(None, None))
        builder.add(Order(1))
        builder.add(Customer("Dave"))

        assert list(builder.as_map()) == ["content"]
        assert len(builder.as_map()["content"]) == 2

    def test_missing_provider_raises(self):
        """Test that a relation provider is required."""
        with pytest.raises(ValueError):
            HalEmbeddedBuilder(None)

    def test_map_is_read_only(self, builder):
        """Test that the returned view cannot be modified."""
        builder.add(Order(1))

        with pytest.raises(TypeError):
            builder.as_map()["other"] = []

    def test_curie_provider_namespaces_relations(self):
        """Test that derived relations are curied and explicit ones left alone."""
        curie_provider = DefaultCurieProvider.single("acme", "http://localhost:8080/rels/{rel}")
        builder = HalEmbeddedBuilder(create_default_relation_provider(), curie_provider=curie_provider)

        builder.add(Order(1))
        builder.add(Customer("Dave"), relation="owner")

        assert list(builder.as_map()) == ["acme:order", "owner"]
        assert builder.has_curied_relation()

    def test_no_curied_relation(self, builder):
        builder.add(Order(1))
        assert not builder.has_curied_relation()

    def test_uri_relation_is_not_curied(self):
        """Test that a URI relation does not count as a curied relation."""
        curie_provider = DefaultCurieProvider.single("acme", "http://localhost:8080/rels/{rel}")
        builder = HalEmbeddedBuilder(create_default_relation_provider(), curie_provider=curie_provider)

        builder.add(Order(1), relation="https://api.acme.com/rels/order")
        builder.add(Customer("Dave"), relation="other:customer")

        assert not builder.has_curied_relation()
