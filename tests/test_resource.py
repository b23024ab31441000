"""Tests for resource ids, timestamps and soft deletion."""

from datetime import datetime, timedelta, timezone

import pytest

from foodgraph.exceptions import EmptyLabelSetError
from foodgraph.graph.resource import (
    ID_SUFFIX_ALPHABET,
    Resource,
    generate_id,
    id_prefix,
    live,
    parse_resource,
    random_suffix,
    soft_delete,
    to_native_datetime,
    touch,
)

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestIdPrefix:
    """Tests for the deterministic part of generated ids."""

    @pytest.mark.parametrize(
        "labels,expected",
        [
            (["Test"], "grn:tm-food:test:"),
            (["Test", "Label"], "grn:tm-food:label:test:"),
            (["Test", "Resource", "Aardvark"], "grn:tm-food:aardvark:resource:test:"),
            (["Test", "", "  "], "grn:tm-food:test:"),
            (["Recipe", "Resource"], "grn:tm-food:recipe:resource:"),
        ],
    )
    def test_prefix(self, labels, expected):
        """Labels are lower-cased, sorted and joined after the namespace."""
        assert id_prefix(labels, namespace="grn:tm-food") == expected

    def test_label_order_does_not_matter(self):
        assert id_prefix(["B", "a"], "ns") == id_prefix(["A", "b"], "ns") == "ns:a:b:"

    @pytest.mark.parametrize("labels", [[], [""], ["", "   "]])
    def test_empty_label_set_rejected(self, labels):
        """No usable label means no id."""
        with pytest.raises(EmptyLabelSetError):
            id_prefix(labels, "grn:tm-food")

    def test_empty_label_set_is_value_error(self):
        with pytest.raises(ValueError):
            generate_id([])


class TestGenerateId:
    """Tests for full id generation."""

    def test_id_starts_with_prefix(self):
        resource_id = generate_id(["Ingredient", "Resource"], namespace="grn:tm-food")
        assert resource_id.startswith("grn:tm-food:ingredient:resource:")

    def test_suffix_length_and_alphabet(self):
        resource_id = generate_id(["Test"], namespace="grn:tm-food", suffix_length=16)
        suffix = resource_id.removeprefix("grn:tm-food:test:")
        assert len(suffix) == 16
        assert all(ch in ID_SUFFIX_ALPHABET for ch in suffix)

    def test_random_suffix_default_length(self):
        assert len(random_suffix()) == 16

    @pytest.mark.slow
    def test_ten_thousand_ids_are_unique(self):
        """Ids generated for the same labels never collide."""
        ids = {generate_id(["Test"], namespace="grn:tm-food") for _ in range(10_000)}
        assert len(ids) == 10_000
        assert all(i.startswith("grn:tm-food:test:") for i in ids)


class TestLifecycle:
    """Tests for touch and soft_delete."""

    def test_touch_sets_last_modified(self):
        resource = Resource(created=T0)
        touch(resource, T0 + timedelta(minutes=1))
        assert resource.last_modified == T0 + timedelta(minutes=1)

    def test_touch_never_moves_backwards(self):
        later = T0 + timedelta(hours=1)
        resource = Resource(created=T0, last_modified=later)
        touch(resource, T0)
        assert resource.last_modified == later

    def test_soft_delete_marks_deleted(self):
        resource = Resource(created=T0)
        assert resource.is_live

        assert soft_delete(resource, T0) is True
        assert resource.deleted == T0
        assert not resource.is_live

    def test_soft_delete_is_idempotent(self):
        """A second delete keeps the first timestamp."""
        resource = Resource(created=T0)
        soft_delete(resource, T0)

        assert soft_delete(resource, T0 + timedelta(days=1)) is False
        assert resource.deleted == T0

    def test_live_predicate(self):
        assert live("n") == "n.deleted IS NULL"
        assert live("ci") == "ci.deleted IS NULL"


class TestParsing:
    """Tests for reading stored timestamps back."""

    def test_parse_resource(self):
        parsed = parse_resource({"created": T0, "lastModified": None})
        assert parsed == {"created": T0, "last_modified": None, "deleted": None}

    def test_naive_datetime_assumed_utc(self):
        value = to_native_datetime(datetime(2024, 1, 1, 12, 0))
        assert value == T0

    def test_iso_string(self):
        assert to_native_datetime("2024-01-01T12:00:00+00:00") == T0

    def test_driver_temporal(self):
        """Objects exposing to_native() (neo4j.time.DateTime) are converted."""

        class FakeDriverDateTime:
            def to_native(self):
                return T0

        assert to_native_datetime(FakeDriverDateTime()) == T0

    def test_resource_properties_use_stored_names(self):
        props = Resource(created=T0).resource_properties()
        assert props == {"created": T0, "lastModified": None, "deleted": None}
