"""Tests for flowpath.registry module — query bindings."""

from __future__ import annotations

import pytest

from flowpath.config import FlowpathConfig
from flowpath.exceptions import ConfigurationError
from flowpath.registry import QueryRegistry
from flowpath.types import OutputMode, QueryBinding


class TestConstruction:
    def test_mapping_keeps_order(self):
        registry = QueryRegistry({"b": "$.b", "a": "$.a"}, OutputMode.ATTRIBUTE)
        assert registry.names() == ["b", "a"]

    def test_pairs_keep_order(self):
        registry = QueryRegistry([("b", "$.b"), ("a", "$.a")], OutputMode.ATTRIBUTE)
        assert list(registry) == [
            QueryBinding(name="b", expression="$.b"),
            QueryBinding(name="a", expression="$.a"),
        ]

    def test_mode_accepts_string(self):
        registry = QueryRegistry({"a": "$.a"}, "attribute")  # type: ignore[arg-type]
        assert registry.mode is OutputMode.ATTRIBUTE

    def test_unknown_mode_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown output mode"):
            QueryRegistry({"a": "$.a"}, "flowfile-body")  # type: ignore[arg-type]

    def test_expression_whitespace_stripped(self):
        registry = QueryRegistry({"a": "  $.a  "}, OutputMode.ATTRIBUTE)
        assert registry.bindings[0].expression == "$.a"

    def test_len_and_repr(self):
        registry = QueryRegistry({"a": "$.a", "b": "$.b"}, OutputMode.ATTRIBUTE)
        assert len(registry) == 2
        assert "attribute" in repr(registry)

    def test_empty_attribute_registry_allowed(self):
        assert len(QueryRegistry({}, OutputMode.ATTRIBUTE)) == 0


class TestValidation:
    def test_duplicate_name_raises(self):
        with pytest.raises(ConfigurationError, match="more than once"):
            QueryRegistry([("a", "$.a"), ("a", "$.b")], OutputMode.ATTRIBUTE)

    def test_empty_name_raises(self):
        with pytest.raises(ConfigurationError, match="name must not be empty"):
            QueryRegistry({" ": "$.a"}, OutputMode.ATTRIBUTE)

    def test_empty_expression_raises(self):
        with pytest.raises(ConfigurationError, match="empty expression"):
            QueryRegistry({"a": ""}, OutputMode.ATTRIBUTE)

    def test_content_mode_with_two_queries_raises(self):
        with pytest.raises(ConfigurationError, match="exactly one query"):
            QueryRegistry({"a": "$.a", "b": "$.b"}, OutputMode.CONTENT)

    def test_content_mode_with_no_query_raises(self):
        with pytest.raises(ConfigurationError, match="exactly one query"):
            QueryRegistry({}, OutputMode.CONTENT)

    def test_content_mode_with_one_query(self):
        registry = QueryRegistry({"a": "$.a"})
        assert registry.mode is OutputMode.CONTENT


class TestImmutability:
    def test_bindings_is_tuple(self):
        registry = QueryRegistry({"a": "$.a"}, OutputMode.ATTRIBUTE)
        assert isinstance(registry.bindings, tuple)

    def test_source_mapping_changes_do_not_leak(self):
        source = {"a": "$.a"}
        registry = QueryRegistry(source, OutputMode.ATTRIBUTE)
        source["b"] = "$.b"
        assert registry.names() == ["a"]

    def test_no_new_attributes(self):
        registry = QueryRegistry({"a": "$.a"}, OutputMode.ATTRIBUTE)
        with pytest.raises(AttributeError):
            registry.extra = 1  # type: ignore[attr-defined]


class TestFromConfig:
    def test_from_config(self, attribute_config: FlowpathConfig):
        registry = QueryRegistry.from_config(attribute_config)
        assert registry.mode is OutputMode.ATTRIBUTE
        assert registry.names() == ["name", "age", "xxx"]

    def test_default_config_content_mode_requires_one_query(self):
        with pytest.raises(ConfigurationError):
            QueryRegistry.from_config(FlowpathConfig())
