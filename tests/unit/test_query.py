"""Tests for the JSONPath query extractor."""

from __future__ import annotations

import pytest

from kubestalk.query import InvalidQueryError, QueryExtractor

_OBJ = {
    "apiVersion": "apps/v1",
    "kind": "Deployment",
    "metadata": {"name": "my-app", "namespace": "default", "labels": {"app": "web"}},
    "spec": {"replicas": 2, "template": {"spec": {"containers": [{"name": "app", "image": "nginx:1.25"}]}}},
}


class TestCompile:
    def test_plain_jsonpath(self) -> None:
        assert QueryExtractor.compile("$.spec.replicas").extract(_OBJ).value == 2

    def test_kubectl_style_braces(self) -> None:
        assert QueryExtractor.compile("{.metadata.name}").extract(_OBJ).value == "my-app"

    def test_leading_dot(self) -> None:
        assert QueryExtractor.compile(".metadata.namespace").extract(_OBJ).value == "default"

    def test_invalid_expression(self) -> None:
        with pytest.raises(InvalidQueryError):
            QueryExtractor.compile("$.metadata[")

    def test_empty_expression(self) -> None:
        with pytest.raises(InvalidQueryError):
            QueryExtractor.compile("{}")


class TestExtract:
    def test_object_result(self) -> None:
        result = QueryExtractor.compile("{.metadata.labels}").extract(_OBJ)
        assert result.matched
        assert result.is_object
        assert result.value == {"app": "web"}

    def test_scalar_result_is_not_object(self) -> None:
        result = QueryExtractor.compile("{.spec.replicas}").extract(_OBJ)
        assert result.matched
        assert not result.is_object

    def test_array_index(self) -> None:
        result = QueryExtractor.compile("{.spec.template.spec.containers[0].image}").extract(_OBJ)
        assert result.value == "nginx:1.25"

    def test_no_match(self) -> None:
        result = QueryExtractor.compile("{.status.readyReplicas}").extract(_OBJ)
        assert not result.matched
        assert result.value is None
